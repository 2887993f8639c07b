"""Tests for veritas/numeric/circle.py: complex arithmetic on lattice scalars."""

import pytest

from veritas.errors import DivisionByZeroError, InvalidInputError, UndefinedOperationError
from veritas.numeric import (
    ONE,
    ZERO,
    Circle,
    Complex,
    Scalar,
    State,
    UndefinedCause,
    to_circle,
    to_scalar,
)


def C(re, im=0):
    return Circle.from_parts(re, im)


class TestArithmetic:
    def test_add_sub(self):
        assert C(1, 2) + C(3, 4) == C(4, 6)
        assert C(1, 2) - C(3, 4) == C(-2, -2)

    def test_mul(self):
        assert C(1, 2) * C(3, 4) == C(-5, 10)
        assert Circle.i() * Circle.i() == C(-1, 0)

    def test_div(self):
        assert C(-5, 10) / C(3, 4) == C(1, 2)
        assert C(3, 6) / C(3) == C(1, 2)

    def test_mixed_operands(self):
        assert C(1, 1) + ONE == C(2, 1)
        assert 2 * C(1, 1) == C(2, 2)
        assert C(1, 1) * 1j == C(-1, 1)

    def test_alias(self):
        assert Complex is Circle


class TestDerived:
    def test_magnitude(self):
        assert C(3, 4).magnitude() == Scalar.from_int(5)
        assert C(3, 4).magnitude_squared() == Scalar.from_int(25)
        assert abs(C(0, -2)) == Scalar.from_int(2)

    def test_magnitude_of_extremes(self):
        assert Circle(Scalar.transfinite(-1), ONE).magnitude() == Scalar.transfinite(1)
        assert Circle(ONE, Scalar.infinity(-1)).magnitude() == Scalar.infinity(1)
        assert Circle(Scalar.negligible(1), Scalar.negligible(-1)).magnitude().is_negligible()
        assert Circle.zero().magnitude() is ZERO

    def test_conjugate(self):
        assert C(1, 2).conjugate() == C(1, -2)

    def test_sqrt(self):
        assert C(3, 4).sqrt() == C(2, 1)
        assert C(-4).sqrt() == C(0, 2)
        assert Circle.zero().sqrt() == Circle.zero()

    def test_exp(self):
        assert Circle.zero().exp() == Circle.one()

    def test_state_is_dominant_part(self):
        c = Circle(ONE, Scalar.transfinite(1))
        assert c.state is State.TRANSFINITE
        assert c.is_transfinite()
        assert not c.is_normal()
        assert Circle(ZERO, Scalar.negligible(1)).is_negligible()

    def test_conversions(self):
        assert to_scalar(C(3)) == Scalar.from_int(3)
        assert to_scalar(C(3, 1)) is None
        assert to_circle(ONE) == Circle.one()


class TestUndefined:
    def test_part_cause_spreads_to_both_parts(self):
        u = ZERO / ZERO
        r = Circle(u, ONE) + Circle.one()
        assert r.real.cause is UndefinedCause.ZERO_DIV_ZERO
        assert r.imag.cause is UndefinedCause.ZERO_DIV_ZERO
        assert r.is_undefined()

    def test_zero_over_zero(self):
        r = Circle.zero() / Circle.zero()
        assert r.cause is UndefinedCause.ZERO_DIV_ZERO

    def test_checked_div_by_zero(self):
        with pytest.raises(DivisionByZeroError):
            C(1, 1).checked_div(Circle.zero())

    def test_checked_raises_with_cause(self):
        with pytest.raises(UndefinedOperationError) as exc:
            Circle(Scalar.infinity(1), ZERO).checked_sub(Circle(Scalar.infinity(1), ZERO))
        assert exc.value.cause is UndefinedCause.INFINITE_MINUS_INFINITE

    def test_checked_ok(self):
        assert C(1, 2).checked_mul(C(3, 4)) == C(-5, 10)

    def test_parts_must_be_scalars(self):
        with pytest.raises(InvalidInputError):
            Circle(1.0, 2.0)
