"""Tests for veritas/numeric/scalar.py: state lattice, propagation rules, checked API."""

import sys

import pytest

from veritas.errors import (
    DivisionByZeroError,
    InvalidInputError,
    InvariantViolationError,
    NumericOverflowError,
    NumericUnderflowError,
    UndefinedOperationError,
)
from veritas.numeric import ONE, TWO, ZERO, Scalar, State, UndefinedCause
from veritas.numeric import scalar as sc

TINY = Scalar.from_float(sys.float_info.min)
HUGE = Scalar.from_float(sys.float_info.max)
INF = Scalar.infinity(1)
NEG_INF = Scalar.infinity(-1)
T_POS = Scalar.transfinite(1)
T_NEG = Scalar.transfinite(-1)
LOST = Scalar.negligible(1)


def _zero_div_zero() -> Scalar:
    return ZERO / ZERO


SAMPLES = [
    ZERO,
    ONE,
    Scalar.from_float(-2.5),
    LOST,
    Scalar.from_float(5e-324),
    T_POS,
    NEG_INF,
    Scalar.undefined(UndefinedCause.GENERAL),
]


# ---------------------------------------------------------------------------
# construction
# ---------------------------------------------------------------------------

class TestConstruction:
    def test_normal(self):
        s = Scalar.from_float(1.5)
        assert s.state is State.NORMAL
        assert s.value == 1.5

    def test_zero_and_negative_zero(self):
        assert Scalar.from_float(0.0) is ZERO
        assert Scalar.from_float(-0.0) == ZERO

    def test_subnormal_is_negligible(self):
        assert Scalar.from_float(5e-324).state is State.NEGLIGIBLE

    def test_infinities(self):
        assert Scalar.from_float(float("inf")) == INF
        assert Scalar.from_float(float("-inf")).sign == -1
        assert Scalar.from_float(float("-inf")).state is State.INFINITE

    def test_nan_is_undefined(self):
        s = Scalar.from_float(float("nan"))
        assert s.is_undefined()
        assert s.cause is UndefinedCause.GENERAL

    def test_from_int(self):
        assert Scalar.from_int(3) == Scalar.from_float(3.0)
        assert Scalar.from_int(0) is ZERO

    def test_from_huge_int_is_transfinite(self):
        assert Scalar.from_int(10**400) == T_POS
        assert Scalar.from_int(-(10**400)) == T_NEG

    def test_cause_only_with_undefined(self):
        with pytest.raises(InvalidInputError):
            Scalar(State.NORMAL, 1.0, UndefinedCause.GENERAL)
        with pytest.raises(InvalidInputError):
            Scalar(State.UNDEFINED)

    def test_payload_must_match_state(self):
        for state, value in [
            (State.ZERO, -0.0),
            (State.NORMAL, float("inf")),
            (State.NEGLIGIBLE, 1e-300),
            (State.INFINITE, 1.0),
        ]:
            with pytest.raises(InvalidInputError):
                Scalar(state, value)
        assert Scalar(State.NEGLIGIBLE, -0.0) == Scalar.negligible(-1)

    def test_of_rejects_strings(self):
        with pytest.raises(InvalidInputError):
            Scalar.of("1.0")


# ---------------------------------------------------------------------------
# predicates
# ---------------------------------------------------------------------------

class TestPredicates:
    @pytest.mark.parametrize("s", SAMPLES, ids=str)
    def test_exactly_one_primary_state(self, s):
        flags = [
            s.is_zero(),
            s.is_negligible(),
            s.is_normal(),
            s.is_transfinite(),
            s.is_infinite(),
            s.is_undefined(),
        ]
        assert sum(flags) == 1

    def test_effectively_zero_overlaps_zero_and_negligible(self):
        assert ZERO.is_effectively_zero()
        assert LOST.is_effectively_zero()
        assert Scalar.from_float(5e-324).is_effectively_zero()
        assert not ONE.is_effectively_zero()

    def test_is_finite(self):
        assert T_POS.is_finite()
        assert LOST.is_finite()
        assert not INF.is_finite()
        assert not _zero_div_zero().is_finite()

    def test_predicates_do_not_mutate(self):
        s = Scalar.from_float(0.75)
        before = (s.state, s.value, s.cause)
        s.is_zero(), s.is_normal(), s.is_undefined(), s.magnitude()
        assert (s.state, s.value, s.cause) == before


# ---------------------------------------------------------------------------
# underflow / overflow
# ---------------------------------------------------------------------------

class TestRangeLimits:
    def test_tiny_times_tiny_vanishes_not_zero(self):
        r = TINY * TINY
        assert r.state is State.NEGLIGIBLE
        assert not r.is_zero()
        assert r.sign == 1
        assert str(r) == "[vanished]"

    def test_division_into_subnormal_range(self):
        r = TINY / Scalar.from_int(4)
        assert r.state is State.NEGLIGIBLE
        assert r.value == sys.float_info.min / 4

    def test_overflow_is_transfinite(self):
        r = HUGE * TWO
        assert r == T_POS
        assert str(r) == "[exploded]"
        assert (-HUGE * TWO) == T_NEG
        assert (HUGE + HUGE) == T_POS

    def test_check_range(self):
        with pytest.raises(NumericUnderflowError):
            (TINY * TINY).check_range()
        with pytest.raises(NumericOverflowError):
            (HUGE * TWO).check_range()
        assert ONE.check_range() is ONE


# ---------------------------------------------------------------------------
# addition / subtraction
# ---------------------------------------------------------------------------

class TestAdd:
    def test_zero_is_identity(self):
        assert ONE + ZERO == ONE
        assert ZERO + T_NEG == T_NEG

    def test_infinities(self):
        assert INF + INF == INF
        r = INF + NEG_INF
        assert r.cause is UndefinedCause.INFINITE_MINUS_INFINITE
        assert INF + T_NEG == INF

    def test_transfinite(self):
        assert T_POS + T_POS == T_POS
        assert (T_POS + T_NEG).cause is UndefinedCause.TRANSFINITE_MINUS_TRANSFINITE
        assert T_POS + ONE == T_POS

    def test_exact_cancellation_is_zero(self):
        assert (ONE - ONE).state is State.ZERO
        tiny = Scalar.from_float(5e-324)
        assert (tiny - tiny).state is State.ZERO

    def test_lost_negligibles(self):
        assert LOST + LOST == LOST
        r = LOST + Scalar.negligible(-1)
        assert r.cause is UndefinedCause.NEGLIGIBLE_MINUS_NEGLIGIBLE

    def test_plain_numbers_coerce(self):
        assert ONE + 1 == TWO
        assert 1 + ONE == TWO
        assert 3 - ONE == TWO


# ---------------------------------------------------------------------------
# multiplication
# ---------------------------------------------------------------------------

class TestMul:
    def test_zero_times_infinity_is_undefined(self):
        assert (ZERO * INF).cause is UndefinedCause.INFINITE_TIMES_ZERO
        assert (NEG_INF * ZERO).cause is UndefinedCause.INFINITE_TIMES_ZERO

    def test_zero_annihilates_extreme_but_defined(self):
        assert (ZERO * T_POS) is ZERO
        assert (LOST * ZERO) is ZERO

    def test_infinity_sign(self):
        assert INF * Scalar.from_int(-2) == NEG_INF

    def test_transfinite(self):
        assert (T_POS * LOST).cause is UndefinedCause.TRANSFINITE_TIMES_NEGLIGIBLE
        assert T_POS * Scalar.from_int(-3) == T_NEG

    def test_normal(self):
        assert Scalar.from_float(1.5) * TWO == Scalar.from_int(3)


# ---------------------------------------------------------------------------
# division
# ---------------------------------------------------------------------------

class TestDiv:
    def test_nonzero_over_zero_is_infinite(self):
        assert ONE / ZERO == INF
        assert -ONE / ZERO == NEG_INF

    def test_zero_over_zero(self):
        assert _zero_div_zero().cause is UndefinedCause.ZERO_DIV_ZERO

    def test_zero_over_nonzero(self):
        assert (ZERO / TWO) is ZERO

    def test_infinities(self):
        assert (INF / INF).cause is UndefinedCause.INFINITE_DIV_INFINITE
        assert INF / TWO == INF
        assert (TWO / INF) is ZERO

    def test_transfinite_and_negligible(self):
        assert (T_POS / T_POS).cause is UndefinedCause.TRANSFINITE_DIV_TRANSFINITE
        assert (LOST / LOST).cause is UndefinedCause.NEGLIGIBLE_DIV_NEGLIGIBLE
        assert ONE / LOST == T_POS
        assert (ONE / T_POS).state is State.NEGLIGIBLE

    def test_normal(self):
        assert Scalar.from_int(6) / Scalar.from_int(4) == Scalar.from_float(1.5)


# ---------------------------------------------------------------------------
# Undefined propagation
# ---------------------------------------------------------------------------

class TestUndefinedPropagation:
    @pytest.mark.parametrize(
        "op",
        [
            lambda u: u + ONE,
            lambda u: ONE + u,
            lambda u: u * ZERO,
            lambda u: INF * u,
            lambda u: u - INF,
            lambda u: ONE / u,
            lambda u: -u,
            lambda u: u.magnitude(),
            lambda u: sc.sqrt(u),
            lambda u: sc.exp(u),
            lambda u: sc.cos(u),
            lambda u: sc.power(TWO, u),
        ],
    )
    def test_cause_survives(self, op):
        r = op(_zero_div_zero())
        assert r.is_undefined()
        assert r.cause is UndefinedCause.ZERO_DIV_ZERO

    def test_left_operand_cause_wins(self):
        a = _zero_div_zero()
        b = INF - INF
        assert (a + b).cause is UndefinedCause.ZERO_DIV_ZERO
        assert (b + a).cause is UndefinedCause.INFINITE_MINUS_INFINITE

    def test_never_heals(self):
        u = _zero_div_zero()
        r = (u * ZERO + ONE) / ONE
        assert r.is_undefined()


# ---------------------------------------------------------------------------
# checked API
# ---------------------------------------------------------------------------

class TestChecked:
    def test_div_by_literal_zero(self):
        with pytest.raises(DivisionByZeroError):
            ONE.checked_div(ZERO)
        with pytest.raises(ZeroDivisionError):
            ONE.checked_div(0)

    def test_div_undefined_is_a_different_error(self):
        with pytest.raises(UndefinedOperationError) as exc:
            INF.checked_div(INF)
        assert exc.value.cause is UndefinedCause.INFINITE_DIV_INFINITE
        assert not isinstance(exc.value, DivisionByZeroError)

    def test_div_by_negligible_is_not_an_error(self):
        assert ONE.checked_div(LOST) == T_POS

    def test_add_sub_mul(self):
        with pytest.raises(UndefinedOperationError):
            INF.checked_add(NEG_INF)
        with pytest.raises(UndefinedOperationError):
            INF.checked_sub(INF)
        assert TWO.checked_mul(3) == Scalar.from_int(6)

    def test_sqrt(self):
        assert Scalar.from_int(9).sqrt() == Scalar.from_int(3)
        with pytest.raises(UndefinedOperationError) as exc:
            Scalar.from_int(-4).sqrt()
        assert exc.value.cause is UndefinedCause.SQRT_NEGATIVE

    def test_ln(self):
        assert ZERO.ln() == NEG_INF
        assert ONE.ln() is ZERO
        with pytest.raises(UndefinedOperationError) as exc:
            Scalar.from_int(-1).ln()
        assert exc.value.cause is UndefinedCause.LOG_NEGATIVE

    def test_exp(self):
        assert ZERO.exp() == ONE
        assert Scalar.from_float(1000.0).exp() == T_POS
        assert Scalar.from_float(-1000.0).exp().state is State.NEGLIGIBLE
        assert NEG_INF.exp() is ZERO

    def test_trig(self):
        assert ZERO.sin() is ZERO
        assert ZERO.cos() == ONE
        with pytest.raises(UndefinedOperationError) as exc:
            INF.sin()
        assert exc.value.cause is UndefinedCause.INFINITE_ARGUMENT
        with pytest.raises(UndefinedOperationError) as exc:
            T_POS.cos()
        assert exc.value.cause is UndefinedCause.MAGNITUDE_LOST

    def test_tanh_saturates(self):
        assert NEG_INF.tanh() == -ONE
        assert T_POS.tanh() == ONE

    def test_pow(self):
        assert TWO.pow(10) == Scalar.from_int(1024)
        assert ZERO.pow(0) == ONE
        assert Scalar.from_int(-2).pow(3) == Scalar.from_int(-8)
        assert ONE.pow(INF) == ONE
        assert HUGE.pow(2) == T_POS

    def test_pow_undefined_cases(self):
        with pytest.raises(UndefinedOperationError) as exc:
            Scalar.from_int(-8).pow(0.5)
        assert exc.value.cause is UndefinedCause.NEGATIVE_POWER
        with pytest.raises(UndefinedOperationError) as exc:
            TWO.pow(INF)
        assert exc.value.cause is UndefinedCause.POWER_TRANSFINITE

    def test_error_classification(self):
        assert DivisionByZeroError().is_mathematical
        assert not InvalidInputError("bad shape").is_mathematical
        assert InvariantViolationError(["inv_x"]).is_verification_failure
        assert not DivisionByZeroError().is_verification_failure


# ---------------------------------------------------------------------------
# ordering / equality / display
# ---------------------------------------------------------------------------

class TestOrdering:
    def test_total_order(self):
        expected = [NEG_INF, T_NEG, Scalar.from_int(-5), ZERO, LOST, TINY, ONE, T_POS, INF]
        shuffled = [ONE, INF, ZERO, T_NEG, TINY, NEG_INF, T_POS, LOST, Scalar.from_int(-5)]
        assert sorted(shuffled) == expected

    def test_undefined_compares_false(self):
        u = _zero_div_zero()
        assert not (u < ONE)
        assert not (u > ONE)
        assert not (u <= u)
        assert not (u >= ONE)
        assert not (ONE < u)

    def test_compare_with_numbers(self):
        assert ONE < 2
        assert TWO >= 2.0

    def test_structural_equality(self):
        assert Scalar.negligible(1) != Scalar.negligible(-1)
        assert _zero_div_zero() == _zero_div_zero()
        assert _zero_div_zero() != Scalar.undefined(UndefinedCause.GENERAL)
        assert hash(_zero_div_zero()) == hash(_zero_div_zero())

    def test_magnitude(self):
        assert Scalar.from_int(-3).magnitude() == Scalar.from_int(3)
        assert abs(NEG_INF) == INF
        assert abs(T_NEG) == T_POS

    def test_str(self):
        assert str(_zero_div_zero()) == "[undefined: 0/0]"
        assert str(ZERO) == "0"
        assert float(Scalar.from_float(0.5)) == 0.5
