"""Property tests for scalar arithmetic laws.

Values are dyadic rationals (n/8 with small n) so float arithmetic is exact and
the algebraic laws hold bit-for-bit.
"""

from __future__ import annotations

import importlib.util

import pytest

if importlib.util.find_spec("hypothesis") is None:  # pragma: no cover
    pytest.skip("hypothesis not installed", allow_module_level=True)

import hypothesis.strategies as st
from hypothesis import given, settings

from veritas.numeric import ONE, ZERO, Scalar, State, UndefinedCause

dyadic = st.integers(min_value=-64, max_value=64).map(lambda n: Scalar.from_float(n / 8))

causes = st.sampled_from(list(UndefinedCause))

any_defined = st.one_of(
    dyadic,
    st.sampled_from(
        [
            Scalar.infinity(1),
            Scalar.infinity(-1),
            Scalar.transfinite(1),
            Scalar.transfinite(-1),
            Scalar.negligible(1),
            Scalar.from_float(5e-324),
        ]
    ),
)


class TestRingLaws:
    @given(dyadic, dyadic)
    @settings(max_examples=200)
    def test_add_commutes(self, a, b):
        assert a + b == b + a

    @given(dyadic, dyadic, dyadic)
    @settings(max_examples=200)
    def test_add_associates(self, a, b, c):
        assert (a + b) + c == a + (b + c)

    @given(dyadic, dyadic)
    @settings(max_examples=200)
    def test_mul_commutes(self, a, b):
        assert a * b == b * a

    @given(dyadic, dyadic, dyadic)
    @settings(max_examples=200)
    def test_mul_distributes(self, a, b, c):
        assert (a + b) * c == a * c + b * c

    @given(dyadic)
    def test_identities(self, a):
        assert a + ZERO == a
        assert a * ONE == a
        assert (a - a).state is State.ZERO


class TestLatticeLaws:
    @given(any_defined, any_defined)
    @settings(max_examples=300)
    def test_every_result_has_one_state(self, a, b):
        for r in (a + b, a - b, a * b, a / b):
            assert isinstance(r.state, State)
            assert (r.cause is not None) == r.is_undefined()

    @given(causes, any_defined)
    @settings(max_examples=300)
    def test_undefined_is_absorbing_and_keeps_cause(self, cause, x):
        u = Scalar.undefined(cause)
        for r in (u + x, x + u, u * x, x * u, u / x, x / u, u - x, x - u):
            assert r.is_undefined()
            assert r.cause is cause

    @given(any_defined)
    def test_zero_times_defined_finite_is_zero(self, x):
        if x.is_infinite():
            assert (ZERO * x).cause is UndefinedCause.INFINITE_TIMES_ZERO
        else:
            assert (ZERO * x).is_zero()

    @given(any_defined)
    def test_magnitude_is_non_negative(self, x):
        assert x.magnitude() >= ZERO
