"""State lattice for veritas scalars.

A value carries exactly one ``State`` discriminant. The overlapping
``is_*`` predicates exposed by ``Scalar`` and ``Circle`` are derived from it,
so they can never drift out of sync.

Undefined values additionally carry an ``UndefinedCause`` naming the pair of
states (or the unary operation) that produced them. The first cause
encountered is propagated unchanged through every later operation.
"""

from __future__ import annotations

import math
import sys
from enum import Enum, unique

# Smallest positive normal float; anything non-zero below it is Negligible.
MIN_NORMAL: float = sys.float_info.min


@unique
class State(Enum):
    ZERO = "zero"
    NEGLIGIBLE = "negligible"
    NORMAL = "normal"
    TRANSFINITE = "transfinite"
    INFINITE = "infinite"
    UNDEFINED = "undefined"


@unique
class UndefinedCause(Enum):
    """Origin tag of an Undefined value."""

    GENERAL = "general"
    ZERO_DIV_ZERO = "0/0"
    INFINITE_DIV_INFINITE = "inf/inf"
    TRANSFINITE_DIV_TRANSFINITE = "transfinite/transfinite"
    NEGLIGIBLE_DIV_NEGLIGIBLE = "negligible/negligible"
    INFINITE_MINUS_INFINITE = "inf-inf"
    TRANSFINITE_MINUS_TRANSFINITE = "transfinite-transfinite"
    NEGLIGIBLE_MINUS_NEGLIGIBLE = "negligible-negligible"
    INFINITE_TIMES_ZERO = "inf*0"
    TRANSFINITE_TIMES_NEGLIGIBLE = "transfinite*negligible"
    SQRT_NEGATIVE = "sqrt(-)"
    LOG_NEGATIVE = "ln(-)"
    NEGATIVE_POWER = "(-)^x"
    TRANSFINITE_POWER = "transfinite^x"
    POWER_TRANSFINITE = "x^transfinite"
    MAGNITUDE_LOST = "f(lost magnitude)"
    INFINITE_ARGUMENT = "f(inf)"
    SIGN_INDETERMINATE = "sign?"


# States that still describe a definite real number (possibly of unknown size).
FINITE_STATES = frozenset({State.ZERO, State.NEGLIGIBLE, State.NORMAL, State.TRANSFINITE})

# Order used when a compound value (Circle) must report one dominant state.
DOMINANCE: tuple[State, ...] = (
    State.UNDEFINED,
    State.INFINITE,
    State.TRANSFINITE,
    State.NORMAL,
    State.NEGLIGIBLE,
    State.ZERO,
)


def classify_float(x: float) -> State:
    """Classify a float taken at face value (used for construction)."""
    if math.isnan(x):
        return State.UNDEFINED
    if math.isinf(x):
        return State.INFINITE
    if x == 0.0:
        return State.ZERO
    if abs(x) < MIN_NORMAL:
        return State.NEGLIGIBLE
    return State.NORMAL


def classify_result(raw: float, *, exact_nonzero: bool) -> State:
    """Classify a float produced by arithmetic on defined, non-infinite operands.

    ``exact_nonzero`` says whether the mathematically exact result is known to
    be non-zero, in which case a ``0.0`` means underflow rather than Zero.
    Infinity here can only mean overflow, which is Transfinite.
    """
    if math.isnan(raw):
        return State.UNDEFINED
    if math.isinf(raw):
        return State.TRANSFINITE
    if raw == 0.0:
        return State.NEGLIGIBLE if exact_nonzero else State.ZERO
    if abs(raw) < MIN_NORMAL:
        return State.NEGLIGIBLE
    return State.NORMAL


def dominant(*states: State) -> State:
    """Return the most severe of ``states`` according to ``DOMINANCE``."""
    for candidate in DOMINANCE:
        if candidate in states:
            return candidate
    raise ValueError("dominant() requires at least one state")


def payload_fits(state: State, value: float) -> bool:
    """Whether ``value`` is a legal payload for a value in ``state``."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    if state is State.ZERO or state is State.UNDEFINED:
        return value == 0.0 and math.copysign(1.0, value) > 0
    if state is State.NEGLIGIBLE:
        return abs(value) < MIN_NORMAL
    if state is State.NORMAL:
        return math.isfinite(value) and abs(value) >= MIN_NORMAL
    return math.isinf(value)
