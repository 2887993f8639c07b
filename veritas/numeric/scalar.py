"""Real scalar with an explicit state lattice.

``Scalar`` is an immutable tagged value: a ``State`` discriminant, a float
payload, and (for Undefined values) the ``UndefinedCause`` that produced it.

Payload conventions:
- ZERO: ``0.0``.
- NEGLIGIBLE: a subnormal float, or a signed ``0.0`` once the magnitude is lost.
- NORMAL: a normal float.
- TRANSFINITE / INFINITE: ``±inf`` (only the direction is meaningful).
- UNDEFINED: ``0.0``; the cause carries the information.

The operators ``+ - * /`` never raise on numeric states: they follow the
propagation rules implemented by the module-level functions below. The
``checked_*`` methods and the unary methods (``sqrt``, ``ln``, ...) turn an
Undefined result into ``UndefinedOperationError``.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Union

from ..errors import (
    DivisionByZeroError,
    InvalidInputError,
    NumericOverflowError,
    NumericUnderflowError,
    UndefinedOperationError,
)
from .lattice import State, UndefinedCause, classify_float, classify_result, payload_fits

Number = Union[int, float]


@dataclass(frozen=True, eq=False)
class Scalar:
    state: State
    value: float = 0.0
    cause: UndefinedCause | None = None

    def __post_init__(self) -> None:
        if (self.state is State.UNDEFINED) != (self.cause is not None):
            raise InvalidInputError("cause must be set exactly when state is UNDEFINED")
        if not payload_fits(self.state, self.value):
            raise InvalidInputError(f"payload {self.value!r} is not valid for state {self.state.value}")

    # -- construction --------------------------------------------------------

    @classmethod
    def from_float(cls, x: float) -> Scalar:
        x = float(x)
        state = classify_float(x)
        if state is State.UNDEFINED:
            return cls.undefined(UndefinedCause.GENERAL)
        if state is State.ZERO:
            return ZERO
        return cls(state, x)

    @classmethod
    def from_int(cls, n: int) -> Scalar:
        try:
            return cls.from_float(float(n))
        except OverflowError:
            return cls.transfinite(1 if n > 0 else -1)

    @classmethod
    def of(cls, x: Scalar | Number) -> Scalar:
        """Coerce ``x`` to a Scalar (identity for Scalars)."""
        if isinstance(x, Scalar):
            return x
        if isinstance(x, int):
            return cls.from_int(x)
        if isinstance(x, float):
            return cls.from_float(x)
        raise InvalidInputError(f"cannot build a Scalar from {type(x).__name__}")

    @classmethod
    def zero(cls) -> Scalar:
        return ZERO

    @classmethod
    def one(cls) -> Scalar:
        return ONE

    @classmethod
    def two(cls) -> Scalar:
        return TWO

    @classmethod
    def infinity(cls, sign: int = 1) -> Scalar:
        return cls(State.INFINITE, math.copysign(math.inf, sign))

    @classmethod
    def transfinite(cls, sign: int = 1) -> Scalar:
        return cls(State.TRANSFINITE, math.copysign(math.inf, sign))

    @classmethod
    def negligible(cls, sign: int = 1) -> Scalar:
        """A vanished value whose magnitude is no longer known."""
        return cls(State.NEGLIGIBLE, math.copysign(0.0, sign))

    @classmethod
    def undefined(cls, cause: UndefinedCause = UndefinedCause.GENERAL) -> Scalar:
        return cls(State.UNDEFINED, 0.0, cause)

    # -- predicates ----------------------------------------------------------

    def is_zero(self) -> bool:
        return self.state is State.ZERO

    def is_negligible(self) -> bool:
        return self.state is State.NEGLIGIBLE

    def is_effectively_zero(self) -> bool:
        """Zero or vanished below the normal range."""
        return self.state is State.ZERO or self.state is State.NEGLIGIBLE

    def is_normal(self) -> bool:
        return self.state is State.NORMAL

    def is_transfinite(self) -> bool:
        return self.state is State.TRANSFINITE

    def is_infinite(self) -> bool:
        return self.state is State.INFINITE

    def is_undefined(self) -> bool:
        return self.state is State.UNDEFINED

    def is_finite(self) -> bool:
        """Describes a definite real number (possibly of unknown magnitude)."""
        return self.state in (State.ZERO, State.NEGLIGIBLE, State.NORMAL, State.TRANSFINITE)

    def magnitude_lost(self) -> bool:
        """Negligible or Transfinite value whose payload no longer holds the magnitude."""
        if self.state is State.TRANSFINITE:
            return True
        return self.state is State.NEGLIGIBLE and self.value == 0.0

    @property
    def sign(self) -> int:
        """-1, 0 or 1; Undefined values report 0."""
        if self.state is State.ZERO or self.state is State.UNDEFINED:
            return 0
        return -1 if math.copysign(1.0, self.value) < 0 else 1

    # -- checking ------------------------------------------------------------

    def check(self, operation: str = "") -> Scalar:
        """Return self, or raise if the value is Undefined."""
        if self.cause is not None:
            raise UndefinedOperationError(self.cause, operation)
        return self

    def check_range(self, operation: str = "") -> Scalar:
        """Like ``check()`` but also rejects Negligible and Transfinite values."""
        self.check(operation)
        if self.state is State.NEGLIGIBLE:
            raise NumericUnderflowError(f"negligible result{' in ' + operation if operation else ''}")
        if self.state is State.TRANSFINITE:
            raise NumericOverflowError(f"transfinite result{' in ' + operation if operation else ''}")
        return self

    def checked_add(self, other: Scalar | Number) -> Scalar:
        return add(self, Scalar.of(other)).check("add")

    def checked_sub(self, other: Scalar | Number) -> Scalar:
        return sub(self, Scalar.of(other)).check("sub")

    def checked_mul(self, other: Scalar | Number) -> Scalar:
        return mul(self, Scalar.of(other)).check("mul")

    def checked_div(self, other: Scalar | Number) -> Scalar:
        divisor = Scalar.of(other)
        if divisor.state is State.ZERO:
            raise DivisionByZeroError()
        return div(self, divisor).check("div")

    def sqrt(self) -> Scalar:
        return sqrt(self).check("sqrt")

    def ln(self) -> Scalar:
        return ln(self).check("ln")

    def exp(self) -> Scalar:
        return exp(self).check("exp")

    def pow(self, exponent: Scalar | Number) -> Scalar:
        return power(self, Scalar.of(exponent)).check("pow")

    def sin(self) -> Scalar:
        return sin(self).check("sin")

    def cos(self) -> Scalar:
        return cos(self).check("cos")

    def tanh(self) -> Scalar:
        return tanh(self).check("tanh")

    def magnitude(self) -> Scalar:
        """Absolute value; never fails (Undefined stays Undefined)."""
        if self.state is State.UNDEFINED or self.state is State.ZERO:
            return self
        return Scalar(self.state, abs(self.value))

    abs = magnitude

    def conjugate(self) -> Scalar:
        return self

    # -- operators -----------------------------------------------------------

    def __add__(self, other: object) -> Scalar:
        rhs = _coerce(other)
        return NotImplemented if rhs is None else add(self, rhs)

    def __radd__(self, other: object) -> Scalar:
        lhs = _coerce(other)
        return NotImplemented if lhs is None else add(lhs, self)

    def __sub__(self, other: object) -> Scalar:
        rhs = _coerce(other)
        return NotImplemented if rhs is None else sub(self, rhs)

    def __rsub__(self, other: object) -> Scalar:
        lhs = _coerce(other)
        return NotImplemented if lhs is None else sub(lhs, self)

    def __mul__(self, other: object) -> Scalar:
        rhs = _coerce(other)
        return NotImplemented if rhs is None else mul(self, rhs)

    def __rmul__(self, other: object) -> Scalar:
        lhs = _coerce(other)
        return NotImplemented if lhs is None else mul(lhs, self)

    def __truediv__(self, other: object) -> Scalar:
        rhs = _coerce(other)
        return NotImplemented if rhs is None else div(self, rhs)

    def __rtruediv__(self, other: object) -> Scalar:
        lhs = _coerce(other)
        return NotImplemented if lhs is None else div(lhs, self)

    def __neg__(self) -> Scalar:
        if self.state is State.UNDEFINED or self.state is State.ZERO:
            return self
        return Scalar(self.state, -self.value)

    def __pos__(self) -> Scalar:
        return self

    def __abs__(self) -> Scalar:
        return self.magnitude()

    # -- ordering / equality -------------------------------------------------

    def _order_key(self) -> tuple[int, float] | None:
        if self.state is State.UNDEFINED:
            return None
        if self.state is State.ZERO:
            return (0, 0.0)
        if self.state is State.INFINITE:
            return (4 * self.sign, 0.0)
        if self.state is State.TRANSFINITE:
            return (3 * self.sign, 0.0)
        return (self.sign, self.value)

    def _compare(self, other: object, op) -> bool:
        rhs = _coerce(other)
        if rhs is None:
            return NotImplemented
        a, b = self._order_key(), rhs._order_key()
        if a is None or b is None:
            return False
        return op(a, b)

    def __lt__(self, other: object) -> bool:
        return self._compare(other, lambda a, b: a < b)

    def __le__(self, other: object) -> bool:
        return self._compare(other, lambda a, b: a <= b)

    def __gt__(self, other: object) -> bool:
        return self._compare(other, lambda a, b: a > b)

    def __ge__(self, other: object) -> bool:
        return self._compare(other, lambda a, b: a >= b)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Scalar):
            return NotImplemented
        return (
            self.state is other.state
            and self.cause is other.cause
            and self.value == other.value
            and math.copysign(1.0, self.value) == math.copysign(1.0, other.value)
        )

    def __hash__(self) -> int:
        return hash((self.state, self.cause, self.value, math.copysign(1.0, self.value)))

    def __float__(self) -> float:
        if self.state is State.UNDEFINED:
            return math.nan
        return self.value

    def __repr__(self) -> str:
        if self.cause is not None:
            return f"Scalar(undefined, cause={self.cause.value!r})"
        return f"Scalar({self.state.value}, {self.value!r})"

    def __str__(self) -> str:
        if self.cause is not None:
            return f"[undefined: {self.cause.value}]"
        if self.state is State.NEGLIGIBLE:
            return "[vanished]"
        if self.state is State.TRANSFINITE:
            return "[exploded]"
        if self.state is State.ZERO:
            return "0"
        return repr(self.value)


ZERO = Scalar(State.ZERO, 0.0)
ONE = Scalar(State.NORMAL, 1.0)
TWO = Scalar(State.NORMAL, 2.0)
PI = Scalar(State.NORMAL, math.pi)
E = Scalar(State.NORMAL, math.e)


def _coerce(x: object) -> Scalar | None:
    if isinstance(x, Scalar):
        return x
    if isinstance(x, (int, float)):
        return Scalar.of(x)
    return None


def from_raw(raw: float, *, exact_nonzero: bool) -> Scalar:
    """Wrap a float computed from defined, non-infinite operands."""
    state = classify_result(raw, exact_nonzero=exact_nonzero)
    if state is State.ZERO:
        return ZERO
    if state is State.UNDEFINED:
        return Scalar.undefined(UndefinedCause.GENERAL)
    if state is State.TRANSFINITE:
        return Scalar.transfinite(1 if raw > 0 else -1)
    return Scalar(state, raw)


def _is_odd_integer(x: float) -> bool:
    return math.isfinite(x) and x == math.floor(x) and math.fmod(x, 2.0) != 0.0


def _is_integer(x: float) -> bool:
    return math.isfinite(x) and x == math.floor(x)


# -- binary arithmetic --------------------------------------------------------


def add(a: Scalar, b: Scalar) -> Scalar:
    """Unchecked addition following the lattice propagation rules."""
    if a.state is State.UNDEFINED:
        return a
    if b.state is State.UNDEFINED:
        return b
    if a.state is State.ZERO:
        return b
    if b.state is State.ZERO:
        return a
    if a.state is State.INFINITE or b.state is State.INFINITE:
        if a.state is State.INFINITE and b.state is State.INFINITE:
            return a if a.sign == b.sign else Scalar.undefined(UndefinedCause.INFINITE_MINUS_INFINITE)
        return a if a.state is State.INFINITE else b
    if a.state is State.TRANSFINITE or b.state is State.TRANSFINITE:
        if a.state is State.TRANSFINITE and b.state is State.TRANSFINITE:
            if a.sign == b.sign:
                return a
            return Scalar.undefined(UndefinedCause.TRANSFINITE_MINUS_TRANSFINITE)
        return a if a.state is State.TRANSFINITE else b

    # NORMAL / NEGLIGIBLE combine through their payloads.
    raw = a.value + b.value
    if raw != 0.0:
        return from_raw(raw, exact_nonzero=True)
    if a.value == 0.0 and b.value == 0.0:
        # Two vanished values with lost magnitudes.
        if a.sign == b.sign:
            return a
        return Scalar.undefined(UndefinedCause.NEGLIGIBLE_MINUS_NEGLIGIBLE)
    return ZERO


def sub(a: Scalar, b: Scalar) -> Scalar:
    if a.state is State.UNDEFINED:
        return a
    return add(a, -b)


def mul(a: Scalar, b: Scalar) -> Scalar:
    """Unchecked multiplication; Zero annihilates every defined finite state."""
    if a.state is State.UNDEFINED:
        return a
    if b.state is State.UNDEFINED:
        return b
    if a.state is State.ZERO or b.state is State.ZERO:
        if a.state is State.INFINITE or b.state is State.INFINITE:
            return Scalar.undefined(UndefinedCause.INFINITE_TIMES_ZERO)
        return ZERO
    sign = a.sign * b.sign
    if a.state is State.INFINITE or b.state is State.INFINITE:
        return Scalar.infinity(sign)
    if a.state is State.TRANSFINITE or b.state is State.TRANSFINITE:
        if a.state is State.NEGLIGIBLE or b.state is State.NEGLIGIBLE:
            return Scalar.undefined(UndefinedCause.TRANSFINITE_TIMES_NEGLIGIBLE)
        return Scalar.transfinite(sign)
    raw = a.value * b.value
    if raw == 0.0:
        return Scalar.negligible(sign)
    return from_raw(raw, exact_nonzero=True)


def div(a: Scalar, b: Scalar) -> Scalar:
    """Unchecked division. ``x/0`` is Infinite for non-zero ``x``."""
    if a.state is State.UNDEFINED:
        return a
    if b.state is State.UNDEFINED:
        return b
    if b.state is State.ZERO:
        if a.state is State.ZERO:
            return Scalar.undefined(UndefinedCause.ZERO_DIV_ZERO)
        return Scalar.infinity(a.sign)
    if a.state is State.ZERO:
        return ZERO
    sign = a.sign * b.sign
    if a.state is State.INFINITE:
        if b.state is State.INFINITE:
            return Scalar.undefined(UndefinedCause.INFINITE_DIV_INFINITE)
        return Scalar.infinity(sign)
    if b.state is State.INFINITE:
        return ZERO
    if a.state is State.TRANSFINITE:
        if b.state is State.TRANSFINITE:
            return Scalar.undefined(UndefinedCause.TRANSFINITE_DIV_TRANSFINITE)
        return Scalar.transfinite(sign)
    if b.state is State.TRANSFINITE:
        return Scalar.negligible(sign)
    if b.value == 0.0:
        # Divisor vanished with its magnitude lost.
        if a.state is State.NEGLIGIBLE:
            return Scalar.undefined(UndefinedCause.NEGLIGIBLE_DIV_NEGLIGIBLE)
        return Scalar.transfinite(sign)
    if a.value == 0.0:
        if b.state is State.NEGLIGIBLE:
            return Scalar.undefined(UndefinedCause.NEGLIGIBLE_DIV_NEGLIGIBLE)
        return Scalar.negligible(sign)
    raw = a.value / b.value
    if raw == 0.0:
        return Scalar.negligible(sign)
    return from_raw(raw, exact_nonzero=True)


# -- unary functions ----------------------------------------------------------


def sqrt(x: Scalar) -> Scalar:
    if x.state is State.UNDEFINED or x.state is State.ZERO:
        return x
    if x.sign < 0:
        return Scalar.undefined(UndefinedCause.SQRT_NEGATIVE)
    if x.state is State.INFINITE:
        return x
    if x.magnitude_lost():
        return Scalar.undefined(UndefinedCause.MAGNITUDE_LOST)
    return from_raw(math.sqrt(x.value), exact_nonzero=True)


def ln(x: Scalar) -> Scalar:
    if x.state is State.UNDEFINED:
        return x
    if x.state is State.ZERO:
        return Scalar.infinity(-1)
    if x.sign < 0:
        return Scalar.undefined(UndefinedCause.LOG_NEGATIVE)
    if x.state is State.INFINITE:
        return x
    if x.magnitude_lost():
        return Scalar.undefined(UndefinedCause.MAGNITUDE_LOST)
    # ln(1) is an exact zero.
    return from_raw(math.log(x.value), exact_nonzero=x.value != 1.0)


def exp(x: Scalar) -> Scalar:
    if x.state is State.UNDEFINED:
        return x
    if x.state is State.ZERO or x.state is State.NEGLIGIBLE:
        return ONE
    if x.state is State.INFINITE:
        return x if x.sign > 0 else ZERO
    if x.state is State.TRANSFINITE:
        return x if x.sign > 0 else Scalar.negligible(1)
    try:
        raw = math.exp(x.value)
    except OverflowError:
        return Scalar.transfinite(1)
    if raw == 0.0:
        return Scalar.negligible(1)
    return from_raw(raw, exact_nonzero=True)


def sin(x: Scalar) -> Scalar:
    if x.state is State.UNDEFINED or x.state is State.ZERO or x.state is State.NEGLIGIBLE:
        return x
    if x.state is State.INFINITE:
        return Scalar.undefined(UndefinedCause.INFINITE_ARGUMENT)
    if x.state is State.TRANSFINITE:
        return Scalar.undefined(UndefinedCause.MAGNITUDE_LOST)
    return from_raw(math.sin(x.value), exact_nonzero=True)


def cos(x: Scalar) -> Scalar:
    if x.state is State.UNDEFINED:
        return x
    if x.state is State.ZERO or x.state is State.NEGLIGIBLE:
        return ONE
    if x.state is State.INFINITE:
        return Scalar.undefined(UndefinedCause.INFINITE_ARGUMENT)
    if x.state is State.TRANSFINITE:
        return Scalar.undefined(UndefinedCause.MAGNITUDE_LOST)
    return from_raw(math.cos(x.value), exact_nonzero=True)


def tanh(x: Scalar) -> Scalar:
    if x.state is State.UNDEFINED or x.state is State.ZERO or x.state is State.NEGLIGIBLE:
        return x
    if x.state is State.INFINITE or x.state is State.TRANSFINITE:
        return ONE if x.sign > 0 else -ONE
    return from_raw(math.tanh(x.value), exact_nonzero=True)


def power(base: Scalar, exponent: Scalar) -> Scalar:
    """``base ** exponent`` with lattice-aware special cases.

    ``x ** 0`` is One for every defined ``x`` (including ``0 ** 0``).
    """
    if base.state is State.UNDEFINED:
        return base
    if exponent.state is State.UNDEFINED:
        return exponent
    if exponent.state is State.ZERO:
        return ONE
    if exponent.state is State.INFINITE or exponent.state is State.TRANSFINITE:
        if base == ONE:
            return ONE
        if base.state is State.ZERO and exponent.sign > 0:
            return ZERO
        return Scalar.undefined(UndefinedCause.POWER_TRANSFINITE)

    e = exponent.value
    if base.state is State.ZERO:
        return ZERO if e > 0 else Scalar.infinity(1)
    if base.sign < 0 and not _is_integer(e):
        return Scalar.undefined(UndefinedCause.NEGATIVE_POWER)
    sign = -1 if base.sign < 0 and _is_odd_integer(e) else 1

    if base.state is State.INFINITE:
        return Scalar.infinity(sign) if e > 0 else ZERO
    if base.magnitude_lost():
        huge = base.state is State.TRANSFINITE
        if e >= 1.0:
            return Scalar.transfinite(sign) if huge else Scalar.negligible(sign)
        if e <= -1.0:
            return Scalar.negligible(sign) if huge else Scalar.transfinite(sign)
        cause = UndefinedCause.TRANSFINITE_POWER if huge else UndefinedCause.MAGNITUDE_LOST
        return Scalar.undefined(cause)

    try:
        raw = math.pow(base.value, e)
    except OverflowError:
        return Scalar.transfinite(sign)
    if raw == 0.0:
        return Scalar.negligible(sign)
    return from_raw(raw, exact_nonzero=True)
