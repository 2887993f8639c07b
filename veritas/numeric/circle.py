"""Complex values built from a pair of lattice scalars."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Union

from ..errors import DivisionByZeroError, InvalidInputError, UndefinedOperationError
from .lattice import State, UndefinedCause, dominant
from .scalar import ONE, ZERO, Scalar, from_raw
from . import scalar as _s


@dataclass(frozen=True)
class Circle:
    """Complex value ``real + imag*i``.

    Both parts follow the ``Scalar`` propagation rules. When any operand part
    is Undefined, both result parts carry that part's cause.
    """

    real: Scalar
    imag: Scalar = ZERO

    def __post_init__(self) -> None:
        if not isinstance(self.real, Scalar) or not isinstance(self.imag, Scalar):
            raise InvalidInputError("Circle parts must be Scalars")

    # -- construction --------------------------------------------------------

    @classmethod
    def from_parts(cls, real: Scalar | int | float, imag: Scalar | int | float = 0) -> Circle:
        return cls(Scalar.of(real), Scalar.of(imag))

    @classmethod
    def from_complex(cls, z: complex) -> Circle:
        z = complex(z)
        return cls(Scalar.from_float(z.real), Scalar.from_float(z.imag))

    @classmethod
    def of(cls, x: CircleLike) -> Circle:
        if isinstance(x, Circle):
            return x
        if isinstance(x, Scalar):
            return cls(x, ZERO)
        if isinstance(x, (int, float)):
            return cls(Scalar.of(x), ZERO)
        if isinstance(x, complex):
            return cls.from_complex(x)
        raise InvalidInputError(f"cannot build a Circle from {type(x).__name__}")

    @classmethod
    def zero(cls) -> Circle:
        return cls(ZERO, ZERO)

    @classmethod
    def one(cls) -> Circle:
        return cls(ONE, ZERO)

    @classmethod
    def i(cls) -> Circle:
        return cls(ZERO, ONE)

    @classmethod
    def undefined(cls, cause: UndefinedCause = UndefinedCause.GENERAL) -> Circle:
        u = Scalar.undefined(cause)
        return cls(u, u)

    # -- state ---------------------------------------------------------------

    @property
    def state(self) -> State:
        """The most severe state of the two parts."""
        return dominant(self.real.state, self.imag.state)

    @property
    def cause(self) -> UndefinedCause | None:
        return self.real.cause if self.real.cause is not None else self.imag.cause

    def is_zero(self) -> bool:
        return self.real.is_zero() and self.imag.is_zero()

    def is_negligible(self) -> bool:
        return self.state is State.NEGLIGIBLE

    def is_effectively_zero(self) -> bool:
        return self.real.is_effectively_zero() and self.imag.is_effectively_zero()

    def is_normal(self) -> bool:
        return self.state is State.NORMAL

    def is_transfinite(self) -> bool:
        return self.state is State.TRANSFINITE

    def is_infinite(self) -> bool:
        return self.state is State.INFINITE

    def is_undefined(self) -> bool:
        return self.state is State.UNDEFINED

    def is_finite(self) -> bool:
        return self.real.is_finite() and self.imag.is_finite()

    # -- derived values ------------------------------------------------------

    def conjugate(self) -> Circle:
        if self.is_undefined():
            return self
        return Circle(self.real, -self.imag)

    def magnitude_squared(self) -> Scalar:
        return self.real * self.real + self.imag * self.imag

    def magnitude(self) -> Scalar:
        """Euclidean norm, computed without intermediate overflow."""
        if self.cause is not None:
            return Scalar.undefined(self.cause)
        parts = (self.real, self.imag)
        if any(p.is_infinite() for p in parts):
            return Scalar.infinity(1)
        if any(p.is_transfinite() for p in parts):
            return Scalar.transfinite(1)
        if self.is_zero():
            return ZERO
        if all(p.is_zero() or p.magnitude_lost() for p in parts):
            return Scalar.negligible(1)
        return from_raw(math.hypot(self.real.value, self.imag.value), exact_nonzero=True)

    def check(self, operation: str = "") -> Circle:
        cause = self.cause
        if cause is not None:
            raise UndefinedOperationError(cause, operation)
        return self

    # -- checked arithmetic --------------------------------------------------

    def checked_add(self, other: CircleLike) -> Circle:
        return add(self, Circle.of(other)).check("add")

    def checked_sub(self, other: CircleLike) -> Circle:
        return sub(self, Circle.of(other)).check("sub")

    def checked_mul(self, other: CircleLike) -> Circle:
        return mul(self, Circle.of(other)).check("mul")

    def checked_div(self, other: CircleLike) -> Circle:
        divisor = Circle.of(other)
        if divisor.is_zero():
            raise DivisionByZeroError()
        return div(self, divisor).check("div")

    def sqrt(self) -> Circle:
        return sqrt(self).check("sqrt")

    def exp(self) -> Circle:
        return exp(self).check("exp")

    # -- operators -----------------------------------------------------------

    def __add__(self, other: object) -> Circle:
        rhs = _coerce(other)
        return NotImplemented if rhs is None else add(self, rhs)

    def __radd__(self, other: object) -> Circle:
        lhs = _coerce(other)
        return NotImplemented if lhs is None else add(lhs, self)

    def __sub__(self, other: object) -> Circle:
        rhs = _coerce(other)
        return NotImplemented if rhs is None else sub(self, rhs)

    def __rsub__(self, other: object) -> Circle:
        lhs = _coerce(other)
        return NotImplemented if lhs is None else sub(lhs, self)

    def __mul__(self, other: object) -> Circle:
        rhs = _coerce(other)
        return NotImplemented if rhs is None else mul(self, rhs)

    def __rmul__(self, other: object) -> Circle:
        lhs = _coerce(other)
        return NotImplemented if lhs is None else mul(lhs, self)

    def __truediv__(self, other: object) -> Circle:
        rhs = _coerce(other)
        return NotImplemented if rhs is None else div(self, rhs)

    def __rtruediv__(self, other: object) -> Circle:
        lhs = _coerce(other)
        return NotImplemented if lhs is None else div(lhs, self)

    def __neg__(self) -> Circle:
        if self.is_undefined():
            return self
        return Circle(-self.real, -self.imag)

    def __abs__(self) -> Scalar:
        return self.magnitude()

    def __complex__(self) -> complex:
        return complex(float(self.real), float(self.imag))

    def __str__(self) -> str:
        if self.cause is not None:
            return f"[undefined: {self.cause.value}]"
        return f"({self.real} + {self.imag}i)"


Complex = Circle
CircleLike = Union[Circle, Scalar, int, float, complex]


def _coerce(x: object) -> Circle | None:
    if isinstance(x, (Circle, Scalar, int, float, complex)):
        return Circle.of(x)
    return None


def _poisoned(*operands: Circle) -> Circle | None:
    for c in operands:
        if c.cause is not None:
            return Circle.undefined(c.cause)
    return None


def _spread(c: Circle) -> Circle:
    # An Undefined part poisons the whole value.
    return _poisoned(c) or c


def add(a: Circle, b: Circle) -> Circle:
    return _poisoned(a, b) or _spread(Circle(a.real + b.real, a.imag + b.imag))


def sub(a: Circle, b: Circle) -> Circle:
    return _poisoned(a, b) or _spread(Circle(a.real - b.real, a.imag - b.imag))


def mul(a: Circle, b: Circle) -> Circle:
    bad = _poisoned(a, b)
    if bad is not None:
        return bad
    real = a.real * b.real - a.imag * b.imag
    imag = a.real * b.imag + a.imag * b.real
    return _spread(Circle(real, imag))


def div(a: Circle, b: Circle) -> Circle:
    """Unchecked division; dividing by the zero Circle sends each non-zero part to infinity."""
    bad = _poisoned(a, b)
    if bad is not None:
        return bad
    if b.is_zero():
        if a.is_zero():
            return Circle.undefined(UndefinedCause.ZERO_DIV_ZERO)
        return Circle(a.real / ZERO if not a.real.is_zero() else ZERO,
                      a.imag / ZERO if not a.imag.is_zero() else ZERO)
    if b.imag.is_zero():
        return _spread(Circle(a.real / b.real, a.imag / b.real))
    denom = b.magnitude_squared()
    real = (a.real * b.real + a.imag * b.imag) / denom
    imag = (a.imag * b.real - a.real * b.imag) / denom
    return _spread(Circle(real, imag))


def sqrt(c: Circle) -> Circle:
    """Principal square root."""
    bad = _poisoned(c)
    if bad is not None:
        return bad
    if c.is_zero():
        return c
    r = c.magnitude()
    re = _s.sqrt((r + c.real) / 2)
    im = _s.sqrt((r - c.real) / 2)
    if c.imag.sign < 0:
        im = -im
    return _spread(Circle(re, im))


def exp(c: Circle) -> Circle:
    bad = _poisoned(c)
    if bad is not None:
        return bad
    if c.imag.is_zero():
        return Circle(_s.exp(c.real), ZERO)
    m = _s.exp(c.real)
    return _spread(Circle(m * _s.cos(c.imag), m * _s.sin(c.imag)))


def to_scalar(c: Circle) -> Scalar | None:
    """Return the real part when the imaginary part is exactly Zero."""
    if c.imag.is_zero():
        return c.real
    return None


def to_circle(s: Scalar) -> Circle:
    return Circle(s, ZERO)
