"""Exception types for the veritas numeric kernel.

Structural problems (shape/length mismatches, missing gradients) raise
``InvalidInputError``. Numeric problems are only raised by the *checked*
scalar API; unchecked tensor operations propagate lattice states instead.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .numeric.lattice import UndefinedCause


class VeritasError(Exception):
    """Base class for every error raised by this package."""

    @property
    def is_mathematical(self) -> bool:
        """True for errors describing a mathematical impossibility, not a caller bug."""
        return isinstance(
            self,
            (DivisionByZeroError, UndefinedOperationError, NumericUnderflowError, NumericOverflowError),
        )

    @property
    def is_verification_failure(self) -> bool:
        return isinstance(self, (InvariantViolationError, IterationEscapedError))


class InvalidInputError(VeritasError, ValueError):
    """Raised on shape mismatch, missing gradient, or malformed construction."""


class DivisionByZeroError(VeritasError, ZeroDivisionError):
    """Raised by checked division when the divisor is exactly Zero."""

    def __init__(self, message: str = "division by zero") -> None:
        super().__init__(message)


class UndefinedOperationError(VeritasError, ArithmeticError):
    """Raised by checked arithmetic whose result is in the Undefined state."""

    def __init__(self, cause: UndefinedCause, operation: str = "") -> None:
        self.cause = cause
        self.operation = operation
        where = f" in {operation}" if operation else ""
        super().__init__(f"undefined result{where}: {cause.value}")


class NumericUnderflowError(VeritasError, ArithmeticError):
    """Raised by ``Scalar.check_range()`` for Negligible results."""


class NumericOverflowError(VeritasError, ArithmeticError):
    """Raised by ``Scalar.check_range()`` for Transfinite results."""


class InvariantViolationError(VeritasError):
    """Raised when a tensor violates one or more structural invariants."""

    def __init__(self, violations: list[str]) -> None:
        self.violations = violations
        super().__init__(f"invariant violations: {', '.join(violations)}")


class IterationEscapedError(VeritasError):
    """Raised by ``iterate_or_raise`` when the trajectory escaped."""

    def __init__(self, iterations: int) -> None:
        self.iterations = iterations
        super().__init__(f"trajectory escaped after {iterations} iterations")


class IterationExhaustedError(VeritasError):
    """Raised by ``iterate_or_raise`` when max_iterations was reached first."""

    def __init__(self, iterations: int) -> None:
        self.iterations = iterations
        super().__init__(f"no classification after {iterations} iterations")
