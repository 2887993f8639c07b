"""`veritas`: verified-arithmetic numeric kernel.

- `veritas.numeric`: `Scalar` / `Circle` values carrying an explicit state
  lattice (Zero, Negligible, Normal, Transfinite, Infinite, Undefined-with-cause).
- `veritas.tensor`: flat tensors of those values, pure operations and manual
  backward functions.
- `veritas.optim`: SGD (with momentum) and Adam.
- `veritas.nn`: `Linear`, `MLP`, MSE loss.
- `veritas.iteration`: the ``z := z*z + c`` convergence classifier.
"""

from .errors import (
    DivisionByZeroError,
    InvalidInputError,
    InvariantViolationError,
    IterationEscapedError,
    IterationExhaustedError,
    NumericOverflowError,
    NumericUnderflowError,
    UndefinedOperationError,
    VeritasError,
)
from .iteration import ConvergenceConfig, IterationEngine, IterationResult, Outcome, iterate_or_raise
from .numeric import Circle, Complex, Scalar, State, UndefinedCause
from .optim import SGD, Adam
from .tensor import Shape, Tensor, matmul

__all__ = [
    "Scalar",
    "Circle",
    "Complex",
    "State",
    "UndefinedCause",
    "Shape",
    "Tensor",
    "matmul",
    "SGD",
    "Adam",
    "ConvergenceConfig",
    "IterationEngine",
    "IterationResult",
    "Outcome",
    "iterate_or_raise",
    "VeritasError",
    "InvalidInputError",
    "DivisionByZeroError",
    "UndefinedOperationError",
    "NumericUnderflowError",
    "NumericOverflowError",
    "InvariantViolationError",
    "IterationEscapedError",
    "IterationExhaustedError",
]
