"""`numeric`: lattice-state scalars and complex values.

Public API:
- `Scalar`, `Circle` (alias `Complex`)
- `State`, `UndefinedCause`
- `to_scalar(circle) -> Scalar | None`, `to_circle(scalar) -> Circle`
"""

from .circle import Circle, Complex, to_circle, to_scalar
from .lattice import State, UndefinedCause
from .scalar import E, ONE, PI, TWO, ZERO, Scalar

__all__ = [
    "Scalar",
    "Circle",
    "Complex",
    "State",
    "UndefinedCause",
    "to_scalar",
    "to_circle",
    "ZERO",
    "ONE",
    "TWO",
    "PI",
    "E",
]
