"""Data types for the iteration engine.

All types are frozen dataclasses (immutable).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, unique

from ..numeric.scalar import Scalar
from ..tensor.tensor import Tensor


@unique
class Outcome(Enum):
    """Terminal classification of a run."""
    CONVERGED = "converged"
    ESCAPED = "escaped"
    MAX_ITERATIONS = "max_iterations"


@dataclass(frozen=True)
class IterationResult:
    outcome: Outcome
    iterations: int

    @classmethod
    def converged(cls, iterations: int) -> IterationResult:
        return cls(Outcome.CONVERGED, iterations)

    @classmethod
    def escaped(cls, iterations: int) -> IterationResult:
        return cls(Outcome.ESCAPED, iterations)

    @classmethod
    def max_iterations(cls, iterations: int) -> IterationResult:
        return cls(Outcome.MAX_ITERATIONS, iterations)

    @property
    def is_converged(self) -> bool:
        return self.outcome is Outcome.CONVERGED

    @property
    def is_escaped(self) -> bool:
        return self.outcome is Outcome.ESCAPED


@dataclass(frozen=True, eq=False)
class IterationState:
    """One point of a run: ``z`` after ``iteration`` steps of ``z := z*z + c``."""

    z: Tensor
    c: Tensor
    iteration: int = 0


@dataclass(frozen=True, eq=False)
class Progress:
    """Per-round diagnostics handed to progress callbacks."""

    iteration: int
    z: Tensor
    magnitude: Scalar
    change: Scalar
