"""Escape, convergence and iteration-cap tests for ``z := z*z + c`` runs."""

from __future__ import annotations

from ..numeric.scalar import Scalar
from .config import ConvergenceConfig


class ConvergenceDetector:
    """Iteration counter plus the escape / convergence / exhaustion tests.

    Escape and convergence are only reported once ``min_iterations`` ticks
    have happened. Comparisons involving an Undefined magnitude are False,
    so an Undefined trajectory is never classified as escaped or converged.
    """

    def __init__(self, config: ConvergenceConfig | None = None) -> None:
        self._config = config if config is not None else ConvergenceConfig()
        self._escape = Scalar.from_float(self._config.escape_threshold)
        self._stability = Scalar.from_float(self._config.convergence_threshold)
        self._count = 0

    @property
    def config(self) -> ConvergenceConfig:
        return self._config

    @property
    def iterations(self) -> int:
        return self._count

    def reset(self) -> None:
        self._count = 0

    def tick(self) -> None:
        self._count += 1

    def _past_floor(self) -> bool:
        return self._count >= self._config.min_iterations

    def has_escaped(self, magnitude: Scalar) -> bool:
        return self._past_floor() and magnitude > self._escape

    def has_converged(self, change: Scalar) -> bool:
        return self._past_floor() and change < self._stability

    def is_max_iterations(self) -> bool:
        return self._count >= self._config.max_iterations
