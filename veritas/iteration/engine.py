"""Iteration engine for ``z := z*z + c``.

``IterationEngine.iterate(z, c)`` runs until one terminal condition fires.
Each round:

1. ticks the detector and computes ``z_new = step(z, c)``,
2. computes ``magnitude(z_new)`` and checks escape,
3. computes ``change(z_new, z)`` and checks convergence,
4. checks the iteration cap.

Escape is checked before convergence, so a round that satisfies both is
reported as ``ESCAPED``: no boundedness claim is made about a trajectory that
has already left the bounded region.

``iterate_or_raise(z, c)`` is the fail-closed wrapper: it returns only for
converged runs and raises otherwise.
"""

from __future__ import annotations

import logging
from typing import Callable, Iterable

from ..errors import InvalidInputError, IterationEscapedError, IterationExhaustedError
from ..numeric.circle import Circle
from ..numeric.scalar import ZERO, Scalar
from ..tensor.invariants import assert_invariants
from ..tensor.tensor import Tensor
from .config import ConvergenceConfig
from .convergence import ConvergenceDetector
from .types import IterationResult, IterationState, Progress

logger = logging.getLogger(__name__)

ProgressFn = Callable[[int, Tensor, Scalar, Scalar], None]


def _difference(a: Scalar | Circle, b: Scalar | Circle) -> Scalar | Circle:
    """``a - b``, except that two vanished values differ by a vanished (Negligible) amount."""
    if a.is_effectively_zero() and b.is_effectively_zero():
        if a.is_zero() and b.is_zero():
            return ZERO
        return Scalar.negligible(1)
    return a - b


def _max_magnitude(values: Iterable[Scalar | Circle]) -> Scalar:
    """Largest element magnitude; the first Undefined magnitude wins outright."""
    best = ZERO
    for v in values:
        mag = v.magnitude()
        if mag.is_undefined():
            return mag
        if mag > best:
            best = mag
    return best


class IterationEngine:
    def __init__(self, config: ConvergenceConfig | None = None) -> None:
        self.detector = ConvergenceDetector(config)
        self.last_state: IterationState | None = None

    @property
    def config(self) -> ConvergenceConfig:
        return self.detector.config

    def reset(self) -> None:
        self.detector.reset()
        self.last_state = None

    # -- per-round primitives ------------------------------------------------

    def step(self, z: Tensor, c: Tensor) -> Tensor:
        """``z*z + c`` elementwise; ``z`` and ``c`` must have equal length and kind."""
        if z.numel() != c.numel():
            raise InvalidInputError(f"z and c must have the same length ({z.numel()} != {c.numel()})")
        if z.numel() and z.kind != c.kind:
            raise InvalidInputError(f"z and c must have the same kind ({z.kind} != {c.kind})")
        return Tensor([zv * zv + cv for zv, cv in zip(z.values, c.values)], z.shape, kind=z.kind)

    def magnitude(self, z: Tensor) -> Scalar:
        return _max_magnitude(z.values)

    def change(self, z_new: Tensor, z_old: Tensor) -> Scalar:
        if z_new.numel() != z_old.numel():
            raise InvalidInputError(
                f"z_new and z_old must have the same length ({z_new.numel()} != {z_old.numel()})"
            )
        return _max_magnitude(_difference(a, b) for a, b in zip(z_new.values, z_old.values))

    # -- runs ----------------------------------------------------------------

    def iterate(self, z: Tensor, c: Tensor) -> tuple[IterationResult, Tensor]:
        return self._run(z, c, None)

    def iterate_with_progress(
        self, z: Tensor, c: Tensor, callback: ProgressFn
    ) -> tuple[IterationResult, Tensor]:
        """Like ``iterate`` but calls ``callback(iteration, z, magnitude, change)`` every round.

        The callback runs before the termination checks and receives a copy of
        ``z``, so it cannot influence the classification.
        """
        return self._run(z, c, callback)

    def _run(
        self, z: Tensor, c: Tensor, callback: ProgressFn | None
    ) -> tuple[IterationResult, Tensor]:
        self.reset()
        detector = self.detector
        state = IterationState(z=z, c=c, iteration=0)
        while True:
            detector.tick()
            z_new = self.step(state.z, c)
            state = IterationState(z=z_new, c=c, iteration=detector.iterations)
            self.last_state = state
            n = detector.iterations

            magnitude = self.magnitude(z_new)
            if callback is not None:
                change = self.change(z_new, z)
                callback(n, z_new.copy(), magnitude, change)
                logger.debug("iteration %d: magnitude=%s change=%s", n, magnitude, change)
                if detector.has_escaped(magnitude):
                    return self._finish(IterationResult.escaped(n), z_new)
            else:
                if detector.has_escaped(magnitude):
                    return self._finish(IterationResult.escaped(n), z_new)
                change = self.change(z_new, z)
                logger.debug("iteration %d: magnitude=%s change=%s", n, magnitude, change)

            if detector.has_converged(change):
                return self._finish(IterationResult.converged(n), z_new)
            if detector.is_max_iterations():
                return self._finish(IterationResult.max_iterations(n), z_new)
            z = z_new

    def _finish(self, result: IterationResult, z: Tensor) -> tuple[IterationResult, Tensor]:
        logger.info("iteration finished: %s after %d iterations", result.outcome.value, result.iterations)
        return result, z


def iterate_or_raise(
    z: Tensor, c: Tensor, config: ConvergenceConfig | None = None
) -> tuple[IterationResult, Tensor]:
    """Run an engine and return only converged results.

    Raises ``InvariantViolationError`` for malformed inputs,
    ``IterationEscapedError`` when the trajectory escapes and
    ``IterationExhaustedError`` when ``max_iterations`` is hit first.
    """
    assert_invariants(z)
    assert_invariants(c)
    result, z_final = IterationEngine(config).iterate(z, c)
    if result.is_escaped:
        raise IterationEscapedError(result.iterations)
    if not result.is_converged:
        raise IterationExhaustedError(result.iterations)
    return result, z_final


class ProgressRecorder:
    """Progress callback that keeps every round as a ``Progress`` record."""

    def __init__(self) -> None:
        self.history: list[Progress] = []

    def __call__(self, iteration: int, z: Tensor, magnitude: Scalar, change: Scalar) -> None:
        self.history.append(Progress(iteration, z, magnitude, change))

    @property
    def magnitudes(self) -> list[Scalar]:
        return [p.magnitude for p in self.history]
