"""Convergence configuration: defaults, validation, YAML and environment loading."""

from __future__ import annotations

import logging
import math
import os
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Mapping

import yaml

from ..errors import InvalidInputError

logger = logging.getLogger(__name__)

ENV_PREFIX = "VERITAS_"

# Upper clamp for iteration counts read from the environment.
MAX_ENV_ITERATIONS = 10_000_000


@dataclass(frozen=True)
class ConvergenceConfig:
    """Thresholds and iteration bounds for ``ConvergenceDetector``.

    ``min_iterations`` is a floor below which neither escape nor convergence is
    reported, even if the numeric thresholds are already met.
    """

    escape_threshold: float = 2.0
    convergence_threshold: float = 1e-6
    max_iterations: int = 1000
    min_iterations: int = 10

    def __post_init__(self) -> None:
        problems = self.validate()
        if problems:
            raise InvalidInputError("invalid ConvergenceConfig: " + "; ".join(problems))

    def validate(self) -> list[str]:
        problems: list[str] = []
        for name in ("max_iterations", "min_iterations"):
            v = getattr(self, name)
            if isinstance(v, bool) or not isinstance(v, int):
                problems.append(f"{name} must be an int, got {type(v).__name__}")
        for name in ("escape_threshold", "convergence_threshold"):
            v = getattr(self, name)
            if isinstance(v, bool) or not isinstance(v, (int, float)):
                problems.append(f"{name} must be a number, got {type(v).__name__}")
            elif not math.isfinite(v) or v <= 0:
                problems.append(f"{name} must be finite and > 0, got {v!r}")
        if problems:
            return problems
        if self.max_iterations < 1:
            problems.append(f"max_iterations must be >= 1, got {self.max_iterations}")
        if self.min_iterations < 0:
            problems.append(f"min_iterations must be >= 0, got {self.min_iterations}")
        if self.min_iterations > self.max_iterations:
            problems.append(
                f"min_iterations ({self.min_iterations}) exceeds max_iterations ({self.max_iterations})"
            )
        return problems

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> ConvergenceConfig:
        if not isinstance(mapping, Mapping):
            raise InvalidInputError(f"config must be a mapping, got {type(mapping).__name__}")
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(mapping) - known)
        if unknown:
            raise InvalidInputError(f"unknown config keys: {', '.join(map(str, unknown))}")
        return cls(**dict(mapping))

    @classmethod
    def from_env(cls, prefix: str = ENV_PREFIX) -> ConvergenceConfig:
        """Read overrides from ``<prefix>MAX_ITERATIONS`` and friends.

        Blank or unparsable values fall back to the defaults and integers are
        clamped into range.
        """
        d = cls()
        max_iterations = _env_int(prefix + "MAX_ITERATIONS", d.max_iterations, lo=1, hi=MAX_ENV_ITERATIONS)
        min_iterations = _env_int(
            prefix + "MIN_ITERATIONS", min(d.min_iterations, max_iterations), lo=0, hi=max_iterations
        )
        return cls(
            escape_threshold=_env_float(prefix + "ESCAPE_THRESHOLD", d.escape_threshold),
            convergence_threshold=_env_float(prefix + "CONVERGENCE_THRESHOLD", d.convergence_threshold),
            max_iterations=max_iterations,
            min_iterations=min_iterations,
        )


def load_config(path: str | Path) -> ConvergenceConfig:
    """Load a ``ConvergenceConfig`` from a YAML mapping. An empty file yields the defaults."""
    path = Path(path)
    obj = yaml.safe_load(path.read_text(encoding="utf-8"))
    if obj is None:
        return ConvergenceConfig()
    if not isinstance(obj, Mapping):
        raise InvalidInputError(f"{path}: config YAML must be a mapping")
    return ConvergenceConfig.from_mapping(obj)


def _env_int(name: str, default: int, *, lo: int, hi: int) -> int:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return int(default)
    try:
        v = int(raw.strip())
    except ValueError:
        logger.warning("ignoring unparsable %s=%r", name, raw)
        return int(default)
    if v < lo or v > hi:
        clamped = lo if v < lo else hi
        logger.warning("clamping %s=%d to %d", name, v, clamped)
        return clamped
    return v


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return float(default)
    try:
        v = float(raw.strip())
    except ValueError:
        logger.warning("ignoring unparsable %s=%r", name, raw)
        return float(default)
    if not math.isfinite(v) or v <= 0:
        logger.warning("ignoring out-of-range %s=%r", name, raw)
        return float(default)
    return v
