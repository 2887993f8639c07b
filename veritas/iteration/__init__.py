"""`iteration`: classify ``z := z*z + c`` trajectories as converged, escaped or exhausted.

Public API:
- `IterationEngine(config).iterate(z, c) -> (IterationResult, Tensor)`
- `iterate_or_raise(z, c, config=None)` (raises unless converged)
- `ConvergenceConfig`, `load_config(path)`, `ConvergenceDetector`
"""

from .config import ConvergenceConfig, load_config
from .convergence import ConvergenceDetector
from .engine import IterationEngine, ProgressRecorder, iterate_or_raise
from .types import IterationResult, IterationState, Outcome, Progress

__all__ = [
    "IterationEngine",
    "iterate_or_raise",
    "ProgressRecorder",
    "ConvergenceConfig",
    "load_config",
    "ConvergenceDetector",
    "IterationResult",
    "IterationState",
    "Outcome",
    "Progress",
]
