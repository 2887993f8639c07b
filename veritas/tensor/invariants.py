"""Structural invariant checkers for tensors.

Each function returns True when the invariant holds, and ``check_all()``
returns the list of violated invariant IDs (empty = all pass).
"""

from __future__ import annotations

from typing import Callable

from ..errors import InvariantViolationError
from ..numeric.circle import Circle
from ..numeric.lattice import State
from ..numeric.scalar import Scalar
from .tensor import CIRCLE_KIND, SCALAR_KIND, Tensor


def inv_length_matches_shape(t: Tensor) -> bool:
    return t.numel() == t.shape.num_elements()


def inv_every_element_has_state(t: Tensor) -> bool:
    """Every element reports exactly one lattice state, and causes only on Undefined."""
    for v in t.values:
        parts = (v.real, v.imag) if isinstance(v, Circle) else (v,)
        for p in parts:
            if not isinstance(p.state, State):
                return False
            if (p.state is State.UNDEFINED) != (p.cause is not None):
                return False
    return True


def inv_grad_shape_matches(t: Tensor) -> bool:
    if t.grad is None:
        return True
    return t.grad.shape == t.shape


def inv_homogeneous_kind(t: Tensor) -> bool:
    expected = Circle if t.kind == CIRCLE_KIND else Scalar
    return t.kind in (SCALAR_KIND, CIRCLE_KIND) and all(isinstance(v, expected) for v in t.values)


INVARIANT_REGISTRY: dict[str, Callable[[Tensor], bool]] = {
    "inv_length_matches_shape": inv_length_matches_shape,
    "inv_every_element_has_state": inv_every_element_has_state,
    "inv_grad_shape_matches": inv_grad_shape_matches,
    "inv_homogeneous_kind": inv_homogeneous_kind,
}


def check_all(t: Tensor) -> list[str]:
    """Return a list of violated invariant IDs (empty = all pass)."""
    return [
        inv_id
        for inv_id, check_fn in INVARIANT_REGISTRY.items()
        if not check_fn(t)
    ]


def assert_invariants(t: Tensor) -> Tensor:
    violations = check_all(t)
    if violations:
        raise InvariantViolationError(violations)
    return t
