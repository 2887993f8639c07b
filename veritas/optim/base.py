"""Optimizer base class: learning rate, per-parameter buffers and type-tagged state dicts."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Sequence, Union

from ..errors import InvalidInputError
from ..numeric.scalar import ZERO, Scalar
from ..tensor.serialize import scalar_from_dict, scalar_to_dict
from ..tensor.tensor import Tensor

logger = logging.getLogger(__name__)

ScalarLike = Union[Scalar, int, float]
Buffers = List[List[Scalar]]


class Optimizer:
    """Base class for optimizers that update parameter tensors in place.

    Parameters are passed to every ``step`` call. Per-parameter buffers are
    sized lazily on the first step and matched to parameters by position.
    Optimizers never clear gradients; call ``zero_grad`` explicitly.
    """

    kind = "Optimizer"

    def __init__(self, lr: ScalarLike) -> None:
        self.lr = Scalar.of(lr)

    def get_lr(self) -> Scalar:
        return self.lr

    def set_lr(self, lr: ScalarLike) -> None:
        self.lr = Scalar.of(lr)

    def zero_grad(self, params: Sequence[Tensor]) -> None:
        for p in params:
            p.zero_grad()

    def step(self, params: Sequence[Tensor]) -> None:
        raise NotImplementedError

    # -- helpers -------------------------------------------------------------

    @staticmethod
    def _gradient_of(index: int, param: Tensor) -> tuple[Scalar, ...]:
        """Return the real gradient values of ``param`` or raise ``InvalidInputError``."""
        if param.as_scalars() is None:
            raise InvalidInputError(f"parameter {index} must be a real (Scalar) tensor")
        grad = param.grad
        if grad is None:
            raise InvalidInputError(f"parameter {index} has no gradient")
        values = grad.as_scalars()
        if values is None:
            raise InvalidInputError(f"gradient of parameter {index} must be a real (Scalar) tensor")
        if len(values) != param.numel():
            raise InvalidInputError(
                f"gradient of parameter {index} has {len(values)} elements, expected {param.numel()}"
            )
        return values

    def _ensure_buffers(self, buffers: Buffers, params: Sequence[Tensor], name: str) -> Buffers:
        sizes = [p.numel() for p in params]
        if buffers and [len(b) for b in buffers] == sizes:
            return buffers
        if buffers:
            logger.warning(
                "%s: parameter layout changed (%d -> %d tensors); resetting %s buffers",
                self.kind, len(buffers), len(sizes), name,
            )
        return [[ZERO] * n for n in sizes]

    # -- checkpointing -------------------------------------------------------

    def state_dict(self) -> Dict[str, Any]:
        return {"type": self.kind, "lr": scalar_to_dict(self.lr)}

    def load_state_dict(self, state: Dict[str, Any]) -> None:
        if state.get("type") != self.kind:
            raise InvalidInputError(f"state_dict type mismatch: {state.get('type')!r} != {self.kind!r}")
        if "lr" in state:
            self.lr = scalar_from_dict(state["lr"])


def buffers_to_list(buffers: Buffers) -> list[list[dict[str, Any]]]:
    return [[scalar_to_dict(s) for s in b] for b in buffers]


def buffers_from_list(raw: Sequence[Sequence[Any]]) -> Buffers:
    return [[scalar_from_dict(s) for s in b] for b in raw]
