"""Stochastic gradient descent with optional momentum."""

from __future__ import annotations

import logging
from typing import Any, Dict, Sequence

from ..numeric.scalar import ZERO, Scalar
from ..tensor.serialize import scalar_from_dict, scalar_to_dict
from ..tensor.tensor import Tensor
from .base import Buffers, Optimizer, ScalarLike, buffers_from_list, buffers_to_list

logger = logging.getLogger(__name__)


class SGD(Optimizer):
    """Stochastic gradient descent.

    Plain update: ``w := w - lr*g``.
    With momentum: ``v := momentum*v - lr*g; w := w + v``.
    """

    kind = "SGD"

    def __init__(self, lr: ScalarLike, momentum: ScalarLike = 0) -> None:
        super().__init__(lr)
        self.momentum = Scalar.of(momentum)
        self.velocities: Buffers = []

    @classmethod
    def with_momentum(cls, lr: ScalarLike, momentum: ScalarLike) -> SGD:
        return cls(lr, momentum)

    def _uses_momentum(self) -> bool:
        return self.momentum > ZERO

    def step(self, params: Sequence[Tensor]) -> None:
        grads = [self._gradient_of(i, p) for i, p in enumerate(params)]
        lr = self.lr

        if not self._uses_momentum():
            for p, g in zip(params, grads):
                p.assign([w - lr * gj for w, gj in zip(p.values, g)])
            logger.debug("SGD step: %d parameters, lr=%s", len(params), lr)
            return

        self.velocities = self._ensure_buffers(self.velocities, params, "velocity")
        for p, g, v in zip(params, grads, self.velocities):
            for j, gj in enumerate(g):
                v[j] = self.momentum * v[j] - lr * gj
            p.assign([w + vj for w, vj in zip(p.values, v)])
        logger.debug("SGD step: %d parameters, lr=%s, momentum=%s", len(params), lr, self.momentum)

    def state_dict(self) -> Dict[str, Any]:
        state = super().state_dict()
        state["momentum"] = scalar_to_dict(self.momentum)
        state["velocities"] = buffers_to_list(self.velocities)
        return state

    def load_state_dict(self, state: Dict[str, Any]) -> None:
        super().load_state_dict(state)
        if "momentum" in state:
            self.momentum = scalar_from_dict(state["momentum"])
        self.velocities = buffers_from_list(state.get("velocities", []))
