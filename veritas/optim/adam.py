"""Adam optimizer (first and second moments, no bias correction)."""

from __future__ import annotations

import logging
from typing import Any, Dict, Sequence

from ..numeric.scalar import ONE, Scalar
from ..tensor.serialize import scalar_from_dict, scalar_to_dict
from ..tensor.tensor import Tensor
from .base import Buffers, Optimizer, ScalarLike, buffers_from_list, buffers_to_list

logger = logging.getLogger(__name__)


class Adam(Optimizer):
    """Adam without bias correction.

    ``m := b1*m + (1-b1)*g``, ``v := b2*v + (1-b2)*g*g``,
    ``w := w - lr * m / (v + eps)``.

    This deliberately differs from the textbook algorithm in two ways: the
    moment estimates are not divided by ``1 - beta**t``, and the denominator
    uses ``v`` rather than ``sqrt(v)``. ``t`` is still counted so a corrected
    variant can be layered on top.
    """

    kind = "Adam"

    def __init__(
        self,
        lr: ScalarLike,
        beta1: ScalarLike = 0.9,
        beta2: ScalarLike = 0.999,
        epsilon: ScalarLike = 1e-8,
    ) -> None:
        super().__init__(lr)
        self.beta1 = Scalar.of(beta1)
        self.beta2 = Scalar.of(beta2)
        self.epsilon = Scalar.of(epsilon)
        self.m: Buffers = []
        self.v: Buffers = []
        self.t = 0

    def step(self, params: Sequence[Tensor]) -> None:
        grads = [self._gradient_of(i, p) for i, p in enumerate(params)]
        self.t += 1
        self.m = self._ensure_buffers(self.m, params, "first moment")
        self.v = self._ensure_buffers(self.v, params, "second moment")

        b1, b2, lr, eps = self.beta1, self.beta2, self.lr, self.epsilon
        one_minus_b1 = ONE - b1
        one_minus_b2 = ONE - b2
        for p, g, m, v in zip(params, grads, self.m, self.v):
            updated = []
            for j, (w, gj) in enumerate(zip(p.values, g)):
                m[j] = b1 * m[j] + one_minus_b1 * gj
                v[j] = b2 * v[j] + one_minus_b2 * (gj * gj)
                updated.append(w - lr * m[j] / (v[j] + eps))
            p.assign(updated)
        logger.debug("Adam step t=%d: %d parameters, lr=%s", self.t, len(params), lr)

    def state_dict(self) -> Dict[str, Any]:
        state = super().state_dict()
        state.update(
            {
                "beta1": scalar_to_dict(self.beta1),
                "beta2": scalar_to_dict(self.beta2),
                "epsilon": scalar_to_dict(self.epsilon),
                "t": self.t,
                "m": buffers_to_list(self.m),
                "v": buffers_to_list(self.v),
            }
        )
        return state

    def load_state_dict(self, state: Dict[str, Any]) -> None:
        super().load_state_dict(state)
        for name in ("beta1", "beta2", "epsilon"):
            if name in state:
                setattr(self, name, scalar_from_dict(state[name]))
        self.t = int(state.get("t", 0))
        self.m = buffers_from_list(state.get("m", []))
        self.v = buffers_from_list(state.get("v", []))
