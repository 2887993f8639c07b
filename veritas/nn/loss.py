"""Mean squared error loss and its gradient."""

from __future__ import annotations

from ..errors import InvalidInputError
from ..numeric.scalar import TWO, ZERO, Scalar
from ..tensor.tensor import Tensor


def _paired(predicted: Tensor, target: Tensor) -> tuple[tuple[Scalar, ...], tuple[Scalar, ...]]:
    p, t = predicted.as_scalars(), target.as_scalars()
    if p is None or t is None:
        raise InvalidInputError("mse_loss requires real (Scalar) tensors")
    if len(p) != len(t):
        raise InvalidInputError(f"predicted has {len(p)} elements but target has {len(t)}")
    if not p:
        raise InvalidInputError("mse_loss of empty tensors is undefined")
    return p, t


def mse_loss(predicted: Tensor, target: Tensor) -> Scalar:
    """``mean((predicted - target)**2)`` with unchecked lattice arithmetic."""
    p, t = _paired(predicted, target)
    total = ZERO
    for a, b in zip(p, t):
        diff = a - b
        total = total + diff * diff
    return total / Scalar.from_int(len(p))


def mse_loss_backward(predicted: Tensor, target: Tensor) -> Tensor:
    """Gradient of ``mse_loss`` with respect to ``predicted``: ``2*(p - t)/n``."""
    p, t = _paired(predicted, target)
    n = Scalar.from_int(len(p))
    return Tensor([TWO * (a - b) / n for a, b in zip(p, t)], predicted.shape)
