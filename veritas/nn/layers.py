"""Dense layers with manual backward passes."""

from __future__ import annotations

import random
from typing import Sequence

from ..errors import InvalidInputError
from ..numeric.scalar import ZERO, Scalar
from ..tensor.ops import matmul, matmul_backward, relu
from ..tensor.shape import Shape
from ..tensor.tensor import Tensor


def _as_matrix(x: Tensor, features: int) -> tuple[Tensor, bool]:
    """View a ``[features]`` vector as a ``[features, 1]`` column."""
    if x.shape.rank() == 1:
        if x.shape.dims[0] != features:
            raise InvalidInputError(f"expected {features} input features, got shape {x.shape}")
        return Tensor(x.values, Shape.matrix(features, 1), requires_grad=x.requires_grad), True
    if not x.shape.is_matrix() or x.shape.rows != features:
        raise InvalidInputError(f"expected input of shape [{features}, batch], got {x.shape}")
    return x, False


class Linear:
    """Affine layer ``y = W @ x + b`` with ``W`` of shape ``[out, in]``.

    ``x`` is either a ``[in]`` vector or a ``[in, batch]`` matrix; the bias is
    broadcast across columns. Weights use Xavier-style ``N(0, 1) * sqrt(1/in)``
    initialization and the bias starts at Zero.
    """

    def __init__(self, in_features: int, out_features: int, rng: random.Random | None = None) -> None:
        if in_features < 1 or out_features < 1:
            raise InvalidInputError("Linear needs at least one input and one output feature")
        self.in_features = in_features
        self.out_features = out_features
        scale = (Scalar.one() / Scalar.from_int(in_features)).sqrt()
        w = Tensor.random_normal(Shape.matrix(out_features, in_features), rng)
        self.weight = w.scale(scale).with_requires_grad()
        self.bias = Tensor.zeros(Shape.vector(out_features)).with_requires_grad()

    def forward(self, x: Tensor) -> Tensor:
        xm, was_vector = _as_matrix(x, self.in_features)
        y = matmul(self.weight, xm)
        batch = xm.shape.cols
        b = self.bias.values
        data = [v + b[i // batch] for i, v in enumerate(y.values)]
        if was_vector:
            return Tensor(data, Shape.vector(self.out_features), requires_grad=True)
        return Tensor(data, y.shape, requires_grad=True)

    __call__ = forward

    def backward(self, x: Tensor, grad_output: Tensor) -> Tensor:
        """Accumulate weight/bias gradients for input ``x``; return the input gradient."""
        xm, was_vector = _as_matrix(x, self.in_features)
        batch = xm.shape.cols
        g = Tensor(grad_output.values, Shape.matrix(self.out_features, batch))
        grad_w, grad_x = matmul_backward(g, self.weight, xm)
        # matmul_backward returns (dW, dx) for W @ x.
        grad_b = []
        gv = g.values
        for i in range(self.out_features):
            acc = ZERO
            for j in range(batch):
                acc = acc + gv[i * batch + j]
            grad_b.append(acc)
        self.weight.accumulate_grad(grad_w)
        self.bias.accumulate_grad(Tensor(grad_b, self.bias.shape))
        if was_vector:
            return Tensor(grad_x.values, x.shape)
        return grad_x

    def parameters(self) -> list[Tensor]:
        return [self.weight, self.bias]


class MLP:
    """Stack of ``Linear`` layers with ReLU between them (not after the last)."""

    def __init__(self, layer_sizes: Sequence[int], rng: random.Random | None = None) -> None:
        if len(layer_sizes) < 2:
            raise InvalidInputError("MLP needs at least an input and an output size")
        self.layers = [
            Linear(layer_sizes[i], layer_sizes[i + 1], rng) for i in range(len(layer_sizes) - 1)
        ]

    def forward(self, x: Tensor) -> Tensor:
        last = len(self.layers) - 1
        for i, layer in enumerate(self.layers):
            x = layer.forward(x)
            if i < last:
                x = relu(x)
        return x

    __call__ = forward

    def parameters(self) -> list[Tensor]:
        return [p for layer in self.layers for p in layer.parameters()]
