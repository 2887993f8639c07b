"""Tensor operations with hand-written backward passes.

There is no computation graph: a caller that needs gradients calls the
matching ``*_backward`` function with the upstream gradient and the forward
inputs, then threads the results into ``Tensor.accumulate_grad`` itself.
"""

from __future__ import annotations

from ..errors import InvalidInputError
from ..numeric.circle import Circle
from ..numeric.scalar import ZERO, Scalar
from .shape import Shape
from .tensor import CIRCLE_KIND, Element, Tensor


def _zero_like(kind: str) -> Element:
    return Circle.zero() if kind == CIRCLE_KIND else ZERO


def _require_matrix(t: Tensor, name: str) -> tuple[int, int]:
    if not t.shape.is_matrix():
        raise InvalidInputError(f"matmul: {name} must be rank 2, got shape {t.shape}")
    rows, cols = t.shape.dims
    return rows, cols


def matmul(a: Tensor, b: Tensor) -> Tensor:
    """``[m, k] @ [k, n] -> [m, n]`` using unchecked products and sums.

    An Undefined entry poisons every output cell whose sum includes a term
    built from it; a Zero factor annihilates Negligible and Transfinite terms.
    """
    m, k = _require_matrix(a, "a")
    k2, n = _require_matrix(b, "b")
    if k != k2:
        raise InvalidInputError(
            f"matmul: inner dimension mismatch, a has {k} columns but b has {k2} rows"
        )
    if a.numel() and b.numel() and a.kind != b.kind:
        raise InvalidInputError(f"matmul: kind mismatch {a.kind} vs {b.kind}")
    av, bv = a.values, b.values
    zero = _zero_like(a.kind)
    out: list[Element] = []
    for i in range(m):
        row = i * k
        for j in range(n):
            acc = zero
            for p in range(k):
                acc = acc + av[row + p] * bv[p * n + j]
            out.append(acc)
    return Tensor(
        out,
        Shape.matrix(m, n),
        requires_grad=a.requires_grad or b.requires_grad,
        kind=a.kind,
    )


def matmul_backward(grad_output: Tensor, a: Tensor, b: Tensor) -> tuple[Tensor, Tensor]:
    """Gradients of ``a @ b``: ``dA = g @ b.T``, ``dB = a.T @ g``."""
    m, _ = _require_matrix(a, "a")
    _, n = _require_matrix(b, "b")
    if grad_output.shape != Shape.matrix(m, n):
        raise InvalidInputError(
            f"matmul_backward: grad_output shape {grad_output.shape} != [{m}, {n}]"
        )
    grad_a = matmul(grad_output, b.transpose())
    grad_b = matmul(a.transpose(), grad_output)
    return grad_a, grad_b


def add(a: Tensor, b: Tensor) -> Tensor:
    return a.add(b)


def add_backward(grad_output: Tensor) -> tuple[Tensor, Tensor]:
    """The gradient of a sum flows unchanged to both operands."""
    return grad_output.copy(), grad_output.copy()


def mul(a: Tensor, b: Tensor) -> Tensor:
    return a.mul(b)


def mul_backward(grad_output: Tensor, a: Tensor, b: Tensor) -> tuple[Tensor, Tensor]:
    return grad_output.mul(b), grad_output.mul(a)


def _require_real(t: Tensor, name: str) -> None:
    if t.as_scalars() is None:
        raise InvalidInputError(f"{name} requires a real (Scalar) tensor")


def relu(x: Tensor) -> Tensor:
    """``max(x, 0)`` elementwise; Undefined entries stay Undefined."""
    _require_real(x, "relu")

    def _relu(v: Scalar) -> Scalar:
        if v.is_undefined() or v > ZERO:
            return v
        return ZERO

    return x.map(_relu)


def relu_backward(grad_output: Tensor, x: Tensor) -> Tensor:
    _require_real(x, "relu_backward")
    _require_real(grad_output, "relu_backward")
    if grad_output.shape != x.shape:
        raise InvalidInputError(
            f"relu_backward: grad_output shape {grad_output.shape} != input shape {x.shape}"
        )
    out = []
    for v, g in zip(x.values, grad_output.values):
        if v.is_undefined():
            out.append(v)
        elif v > ZERO:
            out.append(g)
        else:
            out.append(ZERO)
    return Tensor(out, x.shape)
