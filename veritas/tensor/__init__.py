"""`tensor`: flat lattice-value tensors with manual gradient threading.

Public API:
- `Shape`, `Tensor`
- `matmul`, `relu` and the `*_backward` helpers
- `check_all(t) -> list[str]`, `assert_invariants(t)`
- `tensor_to_dict(t)`, `tensor_from_dict(d)`
"""

from .invariants import assert_invariants, check_all
from .ops import add_backward, matmul, matmul_backward, mul_backward, relu, relu_backward
from .serialize import tensor_from_dict, tensor_to_dict
from .shape import Shape
from .tensor import Tensor

__all__ = [
    "Shape",
    "Tensor",
    "matmul",
    "matmul_backward",
    "add_backward",
    "mul_backward",
    "relu",
    "relu_backward",
    "check_all",
    "assert_invariants",
    "tensor_to_dict",
    "tensor_from_dict",
]
