"""Flat tensor of lattice values with an owned, optional gradient.

Every operation returns a new ``Tensor``. The only in-place mutations are the
gradient accessors (``set_grad``, ``accumulate_grad``, ``zero_grad``) and
``assign``, which optimizers use to write updated parameter values.

Elements are either all ``Scalar`` (kind ``"scalar"``) or all ``Circle``
(kind ``"circle"``). Plain ``int``/``float`` inputs become Scalars and
``complex`` inputs become Circles.
"""

from __future__ import annotations

import random
from typing import Callable, Iterable, Iterator, Sequence, Union

from ..errors import InvalidInputError
from ..numeric.circle import Circle
from ..numeric.scalar import ONE, ZERO, Scalar
from .shape import Shape

Element = Union[Scalar, Circle]
ElementLike = Union[Scalar, Circle, int, float, complex]
ShapeLike = Union[Shape, Iterable[int]]

SCALAR_KIND = "scalar"
CIRCLE_KIND = "circle"


def _element(x: ElementLike) -> Element:
    if isinstance(x, (Scalar, Circle)):
        return x
    if isinstance(x, complex):
        return Circle.from_complex(x)
    if isinstance(x, (int, float)):
        return Scalar.of(x)
    raise InvalidInputError(f"unsupported tensor element type {type(x).__name__}")


def _kind_of(values: Sequence[Element]) -> str:
    has_circle = any(isinstance(v, Circle) for v in values)
    if has_circle and not all(isinstance(v, Circle) for v in values):
        raise InvalidInputError("tensor elements must be all Scalars or all Circles")
    return CIRCLE_KIND if has_circle else SCALAR_KIND


class Tensor:
    __slots__ = ("_shape", "_data", "_kind", "_grad", "requires_grad")

    def __init__(
        self,
        data: Iterable[ElementLike],
        shape: ShapeLike,
        *,
        requires_grad: bool = False,
        kind: str | None = None,
    ) -> None:
        shape = Shape.of(shape)
        values = tuple(_element(x) for x in data)
        if len(values) != shape.num_elements():
            raise InvalidInputError(
                f"data length {len(values)} does not match shape {shape} "
                f"({shape.num_elements()} elements)"
            )
        detected = _kind_of(values)
        if kind is None:
            kind = detected
        elif kind not in (SCALAR_KIND, CIRCLE_KIND):
            raise InvalidInputError(f"unknown tensor kind {kind!r}")
        elif values and kind != detected:
            raise InvalidInputError(f"expected {kind} elements, got {detected} elements")
        self._shape = shape
        self._data = values
        self._kind = kind
        self._grad: Tensor | None = None
        self.requires_grad = requires_grad

    # -- constructors --------------------------------------------------------

    @classmethod
    def from_values(cls, data: Iterable[ElementLike], shape: ShapeLike) -> Tensor:
        """Build a tensor; raises ``InvalidInputError`` if ``len(data)`` != ``shape.num_elements()``."""
        return cls(data, shape)

    from_scalars = from_values

    @classmethod
    def from_complex(cls, data: Iterable[ElementLike], shape: ShapeLike) -> Tensor:
        return cls((Circle.of(x) for x in data), shape, kind=CIRCLE_KIND)

    @classmethod
    def full(cls, shape: ShapeLike, value: ElementLike) -> Tensor:
        shape = Shape.of(shape)
        fill = _element(value)
        return cls([fill] * shape.num_elements(), shape, kind=_kind_of((fill,)))

    @classmethod
    def zeros(cls, shape: ShapeLike, *, kind: str = SCALAR_KIND) -> Tensor:
        return cls.full(shape, Circle.zero() if kind == CIRCLE_KIND else ZERO)

    @classmethod
    def ones(cls, shape: ShapeLike, *, kind: str = SCALAR_KIND) -> Tensor:
        return cls.full(shape, Circle.one() if kind == CIRCLE_KIND else ONE)

    @classmethod
    def random_normal(
        cls,
        shape: ShapeLike,
        rng: random.Random | None = None,
        *,
        mean: float = 0.0,
        std: float = 1.0,
    ) -> Tensor:
        """Standard-normal samples; pass a seeded ``random.Random`` for reproducibility."""
        shape = Shape.of(shape)
        rng = rng if rng is not None else random.Random()
        return cls([Scalar.from_float(rng.gauss(mean, std)) for _ in range(shape.num_elements())], shape)

    randn = random_normal

    def with_requires_grad(self, flag: bool = True) -> Tensor:
        self.requires_grad = flag
        return self

    # -- accessors -----------------------------------------------------------

    @property
    def shape(self) -> Shape:
        return self._shape

    @property
    def kind(self) -> str:
        return self._kind

    @property
    def values(self) -> tuple[Element, ...]:
        return self._data

    def numel(self) -> int:
        return len(self._data)

    def as_scalars(self) -> tuple[Scalar, ...] | None:
        return self._data if self._kind == SCALAR_KIND else None

    def as_complex(self) -> tuple[Circle, ...] | None:
        return self._data if self._kind == CIRCLE_KIND else None

    def __len__(self) -> int:
        return len(self._data)

    def __iter__(self) -> Iterator[Element]:
        return iter(self._data)

    def __getitem__(self, index: int) -> Element:
        return self._data[index]

    def at(self, row: int, col: int) -> Element:
        if not self._shape.is_matrix():
            raise InvalidInputError(f"at(row, col) requires a rank-2 tensor, got shape {self._shape}")
        return self._data[row * self._shape.dims[1] + col]

    # -- gradient API --------------------------------------------------------

    @property
    def grad(self) -> Tensor | None:
        return self._grad

    def set_grad(self, grad: Tensor | None) -> None:
        """Replace the gradient. Shapes are the caller's responsibility here."""
        self._grad = grad

    def accumulate_grad(self, grad: Tensor) -> None:
        if grad.shape != self._shape:
            raise InvalidInputError(
                f"gradient shape {grad.shape} does not match tensor shape {self._shape}"
            )
        if self._grad is None:
            self._grad = grad.copy()
            return
        if self._grad.shape != grad.shape:
            raise InvalidInputError(
                f"gradient shape {grad.shape} does not match stored gradient shape {self._grad.shape}"
            )
        self._grad = Tensor(
            [a + b for a, b in zip(self._grad.values, grad.values)],
            self._shape,
        )

    def zero_grad(self) -> None:
        self._grad = None

    def assign(self, values: Iterable[ElementLike]) -> None:
        """Overwrite the element values in place (shape and kind are kept)."""
        updated = Tensor(values, self._shape)
        if updated.values and updated.kind != self._kind:
            raise InvalidInputError(f"cannot assign {updated.kind} values to a {self._kind} tensor")
        self._data = updated.values

    # -- pure operations -----------------------------------------------------

    def copy(self) -> Tensor:
        """Value copy; the gradient is not copied."""
        return Tensor(self._data, self._shape, requires_grad=self.requires_grad, kind=self._kind)

    def map(self, fn: Callable[[Element], ElementLike]) -> Tensor:
        # An empty result keeps the source kind; otherwise the kind follows the mapped values.
        kind = None if self._data else self._kind
        return Tensor([fn(v) for v in self._data], self._shape, requires_grad=self.requires_grad, kind=kind)

    def _zip_with(self, other: Tensor, fn, name: str) -> Tensor:
        if not isinstance(other, Tensor):
            raise InvalidInputError(f"{name} expects a Tensor, got {type(other).__name__}")
        if other.shape != self._shape:
            raise InvalidInputError(f"{name}: shape mismatch {self._shape} vs {other.shape}")
        if other.numel() and self.numel() and other.kind != self._kind:
            raise InvalidInputError(f"{name}: kind mismatch {self._kind} vs {other.kind}")
        return Tensor(
            [fn(a, b) for a, b in zip(self._data, other.values)],
            self._shape,
            requires_grad=self.requires_grad or other.requires_grad,
            kind=self._kind,
        )

    def add(self, other: Tensor) -> Tensor:
        """Elementwise unchecked sum; only a shape mismatch can fail."""
        return self._zip_with(other, lambda a, b: a + b, "add")

    def sub(self, other: Tensor) -> Tensor:
        return self._zip_with(other, lambda a, b: a - b, "sub")

    def mul(self, other: Tensor) -> Tensor:
        """Elementwise (Hadamard) product."""
        return self._zip_with(other, lambda a, b: a * b, "mul")

    def scale(self, k: ElementLike) -> Tensor:
        """Multiply every element by ``k`` (``self[i] * k``)."""
        factor = _element(k)
        if self._kind == SCALAR_KIND and isinstance(factor, Circle):
            raise InvalidInputError("cannot scale a real tensor by a complex factor")
        return Tensor(
            [v * factor for v in self._data],
            self._shape,
            requires_grad=self.requires_grad,
            kind=self._kind,
        )

    def transpose(self) -> Tensor:
        """Swap rows and columns of a rank-2 tensor."""
        if not self._shape.is_matrix():
            raise InvalidInputError(f"transpose requires a rank-2 tensor, got shape {self._shape}")
        rows, cols = self._shape.dims
        data = [self._data[row * cols + col] for col in range(cols) for row in range(rows)]
        return Tensor(data, Shape.matrix(cols, rows), requires_grad=self.requires_grad, kind=self._kind)

    @property
    def T(self) -> Tensor:
        return self.transpose()

    def matmul(self, other: Tensor) -> Tensor:
        from .ops import matmul

        return matmul(self, other)

    # -- operators -----------------------------------------------------------

    def __add__(self, other: object) -> Tensor:
        if not isinstance(other, Tensor):
            return NotImplemented
        return self.add(other)

    def __sub__(self, other: object) -> Tensor:
        if not isinstance(other, Tensor):
            return NotImplemented
        return self.sub(other)

    def __mul__(self, other: object) -> Tensor:
        if isinstance(other, Tensor):
            return self.mul(other)
        if isinstance(other, (Scalar, Circle, int, float, complex)):
            return self.scale(other)
        return NotImplemented

    def __matmul__(self, other: object) -> Tensor:
        if not isinstance(other, Tensor):
            return NotImplemented
        return self.matmul(other)

    def __neg__(self) -> Tensor:
        return self.map(lambda v: -v)

    def __eq__(self, other: object) -> bool:
        """Structural equality of shape, kind and every element (gradients ignored)."""
        if not isinstance(other, Tensor):
            return NotImplemented
        return self._shape == other.shape and self._kind == other.kind and self._data == other.values

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        body = ", ".join(str(v) for v in self._data[:8])
        if len(self._data) > 8:
            body += ", ..."
        return f"Tensor(shape={self._shape}, kind={self._kind}, [{body}])"
