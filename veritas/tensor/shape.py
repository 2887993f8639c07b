"""Tensor shape descriptor."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from ..errors import InvalidInputError


@dataclass(frozen=True)
class Shape:
    """Ordered, immutable list of non-negative dimension sizes."""

    dims: tuple[int, ...] = ()

    def __post_init__(self) -> None:
        dims = tuple(self.dims)
        for d in dims:
            if isinstance(d, bool) or not isinstance(d, int) or d < 0:
                raise InvalidInputError(f"shape dimensions must be non-negative ints, got {d!r}")
        object.__setattr__(self, "dims", dims)

    @classmethod
    def of(cls, dims: Shape | Iterable[int]) -> Shape:
        if isinstance(dims, Shape):
            return dims
        return cls(tuple(dims))

    @classmethod
    def scalar(cls) -> Shape:
        return cls(())

    @classmethod
    def vector(cls, n: int) -> Shape:
        return cls((n,))

    @classmethod
    def matrix(cls, rows: int, cols: int) -> Shape:
        return cls((rows, cols))

    def rank(self) -> int:
        return len(self.dims)

    def num_elements(self) -> int:
        n = 1
        for d in self.dims:
            n *= d
        return n

    def is_matrix(self) -> bool:
        return len(self.dims) == 2

    @property
    def rows(self) -> int | None:
        return self.dims[0] if self.is_matrix() else None

    @property
    def cols(self) -> int | None:
        return self.dims[1] if self.is_matrix() else None

    def __len__(self) -> int:
        return len(self.dims)

    def __iter__(self):
        return iter(self.dims)

    def __getitem__(self, i: int) -> int:
        return self.dims[i]

    def __str__(self) -> str:
        return "[" + ", ".join(str(d) for d in self.dims) + "]"
