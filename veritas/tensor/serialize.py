"""Plain-dict serialization of tensors for an external persistence layer.

Each element is encoded as ``{"state", "value", "cause"}`` (Circles as
``{"real": ..., "imag": ...}``) so Undefined causes survive a round trip.
Infinite and Transfinite payloads are stored as the strings ``"inf"`` or
``"-inf"``, which keeps the output JSON-safe.

Round-trip property (tested): ``tensor_from_dict(tensor_to_dict(t)) == t``.
"""

from __future__ import annotations

import math
from typing import Any, Mapping

from ..errors import InvalidInputError
from ..numeric.circle import Circle
from ..numeric.lattice import State, UndefinedCause
from ..numeric.scalar import Scalar
from .tensor import CIRCLE_KIND, SCALAR_KIND, Tensor


def scalar_to_dict(s: Scalar) -> dict[str, Any]:
    value: float | str = s.value
    if math.isinf(s.value):
        value = "inf" if s.value > 0 else "-inf"
    return {
        "state": s.state.value,
        "value": value,
        "cause": s.cause.value if s.cause is not None else None,
    }


def scalar_from_dict(d: Mapping[str, Any]) -> Scalar:
    try:
        state = State(d["state"])
        cause = UndefinedCause(d["cause"]) if d.get("cause") is not None else None
        value = float(d["value"])
    except (KeyError, ValueError, TypeError) as exc:
        raise InvalidInputError(f"malformed scalar record {dict(d)!r}: {exc}") from exc
    return Scalar(state, value, cause)


def tensor_to_dict(t: Tensor) -> dict[str, Any]:
    if t.kind == CIRCLE_KIND:
        values = [{"real": scalar_to_dict(v.real), "imag": scalar_to_dict(v.imag)} for v in t.values]
    else:
        values = [scalar_to_dict(v) for v in t.values]
    return {
        "dims": list(t.shape.dims),
        "kind": t.kind,
        "requires_grad": t.requires_grad,
        "values": values,
    }


def tensor_from_dict(d: Mapping[str, Any]) -> Tensor:
    """Deserialize a dict produced by ``tensor_to_dict``. Raises ``InvalidInputError`` on bad input."""
    try:
        dims = d["dims"]
        raw_values = d["values"]
    except KeyError as exc:
        raise InvalidInputError(f"tensor record is missing {exc}") from exc
    kind = d.get("kind", SCALAR_KIND)
    if kind == CIRCLE_KIND:
        values: list[Any] = [
            Circle(scalar_from_dict(v["real"]), scalar_from_dict(v["imag"])) for v in raw_values
        ]
    elif kind == SCALAR_KIND:
        values = [scalar_from_dict(v) for v in raw_values]
    else:
        raise InvalidInputError(f"unknown tensor kind {kind!r}")
    return Tensor(values, dims, requires_grad=bool(d.get("requires_grad", False)), kind=kind)
