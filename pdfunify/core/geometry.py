"""Page boxes and affine transforms used by the container model."""

from __future__ import annotations

from typing import Any, NamedTuple, Sequence

from pypdf import Transformation

from ..exceptions import PreconditionError
from .utils import format_number

__all__ = [
    "Box",
    "scaling",
    "transform_points",
    "content_matrix_operator",
]


class Box(NamedTuple):
    """Axis aligned page rectangle expressed in default user space units."""

    left: float
    bottom: float
    right: float
    top: float

    @classmethod
    def from_array(cls, values: Sequence[Any]) -> "Box":
        """Build a normalized box from a PDF rectangle array.

        Any two diagonally opposite corners are accepted, the result always
        has ``left <= right`` and ``bottom <= top``.
        """

        if len(values) != 4:
            raise PreconditionError(f"Rectangle requires 4 numbers, got {len(values)}")
        try:
            x0, y0, x1, y1 = (float(value) for value in values)
        except (TypeError, ValueError) as exc:
            raise PreconditionError(f"Rectangle contains a non-numeric value: {values!r}") from exc
        return cls(min(x0, x1), min(y0, y1), max(x0, x1), max(y0, y1))

    @property
    def width(self) -> float:
        return self.right - self.left

    @property
    def height(self) -> float:
        return self.top - self.bottom

    def to_array(self) -> list[float]:
        return [float(self.left), float(self.bottom), float(self.right), float(self.top)]

    def transformed(self, transformation: Transformation) -> "Box":
        corners = [
            transformation.apply_on((self.left, self.bottom)),
            transformation.apply_on((self.left, self.top)),
            transformation.apply_on((self.right, self.bottom)),
            transformation.apply_on((self.right, self.top)),
        ]
        xs = [x for x, _ in corners]
        ys = [y for _, y in corners]
        return Box(min(xs), min(ys), max(xs), max(ys))


def scaling(factor: float) -> Transformation:
    """Return an isotropic scale about the origin."""

    return Transformation().scale(factor, factor)


def transform_points(values: Sequence[Any], transformation: Transformation) -> list[float]:
    """Map a flat ``[x1, y1, x2, y2, ...]`` coordinate list through *transformation*."""

    if len(values) % 2:
        raise PreconditionError("Point list must contain an even number of coordinates")
    mapped: list[float] = []
    for index in range(0, len(values), 2):
        mapped.extend(transformation.apply_on((float(values[index]), float(values[index + 1]))))
    return mapped


def content_matrix_operator(transformation: Transformation) -> bytes:
    """Return the ``cm`` operator that concatenates *transformation* to the CTM."""

    operands = " ".join(format_number(value) for value in transformation.ctm)
    return f"{operands} cm".encode("ascii")
