"""A polyline shape with area, perimeter, bounds and hit testing."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, NamedTuple

from rviewer.geometry import Point


class PathOp(Enum):
    MOVE_TO = "move_to"
    LINE_TO = "line_to"


class PathElement(NamedTuple):
    op: PathOp
    point: Point


class BoundingBox(NamedTuple):
    x0: float
    y0: float
    x1: float
    y1: float


def _triangle_area(a: Point, b: Point, c: Point) -> float:
    return (b.x - a.x) * (c.y - a.y) + (b.y - a.y) * (c.x - a.x)


@dataclass
class Poly:
    """An open sequence of points."""

    points: list[Point] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.points = list(self.points)

    def path_elements(self) -> Iterator[PathElement]:
        """A move to the first point followed by lines to the others."""
        if not self.points:
            raise ValueError("an empty polygon has no path")
        first, *rest = self.points
        yield PathElement(PathOp.MOVE_TO, first)
        for point in rest:
            yield PathElement(PathOp.LINE_TO, point)

    def area(self) -> float:
        origin = self.points[0] if self.points else None
        total = sum(
            _triangle_area(origin, prev, cur)
            for prev, cur in zip(self.points, self.points[1:])
        )
        return abs(total)

    def perimeter(self) -> float:
        return sum(prev.distance(cur) for prev, cur in zip(self.points, self.points[1:]))

    def bounding_box(self) -> BoundingBox:
        if not self.points:
            raise ValueError("an empty polygon has no bounding box")
        xs = [p.x for p in self.points]
        ys = [p.y for p in self.points]
        return BoundingBox(min(xs), min(ys), max(xs), max(ys))

    def winding(self, p: Point) -> int:
        """1 if ``p`` lies inside the polygon, else 0."""
        closing = self.points[1:] + self.points[:1]
        total = sum(_triangle_area(p, a, b) for a, b in zip(self.points, closing))
        return 1 if abs(abs(total) - self.area()) < 1e-7 else 0