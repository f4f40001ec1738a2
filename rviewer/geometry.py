"""Geometric values, colours and coordinate transforms shared by the viewer."""

from __future__ import annotations

import math
from dataclasses import dataclass
from decimal import Decimal
from typing import Callable


@dataclass(frozen=True)
class Point:
    """A point in the plane."""

    x: float = 0.0
    y: float = 0.0

    def distance(self, other: Point) -> float:
        """Euclidean distance to another point."""
        return math.hypot(self.x - other.x, self.y - other.y)


@dataclass(frozen=True)
class Size:
    """A width and a height."""

    width: float = 0.0
    height: float = 0.0


@dataclass(frozen=True)
class Color:
    """An 8-bit RGBA colour."""

    r: int
    g: int
    b: int
    a: int = 255

    def __post_init__(self) -> None:
        for name in ("r", "g", "b", "a"):
            value = getattr(self, name)
            if not 0 <= value <= 255:
                raise ValueError(f"colour channel {name}={value} is outside 0..255")

    @property
    def opacity(self) -> float:
        """The alpha channel as a fraction between 0 and 1."""
        return self.a / 255

    def to_rgb_string(self) -> str:
        """The colour in SVG ``rgb(r, g, b)`` notation, without alpha."""
        return f"rgb({self.r}, {self.g}, {self.b})"


BLACK = Color(0, 0, 0)


def format_number(value: float) -> str:
    """Format a number the shortest exact way, never in exponent notation."""
    if isinstance(value, int):
        return str(value)
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"
    text = format(Decimal(repr(value)), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


@dataclass(frozen=True)
class Transform:
    """Maps scene coordinates to screen coordinates."""

    screen_transform: Callable[[Point], Point]
    shift: Size
    data_size: Size
    flipy: bool

    def point(self, p: Point) -> Point:
        """Shift the point, flip it unless ``flipy`` is set, then map it to the screen."""
        x = p.x + self.shift.width
        y = p.y + self.shift.height
        if not self.flipy:
            y = self.data_size.height - y
        return self.screen_transform(Point(x, y))


@dataclass(frozen=True)
class SvgParams:
    """What a figure needs to know to draw itself into an SVG image."""

    size: Size
    width_scale: float
    flipy: bool
    transform: Callable[[Point], Point]


@dataclass
class DrawProperties:
    """Defaults in effect while a scene description is being read."""

    width: float = 1.0
    font: float = 1.0
    was_messages: int = 0