"""Common parameters, the painting surface and the base of all figures."""

from __future__ import annotations

import xml.etree.ElementTree as ET
from abc import ABC, abstractmethod
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Sequence

from rviewer.geometry import BLACK, Color, Point, Size, SvgParams, Transform, format_number
from rviewer.interpolate import InBetweenProperties, interpolate
from rviewer.params import Params


def _or(value: Any, default: Any) -> Any:
    return default if value is None else value


@dataclass
class CommonParams:
    """Attributes every figure shares: colour, tags, keep flag, id and easing name."""

    color: Color = BLACK
    tags: list[str] = field(default_factory=list)
    keep: bool = False
    id: int | None = None
    func: str | None = None

    @classmethod
    def from_params(cls, params: Params) -> CommonParams:
        return cls(
            color=_or(params.get_color("col"), BLACK),
            tags=_or(params.get_list("t"), []),
            keep=_or(params.get_bool("k"), False),
            id=params.get_int("id"),
            func=params.get_str("fu"),
        )

    def interpolate(self, other: CommonParams, k: float) -> CommonParams:
        """Only the colour moves; everything else stays as in ``self``."""
        return replace(self, color=interpolate(self.color, other.color, k), tags=list(self.tags))


def interpolation_factors(other: CommonParams, properties: InBetweenProperties) -> list[float]:
    """The easing factors for the frames leading up to a figure with ``other`` params."""
    count = properties.frames - 1
    func = properties.func_for(other.func)
    if len(func) < count:
        raise ValueError(f"easing has {len(func)} values, {count} are needed")
    return list(func[:count])


def aligned_center(center: Point, size: Point, alignment: tuple[str, str]) -> Point:
    """Move a box's reference point to its centre: 'B' anchors at the start, 'E' at the end."""
    x, y = center.x, center.y
    if alignment[0] == "B":
        x += size.x / 2
    elif alignment[0] == "E":
        x -= size.x / 2
    if alignment[1] == "B":
        y += size.y / 2
    elif alignment[1] == "E":
        y -= size.y / 2
    return Point(x, y)


def add_svg_element(img: ET.Element, tag: str, attributes: dict[str, Any]) -> ET.Element:
    """Append an element to an SVG tree, formatting numbers compactly."""
    formatted = {
        key: format_number(value) if isinstance(value, (int, float)) and not isinstance(value, bool) else str(value)
        for key, value in attributes.items()
    }
    return ET.SubElement(img, tag, formatted)


class FontFamily(Enum):
    SYSTEM_UI = "system-ui"
    SANS_SERIF = "sans-serif"
    MONOSPACE = "monospace"


@dataclass(frozen=True)
class DrawOp:
    kind: str
    params: dict[str, Any]


class Painter:
    """A drawing surface that records what is painted on it.

    Screen back ends override the methods; this base keeps a display list.
    """

    def __init__(self) -> None:
        self.operations: list[DrawOp] = []

    def _record(self, kind: str, **params: Any) -> None:
        self.operations.append(DrawOp(kind, params))

    def stroke_line(self, start: Point, end: Point, color: Color, width: float) -> None:
        self._record("line", start=start, end=end, color=color, width=width)

    def rect(self, center: Point, size: Size, color: Color, width: float, fill: bool) -> None:
        self._record("rect", center=center, size=size, color=color, width=width, fill=fill)

    def circle(self, center: Point, radius: float, color: Color, width: float, fill: bool) -> None:
        self._record("circle", center=center, radius=radius, color=color, width=width, fill=fill)

    def arc(
        self,
        center: Point,
        radius: float,
        start: float,
        extent: float,
        color: Color,
        width: float,
        fill: bool,
    ) -> None:
        """An arc from angle ``start`` sweeping ``extent`` radians; filled as a pie slice."""
        self._record(
            "arc", center=center, radius=radius, start=start, extent=extent,
            color=color, width=width, fill=fill,
        )

    def polygon(self, points: Sequence[Point], color: Color, width: float, fill: bool) -> None:
        self._record("polygon", points=list(points), color=color, width=width, fill=fill)

    def text_size(self, text: str, font_size: float, family: FontFamily) -> Size:
        """An estimate of the laid-out text's size."""
        lines = text.split("\n")
        longest = max(len(line) for line in lines)
        return Size(longest * font_size * 0.6, len(lines) * font_size * 1.2)

    def text(self, text: str, position: Point, font_size: float, color: Color, family: FontFamily) -> None:
        """Draw text with its top left corner at ``position``."""
        self._record("text", text=text, position=position, font_size=font_size, color=color, family=family)


class Figure(ABC):
    """Something that can be drawn on screen and into an SVG image."""

    common: CommonParams

    @property
    def tags(self) -> list[str]:
        return self.common.tags

    @property
    def keep(self) -> bool:
        return self.common.keep

    @property
    def id(self) -> int | None:
        return self.common.id

    @abstractmethod
    def draw(self, painter: Painter, scale: float, transform: Transform) -> None:
        """Paint the figure on screen."""

    def draw_on_image(self, img: ET.Element, params: SvgParams) -> ET.Element:
        """Add the figure to an SVG tree; figures without an SVG form leave it as it is."""
        return img

    def need_to_draw(self, tags: set[str]) -> bool:
        """Untagged figures are always drawn, tagged ones if any tag is enabled."""
        return not self.tags or any(tag in tags for tag in self.tags)

    def color_to_string(self) -> str:
        return self.common.color.to_rgb_string()

    def in_betweens(self, other: Figure, properties: InBetweenProperties) -> list[Figure]:
        """Figures for the frames between ``self`` and ``other``; none by default."""
        return []