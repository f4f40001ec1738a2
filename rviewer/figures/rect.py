"""Axis-aligned rectangles."""

from __future__ import annotations

import xml.etree.ElementTree as ET
from dataclasses import dataclass, field

from rviewer.figures.base import (
    CommonParams,
    Figure,
    Painter,
    add_svg_element,
    aligned_center,
    interpolation_factors,
)
from rviewer.geometry import DrawProperties, Point, Size, SvgParams, Transform
from rviewer.interpolate import InBetweenProperties, interpolate


@dataclass
class RectFigure(Figure):
    """A rectangle given by a reference point, a size and an alignment."""

    center: Point = Point()
    size: Point = Point()
    fill: bool = False
    width: float = 1.0
    alignment: tuple[str, str] = ("C", "C")
    common: CommonParams = field(default_factory=CommonParams)

    @classmethod
    def from_string(cls, s: str, draw_properties: DrawProperties) -> RectFigure:
        from rviewer.params import Params

        params = Params(s)
        center = params.get_point("c")
        size = params.get_point("s")
        fill = params.get_bool("f")
        width = params.get_float("w")
        alignment = params.get_chars("a")
        return cls(
            center=Point() if center is None else center,
            size=Point() if size is None else size,
            fill=False if fill is None else fill,
            width=draw_properties.width if width is None else width,
            alignment=("C", "C") if alignment is None else alignment,
            common=CommonParams.from_params(params),
        )

    def _center(self) -> Point:
        return aligned_center(self.center, self.size, self.alignment)

    def draw(self, painter: Painter, scale: float, transform: Transform) -> None:
        center = transform.point(self._center())
        size = Size(self.size.x * scale, self.size.y * scale)
        painter.rect(center, size, self.common.color, self.width, self.fill)

    def draw_on_image(self, img: ET.Element, params: SvgParams) -> ET.Element:
        color = self.color_to_string()
        center = params.transform(self._center())
        attributes = {
            "x": center.x - self.size.x / 2.0,
            "y": params.size.height - (center.y + self.size.y / 2.0),
            "width": self.size.x,
            "height": self.size.y,
            "stroke-width": self.width * params.width_scale,
            "opacity": self.common.color.opacity,
        }
        if self.fill:
            attributes["fill"] = color
        else:
            attributes["fill"] = "none"
            attributes["stroke"] = color
        add_svg_element(img, "rect", attributes)
        return img

    def in_betweens(self, other: Figure, properties: InBetweenProperties) -> list[RectFigure]:
        if not isinstance(other, RectFigure):
            raise TypeError(f"cannot blend a rectangle into {type(other).__name__}")
        return [
            RectFigure(
                center=interpolate(self.center, other.center, k),
                size=interpolate(self.size, other.size, k),
                fill=self.fill,
                width=interpolate(self.width, other.width, k),
                alignment=self.alignment,
                common=self.common.interpolate(other.common, k),
            )
            for k in interpolation_factors(other.common, properties)
        ]