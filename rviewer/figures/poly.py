"""Polylines and filled polygons."""

from __future__ import annotations

import xml.etree.ElementTree as ET
from dataclasses import dataclass, field

from rviewer.figures.base import (
    CommonParams,
    Figure,
    Painter,
    add_svg_element,
    interpolation_factors,
)
from rviewer.geometry import DrawProperties, Point, SvgParams, Transform, format_number
from rviewer.interpolate import InBetweenProperties, interpolate
from rviewer.params import Params


@dataclass
class PolyFigure(Figure):
    """A chain of points, drawn as an outline or filled as a polygon."""

    points: list[Point] = field(default_factory=list)
    fill: bool = False
    width: float = 1.0
    common: CommonParams = field(default_factory=CommonParams)

    @classmethod
    def from_string(cls, s: str, draw_properties: DrawProperties) -> PolyFigure:
        params = Params(s)
        points = params.get_points("p")
        fill = params.get_bool("f")
        width = params.get_float("w")
        return cls(
            points=[] if points is None else points,
            fill=False if fill is None else fill,
            width=draw_properties.width if width is None else width,
            common=CommonParams.from_params(params),
        )

    def draw(self, painter: Painter, scale: float, transform: Transform) -> None:
        points = [transform.point(p) for p in self.points]
        painter.polygon(points, self.common.color, self.width, self.fill)

    def draw_on_image(self, img: ET.Element, params: SvgParams) -> ET.Element:
        color = self.color_to_string()
        height = params.size.height
        points = " ".join(
            f"{format_number(p.x)},{format_number(height - p.y)}"
            for p in map(params.transform, self.points)
        )
        attributes = {
            "points": points,
            "stroke-width": self.width * params.width_scale,
            "opacity": self.common.color.opacity,
        }
        if self.fill:
            attributes["fill"] = color
            add_svg_element(img, "polygon", attributes)
        else:
            attributes["stroke"] = color
            attributes["fill"] = "none"
            add_svg_element(img, "polyline", attributes)
        return img

    def in_betweens(self, other: Figure, properties: InBetweenProperties) -> list[PolyFigure]:
        if not isinstance(other, PolyFigure):
            raise TypeError(f"cannot blend a polygon into {type(other).__name__}")
        if len(other.points) < len(self.points):
            raise ValueError(
                f"cannot blend {len(self.points)} points into {len(other.points)} points"
            )
        return [
            PolyFigure(
                points=[interpolate(a, b, k) for a, b in zip(self.points, other.points)],
                fill=self.fill,
                width=interpolate(self.width, other.width, k),
                common=self.common.interpolate(other.common, k),
            )
            for k in interpolation_factors(other.common, properties)
        ]