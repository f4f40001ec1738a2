"""Straight line segments."""

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
from rviewer.geometry import DrawProperties, Point, SvgParams, Transform
from rviewer.interpolate import InBetweenProperties, interpolate
from rviewer.params import Params


@dataclass
class LineFigure(Figure):
    """A segment from ``start`` to ``finish``."""

    start: Point = Point()
    finish: Point = Point()
    width: float = 1.0
    common: CommonParams = field(default_factory=CommonParams)

    @classmethod
    def from_string(cls, s: str, draw_properties: DrawProperties) -> LineFigure:
        params = Params(s)
        start = params.get_point("s")
        finish = params.get_point("f")
        width = params.get_float("w")
        return cls(
            start=Point() if start is None else start,
            finish=Point() if finish is None else finish,
            width=draw_properties.width if width is None else width,
            common=CommonParams.from_params(params),
        )

    def draw(self, painter: Painter, scale: float, transform: Transform) -> None:
        painter.stroke_line(
            transform.point(self.start),
            transform.point(self.finish),
            self.common.color,
            self.width,
        )

    def draw_on_image(self, img: ET.Element, params: SvgParams) -> ET.Element:
        start = params.transform(self.start)
        finish = params.transform(self.finish)
        add_svg_element(img, "line", {
            "x1": start.x,
            "y1": params.size.height - start.y,
            "x2": finish.x,
            "y2": params.size.height - finish.y,
            "stroke-width": self.width * params.width_scale,
            "stroke": self.color_to_string(),
            "opacity": self.common.color.opacity,
        })
        return img

    def in_betweens(self, other: Figure, properties: InBetweenProperties) -> list[LineFigure]:
        if not isinstance(other, LineFigure):
            raise TypeError(f"cannot blend a line into {type(other).__name__}")
        return [
            LineFigure(
                start=interpolate(self.start, other.start, k),
                finish=interpolate(self.finish, other.finish, k),
                width=interpolate(self.width, other.width, k),
                common=self.common.interpolate(other.common, k),
            )
            for k in interpolation_factors(other.common, properties)
        ]