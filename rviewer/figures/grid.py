"""Rectangular grids of lines."""

from __future__ import annotations

import math
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
from rviewer.geometry import DrawProperties, Point, SvgParams, Transform
from rviewer.interpolate import InBetweenProperties, interpolate
from rviewer.params import Params


def _step(length: float, count: int) -> float:
    return length / count if count else math.nan


@dataclass
class GridFigure(Figure):
    """A box divided into ``dims`` columns and rows."""

    center: Point = Point()
    size: Point = Point()
    dims: tuple[int, int] = (1, 1)
    width: float = 1.0
    alignment: tuple[str, str] = ("C", "C")
    common: CommonParams = field(default_factory=CommonParams)

    @classmethod
    def from_string(cls, s: str, draw_properties: DrawProperties) -> GridFigure:
        params = Params(s)
        center = params.get_point("c")
        size = params.get_point("s")
        dims = params.get_int_pair("d")
        width = params.get_float("w")
        alignment = params.get_chars("a")
        return cls(
            center=Point() if center is None else center,
            size=Point() if size is None else size,
            dims=(1, 1) if dims is None else dims,
            width=draw_properties.width if width is None else width,
            alignment=("C", "C") if alignment is None else alignment,
            common=CommonParams.from_params(params),
        )

    def _center(self) -> Point:
        return aligned_center(self.center, self.size, self.alignment)

    def draw(self, painter: Painter, scale: float, transform: Transform) -> None:
        center = transform.point(self._center())
        sx, sy = self.size.x * scale, self.size.y * scale
        left, top = center.x - sx / 2, center.y - sy / 2
        color = self.common.color
        step_x = _step(sx, self.dims[0])
        for i in range(self.dims[0] + 1):
            x = left + step_x * i
            painter.stroke_line(Point(x, top), Point(x, center.y + sy / 2), color, self.width)
        step_y = _step(sy, self.dims[1])
        for i in range(self.dims[1] + 1):
            y = top + step_y * i
            painter.stroke_line(Point(left, y), Point(center.x + sx / 2, y), color, self.width)

    def draw_on_image(self, img: ET.Element, params: SvgParams) -> ET.Element:
        center = params.transform(self._center())
        sx, sy = self.size.x, self.size.y
        height = params.size.height
        style = {
            "stroke-width": self.width * params.width_scale,
            "stroke": self.color_to_string(),
            "opacity": self.common.color.opacity,
        }
        step_x = _step(sx, self.dims[0])
        for i in range(self.dims[0] + 1):
            x = center.x - sx / 2 + step_x * i
            add_svg_element(img, "line", {
                "x1": x,
                "y1": height - (center.y - sy / 2),
                "x2": x,
                "y2": height - (center.y + sy / 2),
                **style,
            })
        step_y = _step(sy, self.dims[1])
        for i in range(self.dims[1] + 1):
            y = height - (center.y - sy / 2 + step_y * i)
            add_svg_element(img, "line", {
                "x1": center.x - sx / 2,
                "y1": y,
                "x2": center.x + sx / 2,
                "y2": y,
                **style,
            })
        return img

    def in_betweens(self, other: Figure, properties: InBetweenProperties) -> list[GridFigure]:
        if not isinstance(other, GridFigure):
            raise TypeError(f"cannot blend a grid into {type(other).__name__}")
        return [
            GridFigure(
                center=interpolate(self.center, other.center, k),
                size=interpolate(self.size, other.size, k),
                dims=interpolate(self.dims, other.dims, k),
                width=interpolate(self.width, other.width, k),
                alignment=self.alignment,
                common=self.common.interpolate(other.common, k),
            )
            for k in interpolation_factors(other.common, properties)
        ]