"""Circles, arcs and pie slices."""

from __future__ import annotations

import math
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


def _normalize_angle(angle: float) -> float:
    """Bring an angle into the range (-pi, pi]."""
    while angle <= -math.pi:
        angle += 2 * math.pi
    while angle > math.pi:
        angle -= 2 * math.pi
    return angle


@dataclass
class CircleFigure(Figure):
    """A circle, or an arc of one when ``arc`` holds start and end angles."""

    center: Point = Point()
    radius: float = 1.0
    fill: bool = False
    width: float = 1.0
    arc: tuple[float, float] | None = None
    common: CommonParams = field(default_factory=CommonParams)

    @classmethod
    def from_string(cls, s: str, draw_properties: DrawProperties) -> CircleFigure:
        params = Params(s)
        center = params.get_point("c")
        radius = params.get_float("r")
        fill = params.get_bool("f")
        width = params.get_float("w")
        arc = params.get_pair("arc")
        return cls(
            center=Point() if center is None else center,
            radius=1.0 if radius is None else radius,
            fill=False if fill is None else fill,
            width=draw_properties.width if width is None else width,
            arc=None if arc is None else (_normalize_angle(arc[0]), _normalize_angle(arc[1])),
            common=CommonParams.from_params(params),
        )

    def flipped_arc(self, flipy: bool) -> tuple[float, float] | None:
        """The arc's angles as drawn; without ``flipy`` they are mirrored and swapped."""
        if self.arc is None:
            return None
        start, end = self.arc
        if not flipy:
            start, end = -end, -start
        return start, end

    def draw(self, painter: Painter, scale: float, transform: Transform) -> None:
        center = transform.point(self.center)
        radius = self.radius * scale
        color = self.common.color
        arc = self.flipped_arc(transform.flipy)
        if arc is None:
            painter.circle(center, radius, color, self.width, self.fill)
            return
        start, end = arc
        extent = end - start
        if extent < 0:
            extent += 2 * math.pi
        painter.arc(center, radius, start, extent, color, self.width, self.fill)

    def draw_on_image(self, img: ET.Element, params: SvgParams) -> ET.Element:
        center = params.transform(self.center)
        color = self.color_to_string()
        opacity = self.common.color.opacity
        radius = self.radius
        stroke_width = self.width * params.width_scale
        cx = center.x
        cy = params.size.height - center.y

        arc = self.flipped_arc(params.flipy)
        if arc is None:
            attributes = {
                "cx": cx,
                "cy": cy,
                "r": radius,
                "stroke-width": stroke_width,
                "opacity": opacity,
            }
            if self.fill:
                attributes["fill"] = color
            else:
                attributes["fill"] = "none"
                attributes["stroke"] = color
            add_svg_element(img, "circle", attributes)
            return img

        start, end = arc
        sx, sy = cx + radius * math.cos(start), cy + radius * math.sin(start)
        ex, ey = cx + radius * math.cos(end), cy + radius * math.sin(end)
        delta = math.fmod(end - start + 2 * math.pi, 2 * math.pi)
        large_arc = 1 if delta > math.pi else 0
        sweep = 1
        n = format_number
        data = (
            f"M{n(sx)},{n(sy)} "
            f"A{n(radius)},{n(radius)},0,{large_arc},{sweep},{n(ex)},{n(ey)}"
        )
        if self.fill:
            data += f" L{n(cx)},{n(cy)} z"

        attributes = {"d": data, "opacity": opacity}
        if self.fill:
            attributes["fill"] = color
            attributes["stroke"] = "none"
        else:
            attributes["fill"] = "none"
            attributes["stroke"] = color
            attributes["stroke-width"] = stroke_width
        add_svg_element(img, "path", attributes)
        return img

    def in_betweens(self, other: Figure, properties: InBetweenProperties) -> list[CircleFigure]:
        if not isinstance(other, CircleFigure):
            raise TypeError(f"cannot blend a circle into {type(other).__name__}")
        return [
            CircleFigure(
                center=interpolate(self.center, other.center, k),
                radius=interpolate(self.radius, other.radius, k),
                fill=self.fill,
                width=interpolate(self.width, other.width, k),
                arc=(
                    interpolate(self.arc, other.arc, k)
                    if self.arc is not None and other.arc is not None
                    else None
                ),
                common=self.common.interpolate(other.common, k),
            )
            for k in interpolation_factors(other.common, properties)
        ]