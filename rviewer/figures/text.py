"""Text labels."""

from __future__ import annotations

import xml.etree.ElementTree as ET
from dataclasses import dataclass, field

from rviewer.figures.base import (
    CommonParams,
    Figure,
    FontFamily,
    Painter,
    add_svg_element,
    interpolation_factors,
)
from rviewer.geometry import DrawProperties, Point, SvgParams, Transform
from rviewer.interpolate import InBetweenProperties, interpolate
from rviewer.params import Params

# Share of the font size used for vertical alignment.
K_VERTICAL_AL = 0.5


def _extract_message(s: str) -> tuple[str, str]:
    """Split the ``m=`` value out of a line; returns the text and the rest of the line."""
    error = f"Can't parse text from string [{s}]"
    i = s.find("m=", 0, max(len(s) - 1, 0))
    if i < 0:
        return "", s
    if i == 0:
        raise ValueError(error)
    if s[i + 2] == '"':
        end = s.find('"', i + 3)
        if end < 0:
            raise ValueError(error)
        text = s[i + 3:end]
        j = end + 1
    else:
        end = s.find(" ", i + 2)
        j = len(s) if end < 0 else end
        text = s[i + 2:j]
    return text.replace(";", "\n"), s[:i - 1] + s[j:]


@dataclass
class TextFigure(Figure):
    """A piece of text anchored at ``center``; ';' in the source line starts a new line."""

    center: Point = Point()
    text: str = ""
    font: float = 1.0
    alignment: tuple[str, str] = ("C", "C")
    common: CommonParams = field(default_factory=CommonParams)

    @classmethod
    def from_string(cls, s: str, draw_properties: DrawProperties) -> TextFigure:
        text, rest = _extract_message(s)
        params = Params(rest)
        center = params.get_point("c")
        font = params.get_float("s")
        alignment = params.get_chars("a")
        return cls(
            center=Point() if center is None else center,
            text=text,
            font=draw_properties.font if font is None else font,
            alignment=("C", "C") if alignment is None else alignment,
            common=CommonParams.from_params(params),
        )

    def draw(self, painter: Painter, scale: float, transform: Transform) -> None:
        font = self.font * scale
        size = painter.text_size(self.text, font, FontFamily.SYSTEM_UI)
        center = transform.point(self.center)
        x, y = center.x, center.y
        if self.alignment[0] == "B":
            x += size.width / 2
        elif self.alignment[0] == "E":
            x -= size.width / 2
        if self.alignment[1] == "B":
            y -= font * K_VERTICAL_AL
        elif self.alignment[1] == "E":
            y += font * K_VERTICAL_AL
        position = Point(x - size.width / 2, y - size.height / 2)
        painter.text(self.text, position, font, self.common.color, FontFamily.SYSTEM_UI)

    def draw_on_image(self, img: ET.Element, params: SvgParams) -> ET.Element:
        center = params.transform(self.center)
        y = params.size.height - center.y + self.font * 0.4
        if self.alignment[1] == "B":
            y -= self.font * K_VERTICAL_AL
        elif self.alignment[1] == "E":
            y += self.font * K_VERTICAL_AL
        anchor = {"B": "start", "C": "middle"}.get(self.alignment[0], "end")
        element = add_svg_element(img, "text", {
            "x": center.x,
            "y": y,
            "fill": self.color_to_string(),
            "font-size": self.font,
            "text-anchor": anchor,
            "opacity": self.common.color.opacity,
            "font-family": "system-ui",
        })
        element.text = self.text
        return img

    def in_betweens(self, other: Figure, properties: InBetweenProperties) -> list[TextFigure]:
        if not isinstance(other, TextFigure):
            raise TypeError(f"cannot blend a text into {type(other).__name__}")
        longer = self.text if len(self.text) > len(other.text) else other.text
        return [
            TextFigure(
                center=interpolate(self.center, other.center, k),
                text=longer[:interpolate(len(self.text), len(other.text), k)],
                font=interpolate(self.font, other.font, k),
                alignment=self.alignment,
                common=self.common.interpolate(other.common, k),
            )
            for k in interpolation_factors(other.common, properties)
        ]