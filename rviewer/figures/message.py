"""Status messages shown in the corner of the screen."""

from __future__ import annotations

from dataclasses import dataclass, field

from rviewer.figures.base import CommonParams, Figure, FontFamily, Painter
from rviewer.geometry import Color, DrawProperties, Point, SvgParams, Transform

MESSAGE_FONT_SIZE = 10.0
MESSAGE_COLOR = Color(255, 255, 255)


@dataclass
class MessageFigure(Figure):
    """One line of text stacked under the earlier messages of the same frame."""

    message_ind: int = 0
    text: str = ""
    common: CommonParams = field(default_factory=CommonParams)

    @classmethod
    def from_string(cls, s: str, draw_properties: DrawProperties) -> MessageFigure:
        message = cls(message_ind=draw_properties.was_messages, text=s[4:])
        draw_properties.was_messages += 1
        return message

    def draw(self, painter: Painter, scale: float, transform: Transform) -> None:
        size = painter.text_size(self.text, MESSAGE_FONT_SIZE, FontFamily.MONOSPACE)
        position = Point(0.0, self.message_ind * size.height)
        painter.text(self.text, position, MESSAGE_FONT_SIZE, MESSAGE_COLOR, FontFamily.MONOSPACE)

    def draw_on_image(self, img, params: SvgParams):
        """Messages are screen-only; the image is returned unchanged."""
        return img