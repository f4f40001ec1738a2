"""Reading a scene description: figures, frames, tags and display settings."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Iterable

from rviewer.figures.base import Figure
from rviewer.figures.circle import CircleFigure
from rviewer.figures.grid import GridFigure
from rviewer.figures.line import LineFigure
from rviewer.figures.message import MessageFigure
from rviewer.figures.poly import PolyFigure
from rviewer.figures.rect import RectFigure
from rviewer.figures.text import TextFigure
from rviewer.geometry import DrawProperties, Size
from rviewer.interpolate import InBetweenProperties

_FIGURE_TYPES = (
    ("rect", RectFigure),
    ("circle", CircleFigure),
    ("line", LineFigure),
    ("grid", GridFigure),
    ("poly", PolyFigure),
    ("text", TextFigure),
    ("msg", MessageFigure),
)

_COUNT_RE = re.compile(r"\+?[0-9]+")


def _number(text: str, what: str) -> float:
    if not text or text != text.strip() or "_" in text:
        raise ValueError(f"can't parse {what} from {text!r}")
    try:
        return float(text)
    except ValueError:
        raise ValueError(f"can't parse {what} from {text!r}") from None


def _pair(line: str, skip: int, what: str) -> Size:
    line = line.strip()
    parts = line[skip:len(line) - 1].split(",")
    if len(parts) < 2:
        raise ValueError(f"can't parse {what} from {line!r}")
    return Size(_number(parts[0], what), _number(parts[1], what))


def parse_figure(s: str, draw_properties: DrawProperties) -> Figure | None:
    """The figure a line describes, or None if it is not a figure."""
    for prefix, kind in _FIGURE_TYPES:
        if s.startswith(prefix):
            return kind.from_string(s, draw_properties)
    return None


def in_betweens(a: Figure, b: Figure, properties: InBetweenProperties) -> list[Figure]:
    """Figures for the frames between ``a`` and ``b``."""
    return list(a.in_betweens(b, properties))


@dataclass
class Scene:
    """All figures and the frames they appear in, built line by line."""

    objects: list[Figure] = field(default_factory=list)
    frames: list[list[int]] = field(default_factory=list)
    fps_speed: float = 0.033
    size: Size = Size(10.0, 10.0)
    tags: list[tuple[str, bool]] = field(default_factory=list)
    draw_properties: DrawProperties = field(default_factory=DrawProperties)
    svg_width_scale: float = 0.3
    flipy: bool = False
    shift: Size = Size(0.0, 0.0)
    finished: bool = False
    in_between_properties: InBetweenProperties = field(default_factory=InBetweenProperties)
    unparsed: int = 0
    _init_frame: list[int] = field(default_factory=list, repr=False)
    _last_frame: list[int] = field(default_factory=list, repr=False)
    _initial_tick: bool = field(default=True, repr=False)
    _known_tags: set[str] = field(default_factory=set, repr=False)
    _disabled_tags: set[str] = field(default_factory=set, repr=False)

    def feed_line(self, line: str) -> None:
        """Apply one line of the scene description."""
        if line.startswith("tick"):
            if self._initial_tick:
                self._init_frame = list(self._last_frame)
            else:
                self.add_frame(self._last_frame)
            self._last_frame = list(self._init_frame)
            self.draw_properties.was_messages = 0
            self._initial_tick = False
        elif line.startswith("speed"):
            self.fps_speed = 1.0 / _number(line[6:].strip(), "speed")
        elif line.startswith("width"):
            self.draw_properties.width = _number(line[6:].strip(), "width")
        elif line.startswith("font"):
            self.draw_properties.font = _number(line[5:].strip(), "font")
        elif line.startswith("size"):
            self.size = _pair(line, 6, "size")
        elif line.startswith("shift"):
            self.shift = _pair(line, 7, "shift")
        elif line.startswith("svgwidth"):
            self.svg_width_scale = _number(line[9:].strip(), "svgwidth")
        elif line.startswith("flipy"):
            self.flipy = True
        elif line.startswith("disable "):
            tag = line[8:].strip()
            self.tags = [(name, False if name == tag else on) for name, on in self.tags]
            self._disabled_tags.add(tag)
        elif line.startswith("in_betweens"):
            count = line[12:]
            if not _COUNT_RE.fullmatch(count):
                raise ValueError(f"can't parse in_betweens from {count!r}")
            self.in_between_properties.set_frames(int(count))
        elif line.startswith("setfunc"):
            words = line.split()[1:]
            if not words:
                raise ValueError("setfunc needs a name")
            name, *values = words
            self.in_between_properties.funcs[name] = [_number(v, "setfunc") for v in values]
        else:
            self._add_figure(line)

    def _add_figure(self, line: str) -> None:
        figure = parse_figure(line, self.draw_properties)
        if figure is None:
            self.unparsed += 1
            return
        for tag in figure.tags:
            if tag not in self._known_tags:
                self._known_tags.add(tag)
                self.tags.append((tag, tag not in self._disabled_tags))
        index = len(self.objects)
        self._last_frame.append(index)
        if figure.keep:
            self._init_frame.append(index)
        self.objects.append(figure)

    def add_frame(self, frame: list[int]) -> None:
        """Append a frame, preceded by in-between frames for figures with matching ids."""
        steps = self.in_between_properties.frames
        if steps == 1 or not self.frames:
            self.frames.append(list(frame))
            return
        previous: dict[int, int] = {}
        between: list[list[int]] = [[] for _ in range(steps - 1)]
        for item in self.frames[-1]:
            figure_id = self.objects[item].id
            if figure_id is not None:
                previous[figure_id] = item
            else:
                for step in between:
                    step.append(item)
        for item in frame:
            figure_id = self.objects[item].id
            if figure_id is None or figure_id not in previous:
                continue
            blended = in_betweens(self.objects[previous[figure_id]], self.objects[item],
                                  self.in_between_properties)
            if not blended:
                continue
            if len(blended) != steps - 1:
                raise ValueError(f"expected {steps - 1} in-between figures, got {len(blended)}")
            for step, figure in zip(between, blended):
                step.append(len(self.objects))
                self.objects.append(figure)
        self.frames.extend(between)
        self.frames.append(list(frame))

    def finish(self) -> None:
        """Close the last frame; the scene is complete afterwards."""
        self.add_frame(self._last_frame)
        self.finished = True

    def enabled_tags(self) -> set[str]:
        return {name for name, on in self.tags if on}

    def set_tag(self, tag: str, enabled: bool) -> None:
        """Switch a known tag on or off."""
        if tag not in self._known_tags:
            raise KeyError(tag)
        self.tags = [(name, enabled if name == tag else on) for name, on in self.tags]


def read_scene(lines: Iterable[str]) -> Scene:
    """Build a complete scene from the lines of a description."""
    scene = Scene()
    for line in lines:
        if line.endswith("\n"):
            line = line[:-1]
            if line.endswith("\r"):
                line = line[:-1]
        scene.feed_line(line)
    scene.finish()
    return scene