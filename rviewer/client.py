"""Writing scene descriptions: figures, settings and frame markers as text lines."""

from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from enum import Enum
from typing import Any, ClassVar, Iterable, TextIO

from rviewer.geometry import format_number


class _Kind(Enum):
    FLOAT = "float"
    INT = "int"
    STR = "str"
    BOOL = "bool"
    PAIR = "pair"
    INT_PAIR = "int_pair"
    COLOR = "color"
    ALIGNMENT = "alignment"


def _opt(key: str, kind: _Kind) -> Any:
    return field(default=None, metadata={"key": key, "kind": kind})


def _many(key: str, kind: _Kind) -> Any:
    return field(default_factory=list, metadata={"key": key, "kind": kind})


def _flag(key: str) -> Any:
    return field(default=False, metadata={"key": key, "kind": _Kind.BOOL})


@dataclass(frozen=True)
class Color:
    """An 8-bit RGBA colour as written into a scene."""

    r: int
    g: int
    b: int
    a: int = 255

    def __post_init__(self) -> None:
        for name in ("r", "g", "b", "a"):
            value = getattr(self, name)
            if not 0 <= value <= 255:
                raise ValueError(f"colour channel {name}={value} is outside 0..255")

    @classmethod
    def rgb(cls, r: int, g: int, b: int) -> Color:
        return cls(r, g, b, 255)

    @classmethod
    def rgba(cls, r: int, g: int, b: int, a: int) -> Color:
        return cls(r, g, b, a)

    def with_alpha(self, a: int) -> Color:
        return replace(self, a=a)

    def render(self) -> str:
        """``col=(r,g,b)``, with the alpha channel only when it is not 255."""
        alpha = "" if self.a == 255 else f",{self.a}"
        return f"col=({self.r},{self.g},{self.b}{alpha})"


Color.BLACK = Color(0, 0, 0)
Color.WHITE = Color(255, 255, 255)
Color.RED = Color(255, 0, 0)
Color.GREEN = Color(0, 255, 0)
Color.BLUE = Color(0, 0, 255)
Color.YELLOW = Color(255, 255, 0)
Color.CYAN = Color(0, 255, 255)
Color.MAGENTA = Color(255, 0, 255)
Color.ORANGE = Color(255, 165, 0)


class Alignment(Enum):
    BEGIN = "B"
    CENTER = "C"
    END = "E"

    def to_char(self) -> str:
        return self.value


def _format(kind: _Kind, key: str, value: Any) -> str | None:
    if value is None:
        return None
    if kind is _Kind.BOOL:
        return f"{key}=1" if value else None
    if kind is _Kind.FLOAT:
        return f"{key}={format_number(float(value))}"
    if kind is _Kind.INT:
        return f"{key}={int(value)}"
    if kind is _Kind.STR:
        text = str(value)
        return f'{key}="{text}"' if " " in text else f"{key}={text}"
    if kind is _Kind.PAIR:
        x, y = value
        return f"{key}=({format_number(float(x))},{format_number(float(y))})"
    if kind is _Kind.INT_PAIR:
        a, b = value
        return f"{key}=({int(a)},{int(b)})"
    if kind is _Kind.COLOR:
        return value.render()
    horizontal, vertical = value
    return f"{key}={horizontal.to_char()}{vertical.to_char()}"


class Drawable:
    """A scene element that renders itself as description text."""

    NAME: ClassVar[str | None] = None

    def _tokens(self) -> Iterable[str]:
        for spec in fields(self):
            value = getattr(self, spec.name)
            items = value if isinstance(value, list) else [value]
            for item in items:
                token = _format(spec.metadata["kind"], spec.metadata["key"], item)
                if token is not None:
                    yield token

    def render(self) -> str:
        """The text this element adds to a scene description."""
        tokens = list(self._tokens())
        if self.NAME is None:
            return "".join(f"{token}\n" for token in tokens)
        return f"{self.NAME} {' '.join(tokens)}\n"

    def draw(self, writer: TextIO) -> None:
        writer.write(self.render())


@dataclass
class Init(Drawable):
    """Scene-wide settings, one per line."""

    size: tuple[float, float] | None = _opt("size", _Kind.PAIR)
    shift: tuple[float, float] | None = _opt("shift", _Kind.PAIR)
    font: float | None = _opt("font", _Kind.FLOAT)
    speed: float | None = _opt("speed", _Kind.FLOAT)
    width: float | None = _opt("width", _Kind.FLOAT)
    svg_width: float | None = _opt("svgwidth", _Kind.FLOAT)
    in_betweens: int | None = _opt("in_betweens", _Kind.INT)
    flipy: bool = _flag("flipy")


@dataclass
class Rect(Drawable):
    NAME: ClassVar[str] = "rect"

    center: tuple[float, float] | None = _opt("c", _Kind.PAIR)
    size: tuple[float, float] | None = _opt("s", _Kind.PAIR)
    width: float | None = _opt("w", _Kind.FLOAT)
    fill: bool = _flag("f")
    color: Color | None = _opt("c", _Kind.COLOR)
    alignment: tuple[Alignment, Alignment] | None = _opt("a", _Kind.ALIGNMENT)
    id: int | None = _opt("id", _Kind.INT)
    func: str | None = _opt("fu", _Kind.STR)
    tags: list[str] = _many("t", _Kind.STR)
    keep: bool = _flag("k")


@dataclass
class Circle(Drawable):
    NAME: ClassVar[str] = "circle"

    center: tuple[float, float] | None = _opt("c", _Kind.PAIR)
    radius: float | None = _opt("r", _Kind.FLOAT)
    arc: tuple[float, float] | None = _opt("arc", _Kind.PAIR)
    width: float | None = _opt("w", _Kind.FLOAT)
    fill: bool = _flag("f")
    color: Color | None = _opt("c", _Kind.COLOR)
    id: int | None = _opt("id", _Kind.INT)
    func: str | None = _opt("fu", _Kind.STR)
    tags: list[str] = _many("t", _Kind.STR)
    keep: bool = _flag("k")


@dataclass
class Line(Drawable):
    NAME: ClassVar[str] = "line"

    start: tuple[float, float] | None = _opt("s", _Kind.PAIR)
    finish: tuple[float, float] | None = _opt("f", _Kind.PAIR)
    width: float | None = _opt("w", _Kind.FLOAT)
    color: Color | None = _opt("c", _Kind.COLOR)
    id: int | None = _opt("id", _Kind.INT)
    func: str | None = _opt("fu", _Kind.STR)
    tags: list[str] = _many("t", _Kind.STR)
    keep: bool = _flag("k")


@dataclass
class Grid(Drawable):
    NAME: ClassVar[str] = "grid"

    center: tuple[float, float] | None = _opt("c", _Kind.PAIR)
    size: tuple[float, float] | None = _opt("s", _Kind.PAIR)
    dims: tuple[int, int] | None = _opt("d", _Kind.INT_PAIR)
    width: float | None = _opt("w", _Kind.FLOAT)
    color: Color | None = _opt("c", _Kind.COLOR)
    alignment: tuple[Alignment, Alignment] | None = _opt("a", _Kind.ALIGNMENT)
    id: int | None = _opt("id", _Kind.INT)
    func: str | None = _opt("fu", _Kind.STR)
    tags: list[str] = _many("t", _Kind.STR)
    keep: bool = _flag("k")


@dataclass
class Poly(Drawable):
    NAME: ClassVar[str] = "poly"

    points: list[tuple[float, float]] = _many("p", _Kind.PAIR)
    width: float | None = _opt("w", _Kind.FLOAT)
    fill: bool = _flag("f")
    color: Color | None = _opt("c", _Kind.COLOR)
    alignment: tuple[Alignment, Alignment] | None = _opt("a", _Kind.ALIGNMENT)
    id: int | None = _opt("id", _Kind.INT)
    func: str | None = _opt("fu", _Kind.STR)
    tags: list[str] = _many("t", _Kind.STR)
    keep: bool = _flag("k")


@dataclass
class Text(Drawable):
    NAME: ClassVar[str] = "text"

    text: str | None = _opt("m", _Kind.STR)
    center: tuple[float, float] | None = _opt("c", _Kind.PAIR)
    font: float | None = _opt("s", _Kind.FLOAT)
    color: Color | None = _opt("c", _Kind.COLOR)
    alignment: tuple[Alignment, Alignment] | None = _opt("a", _Kind.ALIGNMENT)
    id: int | None = _opt("id", _Kind.INT)
    func: str | None = _opt("fu", _Kind.STR)
    tags: list[str] = _many("t", _Kind.STR)
    keep: bool = _flag("k")


def tick(writer: TextIO) -> None:
    """End the current frame."""
    writer.write("tick\n")
    writer.flush()


def disable_tag(tag: str, writer: TextIO) -> None:
    writer.write(f"disable {tag}\n")


def set_func(func: str, values: Iterable[float], writer: TextIO) -> None:
    """Define a named easing function by its values."""
    numbers = " ".join(format_number(float(value)) for value in values)
    writer.write(f"setfunc {func} {numbers}\n")


def message(msg: str, writer: TextIO) -> None:
    writer.write(f"msg {msg}\n")