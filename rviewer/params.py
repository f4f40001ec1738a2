"""Parsing of ``key=value`` parameters from scene description lines."""

from __future__ import annotations

import re

from rviewer.geometry import Color, Point

_FLOAT_RE = re.compile(
    r"[+-]?(?:inf|infinity|nan|(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:e[+-]?[0-9]+)?)",
    re.IGNORECASE,
)
_INT_RE = re.compile(r"[+-]?[0-9]+")
_UINT_RE = re.compile(r"\+?[0-9]+")

_I32_MIN, _I32_MAX = -(2**31), 2**31 - 1


def _parse_float(text: str) -> float | None:
    if not _FLOAT_RE.fullmatch(text):
        return None
    return float(text)


def _parse_int(text: str, low: int | None, high: int | None, signed: bool = True) -> int | None:
    if not (_INT_RE if signed else _UINT_RE).fullmatch(text):
        return None
    value = int(text)
    if low is not None and value < low:
        return None
    if high is not None and value > high:
        return None
    return value


def _tuple_parts(text: str) -> list[str] | None:
    """The comma separated parts between the first and last character."""
    if len(text) < 2:
        return None
    return text[1:-1].split(",")


def _parse_pair(text: str) -> tuple[float, float] | None:
    parts = _tuple_parts(text)
    if parts is None or len(parts) < 2:
        return None
    x, y = _parse_float(parts[0]), _parse_float(parts[1])
    if x is None or y is None:
        return None
    return x, y


class Params:
    """The ``key=value`` tokens of one line; a key may repeat."""

    def __init__(self, s: str) -> None:
        self._values: dict[str, list[str]] = {}
        for token in s.split():
            key, _, rest = token.partition("=")
            value = rest.split("=", 1)[0]
            if value:
                self._values.setdefault(key, []).append(value)

    def _first(self, name: str) -> str | None:
        values = self._values.get(name)
        return values[0] if values else None

    def get_bool(self, name: str) -> bool | None:
        value = self._first(name)
        if value == "0":
            return False
        if value in ("1", ""):
            return True
        return None

    def get_float(self, name: str) -> float | None:
        value = self._first(name)
        return None if value is None else _parse_float(value)

    def get_int(self, name: str) -> int | None:
        value = self._first(name)
        return None if value is None else _parse_int(value, _I32_MIN, _I32_MAX)

    def get_str(self, name: str) -> str | None:
        return self._first(name)

    def get_list(self, name: str) -> list[str] | None:
        values = self._values.get(name)
        return None if values is None else list(values)

    def get_chars(self, name: str) -> tuple[str, str] | None:
        value = self._first(name)
        if value is None or len(value) < 2:
            return None
        return value[0], value[1]

    def get_pair(self, name: str) -> tuple[float, float] | None:
        value = self._first(name)
        return None if value is None else _parse_pair(value)

    def get_int_pair(self, name: str) -> tuple[int, int] | None:
        value = self._first(name)
        if value is None:
            return None
        parts = _tuple_parts(value)
        if parts is None or len(parts) < 2:
            return None
        a = _parse_int(parts[0], 0, None, signed=False)
        b = _parse_int(parts[1], 0, None, signed=False)
        if a is None or b is None:
            return None
        return a, b

    def get_point(self, name: str) -> Point | None:
        pair = self.get_pair(name)
        return None if pair is None else Point(*pair)

    def get_points(self, name: str) -> list[Point] | None:
        values = self._values.get(name)
        if values is None:
            return None
        points = []
        for value in values:
            pair = _parse_pair(value)
            if pair is None:
                return None
            points.append(Point(*pair))
        return points

    def get_color(self, name: str) -> Color | None:
        value = self._first(name)
        if value is None:
            return None
        parts = _tuple_parts(value)
        if parts is None or len(parts) < 3:
            return None
        channels = [_parse_int(part, 0, 255, signed=False) for part in parts[:3]]
        if len(parts) > 3:
            channels.append(_parse_int(parts[3], 0, 255, signed=False))
        else:
            channels.append(255)
        if any(channel is None for channel in channels):
            return None
        return Color(*channels)