"""Interpolation of figure attributes between two key frames."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any

from rviewer.geometry import Color, Point, Size


def _round_half_away(value: float) -> int:
    if value < 0:
        return -_round_half_away(-value)
    whole = math.floor(value)
    return whole + 1 if value - whole >= 0.5 else whole


def _mix(a: float, b: float, k: float) -> float:
    return a * (1.0 - k) + b * k


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def interpolate(a: Any, b: Any, k: float) -> Any:
    """Blend ``a`` towards ``b`` by factor ``k``.

    Integers are counts: they are rounded half away from zero and never go
    below zero. Colour channels are clamped to 0..255.
    """
    if isinstance(a, bool) or isinstance(b, bool):
        raise TypeError("booleans cannot be interpolated")
    if _is_int(a) and _is_int(b):
        return max(0, _round_half_away(_mix(a, b, k)))
    if isinstance(a, (int, float)) and isinstance(b, (int, float)):
        return _mix(a, b, k)
    if isinstance(a, Point) and isinstance(b, Point):
        return Point(_mix(a.x, b.x, k), _mix(a.y, b.y, k))
    if isinstance(a, Size) and isinstance(b, Size):
        return Size(_mix(a.width, b.width, k), _mix(a.height, b.height, k))
    if isinstance(a, Color) and isinstance(b, Color):
        channels = (
            min(255, max(0, _round_half_away(_mix(x, y, k))))
            for x, y in zip((a.r, a.g, a.b, a.a), (b.r, b.g, b.b, b.a))
        )
        return Color(*channels)
    if isinstance(a, tuple) and isinstance(b, tuple):
        if len(a) != len(b):
            raise ValueError("tuples of different length cannot be interpolated")
        return tuple(interpolate(x, y, k) for x, y in zip(a, b))
    method = getattr(a, "interpolate", None)
    if callable(method):
        return method(b, k)
    raise TypeError(f"cannot interpolate {type(a).__name__}")


@dataclass
class InBetweenProperties:
    """How many frames to generate between key frames, and with which easing."""

    frames: int = 1
    func: list[float] = field(default_factory=list)
    funcs: dict[str, list[float]] = field(default_factory=dict)

    def set_frames(self, frames: int) -> None:
        """Use ``frames`` steps per key frame with linear easing, also named ``line``."""
        if frames < 1:
            raise ValueError("the number of in-between frames must be at least 1")
        self.frames = frames
        self.func = [step / frames for step in range(1, frames)]
        self.funcs["line"] = list(self.func)

    def func_for(self, name: str | None) -> list[float]:
        """The easing named ``name``, or the default one if there is none."""
        if name is not None and name in self.funcs:
            return self.funcs[name]
        return self.func