"""Persistent settings for exporting frames and videos."""

from __future__ import annotations

import json
import sys
from dataclasses import asdict, dataclass
from pathlib import Path

DEFAULT_CONVERSION_TOOL = "rsvg-convert"
DEFAULT_INKSCAPE_PATH = "C:/Program files/Inkscape/bin/inkscape.exe"
DEFAULT_FRAME_RESOLUTION = 1080
DEFAULT_MAX_THREADS = 4


class SettingsError(ValueError):
    """The settings file cannot be understood."""


@dataclass
class Settings:
    conversion_tool: str | None = None
    inkscape_path: str | None = None
    frame_resolution: int | None = None
    max_threads: int | None = None

    def _with_defaults(self) -> Settings:
        return Settings(
            conversion_tool=self.conversion_tool or DEFAULT_CONVERSION_TOOL,
            inkscape_path=self.inkscape_path or DEFAULT_INKSCAPE_PATH,
            frame_resolution=(
                DEFAULT_FRAME_RESOLUTION if self.frame_resolution is None else self.frame_resolution
            ),
            max_threads=DEFAULT_MAX_THREADS if self.max_threads is None else self.max_threads,
        )


def default_settings_path() -> Path:
    """``settings.json`` next to the running program."""
    return Path(sys.argv[0] or ".").resolve().parent / "settings.json"


def _check_fields(data: dict, name: str) -> Settings:
    values = {}
    for key in ("conversion_tool", "inkscape_path"):
        value = data.get(key)
        if value is not None and not isinstance(value, str):
            raise SettingsError(f'Can\'t parse json from "{name}"')
        values[key] = value
    for key in ("frame_resolution", "max_threads"):
        value = data.get(key)
        if value is not None and (
            not isinstance(value, int) or isinstance(value, bool) or value < 0
        ):
            raise SettingsError(f'Can\'t parse json from "{name}"')
        values[key] = value
    return Settings(**values)


def load_settings(path: str | Path | None = None) -> Settings:
    """Read the settings, fill in defaults and write the completed file back.

    A missing file is created as an empty object first.
    """
    path = Path(path) if path is not None else default_settings_path()
    if not path.is_file():
        path.write_text("{}", encoding="utf-8")
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise SettingsError(f'Can\'t parse json from "{path.name}"') from exc
    if not isinstance(data, dict):
        raise SettingsError(f'Can\'t parse json from "{path.name}"')
    settings = _check_fields(data, path.name)._with_defaults()
    path.write_text(json.dumps(asdict(settings), indent=2), encoding="utf-8")
    return settings