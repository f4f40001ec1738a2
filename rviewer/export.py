"""Saving frames as SVG and PNG images and joining PNG frames into a video."""

from __future__ import annotations

import shutil
import subprocess
import sys
import threading
import xml.etree.ElementTree as ET
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Callable

from rviewer.figures.base import add_svg_element
from rviewer.geometry import Point, SvgParams, format_number
from rviewer.scene import Scene
from rviewer.settings import (
    DEFAULT_CONVERSION_TOOL,
    DEFAULT_FRAME_RESOLUTION,
    DEFAULT_INKSCAPE_PATH,
    DEFAULT_MAX_THREADS,
    Settings,
    load_settings,
)

BACKGROUND = "rgb(41, 41, 41)"
SVG_NAMESPACE = "http://www.w3.org/2000/svg"
INKSCAPE_ATTEMPTS = 3


def _resolve(settings: Settings | None) -> Settings:
    if settings is None:
        return load_settings()
    return Settings(
        conversion_tool=settings.conversion_tool or DEFAULT_CONVERSION_TOOL,
        inkscape_path=settings.inkscape_path or DEFAULT_INKSCAPE_PATH,
        frame_resolution=(
            DEFAULT_FRAME_RESOLUTION if settings.frame_resolution is None else settings.frame_resolution
        ),
        max_threads=DEFAULT_MAX_THREADS if settings.max_threads is None else settings.max_threads,
    )


def _svg_transform(scene: Scene) -> Callable[[Point], Point]:
    size, shift, flipy = scene.size, scene.shift, scene.flipy

    def transform(p: Point) -> Point:
        x = p.x + shift.width
        y = p.y + shift.height
        if flipy:
            y = size.height - y
        return Point(x, y)

    return transform


def _recreate_folder(folder: Path) -> None:
    try:
        shutil.rmtree(folder)
    except OSError as exc:
        print(f"Can't remove folder {folder}, {exc}", file=sys.stderr)
    folder.mkdir(parents=True, exist_ok=True)


def render_frame_svg(scene: Scene, frame: int) -> ET.Element:
    """The SVG tree of one frame, on a dark background."""
    if not 0 <= frame < len(scene.frames):
        raise IndexError(f"frame {frame} is out of range")
    size = scene.size
    n = format_number
    root = ET.Element("svg", {
        "xmlns": SVG_NAMESPACE,
        "viewBox": f"0 0 {n(size.width)} {n(size.height)}",
        "width": n(size.width),
        "height": n(size.height),
    })
    add_svg_element(root, "rect", {
        "x": 0,
        "y": 0,
        "width": size.width,
        "height": size.height,
        "fill": BACKGROUND,
    })
    params = SvgParams(
        size=size,
        width_scale=scene.svg_width_scale,
        flipy=scene.flipy,
        transform=_svg_transform(scene),
    )
    enabled = scene.enabled_tags()
    for index in scene.frames[frame]:
        figure = scene.objects[index]
        if figure.need_to_draw(enabled):
            root = figure.draw_on_image(root, params)
    return root


def save_frame_svg(scene: Scene, frame: int, path: str | Path = "frame.svg") -> Path:
    """Write one frame to an SVG file."""
    path = Path(path)
    root = render_frame_svg(scene, frame)
    path.write_text(ET.tostring(root, encoding="unicode"), encoding="utf-8")
    return path


def save_all_frames_svg(scene: Scene, folder: str | Path = "frames") -> list[Path]:
    """Write every frame as ``NNNNN.svg`` into a freshly emptied folder."""
    folder = Path(folder)
    _recreate_folder(folder)
    total = len(scene.frames)
    paths = []
    for frame in range(total):
        print(f"\rSaving frame {frame + 1}/{total}", end="", flush=True)
        paths.append(save_frame_svg(scene, frame, folder / f"{frame + 1:05}.svg"))
    print(f"\r{total} frames saved in folder {folder}")
    return paths


def _command(svg_path: Path, png_path: Path, settings: Settings) -> list[str]:
    resolution = str(settings.frame_resolution)
    if settings.conversion_tool == "rsvg-convert":
        return ["rsvg-convert", str(svg_path), "-o", str(png_path), "-w", resolution]
    return [str(settings.inkscape_path), "-o", str(png_path), "-w", resolution, str(svg_path)]


def convert_svg_to_png(
    svg_path: str | Path,
    png_path: str | Path,
    settings: Settings | None = None,
    timeout: float = 30.0,
) -> bool:
    """Convert an SVG file to PNG with the configured tool, then delete the SVG.

    Inkscape gets up to three attempts, waiting ``timeout``, twice and three
    times ``timeout``. Returns False if every attempt timed out. Raises OSError
    if the tool cannot be started; the SVG is kept then.
    """
    settings = _resolve(settings)
    svg_path, png_path = Path(svg_path), Path(png_path)
    command = _command(svg_path, png_path, settings)
    if settings.conversion_tool == "rsvg-convert":
        subprocess.run(command, capture_output=True, check=False)
        svg_path.unlink()
        return True

    converted = False
    for attempt in range(1, INKSCAPE_ATTEMPTS + 1):
        process = subprocess.Popen(command)
        try:
            process.wait(timeout=timeout * attempt)
        except subprocess.TimeoutExpired:
            process.terminate()
            print(f"\rConversion of {svg_path} failed       ", file=sys.stderr)
            continue
        converted = True
        break
    if not converted:
        print(f"\rMax attempts for {svg_path} reached", file=sys.stderr)
    svg_path.unlink()
    return converted


def save_frame_png(
    scene: Scene,
    frame: int,
    path: str | Path = "frame.png",
    settings: Settings | None = None,
) -> threading.Thread:
    """Render one frame and convert it to PNG in the background; returns the started thread."""
    settings = _resolve(settings)
    path = Path(path)
    svg_path = path.parent / f"_tmp_frame_{frame}_.svg"
    save_frame_svg(scene, frame, svg_path)

    def work() -> None:
        convert_svg_to_png(svg_path, path, settings)
        print(f"Saved frame {frame + 1} as {path}")

    thread = threading.Thread(target=work, daemon=True)
    thread.start()
    return thread


def save_all_frames_png(
    scene: Scene,
    settings: Settings | None = None,
    folder: str | Path = "frames",
) -> threading.Thread:
    """Render every frame and convert them to ``NNNNN.png`` on a pool of threads.

    Returns a started thread that ends once all conversions are done.
    """
    settings = _resolve(settings)
    folder = Path(folder)
    _recreate_folder(folder)
    total = len(scene.frames)
    for frame in range(total):
        save_frame_svg(scene, frame, folder / f"_tmp_frame_{frame + 1}_.svg")
        print(f"\rCreated svg {frame + 1}/{total}", end="", flush=True)

    def convert(frame: int) -> None:
        svg_path = folder / f"_tmp_frame_{frame + 1}_.svg"
        png_path = folder / f"{frame + 1:05}.png"
        try:
            convert_svg_to_png(svg_path, png_path, settings)
        except OSError as exc:
            print(f"Can't run {settings.conversion_tool}, {exc}", file=sys.stderr)
            return
        print(f"\rSaved frame {frame + 1}/{total}", end="", flush=True)

    executor = ThreadPoolExecutor(max_workers=max(1, settings.max_threads))
    for frame in range(total):
        executor.submit(convert, frame)
    print("\r                               ", end="", flush=True)

    def wait() -> None:
        executor.shutdown(wait=True)
        print(f"\rSaved {total} frames in folder {folder}")

    thread = threading.Thread(target=wait, daemon=True)
    thread.start()
    return thread


def make_video_from_frames(
    fps_speed: float,
    folder: str | Path = "frames",
    output: str | Path = "video.mp4",
) -> threading.Thread:
    """Join ``NNNNN.png`` frames into an H.264 video with ffmpeg in the background.

    ``fps_speed`` is the time one frame is shown, in seconds.
    """
    output = Path(output)
    command = [
        "ffmpeg",
        "-r", format_number(1.0 / fps_speed),
        "-i", f"{Path(folder).as_posix()}/%05d.png",
        "-c:v", "libx264",
        "-vf", "pad=ceil(iw/2)*2:ceil(ih/2)*2",
        "-pix_fmt", "yuv420p",
        str(output),
    ]

    def work() -> None:
        output.unlink(missing_ok=True)
        try:
            subprocess.run(command, stdin=subprocess.DEVNULL, stdout=subprocess.PIPE, check=False)
        except OSError as exc:
            print(f"Can't run ffmpeg, {exc}", file=sys.stderr)
            return
        print("Video created")

    thread = threading.Thread(target=work, daemon=True)
    thread.start()
    return thread