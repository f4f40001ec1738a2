"""Interactive viewer window: pan, zoom, play frames, toggle tags and export."""

from __future__ import annotations

import math
import sys
import threading
from dataclasses import dataclass, field
from typing import Any, Callable, TextIO

from rviewer import export
from rviewer.figures.base import Painter
from rviewer.geometry import Color, Point, Size, Transform
from rviewer.scene import Scene

PADDING = 8.0
HEIGHT_KOEF = 1.2
CELL_HEIGHT = 18.0
CHECKLIST_WIDTH = 100.0
LABEL_WIDTH = 100
TRACK_THICKNESS = 4.0
BORDER_WIDTH = 2.0
KNOB_STROKE_WIDTH = 2.0
MIN_ZOOM_FACTOR = 0.01
FIT_MARGIN = 0.9

BACKGROUND = (41, 41, 41)
BACKGROUND_HEX = "#292929"
BORDER_DARK = "#3a3a3a"
BORDER_LIGHT = "#a1a1a1"
FOREGROUND_LIGHT = "#f9f9f9"
FOREGROUND_DARK = "#bfbfbf"
TEXT_COLOR = "#ffffff"


@dataclass
class ViewState:
    """Scale and centre of the drawing area, mapping scene points to the screen."""

    scale: float = 1.0
    center: Point = Point(0.0, 0.0)
    size: Size = Size(1.0, 1.0)
    last_data_size: Size = Size(0.0, 0.0)

    def transform(self, p: Point) -> Point:
        """Scene point to widget point."""
        return Point(
            (p.x - self.center.x) * self.scale + self.size.width / 2.0,
            (p.y - self.center.y) * self.scale + self.size.height / 2.0,
        )

    def inv_transform(self, p: Point) -> Point:
        """Widget point to scene point."""
        return Point(
            (p.x - self.size.width / 2.0) / self.scale + self.center.x,
            (p.y - self.size.height / 2.0) / self.scale + self.center.y,
        )

    def fit(self, data_size: Size, widget_size: Size) -> bool:
        """Adopt the widget size; recentre and rescale when the scene size changed.

        Returns True if the view was refitted.
        """
        self.size = widget_size
        if data_size == self.last_data_size:
            return False
        self.center = Point(data_size.width / 2.0, data_size.height / 2.0)
        ratios = [
            widget / data
            for widget, data in (
                (widget_size.height, data_size.height),
                (widget_size.width, data_size.width),
            )
            if data
        ]
        if ratios:
            self.scale = min(ratios) * FIT_MARGIN
        self.last_data_size = data_size
        return True

    def pan(self, dx: float, dy: float) -> None:
        """Move the view so the scene follows a drag of (dx, dy) widget pixels."""
        self.center = Point(self.center.x - dx / self.scale, self.center.y - dy / self.scale)

    def zoom(self, delta: float, pos: Point) -> None:
        """Zoom by a wheel delta, keeping the scene point under ``pos`` in place."""
        new_scale = self.scale * max(MIN_ZOOM_FACTOR, 1.1 ** (-delta / 50.0))
        was = self.inv_transform(pos)
        self.scale = new_scale
        now = self.inv_transform(pos)
        self.center = Point(self.center.x - (now.x - was.x), self.center.y - (now.y - was.y))


@dataclass
class Checklist:
    """A column of tag check boxes."""

    width: float = CHECKLIST_WIDTH
    selected: int | None = 0

    def index_at(self, y: float, cell_height: float, count: int) -> int | None:
        """The row whose box covers height ``y``, or None in a gap or outside."""
        row = cell_height * HEIGHT_KOEF
        if y <= 0.0 or y >= row * count:
            return None
        candidate = math.floor(y / row)
        offset = abs(y - row * (candidate + 0.5)) / cell_height
        return candidate if offset <= 0.5 else None

    def toggle_at(
        self, y: float, cell_height: float, tags: list[tuple[str, bool]]
    ) -> list[tuple[str, bool]]:
        """Select the row at ``y`` and return the tags with that row switched."""
        self.selected = self.index_at(y, cell_height, len(tags))
        result = list(tags)
        if self.selected is not None:
            name, enabled = result[self.selected]
            result[self.selected] = (name, not enabled)
        return result

    def height(self, cell_height: float, count: int) -> float:
        return cell_height * count * HEIGHT_KOEF


@dataclass
class FrameSlider:
    """A slider over whole frame numbers."""

    minimum: int = 0
    maximum: int = 1
    knob_pos: Point = Point()
    knob_hovered: bool = False
    x_offset: float = 0.0

    def value_at(self, mouse_x: float, knob_width: float, slider_width: float) -> int:
        """The frame a pointer at ``mouse_x`` selects."""
        numerator = mouse_x + self.x_offset - knob_width / 2.0
        denominator = slider_width - knob_width
        if denominator == 0:
            scalar = 1.0 if numerator > 0 else 0.0
        else:
            scalar = min(1.0, max(0.0, numerator / denominator))
        value = self.minimum + scalar * (self.maximum - self.minimum)
        return max(0, math.floor(value + 0.5))

    def normalize(self, frame: int) -> float:
        """Position of ``frame`` along the track, from 0 to 1."""
        clamped = min(max(float(frame), self.minimum), self.maximum)
        return (clamped - self.minimum) / max(float(self.maximum - self.minimum), 1.0)

    def _knob_hit(self, pos: Point, knob_width: float) -> bool:
        return self.knob_pos.distance(pos) < knob_width / 2.0


def _hex(r: int, g: int, b: int) -> str:
    return f"#{r:02x}{g:02x}{b:02x}"


class CanvasPainter(Painter):
    """Draws figures onto a tkinter canvas; alpha is blended over the background."""

    def __init__(self, canvas: Any, background: tuple[int, int, int] = BACKGROUND) -> None:
        self.canvas = canvas
        self.background = background
        self._fonts: dict[tuple[str, int], Any] = {}

    def _color(self, color: Color) -> str:
        alpha = color.a / 255
        channels = (
            round(value * alpha + back * (1 - alpha))
            for value, back in zip((color.r, color.g, color.b), self.background)
        )
        return _hex(*channels)

    def _font(self, family: Any, font_size: float) -> Any:
        import tkinter.font as tkfont

        name = str(getattr(family, "name", family)).upper()
        if "MONO" in name:
            face = "Courier"
        elif name == "SERIF":
            face = "Times"
        else:
            face = "Helvetica"
        pixels = max(1, round(font_size))
        key = (face, pixels)
        if key not in self._fonts:
            self._fonts[key] = tkfont.Font(root=self.canvas, family=face, size=-pixels)
        return self._fonts[key]

    def stroke_line(self, start: Point, end: Point, color: Color, width: float) -> None:
        self.canvas.create_line(start.x, start.y, end.x, end.y, fill=self._color(color), width=width)

    def rect(self, center: Point, size: Size, color: Color, width: float, fill: bool) -> None:
        box = (
            center.x - size.width / 2, center.y - size.height / 2,
            center.x + size.width / 2, center.y + size.height / 2,
        )
        if fill:
            self.canvas.create_rectangle(*box, fill=self._color(color), outline="")
        else:
            self.canvas.create_rectangle(*box, outline=self._color(color), width=width)

    def circle(self, center: Point, radius: float, color: Color, width: float, fill: bool) -> None:
        box = (center.x - radius, center.y - radius, center.x + radius, center.y + radius)
        if fill:
            self.canvas.create_oval(*box, fill=self._color(color), outline="")
        else:
            self.canvas.create_oval(*box, outline=self._color(color), width=width)

    def arc(
        self,
        center: Point,
        radius: float,
        start: float,
        extent: float,
        color: Color,
        width: float,
        fill: bool,
    ) -> None:
        box = (center.x - radius, center.y - radius, center.x + radius, center.y + radius)
        # Screen angles run clockwise, the canvas counts them counter-clockwise.
        options = {"start": -math.degrees(start), "extent": -math.degrees(extent)}
        if fill:
            self.canvas.create_arc(*box, style="pieslice", fill=self._color(color), outline="", **options)
        else:
            self.canvas.create_arc(*box, style="arc", outline=self._color(color), width=width, **options)

    def polygon(self, points: list[Point], color: Color, width: float, fill: bool) -> None:
        coords = [value for p in points for value in (p.x, p.y)]
        if fill and len(points) >= 3:
            self.canvas.create_polygon(*coords, fill=self._color(color), outline="")
        elif not fill and len(points) >= 2:
            self.canvas.create_line(*coords, fill=self._color(color), width=width)

    def text_size(self, text: str, font_size: float, family: Any) -> Size:
        font = self._font(family, font_size)
        lines = text.split("\n")
        return Size(
            float(max(font.measure(line) for line in lines)),
            float(font.metrics("linespace") * len(lines)),
        )

    def text(self, text: str, position: Point, font_size: float, color: Color, family: Any) -> None:
        self.canvas.create_text(
            position.x, position.y, text=text, anchor="nw",
            font=self._font(family, font_size), fill=self._color(color),
        )


class Viewer:
    """Plays the frames of a scene; without a tk root it keeps state only."""

    def __init__(self, scene: Scene, root: Any = None, lock: threading.RLock | None = None) -> None:
        self.scene = scene
        self.lock = lock if lock is not None else threading.RLock()
        self.view = ViewState()
        self.checklist = Checklist()
        self.slider = FrameSlider(0, 10)
        self.frame = 0
        self.running = False
        self.painter: Painter | None = None
        self.canvas_size = Size(800.0, 600.0)
        self._root = root
        self._timer: Any = None
        self._canvas: Any = None
        self._checklist_canvas: Any = None
        self._slider_canvas: Any = None
        self._label: Any = None
        self._last_mouse = Point()
        self._mouse_down = False
        self._slider_active = False
        self._checklist_active = False
        if root is not None:
            self._build(root)

    # frame navigation

    def next_frame(self) -> bool:
        """Step forward; False at the last frame."""
        if self.frame + 1 < len(self.scene.frames):
            self.frame += 1
            self.redraw()
            return True
        return False

    def previous_frame(self) -> bool:
        """Step back; False at the first frame."""
        if self.frame != 0:
            self.frame -= 1
            self.redraw()
            return True
        return False

    def toggle_play(self) -> bool:
        """Start or stop playback; starting at the last frame rewinds. Returns the new state."""
        if self.running:
            self.running = False
            self._cancel_timer()
        else:
            if self.frame + 1 == len(self.scene.frames):
                self.frame = 0
                self.redraw()
            self.running = True
            self._schedule()
        return self.running

    def _schedule(self) -> None:
        if self._root is not None:
            delay = max(1, round(self.scene.fps_speed * 1000))
            self._timer = self._root.after(delay, self._on_timer)

    def _cancel_timer(self) -> None:
        if self._root is not None and self._timer is not None:
            self._root.after_cancel(self._timer)
        self._timer = None

    def _on_timer(self) -> None:
        self._timer = None
        if not self.running:
            return
        if self.frame + 1 < len(self.scene.frames):
            self.frame += 1
            self._schedule()
            self.redraw()
        elif not self.scene.finished:
            self._schedule()
        else:
            self.running = False

    # drawing

    def redraw(self) -> int:
        """Repaint the current frame; returns how many figures were drawn."""
        with self.lock:
            self.slider.maximum = max(len(self.scene.frames), 1) - 1
            drawn = self._draw_scene()
            if self._root is not None:
                self._paint_checklist()
                self._paint_slider()
                self._label.config(text=f"{self.frame + 1} / {len(self.scene.frames)}")
        return drawn

    def _draw_scene(self) -> int:
        if self._canvas is not None:
            self._canvas.delete("all")
        if self.painter is None:
            return 0
        scene = self.scene
        self.view.fit(scene.size, self.canvas_size)
        transform = Transform(
            screen_transform=self.view.transform,
            shift=scene.shift,
            data_size=scene.size,
            flipy=scene.flipy,
        )
        if self.frame >= len(scene.frames):
            return 0
        enabled = scene.enabled_tags()
        drawn = 0
        for index in scene.frames[self.frame]:
            figure = scene.objects[index]
            if figure.need_to_draw(enabled):
                figure.draw(self.painter, self.view.scale, transform)
                drawn += 1
        return drawn

    def _paint_checklist(self) -> None:
        canvas = self._checklist_canvas
        canvas.delete("all")
        tags = self.scene.tags
        canvas.config(height=max(1, round(self.checklist.height(CELL_HEIGHT, len(tags)))))
        size = CELL_HEIGHT
        position = size * (HEIGHT_KOEF - 1.0) / 2.0
        for index, (name, enabled) in enumerate(tags):
            hot = self._checklist_active or self.checklist.selected == index
            border = BORDER_LIGHT if hot and self.checklist.selected == index else BORDER_DARK
            canvas.create_rectangle(0.5, position + 0.5, size - 0.5, position + size - 0.5,
                                    outline=border, width=1)
            if enabled:
                canvas.create_line(4, position + 9, 8, position + 13, 14, position + 5,
                                   fill=TEXT_COLOR, width=2, capstyle="round", joinstyle="round")
            canvas.create_text(size + size * 0.2, position, text=name, anchor="nw",
                               fill=TEXT_COLOR, font=("Helvetica", -max(1, round(size * 0.7))))
            position += size * HEIGHT_KOEF

    def _paint_slider(self) -> None:
        canvas = self._slider_canvas
        canvas.delete("all")
        width = max(canvas.winfo_width(), 1)
        knob = CELL_HEIGHT
        top = (knob - TRACK_THICKNESS) / 2
        canvas.create_rectangle(knob / 2, top, width - knob / 2, top + TRACK_THICKNESS,
                                outline=BORDER_DARK, fill=BACKGROUND_HEX, width=BORDER_WIDTH)
        position = (width - knob) * self.slider.normalize(self.frame) + knob / 2
        self.slider.knob_pos = Point(position, knob / 2)
        half = (knob - KNOB_STROKE_WIDTH) * 0.6 / 2
        active = self._slider_active
        border = FOREGROUND_LIGHT if self.slider.knob_hovered or active else FOREGROUND_DARK
        canvas.create_rectangle(position - half, knob / 2 - half, position + half, knob / 2 + half,
                                outline=border, width=KNOB_STROKE_WIDTH,
                                fill=FOREGROUND_DARK if active else FOREGROUND_LIGHT)

    # window construction and events

    def _build(self, root: Any) -> None:
        import tkinter as tk

        root.title("Viewer")
        root.geometry("800x600")
        root.configure(background=BACKGROUND_HEX)

        menubar = tk.Menu(root)
        actions = tk.Menu(menubar, tearoff=0)
        entries: list[tuple[str, Callable[[], None]]] = [
            ("Save frame as svg", self._save_frame_svg),
            ("Save frame as png", self._save_frame_png),
            ("Save all frames as svg", self._save_all_frames_svg),
            ("Save all frames as png", self._save_all_frames_png),
            ("Make video from frames", self._make_video),
        ]
        for label, command in entries:
            actions.add_command(label=label, command=command)
        menubar.add_cascade(label="Export", menu=actions)
        root.config(menu=menubar)

        pad = int(PADDING)
        outer = tk.Frame(root, background=BACKGROUND_HEX)
        outer.pack(fill="both", expand=True, padx=pad, pady=pad)

        bottom = tk.Frame(outer, background=BACKGROUND_HEX)
        bottom.pack(side="bottom", fill="x", pady=(pad, 0))
        self._label = tk.Label(bottom, anchor="e", width=12, background=BACKGROUND_HEX,
                               foreground=TEXT_COLOR)
        self._label.pack(side="right")
        self._slider_canvas = tk.Canvas(bottom, height=int(CELL_HEIGHT), background=BACKGROUND_HEX,
                                        highlightthickness=0)
        self._slider_canvas.pack(side="left", fill="x", expand=True)

        top = tk.Frame(outer, background=BACKGROUND_HEX)
        top.pack(side="top", fill="both", expand=True)
        self._checklist_canvas = tk.Canvas(top, width=int(CHECKLIST_WIDTH), height=1,
                                           background=BACKGROUND_HEX, highlightthickness=0)
        self._checklist_canvas.pack(side="right", anchor="n", padx=(pad, 0))
        self._canvas = tk.Canvas(top, background=BACKGROUND_HEX, highlightthickness=0)
        self._canvas.pack(side="left", fill="both", expand=True)
        self.painter = CanvasPainter(self._canvas)

        canvas = self._canvas
        canvas.bind("<Configure>", self._on_configure)
        canvas.bind("<ButtonPress-1>", self._on_press)
        canvas.bind("<B1-Motion>", self._on_drag)
        canvas.bind("<ButtonRelease-1>", self._on_release)
        canvas.bind("<MouseWheel>", lambda e: self._on_wheel(e, -e.delta / 120 * 50))
        canvas.bind("<Button-4>", lambda e: self._on_wheel(e, -50.0))
        canvas.bind("<Button-5>", lambda e: self._on_wheel(e, 50.0))

        self._checklist_canvas.bind("<ButtonPress-1>", self._on_checklist_press)
        self._checklist_canvas.bind("<ButtonRelease-1>", self._on_checklist_release)
        self._checklist_canvas.bind("<Motion>", self._on_checklist_motion)

        self._slider_canvas.bind("<ButtonPress-1>", self._on_slider_press)
        self._slider_canvas.bind("<B1-Motion>", self._on_slider_drag)
        self._slider_canvas.bind("<ButtonRelease-1>", self._on_slider_release)
        self._slider_canvas.bind("<Motion>", self._on_slider_hover)
        self._slider_canvas.bind("<Configure>", lambda _e: self.redraw())

        root.bind("<Right>", lambda _e: self.next_frame())
        root.bind("<Left>", lambda _e: self.previous_frame())
        root.bind("<space>", lambda _e: self.toggle_play())
        root.bind("<Key-0>", self._on_reset)

        self._poll()

    def _poll(self) -> None:
        self.redraw()
        if not self.scene.finished:
            self._root.after(100, self._poll)

    def _on_configure(self, event: Any) -> None:
        self.canvas_size = Size(float(event.width), float(event.height))
        self.redraw()

    def _on_press(self, event: Any) -> None:
        self._canvas.focus_set()
        self._mouse_down = True
        self._last_mouse = Point(event.x, event.y)

    def _on_drag(self, event: Any) -> None:
        if self._mouse_down:
            self.view.pan(event.x - self._last_mouse.x, event.y - self._last_mouse.y)
            self._last_mouse = Point(event.x, event.y)
            self.redraw()

    def _on_release(self, _event: Any) -> None:
        self._mouse_down = False

    def _on_wheel(self, event: Any, delta: float) -> None:
        self.view.zoom(delta, Point(event.x, event.y))
        self.redraw()

    def _on_reset(self, _event: Any) -> None:
        self.view.last_data_size = Size(0.0, 0.0)
        self.redraw()

    def _on_checklist_press(self, _event: Any) -> None:
        self._checklist_active = True
        self.redraw()

    def _on_checklist_release(self, event: Any) -> None:
        if not self._checklist_active:
            return
        self._checklist_active = False
        canvas = self._checklist_canvas
        if 0 <= event.x < canvas.winfo_width() and 0 <= event.y < canvas.winfo_height():
            with self.lock:
                self.scene.tags = self.checklist.toggle_at(event.y, CELL_HEIGHT, self.scene.tags)
        self.redraw()

    def _on_checklist_motion(self, event: Any) -> None:
        selected = self.checklist.index_at(event.y, CELL_HEIGHT, len(self.scene.tags))
        if selected != self.checklist.selected:
            self.checklist.selected = selected
            self.redraw()

    def _slider_value(self, x: float) -> int:
        return self.slider.value_at(x, CELL_HEIGHT, float(self._slider_canvas.winfo_width()))

    def _on_slider_press(self, event: Any) -> None:
        self._slider_active = True
        if self.slider._knob_hit(Point(event.x, event.y), CELL_HEIGHT):
            self.slider.x_offset = self.slider.knob_pos.x - event.x
        else:
            self.slider.x_offset = 0.0
            self.frame = self._slider_value(event.x)
        self.redraw()

    def _on_slider_drag(self, event: Any) -> None:
        if self._slider_active:
            self.frame = self._slider_value(event.x)
            self.redraw()

    def _on_slider_release(self, event: Any) -> None:
        if self._slider_active:
            self._slider_active = False
            self.frame = self._slider_value(event.x)
            self.redraw()

    def _on_slider_hover(self, event: Any) -> None:
        hovered = self.slider._knob_hit(Point(event.x, event.y), CELL_HEIGHT)
        if hovered != self.slider.knob_hovered:
            self.slider.knob_hovered = hovered
            self.redraw()

    # export commands

    def _frame_in_range(self) -> bool:
        return self.frame < len(self.scene.frames)

    def _save_frame_svg(self) -> None:
        with self.lock:
            if not self._frame_in_range():
                return
            export.save_frame_svg(self.scene, self.frame, "frame.svg")
        print(f"Saved frame {self.frame + 1} as frame.svg")

    def _save_frame_png(self) -> None:
        with self.lock:
            if not self._frame_in_range():
                return
            export.save_frame_png(self.scene, self.frame, "frame.png")

    def _save_all_frames_svg(self) -> None:
        with self.lock:
            export.save_all_frames_svg(self.scene)

    def _save_all_frames_png(self) -> None:
        with self.lock:
            export.save_all_frames_png(self.scene)

    def _make_video(self) -> None:
        export.make_video_from_frames(self.scene.fps_speed)


def _read_input(stream: TextIO, scene: Scene, lock: threading.RLock, close: bool) -> None:
    try:
        for raw in stream:
            line = raw[:-1] if raw.endswith("\n") else raw
            if line.endswith("\r"):
                line = line[:-1]
            with lock:
                scene.feed_line(line)
                if line.startswith("tick"):
                    print(f"\rreading tick {len(scene.frames) + 1}", end="", flush=True)
        with lock:
            scene.finish()
    finally:
        if close:
            stream.close()
    print()
    print(f"unparsed: {scene.unparsed}")


def main(argv: list[str] | None = None) -> int:
    """Open the viewer on a scene file, or on standard input without arguments."""
    import tkinter as tk

    args = sys.argv[1:] if argv is None else list(argv)
    stream = open(args[0], encoding="utf-8") if args else sys.stdin
    scene = Scene()
    lock = threading.RLock()
    root = tk.Tk()
    Viewer(scene, root, lock)
    reader = threading.Thread(
        target=_read_input, args=(stream, scene, lock, bool(args)), daemon=True
    )
    reader.start()
    root.mainloop()
    return 0