# rviewer

A viewer for animations described as plain text. A program under study
prints figures one per line: rectangles, circles, lines, grids, polygons,
text and messages. It separates frames with `tick`. rviewer plays the
result back frame by frame. Frames can be exported as SVG or PNG and
joined into a video.

## Installation

```
pip install .
```

The viewer window uses tkinter, which must be available in your Python.
PNG export runs `rsvg-convert` or Inkscape, and video export runs
`ffmpeg`. Each tool must be installed if you want that kind of export.

## Viewing a scene

```
rviewer scene.txt
```

With no file argument, rviewer reads the scene from standard input. The
window opens at once and fills up as lines arrive:

```
my_program | rviewer
```

In the viewer:

- The Left and Right arrows step one frame.
- Space starts or stops playback. Starting on the last frame rewinds to
  the first.
- Drag with the left mouse button to pan. Use the wheel to zoom.
- `0` refits the view to the scene.
- The tag list on the right switches tagged figures on or off.
- The Export menu has these entries:
  - "Save frame as svg" writes `frame.svg`.
  - "Save frame as png" writes `frame.png`.
  - "Save all frames as svg" writes `frames/NNNNN.svg`.
  - "Save all frames as png" writes `frames/NNNNN.png`.
  - "Make video from frames" writes `video.mp4` from `frames/NNNNN.png`.

When the input ends, the number of lines that could not be parsed is
printed.

### Settings

PNG conversion reads `settings.json` from the directory of the running
program. If the file is missing, it is created. Missing entries are
filled in with defaults and the file is written back. The entries are:

- `conversion_tool`: `rsvg-convert` by default. Any other value means
  Inkscape is used.
- `inkscape_path`: the path of the Inkscape executable.
- `frame_resolution`: the width of exported PNGs in pixels, 1080 by default.
- `max_threads`: the number of parallel conversions, 4 by default.

## Scene format

```
size (100,60)
speed 30
rect c=(10,10) s=(4,4) col=(255,0,0) f=1
circle c=(20,20) r=3 t=points
line s=(0,0) f=(10,10) w=2
text c=(50,5) m="hello world" s=3
tick
```

Figure lines start with one of these words: `rect`, `circle`, `line`,
`grid`, `poly`, `text` or `msg`. They all take these parameters:

- `col=(r,g,b[,a])` sets the colour.
- `t=<tag>` adds a tag. It may be repeated.
- `k=1` keeps the figure in every later frame.
- `id=<n>` marks the figure for in-between frames.
- `fu=<name>` picks an easing curve.

Other directives:

- `width` and `font` set the default line width and font size.
- `shift (x,y)` moves every figure.
- `flipy` flips the y axis.
- `svgwidth` scales stroke widths in SVG export.
- `disable <tag>` starts a tag switched off.
- `in_betweens <n>` adds interpolated frames between figures that share
  an `id`.
- `setfunc <name> <values...>` defines an easing curve.

## Using it from Python

`rviewer.scene.read_scene(lines)` builds a `Scene` from description lines.
The functions in `rviewer.export` save its frames:

- `render_frame_svg`
- `save_frame_svg`
- `save_all_frames_svg`
- `save_frame_png`
- `save_all_frames_png`
- `make_video_from_frames`

`rviewer.client` writes scene descriptions:

```python
from rviewer.client import Circle, Color, Init, Rect, tick

with open("scene.txt", "w") as out:
    Init(size=(30.0, 30.0), speed=10.0).draw(out)
    Rect(center=(5.0, 5.0), size=(4.0, 3.0), color=Color.RED).draw(out)
    tick(out)
    Circle(center=(15.0, 15.0), radius=2.0, fill=True).draw(out)
```

The helpers `tick`, `disable_tag`, `set_func` and `message` write the
matching directives.

## What is not included

No example scenes ship with the package. Write your own scenes, for
example with `rviewer.client`.