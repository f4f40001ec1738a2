import subprocess
import xml.etree.ElementTree as ET
from unittest import mock

import pytest

from rviewer.export import (
    convert_svg_to_png,
    make_video_from_frames,
    render_frame_svg,
    save_all_frames_png,
    save_all_frames_svg,
    save_frame_png,
    save_frame_svg,
)
from rviewer.scene import read_scene
from rviewer.settings import Settings

LINES = [
    "size (20,10)",
    "line s=(1,2) f=(3,4) col=(255,0,0)",
    "tick",
    "rect c=(5,5) s=(2,2) t=hidden",
    "circle c=(1,1) r=1 t=shown",
    "disable hidden",
]


def rsvg_settings():
    return Settings(
        conversion_tool="rsvg-convert",
        inkscape_path="inkscape",
        frame_resolution=100,
        max_threads=2,
    )


def multi_frame_scene():
    return read_scene(["size (20,10)", "line s=(1,2) f=(3,4)", "tick", "tick", "tick"])


def test_render_frame_has_background_and_visible_figures():
    scene = read_scene(LINES)
    root = render_frame_svg(scene, 0)
    assert [child.tag for child in root] == ["rect", "line", "circle"]
    assert root[0].get("fill") == "rgb(41, 41, 41)"
    assert root.get("viewBox") == "0 0 20 10"
    assert root.get("width") == "20"
    assert root.get("height") == "10"


def test_render_frame_flips_y_unless_flipy():
    plain = render_frame_svg(read_scene(LINES), 0)
    flipped = render_frame_svg(read_scene(["flipy"] + LINES), 0)
    assert plain.find("line").get("y1") == "8"
    assert flipped.find("line").get("y1") == "2"


def test_render_frame_out_of_range():
    scene = read_scene(LINES)
    with pytest.raises(IndexError):
        render_frame_svg(scene, len(scene.frames))


def test_save_frame_svg_round_trip(tmp_path):
    scene = read_scene(LINES)
    path = save_frame_svg(scene, 0, tmp_path / "frame.svg")
    root = ET.parse(path).getroot()
    assert root.tag.endswith("svg")
    assert len(list(root)) == len(list(render_frame_svg(scene, 0)))


def test_save_all_frames_svg(tmp_path):
    scene = multi_frame_scene()
    folder = tmp_path / "frames"
    paths = save_all_frames_svg(scene, folder)
    assert len(paths) == len(scene.frames)
    assert sorted(p.name for p in folder.iterdir()) == [p.name for p in paths]
    assert paths[0].name == "00001.svg"


def test_save_all_frames_svg_clears_folder(tmp_path):
    folder = tmp_path / "frames"
    folder.mkdir()
    (folder / "stale.txt").write_text("old")
    save_all_frames_svg(multi_frame_scene(), folder)
    assert not (folder / "stale.txt").exists()


@mock.patch("subprocess.run")
def test_convert_with_rsvg(run, tmp_path):
    svg = tmp_path / "a.svg"
    svg.write_text("<svg/>")
    png = tmp_path / "a.png"
    assert convert_svg_to_png(svg, png, rsvg_settings()) is True
    assert run.call_args.args[0] == ["rsvg-convert", str(svg), "-o", str(png), "-w", "100"]
    assert not svg.exists()


@mock.patch("subprocess.run", side_effect=FileNotFoundError("missing"))
def test_convert_tool_missing_keeps_svg(run, tmp_path):
    svg = tmp_path / "a.svg"
    svg.write_text("<svg/>")
    with pytest.raises(OSError):
        convert_svg_to_png(svg, tmp_path / "a.png", rsvg_settings())
    assert svg.exists()


@mock.patch("subprocess.Popen")
def test_convert_with_inkscape_gives_up_after_three_attempts(popen, tmp_path):
    process = popen.return_value
    process.wait.side_effect = subprocess.TimeoutExpired("inkscape", 1)
    svg = tmp_path / "a.svg"
    svg.write_text("<svg/>")
    png = tmp_path / "a.png"
    settings = Settings("inkscape", "/opt/inkscape", 50, 1)
    assert convert_svg_to_png(svg, png, settings) is False
    assert [c.kwargs["timeout"] for c in process.wait.call_args_list] == [30, 60, 90]
    assert process.terminate.call_count == 3
    assert popen.call_args.args[0] == ["/opt/inkscape", "-o", str(png), "-w", "50", str(svg)]
    assert not svg.exists()


@mock.patch("subprocess.Popen")
def test_convert_with_inkscape_succeeds(popen, tmp_path):
    svg = tmp_path / "a.svg"
    svg.write_text("<svg/>")
    settings = Settings("inkscape", "/opt/inkscape", 50, 1)
    assert convert_svg_to_png(svg, tmp_path / "a.png", settings) is True
    assert popen.call_count == 1


@mock.patch("subprocess.run")
def test_save_frame_png(run, tmp_path):
    scene = read_scene(LINES)
    png = tmp_path / "frame.png"
    save_frame_png(scene, 0, png, rsvg_settings()).join(timeout=10)
    command = run.call_args.args[0]
    assert command[3] == str(png)
    assert not (tmp_path / "_tmp_frame_0_.svg").exists()


@mock.patch("subprocess.run")
def test_save_all_frames_png(run, tmp_path):
    scene = multi_frame_scene()
    folder = tmp_path / "frames"
    save_all_frames_png(scene, rsvg_settings(), folder).join(timeout=10)
    assert run.call_count == len(scene.frames)
    outputs = sorted(c.args[0][3] for c in run.call_args_list)
    assert outputs == [str(folder / f"{i + 1:05}.png") for i in range(len(scene.frames))]
    assert list(folder.glob("_tmp_frame_*")) == []


@mock.patch("subprocess.run")
def test_make_video_from_frames(run, tmp_path):
    output = tmp_path / "video.mp4"
    output.write_text("old")
    make_video_from_frames(0.5, tmp_path / "frames", output).join(timeout=10)
    command = run.call_args.args[0]
    assert command[0] == "ffmpeg"
    assert command[command.index("-r") + 1] == "2"
    assert command[-1] == str(output)
    assert command[command.index("-i") + 1].endswith("frames/%05d.png")
    assert not output.exists()