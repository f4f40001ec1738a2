import pytest

from rviewer.figures.circle import CircleFigure
from rviewer.figures.grid import GridFigure
from rviewer.figures.line import LineFigure
from rviewer.figures.message import MessageFigure
from rviewer.figures.poly import PolyFigure
from rviewer.figures.rect import RectFigure
from rviewer.figures.text import TextFigure
from rviewer.geometry import DrawProperties, Point, Size
from rviewer.interpolate import InBetweenProperties
from rviewer.scene import Scene, in_betweens, parse_figure, read_scene


@pytest.mark.parametrize(
    "line,kind",
    [
        ("rect c=(1,1)", RectFigure),
        ("circle c=(1,1)", CircleFigure),
        ("line s=(0,0)", LineFigure),
        ("grid d=(2,2)", GridFigure),
        ("poly p=(0,0)", PolyFigure),
        ("text m=hi", TextFigure),
        ("msg hi", MessageFigure),
    ],
)
def test_parse_figure_dispatch(line, kind):
    assert type(parse_figure(line, DrawProperties())) is kind


def test_parse_figure_unknown_line():
    assert parse_figure("hexagon c=(1,1)", DrawProperties()) is None


def test_frames_and_kept_figures():
    scene = read_scene([
        "tick",
        "rect c=(1,1) k=1",
        "line s=(0,0)",
        "tick",
        "circle c=(2,2)",
    ])
    assert scene.frames == [[0, 1], [0, 2]]
    assert scene.finished is True
    assert len(scene.objects) == 3


def test_figures_before_first_tick_persist():
    scene = read_scene(["rect c=(1,1)", "tick", "line", "tick", "line"])
    assert scene.frames == [[0, 1], [0, 2]]


def test_settings_lines():
    scene = read_scene([
        "size=(30,20)",
        "shift=(1,2)",
        "speed=30",
        "svgwidth=0.5",
        "width=3",
        "font=4",
        "flipy=1",
        "line",
    ])
    assert scene.size == Size(30, 20)
    assert scene.shift == Size(1, 2)
    assert scene.fps_speed == pytest.approx(1 / 30)
    assert scene.svg_width_scale == 0.5
    assert scene.flipy is True
    assert scene.draw_properties.font == 4.0
    assert scene.objects[0].width == 3.0


def test_tags_and_disable():
    scene = read_scene([
        "disable b",
        "rect t=a",
        "rect t=b t=a",
    ])
    assert scene.tags == [("a", True), ("b", False)]
    assert scene.enabled_tags() == {"a"}
    scene.set_tag("b", True)
    assert scene.enabled_tags() == {"a", "b"}
    with pytest.raises(KeyError):
        scene.set_tag("missing", True)


def test_disable_after_tag_seen():
    scene = read_scene(["rect t=a", "disable a"])
    assert scene.enabled_tags() == set()


def test_unparsed_lines_are_counted():
    scene = read_scene(["nonsense", "", "rect"])
    assert scene.unparsed == 2
    assert len(scene.objects) == 1


def test_message_numbering_restarts_each_tick():
    scene = read_scene(["tick", "msg a", "msg b", "tick", "msg c"])
    indices = [obj.message_ind for obj in scene.objects]
    assert indices == [0, 1, 0]


def test_in_between_frames_are_generated():
    scene = read_scene([
        "in_betweens=3",
        "tick",
        "circle c=(0,0) id=1",
        "tick",
        "circle c=(3,0) id=1",
    ])
    assert scene.frames == [[0], [2], [3], [1]]
    xs = [scene.objects[i].center.x for i in (2, 3)]
    assert xs[0] < xs[1]
    assert all(0.0 < x < 3.0 for x in xs)


def test_figures_without_id_stay_during_in_betweens():
    scene = read_scene([
        "in_betweens=2",
        "tick",
        "rect c=(5,5)",
        "tick",
        "rect c=(6,6)",
    ])
    assert scene.frames == [[0], [0], [1]]


def test_setfunc_controls_easing():
    scene = read_scene([
        "in_betweens=2",
        "setfunc jump 1",
        "tick",
        "line s=(0,0) id=7 fu=jump",
        "tick",
        "line s=(4,4) id=7 fu=jump",
    ])
    assert scene.in_between_properties.funcs["jump"] == [1.0]
    assert scene.objects[scene.frames[1][0]].start == Point(4, 4)


def test_crlf_lines_are_accepted():
    scene = read_scene(["size=(4,6)\r\n", "rect\r\n"])
    assert scene.size == Size(4, 6)
    assert len(scene.objects) == 1


@pytest.mark.parametrize("line", ["speed=fast", "width=", "size=(1)", "in_betweens=x", "setfunc"])
def test_malformed_settings_raise(line):
    with pytest.raises(ValueError):
        read_scene([line])


def test_in_betweens_of_different_kinds_fails():
    props = InBetweenProperties()
    props.set_frames(2)
    with pytest.raises(TypeError):
        in_betweens(RectFigure(), CircleFigure(), props)


def test_add_frame_on_empty_scene_appends_copy():
    scene = Scene()
    frame = [0]
    scene.objects.append(RectFigure())
    scene.add_frame(frame)
    frame.append(5)
    assert scene.frames == [[0]]