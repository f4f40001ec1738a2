import math
import xml.etree.ElementTree as ET

import pytest

from rviewer.figures.base import Painter
from rviewer.figures.circle import CircleFigure
from rviewer.figures.rect import RectFigure
from rviewer.geometry import DrawProperties, Point, Size, SvgParams, Transform
from rviewer.interpolate import InBetweenProperties, interpolate


def _identity(flipy=True):
    return Transform(lambda p: p, Size(0, 0), Size(10, 10), flipy)


def _svg_params(flipy=True):
    return SvgParams(Size(10, 10), 1.0, flipy, lambda p: p)


def test_from_string_defaults():
    c = CircleFigure.from_string("circle", DrawProperties(width=3.0))
    assert c.center == Point(0, 0)
    assert c.radius == 1.0
    assert c.fill is False
    assert c.width == 3.0
    assert c.arc is None


def test_arc_angles_are_normalized():
    c = CircleFigure.from_string("circle arc=(4,-4)", DrawProperties())
    start, end = c.arc
    assert -math.pi < start <= math.pi
    assert -math.pi < end <= math.pi
    assert start == pytest.approx(4 - 2 * math.pi)
    assert end == pytest.approx(-4 + 2 * math.pi)


def test_flipped_arc():
    c = CircleFigure.from_string("circle arc=(0.5,1.5)", DrawProperties())
    assert c.flipped_arc(True) == (0.5, 1.5)
    assert c.flipped_arc(False) == (-1.5, -0.5)
    assert CircleFigure.from_string("circle", DrawProperties()).flipped_arc(False) is None


def test_draw_full_circle_scales_radius():
    c = CircleFigure.from_string("circle c=(3,4) r=2 f=1", DrawProperties())
    painter = Painter()
    c.draw(painter, 3.0, _identity())
    (op,) = painter.operations
    assert op.kind == "circle"
    assert op.params["center"] == Point(3, 4)
    assert op.params["radius"] == pytest.approx(2 * 3.0)
    assert op.params["fill"] is True


def test_draw_arc_extent_is_positive():
    c = CircleFigure.from_string("circle r=1 arc=(2,-2)", DrawProperties())
    painter = Painter()
    c.draw(painter, 1.0, _identity())
    (op,) = painter.operations
    assert op.kind == "arc"
    assert 0 <= op.params["extent"] < 2 * math.pi
    assert op.params["start"] == pytest.approx(2.0)


def test_svg_circle_flips_y():
    img = ET.Element("svg")
    CircleFigure.from_string("circle c=(3,2) r=1.5 col=(0,255,0)", DrawProperties()).draw_on_image(img, _svg_params())
    (el,) = list(img)
    assert el.tag == "circle"
    assert float(el.get("cx")) == 3.0
    assert float(el.get("cy")) + 2.0 == pytest.approx(10.0)
    assert el.get("fill") == "none"
    assert el.get("stroke") == "rgb(0, 255, 0)"


def test_svg_arc_path():
    img = ET.Element("svg")
    CircleFigure.from_string("circle c=(5,5) r=1 arc=(0,1) f=1", DrawProperties()).draw_on_image(img, _svg_params())
    CircleFigure.from_string("circle c=(5,5) r=1 arc=(0,1)", DrawProperties()).draw_on_image(img, _svg_params())
    filled, outlined = list(img)
    assert filled.tag == "path"
    assert filled.get("d").startswith("M")
    assert filled.get("d").endswith("z")
    assert filled.get("stroke") == "none"
    assert "A" in outlined.get("d")
    assert not outlined.get("d").endswith("z")
    assert outlined.get("fill") == "none"


def test_in_betweens_arc_only_when_both_have_one():
    a = CircleFigure.from_string("circle c=(0,0) r=1 arc=(0,1)", DrawProperties())
    b = CircleFigure.from_string("circle c=(2,2) r=3 arc=(1,2)", DrawProperties())
    plain = CircleFigure.from_string("circle c=(2,2) r=3", DrawProperties())
    props = InBetweenProperties()
    props.set_frames(2)
    (mid,) = a.in_betweens(b, props)
    assert mid.arc == interpolate(a.arc, b.arc, 0.5)
    assert mid.radius == interpolate(a.radius, b.radius, 0.5)
    (mid_plain,) = a.in_betweens(plain, props)
    assert mid_plain.arc is None


def test_in_betweens_rejects_other_kind():
    props = InBetweenProperties()
    props.set_frames(2)
    with pytest.raises(TypeError):
        CircleFigure().in_betweens(RectFigure(), props)