import xml.etree.ElementTree as ET

import pytest

from rviewer.figures.base import Painter
from rviewer.figures.line import LineFigure
from rviewer.figures.rect import RectFigure
from rviewer.geometry import Color, DrawProperties, Point, Size, SvgParams, Transform
from rviewer.interpolate import InBetweenProperties, interpolate


def _identity():
    return Transform(lambda p: p, Size(0, 0), Size(10, 10), True)


def _svg_params():
    return SvgParams(Size(10, 10), 1.0, True, lambda p: p)


def test_from_string_reads_all_parameters():
    r = RectFigure.from_string("rect c=(1,2) s=(3,4) f=1 w=2 col=(255,0,0) a=BE", DrawProperties())
    assert r.center == Point(1, 2)
    assert r.size == Point(3, 4)
    assert r.fill is True
    assert r.width == 2.0
    assert r.alignment == ("B", "E")
    assert r.common.color == Color(255, 0, 0)


def test_from_string_defaults():
    r = RectFigure.from_string("rect", DrawProperties(width=5.0))
    assert r.width == 5.0
    assert r.center == Point(0, 0)
    assert r.alignment == ("C", "C")
    assert r.fill is False


def test_draw_scales_size_and_keeps_center():
    r = RectFigure.from_string("rect c=(1,2) s=(3,4)", DrawProperties())
    painter = Painter()
    r.draw(painter, 2.0, _identity())
    (op,) = painter.operations
    assert op.kind == "rect"
    assert op.params["center"] == Point(1, 2)
    assert op.params["size"] == Size(3 * 2.0, 4 * 2.0)


def test_alignment_begin_moves_center_by_half_size():
    centered = RectFigure.from_string("rect c=(5,5) s=(2,4)", DrawProperties())
    begun = RectFigure.from_string("rect c=(5,5) s=(2,4) a=BB", DrawProperties())
    p1, p2 = Painter(), Painter()
    centered.draw(p1, 1.0, _identity())
    begun.draw(p2, 1.0, _identity())
    c1 = p1.operations[0].params["center"]
    c2 = p2.operations[0].params["center"]
    assert c2.x - c1.x == pytest.approx(1.0)
    assert c2.y - c1.y == pytest.approx(2.0)


def test_svg_filled_and_outlined():
    img = ET.Element("svg")
    RectFigure.from_string("rect c=(5,5) s=(2,2) f=1 col=(255,0,0)", DrawProperties()).draw_on_image(img, _svg_params())
    RectFigure.from_string("rect c=(5,5) s=(2,2) col=(255,0,0)", DrawProperties()).draw_on_image(img, _svg_params())
    filled, outlined = list(img)
    assert filled.get("fill") == "rgb(255, 0, 0)"
    assert filled.get("stroke") is None
    assert outlined.get("fill") == "none"
    assert outlined.get("stroke") == "rgb(255, 0, 0)"
    x = float(filled.get("x"))
    assert x + float(filled.get("width")) / 2 == pytest.approx(5.0)


def test_in_betweens_count_and_midpoint():
    a = RectFigure.from_string("rect c=(0,0) s=(1,1) f=1", DrawProperties())
    b = RectFigure.from_string("rect c=(4,8) s=(3,3)", DrawProperties())
    props = InBetweenProperties()
    props.set_frames(4)
    result = a.in_betweens(b, props)
    assert len(result) == 3
    assert result[1].center == interpolate(a.center, b.center, 0.5)
    assert all(r.fill for r in result)


def test_in_betweens_uses_named_easing():
    a = RectFigure.from_string("rect c=(0,0)", DrawProperties())
    b = RectFigure.from_string("rect c=(4,4) fu=ease", DrawProperties())
    props = InBetweenProperties()
    props.set_frames(4)
    props.funcs["ease"] = [0.0, 0.0, 1.0]
    result = a.in_betweens(b, props)
    assert result[0].center == a.center
    assert result[2].center == b.center


def test_in_betweens_rejects_other_kind():
    a = RectFigure.from_string("rect", DrawProperties())
    b = LineFigure.from_string("line", DrawProperties())
    props = InBetweenProperties()
    props.set_frames(2)
    with pytest.raises(TypeError):
        a.in_betweens(b, props)