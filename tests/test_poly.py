import xml.etree.ElementTree as ET

import pytest

from rviewer.figures.base import Painter
from rviewer.figures.line import LineFigure
from rviewer.figures.poly import PolyFigure
from rviewer.geometry import Color, DrawProperties, Point, Size, SvgParams, Transform
from rviewer.interpolate import InBetweenProperties


def _identity_transform():
    return Transform(lambda p: p, Size(0, 0), Size(10, 10), True)


def _svg_params():
    return SvgParams(size=Size(10, 10), width_scale=1.0, flipy=True, transform=lambda p: p)


def test_from_string_reads_all_points():
    fig = PolyFigure.from_string("poly p=(0,0) p=(1,2) p=(3,4) f=1 w=2 col=(255,0,0)", DrawProperties())
    assert fig.points == [Point(0, 0), Point(1, 2), Point(3, 4)]
    assert fig.fill is True
    assert fig.width == 2.0
    assert fig.common.color == Color(255, 0, 0)


def test_from_string_defaults():
    fig = PolyFigure.from_string("poly", DrawProperties(width=4.5))
    assert fig.points == []
    assert fig.fill is False
    assert fig.width == 4.5


def test_draw_records_transformed_polygon():
    fig = PolyFigure.from_string("poly p=(0,0) p=(1,2)", DrawProperties())
    painter = Painter()
    fig.draw(painter, 1.0, _identity_transform())
    assert len(painter.operations) == 1
    op = painter.operations[0]
    assert op.kind == "polygon"
    assert op.params["points"] == [Point(0, 0), Point(1, 2)]
    assert op.params["fill"] is False


def test_svg_filled_polygon():
    fig = PolyFigure.from_string("poly p=(0,0) p=(1,2) f=1 col=(1,2,3)", DrawProperties())
    img = fig.draw_on_image(ET.Element("svg"), _svg_params())
    (elem,) = list(img)
    assert elem.tag == "polygon"
    assert elem.get("points") == "0,10 1,8"
    assert elem.get("fill") == "rgb(1, 2, 3)"


def test_svg_outline_is_polyline():
    fig = PolyFigure.from_string("poly p=(0,0) p=(1,2) col=(1,2,3)", DrawProperties())
    img = fig.draw_on_image(ET.Element("svg"), _svg_params())
    (elem,) = list(img)
    assert elem.tag == "polyline"
    assert elem.get("fill") == "none"
    assert elem.get("stroke") == "rgb(1, 2, 3)"


@pytest.mark.parametrize("k", [0.0, 1.0])
def test_in_betweens_endpoints(k):
    a = PolyFigure.from_string("poly p=(0,0) p=(1,1) w=1", DrawProperties())
    b = PolyFigure.from_string("poly p=(4,4) p=(5,5) w=3", DrawProperties())
    props = InBetweenProperties(frames=2, func=[k])
    (mid,) = a.in_betweens(b, props)
    expected = a if k == 0.0 else b
    assert mid.points == expected.points
    assert mid.width == expected.width


def test_in_betweens_count_matches_frames():
    a = PolyFigure.from_string("poly p=(0,0)", DrawProperties())
    b = PolyFigure.from_string("poly p=(4,4)", DrawProperties())
    props = InBetweenProperties()
    props.set_frames(5)
    assert len(a.in_betweens(b, props)) == 4


def test_in_betweens_with_fewer_points_fails():
    a = PolyFigure.from_string("poly p=(0,0) p=(1,1)", DrawProperties())
    b = PolyFigure.from_string("poly p=(4,4)", DrawProperties())
    props = InBetweenProperties()
    props.set_frames(2)
    with pytest.raises(ValueError):
        a.in_betweens(b, props)


def test_in_betweens_with_other_type_fails():
    a = PolyFigure.from_string("poly p=(0,0)", DrawProperties())
    props = InBetweenProperties()
    props.set_frames(2)
    with pytest.raises(TypeError):
        a.in_betweens(LineFigure(), props)