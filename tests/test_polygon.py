import pytest

from rviewer.geometry import Point
from rviewer.polygon import BoundingBox, PathOp, Poly

SQUARE = [Point(0, 0), Point(1, 0), Point(1, 1), Point(0, 1)]


def test_path_elements():
    elements = list(Poly(SQUARE).path_elements())
    assert [e.op for e in elements] == [PathOp.MOVE_TO] + [PathOp.LINE_TO] * 3
    assert [e.point for e in elements] == SQUARE


def test_empty_path_raises():
    with pytest.raises(ValueError):
        list(Poly([]).path_elements())


def test_area_translation_invariant():
    moved = [Point(p.x + 5.5, p.y - 3.0) for p in SQUARE]
    assert Poly(moved).area() == pytest.approx(Poly(SQUARE).area())


def test_area_of_single_point_is_zero():
    assert Poly([Point(2, 3)]).area() == 0


def test_perimeter_open_square():
    assert Poly(SQUARE).perimeter() == pytest.approx(3.0)


def test_bounding_box():
    points = [Point(2, -1), Point(-3, 4), Point(1, 7)]
    assert Poly(points).bounding_box() == BoundingBox(-3, -1, 2, 7)


def test_bounding_box_empty_raises():
    with pytest.raises(ValueError):
        Poly().bounding_box()


def test_winding_at_first_vertex():
    assert Poly(SQUARE).winding(SQUARE[0]) == 1


def test_winding_far_point():
    assert Poly(SQUARE).winding(Point(10, 10)) == 0