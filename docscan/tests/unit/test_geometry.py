"""Unit tests for geometry value objects."""

import pytest
from docscan.domain.value_objects.geometry import Point, Quadrilateral


class TestPoint:
    """Tests for Point class."""

    def test_creation(self):
        p = Point(10, 20)
        assert p.x == 10
        assert p.y == 20

    def test_distance_to(self):
        p1 = Point(0, 0)
        p2 = Point(3, 4)
        assert p1.distance_to(p2) == 5.0  # 3-4-5 triangle

    def test_addition(self):
        assert Point(1, 2) + Point(3, 4) == Point(4, 6)

    def test_subtraction(self):
        assert Point(5, 5) - Point(2, 3) == Point(3, 2)

    def test_scalar_multiplication(self):
        assert Point(2, 3) * 2 == Point(4, 6)

    def test_immutable(self):
        p = Point(1, 2)
        with pytest.raises(AttributeError):
            p.x = 5


class TestQuadrilateral:
    """Tests for Quadrilateral class."""

    def test_iterates_in_role_order(self):
        quad = Quadrilateral.from_bbox(0, 0, 10, 20)
        assert list(quad) == [Point(0, 0), Point(10, 0), Point(10, 20), Point(0, 20)]
        assert quad.points == list(quad)

    def test_area(self):
        quad = Quadrilateral.from_bbox(0, 0, 100, 50)
        assert quad.area == 5000

    def test_edge_lengths(self):
        quad = Quadrilateral(Point(0, 0), Point(30, 0), Point(30, 40), Point(0, 40))
        top, bottom, left, right = quad.edge_lengths()
        assert (top, bottom, left, right) == (30, 30, 40, 40)

    def test_scale(self):
        quad = Quadrilateral.from_bbox(1, 2, 3, 4).scale(2)
        assert quad == Quadrilateral.from_bbox(2, 4, 6, 8)

    def test_is_close_to_within_tolerance(self):
        a = Quadrilateral.from_bbox(0, 0, 100, 100)
        b = Quadrilateral.from_bbox(10, 10, 100, 100)  # every corner moves ~14.1
        assert a.is_close_to(b, 15)
        assert not a.is_close_to(b, 14)

    def test_is_close_to_checks_every_corner(self):
        a = Quadrilateral.from_bbox(0, 0, 100, 100)
        b = Quadrilateral(a.top_left, a.top_right, Point(150, 100), a.bottom_left)
        assert not a.is_close_to(b, 15)
