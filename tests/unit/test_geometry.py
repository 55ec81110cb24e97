"""Unit tests for geometric primitives."""

import math

import pytest

from confinerbaker.core.geometry import (
    INFINITY,
    IntersectionType,
    angle,
    find_intersection,
    inverse_lerp,
    is_inside,
    nearest_point_on_contours,
    nearest_point_on_segment,
    signed_angle,
)
from confinerbaker.domain import Vector2

V = Vector2

INTERSECTION_CASES = [
    # crossing segments
    (V(0, 1), V(0, -1), V(-1, 0), V(1, 0), IntersectionType.SEGMENTS, V(0, 0)),
    (V(0, 1), V(0, 0), V(-1, 0), V(1, 0), IntersectionType.SEGMENTS, V(0, 0)),
    (V(0, 0), V(2, 0), V(0, 1), V(1, 0), IntersectionType.SEGMENTS, V(1, 0)),
    (V(0, 0), V(2, 0), V(1, 0), V(0, 1), IntersectionType.SEGMENTS, V(1, 0)),
    # lines meet outside the first segment
    (V(0, 2), V(0, 1), V(-1, 0), V(1, 0), IntersectionType.LINES, V(0, 0)),
    # parallel
    (V(0, 2), V(0, 1), V(1, 2), V(1, 1), IntersectionType.NONE, INFINITY),
    # collinear
    (V(1, 2), V(1, 1), V(1, -2), V(1, -1), IntersectionType.COLLINEAR_APART, INFINITY),
    (V(1, 2), V(1, -2), V(1, 3), V(1, 1), IntersectionType.COLLINEAR_TOUCHING, INFINITY),
    (V(1, 2), V(1, -2), V(1, 2), V(1, -2), IntersectionType.COLLINEAR_TOUCHING, INFINITY),
    (V(1, 2), V(1, -2), V(1, -2), V(1, 2), IntersectionType.COLLINEAR_TOUCHING, INFINITY),
    (V(0, 1), V(0, 1), V(1, 0), V(1, 0), IntersectionType.COLLINEAR_TOUCHING, INFINITY),
    # collinear segments sharing one endpoint
    (V(0, 3), V(0, 5), V(0, 5), V(0, 9), IntersectionType.COLLINEAR_TOUCHING, V(0, 5)),
    (V(0, 5), V(0, 3), V(0, 5), V(0, 9), IntersectionType.COLLINEAR_TOUCHING, V(0, 5)),
    (V(0, 3), V(0, 5), V(0, 9), V(0, 5), IntersectionType.COLLINEAR_TOUCHING, V(0, 5)),
    (V(0, 5), V(0, 3), V(0, 9), V(0, 5), IntersectionType.COLLINEAR_TOUCHING, V(0, 5)),
]


class TestFindIntersection:
    """Tests for segment intersection classification."""

    @pytest.mark.parametrize(("p1", "p2", "q1", "q2", "expected_type", "expected_point"), INTERSECTION_CASES)
    def test_intersection_cases(self, p1, p2, q1, q2, expected_type, expected_point):
        """Test intersection type and point for known configurations."""
        result_type, point = find_intersection(p1, p2, q1, q2)
        assert result_type == expected_type
        if expected_point == INFINITY:
            assert math.isinf(point.x)
            assert math.isinf(point.y)
        else:
            assert point.is_close(expected_point)

    def test_near_parallel_does_not_divide(self):
        """Test that nearly parallel lines are handled without blowing up."""
        result_type, point = find_intersection(V(0, 0), V(1, 0), V(0, 1), V(1, 1 + 1e-9))
        assert result_type == IntersectionType.NONE
        assert point == INFINITY


class TestAngles:
    """Tests for angle helpers."""

    @pytest.mark.parametrize(
        ("v", "expected"),
        [
            (V(-1, 0), 90.0),
            (V(1, 0), 90.0),
            (V(-0.0001, 1), 0.00572958),
            (V(0.0001, 1), 0.00572958),
        ],
    )
    def test_angle(self, v, expected):
        """Test unsigned angle from the up vector."""
        assert angle(Vector2.UP, v) == pytest.approx(expected, abs=1e-4)

    @pytest.mark.parametrize(
        ("v", "expected"),
        [
            (V(-1, 0), 90.0),
            (V(1, 0), -90.0),
            (V(-0.0001, 1), 0.00572958),
            (V(0.0001, 1), -0.00572958),
        ],
    )
    def test_signed_angle(self, v, expected):
        """Test signed angle is counter-clockwise positive."""
        assert signed_angle(Vector2.UP, v) == pytest.approx(expected, abs=1e-4)
        assert signed_angle(v, Vector2.UP) == pytest.approx(-expected, abs=1e-4)

    def test_angle_zero_vector(self):
        """Test that a zero-length vector gives a zero angle."""
        assert angle(Vector2.ZERO, Vector2.UP) == 0.0

    def test_inverse_lerp(self):
        """Test inverse interpolation and clamping."""
        assert inverse_lerp(1.0, 3.0, 2.0) == 0.5
        assert inverse_lerp(1.0, 3.0, 5.0) == 1.0
        assert inverse_lerp(1.0, 3.0, 0.0) == 0.0
        assert inverse_lerp(2.0, 2.0, 2.0) == 0.0


class TestIsInside:
    """Tests for point containment."""

    @pytest.fixture
    def diamond(self) -> list[Vector2]:
        return [V(0, 1), V(1, 0), V(0, -1), V(-1, 0)]

    def test_inside_and_outside(self, diamond):
        """Test points clearly inside and outside."""
        assert is_inside([diamond], V(0, 0))
        assert is_inside([diamond], V(0.4, 0.4))
        assert not is_inside([diamond], V(0.6, 0.6))
        assert not is_inside([diamond], V(5, 0))

    def test_independent_of_start_point(self, diamond):
        """Test the result does not change when the contour is rotated."""
        probes = [V(0, 0), V(-0.5, 0), V(0.99, 0), V(0, 0.5), V(1.5, 0), V(0.5, 0.6)]
        expected = [is_inside([diamond], p) for p in probes]
        for shift in range(1, len(diamond)):
            rotated = diamond[shift:] + diamond[:shift]
            assert [is_inside([rotated], p) for p in probes] == expected

    def test_hole(self):
        """Test that a contour inside another acts as a hole."""
        outer = [V(0, 0), V(0, 4), V(4, 4), V(4, 0)]
        hole = [V(1, 1), V(3, 1), V(3, 3), V(1, 3)]
        assert is_inside([outer, hole], V(0.5, 2))
        assert not is_inside([outer, hole], V(2, 2))

    def test_empty_contours(self):
        """Test that nothing is inside an empty set of contours."""
        assert not is_inside([], V(0, 0))


class TestNearestPoint:
    """Tests for nearest point helpers."""

    def test_nearest_point_on_segment(self):
        """Test projection and clamping onto a segment."""
        nearest, distance = nearest_point_on_segment(V(1, 1), V(0, 0), V(2, 0))
        assert nearest == V(1, 0)
        assert distance == pytest.approx(1.0)

        nearest, _ = nearest_point_on_segment(V(5, 1), V(0, 0), V(2, 0))
        assert nearest == V(2, 0)

    def test_zero_length_segment(self):
        """Test that a zero-length segment returns its start."""
        nearest, distance = nearest_point_on_segment(V(3, 4), V(0, 0), V(0, 0))
        assert nearest == V(0, 0)
        assert distance == pytest.approx(5.0)

    def test_nearest_point_on_contours(self):
        """Test searching all edges including the closing one."""
        square = [V(0, 0), V(0, 2), V(2, 2), V(2, 0)]
        assert nearest_point_on_contours(V(1, -1), [square]) == V(1, 0)
        assert nearest_point_on_contours(V(0, 0), []) is None
