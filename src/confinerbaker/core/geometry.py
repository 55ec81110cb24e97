"""Geometric primitives for shrinking and querying confiner polygons.

This module provides core mathematical utilities for:
- Signed area calculation (shoelace formula)
- Segment/line intersection classification
- Unsigned and signed angles between vectors
- Point-in-polygon testing (ray casting algorithm)
- Nearest point calculations

All functions are pure and stateless.
"""

import math
from collections.abc import Sequence
from enum import Enum

from confinerbaker.domain import Vector2, signed_area

# Cross products below this are treated as parallel lines
_PARALLEL_EPSILON = 1e-5

# Squared distance under which segment endpoints are considered touching
_TOUCH_SQR_DISTANCE = 0.001

INFINITY = Vector2(math.inf, math.inf)

__all__ = [
    "INFINITY",
    "IntersectionType",
    "angle",
    "find_intersection",
    "inverse_lerp",
    "is_inside",
    "nearest_point_on_contours",
    "nearest_point_on_segment",
    "signed_angle",
    "signed_area",
]


class IntersectionType(Enum):
    """Result of intersecting two segments.

    - NONE: Lines are parallel and apart
    - LINES: Lines cross, but outside at least one of the segments
    - SEGMENTS: The segments themselves cross
    - COLLINEAR_APART: Segments lie on one line without touching
    - COLLINEAR_TOUCHING: Segments lie on one line and touch or overlap
    """

    NONE = 0
    LINES = 1
    SEGMENTS = 2
    COLLINEAR_APART = 3
    COLLINEAR_TOUCHING = 4


def find_intersection(
    p1: Vector2, p2: Vector2, q1: Vector2, q2: Vector2
) -> tuple[IntersectionType, Vector2]:
    """Intersect segment p1-p2 with segment q1-q2.

    Near-parallel lines never divide by their near-zero cross product. When
    they are collinear and their endpoints are within a small tolerance, the
    shared endpoint is reported as a degenerate intersection.

    Args:
        p1: Start of the first segment
        p2: End of the first segment
        q1: Start of the second segment
        q2: End of the second segment

    Returns:
        Tuple of (intersection type, intersection point). The point is
        INFINITY when the lines do not meet at a single point.

    Examples:
        >>> find_intersection(Vector2(0, 1), Vector2(0, -1), Vector2(-1, 0), Vector2(1, 0))
        (<IntersectionType.SEGMENTS: 2>, Vector2(x=0.0, y=0.0))
    """
    p = p2 - p1
    q = q2 - q1
    pq = q1 - p1
    p_cross_q = p.cross(q)

    if abs(p_cross_q) < _PARALLEL_EPSILON:
        intersection = INFINITY
        if abs(pq.cross(p)) >= _PARALLEL_EPSILON:
            return IntersectionType.NONE, intersection

        dot_pq = q.dot(p)
        if dot_pq > 0 and p1.sqr_distance_to(q2) < _TOUCH_SQR_DISTANCE:
            # q ends where p starts
            return IntersectionType.COLLINEAR_TOUCHING, q2
        if dot_pq < 0 and p2.sqr_distance_to(q2) < _TOUCH_SQR_DISTANCE:
            # p and q end at the same point
            return IntersectionType.COLLINEAR_TOUCHING, p2

        dot = pq.dot(p)
        if 0 <= dot <= p.dot(p):
            if dot < 1e-4:
                if dot_pq <= 0 and p1.sqr_distance_to(q1) < _TOUCH_SQR_DISTANCE:
                    intersection = p1
            elif dot_pq > 0 and p2.sqr_distance_to(q1) < _TOUCH_SQR_DISTANCE:
                intersection = p2
            return IntersectionType.COLLINEAR_TOUCHING, intersection

        dot = (p1 - q1).dot(q)
        if 0 <= dot <= q.dot(q):
            return IntersectionType.COLLINEAR_TOUCHING, intersection

        return IntersectionType.COLLINEAR_APART, intersection

    t = pq.cross(q) / p_cross_q
    intersection = p1 + p * t

    u = pq.cross(p) / p_cross_q
    if 0 <= t <= 1 and 0 <= u <= 1:
        return IntersectionType.SEGMENTS, intersection

    return IntersectionType.LINES, intersection


def angle(a: Vector2, b: Vector2) -> float:
    """Unsigned angle between two vectors in degrees.

    Args:
        a: First vector
        b: Second vector

    Returns:
        Angle in [0, 180]; 0 if either vector has zero length
    """
    denominator = math.sqrt(a.sqr_magnitude * b.sqr_magnitude)
    if denominator < 1e-15:
        return 0.0
    cosine = max(-1.0, min(1.0, a.dot(b) / denominator))
    return math.degrees(math.acos(cosine))


def signed_angle(a: Vector2, b: Vector2) -> float:
    """Signed angle from a to b in degrees, counter-clockwise positive.

    Args:
        a: Vector to measure from
        b: Vector to measure to

    Returns:
        Angle in [-180, 180]
    """
    unsigned = angle(a, b)
    return unsigned if a.cross(b) >= 0 else -unsigned


def inverse_lerp(a: float, b: float, value: float) -> float:
    """Find where value lies between a and b.

    Args:
        a: Value mapped to 0
        b: Value mapped to 1
        value: Value to locate

    Returns:
        Interpolation factor clamped to [0, 1]; 0 when a == b
    """
    if a == b:
        return 0.0
    return max(0.0, min(1.0, (value - a) / (b - a)))


def is_inside(contours: Sequence[Sequence[Vector2]], point: Vector2) -> bool:
    """Determine if a point is inside a set of contours.

    Casts a horizontal ray from the point to the right and counts crossings
    with the edges of every contour. Odd number of crossings = inside. Each
    edge owns its lower endpoint only, so a ray through a vertex is counted
    once no matter where the contour starts.

    Args:
        contours: Closed contours, holes included
        point: The point to test

    Returns:
        True if point is inside, False otherwise

    Examples:
        >>> square = [Vector2(0, 0), Vector2(2, 0), Vector2(2, 2), Vector2(0, 2)]
        >>> is_inside([square], Vector2(1, 1))
        True
        >>> is_inside([square], Vector2(3, 1))
        False
    """
    xs = [p.x for contour in contours for p in contour]
    if not xs or point.x < min(xs) or point.x > max(xs):
        return False

    inside = False
    x, y = point.x, point.y
    for contour in contours:
        n = len(contour)
        if n < 3:
            continue
        j = n - 1
        for i in range(n):
            xi, yi = contour[i].x, contour[i].y
            xj, yj = contour[j].x, contour[j].y

            # Check if ray from point crosses edge (j, i)
            if ((yi > y) != (yj > y)) and (x < (xj - xi) * (y - yi) / (yj - yi) + xi):
                inside = not inside

            j = i

    return inside


def nearest_point_on_segment(
    point: Vector2, seg_start: Vector2, seg_end: Vector2
) -> tuple[Vector2, float]:
    """Find the closest point on a line segment to a given point.

    Projects the point onto the infinite line, then clamps to the segment endpoints.

    Args:
        point: The point to project
        seg_start: Start point of line segment
        seg_end: End point of line segment

    Returns:
        Tuple of (nearest_point, distance)
    """
    segment = seg_end - seg_start
    segment_length_sq = segment.sqr_magnitude
    if segment_length_sq < 1e-10:
        return seg_start, point.distance_to(seg_start)

    t = max(0.0, min(1.0, (point - seg_start).dot(segment) / segment_length_sq))
    nearest = seg_start + segment * t
    return nearest, point.distance_to(nearest)


def nearest_point_on_contours(
    point: Vector2, contours: Sequence[Sequence[Vector2]]
) -> Vector2 | None:
    """Find the closest point on the edges of a set of contours.

    Args:
        point: Reference point
        contours: Closed contours to search

    Returns:
        Nearest boundary point, or None if there are no edges
    """
    best: Vector2 | None = None
    best_distance = math.inf
    for contour in contours:
        n = len(contour)
        for i in range(n):
            nearest, distance = nearest_point_on_segment(point, contour[i], contour[(i + 1) % n])
            if distance < best_distance:
                best_distance = distance
                best = nearest
    return best
