"""Aspect-aware shrink directions.

Every point of a polygon gets a direction such that moving all points by a
uniform step shrinks the polygon while a window rectangle of the polygon's
aspect ratio still fits in it. The rectangle is described by the eight
directions of AspectData.normal_directions.

The direction of a point is found in two passes:
1. The plain inward normal, the bisector of the two adjacent edge normals.
2. The contact case between the window rectangle and the two edges at the
   point, classified by the normal's angle and the angles of both edges.
   The point is then aimed at the centre of the rectangle in that contact.
"""

import math
from dataclasses import dataclass
from enum import Enum, IntEnum, auto

import structlog

from confinerbaker.core.geometry import angle, signed_angle
from confinerbaker.domain import AspectData, ShrinkablePoint, ShrinkablePolygon, Vector2

logger = structlog.get_logger(__name__)

# Angles at or beyond these limits make the triangle construction degenerate
_NARROW_ANGLE = 0.05
_STRAIGHT_ANGLE = 179.95

# Tolerance on the triangle's angle sum before retrying with the side flipped
_ANGLE_SUM_TOLERANCE = 0.5

# Cross products of edge normals beyond this mark a reflex corner
_REFLEX_EPSILON = 1e-6


class RectangleDirection(IntEnum):
    """Index into AspectData.normal_directions."""

    UP = 0
    UP_RIGHT = 1
    RIGHT = 2
    DOWN_RIGHT = 3
    DOWN = 4
    DOWN_LEFT = 5
    LEFT = 6
    UP_LEFT = 7


class WindowContact(Enum):
    """How the window rectangle touches the two edges at a point.

    - CORNER: Only one rectangle corner touches, at the point itself
    - FIRST_SIDE: Both edges touch the first side of the quadrant
    - SECOND_SIDE: Both edges touch the second side of the quadrant
    - DIAGONAL: Both edges touch the ends of a rectangle diagonal
    - UNMATCHED: None of the above, an internal invariant violation
    """

    CORNER = auto()
    FIRST_SIDE = auto()
    SECOND_SIDE = auto()
    DIAGONAL = auto()
    UNMATCHED = auto()


@dataclass(frozen=True)
class _Quadrant:
    """Geometry of one 90 degree range of normal angles.

    Sides are given as (side start, side end, offset from side midpoint to
    rectangle centre). The diagonal is given by its two end corners.
    """

    start: float
    corner: RectangleDirection
    first_side: tuple[RectangleDirection, RectangleDirection, RectangleDirection]
    second_side: tuple[RectangleDirection, RectangleDirection, RectangleDirection]
    diagonal: tuple[RectangleDirection, RectangleDirection]


_D = RectangleDirection

# Normal angles are measured from the normal to UP, so they grow clockwise
_QUADRANTS = (
    _Quadrant(
        start=0.0,
        corner=_D.UP_RIGHT,
        first_side=(_D.DOWN_RIGHT, _D.DOWN_LEFT, _D.UP),
        second_side=(_D.UP_LEFT, _D.DOWN_LEFT, _D.RIGHT),
        diagonal=(_D.DOWN_RIGHT, _D.UP_LEFT),
    ),
    _Quadrant(
        start=90.0,
        corner=_D.DOWN_RIGHT,
        first_side=(_D.UP, _D.DOWN, _D.RIGHT),
        second_side=(_D.UP_RIGHT, _D.UP_LEFT, _D.DOWN),
        diagonal=(_D.UP_RIGHT, _D.DOWN_LEFT),
    ),
    _Quadrant(
        start=-180.0,
        corner=_D.DOWN_LEFT,
        first_side=(_D.UP_LEFT, _D.UP_RIGHT, _D.DOWN),
        second_side=(_D.UP_RIGHT, _D.DOWN_RIGHT, _D.LEFT),
        diagonal=(_D.DOWN_RIGHT, _D.UP_LEFT),
    ),
    _Quadrant(
        start=-90.0,
        corner=_D.UP_LEFT,
        first_side=(_D.UP_LEFT, _D.DOWN_LEFT, _D.LEFT),
        second_side=(_D.DOWN_LEFT, _D.DOWN_RIGHT, _D.UP),
        diagonal=(_D.UP_RIGHT, _D.DOWN_LEFT),
    ),
)


def edge_normals(positions: list[Vector2], clockwise: bool) -> list[Vector2]:
    """Calculate the inward unit normal of every edge.

    Args:
        positions: Polygon points, implicitly closed
        clockwise: Orientation of the polygon

    Returns:
        Normal of edge i, the edge from point i to point i + 1
    """
    n = len(positions)
    normals = []
    for i in range(n):
        edge = positions[(i + 1) % n] - positions[i]
        if clockwise:
            normal = Vector2(edge.y, -edge.x)
        else:
            normal = Vector2(-edge.y, edge.x)
        normals.append(normal.normalized())
    return normals


def vertex_normals(positions: list[Vector2], clockwise: bool) -> list[Vector2]:
    """Calculate the first-pass shrink direction of every point.

    Args:
        positions: Polygon points, implicitly closed
        clockwise: Orientation of the polygon

    Returns:
        Unit bisector of the two edge normals at each point
    """
    normals = edge_normals(positions, clockwise)
    return [(normals[i] + normals[i - 1]).normalized() for i in range(len(normals))]


def is_reflex(normal: Vector2, previous_normal: Vector2, clockwise: bool) -> bool:
    """Check whether the corner between two edges is reflex.

    Args:
        normal: Normal of the edge leaving the corner
        previous_normal: Normal of the edge arriving at the corner
        clockwise: Orientation of the polygon

    Returns:
        True if the interior angle at the corner exceeds 180 degrees
    """
    turn = normal.cross(previous_normal)
    return turn < -_REFLEX_EPSILON if clockwise else turn > _REFLEX_EPSILON


def insert_reflex_helpers(polygon: ShrinkablePolygon, offset: float) -> int:
    """Set first-pass directions and pad every reflex corner with helpers.

    A helper point is inserted just before and just after each reflex corner,
    moved a small fraction of the way towards the neighbouring point. Helpers
    share the corner's direction, carry no original position and are marked
    no_intersect so the simplifier can drop them later.

    Args:
        polygon: Polygon to update in place
        offset: Fraction of each adjacent edge the helpers are moved by

    Returns:
        Number of helper points inserted
    """
    positions = polygon.positions
    n = len(positions)
    normals = edge_normals(positions, polygon.clockwise)

    extended: list[ShrinkablePoint] = []
    for i, point in enumerate(polygon.points):
        direction = (normals[i] + normals[i - 1]).normalized()
        if not is_reflex(normals[i], normals[i - 1], polygon.clockwise):
            extended.append(point.with_direction(direction))
            continue

        before = positions[i].lerp(positions[i - 1], offset)
        after = positions[i].lerp(positions[(i + 1) % n], offset)
        extended.append(ShrinkablePoint(before, None, direction, no_intersect=True))
        extended.append(point.with_direction(direction))
        extended.append(ShrinkablePoint(after, None, direction, no_intersect=True))

    inserted = len(extended) - n
    polygon.points = extended
    if inserted:
        polygon.state_id += 1
    return inserted


def find_mid_point(
    a: Vector2, b: Vector2, c: Vector2, d1: Vector2, d2: Vector2
) -> Vector2:
    """Find the midpoint of a rectangle segment wedged between CA and CB.

    The segment D1-D2 (a side or diagonal of the window rectangle) is placed
    so that its ends touch the lines CA and CB. Its midpoint is found from the
    triangle C, M1, M2 with the law of sines. Narrow or straight angles fall
    back to the midpoint of A and B, as does a construction landing further
    from C than that midpoint.

    Args:
        a: First neighbour of the point
        b: Second neighbour of the point
        c: The point
        d1: First end of the rectangle segment
        d2: Second end of the rectangle segment

    Returns:
        Midpoint of the wedged segment
    """
    ca = a - c
    cb = b - c
    fallback = (a + b) / 2

    gamma = angle(ca, cb)
    if gamma <= _NARROW_ANGLE or gamma >= _STRAIGHT_ANGLE:
        return fallback

    d1d2 = d1 - d2
    beta = angle(c - b, d1d2)
    alpha = angle(c - a, d2 - d1)
    if abs(gamma + beta + alpha - 180.0) > _ANGLE_SUM_TOLERANCE:
        d1d2 = d2 - d1
        beta = angle(c - b, d1d2)
        alpha = angle(c - a, d1 - d2)

    if (
        alpha <= _NARROW_ANGLE
        or alpha >= _STRAIGHT_ANGLE
        or beta <= _NARROW_ANGLE
        or beta >= _STRAIGHT_ANGLE
    ):
        return fallback

    side = d1d2.magnitude / _sin_degrees(gamma)
    length_a = side * _sin_degrees(alpha)
    length_b = side * _sin_degrees(beta)

    m1 = c + cb.normalized() * abs(length_a)
    m2 = c + ca.normalized() * abs(length_b)
    mid = (m1 + m2) / 2

    if (fallback - c).sqr_magnitude < (mid - c).sqr_magnitude:
        return fallback
    return mid


def _sin_degrees(degrees: float) -> float:
    return math.sin(math.radians(degrees))


def classify_contact(
    normal_angle: float, first_angle: float, second_angle: float, start: float
) -> WindowContact:
    """Classify how the window rectangle meets the edges at a point.

    Args:
        normal_angle: Angle of the point's normal, measured clockwise from UP
        first_angle: Unsigned angle between the first edge and the normal
        second_angle: Unsigned angle between the second edge and the normal
        start: Start angle of the quadrant the normal lies in

    Returns:
        The contact case
    """
    low = normal_angle - first_angle
    high = normal_angle + second_angle
    if low <= start + 1.0 and high >= start + 89.0:
        return WindowContact.CORNER
    if low <= start and high < start + 90.0:
        return WindowContact.FIRST_SIDE
    if low > start and high >= start + 90.0:
        return WindowContact.SECOND_SIDE
    if low > start and high < start + 90.0:
        return WindowContact.DIAGONAL
    return WindowContact.UNMATCHED


def _find_quadrant(normal_angle: float) -> _Quadrant | None:
    for quadrant in _QUADRANTS:
        if quadrant.start < normal_angle < quadrant.start + 90.0:
            return quadrant
    return None


def shrink_direction(
    normal: Vector2,
    previous: Vector2,
    point: Vector2,
    following: Vector2,
    aspect: AspectData,
) -> Vector2:
    """Calculate the aspect-aware shrink direction of one point.

    Args:
        normal: First-pass direction of the point
        previous: Position of the previous point
        point: Position of the point
        following: Position of the next point
        aspect: Window shape

    Returns:
        Shrink direction, the offset from the point to the centre of the
        window rectangle in contact with the point's two edges
    """
    directions = aspect.normal_directions
    ca = previous - point
    cb = following - point
    first_angle = angle(ca, normal)
    second_angle = angle(cb, normal)

    r = normal.normalized() * aspect.diagonal
    normal_angle = signed_angle(r, directions[RectangleDirection.UP])

    quadrant = _find_quadrant(normal_angle)
    if quadrant is None:
        # Normal lies exactly on an axis
        return Vector2(
            max(-aspect.aspect_ratio, min(aspect.aspect_ratio, r.x)),
            max(-1.0, min(1.0, r.y)),
        )

    contact = classify_contact(normal_angle, first_angle, second_angle, quadrant.start)
    if contact is WindowContact.CORNER:
        return directions[quadrant.corner]

    if contact in (WindowContact.FIRST_SIDE, WindowContact.SECOND_SIDE):
        side = quadrant.first_side if contact is WindowContact.FIRST_SIDE else quadrant.second_side
        start, end, to_centre = side
        mid = find_mid_point(previous, following, point, directions[start], directions[end])
        return mid + directions[to_centre] - point

    if contact is WindowContact.DIAGONAL:
        start, end = quadrant.diagonal
        centre = find_mid_point(previous, following, point, directions[start], directions[end])
        return centre - point

    logger.error(
        "Unrecognized shrink direction case",
        normal_angle=normal_angle,
        first_angle=first_angle,
        second_angle=second_angle,
        point=point.to_tuple(),
    )
    return r


def compute_aspect_directions(polygon: ShrinkablePolygon, tolerance: float = 1e-5) -> bool:
    """Recompute the aspect-aware shrink direction of every point.

    Bumps the polygon's state_id when any direction changes by more than
    the tolerance.

    Args:
        polygon: Polygon to update in place
        tolerance: Direction change still considered unchanged

    Returns:
        True if any direction changed
    """
    positions = polygon.positions
    n = len(positions)
    if n < 3:
        return False

    normals = vertex_normals(positions, polygon.clockwise)
    updated = []
    changed = False
    for i, point in enumerate(polygon.points):
        direction = shrink_direction(
            normals[i],
            positions[i - 1],
            positions[i],
            positions[(i + 1) % n],
            polygon.aspect_data,
        )
        if not direction.is_close(point.shrink_direction, tolerance):
            changed = True
        updated.append(point.with_direction(direction))

    polygon.points = updated
    if changed:
        polygon.state_id += 1
    return changed
