"""Self-intersection splitting.

After a shrink step the edges of a polygon may cross each other where two
parts of the polygon have shrunk past one another. Such a polygon is cut at
the crossing into two children, and the children are checked again, until no
piece intersects itself. Pieces that wind against the polygon they were cut
from are dropped.
"""

import structlog

from confinerbaker.core.geometry import IntersectionType, find_intersection
from confinerbaker.domain import ShrinkablePoint, ShrinkablePolygon, Vector2, signed_area
from confinerbaker.utils.logging import BakeLogger

logger = structlog.get_logger(__name__)


def rotate_to_leftmost(points: list[ShrinkablePoint]) -> list[ShrinkablePoint]:
    """Rotate a cyclic point list to start at its leftmost point.

    Ties on x are broken by the lowest y, so the result does not depend on
    where the list started.

    Args:
        points: Cyclic point list

    Returns:
        Rotated copy, order preserved
    """
    if not points:
        return []
    start = min(range(len(points)), key=lambda i: (points[i].position.x, points[i].position.y))
    return points[start:] + points[:start]


def rotate_to_closest(points: list[ShrinkablePoint], reference: Vector2) -> list[ShrinkablePoint]:
    """Rotate a cyclic point list to start at the point nearest a reference.

    Args:
        points: Cyclic point list
        reference: Location to measure from

    Returns:
        Rotated copy, order preserved
    """
    if not points:
        return []
    start = min(range(len(points)), key=lambda i: points[i].position.sqr_distance_to(reference))
    return points[start:] + points[:start]


def _sqr_distance_to(polygon: ShrinkablePolygon, point: Vector2) -> float:
    return min(p.position.sqr_distance_to(point) for p in polygon.points)


def _child(
    parent: ShrinkablePolygon, points: list[ShrinkablePoint], intersection: Vector2
) -> ShrinkablePolygon:
    return ShrinkablePolygon.from_points(
        points,
        parent.aspect_data,
        window_diagonal=parent.window_diagonal,
        state_id=parent.state_id + 1,
        min_area=parent.min_area,
        intersection_points=[intersection],
        converging=parent.converging,
    )


def split_at_first_intersection(
    polygon: ShrinkablePolygon,
) -> tuple[ShrinkablePolygon, ShrinkablePolygon] | None:
    """Cut a polygon in two at its first self-intersection.

    Edges (i, i+1) and (j, j+1) are tested for every non-adjacent pair. At
    the first proper crossing X:
    - child A is X followed by points j+1 .. i, rotated to its leftmost point
    - child B is X followed by points i+1 .. j, rotated to start at X

    Both children keep the parent's window diagonal, area floor and aspect
    data, and get the parent's state id plus one. Intersection points the
    parent inherited go to whichever child lies closer to them.

    Args:
        polygon: Polygon to check

    Returns:
        Tuple of (child A, child B), or None if the polygon is simple
    """
    points = polygon.points
    n = len(points)
    for i in range(n):
        next_i = (i + 1) % n
        for j in range(i + 2, n):
            next_j = (j + 1) % n
            if i == next_j:
                continue

            kind, intersection = find_intersection(
                points[i].position,
                points[next_i].position,
                points[j].position,
                points[next_j].position,
            )
            if kind is not IntersectionType.SEGMENTS:
                continue

            crossing = ShrinkablePoint(position=intersection)

            first = [crossing]
            k = next_j
            while k != next_i:
                first.append(points[k])
                k = (k + 1) % n

            second = [crossing] + points[i + 1 : j + 1]

            child_a = _child(polygon, rotate_to_leftmost(first), intersection)
            child_b = _child(polygon, rotate_to_closest(second, intersection), intersection)

            for inherited in polygon.intersection_points:
                if _sqr_distance_to(child_a, inherited) < _sqr_distance_to(child_b, inherited):
                    child_a.intersection_points.append(inherited)
                else:
                    child_b.intersection_points.append(inherited)

            return child_a, child_b

    return None


def _relative_area(piece: ShrinkablePolygon, parent: ShrinkablePolygon) -> float:
    area = signed_area(piece.positions)
    return area if parent.clockwise else -area


def _drop_inverted(
    pieces: list[ShrinkablePolygon], parent: ShrinkablePolygon
) -> list[ShrinkablePolygon]:
    """Remove pieces that are turned inside out or too small to keep.

    Where two parts of a polygon shrink past each other, the region between
    the crossings winds against the parent. Such pieces, and pieces whose
    area in the parent's winding is at or below the parent's area floor, are
    not free space and are dropped. A converging parent is already below its
    floor, so only inverted pieces are dropped then. At least the largest
    piece is always kept.
    """
    floor = 0.0 if parent.converging else parent.min_area
    kept = [p for p in pieces if _relative_area(p, parent) > floor]
    if not kept:
        kept = [max(pieces, key=lambda p: _relative_area(p, parent))]
    if len(kept) < len(pieces):
        logger.debug(
            "Dropped inverted split pieces",
            dropped=len(pieces) - len(kept),
            window_size=parent.window_diagonal,
        )
    return kept


def divide_along_intersections(
    polygon: ShrinkablePolygon,
    max_iterations: int = 10,
    bake_logger: BakeLogger | None = None,
) -> list[ShrinkablePolygon]:
    """Split a polygon until no piece intersects itself.

    Pending pieces are kept on a work list. Each split pushes both children
    back for another check. After max_iterations splits the remaining pieces
    are returned unchecked and a warning is logged. Pieces that wind against
    the polygon, or fall to its area floor, are dropped.

    Args:
        polygon: Polygon to divide
        max_iterations: Maximum number of splits
        bake_logger: Optional statistics logger that records the warning

    Returns:
        Pieces in traversal order, [polygon] itself if it was simple
    """
    pending = [polygon]
    pieces: list[ShrinkablePolygon] = []
    splits = 0
    while pending:
        current = pending.pop()
        if splits >= max_iterations:
            pieces.append(current)
            continue

        split = split_at_first_intersection(current)
        if split is None:
            pieces.append(current)
            continue

        splits += 1
        child_a, child_b = split
        pending.append(child_b)
        pending.append(child_a)

    if splits >= max_iterations and len(pieces) > 1:
        message = "Polygon split limit reached"
        context = {
            "max_iterations": max_iterations,
            "pieces": len(pieces),
            "window_size": polygon.window_diagonal,
        }
        if bake_logger:
            bake_logger.log_warning(message, **context)
        else:
            logger.warning(message, **context)

    if splits:
        pieces = _drop_inverted(pieces, polygon)
    return pieces
