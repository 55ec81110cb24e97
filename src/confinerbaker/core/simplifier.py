"""Removal of redundant reflex-corner helper points."""

from confinerbaker.domain import ShrinkablePolygon

# Polygons this small are never simplified further
MIN_SIMPLIFY_POINTS = 4


def simplify(polygon: ShrinkablePolygon, step: float) -> int:
    """Remove helper points that have collapsed onto a neighbour.

    Adjacent pairs are scanned where at least one point is marked
    no_intersect. When the pair's squared distance falls below 2 * step the
    marked point is removed, or both points if both are marked, and the scan
    starts over. Polygons with MIN_SIMPLIFY_POINTS points or fewer are left
    alone. The polygon's state id is bumped when anything was removed.

    Args:
        polygon: Polygon to simplify in place
        step: Shrink step size of the bake

    Returns:
        Number of points removed
    """
    threshold = 2.0 * step
    points = list(polygon.points)
    removed = 0

    changed = True
    while changed and len(points) > MIN_SIMPLIFY_POINTS:
        changed = False
        n = len(points)
        for i in range(n):
            j = (i + 1) % n
            first, second = points[i], points[j]
            if not (first.no_intersect or second.no_intersect):
                continue
            if first.position.sqr_distance_to(second.position) >= threshold:
                continue

            if first.no_intersect and second.no_intersect:
                for index in sorted((i, j), reverse=True):
                    del points[index]
                removed += 2
            elif first.no_intersect:
                del points[i]
                removed += 1
            else:
                del points[j]
                removed += 1
            changed = True
            break

    if removed:
        polygon.points = points
        polygon.state_id += 1
    return removed
