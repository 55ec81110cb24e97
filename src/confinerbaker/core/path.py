"""Conversion of shrunk polygons into a renderable confiner path.

Split polygons are disjoint, and shrunk corners no longer reach the input
corners a smaller window could still see. Thin connector rectangles are
added for both cases before everything is merged with a pyclipper union.

pyclipper works on integer coordinates, so points are scaled up before the
union and back down afterwards.
"""

from collections.abc import Sequence

import pyclipper
import structlog

from confinerbaker.config import GeometryConfig
from confinerbaker.domain import ShrinkablePolygon, Vector2
from confinerbaker.exceptions import PathConversionError

logger = structlog.get_logger(__name__)

IntPath = list[tuple[int, int]]


def _to_clipper(points: Sequence[Vector2], scale: float) -> IntPath:
    """Scale floating-point points to pyclipper integer coordinates."""
    return [(int(round(p.x * scale)), int(round(p.y * scale))) for p in points]


def _from_clipper(path: IntPath, scale: float) -> list[Vector2]:
    """Scale pyclipper integer coordinates back to floating-point points."""
    return [Vector2(x / scale, y / scale) for x, y in path]


def connector(start: Vector2, end: Vector2, epsilon: float) -> list[Vector2]:
    """Build an epsilon-wide rectangle joining two points.

    The rectangle reaches epsilon past start, so it overlaps the polygon
    start lies on.

    Args:
        start: Point on a polygon
        end: Point to connect it to
        epsilon: Half width of the rectangle

    Returns:
        The four rectangle corners
    """
    direction = (start - end).normalized()
    normal = Vector2(direction.y, -direction.x) * epsilon
    overshoot = direction * epsilon
    return [
        start + normal + overshoot,
        end + normal,
        end - normal,
        start - normal + overshoot,
    ]


def corner_target(
    position: Vector2, corner: Vector2, aspect_ratio: float, frustum_height: float
) -> Vector2 | None:
    """Find where a window of the given height touches a shrunk corner.

    The corner's travel direction is scaled onto the window rectangle and
    then by frustum_height, giving the offset from the input corner to the
    window centre when the window sits in that corner.

    Args:
        position: Current position of the shrunk point
        corner: Input corner the point started from
        aspect_ratio: Camera window width divided by height
        frustum_height: Queried window size

    Returns:
        Window centre in the corner, or None if the shrunk point is already
        at or past it
    """
    direction = position - corner
    sqr_corner_distance = direction.sqr_magnitude
    if direction.x > 0:
        direction = direction * (aspect_ratio / direction.x)
    elif direction.x < 0:
        direction = direction * -(aspect_ratio / direction.x)
    if direction.y > 1:
        direction = direction * (1.0 / direction.y)
    elif direction.y < -1:
        direction = direction * -(1.0 / direction.y)

    direction = direction * frustum_height
    if direction.sqr_magnitude >= sqr_corner_distance:
        return None
    return corner + direction


def connector_paths(
    polygon: ShrinkablePolygon, frustum_height: float, epsilon: float
) -> list[list[Vector2]]:
    """Build all connector rectangles for one polygon.

    Args:
        polygon: Polygon to connect
        frustum_height: Queried window size
        epsilon: Half width of the rectangles

    Returns:
        Connector rectangles for the polygon's intersection points and for
        every corner the window of this size still reaches
    """
    paths = []
    for intersection in polygon.intersection_points:
        closest = polygon.closest_point(intersection)
        if closest.distance_to(intersection) >= epsilon:
            paths.append(connector(closest, intersection, epsilon))

    for point in polygon.points:
        if point.original_position is None:
            continue
        target = corner_target(
            point.position,
            point.original_position,
            polygon.aspect_data.aspect_ratio,
            frustum_height,
        )
        if target is None or target.distance_to(point.position) < epsilon:
            continue
        paths.append(connector(point.position, target, epsilon))
    return paths


def polygons_to_path(
    polygons: Sequence[ShrinkablePolygon],
    frustum_height: float,
    geometry: GeometryConfig | None = None,
) -> list[list[Vector2]]:
    """Merge polygons and their connectors into one confiner path.

    Args:
        polygons: Polygons of a confiner state
        frustum_height: Queried window size
        geometry: Geometry tolerances (defaults if None)

    Returns:
        Closed contours of the merged path, empty if there is nothing to merge

    Raises:
        PathConversionError: If the union itself fails
    """
    geometry = geometry or GeometryConfig()
    scale = geometry.float_to_int_scale

    clipper = pyclipper.Pyclipper()
    added = 0
    for polygon in polygons:
        for path in [polygon.positions, *connector_paths(polygon, frustum_height, geometry.epsilon)]:
            try:
                clipper.AddPath(_to_clipper(path, scale), pyclipper.PT_SUBJECT, True)
            except pyclipper.ClipperException:
                # Collapsed polygons have no area to contribute
                logger.debug("Skipping degenerate path", points=len(path))
                continue
            added += 1

    if not added:
        return []

    try:
        solution = clipper.Execute(pyclipper.CT_UNION, pyclipper.PFT_EVENODD, pyclipper.PFT_EVENODD)
    except pyclipper.ClipperException as e:
        raise PathConversionError(str(e)) from e

    return [_from_clipper(path, scale) for path in solution]
