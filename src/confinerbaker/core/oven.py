"""Bake driver and runtime queries for confiner states.

This module turns input contours into a list of ConfinerStates and answers
queries against that list.

Key components:
- bake_levels: The iterative shrink loop, one bake level per iteration
- trim_levels: Drops levels that interpolation can reproduce
- get_state: Exact or interpolated state for a frustum height
- ConfinerOven: Owns the current bake result and publishes it atomically
"""

import math
import time
from collections.abc import Sequence
from dataclasses import replace

import structlog

from confinerbaker.config import BakeConfig, ConfinerSettings, GeometryConfig, get_default_settings
from confinerbaker.core.directions import compute_aspect_directions, insert_reflex_helpers
from confinerbaker.core.divider import divide_along_intersections
from confinerbaker.core.geometry import inverse_lerp
from confinerbaker.core.simplifier import simplify
from confinerbaker.domain import (
    AspectData,
    ConfinerState,
    ShrinkablePolygon,
    Vector2,
    signed_area,
)
from confinerbaker.exceptions import ContourError, GeometryError
from confinerbaker.utils.logging import BakeLogger

logger = structlog.get_logger(__name__)

# Contours with less area than this are dropped as degenerate
_DEGENERATE_AREA = 1e-9

# Remaining distances below this count as arrived
_ARRIVED = 1e-9


def prepare_polygons(
    contours: Sequence[Sequence[Vector2]],
    aspect_ratio: float,
    min_area_ratio: float,
    geometry: GeometryConfig,
) -> list[ShrinkablePolygon]:
    """Create the first bake level from input contours.

    Degenerate contours (fewer than 3 points or no area) are skipped. Each
    polygon gets its reflex-corner helpers and its aspect-aware directions,
    and starts at state id 0.

    Args:
        contours: Closed input contours
        aspect_ratio: Camera window width divided by height
        min_area_ratio: Area floor as a fraction of each contour's bounding box
        geometry: Geometry tolerances

    Returns:
        Polygons of the first bake level

    Raises:
        ContourError: If a contour has non-finite coordinates
    """
    aspect = AspectData(aspect_ratio)
    polygons = []
    for index, contour in enumerate(contours):
        points = list(contour)
        if any(not (math.isfinite(p.x) and math.isfinite(p.y)) for p in points):
            raise ContourError(f"Contour {index} has non-finite coordinates")
        if len(points) < 3 or abs(signed_area(points)) < _DEGENERATE_AREA:
            logger.debug("Skipping degenerate contour", contour=index, points=len(points))
            continue

        polygon = ShrinkablePolygon.from_contour(points, aspect)
        min_x, min_y, max_x, max_y = polygon.bounding_box()
        polygon.min_area = min_area_ratio * (max_x - min_x) * (max_y - min_y)

        insert_reflex_helpers(polygon, geometry.reflex_helper_offset)
        compute_aspect_directions(polygon, geometry.direction_tolerance)
        polygon.state_id = 0
        polygons.append(polygon)
    return polygons


def _converge(polygon: ShrinkablePolygon, step: float, tolerance: float) -> None:
    """Move every point of a polygon towards its centroid.

    Directions are scaled to the boundary of the window rectangle, so each
    point travels as fast as a shrinking window. Points within one step land
    exactly on the centroid and stop.
    """
    centre = polygon.centroid()
    aspect = polygon.aspect_data
    updated = []
    changed = False
    for point in polygon.points:
        offset = centre - point.position
        remaining = max(abs(offset.x) / aspect.aspect_ratio, abs(offset.y))
        if remaining < _ARRIVED:
            direction = Vector2.ZERO
        elif remaining <= step:
            direction = offset / step
        else:
            direction = aspect.square_normalize(offset)
        if not direction.is_close(point.shrink_direction, tolerance):
            changed = True
        updated.append(point.with_direction(direction))

    if changed:
        polygon.state_id += 1
    if any(p.is_moving() for p in updated):
        polygon.points = [p.moved(step) for p in updated]
        polygon.window_diagonal += step
    else:
        polygon.points = updated


def _freeze(polygon: ShrinkablePolygon) -> None:
    polygon.points = [p.with_direction(Vector2.ZERO) for p in polygon.points]
    polygon.state_id += 1


def shrink(polygon: ShrinkablePolygon, step: float, shrink_to_point: bool, tolerance: float) -> bool:
    """Shrink a polygon by one step, applying the area floor policy.

    If the step would take the polygon's area below its min_area, the
    polygon either freezes (all directions zero) or starts converging to its
    centroid, depending on shrink_to_point.

    Args:
        polygon: Polygon to shrink in place
        step: Shrink amount
        shrink_to_point: Collapse to a point instead of freezing
        tolerance: Direction change still considered unchanged

    Returns:
        True if the polygon's points moved
    """
    before = polygon.window_diagonal
    if polygon.converging:
        _converge(polygon, step, tolerance)
        return polygon.window_diagonal > before

    moved = [p.moved(step) for p in polygon.points]
    area = signed_area([p.position for p in moved])
    if not polygon.clockwise:
        area = -area

    if area < polygon.min_area:
        if shrink_to_point:
            polygon.converging = True
            _converge(polygon, step, tolerance)
        else:
            _freeze(polygon)
        return polygon.window_diagonal > before

    polygon.points = moved
    polygon.window_diagonal += step
    return True


def iteration_limit(polygons: Sequence[ShrinkablePolygon], aspect_ratio: float, step: float) -> int:
    """Number of iterations after which no window can fit any polygon.

    Shrinking stops once the window outgrows the largest polygon. Collapsing
    to a point can take the same distance again.

    Args:
        polygons: Polygons of the first bake level
        aspect_ratio: Camera window width divided by height
        step: Shrink amount per iteration

    Returns:
        Iteration cap for the bake loop
    """
    extent = 0.0
    for polygon in polygons:
        min_x, min_y, max_x, max_y = polygon.bounding_box()
        extent = max(extent, max_y - min_y, (max_x - min_x) / aspect_ratio)
    return int(2.0 * (extent + step) / step) + 10


def bake_levels(
    polygons: list[ShrinkablePolygon],
    config: BakeConfig,
    geometry: GeometryConfig,
    bake_logger: BakeLogger | None = None,
) -> list[list[ShrinkablePolygon]]:
    """Run the shrink loop.

    Each iteration recomputes directions, shrinks every shrinkable polygon
    by one step, simplifies it once it has shrunk far enough and splits it
    along self-intersections. Frozen polygons are carried over unchanged.

    Args:
        polygons: First bake level
        config: Bake settings
        geometry: Geometry tolerances
        bake_logger: Optional statistics logger

    Returns:
        All bake levels, the first level included
    """
    step = config.shrink_step
    limit = config.max_iterations or iteration_limit(polygons, config.aspect_ratio, step)
    levels = [[p.deep_copy() for p in polygons]]
    current = polygons

    iteration = 0
    while any(p.is_shrinkable() for p in current):
        if config.max_window_size > 0 and max(
            p.window_diagonal for p in current
        ) >= config.max_window_size:
            break
        if iteration >= limit:
            message = "Bake iteration limit reached"
            if bake_logger:
                bake_logger.log_warning(message, iterations=iteration)
            else:
                logger.warning(message, iterations=iteration)
            break
        iteration += 1

        next_level: list[ShrinkablePolygon] = []
        for polygon in current:
            if not polygon.is_shrinkable():
                next_level.append(polygon.deep_copy())
                continue

            shrunk = polygon.deep_copy()
            if not shrunk.converging:
                compute_aspect_directions(shrunk, geometry.direction_tolerance)
            shrink(shrunk, step, config.shrink_to_point, geometry.direction_tolerance)

            if shrunk.window_diagonal > config.simplify_after_steps * step:
                removed = simplify(shrunk, step)
                if bake_logger:
                    bake_logger.log_simplified(removed)

            pieces = divide_along_intersections(shrunk, config.max_divide_iterations, bake_logger)
            if len(pieces) > 1 and bake_logger:
                bake_logger.log_split(len(pieces), shrunk.window_diagonal)
            next_level.extend(pieces)

        levels.append(next_level)
        current = next_level
        if bake_logger:
            bake_logger.log_level(iteration, len(next_level), max(p.window_diagonal for p in next_level))

    return levels


def _signature(level: Sequence[ShrinkablePolygon]) -> tuple[int, tuple[int, ...]]:
    return len(level), tuple(p.state_id for p in level)


def _window_size(level: Sequence[ShrinkablePolygon]) -> float:
    return max((p.window_diagonal for p in level), default=0.0)


def trim_levels(levels: list[list[ShrinkablePolygon]]) -> list[list[ShrinkablePolygon]]:
    """Drop levels that interpolation between their neighbours reproduces.

    A run of consecutive levels with the same polygon count and state ids
    only differs by linear motion, so only the first and last level of each
    run are kept. Of two kept levels at the same window size, for example
    after a freeze, only the later one is kept so every window size maps to
    one state.

    Args:
        levels: All bake levels in order

    Returns:
        Kept levels in order
    """
    kept = []
    last = len(levels) - 1
    for index, level in enumerate(levels):
        signature = _signature(level)
        if (
            index in (0, last)
            or _signature(levels[index - 1]) != signature
            or _signature(levels[index + 1]) != signature
        ):
            if kept and _window_size(kept[-1]) == _window_size(level):
                kept.pop()
            kept.append(level)
    return kept


def interpolate_states(left: ConfinerState, right: ConfinerState, t: float) -> ConfinerState:
    """Linearly interpolate between two states of the same topology.

    Every point of the left state moves towards its matching point in the
    right state (see ShrinkablePolygon.closest_point_along).

    Args:
        left: State at the smaller window size
        right: State at the larger window size
        t: Interpolation factor in [0, 1]

    Returns:
        Interpolated state, or left itself if the states do not have the same
        number of polygons
    """
    if len(left.polygons) != len(right.polygons):
        logger.error(
            "Interpolated states differ in polygon count",
            left_count=len(left.polygons),
            right_count=len(right.polygons),
            left_window=left.window_size,
            right_window=right.window_size,
        )
        return left

    polygons = []
    for left_polygon, right_polygon in zip(left.polygons, right.polygons):
        points = [
            replace(p, position=p.position.lerp(right_polygon.closest_point_along(p), t))
            for p in left_polygon.points
        ]
        polygon = left_polygon.deep_copy()
        polygon.points = points
        polygon.window_diagonal += (right_polygon.window_diagonal - left_polygon.window_diagonal) * t
        polygons.append(polygon)

    window_size = left.window_size + (right.window_size - left.window_size) * t
    return ConfinerState(polygons=tuple(polygons), window_size=window_size, state=left.state)


def get_state(states: Sequence[ConfinerState], frustum_height: float) -> ConfinerState:
    """Find the confiner state for a frustum height.

    States are scanned from the largest window size down, and the first one
    not larger than frustum_height is picked. Between two states with the
    same number of polygons the result is interpolated; trimming keeps both
    ends of every run, so no split lies between them. Across a split the
    state with the closer window size is returned. Heights outside the baked
    range clamp to the nearest end.

    Args:
        states: Baked states ordered by window size
        frustum_height: Camera frustum height to query

    Returns:
        Matching state, the empty state if nothing was baked
    """
    if not states:
        return ConfinerState()

    last = len(states) - 1
    for index in range(last, -1, -1):
        low = states[index]
        if low.window_size > frustum_height:
            continue
        if index == last or low.window_size == frustum_height:
            return low

        high = states[index + 1]
        if len(low.polygons) == len(high.polygons):
            t = inverse_lerp(low.window_size, high.window_size, frustum_height)
            return interpolate_states(low, high, t)

        if frustum_height - low.window_size <= high.window_size - frustum_height:
            return low
        return high

    return states[0]


class ConfinerOven:
    """Bakes confiner states and answers runtime queries.

    The current bake result is an immutable tuple that a new bake replaces
    in one assignment, so queries never see a partially built list.

    Example:
        oven = ConfinerOven(ConfinerSettings())
        oven.bake([[Vector2(0, 0), Vector2(4, 0), Vector2(4, 3), Vector2(0, 3)]])
        state = oven.get_state(frustum_height=0.5)
    """

    def __init__(
        self,
        settings: ConfinerSettings | None = None,
        bound_logger: structlog.stdlib.BoundLogger | None = None,
    ) -> None:
        """Initialize the oven.

        Args:
            settings: Bake and geometry settings (defaults if None)
            bound_logger: Logger to report to (module logger if None)
        """
        self.settings = settings or get_default_settings()
        self.logger = bound_logger or structlog.get_logger("confinerbaker.oven")
        self.bake_logger = BakeLogger(self.logger)
        self._states: tuple[ConfinerState, ...] = ()

    @property
    def states(self) -> tuple[ConfinerState, ...]:
        """Current bake result."""
        return self._states

    def bake(
        self,
        contours: Sequence[Sequence[Vector2]],
        aspect_ratio: float | None = None,
        shrink_step: float | None = None,
        max_window_size: float | None = None,
        shrink_to_point: bool | None = None,
    ) -> list[ConfinerState]:
        """Bake confiner states for a set of contours.

        Arguments left as None use the oven's BakeConfig. Degenerate input
        and geometry failures produce an empty list instead of raising.

        Args:
            contours: Closed input contours
            aspect_ratio: Camera window width divided by height
            shrink_step: Shrink amount per iteration
            max_window_size: Window size to stop at (0 = unbounded)
            shrink_to_point: Collapse polygons to a point at the area floor

        Returns:
            Baked states ordered by window size
        """
        overrides = {
            "aspect_ratio": aspect_ratio,
            "shrink_step": shrink_step,
            "max_window_size": max_window_size,
            "shrink_to_point": shrink_to_point,
        }
        config = self.settings.bake.model_copy(
            update={key: value for key, value in overrides.items() if value is not None}
        )
        config = BakeConfig.model_validate(config.model_dump())

        self.bake_logger = BakeLogger(self.logger)
        stats = self.bake_logger.stats
        stats.start_time = time.time()
        self.bake_logger.log_bake_start(len(contours), config.aspect_ratio, config.shrink_step)

        try:
            polygons = prepare_polygons(
                contours, config.aspect_ratio, config.min_area_ratio, self.settings.geometry
            )
            if not polygons:
                self.logger.info("Nothing to bake", contours=len(contours))
                states: list[ConfinerState] = []
            else:
                levels = bake_levels(polygons, config, self.settings.geometry, self.bake_logger)
                states = [ConfinerState.from_polygons(level) for level in trim_levels(levels)]
        except GeometryError as e:
            self.bake_logger.log_bake_error(e)
            states = []

        stats.end_time = time.time()
        self.bake_logger.log_bake_complete(len(states), stats.duration_seconds * 1000)
        self._states = tuple(states)
        return states

    def load(self, states: Sequence[ConfinerState]) -> None:
        """Publish previously baked states.

        Args:
            states: States ordered by window size
        """
        self._states = tuple(states)

    def get_state(self, frustum_height: float) -> ConfinerState:
        """Find the confiner state for a frustum height.

        Args:
            frustum_height: Camera frustum height to query

        Returns:
            Exact or interpolated state, the empty state if nothing was baked
        """
        return get_state(self._states, frustum_height)
