"""Core baking logic for confinerbaker.

This module contains the main business logic including:

- Geometric primitives (intersection, angles, point-in-polygon)
- Aspect-aware shrink directions
- Self-intersection splitting and helper point simplification
- The bake driver, level trimming and state interpolation
- Conversion of polygons to a merged confiner path
- The cached Confiner2D facade
"""

from confinerbaker.core.confiner import Confiner2D
from confinerbaker.core.directions import (
    RectangleDirection,
    WindowContact,
    compute_aspect_directions,
    find_mid_point,
    insert_reflex_helpers,
    shrink_direction,
)
from confinerbaker.core.divider import divide_along_intersections, split_at_first_intersection
from confinerbaker.core.geometry import (
    IntersectionType,
    angle,
    find_intersection,
    inverse_lerp,
    is_inside,
    signed_angle,
    signed_area,
)
from confinerbaker.core.oven import (
    ConfinerOven,
    bake_levels,
    get_state,
    interpolate_states,
    prepare_polygons,
    trim_levels,
)
from confinerbaker.core.path import polygons_to_path
from confinerbaker.core.simplifier import simplify

__all__ = [
    "Confiner2D",
    "ConfinerOven",
    "IntersectionType",
    "RectangleDirection",
    "WindowContact",
    "angle",
    "bake_levels",
    "compute_aspect_directions",
    "divide_along_intersections",
    "find_intersection",
    "find_mid_point",
    "get_state",
    "insert_reflex_helpers",
    "interpolate_states",
    "inverse_lerp",
    "is_inside",
    "polygons_to_path",
    "prepare_polygons",
    "shrink_direction",
    "signed_angle",
    "signed_area",
    "simplify",
    "split_at_first_intersection",
    "trim_levels",
]
