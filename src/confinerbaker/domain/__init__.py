"""Domain models for confinerbaker.

This module contains the core domain models used throughout the application:

- Vector2: Immutable 2D vector
- ShrinkablePoint: Contour point with shrink metadata
- AspectData: Camera window shape
- ShrinkablePolygon: Contour being shrunk inward
- ConfinerState: Baked confiner snapshot for one window size
"""

from confinerbaker.domain.polygon import (
    DIRECTION_EPSILON,
    AspectData,
    ShrinkablePoint,
    ShrinkablePolygon,
    signed_area,
)
from confinerbaker.domain.state import ConfinerState
from confinerbaker.domain.vector import Vector2

__all__ = [
    "DIRECTION_EPSILON",
    "AspectData",
    "ConfinerState",
    "ShrinkablePoint",
    "ShrinkablePolygon",
    "Vector2",
    "signed_area",
]
