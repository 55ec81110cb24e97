"""Shrinkable polygon model.

This module defines the types a bake operates on:
- ShrinkablePoint: An immutable contour point with shrink metadata
- AspectData: The camera rectangle a polygon is shrunk for
- ShrinkablePolygon: One closed contour being shrunk inward

Points are immutable values. A polygon owns its own list of them, so copying
a polygon or splitting it into children copies point ranges instead of sharing
mutable objects between parent and children.
"""

import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field, replace
from typing import Any

from confinerbaker.domain.vector import Vector2

# Points count as moving while their direction is longer than this
DIRECTION_EPSILON = 1e-5

# Offsets within this many degrees of a point's shrink direction are "along" it
_ALONG_ANGLE_DEGREES = 5.0


def signed_area(points: Sequence[Vector2]) -> float:
    """Calculate the signed area of a closed contour.

    Uses the trapezoid form of the shoelace formula:
    - Positive area: clockwise winding
    - Negative area: counter-clockwise winding

    Args:
        points: Contour points, implicitly closed

    Returns:
        Signed area, 0.0 for fewer than 3 points
    """
    n = len(points)
    if n < 3:
        return 0.0

    area = 0.0
    for i in range(n):
        p1 = points[i]
        p2 = points[(i + 1) % n]
        area += (p2.x - p1.x) * (p2.y + p1.y)
    return area / 2.0


@dataclass(frozen=True, slots=True)
class ShrinkablePoint:
    """A polygon point with its shrink metadata.

    Attributes:
        position: Current location, moved every shrink step
        original_position: Input corner this point started from, or None for
            points inserted as reflex-corner helpers
        shrink_direction: Inward movement per unit of shrink (zero = frozen)
        no_intersect: Marks reflex-corner helpers the simplifier may remove
    """

    position: Vector2
    original_position: Vector2 | None = None
    shrink_direction: Vector2 = Vector2.ZERO
    no_intersect: bool = False

    @classmethod
    def corner(cls, position: Vector2) -> "ShrinkablePoint":
        """Create a point for an input contour corner."""
        return cls(position=position, original_position=position)

    def is_moving(self) -> bool:
        """Check whether this point still has a non-zero shrink direction."""
        return self.shrink_direction.sqr_magnitude > DIRECTION_EPSILON * DIRECTION_EPSILON

    def moved(self, step: float) -> "ShrinkablePoint":
        """Return a copy advanced along the shrink direction.

        Args:
            step: Distance multiplier for the shrink direction

        Returns:
            New point at position + shrink_direction * step
        """
        return replace(self, position=self.position + self.shrink_direction * step)

    def with_direction(self, direction: Vector2) -> "ShrinkablePoint":
        """Return a copy with a different shrink direction."""
        return replace(self, shrink_direction=direction)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary.

        Returns:
            Dictionary with position, original position, direction and flag
        """
        return {
            "position": self.position.to_dict(),
            "original_position": (
                self.original_position.to_dict() if self.original_position is not None else None
            ),
            "shrink_direction": self.shrink_direction.to_dict(),
            "no_intersect": self.no_intersect,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ShrinkablePoint":
        """Deserialize from dictionary.

        Args:
            data: Dictionary produced by to_dict

        Returns:
            ShrinkablePoint instance
        """
        original = data.get("original_position")
        return cls(
            position=Vector2.from_dict(data["position"]),
            original_position=Vector2.from_dict(original) if original is not None else None,
            shrink_direction=Vector2.from_dict(data["shrink_direction"]),
            no_intersect=bool(data.get("no_intersect", False)),
        )


@dataclass(frozen=True)
class AspectData:
    """Camera window shape a polygon is shrunk for.

    The window is a rectangle of half-height 1 and half-width aspect_ratio.
    normal_directions holds its 8 edge-midpoint and corner directions in
    clockwise order starting at the top: up, up-right corner, right,
    down-right corner, down, down-left corner, left, up-left corner.

    Attributes:
        aspect_ratio: Window width divided by height
        diagonal: Length of the window's half diagonal
        normal_directions: The 8 rectangle directions described above
    """

    aspect_ratio: float
    diagonal: float = field(init=False)
    normal_directions: tuple[Vector2, ...] = field(init=False)

    def __post_init__(self) -> None:
        a = self.aspect_ratio
        object.__setattr__(self, "diagonal", math.sqrt(a * a + 1.0))
        object.__setattr__(
            self,
            "normal_directions",
            (
                Vector2(0.0, 1.0),
                Vector2(a, 1.0),
                Vector2(a, 0.0),
                Vector2(a, -1.0),
                Vector2(0.0, -1.0),
                Vector2(-a, -1.0),
                Vector2(-a, 0.0),
                Vector2(-a, 1.0),
            ),
        )

    def square_normalize(self, v: Vector2) -> Vector2:
        """Scale a vector onto the boundary of the window rectangle.

        Args:
            v: Any vector

        Returns:
            v scaled so that max(|x| / aspect_ratio, |y|) == 1, or zero for
            vectors too short to scale
        """
        d = max(abs(v.x) / self.aspect_ratio, abs(v.y))
        if d < 1e-12:
            return Vector2.ZERO
        return v / d


@dataclass
class ShrinkablePolygon:
    """One closed contour being shrunk inward.

    Orientation is derived from the signed area of the points the polygon
    was created with and never changes afterwards.

    Attributes:
        points: Ordered, cyclic list of points
        aspect_data: Window shape shrink directions are computed for
        clockwise: Orientation of the contour
        window_diagonal: Cumulative shrink applied so far
        state_id: Topology version, bumped on point count or direction changes
        min_area: Area below which the polygon stops or collapses to a point
        intersection_points: Split points inherited from ancestor polygons
        converging: True once the polygon is collapsing towards its centroid
    """

    points: list[ShrinkablePoint]
    aspect_data: AspectData
    clockwise: bool = False
    window_diagonal: float = 0.0
    state_id: int = 0
    min_area: float = 0.0
    intersection_points: list[Vector2] = field(default_factory=list)
    converging: bool = False

    @classmethod
    def from_contour(
        cls,
        contour: Iterable[Vector2],
        aspect_data: AspectData,
        min_area: float = 0.0,
    ) -> "ShrinkablePolygon":
        """Create a polygon from raw contour points.

        Args:
            contour: Closed contour, first point not repeated at the end
            aspect_data: Window shape to shrink for
            min_area: Area floor for the shrink policy

        Returns:
            New polygon with every point remembering its original corner
        """
        points = [ShrinkablePoint.corner(p) for p in contour]
        return cls.from_points(points, aspect_data, min_area=min_area)

    @classmethod
    def from_points(
        cls,
        points: list[ShrinkablePoint],
        aspect_data: AspectData,
        **kwargs: Any,
    ) -> "ShrinkablePolygon":
        """Create a polygon, deriving its orientation from the points.

        Args:
            points: Polygon points
            aspect_data: Window shape to shrink for
            **kwargs: Remaining ShrinkablePolygon fields

        Returns:
            New polygon
        """
        clockwise = signed_area([p.position for p in points]) > 0
        return cls(points=points, aspect_data=aspect_data, clockwise=clockwise, **kwargs)

    def __len__(self) -> int:
        return len(self.points)

    @property
    def positions(self) -> list[Vector2]:
        """Current positions of all points."""
        return [p.position for p in self.points]

    def deep_copy(self) -> "ShrinkablePolygon":
        """Copy the polygon so that later changes do not affect this one."""
        return replace(
            self,
            points=list(self.points),
            intersection_points=list(self.intersection_points),
        )

    def is_shrinkable(self) -> bool:
        """Check whether any point still has a shrink direction."""
        return any(p.is_moving() for p in self.points)

    def area(self) -> float:
        """Orientation-corrected area.

        Returns:
            Area, positive while the contour keeps its original winding and
            negative once shrinking has turned it inside out
        """
        area = signed_area(self.positions)
        return area if self.clockwise else -area

    def centroid(self) -> Vector2:
        """Mean position of the polygon's points."""
        if not self.points:
            return Vector2.ZERO
        sx = sum(p.position.x for p in self.points)
        sy = sum(p.position.y for p in self.points)
        return Vector2(sx / len(self.points), sy / len(self.points))

    def bounding_box(self) -> tuple[float, float, float, float]:
        """Calculate axis-aligned bounding box.

        Returns:
            Tuple of (min_x, min_y, max_x, max_y)
        """
        xs = [p.position.x for p in self.points]
        ys = [p.position.y for p in self.points]
        return (min(xs), min(ys), max(xs), max(ys))

    def closest_point(self, reference: Vector2) -> Vector2:
        """Find the polygon point nearest to a reference location.

        Args:
            reference: Location to measure from

        Returns:
            Position of the nearest point
        """
        return min(self.positions, key=reference.sqr_distance_to)

    def closest_point_along(self, point: ShrinkablePoint) -> Vector2:
        """Find the best interpolation target for a point of another state.

        Points lying along the reference point's shrink direction (within a
        few degrees, either way) are preferred, since that is the path the
        point travels between two states. Without such a point, the nearest
        point is used.

        Args:
            point: Point from the other state

        Returns:
            Position of the matching point in this polygon
        """
        direction = point.shrink_direction
        limit = math.sin(math.radians(_ALONG_ANGLE_DEGREES))
        best: Vector2 | None = None
        best_distance = math.inf
        for candidate in self.points:
            diff = candidate.position - point.position
            sqr_distance = diff.sqr_magnitude
            length_product = math.sqrt(direction.sqr_magnitude * sqr_distance)
            if length_product > 1e-15 and abs(direction.cross(diff)) > limit * length_product:
                continue
            if sqr_distance < best_distance:
                best_distance = sqr_distance
                best = candidate.position

        if best is None:
            return self.closest_point(point.position)
        return best

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary.

        Returns:
            Dictionary with points and bookkeeping fields
        """
        return {
            "points": [p.to_dict() for p in self.points],
            "aspect_ratio": self.aspect_data.aspect_ratio,
            "clockwise": self.clockwise,
            "window_diagonal": self.window_diagonal,
            "state_id": self.state_id,
            "min_area": self.min_area,
            "intersection_points": [p.to_dict() for p in self.intersection_points],
            "converging": self.converging,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ShrinkablePolygon":
        """Deserialize from dictionary.

        Args:
            data: Dictionary produced by to_dict

        Returns:
            ShrinkablePolygon instance
        """
        return cls(
            points=[ShrinkablePoint.from_dict(p) for p in data["points"]],
            aspect_data=AspectData(float(data["aspect_ratio"])),
            clockwise=bool(data["clockwise"]),
            window_diagonal=float(data["window_diagonal"]),
            state_id=int(data["state_id"]),
            min_area=float(data.get("min_area", 0.0)),
            intersection_points=[Vector2.from_dict(p) for p in data.get("intersection_points", [])],
            converging=bool(data.get("converging", False)),
        )
