"""Immutable 2D vector type.

This module defines Vector2, the value type every other geometric type in
confinerbaker is built from.
"""

import math
from dataclasses import dataclass
from typing import Any, ClassVar


@dataclass(frozen=True, slots=True)
class Vector2:
    """A 2D vector or point.

    Immutable and hashable for use in sets/dicts.

    Attributes:
        x: X coordinate
        y: Y coordinate
    """

    x: float
    y: float

    ZERO: ClassVar["Vector2"]
    UP: ClassVar["Vector2"]

    def __add__(self, other: "Vector2") -> "Vector2":
        return Vector2(self.x + other.x, self.y + other.y)

    def __sub__(self, other: "Vector2") -> "Vector2":
        return Vector2(self.x - other.x, self.y - other.y)

    def __mul__(self, scalar: float) -> "Vector2":
        return Vector2(self.x * scalar, self.y * scalar)

    __rmul__ = __mul__

    def __truediv__(self, scalar: float) -> "Vector2":
        return Vector2(self.x / scalar, self.y / scalar)

    def __neg__(self) -> "Vector2":
        return Vector2(-self.x, -self.y)

    def dot(self, other: "Vector2") -> float:
        """Dot product with another vector."""
        return self.x * other.x + self.y * other.y

    def cross(self, other: "Vector2") -> float:
        """Z component of the 3D cross product of the two vectors."""
        return self.x * other.y - self.y * other.x

    @property
    def sqr_magnitude(self) -> float:
        """Squared length of the vector."""
        return self.x * self.x + self.y * self.y

    @property
    def magnitude(self) -> float:
        """Length of the vector."""
        return math.hypot(self.x, self.y)

    def normalized(self) -> "Vector2":
        """Return the unit vector in the same direction.

        Vectors too short to normalize come back as the zero vector.

        Returns:
            Unit length vector, or Vector2.ZERO
        """
        length = self.magnitude
        if length < 1e-12:
            return Vector2.ZERO
        return Vector2(self.x / length, self.y / length)

    def sqr_distance_to(self, other: "Vector2") -> float:
        """Squared distance to another point."""
        dx = self.x - other.x
        dy = self.y - other.y
        return dx * dx + dy * dy

    def distance_to(self, other: "Vector2") -> float:
        """Distance to another point."""
        return math.hypot(self.x - other.x, self.y - other.y)

    def lerp(self, other: "Vector2", t: float) -> "Vector2":
        """Linearly interpolate towards another point.

        Args:
            other: Target point (reached at t == 1)
            t: Interpolation factor, not clamped

        Returns:
            Interpolated point
        """
        return Vector2(self.x + (other.x - self.x) * t, self.y + (other.y - self.y) * t)

    def is_close(self, other: "Vector2", tolerance: float = 1e-5) -> bool:
        """Check whether two vectors are equal within a tolerance.

        Args:
            other: Vector to compare with
            tolerance: Maximum distance still considered equal

        Returns:
            True if the vectors are within tolerance of each other
        """
        return self.sqr_distance_to(other) < tolerance * tolerance

    def to_tuple(self) -> tuple[float, float]:
        """Convert to simple (x, y) tuple.

        Returns:
            Tuple of (x, y) coordinates
        """
        return (self.x, self.y)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary.

        Returns:
            Dictionary with x and y fields
        """
        return {"x": self.x, "y": self.y}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Vector2":
        """Deserialize from dictionary.

        Args:
            data: Dictionary with x and y fields

        Returns:
            Vector2 instance
        """
        return cls(x=float(data["x"]), y=float(data["y"]))


Vector2.ZERO = Vector2(0.0, 0.0)
Vector2.UP = Vector2(0.0, 1.0)
