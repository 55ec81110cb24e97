"""Baked confiner state.

A ConfinerState is one entry of a finished bake: the polygons valid from its
window size up to the next state's window size.
"""

from dataclasses import dataclass, field
from typing import Any

from confinerbaker.domain.polygon import ShrinkablePolygon


@dataclass(frozen=True)
class ConfinerState:
    """Read-only snapshot of the confiner shape at one window size.

    Attributes:
        polygons: Polygons making up the confiner at this size
        window_size: Largest window diagonal among the polygons
        state: Averaged state id of the level
    """

    polygons: tuple[ShrinkablePolygon, ...] = field(default_factory=tuple)
    window_size: float = 0.0
    state: float = 0.0

    @classmethod
    def from_polygons(cls, polygons: list[ShrinkablePolygon]) -> "ConfinerState":
        """Snapshot a bake level.

        Args:
            polygons: Polygons of one bake level

        Returns:
            State with its window size and averaged state signature
        """
        if not polygons:
            return cls()
        return cls(
            polygons=tuple(p.deep_copy() for p in polygons),
            window_size=max(p.window_diagonal for p in polygons),
            state=sum(p.state_id for p in polygons) / len(polygons),
        )

    def is_empty(self) -> bool:
        """Check whether this state confines nothing."""
        return not self.polygons

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary.

        Returns:
            Dictionary with polygons, window size and state signature
        """
        return {
            "window_size": self.window_size,
            "state": self.state,
            "polygons": [p.to_dict() for p in self.polygons],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ConfinerState":
        """Deserialize from dictionary.

        Args:
            data: Dictionary produced by to_dict

        Returns:
            ConfinerState instance
        """
        return cls(
            polygons=tuple(ShrinkablePolygon.from_dict(p) for p in data["polygons"]),
            window_size=float(data["window_size"]),
            state=float(data["state"]),
        )
