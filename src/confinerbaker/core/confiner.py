"""Cached confiner for a camera.

Confiner2D is what a camera talks to. It re-bakes only when its input
changes and re-converts the path only when the frustum height has moved far
enough, then keeps points inside the resulting path.
"""

from collections.abc import Sequence

import structlog

from confinerbaker.config import ConfinerSettings, get_default_settings
from confinerbaker.core.geometry import is_inside, nearest_point_on_contours
from confinerbaker.core.oven import ConfinerOven
from confinerbaker.core.path import polygons_to_path
from confinerbaker.domain import ConfinerState, Vector2


class Confiner2D:
    """Bake cache and path cache for one confining shape.

    Example:
        confiner = Confiner2D()
        confiner.bake(contours, aspect_ratio=16 / 9)
        displacement = confiner.confine_point(camera_position, frustum_height=5.0)
    """

    def __init__(self, settings: ConfinerSettings | None = None) -> None:
        """Initialize the confiner.

        Args:
            settings: Application settings (defaults if None)
        """
        self.settings = settings or get_default_settings()
        self.logger = structlog.get_logger("confinerbaker.confiner")
        self.oven = ConfinerOven(self.settings, self.logger)
        self._bake_key: tuple | None = None
        self._aspect_ratio: float | None = None
        self._path: list[list[Vector2]] = []
        self._path_height: float | None = None

    def _contour_key(self, contours: Sequence[Sequence[Vector2]]) -> tuple:
        return tuple(tuple(p.to_tuple() for p in contour) for contour in contours)

    def needs_bake(self, contours: Sequence[Sequence[Vector2]], aspect_ratio: float) -> bool:
        """Check whether the cached bake is stale for this input.

        Args:
            contours: Confining contours
            aspect_ratio: Camera window width divided by height

        Returns:
            True if the contours, bake settings or aspect ratio changed
        """
        if self._bake_key is None or self._aspect_ratio is None:
            return True
        if abs(self._aspect_ratio - aspect_ratio) > self.settings.cache.aspect_ratio_tolerance:
            return True
        return self._bake_key != (self._contour_key(contours), self.settings.bake.model_dump_json())

    def bake(self, contours: Sequence[Sequence[Vector2]], aspect_ratio: float) -> bool:
        """Bake the confiner unless the cached bake is still valid.

        Args:
            contours: Confining contours
            aspect_ratio: Camera window width divided by height

        Returns:
            True if a new bake was made
        """
        if not self.needs_bake(contours, aspect_ratio):
            return False

        self.oven.bake(contours, aspect_ratio=aspect_ratio)
        self._bake_key = (self._contour_key(contours), self.settings.bake.model_dump_json())
        self._aspect_ratio = aspect_ratio
        self._path = []
        self._path_height = None
        self.logger.debug("Confiner rebaked", states=len(self.oven.states))
        return True

    def invalidate(self) -> None:
        """Drop the cached bake and path."""
        self._bake_key = None
        self._aspect_ratio = None
        self._path = []
        self._path_height = None
        self.oven.load([])

    def get_state(self, frustum_height: float) -> ConfinerState:
        """Confiner state for a frustum height (see ConfinerOven.get_state)."""
        return self.oven.get_state(frustum_height)

    def get_confiner_path(self, frustum_height: float) -> list[list[Vector2]]:
        """Confiner path for a frustum height, converted at most once per resolution.

        Args:
            frustum_height: Camera frustum height

        Returns:
            Closed contours the camera centre must stay inside
        """
        resolution = self.settings.cache.frustum_height_resolution
        if self._path_height is not None and abs(frustum_height - self._path_height) <= resolution:
            return self._path

        state = self.oven.get_state(frustum_height)
        self._path = polygons_to_path(state.polygons, frustum_height, self.settings.geometry)
        self._path_height = frustum_height
        return self._path

    def confine_point(self, point: Vector2, frustum_height: float) -> Vector2:
        """Displacement that moves a point back inside the confiner.

        Args:
            point: Camera position
            frustum_height: Camera frustum height

        Returns:
            Offset to the nearest boundary point, or zero if the point is
            inside or there is no confinement
        """
        path = self.get_confiner_path(frustum_height)
        if not path or is_inside(path, point):
            return Vector2.ZERO

        nearest = nearest_point_on_contours(point, path)
        if nearest is None:
            return Vector2.ZERO
        return nearest - point
