"""Readers for contour and baked state files.

This module provides the ContourReader class for loading input contours and
the StateReader class for loading a previous bake.
"""

import json
from pathlib import Path
from typing import Any

from confinerbaker.domain import ConfinerState, Vector2
from confinerbaker.exceptions import ContourFileError, StateFileError


def _parse_point(raw: Any) -> Vector2:
    if isinstance(raw, dict):
        return Vector2(float(raw["x"]), float(raw["y"]))
    x, y = raw
    return Vector2(float(x), float(y))


class ContourReader:
    """Loads confining contours from a JSON file.

    Accepted layouts are {"contours": [...]} or a bare list of contours.
    Each contour is a list of points, written as [x, y] pairs or as
    {"x": ..., "y": ...} objects.

    Example:
        reader = ContourReader(Path("level.json"))
        contours = reader.load()
    """

    def __init__(self, path: Path) -> None:
        """Initialize the contour reader.

        Args:
            path: Path to the JSON contour file
        """
        self._path = path
        self._data: Any = None

    def read_json(self) -> Any:
        """Read the raw JSON document.

        Returns:
            Parsed JSON content

        Raises:
            ContourFileError: If the file is missing or is not valid JSON
        """
        if self._data is None:
            if not self._path.exists():
                raise ContourFileError(str(self._path), "file not found")
            try:
                self._data = json.loads(self._path.read_text(encoding="utf-8"))
            except (OSError, json.JSONDecodeError) as e:
                raise ContourFileError(str(self._path), str(e)) from e
        return self._data

    def is_state_file(self) -> bool:
        """Check whether the file holds baked states instead of contours."""
        data = self.read_json()
        return isinstance(data, dict) and "states" in data

    def load(self) -> list[list[Vector2]]:
        """Load the contours.

        Returns:
            List of contours, each a list of points

        Raises:
            ContourFileError: If the content is not a list of contours
        """
        data = self.read_json()
        raw_contours = data.get("contours") if isinstance(data, dict) else data
        if not isinstance(raw_contours, list):
            raise ContourFileError(str(self._path), "expected a list of contours")

        try:
            return [[_parse_point(p) for p in contour] for contour in raw_contours]
        except (KeyError, TypeError, ValueError) as e:
            raise ContourFileError(str(self._path), f"invalid point: {e}") from e


class StateReader:
    """Loads baked confiner states written by StateWriter.

    Example:
        states = StateReader(Path("level-baked.json")).load()
    """

    def __init__(self, path: Path) -> None:
        """Initialize the state reader.

        Args:
            path: Path to the baked state file
        """
        self._path = path
        self.metadata: dict[str, Any] = {}

    def load(self) -> list[ConfinerState]:
        """Load the states.

        Returns:
            States ordered by window size

        Raises:
            StateFileError: If the file is missing or malformed
        """
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise StateFileError(str(self._path), str(e)) from e

        if not isinstance(data, dict) or "states" not in data:
            raise StateFileError(str(self._path), "missing 'states'")

        self.metadata = data.get("metadata", {})
        try:
            return [ConfinerState.from_dict(s) for s in data["states"]]
        except (KeyError, TypeError, ValueError) as e:
            raise StateFileError(str(self._path), f"invalid state: {e}") from e
