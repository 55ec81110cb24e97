"""Writers for baked states and confiner paths.

This module provides the StateWriter class for saving a bake and the
PathWriter class for saving a converted confiner path.
"""

import json
from collections.abc import Sequence
from datetime import datetime
from pathlib import Path
from typing import Any

from confinerbaker import __version__
from confinerbaker.domain import ConfinerState, Vector2
from confinerbaker.exceptions import StateFileError


class StateWriter:
    """Writes baked confiner states to JSON.

    Example:
        writer = StateWriter(Path("level-baked.json"))
        writer.write(states, {"aspect_ratio": 1.777})
    """

    def __init__(self, output_path: Path) -> None:
        """Initialize the state writer.

        Args:
            output_path: Path where the states will be saved
        """
        self._output_path = output_path

    def write(self, states: Sequence[ConfinerState], metadata: dict[str, Any] | None = None) -> None:
        """Save the states.

        Args:
            states: States ordered by window size
            metadata: Extra information stored next to the states

        Raises:
            StateFileError: If the file cannot be written
        """
        document = {
            "metadata": {
                "generator": f"confinerbaker {__version__}",
                "created": datetime.now().isoformat(timespec="seconds"),
                **(metadata or {}),
            },
            "states": [s.to_dict() for s in states],
        }
        try:
            self._output_path.write_text(json.dumps(document, indent=2), encoding="utf-8")
        except OSError as e:
            raise StateFileError(str(self._output_path), str(e)) from e

    @staticmethod
    def get_baked_path(input_path: Path) -> Path:
        """Generate output path with the baked naming convention.

        Converts: level.json -> level-baked.json

        Args:
            input_path: Path to the contour file

        Returns:
            Path for the baked state file
        """
        return input_path.with_name(f"{input_path.stem}-baked.json")


class PathWriter:
    """Writes a confiner path to JSON."""

    def __init__(self, output_path: Path) -> None:
        self._output_path = output_path

    def write(self, path: Sequence[Sequence[Vector2]], frustum_height: float) -> None:
        """Save the path as {"frustum_height": h, "contours": [[[x, y], ...]]}.

        Raises:
            StateFileError: If the file cannot be written
        """
        document = {
            "frustum_height": frustum_height,
            "contours": [[list(p.to_tuple()) for p in contour] for contour in path],
        }
        try:
            self._output_path.write_text(json.dumps(document, indent=2), encoding="utf-8")
        except OSError as e:
            raise StateFileError(str(self._output_path), str(e)) from e
