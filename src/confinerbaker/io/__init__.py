"""File I/O layer for confinerbaker.

This module handles reading and writing the JSON files the CLI works with.

Key responsibilities:
- Load input contours
- Save and restore baked confiner states
- Save converted confiner paths

Key classes:
- ContourReader: Load contours
- StateReader: Load baked states
- StateWriter: Save baked states
- PathWriter: Save confiner paths
"""

from confinerbaker.io.reader import ContourReader, StateReader
from confinerbaker.io.writer import PathWriter, StateWriter

__all__ = [
    "ContourReader",
    "PathWriter",
    "StateReader",
    "StateWriter",
]
