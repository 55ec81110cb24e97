"""Utility functions for confinerbaker.

This module provides utility functions including:

- Logging setup and configuration
- Bake statistics tracking
"""

from confinerbaker.utils.logging import (
    BakeLogger,
    BakeStats,
    configure_logging,
    reset_logging,
)

__all__ = [
    "BakeLogger",
    "BakeStats",
    "configure_logging",
    "reset_logging",
]
