"""Configuration management for confinerbaker.

This module provides configuration management using Pydantic models.
Configuration can be provided via CLI arguments or defaults.

Key classes:
- BakeConfig: Bake loop settings
- GeometryConfig: Geometry tolerances
- CacheConfig: Confiner cache settings
- LoggingConfig: Logging settings
- ConfinerSettings: Main application settings
"""

from confinerbaker.config.settings import (
    BakeConfig,
    CacheConfig,
    ConfinerSettings,
    GeometryConfig,
    LoggingConfig,
    get_default_settings,
)

__all__ = [
    "BakeConfig",
    "CacheConfig",
    "ConfinerSettings",
    "GeometryConfig",
    "LoggingConfig",
    "get_default_settings",
]
