"""Configuration settings for confinerbaker."""

from pathlib import Path

from pydantic import BaseModel, Field


class BakeConfig(BaseModel):
    """Configuration for the bake loop."""

    aspect_ratio: float = Field(
        default=1.0,
        gt=0.0,
        description="Camera window width divided by height",
    )
    shrink_step: float = Field(
        default=0.005,
        gt=0.0,
        description="Shrink applied per bake iteration",
    )
    max_window_size: float = Field(
        default=0.0,
        ge=0.0,
        description="Stop baking once this window size is reached (0 = unbounded)",
    )
    shrink_to_point: bool = Field(
        default=False,
        description="Collapse polygons to a point instead of freezing them at the area floor",
    )
    simplify_after_steps: float = Field(
        default=100.0,
        ge=0.0,
        description="Run the simplifier once a polygon has shrunk this many steps",
    )
    max_divide_iterations: int = Field(
        default=10,
        ge=1,
        le=1000,
        description="Maximum polygon splits per polygon per bake iteration",
    )
    min_area_ratio: float = Field(
        default=1e-4,
        gt=0.0,
        lt=1.0,
        description="Area floor as a fraction of the input bounding box area",
    )
    max_iterations: int | None = Field(
        default=None,
        ge=1,
        description="Hard cap on bake iterations (None = derived from the input size)",
    )


class GeometryConfig(BaseModel):
    """Configuration for geometry tolerances."""

    epsilon: float = Field(
        default=1e-4,
        gt=0.0,
        le=0.1,
        description="General distance tolerance, also the width of path connectors",
    )
    float_to_int_scale: float = Field(
        default=10_000_000.0,
        ge=1.0,
        description="Scale from float coordinates to the integer space of the union",
    )
    reflex_helper_offset: float = Field(
        default=0.01,
        gt=0.0,
        lt=0.5,
        description="Fraction of the edge length reflex-corner helpers are offset by",
    )
    direction_tolerance: float = Field(
        default=1e-5,
        gt=0.0,
        description="Shrink directions closer than this are considered unchanged",
    )


class CacheConfig(BaseModel):
    """Configuration for the confiner caches."""

    frustum_height_resolution: float = Field(
        default=0.005,
        ge=0.0,
        description="Frustum height change that invalidates the cached path",
    )
    aspect_ratio_tolerance: float = Field(
        default=1e-4,
        ge=0.0,
        description="Aspect ratio change that triggers a re-bake",
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    log_file: Path | None = Field(
        default=None,
        description="Path to log file",
    )
    log_level: str = Field(
        default="WARNING",
        description="Console log level",
    )
    file_log_level: str = Field(
        default="DEBUG",
        description="File log level (more verbose)",
    )


class ConfinerSettings(BaseModel):
    """Main application settings."""

    bake: BakeConfig = Field(default_factory=BakeConfig)
    geometry: GeometryConfig = Field(default_factory=GeometryConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def get_default_settings() -> ConfinerSettings:
    """Get default application settings."""
    return ConfinerSettings()
