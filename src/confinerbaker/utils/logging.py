"""Logging utilities for confinerbaker."""

import logging
from dataclasses import dataclass, field
from pathlib import Path

import structlog

# Handlers added to the root logger by the last configure_logging call
_installed_handlers: list[logging.Handler] = []


@dataclass
class BakeStats:
    """Statistics from a bake run."""

    input_contours: int = 0
    iterations: int = 0
    levels: int = 0
    states: int = 0
    splits: int = 0
    simplified_points: int = 0
    warnings: list[str] = field(default_factory=list)
    start_time: float | None = None
    end_time: float | None = None

    @property
    def duration_seconds(self) -> float:
        """Calculate bake duration."""
        if self.start_time and self.end_time:
            return self.end_time - self.start_time
        return 0.0


def reset_logging() -> None:
    """Remove and close the handlers installed by configure_logging."""
    root_logger = logging.getLogger()
    while _installed_handlers:
        handler = _installed_handlers.pop()
        root_logger.removeHandler(handler)
        handler.close()


def configure_logging(
    log_file: Path | None = None,
    console_level: str = "WARNING",
    file_level: str = "DEBUG",
    quiet: bool = False,
) -> structlog.stdlib.BoundLogger:
    """Configure dual-output structured logging.

    Handlers from an earlier call are replaced, not stacked.

    Args:
        log_file: Path to log file (no file output if None)
        console_level: Logging level for console output
        file_level: Logging level for file output
        quiet: If True, suppress console output

    Returns:
        Configured structlog logger
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    reset_logging()

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(getattr(logging, file_level.upper()))
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s | %(levelname)-8s | %(name)s | %(message)s")
        )
        root_logger.addHandler(file_handler)
        _installed_handlers.append(file_handler)

    if not quiet:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(getattr(logging, console_level.upper()))
        console_handler.setFormatter(logging.Formatter("%(message)s"))
        root_logger.addHandler(console_handler)
        _installed_handlers.append(console_handler)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logger = structlog.get_logger("confinerbaker")
    logger.info(
        "Logging initialized",
        log_file=str(log_file) if log_file else None,
        level=file_level,
    )

    return logger


class BakeLogger:
    """Logger for tracking bake progress and statistics."""

    def __init__(self, logger: structlog.stdlib.BoundLogger) -> None:
        self._logger = logger
        self._stats = BakeStats()

    def log_bake_start(self, contour_count: int, aspect_ratio: float, step: float) -> None:
        """Log start of a bake."""
        self._logger.info(
            "Bake started",
            contours=contour_count,
            aspect_ratio=aspect_ratio,
            step=step,
        )
        self._stats.input_contours = contour_count

    def log_level(self, iteration: int, polygon_count: int, window_size: float) -> None:
        """Log one recorded bake level."""
        self._logger.debug(
            "Bake level recorded",
            iteration=iteration,
            polygons=polygon_count,
            window_size=round(window_size, 6),
        )
        self._stats.iterations = iteration
        self._stats.levels += 1

    def log_split(self, children: int, window_size: float) -> None:
        """Log a polygon split on self-intersection."""
        self._logger.debug(
            "Polygon split",
            children=children,
            window_size=round(window_size, 6),
        )
        self._stats.splits += children - 1

    def log_simplified(self, removed: int) -> None:
        """Log points removed by the simplifier."""
        if removed:
            self._logger.debug("Polygon simplified", removed=removed)
            self._stats.simplified_points += removed

    def log_warning(self, event: str, **context: object) -> None:
        """Log a recoverable problem and remember it in the stats."""
        self._logger.warning(event, **context)
        self._stats.warnings.append(event)

    def log_bake_complete(self, states: int, duration_ms: float) -> None:
        """Log successful bake."""
        self._logger.info(
            "Bake complete",
            levels=self._stats.levels,
            states=states,
            splits=self._stats.splits,
            duration_ms=round(duration_ms, 2),
        )
        self._stats.states = states

    def log_bake_error(self, error: Exception) -> None:
        """Log a bake that failed and produced no states."""
        self._logger.error(
            "Bake failed",
            error=str(error),
            error_type=type(error).__name__,
        )
        self._stats.warnings.append(str(error))

    @property
    def stats(self) -> BakeStats:
        """Get current bake statistics."""
        return self._stats
