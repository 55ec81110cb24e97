"""Unit tests for logging utilities."""

import io
import logging
from unittest.mock import MagicMock, patch

import pytest

from confinerbaker.utils.logging import BakeLogger, BakeStats, configure_logging, reset_logging


@pytest.fixture
def restore_root_handlers():
    yield
    reset_logging()


class TestBakeStats:
    """Tests for BakeStats."""

    def test_duration(self):
        """Test duration is only reported once both times are set."""
        stats = BakeStats()
        assert stats.duration_seconds == 0.0
        stats.start_time = 10.0
        stats.end_time = 12.5
        assert stats.duration_seconds == 2.5


class TestBakeLogger:
    """Tests for BakeLogger."""

    def test_counts(self):
        """Test levels, splits and simplifications are counted."""
        bake_logger = BakeLogger(MagicMock())
        bake_logger.log_bake_start(2, 1.5, 0.01)
        bake_logger.log_level(1, 2, 0.01)
        bake_logger.log_level(2, 3, 0.02)
        bake_logger.log_split(3, 0.02)
        bake_logger.log_simplified(0)
        bake_logger.log_simplified(4)
        bake_logger.log_bake_complete(2, 12.0)

        stats = bake_logger.stats
        assert stats.input_contours == 2
        assert stats.iterations == 2
        assert stats.levels == 2
        assert stats.splits == 2
        assert stats.simplified_points == 4
        assert stats.states == 2

    def test_warnings_recorded(self):
        """Test warnings and errors are forwarded and remembered."""
        logger = MagicMock()
        bake_logger = BakeLogger(logger)
        bake_logger.log_warning("Bake iteration limit reached", iterations=5)
        bake_logger.log_bake_error(ValueError("bad contour"))

        logger.warning.assert_called_once_with("Bake iteration limit reached", iterations=5)
        logger.error.assert_called_once()
        assert bake_logger.stats.warnings == ["Bake iteration limit reached", "bad contour"]


class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_file_output(self, tmp_path, restore_root_handlers):  # noqa: ARG002
        """Test a log file gets the structured records."""
        log_file = tmp_path / "bake.log"
        logger = configure_logging(log_file=log_file, quiet=True)
        logger.info("Bake started", contours=1)
        for handler in logging.getLogger().handlers:
            handler.flush()

        content = log_file.read_text(encoding="utf-8")
        assert "Bake started" in content

    def test_no_file_by_default(self, tmp_path, restore_root_handlers, monkeypatch):  # noqa: ARG002
        """Test no log file is created without a path."""
        monkeypatch.chdir(tmp_path)
        configure_logging(quiet=True)
        assert list(tmp_path.iterdir()) == []

    def test_repeated_calls_replace_handlers(self, tmp_path, restore_root_handlers):  # noqa: ARG002
        """Test reconfiguring drops the handlers of the previous call."""
        root = logging.getLogger()
        before = list(root.handlers)

        configure_logging(log_file=tmp_path / "first.log")
        first = [h for h in root.handlers if h not in before]
        configure_logging(log_file=tmp_path / "second.log")
        second = [h for h in root.handlers if h not in before]

        assert len(first) == 2
        assert len(second) == 2
        assert not any(h in root.handlers for h in first)

    def test_closed_console_stream_not_kept(self, tmp_path, restore_root_handlers):  # noqa: ARG002
        """Test a console handler whose stream was closed is dropped on reconfigure."""
        stream = io.StringIO()
        with patch("sys.stderr", stream):
            configure_logging()
        stream.close()

        log_file = tmp_path / "bake.log"
        logger = configure_logging(log_file=log_file, quiet=True)
        logger.info("Bake started")
        for handler in logging.getLogger().handlers:
            handler.flush()

        assert "Bake started" in log_file.read_text(encoding="utf-8")

    def test_reset_logging(self, tmp_path):
        """Test reset removes and closes every installed handler."""
        root = logging.getLogger()
        before = list(root.handlers)
        configure_logging(log_file=tmp_path / "bake.log")
        reset_logging()
        assert root.handlers == before
