"""End-to-end tests for the command-line interface."""

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from confinerbaker import __version__
from confinerbaker.cli.app import app
from confinerbaker.io import StateReader
from confinerbaker.utils import reset_logging

runner = CliRunner()

SQUARE = [[0, 0], [0, 1], [1, 1], [1, 0]]


@pytest.fixture(autouse=True)
def release_log_handlers():
    yield
    reset_logging()


@pytest.fixture
def contour_file(tmp_path: Path) -> Path:
    path = tmp_path / "level.json"
    path.write_text(json.dumps({"contours": [SQUARE]}), encoding="utf-8")
    return path


class TestBakeCommand:
    """Tests for the bake command."""

    def test_version(self):
        """Test --version prints the version."""
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_bake_writes_states(self, contour_file):
        """Test baking writes the state file next to the input."""
        result = runner.invoke(app, ["bake", str(contour_file), "--step", "0.05", "--quiet"])
        assert result.exit_code == 0

        output = contour_file.with_name("level-baked.json")
        states = StateReader(output).load()
        assert states
        assert states[0].window_size == 0.0

    def test_bake_custom_output(self, contour_file, tmp_path):
        """Test --output and bake settings end up in the file metadata."""
        output = tmp_path / "custom.json"
        result = runner.invoke(
            app,
            ["bake", str(contour_file), "-o", str(output), "-a", "1.5", "-s", "0.05", "-v"],
        )
        assert result.exit_code == 0
        assert "Complete" in result.output

        reader = StateReader(output)
        reader.load()
        assert reader.metadata["aspect_ratio"] == 1.5

    def test_bake_missing_file(self, tmp_path):
        """Test a missing input file exits with an error."""
        result = runner.invoke(app, ["bake", str(tmp_path / "missing.json")])
        assert result.exit_code == 1
        assert "not found" in result.output

    def test_bake_degenerate(self, tmp_path):
        """Test input without area exits with an error."""
        path = tmp_path / "line.json"
        path.write_text(json.dumps([[[0, 0], [1, 1]]]))
        result = runner.invoke(app, ["bake", str(path), "--quiet"])
        assert result.exit_code == 1
        assert not path.with_name("line-baked.json").exists()

    def test_verbose_and_quiet_conflict(self, contour_file):
        """Test --verbose and --quiet cannot be combined."""
        result = runner.invoke(app, ["bake", str(contour_file), "-v", "-q"])
        assert result.exit_code == 1


class TestPathCommand:
    """Tests for the path command."""

    def test_path_from_contours(self, contour_file, tmp_path):
        """Test converting straight from a contour file."""
        output = tmp_path / "path.json"
        result = runner.invoke(
            app, ["path", str(contour_file), "-f", "0", "-s", "0.05", "-o", str(output)]
        )
        assert result.exit_code == 0

        data = json.loads(output.read_text())
        assert data["frustum_height"] == 0.0
        assert len(data["contours"]) == 1

    def test_path_from_state_file(self, contour_file):
        """Test converting from a previous bake."""
        runner.invoke(app, ["bake", str(contour_file), "--step", "0.05", "--quiet"])
        baked = contour_file.with_name("level-baked.json")

        result = runner.invoke(app, ["path", str(baked), "--frustum-height", "0.1"])
        assert result.exit_code == 0
        assert "frustum height 0.1" in result.output


class TestInsideCommand:
    """Tests for the inside command."""

    def test_inside(self, contour_file):
        """Test a point inside the contours."""
        result = runner.invoke(app, ["inside", str(contour_file), "0.5", "0.5"])
        assert result.exit_code == 0
        assert "inside" in result.output

    def test_outside(self, contour_file):
        """Test a point outside the contours."""
        result = runner.invoke(app, ["inside", str(contour_file), "2", "0.5"])
        assert result.exit_code == 0
        assert "outside" in result.output
