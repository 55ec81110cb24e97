"""End-to-end bake tests on small known shapes."""

import pytest

from confinerbaker.config import BakeConfig, CacheConfig, ConfinerSettings
from confinerbaker.core import ConfinerOven, is_inside, polygons_to_path
from confinerbaker.core.confiner import Confiner2D
from confinerbaker.domain import Vector2, signed_area

UNIT_SQUARE = [Vector2(0, 0), Vector2(0, 1), Vector2(1, 1), Vector2(1, 0)]

# Square with two triangular notches meeting at a waist 0.8 wide
HOURGLASS = [
    Vector2(0, 0),
    Vector2(4, 0),
    Vector2(2.4, 2),
    Vector2(4, 4),
    Vector2(0, 4),
    Vector2(1.6, 2),
]


class TestUnitSquare:
    """Bake a unit square down to a point."""

    @pytest.fixture
    def states(self):
        oven = ConfinerOven()
        return oven.bake([UNIT_SQUARE], aspect_ratio=1.0, shrink_step=0.01, shrink_to_point=True)

    def test_first_state_is_input(self, states):
        """Test the first state is the unshrunk square at window size 0."""
        assert states[0].window_size == 0.0
        assert states[0].polygons[0].positions == UNIT_SQUARE

    def test_collapses_to_centre(self, states):
        """Test the last state has every point at the square's centre."""
        final = states[-1]
        assert final.window_size == pytest.approx(0.5, abs=0.011)
        for point in final.polygons[0].points:
            assert point.position.is_close(Vector2(0.5, 0.5), 1e-6)

    def test_trimmed(self, states):
        """Test straight-line motion is stored as few states."""
        assert len(states) <= 4
        sizes = [s.window_size for s in states]
        assert sizes == sorted(sizes)

    def test_interpolated_midway(self, states):
        """Test a query halfway down moves every corner halfway in."""
        oven = ConfinerOven()
        oven.load(states)
        state = oven.get_state(0.25)
        positions = state.polygons[0].positions
        assert positions[0].is_close(Vector2(0.25, 0.25), 1e-6)
        assert positions[2].is_close(Vector2(0.75, 0.75), 1e-6)

    def test_large_window_gives_final_state(self, states):
        """Test any height past the bake returns the collapsed state."""
        oven = ConfinerOven()
        oven.load(states)
        assert oven.get_state(10.0) is states[-1]

    def test_freeze_without_shrink_to_point(self):
        """Test the square stops at its area floor when not collapsing."""
        states = ConfinerOven().bake([UNIT_SQUARE], shrink_step=0.01, shrink_to_point=False)
        final = states[-1].polygons[0]
        assert 0.0 < final.area() < 0.001
        assert not final.is_shrinkable()


class TestHourglass:
    """Bake a shape that splits at its waist."""

    @pytest.fixture
    def states(self):
        return ConfinerOven().bake([HOURGLASS], aspect_ratio=1.0, shrink_step=0.02)

    def test_starts_as_one_polygon(self, states):
        """Test the first state holds the input shape."""
        assert len(states[0].polygons) == 1
        assert abs(signed_area(states[0].polygons[0].positions)) == pytest.approx(9.6)

    def _first_split(self, states) -> int:
        return next(i for i, s in enumerate(states) if len(s.polygons) > 1)

    def test_splits_at_waist(self, states):
        """Test the shape falls apart into exactly a top and a bottom piece."""
        split = states[self._first_split(states)]
        assert len(split.polygons) == 2

        centre_heights = sorted(p.centroid().y for p in split.polygons)
        assert centre_heights[0] < 2.0 < centre_heights[1]
        assert all(p.area() > 0.0 for p in split.polygons)

    def test_split_keeps_parent_area(self, states):
        """Test the two children cover the parent apart from one shrink step."""
        index = self._first_split(states)
        (parent,) = states[index - 1].polygons
        children = states[index].polygons

        children_area = sum(p.area() for p in children)
        assert children_area < parent.area()
        assert children_area == pytest.approx(parent.area(), rel=0.25)

    def test_never_more_than_two_pieces(self, states):
        """Test no sliver from the crossed waist survives in later states."""
        assert max(len(s.polygons) for s in states) == 2

    def test_children_keep_split_point(self, states):
        """Test split pieces remember where they were cut."""
        split = states[self._first_split(states)]
        assert all(p.intersection_points for p in split.polygons)

    def test_small_window_path_matches_input(self, states):
        """Test the path for a tiny window is the input contour."""
        path = polygons_to_path(states[0].polygons, 0.0)
        assert len(path) == 1
        assert abs(signed_area(path[0])) == pytest.approx(9.6, rel=1e-3)
        assert is_inside(path, Vector2(2, 1))
        assert not is_inside(path, Vector2(3.5, 2))


class TestConfiner2D:
    """Tests for the cached confiner."""

    @pytest.fixture
    def confiner(self):
        settings = ConfinerSettings(
            bake=BakeConfig(shrink_step=0.02),
            cache=CacheConfig(frustum_height_resolution=0.01),
        )
        return Confiner2D(settings)

    def test_bake_cached(self, confiner):
        """Test identical input is baked only once."""
        assert confiner.bake([UNIT_SQUARE], 1.0)
        assert not confiner.bake([UNIT_SQUARE], 1.0)
        assert not confiner.needs_bake([UNIT_SQUARE], 1.0)

    def test_rebake_on_change(self, confiner):
        """Test changed contours or aspect ratio trigger a new bake."""
        confiner.bake([UNIT_SQUARE], 1.0)
        assert confiner.needs_bake([UNIT_SQUARE], 1.5)
        assert confiner.needs_bake([HOURGLASS], 1.0)
        assert confiner.bake([UNIT_SQUARE], 1.5)

    def test_invalidate(self, confiner):
        """Test invalidate forces a new bake and clears the states."""
        confiner.bake([UNIT_SQUARE], 1.0)
        confiner.invalidate()
        assert confiner.needs_bake([UNIT_SQUARE], 1.0)
        assert confiner.get_state(0.0).is_empty()

    def test_path_cached_within_resolution(self, confiner):
        """Test nearby heights reuse the converted path."""
        confiner.bake([UNIT_SQUARE], 1.0)
        first = confiner.get_confiner_path(0.1)
        assert confiner.get_confiner_path(0.105) is first
        assert confiner.get_confiner_path(0.2) is not first

    def test_confine_point(self, confiner):
        """Test points outside are pushed to the nearest boundary point."""
        confiner.bake([UNIT_SQUARE], 1.0)
        assert confiner.confine_point(Vector2(0.5, 0.5), 0.0) == Vector2.ZERO
        assert confiner.confine_point(Vector2(-1, 0.5), 0.0).is_close(Vector2(1, 0))

    def test_no_confinement_without_bake(self, confiner):
        """Test an unbaked confiner leaves points alone."""
        assert confiner.confine_point(Vector2(5, 5), 1.0) == Vector2.ZERO
