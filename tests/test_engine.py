"""Tests for the caching engine (pyvoronoy/engine.py) and its settings."""

import numpy as np
import pytest
from pydantic import ValidationError

from pyvoronoy.config import VoronoySettings
from pyvoronoy.engine import InvalidThresholdError, Voronoy
from pyvoronoy.geometry import frame_corners, is_convex_polygon


@pytest.fixture
def points():
    rng = np.random.default_rng(42)
    return rng.uniform(0, 400, size=(12, 2))


@pytest.fixture
def voronoy():
    return Voronoy(settings=VoronoySettings())


class TestScenarios:
    """End-to-end scenarios through the public accessors."""

    def test_three_points(self, voronoy):
        voronoy.set_points([(0.0, 0.0), (100.0, 0.0), (50.0, 100.0)], threshold=0)

        faces = voronoy.get_triangulation()
        assert len(faces) == 1
        assert set(faces[0].vertex_ids()) == {4, 5, 6}

        polygons = voronoy.get_voronoy_polygons()
        assert len(polygons) == 3

    def test_two_points(self, voronoy):
        voronoy.set_points([(0.0, 0.0), (100.0, 0.0)])
        assert voronoy.get_triangulation() == []
        assert voronoy.get_voronoy_polygons() == []

    def test_no_points(self, voronoy):
        assert voronoy.get_triangulation() == []
        assert voronoy.get_voronoy_polygons() == []

    def test_collinear_points(self, voronoy):
        voronoy.set_points([(0.0, 0.0), (1.0, 2.0), (2.0, 4.0)])
        assert voronoy.get_triangulation() == []
        assert voronoy.get_voronoy_polygons() == []

    def test_polygon_count_and_convexity(self, voronoy, points):
        voronoy.set_points(points)
        polygons = voronoy.get_voronoy_polygons()

        assert len(polygons) == len(points)
        assert all(is_convex_polygon(p) for p in polygons)

    def test_with_frame_corners(self, voronoy, points):
        """Callers may append far-off corners; their cells follow the real ones."""
        all_points = np.vstack([points, frame_corners(400, 400)])
        voronoy.set_points(all_points)

        polygons = voronoy.get_voronoy_polygons()
        assert len(polygons) == len(points) + 4
        assert all(is_convex_polygon(p) for p in polygons[: len(points)])


class TestMemoization:
    """Cached results are reused until the points change."""

    def test_polygons_are_cached(self, voronoy, points):
        voronoy.set_points(points)
        first = voronoy.get_voronoy_polygons()
        second = voronoy.get_voronoy_polygons()

        assert first is second

    def test_triangulation_is_cached(self, voronoy, points):
        voronoy.set_points(points)
        assert voronoy.get_triangulation() is voronoy.get_triangulation()

    def test_clear_forces_identical_rebuild(self, voronoy, points):
        voronoy.set_points(points)
        first = voronoy.get_voronoy_polygons()

        voronoy.clear()
        second = voronoy.get_voronoy_polygons()

        assert first is not second
        assert len(first) == len(second)
        for a, b in zip(first, second):
            np.testing.assert_array_equal(a, b)

    def test_clear_keeps_points(self, voronoy, points):
        voronoy.set_points(points)
        voronoy.clear()
        np.testing.assert_array_equal(voronoy.nodes, points)

    def test_forced_rebuild(self, voronoy, points):
        voronoy.set_points(points)
        faces = voronoy.get_triangulation()
        polygons = voronoy.get_voronoy_polygons()

        voronoy.calculate_triangulation(force=True)

        assert voronoy.get_triangulation() is not faces
        assert voronoy.get_voronoy_polygons() is not polygons

    def test_results_are_read_only(self, voronoy, points):
        voronoy.set_points(points)
        poly = voronoy.get_voronoy_polygons()[0]
        with pytest.raises(ValueError):
            poly[0, 0] = 1.0

    def test_caller_mutation_does_not_leak(self, voronoy, points):
        data = points.copy()
        voronoy.set_points(data)
        data[0] = [-1000.0, -1000.0]
        np.testing.assert_array_equal(voronoy.nodes, points)


class TestThresholdGating:
    """set_points only replaces the points when they moved enough."""

    def test_small_motion_keeps_cache(self, voronoy, points):
        voronoy.set_points(points)
        polygons = voronoy.get_voronoy_polygons()

        accepted = voronoy.set_points(points + 0.01, threshold=1.0)

        assert not accepted
        assert voronoy.get_voronoy_polygons() is polygons
        np.testing.assert_array_equal(voronoy.nodes, points)

    def test_large_motion_rebuilds(self, voronoy, points):
        voronoy.set_points(points)
        polygons = voronoy.get_voronoy_polygons()

        accepted = voronoy.set_points(points + 5.0, threshold=1.0)

        assert accepted
        new_polygons = voronoy.get_voronoy_polygons()
        assert new_polygons is not polygons
        assert not np.array_equal(new_polygons[0], polygons[0])

    def test_motion_equal_to_threshold_rebuilds(self, voronoy):
        points = np.array([[0.0, 0.0], [100.0, 0.0], [50.0, 100.0], [20.0, 30.0]])
        voronoy.set_points(points)
        moved = points.copy()
        moved[3, 0] = 21.0

        assert voronoy.set_points(moved, threshold=1.0)
        assert not voronoy.set_points(points, threshold=1.5)

    def test_count_change_always_rebuilds(self, voronoy, points):
        voronoy.set_points(points)
        assert voronoy.set_points(points[:-1], threshold=1e12)
        assert len(voronoy.get_voronoy_polygons()) == len(points) - 1

    def test_zero_threshold_rebuilds_on_identical_points(self, voronoy, points):
        voronoy.set_points(points)
        assert voronoy.set_points(points.copy())

    def test_default_threshold_from_settings(self, points):
        voronoy = Voronoy(settings=VoronoySettings(threshold=10.0))
        voronoy.set_points(points)
        assert not voronoy.set_points(points + 0.1)

    def test_negative_threshold_rejected(self, voronoy, points):
        with pytest.raises(InvalidThresholdError):
            voronoy.set_points(points, threshold=-1.0)
        with pytest.raises(ValueError):
            voronoy.set_points(points, threshold=-0.5)


class TestSettings:
    """Tests for VoronoySettings."""

    def test_defaults(self):
        settings = VoronoySettings()
        assert settings.threshold == 0.0
        assert settings.bounds_scale == pytest.approx(1.1)
        assert settings.symmetric_bounds is False
        assert settings.skip_collinear is True

    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("PYVORONOY_THRESHOLD", "2.5")
        monkeypatch.setenv("PYVORONOY_SYMMETRIC_BOUNDS", "true")
        settings = VoronoySettings()
        assert settings.threshold == 2.5
        assert settings.symmetric_bounds is True

    @pytest.mark.parametrize(
        "kwargs", [{"threshold": -1.0}, {"bounds_scale": 1.0}, {"bounds_scale": 2.5}]
    )
    def test_invalid_values(self, kwargs):
        with pytest.raises(ValidationError):
            VoronoySettings(**kwargs)

    def test_symmetric_bounds_engine(self, points):
        voronoy = Voronoy(settings=VoronoySettings(symmetric_bounds=True))
        voronoy.set_points(points)
        polygons = voronoy.get_voronoy_polygons()
        assert len(polygons) == len(points)
        assert all(is_convex_polygon(p) for p in polygons)


class TestPlot:
    """Debug overlay rendering."""

    def test_plot_returns_axes(self, voronoy, points):
        matplotlib = pytest.importorskip("matplotlib")
        matplotlib.use("Agg")
        import matplotlib.pyplot as plt

        voronoy.set_points(points)
        ax = voronoy.plot(title="cells", point_labels=True)

        assert ax.get_title() == "cells"
        assert len(ax.lines) > len(points)
        plt.close("all")

    def test_plot_empty(self, voronoy):
        matplotlib = pytest.importorskip("matplotlib")
        matplotlib.use("Agg")
        import matplotlib.pyplot as plt

        ax = voronoy.plot()
        assert ax.get_title() == "Voronoy"
        plt.close("all")
