"""Tests for livability_map.visualization.heatmap."""

import dataclasses

import pytest

from livability_map.models import Coordinate, HeatSurface, ScorePoint
from livability_map.visualization.heatmap import (
    HeatmapLayer,
    build_heat_surface,
    heat_intensity,
    heat_radius,
)


class TestBuildHeatSurface:
    def test_radius_grows_with_zoom(self, two_point_store):
        assert build_heat_surface(two_point_store, zoom=12).radius > \
            build_heat_surface(two_point_store, zoom=6).radius

    def test_radius_proportional_to_zoom(self, two_point_store):
        low = build_heat_surface(two_point_store, zoom=6, base_radius=20)
        high = build_heat_surface(two_point_store, zoom=12, base_radius=20)
        assert high.radius / low.radius == pytest.approx(2.0)
        assert low.radius == pytest.approx(20.0)

    def test_blur_is_fraction_of_radius(self, two_point_store):
        surface = build_heat_surface(two_point_store, zoom=9)
        assert surface.blur == pytest.approx(surface.radius * 0.8)

    def test_one_sample_per_point(self, outlier_store):
        surface = build_heat_surface(outlier_store, zoom=6)
        assert len(surface.samples) == len(outlier_store)
        assert surface.samples[0].coordinate == Coordinate(0.0, 0.0)
        assert surface.samples[0].intensity == pytest.approx(1.0)

    def test_zero_score_uses_floor(self, two_point_store):
        surface = build_heat_surface(two_point_store, zoom=6)
        assert surface.samples[1].intensity == pytest.approx(0.1)

    def test_heat_data_rows(self, two_point_store):
        rows = build_heat_surface(two_point_store, zoom=6).to_heat_data()
        assert rows[0] == [0.0, 0.0, 1.0]

    def test_empty_store(self, empty_store):
        surface = build_heat_surface(empty_store, zoom=6)
        assert surface.samples == ()

    def test_surface_carries_only_rendered_fields(self, two_point_store):
        assert [f.name for f in dataclasses.fields(HeatSurface)] == ["samples", "radius", "blur", "zoom"]
        assert all(0.0 <= s.intensity <= 1.0 for s in build_heat_surface(two_point_store, zoom=6).samples)


class TestHeatIntensity:
    def test_clamped_to_unit_range(self):
        assert heat_intensity(25.0) == 1.0
        assert heat_intensity(-4.0) == 0.0

    def test_missing_score_uses_floor(self):
        assert heat_intensity(None) == pytest.approx(0.1)
        assert heat_intensity(float("nan")) == pytest.approx(0.1)

    def test_negative_zoom_gives_zero_radius(self):
        assert heat_radius(-3) == 0.0

    def test_reference_zoom_must_be_positive(self):
        with pytest.raises(ValueError):
            heat_radius(6, reference_zoom=0)


class TestHeatmapLayer:
    def test_attach_draws_one_layer(self, two_point_store, surface):
        layer = HeatmapLayer(two_point_store, surface).attach()
        heat_layers = surface.of_kind("heat")
        assert len(heat_layers) == 1
        assert heat_layers[0] is layer.current

    def test_zoom_change_replaces_layer(self, two_point_store, surface):
        layer = HeatmapLayer(two_point_store, surface).attach()
        first = layer.current
        surface.set_zoom(10)
        heat_layers = surface.of_kind("heat")
        assert len(heat_layers) == 1
        assert heat_layers[0].zoom == 10
        assert heat_layers[0].radius > first.radius

    def test_same_zoom_does_not_rebuild(self, two_point_store, surface):
        layer = HeatmapLayer(two_point_store, surface).attach()
        first = layer.current
        layer.rebuild(surface.zoom)
        assert layer.current is first

    def test_detach_removes_layer(self, two_point_store, surface):
        layer = HeatmapLayer(two_point_store, surface).attach()
        layer.detach()
        assert surface.of_kind("heat") == []
        surface.set_zoom(11)
        assert surface.of_kind("heat") == []

    def test_custom_floor(self, surface):
        points = [ScorePoint("Z", Coordinate(1.0, 1.0), 0.0)]
        layer = HeatmapLayer(points, surface, floor_value=2.0).attach()
        assert layer.current.samples[0].intensity == pytest.approx(0.2)
