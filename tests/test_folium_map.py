"""Tests for livability_map.visualization.folium_map."""

import pytest

from livability_map.models import Coordinate
from livability_map.visualization.color_scheme import COMPRESSED, color_for, color_hex
from livability_map.visualization.folium_map import (
    MARKER_STROKE,
    SELECTED_STROKE,
    FoliumMapSurface,
    add_score_markers,
    create_folium_map,
    heat_gradient,
)
from livability_map.visualization.heatmap import build_heat_surface


@pytest.fixture()
def folium_surface():
    return FoliumMapSurface(center=Coordinate(0.0, 1.0), zoom=6, width=800, height=600)


class TestFoliumMapSurface:
    def test_remove_drops_element(self, folium_surface):
        line = folium_surface.add_line(Coordinate(0.0, 0.0), Coordinate(0.0, 1.0))
        assert line.get_name() in folium_surface.map._children
        folium_surface.remove(line)
        assert line.get_name() not in folium_surface.map._children

    def test_remove_unknown_handle_ignored(self, folium_surface):
        folium_surface.remove(None)
        line = folium_surface.add_line(Coordinate(0.0, 0.0), Coordinate(0.0, 1.0))
        folium_surface.remove(line)
        folium_surface.remove(line)

    def test_container_point_of_center(self, folium_surface):
        x, y = folium_surface.to_container_point(Coordinate(0.0, 1.0))
        assert x == pytest.approx(400.0)
        assert y == pytest.approx(300.0)

    def test_heat_layer_uses_surface_radius(self, folium_surface, two_point_store):
        heat = build_heat_surface(two_point_store, zoom=12)
        layer = folium_surface.add_heat_layer(heat)
        assert layer.options["radius"] == pytest.approx(heat.radius)
        assert layer.options["blur"] == pytest.approx(heat.blur)

    def test_markers_one_per_point(self, folium_surface, two_point_store):
        handles = add_score_markers(folium_surface, two_point_store)
        assert len(handles) == 2
        assert all(h.get_name() in folium_surface.map._children for h in handles)


class TestHeatGradient:
    def test_endpoints_follow_marker_colors(self):
        gradient = heat_gradient(COMPRESSED)
        assert gradient[0.0] == color_hex(0.0, COMPRESSED)
        assert gradient[1.0] == color_hex(10.0, COMPRESSED)


class TestCreateFoliumMap:
    def test_writes_html(self, tmp_path, two_point_store):
        output = tmp_path / "maps" / "scores.html"
        info = create_folium_map(two_point_store, output, zoom=9)
        assert info["method"] == "folium"
        assert info["file_path"] == output
        assert output.exists()
        assert info["file_size_mb"] > 0
        assert info["heat_surface"].zoom == 9.0

        html = output.read_text(encoding="utf-8")
        assert "A: 10" in html
        assert "Livability Score" in html

    def test_empty_store(self, tmp_path, empty_store):
        info = create_folium_map(empty_store, tmp_path / "empty.html")
        assert info["heat_surface"].samples == ()
        assert (tmp_path / "empty.html").exists()


class TestLegendAndGradient:
    def test_heat_gradient_blends_to_marker_curve(self, blend_between_stops):
        gradient = heat_gradient(COMPRESSED)
        stops = [(intensity * 10, color) for intensity, color in sorted(gradient.items())]
        for score in (6.0, 6.5, 6.55, 6.8, 7.25, 9.9):
            blended = blend_between_stops(stops, score)
            expected = color_for(score, COMPRESSED)
            assert all(abs(b - e) <= 1.5 for b, e in zip(blended, expected))

    def test_legend_rendered_with_clamp_stop(self):
        surface = FoliumMapSurface(center=Coordinate(0.0, 1.0), policy=COMPRESSED)
        surface.add_legend()
        html = surface.map.get_root().render()
        assert f"{color_hex(6.5, COMPRESSED)} 65%" in html
        assert f"{color_hex(10.0, COMPRESSED)} 100%" in html


class TestMarkerSelection:
    def test_selected_marker_outline(self, folium_surface):
        plain = folium_surface.add_marker(Coordinate(0.0, 0.0), color="#FF0000")
        chosen = folium_surface.add_marker(Coordinate(0.0, 1.0), color="#FF0000", selected=True)
        assert plain.options["color"] == MARKER_STROKE
        assert chosen.options["color"] == SELECTED_STROKE

    def test_add_score_markers_selects_by_id(self, folium_surface, two_point_store):
        handles = add_score_markers(folium_surface, two_point_store, selected_id="B")
        assert [h.options["color"] for h in handles] == [MARKER_STROKE, SELECTED_STROKE]
