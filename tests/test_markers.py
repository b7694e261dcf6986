"""Tests for livability_map.visualization.markers."""

import pytest

from livability_map.visualization.color_scheme import color_hex
from livability_map.visualization.markers import ScoreMarkerLayer, add_score_markers, marker_tooltip
from livability_map.visualization.surface import MARKER_CLICK


def selected_ids(surface):
    return sorted(tooltip.split(":")[0] for _, _, tooltip, selected in surface.of_kind("marker") if selected)


class TestAddScoreMarkers:
    def test_one_marker_per_suburb(self, surface, two_point_store):
        add_score_markers(surface, two_point_store)
        markers = surface.of_kind("marker")
        assert [m[1] for m in markers] == [color_hex(10.0), color_hex(0.0)]
        assert [m[2] for m in markers] == ["A: 10", "B: 0"]
        assert selected_ids(surface) == []

    def test_selected_id_flags_one_marker(self, surface, two_point_store):
        add_score_markers(surface, two_point_store, selected_id="B")
        assert selected_ids(surface) == ["B"]

    def test_tooltip_format(self, two_point_store):
        assert marker_tooltip(two_point_store[0]) == "A: 10"


class TestScoreMarkerLayer:
    def test_attach_draws_unselected_markers(self, surface, two_point_store):
        ScoreMarkerLayer(two_point_store, surface).attach()
        assert len(surface.of_kind("marker")) == 2
        assert selected_ids(surface) == []

    def test_click_selects_and_click_again_clears(self, surface, two_point_store):
        ScoreMarkerLayer(two_point_store, surface).attach()
        surface.emit(MARKER_CLICK, "A")
        assert selected_ids(surface) == ["A"]
        assert len(surface.of_kind("marker")) == 2

        surface.emit(MARKER_CLICK, "A")
        assert selected_ids(surface) == []
        assert len(surface.of_kind("marker")) == 2

    def test_click_other_moves_selection(self, surface, two_point_store):
        layer = ScoreMarkerLayer(two_point_store, surface).attach()
        surface.emit(MARKER_CLICK, "A")
        surface.emit(MARKER_CLICK, "B")
        assert layer.selected_id == "B"
        assert selected_ids(surface) == ["B"]
        assert len(surface.of_kind("marker")) == 2

    def test_listeners_see_selection(self, surface, two_point_store):
        seen = []
        layer = ScoreMarkerLayer(two_point_store, surface).attach()
        layer.add_select_listener(seen.append)
        surface.emit(MARKER_CLICK, "B")
        surface.emit(MARKER_CLICK, "B")
        assert seen == ["B", None]

    def test_unknown_id_raises(self, surface, two_point_store):
        layer = ScoreMarkerLayer(two_point_store, surface).attach()
        with pytest.raises(ValueError):
            layer.select("NOWHERE")
        assert layer.selected_id is None

    def test_detach_removes_markers_and_stops_listening(self, surface, two_point_store):
        layer = ScoreMarkerLayer(two_point_store, surface).attach()
        layer.detach()
        assert surface.of_kind("marker") == []
        surface.emit(MARKER_CLICK, "A")
        assert layer.selected_id is None
        assert surface.of_kind("marker") == []

    def test_select_before_attach_is_drawn_on_attach(self, surface, two_point_store):
        layer = ScoreMarkerLayer(two_point_store, surface)
        layer.select("A")
        assert surface.of_kind("marker") == []
        layer.attach()
        assert selected_ids(surface) == ["A"]
