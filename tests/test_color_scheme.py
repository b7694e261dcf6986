"""Tests for livability_map.visualization.color_scheme."""

import math

import pytest

from livability_map.visualization.color_scheme import (
    NO_DATA_RGB,
    color_css,
    color_for,
    color_hex,
    color_rgba,
    get_color_scheme_info,
    legend_html,
    legend_stops,
    ramp_position,
)


class TestLinearPolicy:
    def test_zero_is_red(self):
        assert color_for(0, "linear") == (255, 0, 0)

    def test_ten_is_green(self):
        assert color_for(10, "linear") == (0, 255, 0)

    def test_midpoint_is_balanced(self):
        r, g, b = color_for(5, "linear")
        assert r == g
        assert b == 0

    def test_clamps_low(self):
        assert color_for(-3, "linear") == color_for(0, "linear")

    def test_clamps_high(self):
        assert color_for(15, "linear") == color_for(10, "linear")

    def test_infinity_clamps(self):
        assert color_for(float("inf")) == (0, 255, 0)
        assert color_for(float("-inf")) == (255, 0, 0)

    def test_default_policy_is_linear(self):
        assert color_for(7.3) == color_for(7.3, "linear")


class TestCompressedPolicy:
    def test_clamps_below_range(self):
        assert color_for(0, "compressed") == color_for(6.5, "compressed")

    def test_curve_constants(self):
        t = ((10 - 6) / 6.5) ** 0.7
        assert ramp_position(10, "compressed") == pytest.approx(t)
        assert color_for(10, "compressed") == (
            math.floor(255 * (1 - t) + 0.5), math.floor(255 * t + 0.5), 0
        )

    def test_spreads_high_range(self):
        linear_gap = color_for(9, "linear")[1] - color_for(7, "linear")[1]
        compressed_gap = color_for(9, "compressed")[1] - color_for(7, "compressed")[1]
        assert compressed_gap > linear_gap

    def test_monotonic_green(self):
        greens = [color_for(s, "compressed")[1] for s in (6.5, 7, 8, 9, 10)]
        assert greens == sorted(greens)


class TestFormats:
    def test_hex(self):
        assert color_hex(0) == "#FF0000"
        assert color_hex(10) == "#00FF00"

    def test_css(self):
        assert color_css(10) == "rgb(0,255,0)"

    def test_rgba(self):
        assert color_rgba(0, alpha=128) == [255, 0, 0, 128]

    def test_nan_is_no_data(self):
        assert color_for(float("nan")) == NO_DATA_RGB

    def test_unknown_policy(self):
        with pytest.raises(ValueError):
            color_for(5, "rainbow")


class TestLegend:
    def test_stops_match_marker_colors(self):
        for policy in ("linear", "compressed"):
            for score, color in legend_stops(policy):
                assert color == color_hex(score, policy)

    def test_stops_span_range(self):
        stops = legend_stops("linear", steps=5)
        assert [s for s, _ in stops] == [0.0, 2.5, 5.0, 7.5, 10.0]

    def test_needs_two_stops(self):
        with pytest.raises(ValueError):
            legend_stops("linear", steps=1)

    def test_scheme_info(self):
        info = get_color_scheme_info("compressed")
        assert info["policy"] == "compressed"
        assert info["stops"] == legend_stops("compressed")


class TestLegendCurve:
    @pytest.mark.parametrize("policy", ["linear", "compressed"])
    def test_gradient_between_stops_matches_markers(self, policy, blend_between_stops):
        stops = legend_stops(policy)
        scores = [i / 40 for i in range(401)] + [6.45, 6.5, 6.55, 6.6]
        for score in scores:
            blended = blend_between_stops(stops, score)
            expected = color_for(score, policy)
            assert all(abs(b - e) <= 1.5 for b, e in zip(blended, expected)), (score, blended, expected)

    def test_compressed_has_stop_at_clamp_threshold(self):
        stops = legend_stops("compressed", steps=11)
        assert (6.5, color_hex(6.5, "compressed")) in stops
        assert [s for s, _ in stops] == sorted(s for s, _ in stops)

    def test_compressed_flat_below_threshold(self):
        stops = legend_stops("compressed")
        low = {color for score, color in stops if score <= 6.5}
        assert low == {color_hex(0.0, "compressed")}

    def test_html_lists_every_stop(self):
        html = legend_html("compressed", title="Scores")
        assert "Scores" in html
        for score, color in legend_stops("compressed"):
            assert f"{color} {round(score * 10, 3):g}%" in html
