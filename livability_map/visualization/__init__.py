"""
Visualization Module

Score colors, zoom-scaled heat surfaces and the map drawing surfaces.
"""

from livability_map.visualization.color_scheme import (
    color_for,
    color_hex,
    get_color_scheme_info,
    legend_html,
    legend_stops,
)
from livability_map.visualization.heatmap import HeatmapLayer, build_heat_surface
from livability_map.visualization.markers import ScoreMarkerLayer, add_score_markers
from livability_map.visualization.surface import MapSurface

__all__ = [
    'color_for',
    'color_hex',
    'get_color_scheme_info',
    'legend_html',
    'legend_stops',
    'build_heat_surface',
    'HeatmapLayer',
    'ScoreMarkerLayer',
    'add_score_markers',
    'MapSurface'
]
