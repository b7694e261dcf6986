"""
PyDeck Map Module

Exports the heat surface, suburb markers and score legend as a deck.gl map.
"""

from pathlib import Path
from typing import Any, Dict, Optional, Sequence

import pandas as pd
import pydeck as pdk

from livability_map.models import Coordinate, HeatSurface, ScorePoint
from livability_map.visualization.color_scheme import LINEAR, color_rgba, legend_html, legend_stops
from livability_map.visualization.heatmap import build_heat_surface
from livability_map.utils.logging import get_logger

logger = get_logger(__name__)

MARKER_LINE_RGBA = [51, 51, 51, 255]
SELECTED_LINE_RGBA = [0, 0, 0, 255]


def _prepare_point_data(
    points: Sequence[ScorePoint],
    policy: str,
    selected_id: Optional[str] = None
) -> pd.DataFrame:
    """
    Prepare marker data for the ScatterplotLayer.

    Adds formatted score text, an RGBA fill column and an outline column
    that marks the selected suburb.
    """
    point_data = pd.DataFrame({
        'id': [p.id for p in points],
        'lat': [p.coordinate.lat for p in points],
        'lon': [p.coordinate.lon for p in points],
        'score': [p.overall_score for p in points],
    })
    point_data['score_formatted'] = point_data['score'].apply(lambda x: f"{x:.2f}")
    point_data['color'] = point_data['score'].apply(lambda s: color_rgba(s, policy))
    point_data['line_color'] = point_data['id'].apply(
        lambda i: SELECTED_LINE_RGBA if i == selected_id else MARKER_LINE_RGBA
    )
    return point_data


def _prepare_heat_data(heat_surface: HeatSurface) -> pd.DataFrame:
    return pd.DataFrame(heat_surface.to_heat_data(), columns=['lat', 'lon', 'intensity'])


def _heat_color_range(policy: str):
    """Heatmap color range sampled from the marker color curve."""
    return [color_rgba(score, policy)[:3] for score, _ in legend_stops(policy, steps=6)]


def build_heat_deck(
    points: Sequence[ScorePoint],
    heat_surface: HeatSurface,
    center: Optional[Coordinate] = None,
    policy: str = LINEAR,
    selected_id: Optional[str] = None
) -> pdk.Deck:
    """
    Build a deck with a HeatmapLayer for the surface and a ScatterplotLayer of suburbs.

    Parameters
    ----------
    points : Sequence[ScorePoint]
        Suburbs to display as markers
    heat_surface : HeatSurface
        Surface from build_heat_surface() for the deck's zoom level
    center : Coordinate, optional
        View center (default: mean of the points)
    policy : str, optional
        Color policy (default: "linear")
    selected_id : str, optional
        Suburb outlined as selected

    Returns
    -------
    pdk.Deck
        Deck ready for to_html()
    """
    if center is None:
        if points:
            center = Coordinate(
                sum(p.coordinate.lat for p in points) / len(points),
                sum(p.coordinate.lon for p in points) / len(points)
            )
        else:
            center = Coordinate(0.0, 0.0)

    heat_layer = pdk.Layer(
        'HeatmapLayer',
        data=_prepare_heat_data(heat_surface),
        get_position=['lon', 'lat'],
        get_weight='intensity',
        radius_pixels=max(1, int(round(heat_surface.radius))),
        color_range=_heat_color_range(policy),
        aggregation='MEAN',
        pickable=False
    )

    point_layer = pdk.Layer(
        'ScatterplotLayer',
        data=_prepare_point_data(points, policy, selected_id),
        get_position=['lon', 'lat'],
        get_fill_color='color',
        get_line_color='line_color',
        stroked=True,
        line_width_min_pixels=1,
        get_radius=300,  # meters
        radius_min_pixels=3,
        radius_max_pixels=8,
        pickable=True
    )

    view_state = pdk.ViewState(
        latitude=center.lat,
        longitude=center.lon,
        zoom=heat_surface.zoom,
        pitch=0,
        bearing=0
    )

    # PyDeck tooltips don't apply format specifiers, so the score is pre-formatted
    tooltip = {
        'html': '<b>{id}</b>: {score_formatted}',
        'style': {
            'backgroundColor': 'white',
            'color': 'black'
        }
    }

    return pdk.Deck(
        layers=[heat_layer, point_layer],
        initial_view_state=view_state,
        tooltip=tooltip,
        description=legend_html(policy)
    )


def create_pydeck_map(
    points: Sequence[ScorePoint],
    output_path: Path,
    center: Optional[Coordinate] = None,
    zoom: float = 6,
    policy: str = LINEAR,
    base_radius: float = 25.0,
    reference_zoom: float = 6.0,
    floor_value: float = 1.0,
    selected_id: Optional[str] = None
) -> Dict[str, Any]:
    """
    Render the heat surface, markers and legend to a standalone deck.gl HTML file.

    Returns
    -------
    dict
        Map generation info with keys: 'method', 'file_size_mb', 'file_path', 'heat_surface'
    """
    heat_surface = build_heat_surface(
        points, zoom,
        base_radius=base_radius,
        reference_zoom=reference_zoom,
        floor_value=floor_value
    )
    logger.info("Creating PyDeck map with %d suburbs at zoom %s", len(points), zoom)

    deck = build_heat_deck(points, heat_surface, center=center, policy=policy, selected_id=selected_id)

    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    deck.to_html(str(output_path), open_browser=False)

    file_size_mb = output_path.stat().st_size / (1024 * 1024)
    logger.info("PyDeck map saved to %s (%.2f MB)", output_path, file_size_mb)

    return {
        'method': 'pydeck',
        'file_size_mb': file_size_mb,
        'file_path': output_path,
        'heat_surface': heat_surface
    }
