"""
Folium Map Module

Folium implementation of the drawing surface, plus a helper that renders
the full suburb score map (markers, heat layer, legend) to HTML.
"""

from pathlib import Path
from typing import Any, Dict, Optional, Sequence, Tuple

import folium
from folium import plugins

from livability_map.models import Coordinate, HeatSurface, ScorePoint
from livability_map.visualization.color_scheme import (
    LEGEND_STEPS,
    LINEAR,
    SCORE_MAX,
    legend_html,
    legend_stops,
)
from livability_map.visualization.heatmap import HeatmapLayer
from livability_map.visualization.markers import add_score_markers
from livability_map.visualization.surface import MapSurface
from livability_map.utils.geospatial import to_container_pixels
from livability_map.utils.logging import get_logger

logger = get_logger(__name__)

MARKER_STROKE = '#333'
SELECTED_STROKE = '#000'


def heat_gradient(policy: str = LINEAR, steps: int = LEGEND_STEPS) -> Dict[float, str]:
    """Leaflet.heat gradient following the marker color curve (intensity = score / 10)."""
    return {
        round(score / SCORE_MAX, 3): color
        for score, color in legend_stops(policy, steps)
    }


class FoliumMapSurface(MapSurface):
    """
    Drawing surface backed by a folium.Map.

    Parameters
    ----------
    center : Coordinate
        Initial map center
    zoom : float, optional
        Initial zoom level (default: 6)
    width, height : int, optional
        Viewport size in pixels used for container-point conversion
    policy : str, optional
        Color policy used for the heat gradient and legend (default: "linear")
    tiles : str, optional
        Base tile layer (default: "OpenStreetMap")
    """

    def __init__(
        self,
        center: Coordinate,
        zoom: float = 6,
        width: int = 1024,
        height: int = 768,
        policy: str = LINEAR,
        tiles: str = 'OpenStreetMap'
    ):
        super().__init__(center=center, zoom=zoom, width=width, height=height)
        self.policy = policy
        self.map = folium.Map(
            location=center.to_list(),
            zoom_start=int(round(zoom)),
            tiles=tiles,
            prefer_canvas=True
        )
        folium.TileLayer('CartoDB positron', name='CartoDB Positron').add_to(self.map)
        plugins.Fullscreen().add_to(self.map)

    def to_container_point(self, coordinate: Coordinate) -> Tuple[float, float]:
        return to_container_pixels(
            coordinate.lat, coordinate.lon,
            self.center.lat, self.center.lon,
            self.zoom, self.width, self.height
        )

    def add_marker(
        self,
        coordinate: Coordinate,
        color: str,
        tooltip: Optional[str] = None,
        radius: float = 6,
        selected: bool = False
    ) -> folium.CircleMarker:
        marker = folium.CircleMarker(
            location=coordinate.to_list(),
            radius=radius,
            color=SELECTED_STROKE if selected else MARKER_STROKE,
            weight=1,
            fill=True,
            fill_color=color,
            fill_opacity=0.9,
            tooltip=tooltip
        )
        marker.add_to(self.map)
        return marker

    def add_line(self, start: Coordinate, end: Coordinate) -> folium.PolyLine:
        line = folium.PolyLine(
            locations=[start.to_list(), end.to_list()],
            color='#555',
            weight=0.5,
            dash_array='3'
        )
        line.add_to(self.map)
        return line

    def add_heat_layer(self, heat_surface: HeatSurface) -> plugins.HeatMap:
        layer = plugins.HeatMap(
            heat_surface.to_heat_data(),
            name='Livability heat',
            radius=heat_surface.radius,
            blur=heat_surface.blur,
            gradient=heat_gradient(self.policy)
        )
        layer.add_to(self.map)
        return layer

    def remove(self, handle: Any) -> None:
        if handle is None:
            return
        self.map._children.pop(handle.get_name(), None)

    def add_legend(self, title: str = 'Livability Score') -> None:
        """Add a gradient legend sampled from the marker color curve."""
        legend = f"""
        <div style="position: fixed;
                    bottom: 50px; right: 50px; width: 220px; height: auto;
                    background-color: white; border:2px solid grey; z-index:9999;
                    font-size:14px; padding: 10px">
        {legend_html(self.policy, title)}
        </div>
        """
        self.map.get_root().html.add_child(folium.Element(legend))

    def save(self, output_path: Path) -> Path:
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        folium.LayerControl().add_to(self.map)
        self.map.save(str(output_path))
        return output_path


def create_folium_map(
    points: Sequence[ScorePoint],
    output_path: Path,
    center: Optional[Coordinate] = None,
    zoom: float = 6,
    policy: str = LINEAR,
    base_radius: float = 25.0,
    reference_zoom: float = 6.0,
    floor_value: float = 1.0,
    marker_radius: float = 6,
    width: int = 1024,
    height: int = 768,
    selected_id: Optional[str] = None
) -> Dict[str, Any]:
    """
    Render suburb markers, the zoom-scaled heat layer and the legend to HTML.

    Parameters
    ----------
    points : Sequence[ScorePoint]
        Suburbs to display
    output_path : Path
        Path to save HTML file
    center : Coordinate, optional
        Map center (default: mean of the points, or 0, 0 when empty)
    zoom : float, optional
        Initial zoom level (default: 6)
    policy : str, optional
        Color policy (default: "linear")
    selected_id : str, optional
        Suburb drawn with the selection outline

    Returns
    -------
    dict
        Map generation info with keys: 'method', 'file_size_mb', 'file_path', 'heat_surface'
    """
    if center is None:
        if points:
            center = Coordinate(
                sum(p.coordinate.lat for p in points) / len(points),
                sum(p.coordinate.lon for p in points) / len(points)
            )
        else:
            center = Coordinate(0.0, 0.0)

    logger.info("Creating Folium map with %d suburbs at zoom %s", len(points), zoom)

    surface = FoliumMapSurface(center=center, zoom=zoom, width=width, height=height, policy=policy)
    heat = HeatmapLayer(
        points, surface,
        base_radius=base_radius,
        reference_zoom=reference_zoom,
        floor_value=floor_value
    ).attach()
    add_score_markers(surface, points, policy=policy, radius=marker_radius, selected_id=selected_id)
    surface.add_legend()
    output_path = surface.save(output_path)

    file_size_mb = output_path.stat().st_size / (1024 * 1024)
    logger.info("Folium map saved to %s (%.2f MB)", output_path, file_size_mb)

    return {
        'method': 'folium',
        'file_size_mb': file_size_mb,
        'file_path': output_path,
        'heat_surface': heat.current
    }
