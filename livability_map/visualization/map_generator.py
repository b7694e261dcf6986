"""
Map Generator Module

Renders the suburb score map with the engine and settings from a loaded
configuration.
"""

from pathlib import Path
from typing import Any, Dict, Optional, Sequence

from livability_map.models import Coordinate, ScorePoint
from livability_map.utils.config_loader import get_default_config, resolve_path
from livability_map.utils.logging import get_logger
from livability_map.visualization.folium_map import create_folium_map
from livability_map.visualization.pydeck_map import create_pydeck_map

logger = get_logger(__name__)

ENGINES = ("folium", "pydeck")


def render_score_map(
    points: Sequence[ScorePoint],
    output_path: Optional[Path] = None,
    config: Optional[Dict[str, Any]] = None,
    engine: str = "folium",
    zoom: Optional[float] = None,
    policy: Optional[str] = None,
    selected_id: Optional[str] = None
) -> Dict[str, Any]:
    """
    Render suburb markers, the heat layer and the legend to an HTML map.

    Parameters
    ----------
    points : Sequence[ScorePoint]
        Suburbs to display
    output_path : Path, optional
        Path to save HTML file (default: visualization.output)
    config : dict, optional
        Loaded configuration (default: built-in defaults)
    engine : str, optional
        "folium" or "pydeck" (default: "folium")
    zoom : float, optional
        Zoom level (default: visualization.zoom)
    policy : str, optional
        Color policy (default: visualization.color_policy)
    selected_id : str, optional
        Suburb drawn with the selection outline

    Returns
    -------
    dict
        Map generation info with keys: 'method', 'file_size_mb', 'file_path', 'heat_surface'
    """
    if engine not in ENGINES:
        raise ValueError(f"Unknown map engine '{engine}'. Expected one of {ENGINES}")

    config = config if config is not None else get_default_config()
    vis = config.get("visualization", {})
    heat = config.get("heatmap", {})
    data = config.get("data", {})

    if zoom is None:
        zoom = float(vis.get("zoom", 6))
    policy = policy or vis.get("color_policy", "linear")
    output_path = resolve_path(output_path or vis.get("output", "output/livability_map.html"))

    center = None
    configured_center = vis.get("center")
    if configured_center:
        center = Coordinate(float(configured_center[0]), float(configured_center[1]))

    common = dict(
        center=center,
        zoom=zoom,
        policy=policy,
        base_radius=float(heat.get("base_radius", 25.0)),
        reference_zoom=float(heat.get("reference_zoom", 6.0)),
        floor_value=float(data.get("floor_value", 1.0)),
        selected_id=selected_id
    )

    logger.info("Rendering %d suburbs with %s (policy: %s)", len(points), engine, policy)
    if engine == "pydeck":
        return create_pydeck_map(points, output_path, **common)
    return create_folium_map(
        points, output_path,
        marker_radius=float(vis.get("marker_radius", 6)),
        width=int(vis.get("width", 1024)),
        height=int(vis.get("height", 768)),
        **common
    )
