"""
Heatmap Raster Builder

Builds the zoom-dependent heat surface from every known suburb. Radius
grows with zoom so coverage density looks consistent as the user zooms;
blur keeps neighbouring samples merged into a continuous field.
"""

from typing import Any, Iterable, Optional, Sequence

from livability_map.models import HeatSample, HeatSurface, ScorePoint
from livability_map.visualization.color_scheme import SCORE_MAX
from livability_map.visualization.surface import ZOOM, MapSurface
from livability_map.utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_BASE_RADIUS = 25.0
DEFAULT_REFERENCE_ZOOM = 6.0
BLUR_RATIO = 0.8
DEFAULT_FLOOR_VALUE = 1.0


def heat_intensity(score: Optional[float], floor_value: float = DEFAULT_FLOOR_VALUE) -> float:
    """Normalize a score to [0, 1]; missing or zero scores use the floor value."""
    value = score if score else floor_value
    if value != value:  # NaN
        value = floor_value
    return max(0.0, min(1.0, value / SCORE_MAX))


def heat_radius(zoom: float, base_radius: float = DEFAULT_BASE_RADIUS,
                reference_zoom: float = DEFAULT_REFERENCE_ZOOM) -> float:
    """Heat radius in pixels, proportional to zoom."""
    if reference_zoom <= 0:
        raise ValueError(f"reference_zoom must be positive, got {reference_zoom}")
    return base_radius * (max(0.0, float(zoom)) / reference_zoom)


def build_heat_surface(
    points: Iterable[ScorePoint],
    zoom: float,
    base_radius: float = DEFAULT_BASE_RADIUS,
    reference_zoom: float = DEFAULT_REFERENCE_ZOOM,
    floor_value: float = DEFAULT_FLOOR_VALUE
) -> HeatSurface:
    """
    Build the heat surface for a zoom level.

    Parameters
    ----------
    points : Iterable[ScorePoint]
        All known suburbs
    zoom : float
        Current viewport zoom level
    base_radius : float, optional
        Radius in pixels at the reference zoom (default: 25)
    reference_zoom : float, optional
        Zoom level at which the radius equals base_radius (default: 6)
    floor_value : float, optional
        Score used for unscored points (default: 1.0)

    Returns
    -------
    HeatSurface
        Intensity samples plus radius and blur (blur = 0.8 * radius)
    """
    radius = heat_radius(zoom, base_radius, reference_zoom)
    samples = tuple(
        HeatSample(coordinate=p.coordinate, intensity=heat_intensity(p.overall_score, floor_value))
        for p in points
    )
    return HeatSurface(samples=samples, radius=radius, blur=radius * BLUR_RATIO, zoom=float(zoom))


class HeatmapLayer:
    """
    Keeps a single heat layer on a surface in sync with the zoom level.

    Every rebuild removes the previous layer before adding the new one,
    so stale surfaces never stay visible.
    """

    def __init__(
        self,
        points: Sequence[ScorePoint],
        surface: MapSurface,
        base_radius: float = DEFAULT_BASE_RADIUS,
        reference_zoom: float = DEFAULT_REFERENCE_ZOOM,
        floor_value: float = DEFAULT_FLOOR_VALUE
    ):
        self.points = points
        self.surface = surface
        self.base_radius = float(base_radius)
        self.reference_zoom = float(reference_zoom)
        self.floor_value = float(floor_value)
        self.current: Optional[HeatSurface] = None
        self._handle: Any = None
        self._attached = False

    def attach(self) -> "HeatmapLayer":
        """Subscribe to zoom changes and draw the layer for the current zoom."""
        if not self._attached:
            self.surface.on(ZOOM, self.rebuild)
            self._attached = True
        self.rebuild(self.surface.zoom)
        return self

    def detach(self) -> None:
        if self._attached:
            self.surface.off(ZOOM, self.rebuild)
            self._attached = False
        self.clear()

    def rebuild(self, zoom: float) -> HeatSurface:
        """Replace the heat layer with one built for `zoom`."""
        if self.current is not None and self._handle is not None and self.current.zoom == float(zoom):
            return self.current

        heat_surface = build_heat_surface(
            self.points,
            zoom,
            base_radius=self.base_radius,
            reference_zoom=self.reference_zoom,
            floor_value=self.floor_value
        )
        self.clear()
        self._handle = self.surface.add_heat_layer(heat_surface)
        self.current = heat_surface
        logger.debug(
            "Heat layer rebuilt at zoom %s: %d samples, radius %.1f, blur %.1f",
            zoom, len(heat_surface.samples), heat_surface.radius, heat_surface.blur
        )
        return heat_surface

    def clear(self) -> None:
        if self._handle is not None:
            self.surface.remove(self._handle)
            self._handle = None
        self.current = None
