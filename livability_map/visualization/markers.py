"""
Suburb Markers

One colored circle marker per known suburb, with click-to-select: the
selected suburb is redrawn with a dark outline.
"""

from typing import Any, Callable, Dict, List, Optional, Sequence

from livability_map.models import ScorePoint
from livability_map.visualization.color_scheme import LINEAR, color_hex
from livability_map.visualization.surface import MARKER_CLICK, MapSurface
from livability_map.utils.logging import get_logger

logger = get_logger(__name__)

SelectListener = Callable[[Optional[str]], None]


def marker_tooltip(point: ScorePoint) -> str:
    return f"{point.id}: {point.overall_score:g}"


def add_score_markers(
    surface: MapSurface,
    points: Sequence[ScorePoint],
    policy: str = LINEAR,
    radius: float = 6,
    selected_id: Optional[str] = None
) -> list:
    """Place one colored marker per suburb with a "<id>: <score>" tooltip."""
    handles = []
    for point in points:
        handles.append(surface.add_marker(
            point.coordinate,
            color=color_hex(point.overall_score, policy),
            tooltip=marker_tooltip(point),
            radius=radius,
            selected=point.id == selected_id
        ))
    return handles


class ScoreMarkerLayer:
    """
    Keeps the suburb markers on a surface and tracks the selected suburb.

    A `marker_click` event carrying a suburb id selects it; clicking the
    selected suburb again clears the selection. Only the markers whose
    outline changes are redrawn.

    Parameters
    ----------
    points : Sequence[ScorePoint]
        Suburbs to display
    surface : MapSurface
        Drawing surface
    policy : str, optional
        Color policy (default: "linear")
    radius : float, optional
        Marker radius in pixels (default: 6)
    """

    def __init__(
        self,
        points: Sequence[ScorePoint],
        surface: MapSurface,
        policy: str = LINEAR,
        radius: float = 6
    ):
        self.points: Dict[str, ScorePoint] = {p.id: p for p in points}
        self.surface = surface
        self.policy = policy
        self.radius = radius
        self.selected_id: Optional[str] = None
        self._handles: Dict[str, Any] = {}
        self._listeners: List[SelectListener] = []
        self._attached = False

    def attach(self) -> "ScoreMarkerLayer":
        if self._attached:
            return self
        for point in self.points.values():
            self._draw(point)
        self.surface.on(MARKER_CLICK, self.on_marker_click)
        self._attached = True
        return self

    def detach(self) -> None:
        if not self._attached:
            return
        self.surface.off(MARKER_CLICK, self.on_marker_click)
        for handle in self._handles.values():
            self.surface.remove(handle)
        self._handles = {}
        self._attached = False

    def add_select_listener(self, listener: SelectListener) -> None:
        self._listeners.append(listener)

    def on_marker_click(self, point_id: str) -> None:
        if point_id == self.selected_id:
            self.select(None)
        else:
            self.select(point_id)

    def select(self, point_id: Optional[str]) -> None:
        """Select a suburb by id, or clear the selection with None."""
        if point_id is not None and point_id not in self.points:
            raise ValueError(f"Unknown suburb '{point_id}'")
        if point_id == self.selected_id:
            return

        previous, self.selected_id = self.selected_id, point_id
        for changed in (previous, point_id):
            if changed is not None and self._attached:
                self._draw(self.points[changed])
        logger.debug("Selected suburb: %s", point_id)
        for listener in list(self._listeners):
            listener(point_id)

    def _draw(self, point: ScorePoint) -> None:
        old = self._handles.pop(point.id, None)
        if old is not None:
            self.surface.remove(old)
        self._handles[point.id] = self.surface.add_marker(
            point.coordinate,
            color=color_hex(point.overall_score, self.policy),
            tooltip=marker_tooltip(point),
            radius=self.radius,
            selected=point.id == self.selected_id
        )
