"""
Interaction Controller

Real-time driver for the map: turns pointer movement into frame-throttled
IDW estimates with influence lines, and zoom changes into heat layer
rebuilds.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from livability_map.analysis.idw import DEFAULT_POWER, IdwEstimator
from livability_map.analysis.neighbors import DEFAULT_K
from livability_map.models import Coordinate, InterpolationResult, NeighborResult, ScorePoint
from livability_map.interaction.scheduler import (
    DEFAULT_FRAME_INTERVAL,
    AsyncioFrameScheduler,
    FrameHandle,
    FrameScheduler,
)
from livability_map.visualization.color_scheme import LINEAR, color_hex
from livability_map.visualization.heatmap import (
    DEFAULT_BASE_RADIUS,
    DEFAULT_FLOOR_VALUE,
    DEFAULT_REFERENCE_ZOOM,
    HeatmapLayer,
)
from livability_map.visualization.surface import (
    DOWN,
    LEAVE,
    MARKER_ENTER,
    MARKER_LEAVE,
    MOVE,
    UP,
    MapSurface,
)
from livability_map.utils.logging import get_logger

logger = get_logger(__name__)

NO_DATA_TEXT = "No data"


@dataclass(frozen=True)
class HoverState:
    """What the tooltip overlay shows for the current pointer position."""
    coordinate: Coordinate
    container_point: Tuple[float, float]
    estimated_score: Optional[float]
    influence: NeighborResult

    @property
    def label(self) -> str:
        if self.estimated_score is None:
            return NO_DATA_TEXT
        return f"Est. score: {self.estimated_score:.2f}"


HoverListener = Callable[[Optional[HoverState]], None]


class InteractionController:
    """
    Wires a drawing surface's pointer and zoom events to the engine.

    Parameters
    ----------
    points : Sequence[ScorePoint]
        Read-only score store
    surface : MapSurface
        Drawing surface to subscribe to and paint on
    scheduler : FrameScheduler
        Frame scheduler used to throttle pointer-move recomputation
    k : int, optional
        Neighbors blended per estimate (default: 8)
    power : float, optional
        IDW distance exponent (default: 2)
    influence_count : int, optional
        Number of influence lines drawn to the nearest suburbs (default: 3)
    policy : str, optional
        Color policy for the hover marker (default: "linear")
    heat_layer : HeatmapLayer, optional
        Heat layer rebuilt on zoom changes; one is created if omitted
    """

    def __init__(
        self,
        points: Sequence[ScorePoint],
        surface: MapSurface,
        scheduler: FrameScheduler,
        k: int = DEFAULT_K,
        power: float = DEFAULT_POWER,
        influence_count: int = 3,
        policy: str = LINEAR,
        heat_layer: Optional[HeatmapLayer] = None
    ):
        self.surface = surface
        self.scheduler = scheduler
        self.estimator = IdwEstimator(points, k=k, power=power)
        self.influence_count = influence_count
        self.policy = policy
        self.heat_layer = heat_layer if heat_layer is not None else HeatmapLayer(points, surface)

        self.hover: Optional[HoverState] = None
        self.panning = False
        self.over_marker = False

        self._pending: Optional[FrameHandle] = None
        # Bumped by every move/leave; a computation applies only if it is still current
        self._generation = 0
        self._overlay: List[Any] = []
        self._listeners: List[HoverListener] = []
        self._attached = False

    @classmethod
    def from_config(
        cls,
        points: Sequence[ScorePoint],
        surface: MapSurface,
        config: Dict[str, Any],
        scheduler: Optional[FrameScheduler] = None
    ) -> "InteractionController":
        """
        Build a controller from the interpolation, heatmap, visualization
        and interaction sections of a loaded config.

        An AsyncioFrameScheduler with the configured frame interval is used
        when no scheduler is given.
        """
        interp = config.get("interpolation", {})
        heat = config.get("heatmap", {})
        if scheduler is None:
            interval = float(config.get("interaction", {}).get("frame_interval", DEFAULT_FRAME_INTERVAL))
            scheduler = AsyncioFrameScheduler(frame_interval=interval)
        heat_layer = HeatmapLayer(
            points, surface,
            base_radius=float(heat.get("base_radius", DEFAULT_BASE_RADIUS)),
            reference_zoom=float(heat.get("reference_zoom", DEFAULT_REFERENCE_ZOOM)),
            floor_value=float(config.get("data", {}).get("floor_value", DEFAULT_FLOOR_VALUE))
        )
        return cls(
            points, surface, scheduler,
            k=int(interp.get("k", DEFAULT_K)),
            power=float(interp.get("power", DEFAULT_POWER)),
            influence_count=int(interp.get("influence_count", 3)),
            policy=config.get("visualization", {}).get("color_policy", LINEAR),
            heat_layer=heat_layer
        )

    # Lifecycle

    def attach(self) -> "InteractionController":
        """Subscribe to surface events and draw the initial heat layer."""
        if self._attached:
            return self
        self.surface.on(MOVE, self.on_move)
        self.surface.on(LEAVE, self.on_leave)
        self.surface.on(DOWN, self.on_down)
        self.surface.on(UP, self.on_up)
        self.surface.on(MARKER_ENTER, self.on_marker_enter)
        self.surface.on(MARKER_LEAVE, self.on_marker_leave)
        self.heat_layer.attach()
        self._attached = True
        return self

    def detach(self) -> None:
        if not self._attached:
            return
        self.surface.off(MOVE, self.on_move)
        self.surface.off(LEAVE, self.on_leave)
        self.surface.off(DOWN, self.on_down)
        self.surface.off(UP, self.on_up)
        self.surface.off(MARKER_ENTER, self.on_marker_enter)
        self.surface.off(MARKER_LEAVE, self.on_marker_leave)
        self.heat_layer.detach()
        self._cancel_pending()
        self._set_hover(None)
        self._attached = False

    def add_hover_listener(self, listener: HoverListener) -> None:
        self._listeners.append(listener)

    @property
    def has_pending(self) -> bool:
        return self._pending is not None and self._pending.pending

    # Pointer events

    def on_move(self, coordinate: Coordinate) -> None:
        """Replace any pending recomputation with one for the newest position."""
        self._cancel_pending()
        self._generation += 1
        if self.panning or self.over_marker:
            return
        generation = self._generation
        self._pending = self.scheduler.schedule(lambda: self._recompute(coordinate, generation))

    def on_leave(self, *_: Any) -> None:
        """Pointer left the map: drop pending work and clear the overlay now."""
        self._cancel_pending()
        self._generation += 1
        self._set_hover(None)

    def on_down(self, *_: Any) -> None:
        self.panning = True
        self._cancel_pending()
        self._generation += 1

    def on_up(self, *_: Any) -> None:
        self.panning = False

    def on_marker_enter(self, *_: Any) -> None:
        """The suburb's own tooltip takes over while the pointer is on a marker."""
        self.over_marker = True
        self._cancel_pending()
        self._generation += 1
        self._set_hover(None)

    def on_marker_leave(self, *_: Any) -> None:
        self.over_marker = False

    # Internals

    def _cancel_pending(self) -> None:
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None

    def _recompute(self, coordinate: Coordinate, generation: int) -> None:
        if generation != self._generation:
            return
        self._pending = None
        result = self.estimator(coordinate)
        self._set_hover(self._hover_state(coordinate, result))

    def _hover_state(self, coordinate: Coordinate, result: InterpolationResult) -> HoverState:
        return HoverState(
            coordinate=coordinate,
            container_point=self.surface.to_container_point(coordinate),
            estimated_score=result.estimated_score,
            influence=result.influence(self.influence_count)
        )

    def _clear_overlay(self) -> None:
        for handle in self._overlay:
            self.surface.remove(handle)
        self._overlay = []

    def _draw_overlay(self, hover: HoverState) -> None:
        for neighbor in hover.influence:
            self._overlay.append(self.surface.add_line(neighbor.point.coordinate, hover.coordinate))
        color = color_hex(float("nan") if hover.estimated_score is None else hover.estimated_score, self.policy)
        self._overlay.append(self.surface.add_marker(hover.coordinate, color=color, tooltip=hover.label, radius=3))

    def _set_hover(self, hover: Optional[HoverState]) -> None:
        self._clear_overlay()
        self.hover = hover
        if hover is not None:
            self._draw_overlay(hover)
        for listener in list(self._listeners):
            listener(hover)
