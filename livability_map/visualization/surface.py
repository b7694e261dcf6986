"""
Drawing Surface Module

Abstract map surface the engine paints upon: point markers, connecting
lines, a heat layer, viewport conversion and pointer-event subscription.
"""

from abc import ABC, abstractmethod
from collections import defaultdict
from typing import Any, Callable, Dict, List, Optional, Tuple

from livability_map.models import Coordinate, HeatSurface
from livability_map.utils.logging import get_logger

logger = get_logger(__name__)

# Pointer and viewport events a surface can emit
MOVE = "move"
LEAVE = "leave"
DOWN = "down"
UP = "up"
ZOOM = "zoom"
MARKER_ENTER = "marker_enter"
MARKER_LEAVE = "marker_leave"
MARKER_CLICK = "marker_click"
EVENTS = (MOVE, LEAVE, DOWN, UP, ZOOM, MARKER_ENTER, MARKER_LEAVE, MARKER_CLICK)

Handler = Callable[..., None]


class MapSurface(ABC):
    """
    Base class for drawing surfaces.

    Subclasses implement the drawing primitives; the event hub is shared.
    Handles returned by the add_* methods are opaque and are passed back
    to remove().
    """

    def __init__(self, center: Coordinate, zoom: float, width: int = 1024, height: int = 768):
        self.center = center
        self._zoom = float(zoom)
        self.width = int(width)
        self.height = int(height)
        self._handlers: Dict[str, List[Handler]] = defaultdict(list)

    # Events

    def on(self, event: str, handler: Handler) -> None:
        if event not in EVENTS:
            raise ValueError(f"Unknown surface event '{event}'. Expected one of {EVENTS}")
        self._handlers[event].append(handler)

    def off(self, event: str, handler: Handler) -> None:
        handlers = self._handlers.get(event, [])
        if handler in handlers:
            handlers.remove(handler)

    def emit(self, event: str, *args: Any) -> None:
        """Dispatch an event to its subscribers in subscription order."""
        if event not in EVENTS:
            raise ValueError(f"Unknown surface event '{event}'. Expected one of {EVENTS}")
        for handler in list(self._handlers.get(event, [])):
            handler(*args)

    # Viewport

    @property
    def zoom(self) -> float:
        return self._zoom

    def set_zoom(self, zoom: float) -> None:
        """Change the zoom level and notify zoom subscribers."""
        zoom = float(zoom)
        if zoom == self._zoom:
            return
        self._zoom = zoom
        logger.debug("Surface zoom changed to %s", zoom)
        self.emit(ZOOM, zoom)

    @abstractmethod
    def to_container_point(self, coordinate: Coordinate) -> Tuple[float, float]:
        """Pixel position of a coordinate within the viewport."""

    # Drawing

    @abstractmethod
    def add_marker(
        self,
        coordinate: Coordinate,
        color: str,
        tooltip: Optional[str] = None,
        radius: float = 6,
        selected: bool = False
    ) -> Any:
        """Place a filled circle marker; selected markers get a dark outline. Returns a handle."""

    @abstractmethod
    def add_line(self, start: Coordinate, end: Coordinate) -> Any:
        """Draw a thin connecting line; returns a handle."""

    @abstractmethod
    def add_heat_layer(self, heat_surface: HeatSurface) -> Any:
        """Composite a weighted point-intensity heat layer; returns a handle."""

    @abstractmethod
    def remove(self, handle: Any) -> None:
        """Remove a previously added element. Unknown handles are ignored."""
