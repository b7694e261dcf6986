"""Shared test fixtures: small suburb stores, a manual frame scheduler and a recording surface."""

import json
from pathlib import Path
from typing import Any, List, Tuple

import pytest

from livability_map.data.score_store import ScorePointStore
from livability_map.interaction.scheduler import FrameHandle, FrameScheduler
from livability_map.models import Coordinate, HeatSurface, ScorePoint, SubScores
from livability_map.visualization.surface import MapSurface


class ManualFrameScheduler(FrameScheduler):
    """Runs scheduled callbacks only when the test advances a frame."""

    def __init__(self):
        self.handles: List[FrameHandle] = []

    def schedule(self, callback) -> FrameHandle:
        handle = FrameHandle(callback)
        self.handles.append(handle)
        return handle

    def tick(self) -> int:
        """Run every pending callback; returns how many ran."""
        due, self.handles = self.handles, []
        ran = 0
        for handle in due:
            if handle.pending:
                handle.run()
                ran += 1
        return ran

    @property
    def pending_count(self) -> int:
        return sum(1 for h in self.handles if h.pending)


class RecordingSurface(MapSurface):
    """In-memory drawing surface that records what is currently drawn."""

    def __init__(self, center: Coordinate = Coordinate(0.0, 1.0), zoom: float = 6):
        super().__init__(center=center, zoom=zoom, width=800, height=600)
        self.elements = {}
        self._next_id = 0

    def _add(self, kind: str, payload: Any) -> int:
        self._next_id += 1
        self.elements[self._next_id] = (kind, payload)
        return self._next_id

    def to_container_point(self, coordinate: Coordinate) -> Tuple[float, float]:
        return (coordinate.lon * 10.0, coordinate.lat * 10.0)

    def add_marker(self, coordinate, color, tooltip=None, radius=6, selected=False):
        return self._add("marker", (coordinate, color, tooltip, selected))

    def add_line(self, start, end):
        return self._add("line", (start, end))

    def add_heat_layer(self, heat_surface: HeatSurface):
        return self._add("heat", heat_surface)

    def remove(self, handle) -> None:
        self.elements.pop(handle, None)

    def of_kind(self, kind: str) -> list:
        return [payload for k, payload in self.elements.values() if k == kind]


@pytest.fixture()
def two_point_store() -> ScorePointStore:
    """A at (0, 0) scoring 10 and B at (0, 2) scoring 0."""
    return ScorePointStore([
        ScorePoint("A", Coordinate(0.0, 0.0), 10.0),
        ScorePoint("B", Coordinate(0.0, 2.0), 0.0),
    ])


@pytest.fixture()
def outlier_store() -> ScorePointStore:
    """One high-scoring outlier near the origin, low scorers far away."""
    return ScorePointStore([
        ScorePoint("OUTLIER", Coordinate(0.0, 0.0), 10.0),
        ScorePoint("FAR_1", Coordinate(5.0, 5.0), 2.0),
        ScorePoint("FAR_2", Coordinate(-5.0, 5.0), 2.0),
        ScorePoint("FAR_3", Coordinate(5.0, -5.0), 2.0),
    ])


@pytest.fixture()
def empty_store() -> ScorePointStore:
    return ScorePointStore([])


@pytest.fixture()
def sample_sub_scores() -> SubScores:
    return SubScores(safety=7.0, weather=9.0, transport=4.0, family=6.0)


@pytest.fixture()
def scheduler() -> ManualFrameScheduler:
    return ManualFrameScheduler()


@pytest.fixture()
def surface() -> RecordingSurface:
    return RecordingSurface()


@pytest.fixture()
def dataset_file(tmp_path: Path) -> Path:
    """Small dataset mixing both record shapes, unscored and denylisted suburbs."""
    records = [
        {"suburb": "SYDNEY", "coordinate": {"lat": -33.8688, "lon": 151.2093}, "score": 8.0,
         "subScores": {"safety": 7.0, "weather": 9.0, "transport": 9.0, "family": 7.0}},
        {"suburb": "PARRAMATTA", "coordinate": {"lat": -33.8150, "lon": 151.0011}, "score": 7.0},
        {"suburb": "BOURKE", "coordinate": {"lat": -30.09, "lon": 145.937}, "score": 0},
        {"suburb": "COBAR", "coordinate": {"lat": -31.498, "lon": 145.838}, "score": None},
        {"suburb": "CADGEE", "coordinate": {"lat": -36.05, "lon": 149.95}, "score": 6.0},
        {"suburb": "NOWHERE", "score": 5.0},
    ]
    path = tmp_path / "suburbs.json"
    path.write_text(json.dumps(records), encoding="utf-8")
    return path


@pytest.fixture()
def percent_dataset_file(tmp_path: Path) -> Path:
    """Dataset variant with 0-100 scores and a metrics breakdown."""
    records = [
        {"id": "newcastle", "name": "Newcastle", "lat": -32.9283, "lon": 151.7817, "score": 82,
         "metrics": {"safety": 85, "transport": 70, "weather": 85, "family": 90}},
        {"id": "penrith", "name": "Penrith", "lat": -33.7511, "lon": 150.6942, "score": 75,
         "metrics": {"safety": 70, "transport": 75, "weather": 75, "family": 85}},
    ]
    path = tmp_path / "suburbs_percent.json"
    path.write_text(json.dumps(records), encoding="utf-8")
    return path


@pytest.fixture()
def blend_between_stops():
    """Color a CSS/Leaflet gradient shows at a score: straight blend of the two enclosing stops."""
    def _rgb(hex_color: str) -> Tuple[int, ...]:
        return tuple(int(hex_color[i:i + 2], 16) for i in (1, 3, 5))

    def blend(stops, score: float) -> Tuple[float, ...]:
        for (s0, c0), (s1, c1) in zip(stops, stops[1:]):
            if s0 <= score <= s1:
                f = 0.0 if s1 == s0 else (score - s0) / (s1 - s0)
                return tuple(a + f * (b - a) for a, b in zip(_rgb(c0), _rgb(c1)))
        raise AssertionError(f"score {score} outside the gradient")

    return blend
