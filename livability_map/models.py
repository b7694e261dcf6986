"""
Data Model Module

Immutable value types shared by the interpolation, aggregation and
visualization components.
"""

import math
from dataclasses import dataclass
from typing import Iterator, List, Optional, Tuple


@dataclass(frozen=True)
class Coordinate:
    """Latitude/longitude pair in decimal degrees (WGS84)."""
    lat: float
    lon: float

    def to_list(self) -> List[float]:
        """Return [lat, lon], the order folium and Leaflet expect."""
        return [self.lat, self.lon]


@dataclass(frozen=True)
class SubScores:
    """Per-category livability scores for a single suburb."""
    safety: float
    weather: float
    transport: float
    family: float

    def __iter__(self) -> Iterator[float]:
        # Summation order used by the aggregator
        return iter((self.safety, self.weather, self.transport, self.family))

    def scaled(self, factor: float) -> "SubScores":
        return SubScores(
            safety=self.safety * factor,
            weather=self.weather * factor,
            transport=self.transport * factor,
            family=self.family * factor,
        )


@dataclass(frozen=True)
class ScorePoint:
    """A known suburb: identifier, location and livability score(s)."""
    id: str
    coordinate: Coordinate
    overall_score: float
    sub_scores: Optional[SubScores] = None


@dataclass(frozen=True)
class WeightVector:
    """
    Relative importance of each sub-score category.

    Weights need not sum to 1; the aggregator normalizes them.
    """
    safety: float = 1.0
    weather: float = 1.0
    transport: float = 1.0
    family: float = 1.0

    def __post_init__(self):
        for name, value in zip(("safety", "weather", "transport", "family"), self):
            try:
                number = float(value)
            except (TypeError, ValueError):
                raise ValueError(f"Weight '{name}' must be a number, got {value!r}") from None
            if not math.isfinite(number):
                raise ValueError(f"Weight '{name}' must be finite, got {value!r}")
            if number < 0:
                raise ValueError(f"Weight '{name}' must be non-negative, got {value}")

    def __iter__(self) -> Iterator[float]:
        return iter((self.safety, self.weather, self.transport, self.family))

    @classmethod
    def uniform(cls) -> "WeightVector":
        return cls(1.0, 1.0, 1.0, 1.0)

    @classmethod
    def from_importance(
        cls,
        safety: bool = False,
        weather: bool = False,
        transport: bool = False,
        family: bool = False,
        important: float = 1.0,
        unimportant: float = 0.5
    ) -> "WeightVector":
        """
        Build weights from the "what matters most to you?" toggles.

        Unchecked factors still matter, just less: they get `unimportant`
        (0.5) instead of `important` (1.0), never zero.
        """
        return cls(
            safety=important if safety else unimportant,
            weather=important if weather else unimportant,
            transport=important if transport else unimportant,
            family=important if family else unimportant,
        )

    def to_service_payload(self) -> dict:
        """Key names expected by the remote livability scoring service."""
        return {
            "crime": self.safety,
            "weather": self.weather,
            "publicTransportation": self.transport,
            "familyDemographics": self.family,
        }


@dataclass(frozen=True)
class Neighbor:
    point: ScorePoint
    distance_meters: float


# Ascending by distance, length <= k
NeighborResult = Tuple[Neighbor, ...]


@dataclass(frozen=True)
class InterpolationResult:
    """
    Estimated score at a query point plus the neighbors that shaped it.

    `estimated_score` is None only when the store is empty.
    """
    estimated_score: Optional[float]
    neighbors: NeighborResult = ()

    @property
    def has_estimate(self) -> bool:
        return self.estimated_score is not None

    def influence(self, count: int = 3) -> NeighborResult:
        """Closest neighbors to draw influence lines to."""
        return self.neighbors[:count]


@dataclass(frozen=True)
class HeatSample:
    coordinate: Coordinate
    intensity: float  # 0.0-1.0


@dataclass(frozen=True)
class HeatSurface:
    """Zoom-dependent intensity samples plus radius/blur for the heat layer."""
    samples: Tuple[HeatSample, ...]
    radius: float
    blur: float
    zoom: float

    def to_heat_data(self) -> List[List[float]]:
        """Return [[lat, lon, intensity], ...] as consumed by Leaflet.heat."""
        return [
            [s.coordinate.lat, s.coordinate.lon, s.intensity]
            for s in self.samples
        ]
