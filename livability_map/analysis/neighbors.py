"""
Nearest-Neighbor Ranking

Ranks known suburbs by great-circle distance to a query coordinate.
"""

from typing import Sequence

import numpy as np

from livability_map.models import Coordinate, Neighbor, NeighborResult, ScorePoint
from livability_map.utils.geospatial import haversine_meters

DEFAULT_K = 8

# Below this distance the query coincides with a known suburb
EXACT_HIT_METERS = 1.0


def distances_to(query: Coordinate, points: Sequence[ScorePoint]) -> np.ndarray:
    """Distance in meters from `query` to every point, in input order."""
    if not points:
        return np.empty(0, dtype=float)
    lats = np.fromiter((p.coordinate.lat for p in points), dtype=float, count=len(points))
    lons = np.fromiter((p.coordinate.lon for p in points), dtype=float, count=len(points))
    return haversine_meters(query.lat, query.lon, lats, lons)


def rank(query: Coordinate, points: Sequence[ScorePoint], k: int = DEFAULT_K) -> NeighborResult:
    """
    Return the k points closest to `query`, nearest first.

    Parameters
    ----------
    query : Coordinate
        Query location
    points : Sequence[ScorePoint]
        Candidate points (typically a ScorePointStore)
    k : int, optional
        Maximum number of neighbors (default: 8)

    Returns
    -------
    NeighborResult
        Tuple of Neighbor ordered ascending by distance; empty if `points` is empty

    Raises
    ------
    ValueError
        If k < 1
    """
    if k < 1:
        raise ValueError(f"k must be at least 1, got {k}")

    points = list(points)
    if not points:
        return ()

    distances = distances_to(query, points)
    # Stable sort keeps dataset order for ties
    order = np.argsort(distances, kind="stable")[:k]

    return tuple(
        Neighbor(point=points[i], distance_meters=float(distances[i]))
        for i in order
    )


def is_exact_hit(neighbors: NeighborResult, tolerance_m: float = EXACT_HIT_METERS) -> bool:
    """True when the nearest neighbor is within `tolerance_m` of the query."""
    return bool(neighbors) and neighbors[0].distance_meters < tolerance_m
