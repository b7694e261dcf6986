"""
Inverse-Distance Weighting Estimator

Estimates the livability score at an arbitrary point from the nearest
known suburbs. A responsive visual approximation, not a geostatistical
model.
"""

from typing import Sequence

from livability_map.analysis.neighbors import DEFAULT_K, is_exact_hit, rank
from livability_map.models import Coordinate, InterpolationResult, ScorePoint
from livability_map.utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_POWER = 2.0


def estimate(
    query: Coordinate,
    points: Sequence[ScorePoint],
    k: int = DEFAULT_K,
    power: float = DEFAULT_POWER
) -> InterpolationResult:
    """
    Estimate the score at `query` as an inverse-distance weighted mean.

    Weights are 1 / distance**power over the k nearest points. A query
    within one meter of a known suburb returns that suburb's score exactly.

    Parameters
    ----------
    query : Coordinate
        Location to estimate
    points : Sequence[ScorePoint]
        Known suburbs
    k : int, optional
        Number of neighbors to blend (default: 8)
    power : float, optional
        Distance exponent; larger values sharpen locality (default: 2)

    Returns
    -------
    InterpolationResult
        Estimated score (None when there are no points) and the ranked neighbors
    """
    neighbors = rank(query, points, k)
    if not neighbors:
        return InterpolationResult(estimated_score=None, neighbors=())

    if is_exact_hit(neighbors):
        return InterpolationResult(
            estimated_score=neighbors[0].point.overall_score,
            neighbors=neighbors
        )

    numerator = 0.0
    denominator = 0.0
    for neighbor in neighbors:
        try:
            weight = 1.0 / neighbor.distance_meters ** power
        except OverflowError:
            weight = 0.0
        numerator += weight * neighbor.point.overall_score
        denominator += weight

    # Underflow at very large distances and powers
    if denominator == 0.0:
        logger.debug("IDW weights underflowed at (%s, %s); using nearest score", query.lat, query.lon)
        return InterpolationResult(
            estimated_score=neighbors[0].point.overall_score,
            neighbors=neighbors
        )

    return InterpolationResult(estimated_score=numerator / denominator, neighbors=neighbors)


class IdwEstimator:
    """IDW estimator bound to a point store and default parameters."""

    def __init__(self, points: Sequence[ScorePoint], k: int = DEFAULT_K, power: float = DEFAULT_POWER):
        if k < 1:
            raise ValueError(f"k must be at least 1, got {k}")
        self.points = points
        self.k = k
        self.power = power

    def __call__(self, query: Coordinate) -> InterpolationResult:
        result = estimate(query, self.points, k=self.k, power=self.power)
        logger.debug(
            "Estimate at (%.5f, %.5f): %s from %d neighbors",
            query.lat, query.lon, result.estimated_score, len(result.neighbors)
        )
        return result
