"""
livability_map - Spatial livability interpolation and visualization engine.

Estimates suburb livability at arbitrary map points with inverse-distance
weighting, blends weighted sub-scores, and renders zoom-scaled heat maps.
"""

from livability_map.analysis import aggregate, estimate, rank
from livability_map.data import ScorePointStore, load_score_points
from livability_map.models import (
    Coordinate,
    HeatSample,
    HeatSurface,
    InterpolationResult,
    Neighbor,
    ScorePoint,
    SubScores,
    WeightVector,
)
from livability_map.visualization import build_heat_surface, color_for

__version__ = "0.1.0"

__all__ = [
    'Coordinate',
    'ScorePoint',
    'SubScores',
    'WeightVector',
    'Neighbor',
    'InterpolationResult',
    'HeatSample',
    'HeatSurface',
    'ScorePointStore',
    'load_score_points',
    'rank',
    'estimate',
    'aggregate',
    'color_for',
    'build_heat_surface'
]
