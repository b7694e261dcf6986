"""
Analysis Module

Nearest-neighbor ranking, IDW interpolation and sub-score aggregation.
"""

from livability_map.analysis.aggregation import aggregate, normalize_weights, reweight_points
from livability_map.analysis.idw import IdwEstimator, estimate
from livability_map.analysis.neighbors import EXACT_HIT_METERS, rank

__all__ = [
    'aggregate',
    'normalize_weights',
    'reweight_points',
    'estimate',
    'IdwEstimator',
    'rank',
    'EXACT_HIT_METERS'
]
