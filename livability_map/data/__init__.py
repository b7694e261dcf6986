"""
Data Module

Static suburb dataset loading and the remote scoring service adapter.
"""

from livability_map.data.score_store import (
    ScorePointStore,
    build_score_points,
    load_score_points,
    load_store_from_config,
)

__all__ = [
    'ScorePointStore',
    'build_score_points',
    'load_score_points',
    'load_store_from_config'
]
