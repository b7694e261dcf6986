"""
Interaction Module

Frame-throttled pointer handling, zoom-driven heat rebuilds and owned
search-slot state.
"""

from livability_map.interaction.controller import HoverState, InteractionController
from livability_map.interaction.scheduler import AsyncioFrameScheduler, FrameHandle, FrameScheduler
from livability_map.interaction.search import ScorePanel, SearchResult, SearchSlot

__all__ = [
    'InteractionController',
    'HoverState',
    'FrameScheduler',
    'FrameHandle',
    'AsyncioFrameScheduler',
    'ScorePanel',
    'SearchSlot',
    'SearchResult'
]
