"""
Services package for statboard.

Read-side aggregation: per-player stat totals, rank and the top list.
"""

from .base import BaseService
from .aggregation import AggregateBuilder
from .ranking import RankCalculator
from .leaderboard import LeaderboardBuilder
from .stats_engine import StatsAggregationEngine

__all__ = [
    'BaseService',
    'AggregateBuilder',
    'RankCalculator',
    'LeaderboardBuilder',
    'StatsAggregationEngine',
]
