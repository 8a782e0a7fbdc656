"""
Stats aggregation engine.

Answers the two windowed reads the rest of the application needs: a single
player's stat totals with their rank, and the top list. Windows are trailing
whole-day intervals ending at the clock's current time; an event at timestamp
t counts when window_start < t <= now.

Each request dispatches its queries to the executor without awaiting them,
then waits at a single join point. The player snapshot needs both the events
query and the rank query: if either fails the whole request fails with
QueryFailed once both have settled. Nothing is cached or shared between
requests, so concurrent calls need no coordination.
"""

import asyncio
import logging
from typing import Callable, Optional
from uuid import UUID

from statboard.config import Config
from statboard.constants import WindowConstants
from statboard.data_models.leaderboard import LeaderboardSnapshot
from statboard.data_models.stat_kind import StatKind
from statboard.data_models.stats import PlayerStatsSnapshot
from statboard.database.queries import StatsQueries
from statboard.services.aggregation import AggregateBuilder
from statboard.services.leaderboard import LeaderboardBuilder
from statboard.services.ranking import RankCalculator
from statboard.utils.stats_exceptions import QueryFailed
from statboard.utils.time_window import current_millis, window_bounds

logger = logging.getLogger(__name__)


class StatsAggregationEngine:
    """Windowed player snapshots and top lists over the stat event log."""
    
    def __init__(self, executor, ranking_stat: Optional[StatKind] = None, clock: Optional[Callable[[], int]] = None):
        """
        Args:
            executor: Object with query(statement, **params) returning an
                awaitable ResultSet, normally a QueryExecutor
            ranking_stat: Stat kind ordering both player rank and the top list,
                defaults to Config.RANKING_STAT
            clock: Returns the current time in epoch milliseconds
        """
        self.executor = executor
        self.ranking_stat = StatKind.resolve(ranking_stat) if ranking_stat is not None else Config.get_ranking_stat()
        self.clock = clock or current_millis
        
        self._events_query = StatsQueries.player_events()
        self._rank_query = StatsQueries.player_rank(self.ranking_stat)
        self._top_list_query = StatsQueries.top_list(self.ranking_stat)
    
    async def get_player_snapshot(self, player_id: UUID, window_days: int = WindowConstants.ALL_TIME) -> PlayerStatsSnapshot:
        """
        Get a player's stat totals and rank over the trailing window.
        
        Raises:
            ValueError: If window_days is not a positive integer
            QueryFailed: If either underlying query fails
            MalformedRow: If a stored row breaks player identity
        """
        now, window_start = window_bounds(window_days, self.clock())
        player = str(player_id)
        
        events_future = self.executor.query(
            self._events_query, player=player, now=now, window_start=window_start
        )
        rank_future = self.executor.query(
            self._rank_query, player=player, now=now, window_start=window_start
        )
        
        # Both queries settle before anything is folded or raised
        events_result, rank_result = await asyncio.gather(
            events_future, rank_future, return_exceptions=True
        )
        for operation, outcome in (("player stats", events_result), ("player rank", rank_result)):
            if isinstance(outcome, asyncio.CancelledError):
                raise outcome
            if isinstance(outcome, BaseException):
                logger.error(f"Error querying {operation} for {player}: {outcome}")
                raise QueryFailed(operation, outcome) from outcome
        
        return PlayerStatsSnapshot(
            player_id=player_id,
            window_days=window_days,
            rank=RankCalculator.rank(rank_result),
            aggregates=AggregateBuilder.fold_rows(events_result)
        )
    
    async def get_leaderboard(self, window_days: int = WindowConstants.ALL_TIME) -> LeaderboardSnapshot:
        """
        Get the top list for the ranking stat over the trailing window.
        
        Raises:
            ValueError: If window_days is not a positive integer
            QueryFailed: If the grouped query fails
            MalformedRow: If a row lacks a readable player id
        """
        now, window_start = window_bounds(window_days, self.clock())
        
        try:
            result = await self.executor.query(self._top_list_query, now=now, window_start=window_start)
        except Exception as e:
            logger.error(f"Error querying top list: {e}")
            raise QueryFailed("top list", e) from e
        
        return LeaderboardBuilder.build(result, window_days)
