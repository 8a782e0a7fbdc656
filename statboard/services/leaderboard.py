"""
Builds the top list from the grouped ranking-stat query.
"""

import logging
from decimal import Decimal
from itertools import islice
from typing import Iterable
from uuid import UUID

from statboard.constants import LeaderboardConstants
from statboard.data_models.leaderboard import LeaderboardEntry, LeaderboardSnapshot
from statboard.database.results import ResultRow

logger = logging.getLogger(__name__)


class LeaderboardBuilder:
    """Turns pre-sorted total rows into ranked leaderboard entries."""
    
    @staticmethod
    def total_from_row(row: ResultRow) -> int:
        """
        Read the summed total as a Decimal and drop its fractional part.
        
        SUM may come back as an arbitrary-precision decimal depending on the
        driver. A NULL total counts as 0.
        """
        total = row.get_optional('total_value', Decimal)
        if total is None:
            return 0
        return int(total)
    
    @classmethod
    def build(cls, rows: Iterable[ResultRow], window_days: int) -> LeaderboardSnapshot:
        """
        Assign ranks 1..N in the order rows arrive.
        
        Rows are expected already sorted by total descending; ties keep the
        order storage returned. At most TOP_LIST_SIZE rows are used and a short
        result gives a short board.
        
        Raises:
            MalformedRow: If any row lacks a readable player id
        """
        entries = []
        for rank, row in enumerate(islice(rows, LeaderboardConstants.TOP_LIST_SIZE), start=1):
            entries.append(LeaderboardEntry(
                player_id=row.get('player', UUID),
                rank=rank,
                total_value=cls.total_from_row(row)
            ))
        
        logger.debug(f"Built top list with {len(entries)} entries for {window_days} day window")
        return LeaderboardSnapshot(window_days=window_days, entries=tuple(entries))
