"""
Extracts a player's rank from the result of the comparative rank query.
"""

from typing import Iterable

from statboard.constants import LeaderboardConstants
from statboard.database.results import ResultRow


class RankCalculator:
    """Reads the rank column; no row means the player is unranked."""
    
    @staticmethod
    def rank(rows: Iterable[ResultRow]) -> int:
        """
        Rank from the first row, or LeaderboardConstants.UNRANKED when the
        result is empty.
        
        The query counts players with a strictly greater total, so ties share
        a rank. UNRANKED is a marker, not a number to compute with.
        
        Raises:
            MalformedRow: If a row is present but its rank is missing
        """
        for row in rows:
            return row.get('rank', int)
        return LeaderboardConstants.UNRANKED
