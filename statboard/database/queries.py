"""
Query shapes for windowed stat reads.

All three queries take the same named bind parameters: `now` and
`window_start` (epoch milliseconds, window_start exclusive) and, where a single
player is involved, `player` (UUID string). The ranking stat is fixed when the
queries are built so that rank and top list always order by the same stat.
"""

from sqlalchemy import select, func, bindparam, BigInteger, String
from sqlalchemy.sql import Select

from statboard.constants import LeaderboardConstants, StatConstants
from statboard.data_models.stat_kind import StatKind
from statboard.database.models import PlayerStat, StatDefinition


def _in_window():
    return (
        PlayerStat.timestamp <= bindparam('now', type_=BigInteger),
        PlayerStat.timestamp > bindparam('window_start', type_=BigInteger),
    )


def _player_param():
    return bindparam('player', type_=String(StatConstants.PLAYER_ID_LENGTH))


class StatsQueries:
    """Builds the statements used by the stats engine."""
    
    @staticmethod
    def player_events() -> Select:
        """Every event of one player inside the window, joined to its definition."""
        return (
            select(
                PlayerStat.player,
                PlayerStat.stat,
                PlayerStat.value,
                PlayerStat.timestamp,
                StatDefinition.locale_key,
            )
            .join(StatDefinition, StatDefinition.id == PlayerStat.stat)
            .where(PlayerStat.player == _player_param(), *_in_window())
            .order_by(PlayerStat.timestamp, PlayerStat.id)
        )
    
    @staticmethod
    def player_totals(ranking_stat: StatKind):
        """Windowed ranking-stat sum per player."""
        return (
            select(
                PlayerStat.player.label('player'),
                func.sum(PlayerStat.value).label('total_value'),
            )
            .where(PlayerStat.stat == ranking_stat.identifier, *_in_window())
            .group_by(PlayerStat.player)
        )
    
    @staticmethod
    def player_rank(ranking_stat: StatKind) -> Select:
        """
        Count of players whose windowed sum strictly exceeds the given player's
        windowed sum, plus one.
        
        Players tied with the given player do not push the rank down. The query
        yields no row at all when the player has no ranking-stat events in the
        window, since there is no own total to compare against.
        """
        own_total = (
            select(func.sum(PlayerStat.value))
            .where(
                PlayerStat.player == _player_param(),
                PlayerStat.stat == ranking_stat.identifier,
                *_in_window()
            )
            .correlate(None)
            .scalar_subquery()
        )
        
        totals = StatsQueries.player_totals(ranking_stat).subquery('player_totals')
        stronger = (
            select(func.count())
            .select_from(totals)
            .where(totals.c.total_value > own_total)
            .correlate(None)
            .scalar_subquery()
        )
        
        return select((stronger + 1).label('rank')).where(own_total.is_not(None))
    
    @staticmethod
    def top_list(ranking_stat: StatKind, limit: int = LeaderboardConstants.TOP_LIST_SIZE) -> Select:
        """Highest windowed ranking-stat sums, descending."""
        totals = StatsQueries.player_totals(ranking_stat)
        total_value = totals.selected_columns.total_value
        return totals.order_by(total_value.desc()).limit(limit)
