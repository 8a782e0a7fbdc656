"""
Stat taxonomy: the closed set of stat kinds recorded in the event log.

Each kind has a stable upper-case identifier (stored in stats_users.stat and
stats.id) and a default display key used to label it.
"""

from enum import Enum

from statboard.utils.stats_exceptions import UnknownStatKind


class StatKind(Enum):
    KILLS = ("KILLS", "stats.kills")
    DEATHS = ("DEATHS", "stats.deaths")
    WINS = ("WINS", "stats.wins")
    LOSSES = ("LOSSES", "stats.losses")
    GAMES_PLAYED = ("GAMES_PLAYED", "stats.games_played")
    POINTS = ("POINTS", "stats.points")
    BLOCKS_PLACED = ("BLOCKS_PLACED", "stats.blocks_placed")
    BLOCKS_BROKEN = ("BLOCKS_BROKEN", "stats.blocks_broken")
    
    def __init__(self, identifier: str, display_key: str):
        self.identifier = identifier
        self.display_key = display_key
    
    def __str__(self):
        return self.identifier
    
    @classmethod
    def resolve(cls, identifier: str) -> "StatKind":
        """
        Look up a stat kind by identifier, ignoring case.
        
        Raises:
            UnknownStatKind: If no kind carries the identifier
        """
        if isinstance(identifier, cls):
            return identifier
        if not isinstance(identifier, str):
            raise UnknownStatKind(identifier)
        
        kind = _BY_IDENTIFIER.get(identifier.strip().upper())
        if kind is None:
            raise UnknownStatKind(identifier)
        return kind


_BY_IDENTIFIER = {kind.identifier: kind for kind in StatKind}
