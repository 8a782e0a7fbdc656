"""
Player stat data models.

StatAccumulator is the mutable running total used while folding event rows;
everything handed back to callers is a frozen dataclass.
"""

from dataclasses import dataclass
from typing import FrozenSet, Optional
from uuid import UUID

from statboard.constants import LeaderboardConstants
from statboard.data_models.stat_kind import StatKind


@dataclass(frozen=True)
class StatEvent:
    """Single stat event as read from storage."""
    player_id: UUID
    kind: StatKind
    value: int
    timestamp: int
    display_key: Optional[str] = None


@dataclass(frozen=True)
class StatAggregate:
    """Total of one stat kind for one player over one window."""
    kind: StatKind
    display_key: str
    value: int


class StatAccumulator:
    """Running total for a single stat kind during folding."""
    
    def __init__(self, kind: StatKind, display_key: str):
        self.kind = kind
        self.display_key = display_key
        self.value = 0
    
    def increment(self, amount: int):
        self.value += amount
    
    def freeze(self) -> StatAggregate:
        return StatAggregate(kind=self.kind, display_key=self.display_key, value=self.value)
    
    def __repr__(self):
        return f"<StatAccumulator(kind={self.kind}, value={self.value})>"


@dataclass(frozen=True)
class PlayerStatsSnapshot:
    """A player's stat totals and rank for one window."""
    player_id: UUID
    window_days: int
    rank: int  # LeaderboardConstants.UNRANKED when there is nothing to rank
    aggregates: FrozenSet[StatAggregate]
    
    @property
    def is_ranked(self) -> bool:
        return self.rank != LeaderboardConstants.UNRANKED
    
    def get_aggregate(self, kind: StatKind) -> Optional[StatAggregate]:
        for aggregate in self.aggregates:
            if aggregate.kind is kind:
                return aggregate
        return None
    
    def get_value(self, kind: StatKind) -> int:
        """Total for a stat kind, 0 if the player has no events of that kind."""
        aggregate = self.get_aggregate(kind)
        return aggregate.value if aggregate else 0
