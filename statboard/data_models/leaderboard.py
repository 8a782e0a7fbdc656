"""
Leaderboard data models.

Provides immutable data transfer objects for the top list.
"""

from dataclasses import dataclass
from typing import Optional, Tuple
from uuid import UUID


@dataclass(frozen=True)
class LeaderboardEntry:
    """Single leaderboard row."""
    player_id: UUID
    rank: int
    total_value: int


@dataclass(frozen=True)
class LeaderboardSnapshot:
    """Top list for one window, entries in rank order."""
    window_days: int
    entries: Tuple[LeaderboardEntry, ...]
    
    def __len__(self):
        return len(self.entries)
    
    def get_entry(self, player_id: UUID) -> Optional[LeaderboardEntry]:
        for entry in self.entries:
            if entry.player_id == player_id:
                return entry
        return None
