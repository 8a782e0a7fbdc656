"""
Folds a player's raw stat events into one total per stat kind.
"""

import logging
from typing import Dict, FrozenSet, Iterable, MutableMapping
from uuid import UUID

from statboard.constants import StatConstants
from statboard.data_models.stat_kind import StatKind
from statboard.data_models.stats import StatAccumulator, StatAggregate, StatEvent
from statboard.database.results import ResultRow
from statboard.utils.stats_exceptions import MalformedRow, UnknownStatKind

logger = logging.getLogger(__name__)

# Row fields whose defects cost only that row; anything else fails the fold
_SKIPPABLE_FIELDS = ("value", "timestamp")


class AggregateBuilder:
    """Accumulates stat events per kind and freezes the totals."""
    
    @staticmethod
    def fold(existing: MutableMapping[StatKind, StatAccumulator], event: StatEvent) -> MutableMapping[StatKind, StatAccumulator]:
        """Add one event to the running totals, creating the kind's total on first sight."""
        accumulator = existing.get(event.kind)
        if accumulator is None:
            accumulator = StatAccumulator(event.kind, event.display_key or StatConstants.FALLBACK_DISPLAY_KEY)
            existing[event.kind] = accumulator
        accumulator.increment(event.value)
        return existing
    
    @staticmethod
    def freeze(accumulators: MutableMapping[StatKind, StatAccumulator]) -> FrozenSet[StatAggregate]:
        return frozenset(accumulator.freeze() for accumulator in accumulators.values())
    
    @staticmethod
    def event_from_row(row: ResultRow) -> StatEvent:
        """
        Read a stat event from a player-events row.
        
        A missing value counts as 0 and a missing or unreadable display key
        falls back to the placeholder.
        
        Raises:
            MalformedRow: If the player id or timestamp is absent or unreadable,
                or the value is present but unreadable
            UnknownStatKind: If the stat column names no known kind
        """
        player_id = row.get('player', UUID)
        kind = StatKind.resolve(row.get('stat', str))
        value = row.get_optional('value', int) or 0
        timestamp = row.get('timestamp', int)
        
        try:
            display_key = row.get_optional('locale_key', str)
        except MalformedRow:
            display_key = None
        
        return StatEvent(
            player_id=player_id,
            kind=kind,
            value=value,
            timestamp=timestamp,
            display_key=display_key or StatConstants.FALLBACK_DISPLAY_KEY
        )
    
    @classmethod
    def fold_rows(cls, rows: Iterable[ResultRow]) -> FrozenSet[StatAggregate]:
        """
        Fold every row of a player-events result into frozen aggregates.
        
        Rows whose stat kind is unknown, or whose value or timestamp cannot be
        read, are skipped so that one bad row does not lose the rest of the player's
        stats. A row without a readable player id still fails the fold.
        """
        accumulators: Dict[StatKind, StatAccumulator] = {}
        for row in rows:
            try:
                event = cls.event_from_row(row)
            except UnknownStatKind as e:
                logger.warning(f"Skipping stat row with unknown stat kind '{e.identifier}'")
                continue
            except MalformedRow as e:
                if e.field not in _SKIPPABLE_FIELDS:
                    raise
                logger.warning(f"Skipping malformed stat row: {e}")
                continue
            cls.fold(accumulators, event)
        return cls.freeze(accumulators)
