"""
Stat Operations Module

Write-side operations for the stat event log.

Key functionality:
- record_event(): Append a single stat event
- record_events(): Append a batch of events in one transaction
- get_stat_definitions(): List the stored stat definitions

Events are append-only; totals are always derived at read time by the
stats engine.
"""

from typing import Iterable, List, Optional
from contextlib import asynccontextmanager
from uuid import UUID
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from statboard.data_models.stat_kind import StatKind
from statboard.data_models.stats import StatEvent
from statboard.database.models import PlayerStat, StatDefinition
from statboard.utils.logger import setup_logger
from statboard.utils.time_window import current_millis

logger = setup_logger(__name__)


class StatOperationError(Exception):
    """Base exception for stat operation errors"""
    pass


class StatValidationError(StatOperationError):
    """Raised when stat event data validation fails"""
    pass


class StatOperations:
    """
    Operations for writing stat events.
    
    Stat kinds are resolved through the taxonomy before anything is written,
    so the foreign key to the stats table always holds.
    """
    
    def __init__(self, database):
        """Initialize with database instance"""
        self.db = database
        self.logger = logger
    
    @asynccontextmanager
    async def _get_session_context(self, session: Optional[AsyncSession] = None):
        """
        Provides a session context. Uses the provided session if available,
        otherwise creates and manages a new transaction.
        """
        if session:
            # If a session is provided, we do not manage its lifecycle
            yield session
        else:
            async with self.db.transaction() as new_session:
                yield new_session
    
    @staticmethod
    def _validate(player_id: UUID, value: int, timestamp: int):
        if not isinstance(player_id, UUID):
            raise StatValidationError(f"player_id must be a UUID, got {type(player_id).__name__}")
        if isinstance(value, bool) or not isinstance(value, int):
            raise StatValidationError(f"value must be an integer, got {value!r}")
        if isinstance(timestamp, bool) or not isinstance(timestamp, int):
            raise StatValidationError(f"timestamp must be integer milliseconds, got {timestamp!r}")
    
    def _build_record(self, event: StatEvent) -> PlayerStat:
        self._validate(event.player_id, event.value, event.timestamp)
        return PlayerStat(
            player=str(event.player_id),
            stat=event.kind.identifier,
            value=event.value,
            timestamp=event.timestamp
        )
    
    async def record_event(
        self,
        player_id: UUID,
        kind,
        value: int,
        timestamp: Optional[int] = None,
        session: Optional[AsyncSession] = None
    ) -> StatEvent:
        """
        Append one stat event.
        
        Args:
            player_id: Player the event belongs to
            kind: StatKind or its identifier (case-insensitive)
            value: Integer amount, may be negative for corrections
            timestamp: Epoch milliseconds, defaults to now
            session: Optional session to join an outer transaction
            
        Returns:
            StatEvent: The event as written
            
        Raises:
            UnknownStatKind: If kind is not a known stat kind
            StatValidationError: If player_id, value or timestamp has the wrong type
        """
        stat_kind = StatKind.resolve(kind)
        event = StatEvent(
            player_id=player_id,
            kind=stat_kind,
            value=value,
            timestamp=current_millis() if timestamp is None else timestamp,
            display_key=stat_kind.display_key
        )
        
        async with self._get_session_context(session) as s:
            s.add(self._build_record(event))
            await s.flush()
        
        self.logger.debug(f"Recorded {stat_kind}={value} for {player_id} at {event.timestamp}")
        return event
    
    async def record_events(self, events: Iterable[StatEvent], session: Optional[AsyncSession] = None) -> int:
        """
        Append a batch of stat events atomically.
        
        Returns:
            int: Number of events written
        """
        records = [self._build_record(event) for event in events]
        if not records:
            return 0
        
        async with self._get_session_context(session) as s:
            s.add_all(records)
            await s.flush()
        
        self.logger.info(f"Recorded {len(records)} stat events")
        return len(records)
    
    async def get_stat_definitions(self) -> List[StatDefinition]:
        """Get all stored stat definitions ordered by id"""
        async with self.db.get_session() as session:
            result = await session.execute(select(StatDefinition).order_by(StatDefinition.id))
            return list(result.scalars().all())
