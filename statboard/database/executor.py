"""
Future-returning query executor over an async SQLAlchemy session factory.

Each call schedules its statement as a task on the running event loop and
returns immediately, so callers can dispatch several queries before awaiting
any of them. A failed statement surfaces as a failed future carrying the
driver's exception; nothing here retries.
"""

import asyncio
import logging
from typing import Any

from sqlalchemy.sql import Executable

from statboard.database.results import ResultSet
from statboard.services.base import BaseService

logger = logging.getLogger(__name__)


class QueryExecutor(BaseService):
    """Runs parameterised statements and hands back futures of their results."""
    
    def query(self, statement: Executable, **params: Any) -> "asyncio.Future[ResultSet]":
        """Schedule a read; the future resolves to the materialised ResultSet."""
        return asyncio.ensure_future(self._run_query(statement, params))
    
    def update(self, statement: Executable, **params: Any) -> "asyncio.Future[None]":
        """Schedule a write or DDL statement; committed when the future resolves."""
        return asyncio.ensure_future(self._run_update(statement, params))
    
    async def _run_query(self, statement: Executable, params: dict) -> ResultSet:
        async with self.get_session() as session:
            result = await session.execute(statement, params)
            rows = ResultSet.from_mappings(result.mappings().all())
        logger.debug(f"Query returned {len(rows)} rows")
        return rows
    
    async def _run_update(self, statement: Executable, params: dict) -> None:
        async with self.get_session() as session:
            await session.execute(statement, params)
