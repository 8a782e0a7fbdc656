"""
Base service class for statboard.

Services built on it get one session per unit of work: committed when the
block exits cleanly, rolled back when it raises, and always closed.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator
from sqlalchemy.ext.asyncio import AsyncSession

logger = logging.getLogger(__name__)

class BaseService:
    """Base class for services that run statements in their own session."""
    
    def __init__(self, session_factory):
        """
        Args:
            session_factory: async_sessionmaker bound to the statboard engine
        """
        self.session_factory = session_factory
    
    @asynccontextmanager
    async def get_session(self) -> AsyncGenerator[AsyncSession, None]:
        """Unit-of-work session scope."""
        session = self.session_factory()
        try:
            yield session
            await session.commit()
        except Exception as e:
            logger.debug(f"{type(self).__name__} rolling back after {type(e).__name__}: {e}")
            await session.rollback()
            raise
        finally:
            await session.close()
