from contextlib import asynccontextmanager
from typing import Optional
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy import select

from statboard.config import Config
from statboard.data_models.stat_kind import StatKind
from statboard.database.executor import QueryExecutor
from statboard.database.models import Base, StatDefinition
from statboard.utils.logger import setup_logger

class Database:
    def __init__(self, database_url: Optional[str] = None):
        self.logger = setup_logger(__name__)
        self.database_url = database_url or Config.DATABASE_URL
        self.engine = None
        self.async_session = None
        
    async def initialize(self):
        """Initialize the database connection and create tables"""
        self.logger.info("Initializing database...")
        
        # Convert sqlite URL to async if needed
        database_url = self.database_url
        if database_url.startswith('sqlite:///'):
            database_url = database_url.replace('sqlite:///', 'sqlite+aiosqlite:///')
        
        # Re-running initialize reuses the open engine
        if self.engine is None:
            self.engine = create_async_engine(
                database_url,
                echo=Config.DEBUG
            )
            
            self.async_session = async_sessionmaker(
                self.engine,
                class_=AsyncSession,
                expire_on_commit=False
            )
        
        # Create tables and indices; existing ones are left alone
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
            
        self.logger.info("Database initialized successfully")
        
        await self.initialize_default_data()
        
    async def initialize_default_data(self):
        """Insert a stat definition for every stat kind that lacks one"""
        async with self.get_session() as session:
            result = await session.execute(select(StatDefinition.id))
            existing = {row[0] for row in result}
            
            missing = [kind for kind in StatKind if kind.identifier not in existing]
            if not missing:
                return
            
            for kind in missing:
                session.add(StatDefinition(
                    id=kind.identifier,
                    locale_key=kind.display_key,
                    description=kind.name.replace('_', ' ').title()
                ))
            
            await session.commit()
            self.logger.info(f"Added {len(missing)} stat definitions")
    
    @property
    def executor(self) -> QueryExecutor:
        """Query executor bound to this database's session factory"""
        if self.async_session is None:
            raise RuntimeError("Database is not initialized")
        return QueryExecutor(self.async_session)
    
    @asynccontextmanager
    async def get_session(self):
        """Get a database session"""
        async with self.async_session() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise
            finally:
                await session.close()
    
    @asynccontextmanager
    async def transaction(self):
        """
        Create a transaction boundary for atomic operations.
        
        All operations within the context are committed together on success,
        or rolled back together on failure.
        """
        async with self.async_session() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise
            finally:
                await session.close()
    
    async def close(self):
        """Close the database connection"""
        if self.engine:
            await self.engine.dispose()
            self.logger.info("Database connection closed")
