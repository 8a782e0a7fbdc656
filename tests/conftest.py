"""
Shared fixtures for statboard tests.
"""

import asyncio
import uuid

import pytest
import pytest_asyncio

from statboard.constants import WindowConstants
from statboard.database.database import Database
from statboard.database.results import ResultSet
from statboard.operations.stat_operations import StatOperations


DAY = WindowConstants.MILLIS_PER_DAY
NOW = 100 * DAY


def rows(*mappings) -> ResultSet:
    return ResultSet.from_mappings(mappings)


class FakeExecutor:
    """Hands out futures for queued outcomes in dispatch order."""
    
    def __init__(self, *outcomes):
        self.outcomes = list(outcomes)
        self.calls = []
        self.futures = []
    
    def query(self, statement, **params):
        self.calls.append((statement, params))
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, asyncio.Future):
            future = outcome
        else:
            future = asyncio.get_running_loop().create_future()
            if isinstance(outcome, BaseException):
                future.set_exception(outcome)
            else:
                future.set_result(outcome)
        self.futures.append(future)
        return future


@pytest.fixture
def player_id():
    return uuid.uuid4()


@pytest_asyncio.fixture
async def database(tmp_path):
    db = Database(f"sqlite:///{tmp_path / 'stats.db'}")
    await db.initialize()
    try:
        yield db
    finally:
        await db.close()


@pytest.fixture
def stat_ops(database):
    return StatOperations(database)
