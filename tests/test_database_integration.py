"""
End-to-end tests of the stats engine over a real SQLite database.
"""

import logging
import uuid

import pytest
from sqlalchemy import select, func, inspect, insert, text
from sqlalchemy.exc import OperationalError

from statboard.constants import WindowConstants
from statboard.data_models.stat_kind import StatKind
from statboard.data_models.stats import StatEvent
from statboard.database.models import PlayerStat, StatDefinition
from statboard.database.queries import StatsQueries
from statboard.operations.stat_operations import StatValidationError
from statboard.services.stats_engine import StatsAggregationEngine
from statboard.utils.stats_exceptions import UnknownStatKind

from conftest import NOW, DAY


@pytest.fixture
def engine(database):
    return StatsAggregationEngine(database.executor, StatKind.KILLS, clock=lambda: NOW)


async def record_kills(stat_ops, totals, timestamp=NOW - 1):
    players = {}
    for name, total in totals.items():
        players[name] = uuid.uuid4()
        await stat_ops.record_event(players[name], StatKind.KILLS, total, timestamp)
    return players


class TestProvisioning:
    
    @pytest.mark.asyncio
    async def test_stat_definitions_seeded(self, stat_ops):
        definitions = await stat_ops.get_stat_definitions()
        
        assert {d.id for d in definitions} == {kind.identifier for kind in StatKind}
        kills = next(d for d in definitions if d.id == "KILLS")
        assert kills.locale_key == "stats.kills"
    
    @pytest.mark.asyncio
    async def test_initialize_is_idempotent(self, database):
        await database.initialize()
        await database.initialize()
        
        async with database.get_session() as session:
            count = await session.scalar(select(func.count()).select_from(StatDefinition))
        assert count == len(StatKind)
    
    @pytest.mark.asyncio
    async def test_event_table_indices(self, database):
        async with database.engine.connect() as conn:
            index_names = await conn.run_sync(
                lambda sync_conn: {i["name"] for i in inspect(sync_conn).get_indexes("stats_users")}
            )
        
        assert {
            "idx_stats_users_player_timestamp",
            "idx_stats_users_stat",
            "idx_stats_users_value",
        } <= index_names


class TestRecording:
    
    @pytest.mark.asyncio
    async def test_record_event_accepts_identifier(self, stat_ops, database, player_id):
        event = await stat_ops.record_event(player_id, "deaths", 2, 123)
        
        assert event.kind is StatKind.DEATHS
        async with database.get_session() as session:
            stored = (await session.execute(select(PlayerStat))).scalars().one()
        assert (stored.player, stored.stat, stored.value, stored.timestamp) == (str(player_id), "DEATHS", 2, 123)
    
    @pytest.mark.asyncio
    async def test_record_event_defaults_timestamp(self, stat_ops, player_id):
        event = await stat_ops.record_event(player_id, StatKind.WINS, 1)
        assert event.timestamp > 0
    
    @pytest.mark.asyncio
    async def test_record_rejects_unknown_kind(self, stat_ops, player_id):
        with pytest.raises(UnknownStatKind):
            await stat_ops.record_event(player_id, "HEADSHOTS", 1, 1)
    
    @pytest.mark.asyncio
    async def test_record_rejects_non_integer_value(self, stat_ops, player_id):
        with pytest.raises(StatValidationError):
            await stat_ops.record_event(player_id, StatKind.KILLS, 1.5, 1)
    
    @pytest.mark.asyncio
    async def test_record_events_batch(self, stat_ops, engine, player_id):
        written = await stat_ops.record_events([
            StatEvent(player_id, StatKind.KILLS, 2, NOW - 10),
            StatEvent(player_id, StatKind.KILLS, 2, NOW - 20),
        ])
        
        assert written == 2
        assert await stat_ops.record_events([]) == 0
        snapshot = await engine.get_player_snapshot(player_id, 1)
        assert snapshot.get_value(StatKind.KILLS) == 4


class TestPlayerSnapshotQueries:
    
    @pytest.mark.asyncio
    async def test_scenario_totals(self, stat_ops, engine, player_id):
        await stat_ops.record_event(player_id, StatKind.KILLS, 5, 100)
        await stat_ops.record_event(player_id, StatKind.KILLS, 3, 200)
        await stat_ops.record_event(player_id, StatKind.DEATHS, 1, 150)
        
        snapshot = await engine.get_player_snapshot(player_id)
        
        assert snapshot.get_value(StatKind.KILLS) == 8
        assert snapshot.get_value(StatKind.DEATHS) == 1
        assert snapshot.get_aggregate(StatKind.KILLS).display_key == "stats.kills"
        assert len(snapshot.aggregates) == 2
        assert snapshot.rank == 1
    
    @pytest.mark.asyncio
    async def test_window_boundaries(self, stat_ops, engine, player_id):
        window_start = NOW - 2 * DAY
        await stat_ops.record_event(player_id, StatKind.POINTS, 1, window_start)       # excluded
        await stat_ops.record_event(player_id, StatKind.POINTS, 10, window_start + 1)  # included
        await stat_ops.record_event(player_id, StatKind.POINTS, 100, NOW)              # included
        await stat_ops.record_event(player_id, StatKind.POINTS, 1000, NOW + 1)         # excluded
        
        snapshot = await engine.get_player_snapshot(player_id, 2)
        
        assert snapshot.get_value(StatKind.POINTS) == 110
    
    @pytest.mark.asyncio
    async def test_other_players_events_excluded(self, stat_ops, engine, player_id):
        await stat_ops.record_event(player_id, StatKind.WINS, 1, NOW - 1)
        await stat_ops.record_event(uuid.uuid4(), StatKind.WINS, 50, NOW - 1)
        
        snapshot = await engine.get_player_snapshot(player_id, 1)
        
        assert snapshot.get_value(StatKind.WINS) == 1
    
    @pytest.mark.asyncio
    async def test_rank_counts_strictly_greater_totals(self, stat_ops, engine):
        players = await record_kills(stat_ops, {"a": 10, "b": 20, "c": 20, "d": 5})
        
        ranks = {}
        for name, player in players.items():
            ranks[name] = (await engine.get_player_snapshot(player, 7)).rank
        
        assert ranks == {"b": 1, "c": 1, "a": 3, "d": 4}
    
    @pytest.mark.asyncio
    async def test_rank_uses_windowed_sums(self, stat_ops, engine):
        veteran, newcomer = uuid.uuid4(), uuid.uuid4()
        await stat_ops.record_event(veteran, StatKind.KILLS, 500, NOW - 30 * DAY)
        await stat_ops.record_event(veteran, StatKind.KILLS, 1, NOW - 1)
        await stat_ops.record_event(newcomer, StatKind.KILLS, 10, NOW - 1)
        
        assert (await engine.get_player_snapshot(newcomer, 7)).rank == 1
        assert (await engine.get_player_snapshot(veteran, 7)).rank == 2
        assert (await engine.get_player_snapshot(newcomer)).rank == 2
    
    @pytest.mark.asyncio
    async def test_no_ranking_events_is_unranked(self, stat_ops, engine, player_id):
        await record_kills(stat_ops, {"other": 3})
        await stat_ops.record_event(player_id, StatKind.DEATHS, 4, NOW - 1)
        
        snapshot = await engine.get_player_snapshot(player_id, 7)
        
        assert snapshot.rank == -1
        assert snapshot.get_value(StatKind.DEATHS) == 4
    
    @pytest.mark.asyncio
    async def test_ranking_events_outside_window_are_unranked(self, stat_ops, engine, player_id):
        await stat_ops.record_event(player_id, StatKind.KILLS, 9, NOW - 10 * DAY)
        
        assert (await engine.get_player_snapshot(player_id, 7)).rank == -1
        assert (await engine.get_player_snapshot(player_id, 30)).rank == 1
    
    @pytest.mark.asyncio
    async def test_unknown_player_snapshot_is_empty(self, engine):
        snapshot = await engine.get_player_snapshot(uuid.uuid4(), 7)
        
        assert snapshot.aggregates == frozenset()
        assert snapshot.rank == -1


class TestLeaderboardQueries:
    
    @pytest.mark.asyncio
    async def test_top_list_order_and_totals(self, stat_ops, engine):
        players = await record_kills(stat_ops, {"a": 10, "b": 30, "c": 20})
        await stat_ops.record_event(players["a"], StatKind.KILLS, 25, NOW - 2)
        
        board = await engine.get_leaderboard(7)
        
        assert [(e.player_id, e.rank, e.total_value) for e in board.entries] == [
            (players["a"], 1, 35),
            (players["b"], 2, 30),
            (players["c"], 3, 20),
        ]
    
    @pytest.mark.asyncio
    async def test_top_list_limited_to_ten(self, stat_ops, engine):
        await record_kills(stat_ops, {f"p{i}": i + 1 for i in range(13)})
        
        board = await engine.get_leaderboard(7)
        
        assert len(board) == 10
        assert [e.total_value for e in board.entries] == list(range(13, 3, -1))
        assert len({e.player_id for e in board.entries}) == 10
    
    @pytest.mark.asyncio
    async def test_top_list_ignores_other_stats_and_window(self, stat_ops, engine, player_id):
        await stat_ops.record_event(player_id, StatKind.DEATHS, 100, NOW - 1)
        old = uuid.uuid4()
        await stat_ops.record_event(old, StatKind.KILLS, 100, NOW - 8 * DAY)
        
        assert (await engine.get_leaderboard(7)).entries == ()
        
        board = await engine.get_leaderboard(9)
        assert [e.player_id for e in board.entries] == [old]
    
    @pytest.mark.asyncio
    async def test_all_time_matches_wide_window(self, stat_ops, engine):
        await record_kills(stat_ops, {"a": 3, "b": 7}, timestamp=1)
        await record_kills(stat_ops, {"c": 5}, timestamp=NOW)
        
        all_time = await engine.get_leaderboard()
        wide = await engine.get_leaderboard(NOW // DAY + 1)
        
        assert all_time.entries == wide.entries
        assert len(all_time) == 3
    
    @pytest.mark.asyncio
    async def test_ranking_stat_is_configurable(self, stat_ops, database, player_id):
        await stat_ops.record_event(player_id, StatKind.WINS, 4, NOW - 1)
        wins_engine = StatsAggregationEngine(database.executor, StatKind.WINS, clock=lambda: NOW)
        
        board = await wins_engine.get_leaderboard(1)
        snapshot = await wins_engine.get_player_snapshot(player_id, 1)
        
        assert [(e.player_id, e.total_value) for e in board.entries] == [(player_id, 4)]
        assert snapshot.rank == 1


class TestQueryExecutor:
    
    @pytest.mark.asyncio
    async def test_update_then_query(self, database, engine, player_id):
        executor = database.executor
        
        await executor.update(
            insert(PlayerStat),
            player=str(player_id), stat="KILLS", value=6, timestamp=NOW - 1
        )
        result = await executor.query(
            StatsQueries.player_events(), player=str(player_id), now=NOW, window_start=NOW - DAY
        )
        
        assert len(result) == 1
        row = result.first()
        assert row.get("player", uuid.UUID) == player_id
        assert row.get("locale_key", str) == "stats.kills"
        assert (await engine.get_player_snapshot(player_id, 1)).rank == 1
    
    @pytest.mark.asyncio
    async def test_failed_statement_is_failed_future(self, database):
        future = database.executor.query(text("SELECT * FROM no_such_table"))
        
        with pytest.raises(OperationalError):
            await future
        assert future.done()
    
    @pytest.mark.asyncio
    async def test_failed_update_rolls_back(self, database, engine, player_id, caplog):
        caplog.set_level(logging.DEBUG, logger="statboard.services.base")
        
        with pytest.raises(OperationalError):
            await database.executor.update(text("INSERT INTO no_such_table VALUES (1)"))
        
        assert "QueryExecutor rolling back after OperationalError" in caplog.text
        assert (await engine.get_player_snapshot(player_id)).aggregates == frozenset()


class TestOversizedWindows:
    
    @pytest.mark.asyncio
    async def test_window_beyond_all_time_matches_all_time(self, stat_ops, engine, player_id):
        await stat_ops.record_event(player_id, StatKind.KILLS, 7, 1)
        await record_kills(stat_ops, {"rival": 9})
        
        huge = await engine.get_player_snapshot(player_id, 2 ** 40)
        all_time = await engine.get_player_snapshot(player_id)
        
        assert huge.window_days == 2 ** 40
        assert huge.rank == all_time.rank == 2
        assert huge.aggregates == all_time.aggregates
        assert huge.get_value(StatKind.KILLS) == 7
        
        board = await engine.get_leaderboard(2 ** 40)
        assert board.entries == (await engine.get_leaderboard()).entries
        assert len(board) == 2
