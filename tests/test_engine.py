"""
tests.test_engine

In-memory engine: statement classification, execution and snapshots.
"""

from __future__ import annotations

import pytest
import sqlalchemy as sa

from housing_store.db.engine import DatabaseEngine, is_mutating
from housing_store.db.schema import users
from housing_store.errors import EngineError, StorageError


@pytest.mark.parametrize(
    ("statement", "expected"),
    [
        ("INSERT INTO t VALUES (1)", True),
        ("   update t SET v = 1", True),
        ("\n\tDelete FROM t", True),
        ("CREATE TABLE t (v)", True),
        ("drop table t", True),
        ("ALTER TABLE t ADD COLUMN w", True),
        ("SELECT * FROM t", False),
        ("PRAGMA table_info(t)", False),
        ("INSERTED", False),
        (sa.text("DELETE FROM t"), True),
        (sa.text("SELECT 1"), False),
        (sa.insert(users).values(username="u"), True),
        (sa.update(users).values(status="inactive"), True),
        (sa.delete(users), True),
        (sa.select(users), False),
    ],
)
def test_is_mutating(statement, expected: bool) -> None:
    assert is_mutating(statement) is expected


@pytest.mark.asyncio
async def test_execute_and_snapshot_round_trip() -> None:
    engine = await DatabaseEngine.open(None)
    await engine.execute("CREATE TABLE notes (id INTEGER PRIMARY KEY, body TEXT)")
    first = await engine.execute("INSERT INTO notes (body) VALUES (?)", ["hello"])
    second = await engine.execute("INSERT INTO notes (body) VALUES (:body)", {"body": "world"})
    assert (first.last_row_id, second.last_row_id) == (1, 2)

    snapshot = await engine.export_snapshot()
    await engine.close()

    reopened = await DatabaseEngine.open(snapshot)
    result = await reopened.execute("SELECT id, body FROM notes ORDER BY id")
    assert result.mappings() == [{"id": 1, "body": "hello"}, {"id": 2, "body": "world"}]
    await reopened.close()


@pytest.mark.asyncio
async def test_empty_snapshot_opens_empty_database() -> None:
    engine = await DatabaseEngine.open(b"")
    result = await engine.execute("SELECT count(*) AS n FROM sqlite_master")
    assert result.first() == {"n": 0}
    await engine.close()


@pytest.mark.asyncio
async def test_garbage_snapshot_is_rejected() -> None:
    with pytest.raises(StorageError):
        await DatabaseEngine.open(b"definitely not a database file" * 200)


@pytest.mark.asyncio
async def test_failed_statement_raises_engine_error_and_keeps_state() -> None:
    engine = await DatabaseEngine.open(None)
    await engine.execute("CREATE TABLE t (v TEXT UNIQUE)")
    await engine.execute("INSERT INTO t VALUES ('a')")

    with pytest.raises(EngineError):
        await engine.execute("INSERT INTO t VALUES ('a')")
    with pytest.raises(EngineError):
        await engine.execute("SELEKT nonsense")

    result = await engine.execute("SELECT count(*) FROM t")
    assert result.rows[0][0] == 1
    await engine.close()


@pytest.mark.asyncio
async def test_closed_engine_refuses_work() -> None:
    engine = await DatabaseEngine.open(None)
    await engine.close()
    assert engine.closed
    with pytest.raises(EngineError):
        await engine.execute("SELECT 1")
    with pytest.raises(EngineError):
        await engine.export_snapshot()


@pytest.mark.asyncio
async def test_never_written_database_exports_empty_snapshot() -> None:
    engine = await DatabaseEngine.open(None)
    snapshot = await engine.export_snapshot()
    await engine.close()
    assert snapshot == b""

    reopened = await DatabaseEngine.open(snapshot)
    await reopened.execute("CREATE TABLE t (v TEXT)")
    assert await reopened.export_snapshot() != b""
    await reopened.close()
