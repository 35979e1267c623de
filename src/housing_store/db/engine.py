"""
housing_store.db.engine

In-process relational engine over an in-memory SQLite database.

Responsibilities:
- Open the engine from a binary snapshot (or empty) and export it back.
- Execute SQL text or SQLAlchemy Core statements, one transaction per call.
- Classify statements as mutating so the owner knows when to persist.
"""

from __future__ import annotations

import asyncio
import re
import sqlite3
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, TypeVar

from sqlalchemy import Connection, Engine, Row, create_engine, event
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import StaticPool
from sqlalchemy.schema import ExecutableDDLElement
from sqlalchemy.sql.expression import Delete, Executable, Insert, TextClause, Update

from housing_store.errors import EngineError, StorageError
from housing_store.observability.logging import get_logger

log = get_logger(__name__)

T = TypeVar("T")

Statement = str | Executable
Params = Sequence[Any] | Mapping[str, Any] | None

_MUTATING_PREFIX = re.compile(r"^\s*(INSERT|UPDATE|DELETE|CREATE|DROP|ALTER)\b", re.IGNORECASE)


def is_mutating(statement: Statement) -> bool:
    if isinstance(statement, str):
        return _MUTATING_PREFIX.match(statement) is not None
    if isinstance(statement, TextClause):
        return _MUTATING_PREFIX.match(statement.text) is not None
    return isinstance(statement, (Insert, Update, Delete, ExecutableDDLElement))


@dataclass(slots=True)
class StatementResult:
    rows: list[Row[Any]] = field(default_factory=list)
    last_row_id: Any = None
    row_count: int = -1

    def mappings(self) -> list[dict[str, Any]]:
        return [dict(row._mapping) for row in self.rows]

    def first(self) -> dict[str, Any] | None:
        return dict(self.rows[0]._mapping) if self.rows else None


class DatabaseEngine:
    """
    Owns one in-memory SQLite connection.
    Blocking work runs in a worker thread; callers serialize access (see
    `HousingStore`), so the connection is never used by two threads at once.
    """

    def __init__(self, dbapi: sqlite3.Connection) -> None:
        self._dbapi = dbapi
        self._engine: Engine | None = _bind(dbapi)

    @classmethod
    async def open(cls, snapshot: bytes | None = None) -> DatabaseEngine:
        return await asyncio.to_thread(cls._open_sync, snapshot)

    @classmethod
    def _open_sync(cls, snapshot: bytes | None) -> DatabaseEngine:
        # isolation_level=None hands transaction control to the "begin" listener in `_bind`.
        dbapi = sqlite3.connect(":memory:", check_same_thread=False, isolation_level=None)
        if snapshot:
            try:
                dbapi.deserialize(snapshot)
                # Deserialize accepts any bytes; reading the schema is what detects garbage.
                dbapi.execute("SELECT count(*) FROM sqlite_master").fetchone()
            except sqlite3.DatabaseError as e:
                dbapi.close()
                raise StorageError(f"snapshot is not a valid database: {e}") from e
        return cls(dbapi)

    @property
    def closed(self) -> bool:
        return self._engine is None

    def _require_engine(self) -> Engine:
        if self._engine is None:
            raise EngineError("database engine is closed")
        return self._engine

    async def execute(self, statement: Statement, params: Params = None) -> StatementResult:
        return await asyncio.to_thread(self._execute_sync, statement, params)

    def _execute_sync(self, statement: Statement, params: Params) -> StatementResult:
        engine = self._require_engine()
        try:
            with engine.begin() as conn:
                if isinstance(statement, str):
                    result = conn.exec_driver_sql(statement, _driver_params(params))
                elif params:
                    result = conn.execute(statement, dict(params))  # type: ignore[arg-type]
                else:
                    result = conn.execute(statement)
                last_row_id = _last_row_id(statement, result)
                row_count = result.rowcount
                rows = list(result.all()) if result.returns_rows else []
        except SQLAlchemyError as e:
            log.warning("statement_failed", statement=str(statement)[:200], error=str(e))
            raise EngineError(str(e)) from e
        return StatementResult(rows=rows, last_row_id=last_row_id, row_count=row_count)

    async def run_sync(self, fn: Callable[[Connection], T]) -> T:
        """
        Run `fn` against one connection inside a single transaction.
        Used by migrations, which mix DDL and data backfills.
        """

        return await asyncio.to_thread(self._run_sync, fn)

    def _run_sync(self, fn: Callable[[Connection], T]) -> T:
        engine = self._require_engine()
        try:
            with engine.begin() as conn:
                return fn(conn)
        except SQLAlchemyError as e:
            raise EngineError(str(e)) from e

    async def export_snapshot(self) -> bytes:
        self._require_engine()
        return await asyncio.to_thread(_serialize, self._dbapi)

    async def close(self) -> None:
        engine, self._engine = self._engine, None
        if engine is not None:
            await asyncio.to_thread(_dispose, engine, self._dbapi)


def _bind(dbapi: sqlite3.Connection) -> Engine:
    # StaticPool keeps exactly this connection; an in-memory database lives and dies with it.
    engine = create_engine(
        "sqlite://",
        creator=lambda: dbapi,
        poolclass=StaticPool,
    )

    @event.listens_for(engine, "begin")
    def _do_begin(conn: Connection) -> None:
        # pysqlite would otherwise leave DDL outside the transaction.
        conn.exec_driver_sql("BEGIN")

    return engine


def _serialize(dbapi: sqlite3.Connection) -> bytes:
    # A database that was never written has no pages, and sqlite refuses to serialize it.
    try:
        if dbapi.execute("PRAGMA page_count").fetchone()[0] == 0:
            return b""
        return dbapi.serialize()
    except sqlite3.Error as e:
        raise EngineError(f"snapshot export failed: {e}") from e


def _dispose(engine: Engine, dbapi: sqlite3.Connection) -> None:
    engine.dispose()
    dbapi.close()


def _last_row_id(statement: Statement, result: Any) -> Any:
    if isinstance(statement, Insert) and result.inserted_primary_key:
        return result.inserted_primary_key[0]
    if result.returns_rows:
        return None
    return result.lastrowid


def _driver_params(params: Params) -> Any:
    # A list would be read as executemany; a single statement always gets a tuple or dict.
    if params is None:
        return None
    if isinstance(params, Mapping):
        return dict(params)
    return tuple(params)


# --- Module Notes -----------------------------------------------------------
# Durability is not handled here: the owning `HousingStore` exports and stores a
# snapshot after every statement for which `is_mutating` is true.
