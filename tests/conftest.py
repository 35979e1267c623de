"""
tests.conftest

Shared fixtures for store tests.

Responsibilities:
- Give every test its own on-disk block store under `tmp_path`.
- Provide a started `HousingServices` bundle and clock controls.
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Iterator
from datetime import UTC, datetime, timedelta
from typing import Any

import pytest
import pytest_asyncio
import sqlalchemy as sa

from housing_store import clock
from housing_store.db.engine import DatabaseEngine
from housing_store.db.migrations import SchemaMigrator
from housing_store.services.housing_service import HousingServices, create_services
from housing_store.settings import Settings
from housing_store.storage.block_store import SqliteBlockStore

FROZEN_NOW = datetime(2024, 8, 1, 9, 30, tzinfo=UTC)


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(env="test", block_store_path=tmp_path / "blocks.sqlite3", log_json=False)


@pytest.fixture
def block_store(settings: Settings) -> SqliteBlockStore:
    return SqliteBlockStore(settings.block_store_path)


@pytest_asyncio.fixture
async def services(settings: Settings, block_store: SqliteBlockStore) -> AsyncIterator[HousingServices]:
    svc = create_services(settings, block_store=block_store, configure_logs=False)
    await svc.start()
    yield svc
    await svc.close()


@pytest.fixture
def frozen_clock(monkeypatch) -> datetime:
    monkeypatch.setattr(clock, "utcnow", lambda: FROZEN_NOW)
    return FROZEN_NOW


@pytest.fixture
def ticking_clock(monkeypatch) -> Iterator[None]:
    # Every read advances one second, so successive backups get ordered keys.
    state = {"now": FROZEN_NOW}

    def _tick() -> datetime:
        state["now"] += timedelta(seconds=1)
        return state["now"]

    monkeypatch.setattr(clock, "utcnow", _tick)
    yield


async def pinned_engine(version: int) -> DatabaseEngine:
    """Empty engine migrated up to exactly `version`."""
    engine = await DatabaseEngine.open(None)
    await SchemaMigrator().upgrade(engine, target=version)
    return engine


def dump_database(conn: sa.Connection) -> dict[str, Any]:
    # Table -> (column names, rows in rowid order); internal sqlite tables excluded.
    inspector = sa.inspect(conn)
    out: dict[str, Any] = {}
    for table in sorted(inspector.get_table_names()):
        columns = [col["name"] for col in inspector.get_columns(table)]
        rows = conn.exec_driver_sql(f'SELECT * FROM "{table}" ORDER BY rowid').all()
        out[table] = (columns, [tuple(r) for r in rows])
    return out


# --- Module Notes -----------------------------------------------------------
# `pinned_engine` is what the per-migration tests start from.
