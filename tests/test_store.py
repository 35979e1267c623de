"""
tests.test_store

Store lifecycle: initialization, durability, reset and restore.

Responsibilities:
- Single-flight initialization under concurrent callers.
- Reopening an up-to-date snapshot changes nothing.
- Every mutating statement is in the block store before `execute` returns.
"""

from __future__ import annotations

import asyncio

import pytest
from alembic.operations import Operations

from housing_store.db.engine import DatabaseEngine
from housing_store.db.migrations import MIGRATIONS, Migration, SchemaMigrator
from housing_store.db.store import HousingStore
from housing_store.errors import MigrationError, StorageError
from housing_store.services.housing_service import HousingServices, create_services


@pytest.mark.asyncio
async def test_concurrent_initialize_loads_once(settings, block_store) -> None:
    svc = create_services(settings, block_store=block_store, configure_logs=False)

    results = await asyncio.gather(
        svc.store.initialize(),
        svc.store.initialize(),
        svc.rooms.get_all(),
        svc.users.get_all(),
        svc.store.initialize(),
    )

    assert svc.store.load_count == 1
    assert len(results[2]) == 4
    await svc.close()


@pytest.mark.asyncio
async def test_reopen_is_idempotent(services: HousingServices, settings, block_store) -> None:
    rooms = await services.rooms.get_all()
    await services.close()
    stored = await block_store.get(settings.database_key)

    reopened = create_services(settings, block_store=block_store, configure_logs=False)
    await reopened.start()

    assert await reopened.store.schema_version() == 8
    assert await reopened.rooms.get_all() == rooms
    # Nothing to migrate, so nothing was written back.
    assert await block_store.get(settings.database_key) == stored
    await reopened.close()


@pytest.mark.asyncio
async def test_writes_are_durable_before_execute_returns(
    services: HousingServices, settings, block_store
) -> None:
    building = await services.buildings.create(
        {"name": "C-Block", "location": "East Wing", "capacity": 80, "status": "active"}
    )

    blob = await block_store.get(settings.database_key)
    engine = await DatabaseEngine.open(blob)
    result = await engine.execute('SELECT name FROM "Buildings" WHERE id = ?', [building["id"]])
    assert result.rows[0][0] == "C-Block"
    await engine.close()


@pytest.mark.asyncio
async def test_reads_do_not_persist(services: HousingServices, settings, block_store) -> None:
    before = await block_store.get(settings.database_key)
    await services.rooms.get_all()
    await services.store.execute("SELECT count(*) FROM \"Rooms\"")
    assert await block_store.get(settings.database_key) == before
    assert services.backups.pending_writes == 0


@pytest.mark.asyncio
async def test_reset_store_reseeds_and_keeps_backups(services: HousingServices) -> None:
    await services.rooms.create({"room_number": "TMP", "capacity": 1, "current_occupancy": 0})
    backup_key = await services.backups.backup()

    await services.store.reset_store()

    assert len(await services.rooms.get_all()) == 4
    assert services.store.load_count == 2
    assert services.backups.pending_writes == 0
    assert [b.key for b in await services.backups.list_backups()] == [backup_key]


@pytest.mark.asyncio
async def test_reads_racing_a_reset_see_the_reset_store(services: HousingServices) -> None:
    await services.rooms.create({"room_number": "TMP", "capacity": 1, "current_occupancy": 0})

    _, rooms, users = await asyncio.gather(
        services.store.reset_store(),
        services.rooms.get_all(),
        services.store.execute('SELECT count(*) FROM "Users"'),
    )

    assert len(rooms) == 4
    assert users.rows[0][0] == 8
    assert len(await services.rooms.get_all()) == 4
    assert services.store.load_count == 2


@pytest.mark.asyncio
async def test_restore_backup_replaces_primary(services: HousingServices) -> None:
    key = await services.backups.backup()
    await services.rooms.create({"room_number": "AFTER", "capacity": 1, "current_occupancy": 0})
    assert len(await services.rooms.get_all()) == 5

    await services.store.restore_backup(key)

    assert len(await services.rooms.get_all()) == 4
    with pytest.raises(StorageError):
        await services.store.restore_backup("backup-does-not-exist")


class _ExplodingStep(Migration):
    version = 2
    description = "fails on purpose"

    def apply(self, op: Operations) -> None:
        raise RuntimeError("boom")


@pytest.mark.asyncio
async def test_failed_initialization_is_sticky_until_reset(settings, block_store) -> None:
    store = HousingStore(
        block_store=block_store,
        settings=settings,
        migrator=SchemaMigrator([MIGRATIONS[0], _ExplodingStep()]),
    )

    with pytest.raises(MigrationError):
        await store.initialize()
    with pytest.raises(MigrationError):
        await store.execute("SELECT 1")
    assert store.load_count == 1
    assert not store.ready

    # Version 1 was committed and persisted before the failure.
    engine = await DatabaseEngine.open(await block_store.get(settings.database_key))
    assert await SchemaMigrator().current_version(engine) == 1
    await engine.close()

    with pytest.raises(MigrationError):
        await store.reset_store()
    assert store.load_count == 2
