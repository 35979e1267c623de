"""
housing_store.db.store

The embedded store: engine handle + durability + lifecycle.

Responsibilities:
- Load the primary snapshot (or start empty) and migrate it, exactly once per
  lifetime even under concurrent `initialize()` calls.
- Serialize all engine access behind one lock.
- Persist a fresh snapshot after every mutating statement, then feed the
  backup write counter.
- Offer maintenance operations: reset to a freshly seeded store, restore a backup.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable

from housing_store.db.backups import BackupManager
from housing_store.db.engine import DatabaseEngine, Params, Statement, StatementResult, is_mutating
from housing_store.db.migrations import SchemaMigrator
from housing_store.errors import EngineError, StorageError
from housing_store.observability.logging import get_logger
from housing_store.settings import Settings
from housing_store.storage.block_store import BlockStore

log = get_logger(__name__)


class HousingStore:
    """
    Single owner of the engine.
    Repositories hold a reference to the store; nothing else touches the engine.

    Multi-statement operations are not atomic: each statement is durable on its
    own, and a failure between two of them leaves the first one applied.
    """

    def __init__(
        self,
        *,
        block_store: BlockStore,
        settings: Settings,
        migrator: SchemaMigrator | None = None,
    ) -> None:
        self._blocks = block_store
        self._primary_key = settings.database_key
        self._migrator = migrator or SchemaMigrator()
        self._engine: DatabaseEngine | None = None
        self._lock = asyncio.Lock()
        self._init_task: asyncio.Task[None] | None = None
        # Number of load-and-migrate runs; stays at 1 however many callers race `initialize()`.
        self.load_count = 0
        self.backups = BackupManager(
            store=self,
            block_store=block_store,
            primary_key=settings.database_key,
            prefix=settings.backup_prefix,
            threshold=settings.backup_write_threshold,
            retention=settings.backup_retention,
        )

    @property
    def primary_key(self) -> str:
        return self._primary_key

    @property
    def block_store(self) -> BlockStore:
        return self._blocks

    @property
    def migrator(self) -> SchemaMigrator:
        return self._migrator

    @property
    def ready(self) -> bool:
        return self._engine is not None

    async def initialize(self) -> None:
        if self._init_task is None:
            self._init_task = asyncio.ensure_future(self._load_and_migrate())
        await self._init_task

    async def _load_and_migrate(self) -> None:
        self.load_count += 1
        snapshot = await self._blocks.get(self._primary_key)
        engine = await DatabaseEngine.open(snapshot)

        async def persist_step(_version: int) -> None:
            await self._persist(engine)

        try:
            applied = await self._migrator.upgrade(engine, after_step=persist_step)
        except BaseException:
            await engine.close()
            raise
        self._engine = engine
        log.info(
            "store_loaded",
            key=self._primary_key,
            from_snapshot=snapshot is not None,
            migrations_applied=applied,
            version=self._migrator.latest_version,
        )

    async def _persist(self, engine: DatabaseEngine) -> None:
        data = await engine.export_snapshot()
        await self._blocks.put(self._primary_key, data)

    def _require_engine(self) -> DatabaseEngine:
        if self._engine is None:
            raise EngineError("store is closed")
        return self._engine

    async def execute(self, statement: Statement, params: Params = None) -> StatementResult:
        """
        Run one statement. A mutating statement is durable (snapshot stored)
        before this returns; a failing statement persists nothing.
        """

        await self.initialize()
        mutating = is_mutating(statement)
        async with self._lock:
            engine = self._require_engine()
            result = await engine.execute(statement, params)
            if mutating:
                await self._persist(engine)
        if mutating:
            await self.backups.record_write()
        return result

    async def export_snapshot(self) -> bytes:
        await self.initialize()
        async with self._lock:
            return await self._require_engine().export_snapshot()

    async def schema_version(self) -> int:
        await self.initialize()
        async with self._lock:
            return await self._migrator.current_version(self._require_engine())

    async def close(self) -> None:
        if self._init_task is not None:
            # Let an in-flight initialization settle before tearing it down.
            await asyncio.wait([self._init_task])
        async with self._lock:
            engine, self._engine = self._engine, None
            self._init_task = None
            if engine is not None:
                await engine.close()

    async def reset_store(self) -> None:
        """
        Drop the primary snapshot and start over from an empty, freshly migrated store.
        Backups are left in place.
        """

        async def drop_primary() -> None:
            await self._blocks.delete(self._primary_key)
            log.info("store_reset", key=self._primary_key)

        await self._reload(drop_primary)

    async def restore_backup(self, key: str) -> None:
        data = await self._blocks.get(key)
        if data is None:
            raise StorageError(f"no backup stored under {key!r}")
        # Validate before overwriting the primary snapshot.
        candidate = await DatabaseEngine.open(data)
        await candidate.close()

        async def copy_backup() -> None:
            await self._blocks.put(self._primary_key, data)
            log.info("store_restored", key=self._primary_key, backup=key)

        await self._reload(copy_backup)

    async def _reload(self, prepare: Callable[[], Awaitable[None]]) -> None:
        # The reload becomes the init task, so concurrent callers await it instead
        # of starting their own load of the old snapshot.
        previous = self._init_task
        self._init_task = asyncio.ensure_future(self._swap(previous, prepare))
        await self._init_task

    async def _swap(
        self,
        previous: asyncio.Task[None] | None,
        prepare: Callable[[], Awaitable[None]],
    ) -> None:
        if previous is not None:
            await asyncio.wait([previous])
        async with self._lock:
            engine, self._engine = self._engine, None
            if engine is not None:
                await engine.close()
            await prepare()
            self.backups.reset_counter()
            await self._load_and_migrate()


# --- Module Notes -----------------------------------------------------------
# Nothing coordinates two processes sharing one block store: each keeps its own
# engine and the last snapshot written wins.
