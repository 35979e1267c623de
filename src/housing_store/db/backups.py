"""
housing_store.db.backups

Periodic snapshot backups with bounded retention.

Responsibilities:
- Count mutating statements and snapshot the store every `threshold` writes.
- Store backups under `backup-<primary-key>-<ISO8601 timestamp>` keys.
- Keep only the `retention` most recent backups.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING

from housing_store import clock
from housing_store.db.repositories.system_variables import SystemVariableRepo
from housing_store.errors import BackupError, EngineError, StorageError
from housing_store.observability.logging import get_logger
from housing_store.storage.block_store import BlockStore

if TYPE_CHECKING:
    from housing_store.db.store import HousingStore

log = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class BackupInfo:
    key: str
    taken_at: datetime


class BackupManager:
    def __init__(
        self,
        *,
        store: HousingStore,
        block_store: BlockStore,
        primary_key: str,
        prefix: str = "backup-",
        threshold: int = 50,
        retention: int = 5,
    ) -> None:
        if threshold < 1 or retention < 1:
            raise ValueError("backup threshold and retention must be at least 1")
        self._store = store
        self._blocks = block_store
        self._threshold = threshold
        self._retention = retention
        self.key_prefix = f"{prefix}{primary_key}-"
        self._writes = 0
        self._lock = asyncio.Lock()

    @property
    def pending_writes(self) -> int:
        return self._writes

    def reset_counter(self) -> None:
        self._writes = 0

    async def record_write(self) -> None:
        """
        Called by the store after each persisted mutating statement.
        Failures are logged and swallowed so the triggering write still succeeds.
        """

        self._writes += 1
        # The lock check also stops the backup's own `last_backup_time` write from recursing.
        if self._writes <= self._threshold or self._lock.locked():
            return
        async with self._lock:
            try:
                await self.backup()
            except BackupError as e:
                log.warning("backup_failed", error=str(e), pending_writes=self._writes)

    async def backup(self) -> str:
        taken_at = clock.utcnow()
        key = f"{self.key_prefix}{clock.to_iso(taken_at, timespec='microseconds')}"
        try:
            snapshot = await self._store.export_snapshot()
            await self._blocks.put(key, snapshot)
            self._writes = 0
            await SystemVariableRepo(self._store).set("last_backup_time", clock.to_iso(taken_at))
            log.info("backup_created", key=key, size_bytes=len(snapshot))
            await self.prune()
        except (StorageError, EngineError) as e:
            raise BackupError(f"backup {key} failed: {e}") from e
        return key

    async def list_backups(self) -> list[BackupInfo]:
        """Backups under this store's prefix, newest first."""

        backups: list[BackupInfo] = []
        for key in await self._blocks.list_keys(self.key_prefix):
            try:
                taken_at = datetime.fromisoformat(key[len(self.key_prefix) :])
            except ValueError:
                log.warning("backup_key_unparseable", key=key)
                continue
            backups.append(BackupInfo(key=key, taken_at=taken_at))
        backups.sort(key=lambda b: b.taken_at, reverse=True)
        return backups

    async def prune(self) -> list[str]:
        stale = [b.key for b in (await self.list_backups())[self._retention :]]
        for key in stale:
            await self._blocks.delete(key)
        if stale:
            log.info("backup_pruned", deleted=stale, retained=self._retention)
        return stale


# --- Module Notes -----------------------------------------------------------
# The counter is reset only after the backup blob is stored, so a failed backup
# is retried on the very next write rather than after another full threshold.
