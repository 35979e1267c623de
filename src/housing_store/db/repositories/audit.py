"""
housing_store.db.repositories.audit

Append-only activity log.

Responsibilities:
- Record user actions and authentication outcomes with a UTC timestamp.
- Query the log for activity views (newest first).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import desc

from housing_store import clock
from housing_store.db.repositories.records import Record, RecordRepository
from housing_store.db.schema import activity_log

if TYPE_CHECKING:
    from housing_store.db.store import HousingStore


class ActivityRecorder:
    def __init__(self, store: HousingStore) -> None:
        # Composition rather than inheritance: no update/delete surface is exposed.
        self._records = RecordRepository(store, activity_log)
        self._store = store

    async def record(self, username: str, action: str) -> Record:
        return await self._records.create(
            {"username": username, "action": action, "timestamp": clock.to_iso(clock.utcnow())}
        )

    async def get_all(self) -> list[Record]:
        return await self._records.get_all()

    async def get_by_id(self, entry_id: int) -> Record | None:
        return await self._records.get_by_id(entry_id)

    async def recent(self, *, limit: int = 50) -> list[Record]:
        stmt = self._records.query().order_by(desc(activity_log.c["id"])).limit(limit)
        return (await self._store.execute(stmt)).mappings()


# --- Module Notes -----------------------------------------------------------
# Ordering by id rather than timestamp: ids are AUTOINCREMENT and never reused,
# so they follow insertion order even if the wall clock steps backwards.
