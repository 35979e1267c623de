"""
housing_store.db.repositories.system_variables

Repository for process-wide `SystemVariables` (key -> text value).

Responsibilities:
- Read single flags and the whole variable map.
- Upsert flags written by the auth gateway and the backup manager.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import select
from sqlalchemy.dialects.sqlite import insert as sqlite_insert

from housing_store.db.schema import system_variables

if TYPE_CHECKING:
    from housing_store.db.store import HousingStore

_key = system_variables.c["key"]
_value = system_variables.c["value"]


class SystemVariableRepo:
    def __init__(self, store: HousingStore) -> None:
        self._store = store

    async def get(self, key: str) -> str | None:
        result = await self._store.execute(select(_value).where(_key == key))
        return result.rows[0][0] if result.rows else None

    async def get_all(self) -> dict[str, str]:
        result = await self._store.execute(select(_key, _value).order_by(_key))
        return {row[0]: row[1] for row in result.rows}

    async def set(self, key: str, value: str) -> None:
        stmt = sqlite_insert(system_variables).values(key=key, value=value)
        await self._store.execute(
            stmt.on_conflict_do_update(index_elements=[_key], set_={"value": stmt.excluded["value"]})
        )


# --- Module Notes -----------------------------------------------------------
# `version` is deliberately not written here; only the migrator moves it.
