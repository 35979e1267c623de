"""
housing_store.db.repositories.records

Generic per-table CRUD repository.

Responsibilities:
- Build SELECT/INSERT/UPDATE/DELETE statements from a Core `Table` descriptor.
- Return rows as plain dicts keyed by the descriptor's Python column keys.
- Route every statement through the owning store (and thus its durability rules).
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any

from sqlalchemy import Select, Table, delete, insert, select, update

from housing_store.errors import EngineError

if TYPE_CHECKING:
    from housing_store.db.store import HousingStore

Record = dict[str, Any]


class RecordRepository:
    def __init__(self, store: HousingStore, table: Table, *, hidden: Iterable[str] = ()) -> None:
        self._store = store
        self._table = table
        self._hidden = frozenset(hidden)
        self._visible = [col for col in table.c if col.key not in self._hidden]
        self._id = table.c["id"]

    @property
    def table(self) -> Table:
        return self._table

    def query(self) -> Select[Any]:
        # Labels pin result keys to the Python-side column keys.
        return select(*(col.label(col.key) for col in self._visible))

    def _check_fields(self, fields: Mapping[str, Any]) -> None:
        unknown = sorted(set(fields) - set(self._table.c.keys()))
        if unknown:
            raise EngineError(f"{self._table.name} has no column(s) {', '.join(unknown)}")

    async def get_all(self) -> list[Record]:
        result = await self._store.execute(self.query().order_by(self._id))
        return result.mappings()

    async def get_by_id(self, record_id: int) -> Record | None:
        result = await self._store.execute(self.query().where(self._id == record_id))
        return result.first()

    async def create(self, fields: Mapping[str, Any]) -> Record:
        self._check_fields(fields)
        result = await self._store.execute(insert(self._table).values(dict(fields)))
        created = await self.get_by_id(result.last_row_id)
        if created is None:
            # Only reachable if another writer deleted the row in between.
            raise EngineError(f"{self._table.name} row {result.last_row_id} vanished after insert")
        return created

    async def update(self, record_id: int, fields: Mapping[str, Any]) -> Record | None:
        """
        Write only the supplied fields; every other column keeps its value.
        Returns the row as stored afterwards, or None when no such row exists.
        """

        self._check_fields(fields)
        if "id" in fields:
            raise EngineError(f"{self._table.name}.id is engine-assigned and cannot be updated")
        if fields:
            await self._store.execute(
                update(self._table).where(self._id == record_id).values(dict(fields))
            )
        return await self.get_by_id(record_id)

    async def delete(self, record_id: int) -> None:
        # No cascade: rows referencing this one are the caller's to clean up.
        await self._store.execute(delete(self._table).where(self._id == record_id))


# --- Module Notes -----------------------------------------------------------
# One instance per entity table is built by `services.housing_service.create_services`.
