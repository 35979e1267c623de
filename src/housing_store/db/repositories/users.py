from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from sqlalchemy import select, update

from housing_store.db.repositories.records import Record, RecordRepository
from housing_store.db.schema import users
from housing_store.errors import EngineError

if TYPE_CHECKING:
    from housing_store.db.store import HousingStore


class UserRepository(RecordRepository):
    """
    Users never leave this repository with their password.
    `find_by_username(..., with_credential=True)` is the one exception, for the auth gateway.
    """

    def __init__(self, store: HousingStore) -> None:
        super().__init__(store, users, hidden=("password",))

    async def create(self, fields: Mapping[str, Any]) -> Record:
        if not fields.get("password"):
            raise EngineError("Password is required")
        return await super().create(fields)

    async def update(self, record_id: int, fields: Mapping[str, Any]) -> Record | None:
        changes = dict(fields)
        password = changes.pop("password", None)
        if changes:
            await super().update(record_id, changes)
        # An empty password means "unchanged", as in the user admin form.
        if password:
            await self._store.execute(
                update(users).where(users.c["id"] == record_id).values(password=password)
            )
        return await self.get_by_id(record_id)

    async def find_by_username(
        self, username: str, *, with_credential: bool = False
    ) -> Record | None:
        columns = users.c if with_credential else self._visible
        stmt = select(*(col.label(col.key) for col in columns)).where(
            users.c["username"] == username
        )
        return (await self._store.execute(stmt)).first()
