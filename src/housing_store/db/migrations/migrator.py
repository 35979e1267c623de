"""
housing_store.db.migrations.migrator

Applies the migration chain to a `DatabaseEngine`.

Responsibilities:
- Read the stored schema version (`SystemVariables.version`).
- Apply missing migrations strictly in increasing order, committing the version
  together with each step.
- Hand control back after every committed step so the owner can persist it.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Sequence

import sqlalchemy as sa
from alembic.migration import MigrationContext
from alembic.operations import Operations
from sqlalchemy import Connection
from sqlalchemy.dialects.sqlite import insert as sqlite_insert

from housing_store.db.engine import DatabaseEngine
from housing_store.db.migrations.base import Migration, validate_chain
from housing_store.db.migrations.versions import MIGRATIONS
from housing_store.db.schema import system_variables
from housing_store.errors import MigrationError
from housing_store.observability.logging import get_logger

log = get_logger(__name__)

AfterStep = Callable[[int], Awaitable[None]]


def read_version(conn: Connection) -> int:
    if not sa.inspect(conn).has_table(system_variables.name):
        return 0
    value = conn.execute(
        sa.select(system_variables.c["value"]).where(system_variables.c["key"] == "version")
    ).scalar_one_or_none()
    return int(value) if value else 0


def write_version(conn: Connection, version: int) -> None:
    stmt = sqlite_insert(system_variables).values(key="version", value=str(version))
    conn.execute(
        stmt.on_conflict_do_update(
            index_elements=[system_variables.c["key"]], set_={"value": stmt.excluded["value"]}
        )
    )


class SchemaMigrator:
    def __init__(self, migrations: Sequence[Migration] = MIGRATIONS) -> None:
        validate_chain(migrations)
        self._migrations = tuple(migrations)

    @property
    def latest_version(self) -> int:
        return len(self._migrations)

    @property
    def migrations(self) -> tuple[Migration, ...]:
        return self._migrations

    async def current_version(self, engine: DatabaseEngine) -> int:
        return await engine.run_sync(read_version)

    async def upgrade(
        self,
        engine: DatabaseEngine,
        *,
        target: int | None = None,
        after_step: AfterStep | None = None,
    ) -> list[int]:
        """
        Bring `engine` up to `target` (default: latest) and return the versions applied.
        A failing step raises `MigrationError`; earlier steps stay committed.
        """

        target = self.latest_version if target is None else target
        current = await self.current_version(engine)
        if current > self.latest_version:
            raise MigrationError(
                current, f"stored version is newer than latest known {self.latest_version}"
            )

        applied: list[int] = []
        for migration in self._migrations:
            if migration.version <= current or migration.version > target:
                continue
            try:
                await engine.run_sync(lambda conn, m=migration: _apply_one(conn, m))
            except Exception as e:
                log.error("migration_failed", version=migration.version, error=str(e))
                raise MigrationError(migration.version, str(e)) from e
            log.info(
                "migration_applied",
                version=migration.version,
                description=migration.description,
            )
            applied.append(migration.version)
            if after_step is not None:
                await after_step(migration.version)
        return applied


def _apply_one(conn: Connection, migration: Migration) -> None:
    op = Operations(MigrationContext.configure(connection=conn))
    migration.apply(op)
    write_version(conn, migration.version)


# --- Module Notes -----------------------------------------------------------
# Because the version is written in the same transaction as the step, a crash
# between steps resumes from the last committed version on the next boot.
