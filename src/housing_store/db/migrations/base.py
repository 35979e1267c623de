"""
housing_store.db.migrations.base

Building blocks for versioned schema migrations.

Responsibilities:
- Define the `Migration` interface (one `apply` per version).
- Provide schema probes so additive/renaming steps can no-op when a column
  already exists (a fresh install creates some columns directly).
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import ClassVar

import sqlalchemy as sa
from alembic.operations import Operations


class Migration(ABC):
    """
    Transition from `version - 1` to `version`.
    `apply` runs inside the same transaction that records the new version.
    """

    version: ClassVar[int]
    description: ClassVar[str]

    @abstractmethod
    def apply(self, op: Operations) -> None: ...

    def __repr__(self) -> str:
        return f"<{type(self).__name__} v{self.version}: {self.description}>"


def validate_chain(migrations: Sequence[Migration]) -> None:
    versions = [m.version for m in migrations]
    expected = list(range(1, len(migrations) + 1))
    if versions != expected:
        raise ValueError(f"migration versions must be exactly {expected}, got {versions}")


def has_table(op: Operations, table: str) -> bool:
    return sa.inspect(op.get_bind()).has_table(table)


def column_names(op: Operations, table: str) -> set[str]:
    return {col["name"] for col in sa.inspect(op.get_bind()).get_columns(table)}


def add_column_if_missing(op: Operations, table: str, column: sa.Column) -> bool:
    if column.name in column_names(op, table):
        return False
    op.add_column(table, column)
    return True


def rename_column_if_present(op: Operations, table: str, old: str, new: str) -> bool:
    columns = column_names(op, table)
    if old not in columns or new in columns:
        return False
    # SQLite >= 3.25 renames in place; no table rebuild needed.
    op.execute(f'ALTER TABLE "{table}" RENAME COLUMN "{old}" TO "{new}"')
    return True


def split_full_name(op: Operations, table: str, first: str, last: str) -> None:
    # "John Doe" -> ("John", "Doe"); names without a space keep everything in `first`.
    op.execute(
        f'UPDATE "{table}" SET '
        f'"{last}" = SUBSTR("{first}", INSTR("{first}", \' \') + 1), '
        f'"{first}" = SUBSTR("{first}", 1, INSTR("{first}", \' \') - 1) '
        f'WHERE INSTR("{first}", \' \') > 0'
    )


# --- Module Notes -----------------------------------------------------------
# Migration modules define their own historical columns instead of importing
# `housing_store.db.schema`, which only describes the latest version.
