from __future__ import annotations

import sqlalchemy as sa
from alembic.operations import Operations

from housing_store.db.migrations.base import (
    Migration,
    add_column_if_missing,
    rename_column_if_present,
    split_full_name,
)


class EmployeeNameSplit(Migration):
    """Split Employees.fullName into firstName / lastName."""

    version = 4
    description = "split Employees.fullName into firstName and lastName"

    def apply(self, op: Operations) -> None:
        renamed = rename_column_if_present(op, "Employees", "fullName", "firstName")
        add_column_if_missing(op, "Employees", sa.Column("lastName", sa.Text, server_default=""))
        # Only names that came out of fullName are split; an existing firstName is left alone.
        if renamed:
            split_full_name(op, "Employees", "firstName", "lastName")
