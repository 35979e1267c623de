from __future__ import annotations

import sqlalchemy as sa
from alembic.operations import Operations

from housing_store.db.migrations.base import (
    Migration,
    add_column_if_missing,
    rename_column_if_present,
)

# Job titles for the employees seeded by version 1, keyed by row id.
_SEEDED_JOB_TITLES = {1: "IT Specialist", 2: "HR Coordinator", 3: "Housekeeper"}


class EmployeeJobTitles(Migration):
    version = 2
    description = "add Employees.jobTitle, rename Reservations.guestPosition to jobTitle"

    def apply(self, op: Operations) -> None:
        add_column_if_missing(op, "Employees", sa.Column("jobTitle", sa.Text, server_default=""))
        rename_column_if_present(op, "Reservations", "guestPosition", "jobTitle")

        conn = op.get_bind()
        for employee_id, title in _SEEDED_JOB_TITLES.items():
            conn.execute(
                sa.text('UPDATE "Employees" SET "jobTitle" = :title WHERE id = :id'),
                {"title": title, "id": employee_id},
            )
