from __future__ import annotations

import sqlalchemy as sa
from alembic.operations import Operations

from housing_store.db.migrations.base import Migration, add_column_if_missing

# Codes for the employees seeded by version 1, keyed by national id.
_SEEDED_CODES = {"123456789": "EMP001", "987654321": "EMP002", "112233445": "EMP003"}


class EmployeeCodes(Migration):
    version = 5
    description = "add Employees.employeeId business identifier"

    def apply(self, op: Operations) -> None:
        add_column_if_missing(op, "Employees", sa.Column("employeeId", sa.Text))

        conn = op.get_bind()
        for national_id, code in _SEEDED_CODES.items():
            conn.execute(
                sa.text('UPDATE "Employees" SET "employeeId" = :code WHERE "nationalId" = :nid'),
                {"code": code, "nid": national_id},
            )
