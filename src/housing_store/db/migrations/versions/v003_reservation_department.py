from __future__ import annotations

import sqlalchemy as sa
from alembic.operations import Operations

from housing_store.db.migrations.base import Migration, add_column_if_missing
from housing_store.observability.logging import get_logger

log = get_logger(__name__)


class ReservationDepartment(Migration):
    version = 3
    description = "add Reservations.department"

    def apply(self, op: Operations) -> None:
        added = add_column_if_missing(
            op, "Reservations", sa.Column("department", sa.Text, server_default="")
        )
        if not added:
            log.info("column_already_present", table="Reservations", column="department")

        op.execute(
            'UPDATE "Reservations" SET "department" = \'marketing\', "jobTitle" = \'Consultant\' '
            "WHERE id = 1"
        )
