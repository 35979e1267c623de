"""
housing_store.db.migrations.versions.v007_hostings_and_guest_lists

Version 7: hostings table and reservation guest lists.

Responsibilities:
- Create `Hostings` (an employee hosting outside guests).
- Add `Reservations.guests`, a JSON text list of guest records.
- Move each existing reservation's single guest into its guest list.
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic.operations import Operations

from housing_store.db.migrations.base import Migration, add_column_if_missing, has_table
from housing_store.db.schema import encode_json_list
from housing_store.observability.logging import get_logger

log = get_logger(__name__)


class HostingsAndGuestLists(Migration):
    version = 7
    description = "create Hostings, add Reservations.guests and backfill it"

    def apply(self, op: Operations) -> None:
        if not has_table(op, "Hostings"):
            op.create_table(
                "Hostings",
                sa.Column("id", sa.Integer, primary_key=True),
                sa.Column("employeeId", sa.Integer, sa.ForeignKey("Employees.id")),
                sa.Column("guestFirstName", sa.Text),
                sa.Column("guestLastName", sa.Text),
                sa.Column("guestIdCardNumber", sa.Text),
                sa.Column("startDate", sa.Text),
                sa.Column("endDate", sa.Text),
                sa.Column("notes", sa.Text),
                sa.Column("status", sa.Text),
                sqlite_autoincrement=True,
            )
        add_column_if_missing(op, "Reservations", sa.Column("guests", sa.Text, server_default="[]"))

        conn = op.get_bind()
        pending = conn.execute(
            sa.text(
                'SELECT id, "firstName", "lastName", "guestIdCardNumber", "guestPhone" '
                "FROM \"Reservations\" WHERE guests = '[]' ORDER BY id"
            )
        ).mappings().all()

        migrated = 0
        for res in pending:
            # Reservations without a named guest keep an empty list.
            if not res["firstName"]:
                continue
            guest = {
                "firstName": res["firstName"],
                "lastName": res["lastName"] or "",
                "guestIdCardNumber": res["guestIdCardNumber"] or "",
                "guestPhone": res["guestPhone"] or "",
            }
            conn.execute(
                sa.text('UPDATE "Reservations" SET guests = :guests WHERE id = :id'),
                {"guests": encode_json_list([guest]), "id": res["id"]},
            )
            migrated += 1
        if migrated:
            log.info("reservations_guest_lists_backfilled", count=migrated)
