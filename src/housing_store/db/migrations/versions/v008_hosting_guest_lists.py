from __future__ import annotations

import sqlalchemy as sa
from alembic.operations import Operations

from housing_store.db.migrations.base import Migration, add_column_if_missing
from housing_store.db.schema import encode_json_list
from housing_store.observability.logging import get_logger

log = get_logger(__name__)


class HostingGuestLists(Migration):
    version = 8
    description = "add Hostings.guests and backfill it from the primary guest"

    def apply(self, op: Operations) -> None:
        add_column_if_missing(op, "Hostings", sa.Column("guests", sa.Text, server_default="[]"))

        conn = op.get_bind()
        pending = conn.execute(
            sa.text(
                'SELECT id, "guestFirstName", "guestLastName", "guestIdCardNumber" '
                "FROM \"Hostings\" WHERE guests = '[]' ORDER BY id"
            )
        ).mappings().all()
        for hosting in pending:
            guest = {
                "firstName": hosting["guestFirstName"],
                "lastName": hosting["guestLastName"] or "",
                "guestIdCardNumber": hosting["guestIdCardNumber"] or "",
                # Hostings never stored a phone number before guest lists.
                "guestPhone": "",
            }
            conn.execute(
                sa.text('UPDATE "Hostings" SET guests = :guests WHERE id = :id'),
                {"guests": encode_json_list([guest]), "id": hosting["id"]},
            )
        if pending:
            log.info("hostings_guest_lists_backfilled", count=len(pending))
