from __future__ import annotations

import sqlalchemy as sa
from alembic.operations import Operations

from housing_store.db.migrations.base import (
    Migration,
    add_column_if_missing,
    rename_column_if_present,
    split_full_name,
)


class ReservationNameSplit(Migration):
    version = 6
    description = "split Reservations.guestName into firstName and lastName"

    def apply(self, op: Operations) -> None:
        renamed = rename_column_if_present(op, "Reservations", "guestName", "firstName")
        add_column_if_missing(op, "Reservations", sa.Column("lastName", sa.Text, server_default=""))
        if renamed:
            split_full_name(op, "Reservations", "firstName", "lastName")
