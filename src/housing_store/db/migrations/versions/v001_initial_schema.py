"""
housing_store.db.migrations.versions.v001_initial_schema

Version 1: full initial schema plus seed data.

Responsibilities:
- Create every table of the first release (in its first-release shape).
- Seed the default accounts, housing inventory and sample records.
- Seed process-wide flags in `SystemVariables`.
"""

from __future__ import annotations

from datetime import timedelta

import sqlalchemy as sa
from alembic.operations import Operations

from housing_store import clock
from housing_store.db.migrations.base import Migration, has_table
from housing_store.db.schema import encode_json_list


def _id() -> sa.Column:
    return sa.Column("id", sa.Integer, primary_key=True)


def _roles(*roles: str) -> str:
    return encode_json_list(roles)


class InitialSchema(Migration):
    version = 1
    description = "create initial schema and seed data"

    def apply(self, op: Operations) -> None:
        if has_table(op, "Users"):
            # Tables exist but the version was never recorded; keep the data as-is.
            return

        sysvars = op.create_table(
            "SystemVariables",
            sa.Column("key", sa.Text, primary_key=True),
            sa.Column("value", sa.Text, nullable=False),
        )
        users = op.create_table(
            "Users",
            _id(),
            sa.Column("username", sa.Text, nullable=False, unique=True),
            sa.Column("password", sa.Text, nullable=False),
            sa.Column("roles", sa.Text),
            sa.Column("status", sa.Text),
            sqlite_autoincrement=True,
        )
        buildings = op.create_table(
            "Buildings",
            _id(),
            sa.Column("name", sa.Text),
            sa.Column("location", sa.Text),
            sa.Column("capacity", sa.Integer),
            sa.Column("status", sa.Text),
            sqlite_autoincrement=True,
        )
        floors = op.create_table(
            "Floors",
            _id(),
            sa.Column("buildingId", sa.Integer, sa.ForeignKey("Buildings.id")),
            sa.Column("floorNumber", sa.Text),
            sa.Column("description", sa.Text),
            sqlite_autoincrement=True,
        )
        rooms = op.create_table(
            "Rooms",
            _id(),
            sa.Column("floorId", sa.Integer, sa.ForeignKey("Floors.id")),
            sa.Column("roomNumber", sa.Text),
            sa.Column("capacity", sa.Integer),
            sa.Column("currentOccupancy", sa.Integer),
            sa.Column("status", sa.Text),
            sqlite_autoincrement=True,
        )
        employees = op.create_table(
            "Employees",
            _id(),
            sa.Column("fullName", sa.Text),
            sa.Column("nationalId", sa.Text, unique=True),
            sa.Column("phone", sa.Text),
            sa.Column("department", sa.Text),
            sa.Column("status", sa.Text),
            sa.Column("contractEndDate", sa.Text),
            sqlite_autoincrement=True,
        )
        assignments = op.create_table(
            "Assignments",
            _id(),
            sa.Column("employeeId", sa.Integer, sa.ForeignKey("Employees.id")),
            sa.Column("roomId", sa.Integer, sa.ForeignKey("Rooms.id")),
            sa.Column("checkInDate", sa.Text),
            sa.Column("expectedCheckOutDate", sa.Text),
            sa.Column("checkOutDate", sa.Text),
            sqlite_autoincrement=True,
        )
        maintenance = op.create_table(
            "MaintenanceRequests",
            _id(),
            sa.Column("roomId", sa.Integer, sa.ForeignKey("Rooms.id")),
            sa.Column("problemType", sa.Text),
            sa.Column("description", sa.Text),
            sa.Column("status", sa.Text),
            sa.Column("reportedAt", sa.Text),
            sqlite_autoincrement=True,
        )
        reservations = op.create_table(
            "Reservations",
            _id(),
            sa.Column("roomId", sa.Integer, sa.ForeignKey("Rooms.id")),
            sa.Column("guestName", sa.Text),
            sa.Column("checkInDate", sa.Text),
            sa.Column("checkOutDate", sa.Text),
            sa.Column("notes", sa.Text),
            sa.Column("guestIdCardNumber", sa.Text),
            sa.Column("guestPhone", sa.Text),
            sa.Column("guestPosition", sa.Text),
            # Already present in v1; version 3 adds it for stores created before it was.
            sa.Column("department", sa.Text),
            sqlite_autoincrement=True,
        )
        op.create_table(
            "ActivityLog",
            _id(),
            sa.Column("username", sa.Text),
            sa.Column("action", sa.Text),
            sa.Column("timestamp", sa.Text),
            sqlite_autoincrement=True,
        )

        now = clock.utcnow()

        op.bulk_insert(
            users,
            [
                {"username": "admin", "password": "admin", "roles": _roles("admin"), "status": "active"},
                {"username": "manager", "password": "password", "roles": _roles("manager"), "status": "active"},
                {"username": "supervisor", "password": "password", "roles": _roles("supervisor"), "status": "active"},
                {"username": "hr", "password": "password", "roles": _roles("hr"), "status": "active"},
                {"username": "maintenance", "password": "password", "roles": _roles("maintenance"), "status": "active"},
                {"username": "viewer", "password": "password", "roles": _roles("viewer"), "status": "inactive"},
                {"username": "hr_supervisor", "password": "password", "roles": _roles("hr", "supervisor"), "status": "active"},
                {"username": "superadmin", "password": "superadmin", "roles": _roles("super_admin"), "status": "active"},
            ],
        )
        op.bulk_insert(
            buildings,
            [
                {"id": 1, "name": "A-Block", "location": "North Wing", "capacity": 150, "status": "active"},
                {"id": 2, "name": "B-Block", "location": "South Wing", "capacity": 120, "status": "active"},
            ],
        )
        op.bulk_insert(
            floors,
            [
                {"id": 1, "buildingId": 1, "floorNumber": "G", "description": "Ground Floor"},
                {"id": 2, "buildingId": 1, "floorNumber": "1", "description": "First Floor"},
                {"id": 3, "buildingId": 2, "floorNumber": "G", "description": "Ground Floor"},
            ],
        )
        op.bulk_insert(
            rooms,
            [
                {"id": 1, "floorId": 1, "roomNumber": "A-G01", "capacity": 2, "currentOccupancy": 1, "status": "occupied"},
                {"id": 2, "floorId": 1, "roomNumber": "A-G02", "capacity": 2, "currentOccupancy": 0, "status": "available"},
                {"id": 3, "floorId": 2, "roomNumber": "A-101", "capacity": 1, "currentOccupancy": 0, "status": "maintenance"},
                {"id": 4, "floorId": 3, "roomNumber": "B-G01", "capacity": 2, "currentOccupancy": 0, "status": "available"},
            ],
        )
        op.bulk_insert(
            employees,
            [
                {
                    "fullName": "John Doe",
                    "nationalId": "123456789",
                    "phone": "555-0101",
                    "department": "it",
                    "status": "active",
                    "contractEndDate": "2025-12-31T00:00:00.000Z",
                },
                {
                    "fullName": "Jane Smith",
                    "nationalId": "987654321",
                    "phone": "555-0102",
                    "department": "hr",
                    "status": "active",
                    # Contract close to expiry so the expiring-contracts views have data.
                    "contractEndDate": clock.to_iso(now + timedelta(days=15)),
                },
                {
                    "fullName": "Peter Jones",
                    "nationalId": "112233445",
                    "phone": "555-0103",
                    "department": "housekeeping",
                    "status": "left",
                    "contractEndDate": "2023-01-01T00:00:00.000Z",
                },
            ],
        )
        op.bulk_insert(
            assignments,
            [
                {
                    "employeeId": 1,
                    "roomId": 1,
                    "checkInDate": "2023-10-01T10:00:00.000Z",
                    "expectedCheckOutDate": "2024-12-31T10:00:00.000Z",
                    "checkOutDate": None,
                },
            ],
        )
        op.bulk_insert(
            maintenance,
            [
                {
                    "roomId": 3,
                    "problemType": "Plumbing",
                    "description": "Leaky faucet",
                    "status": "in_progress",
                    "reportedAt": "2024-07-20T14:30:00.000Z",
                },
                {
                    "roomId": 2,
                    "problemType": "Electrical",
                    "description": "Light fixture not working",
                    "status": "open",
                    "reportedAt": clock.to_iso(now),
                },
            ],
        )
        op.bulk_insert(
            reservations,
            [
                {
                    "roomId": 4,
                    "guestName": "Guest Tester",
                    "checkInDate": "2024-09-01T12:00:00.000Z",
                    "checkOutDate": "2024-09-15T12:00:00.000Z",
                    "notes": "VIP Guest",
                    "guestIdCardNumber": "G12345",
                    "guestPhone": "555-GUEST",
                    "guestPosition": "Consultant",
                    "department": "marketing",
                },
            ],
        )
        op.bulk_insert(
            sysvars,
            [
                {"key": "default_language", "value": "en"},
                {"key": "ai_suggestions", "value": "false"},
            ],
        )
