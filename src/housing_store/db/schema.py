"""
housing_store.db.schema

Table descriptors for the latest schema version.

Responsibilities:
- Map each entity's Python field keys to its on-disk column names and types.
- Encode list-valued columns (roles, guest lists) as JSON text at the boundary.
- Name the status vocabularies callers use.

The on-disk names are the ones the migration chain produces; the descriptors
are never used to create tables (see `housing_store.db.migrations`).
"""

from __future__ import annotations

import enum
import json
from typing import Any

from sqlalchemy import Column, ForeignKey, Integer, MetaData, Table, Text
from sqlalchemy.types import TypeDecorator


class UserStatus(enum.StrEnum):
    active = "active"
    inactive = "inactive"


class Role(enum.StrEnum):
    super_admin = "super_admin"
    admin = "admin"
    hr = "hr"
    viewer = "viewer"
    supervisor = "supervisor"
    manager = "manager"
    maintenance = "maintenance"


class BuildingStatus(enum.StrEnum):
    active = "active"
    inactive = "inactive"


class RoomStatus(enum.StrEnum):
    available = "available"
    occupied = "occupied"
    maintenance = "maintenance"
    reserved = "reserved"


class EmployeeStatus(enum.StrEnum):
    active = "active"
    left = "left"


class MaintenanceStatus(enum.StrEnum):
    open = "open"
    in_progress = "in_progress"
    resolved = "resolved"


class HostingStatus(enum.StrEnum):
    active = "active"
    completed = "completed"
    cancelled = "cancelled"


def encode_json_list(value: Any) -> str:
    # Compact separators keep the text identical to what older snapshots hold.
    return json.dumps(list(value), separators=(",", ":"))


class JsonList(TypeDecorator[list[Any]]):
    """
    List stored as JSON text in a single column.
    Strings are passed through untouched so pre-encoded values still round-trip.
    """

    impl = Text
    cache_ok = True

    def process_bind_param(self, value: Any, dialect: Any) -> str | None:
        if value is None or isinstance(value, str):
            return value
        return encode_json_list(value)

    def process_result_value(self, value: Any, dialect: Any) -> list[Any]:
        if not value:
            return []
        return json.loads(value)


metadata = MetaData()

system_variables = Table(
    "SystemVariables",
    metadata,
    Column("key", Text, primary_key=True),
    Column("value", Text, nullable=False),
)

users = Table(
    "Users",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("username", Text, nullable=False, unique=True),
    Column("password", Text, nullable=False),
    Column("roles", JsonList),
    Column("status", Text),
)

buildings = Table(
    "Buildings",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("name", Text),
    Column("location", Text),
    Column("capacity", Integer),
    Column("status", Text),
)

floors = Table(
    "Floors",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("buildingId", Integer, ForeignKey("Buildings.id"), key="building_id"),
    Column("floorNumber", Text, key="floor_number"),
    Column("description", Text),
)

rooms = Table(
    "Rooms",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("floorId", Integer, ForeignKey("Floors.id"), key="floor_id"),
    Column("roomNumber", Text, key="room_number"),
    Column("capacity", Integer),
    Column("currentOccupancy", Integer, key="current_occupancy"),
    Column("status", Text),
)

employees = Table(
    "Employees",
    metadata,
    Column("id", Integer, primary_key=True),
    # Business identifier such as "EMP001"; not the row id.
    Column("employeeId", Text, key="employee_code"),
    Column("firstName", Text, key="first_name"),
    Column("lastName", Text, key="last_name"),
    Column("nationalId", Text, unique=True, key="national_id"),
    Column("jobTitle", Text, key="job_title"),
    Column("phone", Text),
    Column("department", Text),
    Column("status", Text),
    Column("contractEndDate", Text, key="contract_end_date"),
)

assignments = Table(
    "Assignments",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("employeeId", Integer, ForeignKey("Employees.id"), key="employee_id"),
    Column("roomId", Integer, ForeignKey("Rooms.id"), key="room_id"),
    Column("checkInDate", Text, key="check_in_date"),
    Column("expectedCheckOutDate", Text, key="expected_check_out_date"),
    # NULL while the employee is still housed.
    Column("checkOutDate", Text, key="check_out_date"),
)

maintenance_requests = Table(
    "MaintenanceRequests",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("roomId", Integer, ForeignKey("Rooms.id"), key="room_id"),
    Column("problemType", Text, key="problem_type"),
    Column("description", Text),
    Column("status", Text),
    Column("reportedAt", Text, key="reported_at"),
)

reservations = Table(
    "Reservations",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("roomId", Integer, ForeignKey("Rooms.id"), key="room_id"),
    Column("firstName", Text, key="first_name"),
    Column("lastName", Text, key="last_name"),
    Column("checkInDate", Text, key="check_in_date"),
    Column("checkOutDate", Text, key="check_out_date"),
    Column("notes", Text),
    Column("guestIdCardNumber", Text, key="guest_id_card_number"),
    Column("guestPhone", Text, key="guest_phone"),
    Column("jobTitle", Text, key="job_title"),
    Column("department", Text),
    Column("guests", JsonList),
)

hostings = Table(
    "Hostings",
    metadata,
    Column("id", Integer, primary_key=True),
    # The hosting employee.
    Column("employeeId", Integer, ForeignKey("Employees.id"), key="employee_id"),
    Column("guestFirstName", Text, key="guest_first_name"),
    Column("guestLastName", Text, key="guest_last_name"),
    Column("guestIdCardNumber", Text, key="guest_id_card_number"),
    Column("startDate", Text, key="start_date"),
    Column("endDate", Text, key="end_date"),
    Column("notes", Text),
    Column("status", Text),
    Column("guests", JsonList),
)

activity_log = Table(
    "ActivityLog",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("username", Text),
    Column("action", Text),
    Column("timestamp", Text),
)


# --- Module Notes -----------------------------------------------------------
# Guest lists stay a JSON column rather than a child table; each element is
# {"firstName", "lastName", "guestIdCardNumber", "guestPhone"}.
