"""
housing_store.db.migrations.versions

Registry of schema migrations, in version order.
"""

from __future__ import annotations

from housing_store.db.migrations.base import Migration
from housing_store.db.migrations.versions.v001_initial_schema import InitialSchema
from housing_store.db.migrations.versions.v002_employee_job_titles import EmployeeJobTitles
from housing_store.db.migrations.versions.v003_reservation_department import ReservationDepartment
from housing_store.db.migrations.versions.v004_employee_name_split import EmployeeNameSplit
from housing_store.db.migrations.versions.v005_employee_codes import EmployeeCodes
from housing_store.db.migrations.versions.v006_reservation_name_split import ReservationNameSplit
from housing_store.db.migrations.versions.v007_hostings_and_guest_lists import HostingsAndGuestLists
from housing_store.db.migrations.versions.v008_hosting_guest_lists import HostingGuestLists

MIGRATIONS: tuple[Migration, ...] = (
    InitialSchema(),
    EmployeeJobTitles(),
    ReservationDepartment(),
    EmployeeNameSplit(),
    EmployeeCodes(),
    ReservationNameSplit(),
    HostingsAndGuestLists(),
    HostingGuestLists(),
)

LATEST_VERSION = len(MIGRATIONS)
