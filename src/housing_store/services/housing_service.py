"""
housing_store.services.housing_service

Composition root for the embedded store.

Responsibilities:
- Configure logging once.
- Build the block store, the store itself, one repository per entity,
  the activity recorder and the auth gateway.
- Own startup and shutdown of the store.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta

from housing_store.auth.gateway import AuthGateway
from housing_store.auth.jwt import JwtConfig
from housing_store.db.backups import BackupManager
from housing_store.db.repositories.audit import ActivityRecorder
from housing_store.db.repositories.records import RecordRepository
from housing_store.db.repositories.system_variables import SystemVariableRepo
from housing_store.db.repositories.users import UserRepository
from housing_store.db.schema import (
    assignments,
    buildings,
    employees,
    floors,
    hostings,
    maintenance_requests,
    reservations,
    rooms,
)
from housing_store.db.store import HousingStore
from housing_store.observability.logging import configure_logging
from housing_store.settings import Settings, get_settings
from housing_store.storage.block_store import BlockStore, SqliteBlockStore


@dataclass(frozen=True, slots=True)
class HousingServices:
    store: HousingStore
    users: UserRepository
    buildings: RecordRepository
    floors: RecordRepository
    rooms: RecordRepository
    employees: RecordRepository
    assignments: RecordRepository
    maintenance_requests: RecordRepository
    reservations: RecordRepository
    hostings: RecordRepository
    activity: ActivityRecorder
    system_variables: SystemVariableRepo
    auth: AuthGateway

    @property
    def backups(self) -> BackupManager:
        return self.store.backups

    async def start(self) -> None:
        await self.store.initialize()

    async def close(self) -> None:
        await self.store.close()


def create_services(
    settings: Settings | None = None,
    *,
    block_store: BlockStore | None = None,
    configure_logs: bool = True,
) -> HousingServices:
    settings = settings or get_settings()
    if configure_logs:
        configure_logging(
            service_name=settings.service_name,
            level=settings.log_level,
            json_logs=settings.log_json,
        )

    store = HousingStore(
        block_store=block_store or SqliteBlockStore(settings.block_store_path),
        settings=settings,
    )
    recorder = ActivityRecorder(store)
    users = UserRepository(store)
    system_variables = SystemVariableRepo(store)

    return HousingServices(
        store=store,
        users=users,
        buildings=RecordRepository(store, buildings),
        floors=RecordRepository(store, floors),
        rooms=RecordRepository(store, rooms),
        employees=RecordRepository(store, employees),
        assignments=RecordRepository(store, assignments),
        maintenance_requests=RecordRepository(store, maintenance_requests),
        reservations=RecordRepository(store, reservations),
        hostings=RecordRepository(store, hostings),
        activity=recorder,
        system_variables=system_variables,
        auth=AuthGateway(
            users=users,
            recorder=recorder,
            system_variables=system_variables,
            jwt_cfg=JwtConfig.from_settings(settings),
            session_ttl=timedelta(minutes=settings.session_ttl_minutes),
        ),
    )


# --- Module Notes -----------------------------------------------------------
# Nothing here touches the block store; the first repository call (or `start()`)
# loads and migrates the snapshot.
