"""
tests.test_repositories

Record repositories over the seeded store.
"""

from __future__ import annotations

import pytest

from housing_store.db.schema import RoomStatus
from housing_store.errors import EngineError
from housing_store.services.housing_service import HousingServices, create_services


@pytest.mark.asyncio
async def test_cold_store_is_seeded_at_latest_version(services: HousingServices) -> None:
    assert await services.store.schema_version() == 8

    users = await services.users.get_all()
    admin = next(u for u in users if u["username"] == "admin")
    assert admin["roles"] == ["admin"]
    assert admin["status"] == "active"
    assert all("password" not in u for u in users)


@pytest.mark.asyncio
async def test_rows_use_python_keys(services: HousingServices) -> None:
    room = await services.rooms.get_by_id(1)
    assert room == {
        "id": 1,
        "floor_id": 1,
        "room_number": "A-G01",
        "capacity": 2,
        "current_occupancy": 1,
        "status": "occupied",
    }

    employee = await services.employees.get_by_id(1)
    assert employee is not None
    assert employee["employee_code"] == "EMP001"
    assert (employee["first_name"], employee["last_name"]) == ("John", "Doe")

    reservation = await services.reservations.get_by_id(1)
    assert reservation is not None
    assert reservation["guests"][0]["firstName"] == "Guest"


@pytest.mark.asyncio
async def test_create_room_assigns_fresh_id(services: HousingServices, settings, block_store) -> None:
    before = {r["id"] for r in await services.rooms.get_all()}

    room = await services.rooms.create(
        {
            "floor_id": 2,
            "room_number": "A-102",
            "capacity": 2,
            "current_occupancy": 0,
            "status": RoomStatus.available,
        }
    )

    assert isinstance(room["id"], int)
    assert room["id"] not in before
    assert room["room_number"] == "A-102"
    assert room["id"] in {r["id"] for r in await services.rooms.get_all()}

    # Durable without an explicit save.
    other = create_services(settings, block_store=block_store, configure_logs=False)
    assert await other.rooms.get_by_id(room["id"]) == room
    await other.close()


@pytest.mark.asyncio
async def test_partial_update_leaves_other_fields(services: HousingServices) -> None:
    before = await services.rooms.get_by_id(2)
    assert before is not None

    after = await services.rooms.update(2, {"status": RoomStatus.maintenance})

    assert after == {**before, "status": "maintenance"}
    assert await services.rooms.get_by_id(2) == after


@pytest.mark.asyncio
async def test_empty_update_writes_nothing(services: HousingServices) -> None:
    pending = services.backups.pending_writes
    row = await services.rooms.update(2, {})
    assert row == await services.rooms.get_by_id(2)
    assert services.backups.pending_writes == pending


@pytest.mark.asyncio
async def test_update_missing_row_returns_none(services: HousingServices) -> None:
    assert await services.buildings.update(999, {"name": "Ghost"}) is None


@pytest.mark.asyncio
async def test_unknown_fields_and_id_changes_are_rejected(services: HousingServices) -> None:
    with pytest.raises(EngineError):
        await services.rooms.create({"room_number": "X", "colour": "blue"})
    with pytest.raises(EngineError):
        await services.rooms.update(1, {"roomNumber": "X"})
    with pytest.raises(EngineError):
        await services.rooms.update(1, {"id": 50})


@pytest.mark.asyncio
async def test_delete_has_no_cascade(services: HousingServices) -> None:
    await services.rooms.delete(1)
    assert await services.rooms.get_by_id(1) is None
    # The assignment pointing at room 1 is untouched.
    assert (await services.assignments.get_by_id(1))["room_id"] == 1
    # Deleting a missing row is not an error.
    await services.rooms.delete(1)


@pytest.mark.asyncio
async def test_assignments_for_last_slot_both_succeed(services: HousingServices) -> None:
    # Room 1 has capacity 2 and one occupant; capacity checks are the caller's job.
    fields = {"room_id": 1, "check_in_date": "2024-09-01T00:00:00.000Z", "check_out_date": None}
    first = await services.assignments.create({**fields, "employee_id": 2})
    second = await services.assignments.create({**fields, "employee_id": 3})

    assert first["id"] != second["id"]
    in_room = [a for a in await services.assignments.get_all() if a["room_id"] == 1]
    assert len(in_room) == 3


@pytest.mark.asyncio
async def test_guest_lists_round_trip_as_lists(services: HousingServices) -> None:
    guests = [
        {"firstName": "Ana", "lastName": "Lima", "guestIdCardNumber": "ID-1", "guestPhone": "1"},
        {"firstName": "Bo", "lastName": "Kim", "guestIdCardNumber": "ID-2", "guestPhone": ""},
    ]
    hosting = await services.hostings.create(
        {"employee_id": 1, "guest_first_name": "Ana", "status": "active", "guests": guests}
    )
    assert hosting["guests"] == guests

    raw = await services.store.execute('SELECT guests FROM "Hostings" WHERE id = ?', [hosting["id"]])
    assert raw.rows[0][0].startswith('[{"firstName":"Ana"')


@pytest.mark.asyncio
async def test_user_passwords_stay_inside_the_repository(services: HousingServices) -> None:
    with pytest.raises(EngineError):
        await services.users.create({"username": "nopass", "roles": ["viewer"], "status": "active"})

    user = await services.users.create(
        {"username": "clerk", "password": "s3cret", "roles": ["hr", "viewer"], "status": "active"}
    )
    assert "password" not in user
    assert user["roles"] == ["hr", "viewer"]

    updated = await services.users.update(user["id"], {"status": "inactive", "password": ""})
    assert updated is not None and updated["status"] == "inactive"
    stored = await services.users.find_by_username("clerk", with_credential=True)
    assert stored is not None and stored["password"] == "s3cret"

    await services.users.update(user["id"], {"password": "n3w"})
    stored = await services.users.find_by_username("clerk", with_credential=True)
    assert stored is not None and stored["password"] == "n3w"


@pytest.mark.asyncio
async def test_system_variables(services: HousingServices) -> None:
    assert await services.system_variables.get("version") == "8"
    assert await services.system_variables.get("missing") is None

    await services.system_variables.set("default_language", "ar")
    await services.system_variables.set("default_language", "fr")

    variables = await services.system_variables.get_all()
    assert variables["default_language"] == "fr"
    assert variables["ai_suggestions"] == "false"


@pytest.mark.asyncio
async def test_activity_log_is_append_only_and_newest_first(services: HousingServices) -> None:
    first = await services.activity.record("admin", "Created room A-102")
    second = await services.activity.record("hr", "Updated employee EMP002")

    assert set(first) == {"id", "username", "action", "timestamp"}
    assert first["timestamp"].endswith("Z")
    assert await services.activity.get_by_id(first["id"]) == first

    recent = await services.activity.recent(limit=2)
    assert [e["id"] for e in recent] == [second["id"], first["id"]]
    assert not hasattr(services.activity, "delete")
