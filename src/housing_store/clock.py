from __future__ import annotations

from datetime import UTC, datetime


def utcnow() -> datetime:
    return datetime.now(tz=UTC)


def to_iso(value: datetime, *, timespec: str = "milliseconds") -> str:
    # Matches the "2024-07-20T14:30:00.000Z" shape already stored in existing snapshots.
    return value.astimezone(UTC).isoformat(timespec=timespec).replace("+00:00", "Z")
