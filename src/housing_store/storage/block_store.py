"""
housing_store.storage.block_store

Async key -> blob storage.

Responsibilities:
- Persist opaque binary snapshots under string keys, durably across restarts.
- Surface medium failures as `StorageError` without retrying.
"""

from __future__ import annotations

import sqlite3
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Protocol

import aiosqlite

from housing_store.errors import StorageError

_CREATE_BLOCKS = "CREATE TABLE IF NOT EXISTS blocks (key TEXT PRIMARY KEY NOT NULL, data BLOB NOT NULL)"


class BlockStore(Protocol):
    async def get(self, key: str) -> bytes | None: ...

    async def put(self, key: str, data: bytes) -> None: ...

    async def delete(self, key: str) -> None: ...

    async def list_keys(self, prefix: str = "") -> set[str]: ...


class SqliteBlockStore:
    """
    Single-file block store.
    Every call opens its own connection and commits before returning, so a
    completed `put` survives a process crash.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    @asynccontextmanager
    async def _connect(self) -> AsyncIterator[aiosqlite.Connection]:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            async with aiosqlite.connect(self._path) as db:
                await db.execute(_CREATE_BLOCKS)
                yield db
                await db.commit()
        except (sqlite3.Error, OSError) as e:
            raise StorageError(f"block store {self._path} failed: {e}") from e

    async def get(self, key: str) -> bytes | None:
        async with self._connect() as db:
            async with db.execute("SELECT data FROM blocks WHERE key = ?", (key,)) as cur:
                row = await cur.fetchone()
        return bytes(row[0]) if row is not None else None

    async def put(self, key: str, data: bytes) -> None:
        async with self._connect() as db:
            await db.execute(
                "INSERT INTO blocks (key, data) VALUES (?, ?) "
                "ON CONFLICT(key) DO UPDATE SET data = excluded.data",
                (key, sqlite3.Binary(data)),
            )

    async def delete(self, key: str) -> None:
        # Deleting an absent key is a no-op.
        async with self._connect() as db:
            await db.execute("DELETE FROM blocks WHERE key = ?", (key,))

    async def list_keys(self, prefix: str = "") -> set[str]:
        # substr comparison keeps the prefix literal ('_' and '%' are not wildcards).
        async with self._connect() as db:
            async with db.execute(
                "SELECT key FROM blocks WHERE substr(key, 1, length(?)) = ?",
                (prefix, prefix),
            ) as cur:
                rows = await cur.fetchall()
        return {row[0] for row in rows}


# --- Module Notes -----------------------------------------------------------
# Nothing here coordinates between processes: two processes writing the same
# primary key leave whichever snapshot was written last.
