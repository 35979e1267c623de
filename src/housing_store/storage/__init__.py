"""
housing_store.storage

Durable block storage backing the engine's snapshots.

Responsibilities:
- Define the `BlockStore` contract (key -> binary blob).
- Provide the file-backed implementation used in production and tests.
"""

from housing_store.storage.block_store import BlockStore, SqliteBlockStore

__all__ = ["BlockStore", "SqliteBlockStore"]
