"""
housing_store.db.migrations

Versioned schema migrations for the embedded store.

Responsibilities:
- Register every schema transition (versions 1..LATEST_VERSION).
- Apply missing transitions at startup (`SchemaMigrator`).
"""

from housing_store.db.migrations.base import Migration
from housing_store.db.migrations.migrator import SchemaMigrator
from housing_store.db.migrations.versions import LATEST_VERSION, MIGRATIONS

__all__ = ["LATEST_VERSION", "MIGRATIONS", "Migration", "SchemaMigrator"]


# --- Module Notes -----------------------------------------------------------
# New schema changes are appended as the next version; released versions are
# never edited, since stores in the field may already sit at any of them.
