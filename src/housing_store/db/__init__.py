"""
housing_store.db

Persistence package (embedded SQLite engine + block store snapshots).

Responsibilities:
- Provide the engine wrapper, schema descriptors, migrations, repositories,
  backups, and the owning `HousingStore`.
"""

# Package marker.
