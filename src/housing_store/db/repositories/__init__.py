"""
housing_store.db.repositories

Repository package.

Responsibilities:
- Group data-access repositories built on top of `HousingStore`.
"""

# Package marker; repositories are imported directly from submodules.


# --- Module Notes -----------------------------------------------------------
# Repositories are intentionally thin; multi-step workflows belong to callers.
