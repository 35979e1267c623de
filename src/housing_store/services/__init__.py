"""
housing_store.services

Service-layer package.

Responsibilities:
- Compose the store, repositories, audit log and auth gateway from `Settings`.
"""

# Package marker.
