"""
housing_store.auth

Authentication package.

Responsibilities:
- Session token (JWT) helpers and validation.
- Credential checks against the Users table (`AuthGateway`).
"""

# Package marker.
