"""
housing_store.errors

Error taxonomy for the embedded store.

Responsibilities:
- Name every failure class a caller of the store can observe.
- Keep fatal (migration) and non-fatal (backup, auth) failures distinguishable.
"""

from __future__ import annotations

import enum


class HousingStoreError(Exception):
    pass


class StorageError(HousingStoreError):
    """Block medium failure: I/O, quota, or a snapshot that is not a database."""


class EngineError(HousingStoreError):
    """Statement execution failure (malformed SQL, constraint violation, unknown column)."""


class MigrationError(HousingStoreError):
    def __init__(self, version: int, message: str) -> None:
        super().__init__(f"migration to version {version} failed: {message}")
        self.version = version


class BackupError(HousingStoreError):
    pass


class AuthErrorKind(enum.StrEnum):
    invalid_credentials = "invalid_credentials"
    account_inactive = "account_inactive"
    invalid_token = "invalid_token"


_AUTH_MESSAGES: dict[AuthErrorKind, str] = {
    AuthErrorKind.invalid_credentials: "Invalid username or password",
    AuthErrorKind.account_inactive: "Account is inactive.",
    AuthErrorKind.invalid_token: "Invalid or expired session token",
}


class AuthError(HousingStoreError):
    """
    Typed authentication rejection.
    The message is safe to show to end users.
    """

    def __init__(self, kind: AuthErrorKind) -> None:
        super().__init__(_AUTH_MESSAGES[kind])
        self.kind = kind


# --- Module Notes -----------------------------------------------------------
# EngineError and StorageError cross repository boundaries unchanged; only the
# store's initialization path converts failures into MigrationError.
