"""
housing_store.settings

Central configuration model (Pydantic Settings).

Responsibilities:
- Provide strongly-typed, env-driven settings for the store and its collaborators.
- Hide secrets from repr/logging (e.g., JWT secret).
- Offer a cached settings instance for the composition root.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="HOUSING_", case_sensitive=False)

    env: Literal["dev", "test", "prod"] = "dev"
    service_name: str = "housing-store"
    log_level: str = "INFO"
    log_json: bool = True

    # Block store: one file holding the primary snapshot and its backups.
    block_store_path: Path = Path("./housing-blocks.sqlite3")
    database_key: str = "tal-avenue-housing.sqlite"

    # Backups
    backup_prefix: str = "backup-"
    backup_write_threshold: int = Field(default=50, ge=1)
    backup_retention: int = Field(default=5, ge=1)

    # Session tokens
    jwt_alg: str = "HS256"
    jwt_issuer: str = "housing-store"
    jwt_audience: str = "housing-clients"
    jwt_secret: str = Field(default="dev-secret-change-me-before-deploying", repr=False)
    session_ttl_minutes: int = Field(default=8 * 60, ge=1)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    # Cache avoids re-parsing env vars for every service construction.
    return Settings()


# --- Module Notes -----------------------------------------------------------
# Tests build `Settings(...)` directly with a tmp block store path instead of
# going through the cached instance.
