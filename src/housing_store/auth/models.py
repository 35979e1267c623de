"""
housing_store.auth.models

Auth domain models.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from housing_store.db.schema import Role


@dataclass(frozen=True, slots=True)
class Principal:
    """
    Authenticated caller identity, as carried by a session token.
    """

    subject: str
    roles: frozenset[str]

    @property
    def is_admin(self) -> bool:
        return Role.admin in self.roles or Role.super_admin in self.roles


@dataclass(frozen=True, slots=True)
class LoginResult:
    # `user` is the Users row without its password.
    user: dict[str, Any]
    token: str
