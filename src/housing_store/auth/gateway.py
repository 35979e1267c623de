"""
housing_store.auth.gateway

Credential verification and session issuing.

Responsibilities:
- Check a username/password pair against the Users table.
- Record every attempt (failed or not) in the activity log.
- Issue and validate session tokens.
"""

from __future__ import annotations

import hmac
from datetime import timedelta

from housing_store.auth.jwt import JwtConfig, JwtValidationError, decode_and_validate, issue_token
from housing_store.auth.models import LoginResult, Principal
from housing_store.db.repositories.audit import ActivityRecorder
from housing_store.db.repositories.system_variables import SystemVariableRepo
from housing_store.db.repositories.users import UserRepository
from housing_store.db.schema import UserStatus
from housing_store.errors import AuthError, AuthErrorKind
from housing_store.observability.logging import get_logger

log = get_logger(__name__)


class AuthGateway:
    def __init__(
        self,
        *,
        users: UserRepository,
        recorder: ActivityRecorder,
        system_variables: SystemVariableRepo,
        jwt_cfg: JwtConfig,
        session_ttl: timedelta = timedelta(hours=8),
    ) -> None:
        self._users = users
        self._recorder = recorder
        self._vars = system_variables
        self._jwt_cfg = jwt_cfg
        self._ttl = session_ttl

    async def login(self, username: str, password: str) -> LoginResult:
        """
        Verify credentials and open a session.

        Raises `AuthError(account_inactive)` for a disabled account, whatever
        the password, and `AuthError(invalid_credentials)` for an unknown user
        or a wrong password (indistinguishable to the caller).
        """

        user = await self._users.find_by_username(username, with_credential=True)
        if user is not None and user["status"] != UserStatus.active:
            await self._recorder.record(username, "Failed login attempt: account inactive")
            log.info("login_failed", username=username, reason=AuthErrorKind.account_inactive)
            raise AuthError(AuthErrorKind.account_inactive)

        if user is None or not _passwords_match(user["password"], password):
            await self._recorder.record(username, "Failed login attempt: invalid credentials")
            log.info("login_failed", username=username, reason=AuthErrorKind.invalid_credentials)
            raise AuthError(AuthErrorKind.invalid_credentials)

        user.pop("password")
        roles = [str(r) for r in user.get("roles") or []]
        token = issue_token(cfg=self._jwt_cfg, subject=username, roles=roles, ttl=self._ttl)
        await self._vars.set("last_login_user", username)
        await self._recorder.record(username, "Logged in")
        log.info("login_succeeded", username=username, roles=roles)
        return LoginResult(user=user, token=token)

    def authenticate(self, token: str) -> Principal:
        try:
            payload = decode_and_validate(cfg=self._jwt_cfg, token=token)
        except JwtValidationError as e:
            raise AuthError(AuthErrorKind.invalid_token) from e

        subject = str(payload.get("sub", ""))
        roles_raw = payload.get("roles", [])
        if not subject or not isinstance(roles_raw, list):
            raise AuthError(AuthErrorKind.invalid_token)
        return Principal(subject=subject, roles=frozenset(str(r) for r in roles_raw))


def _passwords_match(stored: str | None, supplied: str) -> bool:
    if stored is None:
        return False
    return hmac.compare_digest(stored.encode(), supplied.encode())


# --- Module Notes -----------------------------------------------------------
# Passwords are stored as plain text, as in every existing snapshot. Hashing
# them needs a migration that rewrites the column and is not done here.
