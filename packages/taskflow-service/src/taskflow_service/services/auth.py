"""Registration, login and token refresh."""

from __future__ import annotations

from dataclasses import dataclass

import structlog

from taskflow_service.auth.models import Identity
from taskflow_service.auth.passwords import burn_verification, hash_password, verify_password
from taskflow_service.auth.tokens import InvalidTokenError, TokenPair, TokenService
from taskflow_service.db.store import UserStore
from taskflow_service.errors import Conflict, NotFound, Unauthenticated
from taskflow_service.models import User

logger = structlog.get_logger(__name__)

_LOGIN_DENIED = "Invalid email or password"


@dataclass(frozen=True)
class AuthResult:
    user: User
    tokens: TokenPair


class AuthService:
    def __init__(self, users: UserStore, tokens: TokenService) -> None:
        self._users = users
        self._tokens = tokens

    async def _email_taken(self, email: str) -> bool:
        try:
            await self._users.get_user_by_email(email)
        except NotFound:
            return False
        return True

    async def register(self, email: str, password: str, name: str) -> AuthResult:
        """Create a regular user and sign them in."""
        if await self._email_taken(email):
            raise Conflict("User already exists")
        user = await self._users.create_user(
            email=email, password_hash=hash_password(password), name=name
        )
        logger.info("user_registered", user_id=str(user.id))
        return AuthResult(user=user, tokens=self._tokens.issue_pair(user.id))

    async def login(self, email: str, password: str) -> AuthResult:
        """Verify credentials. Unknown email and wrong password look identical."""
        try:
            user = await self._users.get_user_by_email(email)
        except NotFound:
            burn_verification(password)
            logger.info("login_failed", reason="unknown_email")
            raise Unauthenticated(_LOGIN_DENIED) from None

        if not verify_password(password, user.password_hash):
            logger.info("login_failed", reason="bad_password", user_id=str(user.id))
            raise Unauthenticated(_LOGIN_DENIED)

        logger.info("login_succeeded", user_id=str(user.id))
        return AuthResult(user=user, tokens=self._tokens.issue_pair(user.id))

    async def refresh(self, refresh_token: str) -> AuthResult:
        """Exchange a refresh token for a new access + refresh pair.

        The presented refresh token is not revoked: there is no server-side
        blacklist, so it remains valid until its own expiry.
        """
        try:
            user_id = self._tokens.validate_refresh(refresh_token)
        except InvalidTokenError as exc:
            logger.info("refresh_rejected", reason=str(exc))
            raise Unauthenticated("Invalid or expired refresh token") from exc

        try:
            user = await self._users.get_user_by_id(user_id)
        except NotFound:
            logger.info("refresh_rejected", reason="user_deleted", user_id=str(user_id))
            raise Unauthenticated("Invalid or expired refresh token") from None

        return AuthResult(user=user, tokens=self._tokens.issue_pair(user.id))

    async def me(self, identity: Identity) -> User:
        return await self._users.get_user_by_id(identity.user_id)
