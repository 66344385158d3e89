"""JWT access/refresh token issuance and verification.

Tokens are stateless: validity is the HMAC signature plus the ``exp``
claim. Nothing is persisted and there is no revocation list, so a refresh
token stays usable until it expires even after it has been rotated.

Wire payload::

    {"user_id": "<uuid>", "type": "access" | "refresh", "iat": <unix>, "exp": <unix>}
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from enum import Enum
from typing import Any
from uuid import UUID

import jwt

from taskflow_service.errors import ConfigError
from taskflow_service.settings import Settings

# Only symmetric HMAC signatures are accepted; "none" and asymmetric
# algorithms fail verification.
HMAC_ALGORITHMS = ("HS256", "HS384", "HS512")

SUBJECT_CLAIM = "user_id"
TYPE_CLAIM = "type"
_REQUIRED_CLAIMS = [SUBJECT_CLAIM, TYPE_CLAIM, "iat", "exp"]


class TokenType(str, Enum):
    ACCESS = "access"
    REFRESH = "refresh"


class InvalidTokenError(Exception):
    """Token failed verification. The message is for logs, not for callers."""


@dataclass(frozen=True)
class TokenClaims:
    subject: UUID
    type: TokenType
    issued_at: datetime
    expires_at: datetime

    def to_payload(self) -> dict[str, Any]:
        return {
            SUBJECT_CLAIM: str(self.subject),
            TYPE_CLAIM: self.type.value,
            "iat": self.issued_at,
            "exp": self.expires_at,
        }


@dataclass(frozen=True)
class TokenPair:
    access_token: str
    refresh_token: str


def _now_utc() -> datetime:
    return datetime.now(UTC)


class TokenService:
    """Signs and verifies session tokens with a symmetric secret."""

    def __init__(self, settings: Settings, clock: Callable[[], datetime] = _now_utc) -> None:
        if settings.jwt_algorithm not in HMAC_ALGORITHMS:
            raise ConfigError(f"Unsupported JWT algorithm: {settings.jwt_algorithm}")
        self._secret = settings.jwt_secret or None
        self._algorithm = settings.jwt_algorithm
        self._ttl = {
            TokenType.ACCESS: timedelta(minutes=settings.access_token_expire_minutes),
            TokenType.REFRESH: timedelta(days=settings.refresh_token_expire_days),
        }
        self._clock = clock

    @property
    def configured(self) -> bool:
        return self._secret is not None

    def _require_secret(self) -> str:
        if self._secret is None:
            raise ConfigError("JWT secret is not configured")
        return self._secret

    # ------------------------------------------------------------------
    # Issuance
    # ------------------------------------------------------------------

    def _issue(self, user_id: UUID, token_type: TokenType) -> str:
        secret = self._require_secret()
        now = self._clock()
        claims = TokenClaims(
            subject=user_id,
            type=token_type,
            issued_at=now,
            expires_at=now + self._ttl[token_type],
        )
        return jwt.encode(claims.to_payload(), secret, algorithm=self._algorithm)

    def issue_access(self, user_id: UUID) -> str:
        """Create a short-lived access token."""
        return self._issue(user_id, TokenType.ACCESS)

    def issue_refresh(self, user_id: UUID) -> str:
        """Create a long-lived refresh token."""
        return self._issue(user_id, TokenType.REFRESH)

    def issue_pair(self, user_id: UUID) -> TokenPair:
        return TokenPair(
            access_token=self.issue_access(user_id),
            refresh_token=self.issue_refresh(user_id),
        )

    # ------------------------------------------------------------------
    # Verification
    # ------------------------------------------------------------------

    def decode(self, token: str) -> TokenClaims:
        """Verify signature, expiry and claim shape. Raises InvalidTokenError."""
        secret = self._require_secret()
        try:
            payload = jwt.decode(
                token,
                secret,
                algorithms=list(HMAC_ALGORITHMS),
                options={"require": _REQUIRED_CLAIMS},
            )
        except jwt.PyJWTError as exc:
            raise InvalidTokenError(str(exc)) from exc

        try:
            token_type = TokenType(payload[TYPE_CLAIM])
        except (ValueError, TypeError) as exc:
            raise InvalidTokenError("unknown token type") from exc

        raw_subject = payload[SUBJECT_CLAIM]
        if not isinstance(raw_subject, str) or not raw_subject.strip():
            raise InvalidTokenError("missing subject")
        try:
            subject = UUID(raw_subject)
        except ValueError as exc:
            raise InvalidTokenError("malformed subject") from exc

        return TokenClaims(
            subject=subject,
            type=token_type,
            issued_at=datetime.fromtimestamp(payload["iat"], UTC),
            expires_at=datetime.fromtimestamp(payload["exp"], UTC),
        )

    def _validate(self, token: str, expected: TokenType) -> UUID:
        claims = self.decode(token)
        # An access token must never be accepted where a refresh token is
        # required, and vice versa.
        if claims.type is not expected:
            raise InvalidTokenError(f"expected {expected.value} token, got {claims.type.value}")
        return claims.subject

    def validate_access(self, token: str) -> UUID:
        return self._validate(token, TokenType.ACCESS)

    def validate_refresh(self, token: str) -> UUID:
        return self._validate(token, TokenType.REFRESH)
