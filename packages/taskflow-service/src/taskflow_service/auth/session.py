"""Bearer-token session resolution for FastAPI routes.

This is the only place access tokens are validated. Every failure becomes
the same generic ``Unauthenticated`` error; the reason is logged, never
returned.
"""

from __future__ import annotations

from typing import Annotated

import structlog
from fastapi import Depends, Request

from taskflow_service.auth.models import Identity
from taskflow_service.auth.tokens import InvalidTokenError, TokenService
from taskflow_service.errors import Unauthenticated

logger = structlog.get_logger(__name__)

BEARER_SCHEME = "Bearer"


def parse_bearer(header: str | None) -> str:
    """Extract the token from an exact ``Bearer <token>`` header value."""
    if not header:
        logger.debug("auth_header_missing")
        raise Unauthenticated()
    parts = header.split(" ")
    if len(parts) != 2 or parts[0] != BEARER_SCHEME or not parts[1]:
        logger.debug("auth_header_malformed")
        raise Unauthenticated()
    return parts[1]


def authenticate(header: str | None, tokens: TokenService) -> Identity:
    """Resolve the caller's identity from an Authorization header value."""
    token = parse_bearer(header)
    try:
        user_id = tokens.validate_access(token)
    except InvalidTokenError as exc:
        logger.info("access_token_rejected", reason=str(exc))
        raise Unauthenticated() from exc
    return Identity(user_id=user_id)


def get_token_service(request: Request) -> TokenService:
    return request.app.state.token_service


TokenServiceDep = Annotated[TokenService, Depends(get_token_service)]


async def get_current_user(request: Request, tokens: TokenServiceDep) -> Identity:
    """Resolve the current authenticated user before the route body runs."""
    return authenticate(request.headers.get("Authorization"), tokens)


CurrentUserDep = Annotated[Identity, Depends(get_current_user)]
