"""Service-layer exceptions mapped to HTTP responses.

Every error carries a stable ``error_code`` alongside its HTTP status:

- unauthenticated (401): missing, malformed, invalid, expired or wrong-type token
- forbidden (403): authenticated but lacking the required role or ownership
- not_found (404)
- conflict (409)
- bad_request (400)
- unavailable (503): the persistence backend cannot be reached
- config_error (500): the service is misconfigured, never the caller's fault
"""

from __future__ import annotations


class ServiceError(Exception):
    """Base class for errors that surface to API callers."""

    status_code: int = 400
    error_code: str = "bad_request"

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class BadRequest(ServiceError):
    status_code = 400
    error_code = "bad_request"


class Unauthenticated(ServiceError):
    """The caller could not be authenticated.

    The message is generic: callers never learn *why* a
    credential was rejected.
    """

    status_code = 401
    error_code = "unauthenticated"

    def __init__(self, message: str = "Authentication required") -> None:
        super().__init__(message)


class Forbidden(ServiceError):
    status_code = 403
    error_code = "forbidden"


class NotFound(ServiceError):
    status_code = 404
    error_code = "not_found"


class Conflict(ServiceError):
    status_code = 409
    error_code = "conflict"


class Unavailable(ServiceError):
    status_code = 503
    error_code = "unavailable"


class ServerError(ServiceError):
    status_code = 500
    error_code = "server_error"


class ConfigError(ServerError):
    """Fatal misconfiguration, e.g. no JWT signing secret."""

    error_code = "config_error"


__all__ = [
    "BadRequest",
    "ConfigError",
    "Conflict",
    "Forbidden",
    "NotFound",
    "ServerError",
    "ServiceError",
    "Unauthenticated",
    "Unavailable",
]
