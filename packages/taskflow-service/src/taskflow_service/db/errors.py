"""Classification of persistence failures into service errors."""

from __future__ import annotations

from sqlalchemy import exc as sa_exc

from taskflow_service.errors import BadRequest, Conflict, ServerError, ServiceError, Unavailable

_UNIQUE_MARKERS = ("duplicate key", "unique constraint")
_FOREIGN_KEY_MARKERS = ("foreign key constraint",)
_NOT_NULL_MARKERS = ("not null", "not-null")
_CONNECTION_MARKERS = ("connection", "timeout", "network")
_INPUT_MARKERS = ("invalid input", "invalid syntax")


def _contains(text: str, markers: tuple[str, ...]) -> bool:
    return any(m in text for m in markers)


def classify_persistence_error(exc: BaseException, development: bool = False) -> ServiceError:
    """Map a database failure onto a caller-facing ServiceError.

    In development the underlying error text is appended to the message.
    Production keeps only the fixed message so schema details never leak.
    """
    underlying = getattr(exc, "orig", None) or exc
    text = str(underlying).lower()

    error: ServiceError
    if _contains(text, _UNIQUE_MARKERS):
        error = Conflict("Resource already exists")
    elif _contains(text, _FOREIGN_KEY_MARKERS):
        error = BadRequest("Invalid reference to related resource")
    elif _contains(text, _NOT_NULL_MARKERS):
        error = BadRequest("Required field is missing")
    elif isinstance(
        exc, (sa_exc.DisconnectionError, sa_exc.TimeoutError, ConnectionError)
    ) or _contains(text, _CONNECTION_MARKERS):
        error = Unavailable("Database connection error. Please try again later")
    elif _contains(text, _INPUT_MARKERS):
        error = BadRequest("Invalid input format")
    else:
        error = ServerError("Database operation failed")

    if development:
        error.message = f"{error.message}: {underlying}"
    return error
