"""Exception handlers rendering errors as ``{"error": "<message>"}``."""

from __future__ import annotations

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from taskflow_service.db.errors import classify_persistence_error
from taskflow_service.errors import ConfigError, ServiceError
from taskflow_service.settings import Settings

logger = structlog.get_logger(__name__)

INTERNAL_ERROR_MESSAGE = "Internal server error"


def _error_response(status_code: int, message: str) -> JSONResponse:
    headers = {"WWW-Authenticate": "Bearer"} if status_code == 401 else None
    return JSONResponse(status_code=status_code, content={"error": message}, headers=headers)


def _validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request body"
    first = errors[0]
    field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "invalid value")
    return f"Invalid request body: {field}: {message}" if field else f"Invalid request body: {message}"


def register_exception_handlers(app: FastAPI, settings: Settings) -> None:
    """Install handlers for service, validation and persistence errors."""

    @app.exception_handler(ServiceError)
    async def handle_service_error(request: Request, exc: ServiceError):
        if isinstance(exc, ConfigError):
            logger.error(
                "config_error", path=request.url.path, method=request.method, message=exc.message
            )
            return _error_response(500, INTERNAL_ERROR_MESSAGE)

        log_fn = logger.error if exc.status_code >= 500 else logger.warning
        log_fn(
            "service_error",
            path=request.url.path,
            method=request.method,
            status_code=exc.status_code,
            error_code=exc.error_code,
            message=exc.message,
        )
        return _error_response(exc.status_code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError):
        message = _validation_message(exc)
        logger.info("request_validation_failed", path=request.url.path, message=message)
        return _error_response(400, message)

    async def handle_persistence_error(request: Request, exc: Exception):
        error = classify_persistence_error(exc, development=settings.is_development)
        logger.error(
            "persistence_error",
            path=request.url.path,
            method=request.method,
            status_code=error.status_code,
            error_type=type(exc).__name__,
            error=str(exc),
        )
        return _error_response(error.status_code, error.message)

    app.add_exception_handler(SQLAlchemyError, handle_persistence_error)
    app.add_exception_handler(ConnectionError, handle_persistence_error)
