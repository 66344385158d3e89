"""Health check endpoints."""

import structlog
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from taskflow_service.db.engine import get_session_factory

logger = structlog.get_logger(__name__)

router = APIRouter()


@router.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok", "service": "taskflow"}


@router.get("/health/ready")
async def ready(request: Request) -> JSONResponse:
    """Ready once the persistence backend answers a trivial query."""
    if request.app.state.store is not None:
        return JSONResponse({"status": "ready", "store": "memory"})
    try:
        async with get_session_factory()() as session:
            await session.execute(text("SELECT 1"))
    except (RuntimeError, SQLAlchemyError, ConnectionError) as exc:
        logger.warning("readiness_check_failed", error_type=type(exc).__name__)
        return JSONResponse({"status": "unavailable"}, status_code=503)
    return JSONResponse({"status": "ready", "store": "database"})
