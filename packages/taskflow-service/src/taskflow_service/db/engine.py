"""Async SQLAlchemy engine and session factory."""

from __future__ import annotations

import structlog
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from taskflow_service.db.models import Base
from taskflow_service.settings import Settings

logger = structlog.get_logger(__name__)

_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None


async def init_db(settings: Settings) -> None:
    global _engine, _session_factory
    options = {} if settings.database_url.startswith("sqlite") else {"pool_size": 10}
    _engine = create_async_engine(settings.database_url, echo=False, **options)
    _session_factory = async_sessionmaker(_engine, class_=AsyncSession, expire_on_commit=False)
    if settings.auto_create_schema:
        await create_schema(_engine)
    logger.info("db_initialized", auto_create_schema=settings.auto_create_schema)


async def create_schema(engine: AsyncEngine) -> None:
    """Create missing tables. For development and tests; not a migration tool."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def close_db() -> None:
    global _engine, _session_factory
    if _engine:
        await _engine.dispose()
    _engine = None
    _session_factory = None


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    if _session_factory is None:
        raise RuntimeError("Database not initialized. Call init_db() first.")
    return _session_factory
