"""FastAPI application factory."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from taskflow_service.auth.tokens import TokenService
from taskflow_service.db.deps import get_project_store, get_task_store, get_user_store
from taskflow_service.db.engine import close_db, init_db
from taskflow_service.db.memory import InMemoryStore
from taskflow_service.rest.errors import register_exception_handlers
from taskflow_service.rest.routes.admin import router as admin_router
from taskflow_service.rest.routes.auth import router as auth_router
from taskflow_service.rest.routes.health import router as health_router
from taskflow_service.rest.routes.projects import router as projects_router
from taskflow_service.rest.routes.tasks import router as tasks_router
from taskflow_service.settings import Settings, get_settings


def create_app(settings: Settings | None = None, store: InMemoryStore | None = None) -> FastAPI:
    """Build the API.

    With ``store`` given every store dependency resolves to it and no
    database is opened; otherwise the SQLAlchemy engine is initialised in
    the lifespan.
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if store is None:
            await init_db(settings)
        yield
        if store is None:
            await close_db()

    app = FastAPI(
        title="Taskflow API",
        description="Multi-tenant task and project management service",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.store = store
    app.state.token_service = TokenService(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )
    register_exception_handlers(app, settings)

    if store is not None:
        app.dependency_overrides[get_user_store] = lambda: store
        app.dependency_overrides[get_project_store] = lambda: store
        app.dependency_overrides[get_task_store] = lambda: store

    # Public routes
    app.include_router(health_router, tags=["health"])

    # register/login/refresh are public; everything else requires a bearer token
    app.include_router(auth_router, prefix="/api", tags=["auth"])

    app.include_router(projects_router, prefix="/api", tags=["projects"])
    app.include_router(tasks_router, prefix="/api", tags=["tasks"])
    app.include_router(admin_router, prefix="/api", tags=["admin"])

    return app
