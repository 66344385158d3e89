"""FastAPI dependency injection for database sessions and stores."""

from __future__ import annotations

from collections.abc import AsyncIterator
from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from taskflow_service.db.engine import get_session_factory
from taskflow_service.db.repositories.projects import ProjectsRepo
from taskflow_service.db.repositories.tasks import TasksRepo
from taskflow_service.db.repositories.users import UsersRepo
from taskflow_service.db.store import ProjectStore, TaskStore, UserStore


async def get_session() -> AsyncIterator[AsyncSession]:
    """Yield an async DB session, auto-closing on exit."""
    factory = get_session_factory()
    async with factory() as session:
        yield session


SessionDep = Annotated[AsyncSession, Depends(get_session)]


def get_user_store(session: SessionDep) -> UserStore:
    return UsersRepo(session)


def get_project_store(session: SessionDep) -> ProjectStore:
    return ProjectsRepo(session)


def get_task_store(session: SessionDep) -> TaskStore:
    return TasksRepo(session)


UserStoreDep = Annotated[UserStore, Depends(get_user_store)]
ProjectStoreDep = Annotated[ProjectStore, Depends(get_project_store)]
TaskStoreDep = Annotated[TaskStore, Depends(get_task_store)]
