"""FastAPI dependency injection for services.

Stores resolve through ``taskflow_service.db.deps``; within one request
every service shares the same session.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends

from taskflow_service.auth.session import TokenServiceDep
from taskflow_service.authz.engine import AuthorizationEngine
from taskflow_service.db.deps import ProjectStoreDep, TaskStoreDep, UserStoreDep
from taskflow_service.services.admin import AdminService
from taskflow_service.services.auth import AuthService
from taskflow_service.services.projects import ProjectService
from taskflow_service.services.tasks import TaskService


def get_authz(users: UserStoreDep, projects: ProjectStoreDep) -> AuthorizationEngine:
    return AuthorizationEngine(users, projects)


AuthzDep = Annotated[AuthorizationEngine, Depends(get_authz)]


def get_auth_service(users: UserStoreDep, tokens: TokenServiceDep) -> AuthService:
    return AuthService(users, tokens)


def get_project_service(
    users: UserStoreDep, projects: ProjectStoreDep, authz: AuthzDep
) -> ProjectService:
    return ProjectService(users, projects, authz)


def get_task_service(
    tasks: TaskStoreDep, projects: ProjectStoreDep, authz: AuthzDep
) -> TaskService:
    return TaskService(tasks, projects, authz)


def get_admin_service(
    users: UserStoreDep, projects: ProjectStoreDep, authz: AuthzDep
) -> AdminService:
    return AdminService(users, projects, authz)


AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]
ProjectServiceDep = Annotated[ProjectService, Depends(get_project_service)]
TaskServiceDep = Annotated[TaskService, Depends(get_task_service)]
AdminServiceDep = Annotated[AdminService, Depends(get_admin_service)]
