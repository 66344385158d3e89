"""Protocols for the persistence collaborators.

Reads raise ``NotFound`` when the record is absent. Each write is atomic
per call; there is no transaction spanning an authorization check and the
write it guards.
"""

from __future__ import annotations

from datetime import date
from typing import Protocol
from uuid import UUID

from taskflow_service.models import (
    MemberView,
    Membership,
    Project,
    ProjectRole,
    SystemRole,
    Task,
    TaskPriority,
    TaskStatus,
    User,
)


class UserStore(Protocol):
    """Backend interface for user accounts."""

    async def create_user(
        self, email: str, password_hash: str, name: str, system_role: SystemRole = SystemRole.USER
    ) -> User: ...
    async def get_user_by_id(self, user_id: UUID) -> User: ...
    async def get_user_by_email(self, email: str) -> User: ...
    async def list_users(self) -> list[User]: ...
    async def count_admins(self) -> int: ...
    async def delete_user(self, user_id: UUID) -> None:
        """Remove the user's tasks, then memberships, then the user row."""
        ...


class ProjectStore(Protocol):
    """Backend interface for projects and their memberships."""

    async def create_project_with_owner(
        self, name: str, description: str, owner_id: UUID
    ) -> Project:
        """Create the project and its Owner membership as one unit."""
        ...
    async def get_project(self, project_id: UUID) -> Project: ...
    async def list_projects(self) -> list[Project]: ...
    async def list_projects_for_user(self, user_id: UUID) -> list[Project]: ...
    async def update_project(self, project_id: UUID, name: str, description: str) -> Project: ...
    async def delete_project(self, project_id: UUID) -> None: ...
    async def get_membership(self, project_id: UUID, user_id: UUID) -> Membership: ...
    async def list_members(self, project_id: UUID) -> list[MemberView]: ...
    async def count_owners(self, project_id: UUID) -> int: ...
    async def count_sole_owned_projects(self, user_id: UUID) -> int:
        """Number of projects where the user is the only PO."""
        ...
    async def upsert_membership(
        self, project_id: UUID, user_id: UUID, role: ProjectRole
    ) -> Membership: ...
    async def update_membership_role(
        self, project_id: UUID, user_id: UUID, role: ProjectRole
    ) -> bool:
        """Return True if a membership row was changed."""
        ...
    async def delete_membership(self, project_id: UUID, user_id: UUID) -> bool:
        """Return True if a membership row was removed."""
        ...


class TaskStore(Protocol):
    """Backend interface for tasks."""

    async def create_task(
        self,
        user_id: UUID,
        title: str,
        description: str,
        status: TaskStatus,
        priority: TaskPriority,
        project_id: UUID | None = None,
        due_date: date | None = None,
        assigned_to: UUID | None = None,
    ) -> Task: ...
    async def get_task(self, task_id: UUID) -> Task: ...
    async def list_tasks_for_user(self, user_id: UUID) -> list[Task]: ...
    async def list_tasks_for_project(self, project_id: UUID) -> list[Task]: ...
    async def update_task(
        self,
        task_id: UUID,
        user_id: UUID,
        title: str,
        description: str,
        status: TaskStatus,
        priority: TaskPriority,
        due_date: date | None = None,
        assigned_to: UUID | None = None,
    ) -> bool:
        """Return True if a task created by ``user_id`` was changed."""
        ...
    async def delete_task(self, task_id: UUID, user_id: UUID) -> bool:
        """Return True if a task created by ``user_id`` was removed."""
        ...
