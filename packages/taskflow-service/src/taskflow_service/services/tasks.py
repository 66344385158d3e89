"""Task operations.

Reading or mutating a single task is gated on ``task.user_id`` (the
creator) alone. Project roles do not apply: a project Owner cannot edit or
delete a task another member created. This is kept separate from project
RBAC on purpose.
"""

from __future__ import annotations

from datetime import date
from uuid import UUID

import structlog

from taskflow_service.auth.models import Identity
from taskflow_service.authz.engine import AuthorizationEngine
from taskflow_service.authz.policy import Action
from taskflow_service.db.store import ProjectStore, TaskStore
from taskflow_service.errors import BadRequest, NotFound
from taskflow_service.models import Task, TaskPriority, TaskStatus

logger = structlog.get_logger(__name__)


class TaskService:
    def __init__(
        self, tasks: TaskStore, projects: ProjectStore, authz: AuthorizationEngine
    ) -> None:
        self._tasks = tasks
        self._projects = projects
        self._authz = authz

    async def list_tasks(self, identity: Identity) -> list[Task]:
        """Tasks created by the caller."""
        return await self._tasks.list_tasks_for_user(identity.user_id)

    async def list_project_tasks(self, identity: Identity, project_id: UUID) -> list[Task]:
        await self._projects.get_project(project_id)
        await self._authz.authorize(identity, project_id, Action.VIEW_PROJECT)
        return await self._tasks.list_tasks_for_project(project_id)

    async def create_task(
        self,
        identity: Identity,
        title: str,
        description: str = "",
        status: TaskStatus = TaskStatus.TODO,
        priority: TaskPriority = TaskPriority.MEDIUM,
        project_id: UUID | None = None,
        due_date: date | None = None,
        assigned_to: UUID | None = None,
    ) -> Task:
        if not title.strip():
            raise BadRequest("Title is required")
        if project_id is not None:
            await self._projects.get_project(project_id)
            await self._authz.authorize(identity, project_id, Action.VIEW_PROJECT)
        await self._check_assignee(project_id, assigned_to)

        task = await self._tasks.create_task(
            user_id=identity.user_id,
            title=title,
            description=description,
            status=status,
            priority=priority,
            project_id=project_id,
            due_date=due_date,
            assigned_to=assigned_to,
        )
        logger.info("task_created", task_id=str(task.id), user_id=str(identity.user_id))
        return task

    async def get_task(self, identity: Identity, task_id: UUID) -> Task:
        task = await self._tasks.get_task(task_id)
        self._authz.require_task_owner(identity, task)
        return task

    async def update_task(
        self,
        identity: Identity,
        task_id: UUID,
        title: str,
        description: str,
        status: TaskStatus,
        priority: TaskPriority,
        due_date: date | None = None,
        assigned_to: UUID | None = None,
    ) -> Task:
        existing = await self.get_task(identity, task_id)
        if not title.strip():
            raise BadRequest("Title is required")
        await self._check_assignee(existing.project_id, assigned_to)

        changed = await self._tasks.update_task(
            task_id,
            user_id=identity.user_id,
            title=title,
            description=description,
            status=status,
            priority=priority,
            due_date=due_date,
            assigned_to=assigned_to,
        )
        if not changed:
            # Deleted between the ownership check and the write.
            raise NotFound("Task not found")
        return await self._tasks.get_task(task_id)

    async def delete_task(self, identity: Identity, task_id: UUID) -> None:
        await self.get_task(identity, task_id)
        if not await self._tasks.delete_task(task_id, identity.user_id):
            raise NotFound("Task not found")
        logger.info("task_deleted", task_id=str(task_id), user_id=str(identity.user_id))

    async def _check_assignee(self, project_id: UUID | None, assigned_to: UUID | None) -> None:
        if assigned_to is None:
            return
        if project_id is None:
            raise BadRequest("Only project tasks can be assigned")
        if await self._authz.project_role(assigned_to, project_id) is None:
            raise BadRequest("Assignee must be a member of the project")
