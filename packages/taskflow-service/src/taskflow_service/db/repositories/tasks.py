"""Repository for tasks."""

from __future__ import annotations

from datetime import date
from uuid import UUID

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from taskflow_service.db.models import TaskModel, UserModel
from taskflow_service.errors import NotFound
from taskflow_service.models import Task, TaskPriority, TaskStatus


def _to_task(
    row: TaskModel, assignee_name: str | None = None, assignee_email: str | None = None
) -> Task:
    return Task(
        id=row.id,
        user_id=row.user_id,
        title=row.title,
        description=row.description,
        status=TaskStatus(row.status),
        priority=TaskPriority(row.priority),
        created_at=row.created_at,
        project_id=row.project_id,
        due_date=row.due_date,
        assigned_to=row.assigned_to,
        assignee_name=assignee_name,
        assignee_email=assignee_email,
        updated_at=row.updated_at,
    )


class TasksRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

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
    ) -> Task:
        task = TaskModel(
            user_id=user_id,
            title=title,
            description=description,
            status=status.value,
            priority=priority.value,
            project_id=project_id,
            due_date=due_date,
            assigned_to=assigned_to,
        )
        self._session.add(task)
        await self._session.commit()
        await self._session.refresh(task)
        return _to_task(task)

    async def get_task(self, task_id: UUID) -> Task:
        row = await self._session.get(TaskModel, task_id)
        if row is None:
            raise NotFound("Task not found")
        # The row may be cached from an earlier write in this session.
        await self._session.refresh(row)
        return _to_task(row)

    async def list_tasks_for_user(self, user_id: UUID) -> list[Task]:
        result = await self._session.execute(
            select(TaskModel)
            .where(TaskModel.user_id == user_id)
            .order_by(TaskModel.created_at.desc())
        )
        return [_to_task(row) for row in result.scalars().all()]

    async def list_tasks_for_project(self, project_id: UUID) -> list[Task]:
        result = await self._session.execute(
            select(TaskModel, UserModel.name, UserModel.email)
            .outerjoin(UserModel, UserModel.id == TaskModel.assigned_to)
            .where(TaskModel.project_id == project_id)
            .order_by(TaskModel.created_at.desc())
        )
        return [_to_task(row, name, email) for row, name, email in result.all()]

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
        result = await self._session.execute(
            update(TaskModel)
            .where(TaskModel.id == task_id, TaskModel.user_id == user_id)
            .values(
                title=title,
                description=description,
                status=status.value,
                priority=priority.value,
                due_date=due_date,
                assigned_to=assigned_to,
            )
        )
        await self._session.commit()
        return result.rowcount > 0

    async def delete_task(self, task_id: UUID, user_id: UUID) -> bool:
        result = await self._session.execute(
            delete(TaskModel).where(TaskModel.id == task_id, TaskModel.user_id == user_id)
        )
        await self._session.commit()
        return result.rowcount > 0
