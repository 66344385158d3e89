"""Task endpoints. Access to a single task is limited to its creator."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Response

from taskflow_service.auth.session import CurrentUserDep
from taskflow_service.rest.deps import TaskServiceDep
from taskflow_service.rest.schemas import CreateTaskRequest, TaskRequest, TaskSchema

router = APIRouter(prefix="/tasks", tags=["tasks"])


@router.get("", response_model=list[TaskSchema])
async def list_tasks(current_user: CurrentUserDep, service: TaskServiceDep) -> list[TaskSchema]:
    return [TaskSchema.from_task(t) for t in await service.list_tasks(current_user)]


@router.post("", response_model=TaskSchema, status_code=201)
async def create_task(
    request: CreateTaskRequest, current_user: CurrentUserDep, service: TaskServiceDep
) -> TaskSchema:
    task = await service.create_task(
        current_user,
        title=request.title,
        description=request.description,
        status=request.status,
        priority=request.priority,
        project_id=request.project_id,
        due_date=request.due_date,
        assigned_to=request.assigned_to,
    )
    return TaskSchema.from_task(task)


@router.get("/{task_id}", response_model=TaskSchema)
async def get_task(
    task_id: UUID, current_user: CurrentUserDep, service: TaskServiceDep
) -> TaskSchema:
    return TaskSchema.from_task(await service.get_task(current_user, task_id))


@router.put("/{task_id}", response_model=TaskSchema)
async def update_task(
    task_id: UUID, request: TaskRequest, current_user: CurrentUserDep, service: TaskServiceDep
) -> TaskSchema:
    task = await service.update_task(
        current_user,
        task_id,
        title=request.title,
        description=request.description,
        status=request.status,
        priority=request.priority,
        due_date=request.due_date,
        assigned_to=request.assigned_to,
    )
    return TaskSchema.from_task(task)


@router.delete("/{task_id}", status_code=204)
async def delete_task(
    task_id: UUID, current_user: CurrentUserDep, service: TaskServiceDep
) -> Response:
    await service.delete_task(current_user, task_id)
    return Response(status_code=204)
