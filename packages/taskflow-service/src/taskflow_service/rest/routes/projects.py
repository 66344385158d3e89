"""Project and membership endpoints."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Response

from taskflow_service.auth.session import CurrentUserDep
from taskflow_service.rest.deps import ProjectServiceDep, TaskServiceDep
from taskflow_service.rest.schemas import (
    InviteMemberRequest,
    MemberSchema,
    MessageResponse,
    ProjectRequest,
    ProjectSchema,
    TaskSchema,
    UpdateMemberRoleRequest,
)

router = APIRouter(prefix="/projects", tags=["projects"])


@router.get("", response_model=list[ProjectSchema])
async def list_projects(
    current_user: CurrentUserDep, service: ProjectServiceDep
) -> list[ProjectSchema]:
    projects = await service.list_projects(current_user)
    return [ProjectSchema.from_project(p) for p in projects]


@router.post("", response_model=ProjectSchema, status_code=201)
async def create_project(
    request: ProjectRequest, current_user: CurrentUserDep, service: ProjectServiceDep
) -> ProjectSchema:
    """Create a project; the caller becomes its Owner."""
    project = await service.create_project(current_user, request.name, request.description)
    return ProjectSchema.from_project(project)


@router.get("/{project_id}", response_model=ProjectSchema)
async def get_project(
    project_id: UUID, current_user: CurrentUserDep, service: ProjectServiceDep
) -> ProjectSchema:
    return ProjectSchema.from_project(await service.get_project(current_user, project_id))


@router.put("/{project_id}", response_model=ProjectSchema)
async def update_project(
    project_id: UUID,
    request: ProjectRequest,
    current_user: CurrentUserDep,
    service: ProjectServiceDep,
) -> ProjectSchema:
    project = await service.update_project(
        current_user, project_id, request.name, request.description
    )
    return ProjectSchema.from_project(project)


@router.delete("/{project_id}", status_code=204)
async def delete_project(
    project_id: UUID, current_user: CurrentUserDep, service: ProjectServiceDep
) -> Response:
    await service.delete_project(current_user, project_id)
    return Response(status_code=204)


@router.get("/{project_id}/members", response_model=list[MemberSchema])
async def list_members(
    project_id: UUID, current_user: CurrentUserDep, service: ProjectServiceDep
) -> list[MemberSchema]:
    members = await service.list_members(current_user, project_id)
    return [MemberSchema.from_member(m) for m in members]


@router.post("/{project_id}/invite", response_model=MessageResponse)
async def invite_member(
    project_id: UUID,
    request: InviteMemberRequest,
    current_user: CurrentUserDep,
    service: ProjectServiceDep,
) -> MessageResponse:
    """Add an existing user to the project as PM, Member or Viewer."""
    await service.invite_member(current_user, project_id, request.email, request.role)
    return MessageResponse(message="Member added successfully")


@router.put("/{project_id}/members/{user_id}", response_model=MessageResponse)
async def update_member_role(
    project_id: UUID,
    user_id: UUID,
    request: UpdateMemberRoleRequest,
    current_user: CurrentUserDep,
    service: ProjectServiceDep,
) -> MessageResponse:
    await service.update_member_role(current_user, project_id, user_id, request.role)
    return MessageResponse(message="Role updated successfully")


@router.delete("/{project_id}/members/{user_id}", status_code=204)
async def remove_member(
    project_id: UUID,
    user_id: UUID,
    current_user: CurrentUserDep,
    service: ProjectServiceDep,
) -> Response:
    await service.remove_member(current_user, project_id, user_id)
    return Response(status_code=204)


@router.get("/{project_id}/tasks", response_model=list[TaskSchema])
async def list_project_tasks(
    project_id: UUID, current_user: CurrentUserDep, service: TaskServiceDep
) -> list[TaskSchema]:
    tasks = await service.list_project_tasks(current_user, project_id)
    return [TaskSchema.from_task(t) for t in tasks]
