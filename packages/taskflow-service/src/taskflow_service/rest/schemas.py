"""Pydantic request/response models for REST API."""

from __future__ import annotations

from datetime import date, datetime
from typing import Annotated
from uuid import UUID

from pydantic import AfterValidator, BaseModel, field_validator

from taskflow_service.models import (
    MemberView,
    Project,
    ProjectRole,
    SystemRole,
    Task,
    TaskPriority,
    TaskStatus,
    User,
)


def _normalize_email(v: str) -> str:
    v = v.strip()
    if "@" not in v or v.startswith("@") or v.endswith("@"):
        raise ValueError("Email must be a valid address")
    return v


# Stripped and minimally checked; shared by every request that carries an email.
Email = Annotated[str, AfterValidator(_normalize_email)]


# ---------------------------------------------------------------------------
# Auth
# ---------------------------------------------------------------------------


class RegisterRequest(BaseModel):
    email: Email
    password: str
    name: str

    @field_validator("password")
    @classmethod
    def password_min_length(cls, v: str) -> str:
        if len(v) < 8:
            raise ValueError("Password must be at least 8 characters")
        return v

    @field_validator("name")
    @classmethod
    def name_present(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Name is required")
        return v.strip()


class LoginRequest(BaseModel):
    email: Email
    password: str


class RefreshRequest(BaseModel):
    refresh_token: str


class UserSchema(BaseModel):
    id: str
    email: str
    name: str
    role: SystemRole
    created_at: datetime | None = None

    @classmethod
    def from_user(cls, user: User) -> UserSchema:
        return cls(
            id=str(user.id),
            email=user.email,
            name=user.name,
            role=user.system_role,
            created_at=user.created_at,
        )


class AuthResponse(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    user: UserSchema


class MessageResponse(BaseModel):
    message: str


# ---------------------------------------------------------------------------
# Projects and members
# ---------------------------------------------------------------------------


class ProjectRequest(BaseModel):
    name: str
    description: str = ""


class ProjectSchema(BaseModel):
    id: str
    name: str
    description: str
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_project(cls, project: Project) -> ProjectSchema:
        return cls(
            id=str(project.id),
            name=project.name,
            description=project.description,
            created_at=project.created_at,
            updated_at=project.updated_at,
        )


class InviteMemberRequest(BaseModel):
    email: Email
    # Validated by the service so the caller gets the assignable-role message.
    role: str


class UpdateMemberRoleRequest(BaseModel):
    role: str


class MemberSchema(BaseModel):
    project_id: str
    user_id: str
    role: ProjectRole
    joined_at: datetime | None = None
    user_name: str
    user_email: str

    @classmethod
    def from_member(cls, member: MemberView) -> MemberSchema:
        return cls(
            project_id=str(member.project_id),
            user_id=str(member.user_id),
            role=member.role,
            joined_at=member.joined_at,
            user_name=member.user_name,
            user_email=member.user_email,
        )


# ---------------------------------------------------------------------------
# Tasks
# ---------------------------------------------------------------------------


class TaskRequest(BaseModel):
    title: str
    description: str = ""
    status: TaskStatus = TaskStatus.TODO
    priority: TaskPriority = TaskPriority.MEDIUM
    due_date: date | None = None
    assigned_to: UUID | None = None


class CreateTaskRequest(TaskRequest):
    project_id: UUID | None = None


class TaskSchema(BaseModel):
    id: str
    project_id: str | None = None
    user_id: str
    title: str
    description: str
    status: TaskStatus
    priority: TaskPriority
    due_date: date | None = None
    assigned_to: str | None = None
    assignee_name: str | None = None
    assignee_email: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_task(cls, task: Task) -> TaskSchema:
        return cls(
            id=str(task.id),
            project_id=str(task.project_id) if task.project_id else None,
            user_id=str(task.user_id),
            title=task.title,
            description=task.description,
            status=task.status,
            priority=task.priority,
            due_date=task.due_date,
            assigned_to=str(task.assigned_to) if task.assigned_to else None,
            assignee_name=task.assignee_name,
            assignee_email=task.assignee_email,
            created_at=task.created_at,
            updated_at=task.updated_at,
        )

