"""Domain records shared by the stores, services and REST layer."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from uuid import UUID


class SystemRole(str, Enum):
    """Global role. ADMIN bypasses every project-level check."""

    USER = "user"
    ADMIN = "admin"


class ProjectRole(str, Enum):
    """Role of a user inside one project."""

    OWNER = "PO"
    MANAGER = "PM"
    MEMBER = "Member"
    VIEWER = "Viewer"


class TaskStatus(str, Enum):
    TODO = "todo"
    IN_PROGRESS = "in-progress"
    DONE = "done"


class TaskPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass(frozen=True)
class User:
    id: UUID
    email: str
    name: str
    system_role: SystemRole
    created_at: datetime
    password_hash: str = ""

    @property
    def is_admin(self) -> bool:
        return self.system_role is SystemRole.ADMIN


@dataclass(frozen=True)
class Project:
    id: UUID
    name: str
    description: str
    created_at: datetime
    updated_at: datetime | None = None


@dataclass(frozen=True)
class Membership:
    project_id: UUID
    user_id: UUID
    role: ProjectRole
    joined_at: datetime


@dataclass(frozen=True)
class MemberView:
    """A membership joined with the member's display fields."""

    project_id: UUID
    user_id: UUID
    role: ProjectRole
    joined_at: datetime
    user_name: str
    user_email: str


@dataclass(frozen=True)
class Task:
    id: UUID
    user_id: UUID  # creator; the only identity allowed to read or mutate the task
    title: str
    description: str
    status: TaskStatus
    priority: TaskPriority
    created_at: datetime
    project_id: UUID | None = None
    due_date: date | None = None
    assigned_to: UUID | None = None
    assignee_name: str | None = None
    assignee_email: str | None = None
    updated_at: datetime | None = None
