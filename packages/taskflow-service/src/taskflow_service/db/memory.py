"""In-memory store for testing and development."""

from __future__ import annotations

import uuid
from dataclasses import replace
from datetime import UTC, date, datetime
from uuid import UUID

from taskflow_service.errors import Conflict, NotFound
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


def _now() -> datetime:
    return datetime.now(UTC)


class InMemoryStore:
    """Implements UserStore, ProjectStore and TaskStore with plain dicts."""

    def __init__(self) -> None:
        self._users: dict[UUID, User] = {}
        self._projects: dict[UUID, Project] = {}
        self._members: dict[tuple[UUID, UUID], Membership] = {}
        self._tasks: dict[UUID, Task] = {}

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------

    async def create_user(
        self, email: str, password_hash: str, name: str, system_role: SystemRole = SystemRole.USER
    ) -> User:
        if any(u.email == email for u in self._users.values()):
            raise Conflict("Email already exists")
        user = User(
            id=uuid.uuid4(),
            email=email,
            name=name,
            system_role=system_role,
            created_at=_now(),
            password_hash=password_hash,
        )
        self._users[user.id] = user
        return user

    async def get_user_by_id(self, user_id: UUID) -> User:
        try:
            return self._users[user_id]
        except KeyError:
            raise NotFound("User not found") from None

    async def get_user_by_email(self, email: str) -> User:
        for user in self._users.values():
            if user.email == email:
                return user
        raise NotFound("User not found")

    async def list_users(self) -> list[User]:
        return sorted(self._users.values(), key=lambda u: u.created_at, reverse=True)

    async def count_admins(self) -> int:
        return sum(1 for u in self._users.values() if u.is_admin)

    async def delete_user(self, user_id: UUID) -> None:
        if user_id not in self._users:
            raise NotFound("User not found")
        self._tasks = {k: t for k, t in self._tasks.items() if t.user_id != user_id}
        self._members = {k: m for k, m in self._members.items() if m.user_id != user_id}
        self._tasks = {
            k: replace(t, assigned_to=None) if t.assigned_to == user_id else t
            for k, t in self._tasks.items()
        }
        del self._users[user_id]

    # ------------------------------------------------------------------
    # Projects
    # ------------------------------------------------------------------

    async def create_project_with_owner(
        self, name: str, description: str, owner_id: UUID
    ) -> Project:
        # Validate before touching state so a failed grant leaves no project behind.
        await self.get_user_by_id(owner_id)
        now = _now()
        project = Project(
            id=uuid.uuid4(), name=name, description=description, created_at=now, updated_at=now
        )
        self._projects[project.id] = project
        self._members[(project.id, owner_id)] = Membership(
            project_id=project.id, user_id=owner_id, role=ProjectRole.OWNER, joined_at=now
        )
        return project

    async def get_project(self, project_id: UUID) -> Project:
        try:
            return self._projects[project_id]
        except KeyError:
            raise NotFound("Project not found") from None

    async def list_projects(self) -> list[Project]:
        return sorted(self._projects.values(), key=lambda p: p.created_at, reverse=True)

    async def list_projects_for_user(self, user_id: UUID) -> list[Project]:
        ids = {m.project_id for m in self._members.values() if m.user_id == user_id}
        return [p for p in await self.list_projects() if p.id in ids]

    async def update_project(self, project_id: UUID, name: str, description: str) -> Project:
        project = await self.get_project(project_id)
        updated = replace(project, name=name, description=description, updated_at=_now())
        self._projects[project_id] = updated
        return updated

    async def delete_project(self, project_id: UUID) -> None:
        await self.get_project(project_id)
        self._members = {k: m for k, m in self._members.items() if m.project_id != project_id}
        self._tasks = {k: t for k, t in self._tasks.items() if t.project_id != project_id}
        del self._projects[project_id]

    # ------------------------------------------------------------------
    # Memberships
    # ------------------------------------------------------------------

    async def get_membership(self, project_id: UUID, user_id: UUID) -> Membership:
        try:
            return self._members[(project_id, user_id)]
        except KeyError:
            raise NotFound("Membership not found") from None

    async def list_members(self, project_id: UUID) -> list[MemberView]:
        members = sorted(
            (m for m in self._members.values() if m.project_id == project_id),
            key=lambda m: m.joined_at,
        )
        views = []
        for m in members:
            user = self._users[m.user_id]
            views.append(
                MemberView(
                    project_id=m.project_id,
                    user_id=m.user_id,
                    role=m.role,
                    joined_at=m.joined_at,
                    user_name=user.name,
                    user_email=user.email,
                )
            )
        return views

    async def count_owners(self, project_id: UUID) -> int:
        return sum(
            1
            for m in self._members.values()
            if m.project_id == project_id and m.role is ProjectRole.OWNER
        )

    async def count_sole_owned_projects(self, user_id: UUID) -> int:
        owners: dict[UUID, list[UUID]] = {}
        for m in self._members.values():
            if m.role is ProjectRole.OWNER:
                owners.setdefault(m.project_id, []).append(m.user_id)
        return sum(1 for ids in owners.values() if ids == [user_id])

    async def upsert_membership(
        self, project_id: UUID, user_id: UUID, role: ProjectRole
    ) -> Membership:
        await self.get_project(project_id)
        await self.get_user_by_id(user_id)
        key = (project_id, user_id)
        existing = self._members.get(key)
        if existing is not None:
            membership = replace(existing, role=role)
        else:
            membership = Membership(
                project_id=project_id, user_id=user_id, role=role, joined_at=_now()
            )
        self._members[key] = membership
        return membership

    async def update_membership_role(
        self, project_id: UUID, user_id: UUID, role: ProjectRole
    ) -> bool:
        key = (project_id, user_id)
        existing = self._members.get(key)
        if existing is None:
            return False
        self._members[key] = replace(existing, role=role)
        return True

    async def delete_membership(self, project_id: UUID, user_id: UUID) -> bool:
        return self._members.pop((project_id, user_id), None) is not None

    # ------------------------------------------------------------------
    # Tasks
    # ------------------------------------------------------------------

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
        now = _now()
        task = Task(
            id=uuid.uuid4(),
            user_id=user_id,
            title=title,
            description=description,
            status=status,
            priority=priority,
            created_at=now,
            project_id=project_id,
            due_date=due_date,
            assigned_to=assigned_to,
            updated_at=now,
        )
        self._tasks[task.id] = task
        return task

    async def get_task(self, task_id: UUID) -> Task:
        try:
            return self._tasks[task_id]
        except KeyError:
            raise NotFound("Task not found") from None

    async def list_tasks_for_user(self, user_id: UUID) -> list[Task]:
        tasks = [t for t in self._tasks.values() if t.user_id == user_id]
        return sorted(tasks, key=lambda t: t.created_at, reverse=True)

    async def list_tasks_for_project(self, project_id: UUID) -> list[Task]:
        tasks = sorted(
            (t for t in self._tasks.values() if t.project_id == project_id),
            key=lambda t: t.created_at,
            reverse=True,
        )
        return [self._with_assignee(t) for t in tasks]

    def _with_assignee(self, task: Task) -> Task:
        assignee = self._users.get(task.assigned_to) if task.assigned_to else None
        if assignee is None:
            return task
        return replace(task, assignee_name=assignee.name, assignee_email=assignee.email)

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
        task = self._tasks.get(task_id)
        if task is None or task.user_id != user_id:
            return False
        self._tasks[task_id] = replace(
            task,
            title=title,
            description=description,
            status=status,
            priority=priority,
            due_date=due_date,
            assigned_to=assigned_to,
            updated_at=_now(),
        )
        return True

    async def delete_task(self, task_id: UUID, user_id: UUID) -> bool:
        task = self._tasks.get(task_id)
        if task is None or task.user_id != user_id:
            return False
        del self._tasks[task_id]
        return True
