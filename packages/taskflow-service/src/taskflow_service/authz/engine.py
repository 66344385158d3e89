"""Project access decisions backed by the membership store."""

from __future__ import annotations

from collections.abc import Collection
from uuid import UUID

import structlog

from taskflow_service.auth.models import Identity
from taskflow_service.authz.policy import ACTION_ROLES, READ_ACTIONS, Action, denial_message
from taskflow_service.db.store import ProjectStore, UserStore
from taskflow_service.errors import Forbidden, NotFound
from taskflow_service.models import ProjectRole, Task

logger = structlog.get_logger(__name__)


class AuthorizationEngine:
    """Resolves what a caller may do on a project.

    Each check reads the store at call time. Nothing is cached, and a role
    change racing with a check is not serialised against the guarded write.
    """

    def __init__(self, users: UserStore, projects: ProjectStore) -> None:
        self._users = users
        self._projects = projects

    async def is_system_admin(self, user_id: UUID) -> bool:
        try:
            user = await self._users.get_user_by_id(user_id)
        except NotFound:
            return False
        return user.is_admin

    async def project_role(self, user_id: UUID, project_id: UUID) -> ProjectRole | None:
        try:
            membership = await self._projects.get_membership(project_id, user_id)
        except NotFound:
            return None
        return membership.role

    async def has_access(self, user_id: UUID, project_id: UUID) -> bool:
        """System admin, or any membership row for the project."""
        if await self.is_system_admin(user_id):
            return True
        return await self.project_role(user_id, project_id) is not None

    async def has_role(
        self, user_id: UUID, project_id: UUID, allowed_roles: Collection[ProjectRole]
    ) -> bool:
        """System admin, or a membership whose role is in ``allowed_roles``."""
        if await self.is_system_admin(user_id):
            return True
        role = await self.project_role(user_id, project_id)
        return role is not None and role in allowed_roles

    async def authorize(self, identity: Identity, project_id: UUID, action: Action) -> None:
        """Raise Forbidden unless the caller may perform ``action`` on the project."""
        if action in READ_ACTIONS:
            allowed = await self.has_access(identity.user_id, project_id)
        else:
            allowed = await self.has_role(identity.user_id, project_id, ACTION_ROLES[action])
        if not allowed:
            logger.info(
                "authorization_denied",
                user_id=str(identity.user_id),
                project_id=str(project_id),
                action=action.value,
            )
            raise Forbidden(denial_message(action))

    async def require_system_admin(self, identity: Identity) -> None:
        if not await self.is_system_admin(identity.user_id):
            logger.info("admin_access_denied", user_id=str(identity.user_id))
            raise Forbidden("Admin access required")

    @staticmethod
    def require_task_owner(identity: Identity, task: Task) -> None:
        """Tasks are gated on the creating user alone.

        Project roles (Owner included) and the system-admin override play no
        part here; this is intentionally separate from project RBAC.
        """
        if task.user_id != identity.user_id:
            logger.info(
                "task_access_denied",
                user_id=str(identity.user_id),
                task_id=str(task.id),
                owner_id=str(task.user_id),
            )
            raise Forbidden("Access denied")
