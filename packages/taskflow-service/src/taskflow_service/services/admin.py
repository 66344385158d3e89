"""System-admin user management."""

from __future__ import annotations

from uuid import UUID

import structlog

from taskflow_service.auth.models import Identity
from taskflow_service.authz.engine import AuthorizationEngine
from taskflow_service.db.store import ProjectStore, UserStore
from taskflow_service.errors import BadRequest, Conflict
from taskflow_service.models import User

logger = structlog.get_logger(__name__)


class AdminService:
    def __init__(
        self, users: UserStore, projects: ProjectStore, authz: AuthorizationEngine
    ) -> None:
        self._users = users
        self._projects = projects
        self._authz = authz

    async def list_users(self, identity: Identity) -> list[User]:
        await self._authz.require_system_admin(identity)
        users = await self._users.list_users()
        logger.info("admin_users_listed", count=len(users), admin_id=str(identity.user_id))
        return users

    async def delete_user(self, identity: Identity, user_id: UUID) -> None:
        """Delete an account together with its tasks and memberships.

        An admin cannot delete their own account here. The guard compares
        identities, not roles. A user who is the only PO of a project is
        refused, so no project is left without an Owner.
        """
        await self._authz.require_system_admin(identity)
        if user_id == identity.user_id:
            logger.warning("admin_self_delete_blocked", admin_id=str(identity.user_id))
            raise BadRequest("Cannot delete your own account")

        owned = await self._projects.count_sole_owned_projects(user_id)
        if owned:
            logger.warning(
                "admin_delete_blocked_sole_owner",
                user_id=str(user_id),
                projects=owned,
                admin_id=str(identity.user_id),
            )
            raise Conflict(
                f"User is the only owner of {owned} project(s); "
                "delete those projects or transfer ownership first"
            )

        await self._users.delete_user(user_id)
        logger.info("admin_user_deleted", user_id=str(user_id), admin_id=str(identity.user_id))
