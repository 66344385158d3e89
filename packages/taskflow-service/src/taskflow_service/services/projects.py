"""Projects and the membership lifecycle.

A membership is created when a project is created (creator becomes PO, in
the same unit as the project row) or by invitation (PM, Member or Viewer).
It changes only through an Owner-initiated role update (never to PO) and
ends through explicit removal or deletion of the user account. A user who
is the last PO of a project cannot be deleted.
"""

from __future__ import annotations

from uuid import UUID

import structlog

from taskflow_service.auth.models import Identity
from taskflow_service.authz.engine import AuthorizationEngine
from taskflow_service.authz.policy import Action, parse_assignable_role
from taskflow_service.db.store import ProjectStore, UserStore
from taskflow_service.errors import BadRequest, Conflict, NotFound
from taskflow_service.models import MemberView, Membership, Project, ProjectRole

logger = structlog.get_logger(__name__)


class ProjectService:
    def __init__(
        self, users: UserStore, projects: ProjectStore, authz: AuthorizationEngine
    ) -> None:
        self._users = users
        self._projects = projects
        self._authz = authz

    # ------------------------------------------------------------------
    # Projects
    # ------------------------------------------------------------------

    async def create_project(self, identity: Identity, name: str, description: str = "") -> Project:
        """Create a project owned by the caller.

        If the Owner grant fails the whole creation fails; the store never
        keeps a project without its Owner.
        """
        if not name.strip():
            raise BadRequest("Project name is required")
        project = await self._projects.create_project_with_owner(
            name=name, description=description, owner_id=identity.user_id
        )
        logger.info("project_created", project_id=str(project.id), owner_id=str(identity.user_id))
        return project

    async def list_projects(self, identity: Identity) -> list[Project]:
        """System admins see every project; everyone else sees their memberships."""
        if await self._authz.is_system_admin(identity.user_id):
            return await self._projects.list_projects()
        return await self._projects.list_projects_for_user(identity.user_id)

    async def get_project(self, identity: Identity, project_id: UUID) -> Project:
        project = await self._projects.get_project(project_id)
        await self._authz.authorize(identity, project_id, Action.VIEW_PROJECT)
        return project

    async def update_project(
        self, identity: Identity, project_id: UUID, name: str, description: str
    ) -> Project:
        await self._authz.authorize(identity, project_id, Action.UPDATE_PROJECT)
        return await self._projects.update_project(project_id, name=name, description=description)

    async def delete_project(self, identity: Identity, project_id: UUID) -> None:
        await self._authz.authorize(identity, project_id, Action.DELETE_PROJECT)
        await self._projects.delete_project(project_id)
        logger.info("project_deleted", project_id=str(project_id), by=str(identity.user_id))

    # ------------------------------------------------------------------
    # Memberships
    # ------------------------------------------------------------------

    async def list_members(self, identity: Identity, project_id: UUID) -> list[MemberView]:
        await self._authz.authorize(identity, project_id, Action.LIST_MEMBERS)
        return await self._projects.list_members(project_id)

    async def invite_member(
        self, identity: Identity, project_id: UUID, email: str, role: str | ProjectRole
    ) -> Membership:
        """Add an existing user to the project.

        The invitee must already have an account; no placeholder user is
        ever created. Inviting someone who is already a member is a
        conflict rather than a silent role change.
        """
        await self._authz.authorize(identity, project_id, Action.INVITE_MEMBER)
        invited_role = parse_assignable_role(role)
        invited = await self._users.get_user_by_email(email)

        if await self._authz.project_role(invited.id, project_id) is not None:
            raise Conflict("User is already a member of this project")

        membership = await self._projects.upsert_membership(project_id, invited.id, invited_role)
        logger.info(
            "member_invited",
            project_id=str(project_id),
            user_id=str(invited.id),
            role=invited_role.value,
            by=str(identity.user_id),
        )
        return membership

    async def update_member_role(
        self, identity: Identity, project_id: UUID, member_id: UUID, role: str | ProjectRole
    ) -> None:
        await self._authz.authorize(identity, project_id, Action.UPDATE_MEMBER_ROLE)
        new_role = parse_assignable_role(role)
        await self._guard_last_owner(project_id, member_id)

        if not await self._projects.update_membership_role(project_id, member_id, new_role):
            raise NotFound("Membership not found")
        logger.info(
            "member_role_updated",
            project_id=str(project_id),
            user_id=str(member_id),
            role=new_role.value,
            by=str(identity.user_id),
        )

    async def remove_member(self, identity: Identity, project_id: UUID, member_id: UUID) -> None:
        await self._authz.authorize(identity, project_id, Action.REMOVE_MEMBER)
        await self._guard_last_owner(project_id, member_id)

        if not await self._projects.delete_membership(project_id, member_id):
            raise NotFound("Membership not found")
        logger.info(
            "member_removed",
            project_id=str(project_id),
            user_id=str(member_id),
            by=str(identity.user_id),
        )

    async def _guard_last_owner(self, project_id: UUID, user_id: UUID) -> None:
        # A project must keep at least one Owner through membership edits.
        if await self._authz.project_role(user_id, project_id) is not ProjectRole.OWNER:
            return
        if await self._projects.count_owners(project_id) <= 1:
            raise BadRequest("Cannot remove or demote the last project owner")
