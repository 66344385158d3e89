"""Repository for projects and their memberships."""

from __future__ import annotations

from uuid import UUID

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from taskflow_service.db.models import ProjectMemberModel, ProjectModel, TaskModel, UserModel
from taskflow_service.errors import NotFound
from taskflow_service.models import MemberView, Membership, Project, ProjectRole


def _to_project(row: ProjectModel) -> Project:
    return Project(
        id=row.id,
        name=row.name,
        description=row.description,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _to_membership(row: ProjectMemberModel) -> Membership:
    return Membership(
        project_id=row.project_id,
        user_id=row.user_id,
        role=ProjectRole(row.role),
        joined_at=row.joined_at,
    )


class ProjectsRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create_project_with_owner(
        self, name: str, description: str, owner_id: UUID
    ) -> Project:
        """Insert the project and the owner's PO membership in a single commit.

        If the membership insert fails the project row is rolled back too.
        """
        project = ProjectModel(name=name, description=description)
        try:
            self._session.add(project)
            await self._session.flush()
            self._session.add(
                ProjectMemberModel(
                    project_id=project.id, user_id=owner_id, role=ProjectRole.OWNER.value
                )
            )
            await self._session.flush()
        except Exception:
            await self._session.rollback()
            raise
        await self._session.commit()
        await self._session.refresh(project)
        return _to_project(project)

    async def get_project(self, project_id: UUID) -> Project:
        row = await self._session.get(ProjectModel, project_id)
        if row is None:
            raise NotFound("Project not found")
        return _to_project(row)

    async def list_projects(self) -> list[Project]:
        result = await self._session.execute(
            select(ProjectModel).order_by(ProjectModel.created_at.desc())
        )
        return [_to_project(row) for row in result.scalars().all()]

    async def list_projects_for_user(self, user_id: UUID) -> list[Project]:
        result = await self._session.execute(
            select(ProjectModel)
            .join(ProjectMemberModel, ProjectMemberModel.project_id == ProjectModel.id)
            .where(ProjectMemberModel.user_id == user_id)
            .order_by(ProjectModel.created_at.desc())
        )
        return [_to_project(row) for row in result.scalars().all()]

    async def update_project(self, project_id: UUID, name: str, description: str) -> Project:
        row = await self._session.get(ProjectModel, project_id)
        if row is None:
            raise NotFound("Project not found")
        row.name = name
        row.description = description
        await self._session.commit()
        await self._session.refresh(row)
        return _to_project(row)

    async def delete_project(self, project_id: UUID) -> None:
        try:
            await self._session.execute(delete(TaskModel).where(TaskModel.project_id == project_id))
            await self._session.execute(
                delete(ProjectMemberModel).where(ProjectMemberModel.project_id == project_id)
            )
            result = await self._session.execute(
                delete(ProjectModel).where(ProjectModel.id == project_id)
            )
            if result.rowcount == 0:
                raise NotFound("Project not found")
        except Exception:
            await self._session.rollback()
            raise
        await self._session.commit()

    async def get_membership(self, project_id: UUID, user_id: UUID) -> Membership:
        result = await self._session.execute(
            select(ProjectMemberModel).where(
                ProjectMemberModel.project_id == project_id,
                ProjectMemberModel.user_id == user_id,
            )
        )
        row = result.scalars().first()
        if row is None:
            raise NotFound("Membership not found")
        return _to_membership(row)

    async def list_members(self, project_id: UUID) -> list[MemberView]:
        result = await self._session.execute(
            select(ProjectMemberModel, UserModel.name, UserModel.email)
            .join(UserModel, UserModel.id == ProjectMemberModel.user_id)
            .where(ProjectMemberModel.project_id == project_id)
            .order_by(ProjectMemberModel.joined_at)
        )
        return [
            MemberView(
                project_id=member.project_id,
                user_id=member.user_id,
                role=ProjectRole(member.role),
                joined_at=member.joined_at,
                user_name=name,
                user_email=email,
            )
            for member, name, email in result.all()
        ]

    async def count_owners(self, project_id: UUID) -> int:
        result = await self._session.execute(
            select(func.count())
            .select_from(ProjectMemberModel)
            .where(
                ProjectMemberModel.project_id == project_id,
                ProjectMemberModel.role == ProjectRole.OWNER.value,
            )
        )
        return result.scalar_one()

    async def count_sole_owned_projects(self, user_id: UUID) -> int:
        single_owner = (
            select(ProjectMemberModel.project_id)
            .where(ProjectMemberModel.role == ProjectRole.OWNER.value)
            .group_by(ProjectMemberModel.project_id)
            .having(func.count() == 1)
            .subquery()
        )
        result = await self._session.execute(
            select(func.count())
            .select_from(ProjectMemberModel)
            .join(single_owner, single_owner.c.project_id == ProjectMemberModel.project_id)
            .where(
                ProjectMemberModel.user_id == user_id,
                ProjectMemberModel.role == ProjectRole.OWNER.value,
            )
        )
        return result.scalar_one()

    async def upsert_membership(
        self, project_id: UUID, user_id: UUID, role: ProjectRole
    ) -> Membership:
        result = await self._session.execute(
            select(ProjectMemberModel).where(
                ProjectMemberModel.project_id == project_id,
                ProjectMemberModel.user_id == user_id,
            )
        )
        row = result.scalars().first()
        if row is None:
            row = ProjectMemberModel(project_id=project_id, user_id=user_id, role=role.value)
            self._session.add(row)
        else:
            row.role = role.value
        await self._session.commit()
        await self._session.refresh(row)
        return _to_membership(row)

    async def update_membership_role(
        self, project_id: UUID, user_id: UUID, role: ProjectRole
    ) -> bool:
        result = await self._session.execute(
            update(ProjectMemberModel)
            .where(
                ProjectMemberModel.project_id == project_id,
                ProjectMemberModel.user_id == user_id,
            )
            .values(role=role.value)
        )
        await self._session.commit()
        return result.rowcount > 0

    async def delete_membership(self, project_id: UUID, user_id: UUID) -> bool:
        result = await self._session.execute(
            delete(ProjectMemberModel).where(
                ProjectMemberModel.project_id == project_id,
                ProjectMemberModel.user_id == user_id,
            )
        )
        await self._session.commit()
        return result.rowcount > 0
