"""Repository for user accounts."""

from __future__ import annotations

from uuid import UUID

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from taskflow_service.db.models import ProjectMemberModel, TaskModel, UserModel
from taskflow_service.errors import NotFound
from taskflow_service.models import SystemRole, User


def to_user(row: UserModel) -> User:
    return User(
        id=row.id,
        email=row.email,
        name=row.name,
        system_role=SystemRole(row.system_role),
        created_at=row.created_at,
        password_hash=row.password_hash,
    )


class UsersRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create_user(
        self, email: str, password_hash: str, name: str, system_role: SystemRole = SystemRole.USER
    ) -> User:
        user = UserModel(
            email=email, password_hash=password_hash, name=name, system_role=system_role.value
        )
        self._session.add(user)
        try:
            await self._session.commit()
        except Exception:
            # Unique email violation; leave the session usable.
            await self._session.rollback()
            raise
        await self._session.refresh(user)
        return to_user(user)

    async def get_user_by_id(self, user_id: UUID) -> User:
        row = await self._session.get(UserModel, user_id)
        if row is None:
            raise NotFound("User not found")
        return to_user(row)

    async def get_user_by_email(self, email: str) -> User:
        result = await self._session.execute(select(UserModel).where(UserModel.email == email))
        row = result.scalars().first()
        if row is None:
            raise NotFound("User not found")
        return to_user(row)

    async def list_users(self) -> list[User]:
        result = await self._session.execute(
            select(UserModel).order_by(UserModel.created_at.desc())
        )
        return [to_user(row) for row in result.scalars().all()]

    async def count_admins(self) -> int:
        result = await self._session.execute(
            select(func.count())
            .select_from(UserModel)
            .where(UserModel.system_role == SystemRole.ADMIN.value)
        )
        return result.scalar_one()

    async def delete_user(self, user_id: UUID) -> None:
        """Remove the user's tasks and memberships, then the user, in one transaction."""
        try:
            await self._session.execute(delete(TaskModel).where(TaskModel.user_id == user_id))
            await self._session.execute(
                update(TaskModel).where(TaskModel.assigned_to == user_id).values(assigned_to=None)
            )
            await self._session.execute(
                delete(ProjectMemberModel).where(ProjectMemberModel.user_id == user_id)
            )
            result = await self._session.execute(delete(UserModel).where(UserModel.id == user_id))
            if result.rowcount == 0:
                raise NotFound("User not found")
        except Exception:
            await self._session.rollback()
            raise
        await self._session.commit()
