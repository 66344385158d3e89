"""System-admin endpoints."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Response

from taskflow_service.auth.session import CurrentUserDep
from taskflow_service.rest.deps import AdminServiceDep
from taskflow_service.rest.schemas import UserSchema

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/users", response_model=list[UserSchema])
async def list_users(current_user: CurrentUserDep, service: AdminServiceDep) -> list[UserSchema]:
    return [UserSchema.from_user(u) for u in await service.list_users(current_user)]


@router.delete("/users/{user_id}", status_code=204)
async def delete_user(
    user_id: UUID, current_user: CurrentUserDep, service: AdminServiceDep
) -> Response:
    """Delete a user with their tasks and memberships."""
    await service.delete_user(current_user, user_id)
    return Response(status_code=204)
