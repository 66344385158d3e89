"""Auth endpoints: register, login, refresh, /me."""

from __future__ import annotations

from fastapi import APIRouter

from taskflow_service.auth.session import CurrentUserDep
from taskflow_service.rest.deps import AuthServiceDep
from taskflow_service.rest.schemas import (
    AuthResponse,
    LoginRequest,
    RefreshRequest,
    RegisterRequest,
    UserSchema,
)
from taskflow_service.services.auth import AuthResult

router = APIRouter(prefix="/auth", tags=["auth"])


def _auth_response(result: AuthResult) -> AuthResponse:
    return AuthResponse(
        access_token=result.tokens.access_token,
        refresh_token=result.tokens.refresh_token,
        user=UserSchema.from_user(result.user),
    )


@router.post("/register", response_model=AuthResponse, status_code=201)
async def register(request: RegisterRequest, service: AuthServiceDep) -> AuthResponse:
    """Create a new user account, returning JWT tokens."""
    result = await service.register(request.email, request.password, request.name)
    return _auth_response(result)


@router.post("/login", response_model=AuthResponse)
async def login(request: LoginRequest, service: AuthServiceDep) -> AuthResponse:
    """Verify credentials and return JWT tokens."""
    return _auth_response(await service.login(request.email, request.password))


@router.post("/refresh", response_model=AuthResponse)
async def refresh_token(request: RefreshRequest, service: AuthServiceDep) -> AuthResponse:
    """Exchange a refresh token for a new token pair."""
    return _auth_response(await service.refresh(request.refresh_token))


@router.get("/me", response_model=UserSchema)
async def me(current_user: CurrentUserDep, service: AuthServiceDep) -> UserSchema:
    """Return the currently authenticated user."""
    return UserSchema.from_user(await service.me(current_user))
