"""Auth API — registration, login, session checks.

Learn: Routes for the account lifecycle:
- POST /auth/register → create account, returns user + token
- POST /auth/login → email/password → user + token
- GET /auth/me → full profile of the token's user
- GET /auth/verify → the identity resolved from the token (cheap check
  clients run at startup)
- POST /auth/logout → acknowledgement only; tokens are stateless, the
  client discards its copy
"""

import structlog
from fastapi import APIRouter, Depends

from taskboard.auth.dependencies import CurrentUser, get_current_user
from taskboard.schemas.common import ApiResponse
from taskboard.schemas.user import (
    AuthData,
    CurrentUserRead,
    LoginRequest,
    RegisterRequest,
    UserData,
    VerifyData,
)
from taskboard.services.user_service import UserService
from taskboard.storage import Storage, get_storage

logger = structlog.get_logger()

router = APIRouter(prefix="/auth")


def _user_svc(storage: Storage = Depends(get_storage)) -> UserService:
    return UserService(storage.users)


# ─── Register ────────────────────────────────────────────


@router.post("/register", response_model=ApiResponse[AuthData], status_code=201)
async def register(body: RegisterRequest, svc: UserService = Depends(_user_svc)):
    """Create a new user account."""
    user, token = await svc.register(body.name, body.email, body.password)
    return ApiResponse(
        message="User registered successfully",
        data=AuthData(user=user, token=token),
    )


# ─── Login ───────────────────────────────────────────────


@router.post("/login", response_model=ApiResponse[AuthData])
async def login(body: LoginRequest, svc: UserService = Depends(_user_svc)):
    """Login with email and password → JWT token."""
    user, token = await svc.authenticate(body.email, body.password)
    return ApiResponse(message="Login successful", data=AuthData(user=user, token=token))


# ─── Current user ───────────────────────────────────────


@router.get("/me", response_model=ApiResponse[UserData])
async def get_me(
    user: CurrentUser = Depends(get_current_user),
    svc: UserService = Depends(_user_svc),
):
    """Get the current authenticated user's profile."""
    return ApiResponse(data=UserData(user=await svc.get(user.id)))


@router.get("/verify", response_model=ApiResponse[VerifyData])
async def verify(user: CurrentUser = Depends(get_current_user)):
    """Confirm the token is valid and return the identity it resolves to."""
    return ApiResponse(
        message="Token is valid",
        data=VerifyData(user=CurrentUserRead.model_validate(user)),
    )


@router.post("/logout", response_model=ApiResponse[None])
async def logout(user: CurrentUser = Depends(get_current_user)):
    """Acknowledge logout. Nothing is revoked server-side."""
    logger.info("auth.logged_out", user_id=user.id)
    return ApiResponse(message="Logged out successfully")
