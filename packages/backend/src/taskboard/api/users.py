"""Users API — profile management and the admin user list.

Learn: All routes act on the caller's own account (the id comes from the
token, never from the URL). GET /users is the only admin-gated route.
"""

from fastapi import APIRouter, Depends

from taskboard.auth.dependencies import CurrentUser, get_current_user, require_roles
from taskboard.schemas.common import ApiResponse
from taskboard.schemas.user import (
    ProfileStatsData,
    ProfileUpdate,
    UserData,
    UserListData,
)
from taskboard.services.user_service import UserService
from taskboard.storage import Storage, get_storage

router = APIRouter(prefix="/users")


def _user_svc(storage: Storage = Depends(get_storage)) -> UserService:
    return UserService(storage.users)


@router.get("/profile", response_model=ApiResponse[UserData])
async def get_profile(
    user: CurrentUser = Depends(get_current_user),
    svc: UserService = Depends(_user_svc),
):
    return ApiResponse(data=UserData(user=await svc.get(user.id)))


@router.put("/profile", response_model=ApiResponse[UserData])
async def update_profile(
    body: ProfileUpdate,
    user: CurrentUser = Depends(get_current_user),
    svc: UserService = Depends(_user_svc),
):
    """Update name and/or avatar. Fields left out of the body are untouched."""
    sent = body.model_dump(exclude_unset=True)
    updated = await svc.update_profile(
        user.id, name=sent.get("name"), avatar=sent.get("avatar")
    )
    return ApiResponse(message="Profile updated successfully", data=UserData(user=updated))


@router.get("/stats", response_model=ApiResponse[ProfileStatsData])
async def get_stats(
    user: CurrentUser = Depends(get_current_user),
    svc: UserService = Depends(_user_svc),
):
    return ApiResponse(data=ProfileStatsData(stats=await svc.profile_stats(user.id)))


@router.delete("/profile", response_model=ApiResponse[None])
async def deactivate_account(
    user: CurrentUser = Depends(get_current_user),
    svc: UserService = Depends(_user_svc),
):
    """Deactivate (not delete) the account. Its tasks are left in place."""
    await svc.deactivate(user.id)
    return ApiResponse(message="Account deactivated successfully")


@router.get("", response_model=ApiResponse[UserListData])
async def list_users(
    _admin: CurrentUser = Depends(require_roles("admin")),
    svc: UserService = Depends(_user_svc),
):
    """List active users (admin only)."""
    users = await svc.list_active()
    return ApiResponse(data=UserListData(users=users, total=len(users)))
