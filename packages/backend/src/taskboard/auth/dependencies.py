"""FastAPI auth dependencies.

Learn: These are used as Depends() in route handlers to extract and
validate the current user from the request:

1. Read "Authorization: Bearer <token>" (MissingTokenError otherwise)
2. Verify the JWT (InvalidTokenError / TokenExpiredError)
3. Load the user from storage (UserNotFoundError / AccountInactiveError)
4. Hand the route a trimmed CurrentUser(id, email, name, role)

require_roles(...) layers a role check (403) on top.
"""

from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, Header, Request

from taskboard.auth.jwt import verify_token
from taskboard.errors import (
    AccountInactiveError,
    AuthenticationError,
    ForbiddenError,
    MissingTokenError,
    UserNotFoundError,
)
from taskboard.storage import Storage, get_storage


@dataclass(frozen=True)
class CurrentUser:
    """The authenticated identity attached to a request."""

    id: str
    email: str
    name: str
    role: str


def _bearer_token(authorization: Optional[str]) -> str:
    if not authorization or not authorization.startswith("Bearer "):
        raise MissingTokenError()
    token = authorization[7:].strip()
    if not token:
        raise MissingTokenError("Access denied. Invalid token format.")
    return token


async def get_current_user(
    request: Request,
    authorization: Optional[str] = Header(None),
    storage: Storage = Depends(get_storage),
) -> CurrentUser:
    """Resolve the bearer token to a CurrentUser (required — 401 if no auth)."""
    token = _bearer_token(authorization)
    user_id = verify_token(token)

    user = await storage.users.find_by_id(user_id)
    if not user:
        raise UserNotFoundError()
    if not user.is_active:
        raise AccountInactiveError()

    identity = CurrentUser(id=user.id, email=user.email, name=user.name, role=user.role)
    request.state.user = identity
    return identity


async def get_current_user_optional(
    request: Request,
    authorization: Optional[str] = Header(None),
    storage: Storage = Depends(get_storage),
) -> Optional[CurrentUser]:
    """Same as get_current_user, but returns None instead of failing.

    Learn: This is the "soft" auth dependency, for endpoints that work
    both authenticated and anonymously.
    """
    try:
        return await get_current_user(request, authorization, storage)
    except AuthenticationError:
        return None


def require_roles(*roles: str):
    """Dependency factory: authenticated AND role in `roles`, else 403."""

    async def _check(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
        if user.role not in roles:
            raise ForbiddenError()
        return user

    return _check
