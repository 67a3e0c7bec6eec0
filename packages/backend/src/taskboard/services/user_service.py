"""User service — registration, login and profile management.

Learn: Service layer separates business logic from HTTP routing.
API routes call services, services call the storage repositories.
This is also the last place a password hash is visible: everything
returned from here is a UserRead, which has no password field.
"""

from typing import Optional

import structlog

from taskboard.auth.jwt import create_access_token
from taskboard.auth.password import hash_password, verify_password
from taskboard.errors import (
    AccountInactiveError,
    DuplicateEmailError,
    InvalidCredentialsError,
    NotFoundError,
)
from taskboard.schemas.user import ProfileStats, UserRead
from taskboard.storage.base import UserRepository
from taskboard.storage.models import User, utcnow

logger = structlog.get_logger()

# name, email, avatar, plus one slot kept for a future bio field
PROFILE_FIELDS_TOTAL = 4


def to_public(user: User) -> UserRead:
    return UserRead.model_validate(user)


def profile_completion(user: User) -> int:
    """Percentage of profile slots filled in, rounded to a whole number."""
    filled = sum(
        1 for value in (user.name, user.email, user.avatar) if value and value.strip()
    )
    return int(filled * 100 / PROFILE_FIELDS_TOTAL + 0.5)


class UserService:
    """Business logic for accounts."""

    def __init__(self, users: UserRepository):
        self.users = users

    # ─── Auth ────────────────────────────────────────────

    async def register(self, name: str, email: str, password: str) -> tuple[UserRead, str]:
        """Create an account and return it with a fresh token."""
        if await self.users.find_by_email(email):
            raise DuplicateEmailError()

        user = await self.users.create(
            name=name,
            email=email,
            password_hash=hash_password(password),
        )
        logger.info("auth.registered", user_id=user.id)
        return to_public(user), create_access_token(user.id)

    async def authenticate(self, email: str, password: str) -> tuple[UserRead, str]:
        """Check credentials, stamp lastLogin, return the user and a token.

        Unknown email and wrong password give the same message so the
        response doesn't reveal which accounts exist.
        """
        user = await self.users.find_by_email(email)
        if not user:
            logger.info("auth.login_failed", reason="unknown_email")
            raise InvalidCredentialsError()

        if not user.is_active:
            logger.info("auth.login_failed", reason="inactive", user_id=user.id)
            raise AccountInactiveError("Account is deactivated")

        if not verify_password(password, user.password_hash):
            logger.info("auth.login_failed", reason="bad_password", user_id=user.id)
            raise InvalidCredentialsError()

        user = await self.users.update(user.id, {"last_login": utcnow()}) or user
        logger.info("auth.logged_in", user_id=user.id)
        return to_public(user), create_access_token(user.id)

    # ─── Profile ─────────────────────────────────────────

    async def get(self, user_id: str) -> UserRead:
        user = await self.users.find_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")
        return to_public(user)

    async def update_profile(
        self,
        user_id: str,
        name: Optional[str] = None,
        avatar: Optional[str] = None,
    ) -> UserRead:
        """Update name and/or avatar. An empty avatar string clears it."""
        patch: dict = {}
        if name is not None:
            patch["name"] = name
        if avatar is not None:
            patch["avatar"] = avatar or None

        user = await self.users.update(user_id, patch)
        if not user:
            raise NotFoundError("User not found")
        return to_public(user)

    async def profile_stats(self, user_id: str) -> ProfileStats:
        user = await self.users.find_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")
        return ProfileStats(
            account_created=user.created_at,
            last_login=user.last_login,
            profile_completion=profile_completion(user),
        )

    async def deactivate(self, user_id: str) -> UserRead:
        """Soft-delete: the account can no longer log in. Tasks are kept."""
        user = await self.users.update(user_id, {"is_active": False})
        if not user:
            raise NotFoundError("User not found")
        logger.info("users.deactivated", user_id=user_id)
        return to_public(user)

    async def list_active(self) -> list[UserRead]:
        return [to_public(u) for u in await self.users.list_active()]

    async def set_role(self, email: str, role: str) -> UserRead:
        """Change a user's role (used by the `taskboard promote` command)."""
        user = await self.users.find_by_email(email)
        if not user:
            raise NotFoundError("User not found")
        updated = await self.users.update(user.id, {"role": role})
        logger.info("users.role_changed", user_id=user.id, role=role)
        return to_public(updated)
