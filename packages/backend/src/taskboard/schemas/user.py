"""Pydantic schemas for accounts and auth.

- RegisterRequest / LoginRequest: what you POST to /auth
- ProfileUpdate: what you PUT to /users/profile (all optional)
- UserRead: the public view of a user — there is no password field,
  so a hash can never be serialized by accident
"""

import re
from datetime import datetime
from typing import Optional

from email_validator import EmailNotValidError, validate_email
from pydantic import AnyUrl, TypeAdapter, ValidationError, field_validator

from taskboard.schemas.common import CamelModel, RequestModel, require_text

_PASSWORD_PATTERN = re.compile(r"^(?=.*[a-zA-Z])(?=.*[0-9])")
_url_adapter = TypeAdapter(AnyUrl)


def _check_name(value: Optional[str]) -> str:
    name = require_text(
        value,
        empty="Name is required",
        min_length=2,
        too_short="Name must be at least 2 characters long",
        max_length=50,
        too_long="Name cannot be more than 50 characters",
    )
    if not all(ch.isalpha() or ch.isspace() for ch in name):
        raise ValueError("Name can only contain letters and spaces")
    return name


def _check_email(value: str) -> str:
    value = (value or "").strip()
    if not value:
        raise ValueError("Email is required")
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError:
        raise ValueError("Please enter a valid email address")
    return value.lower()


class RegisterRequest(RequestModel):
    name: str
    email: str
    password: str

    @field_validator("name")
    @classmethod
    def valid_name(cls, v: str) -> str:
        return _check_name(v)

    @field_validator("email")
    @classmethod
    def valid_email(cls, v: str) -> str:
        return _check_email(v)

    @field_validator("password")
    @classmethod
    def strong_password(cls, v: str) -> str:
        if not v:
            raise ValueError("Password is required")
        if len(v) < 6:
            raise ValueError("Password must be at least 6 characters long")
        if len(v) > 128:
            raise ValueError("Password cannot be more than 128 characters")
        if not _PASSWORD_PATTERN.match(v):
            raise ValueError("Password must contain at least one letter and one number")
        return v


class LoginRequest(RequestModel):
    email: str
    password: str

    @field_validator("email")
    @classmethod
    def valid_email(cls, v: str) -> str:
        return _check_email(v)

    @field_validator("password")
    @classmethod
    def present(cls, v: str) -> str:
        if not v:
            raise ValueError("Password is required")
        return v


class ProfileUpdate(RequestModel):
    """Partial update — only fields the client sent are applied."""

    name: Optional[str] = None
    avatar: Optional[str] = None

    @field_validator("name")
    @classmethod
    def valid_name(cls, v: Optional[str]) -> str:
        return _check_name(v)

    @field_validator("avatar")
    @classmethod
    def valid_avatar(cls, v: Optional[str]) -> str:
        # "" clears the avatar
        if v is None or v == "":
            return ""
        try:
            _url_adapter.validate_python(v)
        except ValidationError:
            raise ValueError("Avatar must be a valid URL")
        return v


class UserRead(CamelModel):
    id: str
    name: str
    email: str
    role: str
    is_active: bool
    avatar: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    last_login: Optional[datetime] = None


class CurrentUserRead(CamelModel):
    """The trimmed identity attached to an authenticated request."""

    id: str
    email: str
    name: str
    role: str


class AuthData(CamelModel):
    user: UserRead
    token: str


class UserData(CamelModel):
    user: UserRead


class VerifyData(CamelModel):
    user: CurrentUserRead


class UserListData(CamelModel):
    users: list[UserRead]
    total: int


class ProfileStats(CamelModel):
    account_created: datetime
    last_login: Optional[datetime] = None
    profile_completion: int


class ProfileStatsData(CamelModel):
    stats: ProfileStats
