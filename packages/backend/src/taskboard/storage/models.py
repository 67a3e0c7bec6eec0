"""Storage-level records shared by every backend.

Learn: Backends hand these plain dataclasses across the storage
boundary, so services never see ORM rows or raw dicts. User carries the
password hash; it must be converted to a UserRead schema before it
leaves the service layer.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional

USER_ROLES = ("user", "admin")
TASK_STATUSES = ("pending", "in-progress", "completed")
TASK_PRIORITIES = ("low", "medium", "high")

DEFAULT_CATEGORY = "General"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class User:
    id: str
    name: str
    email: str
    password_hash: str
    role: str = "user"
    is_active: bool = True
    avatar: Optional[str] = None
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)
    last_login: Optional[datetime] = None


@dataclass
class Task:
    id: str
    user_id: str
    title: str
    description: str = ""
    status: str = "pending"
    priority: str = "medium"
    category: str = DEFAULT_CATEGORY
    due_date: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    tags: list[str] = field(default_factory=list)
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)


@dataclass
class TaskFilter:
    """Optional list filters. None means "don't filter on this"."""

    status: Optional[str] = None
    priority: Optional[str] = None
    category: Optional[str] = None
    search: Optional[str] = None
