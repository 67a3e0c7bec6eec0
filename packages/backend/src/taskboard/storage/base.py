"""Storage interface — one contract, one active implementation.

Learn: The app talks to exactly one Storage, picked at startup
(see taskboard.storage.init_storage). There is no per-call fallback
between backends: a write either lands in the configured store or
fails loudly, so two stores can never hold diverging views of the
same account.

Implement these ABCs to add a backend:
- MemoryStorage (taskboard.storage.memory) — dicts, demo/test double
- SqlStorage (taskboard.storage.sql) — SQLAlchemy async
"""

from abc import ABC, abstractmethod
from typing import Any, Optional

from taskboard.storage.models import Task, TaskFilter, User


class UserRepository(ABC):
    """Credential store. Emails are matched case-insensitively."""

    @abstractmethod
    async def create(
        self,
        name: str,
        email: str,
        password_hash: str,
        role: str = "user",
    ) -> User:
        """Insert a user. Raises DuplicateEmailError if the email is taken."""

    @abstractmethod
    async def find_by_email(self, email: str) -> Optional[User]:
        ...

    @abstractmethod
    async def find_by_id(self, user_id: str) -> Optional[User]:
        ...

    @abstractmethod
    async def update(self, user_id: str, patch: dict[str, Any]) -> Optional[User]:
        """Apply a partial update, bump updated_at. None if no such user."""

    @abstractmethod
    async def list_active(self) -> list[User]:
        ...


class TaskRepository(ABC):
    """Task store. Every lookup is scoped by owner id."""

    @abstractmethod
    async def create(self, owner_id: str, fields: dict[str, Any]) -> Task:
        ...

    @abstractmethod
    async def list_for_owner(self, owner_id: str, flt: TaskFilter) -> list[Task]:
        """All matching tasks, newest-created first. No pagination here."""

    @abstractmethod
    async def get(self, task_id: str, owner_id: str) -> Optional[Task]:
        ...

    @abstractmethod
    async def update(
        self, task_id: str, owner_id: str, patch: dict[str, Any]
    ) -> Optional[Task]:
        """Apply a patch and recompute completed_at. None if not found/owned."""

    @abstractmethod
    async def delete(self, task_id: str, owner_id: str) -> Optional[Task]:
        """Remove and return the task. None if not found/owned."""


class Storage(ABC):
    """A backend: its repositories plus lifecycle hooks."""

    name: str

    users: UserRepository
    tasks: TaskRepository

    async def setup(self) -> None:
        """Prepare the backend (connect, create schema). Default: nothing."""

    @abstractmethod
    async def ping(self) -> bool:
        """Return True if the backend is reachable."""

    async def close(self) -> None:
        """Release connections. Default: nothing."""
