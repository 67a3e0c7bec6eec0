"""In-memory storage backend.

Learn: Plain dicts keyed by id, living as long as the process. Used for
tests and for local development without a database. Data is lost on
restart, and there is no locking — two concurrent updates to the same
record race and the last write wins.
"""

import uuid
from dataclasses import replace
from typing import Any, Optional

from taskboard.errors import DuplicateEmailError
from taskboard.storage.base import Storage, TaskRepository, UserRepository
from taskboard.storage.common import (
    TASK_MUTABLE_FIELDS,
    USER_MUTABLE_FIELDS,
    CreationClock,
    clean_patch,
    matches_filter,
    newest_first,
    sync_completion,
)
from taskboard.storage.models import Task, TaskFilter, User, utcnow


class MemoryUserRepository(UserRepository):
    def __init__(self) -> None:
        self._users: dict[str, User] = {}
        self._by_email: dict[str, str] = {}  # lower-cased email → id

    async def create(
        self,
        name: str,
        email: str,
        password_hash: str,
        role: str = "user",
    ) -> User:
        key = email.lower()
        if key in self._by_email:
            raise DuplicateEmailError()
        user = User(
            id=str(uuid.uuid4()),
            name=name,
            email=key,
            password_hash=password_hash,
            role=role,
        )
        self._users[user.id] = user
        self._by_email[key] = user.id
        return replace(user)

    async def find_by_email(self, email: str) -> Optional[User]:
        user_id = self._by_email.get(email.lower())
        return await self.find_by_id(user_id) if user_id else None

    async def find_by_id(self, user_id: str) -> Optional[User]:
        user = self._users.get(user_id)
        return replace(user) if user else None

    async def update(self, user_id: str, patch: dict[str, Any]) -> Optional[User]:
        user = self._users.get(user_id)
        if not user:
            return None
        for key, value in clean_patch(patch, USER_MUTABLE_FIELDS).items():
            setattr(user, key, value)
        user.updated_at = utcnow()
        return replace(user)

    async def list_active(self) -> list[User]:
        return [replace(u) for u in self._users.values() if u.is_active]


class MemoryTaskRepository(TaskRepository):
    def __init__(self) -> None:
        self._tasks: dict[str, Task] = {}
        self._clock = CreationClock()

    async def create(self, owner_id: str, fields: dict[str, Any]) -> Task:
        now = self._clock.now()
        task = Task(
            id=str(uuid.uuid4()),
            user_id=owner_id,
            created_at=now,
            updated_at=now,
            **clean_patch(fields, TASK_MUTABLE_FIELDS),
        )
        sync_completion(task, now)
        self._tasks[task.id] = task
        return replace(task, tags=list(task.tags))

    async def list_for_owner(self, owner_id: str, flt: TaskFilter) -> list[Task]:
        owned = [
            t for t in self._tasks.values()
            if t.user_id == owner_id and matches_filter(t, flt)
        ]
        return [replace(t, tags=list(t.tags)) for t in newest_first(owned)]

    def _owned(self, task_id: str, owner_id: str) -> Optional[Task]:
        task = self._tasks.get(task_id)
        if task is None or task.user_id != owner_id:
            return None
        return task

    async def get(self, task_id: str, owner_id: str) -> Optional[Task]:
        task = self._owned(task_id, owner_id)
        return replace(task, tags=list(task.tags)) if task else None

    async def update(
        self, task_id: str, owner_id: str, patch: dict[str, Any]
    ) -> Optional[Task]:
        task = self._owned(task_id, owner_id)
        if not task:
            return None
        now = utcnow()
        for key, value in clean_patch(patch, TASK_MUTABLE_FIELDS).items():
            setattr(task, key, value)
        task.updated_at = now
        sync_completion(task, now)
        return replace(task, tags=list(task.tags))

    async def delete(self, task_id: str, owner_id: str) -> Optional[Task]:
        task = self._owned(task_id, owner_id)
        if not task:
            return None
        del self._tasks[task_id]
        return task


class MemoryStorage(Storage):
    """Process-local storage. Every instance starts empty."""

    name = "memory"

    def __init__(self) -> None:
        self.users = MemoryUserRepository()
        self.tasks = MemoryTaskRepository()

    async def ping(self) -> bool:
        return True
