"""SQL storage backend (SQLAlchemy async).

Learn: Each repository call opens its own short session and commits
before returning, so callers deal only in storage dataclasses and never
hold an ORM session across awaits. Status, priority and category are
filtered in SQL. Free-text search runs through matches_filter on the
owner's rows, so a term is matched against each tag on its own (not the
serialized JSON array) exactly as the memory backend does it. The
completedAt rule is the same shared helper too.
"""

import uuid
from datetime import datetime, timezone
from typing import Any, Optional

import structlog
from sqlalchemy import delete, select, text
from sqlalchemy.exc import IntegrityError

from taskboard.db.engine import build_engine, build_session_factory
from taskboard.db.models import Base, TaskRecord, UserRecord
from taskboard.errors import DuplicateEmailError, StorageError
from taskboard.storage.base import Storage, TaskRepository, UserRepository
from taskboard.storage.common import (
    TASK_MUTABLE_FIELDS,
    USER_MUTABLE_FIELDS,
    CreationClock,
    clean_patch,
    matches_filter,
    sync_completion,
)
from taskboard.storage.models import Task, TaskFilter, User, utcnow

logger = structlog.get_logger()


def _aware(value: Optional[datetime]) -> Optional[datetime]:
    """Some drivers (SQLite) hand back naive datetimes; treat them as UTC."""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _like_pattern(term: str) -> str:
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def _to_user(row: UserRecord) -> User:
    return User(
        id=row.id,
        name=row.name,
        email=row.email,
        password_hash=row.password_hash,
        role=row.role,
        is_active=row.is_active,
        avatar=row.avatar,
        created_at=_aware(row.created_at),
        updated_at=_aware(row.updated_at),
        last_login=_aware(row.last_login),
    )


def _to_task(row: TaskRecord) -> Task:
    return Task(
        id=row.id,
        user_id=row.user_id,
        title=row.title,
        description=row.description or "",
        status=row.status,
        priority=row.priority,
        category=row.category,
        due_date=_aware(row.due_date),
        completed_at=_aware(row.completed_at),
        tags=list(row.tags or []),
        created_at=_aware(row.created_at),
        updated_at=_aware(row.updated_at),
    )


class SqlUserRepository(UserRepository):
    def __init__(self, sessions):
        self._sessions = sessions

    async def create(
        self,
        name: str,
        email: str,
        password_hash: str,
        role: str = "user",
    ) -> User:
        now = utcnow()
        row = UserRecord(
            id=str(uuid.uuid4()),
            name=name,
            email=email.lower(),
            password_hash=password_hash,
            role=role,
            is_active=True,
            created_at=now,
            updated_at=now,
        )
        try:
            async with self._sessions() as session, session.begin():
                session.add(row)
        except IntegrityError:
            raise DuplicateEmailError()
        return _to_user(row)

    async def find_by_email(self, email: str) -> Optional[User]:
        async with self._sessions() as session:
            result = await session.execute(
                select(UserRecord).where(UserRecord.email == email.lower())
            )
            row = result.scalars().first()
            return _to_user(row) if row else None

    async def find_by_id(self, user_id: str) -> Optional[User]:
        async with self._sessions() as session:
            row = await session.get(UserRecord, user_id)
            return _to_user(row) if row else None

    async def update(self, user_id: str, patch: dict[str, Any]) -> Optional[User]:
        async with self._sessions() as session, session.begin():
            row = await session.get(UserRecord, user_id)
            if not row:
                return None
            for key, value in clean_patch(patch, USER_MUTABLE_FIELDS).items():
                setattr(row, key, value)
            row.updated_at = utcnow()
        return _to_user(row)

    async def list_active(self) -> list[User]:
        async with self._sessions() as session:
            result = await session.execute(
                select(UserRecord)
                .where(UserRecord.is_active.is_(True))
                .order_by(UserRecord.created_at)
            )
            return [_to_user(r) for r in result.scalars().all()]


class SqlTaskRepository(TaskRepository):
    def __init__(self, sessions):
        self._sessions = sessions
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
        row = TaskRecord(
            id=task.id,
            user_id=task.user_id,
            title=task.title,
            description=task.description,
            status=task.status,
            priority=task.priority,
            category=task.category,
            due_date=task.due_date,
            completed_at=task.completed_at,
            tags=list(task.tags),
            created_at=task.created_at,
            updated_at=task.updated_at,
        )
        async with self._sessions() as session, session.begin():
            session.add(row)
        return task

    async def list_for_owner(self, owner_id: str, flt: TaskFilter) -> list[Task]:
        """Filters are applied conditionally, only when the caller provides them."""
        query = (
            select(TaskRecord)
            .where(TaskRecord.user_id == owner_id)
            .order_by(TaskRecord.created_at.desc(), TaskRecord.id.desc())
        )
        if flt.status:
            query = query.where(TaskRecord.status == flt.status)
        if flt.priority:
            query = query.where(TaskRecord.priority == flt.priority)
        if flt.category:
            query = query.where(
                TaskRecord.category.ilike(_like_pattern(flt.category), escape="\\")
            )
        async with self._sessions() as session:
            result = await session.execute(query)
            tasks = [_to_task(r) for r in result.scalars().all()]
        if flt.search:
            text_only = TaskFilter(search=flt.search)
            tasks = [t for t in tasks if matches_filter(t, text_only)]
        return tasks

    async def _owned(self, session, task_id: str, owner_id: str) -> Optional[TaskRecord]:
        result = await session.execute(
            select(TaskRecord).where(
                TaskRecord.id == task_id, TaskRecord.user_id == owner_id
            )
        )
        return result.scalars().first()

    async def get(self, task_id: str, owner_id: str) -> Optional[Task]:
        async with self._sessions() as session:
            row = await self._owned(session, task_id, owner_id)
            return _to_task(row) if row else None

    async def update(
        self, task_id: str, owner_id: str, patch: dict[str, Any]
    ) -> Optional[Task]:
        async with self._sessions() as session, session.begin():
            row = await self._owned(session, task_id, owner_id)
            if not row:
                return None
            task = _to_task(row)
            now = utcnow()
            for key, value in clean_patch(patch, TASK_MUTABLE_FIELDS).items():
                setattr(task, key, value)
                setattr(row, key, value)
            sync_completion(task, now)
            row.completed_at = task.completed_at
            row.updated_at = task.updated_at = now
        return task

    async def delete(self, task_id: str, owner_id: str) -> Optional[Task]:
        async with self._sessions() as session, session.begin():
            row = await self._owned(session, task_id, owner_id)
            if not row:
                return None
            task = _to_task(row)
            await session.execute(delete(TaskRecord).where(TaskRecord.id == task_id))
        return task


class SqlStorage(Storage):
    """Storage backed by any SQLAlchemy async URL (Postgres in production)."""

    name = "sql"

    def __init__(self, database_url: str, echo: bool = False, create_schema: bool = False):
        self.database_url = database_url
        self.create_schema = create_schema
        self.engine = build_engine(database_url, echo=echo)
        sessions = build_session_factory(self.engine)
        self.users = SqlUserRepository(sessions)
        self.tasks = SqlTaskRepository(sessions)

    async def setup(self) -> None:
        """Check connectivity and, when asked, create missing tables.

        Raises StorageError if the database can't be reached.
        """
        try:
            async with self.engine.begin() as conn:
                await conn.execute(text("SELECT 1"))
                if self.create_schema:
                    await conn.run_sync(Base.metadata.create_all)
        except Exception as e:
            raise StorageError(f"Database unavailable: {e}") from e

    async def ping(self) -> bool:
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.warning("storage.ping_failed", backend=self.name, error=str(e))
            return False

    async def close(self) -> None:
        await self.engine.dispose()
