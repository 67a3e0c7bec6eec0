"""Helpers shared by the storage backends.

Learn: Both backends must agree on the completedAt rule and on what the
list filters mean. Keeping those rules here means the in-memory store
and the SQL store cannot drift apart.
"""

from datetime import datetime, timedelta
from typing import Optional

from taskboard.storage.models import Task, TaskFilter, utcnow

# Fields a task patch may touch. completed_at is derived, user_id is immutable.
TASK_MUTABLE_FIELDS = frozenset(
    {"title", "description", "status", "priority", "category", "due_date", "tags"}
)
USER_MUTABLE_FIELDS = frozenset(
    {"name", "avatar", "is_active", "role", "last_login", "password_hash"}
)


def completion_timestamp(
    status: str,
    current: Optional[datetime],
    now: datetime,
) -> Optional[datetime]:
    """Return the completedAt value a task with `status` should carry.

    Non-null iff the task is completed; an already-completed task keeps
    its original timestamp.
    """
    if status != "completed":
        return None
    return current or now


def sync_completion(task: Task, now: datetime) -> Task:
    task.completed_at = completion_timestamp(task.status, task.completed_at, now)
    return task


def clean_patch(patch: dict, allowed: frozenset) -> dict:
    """Drop keys a caller is not allowed to write."""
    return {k: v for k, v in patch.items() if k in allowed}


def matches_filter(task: Task, flt: TaskFilter) -> bool:
    """In-process evaluation of a TaskFilter.

    The memory backend applies the whole filter here; the SQL backend uses
    it for free-text search, where each tag is matched on its own.
    """
    if flt.status and task.status != flt.status:
        return False
    if flt.priority and task.priority != flt.priority:
        return False
    if flt.category and flt.category.lower() not in (task.category or "").lower():
        return False
    if flt.search:
        needle = flt.search.lower()
        haystack = [task.title or "", task.description or "", *task.tags]
        if not any(needle in value.lower() for value in haystack):
            return False
    return True


def newest_first(tasks: list[Task]) -> list[Task]:
    return sorted(tasks, key=lambda t: t.created_at, reverse=True)


class CreationClock:
    """Hands out strictly increasing creation timestamps.

    Two tasks created within the same clock tick would otherwise share a
    created_at, and newest-first order between them would be undefined.
    """

    def __init__(self) -> None:
        self._last: Optional[datetime] = None

    def now(self) -> datetime:
        now = utcnow()
        if self._last is not None and now <= self._last:
            now = self._last + timedelta(microseconds=1)
        self._last = now
        return now
