"""Task service — owner-scoped task CRUD, pagination and statistics.

Learn: Every call takes the owner id from the authenticated request.
A task that exists but belongs to someone else comes back exactly like
a missing one (NotFoundError "Task not found"), so ids can't be probed.

The completedAt rule lives in the storage layer; this service only
decides WHAT to write, never the derived timestamp.
"""

import math
from datetime import datetime
from typing import Optional

import structlog

from taskboard.errors import NotFoundError
from taskboard.schemas.task import Pagination, TaskRead, TaskStats
from taskboard.storage.base import TaskRepository
from taskboard.storage.models import Task, TaskFilter, utcnow

logger = structlog.get_logger()


def paginate(items: list, page: int, limit: int) -> tuple[list, Pagination]:
    """Slice an already filtered + sorted list into one page."""
    start = (page - 1) * limit
    chunk = items[start:start + limit]
    return chunk, Pagination(
        current=page,
        total=math.ceil(len(items) / limit),
        count=len(chunk),
        total_tasks=len(items),
    )


def compute_task_stats(tasks: list[Task], now: Optional[datetime] = None) -> TaskStats:
    """Derived counts for a user's tasks.

    overdue = due date in the past and not completed.
    completion_rate = completed / total as a whole percent (0 when empty).
    """
    now = now or utcnow()
    total = len(tasks)
    completed = sum(1 for t in tasks if t.status == "completed")
    return TaskStats(
        total=total,
        completed=completed,
        in_progress=sum(1 for t in tasks if t.status == "in-progress"),
        pending=sum(1 for t in tasks if t.status == "pending"),
        high_priority=sum(1 for t in tasks if t.priority == "high"),
        overdue=sum(
            1 for t in tasks
            if t.due_date is not None and t.due_date < now and t.status != "completed"
        ),
        # round half up, matching what clients already display
        completion_rate=int(completed * 100 / total + 0.5) if total else 0,
    )


class TaskService:
    """Business logic for task CRUD."""

    def __init__(self, tasks: TaskRepository):
        self.tasks = tasks

    # ─── Create ──────────────────────────────────────────

    async def create_task(self, owner_id: str, fields: dict) -> TaskRead:
        task = await self.tasks.create(owner_id, fields)
        logger.info("tasks.created", task_id=task.id, user_id=owner_id)
        return TaskRead.from_task(task)

    # ─── Read ────────────────────────────────────────────

    async def list_tasks(
        self,
        owner_id: str,
        flt: TaskFilter,
        page: int = 1,
        limit: int = 10,
    ) -> tuple[list[TaskRead], Pagination]:
        """Filter, sort newest-first, then paginate."""
        tasks = await self.tasks.list_for_owner(owner_id, flt)
        chunk, pagination = paginate(tasks, page, limit)
        return [TaskRead.from_task(t) for t in chunk], pagination

    async def get_task(self, task_id: str, owner_id: str) -> TaskRead:
        task = await self.tasks.get(task_id, owner_id)
        if not task:
            raise NotFoundError("Task not found")
        return TaskRead.from_task(task)

    async def stats(self, owner_id: str) -> TaskStats:
        tasks = await self.tasks.list_for_owner(owner_id, TaskFilter())
        return compute_task_stats(tasks)

    # ─── Update / delete ─────────────────────────────────

    async def update_task(self, task_id: str, owner_id: str, patch: dict) -> TaskRead:
        task = await self.tasks.update(task_id, owner_id, patch)
        if not task:
            raise NotFoundError("Task not found")
        logger.info(
            "tasks.updated", task_id=task_id, user_id=owner_id, fields=sorted(patch)
        )
        return TaskRead.from_task(task)

    async def delete_task(self, task_id: str, owner_id: str) -> None:
        task = await self.tasks.delete(task_id, owner_id)
        if not task:
            raise NotFoundError("Task not found")
        logger.info("tasks.deleted", task_id=task_id, user_id=owner_id)
