"""Pydantic schemas for tasks.

- TaskCreate: what you POST to create a task
- TaskUpdate: what you PUT to modify a task (every field optional)
- TaskRead: what the API returns (includes the derived completedAt)
- TaskStats: the /tasks/stats/summary payload

completedAt and the owning user are never accepted from clients:
RequestModel forbids unknown keys, so sending them is a 400.
"""

from datetime import datetime, timezone
from typing import Annotated, Optional

from pydantic import AfterValidator, field_validator, model_validator

from taskboard.schemas.common import CamelModel, RequestModel, require_text
from taskboard.storage.models import DEFAULT_CATEGORY, TASK_PRIORITIES, TASK_STATUSES

MAX_TAGS = 10


def _check_title(v: Optional[str]) -> str:
    return require_text(
        v,
        empty="Task title is required",
        max_length=100,
        too_long="Title cannot be more than 100 characters",
    )


def _check_description(v: Optional[str]) -> str:
    v = (v or "").strip()
    if len(v) > 1000:
        raise ValueError("Description cannot be more than 1000 characters")
    return v


def _check_status(v: Optional[str]) -> str:
    if v not in TASK_STATUSES:
        raise ValueError("Status must be one of: " + ", ".join(TASK_STATUSES))
    return v


def _check_priority(v: Optional[str]) -> str:
    if v not in TASK_PRIORITIES:
        raise ValueError("Priority must be one of: " + ", ".join(TASK_PRIORITIES))
    return v


def _check_category(v: Optional[str]) -> str:
    v = (v or "").strip()
    if len(v) > 50:
        raise ValueError("Category cannot be more than 50 characters")
    return v or DEFAULT_CATEGORY


def _check_tags(v: Optional[list[str]]) -> list[str]:
    if v is None:
        return []
    if len(v) > MAX_TAGS:
        raise ValueError(f"Cannot have more than {MAX_TAGS} tags")
    tags = [tag.strip() for tag in v]
    if any(len(tag) > 30 for tag in tags):
        raise ValueError("Each tag cannot be more than 30 characters")
    return [tag for tag in tags if tag]


def _as_utc(v: Optional[datetime]) -> Optional[datetime]:
    if v is not None and v.tzinfo is None:
        return v.replace(tzinfo=timezone.utc)
    return v


Title = Annotated[str, AfterValidator(_check_title)]
Description = Annotated[str, AfterValidator(_check_description)]
Status = Annotated[str, AfterValidator(_check_status)]
Priority = Annotated[str, AfterValidator(_check_priority)]
Category = Annotated[str, AfterValidator(_check_category)]
Tags = Annotated[list[str], AfterValidator(_check_tags)]
DueDate = Annotated[Optional[datetime], AfterValidator(_as_utc)]

# Message used when a client sends null for a field that can't be cleared
_NOT_NULLABLE = {
    "title": "Task title cannot be empty",
    "description": "Description must be a string",
    "status": "Status must be one of: " + ", ".join(TASK_STATUSES),
    "priority": "Priority must be one of: " + ", ".join(TASK_PRIORITIES),
    "category": "Category must be a string",
    "tags": "Tags must be a list of strings",
}


class TaskCreate(RequestModel):
    title: Title
    description: Description = ""
    status: Status = "pending"
    priority: Priority = "medium"
    category: Category = DEFAULT_CATEGORY
    due_date: DueDate = None
    tags: Tags = []

    @field_validator("due_date")
    @classmethod
    def not_in_past(cls, v: Optional[datetime]) -> Optional[datetime]:
        if v is not None and v < datetime.now(timezone.utc):
            raise ValueError("Due date cannot be in the past")
        return v


class TaskUpdate(RequestModel):
    """Partial update — only fields present in the body are applied.

    dueDate may be sent as null to clear it; the other fields can't be null.
    """

    title: Optional[Title] = None
    description: Optional[Description] = None
    status: Optional[Status] = None
    priority: Optional[Priority] = None
    category: Optional[Category] = None
    due_date: DueDate = None
    tags: Optional[Tags] = None

    @model_validator(mode="after")
    def no_nulls(self) -> "TaskUpdate":
        for name in self.model_fields_set:
            if name in _NOT_NULLABLE and getattr(self, name) is None:
                raise ValueError(_NOT_NULLABLE[name])
        return self


class TaskRead(CamelModel):
    id: str
    user: str
    title: str
    description: str
    status: str
    priority: str
    category: str
    due_date: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    tags: list[str]
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_task(cls, task) -> "TaskRead":
        return cls(
            id=task.id,
            user=task.user_id,
            title=task.title,
            description=task.description,
            status=task.status,
            priority=task.priority,
            category=task.category,
            due_date=task.due_date,
            completed_at=task.completed_at,
            tags=task.tags,
            created_at=task.created_at,
            updated_at=task.updated_at,
        )


class TaskData(CamelModel):
    task: TaskRead


class Pagination(CamelModel):
    current: int
    total: int  # number of pages
    count: int  # tasks on this page
    total_tasks: int


class TaskListData(CamelModel):
    tasks: list[TaskRead]
    pagination: Pagination


class TaskStats(CamelModel):
    total: int
    completed: int
    in_progress: int
    pending: int
    high_priority: int
    overdue: int
    completion_rate: int


class TaskStatsData(CamelModel):
    stats: TaskStats
