"""Task API routes.

Learn: These routes translate HTTP into TaskService calls. The owner is
always the authenticated user; a task id that belongs to someone else
answers 404 exactly like an id that doesn't exist.

Key patterns:
- Query params for filtering (status, priority, category, search)
  and pagination (page, limit)
- PUT applies only the fields present in the body (exclude_unset)
- /tasks/stats/summary is declared before /tasks/{task_id} so the
  literal path wins
"""

from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query

from taskboard.auth.dependencies import CurrentUser, get_current_user
from taskboard.schemas.common import ApiResponse
from taskboard.schemas.task import (
    TaskCreate,
    TaskData,
    TaskListData,
    TaskStatsData,
    TaskUpdate,
)
from taskboard.services.task_service import TaskService
from taskboard.storage import Storage, get_storage
from taskboard.storage.models import TaskFilter

router = APIRouter(prefix="/tasks")


def _task_svc(storage: Storage = Depends(get_storage)) -> TaskService:
    return TaskService(storage.tasks)


@router.get("", response_model=ApiResponse[TaskListData])
async def list_tasks(
    status: Optional[Literal["pending", "in-progress", "completed"]] = Query(None),
    priority: Optional[Literal["low", "medium", "high"]] = Query(None),
    category: Optional[str] = Query(None, max_length=50),
    search: Optional[str] = Query(None, max_length=100),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    user: CurrentUser = Depends(get_current_user),
    svc: TaskService = Depends(_task_svc),
):
    """List the caller's tasks, newest first, filtered then paginated."""
    flt = TaskFilter(
        status=status,
        priority=priority,
        category=category or None,
        search=search or None,
    )
    tasks, pagination = await svc.list_tasks(user.id, flt, page=page, limit=limit)
    return ApiResponse(data=TaskListData(tasks=tasks, pagination=pagination))


@router.post("", response_model=ApiResponse[TaskData], status_code=201)
async def create_task(
    body: TaskCreate,
    user: CurrentUser = Depends(get_current_user),
    svc: TaskService = Depends(_task_svc),
):
    """Create a task owned by the caller."""
    task = await svc.create_task(user.id, body.model_dump())
    return ApiResponse(message="Task created successfully", data=TaskData(task=task))


@router.get("/stats/summary", response_model=ApiResponse[TaskStatsData])
async def task_stats(
    user: CurrentUser = Depends(get_current_user),
    svc: TaskService = Depends(_task_svc),
):
    """Counts by status and priority, overdue count, completion rate."""
    return ApiResponse(data=TaskStatsData(stats=await svc.stats(user.id)))


@router.get("/{task_id}", response_model=ApiResponse[TaskData])
async def get_task(
    task_id: str,
    user: CurrentUser = Depends(get_current_user),
    svc: TaskService = Depends(_task_svc),
):
    return ApiResponse(data=TaskData(task=await svc.get_task(task_id, user.id)))


@router.put("/{task_id}", response_model=ApiResponse[TaskData])
async def update_task(
    task_id: str,
    body: TaskUpdate,
    user: CurrentUser = Depends(get_current_user),
    svc: TaskService = Depends(_task_svc),
):
    """Update any subset of task fields. completedAt follows status."""
    task = await svc.update_task(task_id, user.id, body.model_dump(exclude_unset=True))
    return ApiResponse(message="Task updated successfully", data=TaskData(task=task))


@router.delete("/{task_id}", response_model=ApiResponse[None])
async def delete_task(
    task_id: str,
    user: CurrentUser = Depends(get_current_user),
    svc: TaskService = Depends(_task_svc),
):
    await svc.delete_task(task_id, user.id)
    return ApiResponse(message="Task deleted successfully")
