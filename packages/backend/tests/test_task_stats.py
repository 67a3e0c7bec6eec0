"""Unit tests for the pure task helpers: stats and pagination."""

from datetime import datetime, timedelta, timezone

from taskboard.services.task_service import compute_task_stats, paginate
from taskboard.storage.models import Task

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


def _task(status="pending", priority="medium", due=None) -> Task:
    return Task(
        id="t",
        user_id="u",
        title="t",
        status=status,
        priority=priority,
        due_date=due,
    )


def test_empty_stats():
    stats = compute_task_stats([], now=NOW)
    assert stats.total == 0
    assert stats.completion_rate == 0
    assert stats.overdue == 0


def test_counts_and_rate():
    tasks = [
        _task("completed", "high"),
        _task("completed"),
        _task("in-progress", "high"),
    ]
    stats = compute_task_stats(tasks, now=NOW)
    assert stats.total == 3
    assert stats.completed == 2
    assert stats.in_progress == 1
    assert stats.pending == 0
    assert stats.high_priority == 2
    assert stats.completion_rate == 67


def test_rate_rounds_half_up():
    tasks = [_task("completed")] + [_task() for _ in range(7)]
    # 1/8 = 12.5%
    assert compute_task_stats(tasks, now=NOW).completion_rate == 13


def test_overdue_ignores_completed_and_future():
    past = NOW - timedelta(hours=1)
    future = NOW + timedelta(hours=1)
    tasks = [
        _task(due=past),
        _task("in-progress", due=past),
        _task("completed", due=past),
        _task(due=future),
        _task(),
    ]
    assert compute_task_stats(tasks, now=NOW).overdue == 2


def test_paginate_math():
    items = list(range(23))
    chunk, page = paginate(items, page=3, limit=10)
    assert chunk == [20, 21, 22]
    assert (page.current, page.total, page.count, page.total_tasks) == (3, 3, 3, 23)

    chunk, page = paginate([], page=1, limit=10)
    assert chunk == []
    assert page.total == 0
