"""Task API tests.

Learn: Tests cover:
1. Create with defaults and validation messages
2. List — newest first, filters, pagination
3. Ownership — another user's task is a 404, never a 403
4. The completedAt rule across status changes
5. Stats summary
"""

import asyncio
from datetime import datetime, timedelta, timezone

import pytest


def _future(days: int = 7) -> str:
    return (datetime.now(timezone.utc) + timedelta(days=days)).isoformat()


def _ts(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


# ═══════════════════════════════════════════════════════════
# Create
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_create_task_with_defaults(client, auth_headers, ann):
    r = await client.post("/api/tasks", json={"title": "Write spec"}, headers=auth_headers)
    assert r.status_code == 201
    body = r.json()
    assert body["message"] == "Task created successfully"
    task = body["data"]["task"]
    assert task["title"] == "Write spec"
    assert task["status"] == "pending"
    assert task["priority"] == "medium"
    assert task["category"] == "General"
    assert task["description"] == ""
    assert task["tags"] == []
    assert task["dueDate"] is None
    assert task["completedAt"] is None
    assert task["user"] == ann["user"]["id"]
    assert task["createdAt"]
    assert task["updatedAt"]


@pytest.mark.asyncio
async def test_create_completed_task_sets_completed_at(make_task):
    task = await make_task(status="completed")
    assert task["completedAt"] is not None


@pytest.mark.asyncio
async def test_create_trims_and_keeps_fields(make_task):
    task = await make_task(
        title="  Ship it  ",
        description="Release 1.0",
        priority="high",
        category="Work",
        tags=[" release ", "q3"],
        dueDate=_future(),
    )
    assert task["title"] == "Ship it"
    assert task["priority"] == "high"
    assert task["category"] == "Work"
    assert task["tags"] == ["release", "q3"]
    assert task["dueDate"] is not None


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "body, message",
    [
        ({}, "title is required"),
        ({"title": "   "}, "Task title is required"),
        ({"title": "x" * 101}, "Title cannot be more than 100 characters"),
        ({"title": "ok", "description": "d" * 1001}, "Description cannot be more than 1000 characters"),
        ({"title": "ok", "status": "done"}, "Status must be one of: pending, in-progress, completed"),
        ({"title": "ok", "priority": "urgent"}, "Priority must be one of: low, medium, high"),
        ({"title": "ok", "category": "c" * 51}, "Category cannot be more than 50 characters"),
        ({"title": "ok", "tags": [str(i) for i in range(11)]}, "Cannot have more than 10 tags"),
        ({"title": "ok", "tags": ["t" * 31]}, "Each tag cannot be more than 30 characters"),
        ({"title": "ok", "dueDate": "2001-01-01T00:00:00Z"}, "Due date cannot be in the past"),
    ],
)
async def test_create_task_validation(client, auth_headers, body, message):
    r = await client.post("/api/tasks", json=body, headers=auth_headers)
    assert r.status_code == 400
    payload = r.json()
    assert payload["message"] == "Validation error"
    assert message in payload["errors"]


@pytest.mark.asyncio
async def test_client_cannot_set_completed_at(client, auth_headers):
    r = await client.post(
        "/api/tasks",
        json={"title": "Sneaky", "completedAt": "2020-01-01T00:00:00Z"},
        headers=auth_headers,
    )
    assert r.status_code == 400
    assert '"completedAt" is not allowed' in r.json()["errors"]


@pytest.mark.asyncio
async def test_tasks_require_auth(client):
    r = await client.get("/api/tasks")
    assert r.status_code == 401
    r = await client.post("/api/tasks", json={"title": "x"})
    assert r.status_code == 401


# ═══════════════════════════════════════════════════════════
# List
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_list_newest_first(client, auth_headers, make_task):
    for title in ("first", "second", "third"):
        await make_task(title=title)

    r = await client.get("/api/tasks", headers=auth_headers)
    assert r.status_code == 200
    data = r.json()["data"]
    assert [t["title"] for t in data["tasks"]] == ["third", "second", "first"]
    assert data["pagination"] == {"current": 1, "total": 1, "count": 3, "totalTasks": 3}


@pytest.mark.asyncio
async def test_list_empty(client, auth_headers):
    data = (await client.get("/api/tasks", headers=auth_headers)).json()["data"]
    assert data["tasks"] == []
    assert data["pagination"] == {"current": 1, "total": 0, "count": 0, "totalTasks": 0}


@pytest.mark.asyncio
async def test_list_filters(client, auth_headers, make_task):
    await make_task(title="Buy milk", category="Home", tags=["errand"])
    await make_task(title="Quarterly report", priority="high", category="Work")
    await make_task(title="Fix bike", description="flat tyre", status="in-progress")

    async def titles(**params):
        r = await client.get("/api/tasks", params=params, headers=auth_headers)
        assert r.status_code == 200
        return {t["title"] for t in r.json()["data"]["tasks"]}

    assert await titles(priority="high") == {"Quarterly report"}
    assert await titles(status="in-progress") == {"Fix bike"}
    assert await titles(category="hom") == {"Buy milk"}
    assert await titles(search="REPORT") == {"Quarterly report"}
    assert await titles(search="tyre") == {"Fix bike"}
    assert await titles(search="errand") == {"Buy milk"}
    assert await titles(status="pending", category="work") == {"Quarterly report"}
    assert await titles(search="nothing-matches") == set()


@pytest.mark.asyncio
async def test_list_rejects_bad_filter_values(client, auth_headers):
    r = await client.get("/api/tasks", params={"status": "done"}, headers=auth_headers)
    assert r.status_code == 400
    r = await client.get("/api/tasks", params={"limit": 101}, headers=auth_headers)
    assert r.status_code == 400
    r = await client.get("/api/tasks", params={"page": 0}, headers=auth_headers)
    assert r.status_code == 400


@pytest.mark.asyncio
async def test_pagination(client, auth_headers, make_task):
    for i in range(25):
        await make_task(title=f"task {i}")

    r = await client.get("/api/tasks", params={"page": 3}, headers=auth_headers)
    data = r.json()["data"]
    assert data["pagination"] == {"current": 3, "total": 3, "count": 5, "totalTasks": 25}
    assert data["tasks"][0]["title"] == "task 4"

    r = await client.get("/api/tasks", params={"page": 2, "limit": 20}, headers=auth_headers)
    assert r.json()["data"]["pagination"]["count"] == 5

    # Past the end: empty page, totals still reported
    r = await client.get("/api/tasks", params={"page": 9}, headers=auth_headers)
    data = r.json()["data"]
    assert data["tasks"] == []
    assert data["pagination"]["totalTasks"] == 25


# ═══════════════════════════════════════════════════════════
# Ownership
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_other_users_task_is_not_found(client, bob_headers, make_task):
    task = await make_task()
    url = f"/api/tasks/{task['id']}"

    for method, kwargs in (
        ("GET", {}),
        ("PUT", {"json": {"title": "mine now"}}),
        ("DELETE", {}),
    ):
        r = await client.request(method, url, headers=bob_headers, **kwargs)
        assert r.status_code == 404, method
        assert r.json()["message"] == "Task not found"

    r = await client.get("/api/tasks", headers=bob_headers)
    assert r.json()["data"]["tasks"] == []


@pytest.mark.asyncio
async def test_get_unknown_task(client, auth_headers):
    r = await client.get("/api/tasks/does-not-exist", headers=auth_headers)
    assert r.status_code == 404
    assert r.json() == {"success": False, "message": "Task not found"}


# ═══════════════════════════════════════════════════════════
# Update / delete
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_update_partial(client, auth_headers, make_task):
    task = await make_task(description="keep me", priority="low")
    await asyncio.sleep(0.01)
    r = await client.put(
        f"/api/tasks/{task['id']}", json={"title": "Renamed"}, headers=auth_headers
    )
    assert r.status_code == 200
    body = r.json()
    assert body["message"] == "Task updated successfully"
    updated = body["data"]["task"]
    assert updated["title"] == "Renamed"
    assert updated["description"] == "keep me"
    assert updated["priority"] == "low"
    assert _ts(updated["updatedAt"]) > _ts(task["updatedAt"])
    assert updated["createdAt"] == task["createdAt"]


@pytest.mark.asyncio
async def test_completed_at_follows_status(client, auth_headers, make_task):
    task = await make_task()
    url = f"/api/tasks/{task['id']}"

    done = (await client.put(url, json={"status": "completed"}, headers=auth_headers)).json()
    completed_at = done["data"]["task"]["completedAt"]
    assert completed_at is not None

    # Re-saving a completed task keeps the original timestamp
    again = (await client.put(url, json={"title": "still done"}, headers=auth_headers)).json()
    assert again["data"]["task"]["completedAt"] == completed_at

    reopened = (await client.put(url, json={"status": "in-progress"}, headers=auth_headers)).json()
    assert reopened["data"]["task"]["completedAt"] is None


@pytest.mark.asyncio
async def test_update_can_clear_due_date(client, auth_headers, make_task):
    task = await make_task(dueDate=_future())
    r = await client.put(
        f"/api/tasks/{task['id']}", json={"dueDate": None}, headers=auth_headers
    )
    assert r.status_code == 200
    assert r.json()["data"]["task"]["dueDate"] is None


@pytest.mark.asyncio
async def test_update_rejects_null_title(client, auth_headers, make_task):
    task = await make_task()
    r = await client.put(
        f"/api/tasks/{task['id']}", json={"title": None}, headers=auth_headers
    )
    assert r.status_code == 400
    assert "Task title cannot be empty" in r.json()["errors"]


@pytest.mark.asyncio
async def test_update_rejects_completed_at(client, auth_headers, make_task):
    task = await make_task()
    r = await client.put(
        f"/api/tasks/{task['id']}",
        json={"completedAt": "2020-01-01T00:00:00Z"},
        headers=auth_headers,
    )
    assert r.status_code == 400


@pytest.mark.asyncio
async def test_delete_task(client, auth_headers, make_task):
    task = await make_task()
    r = await client.delete(f"/api/tasks/{task['id']}", headers=auth_headers)
    assert r.status_code == 200
    assert r.json()["message"] == "Task deleted successfully"

    r = await client.get(f"/api/tasks/{task['id']}", headers=auth_headers)
    assert r.status_code == 404

    r = await client.delete(f"/api/tasks/{task['id']}", headers=auth_headers)
    assert r.status_code == 404


# ═══════════════════════════════════════════════════════════
# Stats
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_stats_summary(client, auth_headers, bob_headers, make_task, storage):
    await make_task(status="completed", priority="high")
    await make_task(status="in-progress")
    overdue = await make_task(dueDate=_future(1))
    # bob's tasks never count toward ann's stats
    await client.post("/api/tasks", json={"title": "bob's"}, headers=bob_headers)

    # Backdate one due date directly — the API won't accept a past one
    await storage.tasks.update(
        overdue["id"],
        overdue["user"],
        {"due_date": datetime.now(timezone.utc) - timedelta(days=1)},
    )

    r = await client.get("/api/tasks/stats/summary", headers=auth_headers)
    assert r.status_code == 200
    assert r.json()["data"]["stats"] == {
        "total": 3,
        "completed": 1,
        "inProgress": 1,
        "pending": 1,
        "highPriority": 1,
        "overdue": 1,
        "completionRate": 33,
    }


@pytest.mark.asyncio
async def test_stats_empty(client, auth_headers):
    r = await client.get("/api/tasks/stats/summary", headers=auth_headers)
    assert r.json()["data"]["stats"]["completionRate"] == 0
    assert r.json()["data"]["stats"]["total"] == 0
