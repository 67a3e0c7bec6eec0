"""Full-flow E2E integration test — one user's whole lifecycle via the API.

Learn: This walks through the product the way a client does: register,
create and work tasks, check stats, log out, log back in, deactivate.
It proves the pieces connect — auth dependency → services → storage →
envelopes — without mocking any of them.
"""

import pytest
from httpx import ASGITransport, AsyncClient

from taskboard.main import app

from conftest import ANN, BOB, bearer


@pytest.mark.asyncio
async def test_full_lifecycle(client):
    # 1. Register
    r = await client.post("/api/auth/register", json=ANN)
    assert r.status_code == 201
    headers = bearer(r.json()["data"]["token"])

    # 2. Create three tasks
    ids = []
    for title, priority in (("Write spec", "high"), ("Review PR", "medium"), ("Ship", "low")):
        r = await client.post(
            "/api/tasks", json={"title": title, "priority": priority}, headers=headers
        )
        assert r.status_code == 201
        ids.append(r.json()["data"]["task"]["id"])

    # 3. Work them
    r = await client.put(f"/api/tasks/{ids[0]}", json={"status": "completed"}, headers=headers)
    assert r.json()["data"]["task"]["completedAt"] is not None
    r = await client.put(f"/api/tasks/{ids[1]}", json={"status": "in-progress"}, headers=headers)
    assert r.json()["data"]["task"]["completedAt"] is None

    # 4. Stats reflect it
    stats = (await client.get("/api/tasks/stats/summary", headers=headers)).json()["data"]["stats"]
    assert stats == {
        "total": 3,
        "completed": 1,
        "inProgress": 1,
        "pending": 1,
        "highPriority": 1,
        "overdue": 0,
        "completionRate": 33,
    }

    # 5. Someone else sees none of it
    r = await client.post("/api/auth/register", json=BOB)
    bob = bearer(r.json()["data"]["token"])
    r = await client.get(f"/api/tasks/{ids[0]}", headers=bob)
    assert r.status_code == 404

    # 6. Wrong password, then the right one
    r = await client.post("/api/auth/login", json={"email": ANN["email"], "password": "wrong1"})
    assert r.status_code == 401
    r = await client.post("/api/auth/login", json={"email": ANN["email"], "password": ANN["password"]})
    assert r.status_code == 200
    headers = bearer(r.json()["data"]["token"])

    r = await client.get("/api/users/stats", headers=headers)
    assert r.json()["data"]["stats"]["lastLogin"] is not None

    # 7. Delete one, list the rest newest first
    r = await client.delete(f"/api/tasks/{ids[2]}", headers=headers)
    assert r.status_code == 200
    r = await client.get("/api/tasks", headers=headers)
    assert [t["id"] for t in r.json()["data"]["tasks"]] == [ids[1], ids[0]]

    # 8. Deactivate — the token stops working and login is refused
    r = await client.delete("/api/users/profile", headers=headers)
    assert r.status_code == 200
    r = await client.get("/api/tasks", headers=headers)
    assert r.status_code == 401
    r = await client.post("/api/auth/login", json={"email": ANN["email"], "password": ANN["password"]})
    assert r.json()["message"] == "Account is deactivated"


@pytest.mark.asyncio
async def test_unexpected_error_is_enveloped_500(client, storage, auth_headers, monkeypatch):
    async def boom(*args, **kwargs):
        raise RuntimeError("disk on fire")

    monkeypatch.setattr(storage.tasks, "list_for_owner", boom)

    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        r = await c.get("/api/tasks", headers=auth_headers)

    assert r.status_code == 500
    assert r.json() == {"success": False, "message": "Internal server error"}
