"""Users API tests — profile, profile stats, deactivation, admin list."""

import pytest

from taskboard.services.user_service import UserService
from taskboard.storage.models import TaskFilter

from conftest import BOB, register_user


@pytest.mark.asyncio
async def test_get_profile(client, auth_headers):
    r = await client.get("/api/users/profile", headers=auth_headers)
    assert r.status_code == 200
    user = r.json()["data"]["user"]
    assert user["name"] == "Ann Lee"
    assert user["avatar"] is None
    assert "passwordHash" not in user


@pytest.mark.asyncio
async def test_update_profile(client, auth_headers):
    r = await client.put(
        "/api/users/profile",
        json={"name": "Ann Marie Lee", "avatar": "https://example.com/ann.png"},
        headers=auth_headers,
    )
    assert r.status_code == 200
    body = r.json()
    assert body["message"] == "Profile updated successfully"
    assert body["data"]["user"]["name"] == "Ann Marie Lee"
    assert body["data"]["user"]["avatar"] == "https://example.com/ann.png"


@pytest.mark.asyncio
async def test_update_profile_partial_and_clear_avatar(client, auth_headers):
    await client.put(
        "/api/users/profile",
        json={"avatar": "https://example.com/ann.png"},
        headers=auth_headers,
    )
    r = await client.put("/api/users/profile", json={"avatar": ""}, headers=auth_headers)
    user = r.json()["data"]["user"]
    assert user["avatar"] is None
    assert user["name"] == "Ann Lee"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "body, message",
    [
        ({"avatar": "not a url"}, "Avatar must be a valid URL"),
        ({"name": "X"}, "Name must be at least 2 characters long"),
        ({"name": "Ann_Lee"}, "Name can only contain letters and spaces"),
    ],
)
async def test_update_profile_validation(client, auth_headers, body, message):
    r = await client.put("/api/users/profile", json=body, headers=auth_headers)
    assert r.status_code == 400
    assert message in r.json()["errors"]


@pytest.mark.asyncio
async def test_update_profile_cannot_change_email_or_role(client, auth_headers):
    r = await client.put(
        "/api/users/profile", json={"role": "admin"}, headers=auth_headers
    )
    assert r.status_code == 400
    r = await client.put(
        "/api/users/profile", json={"email": "new@example.com"}, headers=auth_headers
    )
    assert r.status_code == 400


@pytest.mark.asyncio
async def test_profile_stats(client, auth_headers):
    r = await client.get("/api/users/stats", headers=auth_headers)
    assert r.status_code == 200
    stats = r.json()["data"]["stats"]
    assert stats["accountCreated"]
    assert stats["lastLogin"] is None  # registered, never logged in
    assert stats["profileCompletion"] == 50

    await client.put(
        "/api/users/profile",
        json={"avatar": "https://example.com/ann.png"},
        headers=auth_headers,
    )
    r = await client.get("/api/users/stats", headers=auth_headers)
    assert r.json()["data"]["stats"]["profileCompletion"] == 75


@pytest.mark.asyncio
async def test_deactivate_keeps_tasks(client, auth_headers, make_task, storage, ann):
    await make_task()
    r = await client.delete("/api/users/profile", headers=auth_headers)
    assert r.status_code == 200
    assert r.json()["message"] == "Account deactivated successfully"

    tasks = await storage.tasks.list_for_owner(ann["user"]["id"], TaskFilter())
    assert len(tasks) == 1


# ─── Admin ──────────────────────────────────────────────


@pytest.mark.asyncio
async def test_list_users_forbidden_for_regular_user(client, auth_headers):
    r = await client.get("/api/users", headers=auth_headers)
    assert r.status_code == 403
    assert r.json()["message"] == "Access denied. Insufficient permissions."


@pytest.mark.asyncio
async def test_list_users_as_admin(client, auth_headers, storage):
    bob = await register_user(client, **BOB)
    await UserService(storage.users).set_role("ann@example.com", "admin")
    await client.delete(
        "/api/users/profile", headers={"Authorization": f"Bearer {bob['token']}"}
    )

    r = await client.get("/api/users", headers=auth_headers)
    assert r.status_code == 200
    data = r.json()["data"]
    # the deactivated account is not listed
    assert data["total"] == 1
    assert data["users"][0]["email"] == "ann@example.com"
    assert data["users"][0]["role"] == "admin"
