"""Health endpoint tests."""

import pytest


@pytest.mark.asyncio
async def test_health_returns_ok(client):
    """Health endpoint should return server status, version and backend."""
    resp = await client.get("/api/health")
    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert body["message"] == "Taskboard API is healthy"
    data = body["data"]
    assert data["server"] == "ok"
    assert data["storage"] == "memory"
    assert data["storageStatus"] == "ok"
    assert data["authenticated"] is False
    assert "version" in data


@pytest.mark.asyncio
async def test_health_reports_redis_unavailable(client):
    resp = await client.get("/api/health")
    assert resp.json()["data"]["redis"].startswith("unavailable")


@pytest.mark.asyncio
async def test_health_recognizes_token(client, auth_headers):
    resp = await client.get("/api/health", headers=auth_headers)
    assert resp.json()["data"]["authenticated"] is True


@pytest.mark.asyncio
async def test_health_ignores_bad_token(client):
    resp = await client.get("/api/health", headers={"Authorization": "Bearer junk"})
    assert resp.status_code == 200
    assert resp.json()["data"]["authenticated"] is False


@pytest.mark.asyncio
async def test_health_degraded_when_storage_down(client, storage, monkeypatch):
    async def down():
        return False

    monkeypatch.setattr(storage, "ping", down)
    body = (await client.get("/api/health")).json()
    assert body["data"]["status"] == "degraded"
    assert body["message"] == "Taskboard API is degraded"
