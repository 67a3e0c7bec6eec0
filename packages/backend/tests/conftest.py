"""Test fixtures — a fresh in-memory store per test, real auth pipeline.

Learn: Testing pattern for FastAPI + a swappable storage backend:

1. Each test gets its own MemoryStorage (function-scoped), installed by
   overriding the get_storage dependency — nothing leaks between tests.
2. Auth is NOT mocked. Fixtures register real users over HTTP and hand
   back "Authorization: Bearer <jwt>" headers, so every request runs the
   same token → user → active checks production does.
3. bcrypt rounds are dropped to the minimum so hashing doesn't dominate
   the run time.

Redis is never initialized here, so rate limiting is skipped.
"""

import pytest
from httpx import ASGITransport, AsyncClient

from taskboard.config import settings
from taskboard.main import app
from taskboard.storage import MemoryStorage, get_storage

settings.bcrypt_rounds = 4

ANN = {"name": "Ann Lee", "email": "ann@example.com", "password": "abc123"}
BOB = {"name": "Bob Stone", "email": "bob@example.com", "password": "xyz789"}


async def register_user(client: AsyncClient, **overrides) -> dict:
    """Register through the API; returns the envelope's data (user + token)."""
    body = {**ANN, **overrides}
    r = await client.post("/api/auth/register", json=body)
    assert r.status_code == 201, r.text
    return r.json()["data"]


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
async def client(storage):
    """HTTP client whose app uses this test's MemoryStorage."""
    app.dependency_overrides[get_storage] = lambda: storage

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
async def ann(client):
    """Ann's registration data: {"user": {...}, "token": "..."}."""
    return await register_user(client)


@pytest.fixture
async def auth_headers(ann):
    return bearer(ann["token"])


@pytest.fixture
async def bob_headers(client):
    data = await register_user(client, **BOB)
    return bearer(data["token"])


@pytest.fixture
async def make_task(client, auth_headers):
    """Factory: create a task for Ann and return its JSON."""

    async def _make(**fields):
        body = {"title": "Write spec", **fields}
        r = await client.post("/api/tasks", json=body, headers=auth_headers)
        assert r.status_code == 201, r.text
        return r.json()["data"]["task"]

    return _make
