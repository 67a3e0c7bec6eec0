"""
Shared helpers for Taskboard examples.

Handles the health check and account setup (register a throwaway user)
so each example can focus on its specific workflow.
"""

import os
import sys
import uuid

import httpx

BASE = os.environ.get("TASKBOARD_API_URL", "http://localhost:8000/api")


def check_backend() -> None:
    """Verify the backend is reachable and report which storage it uses."""
    try:
        resp = httpx.get(f"{BASE}/health", timeout=5)
    except httpx.ConnectError:
        print(f"ERROR: Backend not reachable at {BASE}")
        print("Start it with:  taskboard serve --reload")
        sys.exit(1)

    if resp.status_code != 200:
        print(f"ERROR: Health check returned {resp.status_code}")
        sys.exit(1)

    health = resp.json()["data"]
    print("Backend health:")
    print(f"  Status:   {health['status']}")
    print(f"  Storage:  {health['storage']} ({health['storageStatus']})")
    print(f"  Redis:    {health['redis']}")

    if health["storage"] == "memory":
        print("  (in-memory storage: data disappears when the server stops)")


def authenticate() -> str:
    """Register a fresh user and return its token.

    Uses a unique email per run so examples can be re-run.
    """
    run_id = uuid.uuid4().hex[:8]
    resp = httpx.post(
        f"{BASE}/auth/register",
        json={
            "name": "Demo User",
            "email": f"demo-{run_id}@example.com",
            "password": "demo123",
        },
        timeout=10,
    )
    if resp.status_code != 201:
        print(f"ERROR: Registration failed: {resp.status_code} {resp.text}")
        sys.exit(1)
    return resp.json()["data"]["token"]


def create_client() -> httpx.Client:
    """Check backend, authenticate, and return an httpx Client with auth headers."""
    check_backend()
    token = authenticate()
    print("  Auth:     ✓ (JWT)")
    return httpx.Client(
        base_url=BASE,
        timeout=10,
        headers={"Authorization": f"Bearer {token}"},
    )


def unwrap(resp: httpx.Response, expected: int = 200) -> dict:
    """Assert the status and return the envelope's data."""
    body = resp.json()
    assert resp.status_code == expected, f"{resp.status_code}: {body.get('message')} {body.get('errors', '')}"
    return body.get("data") or {}
