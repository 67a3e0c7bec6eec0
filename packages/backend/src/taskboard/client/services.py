"""Typed-ish wrappers for the task and user endpoints.

Each method returns the envelope's data payload (a dict), so callers
never deal with {success, message} themselves.
"""

from typing import Any, Optional

from taskboard.client.api import ApiClient


class TaskClient:
    def __init__(self, api: ApiClient):
        self.api = api

    async def list(
        self,
        *,
        status: Optional[str] = None,
        priority: Optional[str] = None,
        category: Optional[str] = None,
        search: Optional[str] = None,
        page: int = 1,
        limit: int = 10,
    ) -> dict[str, Any]:
        """Returns {"tasks": [...], "pagination": {...}}."""
        body = await self.api.get(
            "/tasks",
            status=status,
            priority=priority,
            category=category,
            search=search,
            page=page,
            limit=limit,
        )
        return body["data"]

    async def get(self, task_id: str) -> dict[str, Any]:
        body = await self.api.get(f"/tasks/{task_id}")
        return body["data"]["task"]

    async def create(self, **fields) -> dict[str, Any]:
        body = await self.api.post("/tasks", fields)
        return body["data"]["task"]

    async def update(self, task_id: str, **fields) -> dict[str, Any]:
        body = await self.api.put(f"/tasks/{task_id}", fields)
        return body["data"]["task"]

    async def delete(self, task_id: str) -> None:
        await self.api.delete(f"/tasks/{task_id}")

    async def stats(self) -> dict[str, Any]:
        body = await self.api.get("/tasks/stats/summary")
        return body["data"]["stats"]

    # ─── Status shortcuts ─────────────────────────────────

    async def complete(self, task_id: str) -> dict[str, Any]:
        return await self.update(task_id, status="completed")

    async def start(self, task_id: str) -> dict[str, Any]:
        return await self.update(task_id, status="in-progress")

    async def reset(self, task_id: str) -> dict[str, Any]:
        return await self.update(task_id, status="pending")


class UserClient:
    def __init__(self, api: ApiClient):
        self.api = api

    async def profile(self) -> dict[str, Any]:
        body = await self.api.get("/users/profile")
        return body["data"]["user"]

    async def update_profile(self, **fields) -> dict[str, Any]:
        body = await self.api.put("/users/profile", fields)
        return body["data"]["user"]

    async def stats(self) -> dict[str, Any]:
        body = await self.api.get("/users/stats")
        return body["data"]["stats"]

    async def deactivate(self) -> None:
        await self.api.delete("/users/profile")

    async def list_users(self) -> dict[str, Any]:
        """Admin only. Returns {"users": [...], "total": n}."""
        body = await self.api.get("/users")
        return body["data"]
