#!/usr/bin/env python3
"""
Taskboard async client — the session state machine in action.

Shows AuthSession moving UNAUTHENTICATED → LOADING → AUTHENTICATED, a
stored token being re-validated, and the task status shortcuts.
Run with: python examples/async_client.py

Requires: pip install -e .
Backend must be running: taskboard serve
"""

import asyncio
import uuid

from taskboard.client import (
    ApiClient,
    ApiError,
    AuthSession,
    MemoryTokenStore,
    TaskClient,
)


async def main():
    store = MemoryTokenStore()
    email = f"demo-{uuid.uuid4().hex[:8]}@example.com"

    async with ApiClient(token_store=store) as api:
        session = AuthSession(api, store)
        print(f"Session: {session.state.value}")

        result = await session.register("Demo User", email, "demo123")
        if not result.success:
            print(f"Registration failed: {result.message} {list(result.errors)}")
            return
        print(f"Session: {session.state.value} as {session.user['email']}")

        # A second session sharing the store re-validates the saved token
        restored = await AuthSession(api, store).check_auth()
        print(f"Restored session: {restored.state.value}")

        tasks = TaskClient(api)
        task = await tasks.create(title="Try the async client", priority="high")
        task = await tasks.start(task["id"])
        print(f"Task '{task['title']}' → {task['status']}")
        task = await tasks.complete(task["id"])
        print(f"Task '{task['title']}' → {task['status']} at {task['completedAt']}")

        try:
            await tasks.get("no-such-task")
        except ApiError as e:
            print(f"Expected failure: {e.status_code} {e.message}")

        await session.logout()
        print(f"Session: {session.state.value}")


if __name__ == "__main__":
    asyncio.run(main())
