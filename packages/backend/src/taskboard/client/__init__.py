"""Python client for the Taskboard API.

    store = FileTokenStore()
    async with ApiClient("http://localhost:8000/api", store) as api:
        session = AuthSession(api, store)
        await session.check_auth()
        if not session.is_authenticated:
            await session.login("ann@example.com", "abc123")
        tasks = TaskClient(api)
        await tasks.create(title="Write spec")
"""

from taskboard.client.api import ApiClient, ApiError
from taskboard.client.services import TaskClient, UserClient
from taskboard.client.session import AuthResult, AuthSession, Session, SessionState
from taskboard.client.token_store import FileTokenStore, MemoryTokenStore, TokenStore

__all__ = [
    "ApiClient",
    "ApiError",
    "AuthResult",
    "AuthSession",
    "FileTokenStore",
    "MemoryTokenStore",
    "Session",
    "SessionState",
    "TaskClient",
    "TokenStore",
    "UserClient",
]
