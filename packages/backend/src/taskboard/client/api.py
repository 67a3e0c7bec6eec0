"""HTTP client for the Taskboard API.

Learn: A thin wrapper over httpx.AsyncClient that
1. adds "Authorization: Bearer <token>" from the TokenStore,
2. unwraps the {success, message, data, errors} envelope, and
3. turns every failure (HTTP error, success=false, network) into ApiError
   whose .message can be shown to a user as-is.

A 401 on a request that carried a token means the session is over, so
the stored token is dropped.
"""

import os
from typing import Any, Optional

import httpx

from taskboard.client.token_store import MemoryTokenStore, TokenStore

DEFAULT_API_URL = "http://localhost:8000/api"

_STATUS_MESSAGES = {
    401: "Session expired. Please login again.",
    403: "Access denied. Insufficient permissions.",
    404: "Resource not found.",
    429: "Too many requests. Please try again later.",
    500: "Server error. Please try again later.",
}


def api_url() -> str:
    return os.environ.get("TASKBOARD_API_URL", DEFAULT_API_URL).rstrip("/")


class ApiError(Exception):
    """A failed API call. status_code is 0 for network failures."""

    def __init__(
        self,
        status_code: int,
        message: str,
        errors: Optional[list[str]] = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.errors = errors or []


class ApiClient:
    """Async client bound to one API base URL and one token store."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        token_store: Optional[TokenStore] = None,
        *,
        http: Optional[httpx.AsyncClient] = None,
        timeout: float = 10.0,
    ):
        self.token_store = token_store or MemoryTokenStore()
        self._http = http or httpx.AsyncClient(
            base_url=base_url or api_url(),
            timeout=timeout,
            headers={"Content-Type": "application/json"},
        )

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def request(
        self,
        method: str,
        path: str,
        *,
        json: Optional[dict] = None,
        params: Optional[dict] = None,
    ) -> dict[str, Any]:
        """Send a request and return the decoded envelope."""
        token = self.token_store.load()
        headers = {"Authorization": f"Bearer {token}"} if token else {}
        if params:
            params = {k: v for k, v in params.items() if v not in (None, "")}

        try:
            resp = await self._http.request(
                method, path, json=json, params=params, headers=headers
            )
        except httpx.HTTPError:
            raise ApiError(0, "Network error. Please check your internet connection.")

        try:
            body = resp.json()
        except ValueError:
            body = {}

        if resp.is_success and body.get("success", True):
            return body

        if resp.status_code == 401 and token:
            self.token_store.clear()

        message = body.get("message") or _STATUS_MESSAGES.get(
            resp.status_code, "An error occurred. Please try again."
        )
        raise ApiError(resp.status_code, message, body.get("errors"))

    async def get(self, path: str, **params) -> dict[str, Any]:
        return await self.request("GET", path, params=params or None)

    async def post(self, path: str, json: Optional[dict] = None) -> dict[str, Any]:
        return await self.request("POST", path, json=json or {})

    async def put(self, path: str, json: Optional[dict] = None) -> dict[str, Any]:
        return await self.request("PUT", path, json=json or {})

    async def delete(self, path: str) -> dict[str, Any]:
        return await self.request("DELETE", path)
