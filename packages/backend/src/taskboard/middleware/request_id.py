"""Correlation IDs for taskboard API calls.

Learn: A caller (the CLI, the Python client, a proxy) may send its own
X-Request-ID; otherwise the API mints one. Method, path and that ID are
bound into structlog's contextvars at the start of each call, so every
log line an endpoint or storage backend emits can be traced back to it.
The same ID is echoed on the response.
"""

import uuid

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

REQUEST_ID_HEADER = "X-Request-ID"


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Tag each API call with a correlation ID."""

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
        )

        response: Response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = request_id
        return response
