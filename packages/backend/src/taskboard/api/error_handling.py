"""Exception handlers — every error becomes the standard envelope.

Learn: Routes and dependencies just raise. These handlers render
{success: false, message, errors?} with the right status:

- AppError subclasses carry their own status and message
- RequestValidationError (pydantic) → 400 "Validation error" with one
  readable sentence per problem in `errors`
- StarletteHTTPException (404 for unknown routes, 405, …) keeps its status
- anything else → 500 with a generic message; details go to the log only
"""

from typing import Any, Optional

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from taskboard.errors import AppError

logger = structlog.get_logger()


def error_response(
    status_code: int,
    message: str,
    errors: Optional[list[str]] = None,
    headers: Optional[dict[str, str]] = None,
) -> JSONResponse:
    content: dict[str, Any] = {"success": False, "message": message}
    if errors:
        content["errors"] = errors
    return JSONResponse(status_code=status_code, content=content, headers=headers)


def _field_label(loc: tuple) -> str:
    # Drop the "body"/"query" prefix: ("body", "title") → "title"
    parts = [str(p) for p in loc if p not in ("body", "query", "path", "header")]
    return ".".join(parts) or "request"


def format_validation_errors(errors: list[dict]) -> list[str]:
    """Turn pydantic error dicts into user-facing sentences."""
    messages = []
    for err in errors:
        kind = err.get("type", "")
        label = _field_label(tuple(err.get("loc", ())))
        if kind == "value_error" and "error" in err.get("ctx", {}):
            messages.append(str(err["ctx"]["error"]))
        elif kind == "missing":
            messages.append(f"{label} is required")
        elif kind == "extra_forbidden":
            messages.append(f'"{label}" is not allowed')
        elif kind == "json_invalid":
            messages.append("Request body is not valid JSON")
        else:
            messages.append(f"{label}: {err.get('msg', 'invalid value')}")
    return messages


def register_exception_handlers(app: FastAPI) -> None:
    """Install the envelope-producing handlers on an app."""

    @app.exception_handler(AppError)
    async def handle_app_error(request: Request, exc: AppError):
        log_fn = logger.error if exc.status_code >= 500 else logger.warning
        log_fn(
            "http.app_error",
            path=request.url.path,
            method=request.method,
            status_code=exc.status_code,
            error=type(exc).__name__,
            message=exc.message,
        )
        headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
        return error_response(exc.status_code, exc.message, exc.errors, headers)

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError):
        errors = format_validation_errors(exc.errors())
        logger.warning(
            "http.validation_error",
            path=request.url.path,
            method=request.method,
            errors=errors,
        )
        return error_response(400, "Validation error", errors)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        message = exc.detail if isinstance(exc.detail, str) else "Request failed"
        if exc.status_code == 404 and message == "Not Found":
            message = "Route not found"
        return error_response(exc.status_code, message, headers=exc.headers)

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception):
        logger.exception(
            "http.unhandled_error",
            path=request.url.path,
            method=request.method,
            error=str(exc),
        )
        return error_response(500, "Internal server error")
