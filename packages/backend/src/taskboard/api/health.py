"""Health check endpoint.

Learn: Simple GET endpoint that reports which storage backend is active
and whether its dependencies (database, Redis) are reachable. Redis is
optional — only rate limiting uses it.
"""

from typing import Optional

from fastapi import APIRouter, Depends

from taskboard import __version__
from taskboard.auth.dependencies import CurrentUser, get_current_user_optional
from taskboard.storage import Storage, get_storage

router = APIRouter()


@router.get("/health")
async def health_check(
    storage: Storage = Depends(get_storage),
    user: Optional[CurrentUser] = Depends(get_current_user_optional),
):
    """Check server health and dependency connectivity."""
    checks = {"server": "ok", "version": __version__, "storage": storage.name}

    checks["storageStatus"] = "ok" if await storage.ping() else "error"

    # Check Redis
    try:
        from taskboard.cache.redis import get_redis

        await get_redis().ping()
        checks["redis"] = "ok"
    except Exception as e:
        checks["redis"] = f"unavailable: {e}"

    status = "healthy" if checks["storageStatus"] == "ok" else "degraded"

    return {
        "success": True,
        "message": f"Taskboard API is {status}",
        "data": {"status": status, "authenticated": user is not None, **checks},
    }
