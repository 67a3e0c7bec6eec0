"""API route aggregation.

All routers registered here get mounted in main.py under /api.

Learn: Auth is declared per route, not per router: handlers need the
CurrentUser value, and /users mixes plain-auth and admin-only routes.
"""

from fastapi import APIRouter

from taskboard.api.auth import router as auth_router
from taskboard.api.health import router as health_router
from taskboard.api.tasks import router as tasks_router
from taskboard.api.users import router as users_router

api_router = APIRouter(prefix="/api")

api_router.include_router(health_router, tags=["health"])
api_router.include_router(auth_router, tags=["auth"])
api_router.include_router(users_router, tags=["users"])
api_router.include_router(tasks_router, tags=["tasks"])
