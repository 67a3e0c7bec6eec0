"""FastAPI application factory.

Learn: App factory pattern — create_app() returns a configured FastAPI
instance. Lifespan manages startup/shutdown (storage backend, Redis).
Middleware, CORS, exception handlers and routers are all registered here.
"""

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from taskboard import __version__
from taskboard.api import api_router
from taskboard.api.error_handling import register_exception_handlers
from taskboard.config import settings
from taskboard.logging_config import configure_logging

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle.

    Learn: Anything before `yield` runs at startup, after `yield` runs at
    shutdown. The storage backend is chosen here, once.
    """
    logger.info(
        "taskboard.starting",
        version=__version__,
        environment=settings.environment,
        port=settings.port,
        storage_backend=settings.storage_backend,
    )

    from taskboard.storage import close_storage, init_storage

    await init_storage(settings)

    from taskboard.cache.redis import close_redis, init_redis
    try:
        await init_redis()
        logger.info("taskboard.redis_connected", url=settings.redis_url)
    except Exception as e:
        logger.warning("taskboard.redis_unavailable", error=str(e))
        # Redis is optional — app works without rate limiting

    yield

    logger.info("taskboard.shutdown")
    await close_redis()
    await close_storage()


def create_app() -> FastAPI:
    """Build and return the FastAPI application."""
    configure_logging(settings.log_level, json_output=settings.log_json)

    app = FastAPI(
        title="Taskboard API",
        description="Task tracking with JWT-authenticated accounts",
        version=__version__,
        lifespan=lifespan,
    )

    # ── Middleware stack ──────────────────────────────────────
    # Note: Starlette middleware executes in reverse order of registration.
    # Request flow: CORS → RateLimit → Security → RequestId → handler

    from taskboard.middleware.rate_limit import RateLimitMiddleware
    from taskboard.middleware.request_id import RequestIdMiddleware
    from taskboard.middleware.security import SecurityHeadersMiddleware

    app.add_middleware(RequestIdMiddleware)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(
        RateLimitMiddleware,
        default_rpm=settings.rate_limit_rpm,
        auth_rpm=settings.rate_limit_auth_rpm,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)
    app.include_router(api_router)

    return app


# Default app instance (used by uvicorn: taskboard.main:app)
app = create_app()
