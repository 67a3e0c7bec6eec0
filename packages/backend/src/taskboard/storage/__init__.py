"""Storage backend selection.

Learn: Exactly one backend is active for the life of the process. It is
chosen once, in the app lifespan, by init_storage():

    storage_backend="memory" → MemoryStorage
    storage_backend="sql"    → SqlStorage, startup fails if unreachable
    storage_backend="auto"   → SqlStorage; if the database is down and
                               environment == "development", log a
                               warning and use MemoryStorage instead

Route handlers get it through the get_storage() dependency, which tests
override with a fresh MemoryStorage.
"""

from typing import Optional

import structlog

from taskboard.config import Settings
from taskboard.errors import StorageError
from taskboard.storage.base import Storage, TaskRepository, UserRepository
from taskboard.storage.memory import MemoryStorage

logger = structlog.get_logger()

__all__ = [
    "MemoryStorage",
    "Storage",
    "TaskRepository",
    "UserRepository",
    "close_storage",
    "get_storage",
    "init_storage",
    "set_storage",
]

# Global active backend (initialized in lifespan)
_storage: Optional[Storage] = None


async def init_storage(config: Settings) -> Storage:
    """Pick, set up and install the storage backend for this process."""
    if config.storage_backend == "memory":
        return set_storage(MemoryStorage())

    from taskboard.storage.sql import SqlStorage

    sql = SqlStorage(
        config.database_url,
        echo=config.debug,
        create_schema=config.auto_create_schema,
    )
    try:
        await sql.setup()
    except StorageError as e:
        await sql.close()
        if config.storage_backend == "auto" and config.environment == "development":
            logger.warning(
                "storage.database_unavailable",
                error=e.message,
                fallback="memory",
                note="data will not survive a restart",
            )
            return set_storage(MemoryStorage())
        logger.error("storage.database_unavailable", error=e.message)
        raise
    return set_storage(sql)


def set_storage(storage: Storage) -> Storage:
    global _storage
    _storage = storage
    logger.info("storage.selected", backend=storage.name)
    return storage


def get_storage() -> Storage:
    """FastAPI dependency — the process-wide storage backend."""
    if _storage is None:
        raise RuntimeError("Storage not initialized. Call init_storage() first.")
    return _storage


async def close_storage() -> None:
    global _storage
    if _storage is not None:
        await _storage.close()
        _storage = None
