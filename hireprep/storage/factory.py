"""
Storage Factory - Creates the configured storage backend

Reads the storage settings from the config and instantiates the matching
backend. Called once at process start.
"""

import importlib
from typing import Optional

from hireprep.config import Config
from hireprep.database import Database
from hireprep.logging_config import get_logger

from .base import Storage

logger = get_logger(__name__)

# Registry of available backends
BACKENDS = {
    "sqlite": "hireprep.storage.sqlite.SQLiteStorage",
    "memory": "hireprep.storage.memory.InMemoryStorage",
}


def create_storage(config: Optional[Config] = None, clock=None) -> Storage:
    """
    Build the storage backend selected by configuration.

    'auto' resolves to SQLite when a database path is configured and to the
    in-memory store otherwise. An explicit 'sqlite' backend without a path
    is returned unconfigured; its operations raise StorageUnavailableError.

    Args:
        config: Config instance (defaults to the global config)
        clock: Optional clock passed through to the backend

    Returns:
        Storage: The backend instance
    """
    if config is None:
        from hireprep.config import get_config

        config = get_config()

    backend = config.resolve_storage_backend()
    module_path, class_name = BACKENDS[backend].rsplit(".", 1)
    storage_class = getattr(importlib.import_module(module_path), class_name)

    if backend == "sqlite":
        if not config.database_path:
            logger.error("SQLite storage selected but no database path is configured")
        else:
            logger.info(f"Using SQLite storage at {config.database_path}")
        return storage_class(Database(config.database_path), clock=clock)

    if config.storage_backend == "auto":
        logger.warning(
            "No database path configured - using in-memory storage (data is lost on restart)"
        )
    else:
        logger.info("Using in-memory storage")
    return storage_class(clock=clock)
