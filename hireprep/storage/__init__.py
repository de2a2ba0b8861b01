"""
Storage Package - Repository for applications and interview sessions

Usage:
    from hireprep.storage import create_storage

    storage = create_storage(config)
    app = storage.create_application({"company": "Acme", "role": "Engineer"})
    page = storage.list_applications(search="acme", limit=10)
    stats = storage.get_stats()
"""

from .base import Storage
from .memory import InMemoryStorage
from .sqlite import SQLiteStorage
from .factory import create_storage, BACKENDS

__all__ = [
    "Storage",
    "InMemoryStorage",
    "SQLiteStorage",
    "create_storage",
    "BACKENDS",
]
