from typing import Optional

from supportbot.config import Settings
from supportbot.db import build_engine
from supportbot.storage.base import DEFAULT_LIST_LIMIT, RecordStore
from supportbot.storage.memory import MemoryStore
from supportbot.storage.sql import SqlStore

__all__ = [
    "DEFAULT_LIST_LIMIT",
    "MemoryStore",
    "RecordStore",
    "SqlStore",
    "build_store",
]


def build_store(settings: Settings) -> RecordStore:
    """Pick the backend named by STORAGE_BACKEND."""
    if settings.storage_backend == "database":
        # SQLite is only used for local runs and tests, where migrations are not applied
        engine = build_engine(settings)
        return SqlStore.from_engine(
            engine, create_tables=engine.dialect.name == "sqlite"
        )
    return MemoryStore()
