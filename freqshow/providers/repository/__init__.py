"""Repository (storage engine) implementations, selected by ``database_driver``."""

from freqshow.providers.repository.memory_repository import MemoryRepository
from freqshow.providers.repository.sqlite_repository import SQLiteRepository

__all__ = ["MemoryRepository", "SQLiteRepository"]
