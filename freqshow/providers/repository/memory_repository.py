"""In-memory repository implementing IRepository.

Keeps one dict per entity kind for the lifetime of the process.  Records
are deep-copied on the way in and on the way out so callers never share
list objects with the stored snapshot.  Suitable for development and
tests; nothing survives a restart.
"""

from __future__ import annotations

import asyncio

import structlog

from freqshow.interfaces.repository import CatalogRecord, IRepository, check_record
from freqshow.models.entities import EntityKind

logger = structlog.get_logger(logger_name=__name__)


class MemoryRepository(IRepository):
    """Process-local catalog store."""

    def __init__(self) -> None:
        self._records: dict[EntityKind, dict[str, CatalogRecord]] = {
            kind: {} for kind in EntityKind
        }
        self._write_lock = asyncio.Lock()

    async def get(self, kind: EntityKind, entity_id: str) -> CatalogRecord | None:
        record = self._records[kind].get(entity_id)
        if record is None:
            return None
        return record.model_copy(deep=True)

    async def put(self, kind: EntityKind, record: CatalogRecord) -> None:
        check_record(kind, record, self.get_provider_name())
        snapshot = record.model_copy(deep=True)
        async with self._write_lock:
            self._records[kind][record.id] = snapshot
        logger.debug("memory_record_saved", kind=kind.value, entity_id=record.id)

    async def close(self) -> None:
        for table in self._records.values():
            table.clear()

    def get_provider_name(self) -> str:
        return "memory"

