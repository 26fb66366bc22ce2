"""SQLite-backed repository implementing IRepository.

Persists artists and albums to a local SQLite database (``data/freqshow.db``
by default) as JSON payloads keyed by external identifier.  Uses
``aiosqlite`` for async I/O and opens a short-lived connection per
operation.
"""

from __future__ import annotations

import asyncio
from pathlib import Path

import aiosqlite
import pydantic
import structlog

from freqshow.interfaces.repository import CatalogRecord, IRepository, check_record
from freqshow.models.entities import Album, Artist, EntityKind
from freqshow.utils.errors import StoreError

logger = structlog.get_logger(logger_name=__name__)

_DEFAULT_DB_PATH = Path("data/freqshow.db")

_TABLES: dict[EntityKind, str] = {
    EntityKind.ARTIST: "artists",
    EntityKind.ALBUM: "albums",
}

_MODELS: dict[EntityKind, type[Artist] | type[Album]] = {
    EntityKind.ARTIST: Artist,
    EntityKind.ALBUM: Album,
}

_CREATE_TABLE_SQL = """\
CREATE TABLE IF NOT EXISTS {table} (
    id          TEXT PRIMARY KEY,
    payload     TEXT NOT NULL,
    updated_at  TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%fZ', 'now'))
);
"""

_UPSERT_SQL = """\
INSERT INTO {table} (id, payload, updated_at)
VALUES (?, ?, strftime('%Y-%m-%dT%H:%M:%fZ', 'now'))
ON CONFLICT(id)
DO UPDATE SET payload    = excluded.payload,
              updated_at = excluded.updated_at;
"""

_SELECT_SQL = "SELECT payload FROM {table} WHERE id = ?;"


class SQLiteRepository(IRepository):
    """SQLite catalog persistence."""

    def __init__(self, db_path: str | Path = _DEFAULT_DB_PATH) -> None:
        self._db_path = Path(db_path)
        self._write_lock = asyncio.Lock()

    async def initialize(self) -> None:
        """Create the artists and albums tables if they don't exist."""
        try:
            self._db_path.parent.mkdir(parents=True, exist_ok=True)
            async with aiosqlite.connect(str(self._db_path)) as db:
                for table in _TABLES.values():
                    await db.execute(_CREATE_TABLE_SQL.format(table=table))
                await db.commit()
        except (OSError, aiosqlite.Error) as exc:
            raise StoreError(
                message=f"Could not initialise database at {self._db_path}: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc
        logger.info("catalog_db_initialized", path=str(self._db_path))

    async def get(self, kind: EntityKind, entity_id: str) -> CatalogRecord | None:
        table = _TABLES[kind]
        try:
            async with aiosqlite.connect(str(self._db_path)) as db:
                cursor = await db.execute(_SELECT_SQL.format(table=table), (entity_id,))
                row = await cursor.fetchone()
        except aiosqlite.Error as exc:
            raise StoreError(
                message=f"Failed to read {kind.value} '{entity_id}': {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

        if row is None:
            return None

        try:
            return _MODELS[kind].model_validate_json(row[0])
        except pydantic.ValidationError as exc:
            raise StoreError(
                message=f"Stored {kind.value} '{entity_id}' is corrupt: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

    async def put(self, kind: EntityKind, record: CatalogRecord) -> None:
        check_record(kind, record, self.get_provider_name())
        payload = record.model_dump_json(by_alias=True)
        table = _TABLES[kind]
        try:
            async with self._write_lock:
                async with aiosqlite.connect(str(self._db_path)) as db:
                    await db.execute(_UPSERT_SQL.format(table=table), (record.id, payload))
                    await db.commit()
        except aiosqlite.Error as exc:
            raise StoreError(
                message=f"Failed to save {kind.value} '{record.id}': {exc}",
                provider_name=self.get_provider_name(),
            ) from exc
        logger.debug("sqlite_record_saved", kind=kind.value, entity_id=record.id)

    def get_provider_name(self) -> str:
        return "sqlite"
