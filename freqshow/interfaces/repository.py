"""Abstract base class for catalog persistence.

Defines the contract for storing and retrieving :class:`Artist` and
:class:`Album` records keyed by their external identifier.  The in-memory
and SQLite engines both implement it and are selected at startup by the
``database_driver`` setting.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from freqshow.models.entities import Album, Artist, EntityKind
from freqshow.utils.errors import StoreError

CatalogRecord = Artist | Album

_RECORD_TYPES: dict[EntityKind, type] = {
    EntityKind.ARTIST: Artist,
    EntityKind.ALBUM: Album,
}


class IRepository(ABC):
    """Contract for the catalog cache.

    Implementations must return independent copies: mutating a record
    obtained from :meth:`get` never changes what a later :meth:`get`
    returns.  Writes to the same identifier are last-write-wins.
    """

    async def initialize(self) -> None:
        """Prepare the backing store (create schema, directories).

        The default implementation does nothing.
        """

    async def close(self) -> None:
        """Release any held resources.  The default implementation does nothing."""

    @abstractmethod
    async def get(self, kind: EntityKind, entity_id: str) -> CatalogRecord | None:
        """Return the stored record of *kind* for *entity_id*.

        Parameters
        ----------
        kind:
            Which namespace to read (artists or albums).
        entity_id:
            The external identifier.

        Returns
        -------
        Artist, Album or None
            ``None`` for an unknown identifier; absence is never an error.

        Raises
        ------
        freqshow.utils.errors.StoreError
            If the backing store cannot be read.
        """

    @abstractmethod
    async def put(self, kind: EntityKind, record: CatalogRecord) -> None:
        """Insert or replace *record* under its identifier.

        Raises
        ------
        freqshow.utils.errors.StoreError
            If the record has an empty identifier, does not match *kind*,
            or the backing store cannot be written.
        """

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a short identifier for this storage engine (e.g. ``"sqlite"``)."""


def check_record(kind: EntityKind, record: CatalogRecord, provider_name: str) -> None:
    """Raise :class:`StoreError` for a record no repository may persist.

    A record is rejected when its type does not match *kind* or its
    identifier is empty.
    """
    expected = _RECORD_TYPES[kind]
    if not isinstance(record, expected):
        raise StoreError(
            message=f"Cannot store {type(record).__name__} as {kind.value}",
            provider_name=provider_name,
        )
    if not record.id.strip():
        raise StoreError(
            message=f"Cannot store {kind.value} with an empty id",
            provider_name=provider_name,
        )
