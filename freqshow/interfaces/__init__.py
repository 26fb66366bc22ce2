"""Public interface definitions for storage and external data providers.

The catalog service talks to its collaborators only through the abstract
base classes in this package; concrete adapters live in
``freqshow/providers/`` and are wired up in ``freqshow/main.py``.

    Interface             ->  Concrete implementations
    ------------------------------------------------------------------
    IRepository           ->  MemoryRepository, SQLiteRepository
    IMetadataProvider     ->  MusicBrainzProvider
    IBiographyProvider    ->  WikipediaBiographyProvider
    IReviewProvider       ->  DiscogsReviewProvider
"""

from freqshow.interfaces.biography_provider import IBiographyProvider
from freqshow.interfaces.metadata_provider import (
    ArtistCredit,
    ArtistSearchPage,
    ArtistSearchResult,
    ArtistTag,
    IMetadataProvider,
    ReleaseGroup,
    ReleaseGroupPage,
    ReleaseSummary,
    RemoteArtist,
    RemoteTrack,
)
from freqshow.interfaces.repository import CatalogRecord, IRepository, check_record
from freqshow.interfaces.review_provider import IReviewProvider

__all__ = [
    "ArtistCredit",
    "ArtistSearchPage",
    "ArtistSearchResult",
    "ArtistTag",
    "CatalogRecord",
    "IBiographyProvider",
    "IMetadataProvider",
    "IRepository",
    "IReviewProvider",
    "check_record",
    "ReleaseGroup",
    "ReleaseGroupPage",
    "ReleaseSummary",
    "RemoteArtist",
    "RemoteTrack",
]
