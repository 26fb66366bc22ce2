"""Abstract base class for the primary (authoritative) metadata provider.

The primary provider is the source of truth for whether an artist or album
exists.  Its lookups distinguish "does not exist" (``NotFoundError``) from
"could not find out" (``ProviderError``); the catalog service turns the
latter into ``UpstreamError``.

The provider-neutral records it returns are frozen dataclasses declared
here, next to the contract, so the service never sees a raw API payload.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field


@dataclass(frozen=True)
class ArtistTag:
    """A folksonomy tag with its vote count."""

    name: str
    count: int = 0


@dataclass(frozen=True)
class RemoteArtist:
    """Artist identity fields as reported by the primary provider."""

    id: str
    name: str
    country: str = ""
    type: str = ""
    disambiguation: str = ""
    aliases: tuple[str, ...] = ()
    tags: tuple[ArtistTag, ...] = ()
    begin: str = ""
    end: str = ""
    ended: bool = False


@dataclass(frozen=True)
class ArtistCredit:
    """One entry of a release group's artist credit.

    Attributes
    ----------
    name:
        The credited name as printed on the release.
    artist_id:
        Identifier of the credited artist; may be empty.
    artist_name:
        The artist's canonical name; may differ from *name*.
    """

    name: str
    artist_id: str = ""
    artist_name: str = ""


@dataclass(frozen=True)
class ReleaseSummary:
    """A concrete release (edition) belonging to a release group."""

    id: str
    title: str = ""
    status: str = ""
    date: str = ""


@dataclass(frozen=True)
class ReleaseGroup:
    """A release group (album) as reported by the primary provider."""

    id: str
    title: str
    primary_type: str = ""
    secondary_types: tuple[str, ...] = ()
    first_release_date: str = ""
    artist_credit: tuple[ArtistCredit, ...] = ()
    releases: tuple[ReleaseSummary, ...] = ()


@dataclass(frozen=True)
class ReleaseGroupPage:
    """One page of an artist's release groups."""

    release_groups: tuple[ReleaseGroup, ...] = ()
    offset: int = 0
    count: int = 0


@dataclass(frozen=True)
class RemoteTrack:
    """A track of a release, length in milliseconds (0 when unknown)."""

    position: int
    title: str
    length_ms: int = 0


@dataclass(frozen=True)
class ArtistSearchResult:
    """A single hit of an artist search.

    ``score`` is the provider's relevance score from 0 to 100.
    """

    id: str
    name: str
    country: str = ""
    type: str = ""
    disambiguation: str = ""
    aliases: tuple[str, ...] = ()
    begin: str = ""
    end: str = ""
    ended: bool = False
    score: int = 0


@dataclass(frozen=True)
class ArtistSearchPage:
    """Search hits plus the paging window they came from."""

    artists: tuple[ArtistSearchResult, ...] = field(default_factory=tuple)
    offset: int = 0
    count: int = 0


class IMetadataProvider(ABC):
    """Contract for the primary metadata service (MusicBrainz)."""

    @abstractmethod
    async def lookup_artist(self, artist_id: str) -> RemoteArtist:
        """Fetch an artist with aliases, tags and life span.

        Raises
        ------
        freqshow.utils.errors.NotFoundError
            If the provider reports the artist does not exist.
        freqshow.utils.errors.ProviderError
            For any other failure (transport, timeout, bad payload).
        """

    @abstractmethod
    async def lookup_album(self, album_id: str) -> ReleaseGroup:
        """Fetch a release group with its artist credit and releases.

        Raises
        ------
        freqshow.utils.errors.NotFoundError
            If the provider reports the release group does not exist.
        freqshow.utils.errors.ProviderError
            For any other failure.
        """

    @abstractmethod
    async def list_artist_releases(
        self, artist_id: str, limit: int = 50, offset: int = 0
    ) -> ReleaseGroupPage:
        """List an artist's album and EP release groups."""

    @abstractmethod
    async def list_album_tracks(self, album: ReleaseGroup) -> list[RemoteTrack]:
        """Return the tracks of *album*'s representative release.

        Returns an empty list when the release group has no releases.
        """

    @abstractmethod
    async def search_artists(
        self, query: str, limit: int = 25, offset: int = 0
    ) -> ArtistSearchPage:
        """Search artists by free-text *query*."""

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a short identifier for this provider."""

    @abstractmethod
    def is_available(self) -> bool:
        """Return ``True`` if the provider is configured and usable."""
