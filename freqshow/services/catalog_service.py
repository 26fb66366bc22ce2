"""Cache-first catalog service: resolves artists and albums.

Every lookup starts at the repository.  On a miss the primary metadata
provider (MusicBrainz) decides whether the resource exists at all; once it
does, the secondary providers are consulted concurrently, each contributing
one facet of the record:

    Artist  <- primary identity + genres
            <- biography provider        (biography)
            <- primary release listing   (albums)

    Album   <- primary release group + artist credit
            <- primary release lookup    (tracks)
            <- review provider           (review)

Secondary failures are logged and leave their facet at its empty value; a
primary failure or a failed final write fails the whole lookup.  The merged
record is persisted so the next request costs no upstream calls.

Artists cached with an empty album list get their discography backfilled
on read.  Albums are never refreshed once stored, and neither is a
non-empty album list.
"""

from __future__ import annotations

from collections.abc import Awaitable
from typing import Any

import structlog

from freqshow.interfaces.biography_provider import IBiographyProvider
from freqshow.interfaces.metadata_provider import (
    ArtistSearchPage,
    IMetadataProvider,
    ReleaseGroup,
    ReleaseGroupPage,
    RemoteArtist,
    RemoteTrack,
)
from freqshow.interfaces.repository import IRepository
from freqshow.interfaces.review_provider import IReviewProvider
from freqshow.models.entities import Album, Artist, EntityKind, LifeSpan, Review, Track
from freqshow.utils.catalog import (
    format_track_length,
    parse_release_year,
    primary_artist_credit,
    rank_genres,
)
from freqshow.utils.concurrency import gather_enrichments
from freqshow.utils.errors import NotFoundError, UpstreamError, ValidationError
from freqshow.utils.logging import get_logger

_DEFAULT_SEARCH_LIMIT = 25
_MAX_SEARCH_LIMIT = 100


class CatalogService:
    """Resolves catalog records from the cache, falling back to providers.

    Parameters
    ----------
    repository:
        Where resolved records are cached.
    metadata:
        The authoritative metadata provider.
    biography:
        Optional biography provider; ``None`` leaves biographies empty.
    reviews:
        Optional review provider; ``None`` leaves reviews empty.
    enrichment_timeout:
        Seconds allowed for each secondary lookup.
    release_limit:
        How many release groups to list when building an artist's albums.
    """

    def __init__(
        self,
        repository: IRepository,
        metadata: IMetadataProvider,
        biography: IBiographyProvider | None = None,
        reviews: IReviewProvider | None = None,
        enrichment_timeout: float = 10.0,
        release_limit: int = 50,
    ) -> None:
        self._repository = repository
        self._metadata = metadata
        self._biography = biography
        self._reviews = reviews
        self._enrichment_timeout = enrichment_timeout
        self._release_limit = release_limit
        self._logger: structlog.BoundLogger = get_logger(__name__)

    # ------------------------------------------------------------------
    # Artists
    # ------------------------------------------------------------------

    async def resolve_artist(self, artist_id: str) -> Artist:
        """Return the artist for *artist_id*, building and caching it on a miss.

        Raises
        ------
        ValidationError
            If *artist_id* is empty.
        NotFoundError
            If the metadata provider reports no such artist.
        UpstreamError
            If the metadata provider fails.
        StoreError
            If the repository cannot be read or the new record cannot be saved.
        """
        artist_id = _require_id(artist_id, "artist")

        cached = await self._repository.get(EntityKind.ARTIST, artist_id)
        if cached is not None:
            if cached.albums:
                self._logger.debug("artist_cache_hit", artist_id=artist_id)
                return cached
            return await self._backfill_albums(cached)

        self._logger.info("artist_cache_miss", artist_id=artist_id)
        remote = await self._from_primary(
            self._metadata.lookup_artist(artist_id), "artist", artist_id
        )
        artist = _artist_from_remote(artist_id, remote)

        calls: dict[str, Awaitable[Any]] = {
            "discography": self._metadata.list_artist_releases(
                artist_id, limit=self._release_limit, offset=0
            ),
        }
        if self._biography is not None and artist.name:
            calls["biography"] = self._biography.get_biography(artist.name)

        outcomes = await gather_enrichments(
            calls,
            timeout=self._enrichment_timeout,
            logger=self._logger,
            artist_id=artist_id,
        )

        update: dict[str, Any] = {}
        if outcomes.get("biography"):
            update["biography"] = outcomes["biography"]
        if outcomes.get("discography") is not None:
            update["albums"] = _albums_from_page(artist, outcomes["discography"])
        if update:
            artist = artist.model_copy(update=update)

        await self._repository.put(EntityKind.ARTIST, artist)
        self._logger.info(
            "artist_resolved",
            artist_id=artist_id,
            has_biography=bool(artist.biography),
            album_count=len(artist.albums),
            genre_count=len(artist.genres),
        )
        return artist

    async def _backfill_albums(self, artist: Artist) -> Artist:
        """Fill a cached artist's empty discography; never fails the lookup."""
        outcomes = await gather_enrichments(
            {
                "discography": self._metadata.list_artist_releases(
                    artist.id, limit=self._release_limit, offset=0
                ),
            },
            timeout=self._enrichment_timeout,
            logger=self._logger,
            artist_id=artist.id,
        )
        page = outcomes["discography"]
        if page is None:
            return artist

        albums = _albums_from_page(artist, page)
        if not albums:
            self._logger.debug("artist_backfill_empty", artist_id=artist.id)
            return artist

        enriched = artist.model_copy(update={"albums": albums})
        try:
            await self._repository.put(EntityKind.ARTIST, enriched)
        except Exception as exc:
            self._logger.warning(
                "artist_backfill_save_failed",
                artist_id=artist.id,
                error=str(exc),
            )
        else:
            self._logger.info(
                "artist_albums_backfilled", artist_id=artist.id, album_count=len(albums)
            )
        return enriched

    # ------------------------------------------------------------------
    # Albums
    # ------------------------------------------------------------------

    async def resolve_album(self, album_id: str) -> Album:
        """Return the album for *album_id*, building and caching it on a miss.

        Raises the same errors as :meth:`resolve_artist`.
        """
        album_id = _require_id(album_id, "album")

        cached = await self._repository.get(EntityKind.ALBUM, album_id)
        if cached is not None:
            self._logger.debug("album_cache_hit", album_id=album_id)
            return cached

        self._logger.info("album_cache_miss", album_id=album_id)
        group = await self._from_primary(
            self._metadata.lookup_album(album_id), "album", album_id
        )
        album = _album_from_group(album_id, group)

        calls: dict[str, Awaitable[Any]] = {
            "tracks": self._metadata.list_album_tracks(group),
        }
        if self._reviews is not None and album.title:
            calls["review"] = self._reviews.get_review(album.artist_name, album.title)

        outcomes = await gather_enrichments(
            calls,
            timeout=self._enrichment_timeout,
            logger=self._logger,
            album_id=album_id,
        )

        update: dict[str, Any] = {}
        if outcomes.get("tracks"):
            update["tracks"] = _tracks_from_remote(outcomes["tracks"])
        if isinstance(outcomes.get("review"), Review):
            update["review"] = outcomes["review"]
        if update:
            album = album.model_copy(update=update)

        await self._repository.put(EntityKind.ALBUM, album)
        self._logger.info(
            "album_resolved",
            album_id=album_id,
            track_count=len(album.tracks),
            has_review=not album.review.is_empty,
        )
        return album

    # ------------------------------------------------------------------
    # Search
    # ------------------------------------------------------------------

    async def search_artists(
        self, query: str, limit: int = _DEFAULT_SEARCH_LIMIT, offset: int = 0
    ) -> ArtistSearchPage:
        """Pass an artist search through to the metadata provider (uncached).

        Raises
        ------
        ValidationError
            If *query* is blank, *limit* is outside 1..100 or *offset* is negative.
        UpstreamError
            If the metadata provider fails.
        """
        query = (query or "").strip()
        if not query:
            raise ValidationError(message="Search query must not be empty")
        if not 1 <= limit <= _MAX_SEARCH_LIMIT:
            raise ValidationError(
                message=f"Search limit must be between 1 and {_MAX_SEARCH_LIMIT}, got {limit}"
            )
        if offset < 0:
            raise ValidationError(message=f"Search offset must not be negative, got {offset}")

        return await self._from_primary(
            self._metadata.search_artists(query, limit=limit, offset=offset),
            "search",
            query,
        )

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    async def _from_primary(self, call: Awaitable[Any], what: str, key: str) -> Any:
        """Await a primary-provider call, translating its failures."""
        try:
            return await call
        except NotFoundError:
            self._logger.info(f"{what}_not_found", key=key)
            raise
        except Exception as exc:
            self._logger.error(
                f"{what}_upstream_failed",
                key=key,
                error=str(exc),
                error_type=type(exc).__name__,
            )
            raise UpstreamError(
                message=f"Metadata lookup for {what} '{key}' failed: {exc}",
                provider_name=self._metadata.get_provider_name(),
            ) from exc


def _require_id(value: str | None, kind: str) -> str:
    value = (value or "").strip()
    if not value:
        raise ValidationError(message=f"{kind} id must not be empty")
    return value


def _artist_from_remote(artist_id: str, remote: RemoteArtist) -> Artist:
    return Artist(
        id=artist_id,
        name=remote.name,
        genres=rank_genres(remote.tags),
        country=remote.country,
        type=remote.type,
        disambiguation=remote.disambiguation,
        aliases=list(remote.aliases),
        life_span=LifeSpan(begin=remote.begin, end=remote.end, ended=remote.ended),
    )


def _albums_from_page(artist: Artist, page: ReleaseGroupPage) -> list[Album]:
    """Album summaries (no tracks, no review) credited to *artist*."""
    return [
        Album(
            id=group.id,
            title=group.title,
            artist_id=artist.id,
            artist_name=artist.name,
            primary_type=group.primary_type,
            secondary_types=list(group.secondary_types),
            first_release_date=group.first_release_date,
            year=parse_release_year(group.first_release_date),
        )
        for group in page.release_groups
        if group.id
    ]


def _album_from_group(album_id: str, group: ReleaseGroup) -> Album:
    artist_id, artist_name = primary_artist_credit(group.artist_credit)
    return Album(
        id=album_id,
        title=group.title,
        artist_id=artist_id,
        artist_name=artist_name,
        primary_type=group.primary_type,
        secondary_types=list(group.secondary_types),
        first_release_date=group.first_release_date,
        year=parse_release_year(group.first_release_date),
    )


def _tracks_from_remote(tracks: list[RemoteTrack]) -> list[Track]:
    return [
        Track(
            position=track.position,
            title=track.title,
            duration=format_track_length(track.length_ms),
        )
        for track in tracks
    ]
