"""MusicBrainz provider implementing IMetadataProvider.

Uses the musicbrainzngs library to query the MusicBrainz open database for
artists, release groups, releases and artist search.  musicbrainzngs is
synchronous, so every call is offloaded with ``asyncio.to_thread`` and
bounded by ``asyncio.wait_for``.  Enforces the MusicBrainz rate limit of
1 request per second via asyncio-based throttling.
"""

from __future__ import annotations

import asyncio
import time
from typing import Any, Callable

import musicbrainzngs
import structlog

from freqshow.config.settings import Settings
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
from freqshow.utils.catalog import select_representative_release
from freqshow.utils.errors import NotFoundError, ProviderError

logger = structlog.get_logger(logger_name=__name__)

_DEFAULT_SEARCH_LIMIT = 25
_MAX_SEARCH_LIMIT = 100
_RELEASE_TYPES = ["album", "ep"]


class MusicBrainzProvider(IMetadataProvider):
    """MusicBrainz metadata provider with built-in rate limiting.

    No API key is required, but clients must identify themselves via a
    user-agent string and respect the 1 request/second rate limit.

    Attributes
    ----------
    _timeout : float
        Seconds to wait for a single musicbrainzngs call.
    _min_request_interval : float
        Minimum seconds between two calls; 0 disables throttling.
    """

    def __init__(self, settings: Settings, min_request_interval: float = 1.0) -> None:
        self._settings = settings
        self._timeout = settings.musicbrainz_timeout_seconds
        self._min_request_interval = min_request_interval
        self._last_request_time: float = 0.0
        self._throttle_lock = asyncio.Lock()

        musicbrainzngs.set_useragent(
            settings.musicbrainz_app_name,
            settings.musicbrainz_app_version,
            settings.musicbrainz_contact or None,
        )
        musicbrainzngs.set_hostname(
            settings.musicbrainz_host,
            use_https=settings.musicbrainz_use_https,
        )
        logger.info(
            "musicbrainz_provider_initialized",
            host=settings.musicbrainz_host,
            app_name=settings.musicbrainz_app_name,
            app_version=settings.musicbrainz_app_version,
        )

    # ------------------------------------------------------------------
    # Rate-limiting and call helpers
    # ------------------------------------------------------------------

    async def _throttle(self) -> None:
        """Enforce the MusicBrainz 1 req/sec rate limit."""
        async with self._throttle_lock:
            elapsed = time.monotonic() - self._last_request_time
            if elapsed < self._min_request_interval:
                await asyncio.sleep(self._min_request_interval - elapsed)
            self._last_request_time = time.monotonic()

    async def _call(self, description: str, fn: Callable[..., dict], *args: Any, **kwargs: Any) -> dict:
        """Run a musicbrainzngs function off the event loop and map its errors."""
        await self._throttle()
        try:
            return await asyncio.wait_for(
                asyncio.to_thread(fn, *args, **kwargs),
                timeout=self._timeout,
            )
        except asyncio.TimeoutError as exc:
            raise ProviderError(
                message=f"MusicBrainz {description} timed out after {self._timeout}s",
                provider_name=self.get_provider_name(),
            ) from exc
        except musicbrainzngs.ResponseError as exc:
            if getattr(exc.cause, "code", None) == 404:
                raise NotFoundError(
                    message=f"MusicBrainz {description}: not found",
                    provider_name=self.get_provider_name(),
                ) from exc
            raise ProviderError(
                message=f"MusicBrainz {description} failed: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc
        except musicbrainzngs.MusicBrainzError as exc:
            raise ProviderError(
                message=f"MusicBrainz {description} failed: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

    # ------------------------------------------------------------------
    # IMetadataProvider implementation
    # ------------------------------------------------------------------

    async def lookup_artist(self, artist_id: str) -> RemoteArtist:
        """Fetch an artist with aliases and tags."""
        response = await self._call(
            f"artist lookup '{artist_id}'",
            musicbrainzngs.get_artist_by_id,
            artist_id,
            includes=["aliases", "tags"],
        )
        artist = response.get("artist")
        if not artist:
            raise ProviderError(
                message=f"MusicBrainz artist lookup '{artist_id}' returned no artist",
                provider_name=self.get_provider_name(),
            )

        remote = self._map_artist(artist)
        logger.debug(
            "musicbrainz_artist_lookup",
            artist_id=artist_id,
            tag_count=len(remote.tags),
            alias_count=len(remote.aliases),
        )
        return remote

    async def lookup_album(self, album_id: str) -> ReleaseGroup:
        """Fetch a release group with its artist credit and releases."""
        response = await self._call(
            f"release group lookup '{album_id}'",
            musicbrainzngs.get_release_group_by_id,
            album_id,
            includes=["artists", "releases"],
        )
        group = response.get("release-group")
        if not group:
            raise ProviderError(
                message=f"MusicBrainz release group lookup '{album_id}' returned nothing",
                provider_name=self.get_provider_name(),
            )
        return self._map_release_group(group)

    async def list_artist_releases(
        self, artist_id: str, limit: int = 50, offset: int = 0
    ) -> ReleaseGroupPage:
        """Browse the artist's album and EP release groups."""
        response = await self._call(
            f"release group browse for artist '{artist_id}'",
            musicbrainzngs.browse_release_groups,
            artist=artist_id,
            release_type=_RELEASE_TYPES,
            limit=limit,
            offset=offset,
        )
        groups = tuple(
            self._map_release_group(group)
            for group in response.get("release-group-list", [])
        )
        logger.debug(
            "musicbrainz_artist_releases",
            artist_id=artist_id,
            release_group_count=len(groups),
        )
        return ReleaseGroupPage(
            release_groups=groups,
            offset=offset,
            count=_to_int(response.get("release-group-count"), len(groups)),
        )

    async def list_album_tracks(self, album: ReleaseGroup) -> list[RemoteTrack]:
        """Return the recordings of the album's representative release."""
        release = select_representative_release(album.releases)
        if release is None:
            return []

        response = await self._call(
            f"release lookup '{release.id}'",
            musicbrainzngs.get_release_by_id,
            release.id,
            includes=["recordings"],
        )
        tracks = self._map_tracks(response.get("release") or {})
        logger.debug(
            "musicbrainz_album_tracks",
            album_id=album.id,
            release_id=release.id,
            track_count=len(tracks),
        )
        return tracks

    async def search_artists(
        self, query: str, limit: int = _DEFAULT_SEARCH_LIMIT, offset: int = 0
    ) -> ArtistSearchPage:
        """Search MusicBrainz for artists matching *query*."""
        if limit <= 0:
            limit = _DEFAULT_SEARCH_LIMIT
        limit = min(limit, _MAX_SEARCH_LIMIT)
        offset = max(offset, 0)

        response = await self._call(
            f"artist search '{query}'",
            musicbrainzngs.search_artists,
            query=query,
            limit=limit,
            offset=offset,
        )

        results = tuple(
            self._map_search_hit(artist)
            for artist in response.get("artist-list", [])
            if artist.get("id")
        )
        logger.debug("musicbrainz_artist_search", query=query, result_count=len(results))
        return ArtistSearchPage(
            artists=results,
            offset=offset,
            count=_to_int(response.get("artist-count"), len(results)),
        )

    def get_provider_name(self) -> str:
        """Return the provider identifier."""
        return "musicbrainz"

    def is_available(self) -> bool:
        """MusicBrainz is always available (no API key required)."""
        return True

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _map_artist(artist: dict[str, Any]) -> RemoteArtist:
        """Map a musicbrainzngs artist dict to a :class:`RemoteArtist`."""
        aliases: list[str] = []
        for alias in artist.get("alias-list", []):
            name = alias.get("alias", "") if isinstance(alias, dict) else str(alias)
            if name and name not in aliases:
                aliases.append(name)

        tags = tuple(
            ArtistTag(name=tag.get("name", ""), count=_to_int(tag.get("count"), 0))
            for tag in artist.get("tag-list", [])
            if tag.get("name")
        )

        life_span = artist.get("life-span") or {}
        return RemoteArtist(
            id=artist.get("id", ""),
            name=artist.get("name", ""),
            country=artist.get("country", ""),
            type=artist.get("type", ""),
            disambiguation=artist.get("disambiguation", ""),
            aliases=tuple(aliases),
            tags=tags,
            begin=life_span.get("begin", ""),
            end=life_span.get("end", ""),
            ended=str(life_span.get("ended", "")).lower() == "true",
        )

    @classmethod
    def _map_search_hit(cls, artist: dict[str, Any]) -> ArtistSearchResult:
        """Map one search hit; it carries the same fields as an artist lookup."""
        remote = cls._map_artist(artist)
        return ArtistSearchResult(
            id=remote.id,
            name=remote.name,
            country=remote.country,
            type=remote.type,
            disambiguation=remote.disambiguation,
            aliases=remote.aliases,
            begin=remote.begin,
            end=remote.end,
            ended=remote.ended,
            score=_to_int(artist.get("ext:score"), 0),
        )

    @staticmethod
    def _map_release_group(group: dict[str, Any]) -> ReleaseGroup:
        """Map a musicbrainzngs release-group dict to a :class:`ReleaseGroup`."""
        credits: list[ArtistCredit] = []
        for item in group.get("artist-credit", []):
            # Join phrases (" & ", " feat. ") appear as bare strings.
            if not isinstance(item, dict):
                continue
            artist = item.get("artist") or {}
            credits.append(
                ArtistCredit(
                    name=item.get("name") or artist.get("name", ""),
                    artist_id=artist.get("id", ""),
                    artist_name=artist.get("name", ""),
                )
            )

        releases = tuple(
            ReleaseSummary(
                id=release["id"],
                title=release.get("title", ""),
                status=release.get("status", ""),
                date=release.get("date", ""),
            )
            for release in group.get("release-list", [])
            if release.get("id")
        )

        return ReleaseGroup(
            id=group.get("id", ""),
            title=group.get("title", ""),
            primary_type=group.get("primary-type") or group.get("type", ""),
            secondary_types=tuple(group.get("secondary-type-list", [])),
            first_release_date=group.get("first-release-date", ""),
            artist_credit=tuple(credits),
            releases=releases,
        )

    @staticmethod
    def _map_tracks(release: dict[str, Any]) -> list[RemoteTrack]:
        """Flatten every medium's track list, numbering tracks across discs."""
        tracks: list[RemoteTrack] = []
        for medium in release.get("medium-list", []):
            for track in medium.get("track-list", []):
                recording = track.get("recording") or {}
                title = track.get("title") or recording.get("title", "")
                length = _to_int(track.get("length") or recording.get("length"), 0)
                tracks.append(
                    RemoteTrack(position=len(tracks) + 1, title=title, length_ms=length)
                )
        return tracks


def _to_int(value: Any, default: int) -> int:
    if value is None or value == "":
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return default
