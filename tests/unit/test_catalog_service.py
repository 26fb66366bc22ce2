"""Unit tests for CatalogService: cache-first artist/album resolution.

All providers are mocks; the repository is a real MemoryRepository unless a
test needs it to fail.
"""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from freqshow.interfaces.metadata_provider import (
    ArtistCredit,
    ReleaseGroup,
    ReleaseGroupPage,
)
from freqshow.interfaces.repository import IRepository
from freqshow.models.entities import Album, Artist, EntityKind, Review
from freqshow.providers.repository.memory_repository import MemoryRepository
from freqshow.services.catalog_service import CatalogService
from freqshow.utils.errors import (
    NotFoundError,
    ProviderError,
    RateLimitError,
    StoreError,
    UpstreamError,
    ValidationError,
)


def _service(
    repository: IRepository,
    metadata: MagicMock,
    biography: MagicMock | None = None,
    reviews: MagicMock | None = None,
    **kwargs,
) -> CatalogService:
    return CatalogService(
        repository=repository,
        metadata=metadata,
        biography=biography,
        reviews=reviews,
        **kwargs,
    )


def _failing_repository(get_error: Exception | None = None, put_error: Exception | None = None) -> MagicMock:
    repo = MagicMock(spec=IRepository)
    repo.get = AsyncMock(side_effect=get_error, return_value=None)
    repo.put = AsyncMock(side_effect=put_error)
    repo.get_provider_name.return_value = "broken"
    return repo


# ======================================================================
# resolve_artist
# ======================================================================


class TestResolveArtistCacheMiss:
    @pytest.mark.asyncio
    async def test_builds_artist_from_all_sources(
        self, memory_repository, mock_metadata, mock_biography
    ) -> None:
        service = _service(memory_repository, mock_metadata, mock_biography)

        artist = await service.resolve_artist("artist-1")

        assert artist.id == "artist-1"
        assert artist.name == "Nirvana"
        assert artist.biography.startswith("Nirvana was an American rock band")
        assert artist.genres == ["grunge", "rock"]
        assert artist.country == "US"
        assert artist.aliases == ["Nirvana US"]
        assert artist.life_span.ended is True
        assert artist.life_span.end == "1994-04-05"
        assert [a.id for a in artist.albums] == ["rg-bleach", "rg-nevermind"]
        mock_biography.get_biography.assert_awaited_once_with("Nirvana")
        mock_metadata.list_artist_releases.assert_awaited_once_with(
            "artist-1", limit=50, offset=0
        )

    @pytest.mark.asyncio
    async def test_album_summaries_carry_artist_and_year(
        self, memory_repository, mock_metadata, mock_biography
    ) -> None:
        service = _service(memory_repository, mock_metadata, mock_biography)

        artist = await service.resolve_artist("artist-1")

        bleach = artist.albums[0]
        assert bleach.artist_id == "artist-1"
        assert bleach.artist_name == "Nirvana"
        assert bleach.year == 1989
        assert bleach.tracks == []
        assert bleach.review.is_empty

    @pytest.mark.asyncio
    async def test_persists_merged_record(
        self, memory_repository, mock_metadata, mock_biography
    ) -> None:
        service = _service(memory_repository, mock_metadata, mock_biography)

        artist = await service.resolve_artist("artist-1")

        stored = await memory_repository.get(EntityKind.ARTIST, "artist-1")
        assert stored == artist

    @pytest.mark.asyncio
    async def test_secondary_failures_leave_fields_empty(
        self, memory_repository, mock_metadata, mock_biography
    ) -> None:
        mock_biography.get_biography.side_effect = NotFoundError(provider_name="wikipedia")
        mock_metadata.list_artist_releases.side_effect = ProviderError(provider_name="musicbrainz")
        service = _service(memory_repository, mock_metadata, mock_biography)

        artist = await service.resolve_artist("artist-1")

        assert artist.biography == ""
        assert artist.albums == []
        assert artist.name == "Nirvana"
        assert await memory_repository.get(EntityKind.ARTIST, "artist-1") == artist

    @pytest.mark.asyncio
    async def test_slow_biography_times_out_without_failing(
        self, memory_repository, mock_metadata, mock_biography
    ) -> None:
        async def _slow(name: str) -> str:
            await asyncio.sleep(5)
            return "too late"

        mock_biography.get_biography = AsyncMock(side_effect=_slow)
        service = _service(
            memory_repository, mock_metadata, mock_biography, enrichment_timeout=0.05
        )

        artist = await service.resolve_artist("artist-1")

        assert artist.biography == ""
        assert len(artist.albums) == 2

    @pytest.mark.asyncio
    async def test_without_biography_provider(self, memory_repository, mock_metadata) -> None:
        service = _service(memory_repository, mock_metadata)

        artist = await service.resolve_artist("artist-1")

        assert artist.biography == ""
        assert len(artist.albums) == 2

    @pytest.mark.asyncio
    async def test_not_found_propagates_and_nothing_is_saved(
        self, memory_repository, mock_metadata, mock_biography
    ) -> None:
        mock_metadata.lookup_artist.side_effect = NotFoundError(
            message="artist not found", provider_name="musicbrainz"
        )
        service = _service(memory_repository, mock_metadata, mock_biography)

        with pytest.raises(NotFoundError):
            await service.resolve_artist("missing")

        assert await memory_repository.get(EntityKind.ARTIST, "missing") is None
        mock_biography.get_biography.assert_not_called()

    @pytest.mark.asyncio
    async def test_primary_failure_becomes_upstream_error(
        self, memory_repository, mock_metadata
    ) -> None:
        mock_metadata.lookup_artist.side_effect = ProviderError(
            message="connection reset", provider_name="musicbrainz"
        )
        service = _service(memory_repository, mock_metadata)

        with pytest.raises(UpstreamError) as exc_info:
            await service.resolve_artist("artist-1")

        assert exc_info.value.provider_name == "musicbrainz"
        assert await memory_repository.get(EntityKind.ARTIST, "artist-1") is None

    @pytest.mark.asyncio
    async def test_rate_limited_primary_becomes_upstream_error(
        self, memory_repository, mock_metadata
    ) -> None:
        mock_metadata.lookup_artist.side_effect = RateLimitError(provider_name="musicbrainz")
        service = _service(memory_repository, mock_metadata)

        with pytest.raises(UpstreamError):
            await service.resolve_artist("artist-1")

    @pytest.mark.asyncio
    async def test_failed_final_write_is_fatal(self, mock_metadata) -> None:
        repo = _failing_repository(put_error=StoreError(message="disk full"))
        service = _service(repo, mock_metadata)

        with pytest.raises(StoreError):
            await service.resolve_artist("artist-1")

    @pytest.mark.asyncio
    async def test_repository_read_error_skips_upstream(self, mock_metadata) -> None:
        repo = _failing_repository(get_error=StoreError(message="database is locked"))
        service = _service(repo, mock_metadata)

        with pytest.raises(StoreError):
            await service.resolve_artist("artist-1")

        mock_metadata.lookup_artist.assert_not_called()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("bad_id", ["", "   "])
    async def test_blank_id_is_rejected(self, memory_repository, mock_metadata, bad_id) -> None:
        service = _service(memory_repository, mock_metadata)

        with pytest.raises(ValidationError):
            await service.resolve_artist(bad_id)

        mock_metadata.lookup_artist.assert_not_called()


class TestResolveArtistCacheHit:
    @pytest.mark.asyncio
    async def test_second_resolve_uses_cache(
        self, memory_repository, mock_metadata, mock_biography
    ) -> None:
        service = _service(memory_repository, mock_metadata, mock_biography)

        first = await service.resolve_artist("artist-1")
        second = await service.resolve_artist("artist-1")

        assert second == first
        assert mock_metadata.lookup_artist.await_count == 1
        assert mock_metadata.list_artist_releases.await_count == 1
        assert mock_biography.get_biography.await_count == 1

    @pytest.mark.asyncio
    async def test_mutating_result_does_not_change_cache(
        self, memory_repository, mock_metadata, mock_biography
    ) -> None:
        service = _service(memory_repository, mock_metadata, mock_biography)

        first = await service.resolve_artist("artist-1")
        first.genres.append("polka")
        first.albums.clear()

        second = await service.resolve_artist("artist-1")

        assert "polka" not in second.genres
        assert len(second.albums) == 2

    @pytest.mark.asyncio
    async def test_cached_artist_with_albums_never_refreshed(
        self, memory_repository, mock_metadata
    ) -> None:
        cached = Artist(
            id="artist-1",
            name="Nirvana",
            albums=[Album(id="rg-old", title="Old Listing")],
        )
        await memory_repository.put(EntityKind.ARTIST, cached)
        service = _service(memory_repository, mock_metadata)

        artist = await service.resolve_artist("artist-1")

        assert artist == cached
        mock_metadata.lookup_artist.assert_not_called()
        mock_metadata.list_artist_releases.assert_not_called()


class TestArtistBackfill:
    @pytest.mark.asyncio
    async def test_empty_albums_are_backfilled_and_saved(
        self, memory_repository, mock_metadata
    ) -> None:
        await memory_repository.put(
            EntityKind.ARTIST, Artist(id="artist-1", name="Nirvana", biography="Cached bio.")
        )
        service = _service(memory_repository, mock_metadata)

        artist = await service.resolve_artist("artist-1")

        assert [a.title for a in artist.albums] == ["Bleach", "Nevermind"]
        assert artist.biography == "Cached bio."
        mock_metadata.lookup_artist.assert_not_called()
        stored = await memory_repository.get(EntityKind.ARTIST, "artist-1")
        assert len(stored.albums) == 2

    @pytest.mark.asyncio
    async def test_backfill_listing_failure_returns_cached(
        self, memory_repository, mock_metadata
    ) -> None:
        cached = Artist(id="artist-1", name="Nirvana")
        await memory_repository.put(EntityKind.ARTIST, cached)
        mock_metadata.list_artist_releases.side_effect = ProviderError(provider_name="musicbrainz")
        service = _service(memory_repository, mock_metadata)

        artist = await service.resolve_artist("artist-1")

        assert artist == cached

    @pytest.mark.asyncio
    async def test_backfill_with_no_releases_does_not_write(self, mock_metadata) -> None:
        repo = MagicMock(spec=IRepository)
        repo.get = AsyncMock(return_value=Artist(id="artist-1", name="Nirvana"))
        repo.put = AsyncMock()
        mock_metadata.list_artist_releases.return_value = ReleaseGroupPage()
        service = _service(repo, mock_metadata)

        artist = await service.resolve_artist("artist-1")

        assert artist.albums == []
        repo.put.assert_not_called()

    @pytest.mark.asyncio
    async def test_backfill_save_failure_is_swallowed(self, mock_metadata) -> None:
        repo = MagicMock(spec=IRepository)
        repo.get = AsyncMock(return_value=Artist(id="artist-1", name="Nirvana"))
        repo.put = AsyncMock(side_effect=StoreError(message="read-only database"))
        service = _service(repo, mock_metadata)

        artist = await service.resolve_artist("artist-1")

        assert len(artist.albums) == 2
        repo.put.assert_awaited_once()


# ======================================================================
# resolve_album
# ======================================================================


class TestResolveAlbum:
    @pytest.mark.asyncio
    async def test_builds_album_from_release_group(
        self, memory_repository, mock_metadata, mock_reviews, discogs_review
    ) -> None:
        service = _service(memory_repository, mock_metadata, reviews=mock_reviews)

        album = await service.resolve_album("album-id")

        assert album.id == "album-id"
        assert album.title == "Nevermind"
        assert album.artist_id == "artist-1"
        assert album.artist_name == "Remote Artist"
        assert album.year == 1999
        assert album.first_release_date == "1999-06-01"
        assert album.primary_type == "Album"
        assert album.secondary_types == ["Remaster"]
        assert album.review == discogs_review
        mock_reviews.get_review.assert_awaited_once_with("Remote Artist", "Nevermind")

    @pytest.mark.asyncio
    async def test_track_durations_are_formatted(
        self, memory_repository, mock_metadata
    ) -> None:
        service = _service(memory_repository, mock_metadata)

        album = await service.resolve_album("album-id")

        assert [(t.position, t.title, t.duration) for t in album.tracks] == [
            (1, "Smells Like Teen Spirit", "5:01"),
            (2, "In Bloom", ""),
        ]

    @pytest.mark.asyncio
    async def test_review_not_found_leaves_empty_review(
        self, memory_repository, mock_metadata, mock_reviews
    ) -> None:
        mock_reviews.get_review.side_effect = NotFoundError(provider_name="discogs")
        service = _service(memory_repository, mock_metadata, reviews=mock_reviews)

        album = await service.resolve_album("album-id")

        assert album.review == Review()
        assert len(album.tracks) == 2

    @pytest.mark.asyncio
    async def test_track_failure_leaves_empty_tracks(
        self, memory_repository, mock_metadata, mock_reviews, discogs_review
    ) -> None:
        mock_metadata.list_album_tracks.side_effect = ProviderError(provider_name="musicbrainz")
        service = _service(memory_repository, mock_metadata, reviews=mock_reviews)

        album = await service.resolve_album("album-id")

        assert album.tracks == []
        assert album.review == discogs_review

    @pytest.mark.asyncio
    async def test_credit_without_ids_falls_back_to_first_name(
        self, memory_repository, mock_metadata
    ) -> None:
        mock_metadata.lookup_album.return_value = ReleaseGroup(
            id="album-id",
            title="Split",
            artist_credit=(ArtistCredit(name="Various"), ArtistCredit(name="Others")),
        )
        service = _service(memory_repository, mock_metadata)

        album = await service.resolve_album("album-id")

        assert album.artist_id == ""
        assert album.artist_name == "Various"

    @pytest.mark.asyncio
    async def test_cached_album_is_terminal(
        self, memory_repository, mock_metadata, mock_reviews
    ) -> None:
        cached = Album(id="album-id", title="Nevermind")
        await memory_repository.put(EntityKind.ALBUM, cached)
        service = _service(memory_repository, mock_metadata, reviews=mock_reviews)

        album = await service.resolve_album("album-id")

        assert album == cached
        mock_metadata.lookup_album.assert_not_called()
        mock_reviews.get_review.assert_not_called()

    @pytest.mark.asyncio
    async def test_second_resolve_makes_no_upstream_calls(
        self, memory_repository, mock_metadata, mock_reviews
    ) -> None:
        service = _service(memory_repository, mock_metadata, reviews=mock_reviews)

        first = await service.resolve_album("album-id")
        second = await service.resolve_album("album-id")

        assert first == second
        assert mock_metadata.lookup_album.await_count == 1
        assert mock_metadata.list_album_tracks.await_count == 1
        assert mock_reviews.get_review.await_count == 1

    @pytest.mark.asyncio
    async def test_not_found(self, memory_repository, mock_metadata) -> None:
        mock_metadata.lookup_album.side_effect = NotFoundError(provider_name="musicbrainz")
        service = _service(memory_repository, mock_metadata)

        with pytest.raises(NotFoundError):
            await service.resolve_album("missing")

        assert await memory_repository.get(EntityKind.ALBUM, "missing") is None

    @pytest.mark.asyncio
    async def test_upstream_error(self, memory_repository, mock_metadata) -> None:
        mock_metadata.lookup_album.side_effect = ProviderError(provider_name="musicbrainz")
        service = _service(memory_repository, mock_metadata)

        with pytest.raises(UpstreamError):
            await service.resolve_album("album-id")

    @pytest.mark.asyncio
    async def test_failed_final_write_is_fatal(self, mock_metadata) -> None:
        repo = _failing_repository(put_error=StoreError(message="disk full"))
        service = _service(repo, mock_metadata)

        with pytest.raises(StoreError):
            await service.resolve_album("album-id")


# ======================================================================
# Cancellation
# ======================================================================


class TestCancellation:
    @pytest.mark.asyncio
    async def test_cancelled_resolution_is_not_persisted(
        self, memory_repository, mock_metadata, mock_biography
    ) -> None:
        started = asyncio.Event()

        async def _hang(name: str) -> str:
            started.set()
            await asyncio.sleep(10)
            return "never"

        mock_biography.get_biography = AsyncMock(side_effect=_hang)
        service = _service(memory_repository, mock_metadata, mock_biography, enrichment_timeout=30)

        task = asyncio.create_task(service.resolve_artist("artist-1"))
        await started.wait()
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task

        assert await memory_repository.get(EntityKind.ARTIST, "artist-1") is None


# ======================================================================
# search_artists
# ======================================================================


class TestSearchArtists:
    @pytest.mark.asyncio
    async def test_passes_through(self, memory_repository, mock_metadata) -> None:
        service = _service(memory_repository, mock_metadata)

        page = await service.search_artists("nirvana", limit=10, offset=5)

        assert page.artists[0].name == "Nirvana"
        mock_metadata.search_artists.assert_awaited_once_with("nirvana", limit=10, offset=5)

    @pytest.mark.asyncio
    async def test_defaults(self, memory_repository, mock_metadata) -> None:
        service = _service(memory_repository, mock_metadata)

        await service.search_artists("  nirvana  ")

        mock_metadata.search_artists.assert_awaited_once_with("nirvana", limit=25, offset=0)

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("query", "limit", "offset"),
        [("", 25, 0), ("   ", 25, 0), ("nirvana", 0, 0), ("nirvana", 101, 0), ("nirvana", 25, -1)],
    )
    async def test_invalid_arguments(
        self, memory_repository, mock_metadata, query, limit, offset
    ) -> None:
        service = _service(memory_repository, mock_metadata)

        with pytest.raises(ValidationError):
            await service.search_artists(query, limit=limit, offset=offset)

        mock_metadata.search_artists.assert_not_called()

    @pytest.mark.asyncio
    async def test_provider_failure_becomes_upstream_error(
        self, memory_repository, mock_metadata
    ) -> None:
        mock_metadata.search_artists.side_effect = ProviderError(provider_name="musicbrainz")
        service = _service(memory_repository, mock_metadata)

        with pytest.raises(UpstreamError):
            await service.search_artists("nirvana")

    @pytest.mark.asyncio
    async def test_search_is_not_cached(self, mock_metadata) -> None:
        repo = MemoryRepository()
        service = _service(repo, mock_metadata)

        await service.search_artists("nirvana")
        await service.search_artists("nirvana")

        assert mock_metadata.search_artists.await_count == 2
        assert await repo.get(EntityKind.ARTIST, "artist-1") is None
