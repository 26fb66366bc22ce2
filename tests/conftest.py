"""Shared pytest fixtures for the freq-show test suite."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

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
from freqshow.interfaces.review_provider import IReviewProvider
from freqshow.models.entities import Review
from freqshow.providers.repository.memory_repository import MemoryRepository


# ---------------------------------------------------------------------------
# Sample provider records
# ---------------------------------------------------------------------------


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def remote_artist() -> RemoteArtist:
    return RemoteArtist(
        id="artist-1",
        name="Nirvana",
        country="US",
        type="Group",
        disambiguation="90s US grunge band",
        aliases=("Nirvana US",),
        tags=(
            ArtistTag(name="rock", count=3),
            ArtistTag(name="grunge", count=12),
            ArtistTag(name="Grunge", count=1),
        ),
        begin="1987",
        end="1994-04-05",
        ended=True,
    )


@pytest.fixture
def release_group_page() -> ReleaseGroupPage:
    return ReleaseGroupPage(
        release_groups=(
            ReleaseGroup(
                id="rg-bleach",
                title="Bleach",
                primary_type="Album",
                first_release_date="1989-06-15",
            ),
            ReleaseGroup(
                id="rg-nevermind",
                title="Nevermind",
                primary_type="Album",
                first_release_date="1991-09-24",
            ),
        ),
        offset=0,
        count=2,
    )


@pytest.fixture
def release_group() -> ReleaseGroup:
    return ReleaseGroup(
        id="album-id",
        title="Nevermind",
        primary_type="Album",
        secondary_types=("Remaster",),
        first_release_date="1999-06-01",
        artist_credit=(ArtistCredit(name="Remote Artist", artist_id="artist-1"),),
        releases=(
            ReleaseSummary(id="rel-bootleg", status="Bootleg"),
            ReleaseSummary(id="rel-official", status="Official", date="1991-09-24"),
        ),
    )


@pytest.fixture
def remote_tracks() -> list[RemoteTrack]:
    return [
        RemoteTrack(position=1, title="Smells Like Teen Spirit", length_ms=301000),
        RemoteTrack(position=2, title="In Bloom", length_ms=0),
    ]


@pytest.fixture
def discogs_review() -> Review:
    return Review(
        source="Discogs",
        author="Community",
        rating=4.6,
        summary="Community rating based on 812 user ratings",
        text="Second studio album.",
        url="https://www.discogs.com/release/367084",
    )


# ---------------------------------------------------------------------------
# Mock providers
# ---------------------------------------------------------------------------


@pytest.fixture
def mock_metadata(
    remote_artist: RemoteArtist,
    release_group_page: ReleaseGroupPage,
    release_group: ReleaseGroup,
    remote_tracks: list[RemoteTrack],
) -> MagicMock:
    """An IMetadataProvider whose lookups all succeed."""
    provider = MagicMock(spec=IMetadataProvider)
    provider.lookup_artist = AsyncMock(return_value=remote_artist)
    provider.list_artist_releases = AsyncMock(return_value=release_group_page)
    provider.lookup_album = AsyncMock(return_value=release_group)
    provider.list_album_tracks = AsyncMock(return_value=remote_tracks)
    provider.search_artists = AsyncMock(
        return_value=ArtistSearchPage(
            artists=(ArtistSearchResult(id="artist-1", name="Nirvana", score=100),),
            offset=0,
            count=1,
        )
    )
    provider.get_provider_name.return_value = "musicbrainz"
    provider.is_available.return_value = True
    return provider


@pytest.fixture
def mock_biography() -> MagicMock:
    provider = MagicMock(spec=IBiographyProvider)
    provider.get_biography = AsyncMock(
        return_value="Nirvana was an American rock band formed in Aberdeen, Washington, in 1987."
    )
    provider.get_provider_name.return_value = "wikipedia"
    provider.is_available.return_value = True
    return provider


@pytest.fixture
def mock_reviews(discogs_review: Review) -> MagicMock:
    provider = MagicMock(spec=IReviewProvider)
    provider.get_review = AsyncMock(return_value=discogs_review)
    provider.get_provider_name.return_value = "discogs"
    provider.is_available.return_value = True
    return provider


@pytest.fixture
def memory_repository() -> MemoryRepository:
    return MemoryRepository()
