"""Pure derivation rules shared by providers and the catalog service.

Nothing here performs I/O; every function maps provider data onto the
values stored in :mod:`freqshow.models.entities`.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from freqshow.interfaces.metadata_provider import ArtistCredit, ArtistTag, ReleaseSummary

_OFFICIAL_STATUS = "Official"


def format_track_length(length_ms: int | None) -> str:
    """Format a millisecond duration as ``M:SS``.

    >>> format_track_length(301000)
    '5:01'
    >>> format_track_length(0)
    ''
    """
    if not length_ms or length_ms <= 0:
        return ""
    minutes = length_ms // 60000
    seconds = (length_ms // 1000) % 60
    return f"{minutes}:{seconds:02d}"


def parse_release_year(date: str | None) -> int:
    """Return the year encoded in the first four characters of *date*, or 0."""
    if not date or len(date) < 4:
        return 0
    try:
        return int(date[:4])
    except ValueError:
        return 0


def select_representative_release(
    releases: Sequence[ReleaseSummary],
) -> ReleaseSummary | None:
    """Pick the release whose track list stands for the whole release group.

    The first release with status exactly ``"Official"`` wins; otherwise the
    first release in provider order.  ``None`` when there are no releases.
    """
    for release in releases:
        if release.status == _OFFICIAL_STATUS:
            return release
    return releases[0] if releases else None


def rank_genres(tags: Iterable[ArtistTag]) -> list[str]:
    """Order tag names by vote count (highest first), dropping duplicates.

    Duplicates are detected case-insensitively; the first spelling seen
    after ranking is kept.  Ties keep provider order.
    """
    ranked = sorted(tags, key=lambda tag: tag.count, reverse=True)
    seen: set[str] = set()
    genres: list[str] = []
    for tag in ranked:
        name = tag.name.strip()
        key = name.casefold()
        if not name or key in seen:
            continue
        seen.add(key)
        genres.append(name)
    return genres


def primary_artist_credit(credits: Sequence[ArtistCredit]) -> tuple[str, str]:
    """Return ``(artist_id, artist_name)`` for an album's artist credit.

    The first credit carrying an artist identifier wins.  Its artist's
    canonical name is preferred over the name printed on the release.
    When no credit has an identifier, the id is empty and the first
    credit's name is used.
    """
    for credit in credits:
        if credit.artist_id:
            return credit.artist_id, credit.artist_name or credit.name
    if credits:
        first = credits[0]
        return "", first.artist_name or first.name
    return "", ""
