"""Core catalog entities served by freq-show.

Defines the Pydantic v2 models for artists, albums, tracks, reviews and
life spans.  All models are frozen; the lists they hold are replaced, never
appended to, and the repository hands out deep copies so a caller that does
mutate a returned list cannot affect what is stored.

JSON field names are camelCase (``artistId``, ``firstReleaseDate``,
``lifeSpan``) to match the web client; Python code uses the snake_case
attribute names and either form is accepted on input.

Key relationships:
    - Artist has many Album summaries (populated lazily from the discography)
    - Album has many Track objects and exactly one Review
    - The all-empty Review means "no review found" and is cached as such
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class EntityKind(str, Enum):  # noqa: UP042
    """Record kinds the repository stores, one table / namespace each."""

    ARTIST = "artist"
    ALBUM = "album"


class _CatalogModel(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class LifeSpan(_CatalogModel):
    """Active period of an artist.

    ``ended=True`` with an empty ``end`` means the artist has ended but the
    date is unknown.
    """

    begin: str = ""
    end: str = ""
    ended: bool = False


class Track(_CatalogModel):
    """One track of an album's representative release."""

    position: int = Field(ge=1)
    title: str
    duration: str = ""  # "M:SS"; empty when the length is unknown


class Review(_CatalogModel):
    """Community review facet of an album.

    A rating of ``0.0`` is used both for "rated zero" and "not rated".
    """

    source: str = ""
    author: str = ""
    rating: float = 0.0
    summary: str = ""
    text: str = ""
    url: str = ""

    @property
    def is_empty(self) -> bool:
        return self == Review()


class Album(_CatalogModel):
    """A release group with its derived year, track list and review."""

    id: str
    title: str = ""
    artist_id: str = ""
    artist_name: str = ""
    primary_type: str = ""
    secondary_types: list[str] = Field(default_factory=list)
    first_release_date: str = ""
    year: int = 0
    genre: str = ""
    label: str = ""
    tracks: list[Track] = Field(default_factory=list)
    review: Review = Field(default_factory=Review)
    cover_url: str = ""


class Artist(_CatalogModel):
    """A performer with biography, genres and (lazily) their discography."""

    id: str
    name: str = ""
    biography: str = ""
    genres: list[str] = Field(default_factory=list)
    albums: list[Album] = Field(default_factory=list)
    related: list[str] = Field(default_factory=list)
    image_url: str = ""
    country: str = ""
    type: str = ""
    disambiguation: str = ""
    aliases: list[str] = Field(default_factory=list)
    life_span: LifeSpan = Field(default_factory=LifeSpan)
