"""Pydantic response schemas for the freq-show API.

Artist and Album responses reuse the domain models from
:mod:`freqshow.models.entities` directly; the models here cover health,
search results and errors.  Field names serialize in camelCase like the
domain models.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from freqshow.interfaces.metadata_provider import ArtistSearchPage, ArtistSearchResult
from freqshow.models.entities import LifeSpan


class HealthResponse(BaseModel):
    """Application health check response."""

    status: str
    version: str
    repository: str
    providers: dict[str, Any]


class ErrorResponse(BaseModel):
    """Standard error response body."""

    error: str
    detail: str | None = None


class ArtistSearchItem(BaseModel):
    """One artist in a search response."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    name: str
    country: str = ""
    type: str = ""
    disambiguation: str = ""
    aliases: list[str] = Field(default_factory=list)
    life_span: LifeSpan = Field(default_factory=LifeSpan)
    score: int = 0

    @classmethod
    def from_result(cls, result: ArtistSearchResult) -> ArtistSearchItem:
        return cls(
            id=result.id,
            name=result.name,
            country=result.country,
            type=result.type,
            disambiguation=result.disambiguation,
            aliases=list(result.aliases),
            life_span=LifeSpan(begin=result.begin, end=result.end, ended=result.ended),
            score=result.score,
        )


class SearchResponse(BaseModel):
    """A page of artist search results."""

    artists: list[ArtistSearchItem] = Field(default_factory=list)
    offset: int = 0
    count: int = 0

    @classmethod
    def from_page(cls, page: ArtistSearchPage) -> SearchResponse:
        return cls(
            artists=[ArtistSearchItem.from_result(hit) for hit in page.artists],
            offset=page.offset,
            count=page.count,
        )
