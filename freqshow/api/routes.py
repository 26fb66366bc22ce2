"""FastAPI routes for the freq-show catalog.

    Endpoint                Method  Description
    --------------------------------------------------------------
    /healthz                GET     Health check + provider status
    /artists/{artist_id}    GET     Resolve an artist (cache-first)
    /albums/{album_id}      GET     Resolve an album (cache-first)
    /search                 GET     Artist search pass-through

Service dependencies are resolved from ``app.state`` (populated by the
lifespan in ``freqshow/main.py``) via ``Depends`` using the ``Annotated``
pattern.  Application errors propagate to ``ErrorHandlingMiddleware``.
"""

from __future__ import annotations

from typing import Annotated, Any

import structlog
from fastapi import APIRouter, Depends, Query, Request

from freqshow import __version__
from freqshow.api.schemas import ErrorResponse, HealthResponse, SearchResponse
from freqshow.models.entities import Album, Artist
from freqshow.services.catalog_service import CatalogService
from freqshow.utils.logging import get_logger

_logger: structlog.BoundLogger = get_logger(__name__)

router = APIRouter()

_DEFAULT_SEARCH_LIMIT = 25
_MAX_SEARCH_LIMIT = 100

_ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    400: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
    502: {"model": ErrorResponse},
}


def _get_catalog_service(request: Request) -> CatalogService:
    return request.app.state.catalog_service


CatalogServiceDep = Annotated[CatalogService, Depends(_get_catalog_service)]


def _parse_search_limit(raw: str | None) -> int:
    """Page size from the query string; missing, malformed or out-of-range -> 25."""
    if not raw:
        return _DEFAULT_SEARCH_LIMIT
    try:
        limit = int(raw)
    except ValueError:
        return _DEFAULT_SEARCH_LIMIT
    return limit if 1 <= limit <= _MAX_SEARCH_LIMIT else _DEFAULT_SEARCH_LIMIT


def _parse_search_offset(raw: str | None) -> int:
    """Result offset from the query string; missing, malformed or negative -> 0."""
    if not raw:
        return 0
    try:
        offset = int(raw)
    except ValueError:
        return 0
    return max(offset, 0)


@router.get(
    "/healthz",
    response_model=HealthResponse,
    summary="Application health check",
)
async def health_check(request: Request) -> HealthResponse:
    """Return application status, version, storage engine and provider availability."""
    providers: dict[str, Any] = dict(getattr(request.app.state, "provider_registry", {}))
    repository = getattr(request.app.state, "repository", None)
    return HealthResponse(
        status="ok",
        version=__version__,
        repository=repository.get_provider_name() if repository is not None else "none",
        providers=providers,
    )


@router.get(
    "/artists/{artist_id}",
    response_model=Artist,
    responses=_ERROR_RESPONSES,
    summary="Resolve an artist by MusicBrainz id",
)
async def get_artist(artist_id: str, catalog: CatalogServiceDep) -> Artist:
    return await catalog.resolve_artist(artist_id)


@router.get(
    "/albums/{album_id}",
    response_model=Album,
    responses=_ERROR_RESPONSES,
    summary="Resolve an album (release group) by MusicBrainz id",
)
async def get_album(album_id: str, catalog: CatalogServiceDep) -> Album:
    return await catalog.resolve_album(album_id)


@router.get(
    "/search",
    response_model=SearchResponse,
    responses=_ERROR_RESPONSES,
    summary="Search artists by name",
)
async def search_artists(
    catalog: CatalogServiceDep,
    q: Annotated[str, Query(description="Free-text artist query")] = "",
    limit: Annotated[str | None, Query(description="Page size, 1-100 (default 25)")] = None,
    offset: Annotated[str | None, Query(description="Zero-based result offset")] = None,
) -> SearchResponse:
    page = await catalog.search_artists(
        q, limit=_parse_search_limit(limit), offset=_parse_search_offset(offset)
    )
    _logger.debug("artist_search", query=q, result_count=len(page.artists))
    return SearchResponse.from_page(page)
