"""freq-show FastAPI application entry point.

Wires together the repository, providers, catalog service and routes.
Loads configuration from ``config/config.yaml``, ``.env`` and the
environment, and configures structured logging at import time.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any

import httpx
import structlog
import uvicorn
from fastapi import FastAPI

from freqshow import __version__
from freqshow.api.middleware import (
    ErrorHandlingMiddleware,
    RequestLoggingMiddleware,
    configure_cors,
)
from freqshow.api.routes import router as api_router
from freqshow.config.loader import load_settings
from freqshow.config.settings import Settings
from freqshow.interfaces.repository import IRepository
from freqshow.providers.biography.wikipedia_provider import WikipediaBiographyProvider
from freqshow.providers.music_db.musicbrainz_provider import MusicBrainzProvider
from freqshow.providers.repository.memory_repository import MemoryRepository
from freqshow.providers.repository.sqlite_repository import SQLiteRepository
from freqshow.providers.reviews.discogs_review_provider import DiscogsReviewProvider
from freqshow.services.catalog_service import CatalogService
from freqshow.utils.errors import ConfigurationError
from freqshow.utils.logging import configure_logging, get_logger

# ---------------------------------------------------------------------------
# Module-level settings & logging
# ---------------------------------------------------------------------------

settings = load_settings()

configure_logging(
    log_level=settings.log_level,
    json_output=(settings.app_env == "production"),
)
_logger: structlog.BoundLogger = get_logger(__name__)


# ---------------------------------------------------------------------------
# Component factories
# ---------------------------------------------------------------------------


def _build_repository(app_settings: Settings) -> IRepository:
    """Select the storage engine named by ``database_driver``."""
    driver = app_settings.database_driver
    if driver == "memory":
        return MemoryRepository()
    if driver == "sqlite":
        if not app_settings.database_path.strip():
            raise ConfigurationError(message="DATABASE_PATH is required for the sqlite driver")
        return SQLiteRepository(app_settings.database_path)
    raise ConfigurationError(
        message=f"Unsupported database driver '{driver}' (expected 'sqlite' or 'memory')"
    )


def _build_all(app_settings: Settings) -> dict[str, Any]:
    """Construct every provider and service.

    Returns a flat dict of named components to be stored on ``app.state``.
    """
    http_client = httpx.AsyncClient(
        timeout=httpx.Timeout(app_settings.wikipedia_timeout_seconds),
        follow_redirects=True,
    )

    repository = _build_repository(app_settings)
    metadata = MusicBrainzProvider(app_settings)
    biography = WikipediaBiographyProvider(app_settings, http_client=http_client)
    discogs = DiscogsReviewProvider(app_settings)
    reviews = discogs if discogs.is_available() else None
    if reviews is None:
        _logger.warning(
            "review_provider_disabled",
            provider=discogs.get_provider_name(),
            reason="no Discogs credentials configured",
        )

    catalog_service = CatalogService(
        repository=repository,
        metadata=metadata,
        biography=biography,
        reviews=reviews,
        enrichment_timeout=app_settings.catalog_enrichment_timeout_seconds,
        release_limit=app_settings.catalog_release_limit,
    )

    provider_registry = {
        metadata.get_provider_name(): metadata.is_available(),
        biography.get_provider_name(): biography.is_available(),
        discogs.get_provider_name(): discogs.is_available(),
    }

    return {
        "http_client": http_client,
        "repository": repository,
        "metadata_provider": metadata,
        "biography_provider": biography,
        "review_provider": reviews,
        "catalog_service": catalog_service,
        "provider_registry": provider_registry,
    }


# ---------------------------------------------------------------------------
# Application lifespan (startup / shutdown)
# ---------------------------------------------------------------------------


@asynccontextmanager
async def _lifespan(application: FastAPI):  # noqa: ANN201
    """Initialise all providers and services on startup, clean up on shutdown."""
    components = _build_all(settings)

    for key, value in components.items():
        setattr(application.state, key, value)

    repository: IRepository = components["repository"]
    await repository.initialize()

    _logger.info(
        "app_startup",
        version=__version__,
        environment=settings.app_env,
        repository=repository.get_provider_name(),
        providers=components["provider_registry"],
    )

    yield

    http_client: httpx.AsyncClient = components["http_client"]
    await http_client.aclose()
    await repository.close()
    _logger.info("app_shutdown", message="HTTP client and repository closed")


# ---------------------------------------------------------------------------
# FastAPI application factory
# ---------------------------------------------------------------------------


def create_app() -> FastAPI:
    """Build and configure the FastAPI application."""
    application = FastAPI(
        title="freq-show API",
        version=__version__,
        description=(
            "Look up artists and albums by MusicBrainz id. Records are built from "
            "MusicBrainz metadata, Wikipedia biographies and Discogs community "
            "reviews, then cached for subsequent requests."
        ),
        lifespan=_lifespan,
    )

    # -- Middleware (order matters: last added = first executed) --
    application.add_middleware(ErrorHandlingMiddleware)
    application.add_middleware(RequestLoggingMiddleware)
    configure_cors(application, allowed_origins=settings.cors_origins)

    application.include_router(api_router)

    return application


app = create_app()


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------


def main() -> None:
    """Run the API server with uvicorn."""
    uvicorn.run(
        "freqshow.main:app",
        host=settings.app_host,
        port=settings.app_port,
        reload=(settings.app_env == "development"),
        timeout_graceful_shutdown=int(settings.shutdown_timeout_seconds),
    )


if __name__ == "__main__":
    main()
