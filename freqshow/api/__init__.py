"""freq-show API layer - routes, schemas, and middleware."""

from freqshow.api.middleware import (
    ErrorHandlingMiddleware,
    RequestLoggingMiddleware,
    configure_cors,
)
from freqshow.api.routes import router
from freqshow.api.schemas import (
    ArtistSearchItem,
    ErrorResponse,
    HealthResponse,
    SearchResponse,
)

__all__ = [
    "ErrorHandlingMiddleware",
    "RequestLoggingMiddleware",
    "configure_cors",
    "router",
    "ArtistSearchItem",
    "ErrorResponse",
    "HealthResponse",
    "SearchResponse",
]
