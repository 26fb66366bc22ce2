"""Custom exception hierarchy for freq-show.

All application exceptions inherit from :class:`FreqShowError`, which
carries an optional ``provider_name`` so error handlers can identify which
external service (e.g. "musicbrainz", "wikipedia", "sqlite") caused the
failure.

    FreqShowError  (base -- catch-all for any freq-show error)
    +-- NotFoundError        (resource affirmatively absent)
    +-- UpstreamError        (primary metadata provider failed)
    +-- StoreError           (repository read or write failed)
    +-- ValidationError      (caller supplied an unusable identifier or query)
    +-- ProviderError        (any adapter failure short of not-found)
    |   +-- RateLimitError   (provider rate-limit exceeded)
    +-- ConfigurationError   (startup / invalid config)

Only the first four ever leave :class:`~freqshow.services.catalog_service.CatalogService`.
``ProviderError`` and ``RateLimitError`` are raised by adapters and
translated (or swallowed, for secondary enrichment) by the service.
"""


class FreqShowError(Exception):
    """Base exception for all freq-show errors.

    Every subclass carries a human-readable ``message`` and an optional
    ``provider_name``.  ``__str__`` prefixes the provider name in brackets,
    e.g. ``[musicbrainz] artist not found``.
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        provider_name: str | None = None,
    ) -> None:
        self._message = message
        self._provider_name = provider_name
        super().__init__(self._message)

    @property
    def message(self) -> str:
        return self._message

    @property
    def provider_name(self) -> str | None:
        return self._provider_name

    def __str__(self) -> str:
        if self._provider_name:
            return f"[{self._provider_name}] {self._message}"
        return self._message


# ---------------------------------------------------------------------------
# Service boundary errors
# ---------------------------------------------------------------------------

class NotFoundError(FreqShowError):
    """Raised when a provider affirmatively reports that a resource does not exist."""

    def __init__(
        self,
        message: str = "Resource not found",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class UpstreamError(FreqShowError):
    """Raised when the primary metadata provider is unreachable or misbehaves."""

    def __init__(
        self,
        message: str = "Upstream metadata provider failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class StoreError(FreqShowError):
    """Raised when the repository cannot read or persist a record."""

    def __init__(
        self,
        message: str = "Repository operation failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class ValidationError(FreqShowError):
    """Raised when a caller passes an empty identifier or out-of-range paging."""

    def __init__(
        self,
        message: str = "Invalid request",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


# ---------------------------------------------------------------------------
# Provider errors
# ---------------------------------------------------------------------------

class ProviderError(FreqShowError):
    """Raised when an external provider call fails for any reason but absence."""

    def __init__(
        self,
        message: str = "External provider call failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class RateLimitError(ProviderError):
    """Raised when a provider answers with HTTP 429."""

    def __init__(
        self,
        message: str = "Rate limit exceeded",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class ConfigurationError(FreqShowError):
    """Raised when configuration is invalid or missing at startup."""

    def __init__(
        self,
        message: str = "Invalid or missing configuration",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)
