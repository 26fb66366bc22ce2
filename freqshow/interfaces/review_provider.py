"""Abstract base class for album review (secondary enrichment) providers."""

from __future__ import annotations

from abc import ABC, abstractmethod

from freqshow.models.entities import Review


class IReviewProvider(ABC):
    """Contract for services that return a community review of an album."""

    @abstractmethod
    async def get_review(self, artist_name: str, album_title: str) -> Review:
        """Search for *album_title* by *artist_name* and review the best match.

        Raises
        ------
        freqshow.utils.errors.NotFoundError
            If the search yields nothing or the matched release is gone.
        freqshow.utils.errors.RateLimitError
            If the provider throttles the request.
        freqshow.utils.errors.ProviderError
            For any other failure.
        """

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a short identifier for this provider."""

    @abstractmethod
    def is_available(self) -> bool:
        """Return ``True`` if the provider is configured and usable."""
