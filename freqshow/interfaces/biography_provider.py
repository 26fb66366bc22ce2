"""Abstract base class for biography (secondary enrichment) providers."""

from __future__ import annotations

from abc import ABC, abstractmethod


class IBiographyProvider(ABC):
    """Contract for services that return a short prose biography of an artist.

    Failures of this provider never fail a catalog lookup; the service logs
    them and leaves the biography empty.
    """

    @abstractmethod
    async def get_biography(self, name: str) -> str:
        """Return a cleaned summary paragraph about *name*.

        Raises
        ------
        freqshow.utils.errors.NotFoundError
            If no non-disambiguation article matches any name variant.
        freqshow.utils.errors.ProviderError
            For transport failures or unexpected responses.
        """

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a short identifier for this provider."""

    @abstractmethod
    def is_available(self) -> bool:
        """Return ``True`` if the provider is configured and usable."""
