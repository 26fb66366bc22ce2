"""Biography provider implementations."""

from freqshow.providers.biography.wikipedia_provider import WikipediaBiographyProvider

__all__ = ["WikipediaBiographyProvider"]
