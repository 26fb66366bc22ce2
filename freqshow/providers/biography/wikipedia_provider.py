"""Wikipedia biography provider implementing IBiographyProvider.

Fetches the REST ``page/summary`` of the artist's article and trims its
extract to a short, display-ready paragraph.  Many artist names collide
with other articles, so when the plain title is missing or lands on a
disambiguation page the provider retries with the conventional
``(band)``, ``(musician)`` and ``(singer)`` qualifiers.
"""

from __future__ import annotations

import re
from urllib.parse import quote

import httpx
import structlog

from freqshow.config.settings import Settings
from freqshow.interfaces.biography_provider import IBiographyProvider
from freqshow.utils.errors import NotFoundError, ProviderError

logger = structlog.get_logger(logger_name=__name__)

_NAME_QUALIFIERS = ("", " (band)", " (musician)", " (singer)")
_MAX_SENTENCES = 3
_MAX_LENGTH = 500

_PRONUNCIATION_RE = re.compile(r"\s*\([^)]*pronunciation[^)]*\)", re.IGNORECASE)
_LISTEN_RE = re.compile(r"\s*\([^)]*listen[^)]*\)\s*", re.IGNORECASE)
_WHITESPACE_RE = re.compile(r"\s+")


class _PageMissing(Exception):
    """Internal signal: this title has no usable article, try the next one."""


class WikipediaBiographyProvider(IBiographyProvider):
    """Artist biographies from the Wikipedia REST API."""

    def __init__(
        self,
        settings: Settings,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._base_url = (
            settings.wikipedia_base_url.strip() or "https://en.wikipedia.org/api/rest_v1"
        ).rstrip("/")
        self._user_agent = settings.wikipedia_user_agent
        self._timeout = settings.wikipedia_timeout_seconds
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(
            timeout=httpx.Timeout(self._timeout),
            follow_redirects=True,
        )

    async def get_biography(self, name: str) -> str:
        """Return the cleaned summary of the first matching article."""
        name = name.strip()
        if not name:
            raise NotFoundError(
                message="Cannot look up a biography without an artist name",
                provider_name=self.get_provider_name(),
            )

        for qualifier in _NAME_QUALIFIERS:
            title = f"{name}{qualifier}"
            try:
                extract = await self._get_extract(title)
            except _PageMissing:
                logger.debug("wikipedia_page_missing", title=title)
                continue
            logger.debug("wikipedia_biography_found", artist=name, title=title)
            return clean_extract(extract)

        raise NotFoundError(
            message=f"No Wikipedia article found for '{name}'",
            provider_name=self.get_provider_name(),
        )

    async def _get_extract(self, title: str) -> str:
        """Fetch the plain-text extract of *title*'s summary."""
        url = f"{self._base_url}/page/summary/{quote(title.replace(' ', '_'), safe='')}"
        try:
            response = await self._client.get(
                url,
                headers={"User-Agent": self._user_agent, "Accept": "application/json"},
                timeout=self._timeout,
            )
        except httpx.TimeoutException as exc:
            raise ProviderError(
                message=f"Wikipedia request for '{title}' timed out",
                provider_name=self.get_provider_name(),
            ) from exc
        except httpx.HTTPError as exc:
            raise ProviderError(
                message=f"Wikipedia request for '{title}' failed: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

        if response.status_code == 404:
            raise _PageMissing(title)
        if response.status_code != 200:
            raise ProviderError(
                message=(
                    f"Wikipedia returned HTTP {response.status_code} for '{title}': "
                    f"{response.text[:512].strip()}"
                ),
                provider_name=self.get_provider_name(),
            )

        try:
            payload = response.json()
        except ValueError as exc:
            raise ProviderError(
                message=f"Wikipedia returned invalid JSON for '{title}'",
                provider_name=self.get_provider_name(),
            ) from exc

        extract = payload.get("extract") or ""
        if payload.get("type") == "disambiguation" or "may refer to" in extract.lower():
            raise _PageMissing(title)
        if not extract.strip():
            raise _PageMissing(title)
        return extract

    async def close(self) -> None:
        """Close the HTTP client if this provider created it."""
        if self._owns_client:
            await self._client.aclose()

    def get_provider_name(self) -> str:
        return "wikipedia"

    def is_available(self) -> bool:
        return True


def clean_extract(extract: str) -> str:
    """Strip audio/pronunciation asides and keep the opening of *extract*.

    At most the first three sentences are kept, and the result is cut back
    to whole sentences fitting in 500 characters.
    """
    if not extract:
        return ""

    cleaned = _PRONUNCIATION_RE.sub("", extract)
    cleaned = _LISTEN_RE.sub(" ", cleaned)
    cleaned = _WHITESPACE_RE.sub(" ", cleaned).strip()

    sentences = cleaned.split(". ")
    if len(sentences) > _MAX_SENTENCES:
        cleaned = ". ".join(sentences[:_MAX_SENTENCES]) + "."

    if len(cleaned) > _MAX_LENGTH:
        result = ""
        for part in cleaned.split(". "):
            if len(result + part + ". ") > _MAX_LENGTH:
                break
            result = part if not result else f"{result}. {part}"
        if result and not result.endswith("."):
            result += "."
        cleaned = result

    return cleaned
