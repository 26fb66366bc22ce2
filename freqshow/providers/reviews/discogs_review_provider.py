"""Discogs review provider using python3-discogs-client.

Implements IReviewProvider: searches Discogs releases for
``"<artist> <album>"``, loads the best (first) match, and turns its
community statistics and release notes into a :class:`Review`.  The client
is initialised lazily, its built-in backoff is disabled so throttling
surfaces as :class:`RateLimitError`, and calls are rate-limited to respect
Discogs' 60 req/min cap.
"""

from __future__ import annotations

import asyncio
import time
from typing import Any

import discogs_client
from discogs_client.exceptions import HTTPError as DiscogsHTTPError

from freqshow.config.settings import Settings
from freqshow.interfaces.review_provider import IReviewProvider
from freqshow.models.entities import Review
from freqshow.utils.errors import NotFoundError, ProviderError, RateLimitError
from freqshow.utils.logging import get_logger

_MIN_REQUEST_INTERVAL = 1.0  # seconds
_SEARCH_PAGE_SIZE = 5
_RELEASE_URL = "https://www.discogs.com/release/{release_id}"


class DiscogsReviewProvider(IReviewProvider):
    """Community reviews backed by the Discogs REST API."""

    def __init__(self, settings: Settings, min_request_interval: float = _MIN_REQUEST_INTERVAL) -> None:
        self._settings = settings
        self._timeout = settings.discogs_timeout_seconds
        self._min_request_interval = min_request_interval
        self._client: discogs_client.Client | None = None
        self._last_request_time: float = 0.0
        self._throttle_lock = asyncio.Lock()
        self._logger = get_logger(__name__)

    # -- Private helpers -------------------------------------------------------

    def _get_client(self) -> discogs_client.Client:
        """Lazily initialize and return the Discogs API client."""
        if self._client is None:
            if self._settings.discogs_token:
                client = discogs_client.Client(
                    self._settings.discogs_user_agent,
                    user_token=self._settings.discogs_token,
                )
            else:
                client = discogs_client.Client(
                    self._settings.discogs_user_agent,
                    consumer_key=self._settings.discogs_consumer_key or None,
                    consumer_secret=self._settings.discogs_consumer_secret or None,
                )
            client.backoff_enabled = False
            self._client = client
        return self._client

    async def _throttle(self) -> None:
        """Enforce minimum interval between API requests, one caller at a time."""
        async with self._throttle_lock:
            elapsed = time.monotonic() - self._last_request_time
            if self._last_request_time > 0 and elapsed < self._min_request_interval:
                await asyncio.sleep(self._min_request_interval - elapsed)
            self._last_request_time = time.monotonic()

    # -- Sync helpers (executed via asyncio.to_thread) -------------------------

    def _search_release_id_sync(self, query: str) -> int | None:
        """Return the id of the first release matching *query*, or ``None``."""
        client = self._get_client()
        results = client.search(query, type="release", per_page=_SEARCH_PAGE_SIZE)
        for item in results:
            return item.id
        return None

    def _get_release_sync(self, release_id: int) -> dict[str, Any]:
        """Fetch full release details synchronously."""
        client = self._get_client()
        release = client.release(release_id)
        release.refresh()
        return dict(release.data)

    async def _run(self, description: str, fn: Any, *args: Any) -> Any:
        await self._throttle()
        try:
            return await asyncio.wait_for(asyncio.to_thread(fn, *args), timeout=self._timeout)
        except DiscogsHTTPError as exc:
            if exc.status_code == 404:
                raise NotFoundError(
                    message=f"Discogs {description}: not found",
                    provider_name=self.get_provider_name(),
                ) from exc
            if exc.status_code == 429:
                raise RateLimitError(
                    message=f"Discogs {description}: rate limit exceeded",
                    provider_name=self.get_provider_name(),
                ) from exc
            raise ProviderError(
                message=f"Discogs {description} failed with HTTP {exc.status_code}",
                provider_name=self.get_provider_name(),
            ) from exc
        except asyncio.TimeoutError as exc:
            raise ProviderError(
                message=f"Discogs {description} timed out after {self._timeout}s",
                provider_name=self.get_provider_name(),
            ) from exc
        except Exception as exc:
            raise ProviderError(
                message=f"Discogs {description} failed: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

    # -- IReviewProvider implementation ----------------------------------------

    async def get_review(self, artist_name: str, album_title: str) -> Review:
        """Review the first Discogs release matching artist and title."""
        query = f"{artist_name} {album_title}".strip()
        release_id = await self._run(f"search '{query}'", self._search_release_id_sync, query)
        if release_id is None:
            raise NotFoundError(
                message=f"No Discogs release matches '{query}'",
                provider_name=self.get_provider_name(),
            )

        data = await self._run(f"release {release_id}", self._get_release_sync, release_id)
        review = self._to_review(release_id, data)
        self._logger.info(
            "discogs_review_found",
            artist=artist_name,
            album=album_title,
            release_id=release_id,
            rating=review.rating,
        )
        return review

    def get_provider_name(self) -> str:
        return "discogs"

    def is_available(self) -> bool:
        """Discogs search needs a personal token or a consumer key and secret."""
        return bool(
            self._settings.discogs_token
            or (self._settings.discogs_consumer_key and self._settings.discogs_consumer_secret)
        )

    @staticmethod
    def _to_review(release_id: int, data: dict[str, Any]) -> Review:
        """Map a Discogs release payload onto a :class:`Review`."""
        community = data.get("community") or {}
        rating = community.get("rating") or {}
        rating_count = int(rating.get("count") or 0)
        have = int(community.get("have") or 0)
        want = int(community.get("want") or 0)
        notes = (data.get("notes") or "").strip()

        fields: dict[str, Any] = {
            "source": "Discogs",
            "url": _RELEASE_URL.format(release_id=data.get("id", release_id)),
        }
        if rating_count > 0:
            fields["rating"] = float(rating.get("average") or 0.0)
            fields["summary"] = f"Community rating based on {rating_count} user ratings"
        if notes:
            fields["text"] = notes
            fields["author"] = "Community"
        if "summary" not in fields and "text" not in fields and (have > 0 or want > 0):
            fields["summary"] = f"Collected by {have} users, wanted by {want} users"
        return Review(**fields)
