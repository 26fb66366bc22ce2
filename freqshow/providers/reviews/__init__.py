"""Album review provider implementations.

    DiscogsReviewProvider  - Discogs community ratings and release notes.
    Requires DISCOGS_TOKEN, or DISCOGS_CONSUMER_KEY and DISCOGS_CONSUMER_SECRET.
"""

from freqshow.providers.reviews.discogs_review_provider import DiscogsReviewProvider

__all__ = ["DiscogsReviewProvider"]
