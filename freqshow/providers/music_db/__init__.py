"""Primary metadata provider implementations.

    MusicBrainzProvider  - MusicBrainz open API via musicbrainzngs. Free, no
    key required, 1 req/sec. Authoritative for artist and album existence.
"""

from freqshow.providers.music_db.musicbrainz_provider import MusicBrainzProvider

__all__ = ["MusicBrainzProvider"]
