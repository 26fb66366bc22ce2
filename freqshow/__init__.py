"""freq-show: a cache-first music catalog aggregating MusicBrainz, Wikipedia and Discogs."""

__version__ = "0.1.0"
