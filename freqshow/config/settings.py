"""Application settings loaded from environment variables via pydantic-settings.

Settings are read from (highest priority first):

    1. Environment variables, e.g. ``DATABASE_DRIVER=memory``
    2. The ``.env`` file in the working directory
    3. ``config/config.yaml`` (applied by :func:`freqshow.config.loader.load_settings`)
    4. The defaults declared below

Field ``musicbrainz_contact`` maps to env var ``MUSICBRAINZ_CONTACT`` and so
on; ``app_port`` additionally accepts ``PORT`` and ``HTTP_PORT`` as used by
most container platforms.
"""

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_DEFAULT_SHUTDOWN_TIMEOUT = 10.0


class Settings(BaseSettings):
    """freq-show application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # === App ===
    app_env: str = "development"
    app_host: str = "0.0.0.0"
    app_port: int = Field(
        default=8080,
        validation_alias=AliasChoices("app_port", "port", "http_port"),
    )
    log_level: str = "INFO"
    shutdown_timeout_seconds: float = _DEFAULT_SHUTDOWN_TIMEOUT
    cors_origins: list[str] = ["http://localhost:4200"]

    # === Database ===
    database_driver: str = "sqlite"  # "sqlite" or "memory"
    database_path: str = "data/freqshow.db"

    # === MusicBrainz (primary metadata) ===
    musicbrainz_host: str = "musicbrainz.org"
    musicbrainz_use_https: bool = True
    musicbrainz_app_name: str = "freq-show"
    musicbrainz_app_version: str = "dev"
    musicbrainz_contact: str = "dev@localhost"
    musicbrainz_timeout_seconds: float = 6.0

    # === Wikipedia (biographies) ===
    wikipedia_base_url: str = "https://en.wikipedia.org/api/rest_v1"
    wikipedia_user_agent: str = "FreqShow/1.0 (https://github.com/freq-show; dev@localhost)"
    wikipedia_timeout_seconds: float = 10.0

    # === Discogs (reviews) ===
    # Search requires a personal token or a consumer key and secret.
    discogs_user_agent: str = "FreqShow/1.0"
    discogs_token: str = ""
    discogs_consumer_key: str = ""
    discogs_consumer_secret: str = ""
    discogs_timeout_seconds: float = 10.0

    # === Catalog ===
    catalog_release_limit: int = 50
    catalog_enrichment_timeout_seconds: float = 10.0

    @field_validator("database_driver")
    @classmethod
    def _normalize_driver(cls, value: str) -> str:
        return value.strip().lower()

    @field_validator("shutdown_timeout_seconds")
    @classmethod
    def _positive_shutdown_timeout(cls, value: float) -> float:
        return value if value > 0 else _DEFAULT_SHUTDOWN_TIMEOUT
