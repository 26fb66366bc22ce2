"""Configuration module - exports Settings and load_settings."""

from freqshow.config.loader import load_settings
from freqshow.config.settings import Settings

__all__ = ["Settings", "load_settings"]
