"""freq-show domain models - re-exports all public model classes."""

from __future__ import annotations

from freqshow.models.entities import (
    Album,
    Artist,
    EntityKind,
    LifeSpan,
    Review,
    Track,
)

__all__ = [
    "Album",
    "Artist",
    "EntityKind",
    "LifeSpan",
    "Review",
    "Track",
]
