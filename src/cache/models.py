# src/cache/models.py — v1
"""Cache domain models: CachedImageEntry, CacheStats."""

from __future__ import annotations

from dataclasses import dataclass, field

from PIL import Image
from pydantic import BaseModel


@dataclass(frozen=True)
class CachedImageEntry:
    """Decoded icon held by the memory tier.

    ``data`` is the canonical PNG encoding of ``image``; both are produced by
    the image normalizer, so they always describe the same pixels.
    """

    key: str
    image: Image.Image = field(repr=False, compare=False)
    data: bytes = field(repr=False)
    approximate_byte_size: int = 0

    @classmethod
    def from_image(cls, key: str, image: Image.Image, data: bytes) -> CachedImageEntry:
        """Build an entry, sizing it as decoded RGBA pixels plus encoded bytes."""
        width, height = image.size
        return cls(
            key=key,
            image=image,
            data=data,
            approximate_byte_size=width * height * 4 + len(data),
        )


class CacheStats(BaseModel):
    """Counters describing how lookups were served."""

    memory_hits: int = 0
    disk_hits: int = 0
    network_fetches: int = 0
    misses: int = 0
    invalid_identifiers: int = 0

    @property
    def lookups(self) -> int:
        return (
            self.memory_hits
            + self.disk_hits
            + self.network_fetches
            + self.misses
            + self.invalid_identifiers
        )
