# src/imaging/normalizer.py — v1
"""Decode fetched bytes and bring them to the canonical cached form.

Nothing enters either cache tier without passing through normalize_image():
the result is always a square RGBA image of the canonical size plus its PNG
encoding, whatever format or size the source returned.
"""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass

from PIL import Image, UnidentifiedImageError

logger = logging.getLogger(__name__)

CANONICAL_SIZE = 64
STORAGE_FORMAT = "PNG"

# Decompression-bomb guard: favicons never legitimately approach this.
_MAX_SOURCE_PIXELS = 4096 * 4096


class UndecodableImage(ValueError):
    """Raised when bytes do not decode to a non-empty raster image."""


@dataclass(frozen=True)
class NormalizedImage:
    """Canonical icon: decoded pixels plus their storage encoding."""

    image: Image.Image
    data: bytes

    @property
    def size(self) -> tuple[int, int]:
        return self.image.size


def decode_image(data: bytes) -> Image.Image:
    """Decode bytes into a fully loaded RGBA image.

    Raises:
        UndecodableImage: If the bytes are empty, not an image, too large
            or decode to zero area.
    """
    if not data:
        raise UndecodableImage("empty payload")

    try:
        with Image.open(io.BytesIO(data)) as source:
            width, height = source.size
            if width <= 0 or height <= 0:
                raise UndecodableImage(f"zero-area image ({width}x{height})")
            if width * height > _MAX_SOURCE_PIXELS:
                raise UndecodableImage(f"image too large ({width}x{height})")
            source.load()
            return source.convert("RGBA")
    except UndecodableImage:
        raise
    except (UnidentifiedImageError, OSError, ValueError, SyntaxError, Image.DecompressionBombError) as e:
        raise UndecodableImage(f"cannot decode image: {e}") from e


def normalize_image(data: bytes, size: int = CANONICAL_SIZE) -> NormalizedImage:
    """Decode, stretch to size x size and re-encode as PNG.

    Raises:
        UndecodableImage: See decode_image().
    """
    image = decode_image(data)
    if image.size != (size, size):
        image = image.resize((size, size), Image.Resampling.LANCZOS)

    buffer = io.BytesIO()
    image.save(buffer, format=STORAGE_FORMAT, optimize=True)
    return NormalizedImage(image=image, data=buffer.getvalue())
