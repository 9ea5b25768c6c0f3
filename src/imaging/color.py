# src/imaging/color.py — v1
"""Dominant color extraction for decorative theming.

The image is box-sampled down to a 10x10 grid. Pixels that are mostly
transparent or whose mean channel value is near black or near white are
discarded, and the survivors' channels are averaged independently. This is a
plain average, not clustering: cost is fixed at grid-size squared and the
result is fully deterministic.
"""

from __future__ import annotations

import logging

import numpy as np
from PIL import Image
from pydantic import BaseModel, ConfigDict, Field

from favicache.imaging.normalizer import UndecodableImage, decode_image

logger = logging.getLogger(__name__)

GRID_SIZE = 10
ALPHA_THRESHOLD = 128
MIN_BRIGHTNESS = 30
MAX_BRIGHTNESS = 225


class DominantColor(BaseModel):
    """RGB color with channels in the unit interval."""

    model_config = ConfigDict(frozen=True)

    red: float = Field(ge=0.0, le=1.0)
    green: float = Field(ge=0.0, le=1.0)
    blue: float = Field(ge=0.0, le=1.0)

    def as_rgb255(self) -> tuple[int, int, int]:
        """Return channels scaled and rounded to 0-255."""
        return (
            round(self.red * 255),
            round(self.green * 255),
            round(self.blue * 255),
        )

    @property
    def hex(self) -> str:
        r, g, b = self.as_rgb255()
        return f"#{r:02x}{g:02x}{b:02x}"


# Returned when no sampled pixel qualifies (e.g. a black logo on white).
FALLBACK_COLOR = DominantColor(red=0.0, green=122 / 255, blue=1.0)


def extract_dominant_color(image: Image.Image) -> DominantColor:
    """Compute the representative color of image.

    Never fails for a decoded image: when every sample is filtered out the
    FALLBACK_COLOR is returned.
    """
    grid = image.convert("RGBA").resize((GRID_SIZE, GRID_SIZE), Image.Resampling.BOX)
    pixels = np.asarray(grid, dtype=np.int32).reshape(-1, 4)

    rgb = pixels[:, :3]
    alpha = pixels[:, 3]
    brightness = rgb.sum(axis=1) // 3

    keep = (
        (alpha > ALPHA_THRESHOLD)
        & (brightness > MIN_BRIGHTNESS)
        & (brightness < MAX_BRIGHTNESS)
    )
    if not keep.any():
        return FALLBACK_COLOR

    mean = rgb[keep].mean(axis=0) / 255.0
    return DominantColor(red=float(mean[0]), green=float(mean[1]), blue=float(mean[2]))


def extract_dominant_color_from_bytes(data: bytes) -> DominantColor | None:
    """Decode data and compute its dominant color; None if undecodable."""
    try:
        image = decode_image(data)
    except UndecodableImage as e:
        logger.debug("Cannot extract color from undecodable bytes: %s", e)
        return None
    return extract_dominant_color(image)
