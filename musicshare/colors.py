"""Colour analysis of artwork: average colour, dominant palette and contrast."""
from __future__ import annotations

import logging
import math
from typing import Dict, List, Tuple

from PIL import Image, ImageStat

from .constants import (
    DOMINANT_DISTANCE_THRESHOLD,
    DOMINANT_MIN_ALPHA,
    DOMINANT_SAMPLE_SIZE,
    LIGHT_LUMINANCE_THRESHOLD,
    WHITE,
)
from .models import Color

logger = logging.getLogger(__name__)


def average_color(image: Image.Image) -> Color:
    """Return the mean RGB colour over the whole image.

    Falls back to white if the image cannot be read.
    """
    try:
        stat = ImageStat.Stat(image.convert("RGB"))
        r, g, b = (int(round(v)) for v in stat.mean[:3])
        return (r, g, b)
    except Exception:
        logger.debug("Could not compute average colour; using white", exc_info=True)
        return WHITE


def color_distance(a: Color, b: Color) -> float:
    """Euclidean distance between two colours in normalized RGB space."""
    return math.sqrt(sum(((x - y) / 255.0) ** 2 for x, y in zip(a[:3], b[:3])))


def is_similar(a: Color, b: Color, threshold: float = DOMINANT_DISTANCE_THRESHOLD) -> bool:
    return color_distance(a, b) < threshold


def luminance(color: Color) -> float:
    r, g, b = (c / 255.0 for c in color[:3])
    return 0.299 * r + 0.587 * g + 0.114 * b


def is_light(color: Color) -> bool:
    return luminance(color) > LIGHT_LUMINANCE_THRESHOLD


def _tally_pixels(image: Image.Image) -> Dict[Tuple[int, int, int], int]:
    min_alpha = DOMINANT_MIN_ALPHA * 255
    counts: Dict[Tuple[int, int, int], int] = {}
    data = image.tobytes()
    for i in range(0, len(data), 4):
        r, g, b, a = data[i], data[i + 1], data[i + 2], data[i + 3]
        # translucent pixels say little about the visible colour
        if a <= min_alpha:
            continue
        key = (r, g, b)
        counts[key] = counts.get(key, 0) + 1
    return counts


def dominant_colors(image: Image.Image, max_count: int) -> List[Color]:
    """Return up to max_count frequent colours that are mutually dissimilar.

    The image is first reduced to a small fixed size; exact pixel colours
    are counted and walked from most to least frequent, keeping a colour
    only if it is not similar to any colour already kept. Images without
    enough variety produce a shorter (possibly empty) list.
    """
    if max_count <= 0:
        return []
    try:
        small = image.convert("RGBA").resize(DOMINANT_SAMPLE_SIZE, Image.Resampling.BOX)
    except Exception:
        logger.debug("Could not sample image for dominant colours", exc_info=True)
        return []

    counts = _tally_pixels(small)
    # sorted() is stable, so equally common colours keep scan order
    ranked = sorted(counts.items(), key=lambda kv: kv[1], reverse=True)

    palette: List[Color] = []
    for color, _count in ranked:
        if not any(is_similar(kept, color) for kept in palette):
            palette.append(color)
        if len(palette) >= max_count:
            break
    logger.debug("Dominant colours (%d distinct sampled): %s", len(counts), palette)
    return palette
