"""Background treatments drawn behind the artwork and text."""
from __future__ import annotations

import logging
import math

from PIL import Image, ImageFilter

from .colors import average_color, dominant_colors
from .constants import BLUR_RADIUS, WHITE
from .draw import DrawingSurface
from .layout import aspect_fill_rect
from .models import BackgroundStyle

logger = logging.getLogger(__name__)


def _extend_edges(image: Image.Image, margin: int) -> Image.Image:
    """Return a copy with the outermost pixels stretched outwards by margin on every side."""
    w, h = image.size
    extended = Image.new(image.mode, (w + 2 * margin, h + 2 * margin))
    extended.paste(image, (margin, margin))
    extended.paste(image.crop((0, 0, w, 1)).resize((w, margin)), (margin, 0))
    extended.paste(image.crop((0, h - 1, w, h)).resize((w, margin)), (margin, margin + h))
    extended.paste(image.crop((0, 0, 1, h)).resize((margin, h)), (0, margin))
    extended.paste(image.crop((w - 1, 0, w, h)).resize((margin, h)), (margin + w, margin))
    corners = {
        (0, 0): (0, 0),
        (w - 1, 0): (margin + w, 0),
        (0, h - 1): (0, margin + h),
        (w - 1, h - 1): (margin + w, margin + h),
    }
    for src, dest in corners.items():
        extended.paste(Image.new(image.mode, (margin, margin), image.getpixel(src)), dest)
    return extended


def blurred(image: Image.Image, radius: float = BLUR_RADIUS) -> Image.Image:
    """Gaussian-blur the image without darkening its borders.

    The image is clamped outwards before blurring and cropped back to its
    original extent afterwards.
    """
    source = image.convert("RGB")
    margin = max(1, int(math.ceil(radius * 3)))
    extended = _extend_edges(source, margin)
    result = extended.filter(ImageFilter.GaussianBlur(radius))
    return result.crop((margin, margin, margin + source.width, margin + source.height))


def draw_blur_background(surface: DrawingSurface, artwork: Image.Image) -> None:
    try:
        background = blurred(artwork)
    except Exception:
        logger.exception("Blurring artwork failed; using a white background")
        surface.fill(WHITE)
        return
    surface.draw_image(background, aspect_fill_rect(background.size, surface.size))


def draw_gradient_background(surface: DrawingSurface, artwork: Image.Image) -> None:
    colors = dominant_colors(artwork, 2)
    if len(colors) < 2:
        logger.debug("Only %d dominant colour(s); using a flat average colour", len(colors))
        surface.fill(average_color(artwork))
        return
    top, bottom = colors
    surface.fill_vertical_gradient(top, bottom)


def draw_background(surface: DrawingSurface, artwork: Image.Image, style: BackgroundStyle) -> None:
    """Fill the whole surface with the chosen background treatment."""
    if style is BackgroundStyle.BLUR:
        draw_blur_background(surface, artwork)
    elif style is BackgroundStyle.GRADIENT:
        draw_gradient_background(surface, artwork)
    else:
        surface.fill(average_color(artwork))
