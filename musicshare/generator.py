"""Share image composition and the end-to-end generation pipeline."""
from __future__ import annotations

import logging
from dataclasses import replace
from pathlib import Path
from typing import Optional, Tuple, Union

import requests
from PIL import Image

from .background import draw_background
from .catalog import download_artwork, extract_id, fetch_music_info
from .colors import average_color
from .constants import ARTWORK_CORNER_RATIO, ARTWORK_SHADOW_ALPHA, ARTWORK_SHADOW_BLUR, ARTWORK_SHADOW_OFFSET, BLACK
from .draw import Shadow, create_surface, save_image
from .errors import CatalogLookupError, SourceDecodeFailed
from .fonts import resolve_text_styles
from .history import HistoryStore
from .layout import canvas_size, compute_layout, fit_line_counts, padding_for, qr_rect, text_space
from .models import LayoutRects, MusicMetadata, StyleOptions
from .qr_utils import add_qr_badge, generate_qr_code
from .text_utils import line_height, wrap_text_to_width

logger = logging.getLogger(__name__)


def _check_artwork(artwork) -> Image.Image:
    if not isinstance(artwork, Image.Image):
        raise SourceDecodeFailed(f"Artwork is not an image: {type(artwork).__name__}")
    try:
        artwork.load()
    except (OSError, ValueError) as exc:
        raise SourceDecodeFailed("Artwork pixels could not be read") from exc
    if artwork.width <= 0 or artwork.height <= 0:
        raise SourceDecodeFailed(f"Artwork has no pixels ({artwork.width}x{artwork.height})")
    return artwork


def compose(artwork: Image.Image, metadata: MusicMetadata, options: StyleOptions) -> Tuple[Image.Image, LayoutRects]:
    """Render the share image and return it together with the layout used.

    Drawing order is fixed: background, shadowed rounded artwork, the three
    text lines, then the optional QR badge. Blur, gradient and QR problems
    fall back locally; only an unreadable artwork or an unallocatable canvas
    raise (both are CompositionError subclasses).
    """
    artwork = _check_artwork(artwork)
    size = canvas_size(artwork.width, options.aspect_ratio, options.screen_ratio)
    surface = create_surface(size)
    logger.debug("Rendering %dx%d canvas (%s, %s, %s)", size[0], size[1],
                 options.aspect_ratio.value, options.background_style.value, options.font_style.value)

    draw_background(surface, artwork, options.background_style)

    padding = padding_for(size[0])
    art_width = size[0] - 2 * padding
    styles = resolve_text_styles(options.font_style, options.background_style, artwork, art_width)

    blocks = (
        (metadata.display_name, styles.title),
        (metadata.artist_name, styles.subtitle),
        (metadata.details_text, styles.details),
    )
    # long titles lose their last wrapped lines rather than running off the canvas
    max_lines = fit_line_counts(
        tuple(len(wrap_text_to_width(text, style.font, art_width)) for text, style in blocks),
        tuple(line_height(style.font) for _text, style in blocks),
        text_space(size, options.aspect_ratio),
    )
    rects = compute_layout(
        size,
        options.aspect_ratio,
        *(surface.measure_text(text, style.font, art_width, limit)
          for (text, style), limit in zip(blocks, max_lines)),
    )

    corner_radius = art_width * ARTWORK_CORNER_RATIO
    shadow = Shadow(
        offset=ARTWORK_SHADOW_OFFSET,
        blur=ARTWORK_SHADOW_BLUR,
        color=(0, 0, 0, round(255 * ARTWORK_SHADOW_ALPHA)),
    )
    surface.draw_shadow(rects.artwork, corner_radius, shadow)
    surface.draw_rounded_rect(rects.artwork, corner_radius, fill=BLACK)
    surface.draw_image(artwork, rects.artwork, corner_radius=corner_radius)

    for (text, style), rect, limit in zip(blocks, (rects.title, rects.subtitle, rects.details), max_lines):
        surface.draw_text(text, rect, style.font, style.color, style.shadow, max_lines=limit)

    if options.qr_visible:
        qr_image = generate_qr_code(options.qr_payload)
        if qr_image is not None:
            badge = qr_rect(size, art_width, padding)
            add_qr_badge(surface, qr_image, badge, average_color(artwork))
            rects = replace(rects, qr=badge)

    return surface.to_image(), rects


def render(artwork: Image.Image, metadata: MusicMetadata, options: StyleOptions) -> Image.Image:
    """Render the final share image (RGB) for artwork, metadata and style options."""
    image, _rects = compose(artwork, metadata, options)
    return image


def default_output_path(metadata: MusicMetadata, suffix: str = ".png") -> Path:
    name = metadata.item_id or "share"
    return Path.cwd() / "output" / f"{name}{suffix}"


def main(
    item_url: str,
    output_path: Optional[Union[str, Path]] = None,
    options: Optional[StyleOptions] = None,
    history_path: Optional[Union[str, Path]] = None,
    save_history: bool = True,
    history_limit: Optional[int] = None,
    session: Optional[requests.Session] = None,
) -> Path:
    """Look up a release by its share URL, render the share image and save it.

    Returns the path the image was written to. Raises CatalogLookupError
    for an unusable URL or lookup result and CompositionError subclasses
    when the image cannot be rendered.
    """
    if options is None:
        options = StyleOptions()

    item_id = extract_id(item_url)
    if not item_id:
        raise CatalogLookupError(f"No valid id found in URL: {item_url}")
    logger.info("Looking up item %s ...", item_id)
    metadata = fetch_music_info(item_id, session=session)

    artwork_url = metadata.high_res_artwork_url
    if not artwork_url:
        raise CatalogLookupError(f"Item {item_id} has no artwork URL")
    logger.info("Downloading artwork for %s ...", metadata.display_name)
    artwork = download_artwork(artwork_url, session=session)

    # the QR code points back at the URL the image was made from unless told otherwise
    if options.qr_visible and not options.qr_payload:
        options = replace(options, qr_payload=item_url)
    image = render(artwork, metadata, options)

    if save_history:
        HistoryStore(history_path, limit=history_limit).add(metadata, image)

    if not output_path:
        output_path = default_output_path(metadata)
    written = save_image(image, output_path)

    logger.info(
        "🎉 Share image complete!\n\n"
        "🎵 Item: %s\n"
        "📐 Size: %dx%d (%s, %s)\n"
        "📤 Output: %s\n"
        "📋 Share text: %s",
        metadata.display_name,
        image.width,
        image.height,
        options.aspect_ratio.value,
        options.background_style.value,
        written,
        metadata.share_text,
    )
    return written
