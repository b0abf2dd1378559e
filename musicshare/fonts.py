"""Font discovery and text style resolution for the share image.

Font files are indexed once per process and loaded fonts are cached by
(path, size) with ``functools.lru_cache``. That cache is the only state
shared between renders. Rendering only reads from a loaded font, and
``clear_font_cache`` drops it when the font directories change.
"""
from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass
from functools import lru_cache
from typing import Dict, List, Optional, Tuple

from PIL import Image, ImageFont

from .colors import average_color, is_light
from .constants import (
    BLACK,
    DETAILS_FONT_RATIO,
    SECONDARY_TEXT_ALPHA,
    SUBTITLE_FONT_RATIO,
    TEXT_SHADOW_ALPHA,
    TEXT_SHADOW_BLUR,
    TEXT_SHADOW_OFFSET,
    TITLE_FONT_RATIO,
    WHITE,
)
from .draw import Font, Shadow
from .models import RGBA, BackgroundStyle, FontStyle

logger = logging.getLogger(__name__)

BOLD, REGULAR, LIGHT = "bold", "regular", "light"

# Candidate files per family and weight, first hit wins. Families without a
# light cut reuse the regular file.
PROPORTIONAL_CANDIDATES: List[Dict[str, List[str]]] = [
    {BOLD: ["DejaVuSans-Bold.ttf"], REGULAR: ["DejaVuSans.ttf"], LIGHT: ["DejaVuSans-ExtraLight.ttf", "DejaVuSans.ttf"]},
    {BOLD: ["NotoSans-Bold.ttf"], REGULAR: ["NotoSans-Regular.ttf"], LIGHT: ["NotoSans-Light.ttf", "NotoSans-Regular.ttf"]},
    {BOLD: ["LiberationSans-Bold.ttf"], REGULAR: ["LiberationSans-Regular.ttf"], LIGHT: ["LiberationSans-Regular.ttf"]},
    {BOLD: ["arialbd.ttf", "Arial Bold.ttf"], REGULAR: ["arial.ttf", "Arial.ttf"], LIGHT: ["arial.ttf", "Arial.ttf"]},
    {BOLD: ["segoeuib.ttf"], REGULAR: ["segoeui.ttf"], LIGHT: ["segoeuil.ttf", "segoeui.ttf"]},
]

MONOSPACED_CANDIDATES: List[Dict[str, List[str]]] = [
    {BOLD: ["DejaVuSansMono-Bold.ttf"], REGULAR: ["DejaVuSansMono.ttf"], LIGHT: ["DejaVuSansMono.ttf"]},
    {BOLD: ["NotoSansMono-Bold.ttf"], REGULAR: ["NotoSansMono-Regular.ttf"], LIGHT: ["NotoSansMono-Light.ttf", "NotoSansMono-Regular.ttf"]},
    {BOLD: ["LiberationMono-Bold.ttf"], REGULAR: ["LiberationMono-Regular.ttf"], LIGHT: ["LiberationMono-Regular.ttf"]},
    {BOLD: ["courbd.ttf", "Courier New Bold.ttf"], REGULAR: ["cour.ttf", "Courier New.ttf"], LIGHT: ["cour.ttf", "Courier New.ttf"]},
    {BOLD: ["Menlo.ttc"], REGULAR: ["Menlo.ttc"], LIGHT: ["Menlo.ttc"]},
]


@dataclass(frozen=True)
class TextStyle:
    font: Font
    color: RGBA
    shadow: Shadow


@dataclass(frozen=True)
class TextStyles:
    title: TextStyle
    subtitle: TextStyle
    details: TextStyle


def font_dirs() -> List[str]:
    """Directories searched for TrueType fonts, most specific first."""
    dirs = [os.path.abspath("fonts")]
    if sys.platform.startswith("win"):
        dirs.append(os.path.join(os.environ.get("WINDIR", r"C:\\Windows"), "Fonts"))
    elif sys.platform == "darwin":
        dirs.extend(["/System/Library/Fonts", "/Library/Fonts", os.path.expanduser("~/Library/Fonts")])
    else:
        dirs.extend(["/usr/share/fonts", "/usr/local/share/fonts", os.path.expanduser("~/.fonts")])
    return dirs


@lru_cache(maxsize=1)
def _font_index() -> Dict[str, str]:
    """Map of file name -> path for every font file below font_dirs()."""
    index: Dict[str, str] = {}
    for root_dir in font_dirs():
        if not os.path.isdir(root_dir):
            continue
        for dirpath, _dirnames, filenames in os.walk(root_dir):
            for name in filenames:
                if name.lower().endswith((".ttf", ".otf", ".ttc")):
                    index.setdefault(name, os.path.join(dirpath, name))
    return index


def find_font_file(candidates: List[Dict[str, List[str]]], weight: str) -> Optional[str]:
    index = _font_index()
    for family in candidates:
        for name in family[weight]:
            if name in index:
                return index[name]
    return None


@lru_cache(maxsize=64)
def _load_font(path: Optional[str], size: float) -> Font:
    if path:
        try:
            return ImageFont.truetype(path, size)
        except OSError:
            logger.debug("Could not load font %s; using Pillow default", path)
    return ImageFont.load_default(size=size)


def load_font(font_style: FontStyle, weight: str, size: float) -> Font:
    """Load the font for a style/weight at size, falling back to Pillow's default font."""
    candidates = MONOSPACED_CANDIDATES if font_style is FontStyle.MONOSPACED else PROPORTIONAL_CANDIDATES
    return _load_font(find_font_file(candidates, weight), size)


def font_sizes(artwork_width: float) -> Tuple[float, float, float]:
    return (
        artwork_width * TITLE_FONT_RATIO,
        artwork_width * SUBTITLE_FONT_RATIO,
        artwork_width * DETAILS_FONT_RATIO,
    )


def primary_text_color(background_style: BackgroundStyle, artwork: Image.Image) -> RGBA:
    """White over blurred/gradient backgrounds, otherwise contrast with the artwork's average colour.

    The flat background case looks at the original artwork, not the pixels
    actually drawn behind the text.
    """
    if background_style in (BackgroundStyle.BLUR, BackgroundStyle.GRADIENT):
        return WHITE + (255,)
    base = BLACK if is_light(average_color(artwork)) else WHITE
    return base + (255,)


def text_shadow() -> Shadow:
    return Shadow(
        offset=TEXT_SHADOW_OFFSET,
        blur=TEXT_SHADOW_BLUR,
        color=(0, 0, 0, round(255 * TEXT_SHADOW_ALPHA)),
    )


def resolve_text_styles(
    font_style: FontStyle,
    background_style: BackgroundStyle,
    artwork: Image.Image,
    artwork_width: float,
) -> TextStyles:
    """Fonts, colours and shadow for the title, subtitle and details lines."""
    title_size, subtitle_size, details_size = font_sizes(artwork_width)
    primary = primary_text_color(background_style, artwork)
    secondary = primary[:3] + (round(255 * SECONDARY_TEXT_ALPHA),)
    shadow = text_shadow()
    return TextStyles(
        title=TextStyle(load_font(font_style, BOLD, title_size), primary, shadow),
        subtitle=TextStyle(load_font(font_style, REGULAR, subtitle_size), primary, shadow),
        details=TextStyle(load_font(font_style, LIGHT, details_size), secondary, shadow),
    )


def clear_font_cache() -> None:
    """Forget indexed font files and loaded fonts."""
    _font_index.cache_clear()
    _load_font.cache_clear()
