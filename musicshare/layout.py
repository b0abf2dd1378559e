"""Layout helpers for canvas sizing and element placement."""
from typing import Tuple

from .constants import (
    PADDING_RATIO,
    QR_BADGE_PADDING_RATIO,
    QR_BADGE_RATIO,
    TALL_ARTWORK_TEXT_GAP_RATIO,
    TEXT_LINE_GAP,
)
from .models import AspectRatio, LayoutRects, Rect

Size = Tuple[float, float]


def canvas_size(artwork_width: int, aspect_ratio: AspectRatio, screen_ratio: float) -> Tuple[int, int]:
    """Canvas is as wide as the artwork; the height follows the aspect profile."""
    if aspect_ratio is AspectRatio.THREE_FOUR:
        height = artwork_width * 4.0 / 3.0
    elif aspect_ratio is AspectRatio.NINE_SIXTEEN:
        height = artwork_width * 16.0 / 9.0
    else:
        height = artwork_width * screen_ratio
    return int(artwork_width), int(round(height))


def padding_for(canvas_width: float, padding_ratio: float = PADDING_RATIO) -> float:
    return canvas_width * padding_ratio


def _stack_text(x: float, top: float, width: float, heights: Tuple[float, float, float], gap: float, bottom: float):
    rects = []
    y = top
    for height in heights:
        y = min(y, bottom)
        rect = Rect(x, y, width, max(0.0, min(height, bottom - y)))
        rects.append(rect)
        y = rect.max_y + gap
    title, subtitle, details = rects
    return title, subtitle, details


def text_space(size: Size, aspect_ratio: AspectRatio) -> float:
    """Height left for the text block below the artwork, gaps included."""
    canvas_width, canvas_height = size
    padding = padding_for(canvas_width)
    art_size = canvas_width - 2 * padding
    if aspect_ratio is AspectRatio.THREE_FOUR:
        return canvas_height - padding - art_size
    return canvas_height - art_size - canvas_height * TALL_ARTWORK_TEXT_GAP_RATIO


def fit_line_counts(
    line_counts: Tuple[int, int, int],
    line_heights: Tuple[float, float, float],
    available: float,
    line_gap: float = TEXT_LINE_GAP,
) -> Tuple[int, int, int]:
    """Cap wrapped line counts so the title, subtitle and details fit in available height.

    Lines are dropped one at a time from the block taking the most room.
    Every non-empty block keeps at least one line.
    """
    counts = list(line_counts)

    def block_height():
        return sum(c * h for c, h in zip(counts, line_heights)) + 2 * line_gap

    while block_height() > available:
        shrinkable = [i for i, c in enumerate(counts) if c > 1]
        if not shrinkable:
            break
        tallest = max(shrinkable, key=lambda i: counts[i] * line_heights[i])
        counts[tallest] -= 1
    title, subtitle, details = counts
    return title, subtitle, details


def compute_layout(
    size: Size,
    aspect_ratio: AspectRatio,
    title_height: float,
    subtitle_height: float,
    details_height: float,
    line_gap: float = TEXT_LINE_GAP,
) -> LayoutRects:
    """Place the artwork square and the three text lines on the canvas.

    3:4 pins the artwork to the top and centers the text block in the space
    below it. The tall profiles center artwork, gap and text block together.
    Text rects share the artwork's horizontal extent.

    A text block taller than the space left starts right under the artwork;
    the line gaps then shrink and the rects are clipped at the canvas bottom.
    Callers keep that from happening with fit_line_counts.
    """
    canvas_width, canvas_height = size
    padding = padding_for(canvas_width)
    art_size = canvas_width - 2 * padding
    heights = (title_height, subtitle_height, details_height)
    text_block = sum(heights) + 2 * line_gap

    if aspect_ratio is AspectRatio.THREE_FOUR:
        artwork = Rect(padding, padding, art_size, art_size)
        remaining = canvas_height - artwork.max_y
        text_top = artwork.max_y + max(0.0, (remaining - text_block) / 2)
    else:
        gap = canvas_height * TALL_ARTWORK_TEXT_GAP_RATIO
        start_y = max(0.0, (canvas_height - (art_size + gap + text_block)) / 2)
        artwork = Rect(padding, start_y, art_size, art_size)
        text_top = artwork.max_y + gap

    line_gap = min(line_gap, max(0.0, (canvas_height - text_top - sum(heights)) / 2))
    title, subtitle, details = _stack_text(padding, text_top, art_size, heights, line_gap, canvas_height)
    return LayoutRects(artwork=artwork, title=title, subtitle=subtitle, details=details)


def qr_rect(size: Size, art_width: float, padding: float) -> Rect:
    """Square QR badge in the bottom-right corner, slightly inset from the edges."""
    canvas_width, canvas_height = size
    badge = art_width * QR_BADGE_RATIO
    inset = padding * QR_BADGE_PADDING_RATIO
    return Rect(canvas_width - badge - inset, canvas_height - badge - inset, badge, badge)


def aspect_fill_rect(source: Size, target: Size) -> Rect:
    """Rectangle that covers target while keeping the source aspect ratio.

    The overflowing dimension is centered, so x or y may be negative.
    """
    target_width, target_height = target
    image_ratio = source[0] / source[1]
    view_ratio = target_width / target_height
    if image_ratio > view_ratio:
        height = target_height
        width = height * image_ratio
        return Rect((target_width - width) / 2, 0, width, height)
    width = target_width
    height = width / image_ratio
    return Rect(0, (target_height - height) / 2, width, height)
