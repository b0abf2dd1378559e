"""Text utilities relying on Pillow font metrics."""
from typing import List, Tuple


def line_height(font) -> float:
    """Height of one line of text (ascent + descent) for a Pillow font."""
    try:
        ascent, descent = font.getmetrics()
        return float(ascent + descent)
    except AttributeError:
        # bitmap fonts have no metrics; use the bounding box of a tall glyph pair
        left, top, right, bottom = font.getbbox("Ag")
        return float(bottom)


def _split_long_word(word: str, font, max_width: float) -> Tuple[List[str], str]:
    """Split a word wider than max_width by characters.
    Returns the full lines plus the trailing partial segment.
    """
    lines: List[str] = []
    segment = ""
    for ch in word:
        if font.getlength(segment + ch) <= max_width:
            segment += ch
        else:
            if segment:
                lines.append(segment)
            segment = ch
    return lines, segment


def wrap_text_to_width(text: str, font, max_width: float) -> List[str]:
    """Wrap text into lines that do not exceed max_width using Pillow width metrics.
    Falls back to character-level splitting if a single word exceeds max_width.
    Returns a list of lines (strings).
    """
    if text is None or str(text).strip() == "":
        return []
    words = str(text).split()
    lines: List[str] = []
    current = ""
    for w in words:
        candidate = (current + " " + w).strip()
        if font.getlength(candidate) <= max_width:
            current = candidate
            continue
        if current:
            lines.append(current)
        if font.getlength(w) <= max_width:
            current = w
        else:
            full, current = _split_long_word(w, font, max_width)
            lines.extend(full)
    if current:
        lines.append(current)
    return lines
