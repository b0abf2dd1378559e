"""Shared layout, typography and colour constants for share image rendering."""
import logging
import os

logger = logging.getLogger(__name__)


def env_float(name: str, default: float) -> float:
    """Read a float from the environment, keeping default when unset or malformed."""
    value = os.environ.get(name)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        logger.warning("Ignoring %s=%r: not a number, using %s", name, value, default)
        return default


# 5% padding on the left, right and top of the artwork
PADDING_RATIO: float = 0.05

# Font sizes relative to the rendered artwork width
TITLE_FONT_RATIO: float = 0.065
SUBTITLE_FONT_RATIO: float = 0.05
DETAILS_FONT_RATIO: float = 0.04

# Vertical space between title, subtitle and details lines
TEXT_LINE_GAP: float = 15.0
# Gap between artwork and text block for the tall profiles, relative to canvas height
TALL_ARTWORK_TEXT_GAP_RATIO: float = 0.05

ARTWORK_CORNER_RATIO: float = 0.03
ARTWORK_SHADOW_OFFSET = (0, 4)
ARTWORK_SHADOW_BLUR: float = 15.0
ARTWORK_SHADOW_ALPHA: float = 0.5

TEXT_SHADOW_OFFSET = (1, 1)
TEXT_SHADOW_BLUR: float = 5.0
TEXT_SHADOW_ALPHA: float = 0.5
SECONDARY_TEXT_ALPHA: float = 0.8

BLUR_RADIUS: float = 30.0

# Colour analysis
DOMINANT_SAMPLE_SIZE = (50, 50)
DOMINANT_MIN_ALPHA: float = 0.9
DOMINANT_DISTANCE_THRESHOLD: float = 0.2
LIGHT_LUMINANCE_THRESHOLD: float = 0.5

WHITE = (255, 255, 255)
BLACK = (0, 0, 0)

# QR badge, relative to artwork width / badge size
QR_BOX_SIZE: int = 10
QR_BORDER_MODULES: int = 1
QR_BADGE_RATIO: float = 0.12
QR_BADGE_PADDING_RATIO: float = 0.3  # fraction of the canvas padding
QR_BADGE_CORNER_RATIO: float = 0.15
QR_BADGE_STROKE_RATIO: float = 0.02
QR_BADGE_INSET_RATIO: float = 0.08
QR_BADGE_ALPHA: float = 0.8

# Height / width of the target device screen (iPhone 14 / 15 class by default)
DEFAULT_SCREEN_RATIO: float = env_float("MUSICSHARE_SCREEN_RATIO", 2532 / 1170)

# Catalog lookup
LOOKUP_URL = "https://itunes.apple.com/lookup"
LOOKUP_PARAMS = {"country": "jp", "lang": "ja_jp", "entity": "song,album"}
REQUEST_TIMEOUT: float = 15.0
ARTWORK_SMALL_SUFFIX = "100x100bb.jpg"
ARTWORK_LARGE_SUFFIX = "2000x2000bb.jpg"

# History persistence
HISTORY_KEY = "music_history"
DEFAULT_HISTORY_PATH = os.environ.get(
    "MUSICSHARE_HISTORY", os.path.join(os.path.expanduser("~"), ".musicshare", "history.json")
)
HISTORY_DATE_FORMAT = "%Y/%m/%d %H:%M"
