"""Plain value types shared by the renderer, catalog client and history store."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from .constants import ARTWORK_LARGE_SUFFIX, ARTWORK_SMALL_SUFFIX, DEFAULT_SCREEN_RATIO

Color = Tuple[int, int, int]
RGBA = Tuple[int, int, int, int]


class AspectRatio(Enum):
    THREE_FOUR = "3:4"
    NINE_SIXTEEN = "9:16"
    DEVICE_SCREEN = "device"


class BackgroundStyle(Enum):
    BLUR = "blur"
    AVERAGE_COLOR = "average"
    GRADIENT = "gradient"


class FontStyle(Enum):
    STANDARD = "standard"
    MONOSPACED = "monospaced"


@dataclass(frozen=True)
class MusicMetadata:
    """A track or album record as returned by the catalog lookup."""

    kind: str
    artist_name: str
    collection_name: str
    genre: str
    release_date: str
    track_name: Optional[str] = None
    artwork_url100: Optional[str] = None
    collection_id: Optional[int] = None
    track_id: Optional[int] = None

    @classmethod
    def from_api(cls, record: Dict[str, Any]) -> "MusicMetadata":
        return cls(
            kind=record.get("wrapperType") or "collection",
            artist_name=record.get("artistName") or "",
            collection_name=record.get("collectionName") or "",
            genre=record.get("primaryGenreName") or "",
            release_date=record.get("releaseDate") or "",
            track_name=record.get("trackName"),
            artwork_url100=record.get("artworkUrl100"),
            collection_id=record.get("collectionId"),
            track_id=record.get("trackId"),
        )

    @property
    def display_name(self) -> str:
        if self.kind == "track":
            return self.track_name or self.collection_name
        return self.collection_name

    @property
    def release_year(self) -> str:
        # "2024-07-04T07:00:00Z" -> "2024"
        return self.release_date[:4]

    @property
    def details_text(self) -> str:
        return f"{self.genre} • {self.release_year}"

    @property
    def item_id(self) -> str:
        if self.track_id is not None:
            return str(self.track_id)
        if self.collection_id is not None:
            return str(self.collection_id)
        return ""

    @property
    def high_res_artwork_url(self) -> Optional[str]:
        if not self.artwork_url100:
            return None
        return self.artwork_url100.replace(ARTWORK_SMALL_SUFFIX, ARTWORK_LARGE_SUFFIX)

    @property
    def share_text(self) -> str:
        return f"[{self.display_name}] - {self.artist_name}"


@dataclass(frozen=True)
class StyleOptions:
    """Every rendering choice; the renderer reads nothing else."""

    aspect_ratio: AspectRatio = AspectRatio.THREE_FOUR
    background_style: BackgroundStyle = BackgroundStyle.BLUR
    font_style: FontStyle = FontStyle.STANDARD
    qr_visible: bool = False
    qr_payload: str = ""
    screen_ratio: float = DEFAULT_SCREEN_RATIO


@dataclass(frozen=True)
class Rect:
    x: float
    y: float
    width: float
    height: float

    @property
    def max_x(self) -> float:
        return self.x + self.width

    @property
    def max_y(self) -> float:
        return self.y + self.height

    def inset(self, dx: float, dy: float) -> "Rect":
        return Rect(self.x + dx, self.y + dy, self.width - 2 * dx, self.height - 2 * dy)

    def box(self) -> Tuple[int, int, int, int]:
        """Integer (left, top, right, bottom) box for Pillow drawing calls."""
        return (round(self.x), round(self.y), round(self.max_x), round(self.max_y))


@dataclass(frozen=True)
class LayoutRects:
    artwork: Rect
    title: Rect
    subtitle: Rect
    details: Rect
    qr: Optional[Rect] = None
