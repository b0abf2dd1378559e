"""Local history of generated share images.

The history lives in a small JSON file used as a key-value store: the
``music_history`` key holds a list of entries, newest first. Each entry keeps
the rendered image as base64-encoded PNG next to the item id, display name,
artist and creation time, so a history listing never needs the network.
"""
from __future__ import annotations

import base64
import json
import logging
import os
import uuid
from dataclasses import asdict, dataclass
from datetime import datetime
from io import BytesIO
from pathlib import Path
from typing import Iterable, List, Optional, Union

from PIL import Image

from .constants import DEFAULT_HISTORY_PATH, HISTORY_DATE_FORMAT, HISTORY_KEY
from .models import MusicMetadata

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HistoryEntry:
    id: str
    music_item_id: str
    artwork_png: str
    display_name: str
    artist_name: str
    created_at: str

    @property
    def created(self) -> datetime:
        return datetime.fromisoformat(self.created_at)

    def image(self) -> Image.Image:
        """Decode the stored PNG."""
        image = Image.open(BytesIO(base64.b64decode(self.artwork_png)))
        image.load()
        return image


def format_date(value: datetime) -> str:
    """Format as ``YYYY/MM/DD HH:MM`` for history listings."""
    return value.strftime(HISTORY_DATE_FORMAT)


def encode_png(image: Image.Image) -> str:
    buf = BytesIO()
    image.save(buf, format="PNG")
    return base64.b64encode(buf.getvalue()).decode("ascii")


class HistoryStore:
    """Load, add and delete history entries stored in a JSON file."""

    def __init__(self, path: Optional[Union[str, Path]] = None, limit: Optional[int] = None):
        self.path = Path(path or DEFAULT_HISTORY_PATH)
        self.limit = limit
        self.entries: List[HistoryEntry] = self.load()

    def load(self) -> List[HistoryEntry]:
        """Read entries from disk; a missing or unreadable file yields an empty history."""
        if not self.path.exists():
            return []
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
            return [HistoryEntry(**item) for item in raw.get(HISTORY_KEY, [])]
        except (OSError, ValueError, TypeError, AttributeError) as exc:
            logger.warning("Could not read history %s: %s", self.path, exc)
            return []

    def save(self) -> None:
        payload = {HISTORY_KEY: [asdict(e) for e in self.entries]}
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        tmp_path.write_text(json.dumps(payload, ensure_ascii=False), encoding="utf-8")
        os.replace(tmp_path, self.path)

    def add(self, metadata: MusicMetadata, image: Image.Image, created_at: Optional[datetime] = None) -> Optional[HistoryEntry]:
        """Insert a new entry at the front and persist it.

        Failures are logged and swallowed; the caller never waits on or
        handles history problems.
        """
        try:
            entry = HistoryEntry(
                id=str(uuid.uuid4()),
                music_item_id=metadata.item_id,
                artwork_png=encode_png(image),
                display_name=metadata.display_name,
                artist_name=metadata.artist_name,
                created_at=(created_at or datetime.now()).isoformat(),
            )
            self.entries.insert(0, entry)
            if self.limit is not None:
                del self.entries[self.limit:]
            self.save()
        except Exception:
            logger.exception("Failed to add %s to history %s", metadata.display_name, self.path)
            return None
        logger.debug("Added %s to history (%d entries)", entry.display_name, len(self.entries))
        return entry

    def delete(self, indices: Iterable[int]) -> int:
        """Remove entries at the given positions and persist; returns how many were removed."""
        drop = {i for i in indices if 0 <= i < len(self.entries)}
        if not drop:
            return 0
        self.entries = [e for i, e in enumerate(self.entries) if i not in drop]
        self.save()
        logger.info("Removed %d history entr%s", len(drop), "y" if len(drop) == 1 else "ies")
        return len(drop)
