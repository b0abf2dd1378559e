"""iTunes lookup client: resolve share URLs to metadata and fetch artwork."""
from __future__ import annotations

import logging
import re
from io import BytesIO
from typing import Optional
from urllib.parse import urlparse

import requests
from PIL import Image

from .constants import LOOKUP_PARAMS, LOOKUP_URL, REQUEST_TIMEOUT
from .errors import CatalogLookupError, SourceDecodeFailed
from .models import MusicMetadata

logger = logging.getLogger(__name__)


def extract_id(url: str) -> Optional[str]:
    """Pull the catalog id out of an Apple Music / iTunes share URL.

    A track id (``?i=<digits>``) takes precedence over the album id, which
    is the last path component when it is purely numeric. Query strings such
    as ``?l=en-US`` are ignored. Returns None when no id can be found.
    """
    if not url:
        return None
    m = re.search(r"i=(\d*)", url)
    if m:
        return m.group(1) or None
    last = urlparse(url.strip()).path.rstrip("/").rsplit("/", 1)[-1]
    if last.isdigit():
        return last
    return None


def _get(url: str, session: Optional[requests.Session], **kwargs) -> requests.Response:
    getter = session.get if session is not None else requests.get
    response = getter(url, timeout=REQUEST_TIMEOUT, **kwargs)
    response.raise_for_status()
    return response


def fetch_music_info(item_id: str, session: Optional[requests.Session] = None) -> MusicMetadata:
    """Look up item_id and return the first result as MusicMetadata."""
    params = dict(LOOKUP_PARAMS, id=item_id)
    try:
        response = _get(LOOKUP_URL, session, params=params)
        payload = response.json()
    except requests.RequestException as exc:
        raise CatalogLookupError(f"Lookup request for {item_id} failed: {exc}") from exc
    except ValueError as exc:
        raise CatalogLookupError(f"Lookup response for {item_id} is not valid JSON") from exc

    results = payload.get("results") if isinstance(payload, dict) else None
    if not results:
        raise CatalogLookupError(f"No results for item {item_id}")
    logger.debug("Lookup for %s returned %d result(s)", item_id, len(results))
    return MusicMetadata.from_api(results[0])


def load_artwork(data: bytes) -> Image.Image:
    """Decode image bytes into a fully loaded Pillow image."""
    try:
        image = Image.open(BytesIO(data))
        image.load()
    except (OSError, ValueError, Image.DecompressionBombError) as exc:
        raise SourceDecodeFailed("Artwork data could not be decoded") from exc
    return image


def download_artwork(url: str, session: Optional[requests.Session] = None) -> Image.Image:
    try:
        response = _get(url, session)
    except requests.RequestException as exc:
        raise CatalogLookupError(f"Artwork download failed: {exc}") from exc
    return load_artwork(response.content)
