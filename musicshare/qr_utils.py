"""QR code generation and badge placement utilities."""
from __future__ import annotations

import logging
from typing import Optional

import qrcode
import qrcode.constants
from PIL import Image

from .constants import (
    QR_BADGE_ALPHA,
    QR_BADGE_CORNER_RATIO,
    QR_BADGE_INSET_RATIO,
    QR_BADGE_STROKE_RATIO,
    QR_BORDER_MODULES,
    QR_BOX_SIZE,
    WHITE,
)
from .draw import DrawingSurface
from .models import Color, Rect

logger = logging.getLogger(__name__)


def generate_qr_code(payload: str, box_size: int = QR_BOX_SIZE, border: int = QR_BORDER_MODULES) -> Optional[Image.Image]:
    """Encode payload as a QR code at the highest error-correction level.

    Each module is box_size pixels so the code stays sharp when scaled.
    Returns None for an empty payload or when encoding fails.
    """
    if not payload:
        logger.debug("Empty QR payload; skipping QR code")
        return None
    try:
        qr = qrcode.QRCode(
            version=None,
            error_correction=qrcode.constants.ERROR_CORRECT_H,
            box_size=box_size,
            border=border,
        )
        qr.add_data(payload)
        qr.make(fit=True)
        img = qr.make_image(fill_color="black", back_color="white").convert("RGB")
    except Exception:
        logger.exception("QR code generation failed for payload of %d chars", len(payload))
        return None
    return img


def add_qr_badge(surface: DrawingSurface, qr_image: Image.Image, rect: Rect, fill: Color) -> None:
    """Draw a rounded translucent badge with a white border and the QR code centered inside it."""
    size = rect.width
    badge_fill = tuple(fill[:3]) + (round(255 * QR_BADGE_ALPHA),)
    surface.draw_rounded_rect(
        rect,
        radius=size * QR_BADGE_CORNER_RATIO,
        fill=badge_fill,
        outline=WHITE,
        width=size * QR_BADGE_STROKE_RATIO,
    )
    inset = size * QR_BADGE_INSET_RATIO
    surface.draw_image(qr_image, rect.inset(inset, inset), smooth=False)
