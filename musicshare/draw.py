"""Drawing surface used by the compositor, with a Pillow backend and file export."""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple, Union

from PIL import Image, ImageChops, ImageDraw, ImageFilter, ImageFont
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from .errors import SurfaceCreationFailed
from .models import RGBA, Color, Rect
from .text_utils import line_height, wrap_text_to_width

logger = logging.getLogger(__name__)

Fill = Union[Color, RGBA]
Font = Union[ImageFont.FreeTypeFont, ImageFont.ImageFont]


@dataclass(frozen=True)
class Shadow:
    offset: Tuple[float, float]
    blur: float
    color: RGBA


def _rgba(color: Fill) -> RGBA:
    if len(color) == 4:
        return tuple(color)  # type: ignore[return-value]
    r, g, b = color
    return (r, g, b, 255)


class DrawingSurface(ABC):
    """Minimal set of drawing operations the share image compositor needs."""

    @property
    @abstractmethod
    def size(self) -> Tuple[int, int]: ...

    @abstractmethod
    def fill(self, color: Fill) -> None: ...

    @abstractmethod
    def fill_rect(self, rect: Rect, color: Fill) -> None: ...

    @abstractmethod
    def fill_vertical_gradient(self, top: Color, bottom: Color) -> None: ...

    @abstractmethod
    def draw_image(self, image: Image.Image, rect: Rect, corner_radius: float = 0.0, smooth: bool = True) -> None: ...

    @abstractmethod
    def draw_rounded_rect(
        self,
        rect: Rect,
        radius: float,
        fill: Optional[Fill] = None,
        outline: Optional[Fill] = None,
        width: float = 0.0,
    ) -> None: ...

    @abstractmethod
    def draw_shadow(self, rect: Rect, radius: float, shadow: Shadow) -> None: ...

    @abstractmethod
    def measure_text(self, text: str, font: Font, max_width: float, max_lines: Optional[int] = None) -> float: ...

    @abstractmethod
    def draw_text(
        self,
        text: str,
        rect: Rect,
        font: Font,
        color: Fill,
        shadow: Optional[Shadow] = None,
        max_lines: Optional[int] = None,
    ) -> None: ...

    @abstractmethod
    def to_image(self) -> Image.Image: ...


class PillowSurface(DrawingSurface):
    """DrawingSurface backed by an RGBA Pillow image.

    Translucent content is drawn on a separate layer and alpha-composited so
    that partial opacity blends with what is already on the canvas.
    """

    def __init__(self, image: Image.Image):
        self._image = image

    @property
    def size(self) -> Tuple[int, int]:
        return self._image.size

    def _new_layer(self) -> Image.Image:
        return Image.new("RGBA", self._image.size, (0, 0, 0, 0))

    def _composite(self, layer: Image.Image, x: int = 0, y: int = 0) -> None:
        # alpha_composite only accepts non-negative destinations, so crop the
        # part of the layer that hangs off the top/left edge instead
        src_x, src_y = max(0, -x), max(0, -y)
        dest = (max(0, x), max(0, y))
        if src_x >= layer.width or src_y >= layer.height:
            return
        if dest[0] >= self._image.width or dest[1] >= self._image.height:
            return
        self._image.alpha_composite(layer, dest=dest, source=(src_x, src_y))

    def fill(self, color: Fill) -> None:
        self.fill_rect(Rect(0, 0, *self._image.size), color)

    def fill_rect(self, rect: Rect, color: Fill) -> None:
        layer = self._new_layer()
        ImageDraw.Draw(layer).rectangle(rect.box(), fill=_rgba(color))
        self._composite(layer)

    def fill_vertical_gradient(self, top: Color, bottom: Color) -> None:
        width, height = self._image.size
        draw = ImageDraw.Draw(self._image)
        for y in range(height):
            t = y / max(1, height - 1)
            r = int(round(top[0] + (bottom[0] - top[0]) * t))
            g = int(round(top[1] + (bottom[1] - top[1]) * t))
            b = int(round(top[2] + (bottom[2] - top[2]) * t))
            draw.line([(0, y), (width - 1, y)], fill=(r, g, b, 255))

    def draw_image(self, image: Image.Image, rect: Rect, corner_radius: float = 0.0, smooth: bool = True) -> None:
        left, top, right, bottom = rect.box()
        width, height = right - left, bottom - top
        if width <= 0 or height <= 0:
            return
        resample = Image.Resampling.LANCZOS if smooth else Image.Resampling.NEAREST
        placed = image.convert("RGBA").resize((width, height), resample)
        if corner_radius > 0:
            mask = Image.new("L", (width, height), 0)
            ImageDraw.Draw(mask).rounded_rectangle(
                (0, 0, width - 1, height - 1), radius=round(corner_radius), fill=255
            )
            placed.putalpha(ImageChops.multiply(placed.getchannel("A"), mask))
        self._composite(placed, left, top)

    def draw_rounded_rect(
        self,
        rect: Rect,
        radius: float,
        fill: Optional[Fill] = None,
        outline: Optional[Fill] = None,
        width: float = 0.0,
    ) -> None:
        layer = self._new_layer()
        ImageDraw.Draw(layer).rounded_rectangle(
            rect.box(),
            radius=round(radius),
            fill=_rgba(fill) if fill is not None else None,
            outline=_rgba(outline) if outline is not None else None,
            width=max(1, round(width)) if outline is not None else 0,
        )
        self._composite(layer)

    def draw_shadow(self, rect: Rect, radius: float, shadow: Shadow) -> None:
        dx, dy = shadow.offset
        shifted = Rect(rect.x + dx, rect.y + dy, rect.width, rect.height)
        layer = self._new_layer()
        ImageDraw.Draw(layer).rounded_rectangle(shifted.box(), radius=round(radius), fill=shadow.color)
        if shadow.blur > 0:
            layer = layer.filter(ImageFilter.GaussianBlur(shadow.blur / 2))
        self._composite(layer)

    def measure_text(self, text: str, font: Font, max_width: float, max_lines: Optional[int] = None) -> float:
        lines = wrap_text_to_width(text, font, max_width)[:max_lines]
        return len(lines) * line_height(font)

    def _draw_lines(self, layer: Image.Image, lines, rect: Rect, font: Font, fill: RGBA, dx: float = 0, dy: float = 0) -> None:
        draw = ImageDraw.Draw(layer)
        step = line_height(font)
        for idx, line in enumerate(lines):
            line_x = rect.x + (rect.width - font.getlength(line)) / 2 + dx
            line_y = rect.y + idx * step + dy
            draw.text((line_x, line_y), line, font=font, fill=fill)

    def draw_text(
        self,
        text: str,
        rect: Rect,
        font: Font,
        color: Fill,
        shadow: Optional[Shadow] = None,
        max_lines: Optional[int] = None,
    ) -> None:
        """Draw wrapped, centered lines from the top of rect, keeping at most max_lines."""
        lines = wrap_text_to_width(text, font, rect.width)[:max_lines]
        if not lines:
            return
        if shadow is not None:
            shadow_layer = self._new_layer()
            self._draw_lines(shadow_layer, lines, rect, font, shadow.color, *shadow.offset)
            if shadow.blur > 0:
                shadow_layer = shadow_layer.filter(ImageFilter.GaussianBlur(shadow.blur / 2))
            self._composite(shadow_layer)
        layer = self._new_layer()
        self._draw_lines(layer, lines, rect, font, _rgba(color))
        self._composite(layer)

    def to_image(self) -> Image.Image:
        return self._image.convert("RGB")


def create_surface(size: Tuple[int, int]) -> PillowSurface:
    """Allocate a transparent canvas; raises SurfaceCreationFailed if impossible."""
    width, height = size
    if width <= 0 or height <= 0:
        raise SurfaceCreationFailed(f"Invalid canvas size {width}x{height}")
    try:
        image = Image.new("RGBA", (int(width), int(height)), (0, 0, 0, 0))
    except (ValueError, MemoryError) as exc:
        raise SurfaceCreationFailed(f"Could not allocate a {width}x{height} canvas") from exc
    return PillowSurface(image)


def draw_image_in_rect(c, pil_img, x, y, width, height):
    """Draw a PIL image scaled to exactly fit the given rectangle (x, y, width, height).
    Coordinates are ReportLab points.
    """
    img_reader = ImageReader(pil_img)
    c.drawImage(img_reader, x, y, width=width, height=height)


def save_image(image: Image.Image, path: Union[str, Path], dpi: int = 300) -> Path:
    """Write the rendered image to disk.

    ``.pdf`` paths produce a single page sized to the image at ``dpi``;
    any other suffix is handed to Pillow (PNG, JPEG, ...).
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    if path.suffix.lower() == ".pdf":
        page_width = image.width * 72.0 / dpi
        page_height = image.height * 72.0 / dpi
        c = canvas.Canvas(str(path), pagesize=(page_width, page_height))
        draw_image_in_rect(c, image, 0, 0, page_width, page_height)
        c.showPage()
        c.save()
    else:
        image.save(path)
    logger.debug("Saved %dx%d image to %s", image.width, image.height, path)
    return path
