"""
Module: photostrip.compositor

Purpose:
    Render a photo strip: up to four photos plus a StyleConfig in, one
    encoded JPEG out. A pure function; every call draws on its own
    canvas and nothing survives between calls.

    Pipeline:
        Decode → Layout → Background → Date → Photos → Caption → Encode

Key Functions:
    - render_strip(): Main entry point
    - compose_canvas(): Draw onto a fresh canvas without encoding

Dependencies:
    - PIL: Canvas and drawing
    - photostrip.layout: Geometry
    - photostrip.images: Decode, cover-crop, filters
    - photostrip.text: Date stamp and caption
    - photostrip.output: JPEG encoding

Used By:
    - photostrip.controller: Debounced preview renders
    - photostrip.cli: One-shot renders
"""

from __future__ import annotations

import logging
import time
from datetime import date
from typing import Optional, Sequence

from PIL import Image, ImageDraw

from .config import StyleConfig
from .errors import SurfaceUnavailable
from .images import ImageSource, apply_filter, cover_crop, load_images
from .images.loader import DEFAULT_DECODE_WORKERS
from .layout import LayoutConfig, SlotRect, StripLayout, compute_layout
from .output import DEFAULT_JPEG_QUALITY, RenderedStrip, encode_strip
from .text import draw_caption, draw_date

logger = logging.getLogger(__name__)

SLOT_UNDERLAY_COLOR = "#FFFFFF"


def _create_canvas(layout: StripLayout, background: str) -> Image.Image:
    try:
        return Image.new("RGB", layout.size, background)
    except (MemoryError, ValueError, OSError) as e:
        raise SurfaceUnavailable(
            f"Could not create {layout.width}x{layout.height} canvas: {e}"
        ) from e


def _draw_photo(
    canvas: Image.Image,
    draw: ImageDraw.ImageDraw,
    photo: Image.Image,
    slot: SlotRect,
    style: StyleConfig,
) -> None:
    # White underlay shows through transparent photos (PIL boxes are inclusive)
    draw.rectangle((slot.left, slot.top, slot.right - 1, slot.bottom - 1), fill=SLOT_UNDERLAY_COLOR)

    fitted = cover_crop(photo, slot.width, slot.height)
    filtered = apply_filter(fitted, style.filter)

    mask = filtered.getchannel("A") if filtered.mode == "RGBA" else None
    canvas.paste(filtered.convert("RGB"), (slot.left, slot.top), mask)


def compose_canvas(
    photos: Sequence[Image.Image],
    style: StyleConfig,
    *,
    today: Optional[date] = None,
    layout_config: Optional[LayoutConfig] = None,
) -> Image.Image:
    """
    Draw a strip onto a new canvas from already-decoded photos.

    Args:
        photos: Decoded photos in slot order (at most slot_count)
        style: Style configuration
        today: Date for the stamp (defaults to the current date)
        layout_config: Geometry override

    Returns:
        RGB canvas of size compute_layout(style).size

    Raises:
        ValueError: If more photos than slots are supplied
        SurfaceUnavailable: If the canvas cannot be allocated
    """
    layout = compute_layout(style, layout_config)
    if len(photos) > layout.slot_count:
        raise ValueError(
            f"At most {layout.slot_count} photos fit on a strip: got {len(photos)}"
        )

    canvas = _create_canvas(layout, style.border_color)
    draw = ImageDraw.Draw(canvas)

    draw_date(draw, layout, style, today or date.today())

    # Missing photos leave their slot as plain background
    for slot, photo in zip(layout.slots, photos):
        _draw_photo(canvas, draw, photo, slot, style)
        logger.debug(f"Drew slot {slot.index} from {photo.width}x{photo.height} source")

    draw_caption(draw, layout, style)
    return canvas


def render_strip(
    sources: Sequence[ImageSource],
    style: StyleConfig,
    *,
    today: Optional[date] = None,
    layout_config: Optional[LayoutConfig] = None,
    quality: int = DEFAULT_JPEG_QUALITY,
    decode_workers: int = DEFAULT_DECODE_WORKERS,
) -> RenderedStrip:
    """
    Render a photo strip from start to finish.

    All sources are decoded concurrently before anything is drawn; if any
    of them fails, the render fails as a whole.

    Args:
        sources: Up to four photos (PIL images, paths, bytes or file objects)
        style: Style configuration
        today: Date for the stamp (defaults to the current date)
        layout_config: Geometry override
        quality: JPEG quality
        decode_workers: Thread pool size for decoding

    Returns:
        RenderedStrip with JPEG bytes, 1080 wide by default

    Raises:
        DecodeFailure: If a source cannot be decoded
        SurfaceUnavailable: If the canvas cannot be created
        ValueError: If more sources than slots are supplied

    Example:
        >>> strip = render_strip(["a.jpg", "b.jpg", "c.jpg", "d.jpg"], StyleConfig(show_date=False))
        >>> strip.size
        (1080, 3130)
    """
    slot_count = (layout_config or LayoutConfig()).slot_count
    if len(sources) > slot_count:
        raise ValueError(f"At most {slot_count} photos fit on a strip: got {len(sources)}")

    start_time = time.perf_counter()

    photos = load_images(sources, max_workers=decode_workers)
    canvas = compose_canvas(photos, style, today=today, layout_config=layout_config)
    strip = encode_strip(canvas, quality=quality)

    logger.info(
        f"Rendered {strip.width}x{strip.height} strip from {len(photos)} photo(s) "
        f"in {time.perf_counter() - start_time:.2f}s"
    )
    return strip
