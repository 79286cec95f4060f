"""
Module: photostrip.output.encoder

Purpose:
    Serialize a finished canvas to JPEG in memory. The compositor never
    writes files itself; delivery decides where the bytes go.

Key Functions:
    - encode_strip(): Canvas -> RenderedStrip

Dependencies:
    - PIL: JPEG encoding

Used By:
    - photostrip.compositor: Last stage of render_strip()
"""

from __future__ import annotations

import io
import logging

from PIL import Image

from .models import RenderedStrip

logger = logging.getLogger(__name__)

# Equivalent of canvas.toDataURL("image/jpeg", 0.95)
DEFAULT_JPEG_QUALITY = 95


def encode_strip(canvas: Image.Image, *, quality: int = DEFAULT_JPEG_QUALITY) -> RenderedStrip:
    """
    Encode a canvas as JPEG.

    Args:
        canvas: Finished strip (converted to RGB if needed)
        quality: JPEG quality, 1-100

    Returns:
        RenderedStrip with the encoded bytes

    Raises:
        ValueError: If quality is out of range
    """
    if not 1 <= quality <= 100:
        raise ValueError(f"quality must be in 1..100: {quality}")

    if canvas.mode != "RGB":
        canvas = canvas.convert("RGB")

    buffer = io.BytesIO()
    canvas.save(buffer, format="JPEG", quality=quality)
    data = buffer.getvalue()

    logger.debug(f"Encoded {canvas.width}x{canvas.height} strip: {len(data)} bytes (q={quality})")
    return RenderedStrip(data=data, width=canvas.width, height=canvas.height)
