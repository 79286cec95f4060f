"""
Module: photostrip.output.models

Purpose:
    The rendered artifact handed to delivery: encoded bytes plus size.

Key Classes:
    - RenderedStrip: Encoded strip image (immutable)
"""

from __future__ import annotations

import base64
import io
from dataclasses import dataclass

from PIL import Image


@dataclass(frozen=True)
class RenderedStrip:
    """
    An encoded strip image (immutable).

    Each render produces a new RenderedStrip; nothing refers back to the
    canvas it came from.

    Attributes:
        data: Encoded image bytes
        width: Pixel width (always the layout width)
        height: Pixel height
        mime_type: MIME type of data

    Example:
        >>> strip = render_strip(images, StyleConfig())
        >>> strip.size
        (1080, 3170)
    """

    data: bytes
    width: int
    height: int
    mime_type: str = "image/jpeg"

    @property
    def size(self) -> tuple[int, int]:
        """(width, height)."""
        return (self.width, self.height)

    @property
    def byte_size(self) -> int:
        """Length of the encoded payload."""
        return len(self.data)

    def to_data_url(self) -> str:
        """Encode as a base64 data: URL."""
        payload = base64.b64encode(self.data).decode("ascii")
        return f"data:{self.mime_type};base64,{payload}"

    def open(self) -> Image.Image:
        """Decode the payload back into a PIL image."""
        image = Image.open(io.BytesIO(self.data))
        image.load()
        return image
