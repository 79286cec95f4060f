"""
Module: photostrip.output

Purpose:
    Encoding of the finished strip and the RenderedStrip artifact.

Key Functions:
    - encode_strip(): Canvas -> JPEG bytes

Key Classes:
    - RenderedStrip: Encoded strip image
"""

from .models import RenderedStrip
from .encoder import encode_strip, DEFAULT_JPEG_QUALITY

__all__ = [
    "RenderedStrip",
    "encode_strip",
    "DEFAULT_JPEG_QUALITY",
]
