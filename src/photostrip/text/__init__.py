"""
Module: photostrip.text

Purpose:
    Font resolution and text drawing for the strip header and footer.

Key Functions:
    - resolve_font(): Family name -> font, with fallbacks
    - draw_date(): Header date stamp
    - draw_caption(): Auto-fitted footer caption
    - fit_caption_size(): Shrink-to-fit loop
"""

from .fonts import FontStyle, resolve_font, clear_font_cache
from .renderer import (
    format_date,
    draw_date,
    draw_caption,
    fit_caption_size,
    caption_measure,
)

__all__ = [
    "FontStyle",
    "resolve_font",
    "clear_font_cache",
    "format_date",
    "draw_date",
    "draw_caption",
    "fit_caption_size",
    "caption_measure",
]
