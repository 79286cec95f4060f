"""
Module: photostrip.text.renderer

Purpose:
    Draw the header date stamp and the footer caption onto a strip.

    Date: "YYYY.MM.DD", bold 32px, right-aligned with its baseline at
    (W - padding, 70).

    Caption: italic, centred at W/2. Starts at 48px and shrinks in 2px
    steps while wider than W - 100, stopping at 20px even if it still
    overflows. Baseline = totalHeight - footer/2 + fontSize/3.

Key Functions:
    - format_date(): YYYY.MM.DD
    - draw_date(): Header stamp
    - fit_caption_size(): Shrink-to-fit loop
    - draw_caption(): Footer caption

Dependencies:
    - PIL.ImageDraw: Text drawing
    - photostrip.text.fonts: Font resolution

Used By:
    - photostrip.compositor: After the background / before encoding
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Callable, Optional

from PIL import ImageDraw

from photostrip.config import StyleConfig
from photostrip.layout.models import StripLayout

from .fonts import SANS_SERIF, SERIF, FontStyle, resolve_font

logger = logging.getLogger(__name__)

DATE_FONT_SIZE = 32
CAPTION_START_SIZE = 48
CAPTION_MIN_SIZE = 20
CAPTION_SIZE_STEP = 2

Measure = Callable[[str, int], float]


def format_date(day: date) -> str:
    """
    Format a date as YYYY.MM.DD.

    Example:
        >>> format_date(date(2024, 3, 7))
        '2024.03.07'
    """
    return f"{day.year:04d}.{day.month:02d}.{day.day:02d}"


def draw_date(
    draw: ImageDraw.ImageDraw,
    layout: StripLayout,
    style: StyleConfig,
    today: date,
) -> Optional[str]:
    """
    Draw the date stamp if the style asks for one.

    Returns:
        The drawn text, or None when show_date is off
    """
    if not style.show_date:
        return None

    text = format_date(today)
    font = resolve_font(style.font_family, DATE_FONT_SIZE, FontStyle.BOLD, fallback=SANS_SERIF)
    # "rs": right edge, alphabetic baseline
    draw.text(layout.date_anchor, text, fill=style.text_color, font=font, anchor="rs")
    return text


def fit_caption_size(
    text: str,
    measure: Measure,
    max_width: float,
    *,
    start: int = CAPTION_START_SIZE,
    floor: int = CAPTION_MIN_SIZE,
    step: int = CAPTION_SIZE_STEP,
) -> int:
    """
    Find the caption font size by shrinking until the text fits.

    Args:
        text: Caption text
        measure: Returns the advance width of text at a font size
        max_width: Widest allowed caption
        start: Initial font size
        floor: Smallest size; the loop stops here even if text overflows
        step: Decrement per iteration

    Returns:
        Chosen font size. Running again with start=<result> returns the
        same size.

    Example:
        >>> fit_caption_size("abc", lambda t, s: len(t) * s, 100)
        32
    """
    size = start
    width = measure(text, size)
    while width > max_width and size > floor:
        size -= step
        width = measure(text, size)
    return size


def caption_measure(family: str) -> Measure:
    """Measure function using the caption face of a family."""

    def measure(text: str, size: int) -> float:
        font = resolve_font(family, size, FontStyle.ITALIC, fallback=SERIF, text=text)
        return font.getlength(text)

    return measure


def draw_caption(
    draw: ImageDraw.ImageDraw,
    layout: StripLayout,
    style: StyleConfig,
) -> Optional[int]:
    """
    Draw the caption, auto-shrunk to fit the strip width.

    Returns:
        Font size used, or None when the caption is empty
    """
    if not style.has_caption:
        return None

    size = fit_caption_size(
        style.caption,
        caption_measure(style.font_family),
        layout.caption_max_width,
    )
    font = resolve_font(style.font_family, size, FontStyle.ITALIC, fallback=SERIF, text=style.caption)
    position = (layout.width / 2, layout.caption_baseline(size))
    # "ms": horizontal middle, alphabetic baseline
    draw.text(position, style.caption, fill=style.text_color, font=font, anchor="ms")

    if size <= CAPTION_MIN_SIZE and font.getlength(style.caption) > layout.caption_max_width:
        logger.info(f"Caption overflows at minimum size {size}px: {style.caption!r}")
    return size
