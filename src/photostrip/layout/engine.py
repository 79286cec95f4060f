"""
Module: photostrip.layout.engine

Purpose:
    Compute the vertical placement of every drawable element on the strip.

    Geometry (defaults):
        contentWidth = 1080 - 2*60            = 960
        photoHeight  = contentWidth * 3/4     = 720
        header       = 100 with date, else 60
        footer       = 200 with caption, else 100
        totalHeight  = header + 4*photoHeight + 3*gap + footer

    Slot i sits at (outerPadding, header + i*(photoHeight + gap)).
    The result depends only on the style's show_date / caption flags,
    never on how many photos there are or how large they are.

Key Functions:
    - compute_layout(): Build a StripLayout for a style
    - strip_height(): Canvas height for a style

Dependencies:
    - photostrip.config: StyleConfig
    - .config: LayoutConfig

Used By:
    - photostrip.compositor: Canvas and slot geometry
"""

from __future__ import annotations

import logging
from typing import Optional

from photostrip.config import StyleConfig

from .config import LayoutConfig
from .models import SlotRect, StripLayout

logger = logging.getLogger(__name__)


def compute_layout(
    style: StyleConfig,
    config: Optional[LayoutConfig] = None,
) -> StripLayout:
    """
    Compute strip geometry for a style.

    Args:
        style: Style configuration (only show_date and caption matter)
        config: Layout configuration (defaults to the production geometry)

    Returns:
        StripLayout with canvas size, reserves and slot rectangles

    Example:
        >>> layout = compute_layout(StyleConfig(show_date=False, caption=""))
        >>> layout.height
        3130
        >>> layout.slots[1].top
        810
    """
    config = config or LayoutConfig()

    header_height = config.header_with_date if style.show_date else config.header_without_date
    footer_height = config.footer_with_caption if style.has_caption else config.footer_without_caption

    content_width = config.content_width
    photo_height = config.photo_height
    stride = photo_height + config.inner_gap

    slots = tuple(
        SlotRect(
            index=i,
            left=config.outer_padding,
            top=header_height + i * stride,
            width=content_width,
            height=photo_height,
        )
        for i in range(config.slot_count)
    )

    total_height = (
        header_height
        + config.slot_count * photo_height
        + (config.slot_count - 1) * config.inner_gap
        + footer_height
    )

    layout = StripLayout(
        width=config.strip_width,
        height=total_height,
        header_height=header_height,
        footer_height=footer_height,
        slots=slots,
        date_anchor=(config.strip_width - config.outer_padding, config.date_baseline),
        caption_max_width=config.caption_max_width,
    )

    logger.debug(
        f"Layout {layout.width}x{layout.height}: header={header_height} "
        f"footer={footer_height} slot={content_width}x{photo_height}"
    )
    return layout


def strip_height(style: StyleConfig, config: Optional[LayoutConfig] = None) -> int:
    """Canvas height for a style (see compute_layout)."""
    return compute_layout(style, config).height
