"""
Module: photostrip.layout.config

Purpose:
    Configuration for the strip layout engine.
    Defines canvas width, padding, slot ratio and header/footer reserves.

Key Classes:
    - LayoutConfig: Immutable layout configuration

Dependencies:
    - dataclasses (std)

Used By:
    - photostrip.layout.engine: Geometry computation
    - photostrip.compositor: Canvas creation
"""

from __future__ import annotations

from dataclasses import dataclass


# Fixed output width, high enough for phone screens and 4x6 prints
DEFAULT_STRIP_WIDTH_PX = 1080
DEFAULT_SLOT_COUNT = 4


@dataclass(frozen=True)
class LayoutConfig:
    """
    Configuration for strip layout (immutable).

    The defaults are the production strip geometry. Style fields never
    change these values; a different geometry means a different LayoutConfig.

    Attributes:
        strip_width: Canvas width in pixels
        outer_padding: Left/right padding around the photo column (px)
        inner_gap: Vertical gap between consecutive slots (px)
        slot_count: Number of photo slots
        photo_ratio: Slot height / slot width (3/4 gives 4:3 slots)
        header_with_date: Header reserve when the date stamp is shown
        header_without_date: Header reserve without a date stamp
        footer_with_caption: Footer reserve when a caption is set
        footer_without_caption: Footer reserve without a caption
        date_baseline: Y of the date stamp baseline
        caption_side_margin: Total horizontal margin the caption must fit in

    Example:
        >>> config = LayoutConfig()
        >>> config.content_width
        960
    """

    strip_width: int = DEFAULT_STRIP_WIDTH_PX
    outer_padding: int = 60
    inner_gap: int = 30
    slot_count: int = DEFAULT_SLOT_COUNT
    photo_ratio: float = 3 / 4

    # Header / footer reserves
    header_with_date: int = 100
    header_without_date: int = 60
    footer_with_caption: int = 200
    footer_without_caption: int = 100

    # Text placement
    date_baseline: int = 70
    caption_side_margin: int = 100

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if self.strip_width <= 0:
            raise ValueError(f"strip_width must be positive: {self.strip_width}")
        if self.outer_padding < 0:
            raise ValueError(f"outer_padding must be non-negative: {self.outer_padding}")
        if self.inner_gap < 0:
            raise ValueError(f"inner_gap must be non-negative: {self.inner_gap}")
        if self.slot_count <= 0:
            raise ValueError(f"slot_count must be positive: {self.slot_count}")
        if self.photo_ratio <= 0:
            raise ValueError(f"photo_ratio must be positive: {self.photo_ratio}")
        if self.content_width <= 0:
            raise ValueError("Padding exceeds strip width")

    @property
    def content_width(self) -> int:
        """Width of the photo column (strip width minus both paddings)."""
        return self.strip_width - 2 * self.outer_padding

    @property
    def photo_height(self) -> int:
        """Height of every photo slot."""
        return round(self.content_width * self.photo_ratio)

    @property
    def caption_max_width(self) -> int:
        """Widest a caption may be before it is shrunk."""
        return self.strip_width - self.caption_side_margin
