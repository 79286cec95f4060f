"""
Module: photostrip.layout.models

Purpose:
    Data models for strip layout.
    Immutable dataclasses describing slot rectangles and the full layout.

Key Classes:
    - SlotRect: One photo slot on the canvas
    - StripLayout: Complete strip geometry

Dependencies:
    - dataclasses (std)

Used By:
    - photostrip.layout.engine: Creates StripLayout
    - photostrip.compositor: Draws into slots
    - photostrip.text.renderer: Header/footer positions
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass(frozen=True)
class SlotRect:
    """
    A photo slot positioned on the canvas.

    Attributes:
        index: Slot number (0 = top)
        left: X of the top-left corner
        top: Y of the top-left corner
        width: Slot width in pixels
        height: Slot height in pixels

    Example:
        >>> slot = SlotRect(index=0, left=60, top=60, width=960, height=720)
        >>> slot.bottom
        780
    """

    index: int
    left: int
    top: int
    width: int
    height: int

    @property
    def right(self) -> int:
        """Right X coordinate (exclusive)."""
        return self.left + self.width

    @property
    def bottom(self) -> int:
        """Bottom Y coordinate (exclusive)."""
        return self.top + self.height

    @property
    def box(self) -> Tuple[int, int, int, int]:
        """(left, top, right, bottom) for PIL drawing calls."""
        return (self.left, self.top, self.right, self.bottom)

    def contains(self, x: int, y: int) -> bool:
        """Check if a pixel lies inside this slot."""
        return self.left <= x < self.right and self.top <= y < self.bottom


@dataclass(frozen=True)
class StripLayout:
    """
    Complete strip geometry for one style.

    Attributes:
        width: Canvas width
        height: Canvas height
        header_height: Space reserved above the first slot
        footer_height: Space reserved below the last slot
        slots: Slot rectangles, top to bottom
        date_anchor: (x, baseline y) for the right-aligned date stamp
        caption_max_width: Width the caption is shrunk to fit

    Example:
        >>> layout = compute_layout(StyleConfig(show_date=False))
        >>> layout.size
        (1080, 3130)
    """

    width: int
    height: int
    header_height: int
    footer_height: int
    slots: Tuple[SlotRect, ...]
    date_anchor: Tuple[int, int]
    caption_max_width: int

    @property
    def size(self) -> Tuple[int, int]:
        """(width, height) for Image.new()."""
        return (self.width, self.height)

    @property
    def slot_count(self) -> int:
        """Number of photo slots."""
        return len(self.slots)

    @property
    def content_width(self) -> int:
        """Width of every slot."""
        return self.slots[0].width

    @property
    def photo_height(self) -> int:
        """Height of every slot."""
        return self.slots[0].height

    @property
    def footer_top(self) -> int:
        """Y where the footer reserve begins."""
        return self.height - self.footer_height

    def caption_baseline(self, font_size: int) -> float:
        """
        Baseline Y for a caption of the given size.

        The caption is centred on the middle of the footer; a third of the
        font size is added so the glyphs, not the baseline, sit in the middle.
        """
        return self.height - self.footer_height / 2 + font_size / 3

    def slot_at(self, x: int, y: int) -> Optional[int]:
        """Index of the slot containing a pixel, or None."""
        for slot in self.slots:
            if slot.contains(x, y):
                return slot.index
        return None
