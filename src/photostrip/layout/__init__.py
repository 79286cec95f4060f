"""
Module: photostrip.layout

Purpose:
    Strip geometry: where the header, each photo slot and the footer go.

Key Functions:
    - compute_layout(): Main entry point for layout
    - strip_height(): Canvas height for a style

Key Classes:
    - LayoutConfig: Configuration for strip geometry
    - SlotRect: One photo slot
    - StripLayout: Complete layout

Used By:
    - photostrip.compositor: Render pipeline
"""

from .config import LayoutConfig
from .models import SlotRect, StripLayout
from .engine import compute_layout, strip_height

__all__ = [
    # Config
    "LayoutConfig",
    # Models
    "SlotRect",
    "StripLayout",
    # Functions
    "compute_layout",
    "strip_height",
]
