"""
Module: photostrip.images.cropper

Purpose:
    Cover-crop ("object-fit: cover") of a source photo into a slot.
    Picks the largest centred source rectangle with the slot's aspect
    ratio, then scales it to fill the slot exactly, so every slot is
    covered edge to edge without letterboxing or distortion.

Key Functions:
    - compute_cover_crop(): Source rectangle for a destination size
    - cover_crop(): Crop and scale an image to a destination size

Key Classes:
    - CropBox: Floating-point source rectangle

Dependencies:
    - PIL: Resampling

Used By:
    - photostrip.compositor: Fills each photo slot
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from PIL import Image

RESAMPLE = Image.Resampling.LANCZOS


@dataclass(frozen=True)
class CropBox:
    """
    Source rectangle selected by the cover-crop (float coordinates).

    Attributes:
        left: X offset into the source
        top: Y offset into the source
        width: Width of the selected region
        height: Height of the selected region

    Example:
        >>> box = compute_cover_crop(1600, 900, 960, 720)
        >>> box.left, box.width
        (200.0, 1200.0)
    """

    left: float
    top: float
    width: float
    height: float

    @property
    def right(self) -> float:
        """Right edge (left + width)."""
        return self.left + self.width

    @property
    def bottom(self) -> float:
        """Bottom edge (top + height)."""
        return self.top + self.height

    @property
    def aspect_ratio(self) -> float:
        """width / height of the selected region."""
        return self.width / self.height

    def as_box(self) -> Tuple[float, float, float, float]:
        """(left, top, right, bottom) for Image.resize(box=...)."""
        return (self.left, self.top, self.right, self.bottom)


def compute_cover_crop(
    src_width: float,
    src_height: float,
    dest_width: float,
    dest_height: float,
) -> CropBox:
    """
    Compute the centred source rectangle that covers the destination.

    If the source is proportionally wider than the destination, the full
    height is kept and the sides are trimmed equally. Otherwise (taller or
    equal) the full width is kept and top/bottom are trimmed equally.

    Args:
        src_width: Source image width
        src_height: Source image height
        dest_width: Slot width
        dest_height: Slot height

    Returns:
        CropBox inside the source with aspect ratio dest_width/dest_height

    Raises:
        ValueError: If any dimension is not positive

    Example:
        >>> compute_cover_crop(600, 800, 960, 720)
        CropBox(left=0.0, top=175.0, width=600.0, height=450.0)
    """
    if src_width <= 0 or src_height <= 0:
        raise ValueError(f"Source size must be positive: {src_width}x{src_height}")
    if dest_width <= 0 or dest_height <= 0:
        raise ValueError(f"Destination size must be positive: {dest_width}x{dest_height}")

    dest_ratio = dest_width / dest_height
    src_ratio = src_width / src_height

    if src_ratio > dest_ratio:
        # Source wider than the slot: keep full height, trim left/right
        height = float(src_height)
        width = min(src_height * dest_ratio, float(src_width))
        left = (src_width - width) / 2
        top = 0.0
    else:
        # Source taller (or same shape): keep full width, trim top/bottom
        width = float(src_width)
        height = min(src_width / dest_ratio, float(src_height))
        left = 0.0
        top = (src_height - height) / 2

    return CropBox(left=left, top=top, width=width, height=height)


def cover_crop(image: Image.Image, dest_width: int, dest_height: int) -> Image.Image:
    """
    Crop and scale an image so it exactly fills dest_width x dest_height.

    Cropping and scaling happen in one resampling pass using the
    fractional crop box, so no precision is lost to rounding the crop.

    Args:
        image: Source image (not modified)
        dest_width: Target width in pixels
        dest_height: Target height in pixels

    Returns:
        New image of size (dest_width, dest_height)
    """
    box = compute_cover_crop(image.width, image.height, dest_width, dest_height)
    if image.mode not in ("RGB", "RGBA"):
        has_alpha = image.mode in ("LA", "PA") or "transparency" in image.info
        image = image.convert("RGBA" if has_alpha else "RGB")
    return image.resize((dest_width, dest_height), RESAMPLE, box=box.as_box())
