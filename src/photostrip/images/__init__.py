"""
Module: photostrip.images

Purpose:
    Photo handling for the compositor: decoding sources, cover-cropping
    them into slots and applying colour filters.

Key Functions:
    - load_images(): Concurrent decode with a single join point
    - compute_cover_crop(): Source rectangle for a slot
    - cover_crop(): Crop + scale to a slot
    - apply_filter(): Per-photo colour effect

Dependencies:
    - PIL: Image manipulation
    - numpy: Filter arithmetic

Used By:
    - photostrip.compositor: Render pipeline
"""

from .cropper import CropBox, compute_cover_crop, cover_crop
from .filters import apply_filter
from .loader import ImageSource, load_image, load_images

__all__ = [
    "CropBox",
    "compute_cover_crop",
    "cover_crop",
    "apply_filter",
    "ImageSource",
    "load_image",
    "load_images",
]
