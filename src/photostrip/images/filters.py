"""
Module: photostrip.images.filters

Purpose:
    Per-photo colour effects. Each effect is a chain of CSS-style filter
    functions applied left to right, with values clamped after every step:

        bw       grayscale(100%)
        sepia    sepia(60%) contrast(1.2)
        vintage  sepia(30%) contrast(0.9) brightness(1.1)

    Filters only ever see a single cropped photo and return a new image,
    so they cannot touch the background, the header or the caption.

Key Functions:
    - apply_filter(): Apply a PhotoFilter to one photo

Dependencies:
    - numpy: Colour matrix arithmetic
    - PIL: Image conversion

Used By:
    - photostrip.compositor: Before pasting each photo
"""

from __future__ import annotations

from functools import partial
from typing import Callable, Dict, List, Union

import numpy as np
from PIL import Image

from photostrip.config import PhotoFilter

Operation = Callable[[np.ndarray], np.ndarray]


def _apply_matrix(rgb: np.ndarray, matrix: np.ndarray) -> np.ndarray:
    return np.clip(rgb @ matrix.T, 0.0, 255.0)


def grayscale(rgb: np.ndarray, amount: float = 1.0) -> np.ndarray:
    """CSS grayscale(amount) on a float RGB array."""
    inv = 1.0 - amount
    matrix = np.array([
        [0.2126 + 0.7874 * inv, 0.7152 - 0.7152 * inv, 0.0722 - 0.0722 * inv],
        [0.2126 - 0.2126 * inv, 0.7152 + 0.2848 * inv, 0.0722 - 0.0722 * inv],
        [0.2126 - 0.2126 * inv, 0.7152 - 0.7152 * inv, 0.0722 + 0.9278 * inv],
    ])
    return _apply_matrix(rgb, matrix)


def sepia(rgb: np.ndarray, amount: float = 1.0) -> np.ndarray:
    """CSS sepia(amount) on a float RGB array."""
    inv = 1.0 - amount
    matrix = np.array([
        [0.393 + 0.607 * inv, 0.769 - 0.769 * inv, 0.189 - 0.189 * inv],
        [0.349 - 0.349 * inv, 0.686 + 0.314 * inv, 0.168 - 0.168 * inv],
        [0.272 - 0.272 * inv, 0.534 - 0.534 * inv, 0.131 + 0.869 * inv],
    ])
    return _apply_matrix(rgb, matrix)


def contrast(rgb: np.ndarray, amount: float = 1.0) -> np.ndarray:
    """CSS contrast(amount): scale around mid-grey."""
    return np.clip((rgb - 127.5) * amount + 127.5, 0.0, 255.0)


def brightness(rgb: np.ndarray, amount: float = 1.0) -> np.ndarray:
    """CSS brightness(amount): scale towards black or beyond white."""
    return np.clip(rgb * amount, 0.0, 255.0)


FILTER_CHAINS: Dict[PhotoFilter, List[Operation]] = {
    PhotoFilter.NONE: [],
    PhotoFilter.BW: [partial(grayscale, amount=1.0)],
    PhotoFilter.SEPIA: [partial(sepia, amount=0.6), partial(contrast, amount=1.2)],
    PhotoFilter.VINTAGE: [
        partial(sepia, amount=0.3),
        partial(contrast, amount=0.9),
        partial(brightness, amount=1.1),
    ],
}


def apply_filter(
    image: Image.Image,
    photo_filter: Union[PhotoFilter, str],
) -> Image.Image:
    """
    Apply a photo filter, returning a new image.

    Alpha is carried through untouched; only colour channels change.

    Args:
        image: Photo to filter (RGB or RGBA; other modes are converted)
        photo_filter: Effect to apply

    Returns:
        Filtered copy with the same size (and RGBA if the input had alpha)

    Example:
        >>> out = apply_filter(Image.new("RGB", (4, 4), "red"), "bw")
        >>> len(set(out.getpixel((0, 0))))
        1
    """
    chain = FILTER_CHAINS[PhotoFilter.coerce(photo_filter)]
    if not chain:
        return image.copy()

    alpha = image.getchannel("A") if image.mode == "RGBA" else None

    rgb = np.asarray(image.convert("RGB"), dtype=np.float64)
    for operation in chain:
        rgb = operation(rgb)

    result = Image.fromarray(np.rint(rgb).astype(np.uint8), "RGB")
    if alpha is not None:
        result.putalpha(alpha)
    return result
