"""
Module: photostrip.images.loader

Purpose:
    Decode user-supplied photos into PIL images before drawing starts.
    All decodes are issued concurrently on a thread pool and joined at a
    single point, so slow sources do not serialise. One failed decode
    fails the whole batch.

Key Functions:
    - load_images(): Decode up to four sources concurrently
    - load_image(): Decode a single source

Dependencies:
    - concurrent.futures: Thread pool
    - PIL: Decoding, EXIF orientation

Used By:
    - photostrip.compositor: First stage of render_strip()
    - photostrip.controller.style_controller: Accepting uploads
"""

from __future__ import annotations

import io
import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import IO, List, Sequence, Union

from PIL import Image, ImageOps

from photostrip.errors import DecodeFailure

logger = logging.getLogger(__name__)

ImageSource = Union[Image.Image, str, Path, bytes, bytearray, IO[bytes]]

DEFAULT_DECODE_WORKERS = 4

_DECODE_ERRORS = (OSError, ValueError, SyntaxError, Image.DecompressionBombError)


def load_image(source: ImageSource, index: int = 0) -> Image.Image:
    """
    Decode one source into a fully loaded, upright image.

    Already-decoded PIL images are returned as-is. Files and byte buffers
    are opened, read completely, rotated according to their EXIF
    orientation and detached from the underlying file handle.

    Args:
        source: PIL image, path, encoded bytes or binary file object
        index: Slot index, used in error messages

    Returns:
        Decoded image

    Raises:
        DecodeFailure: If the source cannot be decoded
    """
    if isinstance(source, Image.Image):
        return source

    if isinstance(source, (bytes, bytearray)):
        fp: Union[str, Path, IO[bytes]] = io.BytesIO(source)
    elif isinstance(source, (str, Path)):
        fp = Path(source)
    elif hasattr(source, "read"):
        fp = source
    else:
        raise DecodeFailure(index, source, "unsupported source type")

    try:
        with Image.open(fp) as opened:
            opened.load()
            # exif_transpose always returns a new image, detached from fp
            image = ImageOps.exif_transpose(opened)
    except _DECODE_ERRORS as e:
        raise DecodeFailure(index, source, str(e)) from e

    if image.width <= 0 or image.height <= 0:
        raise DecodeFailure(index, source, "image has no pixels")

    logger.debug(f"Decoded slot {index}: {image.width}x{image.height} {image.mode}")
    return image


def load_images(
    sources: Sequence[ImageSource],
    *,
    max_workers: int = DEFAULT_DECODE_WORKERS,
) -> List[Image.Image]:
    """
    Decode all sources concurrently and wait for every one of them.

    Args:
        sources: Sources in slot order
        max_workers: Thread pool size

    Returns:
        Decoded images in the same order as sources

    Raises:
        DecodeFailure: For the lowest slot index that failed to decode

    Example:
        >>> images = load_images([Path("a.jpg"), Path("b.png")])
        >>> len(images)
        2
    """
    if not sources:
        return []

    workers = max(1, min(max_workers, len(sources)))
    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="decode") as executor:
        futures = [
            executor.submit(load_image, source, index)
            for index, source in enumerate(sources)
        ]
        # Single join point: collect every result before anything is drawn
        outcomes = []
        for future in futures:
            try:
                outcomes.append(future.result())
            except DecodeFailure as e:
                outcomes.append(e)

    failures = [o for o in outcomes if isinstance(o, DecodeFailure)]
    if failures:
        logger.warning(f"{len(failures)} of {len(sources)} images failed to decode")
        raise failures[0]

    return outcomes
