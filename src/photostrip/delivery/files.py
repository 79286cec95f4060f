"""
Module: photostrip.delivery.files

Purpose:
    Write rendered strips to disk atomically (temp file + rename), so a
    crash never leaves a half-written JPEG behind.

Key Functions:
    - save_strip(): Write a RenderedStrip to a path
    - default_filename(): Timestamped download name
"""

from __future__ import annotations

import logging
import tempfile
import time
from pathlib import Path
from typing import Optional

from photostrip.output import RenderedStrip

logger = logging.getLogger(__name__)

DEFAULT_PREFIX = "life4cuts-current"


def default_filename(prefix: str = DEFAULT_PREFIX, timestamp_ms: Optional[int] = None) -> str:
    """
    Download file name like "life4cuts-current-1718000000000.jpg".

    Example:
        >>> default_filename(timestamp_ms=42)
        'life4cuts-current-42.jpg'
    """
    if timestamp_ms is None:
        timestamp_ms = int(time.time() * 1000)
    return f"{prefix}-{timestamp_ms}.jpg"


def write_bytes_atomic(data: bytes, path: Path) -> Path:
    """Write bytes via a temporary file in the same directory."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    with tempfile.NamedTemporaryFile(
        mode="wb",
        suffix=".tmp",
        dir=path.parent,
        delete=False,
    ) as f:
        f.write(data)
        temp_path = Path(f.name)

    temp_path.replace(path)
    return path


def save_strip(strip: RenderedStrip, path: Path) -> Path:
    """
    Save a rendered strip.

    Args:
        strip: Rendered strip
        path: Target file, or an existing directory (a default name is used)

    Returns:
        Path written
    """
    path = Path(path)
    if path.is_dir():
        path = path / default_filename()
    write_bytes_atomic(strip.data, path)
    logger.info(f"Saved {strip.width}x{strip.height} strip to {path}")
    return path
