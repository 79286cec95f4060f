"""
Module: photostrip.delivery.locking

Purpose:
    Cross-process safe JSON read-modify-write for the order index.
    Uses portalocker so the same code locks on Mac, Windows and Linux.

Key Functions:
    - locked_update_json(): Read, modify and write back under an exclusive lock
    - locked_read_json(): Read under a shared lock

Dependencies:
    - portalocker: Cross-platform file locking

Used By:
    - photostrip.delivery.orders: orders.json
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Callable, Dict, TypeVar

import portalocker

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _parse(content: str, path: Path, default: Callable[[], Dict[str, Any]]) -> Dict[str, Any]:
    if not content.strip():
        return default()
    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        logger.warning(f"{path.name} is corrupted, starting fresh: {e}")
        return default()
    if not isinstance(data, dict):
        logger.warning(f"{path.name} does not hold a JSON object, starting fresh")
        return default()
    return data


def locked_update_json(
    path: Path,
    modifier: Callable[[Dict[str, Any]], T],
    default: Callable[[], Dict[str, Any]] = dict,
) -> T:
    """
    Read JSON, let modifier change it in place, write it back, all under
    one exclusive lock.

    Args:
        path: JSON file (created if missing)
        modifier: Mutates the data; its return value is passed through
        default: Factory for missing, empty or corrupted files

    Returns:
        Whatever modifier returned

    Example:
        >>> locked_update_json(index, lambda d: d.setdefault("orders", []).append(rec))
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    path.touch(exist_ok=True)

    with open(path, "r+", encoding="utf-8") as f:
        portalocker.lock(f, portalocker.LOCK_EX)
        try:
            f.seek(0)
            data = _parse(f.read(), path, default)

            result = modifier(data)

            f.seek(0)
            f.truncate()
            json.dump(data, f, indent=2, ensure_ascii=False)
            f.flush()
            return result
        finally:
            portalocker.unlock(f)


def locked_read_json(
    path: Path,
    default: Callable[[], Dict[str, Any]] = dict,
) -> Dict[str, Any]:
    """Read JSON under a shared lock; missing files give default()."""
    if not path.exists():
        return default()

    with open(path, "r", encoding="utf-8") as f:
        portalocker.lock(f, portalocker.LOCK_SH)
        try:
            return _parse(f.read(), path, default)
        finally:
            portalocker.unlock(f)
