"""
Module: photostrip.errors

Purpose:
    Exception hierarchy shared by the compositor and its collaborators.
    Every error is scoped to a single render or enrichment attempt; none of
    them leaves state behind that would block a later attempt.

Key Classes:
    - PhotoStripError: Base class for all package errors
    - RenderError: A render attempt failed as a whole
    - DecodeFailure: A source image could not be decoded
    - SurfaceUnavailable: The drawing surface could not be created
    - EnrichmentError: The optional AI suggestion call failed
    - OrderNotFoundError: Unknown order id in the order history

Used By:
    - photostrip.compositor: Raises RenderError subclasses
    - photostrip.controller: Records render errors, swallows enrichment errors
    - photostrip.cli: Maps errors to exit codes
"""

from __future__ import annotations

from typing import Any, Optional


class PhotoStripError(Exception):
    """Base class for photostrip errors."""
    pass


class RenderError(PhotoStripError):
    """A render attempt failed; nothing was composed."""
    pass


class DecodeFailure(RenderError):
    """
    A source image could not be decoded.

    Attributes:
        index: Slot index of the failing source (0 = top)
        source: Short description of the source (path, "<bytes>", ...)
    """

    def __init__(self, index: int, source: Any, reason: Optional[str] = None) -> None:
        self.index = index
        self.source = _describe_source(source)
        message = f"Could not decode image for slot {index} ({self.source})"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class SurfaceUnavailable(RenderError):
    """The canvas for a render attempt could not be created."""
    pass


class EnrichmentError(PhotoStripError):
    """The AI suggestion call failed, timed out or returned unusable data."""
    pass


class OrderNotFoundError(PhotoStripError):
    """No order with the requested id exists in the order history."""
    pass


def _describe_source(source: Any) -> str:
    if isinstance(source, (bytes, bytearray)):
        return f"<{len(source)} bytes>"
    if isinstance(source, str):
        return source
    name = getattr(source, "name", None)
    if isinstance(name, str):
        return name
    return type(source).__name__
