"""
Module: photostrip.controller.style_controller

Purpose:
    Owns the mutable editing state (photo list, current style, latest
    preview) and turns every change into a debounced render of an
    immutable snapshot. The compositor itself never sees this state.

Key Classes:
    - StyleController: Photos + style + preview, with AI suggestion merge

Dependencies:
    - photostrip.controller.scheduler: Debounced rendering
    - photostrip.enrichment: Optional suggestion

Used By:
    - photostrip.cli: render --suggest
    - UI front ends
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Iterable, List, Optional, Tuple

from photostrip.compositor import render_strip
from photostrip.config import StyleConfig
from photostrip.enrichment import (
    FALLBACK_SUGGESTION,
    MoodSuggester,
    MoodSuggestion,
    merge_suggestion,
)
from photostrip.errors import EnrichmentError
from photostrip.images import ImageSource
from photostrip.layout.config import DEFAULT_SLOT_COUNT
from photostrip.output import RenderedStrip

from .scheduler import DEFAULT_DEBOUNCE_S, RenderFn, RenderScheduler

logger = logging.getLogger(__name__)

Listener = Callable[[Optional[RenderedStrip]], None]


def text_color_for_border(border_color: str) -> str:
    """Black text on a white border, white text on anything else."""
    return "#000000" if border_color.strip().lower() == "#ffffff" else "#FFFFFF"


class StyleController:
    """
    Editing state for one strip.

    Example:
        >>> controller = StyleController()
        >>> controller.add_images(["a.jpg", "b.jpg"])
        2
        >>> style = controller.update_style(caption="hello")
        >>> controller.flush()  # render now instead of after the debounce
        >>> controller.current.size
        (1080, 3270)
    """

    def __init__(
        self,
        style: Optional[StyleConfig] = None,
        *,
        suggester: Optional[MoodSuggester] = None,
        render: RenderFn = render_strip,
        delay: float = DEFAULT_DEBOUNCE_S,
        max_images: int = DEFAULT_SLOT_COUNT,
    ) -> None:
        """
        Initialize controller.

        Args:
            style: Initial style (defaults to StyleConfig())
            suggester: AI suggester; None disables suggestions
            render: Render function handed to the scheduler
            delay: Debounce window in seconds
            max_images: Maximum number of photos
        """
        self._lock = threading.Lock()
        self._style = style or StyleConfig()
        self._images: List[ImageSource] = []
        self._current: Optional[RenderedStrip] = None
        self._last_error: Optional[Exception] = None
        self._listeners: List[Listener] = []
        self._suggester = suggester
        self._max_images = max_images
        self._scheduler = RenderScheduler(
            render,
            on_result=self._on_result,
            on_error=self._on_error,
            delay=delay,
        )

    # ─────────────────────────────────────────────────────────────────────
    # State
    # ─────────────────────────────────────────────────────────────────────

    @property
    def style(self) -> StyleConfig:
        with self._lock:
            return self._style

    @property
    def images(self) -> Tuple[ImageSource, ...]:
        with self._lock:
            return tuple(self._images)

    @property
    def current(self) -> Optional[RenderedStrip]:
        """Latest successfully rendered strip."""
        with self._lock:
            return self._current

    @property
    def last_error(self) -> Optional[Exception]:
        """Error from the most recent render attempt, cleared on success."""
        with self._lock:
            return self._last_error

    @property
    def remaining_slots(self) -> int:
        with self._lock:
            return self._max_images - len(self._images)

    def subscribe(self, listener: Listener) -> None:
        """Call listener with every new preview (None when cleared)."""
        self._listeners.append(listener)

    # ─────────────────────────────────────────────────────────────────────
    # Photos
    # ─────────────────────────────────────────────────────────────────────

    def add_images(self, sources: Iterable[ImageSource]) -> int:
        """
        Append photos, keeping at most max_images.

        Returns:
            Number of photos accepted
        """
        sources = list(sources)
        with self._lock:
            room = self._max_images - len(self._images)
            accepted = sources[:max(room, 0)]
            self._images.extend(accepted)

        dropped = len(sources) - len(accepted)
        if dropped:
            logger.info(f"Ignoring {dropped} photo(s): strip holds {self._max_images}")
        if accepted:
            self._schedule()
        return len(accepted)

    def remove_image(self, index: int) -> None:
        """Remove the photo in a slot; later photos move up."""
        with self._lock:
            if not 0 <= index < len(self._images):
                raise IndexError(f"No photo at index {index}")
            del self._images[index]
        self._schedule()

    def clear_images(self) -> None:
        with self._lock:
            self._images.clear()
        self._schedule()

    # ─────────────────────────────────────────────────────────────────────
    # Style
    # ─────────────────────────────────────────────────────────────────────

    def update_style(self, **changes: Any) -> StyleConfig:
        """
        Change style fields and schedule a render.

        Changing border_color also picks a readable text_color, unless
        text_color is given in the same call.

        Raises:
            ValueError: If a value is invalid (style is left unchanged)
        """
        if "border_color" in changes and "text_color" not in changes:
            changes["text_color"] = text_color_for_border(changes["border_color"])
        with self._lock:
            self._style = self._style.replace(**changes)
            style = self._style
        self._schedule()
        return style

    def set_style(self, style: StyleConfig) -> None:
        with self._lock:
            self._style = style
        self._schedule()

    def request_suggestion(self) -> MoodSuggestion:
        """
        Ask the suggester for caption / colour / mood and merge on success.

        On failure the style is not touched at all and the fallback
        suggestion is returned for display.
        """
        images = self.images
        if self._suggester is None or not self._suggester.available:
            logger.info("AI suggestion not configured")
            return FALLBACK_SUGGESTION
        if not images:
            return FALLBACK_SUGGESTION

        try:
            suggestion = self._suggester.suggest(images)
        except EnrichmentError as e:
            logger.warning(f"AI suggestion failed, style unchanged: {e}")
            return FALLBACK_SUGGESTION

        with self._lock:
            self._style = merge_suggestion(self._style, suggestion)
        self._schedule()
        return suggestion

    # ─────────────────────────────────────────────────────────────────────
    # Rendering
    # ─────────────────────────────────────────────────────────────────────

    def flush(self) -> bool:
        """Render the pending snapshot now instead of after the debounce."""
        return self._scheduler.flush()

    def close(self) -> None:
        self._scheduler.close()

    def _schedule(self) -> None:
        # Snapshot and request under one lock so generations follow edit order
        with self._lock:
            images = tuple(self._images)
            if images:
                self._scheduler.request(images, self._style)
                return
            self._scheduler.cancel()
            self._current = None
        self._notify(None)

    def _on_result(self, strip: RenderedStrip) -> None:
        with self._lock:
            self._current = strip
            self._last_error = None
        self._notify(strip)

    def _on_error(self, error: Exception) -> None:
        # Previous preview stays current
        with self._lock:
            self._last_error = error

    def _notify(self, strip: Optional[RenderedStrip]) -> None:
        for listener in list(self._listeners):
            listener(strip)
