"""
Module: photostrip.controller.scheduler

Purpose:
    Debounced, latest-wins rendering. Every state change calls request();
    a request arriving inside the debounce window replaces the pending one,
    and only the newest (images, style) snapshot is ever rendered.

    There is no way to cancel a render that has started. A render that
    finishes after a newer request was made is simply discarded. Each
    render draws on its own canvas, so a discarded one cannot affect
    anything.

    close() cancels pending work and waits for a render already running
    on the timer thread, so nothing is delivered after it returns.

Key Classes:
    - RenderRequest: Snapshot of images and style with a generation number
    - RenderScheduler: Timer-based debouncer

Dependencies:
    - threading (std)

Used By:
    - photostrip.controller.style_controller: Preview rendering
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Tuple

from photostrip.compositor import render_strip
from photostrip.config import StyleConfig
from photostrip.images import ImageSource
from photostrip.output import RenderedStrip

logger = logging.getLogger(__name__)

DEFAULT_DEBOUNCE_S = 0.5

RenderFn = Callable[[Sequence[ImageSource], StyleConfig], RenderedStrip]


@dataclass(frozen=True)
class RenderRequest:
    """
    An (images, style) snapshot waiting to be rendered.

    Attributes:
        generation: Increases with every request; the highest one wins
        images: Sources in slot order
        style: Style at request time
    """

    generation: int
    images: Tuple[ImageSource, ...]
    style: StyleConfig


class RenderScheduler:
    """
    Debounce render requests and deliver only the newest result.

    Usage:
        scheduler = RenderScheduler(on_result=show_preview)
        scheduler.request(images, style)   # starts the debounce timer
        scheduler.request(images, style2)  # replaces the pending request
        ...
        scheduler.close()

    Callbacks run on the timer thread (or on the caller's thread for
    flush()).
    """

    def __init__(
        self,
        render: RenderFn = render_strip,
        on_result: Optional[Callable[[RenderedStrip], None]] = None,
        on_error: Optional[Callable[[Exception], None]] = None,
        delay: float = DEFAULT_DEBOUNCE_S,
    ) -> None:
        """
        Initialize scheduler.

        Args:
            render: Render function (defaults to render_strip)
            on_result: Called with each non-stale result
            on_error: Called with each non-stale render error
            delay: Debounce window in seconds
        """
        if delay < 0:
            raise ValueError(f"delay must be non-negative: {delay}")
        self._render = render
        self._on_result = on_result
        self._on_error = on_error
        self._delay = delay

        self._lock = threading.Lock()
        self._idle = threading.Condition(self._lock)
        self._timer: Optional[threading.Timer] = None
        self._pending: Optional[RenderRequest] = None
        self._generation = 0
        self._closed = False
        # Idents of threads currently inside a render (one entry per render)
        self._running: List[int] = []

    @property
    def generation(self) -> int:
        """Generation number of the newest request."""
        with self._lock:
            return self._generation

    @property
    def has_pending(self) -> bool:
        """True while a request is waiting for its debounce window."""
        with self._lock:
            return self._pending is not None

    @property
    def is_rendering(self) -> bool:
        """True while a render is in progress on any thread."""
        with self._lock:
            return bool(self._running)

    def request(self, images: Sequence[ImageSource], style: StyleConfig) -> int:
        """
        Schedule a render, replacing any pending one.

        Returns:
            Generation number of this request
        """
        with self._lock:
            if self._closed:
                raise RuntimeError("RenderScheduler is closed")
            self._generation += 1
            request = RenderRequest(self._generation, tuple(images), style)
            self._pending = request
            if self._timer is not None:
                self._timer.cancel()
            self._timer = threading.Timer(self._delay, self._fire, args=(request.generation,))
            self._timer.daemon = True
            self._timer.start()

        logger.debug(f"Render request #{request.generation} scheduled ({len(request.images)} image(s))")
        return request.generation

    def flush(self) -> bool:
        """
        Run the pending request now, on the calling thread.

        Returns:
            True if a request was run
        """
        request = self._claim()
        if request is None:
            return False
        self._run(request)
        return True

    def cancel(self) -> None:
        """Drop the pending request, if any."""
        with self._lock:
            # Bumping the generation also invalidates any in-flight render
            self._generation += 1
            self._drop_pending_locked()

    def close(self, timeout: Optional[float] = None) -> bool:
        """
        Cancel pending work, refuse further requests and wait for any
        render still in progress on another thread.

        A render running on the calling thread (close() from inside a
        callback) is not waited for.

        Args:
            timeout: Seconds to wait; None waits indefinitely

        Returns:
            True if no other render is running when close() returns
        """
        self.cancel()
        me = threading.get_ident()
        with self._idle:
            self._closed = True
            finished = self._idle.wait_for(
                lambda: all(ident == me for ident in self._running),
                timeout,
            )
        if not finished:
            logger.warning("Closed scheduler while a render was still running")
        return finished

    def _drop_pending_locked(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        self._pending = None

    def _claim(self, generation: Optional[int] = None) -> Optional[RenderRequest]:
        # Taking the request and registering the render happen atomically,
        # so close() cannot miss a render that is about to start
        with self._lock:
            request = self._pending
            if request is None:
                return None
            if generation is not None and request.generation != generation:
                return None
            self._drop_pending_locked()
            self._running.append(threading.get_ident())
            return request

    def _fire(self, generation: int) -> None:
        request = self._claim(generation)
        if request is not None:
            self._run(request)

    def _is_current(self, request: RenderRequest) -> bool:
        with self._lock:
            return request.generation == self._generation

    def _run(self, request: RenderRequest) -> None:
        try:
            self._execute(request)
        finally:
            with self._idle:
                self._running.remove(threading.get_ident())
                self._idle.notify_all()

    def _execute(self, request: RenderRequest) -> None:
        try:
            strip = self._render(request.images, request.style)
        except Exception as e:
            if not self._is_current(request):
                logger.debug(f"Render #{request.generation} failed after being superseded: {e}")
                return
            logger.error(f"Render #{request.generation} failed: {e}")
            if self._on_error is not None:
                self._on_error(e)
            return

        if not self._is_current(request):
            logger.debug(f"Discarding superseded render #{request.generation}")
            return

        if self._on_result is not None:
            self._on_result(strip)
