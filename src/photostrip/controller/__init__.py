"""
Module: photostrip.controller

Purpose:
    Editing state around the compositor: the style controller, the
    debounced render scheduler and the admin session state machine.

Key Classes:
    - StyleController: Photos, style and preview
    - RenderScheduler: Debounced latest-wins rendering
    - AdminSession: Merchant mode state machine
"""

from .scheduler import RenderRequest, RenderScheduler, DEFAULT_DEBOUNCE_S
from .session import AdminSession, SessionState
from .style_controller import StyleController, text_color_for_border

__all__ = [
    "RenderRequest",
    "RenderScheduler",
    "DEFAULT_DEBOUNCE_S",
    "AdminSession",
    "SessionState",
    "StyleController",
    "text_color_for_border",
]
