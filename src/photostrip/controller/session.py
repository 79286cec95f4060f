"""
Module: photostrip.controller.session

Purpose:
    Merchant (admin) mode as an explicit state machine.

        USER --5 taps--> LOGIN_PROMPT --correct password--> ADMIN
        LOGIN_PROMPT --cancel--> USER
        ADMIN --3 taps--> EXIT_PROMPT --confirm--> USER
        EXIT_PROMPT --cancel--> ADMIN

    The tap counter resets whenever a prompt opens.

Key Classes:
    - SessionState: The four states
    - AdminSession: Tap counter, login and exit handling
"""

from __future__ import annotations

import hmac
import logging
from enum import Enum

logger = logging.getLogger(__name__)

DEFAULT_ENTER_TAPS = 5
DEFAULT_EXIT_TAPS = 3


class SessionState(str, Enum):
    USER = "user"
    LOGIN_PROMPT = "login_prompt"
    ADMIN = "admin"
    EXIT_PROMPT = "exit_prompt"


class AdminSession:
    """
    Tap-to-unlock merchant mode.

    Example:
        >>> session = AdminSession(password="123456")
        >>> for _ in range(5):
        ...     state = session.tap()
        >>> state
        <SessionState.LOGIN_PROMPT: 'login_prompt'>
        >>> session.login("123456")
        True
    """

    def __init__(
        self,
        password: str,
        *,
        enter_taps: int = DEFAULT_ENTER_TAPS,
        exit_taps: int = DEFAULT_EXIT_TAPS,
    ) -> None:
        if not password:
            raise ValueError("password must not be empty")
        if enter_taps <= 0 or exit_taps <= 0:
            raise ValueError("tap thresholds must be positive")
        self._password = password
        self._enter_taps = enter_taps
        self._exit_taps = exit_taps
        self._state = SessionState.USER
        self._taps = 0
        self.login_error = False

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def is_admin(self) -> bool:
        """True in ADMIN and while the exit prompt is open."""
        return self._state in (SessionState.ADMIN, SessionState.EXIT_PROMPT)

    @property
    def tap_count(self) -> int:
        return self._taps

    def tap(self) -> SessionState:
        """Register a header tap; may open the login or exit prompt."""
        if self._state not in (SessionState.USER, SessionState.ADMIN):
            return self._state

        self._taps += 1
        threshold = self._exit_taps if self._state is SessionState.ADMIN else self._enter_taps
        if self._taps >= threshold:
            self._taps = 0
            self._state = (
                SessionState.EXIT_PROMPT
                if self._state is SessionState.ADMIN
                else SessionState.LOGIN_PROMPT
            )
            logger.debug(f"Session prompt opened: {self._state.value}")
        return self._state

    def login(self, password: str) -> bool:
        """Check the password; on success enter ADMIN."""
        if self._state is not SessionState.LOGIN_PROMPT:
            raise RuntimeError(f"No login prompt open (state={self._state.value})")

        if hmac.compare_digest(password.encode("utf-8"), self._password.encode("utf-8")):
            self._state = SessionState.ADMIN
            self.login_error = False
            logger.info("Admin mode entered")
            return True

        self.login_error = True
        logger.warning("Admin login failed")
        return False

    def cancel_login(self) -> None:
        if self._state is SessionState.LOGIN_PROMPT:
            self._state = SessionState.USER
            self.login_error = False

    def confirm_exit(self) -> None:
        if self._state is not SessionState.EXIT_PROMPT:
            raise RuntimeError(f"No exit prompt open (state={self._state.value})")
        self._state = SessionState.USER
        logger.info("Admin mode exited")

    def cancel_exit(self) -> None:
        if self._state is SessionState.EXIT_PROMPT:
            self._state = SessionState.ADMIN
