"""Cooperative cancellation shared by the solve call and its island workers."""

import threading
import time
from typing import Optional

from .errors import Cancelled


class CancelToken:
    """
    Cancellation signal with an optional monotonic deadline.

    A token is cancelled explicitly via ``cancel()`` (from any thread), once
    its deadline has passed, or when its parent token is cancelled. Searches
    poll ``check()``.
    """

    def __init__(
        self, timeout: Optional[float] = None, parent: Optional["CancelToken"] = None
    ) -> None:
        self._event = threading.Event()
        self._parent = parent
        self._deadline: Optional[float] = (
            time.monotonic() + timeout if timeout is not None else None
        )

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        if self._event.is_set():
            return True
        if self._deadline is not None and time.monotonic() >= self._deadline:
            self._event.set()
            return True
        if self._parent is not None and self._parent.cancelled:
            self._event.set()
            return True
        return False

    def check(self) -> None:
        """Raise Cancelled if the token has been cancelled or has expired."""
        if self.cancelled:
            raise Cancelled("Solve cancelled before completion.")
