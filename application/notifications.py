"""Single-slot, auto-expiring error notification."""

import asyncio
import logging
from collections import deque
from typing import Callable, Deque, Optional

from core import ErrorMessage

logger = logging.getLogger("todo_sync.notify")

RECENT_LIMIT = 50


class NotificationChannel:
    """Holds at most one live message; a new message supersedes the old timer."""

    def __init__(self, duration: float = 3.0, on_change: Optional[Callable[[], None]] = None) -> None:
        self.duration = duration
        self.on_change = on_change
        self.message: str = ""
        self.kind: Optional[ErrorMessage] = None
        self.expires_at: Optional[float] = None
        self._timer: Optional[asyncio.TimerHandle] = None
        self.recent: Deque[str] = deque(maxlen=RECENT_LIMIT)

    @property
    def active(self) -> bool:
        return bool(self.message)

    @property
    def pending(self) -> bool:
        return self._timer is not None

    def notify(self, message: str, kind: Optional[ErrorMessage] = None) -> None:
        self._cancel_timer()
        loop = asyncio.get_running_loop()
        self.message = message
        self.kind = kind
        self.expires_at = loop.time() + self.duration
        self.recent.append(message)
        self._timer = loop.call_later(self.duration, self._expire)
        logger.debug("notification raised: %s", message)
        self._changed()

    def dismiss(self) -> None:
        self._cancel_timer()
        if not self.message and self.expires_at is None:
            return
        self.message = ""
        self.kind = None
        self.expires_at = None
        self._changed()

    def close(self) -> None:
        """Teardown: stop the pending expiry without touching the message."""
        self._cancel_timer()

    def _expire(self) -> None:
        self._timer = None
        logger.debug("notification expired")
        self.dismiss()

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _changed(self) -> None:
        if self.on_change:
            self.on_change()


__all__ = ["NotificationChannel"]
