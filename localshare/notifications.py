"""Transient success/error messages with automatic expiry."""

import asyncio
from typing import Callable, Optional

from common.logging_config import get_logger
from localshare.constants import NOTIFICATION_TTL_SECONDS
from localshare.types import Notification, NotificationKind

logger = get_logger(__name__)

Listener = Callable[[Notification], None]


class NotificationCenter:
    """
    Holds at most one live notification per kind.

    Posting replaces the current notification of that kind and restarts
    its expiry timer. Timers run on the event loop, so post() must be
    called from within a running loop.
    """

    def __init__(self, ttl: float = NOTIFICATION_TTL_SECONDS):
        self.ttl = ttl
        self._current: dict[NotificationKind, Notification] = {}
        self._timers: dict[NotificationKind, asyncio.TimerHandle] = {}
        self._listeners: list[Listener] = []

    def post(self, kind: NotificationKind, message: str) -> Notification:
        loop = asyncio.get_running_loop()
        self._cancel_timer(kind)

        notification = Notification(kind=kind, message=message, expires_at=loop.time() + self.ttl)
        self._current[kind] = notification
        self._timers[kind] = loop.call_later(self.ttl, self._expire, kind, notification)

        if kind is NotificationKind.ERROR:
            logger.warning(f"Error notification: {message}")
        else:
            logger.info(f"Success notification: {message}")

        for listener in list(self._listeners):
            try:
                listener(notification)
            except Exception as e:
                logger.error(f"Notification listener failed: {e}", exc_info=True)
        return notification

    def error(self, message: str) -> Notification:
        return self.post(NotificationKind.ERROR, message)

    def success(self, message: str) -> Notification:
        return self.post(NotificationKind.SUCCESS, message)

    def dismiss(self, kind: NotificationKind) -> None:
        self._cancel_timer(kind)
        self._current.pop(kind, None)

    def dismiss_error(self) -> None:
        self.dismiss(NotificationKind.ERROR)

    def current(self, kind: NotificationKind) -> Optional[Notification]:
        return self._current.get(kind)

    @property
    def current_error(self) -> Optional[Notification]:
        return self._current.get(NotificationKind.ERROR)

    @property
    def current_success(self) -> Optional[Notification]:
        return self._current.get(NotificationKind.SUCCESS)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a callback for every post. Returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def clear(self) -> None:
        for kind in list(self._timers):
            self._cancel_timer(kind)
        self._current.clear()

    def _expire(self, kind: NotificationKind, notification: Notification) -> None:
        # A newer post of the same kind owns the slot now.
        if self._current.get(kind) is notification:
            del self._current[kind]
            self._timers.pop(kind, None)
            logger.debug(f"Notification expired: {kind.value}")

    def _cancel_timer(self, kind: NotificationKind) -> None:
        timer = self._timers.pop(kind, None)
        if timer is not None:
            timer.cancel()
