"""Process-wide event channel.

Subscribers are plain callables invoked synchronously, in subscription order,
every time an event is emitted. A failing subscriber is logged and does not
stop delivery to the others.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable

logger = logging.getLogger(__name__)


class EventBus:
    """In-memory publish/subscribe for payload-less notifications.

    Usage::

        bus = EventBus()
        bus.subscribe(EventType.CLIENT_CHANGED, refresh_wallets)
        bus.emit(EventType.CLIENT_CHANGED)
    """

    def __init__(self) -> None:
        self._subscribers: dict[str, list[Callable[[], None]]] = {}

    def subscribe(self, event: str, callback: Callable[[], None]) -> None:
        """Register ``callback`` for ``event``."""
        self._subscribers.setdefault(event, []).append(callback)

    def unsubscribe(self, event: str, callback: Callable[[], None]) -> None:
        """Remove ``callback``; unknown callbacks are ignored."""
        callbacks = self._subscribers.get(event, [])
        if callback in callbacks:
            callbacks.remove(callback)

    def emit(self, event: str) -> None:
        """Deliver ``event`` to every subscriber."""
        logger.debug("Emitting %s", event)
        for callback in list(self._subscribers.get(event, [])):
            try:
                callback()
            except Exception:
                logger.exception("Event subscriber failed on %s", event)


default_bus = EventBus()
