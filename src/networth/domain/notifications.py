"""Observer channel for ledger change notifications."""

import logging
from collections.abc import Callable
from typing import Any, Optional

from networth.domain.entities import LedgerEvent

logger = logging.getLogger(__name__)

Handler = Callable[[LedgerEvent, Optional[dict[str, Any]]], None]


class NotificationChannel:
    """Publishes ledger events to subscribed handlers.

    Handlers receive the event and a small payload naming what changed; they
    are expected to re-read whatever documents they display, so receiving a
    notification twice or out of order is harmless. Handlers run
    synchronously in subscription order after the write has been committed.
    """

    def __init__(self):
        self._handlers: dict[LedgerEvent, list[Handler]] = {}

    def subscribe(self, event: LedgerEvent, handler: Handler) -> Callable[[], None]:
        """Register handler for event.

        Returns:
            Callable that removes the subscription; calling it twice is a no-op
        """
        event = LedgerEvent(event)
        self._handlers.setdefault(event, []).append(handler)

        def unsubscribe() -> None:
            handlers = self._handlers.get(event, [])
            if handler in handlers:
                handlers.remove(handler)

        return unsubscribe

    def publish(self, event: LedgerEvent, payload: Optional[dict[str, Any]] = None) -> None:
        """Call every handler subscribed to event."""
        event = LedgerEvent(event)
        handlers = list(self._handlers.get(event, []))
        logger.debug(f"Publishing {event.value} to {len(handlers)} handler(s)")
        for handler in handlers:
            handler(event, payload)
