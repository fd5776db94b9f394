"""Fire-and-forget delivery of registry events to subscribed handlers."""

from __future__ import annotations

import logging
import threading
from typing import Callable, List

from rental_registry.schemas.events import Event

logger = logging.getLogger(__name__)

EventHandler = Callable[[Event], None]


class EventDispatcher:
    """Delivers committed events to every subscribed handler, in subscription order.

    A failing handler is logged and skipped; it never affects the operation
    that produced the event or the handlers after it.
    """

    def __init__(self) -> None:
        self._handlers: List[EventHandler] = []
        self._lock = threading.Lock()

    def subscribe(self, handler: EventHandler) -> Callable[[], None]:
        """Register a handler. Returns a callable that unsubscribes it."""
        with self._lock:
            self._handlers.append(handler)

        def unsubscribe() -> None:
            with self._lock:
                if handler in self._handlers:
                    self._handlers.remove(handler)

        return unsubscribe

    def publish(self, event: Event) -> None:
        logger.info("%s %s", event.name, event.model_dump_json(exclude={"name"}), extra={"event": event.name})
        with self._lock:
            handlers = list(self._handlers)
        for handler in handlers:
            try:
                handler(event)
            except Exception:
                logger.exception("Event handler %r failed on %s", handler, event.name)
