from __future__ import annotations

import logging
from collections import defaultdict
from typing import Callable

from helpdesk.tickets.events import DomainEvent

logger = logging.getLogger(__name__)

Listener = Callable[[DomainEvent], None]


class EventDispatcher:
    """Synchronous in-process dispatcher keyed by event name.

    Listeners run inline, in registration order. A failing listener aborts the
    dispatch and its exception propagates to the caller.
    """

    def __init__(self) -> None:
        self._listeners: dict[str, list[Listener]] = defaultdict(list)

    def add_listener(self, event_name: str, listener: Listener) -> None:
        self._listeners[event_name].append(listener)

    def remove_listener(self, event_name: str, listener: Listener) -> None:
        listeners = self._listeners.get(event_name, [])
        if listener in listeners:
            listeners.remove(listener)

    def get_listeners(self, event_name: str) -> list[Listener]:
        return list(self._listeners.get(event_name, []))

    def dispatch(self, event_name: str, event: DomainEvent) -> DomainEvent:
        listeners = self.get_listeners(event_name)
        logger.debug("Dispatching %s to %d listener(s)", event_name, len(listeners))
        for listener in listeners:
            try:
                listener(event)
            except Exception:
                logger.exception("Listener %r failed for event %s", listener, event_name)
                raise
        return event
