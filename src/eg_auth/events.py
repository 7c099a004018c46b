"""Listener registry for authentication events.

Events emitted by the authenticator:

- ``deviceauth:created``: payload ``{"accountId", "deviceId", "secret"}``
- ``devicecode:prompt``: payload is the verification URL
"""

import inspect
import logging
from collections import defaultdict
from typing import Any, Callable

logger = logging.getLogger(__name__)

Listener = Callable[[Any], Any]


class EventEmitter:
    """Maps event names to listeners. Listeners may be sync or async."""

    def __init__(self):
        self._listeners: dict[str, list[Listener]] = defaultdict(list)

    def on(self, event: str, listener: Listener) -> Listener:
        """Register a listener and return it."""
        self._listeners[event].append(listener)
        return listener

    def off(self, event: str, listener: Listener) -> bool:
        """Remove a listener. Returns False if it was not registered."""
        listeners = self._listeners.get(event, [])
        if listener not in listeners:
            return False
        listeners.remove(listener)
        return True

    def listener_count(self, event: str) -> int:
        return len(self._listeners.get(event, []))

    async def emit(self, event: str, payload: Any = None) -> int:
        """Call every listener for ``event`` in registration order.

        Returns the number of listeners called.
        """
        listeners = list(self._listeners.get(event, []))
        logger.debug(f"Emitting {event} to {len(listeners)} listener(s)")
        for listener in listeners:
            result = listener(payload)
            if inspect.isawaitable(result):
                await result
        return len(listeners)
