"""
Minimal publish/subscribe emitter.

Listeners subscribe to an event type (or "*" for every type) and receive
the MidaEvent built by notify_listeners(). Subscribing without a listener
returns an asyncio.Future resolved with the next matching event, so
callers can simply await it:

    emitter = MidaEmitter()
    emitter.on("tick", lambda event: print(event.descriptor))
    next_order = emitter.on("order")         # asyncio.Future
    emitter.notify_listeners("order", {"ticket": 1})
    event = await next_order
"""
from __future__ import annotations

import asyncio
import uuid
from typing import Any, Callable, Dict, List, Optional, Union

from mida.schemas.events import MidaEvent

MidaEventListener = Callable[[MidaEvent], Any]

WILDCARD = "*"


class MidaEmitter:
    """Per-owner registry of event listeners."""

    def __init__(self) -> None:
        # type -> {uuid: listener}
        self._listeners: Dict[str, Dict[str, MidaEventListener]] = {}
        # type -> futures waiting for the next event
        self._waiters: Dict[str, List[asyncio.Future]] = {}

    def on(self, type: str, listener: Optional[MidaEventListener] = None) -> Union[str, asyncio.Future]:
        """
        Subscribe to an event type.

        Args:
            type: Event type, or "*" for all events
            listener: Callable receiving the MidaEvent

        Returns:
            The listener uuid when a listener is given, otherwise a Future
            resolved with the next event of that type. The Future is bound
            to the running event loop, so this form must be called from a
            coroutine.
        """
        if listener is None:
            future = asyncio.get_running_loop().create_future()
            self._waiters.setdefault(type, []).append(future)
            return future

        listener_uuid = str(uuid.uuid4())
        self._listeners.setdefault(type, {})[listener_uuid] = listener
        return listener_uuid

    def remove_event_listener(self, listener_uuid: str) -> bool:
        """Unsubscribe a listener. Returns False if the uuid is unknown."""
        for listeners in self._listeners.values():
            if listeners.pop(listener_uuid, None) is not None:
                return True
        return False

    def notify_listeners(self, type: str, descriptor: Optional[Dict[str, Any]] = None) -> MidaEvent:
        """
        Build an event and deliver it.

        Listeners of `type` are called first, then wildcard listeners, each
        in subscription order. Exceptions raised by listeners propagate.

        Returns:
            The delivered MidaEvent
        """
        event = MidaEvent(type=type, descriptor=descriptor or {})

        for key in (type, WILDCARD):
            for listener in list(self._listeners.get(key, {}).values()):
                listener(event)

            for future in self._waiters.pop(key, []):
                if not future.done():
                    future.set_result(event)

        return event

    def listener_count(self, type: Optional[str] = None) -> int:
        """Number of listeners for `type`, or for all types when None."""
        if type is not None:
            return len(self._listeners.get(type, {}))
        return sum(len(listeners) for listeners in self._listeners.values())
