"""Publish/subscribe channel through which the UI observes a chat session.

Usage:
    bus = EventBus()

    def on_appended(event):
        print(event.data["message"].content)

    bus.subscribe(MESSAGE_APPENDED, on_appended)
    bus.publish(MESSAGE_APPENDED, {"message": message})
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
import logging
from typing import Any

LOGGER = logging.getLogger(__name__)

MESSAGE_APPENDED = "message.appended"
PHASE_CHANGED = "phase.changed"
PENDING_CHANGED = "pending.changed"
SESSION_RESET = "session.reset"


@dataclass
class Event:
    """Event data container."""

    name: str
    data: dict[str, Any]
    source: str | None = None


class EventBus:
    """Synchronous publish/subscribe dispatcher.

    Handlers run in subscription order on the caller's stack. A handler that
    raises is logged and skipped so a broken view cannot corrupt the session.
    """

    def __init__(self) -> None:
        self._subscribers: dict[str, list[Callable[[Event], Any]]] = {}

    def subscribe(self, event_name: str, handler: Callable[[Event], Any]) -> None:
        """Subscribe to an event.

        Args:
            event_name: Event to listen for (e.g., "message.appended")
            handler: Callable invoked with the published ``Event``
        """
        self._subscribers.setdefault(event_name, []).append(handler)
        LOGGER.debug("Subscribed to event: %s", event_name)

    def unsubscribe(self, event_name: str, handler: Callable[[Event], Any]) -> None:
        """Unsubscribe from an event."""
        handlers = self._subscribers.get(event_name)
        if handlers and handler in handlers:
            handlers.remove(handler)
            LOGGER.debug("Unsubscribed from event: %s", event_name)

    def publish(
        self, event_name: str, data: dict[str, Any], source: str | None = None
    ) -> None:
        """Publish an event to all subscribers."""
        event = Event(name=event_name, data=data, source=source)
        for handler in list(self._subscribers.get(event_name, [])):
            try:
                handler(event)
            except Exception:  # noqa: BLE001 - subscriber bugs must not break the session.
                LOGGER.exception(
                    "events.handler.failed",
                    extra={"event": "events.handler.failed", "event_name": event_name},
                )

    def clear(self, event_name: str | None = None) -> None:
        """Clear subscribers for one event, or all of them."""
        if event_name:
            self._subscribers.pop(event_name, None)
        else:
            self._subscribers.clear()
