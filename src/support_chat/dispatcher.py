"""Route a clicked action to the platform executor that performs it."""

from __future__ import annotations

import logging
from typing import Protocol

from .actions import NAVIGATION_TYPES
from .models import Action, ActionType

LOGGER = logging.getLogger(__name__)


class ActionExecutors(Protocol):
    """Platform side effects the dispatcher can trigger. Fire and forget."""

    def navigate_internal(self, path: str) -> None: ...

    def open_external(self, url: str) -> None: ...

    def open_mailto(self, address: str) -> None: ...

    def open_tel(self, number: str) -> None: ...

    def write_clipboard(self, text: str) -> None: ...


class ActionDispatcher:
    """Execute actions by type; unknown types are ignored."""

    def __init__(self, executors: ActionExecutors) -> None:
        self.executors = executors

    def dispatch(self, action: Action) -> None:
        LOGGER.info(
            "action.dispatch",
            extra={"event": "action.dispatch", "action_type": action.type},
        )
        if action.type in NAVIGATION_TYPES:
            # Internal routes keep the widget mounted.
            if action.value.startswith("/"):
                self.executors.navigate_internal(action.value)
            else:
                self.executors.open_external(action.value)
        elif action.type == ActionType.CONTACT.value:
            # Anything that is not an email address is dialled.
            if "@" in action.value:
                self.executors.open_mailto(action.value)
            else:
                self.executors.open_tel(action.value)
        elif action.type == ActionType.COPY.value:
            self.executors.write_clipboard(action.value)
        else:
            LOGGER.debug(
                "action.dispatch.unknown",
                extra={"event": "action.dispatch.unknown", "action_type": action.type},
            )
