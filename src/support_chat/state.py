"""Chat session lifecycle: open, active, ended, and the message log it owns."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from enum import Enum
import itertools
import logging

from .events import (
    MESSAGE_APPENDED,
    PENDING_CHANGED,
    PHASE_CHANGED,
    SESSION_RESET,
    EventBus,
)
from .i18n import CHAT_ENDED, WELCOME, Translator
from .models import Action, Message, Role

LOGGER = logging.getLogger(__name__)

IdFactory = Callable[[], str]


class SessionPhase(str, Enum):
    """Finite state machine for the chat widget lifecycle."""

    CLOSED = "CLOSED"
    OPEN_EMPTY = "OPEN_EMPTY"
    OPEN_ACTIVE = "OPEN_ACTIVE"
    ENDED = "ENDED"


OPEN_PHASES = frozenset(
    {SessionPhase.OPEN_EMPTY, SessionPhase.OPEN_ACTIVE, SessionPhase.ENDED}
)


def counter_ids(prefix: str = "msg") -> IdFactory:
    """Return a factory producing ``msg-1``, ``msg-2``, ..."""
    counter = itertools.count(1)
    return lambda: f"{prefix}-{next(counter)}"


class Session:
    """Append-only message log plus the flags of one conversation."""

    def __init__(self) -> None:
        self._messages: list[Message] = []
        self.ended = False
        self.pending = False
        self.error = ""

    @property
    def messages(self) -> tuple[Message, ...]:
        """Return a snapshot of the log in display order."""
        return tuple(self._messages)

    def append(self, message: Message) -> None:
        self._messages.append(message)

    def __len__(self) -> int:
        return len(self._messages)


class SessionStateMachine:
    """Own the current ``Session`` and apply widget lifecycle transitions.

    "New Chat" replaces the session object instead of clearing it, so work
    started against an older session can detect that it is stale.
    """

    def __init__(
        self,
        translator: Translator | None = None,
        id_factory: IdFactory | None = None,
        bus: EventBus | None = None,
    ) -> None:
        self.translator = translator or Translator()
        self._next_id = id_factory or counter_ids()
        self.bus = bus or EventBus()
        self._session = Session()
        self._phase = SessionPhase.CLOSED

    @property
    def session(self) -> Session:
        return self._session

    @property
    def phase(self) -> SessionPhase:
        return self._phase

    @property
    def messages(self) -> tuple[Message, ...]:
        return self._session.messages

    @property
    def pending(self) -> bool:
        return self._session.pending

    @property
    def is_open(self) -> bool:
        return self._phase in OPEN_PHASES

    @property
    def can_send(self) -> bool:
        """Sends need an open widget on a session that has not been ended."""
        return self.is_open and not self._session.pending and not self._session.ended

    @property
    def can_end_chat(self) -> bool:
        """End Chat needs at least one exchange beyond the welcome message."""
        return (
            self._phase in (SessionPhase.OPEN_EMPTY, SessionPhase.OPEN_ACTIVE)
            and not self._session.ended
            and len(self._session) > 1
        )

    def create_message(
        self,
        role: Role,
        content: str,
        actions: Iterable[Action] = (),
        *,
        is_terminal: bool = False,
        intent: str | None = None,
        escalate: bool = False,
    ) -> Message:
        """Build a message carrying the next session-unique id."""
        return Message(
            id=self._next_id(),
            role=role,
            content=content,
            actions=tuple(actions),
            is_terminal=is_terminal,
            intent=intent,
            escalate=escalate,
        )

    def append(self, message: Message, session: Session | None = None) -> bool:
        """Append to ``session`` (default: current) unless it has been replaced."""
        target = session if session is not None else self._session
        if target is not self._session:
            return False
        target.append(message)
        self.bus.publish(MESSAGE_APPENDED, {"message": message})
        return True

    def set_pending(self, value: bool, session: Session | None = None) -> None:
        target = session if session is not None else self._session
        if target.pending == value:
            return
        target.pending = value
        if target is self._session:
            self.bus.publish(PENDING_CHANGED, {"pending": value})

    def mark_active(self) -> None:
        """Leave ``OPEN_EMPTY`` once the user has said something."""
        if self._phase is SessionPhase.OPEN_EMPTY:
            self._set_phase(SessionPhase.OPEN_ACTIVE)

    def open(self) -> None:
        if self.is_open:
            return
        self._session.error = ""
        if not len(self._session) and not self._session.ended:
            self._append_welcome()
            self._set_phase(SessionPhase.OPEN_EMPTY)
        elif self._session.ended:
            self._set_phase(SessionPhase.ENDED)
        else:
            self._set_phase(SessionPhase.OPEN_ACTIVE)

    def close(self) -> None:
        """Collapse the widget; the log is kept for the next open."""
        if not self.is_open:
            return
        self._session.error = ""
        self._set_phase(SessionPhase.CLOSED)

    def toggle(self) -> None:
        if self.is_open:
            self.close()
        else:
            self.open()

    def end_chat(self) -> bool:
        """Append the terminal message and stop accepting sends."""
        if not self.can_end_chat:
            return False
        self.append(
            self.create_message(
                Role.ASSISTANT,
                self.translator.text(CHAT_ENDED),
                is_terminal=True,
            )
        )
        self._session.ended = True
        self._set_phase(SessionPhase.ENDED)
        return True

    def new_chat(self) -> bool:
        """Replace an ended session with a fresh one holding only a welcome."""
        if self._phase is not SessionPhase.ENDED:
            return False
        self._session = Session()
        self.bus.publish(SESSION_RESET, {})
        self._append_welcome()
        self._set_phase(SessionPhase.OPEN_ACTIVE)
        return True

    def _append_welcome(self) -> None:
        self.append(self.create_message(Role.ASSISTANT, self.translator.text(WELCOME)))

    def _set_phase(self, new_phase: SessionPhase) -> None:
        old_phase = self._phase
        if old_phase is new_phase:
            return
        self._phase = new_phase
        LOGGER.info(
            "session.phase.transition",
            extra={
                "event": "session.phase.transition",
                "from_state": old_phase.value,
                "to_state": new_phase.value,
            },
        )
        self.bus.publish(
            PHASE_CHANGED, {"from_state": old_phase, "to_state": new_phase}
        )
