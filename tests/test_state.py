"""Tests for the chat session lifecycle state machine."""

from __future__ import annotations

import unittest

from support_chat.events import (
    MESSAGE_APPENDED,
    PHASE_CHANGED,
    SESSION_RESET,
    Event,
)
from support_chat.i18n import CHAT_ENDED, WELCOME, Translator
from support_chat.models import Role
from support_chat.state import SessionPhase, SessionStateMachine, counter_ids


def _add_exchange(machine: SessionStateMachine) -> None:
    machine.append(machine.create_message(Role.USER, "hello"))
    machine.mark_active()
    machine.append(machine.create_message(Role.ASSISTANT, "hi there"))


class OpenCloseTests(unittest.TestCase):
    """Validate opening, closing, and reopening."""

    def test_starts_closed_and_empty(self) -> None:
        machine = SessionStateMachine()
        self.assertEqual(machine.phase, SessionPhase.CLOSED)
        self.assertEqual(machine.messages, ())
        self.assertFalse(machine.is_open)

    def test_first_open_appends_one_welcome(self) -> None:
        machine = SessionStateMachine()
        machine.open()
        self.assertEqual(machine.phase, SessionPhase.OPEN_EMPTY)
        self.assertEqual(len(machine.messages), 1)
        welcome = machine.messages[0]
        self.assertEqual(welcome.role, Role.ASSISTANT)
        self.assertEqual(welcome.content, Translator().text(WELCOME))
        self.assertEqual(welcome.actions, ())
        self.assertFalse(welcome.is_terminal)

    def test_open_twice_does_not_duplicate_welcome(self) -> None:
        machine = SessionStateMachine()
        machine.open()
        machine.open()
        self.assertEqual(len(machine.messages), 1)

    def test_reopen_keeps_history_without_new_welcome(self) -> None:
        machine = SessionStateMachine()
        machine.open()
        _add_exchange(machine)
        machine.close()
        self.assertEqual(machine.phase, SessionPhase.CLOSED)
        machine.open()
        self.assertEqual(machine.phase, SessionPhase.OPEN_ACTIVE)
        self.assertEqual(len(machine.messages), 3)

    def test_reopen_ended_session_stays_ended(self) -> None:
        machine = SessionStateMachine()
        machine.open()
        _add_exchange(machine)
        machine.end_chat()
        machine.close()
        machine.open()
        self.assertEqual(machine.phase, SessionPhase.ENDED)
        self.assertEqual(len(machine.messages), 4)

    def test_toggle_flips_open_state(self) -> None:
        machine = SessionStateMachine()
        machine.toggle()
        self.assertTrue(machine.is_open)
        machine.toggle()
        self.assertFalse(machine.is_open)

    def test_open_and_close_clear_error_indicator(self) -> None:
        machine = SessionStateMachine()
        machine.session.error = "boom"
        machine.open()
        self.assertEqual(machine.session.error, "")

    def test_localized_welcome(self) -> None:
        machine = SessionStateMachine(translator=Translator("fr"))
        machine.open()
        self.assertIn("Bonjour", machine.messages[0].content)


class EndAndNewChatTests(unittest.TestCase):
    """Validate End Chat and New Chat transitions."""

    def test_end_chat_requires_an_exchange(self) -> None:
        machine = SessionStateMachine()
        machine.open()
        self.assertFalse(machine.can_end_chat)
        self.assertFalse(machine.end_chat())
        self.assertEqual(machine.phase, SessionPhase.OPEN_EMPTY)

    def test_end_chat_appends_terminal_message(self) -> None:
        machine = SessionStateMachine()
        machine.open()
        _add_exchange(machine)
        self.assertTrue(machine.end_chat())
        self.assertEqual(machine.phase, SessionPhase.ENDED)
        self.assertTrue(machine.session.ended)
        last = machine.messages[-1]
        self.assertTrue(last.is_terminal)
        self.assertEqual(last.content, Translator().text(CHAT_ENDED))
        self.assertFalse(machine.can_send)

    def test_ended_session_refuses_sends_while_closed(self) -> None:
        machine = SessionStateMachine()
        machine.open()
        _add_exchange(machine)
        machine.end_chat()
        machine.close()
        self.assertEqual(machine.phase, SessionPhase.CLOSED)
        self.assertFalse(machine.can_send)

    def test_closed_widget_refuses_sends(self) -> None:
        machine = SessionStateMachine()
        self.assertFalse(machine.can_send)
        machine.open()
        self.assertTrue(machine.can_send)
        machine.close()
        self.assertFalse(machine.can_send)

    def test_end_chat_twice_is_safe(self) -> None:
        machine = SessionStateMachine()
        machine.open()
        _add_exchange(machine)
        machine.end_chat()
        count = len(machine.messages)
        self.assertFalse(machine.end_chat())
        self.assertEqual(len(machine.messages), count)

    def test_only_terminal_message_is_flagged(self) -> None:
        machine = SessionStateMachine()
        machine.open()
        _add_exchange(machine)
        machine.end_chat()
        flagged = [m for m in machine.messages if m.is_terminal]
        self.assertEqual(len(flagged), 1)

    def test_new_chat_after_end_resets_to_welcome(self) -> None:
        machine = SessionStateMachine()
        machine.open()
        _add_exchange(machine)
        machine.end_chat()
        old_session = machine.session

        self.assertTrue(machine.new_chat())
        self.assertIsNot(machine.session, old_session)
        self.assertEqual(len(machine.messages), 1)
        self.assertEqual(machine.messages[0].content, Translator().text(WELCOME))
        self.assertFalse(machine.session.ended)
        self.assertEqual(machine.phase, SessionPhase.OPEN_ACTIVE)
        self.assertTrue(machine.can_send)
        # The discarded session is left untouched.
        self.assertEqual(len(old_session), 4)

    def test_new_chat_is_noop_unless_ended(self) -> None:
        machine = SessionStateMachine()
        machine.open()
        self.assertFalse(machine.new_chat())
        self.assertEqual(machine.phase, SessionPhase.OPEN_EMPTY)

    def test_closed_ended_session_reopens_then_new_chat(self) -> None:
        machine = SessionStateMachine()
        machine.open()
        _add_exchange(machine)
        machine.end_chat()
        machine.close()
        machine.open()
        machine.new_chat()
        self.assertEqual(len(machine.messages), 1)
        self.assertEqual(machine.messages[0].content, Translator().text(WELCOME))


class MessageLogTests(unittest.TestCase):
    """Validate ids, stale-session guard, and observer events."""

    def test_ids_are_unique_across_new_chats(self) -> None:
        machine = SessionStateMachine(id_factory=counter_ids("m"))
        machine.open()
        _add_exchange(machine)
        machine.end_chat()
        machine.new_chat()
        self.assertEqual(machine.messages[0].id, "m-5")

    def test_append_to_replaced_session_is_refused(self) -> None:
        machine = SessionStateMachine()
        machine.open()
        _add_exchange(machine)
        stale = machine.session
        machine.end_chat()
        machine.new_chat()
        late = machine.create_message(Role.ASSISTANT, "late reply")
        self.assertFalse(machine.append(late, stale))
        self.assertNotIn(late, machine.messages)
        self.assertNotIn(late, stale.messages)

    def test_messages_snapshot_is_immutable(self) -> None:
        machine = SessionStateMachine()
        machine.open()
        self.assertIsInstance(machine.messages, tuple)

    def test_events_are_published(self) -> None:
        machine = SessionStateMachine()
        seen: list[str] = []

        def record(event: Event) -> None:
            seen.append(event.name)

        for name in (MESSAGE_APPENDED, PHASE_CHANGED, SESSION_RESET):
            machine.bus.subscribe(name, record)

        machine.open()
        _add_exchange(machine)
        machine.end_chat()
        machine.new_chat()

        self.assertEqual(seen[:2], [MESSAGE_APPENDED, PHASE_CHANGED])
        self.assertIn(SESSION_RESET, seen)
        self.assertEqual(seen[-1], PHASE_CHANGED)

    def test_phase_transition_is_logged(self) -> None:
        machine = SessionStateMachine()
        with self.assertLogs("support_chat.state", level="INFO") as logs:
            machine.open()
        self.assertTrue(any("session.phase.transition" in line for line in logs.output))


if __name__ == "__main__":
    unittest.main()
