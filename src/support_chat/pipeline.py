"""Send a user message and record the assistant's answer (or a fallback)."""

from __future__ import annotations

from collections.abc import Callable, Mapping
import logging
from typing import TYPE_CHECKING, Any

from .i18n import CONTACT_SUPPORT, TRANSPORT_FALLBACK
from .models import Action, ActionType, ChatReply, Message, PageContext, Role
from .state import SessionStateMachine

if TYPE_CHECKING:
    from .transport import ChatTransport

LOGGER = logging.getLogger(__name__)

DEFAULT_SUPPORT_EMAIL = "support@foodflow.com"

PageContextReader = Callable[[], PageContext]


def _coerce_reply(raw: ChatReply | Mapping[str, Any]) -> ChatReply:
    if isinstance(raw, ChatReply):
        return raw
    return ChatReply.from_payload(raw)


class SendPipeline:
    """Validate, append, call the transport, and append the outcome.

    The outcome is only observable through the state machine; ``send`` never
    raises for transport failures.
    """

    def __init__(
        self,
        machine: SessionStateMachine,
        transport: ChatTransport,
        page_context_reader: PageContextReader,
        support_email: str = DEFAULT_SUPPORT_EMAIL,
    ) -> None:
        self.machine = machine
        self.transport = transport
        self.page_context_reader = page_context_reader
        self.support_email = support_email

    async def send(self, text: str) -> None:
        message_text = (text or "").strip()
        if not message_text or not self.machine.can_send:
            LOGGER.debug("pipeline.send.skipped", extra={"event": "pipeline.send.skipped"})
            return

        machine = self.machine
        session = machine.session
        machine.append(machine.create_message(Role.USER, message_text), session)
        machine.mark_active()
        machine.set_pending(True, session)
        session.error = ""
        try:
            try:
                page_context = self.page_context_reader()
                raw_reply = await self.transport.send_chat_message(
                    message_text, page_context
                )
                reply = _coerce_reply(raw_reply)
            except Exception as exc:  # noqa: BLE001 - every transport failure degrades to contact.
                LOGGER.warning(
                    "pipeline.transport.failed",
                    extra={
                        "event": "pipeline.transport.failed",
                        "error_type": exc.__class__.__name__,
                    },
                )
                reply_message = self._fallback_message()
            else:
                LOGGER.info(
                    "pipeline.reply.received",
                    extra={
                        "event": "pipeline.reply.received",
                        "intent": reply.intent,
                        "action_count": len(reply.actions),
                        "escalate": reply.escalate,
                    },
                )
                reply_message = machine.create_message(
                    Role.ASSISTANT,
                    reply.reply,
                    reply.actions,
                    intent=reply.intent,
                    escalate=reply.escalate,
                )
            if not machine.append(reply_message, session):
                LOGGER.info(
                    "pipeline.reply.discarded",
                    extra={"event": "pipeline.reply.discarded"},
                )
        finally:
            machine.set_pending(False, session)

    def _fallback_message(self) -> Message:
        translator = self.machine.translator
        contact = Action(
            type=ActionType.CONTACT.value,
            label=translator.text(CONTACT_SUPPORT),
            value=self.support_email,
        )
        return self.machine.create_message(
            Role.ASSISTANT,
            translator.text(TRANSPORT_FALLBACK),
            (contact,),
            escalate=True,
        )
