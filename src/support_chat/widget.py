"""UI-agnostic support chat widget.

A host UI owns one ``SupportChatWidget``, forwards user events to it,
subscribes to its events, and redraws from ``render()``.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from .actions import action_icon, resolve_label
from .content_parser import Block, parse
from .dispatcher import ActionDispatcher, ActionExecutors
from .events import Event
from .i18n import Translator
from .models import Action, Message
from .pipeline import DEFAULT_SUPPORT_EMAIL, PageContextReader, SendPipeline
from .state import IdFactory, SessionPhase, SessionStateMachine

if TYPE_CHECKING:
    from .transport import ChatTransport, HttpChatTransport


@dataclass(frozen=True)
class RenderedAction:
    action: Action
    label: str
    icon: str | None


@dataclass(frozen=True)
class RenderedMessage:
    """A stored message together with its parsed blocks and labelled actions."""

    message: Message
    blocks: tuple[Block, ...]
    actions: tuple[RenderedAction, ...]


class SupportChatWidget:
    """Compose the session state machine, send pipeline, and dispatcher."""

    def __init__(
        self,
        transport: ChatTransport,
        executors: ActionExecutors,
        page_context_reader: PageContextReader,
        language: str = "en",
        support_email: str = DEFAULT_SUPPORT_EMAIL,
        id_factory: IdFactory | None = None,
    ) -> None:
        self.transport = transport
        self.translator = Translator(language)
        self.machine = SessionStateMachine(
            translator=self.translator, id_factory=id_factory
        )
        self.pipeline = SendPipeline(
            self.machine,
            transport,
            page_context_reader,
            support_email=support_email,
        )
        self.dispatcher = ActionDispatcher(executors)

    @classmethod
    def from_config(
        cls,
        config: dict[str, dict[str, Any]],
        executors: ActionExecutors,
        page_context_reader: PageContextReader,
    ) -> SupportChatWidget:
        """Build a widget talking to the configured support API over HTTP."""
        transport = build_transport(config)
        return cls(
            transport,
            executors,
            page_context_reader,
            language=config["support"]["language"],
            support_email=config["support"]["email"],
        )

    @property
    def phase(self) -> SessionPhase:
        return self.machine.phase

    @property
    def messages(self) -> tuple[Message, ...]:
        return self.machine.messages

    @property
    def pending(self) -> bool:
        return self.machine.pending

    def subscribe(self, event_name: str, handler: Callable[[Event], Any]) -> None:
        self.machine.bus.subscribe(event_name, handler)

    def open(self) -> None:
        self.machine.open()

    def close(self) -> None:
        self.machine.close()

    def toggle(self) -> None:
        self.machine.toggle()

    def end_chat(self) -> bool:
        return self.machine.end_chat()

    def new_chat(self) -> bool:
        return self.machine.new_chat()

    async def send(self, text: str) -> None:
        await self.pipeline.send(text)

    def dispatch(self, action: Action) -> None:
        self.dispatcher.dispatch(action)

    def render_message(self, message: Message) -> RenderedMessage:
        return RenderedMessage(
            message=message,
            blocks=tuple(parse(message.content)),
            actions=tuple(
                RenderedAction(
                    action=action,
                    label=resolve_label(action, self.translator),
                    icon=action_icon(action),
                )
                for action in message.actions
            ),
        )

    def render(self) -> list[RenderedMessage]:
        """Parse every stored message; nothing parsed is kept between calls."""
        return [self.render_message(message) for message in self.messages]

    async def aclose(self) -> None:
        close = getattr(self.transport, "aclose", None)
        if close is not None:
            await close()


def build_transport(config: dict[str, dict[str, Any]]) -> HttpChatTransport:
    from .transport import HttpChatTransport

    api = config["api"]
    return HttpChatTransport(
        base_url=api["base_url"],
        chat_path=api["chat_path"],
        timeout=float(api["timeout"]),
        retries=int(api["retries"]),
        retry_backoff_seconds=float(api["retry_backoff_seconds"]),
        auth_token=api["auth_token"],
    )
