"""Value types shared by the session, pipeline, and dispatcher."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum
import logging
from typing import Any
from urllib.parse import parse_qs, urlparse

LOGGER = logging.getLogger(__name__)


class Role(str, Enum):
    """Author of a message in the session log."""

    USER = "user"
    ASSISTANT = "assistant"


class ActionType(str, Enum):
    """Action types understood by the client.

    ``link`` is the name the support backend uses for navigation actions.
    """

    NAVIGATE = "navigate"
    LINK = "link"
    CONTACT = "contact"
    COPY = "copy"


@dataclass(frozen=True)
class Action:
    """A suggested follow-up attached to an assistant message."""

    type: str
    label: str
    value: str

    @classmethod
    def from_payload(cls, payload: Any) -> Action | None:
        """Build an action from a reply entry, or ``None`` when it has no value."""
        if isinstance(payload, Action):
            return payload
        if not isinstance(payload, Mapping):
            return None
        value = payload.get("value")
        if not isinstance(value, str):
            return None
        label = payload.get("label")
        if label is None:
            label = value
        return cls(
            type=str(payload.get("type") or "").strip().lower(),
            label=str(label),
            value=value,
        )

    def to_payload(self) -> dict[str, str]:
        return {"type": self.type, "label": self.label, "value": self.value}


def normalize_actions(raw: Any) -> tuple[Action, ...]:
    """Convert a reply's ``actions`` field into actions, skipping bad entries."""
    if raw is None:
        return ()
    if isinstance(raw, (str, bytes, Mapping)) or not isinstance(raw, Iterable):
        LOGGER.warning(
            "reply.actions.invalid",
            extra={"event": "reply.actions.invalid", "actions_type": type(raw).__name__},
        )
        return ()
    actions: list[Action] = []
    for entry in raw:
        action = Action.from_payload(entry)
        if action is None:
            LOGGER.warning(
                "reply.action.skipped",
                extra={"event": "reply.action.skipped", "entry": repr(entry)[:200]},
            )
            continue
        actions.append(action)
    return tuple(actions)


@dataclass(frozen=True)
class Message:
    """One entry in the session log. Never mutated after creation."""

    id: str
    role: Role
    content: str
    actions: tuple[Action, ...] = ()
    is_terminal: bool = False
    intent: str | None = None
    escalate: bool = False


@dataclass(frozen=True)
class ChatReply:
    """Reply payload returned by the support chat endpoint."""

    reply: str
    intent: str | None = None
    actions: tuple[Action, ...] = field(default_factory=tuple)
    escalate: bool = False

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> ChatReply:
        reply = payload.get("reply")
        intent = payload.get("intent")
        return cls(
            reply="" if reply is None else str(reply),
            intent=intent if isinstance(intent, str) else None,
            actions=normalize_actions(payload.get("actions")),
            escalate=bool(payload.get("escalate", False)),
        )


@dataclass(frozen=True)
class PageContext:
    """Where the user was when they asked."""

    route: str = "/"
    donation_id: str | None = None
    claim_id: str | None = None

    @classmethod
    def from_url(cls, url: str) -> PageContext:
        """Read the route and ``donationId``/``claimId`` query parameters."""
        parsed = urlparse(url)
        query = parse_qs(parsed.query)

        def _first(name: str) -> str | None:
            values = query.get(name) or []
            return values[0] if values and values[0] else None

        return cls(
            route=parsed.path or "/",
            donation_id=_first("donationId"),
            claim_id=_first("claimId"),
        )

    def to_payload(self) -> dict[str, str | None]:
        return {
            "route": self.route,
            "donationId": self.donation_id,
            "claimId": self.claim_id,
        }
