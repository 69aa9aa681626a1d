"""Top-level package for foodflow-support-chat."""

from __future__ import annotations

from importlib import import_module
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .actions import action_icon, resolve_label
    from .config import ensure_config_dir, load_config
    from .content_parser import Block, BlockKind, Span, parse
    from .dispatcher import ActionDispatcher, ActionExecutors
    from .exceptions import (
        ConfigValidationError,
        RateLimitedError,
        ReplyDecodeError,
        SupportChatError,
        SupportConnectionError,
        TransportError,
        TransportHTTPError,
    )
    from .models import Action, ActionType, ChatReply, Message, PageContext, Role
    from .pipeline import SendPipeline
    from .state import Session, SessionPhase, SessionStateMachine
    from .transport import HttpChatTransport
    from .widget import SupportChatWidget

_EXPORTS = {
    "Action": ".models",
    "ActionType": ".models",
    "ChatReply": ".models",
    "Message": ".models",
    "PageContext": ".models",
    "Role": ".models",
    "Block": ".content_parser",
    "BlockKind": ".content_parser",
    "Span": ".content_parser",
    "parse": ".content_parser",
    "action_icon": ".actions",
    "resolve_label": ".actions",
    "ActionDispatcher": ".dispatcher",
    "ActionExecutors": ".dispatcher",
    "Session": ".state",
    "SessionPhase": ".state",
    "SessionStateMachine": ".state",
    "SendPipeline": ".pipeline",
    "HttpChatTransport": ".transport",
    "SupportChatWidget": ".widget",
    "ensure_config_dir": ".config",
    "load_config": ".config",
    "ConfigValidationError": ".exceptions",
    "RateLimitedError": ".exceptions",
    "ReplyDecodeError": ".exceptions",
    "SupportChatError": ".exceptions",
    "SupportConnectionError": ".exceptions",
    "TransportError": ".exceptions",
    "TransportHTTPError": ".exceptions",
}

__all__ = sorted(_EXPORTS)


def __getattr__(name: str) -> Any:
    """Lazily import symbols so ``import support_chat`` stays cheap."""
    module_name = _EXPORTS.get(name)
    if module_name is None:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
    return getattr(import_module(module_name, __name__), name)
