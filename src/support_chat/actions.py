"""Display labels and icons for quick actions offered by the assistant."""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

from .i18n import CONTACT_SUPPORT, Translator
from .models import Action, ActionType

DEFAULT_CONTACT_LABEL = "Contact Support"

NAVIGATION_TYPES = frozenset({ActionType.NAVIGATE.value, ActionType.LINK.value})

# Canonical labels emitted by the support backend.
LABEL_KEYS: Mapping[str, str] = MappingProxyType(
    {
        "Create Donation": "actions.createDonation",
        "My Messages": "actions.myMessages",
        "Settings": "actions.settings",
        "Browse Food": "actions.browseFood",
        "My Claims": "actions.myClaims",
        "My Donations": "actions.myDonations",
        "Help Center": "actions.helpCenter",
        "Email Support": "actions.emailSupport",
        "Contact Support": CONTACT_SUPPORT,
        "Dashboard": "actions.dashboard",
    }
)

# Internal routes, used when the backend sends a label the client does not know.
VALUE_KEYS: Mapping[str, str] = MappingProxyType(
    {
        "/donor": "actions.dashboard",
        "/receiver": "actions.dashboard",
        "/admin": "actions.dashboard",
        "/donor/list": "actions.myDonations",
        "/receiver/browse": "actions.browseFood",
        "/receiver/my-claims": "actions.myClaims",
        "/donor/messages": "actions.myMessages",
        "/receiver/messages": "actions.myMessages",
        "/donor/settings": "actions.settings",
        "/receiver/settings": "actions.settings",
        "/admin/settings": "actions.settings",
        "/donor/help": "actions.helpCenter",
        "/receiver/help": "actions.helpCenter",
        "/admin/help": "actions.helpCenter",
    }
)


def _localized(key: str, fallback: str, translator: Translator | None) -> str:
    if translator is None:
        return fallback
    value = translator.get(key)
    return value if value else fallback


def resolve_label(action: Action, translator: Translator | None = None) -> str:
    """Return the label to display for ``action``. Never raises."""
    key = LABEL_KEYS.get(action.label)
    if key is not None:
        return _localized(key, action.label, translator)

    key = VALUE_KEYS.get(action.value)
    if key is not None:
        return _localized(key, action.label, translator)

    if action.type == ActionType.CONTACT.value and "@" in action.value:
        return action.label or _localized(
            CONTACT_SUPPORT, DEFAULT_CONTACT_LABEL, translator
        )

    return action.label


def action_icon(action: Action) -> str | None:
    """Name of the icon drawn next to an action button, if any."""
    if action.type == ActionType.CONTACT.value:
        return "mail" if "@" in action.value else "phone"
    if action.type in NAVIGATION_TYPES:
        return "external-link"
    return None
