"""Static English and French copy for the support chat."""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

DEFAULT_LANGUAGE = "en"

WELCOME = "chat.welcome"
CHAT_ENDED = "chat.ended"
TRANSPORT_FALLBACK = "chat.fallback"
CONTACT_SUPPORT = "actions.contactSupport"

CATALOGS: Mapping[str, Mapping[str, str]] = MappingProxyType(
    {
        "en": MappingProxyType(
            {
                WELCOME: "👋 Hi! I'm the FoodFlow support assistant. How can I help you today?",
                CHAT_ENDED: (
                    "Chat ended. Thank you for using FoodFlow support! If you have "
                    "more questions, feel free to start a new conversation."
                ),
                TRANSPORT_FALLBACK: (
                    "Sorry, I cannot respond right now. Please contact our "
                    "support team directly."
                ),
                CONTACT_SUPPORT: "Contact Support",
                "actions.createDonation": "Create Donation",
                "actions.myMessages": "My Messages",
                "actions.settings": "Settings",
                "actions.browseFood": "Browse Food",
                "actions.myClaims": "My Claims",
                "actions.myDonations": "My Donations",
                "actions.helpCenter": "Help Center",
                "actions.emailSupport": "Email Support",
                "actions.dashboard": "Dashboard",
            }
        ),
        "fr": MappingProxyType(
            {
                WELCOME: (
                    "👋 Bonjour ! Je suis l'assistant de support FoodFlow. "
                    "Comment puis-je vous aider aujourd'hui ?"
                ),
                CHAT_ENDED: (
                    "Chat terminé. Merci d'avoir utilisé le support FoodFlow ! Si vous "
                    "avez d'autres questions, n'hésitez pas à recommencer une "
                    "nouvelle conversation."
                ),
                TRANSPORT_FALLBACK: (
                    "Désolé, je ne peux pas répondre en ce moment. Veuillez "
                    "contacter notre équipe de support directement."
                ),
                CONTACT_SUPPORT: "Contacter le support",
                "actions.createDonation": "Créer un don",
                "actions.myMessages": "Mes messages",
                "actions.settings": "Paramètres",
                "actions.browseFood": "Parcourir les aliments",
                "actions.myClaims": "Mes réclamations",
                "actions.myDonations": "Mes dons",
                "actions.helpCenter": "Centre d'aide",
                "actions.emailSupport": "Écrire au support",
                "actions.dashboard": "Tableau de bord",
            }
        ),
    }
)


class Translator:
    """Look up display strings for one language."""

    def __init__(self, language: str = DEFAULT_LANGUAGE) -> None:
        normalized = (language or "").strip().lower()
        self.language = normalized if normalized in CATALOGS else DEFAULT_LANGUAGE
        self._catalog = CATALOGS[self.language]

    def get(self, key: str) -> str | None:
        """Return the string for ``key`` in this language only."""
        return self._catalog.get(key)

    def text(self, key: str) -> str:
        """Return the string for ``key``, falling back to English, then the key."""
        value = self._catalog.get(key)
        if value is None:
            value = CATALOGS[DEFAULT_LANGUAGE].get(key, key)
        return value
