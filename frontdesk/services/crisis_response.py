from __future__ import annotations

import re
from typing import Iterable, Optional

from ..config import Settings, get_settings
from .metrics import get_metrics_service
from .recovery_router import is_sober_living_business

_PUNCTUATION_RE = re.compile(r"[^\w\s]")


class CrisisResponder:
    """Fixed safety replies sent instead of a generated answer when a crisis is detected."""

    GENERIC_TEMPLATE = "If you are in crisis, please call {emergency} or your local emergency number."

    RECOVERY_TEMPLATE = (
        "I hear you, and I want you to know that help is available right now.\n"
        "\n"
        "**If you're in immediate danger:**\n"
        "Call {emergency} (Emergency Services)\n"
        "\n"
        "**For crisis support:**\n"
        "Call or text {lifeline} (Suicide & Crisis Lifeline)\n"
        "Call {samhsa} (SAMHSA National Helpline - 24/7, free, confidential)\n"
        "\n"
        "You're not alone in this. If you'd like, you can also share your name and phone number, "
        "and one of our team members can reach out to you when it's safe. "
        "There's no pressure - your well-being comes first."
    )

    @staticmethod
    def detect_crisis_in_message(message: Optional[str], keywords: Iterable[str] | None) -> bool:
        """Substring check against a tenant's configured crisis keywords."""

        if not message or not keywords:
            return False
        normalized = _PUNCTUATION_RE.sub(" ", message.lower())
        for keyword in keywords:
            needle = _PUNCTUATION_RE.sub(" ", (keyword or "").lower()).strip()
            if needle and needle in normalized:
                return True
        return False

    @classmethod
    def get_crisis_response(
        cls,
        business_type: Optional[str],
        template: Optional[str] = None,
        *,
        settings: Settings | None = None,
    ) -> str:
        """A tenant-configured template wins over the built-in replies."""

        get_metrics_service().record_crisis_reply()
        if template and template.strip():
            return template.strip()

        settings = settings or get_settings()
        if is_sober_living_business(business_type):
            return cls.RECOVERY_TEMPLATE.format(
                emergency=settings.emergency_number,
                lifeline=settings.crisis_lifeline,
                samhsa=settings.samhsa_helpline,
            )
        return cls.GENERIC_TEMPLATE.format(emergency=settings.emergency_number)


__all__ = ["CrisisResponder"]
