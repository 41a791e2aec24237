from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict

from ..intents import CallPreference, Confidence, RecoveryIntent, SuggestedAction


class RecoveryRouteResult(BaseModel):
    """Classification of a single inbound message. Created per turn, never stored."""

    model_config = ConfigDict(frozen=True)

    intent: RecoveryIntent
    confidence: Confidence
    should_capture_contact: bool
    suggested_action: Optional[SuggestedAction] = None
    call_preference: Optional[CallPreference] = None
    reason: str


class ContactSignals(BaseModel):
    """Contact details spotted in free text."""

    email: Optional[str] = None
    phone: Optional[str] = None

    def has_any(self) -> bool:
        return bool(self.email or self.phone)
