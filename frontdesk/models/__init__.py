from __future__ import annotations

from typing import List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from ..intents import CallPreference, Confidence, RecoveryIntent, SuggestedAction
from .assistant import Reply
from .recovery import ContactSignals, RecoveryRouteResult


class KnownContact(BaseModel):
    """Contact details the session already holds."""

    model_config = ConfigDict(extra="ignore")

    email: Optional[str] = None
    phone: Optional[str] = None


class ChatTurnRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    conversation_id: Optional[str] = None
    trace_id: Optional[str] = None
    message: str
    tenant_id: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("tenant_id", "client_id", "bot_id"),
    )
    business_type: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("business_type", "businessType"),
    )
    business_phone: Optional[str] = None
    crisis_template: Optional[str] = None
    # Tenant-configured keywords; used for crisis detection when the recovery router does not apply
    crisis_keywords: List[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("crisis_keywords", "onCrisisKeywords"),
    )
    known_contact: KnownContact = Field(default_factory=KnownContact)


class TurnPlan(BaseModel):
    """Decision bundle handed to the response generator for one chat turn."""

    conversation_id: str
    trace_id: Optional[str] = None
    router_applied: bool
    route: Optional[RecoveryRouteResult] = None
    guidance: Optional[str] = None
    reply: Optional[Reply] = None
    crisis_detected: bool = False
    request_contact: bool = False
    contact_signals: ContactSignals = Field(default_factory=ContactSignals)
    contact_updated: bool = False


__all__ = [
    "CallPreference",
    "ChatTurnRequest",
    "Confidence",
    "ContactSignals",
    "KnownContact",
    "RecoveryIntent",
    "RecoveryRouteResult",
    "Reply",
    "SuggestedAction",
    "TurnPlan",
]
