from __future__ import annotations

from enum import StrEnum
from typing import Literal


class RecoveryIntent(StrEnum):
    """Intents recognised by the recovery-housing router."""

    CRISIS = "crisis"
    ADMISSIONS_INTAKE = "admissions_intake"
    FAQ_OR_INFO = "faq_or_info"
    SERVICES_PRICING = "services_pricing"
    INSURANCE_PAYMENT = "insurance_payment"
    AVAILABILITY = "availability"
    RULES_ELIGIBILITY = "rules_eligibility"
    CONTACT_HOURS_LOCATION = "contact_hours_location"
    HUMAN_HANDOFF = "human_handoff"
    GENERAL = "general"


class Confidence(StrEnum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class SuggestedAction(StrEnum):
    """Next flow the conversation layer should start."""

    SCHEDULE_TOUR = "schedule_tour"
    REQUEST_CALLBACK = "request_callback"
    PROVIDE_CRISIS_RESOURCES = "provide_crisis_resources"
    DEFER_TO_STAFF = "defer_to_staff"


class CallPreference(StrEnum):
    TOUR = "tour"
    CALLBACK = "callback"


IntentCategory = Literal["safety", "conversion", "staff_followup", "info", "other"]

STAFF_FOLLOWUP_INTENTS: set[RecoveryIntent] = {
    RecoveryIntent.INSURANCE_PAYMENT,
    RecoveryIntent.AVAILABILITY,
    RecoveryIntent.RULES_ELIGIBILITY,
    RecoveryIntent.SERVICES_PRICING,
}

CONVERSION_INTENTS: set[RecoveryIntent] = {
    RecoveryIntent.ADMISSIONS_INTAKE,
    RecoveryIntent.HUMAN_HANDOFF,
}

INFO_INTENTS: set[RecoveryIntent] = {
    RecoveryIntent.CONTACT_HOURS_LOCATION,
    RecoveryIntent.FAQ_OR_INFO,
}

_INTENT_CATEGORY_LOOKUP: dict[RecoveryIntent, IntentCategory] = {RecoveryIntent.CRISIS: "safety"}
for intent in CONVERSION_INTENTS:
    _INTENT_CATEGORY_LOOKUP[intent] = "conversion"
for intent in STAFF_FOLLOWUP_INTENTS:
    _INTENT_CATEGORY_LOOKUP[intent] = "staff_followup"
for intent in INFO_INTENTS:
    _INTENT_CATEGORY_LOOKUP[intent] = "info"


def get_intent_category(intent: str | RecoveryIntent | None) -> IntentCategory:
    """Map an intent to the coarse bucket counted in ``MetricsSnapshot.categories``."""

    if intent is None:
        return "other"
    if isinstance(intent, RecoveryIntent):
        intent_enum = intent
    else:
        try:
            intent_enum = RecoveryIntent(intent)
        except ValueError:
            return "other"
    return _INTENT_CATEGORY_LOOKUP.get(intent_enum, "other")
