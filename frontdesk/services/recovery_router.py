"""
Deterministic intent routing for sober living / recovery house conversations.

The code decides the intent and the follow-up action; the generative layer
only writes the tone of the reply. Each category is a fixed tuple of
case-insensitive regular expressions and a message belongs to the first
category in ``ROUTING_ORDER`` with any pattern matching. Crisis is always
checked first: safety dominates conversion, so "I want to die, can I book a
tour?" is a crisis and never an admissions lead.

Classification is single-turn and stateless. The only side effect is one
structured log event on crisis detection, with the message content redacted.
"""

from __future__ import annotations

import re
from typing import Any, Iterable, Optional

from ..intents import CallPreference, Confidence, RecoveryIntent, SuggestedAction
from ..models.recovery import RecoveryRouteResult
from .structured_logger import REDACTED, structured_logger


def _compile(*patterns: str) -> tuple[re.Pattern[str], ...]:
    return tuple(re.compile(pattern, re.IGNORECASE) for pattern in patterns)


CRISIS_PATTERNS = _compile(
    r"\b(suicid\w*|kill\s*(myself|me)|end\s*(my\s*life|it\s*all)|hurt\s*myself|self[\s-]?harm\w*)\b",
    r"\b(overdos\w*|od'?ing|dying|want\s*to\s*die|don'?t\s*want\s*to\s*live)\b",
    r"\b(emergency|crisis|in\s*danger|unsafe)\b",
)

ADMISSIONS_PATTERNS = _compile(
    r"\b(tour|visit|see\s*the\s*(place|facility|house)|come\s*(by|in|visit))\b",
    r"\b(intake|admissions?|apply|application|get\s*in|move\s*in|enroll)\b",
    r"\b(call\s*me|call\s*back|have\s*someone\s*call|someone\s*to\s*call)\b",
    r"\b(schedule|book|set\s*up)\s*(a\s*)?(tour|call|consultation|meeting|visit)\b",
    r"\b(my\s*(brother|son|husband|friend|loved\s*one|family\s*member)\s*needs?\s*help)\b",
    r"\b(looking\s*for\s*(a\s*)?(place|help|sober\s*living|recovery))\b",
    r"\b(need\s*help|seeking\s*help|getting\s*help)\b",
)

PRICING_PATTERNS = _compile(
    r"\b(cost|price|pricing|how\s*much|fee|fees|rate|rates|afford|expensive|cheap)\b",
    r"\b(weekly|monthly)\s*(rate|cost|fee|rent|payment)\b",
    r"\$\s?\d|\b(dollars?|money|budget)\b",
)

INSURANCE_PATTERNS = _compile(
    r"\b(insurance|insured|coverage|covered|medicaid|medicare|blue\s*cross|aetna|cigna|united)\b",
    r"\b(pay(ment)?\s*(plan|option|arrangement)s?|financing|scholarships?|sliding\s*scale)\b",
    r"\b(accept|take)\s*(insurance|medicaid|medicare)\b",
)

AVAILABILITY_PATTERNS = _compile(
    r"\b(availab\w*|openings?|open\s*beds?|beds?\s*available|vacancy|vacancies|space|rooms?\s*available)\b",
    r"\b(wait\s*list|waiting\s*list|how\s*long|when\s*can\s*I)\b",
    r"\b(spot|spots)\s*(open|available)\b",
)

ELIGIBILITY_PATTERNS = _compile(
    r"\b(probation|parole|court[\s-]?order(ed)?|court\s*mandated?|legal\s*issues?|felony|felonies|criminal|arrest(ed)?)\b",
    r"\b(requirements?|eligible|eligibility|qualify|can\s*I\s*(come|stay|live))\b",
    r"\b(rules?|policy|policies|house\s*rules|allow|allowed|prohibited)\b",
    r"\b(drug\s*tests?|drug\s*testing|ua|urinalysis|breathalyzer|curfew|visitors?)\b",
    r"\b(mat|medication[\s-]?assisted|suboxone|methadone|vivitrol)\b",
)

CONTACT_PATTERNS = _compile(
    r"\b(address|location|where\s*(are\s*you|is\s*it)|directions|find\s*you|drive|how\s*to\s*get)\b",
    r"\b(phone\s*number|call\s*you|contact|reach\s*(you|out))\b",
    r"\b(hours?|open|close|when\s*are\s*you|office\s*hours)\b",
    r"\b(email|website|online)\b",
)

HANDOFF_PATTERNS = _compile(
    r"\b(speak\s*(to|with)\s*(a\s*)?(person|human|someone|staff|manager|real\s*person))\b",
    r"\b(talk\s*(to|with)\s*(a\s*)?(person|human|someone))\b",
    r"\b(real\s*person|live\s*person|not\s*a\s*bot)\b",
    r"\b(manager|supervisor|owner)\b",
)

# Sub-patterns of admissions, used only to pick the call preference.
CALLBACK_PATTERNS = _compile(
    r"\b(call\s*me|call\s*back|have\s*someone\s*call|someone\s*to\s*call|phone\s*call)\b",
    r"\b(reach\s*out|contact\s*me|get\s*back\s*to\s*me)\b",
    r"\b(callback|call[\s-]?back)\b",
)

TOUR_PATTERNS = _compile(
    r"\b(tour|visit|see\s*the\s*(place|facility|house)|come\s*(by|in|visit))\b",
    r"\b(schedule|book|set\s*up)\s*(a\s*)?(tour|visit)\b",
    r"\b(look\s*around|check\s*out\s*the\s*(place|facility|house))\b",
)

FAQ_PATTERNS = _compile(
    r"\b(what\s*(is|are|do)|how\s*(does|do)|tell\s*me\s*about|explain)\b",
    r"\b(program|structure|daily|routine|schedule|activities)\b",
    r"\b(12[\s-]?step|aa|na|meetings?|recovery\s*pathway)\b",
    r"\b(family|visit|visitors?|contact\s*with\s*family)\b",
    r"\b(treatment|outpatient|iop|therapy|counseling)\b",
)

# Order is behaviour: the first category with a matching pattern wins.
ROUTING_ORDER: tuple[tuple[RecoveryIntent, tuple[re.Pattern[str], ...]], ...] = (
    (RecoveryIntent.CRISIS, CRISIS_PATTERNS),
    (RecoveryIntent.HUMAN_HANDOFF, HANDOFF_PATTERNS),
    (RecoveryIntent.ADMISSIONS_INTAKE, ADMISSIONS_PATTERNS),
    (RecoveryIntent.INSURANCE_PAYMENT, INSURANCE_PATTERNS),
    (RecoveryIntent.AVAILABILITY, AVAILABILITY_PATTERNS),
    (RecoveryIntent.RULES_ELIGIBILITY, ELIGIBILITY_PATTERNS),
    (RecoveryIntent.SERVICES_PRICING, PRICING_PATTERNS),
    (RecoveryIntent.CONTACT_HOURS_LOCATION, CONTACT_PATTERNS),
    (RecoveryIntent.FAQ_OR_INFO, FAQ_PATTERNS),
)

_FIXED_RESULTS: dict[RecoveryIntent, RecoveryRouteResult] = {
    RecoveryIntent.CRISIS: RecoveryRouteResult(
        intent=RecoveryIntent.CRISIS,
        confidence=Confidence.HIGH,
        # No pressure for contact details during a crisis
        should_capture_contact=False,
        suggested_action=SuggestedAction.PROVIDE_CRISIS_RESOURCES,
        reason="Crisis keywords detected - provide resources immediately",
    ),
    RecoveryIntent.HUMAN_HANDOFF: RecoveryRouteResult(
        intent=RecoveryIntent.HUMAN_HANDOFF,
        confidence=Confidence.HIGH,
        should_capture_contact=True,
        suggested_action=SuggestedAction.REQUEST_CALLBACK,
        call_preference=CallPreference.CALLBACK,
        reason="User explicitly requested human contact",
    ),
    RecoveryIntent.INSURANCE_PAYMENT: RecoveryRouteResult(
        intent=RecoveryIntent.INSURANCE_PAYMENT,
        confidence=Confidence.HIGH,
        should_capture_contact=True,
        suggested_action=SuggestedAction.DEFER_TO_STAFF,
        reason="Insurance question - staff follow-up needed",
    ),
    RecoveryIntent.AVAILABILITY: RecoveryRouteResult(
        intent=RecoveryIntent.AVAILABILITY,
        confidence=Confidence.HIGH,
        should_capture_contact=True,
        suggested_action=SuggestedAction.DEFER_TO_STAFF,
        reason="Availability question - staff verification needed",
    ),
    RecoveryIntent.RULES_ELIGIBILITY: RecoveryRouteResult(
        intent=RecoveryIntent.RULES_ELIGIBILITY,
        confidence=Confidence.HIGH,
        should_capture_contact=True,
        suggested_action=SuggestedAction.REQUEST_CALLBACK,
        reason="Eligibility question - cautious response + staff follow-up",
    ),
    RecoveryIntent.SERVICES_PRICING: RecoveryRouteResult(
        intent=RecoveryIntent.SERVICES_PRICING,
        confidence=Confidence.HIGH,
        should_capture_contact=True,
        suggested_action=SuggestedAction.REQUEST_CALLBACK,
        reason="Pricing question - provide info + offer follow-up",
    ),
    RecoveryIntent.CONTACT_HOURS_LOCATION: RecoveryRouteResult(
        intent=RecoveryIntent.CONTACT_HOURS_LOCATION,
        confidence=Confidence.HIGH,
        should_capture_contact=False,
        reason="Contact/location information request",
    ),
    RecoveryIntent.FAQ_OR_INFO: RecoveryRouteResult(
        intent=RecoveryIntent.FAQ_OR_INFO,
        confidence=Confidence.MEDIUM,
        should_capture_contact=False,
        reason="General FAQ or information question",
    ),
    RecoveryIntent.GENERAL: RecoveryRouteResult(
        intent=RecoveryIntent.GENERAL,
        confidence=Confidence.LOW,
        should_capture_contact=False,
        reason="No specific intent detected",
    ),
}

_APOSTROPHES = str.maketrans({"’": "'", "‘": "'"})


def normalize_message(message: Optional[str]) -> str:
    if not message:
        return ""
    return message.translate(_APOSTROPHES).strip()


def matches_any(message: str, patterns: Iterable[re.Pattern[str]]) -> bool:
    """Return True if any pattern matches anywhere in ``message``."""

    return any(pattern.search(message) for pattern in patterns)


def _admissions_result(message: str) -> RecoveryRouteResult:
    # Callback and tour phrasing are independent; callback wins when both match.
    is_callback = matches_any(message, CALLBACK_PATTERNS)
    is_tour = matches_any(message, TOUR_PATTERNS)

    if is_callback:
        call_preference: Optional[CallPreference] = CallPreference.CALLBACK
    elif is_tour:
        call_preference = CallPreference.TOUR
    else:
        call_preference = None

    return RecoveryRouteResult(
        intent=RecoveryIntent.ADMISSIONS_INTAKE,
        confidence=Confidence.HIGH,
        should_capture_contact=True,
        suggested_action=SuggestedAction.REQUEST_CALLBACK if is_callback else SuggestedAction.SCHEDULE_TOUR,
        call_preference=call_preference,
        reason="Callback request detected" if is_callback else "Tour or admissions intent detected",
    )


def _log_crisis_detected() -> None:
    # Message content is never logged; classification must not depend on logging.
    try:
        structured_logger.info(
            "[RecoveryRouter] Crisis intent detected",
            message=REDACTED,
            intent=RecoveryIntent.CRISIS.value,
        )
    except Exception:
        pass


def route_recovery_message(message: Optional[str]) -> RecoveryRouteResult:
    """
    Classify one user message into exactly one recovery intent.

    Total over all inputs: empty, whitespace-only or unmatched text falls
    through to ``general``.
    """

    text = normalize_message(message)

    for intent, patterns in ROUTING_ORDER:
        if not matches_any(text, patterns):
            continue
        if intent is RecoveryIntent.CRISIS:
            _log_crisis_detected()
        if intent is RecoveryIntent.ADMISSIONS_INTAKE:
            return _admissions_result(text)
        return _FIXED_RESULTS[intent]

    return _FIXED_RESULTS[RecoveryIntent.GENERAL]


_SOBER_LIVING_KEYWORDS = ("sober", "recovery", "sober_living", "halfway", "transitional")


def is_sober_living_business(business_type: Optional[str]) -> bool:
    """Check whether a tenant's business type is a sober living / recovery house."""

    if not business_type or not isinstance(business_type, str):
        return False
    lowered = business_type.lower()
    return any(keyword in lowered for keyword in _SOBER_LIVING_KEYWORDS)


INTENT_GUIDANCE: dict[RecoveryIntent, str] = {
    RecoveryIntent.CRISIS: (
        "CRISIS DETECTED: Provide 988/911 resources FIRST. "
        "Offer optional callback ONLY if not in immediate danger."
    ),
    RecoveryIntent.ADMISSIONS_INTAKE: (
        "TOUR/CALLBACK REQUEST: Collect ONLY name + phone OR email + preferred time "
        "(morning/afternoon/evening). NO intake questions. "
        'Confirm: "Staff will reach out. If urgent, call {phone}."'
    ),
    RecoveryIntent.INSURANCE_PAYMENT: (
        'INSURANCE QUESTION: Do NOT guess. Say "Our team can discuss payment options during your call." '
        "Offer to arrange staff callback."
    ),
    RecoveryIntent.AVAILABILITY: (
        'AVAILABILITY QUESTION: Do NOT confirm beds. Say "Availability changes daily." '
        "Offer to arrange staff callback."
    ),
    RecoveryIntent.RULES_ELIGIBILITY: (
        'ELIGIBILITY QUESTION: Be cautious. Say "We work with various situations." '
        "Offer to arrange staff callback."
    ),
    RecoveryIntent.SERVICES_PRICING: (
        "PRICING QUESTION: Share FAQ info if available, then offer staff follow-up for detailed questions."
    ),
    RecoveryIntent.CONTACT_HOURS_LOCATION: "CONTACT INFO: Provide location, phone, hours from business profile.",
    RecoveryIntent.HUMAN_HANDOFF: (
        "HUMAN HANDOFF: Collect name + phone OR email + preferred time. "
        'Confirm: "Staff will reach out. If urgent, call {phone}."'
    ),
    RecoveryIntent.FAQ_OR_INFO: "FAQ/INFO: Answer from knowledge base. If uncertain, offer staff follow-up.",
}

GENERAL_GUIDANCE = "GENERAL: Be helpful and answer from knowledge base. Offer assistance if needed."


def get_intent_guidance(result: RecoveryRouteResult | RecoveryIntent | str | Any) -> str:
    """Instruction string for the response generator, keyed by routed intent."""

    intent = getattr(result, "intent", result)
    if not isinstance(intent, RecoveryIntent):
        try:
            intent = RecoveryIntent(intent)
        except (TypeError, ValueError):
            return GENERAL_GUIDANCE
    return INTENT_GUIDANCE.get(intent, GENERAL_GUIDANCE)


__all__ = [
    "ADMISSIONS_PATTERNS",
    "AVAILABILITY_PATTERNS",
    "CALLBACK_PATTERNS",
    "CONTACT_PATTERNS",
    "CRISIS_PATTERNS",
    "ELIGIBILITY_PATTERNS",
    "FAQ_PATTERNS",
    "GENERAL_GUIDANCE",
    "HANDOFF_PATTERNS",
    "INSURANCE_PATTERNS",
    "INTENT_GUIDANCE",
    "PRICING_PATTERNS",
    "ROUTING_ORDER",
    "TOUR_PATTERNS",
    "get_intent_guidance",
    "is_sober_living_business",
    "matches_any",
    "normalize_message",
    "route_recovery_message",
]
