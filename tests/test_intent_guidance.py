from __future__ import annotations

import pytest

from frontdesk.intents import RecoveryIntent, get_intent_category
from frontdesk.services.recovery_router import (
    GENERAL_GUIDANCE,
    get_intent_guidance,
    route_recovery_message,
)


@pytest.mark.parametrize("intent", list(RecoveryIntent))
def test_guidance_exists_for_every_intent(intent: RecoveryIntent) -> None:
    guidance = get_intent_guidance(intent)
    assert isinstance(guidance, str)
    assert guidance.strip()


def test_guidance_is_distinct_per_intent() -> None:
    texts = {get_intent_guidance(intent) for intent in RecoveryIntent}
    assert len(texts) == len(RecoveryIntent)


def test_guidance_accepts_route_result() -> None:
    result = route_recovery_message("Do you take Medicaid?")
    guidance = get_intent_guidance(result)

    assert guidance.startswith("INSURANCE QUESTION")
    assert "Do NOT guess" in guidance


def test_guidance_accepts_string_value() -> None:
    assert get_intent_guidance("availability").startswith("AVAILABILITY QUESTION")


def test_crisis_guidance_mentions_resources() -> None:
    guidance = get_intent_guidance(RecoveryIntent.CRISIS)
    assert "988" in guidance
    assert "911" in guidance


def test_booking_guidance_keeps_phone_placeholder() -> None:
    assert "{phone}" in get_intent_guidance(RecoveryIntent.ADMISSIONS_INTAKE)
    assert "{phone}" in get_intent_guidance(RecoveryIntent.HUMAN_HANDOFF)


@pytest.mark.parametrize("value", ["not_an_intent", None, 42, ""])
def test_unknown_intent_falls_back_to_general(value) -> None:
    assert get_intent_guidance(value) == GENERAL_GUIDANCE


def test_general_guidance() -> None:
    assert get_intent_guidance(RecoveryIntent.GENERAL) == GENERAL_GUIDANCE


@pytest.mark.parametrize(
    "intent,expected",
    [
        (RecoveryIntent.CRISIS, "safety"),
        (RecoveryIntent.ADMISSIONS_INTAKE, "conversion"),
        (RecoveryIntent.HUMAN_HANDOFF, "conversion"),
        (RecoveryIntent.INSURANCE_PAYMENT, "staff_followup"),
        (RecoveryIntent.FAQ_OR_INFO, "info"),
        (RecoveryIntent.GENERAL, "other"),
        ("contact_hours_location", "info"),
        ("bogus", "other"),
        (None, "other"),
    ],
)
def test_intent_category(intent, expected) -> None:
    assert get_intent_category(intent) == expected
