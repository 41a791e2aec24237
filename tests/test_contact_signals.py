from __future__ import annotations

import pytest

from frontdesk.models import ContactSignals, KnownContact
from frontdesk.services.contact_signals import (
    extract_contact_signals,
    extract_email,
    extract_phone,
    merge_contact_signals,
)


def test_extract_email_lowercases() -> None:
    assert extract_email("You can email me at John.Smith@Gmail.com thanks") == "john.smith@gmail.com"


@pytest.mark.parametrize(
    "message",
    [
        "my email is you@example.com",
        "user@company.org",
        "demo@frontdesk.io",
        "fake.person@mail.com",
        "no address here",
        "",
        None,
    ],
)
def test_extract_email_ignores_placeholders(message) -> None:
    assert extract_email(message) is None


def test_extract_email_skips_placeholder_then_finds_real() -> None:
    assert extract_email("not you@example.com but maria@outlook.com") == "maria@outlook.com"


@pytest.mark.parametrize(
    "message,expected",
    [
        ("call me at 555-123-4567", "555-123-4567"),
        ("my number is (555) 123-4567", "(555) 123-4567"),
        ("5551234567 works best", "5551234567"),
        ("+1 555 123 4567", "+1 555 123 4567"),
    ],
)
def test_extract_phone(message: str, expected: str) -> None:
    assert extract_phone(message) == expected


@pytest.mark.parametrize("message", ["I have 3 kids", "room 12", "", None])
def test_extract_phone_ignores_short_numbers(message) -> None:
    assert extract_phone(message) is None


def test_extract_contact_signals() -> None:
    signals = extract_contact_signals("I'm Sam, 555.987.6543 or sam@proton.me")

    assert signals.email == "sam@proton.me"
    assert signals.phone == "555.987.6543"
    assert signals.has_any() is True


def test_extract_contact_signals_empty() -> None:
    signals = extract_contact_signals("Do you take Medicaid?")
    assert signals == ContactSignals()
    assert signals.has_any() is False


def test_merge_only_fills_missing_fields() -> None:
    existing = KnownContact(email="old@outlook.com")
    updated, merged = merge_contact_signals(
        existing,
        ContactSignals(email="new@outlook.com", phone="555-123-4567"),
    )

    assert updated is True
    assert merged.email is None
    assert merged.phone == "555-123-4567"


def test_merge_no_new_signals() -> None:
    existing = KnownContact(email="old@outlook.com", phone="555-000-1111")
    updated, merged = merge_contact_signals(existing, ContactSignals(email="x@outlook.com"))

    assert updated is False
    assert merged.has_any() is False
