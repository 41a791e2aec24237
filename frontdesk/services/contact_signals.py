"""
Contact details (email, phone) spotted in free-text chat messages.

Run on every inbound user message so a phone number or address mentioned in
passing is captured even outside a booking form. Placeholder addresses and
digit runs that are not 10/11-digit US numbers are ignored.
"""

from __future__ import annotations

import re
from typing import Optional, Tuple

from ..models import ContactSignals, KnownContact

_EMAIL_RE = re.compile(r"\b([a-zA-Z0-9._%+\-]+@[a-zA-Z0-9.\-]+\.[a-zA-Z]{2,})\b")

_PLACEHOLDER_EMAIL_PATTERNS = tuple(
    re.compile(pattern, re.IGNORECASE)
    for pattern in (
        r"example\.com$",
        r"test\.com$",
        r"placeholder",
        r"your.*email",
        r"you@",
        r"user@",
        r"email@",
        r"name@",
        r"xxx",
        r"sample",
        r"fake",
        r"demo@",
    )
)

# (555) 123-4567, 555-123-4567, 555.123.4567, 5551234567, optional +1 / 1 prefix
_PHONE_RE = re.compile(r"\+?1?[-.\s]?\(?\d{3}\)?[-.\s]?\d{3}[-.\s]?\d{4}\b")


def extract_email(message: Optional[str]) -> Optional[str]:
    if not message or not isinstance(message, str):
        return None

    for match in _EMAIL_RE.findall(message):
        if any(pattern.search(match) for pattern in _PLACEHOLDER_EMAIL_PATTERNS):
            continue
        domain = match.split("@", 1)[1]
        if "." in domain and len(domain) >= 4:
            return match.lower()
    return None


def extract_phone(message: Optional[str]) -> Optional[str]:
    if not message or not isinstance(message, str):
        return None

    match = _PHONE_RE.search(message)
    if not match:
        return None
    phone = match.group(0).strip()
    digits = re.sub(r"\D", "", phone)
    if len(digits) == 10 or (len(digits) == 11 and digits.startswith("1")):
        return phone
    return None


def extract_contact_signals(message: Optional[str]) -> ContactSignals:
    return ContactSignals(email=extract_email(message), phone=extract_phone(message))


def merge_contact_signals(
    existing: KnownContact | ContactSignals,
    new_signals: ContactSignals,
) -> Tuple[bool, ContactSignals]:
    """
    Fill only the fields the session does not have yet.

    Returns ``(updated, merged)`` where ``merged`` holds just the newly
    captured values.
    """

    merged = ContactSignals()
    if new_signals.email and not existing.email:
        merged.email = new_signals.email
    if new_signals.phone and not existing.phone:
        merged.phone = new_signals.phone
    return merged.has_any(), merged


__all__ = [
    "extract_contact_signals",
    "extract_email",
    "extract_phone",
    "merge_contact_signals",
]
