from frontdesk.config import Settings
from frontdesk.services.crisis_response import CrisisResponder
from frontdesk.services.metrics import get_metrics_service


def test_recovery_tenant_gets_extended_resources(settings: Settings) -> None:
    text = CrisisResponder.get_crisis_response("sober_living", settings=settings)

    assert "911" in text
    assert "988" in text
    assert "1-800-662-4357" in text
    assert "no pressure" in text


def test_other_tenants_get_short_reply(settings: Settings) -> None:
    text = CrisisResponder.get_crisis_response("dental_clinic", settings=settings)
    assert text == "If you are in crisis, please call 911 or your local emergency number."


def test_configured_template_wins(settings: Settings) -> None:
    text = CrisisResponder.get_crisis_response("recovery", "  Please call 988 now.  ", settings=settings)
    assert text == "Please call 988 now."


def test_blank_template_is_ignored(settings: Settings) -> None:
    text = CrisisResponder.get_crisis_response(None, "   ", settings=settings)
    assert text == CrisisResponder.GENERIC_TEMPLATE.format(emergency="911")


def test_numbers_come_from_settings() -> None:
    custom = Settings(emergency_number="112", crisis_lifeline="116 123", samhsa_helpline="0800 000")
    text = CrisisResponder.get_crisis_response("Halfway House", settings=custom)

    assert "Call 112" in text
    assert "116 123" in text
    assert "0800 000" in text


def test_crisis_reply_is_counted(settings: Settings) -> None:
    CrisisResponder.get_crisis_response("recovery", settings=settings)
    assert get_metrics_service().snapshot().crisis_replies == 1


def test_detect_crisis_ignores_case_and_punctuation() -> None:
    assert CrisisResponder.detect_crisis_in_message("I want to END-IT all!!", ["end it"]) is True
    assert CrisisResponder.detect_crisis_in_message("thinking about suicide.", ["Suicide"]) is True


def test_detect_crisis_without_keywords_or_message() -> None:
    assert CrisisResponder.detect_crisis_in_message("I want to kill myself", []) is False
    assert CrisisResponder.detect_crisis_in_message("I want to kill myself", None) is False
    assert CrisisResponder.detect_crisis_in_message("", ["suicide"]) is False
    assert CrisisResponder.detect_crisis_in_message("hello", ["", "   "]) is False


def test_detect_crisis_no_match() -> None:
    assert CrisisResponder.detect_crisis_in_message("When is my cleaning?", ["suicide", "overdose"]) is False
