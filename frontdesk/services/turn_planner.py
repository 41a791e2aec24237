"""
Chat-turn planning for recovery housing tenants.

For each inbound message the planner decides, before any generative model is
called, what the response step is allowed to do:

1. capture contact details mentioned in the message,
2. gate on the tenant's business type,
3. route the message and resolve the guidance string,
4. short-circuit crises with a fixed safety reply.

Tenants outside the recovery gate still get step 4 when the message contains
one of their configured ``crisis_keywords``; they receive the generic reply.

The returned ``TurnPlan`` is consumed by the response generator and the
widget; neither lives in this package.
"""

from __future__ import annotations

import logging
import time
from typing import Optional
from uuid import uuid4

from ..config import Settings, get_settings
from ..intents import RecoveryIntent
from ..models import ChatTurnRequest, ContactSignals, Reply, TurnPlan
from ..utils.logging import get_turn_logger
from .contact_signals import extract_contact_signals, merge_contact_signals
from .crisis_response import CrisisResponder
from .metrics import get_metrics_service
from .recovery_router import get_intent_guidance, is_sober_living_business, route_recovery_message

logger = logging.getLogger(__name__)

PHONE_PLACEHOLDER = "{phone}"
DEFAULT_PHONE_TEXT = "our main line"


def render_guidance(guidance: str, business_phone: Optional[str]) -> str:
    return guidance.replace(PHONE_PLACEHOLDER, (business_phone or "").strip() or DEFAULT_PHONE_TEXT)


class TurnPlanner:
    def __init__(self, settings: Settings | None = None) -> None:
        self._settings = settings or get_settings()

    def plan(self, request: ChatTurnRequest) -> TurnPlan:
        start_time = time.perf_counter()
        metrics = get_metrics_service()

        conversation_id = request.conversation_id or str(uuid4())
        trace_id = request.trace_id or (uuid4().hex if self._settings.enable_request_tracing else None)
        request_logger = get_turn_logger(
            logger,
            trace_id=trace_id,
            tenant_id=request.tenant_id,
            conversation_id=conversation_id,
            business_type=request.business_type,
        )

        signals, contact_updated = self._capture_contact(request)
        if contact_updated:
            metrics.record_contact_captured()
            request_logger.info(
                "Contact signals captured email=%s phone=%s",
                bool(signals.email),
                bool(signals.phone),
            )

        if not self._settings.enable_recovery_router or not is_sober_living_business(request.business_type):
            request_logger.debug("Recovery router skipped")
            crisis_detected = CrisisResponder.detect_crisis_in_message(request.message, request.crisis_keywords)
            skipped_reply: Reply | None = None
            if crisis_detected:
                request_logger.info("Crisis keyword matched")
                skipped_reply = self._crisis_reply(request)
            metrics.record_turn(intent=None, latency_ms=_elapsed_ms(start_time))
            return TurnPlan(
                conversation_id=conversation_id,
                trace_id=trace_id,
                router_applied=False,
                reply=skipped_reply,
                crisis_detected=crisis_detected,
                contact_signals=signals,
                contact_updated=contact_updated,
            )

        route = route_recovery_message(request.message)
        request_logger = request_logger.bind(intent=route.intent.value)
        guidance = render_guidance(get_intent_guidance(route), request.business_phone)

        crisis_detected = route.intent is RecoveryIntent.CRISIS
        reply = self._crisis_reply(request) if crisis_detected else None

        has_contact = bool(
            request.known_contact.email
            or request.known_contact.phone
            or signals.has_any()
        )
        request_contact = route.should_capture_contact and not has_contact
        if request_contact:
            metrics.record_contact_prompt()

        # Message text is never logged here; crisis disclosures must not reach the logs.
        request_logger.info(
            "Recovery route confidence=%s action=%s call_preference=%s request_contact=%s",
            route.confidence.value,
            route.suggested_action.value if route.suggested_action else "-",
            route.call_preference.value if route.call_preference else "-",
            request_contact,
        )
        metrics.record_turn(intent=route.intent, latency_ms=_elapsed_ms(start_time))

        return TurnPlan(
            conversation_id=conversation_id,
            trace_id=trace_id,
            router_applied=True,
            route=route,
            guidance=guidance,
            reply=reply,
            crisis_detected=crisis_detected,
            request_contact=request_contact,
            contact_signals=signals,
            contact_updated=contact_updated,
        )

    def _crisis_reply(self, request: ChatTurnRequest) -> Reply:
        text = CrisisResponder.get_crisis_response(
            request.business_type,
            request.crisis_template,
            settings=self._settings,
        )
        return Reply(text=text, tone="supportive")

    def _capture_contact(self, request: ChatTurnRequest) -> tuple[ContactSignals, bool]:
        if not self._settings.enable_contact_signals:
            return ContactSignals(), False
        updated, merged = merge_contact_signals(request.known_contact, extract_contact_signals(request.message))
        return merged, updated


def _elapsed_ms(start_time: float) -> float:
    return (time.perf_counter() - start_time) * 1000


def get_turn_planner() -> TurnPlanner:
    return TurnPlanner(settings=get_settings())


__all__ = ["DEFAULT_PHONE_TEXT", "TurnPlanner", "get_turn_planner", "render_guidance"]
