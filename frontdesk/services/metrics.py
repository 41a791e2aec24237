from __future__ import annotations

from dataclasses import dataclass, field
from threading import Lock
from typing import Dict, List, Optional

from ..intents import RecoveryIntent, get_intent_category


@dataclass
class MetricsSnapshot:
    turns_total: int
    router_applied: int
    gate_skips: int
    intents: Dict[str, int] = field(default_factory=dict)
    categories: Dict[str, int] = field(default_factory=dict)
    crisis_replies: int = 0
    contact_prompts: int = 0
    contact_signals_captured: int = 0
    avg_planning_latency_ms: float = 0.0


class MetricsService:
    def __init__(self) -> None:
        self._lock = Lock()
        self._turns_total = 0
        self._router_applied = 0
        self._gate_skips = 0
        self._intents: Dict[str, int] = {}
        self._categories: Dict[str, int] = {}
        self._crisis_replies = 0
        self._contact_prompts = 0
        self._contact_signals_captured = 0
        self._latencies: List[float] = []
        self._max_latency_samples = 1000

    def record_turn(self, *, intent: Optional[RecoveryIntent], latency_ms: float) -> None:
        """Record a planned chat turn. ``intent`` is None when the router was not applied."""
        with self._lock:
            self._turns_total += 1
            if intent is None:
                self._gate_skips += 1
            else:
                self._router_applied += 1
                key = intent.value
                self._intents[key] = self._intents.get(key, 0) + 1
                category = get_intent_category(intent)
                self._categories[category] = self._categories.get(category, 0) + 1
            self._latencies.append(latency_ms)
            # Keep only recent samples
            if len(self._latencies) > self._max_latency_samples:
                self._latencies = self._latencies[-self._max_latency_samples:]

    def record_crisis_reply(self) -> None:
        with self._lock:
            self._crisis_replies += 1

    def record_contact_prompt(self) -> None:
        """Record when the plan asks the widget to collect contact details."""
        with self._lock:
            self._contact_prompts += 1

    def record_contact_captured(self) -> None:
        with self._lock:
            self._contact_signals_captured += 1

    def snapshot(self) -> MetricsSnapshot:
        with self._lock:
            avg_latency = sum(self._latencies) / len(self._latencies) if self._latencies else 0.0
            return MetricsSnapshot(
                turns_total=self._turns_total,
                router_applied=self._router_applied,
                gate_skips=self._gate_skips,
                intents=dict(self._intents),
                categories=dict(self._categories),
                crisis_replies=self._crisis_replies,
                contact_prompts=self._contact_prompts,
                contact_signals_captured=self._contact_signals_captured,
                avg_planning_latency_ms=avg_latency,
            )

    def reset(self) -> None:
        with self._lock:
            self._turns_total = 0
            self._router_applied = 0
            self._gate_skips = 0
            self._intents = {}
            self._categories = {}
            self._crisis_replies = 0
            self._contact_prompts = 0
            self._contact_signals_captured = 0
            self._latencies = []


_metrics_service = MetricsService()


def get_metrics_service() -> MetricsService:
    return _metrics_service
