from __future__ import annotations

import logging
from typing import Any

# Rendered in this order; fields bound later (intent, action) follow the request identity.
TURN_FIELDS = ("trace_id", "tenant", "business", "conv_id", "intent")


class TurnLoggerAdapter(logging.LoggerAdapter):
    """Prefixes every line with the chat turn it belongs to.

    The prefix never carries message text. ``bind`` returns a new adapter, so a
    planner can add the routed intent once it is known without mutating the
    adapter other code already holds.
    """

    def process(self, msg: Any, kwargs: dict[str, Any]) -> tuple[str, dict[str, Any]]:
        parts = [f"{name}={self.extra.get(name) or '-'}" for name in TURN_FIELDS]
        parts.extend(f"{name}={value}" for name, value in self.extra.items() if name not in TURN_FIELDS)
        return f"[turn {' '.join(parts)}] {msg}", kwargs

    def bind(self, **fields: Any) -> "TurnLoggerAdapter":
        merged = dict(self.extra)
        merged.update({key: value for key, value in fields.items() if value is not None})
        return TurnLoggerAdapter(self.logger, merged)


def get_turn_logger(
    logger: logging.Logger | str,
    *,
    trace_id: str | None,
    tenant_id: str | None,
    conversation_id: str | None,
    business_type: str | None = None,
) -> TurnLoggerAdapter:
    base_logger = logging.getLogger(logger) if isinstance(logger, str) else logger
    return TurnLoggerAdapter(
        base_logger,
        {
            "trace_id": trace_id,
            "tenant": tenant_id,
            "business": business_type,
            "conv_id": conversation_id,
        },
    )
