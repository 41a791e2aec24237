"""
JSON structured logging with PII redaction.

Events are rendered as one JSON object per line::

    {"timestamp": "...", "level": "info", "message": "...", "context": {...}}

Every string that reaches the output (message and context values) goes through
``redact_pii``; context keys that look like credentials are replaced wholesale.

Emission is best-effort: ``StructuredLogger`` catches everything raised while
building or emitting an event. The event message is positional-only, so a
``message=`` context key never collides with it.

Emission is synchronous by default: records propagate through whatever
handlers the host application has configured. Once ``start_background_logging``
has been called (the FastAPI lifespan does this when ``STRUCTURED_LOG_ASYNC``
is on), records are pushed onto a queue and written by a ``QueueListener``
thread, so the caller never waits on handler I/O. Library users who import
the router directly and need non-blocking emission call
``start_background_logging`` themselves at startup.
"""

from __future__ import annotations

import json
import logging
import queue
import re
from datetime import datetime, timezone
from logging.handlers import QueueHandler, QueueListener
from threading import Lock
from typing import Any

STRUCTURED_LOGGER_NAME = "frontdesk.structured"

_fallback_logger = logging.getLogger(__name__)

_PII_PATTERNS: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"([a-zA-Z0-9._%+-]+)@([a-zA-Z0-9.-]+\.[a-zA-Z]{2,})"), "[EMAIL_REDACTED]"),
    (re.compile(r"\b\d{3}[-.\s]?\d{3}[-.\s]?\d{4}\b"), "[PHONE_REDACTED]"),
    (re.compile(r"\b\d{3}[-.\s]?\d{2}[-.\s]?\d{4}\b"), "[SSN_REDACTED]"),
    (re.compile(r"\b(?:\d{4}[-\s]?){3}\d{4}\b"), "[CARD_REDACTED]"),
    (re.compile(r'"(password|passwordHash|token|secret|apiKey|api_key)"\s*:\s*"[^"]*"', re.IGNORECASE), r'"\1":"[REDACTED]"'),
    (re.compile(r"Bearer\s+[A-Za-z0-9\-._~+/]+=*"), "Bearer [REDACTED]"),
)

_SENSITIVE_KEYS = ("password", "passwordhash", "token", "secret", "apikey", "api_key", "authorization")

REDACTED = "[REDACTED]"


def redact_pii(text: str) -> str:
    """Mask emails, phone numbers, SSNs, card numbers and credentials in ``text``."""

    result = text
    for pattern, replacement in _PII_PATTERNS:
        result = pattern.sub(replacement, result)
    return result


def _is_sensitive_key(key: str) -> bool:
    lowered = key.lower()
    return any(sensitive in lowered for sensitive in _SENSITIVE_KEYS)


def redact_object(value: Any) -> Any:
    """Recursively redact strings inside dicts, lists and tuples."""

    if value is None:
        return None
    if isinstance(value, str):
        return redact_pii(value)
    if isinstance(value, (list, tuple)):
        return [redact_object(item) for item in value]
    if isinstance(value, dict):
        result: dict[str, Any] = {}
        for key, item in value.items():
            key_str = str(key)
            if _is_sensitive_key(key_str):
                result[key_str] = REDACTED
            else:
                result[key_str] = redact_object(item)
        return result
    return value


def format_event(level: str, message: str, context: dict[str, Any] | None = None) -> str:
    payload: dict[str, Any] = {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "level": level,
        "message": redact_pii(message),
    }
    if context:
        context = dict(context)
        request_id = context.pop("request_id", None)
        if request_id:
            payload["request_id"] = str(request_id)
        redacted = redact_object(context)
        if redacted:
            payload["context"] = redacted
    return json.dumps(payload, ensure_ascii=False, default=str)


class StructuredLogger:
    """Best-effort JSON event logger. Never raises to the caller."""

    def __init__(self, name: str = STRUCTURED_LOGGER_NAME) -> None:
        self._logger = logging.getLogger(name)

    @property
    def logger(self) -> logging.Logger:
        return self._logger

    def _emit(self, level: int, level_name: str, message: str, context: dict[str, Any]) -> None:
        try:
            if not self._logger.isEnabledFor(level):
                return
            self._logger.log(level, format_event(level_name, message, context))
        except Exception:
            try:
                _fallback_logger.warning("Structured log event dropped level=%s", level_name)
            except Exception:
                pass

    def debug(self, message: str, /, **context: Any) -> None:
        self._emit(logging.DEBUG, "debug", message, context)

    def info(self, message: str, /, **context: Any) -> None:
        self._emit(logging.INFO, "info", message, context)

    def warning(self, message: str, /, **context: Any) -> None:
        self._emit(logging.WARNING, "warn", message, context)

    def error(self, message: str, /, **context: Any) -> None:
        self._emit(logging.ERROR, "error", message, context)


structured_logger = StructuredLogger()


_listener_lock = Lock()
_listener: QueueListener | None = None
_queue_handler: QueueHandler | None = None


def start_background_logging(*handlers: logging.Handler) -> QueueListener:
    """
    Route structured events through a queue so emitting never blocks on I/O.

    Without explicit handlers the events are written to stderr.
    """

    global _listener, _queue_handler
    with _listener_lock:
        if _listener is not None:
            return _listener
        if not handlers:
            stream_handler = logging.StreamHandler()
            stream_handler.setFormatter(logging.Formatter("%(message)s"))
            handlers = (stream_handler,)
        event_queue: queue.SimpleQueue[logging.LogRecord] = queue.SimpleQueue()
        _queue_handler = QueueHandler(event_queue)
        target = structured_logger.logger
        target.addHandler(_queue_handler)
        target.propagate = False
        _listener = QueueListener(event_queue, *handlers, respect_handler_level=True)
        _listener.start()
        return _listener


def stop_background_logging() -> None:
    """Flush queued events and restore synchronous propagation."""

    global _listener, _queue_handler
    with _listener_lock:
        if _listener is None:
            return
        _listener.stop()
        target = structured_logger.logger
        if _queue_handler is not None:
            target.removeHandler(_queue_handler)
        target.propagate = True
        _listener = None
        _queue_handler = None


__all__ = [
    "REDACTED",
    "STRUCTURED_LOGGER_NAME",
    "StructuredLogger",
    "format_event",
    "redact_object",
    "redact_pii",
    "start_background_logging",
    "stop_background_logging",
    "structured_logger",
]
