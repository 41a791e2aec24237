from __future__ import annotations

import json
import logging
import traceback
import uuid
from typing import Any, Tuple

from fastapi import HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)

# Any failed turn may come from someone in crisis, so the fallback reply always carries the emergency number.
SAFE_ERROR_TEXT = (
    "Sorry, I can't answer right now. Please try again in a moment or call the front desk. "
    "If this is an emergency, call {emergency}."
)
SAFE_ERROR_TITLE = "Front desk unavailable"


class AppError(Exception):
    """Base application error for unified handling."""

    def __init__(
        self,
        message: str | None = None,
        *,
        reason: str | None = None,
        http_status: int | None = None,
        debug: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message or reason or "")
        self.reason = reason
        self.http_status = http_status
        self.debug = debug or {}


class BadRequestError(AppError):
    """Raised when a chat turn or lookup cannot be served as sent."""


def _detail_to_reason(detail: Any) -> str:
    if isinstance(detail, dict):
        return detail.get("reason") or detail.get("message") or "unknown"
    if detail:
        return str(detail)
    return "unknown"


def map_exception_to_error_code(exc: Exception) -> Tuple[str, str, int]:
    """Return normalized error code, reason, and HTTP status for the given exception."""

    if isinstance(exc, BadRequestError):
        return (
            "BAD_REQUEST",
            exc.reason or "bad_request",
            exc.http_status or status.HTTP_400_BAD_REQUEST,
        )

    if isinstance(exc, RequestValidationError):
        return ("BAD_REQUEST", "request_validation_error", status.HTTP_422_UNPROCESSABLE_ENTITY)

    if isinstance(exc, HTTPException):
        status_code = exc.status_code or status.HTTP_500_INTERNAL_SERVER_ERROR
        code = "BAD_REQUEST" if status_code < status.HTTP_500_INTERNAL_SERVER_ERROR else "INTERNAL_ERROR"
        return (code, _detail_to_reason(exc.detail), status_code)

    return (
        "INTERNAL_ERROR",
        getattr(exc, "reason", None) or exc.__class__.__name__,
        getattr(exc, "http_status", None) or status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


def build_error_response(
    *,
    error_code: str,
    reason: str,
    status_code: int,
    emergency_number: str,
    debug_payload: dict[str, Any] | None = None,
) -> JSONResponse:
    meta: dict[str, Any] = {"error": {"code": error_code, "reason": reason}}
    if debug_payload:
        meta["debug"] = debug_payload
    return JSONResponse(
        status_code=status_code,
        content={
            "reply": {
                "text": SAFE_ERROR_TEXT.format(emergency=emergency_number),
                "title": SAFE_ERROR_TITLE,
            },
            "plan": None,
            "meta": meta,
        },
    )


def new_trace_id() -> str:
    return uuid.uuid4().hex


async def describe_request_payload(request: Request) -> str | None:
    """Summarize a request body by its field names; values are never logged."""

    try:
        body = await request.body()
    except Exception:
        return None
    if not body:
        return None
    try:
        parsed = json.loads(body)
    except ValueError:
        return f"<{len(body)} bytes, not json>"
    if isinstance(parsed, dict):
        return "fields=" + ",".join(sorted(parsed))
    return f"<json {type(parsed).__name__}>"


async def log_exception(
    *,
    request: Request,
    exc: Exception,
    trace_id: str,
    handled: bool,
) -> None:
    payload = None if handled else await describe_request_payload(request)
    log_message = "Handled front desk error" if handled else "Unhandled front desk error"
    log_method = logger.warning if handled else logger.error
    log_method(
        "%s trace_id=%s path=%s reason=%s payload=%s",
        log_message,
        trace_id,
        request.url.path,
        getattr(exc, "reason", None) or exc.__class__.__name__,
        payload,
        exc_info=exc if not handled else None,
    )
    if handled:
        logger.debug(
            "Full traceback for trace_id=%s\n%s",
            trace_id,
            "".join(traceback.format_exception(type(exc), exc, exc.__traceback__)),
        )
