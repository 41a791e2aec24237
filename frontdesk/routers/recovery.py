from __future__ import annotations

from dataclasses import asdict
from typing import Any

from fastapi import APIRouter, Depends, status

from ..intents import RecoveryIntent
from ..models import ChatTurnRequest, TurnPlan
from ..services.error_handling import BadRequestError
from ..services.metrics import get_metrics_service
from ..services.recovery_router import get_intent_guidance
from ..services.turn_planner import TurnPlanner, get_turn_planner

router = APIRouter(prefix="/api/recovery", tags=["recovery"])


@router.post("/turn", response_model=TurnPlan)
async def plan_turn(
    request: ChatTurnRequest,
    planner: TurnPlanner = Depends(get_turn_planner),
) -> TurnPlan:
    if not request.message.strip():
        raise BadRequestError(
            "message must not be empty",
            reason="empty_message",
            http_status=status.HTTP_400_BAD_REQUEST,
        )
    return planner.plan(request)


@router.get("/guidance/{intent}")
async def intent_guidance(intent: str) -> dict[str, str]:
    try:
        intent_enum = RecoveryIntent(intent)
    except ValueError:
        raise BadRequestError(
            f"unknown intent {intent!r}",
            reason="unknown_intent",
            http_status=status.HTTP_400_BAD_REQUEST,
        ) from None
    return {"intent": intent_enum.value, "guidance": get_intent_guidance(intent_enum)}


@router.get("/metrics")
async def metrics() -> dict[str, Any]:
    return asdict(get_metrics_service().snapshot())
