"""Shared pytest fixtures for all tests."""

from __future__ import annotations

import logging

import pytest

from frontdesk.config import Settings
from frontdesk.models import ChatTurnRequest
from frontdesk.services.metrics import get_metrics_service
from frontdesk.services.structured_logger import STRUCTURED_LOGGER_NAME
from frontdesk.services.turn_planner import TurnPlanner


@pytest.fixture
def settings() -> Settings:
    """Default settings for tests."""
    return Settings(structured_log_async=False)


@pytest.fixture
def planner(settings: Settings) -> TurnPlanner:
    return TurnPlanner(settings=settings)


@pytest.fixture(autouse=True)
def reset_metrics():
    get_metrics_service().reset()
    yield
    get_metrics_service().reset()


@pytest.fixture
def structured_caplog(caplog: pytest.LogCaptureFixture) -> pytest.LogCaptureFixture:
    """caplog capturing INFO events from the structured logger."""
    caplog.set_level(logging.INFO, logger=STRUCTURED_LOGGER_NAME)
    return caplog


@pytest.fixture
def recovery_request() -> ChatTurnRequest:
    """Chat turn for a sober living tenant."""
    return ChatTurnRequest(
        conversation_id="test-conv",
        message="Can I schedule a tour next week?",
        tenant_id="faith-house",
        business_type="sober_living",
        business_phone="(555) 010-2000",
    )
