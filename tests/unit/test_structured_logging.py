"""Tests for structured logging context."""

from uuid import uuid4

import pytest
import structlog
from structlog.testing import CapturingLogger

from src.roomsync.core.logging import (
    bind_account_context,
    bind_request_context,
    clear_request_context,
    mask_personal_data,
)

pytestmark = pytest.mark.unit


@pytest.fixture
def capturing_logger():
    """Create a capturing logger for tests."""
    cap_logger = CapturingLogger()
    old_config = structlog.get_config()

    structlog.configure(
        processors=[structlog.contextvars.merge_contextvars],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=lambda *args, **kwargs: cap_logger,
        cache_logger_on_first_use=False,
    )

    clear_request_context()
    yield cap_logger
    clear_request_context()
    structlog.configure(**old_config)


def test_bind_request_context(capturing_logger):
    bind_request_context("test-request-123", "POST", "/api/v1/rooms")
    structlog.get_logger().info("test message")

    entries = capturing_logger.calls
    assert len(entries) == 1
    assert entries[0].kwargs["request_id"] == "test-request-123"
    assert entries[0].kwargs["method"] == "POST"
    assert entries[0].kwargs["path"] == "/api/v1/rooms"


def test_bind_request_context_with_none(capturing_logger):
    """Requests without a correlation id still carry method and path."""
    bind_request_context(None, "GET", "/health")
    structlog.get_logger().info("test message")

    assert "request_id" not in capturing_logger.calls[0].kwargs
    assert capturing_logger.calls[0].kwargs["path"] == "/health"


def test_bind_account_context(capturing_logger):
    account_id = uuid4()

    bind_account_context(account_id, room_id="ROOM-1")
    structlog.get_logger().info("test message")

    kwargs = capturing_logger.calls[0].kwargs
    assert kwargs["account_id"] == str(account_id)
    assert kwargs["room_id"] == "ROOM-1"


def test_bind_account_context_without_room(capturing_logger):
    bind_account_context(uuid4())
    structlog.get_logger().info("test message")

    assert "room_id" not in capturing_logger.calls[0].kwargs


def test_clear_request_context(capturing_logger):
    bind_request_context("req-1", "GET", "/api/v1/rooms")
    bind_account_context(uuid4())
    clear_request_context()
    structlog.get_logger().info("test message")

    kwargs = capturing_logger.calls[0].kwargs
    assert "request_id" not in kwargs
    assert "path" not in kwargs
    assert "account_id" not in kwargs


def test_mask_personal_data_keeps_last_four():
    event = {"event": "Invitation created", "phone_number": "5551234567", "room_id": "R1"}

    masked = mask_personal_data(None, "info", event)

    assert masked["phone_number"] == "******4567"
    assert masked["room_id"] == "R1"


def test_mask_personal_data_ignores_short_and_missing_values():
    masked = mask_personal_data(None, "info", {"event": "x", "email": "ab", "phone_number": None})

    assert masked["email"] == "ab"
    assert masked["phone_number"] is None
