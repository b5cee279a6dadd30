"""Tests for starting grace period and maintenance workflows."""

from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock, patch
from uuid import uuid4

import pytest
from temporalio.common import WorkflowIDConflictPolicy

from src.roomsync.temporal.scheduling import (
    MAINTENANCE_WORKFLOW_ID,
    TemporalGraceScheduler,
    ensure_maintenance_workflow,
    grace_workflow_id,
    to_utc_iso,
)
from src.roomsync.temporal.workflows import GracePeriodInput, MaintenanceWorkflow

pytestmark = pytest.mark.unit


def test_grace_workflow_id_is_deterministic():
    account_id = uuid4()
    assert grace_workflow_id(account_id) == f"grace-period-{account_id}"
    assert grace_workflow_id(account_id) == grace_workflow_id(str(account_id))


def test_naive_timestamps_are_treated_as_utc():
    naive = datetime(2026, 3, 1, 12, 0, 0)
    assert to_utc_iso(naive) == "2026-03-01T12:00:00+00:00"

    aware = datetime(2026, 3, 1, 14, 0, 0, tzinfo=timezone(timedelta(hours=2)))
    assert to_utc_iso(aware) == "2026-03-01T12:00:00+00:00"


async def test_new_grace_period_replaces_running_check():
    client = AsyncMock()
    scheduler = TemporalGraceScheduler(client=client, task_queue="q")
    account_id = uuid4()
    end = datetime(2026, 3, 1, 12, 0, 0)

    await scheduler.schedule(account_id, end)

    args, kwargs = client.start_workflow.call_args
    assert args[1] == GracePeriodInput(
        account_id=str(account_id), grace_period_end="2026-03-01T12:00:00+00:00"
    )
    assert kwargs["id"] == f"grace-period-{account_id}"
    assert kwargs["task_queue"] == "q"
    assert kwargs["id_conflict_policy"] == WorkflowIDConflictPolicy.TERMINATE_EXISTING


async def test_resume_keeps_running_check():
    client = AsyncMock()
    scheduler = TemporalGraceScheduler(client=client, task_queue="q")

    await scheduler.schedule(uuid4(), datetime(2026, 3, 1), replace_existing=False)

    _, kwargs = client.start_workflow.call_args
    assert kwargs["id_conflict_policy"] == WorkflowIDConflictPolicy.USE_EXISTING


async def test_maintenance_not_started_without_schedule():
    client = AsyncMock()
    settings = MagicMock(maintenance_schedule=None)
    with patch("src.roomsync.temporal.scheduling.get_settings", return_value=settings):
        assert await ensure_maintenance_workflow(client) is False
    client.start_workflow.assert_not_called()


async def test_maintenance_started_as_cron():
    client = AsyncMock()
    settings = MagicMock(
        maintenance_schedule="0 3 * * *",
        cleanup_retention_days=30,
        temporal_task_queue="q",
    )
    with patch("src.roomsync.temporal.scheduling.get_settings", return_value=settings):
        assert await ensure_maintenance_workflow(client) is True

    args, kwargs = client.start_workflow.call_args
    assert args == (MaintenanceWorkflow.run, 30)
    assert kwargs["id"] == MAINTENANCE_WORKFLOW_ID
    assert kwargs["cron_schedule"] == "0 3 * * *"
    assert kwargs["id_conflict_policy"] == WorkflowIDConflictPolicy.USE_EXISTING
