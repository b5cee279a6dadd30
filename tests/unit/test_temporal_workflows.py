"""Tests for the grace period and maintenance workflows."""

import uuid
from datetime import UTC, datetime, timedelta

import pytest
from temporalio import activity
from temporalio.testing import WorkflowEnvironment
from temporalio.worker import Worker

from src.roomsync.temporal.activities import GraceCheckInput
from src.roomsync.temporal.workflows import (
    GracePeriodInput,
    GracePeriodWorkflow,
    MaintenanceWorkflow,
)

pytestmark = pytest.mark.unit

TASK_QUEUE = "test-queue"


class TestGracePeriodWorkflow:
    @pytest.mark.asyncio
    async def test_check_runs_after_grace_period_ends(self) -> None:
        """The expiry check runs once, no earlier than the persisted end."""
        checked: list[str] = []

        @activity.defn(name="run_grace_expiry_check")
        async def fake_check(input: GraceCheckInput) -> str:
            checked.append(input.account_id)
            return "rooms_deleted"

        async with await WorkflowEnvironment.start_time_skipping() as env:  # noqa: SIM117
            async with Worker(
                env.client,
                task_queue=TASK_QUEUE,
                workflows=[GracePeriodWorkflow],
                activities=[fake_check],
            ):
                start = await env.get_current_time()
                grace_period_end = start + timedelta(days=16)
                account_id = str(uuid.uuid4())

                outcome = await env.client.execute_workflow(
                    GracePeriodWorkflow.run,
                    GracePeriodInput(
                        account_id=account_id,
                        grace_period_end=grace_period_end.isoformat(),
                    ),
                    id=f"grace-period-{account_id}",
                    task_queue=TASK_QUEUE,
                )

                assert outcome == "rooms_deleted"
                assert checked == [account_id]
                assert await env.get_current_time() >= grace_period_end

    @pytest.mark.asyncio
    async def test_overdue_grace_period_is_checked_immediately(self) -> None:
        calls: list[str] = []

        @activity.defn(name="run_grace_expiry_check")
        async def fake_check(input: GraceCheckInput) -> str:
            calls.append(input.account_id)
            return "reactivated"

        async with await WorkflowEnvironment.start_time_skipping() as env:  # noqa: SIM117
            async with Worker(
                env.client,
                task_queue=TASK_QUEUE,
                workflows=[GracePeriodWorkflow],
                activities=[fake_check],
            ):
                past = datetime.now(UTC) - timedelta(days=30)
                outcome = await env.client.execute_workflow(
                    GracePeriodWorkflow.run,
                    GracePeriodInput(account_id="acc-1", grace_period_end=past.isoformat()),
                    id="grace-period-acc-1",
                    task_queue=TASK_QUEUE,
                )

                assert outcome == "reactivated"
                assert calls == ["acc-1"]


class TestMaintenanceWorkflow:
    @pytest.mark.asyncio
    async def test_runs_every_activity_and_reports_counts(self) -> None:
        @activity.defn(name="cleanup_invitations")
        async def fake_cleanup(retention_days: int) -> int:
            assert retention_days == 14
            return 3

        @activity.defn(name="expire_transfer_requests")
        async def fake_expire() -> int:
            return 2

        @activity.defn(name="reconcile_directory")
        async def fake_reconcile() -> dict[str, int]:
            return {
                "dangling_mappings_removed": 1,
                "orphaned_access_removed": 2,
                "orphaned_members_removed": 0,
                "quotas_corrected": 1,
            }

        @activity.defn(name="resume_grace_periods")
        async def fake_resume() -> int:
            return 5

        async with await WorkflowEnvironment.start_time_skipping() as env:  # noqa: SIM117
            async with Worker(
                env.client,
                task_queue=TASK_QUEUE,
                workflows=[MaintenanceWorkflow],
                activities=[fake_cleanup, fake_expire, fake_reconcile, fake_resume],
            ):
                result = await env.client.execute_workflow(
                    MaintenanceWorkflow.run,
                    14,
                    id="test-maintenance",
                    task_queue=TASK_QUEUE,
                )

                assert result == {
                    "invitations": 3,
                    "transfer_requests": 2,
                    "repairs": 4,
                    "grace_periods": 5,
                }
