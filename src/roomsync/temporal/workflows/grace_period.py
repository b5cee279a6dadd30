"""
Grace Period Workflow.

Durable timer for a lapsed subscription: sleep until the grace period
ends, then run the expiry check once.

The workflow id is derived from the account id, so there is at most one
pending check per account. Starting a new grace period replaces it; the
resume scan re-creates it from the persisted grace_period_end if the
workflow was lost or failed.
"""

import asyncio
from dataclasses import dataclass
from datetime import datetime

from temporalio import workflow

with workflow.unsafe.imports_passed_through():
    from src.roomsync.temporal.activities import GraceCheckInput, run_grace_expiry_check
    from src.roomsync.temporal.workflows._steps.common import grace_check_opts


@dataclass
class GracePeriodInput:
    account_id: str
    grace_period_end: str  # ISO 8601, UTC


@workflow.defn
class GracePeriodWorkflow:
    """
    Wait out a grace period, then delete the account's rooms if the
    subscription was not reactivated.
    """

    @workflow.run
    async def run(self, input: GracePeriodInput) -> str:
        """
        Run grace period workflow.

        Args:
            input: Account id and grace period end

        Returns:
            Outcome of the expiry check (not_due, reactivated, rooms_deleted)
        """
        grace_period_end = datetime.fromisoformat(input.grace_period_end)
        remaining = (grace_period_end - workflow.now()).total_seconds()
        if remaining > 0:
            workflow.logger.info(
                f"Grace period for account {input.account_id} ends in {remaining:.0f}s"
            )
            await asyncio.sleep(remaining)

        outcome: str = await workflow.execute_activity(
            run_grace_expiry_check,
            GraceCheckInput(account_id=input.account_id),
            **grace_check_opts(),
        )
        workflow.logger.info(f"Grace check for account {input.account_id}: {outcome}")
        return outcome
