"""
Maintenance Workflow.

Periodic housekeeping, designed to be run on a schedule (e.g., daily at
3am UTC via Temporal cron):
1. Invitations (expired, or accepted and older than the retention window)
2. Transfer requests past their expiry
3. Directory reconciliation (dangling mappings, orphaned ledger entries)
4. Grace period resume scan

Idempotent: every activity is safe to run repeatedly.
"""

from temporalio import workflow

with workflow.unsafe.imports_passed_through():
    from src.roomsync.temporal.activities import (
        cleanup_invitations,
        expire_transfer_requests,
        reconcile_directory,
        resume_grace_periods,
    )
    from src.roomsync.temporal.workflows._steps.common import (
        long_activity_opts,
        short_activity_opts,
    )


@workflow.defn
class MaintenanceWorkflow:
    """Run all maintenance activities in parallel and report counts."""

    @workflow.run
    async def run(self, retention_days: int = 30) -> dict[str, int]:
        """
        Run maintenance.

        Args:
            retention_days: Number of days to retain expired/accepted invitations

        Returns:
            dict of counts:
            {
                "invitations": int,
                "transfer_requests": int,
                "repairs": int,
                "grace_periods": int,
            }
        """
        workflow.logger.info(f"Starting maintenance (retention: {retention_days} days)")

        invitations_handle = workflow.start_activity(
            cleanup_invitations, retention_days, **long_activity_opts()
        )
        transfers_handle = workflow.start_activity(
            expire_transfer_requests, **short_activity_opts()
        )
        reconcile_handle = workflow.start_activity(reconcile_directory, **long_activity_opts())
        resume_handle = workflow.start_activity(resume_grace_periods, **long_activity_opts())

        invitations = await invitations_handle
        transfer_requests = await transfers_handle
        repairs = await reconcile_handle
        grace_periods = await resume_handle

        result = {
            "invitations": invitations,
            "transfer_requests": transfer_requests,
            "repairs": sum(repairs.values()),
            "grace_periods": grace_periods,
        }
        workflow.logger.info(
            f"Maintenance complete: {result['invitations']} invitations, "
            f"{result['transfer_requests']} transfers, {result['repairs']} repairs, "
            f"{result['grace_periods']} grace periods"
        )
        return result
