"""Starting durable workflows from the API and the worker."""

from datetime import UTC, datetime
from uuid import UUID

from temporalio.client import Client
from temporalio.common import WorkflowIDConflictPolicy

from src.roomsync.core.config import get_settings
from src.roomsync.core.logging import get_logger
from src.roomsync.temporal.client import get_temporal_client
from src.roomsync.temporal.workflows import (
    GracePeriodInput,
    GracePeriodWorkflow,
    MaintenanceWorkflow,
)

logger = get_logger(__name__)

MAINTENANCE_WORKFLOW_ID = "roomsync-maintenance"


def grace_workflow_id(account_id: UUID | str) -> str:
    """One grace period workflow per account."""
    return f"grace-period-{account_id}"


def to_utc_iso(value: datetime) -> str:
    """Stored timestamps are naive UTC; workflows compare against aware UTC."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(UTC).isoformat()


class TemporalGraceScheduler:
    """Runs the grace expiry check as a durable timer workflow.

    A new grace period replaces any workflow still running for the
    account. The resume scan keeps a running workflow as it is.
    """

    def __init__(self, client: Client | None = None, task_queue: str | None = None):
        self._client = client
        self._task_queue = task_queue

    async def _get_client(self) -> Client:
        if self._client is None:
            self._client = await get_temporal_client()
        return self._client

    async def schedule(
        self,
        account_id: UUID,
        grace_period_end: datetime,
        replace_existing: bool = True,
    ) -> None:
        client = await self._get_client()
        task_queue = self._task_queue or get_settings().temporal_task_queue
        policy = (
            WorkflowIDConflictPolicy.TERMINATE_EXISTING
            if replace_existing
            else WorkflowIDConflictPolicy.USE_EXISTING
        )

        await client.start_workflow(
            GracePeriodWorkflow.run,
            GracePeriodInput(
                account_id=str(account_id),
                grace_period_end=to_utc_iso(grace_period_end),
            ),
            id=grace_workflow_id(account_id),
            task_queue=task_queue,
            id_conflict_policy=policy,
        )
        logger.info(
            "Grace expiry check scheduled",
            account_id=str(account_id),
            grace_period_end=grace_period_end.isoformat(),
            replace_existing=replace_existing,
        )


async def ensure_maintenance_workflow(client: Client) -> bool:
    """Start the cron maintenance workflow if a schedule is configured.

    Returns:
        True if a schedule is configured.
    """
    settings = get_settings()
    if not settings.maintenance_schedule:
        return False

    await client.start_workflow(
        MaintenanceWorkflow.run,
        settings.cleanup_retention_days,
        id=MAINTENANCE_WORKFLOW_ID,
        task_queue=settings.temporal_task_queue,
        cron_schedule=settings.maintenance_schedule,
        id_conflict_policy=WorkflowIDConflictPolicy.USE_EXISTING,
    )
    logger.info("Maintenance workflow scheduled", cron=settings.maintenance_schedule)
    return True
