"""Maintenance activities: cleanup, expiry and directory repair."""

from dataclasses import asdict

from temporalio import activity

from src.roomsync.core.db import get_session
from src.roomsync.repositories import InvitationRepository, TransferRequestRepository
from src.roomsync.temporal.activities._services import (
    build_reconciliation_service,
    build_subscription_service,
)


@activity.defn
async def cleanup_invitations(retention_days: int) -> int:
    """
    Clean up old invitations.

    Deletes invitations that:
    - Expired more than retention_days ago, OR
    - Were accepted and created more than retention_days ago

    Idempotent: DELETE operations are inherently idempotent.

    Args:
        retention_days: Number of days to retain expired/accepted invitations

    Returns:
        Number of invitations deleted
    """
    activity.logger.info(f"Cleaning up invitations older than {retention_days} days")

    async with get_session() as session:
        repo = InvitationRepository(session)
        count = await repo.cleanup_expired(retention_days)

    activity.logger.info(f"Deleted {count} old invitations")
    return count


@activity.defn
async def expire_transfer_requests() -> int:
    """
    Mark pending transfer requests past their expiry as expired.

    Idempotent: already-expired requests no longer match.
    """
    async with get_session() as session:
        repo = TransferRequestRepository(session)
        count = await repo.expire_stale()

    activity.logger.info(f"Expired {count} transfer requests")
    return count


@activity.defn
async def reconcile_directory() -> dict[str, int]:
    """Remove dangling mappings and orphaned ledger entries, fix quotas."""
    async with get_session() as session:
        service = build_reconciliation_service(session)
        report = await service.reconcile()

    activity.logger.info(f"Reconciliation repaired {report.total} entries")
    return asdict(report)


@activity.defn
async def resume_grace_periods() -> int:
    """
    (Re)start the grace period workflow for every account in grace.

    Running workflows are left alone, so this is safe to repeat.
    """
    async with get_session() as session:
        service = build_subscription_service(session)
        count = await service.resume_grace_periods()

    activity.logger.info(f"Resumed {count} grace periods")
    return count
