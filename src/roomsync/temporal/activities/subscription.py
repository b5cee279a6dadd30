"""Grace period activities."""

from dataclasses import dataclass
from uuid import UUID

from temporalio import activity

from src.roomsync.core.db import get_session
from src.roomsync.temporal.activities._services import build_subscription_service


@dataclass
class GraceCheckInput:
    account_id: str


@activity.defn
async def run_grace_expiry_check(input: GraceCheckInput) -> str:
    """
    Run the grace period expiry check for one account.

    Not idempotent across attempts: the check itself re-queries the billing
    provider once, so the workflow runs it with a single attempt. A failed
    check leaves the account in grace for the next resume scan.

    Returns:
        GraceOutcome value (not_due, reactivated, rooms_deleted)
    """
    activity.logger.info(f"Checking grace period expiry for account {input.account_id}")

    async with get_session() as session:
        service = build_subscription_service(session)
        outcome = await service.check_grace_expiry(UUID(input.account_id))

    activity.logger.info(f"Grace check for account {input.account_id}: {outcome.value}")
    return outcome.value
