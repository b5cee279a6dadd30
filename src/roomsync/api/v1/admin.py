"""Admin API endpoints (super admin only)."""

from uuid import UUID

from fastapi import APIRouter

from src.roomsync.api.dependencies import (
    ReconciliationServiceDep,
    SubscriptionServiceDep,
    SuperAdminAccount,
)
from src.roomsync.schemas import GraceCheckResponse, GraceResumeResponse, ReconciliationResponse

router = APIRouter(prefix="/admin", tags=["admin"])


@router.post(
    "/reconcile",
    response_model=ReconciliationResponse,
    summary="Repair directory",
    description=(
        "Remove dangling sign-in mappings and orphaned access or member entries, "
        "and correct room quotas that disagree with the plan."
    ),
    responses={
        403: {"description": "Not authorized (super admin required)"},
    },
)
async def reconcile(
    _account: SuperAdminAccount,
    reconciliation_service: ReconciliationServiceDep,
) -> ReconciliationResponse:
    report = await reconciliation_service.reconcile()
    return ReconciliationResponse(
        dangling_mappings_removed=report.dangling_mappings_removed,
        orphaned_access_removed=report.orphaned_access_removed,
        orphaned_members_removed=report.orphaned_members_removed,
        quotas_corrected=report.quotas_corrected,
    )


@router.post(
    "/accounts/{account_id}/grace-check",
    response_model=GraceCheckResponse,
    summary="Run grace expiry check now",
)
async def check_grace_expiry(
    account_id: UUID,
    _account: SuperAdminAccount,
    subscription_service: SubscriptionServiceDep,
) -> GraceCheckResponse:
    outcome = await subscription_service.check_grace_expiry(account_id)
    return GraceCheckResponse(outcome=outcome.value)


@router.post(
    "/grace-periods/resume",
    response_model=GraceResumeResponse,
    summary="Reschedule grace expiry checks",
)
async def resume_grace_periods(
    _account: SuperAdminAccount,
    subscription_service: SubscriptionServiceDep,
) -> GraceResumeResponse:
    scheduled = await subscription_service.resume_grace_periods()
    return GraceResumeResponse(scheduled=scheduled)
