"""Subscription API endpoints and the billing provider webhook."""

import secrets
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Header, HTTPException, status

from src.roomsync.api.dependencies import (
    AccountRepo,
    CurrentAccount,
    SubscriptionServiceDep,
)
from src.roomsync.core.config import get_settings
from src.roomsync.core.logging import get_logger
from src.roomsync.schemas import (
    AccountRead,
    BillingWebhookPayload,
    BillingWebhookResponse,
    SubscriptionStateResponse,
    SuperAdminCodeRequest,
    ValidatePurchaseRequest,
    ValidatePurchaseResponse,
)
from src.roomsync.schemas.subscription import BillingWebhookEvent

logger = get_logger(__name__)

router = APIRouter(prefix="/subscriptions", tags=["subscriptions"])


@router.get("/me", response_model=SubscriptionStateResponse, summary="Get subscription state")
async def get_subscription(
    account: CurrentAccount,
    subscription_service: SubscriptionServiceDep,
) -> SubscriptionStateResponse:
    state = await subscription_service.get_state(account.id)
    return SubscriptionStateResponse(
        plan=state.plan,
        display_name=state.display_name,
        room_quota=state.room_quota,
        owned_room_count=state.owned_room_count,
        can_create_room=state.can_create_room,
        is_in_grace_period=state.is_in_grace_period,
        grace_period_end=state.grace_period_end,
        is_super_admin=state.is_super_admin,
    )


@router.post(
    "/validate-purchase",
    response_model=ValidatePurchaseResponse,
    summary="Validate plan purchase",
    description="Refuse a plan whose room quota is below the number of rooms already owned.",
)
async def validate_purchase(
    request: ValidatePurchaseRequest,
    account: CurrentAccount,
    subscription_service: SubscriptionServiceDep,
) -> ValidatePurchaseResponse:
    await subscription_service.validate_purchase(account.id, request.plan)
    return ValidatePurchaseResponse()


@router.post("/restore", response_model=AccountRead, summary="Restore purchases")
async def restore_purchases(
    account: CurrentAccount,
    subscription_service: SubscriptionServiceDep,
) -> AccountRead:
    updated = await subscription_service.restore_purchases(account.id)
    return AccountRead.model_validate(updated)


@router.post("/super-admin", response_model=AccountRead, summary="Apply super admin code")
async def apply_super_admin_code(
    request: SuperAdminCodeRequest,
    account: CurrentAccount,
    subscription_service: SubscriptionServiceDep,
) -> AccountRead:
    updated = await subscription_service.apply_super_admin_code(account.id, request.code)
    return AccountRead.model_validate(updated)


@router.delete("/super-admin", response_model=AccountRead, summary="Remove super admin access")
async def remove_super_admin(
    account: CurrentAccount,
    subscription_service: SubscriptionServiceDep,
) -> AccountRead:
    updated = await subscription_service.remove_super_admin(account.id)
    return AccountRead.model_validate(updated)


# =============================================================================
# Billing webhook
# =============================================================================


def _verify_webhook_secret(authorization: str | None) -> None:
    secret = get_settings().billing_webhook_secret
    if secret is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Billing webhook is not configured",
        )
    if authorization is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid webhook authorization",
        )
    token = authorization[7:] if authorization.startswith("Bearer ") else authorization
    if not secrets.compare_digest(token, secret):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid webhook authorization",
        )


def _candidate_account_ids(event: BillingWebhookEvent) -> list[UUID]:
    """Account ids the event may refer to. Anonymous billing ids are skipped."""
    candidates = [event.app_user_id, event.original_app_user_id, *event.aliases]
    ids: list[UUID] = []
    for value in candidates:
        if not value:
            continue
        try:
            account_id = UUID(value)
        except ValueError:
            continue
        if account_id not in ids:
            ids.append(account_id)
    return ids


@router.post(
    "/webhook",
    response_model=BillingWebhookResponse,
    summary="Billing provider webhook",
    description=(
        "Entitlement change notification. The event only identifies the account; "
        "current entitlements are re-fetched from the billing provider."
    ),
)
async def billing_webhook(
    payload: BillingWebhookPayload,
    account_repo: AccountRepo,
    subscription_service: SubscriptionServiceDep,
    authorization: Annotated[str | None, Header()] = None,
) -> BillingWebhookResponse:
    _verify_webhook_secret(authorization)
    event = payload.event

    for account_id in _candidate_account_ids(event):
        if await account_repo.get_by_id(account_id) is None:
            continue
        account = await subscription_service.restore_purchases(account_id)
        logger.info(
            "Billing webhook applied",
            event_type=event.type,
            account_id=str(account_id),
            plan=account.subscription_plan,
        )
        return BillingWebhookResponse(
            applied=True,
            detail={
                "account_id": str(account_id),
                "plan": account.subscription_plan,
                "is_in_grace_period": account.is_in_grace_period,
            },
        )

    logger.warning("Billing webhook for unknown account", event_type=event.type)
    return BillingWebhookResponse(applied=False, detail={"reason": "unknown_account"})
