from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from src.roomsync.models import SubscriptionPlan


class SubscriptionStateResponse(BaseModel):
    plan: SubscriptionPlan
    display_name: str
    room_quota: int
    owned_room_count: int
    can_create_room: bool
    is_in_grace_period: bool
    grace_period_end: datetime | None
    is_super_admin: bool


class ValidatePurchaseRequest(BaseModel):
    plan: SubscriptionPlan


class ValidatePurchaseResponse(BaseModel):
    allowed: bool = True


class SuperAdminCodeRequest(BaseModel):
    code: str = Field(min_length=1, max_length=64)


class BillingWebhookEvent(BaseModel):
    """Subset of the billing provider's webhook event that we act on."""

    type: str
    app_user_id: str
    original_app_user_id: str | None = None
    aliases: list[str] = []

    model_config = {"extra": "ignore"}


class BillingWebhookPayload(BaseModel):
    api_version: str | None = None
    event: BillingWebhookEvent

    model_config = {"extra": "ignore"}


class BillingWebhookResponse(BaseModel):
    received: bool = True
    applied: bool
    detail: dict[str, Any] | None = None
