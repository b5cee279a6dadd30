from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field


class AccountRead(BaseModel):
    id: UUID
    name: str
    email: str | None
    subscription_plan: str
    room_quota: int
    is_in_grace_period: bool
    grace_period_end: datetime | None
    is_super_admin: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class SignInRequest(BaseModel):
    """Optional profile fields used when the account is created."""

    name: str | None = Field(None, min_length=1, max_length=100)


class SignInResponse(BaseModel):
    account: AccountRead
    created: bool


class AccountDeletionResponse(BaseModel):
    deleted_room_ids: list[str]
    left_room_ids: list[str]
    message: str = "Account deleted"
