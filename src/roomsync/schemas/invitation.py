"""Join code schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field


class InvitationCreateRequest(BaseModel):
    is_admin: bool = False
    phone_number: str | None = Field(None, max_length=32)


class InvitationRead(BaseModel):
    code: str
    room_id: str
    status: str
    is_admin: bool
    phone_number: str | None
    created_at: datetime
    expires_at: datetime
    accepted_by: UUID | None
    accepted_at: datetime | None

    model_config = {"from_attributes": True}


class InvitationListResponse(BaseModel):
    invitations: list[InvitationRead]
    total: int


class DemoCodeCreateRequest(BaseModel):
    code: str = Field(min_length=1, max_length=16)


class DemoCodeToggleRequest(BaseModel):
    is_active: bool


class DemoCodeRead(BaseModel):
    room_id: str
    code: str
    is_active: bool
    usage_count: int
    room_name: str | None
    created_at: datetime

    model_config = {"from_attributes": True}


class CodePreviewResponse(BaseModel):
    """Public info about a join code, shown before joining."""

    kind: str
    room_id: str
    room_name: str
    is_admin: bool


class RedeemRequest(BaseModel):
    code: str = Field(min_length=1, max_length=16)


class RedeemWithSignupRequest(RedeemRequest):
    """Join a room as a first-time user; the account is created with the join."""

    name: str = Field(min_length=1, max_length=100)


class RedeemResponse(BaseModel):
    account_id: UUID
    room_id: str
    kind: str
    is_admin: bool
    account_created: bool
