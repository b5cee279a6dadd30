from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field


class RoomCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)


class RoomRead(BaseModel):
    id: str
    name: str
    owner_id: UUID | None
    created_at: datetime

    model_config = {"from_attributes": True}


class RoomAccessRead(BaseModel):
    """One entry of the caller's room list."""

    room_id: str
    joined_at: datetime
    is_active: bool
    is_admin: bool
    via_super_admin: bool

    model_config = {"from_attributes": True}


class RoomMemberRead(BaseModel):
    account_id: UUID
    name: str
    is_admin: bool
    joined_at: datetime

    model_config = {"from_attributes": True}


class MemberAdminUpdate(BaseModel):
    is_admin: bool


class RoomCreateResponse(BaseModel):
    room: RoomRead
    access: RoomAccessRead


class RoomDeleteResponse(BaseModel):
    room_id: str
    removed_member_ids: list[UUID]
