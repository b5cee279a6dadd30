"""Join code models - one-time invitations and reusable demo codes."""

from datetime import datetime
from uuid import UUID

from sqlmodel import Field, SQLModel

from src.roomsync.models.base import utc_now
from src.roomsync.models.enums import InvitationStatus


class Invitation(SQLModel, table=True):
    """One-time join code. Redeemable once while created/sent/invited."""

    __tablename__ = "invitations"

    code: str = Field(primary_key=True, max_length=16)
    room_id: str = Field(max_length=64, index=True)
    status: str = Field(default=InvitationStatus.CREATED.value, max_length=20)
    is_admin: bool = Field(default=False)
    phone_number: str | None = Field(default=None, max_length=32)
    created_by: UUID | None = Field(default=None)
    created_at: datetime = Field(default_factory=utc_now)
    expires_at: datetime
    accepted_by: UUID | None = Field(default=None)
    accepted_at: datetime | None = Field(default=None)


class DemoCode(SQLModel, table=True):
    """Reusable admin-granting join code, one per room."""

    __tablename__ = "demo_room_codes"

    room_id: str = Field(primary_key=True, max_length=64)
    code: str = Field(max_length=16, unique=True, index=True)
    is_active: bool = Field(default=True)
    usage_count: int = Field(default=0)
    room_name: str | None = Field(default=None, max_length=100)
    created_by: UUID
    created_at: datetime = Field(default_factory=utc_now)
