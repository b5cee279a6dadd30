"""Room and membership ledger models."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlmodel import Field, SQLModel

from src.roomsync.models.base import utc_now


def generate_room_id() -> str:
    return str(uuid4()).upper()


class Room(SQLModel, table=True):
    """Shared workspace scoping one participant's treatment data."""

    __tablename__ = "rooms"

    id: str = Field(default_factory=generate_room_id, primary_key=True, max_length=64)
    name: str = Field(max_length=100)
    owner_id: UUID | None = Field(default=None, index=True)
    created_at: datetime = Field(default_factory=utc_now)


class RoomMember(SQLModel, table=True):
    """Room-side member list entry."""

    __tablename__ = "room_members"

    room_id: str = Field(primary_key=True, max_length=64)
    account_id: UUID = Field(primary_key=True, index=True)
    name: str = Field(max_length=100)
    is_admin: bool = Field(default=False)
    joined_at: datetime = Field(default_factory=utc_now)


class RoomAccess(SQLModel, table=True):
    """Account-side record of a room the account can reach.

    Invariant: at most one row per account has ``is_active=True``.
    ``legacy`` marks rows imported from bare boolean entries that have not
    been normalized yet.
    """

    __tablename__ = "room_access"

    account_id: UUID = Field(primary_key=True)
    room_id: str = Field(primary_key=True, max_length=64, index=True)
    joined_at: datetime = Field(default_factory=utc_now)
    is_active: bool = Field(default=False)
    is_admin: bool = Field(default=False)
    via_super_admin: bool = Field(default=False)
    legacy: bool = Field(default=False)
