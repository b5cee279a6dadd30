"""Room ownership transfer requests."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlmodel import Field, SQLModel

from src.roomsync.models.base import has_passed, utc_now
from src.roomsync.models.enums import TransferStatus

ACCEPTABLE_TRANSFER_STATUSES = frozenset(
    {TransferStatus.PENDING.value, TransferStatus.ACCEPTED_PENDING_SUBSCRIPTION.value}
)


class TransferRequest(SQLModel, table=True):
    __tablename__ = "transfer_requests"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    room_id: str = Field(max_length=64, index=True)
    room_name: str = Field(max_length=100)
    initiator_id: UUID = Field(index=True)
    recipient_id: UUID = Field(index=True)
    new_owner_id: UUID
    status: str = Field(default=TransferStatus.PENDING.value, max_length=40)
    created_at: datetime = Field(default_factory=utc_now)
    expires_at: datetime

    @property
    def is_expired(self) -> bool:
        return has_passed(self.expires_at)

    @property
    def can_be_accepted(self) -> bool:
        return self.status in ACCEPTABLE_TRANSFER_STATUSES and not self.is_expired
