from datetime import datetime
from uuid import UUID

from pydantic import BaseModel


class TransferCreateRequest(BaseModel):
    room_id: str
    recipient_id: UUID


class TransferRead(BaseModel):
    id: UUID
    room_id: str
    room_name: str
    initiator_id: UUID
    recipient_id: UUID
    status: str
    created_at: datetime
    expires_at: datetime

    model_config = {"from_attributes": True}
