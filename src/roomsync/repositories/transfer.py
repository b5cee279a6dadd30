"""Repository for room ownership transfer requests."""

from uuid import UUID

from sqlmodel import select, update

from src.roomsync.models import TransferRequest, TransferStatus
from src.roomsync.models.base import utc_now
from src.roomsync.repositories.base import BaseRepository


class TransferRequestRepository(BaseRepository[TransferRequest]):
    model = TransferRequest

    async def list_pending_for_recipient(self, recipient_id: UUID) -> list[TransferRequest]:
        result = await self.session.execute(
            select(TransferRequest)
            .where(
                TransferRequest.recipient_id == recipient_id,
                TransferRequest.status == TransferStatus.PENDING.value,
                TransferRequest.expires_at > utc_now(),
            )
            .order_by(TransferRequest.created_at.desc())  # type: ignore[attr-defined]
        )
        return list(result.scalars().all())

    async def list_sent_by(self, initiator_id: UUID) -> list[TransferRequest]:
        result = await self.session.execute(
            select(TransferRequest)
            .where(TransferRequest.initiator_id == initiator_id)
            .order_by(TransferRequest.created_at.desc())  # type: ignore[attr-defined]
        )
        return list(result.scalars().all())

    async def cancel_pending(self, room_id: str, recipient_id: UUID | None = None) -> None:
        """Cancel pending requests for a room, optionally only those to one recipient."""
        stmt = (
            update(TransferRequest)
            .where(TransferRequest.room_id == room_id)  # type: ignore[arg-type]
            .where(TransferRequest.status == TransferStatus.PENDING.value)  # type: ignore[arg-type]
        )
        if recipient_id is not None:
            stmt = stmt.where(TransferRequest.recipient_id == recipient_id)  # type: ignore[arg-type]
        await self.session.execute(stmt.values(status=TransferStatus.CANCELLED.value))

    async def expire_stale(self) -> int:
        """Mark pending requests past their expiry as expired.

        Idempotent: already-expired rows no longer match.
        """
        result = await self.session.execute(
            update(TransferRequest)
            .where(TransferRequest.status == TransferStatus.PENDING.value)  # type: ignore[arg-type]
            .where(TransferRequest.expires_at <= utc_now())  # type: ignore[arg-type]
            .values(status=TransferStatus.EXPIRED.value)
        )
        await self.session.commit()
        return result.rowcount or 0  # type: ignore[attr-defined]
