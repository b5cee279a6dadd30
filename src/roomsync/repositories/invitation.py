"""Repositories for invitations and demo codes."""

from uuid import UUID

from sqlalchemy import and_, delete, func, or_, update
from sqlmodel import select

from src.roomsync.models import (
    REDEEMABLE_INVITATION_STATUSES,
    DemoCode,
    Invitation,
    InvitationStatus,
)
from src.roomsync.models.base import days_from_now, utc_now
from src.roomsync.repositories.base import BaseRepository


class InvitationRepository(BaseRepository[Invitation]):
    model = Invitation

    async def get_by_code(self, code: str) -> Invitation | None:
        """Exact, case-sensitive lookup."""
        return await self.session.get(Invitation, code)

    async def mark_accepted(self, code: str, account_id: UUID) -> bool:
        """Accept a redeemable invitation in one conditional UPDATE.

        Returns False when another transaction accepted it first.
        """
        result = await self.session.execute(
            update(Invitation)
            .where(
                Invitation.code == code,  # type: ignore[arg-type]
                Invitation.status.in_(REDEEMABLE_INVITATION_STATUSES),  # type: ignore[attr-defined]
            )
            .values(
                status=InvitationStatus.ACCEPTED.value,
                accepted_by=account_id,
                accepted_at=utc_now(),
            )
        )
        return (result.rowcount or 0) == 1  # type: ignore[attr-defined]

    async def list_for_room(self, room_id: str) -> list[Invitation]:
        result = await self.session.execute(
            select(Invitation)
            .where(Invitation.room_id == room_id)
            .order_by(Invitation.created_at.desc())  # type: ignore[attr-defined]
        )
        return list(result.scalars().all())

    async def code_exists(self, code: str) -> bool:
        result = await self.session.execute(
            select(func.count())
            .select_from(Invitation)
            .where(func.upper(Invitation.code) == code.upper())
        )
        return int(result.scalar_one()) > 0

    async def delete_for_room(self, room_id: str) -> int:
        result = await self.session.execute(
            delete(Invitation).where(Invitation.room_id == room_id)  # type: ignore[arg-type]
        )
        return result.rowcount or 0  # type: ignore[attr-defined]

    async def cleanup_expired(self, retention_days: int) -> int:
        """Delete invitations expired more than retention_days ago.

        Also deletes accepted invitations older than retention_days.
        Idempotent: DELETE operations are inherently idempotent.

        Args:
            retention_days: Number of days to retain expired/accepted invitations

        Returns:
            Number of invitations deleted
        """
        cutoff = days_from_now(-retention_days)
        stmt = delete(Invitation).where(
            or_(
                Invitation.expires_at < cutoff,  # type: ignore[arg-type]
                and_(
                    Invitation.status == InvitationStatus.ACCEPTED.value,  # type: ignore[arg-type]
                    Invitation.created_at < cutoff,  # type: ignore[arg-type]
                ),
            )
        )
        result = await self.session.execute(stmt)
        await self.session.commit()
        return result.rowcount or 0  # type: ignore[attr-defined]


class DemoCodeRepository(BaseRepository[DemoCode]):
    """Demo codes keyed by room; codes compare by uppercased form."""

    model = DemoCode

    async def get_for_room(self, room_id: str) -> DemoCode | None:
        return await self.session.get(DemoCode, room_id)

    async def get_by_code(self, code: str) -> DemoCode | None:
        result = await self.session.execute(
            select(DemoCode).where(func.upper(DemoCode.code) == code.upper())
        )
        return result.scalars().first()

    async def code_exists(self, code: str) -> bool:
        return await self.get_by_code(code) is not None

    async def list_all(self) -> list[DemoCode]:
        result = await self.session.execute(
            select(DemoCode).order_by(DemoCode.created_at.desc())  # type: ignore[attr-defined]
        )
        return list(result.scalars().all())

    async def delete_for_room(self, room_id: str) -> int:
        result = await self.session.execute(
            delete(DemoCode).where(DemoCode.room_id == room_id)  # type: ignore[arg-type]
        )
        return result.rowcount or 0  # type: ignore[attr-defined]
