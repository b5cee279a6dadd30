"""Repositories for rooms and the membership ledger."""

from datetime import datetime
from uuid import UUID

from sqlalchemy import delete, func
from sqlmodel import select

from src.roomsync.models import Room, RoomAccess, RoomMember
from src.roomsync.models.base import utc_now
from src.roomsync.repositories.base import BaseRepository


class RoomRepository(BaseRepository[Room]):
    model = Room

    async def list_owned(self, owner_id: UUID) -> list[Room]:
        result = await self.session.execute(
            select(Room).where(Room.owner_id == owner_id).order_by(Room.created_at)  # type: ignore[arg-type]
        )
        return list(result.scalars().all())

    async def count_owned(self, owner_id: UUID) -> int:
        result = await self.session.execute(
            select(func.count()).select_from(Room).where(Room.owner_id == owner_id)  # type: ignore[arg-type]
        )
        return int(result.scalar_one())

    async def delete_by_id(self, room_id: str) -> int:
        result = await self.session.execute(delete(Room).where(Room.id == room_id))  # type: ignore[arg-type]
        return result.rowcount or 0  # type: ignore[attr-defined]


class RoomMemberRepository(BaseRepository[RoomMember]):
    """Room-side member lists."""

    model = RoomMember

    async def get_member(self, room_id: str, account_id: UUID) -> RoomMember | None:
        return await self.session.get(RoomMember, (room_id, account_id))

    async def list_for_room(self, room_id: str) -> list[RoomMember]:
        result = await self.session.execute(
            select(RoomMember)
            .where(RoomMember.room_id == room_id)
            .order_by(RoomMember.joined_at)  # type: ignore[arg-type]
        )
        return list(result.scalars().all())

    async def count_admins(self, room_id: str) -> int:
        result = await self.session.execute(
            select(func.count())
            .select_from(RoomMember)
            .where(
                RoomMember.room_id == room_id,
                RoomMember.is_admin == True,  # noqa: E712
            )
        )
        return int(result.scalar_one())

    async def upsert(
        self,
        room_id: str,
        account_id: UUID,
        name: str,
        is_admin: bool,
        joined_at: datetime | None = None,
    ) -> RoomMember:
        """Insert or overwrite the member entry (add to session, no commit)."""
        member = await self.get_member(room_id, account_id)
        if member is None:
            member = RoomMember(room_id=room_id, account_id=account_id, name=name)
        member.name = name
        member.is_admin = is_admin
        member.joined_at = joined_at or utc_now()
        self.session.add(member)
        return member

    async def remove(self, room_id: str, account_id: UUID) -> int:
        result = await self.session.execute(
            delete(RoomMember).where(
                RoomMember.room_id == room_id,  # type: ignore[arg-type]
                RoomMember.account_id == account_id,  # type: ignore[arg-type]
            )
        )
        return result.rowcount or 0  # type: ignore[attr-defined]

    async def delete_for_room(self, room_id: str) -> int:
        result = await self.session.execute(
            delete(RoomMember).where(RoomMember.room_id == room_id)  # type: ignore[arg-type]
        )
        return result.rowcount or 0  # type: ignore[attr-defined]

    async def delete_orphaned(self) -> int:
        """Delete member entries whose room no longer exists."""
        result = await self.session.execute(
            delete(RoomMember).where(
                RoomMember.room_id.not_in(select(Room.id))  # type: ignore[attr-defined]
            )
        )
        return result.rowcount or 0  # type: ignore[attr-defined]


class RoomAccessRepository(BaseRepository[RoomAccess]):
    """Account-side access entries."""

    model = RoomAccess

    async def get_access(self, account_id: UUID, room_id: str) -> RoomAccess | None:
        return await self.session.get(RoomAccess, (account_id, room_id))

    async def list_for_account(self, account_id: UUID) -> list[RoomAccess]:
        result = await self.session.execute(
            select(RoomAccess)
            .where(RoomAccess.account_id == account_id)
            .order_by(RoomAccess.joined_at)  # type: ignore[arg-type]
        )
        return list(result.scalars().all())

    async def list_for_room(self, room_id: str) -> list[RoomAccess]:
        result = await self.session.execute(
            select(RoomAccess).where(RoomAccess.room_id == room_id)
        )
        return list(result.scalars().all())

    async def remove(self, account_id: UUID, room_id: str) -> int:
        result = await self.session.execute(
            delete(RoomAccess).where(
                RoomAccess.account_id == account_id,  # type: ignore[arg-type]
                RoomAccess.room_id == room_id,  # type: ignore[arg-type]
            )
        )
        return result.rowcount or 0  # type: ignore[attr-defined]

    async def delete_for_room(self, room_id: str) -> int:
        result = await self.session.execute(
            delete(RoomAccess).where(RoomAccess.room_id == room_id)  # type: ignore[arg-type]
        )
        return result.rowcount or 0  # type: ignore[attr-defined]

    async def delete_for_account(self, account_id: UUID) -> int:
        result = await self.session.execute(
            delete(RoomAccess).where(RoomAccess.account_id == account_id)  # type: ignore[arg-type]
        )
        return result.rowcount or 0  # type: ignore[attr-defined]

    async def delete_orphaned(self) -> int:
        """Delete access entries whose room no longer exists."""
        result = await self.session.execute(
            delete(RoomAccess).where(
                RoomAccess.room_id.not_in(select(Room.id))  # type: ignore[attr-defined]
            )
        )
        return result.rowcount or 0  # type: ignore[attr-defined]
