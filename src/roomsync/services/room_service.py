"""Room membership ledger service."""

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from src.roomsync.core.events import EventBus, RoomJoined
from src.roomsync.core.exceptions import (
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
    QuotaExceededError,
    RoomNotFoundError,
)
from src.roomsync.core.logging import get_logger
from src.roomsync.models import Account, Room, RoomAccess, RoomMember
from src.roomsync.repositories import (
    AccountRepository,
    RoomAccessRepository,
    RoomMemberRepository,
    RoomRepository,
)
from src.roomsync.services.room_ledger import activate_room_access, purge_room

logger = get_logger(__name__)


class RoomService:
    """Creates rooms and manages which accounts can reach them."""

    def __init__(
        self,
        account_repo: AccountRepository,
        room_repo: RoomRepository,
        member_repo: RoomMemberRepository,
        access_repo: RoomAccessRepository,
        session: AsyncSession,
        event_bus: EventBus,
    ):
        self.account_repo = account_repo
        self.room_repo = room_repo
        self.member_repo = member_repo
        self.access_repo = access_repo
        self.session = session
        self.event_bus = event_bus

    async def _get_account(self, account_id: UUID) -> Account:
        account = await self.account_repo.get_by_id(account_id)
        if account is None:
            raise NotFoundError("Account not found")
        return account

    async def _get_room(self, room_id: str) -> Room:
        room = await self.room_repo.get_by_id(room_id)
        if room is None:
            raise RoomNotFoundError(room_id)
        return room

    async def _is_super_admin(self, account_id: UUID) -> bool:
        account = await self.account_repo.get_by_id(account_id)
        return account is not None and account.is_super_admin

    async def _require_admin(self, account_id: UUID, room_id: str) -> None:
        """Room admins and super admins may manage members."""
        member = await self.member_repo.get_member(room_id, account_id)
        if member is not None and member.is_admin:
            return
        if not await self._is_super_admin(account_id):
            raise PermissionDeniedError("Only room admins can manage members")

    async def list_access(self, account_id: UUID) -> list[RoomAccess]:
        return await self.access_repo.list_for_account(account_id)

    async def set_active_room(
        self,
        account_id: UUID,
        room_id: str,
        is_admin: bool,
        via_super_admin: bool = False,
    ) -> RoomAccess:
        """Make room_id the account's single active room.

        The access map and the room's member entry are written in one
        transaction.
        """
        try:
            account = await self._get_account(account_id)
            await self._get_room(room_id)
            access = await activate_room_access(
                self.access_repo,
                self.member_repo,
                account,
                room_id,
                is_admin=is_admin,
                via_super_admin=via_super_admin,
            )
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        logger.info("Active room set", account_id=str(account_id), room_id=room_id)
        return access

    async def switch_room(self, account_id: UUID, room_id: str) -> RoomAccess:
        """Switch to a room the account already has access to."""
        access = await self.access_repo.get_access(account_id, room_id)
        if access is None:
            raise NotFoundError("You do not have access to this room")
        return await self.set_active_room(
            account_id,
            room_id,
            is_admin=access.is_admin,
            via_super_admin=access.via_super_admin,
        )

    async def create_room(self, account_id: UUID, name: str) -> tuple[Room, RoomAccess]:
        """Create a room owned by the caller, who becomes its active admin."""
        try:
            account = await self._get_account(account_id)
            if account.room_quota <= 0:
                raise QuotaExceededError("A subscription is required to create rooms")

            owned = await self.room_repo.count_owned(account.id)
            if owned >= account.room_quota:
                raise QuotaExceededError(
                    f"You have reached your room limit of {account.room_quota}. "
                    "Upgrade your subscription to create more rooms."
                )

            room = Room(name=name, owner_id=account.id)
            self.room_repo.add(room)
            await self.session.flush()

            access = await activate_room_access(
                self.access_repo, self.member_repo, account, room.id, is_admin=True
            )
            await self.session.commit()
            await self.session.refresh(room)
        except Exception:
            await self.session.rollback()
            raise

        logger.info("Room created", account_id=str(account_id), room_id=room.id)
        await self.event_bus.publish(
            RoomJoined(account_id=account_id, room_id=room.id, is_admin=True, via="created")
        )
        return room, access

    async def leave_room(self, account_id: UUID, room_id: str) -> None:
        """Remove the caller's access entry and member list entry."""
        try:
            room = await self._get_room(room_id)
            if room.owner_id == account_id:
                raise ConflictError(
                    "Owners cannot leave their own room; delete or transfer it instead"
                )
            removed = await self.access_repo.remove(account_id, room_id)
            await self.member_repo.remove(room_id, account_id)
            if not removed:
                raise NotFoundError("You are not a member of this room")
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        logger.info("Room left", account_id=str(account_id), room_id=room_id)

    async def delete_room(self, account_id: UUID, room_id: str) -> list[UUID]:
        """Delete an owned room and every member's access to it."""
        try:
            room = await self._get_room(room_id)
            if room.owner_id != account_id:
                raise PermissionDeniedError("Only the room owner can delete this room")
            member_ids = await purge_room(self.session, room_id)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        logger.info("Room deleted", account_id=str(account_id), room_id=room_id)
        return member_ids

    async def list_members(self, account_id: UUID, room_id: str) -> list[RoomMember]:
        await self._get_room(room_id)
        if await self.member_repo.get_member(
            room_id, account_id
        ) is None and not await self._is_super_admin(account_id):
            raise PermissionDeniedError("You are not a member of this room")
        return await self.member_repo.list_for_room(room_id)

    async def set_member_admin(
        self,
        actor_id: UUID,
        room_id: str,
        member_id: UUID,
        is_admin: bool,
    ) -> RoomMember:
        """Grant or revoke admin rights. The last admin cannot be demoted."""
        try:
            await self._get_room(room_id)
            await self._require_admin(actor_id, room_id)

            member = await self.member_repo.get_member(room_id, member_id)
            if member is None:
                raise NotFoundError("Member not found in this room")

            if member.is_admin and not is_admin:
                if await self.member_repo.count_admins(room_id) <= 1:
                    raise ConflictError("Cannot remove admin rights from the last admin")

            member.is_admin = is_admin
            self.member_repo.add(member)

            access = await self.access_repo.get_access(member_id, room_id)
            if access is not None:
                access.is_admin = is_admin
                self.access_repo.add(access)

            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        logger.info(
            "Member admin flag changed",
            room_id=room_id,
            member_id=str(member_id),
            is_admin=is_admin,
        )
        return member

    async def remove_member(self, actor_id: UUID, room_id: str, member_id: UUID) -> None:
        """Remove another member from the room."""
        try:
            room = await self._get_room(room_id)
            await self._require_admin(actor_id, room_id)

            if room.owner_id == member_id:
                raise ConflictError("The room owner cannot be removed")

            member = await self.member_repo.get_member(room_id, member_id)
            if member is None:
                raise NotFoundError("Member not found in this room")
            if member.is_admin and await self.member_repo.count_admins(room_id) <= 1:
                raise ConflictError("Cannot remove the last admin")

            await self.access_repo.remove(member_id, room_id)
            await self.member_repo.remove(room_id, member_id)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        logger.info("Member removed", room_id=room_id, member_id=str(member_id))
