"""Room ownership transfers."""

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from src.roomsync.core.config import get_settings
from src.roomsync.core.exceptions import (
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
    QuotaExceededError,
    RoomNotFoundError,
)
from src.roomsync.core.logging import get_logger
from src.roomsync.models import Account, RoomAccess, TransferRequest, TransferStatus
from src.roomsync.models.base import days_from_now
from src.roomsync.repositories import (
    AccountRepository,
    RoomAccessRepository,
    RoomMemberRepository,
    RoomRepository,
    TransferRequestRepository,
)

logger = get_logger(__name__)


class TransferService:
    def __init__(
        self,
        transfer_repo: TransferRequestRepository,
        room_repo: RoomRepository,
        member_repo: RoomMemberRepository,
        access_repo: RoomAccessRepository,
        account_repo: AccountRepository,
        session: AsyncSession,
    ):
        self.transfer_repo = transfer_repo
        self.room_repo = room_repo
        self.member_repo = member_repo
        self.access_repo = access_repo
        self.account_repo = account_repo
        self.session = session

    async def _get_request(self, request_id: UUID) -> TransferRequest:
        request = await self.transfer_repo.get_by_id(request_id)
        if request is None:
            raise NotFoundError("Transfer request not found")
        return request

    async def request_transfer(
        self, owner_id: UUID, room_id: str, recipient_id: UUID
    ) -> TransferRequest:
        """Offer ownership of a room to one of its members.

        Earlier pending offers of the same room to the same member are
        cancelled.
        """
        settings = get_settings()

        try:
            room = await self.room_repo.get_by_id(room_id)
            if room is None:
                raise RoomNotFoundError(room_id)
            if room.owner_id != owner_id:
                raise PermissionDeniedError("Only the room owner can transfer ownership")
            if recipient_id == owner_id:
                raise ConflictError("You already own this room")
            if await self.member_repo.get_member(room_id, recipient_id) is None:
                raise NotFoundError("Recipient is not a member of this room")

            await self.transfer_repo.cancel_pending(room_id, recipient_id)

            request = TransferRequest(
                room_id=room_id,
                room_name=room.name,
                initiator_id=owner_id,
                recipient_id=recipient_id,
                new_owner_id=recipient_id,
                expires_at=days_from_now(settings.transfer_expire_days),
            )
            self.transfer_repo.add(request)
            await self.session.commit()
            await self.session.refresh(request)
        except Exception:
            await self.session.rollback()
            raise

        logger.info(
            "Transfer requested",
            room_id=room_id,
            initiator_id=str(owner_id),
            recipient_id=str(recipient_id),
        )
        return request

    async def accept_transfer(self, account_id: UUID, request_id: UUID) -> TransferRequest:
        """Take ownership of the room.

        A recipient without a subscription gets the request parked as
        accepted_pending_subscription so it can be accepted again after
        subscribing.

        Raises:
            QuotaExceededError: No subscription, or no free room slot.
        """
        try:
            request = await self._get_request(request_id)
            if request.recipient_id != account_id:
                raise PermissionDeniedError("This transfer request is not addressed to you")
            if not request.can_be_accepted:
                raise ConflictError("This transfer request is no longer available")

            room = await self.room_repo.get_by_id(request.room_id)
            if room is None:
                raise RoomNotFoundError(request.room_id)

            account = await self.account_repo.get_by_id(account_id)
            if account is None:
                raise NotFoundError("Account not found")

            if account.room_quota <= 0:
                request.status = TransferStatus.ACCEPTED_PENDING_SUBSCRIPTION.value
                self.transfer_repo.add(request)
                await self.session.commit()
                raise QuotaExceededError(
                    "A subscription is required to take ownership of this room"
                )

            owned = await self.room_repo.count_owned(account_id)
            if owned >= account.room_quota:
                raise QuotaExceededError(
                    f"You have reached your room limit of {account.room_quota}. "
                    "Upgrade your subscription to take ownership of this room."
                )

            previous_owner_id = room.owner_id
            room.owner_id = account_id
            self.room_repo.add(room)

            request.status = TransferStatus.ACCEPTED.value
            self.transfer_repo.add(request)
            await self.session.flush()
            await self.transfer_repo.cancel_pending(room.id)

            await self._grant_admin(account, room.id)

            if previous_owner_id is not None:
                await self._release_previous_owner(previous_owner_id)

            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        logger.info(
            "Transfer accepted",
            room_id=request.room_id,
            previous_owner_id=str(previous_owner_id),
            new_owner_id=str(account_id),
        )
        return request

    async def _grant_admin(self, account: Account, room_id: str) -> None:
        member = await self.member_repo.get_member(room_id, account.id)
        await self.member_repo.upsert(
            room_id,
            account.id,
            account.name,
            is_admin=True,
            joined_at=member.joined_at if member else None,
        )

        access = await self.access_repo.get_access(account.id, room_id)
        if access is None:
            access = RoomAccess(account_id=account.id, room_id=room_id)
        access.is_admin = True
        self.access_repo.add(access)

    async def _release_previous_owner(self, previous_owner_id: UUID) -> None:
        if await self.room_repo.count_owned(previous_owner_id) > 0:
            return
        previous = await self.account_repo.get_by_id(previous_owner_id)
        if previous is not None and previous.is_in_grace_period:
            previous.clear_grace_period()
            self.account_repo.add(previous)

    async def decline_transfer(self, account_id: UUID, request_id: UUID) -> TransferRequest:
        return await self._close(
            account_id, request_id, TransferStatus.DECLINED, recipient=True
        )

    async def cancel_transfer(self, account_id: UUID, request_id: UUID) -> TransferRequest:
        return await self._close(
            account_id, request_id, TransferStatus.CANCELLED, recipient=False
        )

    async def _close(
        self,
        account_id: UUID,
        request_id: UUID,
        status: TransferStatus,
        recipient: bool,
    ) -> TransferRequest:
        try:
            request = await self._get_request(request_id)
            party = request.recipient_id if recipient else request.initiator_id
            if party != account_id:
                raise PermissionDeniedError("You cannot change this transfer request")
            if request.status not in (
                TransferStatus.PENDING.value,
                TransferStatus.ACCEPTED_PENDING_SUBSCRIPTION.value,
            ):
                raise ConflictError("This transfer request is no longer pending")
            request.status = status.value
            self.transfer_repo.add(request)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        logger.info("Transfer closed", request_id=str(request_id), status=status.value)
        return request

    async def list_pending_transfers(self, account_id: UUID) -> list[TransferRequest]:
        return await self.transfer_repo.list_pending_for_recipient(account_id)

    async def list_sent_transfers(self, account_id: UUID) -> list[TransferRequest]:
        return await self.transfer_repo.list_sent_by(account_id)
