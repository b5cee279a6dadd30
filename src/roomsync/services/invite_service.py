"""Invitation and demo code management."""

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from src.roomsync.core.config import get_settings
from src.roomsync.core.exceptions import (
    AlreadyRedeemedError,
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
    RoomNotFoundError,
    RoomSyncError,
)
from src.roomsync.core.logging import get_logger
from src.roomsync.core.security import generate_code, is_valid_invitation_phone, validate_demo_code
from src.roomsync.models import DemoCode, Invitation, InvitationStatus
from src.roomsync.models.base import days_from_now, utc_now
from src.roomsync.repositories import (
    AccountRepository,
    DemoCodeRepository,
    InvitationRepository,
    RoomMemberRepository,
    RoomRepository,
)

logger = get_logger(__name__)

MAX_CODE_ATTEMPTS = 10


class InviteService:
    """Issues one-time invitations and reusable demo codes for rooms."""

    def __init__(
        self,
        invitation_repo: InvitationRepository,
        demo_code_repo: DemoCodeRepository,
        room_repo: RoomRepository,
        member_repo: RoomMemberRepository,
        account_repo: AccountRepository,
        session: AsyncSession,
    ):
        self.invitation_repo = invitation_repo
        self.demo_code_repo = demo_code_repo
        self.room_repo = room_repo
        self.member_repo = member_repo
        self.account_repo = account_repo
        self.session = session

    async def _code_taken(self, code: str) -> bool:
        """Codes are unique across invitations and demo codes."""
        if await self.invitation_repo.code_exists(code):
            return True
        return await self.demo_code_repo.code_exists(code)

    async def _require_room_admin(self, actor_id: UUID, room_id: str) -> None:
        if await self.room_repo.get_by_id(room_id) is None:
            raise RoomNotFoundError(room_id)
        member = await self.member_repo.get_member(room_id, actor_id)
        if member is not None and member.is_admin:
            return
        account = await self.account_repo.get_by_id(actor_id)
        if account is None or not account.is_super_admin:
            raise PermissionDeniedError("Only room admins can manage invitations")

    async def _require_super_admin(self, actor_id: UUID) -> None:
        account = await self.account_repo.get_by_id(actor_id)
        if account is None or not account.is_super_admin:
            raise PermissionDeniedError("Only super admins can manage demo codes")

    async def _get_invitation(self, code: str) -> Invitation:
        invitation = await self.invitation_repo.get_by_code(code)
        if invitation is None:
            raise NotFoundError("Invitation not found")
        return invitation

    # Invitations

    async def create_invitation(
        self,
        actor_id: UUID,
        room_id: str,
        is_admin: bool = False,
        phone_number: str | None = None,
    ) -> Invitation:
        """Create a one-time join code for a room.

        Raises:
            PermissionDeniedError: Caller is not an admin of the room.
            RoomSyncError: Phone number contains non-digits.
        """
        settings = get_settings()

        if not is_valid_invitation_phone(phone_number):
            raise RoomSyncError("Phone number must contain digits only")

        try:
            await self._require_room_admin(actor_id, room_id)

            code = None
            for _ in range(MAX_CODE_ATTEMPTS):
                candidate = generate_code(settings.invite_code_length)
                if not await self._code_taken(candidate):
                    code = candidate
                    break
            if code is None:
                raise ConflictError("Could not generate a unique code, please try again")

            invitation = Invitation(
                code=code,
                room_id=room_id,
                status=InvitationStatus.CREATED.value,
                is_admin=is_admin,
                phone_number=phone_number or None,
                created_by=actor_id,
                expires_at=days_from_now(settings.invite_expire_days),
            )
            self.invitation_repo.add(invitation)
            await self.session.commit()
            await self.session.refresh(invitation)
        except Exception:
            await self.session.rollback()
            raise

        logger.info(
            "Invitation created",
            room_id=room_id,
            created_by=str(actor_id),
            is_admin=is_admin,
            phone_number=invitation.phone_number,
        )
        return invitation

    async def mark_invitation_sent(self, actor_id: UUID, code: str) -> Invitation:
        """Record that the code was handed to the invitee (created -> sent)."""
        try:
            invitation = await self._get_invitation(code)
            await self._require_room_admin(actor_id, invitation.room_id)

            if invitation.status == InvitationStatus.ACCEPTED.value:
                raise AlreadyRedeemedError("Invitation has already been redeemed")
            if invitation.status == InvitationStatus.CREATED.value:
                invitation.status = InvitationStatus.SENT.value
                self.invitation_repo.add(invitation)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        logger.info("Invitation marked sent", room_id=invitation.room_id)
        return invitation

    async def cancel_invitation(self, actor_id: UUID, code: str) -> None:
        try:
            invitation = await self._get_invitation(code)
            await self._require_room_admin(actor_id, invitation.room_id)

            if invitation.status == InvitationStatus.ACCEPTED.value:
                raise AlreadyRedeemedError("Invitation has already been redeemed")
            await self.invitation_repo.delete(invitation)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        logger.info("Invitation cancelled", room_id=invitation.room_id)

    async def list_room_invitations(self, actor_id: UUID, room_id: str) -> list[Invitation]:
        await self._require_room_admin(actor_id, room_id)
        return await self.invitation_repo.list_for_room(room_id)

    # Demo codes

    async def create_demo_code(self, actor_id: UUID, room_id: str, code: str) -> DemoCode:
        """Set the room's demo code, replacing any existing one.

        Raises:
            PermissionDeniedError: Caller is not a super admin.
            RoomSyncError: Code is not 6 letters or digits.
            ConflictError: Code is already used by another room or invitation.
        """
        try:
            normalized = validate_demo_code(code)
        except ValueError as e:
            raise RoomSyncError(str(e)) from e

        try:
            await self._require_super_admin(actor_id)
            room = await self.room_repo.get_by_id(room_id)
            if room is None:
                raise RoomNotFoundError(room_id)

            existing_for_code = await self.demo_code_repo.get_by_code(normalized)
            if existing_for_code is not None and existing_for_code.room_id != room_id:
                raise ConflictError("This code is already in use")
            if await self.invitation_repo.code_exists(normalized):
                raise ConflictError("This code is already in use")

            demo_code = await self.demo_code_repo.get_for_room(room_id)
            if demo_code is None:
                demo_code = DemoCode(room_id=room_id, code=normalized, created_by=actor_id)
            demo_code.code = normalized
            demo_code.is_active = True
            demo_code.usage_count = 0
            demo_code.room_name = room.name
            demo_code.created_by = actor_id
            demo_code.created_at = utc_now()
            self.demo_code_repo.add(demo_code)
            await self.session.commit()
            await self.session.refresh(demo_code)
        except Exception:
            await self.session.rollback()
            raise

        logger.info("Demo code set", room_id=room_id, created_by=str(actor_id))
        return demo_code

    async def set_demo_code_active(self, actor_id: UUID, room_id: str, active: bool) -> DemoCode:
        try:
            await self._require_super_admin(actor_id)
            demo_code = await self.demo_code_repo.get_for_room(room_id)
            if demo_code is None:
                raise NotFoundError("Demo code not found")
            demo_code.is_active = active
            self.demo_code_repo.add(demo_code)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        logger.info("Demo code toggled", room_id=room_id, is_active=active)
        return demo_code

    async def list_demo_codes(self, actor_id: UUID) -> list[DemoCode]:
        await self._require_super_admin(actor_id)
        return await self.demo_code_repo.list_all()
