"""Join code redemption.

A code is looked up as a one-time invitation first (exact match), then as
a reusable demo code (case-insensitive). The join itself, including any
account created for a first-time user, is written in a single transaction.
"""

from dataclasses import dataclass
from uuid import UUID, uuid4

from sqlalchemy.ext.asyncio import AsyncSession

from src.roomsync.core.encoding import encode_key
from src.roomsync.core.events import EventBus, RoomJoined
from src.roomsync.core.exceptions import (
    ConflictError,
    InvalidOrExpiredCodeError,
    NotFoundError,
    RoomNotFoundError,
)
from src.roomsync.core.logging import get_logger
from src.roomsync.core.security import is_valid_invitation_phone, normalize_demo_code
from src.roomsync.models import (
    REDEEMABLE_INVITATION_STATUSES,
    Account,
    AuthMapping,
    DemoCode,
    Invitation,
    RedemptionKind,
    Room,
    RoomAccess,
)
from src.roomsync.models.base import has_passed
from src.roomsync.repositories import (
    AccountRepository,
    AuthMappingRepository,
    DemoCodeRepository,
    InvitationRepository,
    RoomAccessRepository,
    RoomMemberRepository,
    RoomRepository,
)
from src.roomsync.services.room_ledger import activate_room_access

logger = get_logger(__name__)


@dataclass
class ResolvedCode:
    """What a join code grants."""

    kind: RedemptionKind
    room: Room
    is_admin: bool
    invitation: Invitation | None = None
    demo_code: DemoCode | None = None

    @property
    def via_super_admin(self) -> bool:
        return self.kind == RedemptionKind.DEMO_CODE


@dataclass
class Redemption:
    account: Account
    access: RoomAccess
    kind: RedemptionKind
    account_created: bool = False


class RedemptionService:
    def __init__(
        self,
        invitation_repo: InvitationRepository,
        demo_code_repo: DemoCodeRepository,
        room_repo: RoomRepository,
        access_repo: RoomAccessRepository,
        member_repo: RoomMemberRepository,
        account_repo: AccountRepository,
        mapping_repo: AuthMappingRepository,
        session: AsyncSession,
        event_bus: EventBus,
    ):
        self.invitation_repo = invitation_repo
        self.demo_code_repo = demo_code_repo
        self.room_repo = room_repo
        self.access_repo = access_repo
        self.member_repo = member_repo
        self.account_repo = account_repo
        self.mapping_repo = mapping_repo
        self.session = session
        self.event_bus = event_bus

    async def resolve_code(self, code: str) -> ResolvedCode:
        """Run the lookup state machine without writing anything.

        Raises:
            InvalidOrExpiredCodeError: Neither a redeemable invitation nor an
                active demo code matches.
            RoomNotFoundError: The code points at a room that no longer exists.
        """
        code = code.strip()
        if not code:
            raise InvalidOrExpiredCodeError()

        invitation = await self.invitation_repo.get_by_code(code)
        if (
            invitation is not None
            and invitation.status in REDEEMABLE_INVITATION_STATUSES
            and is_valid_invitation_phone(invitation.phone_number)
            and not has_passed(invitation.expires_at)
        ):
            room = await self.room_repo.get_by_id(invitation.room_id)
            if room is None:
                raise RoomNotFoundError(invitation.room_id)
            return ResolvedCode(
                kind=RedemptionKind.INVITATION,
                room=room,
                is_admin=invitation.is_admin,
                invitation=invitation,
            )

        demo_code = await self.demo_code_repo.get_by_code(normalize_demo_code(code))
        if demo_code is not None and demo_code.is_active:
            room = await self.room_repo.get_by_id(demo_code.room_id)
            if room is None:
                raise RoomNotFoundError(demo_code.room_id)
            return ResolvedCode(
                kind=RedemptionKind.DEMO_CODE,
                room=room,
                is_admin=True,
                demo_code=demo_code,
            )

        raise InvalidOrExpiredCodeError()

    async def preview_code(self, code: str) -> ResolvedCode:
        return await self.resolve_code(code)

    async def redeem(self, code: str, account_id: UUID) -> Redemption:
        """Join the room behind ``code`` as an existing account."""
        try:
            account = await self.account_repo.get_by_id(account_id)
            if account is None:
                raise NotFoundError("Account not found")
            resolved = await self.resolve_code(code)
            access = await self._join(account, resolved)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        return await self._finish(account, access, resolved, created=False)

    async def redeem_with_signup(
        self,
        code: str,
        external_subject_id: str,
        name: str,
        email: str | None = None,
    ) -> Redemption:
        """Create an account for a first-time user and join the room.

        The auth mapping, account record and join are one transaction, so
        a failure leaves no partial account behind.
        """
        encoded = encode_key(external_subject_id)
        try:
            if await self.mapping_repo.get_by_encoded_subject(encoded) is not None:
                raise ConflictError("An account already exists for this sign-in")

            resolved = await self.resolve_code(code)

            account = Account(
                id=uuid4(),
                name=name,
                email=email,
                auth_subject_id=external_subject_id,
            )
            self.mapping_repo.add(AuthMapping(encoded_subject_id=encoded, account_id=account.id))
            self.account_repo.add(account)
            await self.session.flush()

            access = await self._join(account, resolved)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        logger.info("Account created", account_id=str(account.id), via="join_code")
        return await self._finish(account, access, resolved, created=True)

    async def _join(self, account: Account, resolved: ResolvedCode) -> RoomAccess:
        if resolved.invitation is not None:
            # First write of the transaction, so a concurrent redemption of
            # the same code waits here and then finds nothing to accept.
            if not await self.invitation_repo.mark_accepted(resolved.invitation.code, account.id):
                raise InvalidOrExpiredCodeError()

        # Redeeming a code never demotes the owner or an existing admin
        member = await self.member_repo.get_member(resolved.room.id, account.id)
        keeps_admin = resolved.room.owner_id == account.id or (
            member is not None and member.is_admin
        )
        access = await activate_room_access(
            self.access_repo,
            self.member_repo,
            account,
            resolved.room.id,
            is_admin=resolved.is_admin or keeps_admin,
            via_super_admin=resolved.via_super_admin,
        )

        if resolved.demo_code is not None:
            resolved.demo_code.usage_count += 1
            self.demo_code_repo.add(resolved.demo_code)

        return access

    async def _finish(
        self,
        account: Account,
        access: RoomAccess,
        resolved: ResolvedCode,
        created: bool,
    ) -> Redemption:
        logger.info(
            "Join code redeemed",
            account_id=str(account.id),
            room_id=resolved.room.id,
            kind=resolved.kind.value,
            is_admin=access.is_admin,
        )
        await self.event_bus.publish(
            RoomJoined(
                account_id=account.id,
                room_id=resolved.room.id,
                is_admin=access.is_admin,
                via=resolved.kind.value,
            )
        )
        return Redemption(
            account=account, access=access, kind=resolved.kind, account_created=created
        )
