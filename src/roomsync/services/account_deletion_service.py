"""Account deletion cascade."""

from dataclasses import dataclass, field
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from src.roomsync.core.db import SessionFactory
from src.roomsync.core.exceptions import NotFoundError, PartialWriteError
from src.roomsync.core.integrations.identity import IdentityProvider
from src.roomsync.core.logging import get_logger
from src.roomsync.repositories import (
    AccountRepository,
    AuthMappingRepository,
    RoomAccessRepository,
    RoomMemberRepository,
    RoomRepository,
)
from src.roomsync.services.room_ledger import purge_rooms_concurrently

logger = get_logger(__name__)


@dataclass
class DeletionReport:
    account_id: UUID
    deleted_room_ids: list[str] = field(default_factory=list)
    left_room_ids: list[str] = field(default_factory=list)


class AccountDeletionService:
    """Removes an account, its owned rooms and its memberships elsewhere.

    Owned rooms are deleted concurrently, each in its own transaction. The
    account record goes only after every room is gone, and the external
    identity only after the account record.
    """

    def __init__(
        self,
        account_repo: AccountRepository,
        mapping_repo: AuthMappingRepository,
        room_repo: RoomRepository,
        access_repo: RoomAccessRepository,
        member_repo: RoomMemberRepository,
        session: AsyncSession,
        session_factory: SessionFactory,
        identity_provider: IdentityProvider,
    ):
        self.account_repo = account_repo
        self.mapping_repo = mapping_repo
        self.room_repo = room_repo
        self.access_repo = access_repo
        self.member_repo = member_repo
        self.session = session
        self.session_factory = session_factory
        self.identity_provider = identity_provider

    async def delete_account(
        self, account_id: UUID, external_subject_id: str | None = None
    ) -> DeletionReport:
        """Delete the account and everything that references it.

        Raises:
            NotFoundError: Account does not exist.
            PartialWriteError: Some owned rooms could not be deleted. The
                account is kept so the deletion can be retried.
            ExternalIdentityError: Application data is gone but the sign-in
                identity could not be deleted.
        """
        account = await self.account_repo.get_by_id(account_id)
        if account is None:
            raise NotFoundError("Account not found")
        external_subject_id = external_subject_id or account.auth_subject_id

        report = DeletionReport(account_id=account_id)
        owned_ids = {room.id for room in await self.room_repo.list_owned(account_id)}

        result = await purge_rooms_concurrently(self.session_factory, sorted(owned_ids))
        report.deleted_room_ids = result.deleted
        if not result.ok:
            raise PartialWriteError(
                f"{len(result.failed)} of {len(owned_ids)} rooms could not be deleted"
            )

        try:
            for access in await self.access_repo.list_for_account(account_id):
                if access.room_id in owned_ids:
                    continue
                await self.member_repo.remove(access.room_id, account_id)
                report.left_room_ids.append(access.room_id)
            await self.access_repo.delete_for_account(account_id)

            await self.mapping_repo.delete_for_account(account_id)
            await self.account_repo.delete(account)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        logger.info(
            "Account deleted",
            account_id=str(account_id),
            rooms_deleted=len(report.deleted_room_ids),
            rooms_left=len(report.left_room_ids),
        )

        if external_subject_id:
            await self.identity_provider.delete_identity(external_subject_id)
        return report
