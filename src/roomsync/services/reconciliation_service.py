"""Directory and ledger repair.

Multi-step writes that are not atomic (account creation, concurrent room
deletion) can leave orphans behind when a step fails. This pass removes
them. Running it twice in a row reports zero repairs the second time.
"""

from dataclasses import asdict, dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from src.roomsync.core.logging import get_logger
from src.roomsync.models.plans import quota_for
from src.roomsync.repositories import (
    AccountRepository,
    AuthMappingRepository,
    RoomAccessRepository,
    RoomMemberRepository,
)

logger = get_logger(__name__)


@dataclass
class ReconciliationReport:
    dangling_mappings_removed: int = 0
    orphaned_access_removed: int = 0
    orphaned_members_removed: int = 0
    quotas_corrected: int = 0

    @property
    def total(self) -> int:
        return sum(asdict(self).values())


class ReconciliationService:
    def __init__(
        self,
        mapping_repo: AuthMappingRepository,
        account_repo: AccountRepository,
        access_repo: RoomAccessRepository,
        member_repo: RoomMemberRepository,
        session: AsyncSession,
    ):
        self.mapping_repo = mapping_repo
        self.account_repo = account_repo
        self.access_repo = access_repo
        self.member_repo = member_repo
        self.session = session

    async def reconcile(self) -> ReconciliationReport:
        report = ReconciliationReport()
        try:
            for mapping in await self.mapping_repo.list_dangling():
                logger.warning(
                    "Removing dangling auth mapping",
                    account_id=str(mapping.account_id),
                )
                await self.mapping_repo.delete(mapping)
                report.dangling_mappings_removed += 1

            report.orphaned_access_removed = await self.access_repo.delete_orphaned()
            report.orphaned_members_removed = await self.member_repo.delete_orphaned()

            for account in await self.account_repo.list_with_inconsistent_quota():
                account.room_quota = quota_for(account.plan)
                self.account_repo.add(account)
                report.quotas_corrected += 1

            await self.session.commit()
        except Exception as e:
            await self.session.rollback()
            logger.error("Reconciliation failed", error=str(e))
            raise

        logger.info("Reconciliation complete", **asdict(report))
        return report
