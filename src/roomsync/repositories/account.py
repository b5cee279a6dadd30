"""Repositories for the account directory."""

from datetime import datetime
from uuid import UUID

from sqlalchemy import and_, delete, func, or_
from sqlmodel import select

from src.roomsync.models import Account, AuthMapping
from src.roomsync.models.plans import PLAN_QUOTAS
from src.roomsync.repositories.base import BaseRepository


class AuthMappingRepository(BaseRepository[AuthMapping]):
    """Encoded external subject id -> account id."""

    model = AuthMapping

    async def get_by_encoded_subject(self, encoded_subject_id: str) -> AuthMapping | None:
        return await self.session.get(AuthMapping, encoded_subject_id)

    async def list_dangling(self) -> list[AuthMapping]:
        """Mappings whose account record does not exist."""
        result = await self.session.execute(
            select(AuthMapping)
            .outerjoin(Account, Account.id == AuthMapping.account_id)  # type: ignore[arg-type]
            .where(Account.id.is_(None))  # type: ignore[union-attr]
        )
        return list(result.scalars().all())

    async def delete_for_account(self, account_id: UUID) -> int:
        result = await self.session.execute(
            delete(AuthMapping).where(AuthMapping.account_id == account_id)  # type: ignore[arg-type]
        )
        return result.rowcount or 0  # type: ignore[attr-defined]


class AccountRepository(BaseRepository[Account]):
    model = Account

    async def list_in_grace_period(self) -> list[Account]:
        result = await self.session.execute(
            select(Account).where(Account.is_in_grace_period == True)  # noqa: E712
        )
        return list(result.scalars().all())

    async def count_overdue_grace_periods(self, now: datetime) -> int:
        """Grace periods that ended but were never checked."""
        result = await self.session.execute(
            select(func.count())
            .select_from(Account)
            .where(
                Account.is_in_grace_period == True,  # noqa: E712
                Account.grace_period_end <= now,  # type: ignore[operator]
            )
        )
        return int(result.scalar_one())

    async def list_with_inconsistent_quota(self) -> list[Account]:
        """Accounts whose stored quota differs from the quota their plan implies."""
        conditions = [
            and_(
                Account.subscription_plan == plan.value,  # type: ignore[arg-type]
                Account.room_quota != quota,  # type: ignore[arg-type]
            )
            for plan, quota in PLAN_QUOTAS.items()
        ]
        result = await self.session.execute(select(Account).where(or_(*conditions)))
        return list(result.scalars().all())
