"""Subscription reconciliation.

Accounts move between three states: no plan, an active plan, and a grace
period after the billing provider stops reporting an entitlement. Rooms
are only deleted once a grace period has elapsed without reactivation.
"""

import asyncio
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Protocol
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from src.roomsync.core.db import SessionFactory
from src.roomsync.core.events import (
    EventBus,
    RoomsDeletedAfterGracePeriod,
    SubscriptionCancelled,
    SubscriptionReactivated,
    SubscriptionUpdated,
)
from src.roomsync.core.exceptions import (
    EntitlementLookupError,
    InvalidOrExpiredCodeError,
    NotFoundError,
    PartialWriteError,
    PermissionDeniedError,
    QuotaExceededError,
)
from src.roomsync.core.integrations.billing import EntitlementProvider
from src.roomsync.core.logging import get_logger
from src.roomsync.models import Account, SubscriptionPlan
from src.roomsync.models.base import days_from_now, utc_now
from src.roomsync.models.plans import (
    PURCHASABLE_PLANS,
    display_name,
    plan_for_entitlements,
    quota_for,
)
from src.roomsync.repositories import AccountRepository, RoomRepository
from src.roomsync.services.room_ledger import purge_rooms_concurrently

logger = get_logger(__name__)


class GraceScheduler(Protocol):
    """Arranges for check_grace_expiry to run at ``grace_period_end``.

    ``replace_existing`` restarts a pending check for the account; when
    False an already scheduled check is left alone.
    """

    async def schedule(
        self,
        account_id: UUID,
        grace_period_end: datetime,
        replace_existing: bool = True,
    ) -> None: ...


class GraceOutcome(str, Enum):
    NOT_DUE = "not_due"
    REACTIVATED = "reactivated"
    ROOMS_DELETED = "rooms_deleted"


@dataclass
class SubscriptionState:
    plan: SubscriptionPlan
    room_quota: int
    owned_room_count: int
    is_in_grace_period: bool
    grace_period_end: datetime | None
    is_super_admin: bool

    @property
    def display_name(self) -> str:
        return display_name(self.plan)

    @property
    def can_create_room(self) -> bool:
        return self.owned_room_count < self.room_quota


class SubscriptionService:
    def __init__(
        self,
        account_repo: AccountRepository,
        room_repo: RoomRepository,
        session: AsyncSession,
        session_factory: SessionFactory,
        entitlements: EntitlementProvider,
        scheduler: GraceScheduler,
        event_bus: EventBus,
        grace_period_days: int = 16,
        recheck_delay_seconds: float = 2.0,
        super_admin_codes: set[str] | None = None,
    ):
        self.account_repo = account_repo
        self.room_repo = room_repo
        self.session = session
        self.session_factory = session_factory
        self.entitlements = entitlements
        self.scheduler = scheduler
        self.event_bus = event_bus
        self.grace_period_days = grace_period_days
        self.recheck_delay_seconds = recheck_delay_seconds
        self.super_admin_codes = super_admin_codes or set()

    async def _get_account(self, account_id: UUID) -> Account:
        account = await self.account_repo.get_by_id(account_id)
        if account is None:
            raise NotFoundError("Account not found")
        return account

    async def get_state(self, account_id: UUID) -> SubscriptionState:
        account = await self._get_account(account_id)
        return SubscriptionState(
            plan=account.plan,
            room_quota=account.room_quota,
            owned_room_count=await self.room_repo.count_owned(account.id),
            is_in_grace_period=account.is_in_grace_period,
            grace_period_end=account.grace_period_end,
            is_super_admin=account.is_super_admin,
        )

    async def handle_entitlement_change(
        self, account_id: UUID, active_entitlements: set[str] | frozenset[str]
    ) -> Account:
        """Apply the billing provider's current view of the account.

        An active entitlement sets the matching plan (and ends any grace
        period). Losing all entitlements on a paid plan starts a grace
        period. Super admin accounts are left untouched.
        """
        account = await self._get_account(account_id)

        if account.is_super_admin or account.plan == SubscriptionPlan.SUPER_ADMIN:
            logger.info("Entitlement change ignored for super admin", account_id=str(account_id))
            return account

        plan = plan_for_entitlements(active_entitlements)
        if plan is None and active_entitlements:
            logger.warning(
                "No known plan for entitlements",
                account_id=str(account_id),
                entitlements=sorted(active_entitlements),
            )

        if plan is not None:
            return await self._activate(account, plan)

        if account.plan in PURCHASABLE_PLANS and not account.is_in_grace_period:
            return await self._start_grace_period(account)

        return account

    async def _activate(self, account: Account, plan: SubscriptionPlan) -> Account:
        was_in_grace = account.is_in_grace_period
        try:
            account.apply_plan(plan)
            account.has_active_entitlement = True
            if was_in_grace:
                account.clear_grace_period()
            self.account_repo.add(account)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        if was_in_grace:
            logger.info("Subscription reactivated", account_id=str(account.id), plan=plan.value)
            await self.event_bus.publish(
                SubscriptionReactivated(account_id=account.id, plan=plan.value)
            )
        else:
            logger.info("Subscription updated", account_id=str(account.id), plan=plan.value)
            await self.event_bus.publish(
                SubscriptionUpdated(
                    account_id=account.id, plan=plan.value, room_quota=account.room_quota
                )
            )
        return account

    async def _start_grace_period(self, account: Account) -> Account:
        grace_period_end = days_from_now(self.grace_period_days)
        try:
            account.grace_period_end = grace_period_end
            account.is_in_grace_period = True
            account.has_active_entitlement = False
            account.updated_at = utc_now()
            self.account_repo.add(account)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        logger.info(
            "Grace period started",
            account_id=str(account.id),
            grace_period_end=grace_period_end.isoformat(),
        )
        await self._schedule(account.id, grace_period_end, replace_existing=True)
        await self.event_bus.publish(
            SubscriptionCancelled(account_id=account.id, grace_period_end=grace_period_end)
        )
        return account

    async def _schedule(
        self, account_id: UUID, grace_period_end: datetime, replace_existing: bool
    ) -> bool:
        # The persisted grace_period_end is authoritative; a missed schedule
        # is picked up by the next resume scan.
        try:
            await self.scheduler.schedule(
                account_id, grace_period_end, replace_existing=replace_existing
            )
        except Exception as e:
            logger.error(
                "Failed to schedule grace expiry check",
                account_id=str(account_id),
                error=str(e),
            )
            return False
        return True

    async def _lookup(self, account_id: UUID) -> set[str] | None:
        try:
            return await self.entitlements.get_active_entitlements(str(account_id))
        except EntitlementLookupError as e:
            logger.warning(
                "Entitlement lookup failed, will retry",
                account_id=str(account_id),
                error=str(e),
            )
            return None

    async def check_grace_expiry(
        self, account_id: UUID, now: datetime | None = None
    ) -> GraceOutcome:
        """Delete owned rooms if the grace period has elapsed without reactivation.

        Entitlements are looked up, and if none are active (or the lookup
        fails) looked up exactly once more after a short delay to absorb
        provider propagation lag.

        Raises:
            EntitlementLookupError: The second lookup failed. Nothing is deleted.
            PartialWriteError: Some rooms could not be deleted. The account
                stays in grace so the check can be repeated.
        """
        now = now or utc_now()
        account = await self._get_account(account_id)

        if (
            not account.is_in_grace_period
            or account.grace_period_end is None
            or account.grace_period_end > now
        ):
            return GraceOutcome.NOT_DUE

        entitlements = await self._lookup(account_id)
        if not entitlements or plan_for_entitlements(entitlements) is None:
            await asyncio.sleep(self.recheck_delay_seconds)
            entitlements = await self.entitlements.get_active_entitlements(str(account_id))

        if plan_for_entitlements(entitlements) is not None:
            await self.handle_entitlement_change(account_id, entitlements)
            return GraceOutcome.REACTIVATED

        owned = await self.room_repo.list_owned(account.id)
        room_ids = [room.id for room in owned]
        result = await purge_rooms_concurrently(self.session_factory, room_ids)
        if not result.ok:
            raise PartialWriteError(
                f"{len(result.failed)} of {len(room_ids)} rooms could not be deleted"
            )

        try:
            account.apply_plan(SubscriptionPlan.NONE)
            account.has_active_entitlement = False
            account.clear_grace_period()
            self.account_repo.add(account)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        logger.info(
            "Rooms deleted after grace period",
            account_id=str(account_id),
            room_count=len(room_ids),
        )
        await self.event_bus.publish(
            RoomsDeletedAfterGracePeriod(account_id=account.id, room_ids=tuple(room_ids))
        )
        return GraceOutcome.ROOMS_DELETED

    async def resume_grace_periods(self) -> int:
        """Schedule an expiry check for every account currently in grace.

        Checks already pending are left as they are; overdue accounts are
        checked as soon as the scheduler runs them.

        Returns:
            Number of accounts scheduled.
        """
        accounts = await self.account_repo.list_in_grace_period()
        scheduled = 0
        for account in accounts:
            if account.grace_period_end is None:
                continue
            if await self._schedule(account.id, account.grace_period_end, replace_existing=False):
                scheduled += 1

        logger.info("Grace periods resumed", found=len(accounts), scheduled=scheduled)
        return scheduled

    async def validate_purchase(self, account_id: UUID, plan: SubscriptionPlan) -> None:
        """Refuse a plan whose quota is below the number of rooms already owned."""
        owned = await self.room_repo.count_owned(account_id)
        quota = quota_for(plan)
        if quota < owned:
            excess = owned - quota
            raise QuotaExceededError(
                f"You currently own {owned} rooms but the {display_name(plan)} only allows "
                f"{quota}. Please delete {excess} room(s) before downgrading."
            )

    async def restore_purchases(self, account_id: UUID) -> Account:
        """Re-fetch entitlements from the billing provider and apply them."""
        await self._get_account(account_id)
        entitlements = await self.entitlements.get_active_entitlements(str(account_id))
        return await self.handle_entitlement_change(account_id, entitlements)

    async def apply_super_admin_code(self, account_id: UUID, code: str) -> Account:
        if code.strip().upper() not in self.super_admin_codes:
            raise InvalidOrExpiredCodeError("Invalid admin code")

        try:
            account = await self._get_account(account_id)
            account.apply_plan(SubscriptionPlan.SUPER_ADMIN)
            account.is_super_admin = True
            account.super_admin_activated_at = utc_now()
            account.clear_grace_period()
            self.account_repo.add(account)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        logger.info("Super admin activated", account_id=str(account_id))
        await self.event_bus.publish(
            SubscriptionUpdated(
                account_id=account.id, plan=account.subscription_plan, room_quota=account.room_quota
            )
        )
        return account

    async def remove_super_admin(self, account_id: UUID) -> Account:
        try:
            account = await self._get_account(account_id)
            if not account.is_super_admin:
                raise PermissionDeniedError("Only super admins can give up super admin access")
            account.apply_plan(SubscriptionPlan.NONE)
            account.is_super_admin = False
            account.super_admin_activated_at = None
            self.account_repo.add(account)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        logger.info("Super admin removed", account_id=str(account_id))
        await self.event_bus.publish(
            SubscriptionUpdated(account_id=account.id, plan=account.subscription_plan, room_quota=0)
        )
        return account
