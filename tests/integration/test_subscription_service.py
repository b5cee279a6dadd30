"""Tests for subscription reconciliation and the grace period lifecycle."""

from datetime import timedelta
from unittest.mock import patch

import pytest
from sqlmodel import select

from src.roomsync.core.events import (
    RoomsDeletedAfterGracePeriod,
    SubscriptionCancelled,
    SubscriptionReactivated,
    SubscriptionUpdated,
)
from src.roomsync.core.exceptions import (
    EntitlementLookupError,
    InvalidOrExpiredCodeError,
    PartialWriteError,
    PermissionDeniedError,
    QuotaExceededError,
)
from src.roomsync.models import Account, Room, RoomAccess, RoomMember, SubscriptionPlan
from src.roomsync.models.base import utc_now
from src.roomsync.services import room_ledger
from src.roomsync.services.subscription_service import GraceOutcome
from tests.fakes import FakeScheduler
from tests.factories import AccountFactory
from tests.helpers import add_member, create_account, create_room

pytestmark = pytest.mark.integration


async def reload(session, account_id) -> Account:
    return await session.get(Account, account_id, populate_existing=True)


class TestEntitlementChange:
    async def test_active_entitlement_sets_plan(self, db_session, subscription_service, event_bus):
        account = await create_account(db_session)

        updated = await subscription_service.handle_entitlement_change(
            account.id, {"3_room_access"}
        )

        assert updated.plan == SubscriptionPlan.ROOM_03
        assert updated.room_quota == 3
        assert updated.has_active_entitlement is True
        [event] = event_bus.of_type(SubscriptionUpdated)
        assert event.room_quota == 3

    async def test_highest_tier_wins(self, db_session, subscription_service):
        account = await create_account(db_session)

        updated = await subscription_service.handle_entitlement_change(
            account.id, {"1_room_access", "4_room_access", "2_room_access"}
        )

        assert updated.plan == SubscriptionPlan.ROOM_04

    async def test_losing_entitlement_starts_grace_period(
        self, db_session, subscription_service, scheduler, event_bus, check_session
    ):
        account = await create_account(db_session, AccountFactory.subscribed())
        before = utc_now()

        await subscription_service.handle_entitlement_change(account.id, set())

        stored = await reload(check_session, account.id)
        expected = before + timedelta(days=16)
        assert stored.is_in_grace_period is True
        assert stored.has_active_entitlement is False
        assert stored.plan == SubscriptionPlan.ROOM_02
        assert abs((stored.grace_period_end - expected).total_seconds()) <= 1
        assert scheduler.scheduled == [(account.id, stored.grace_period_end, True)]
        assert len(event_bus.of_type(SubscriptionCancelled)) == 1

    async def test_grace_period_starts_once(self, db_session, subscription_service, scheduler):
        account = await create_account(db_session, AccountFactory.in_grace())
        original_end = account.grace_period_end

        updated = await subscription_service.handle_entitlement_change(account.id, set())

        assert updated.grace_period_end == original_end
        assert scheduler.scheduled == []

    async def test_no_plan_and_no_entitlement_is_a_no_op(
        self, db_session, subscription_service, check_session
    ):
        account = await create_account(db_session)

        await subscription_service.handle_entitlement_change(account.id, set())

        stored = await reload(check_session, account.id)
        assert stored.is_in_grace_period is False
        assert stored.plan == SubscriptionPlan.NONE

    async def test_unknown_entitlement_counts_as_none(
        self, db_session, subscription_service, check_session
    ):
        account = await create_account(db_session, AccountFactory.subscribed())

        await subscription_service.handle_entitlement_change(account.id, {"gold_tier"})

        assert (await reload(check_session, account.id)).is_in_grace_period is True

    async def test_reactivation_clears_grace_and_keeps_rooms(
        self, db_session, subscription_service, event_bus, check_session
    ):
        account = await create_account(db_session, AccountFactory.in_grace())
        room = await create_room(db_session, account)

        await subscription_service.handle_entitlement_change(account.id, {"2_room_access"})

        stored = await reload(check_session, account.id)
        assert stored.is_in_grace_period is False
        assert stored.grace_period_end is None
        assert stored.has_active_entitlement is True
        assert await check_session.get(Room, room.id) is not None
        assert len(event_bus.of_type(SubscriptionReactivated)) == 1

    async def test_super_admin_is_untouched(self, db_session, subscription_service, check_session):
        account = await create_account(db_session, AccountFactory.super_admin())

        await subscription_service.handle_entitlement_change(account.id, set())

        stored = await reload(check_session, account.id)
        assert stored.plan == SubscriptionPlan.SUPER_ADMIN
        assert stored.is_in_grace_period is False

    async def test_scheduler_failure_keeps_grace_period(
        self, db_session, subscription_service, check_session
    ):
        subscription_service.scheduler = FakeScheduler(fail=True)
        account = await create_account(db_session, AccountFactory.subscribed())

        await subscription_service.handle_entitlement_change(account.id, set())

        assert (await reload(check_session, account.id)).is_in_grace_period is True


class TestGraceExpiry:
    async def test_not_due_before_end(self, db_session, subscription_service, entitlements):
        account = await create_account(db_session, AccountFactory.in_grace())

        outcome = await subscription_service.check_grace_expiry(account.id)

        assert outcome == GraceOutcome.NOT_DUE
        assert entitlements.calls == []

    async def test_not_due_without_grace(self, db_session, subscription_service):
        account = await create_account(db_session, AccountFactory.subscribed())

        assert await subscription_service.check_grace_expiry(account.id) == GraceOutcome.NOT_DUE

    async def test_expiry_deletes_owned_rooms(
        self, db_session, subscription_service, entitlements, event_bus, check_session
    ):
        owner = await create_account(db_session, AccountFactory.in_grace(ends_in=-timedelta(hours=1)))
        room = await create_room(db_session, owner, name="Owned")
        member = await create_account(db_session)
        await add_member(db_session, room, member, active=True)

        outcome = await subscription_service.check_grace_expiry(owner.id)

        assert outcome == GraceOutcome.ROOMS_DELETED
        assert entitlements.calls == [str(owner.id), str(owner.id)]
        assert await check_session.get(Room, room.id) is None
        assert await check_session.get(RoomAccess, (member.id, room.id)) is None
        assert await check_session.get(RoomMember, (room.id, member.id)) is None

        stored = await reload(check_session, owner.id)
        assert stored.plan == SubscriptionPlan.NONE
        assert stored.room_quota == 0
        assert stored.is_in_grace_period is False
        assert stored.grace_period_end is None

        [event] = event_bus.of_type(RoomsDeletedAfterGracePeriod)
        assert event.room_ids == (room.id,)

    async def test_member_rooms_elsewhere_are_kept(self, db_session, subscription_service, check_session):
        other_owner = await create_account(db_session, AccountFactory.subscribed())
        other_room = await create_room(db_session, other_owner, name="Elsewhere")
        owner = await create_account(db_session, AccountFactory.in_grace(ends_in=-timedelta(days=1)))
        await add_member(db_session, other_room, owner)

        await subscription_service.check_grace_expiry(owner.id)

        assert await check_session.get(Room, other_room.id) is not None
        assert await check_session.get(RoomAccess, (owner.id, other_room.id)) is not None

    async def test_late_reactivation_on_recheck(
        self, db_session, subscription_service, entitlements, check_session
    ):
        owner = await create_account(db_session, AccountFactory.in_grace(ends_in=-timedelta(hours=1)))
        room = await create_room(db_session, owner)
        entitlements.queue(set(), {"2_room_access"})

        outcome = await subscription_service.check_grace_expiry(owner.id)

        assert outcome == GraceOutcome.REACTIVATED
        assert await check_session.get(Room, room.id) is not None
        assert (await reload(check_session, owner.id)).is_in_grace_period is False

    async def test_first_lookup_failure_is_retried(
        self, db_session, subscription_service, entitlements, lookup_error
    ):
        owner = await create_account(db_session, AccountFactory.in_grace(ends_in=-timedelta(hours=1)))
        entitlements.queue(lookup_error, {"1_room_access"})

        assert await subscription_service.check_grace_expiry(owner.id) == GraceOutcome.REACTIVATED

    async def test_second_lookup_failure_deletes_nothing(
        self, db_session, subscription_service, entitlements, lookup_error, check_session
    ):
        owner = await create_account(db_session, AccountFactory.in_grace(ends_in=-timedelta(hours=1)))
        room = await create_room(db_session, owner)
        entitlements.queue(set(), lookup_error)

        with pytest.raises(EntitlementLookupError):
            await subscription_service.check_grace_expiry(owner.id)

        assert await check_session.get(Room, room.id) is not None
        assert (await reload(check_session, owner.id)).is_in_grace_period is True

    async def test_partial_room_deletion_keeps_account_in_grace(
        self, db_session, subscription_service, check_session
    ):
        owner = await create_account(
            db_session, AccountFactory.in_grace(SubscriptionPlan.ROOM_03, ends_in=-timedelta(hours=1))
        )
        rooms = [await create_room(db_session, owner, name=f"Room {i}") for i in range(3)]
        failing = rooms[1].id

        original = room_ledger.purge_room

        async def flaky_purge(session, room_id):
            if room_id == failing:
                raise RuntimeError("connection reset")
            return await original(session, room_id)

        with (
            patch.object(room_ledger, "purge_room", side_effect=flaky_purge),
            pytest.raises(PartialWriteError),
        ):
            await subscription_service.check_grace_expiry(owner.id)

        remaining = (await check_session.execute(select(Room))).scalars().all()
        assert [room.id for room in remaining] == [failing]
        assert (await reload(check_session, owner.id)).is_in_grace_period is True


class TestResume:
    async def test_schedules_every_account_in_grace(self, db_session, subscription_service, scheduler):
        overdue = await create_account(db_session, AccountFactory.in_grace(ends_in=-timedelta(days=2)))
        pending = await create_account(db_session, AccountFactory.in_grace())
        await create_account(db_session, AccountFactory.subscribed())

        scheduled = await subscription_service.resume_grace_periods()

        assert scheduled == 2
        assert {entry[0] for entry in scheduler.scheduled} == {overdue.id, pending.id}
        assert all(entry[2] is False for entry in scheduler.scheduled)

    async def test_scheduler_failure_is_counted(self, db_session, subscription_service):
        subscription_service.scheduler = FakeScheduler(fail=True)
        await create_account(db_session, AccountFactory.in_grace())

        assert await subscription_service.resume_grace_periods() == 0


class TestPurchases:
    async def test_downgrade_below_owned_rooms_is_refused(
        self, db_session, subscription_service, check_session
    ):
        owner = await create_account(db_session, AccountFactory.subscribed(SubscriptionPlan.ROOM_03))
        for i in range(3):
            await create_room(db_session, owner, name=f"Room {i}")

        with pytest.raises(QuotaExceededError, match="delete 1 room"):
            await subscription_service.validate_purchase(owner.id, SubscriptionPlan.ROOM_02)

        stored = await reload(check_session, owner.id)
        assert stored.plan == SubscriptionPlan.ROOM_03
        assert len((await check_session.execute(select(Room))).scalars().all()) == 3

    async def test_upgrade_is_allowed(self, db_session, subscription_service):
        owner = await create_account(db_session, AccountFactory.subscribed(SubscriptionPlan.ROOM_01))
        await create_room(db_session, owner)

        await subscription_service.validate_purchase(owner.id, SubscriptionPlan.ROOM_05)

    async def test_restore_applies_current_entitlements(
        self, db_session, subscription_service, entitlements
    ):
        account = await create_account(db_session)
        entitlements.default = {"5_room_access"}

        restored = await subscription_service.restore_purchases(account.id)

        assert restored.plan == SubscriptionPlan.ROOM_05
        assert entitlements.calls == [str(account.id)]

    async def test_state(self, db_session, subscription_service):
        owner = await create_account(db_session, AccountFactory.subscribed(SubscriptionPlan.ROOM_02))
        await create_room(db_session, owner)

        state = await subscription_service.get_state(owner.id)

        assert state.plan == SubscriptionPlan.ROOM_02
        assert state.owned_room_count == 1
        assert state.can_create_room is True
        assert state.display_name == "2 Room Plan"


class TestSuperAdmin:
    async def test_valid_code_grants_super_admin(self, db_session, subscription_service):
        account = await create_account(db_session, AccountFactory.in_grace())

        updated = await subscription_service.apply_super_admin_code(account.id, " open-sesame ")

        assert updated.is_super_admin is True
        assert updated.plan == SubscriptionPlan.SUPER_ADMIN
        assert updated.room_quota == 999
        assert updated.is_in_grace_period is False

    async def test_invalid_code(self, db_session, subscription_service):
        account = await create_account(db_session)

        with pytest.raises(InvalidOrExpiredCodeError):
            await subscription_service.apply_super_admin_code(account.id, "guess")

    async def test_remove_super_admin(self, db_session, subscription_service):
        account = await create_account(db_session, AccountFactory.super_admin())

        updated = await subscription_service.remove_super_admin(account.id)

        assert updated.is_super_admin is False
        assert updated.plan == SubscriptionPlan.NONE
        assert updated.room_quota == 0

    async def test_paying_account_cannot_drop_to_no_plan(
        self, db_session, subscription_service, scheduler
    ):
        account = await create_account(db_session, AccountFactory.subscribed())
        room = await create_room(db_session, account)

        with pytest.raises(PermissionDeniedError):
            await subscription_service.remove_super_admin(account.id)

        await subscription_service.handle_entitlement_change(account.id, set())

        stored = await reload(db_session, account.id)
        assert stored.plan == SubscriptionPlan.ROOM_02
        assert stored.is_in_grace_period is True
        assert [entry[0] for entry in scheduler.scheduled] == [account.id]
        assert await db_session.get(Room, room.id) is not None
