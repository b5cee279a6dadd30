"""Tests for Temporal activities against the test database."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from datetime import timedelta
from unittest.mock import patch

import pytest
from sqlalchemy.ext.asyncio import AsyncSession
from temporalio.testing import ActivityEnvironment

from src.roomsync.models import Invitation, TransferRequest, TransferStatus
from src.roomsync.models.base import utc_now
from src.roomsync.temporal.activities import (
    GraceCheckInput,
    cleanup_invitations,
    expire_transfer_requests,
    reconcile_directory,
    run_grace_expiry_check,
)
from tests.factories import AccountFactory, InvitationFactory, TransferRequestFactory, generate_uuid
from tests.helpers import create_account, create_room

pytestmark = pytest.mark.integration


@pytest.fixture
def test_database(session_factory):
    @asynccontextmanager
    async def session() -> AsyncGenerator[AsyncSession]:
        async with session_factory() as s:
            yield s

    with (
        patch("src.roomsync.temporal.activities.maintenance.get_session", session),
        patch("src.roomsync.temporal.activities.subscription.get_session", session),
    ):
        yield


async def test_cleanup_invitations(db_session, check_session, test_database) -> None:
    owner = await create_account(db_session, AccountFactory.subscribed())
    room = await create_room(db_session, owner)
    long_expired = InvitationFactory.build(
        room_id=room.id, expires_at=utc_now() - timedelta(days=40)
    )
    old_accepted = InvitationFactory.accepted(
        room_id=room.id, created_at=utc_now() - timedelta(days=40)
    )
    recent = InvitationFactory.build(room_id=room.id)
    db_session.add_all([long_expired, old_accepted, recent])
    await db_session.commit()

    deleted = await ActivityEnvironment().run(cleanup_invitations, 30)

    assert deleted == 2
    assert await check_session.get(Invitation, recent.code) is not None
    assert await check_session.get(Invitation, long_expired.code) is None


async def test_expire_transfer_requests(db_session, check_session, test_database) -> None:
    stale = TransferRequestFactory.build(
        room_id="room-1",
        initiator_id=generate_uuid(),
        recipient_id=generate_uuid(),
        expires_at=utc_now() - timedelta(hours=1),
    )
    fresh = TransferRequestFactory.build(
        room_id="room-2", initiator_id=generate_uuid(), recipient_id=generate_uuid()
    )
    db_session.add_all([stale, fresh])
    await db_session.commit()

    env = ActivityEnvironment()
    assert await env.run(expire_transfer_requests) == 1
    assert await env.run(expire_transfer_requests) == 0

    assert (await check_session.get(TransferRequest, stale.id)).status == (
        TransferStatus.EXPIRED.value
    )
    assert (await check_session.get(TransferRequest, fresh.id)).status == (
        TransferStatus.PENDING.value
    )


async def test_reconcile_directory(db_session, test_database) -> None:
    drifted = AccountFactory.subscribed()
    drifted.room_quota = 9
    await create_account(db_session, drifted)

    report = await ActivityEnvironment().run(reconcile_directory)

    assert report == {
        "dangling_mappings_removed": 0,
        "orphaned_access_removed": 0,
        "orphaned_members_removed": 0,
        "quotas_corrected": 1,
    }


async def test_grace_expiry_check(db_session, subscription_service, test_database) -> None:
    account = await create_account(
        db_session, AccountFactory.in_grace(ends_in=-timedelta(minutes=1))
    )

    with patch(
        "src.roomsync.temporal.activities.subscription.build_subscription_service",
        return_value=subscription_service,
    ):
        outcome = await ActivityEnvironment().run(
            run_grace_expiry_check, GraceCheckInput(account_id=str(account.id))
        )

    assert outcome == "rooms_deleted"
