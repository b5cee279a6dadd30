"""Service construction for activities.

Activities run outside FastAPI's dependency injection, so they build the
same services from a fresh session.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from src.roomsync.core.config import get_settings
from src.roomsync.core.db import get_session_factory
from src.roomsync.core.events import create_event_bus
from src.roomsync.core.integrations import get_entitlement_provider
from src.roomsync.repositories import (
    AccountRepository,
    AuthMappingRepository,
    RoomAccessRepository,
    RoomMemberRepository,
    RoomRepository,
)
from src.roomsync.services import ReconciliationService, SubscriptionService


def build_subscription_service(session: AsyncSession) -> SubscriptionService:
    # Imported here: scheduling imports the workflows, which import activities.
    from src.roomsync.temporal.scheduling import TemporalGraceScheduler

    settings = get_settings()
    return SubscriptionService(
        account_repo=AccountRepository(session),
        room_repo=RoomRepository(session),
        session=session,
        session_factory=get_session_factory(),
        entitlements=get_entitlement_provider(),
        scheduler=TemporalGraceScheduler(),
        event_bus=create_event_bus(),
        grace_period_days=settings.grace_period_days,
        recheck_delay_seconds=settings.grace_recheck_delay_seconds,
        super_admin_codes=settings.super_admin_code_set,
    )


def build_reconciliation_service(session: AsyncSession) -> ReconciliationService:
    return ReconciliationService(
        mapping_repo=AuthMappingRepository(session),
        account_repo=AccountRepository(session),
        access_repo=RoomAccessRepository(session),
        member_repo=RoomMemberRepository(session),
        session=session,
    )
