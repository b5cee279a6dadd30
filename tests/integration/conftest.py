"""Service and HTTP client fixtures wired to the test database and fake collaborators."""

from collections.abc import AsyncGenerator

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from src.roomsync.api.dependencies import (
    get_db_session,
    get_db_session_factory,
    get_entitlements,
    get_grace_scheduler,
    get_identity,
)
from src.roomsync.core.db import SessionFactory
from src.roomsync.main import create_app
from src.roomsync.repositories import (
    AccountRepository,
    AuthMappingRepository,
    DemoCodeRepository,
    InvitationRepository,
    RoomAccessRepository,
    RoomMemberRepository,
    RoomRepository,
    TransferRequestRepository,
)
from src.roomsync.services import (
    AccountDeletionService,
    DirectoryService,
    InviteService,
    ReconciliationService,
    RedemptionService,
    RoomService,
    SubscriptionService,
    TransferService,
)

SUPER_ADMIN_CODES = {"OPEN-SESAME", "BACKUP-CODE"}


@pytest.fixture
async def service_session(session_factory: SessionFactory) -> AsyncGenerator[AsyncSession]:
    """Session owned by the service under test.

    Kept apart from the seeding session so that a rollback inside a
    service does not expire the objects a test arranged.
    """
    async with session_factory() as session:
        yield session


@pytest.fixture
def directory_service(service_session: AsyncSession, event_bus) -> DirectoryService:
    return DirectoryService(
        AuthMappingRepository(service_session),
        AccountRepository(service_session),
        service_session,
        event_bus,
    )


@pytest.fixture
def room_service(service_session: AsyncSession, event_bus) -> RoomService:
    return RoomService(
        AccountRepository(service_session),
        RoomRepository(service_session),
        RoomMemberRepository(service_session),
        RoomAccessRepository(service_session),
        service_session,
        event_bus,
    )


@pytest.fixture
def invite_service(service_session: AsyncSession) -> InviteService:
    return InviteService(
        InvitationRepository(service_session),
        DemoCodeRepository(service_session),
        RoomRepository(service_session),
        RoomMemberRepository(service_session),
        AccountRepository(service_session),
        service_session,
    )


@pytest.fixture
def redemption_service(service_session: AsyncSession, event_bus) -> RedemptionService:
    return RedemptionService(
        InvitationRepository(service_session),
        DemoCodeRepository(service_session),
        RoomRepository(service_session),
        RoomAccessRepository(service_session),
        RoomMemberRepository(service_session),
        AccountRepository(service_session),
        AuthMappingRepository(service_session),
        service_session,
        event_bus,
    )


@pytest.fixture
def subscription_service(
    service_session: AsyncSession,
    session_factory: SessionFactory,
    entitlements,
    scheduler,
    event_bus,
) -> SubscriptionService:
    return SubscriptionService(
        AccountRepository(service_session),
        RoomRepository(service_session),
        service_session,
        session_factory,
        entitlements,
        scheduler,
        event_bus,
        grace_period_days=16,
        recheck_delay_seconds=0,
        super_admin_codes=SUPER_ADMIN_CODES,
    )


@pytest.fixture
def deletion_service(
    service_session: AsyncSession, session_factory: SessionFactory, identity_provider
) -> AccountDeletionService:
    return AccountDeletionService(
        AccountRepository(service_session),
        AuthMappingRepository(service_session),
        RoomRepository(service_session),
        RoomAccessRepository(service_session),
        RoomMemberRepository(service_session),
        service_session,
        session_factory,
        identity_provider,
    )


@pytest.fixture
def transfer_service(service_session: AsyncSession) -> TransferService:
    return TransferService(
        TransferRequestRepository(service_session),
        RoomRepository(service_session),
        RoomMemberRepository(service_session),
        RoomAccessRepository(service_session),
        AccountRepository(service_session),
        service_session,
    )


@pytest.fixture
def reconciliation_service(service_session: AsyncSession) -> ReconciliationService:
    return ReconciliationService(
        AuthMappingRepository(service_session),
        AccountRepository(service_session),
        RoomAccessRepository(service_session),
        RoomMemberRepository(service_session),
        service_session,
    )


# --- HTTP API ---


@pytest.fixture
def app(
    session_factory: SessionFactory,
    entitlements,
    scheduler,
    identity_provider,
    event_bus,
) -> FastAPI:
    """Application with the database and external services replaced."""
    application = create_app()
    application.state.event_bus = event_bus

    async def override_session() -> AsyncGenerator[AsyncSession]:
        async with session_factory() as session:
            yield session

    application.dependency_overrides[get_db_session] = override_session
    application.dependency_overrides[get_db_session_factory] = lambda: session_factory
    application.dependency_overrides[get_entitlements] = lambda: entitlements
    application.dependency_overrides[get_grace_scheduler] = lambda: scheduler
    application.dependency_overrides[get_identity] = lambda: identity_provider
    return application


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient]:
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c
