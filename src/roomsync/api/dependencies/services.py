"""Service factory dependencies."""

from typing import Annotated

from fastapi import Depends

from src.roomsync.api.dependencies.db import DBSession, DBSessionFactory
from src.roomsync.api.dependencies.integrations import (
    Entitlements,
    EventBusDep,
    IdentityProviderDep,
    Scheduler,
)
from src.roomsync.api.dependencies.repositories import (
    AccessRepo,
    AccountRepo,
    DemoCodeRepo,
    InvitationRepo,
    MappingRepo,
    MemberRepo,
    RoomRepo,
    TransferRepo,
)
from src.roomsync.core.config import get_settings
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


def get_directory_service(
    mapping_repo: MappingRepo,
    account_repo: AccountRepo,
    session: DBSession,
    event_bus: EventBusDep,
) -> DirectoryService:
    return DirectoryService(mapping_repo, account_repo, session, event_bus)


def get_room_service(
    account_repo: AccountRepo,
    room_repo: RoomRepo,
    member_repo: MemberRepo,
    access_repo: AccessRepo,
    session: DBSession,
    event_bus: EventBusDep,
) -> RoomService:
    return RoomService(account_repo, room_repo, member_repo, access_repo, session, event_bus)


def get_invite_service(
    invitation_repo: InvitationRepo,
    demo_code_repo: DemoCodeRepo,
    room_repo: RoomRepo,
    member_repo: MemberRepo,
    account_repo: AccountRepo,
    session: DBSession,
) -> InviteService:
    return InviteService(
        invitation_repo, demo_code_repo, room_repo, member_repo, account_repo, session
    )


def get_redemption_service(
    invitation_repo: InvitationRepo,
    demo_code_repo: DemoCodeRepo,
    room_repo: RoomRepo,
    access_repo: AccessRepo,
    member_repo: MemberRepo,
    account_repo: AccountRepo,
    mapping_repo: MappingRepo,
    session: DBSession,
    event_bus: EventBusDep,
) -> RedemptionService:
    return RedemptionService(
        invitation_repo,
        demo_code_repo,
        room_repo,
        access_repo,
        member_repo,
        account_repo,
        mapping_repo,
        session,
        event_bus,
    )


def get_subscription_service(
    account_repo: AccountRepo,
    room_repo: RoomRepo,
    session: DBSession,
    session_factory: DBSessionFactory,
    entitlements: Entitlements,
    scheduler: Scheduler,
    event_bus: EventBusDep,
) -> SubscriptionService:
    settings = get_settings()
    return SubscriptionService(
        account_repo,
        room_repo,
        session,
        session_factory,
        entitlements,
        scheduler,
        event_bus,
        grace_period_days=settings.grace_period_days,
        recheck_delay_seconds=settings.grace_recheck_delay_seconds,
        super_admin_codes=settings.super_admin_code_set,
    )


def get_account_deletion_service(
    account_repo: AccountRepo,
    mapping_repo: MappingRepo,
    room_repo: RoomRepo,
    access_repo: AccessRepo,
    member_repo: MemberRepo,
    session: DBSession,
    session_factory: DBSessionFactory,
    identity: IdentityProviderDep,
) -> AccountDeletionService:
    return AccountDeletionService(
        account_repo,
        mapping_repo,
        room_repo,
        access_repo,
        member_repo,
        session,
        session_factory,
        identity,
    )


def get_transfer_service(
    transfer_repo: TransferRepo,
    room_repo: RoomRepo,
    member_repo: MemberRepo,
    access_repo: AccessRepo,
    account_repo: AccountRepo,
    session: DBSession,
) -> TransferService:
    return TransferService(
        transfer_repo, room_repo, member_repo, access_repo, account_repo, session
    )


def get_reconciliation_service(
    mapping_repo: MappingRepo,
    account_repo: AccountRepo,
    access_repo: AccessRepo,
    member_repo: MemberRepo,
    session: DBSession,
) -> ReconciliationService:
    return ReconciliationService(mapping_repo, account_repo, access_repo, member_repo, session)


DirectoryServiceDep = Annotated[DirectoryService, Depends(get_directory_service)]
RoomServiceDep = Annotated[RoomService, Depends(get_room_service)]
InviteServiceDep = Annotated[InviteService, Depends(get_invite_service)]
RedemptionServiceDep = Annotated[RedemptionService, Depends(get_redemption_service)]
SubscriptionServiceDep = Annotated[SubscriptionService, Depends(get_subscription_service)]
AccountDeletionServiceDep = Annotated[
    AccountDeletionService, Depends(get_account_deletion_service)
]
TransferServiceDep = Annotated[TransferService, Depends(get_transfer_service)]
ReconciliationServiceDep = Annotated[
    ReconciliationService, Depends(get_reconciliation_service)
]
