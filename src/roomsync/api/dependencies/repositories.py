"""Repository factory dependencies."""

from typing import Annotated

from fastapi import Depends

from src.roomsync.api.dependencies.db import DBSession
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


def get_account_repository(session: DBSession) -> AccountRepository:
    return AccountRepository(session)


def get_mapping_repository(session: DBSession) -> AuthMappingRepository:
    return AuthMappingRepository(session)


def get_room_repository(session: DBSession) -> RoomRepository:
    return RoomRepository(session)


def get_member_repository(session: DBSession) -> RoomMemberRepository:
    return RoomMemberRepository(session)


def get_access_repository(session: DBSession) -> RoomAccessRepository:
    return RoomAccessRepository(session)


def get_invitation_repository(session: DBSession) -> InvitationRepository:
    return InvitationRepository(session)


def get_demo_code_repository(session: DBSession) -> DemoCodeRepository:
    return DemoCodeRepository(session)


def get_transfer_repository(session: DBSession) -> TransferRequestRepository:
    return TransferRequestRepository(session)


AccountRepo = Annotated[AccountRepository, Depends(get_account_repository)]
MappingRepo = Annotated[AuthMappingRepository, Depends(get_mapping_repository)]
RoomRepo = Annotated[RoomRepository, Depends(get_room_repository)]
MemberRepo = Annotated[RoomMemberRepository, Depends(get_member_repository)]
AccessRepo = Annotated[RoomAccessRepository, Depends(get_access_repository)]
InvitationRepo = Annotated[InvitationRepository, Depends(get_invitation_repository)]
DemoCodeRepo = Annotated[DemoCodeRepository, Depends(get_demo_code_repository)]
TransferRepo = Annotated[TransferRequestRepository, Depends(get_transfer_repository)]
