"""Room and membership API endpoints."""

from uuid import UUID

from fastapi import APIRouter, Response, status

from src.roomsync.api.dependencies import CurrentAccount, RoomServiceDep
from src.roomsync.schemas import (
    MemberAdminUpdate,
    RoomAccessRead,
    RoomCreate,
    RoomCreateResponse,
    RoomDeleteResponse,
    RoomMemberRead,
    RoomRead,
)

router = APIRouter(prefix="/rooms", tags=["rooms"])


@router.get(
    "",
    response_model=list[RoomAccessRead],
    summary="List my rooms",
    description="Rooms the caller can access. At most one is active.",
)
async def list_rooms(account: CurrentAccount, room_service: RoomServiceDep) -> list[RoomAccessRead]:
    entries = await room_service.list_access(account.id)
    return [RoomAccessRead.model_validate(entry) for entry in entries]


@router.post(
    "",
    response_model=RoomCreateResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create room",
    description="Create a room owned by the caller. Requires a free slot in the room quota.",
)
async def create_room(
    request: RoomCreate,
    account: CurrentAccount,
    room_service: RoomServiceDep,
) -> RoomCreateResponse:
    room, access = await room_service.create_room(account.id, request.name)
    return RoomCreateResponse(
        room=RoomRead.model_validate(room),
        access=RoomAccessRead.model_validate(access),
    )


@router.post(
    "/{room_id}/activate",
    response_model=RoomAccessRead,
    summary="Switch active room",
)
async def switch_room(
    room_id: str,
    account: CurrentAccount,
    room_service: RoomServiceDep,
) -> RoomAccessRead:
    access = await room_service.switch_room(account.id, room_id)
    return RoomAccessRead.model_validate(access)


@router.post(
    "/{room_id}/leave",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Leave room",
)
async def leave_room(
    room_id: str,
    account: CurrentAccount,
    room_service: RoomServiceDep,
) -> Response:
    await room_service.leave_room(account.id, room_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete(
    "/{room_id}",
    response_model=RoomDeleteResponse,
    summary="Delete room",
    description="Delete an owned room and remove every member's access to it.",
)
async def delete_room(
    room_id: str,
    account: CurrentAccount,
    room_service: RoomServiceDep,
) -> RoomDeleteResponse:
    member_ids = await room_service.delete_room(account.id, room_id)
    return RoomDeleteResponse(room_id=room_id, removed_member_ids=member_ids)


@router.get(
    "/{room_id}/members",
    response_model=list[RoomMemberRead],
    summary="List room members",
)
async def list_members(
    room_id: str,
    account: CurrentAccount,
    room_service: RoomServiceDep,
) -> list[RoomMemberRead]:
    members = await room_service.list_members(account.id, room_id)
    return [RoomMemberRead.model_validate(member) for member in members]


@router.patch(
    "/{room_id}/members/{member_id}",
    response_model=RoomMemberRead,
    summary="Grant or revoke admin rights",
)
async def update_member(
    room_id: str,
    member_id: UUID,
    request: MemberAdminUpdate,
    account: CurrentAccount,
    room_service: RoomServiceDep,
) -> RoomMemberRead:
    member = await room_service.set_member_admin(account.id, room_id, member_id, request.is_admin)
    return RoomMemberRead.model_validate(member)


@router.delete(
    "/{room_id}/members/{member_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Remove member",
)
async def remove_member(
    room_id: str,
    member_id: UUID,
    account: CurrentAccount,
    room_service: RoomServiceDep,
) -> Response:
    await room_service.remove_member(account.id, room_id, member_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
