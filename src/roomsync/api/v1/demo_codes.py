"""Demo code API endpoints (super admin only)."""

from fastapi import APIRouter

from src.roomsync.api.dependencies import InviteServiceDep, SuperAdminAccount
from src.roomsync.schemas import DemoCodeCreateRequest, DemoCodeRead, DemoCodeToggleRequest

router = APIRouter(tags=["demo-codes"])


@router.get("/demo-codes", response_model=list[DemoCodeRead], summary="List demo codes")
async def list_demo_codes(
    account: SuperAdminAccount,
    invite_service: InviteServiceDep,
) -> list[DemoCodeRead]:
    codes = await invite_service.list_demo_codes(account.id)
    return [DemoCodeRead.model_validate(code) for code in codes]


@router.put(
    "/rooms/{room_id}/demo-code",
    response_model=DemoCodeRead,
    summary="Set room demo code",
    description="Create or replace the room's reusable demo code. Usage count restarts at 0.",
)
async def set_demo_code(
    room_id: str,
    request: DemoCodeCreateRequest,
    account: SuperAdminAccount,
    invite_service: InviteServiceDep,
) -> DemoCodeRead:
    demo_code = await invite_service.create_demo_code(account.id, room_id, request.code)
    return DemoCodeRead.model_validate(demo_code)


@router.patch(
    "/rooms/{room_id}/demo-code",
    response_model=DemoCodeRead,
    summary="Activate or deactivate demo code",
)
async def toggle_demo_code(
    room_id: str,
    request: DemoCodeToggleRequest,
    account: SuperAdminAccount,
    invite_service: InviteServiceDep,
) -> DemoCodeRead:
    demo_code = await invite_service.set_demo_code_active(account.id, room_id, request.is_active)
    return DemoCodeRead.model_validate(demo_code)
