"""Invitation and join code API endpoints."""

from fastapi import APIRouter, Response, status

from src.roomsync.api.dependencies import (
    AuthenticatedIdentity,
    CurrentAccount,
    InviteServiceDep,
    RedemptionServiceDep,
)
from src.roomsync.schemas import (
    CodePreviewResponse,
    InvitationCreateRequest,
    InvitationListResponse,
    InvitationRead,
    RedeemRequest,
    RedeemResponse,
    RedeemWithSignupRequest,
)
from src.roomsync.services.redemption_service import Redemption

router = APIRouter(tags=["invitations"])


# =============================================================================
# Room admin endpoints
# =============================================================================


@router.post(
    "/rooms/{room_id}/invitations",
    response_model=InvitationRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create invitation",
    description="Create a one-time 6 character join code. Room admin required.",
)
async def create_invitation(
    room_id: str,
    request: InvitationCreateRequest,
    account: CurrentAccount,
    invite_service: InviteServiceDep,
) -> InvitationRead:
    invitation = await invite_service.create_invitation(
        account.id,
        room_id,
        is_admin=request.is_admin,
        phone_number=request.phone_number,
    )
    return InvitationRead.model_validate(invitation)


@router.get(
    "/rooms/{room_id}/invitations",
    response_model=InvitationListResponse,
    summary="List room invitations",
)
async def list_invitations(
    room_id: str,
    account: CurrentAccount,
    invite_service: InviteServiceDep,
) -> InvitationListResponse:
    invitations = await invite_service.list_room_invitations(account.id, room_id)
    return InvitationListResponse(
        invitations=[InvitationRead.model_validate(inv) for inv in invitations],
        total=len(invitations),
    )


@router.post(
    "/invitations/{code}/sent",
    response_model=InvitationRead,
    summary="Mark invitation sent",
)
async def mark_invitation_sent(
    code: str,
    account: CurrentAccount,
    invite_service: InviteServiceDep,
) -> InvitationRead:
    invitation = await invite_service.mark_invitation_sent(account.id, code)
    return InvitationRead.model_validate(invitation)


@router.delete(
    "/invitations/{code}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Cancel invitation",
)
async def cancel_invitation(
    code: str,
    account: CurrentAccount,
    invite_service: InviteServiceDep,
) -> Response:
    await invite_service.cancel_invitation(account.id, code)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# =============================================================================
# Redemption
# =============================================================================


def _redeem_response(redemption: Redemption) -> RedeemResponse:
    return RedeemResponse(
        account_id=redemption.account.id,
        room_id=redemption.access.room_id,
        kind=redemption.kind.value,
        is_admin=redemption.access.is_admin,
        account_created=redemption.account_created,
    )


@router.get(
    "/codes/{code}",
    response_model=CodePreviewResponse,
    summary="Preview join code",
    description="Check what a code grants without joining.",
)
async def preview_code(
    code: str,
    claims: AuthenticatedIdentity,
    redemption_service: RedemptionServiceDep,
) -> CodePreviewResponse:
    resolved = await redemption_service.preview_code(code)
    return CodePreviewResponse(
        kind=resolved.kind.value,
        room_id=resolved.room.id,
        room_name=resolved.room.name,
        is_admin=resolved.is_admin,
    )


@router.post(
    "/codes/redeem",
    response_model=RedeemResponse,
    summary="Join room with code",
)
async def redeem_code(
    request: RedeemRequest,
    account: CurrentAccount,
    redemption_service: RedemptionServiceDep,
) -> RedeemResponse:
    redemption = await redemption_service.redeem(request.code, account.id)
    return _redeem_response(redemption)


@router.post(
    "/codes/redeem-signup",
    response_model=RedeemResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create account and join room",
    description="For first-time users: the account is created together with the join.",
)
async def redeem_code_with_signup(
    request: RedeemWithSignupRequest,
    claims: AuthenticatedIdentity,
    redemption_service: RedemptionServiceDep,
) -> RedeemResponse:
    redemption = await redemption_service.redeem_with_signup(
        request.code,
        claims.subject,
        name=request.name,
        email=claims.email,
    )
    return _redeem_response(redemption)
