"""Account API endpoints."""

from fastapi import APIRouter, status

from src.roomsync.api.dependencies import (
    AccountDeletionServiceDep,
    AuthenticatedIdentity,
    CurrentAccount,
    DirectoryServiceDep,
)
from src.roomsync.schemas import (
    AccountDeletionResponse,
    AccountRead,
    SignInRequest,
    SignInResponse,
)

router = APIRouter(prefix="/accounts", tags=["accounts"])


@router.post(
    "/sign-in",
    response_model=SignInResponse,
    summary="Sign in",
    description="Resolve the caller's account, creating it on first sign-in.",
)
async def sign_in(
    claims: AuthenticatedIdentity,
    directory: DirectoryServiceDep,
    request: SignInRequest | None = None,
) -> SignInResponse:
    name = request.name if request and request.name else claims.name
    account, created = await directory.sign_in(claims.subject, name=name, email=claims.email)
    return SignInResponse(account=AccountRead.model_validate(account), created=created)


@router.get("/me", response_model=AccountRead, summary="Get current account")
async def get_me(account: CurrentAccount) -> AccountRead:
    return AccountRead.model_validate(account)


@router.delete(
    "/me",
    response_model=AccountDeletionResponse,
    status_code=status.HTTP_200_OK,
    summary="Delete account",
    description=(
        "Delete owned rooms, leave all other rooms, remove the account and "
        "its sign-in identity."
    ),
)
async def delete_me(
    account: CurrentAccount,
    claims: AuthenticatedIdentity,
    deletion_service: AccountDeletionServiceDep,
) -> AccountDeletionResponse:
    report = await deletion_service.delete_account(account.id, claims.subject)
    return AccountDeletionResponse(
        deleted_room_ids=report.deleted_room_ids,
        left_room_ids=report.left_room_ids,
    )
