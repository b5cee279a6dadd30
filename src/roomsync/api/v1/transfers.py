"""Room ownership transfer API endpoints."""

from uuid import UUID

from fastapi import APIRouter, status

from src.roomsync.api.dependencies import CurrentAccount, TransferServiceDep
from src.roomsync.schemas import TransferCreateRequest, TransferRead

router = APIRouter(prefix="/transfers", tags=["transfers"])


@router.post(
    "",
    response_model=TransferRead,
    status_code=status.HTTP_201_CREATED,
    summary="Offer room ownership",
    description="Offer ownership of an owned room to one of its members.",
)
async def request_transfer(
    request: TransferCreateRequest,
    account: CurrentAccount,
    transfer_service: TransferServiceDep,
) -> TransferRead:
    transfer = await transfer_service.request_transfer(
        account.id, request.room_id, request.recipient_id
    )
    return TransferRead.model_validate(transfer)


@router.get("/incoming", response_model=list[TransferRead], summary="List offers to me")
async def list_incoming(
    account: CurrentAccount,
    transfer_service: TransferServiceDep,
) -> list[TransferRead]:
    transfers = await transfer_service.list_pending_transfers(account.id)
    return [TransferRead.model_validate(t) for t in transfers]


@router.get("/outgoing", response_model=list[TransferRead], summary="List my offers")
async def list_outgoing(
    account: CurrentAccount,
    transfer_service: TransferServiceDep,
) -> list[TransferRead]:
    transfers = await transfer_service.list_sent_transfers(account.id)
    return [TransferRead.model_validate(t) for t in transfers]


@router.post(
    "/{request_id}/accept",
    response_model=TransferRead,
    summary="Accept ownership",
    description=(
        "Take ownership of the room. Without a subscription the offer is kept "
        "and can be accepted again after subscribing."
    ),
)
async def accept_transfer(
    request_id: UUID,
    account: CurrentAccount,
    transfer_service: TransferServiceDep,
) -> TransferRead:
    transfer = await transfer_service.accept_transfer(account.id, request_id)
    return TransferRead.model_validate(transfer)


@router.post("/{request_id}/decline", response_model=TransferRead, summary="Decline ownership")
async def decline_transfer(
    request_id: UUID,
    account: CurrentAccount,
    transfer_service: TransferServiceDep,
) -> TransferRead:
    transfer = await transfer_service.decline_transfer(account.id, request_id)
    return TransferRead.model_validate(transfer)


@router.post("/{request_id}/cancel", response_model=TransferRead, summary="Cancel offer")
async def cancel_transfer(
    request_id: UUID,
    account: CurrentAccount,
    transfer_service: TransferServiceDep,
) -> TransferRead:
    transfer = await transfer_service.cancel_transfer(account.id, request_id)
    return TransferRead.model_validate(transfer)
