from fastapi import APIRouter

from src.roomsync.api.v1 import (
    accounts,
    admin,
    demo_codes,
    invitations,
    rooms,
    subscriptions,
    transfers,
)

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(accounts.router)
api_router.include_router(rooms.router)
api_router.include_router(invitations.router)
api_router.include_router(demo_codes.router)
api_router.include_router(subscriptions.router)
api_router.include_router(transfers.router)
api_router.include_router(admin.router)
