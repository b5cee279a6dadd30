"""Model exports.

Import from here: `from src.roomsync.models import Account, Room`
"""

from src.roomsync.models.account import Account, AuthMapping
from src.roomsync.models.enums import (
    REDEEMABLE_INVITATION_STATUSES,
    InvitationStatus,
    RedemptionKind,
    SubscriptionPlan,
    TransferStatus,
)
from src.roomsync.models.invitation import DemoCode, Invitation
from src.roomsync.models.room import Room, RoomAccess, RoomMember
from src.roomsync.models.transfer import TransferRequest

__all__ = [
    # Enums
    "InvitationStatus",
    "REDEEMABLE_INVITATION_STATUSES",
    "RedemptionKind",
    "SubscriptionPlan",
    "TransferStatus",
    # Directory
    "Account",
    "AuthMapping",
    # Ledger
    "Room",
    "RoomAccess",
    "RoomMember",
    # Join codes
    "DemoCode",
    "Invitation",
    # Transfers
    "TransferRequest",
]
