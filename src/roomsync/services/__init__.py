from src.roomsync.services.account_deletion_service import AccountDeletionService
from src.roomsync.services.directory_service import DirectoryService
from src.roomsync.services.invite_service import InviteService
from src.roomsync.services.reconciliation_service import ReconciliationService
from src.roomsync.services.redemption_service import RedemptionService
from src.roomsync.services.room_service import RoomService
from src.roomsync.services.subscription_service import SubscriptionService
from src.roomsync.services.transfer_service import TransferService

__all__ = [
    "AccountDeletionService",
    "DirectoryService",
    "InviteService",
    "ReconciliationService",
    "RedemptionService",
    "RoomService",
    "SubscriptionService",
    "TransferService",
]
