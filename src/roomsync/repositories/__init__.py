"""Repository layer - data access abstraction."""

from src.roomsync.repositories.account import AccountRepository, AuthMappingRepository
from src.roomsync.repositories.base import BaseRepository
from src.roomsync.repositories.invitation import DemoCodeRepository, InvitationRepository
from src.roomsync.repositories.room import (
    RoomAccessRepository,
    RoomMemberRepository,
    RoomRepository,
)
from src.roomsync.repositories.transfer import TransferRequestRepository

__all__ = [
    # Base
    "BaseRepository",
    # Directory
    "AccountRepository",
    "AuthMappingRepository",
    # Ledger
    "RoomAccessRepository",
    "RoomMemberRepository",
    "RoomRepository",
    # Join codes
    "DemoCodeRepository",
    "InvitationRepository",
    # Transfers
    "TransferRequestRepository",
]
