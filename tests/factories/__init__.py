"""Test factories for generating test data.

Re-exports all factories for convenient imports:
    from tests.factories import AccountFactory, RoomFactory, ...
"""

from tests.factories.base import BaseFactory, generate_uuid, utc_now
from tests.factories.codes import DemoCodeFactory, InvitationFactory, TransferRequestFactory
from tests.factories.directory import AccountFactory, AuthMappingFactory
from tests.factories.ledger import RoomAccessFactory, RoomFactory, RoomMemberFactory

__all__ = [
    # Base
    "BaseFactory",
    "generate_uuid",
    "utc_now",
    # Directory
    "AccountFactory",
    "AuthMappingFactory",
    # Ledger
    "RoomAccessFactory",
    "RoomFactory",
    "RoomMemberFactory",
    # Codes and transfers
    "DemoCodeFactory",
    "InvitationFactory",
    "TransferRequestFactory",
]
