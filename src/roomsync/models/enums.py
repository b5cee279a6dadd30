"""Shared enums for models."""

from enum import Enum


class SubscriptionPlan(str, Enum):
    """Room-quota plan held by an account."""

    NONE = "none"
    ROOM_01 = "room_01"
    ROOM_02 = "room_02"
    ROOM_03 = "room_03"
    ROOM_04 = "room_04"
    ROOM_05 = "room_05"
    SUPER_ADMIN = "super_admin"


class InvitationStatus(str, Enum):
    """Invitation lifecycle. Only the first three can be redeemed."""

    CREATED = "created"
    SENT = "sent"
    INVITED = "invited"
    ACCEPTED = "accepted"


REDEEMABLE_INVITATION_STATUSES = frozenset(
    {InvitationStatus.CREATED.value, InvitationStatus.SENT.value, InvitationStatus.INVITED.value}
)


class TransferStatus(str, Enum):
    """Room ownership transfer request status."""

    PENDING = "pending"
    ACCEPTED = "accepted"
    ACCEPTED_PENDING_SUBSCRIPTION = "accepted_pending_subscription"
    DECLINED = "declined"
    EXPIRED = "expired"
    CANCELLED = "cancelled"


class RedemptionKind(str, Enum):
    """What a join code resolved to."""

    INVITATION = "invitation"
    DEMO_CODE = "demo_code"
