from src.roomsync.schemas.account import (
    AccountDeletionResponse,
    AccountRead,
    SignInRequest,
    SignInResponse,
)
from src.roomsync.schemas.admin import (
    GraceCheckResponse,
    GraceResumeResponse,
    ReconciliationResponse,
)
from src.roomsync.schemas.invitation import (
    CodePreviewResponse,
    DemoCodeCreateRequest,
    DemoCodeRead,
    DemoCodeToggleRequest,
    InvitationCreateRequest,
    InvitationListResponse,
    InvitationRead,
    RedeemRequest,
    RedeemResponse,
    RedeemWithSignupRequest,
)
from src.roomsync.schemas.room import (
    MemberAdminUpdate,
    RoomAccessRead,
    RoomCreate,
    RoomCreateResponse,
    RoomDeleteResponse,
    RoomMemberRead,
    RoomRead,
)
from src.roomsync.schemas.subscription import (
    BillingWebhookPayload,
    BillingWebhookResponse,
    SubscriptionStateResponse,
    SuperAdminCodeRequest,
    ValidatePurchaseRequest,
    ValidatePurchaseResponse,
)
from src.roomsync.schemas.transfer import TransferCreateRequest, TransferRead

__all__ = [
    # Account
    "AccountDeletionResponse",
    "AccountRead",
    "SignInRequest",
    "SignInResponse",
    # Admin
    "GraceCheckResponse",
    "GraceResumeResponse",
    "ReconciliationResponse",
    # Join codes
    "CodePreviewResponse",
    "DemoCodeCreateRequest",
    "DemoCodeRead",
    "DemoCodeToggleRequest",
    "InvitationCreateRequest",
    "InvitationListResponse",
    "InvitationRead",
    "RedeemRequest",
    "RedeemResponse",
    "RedeemWithSignupRequest",
    # Rooms
    "MemberAdminUpdate",
    "RoomAccessRead",
    "RoomCreate",
    "RoomCreateResponse",
    "RoomDeleteResponse",
    "RoomMemberRead",
    "RoomRead",
    # Subscriptions
    "BillingWebhookPayload",
    "BillingWebhookResponse",
    "SubscriptionStateResponse",
    "SuperAdminCodeRequest",
    "ValidatePurchaseRequest",
    "ValidatePurchaseResponse",
    # Transfers
    "TransferCreateRequest",
    "TransferRead",
]
