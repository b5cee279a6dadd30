"""FastAPI dependency injection definitions.

Re-exports all dependencies for convenience.
"""

# Auth
from src.roomsync.api.dependencies.auth import (
    AuthenticatedIdentity,
    CurrentAccount,
    SuperAdminAccount,
    get_current_account,
    get_identity_claims,
    require_super_admin,
)

# Database
from src.roomsync.api.dependencies.db import (
    DBSession,
    DBSessionFactory,
    get_db_session,
    get_db_session_factory,
)

# Integrations
from src.roomsync.api.dependencies.integrations import (
    Entitlements,
    EventBusDep,
    IdentityProviderDep,
    Scheduler,
    get_entitlements,
    get_event_bus,
    get_grace_scheduler,
    get_identity,
)

# Repositories
from src.roomsync.api.dependencies.repositories import (
    AccessRepo,
    AccountRepo,
    DemoCodeRepo,
    InvitationRepo,
    MappingRepo,
    MemberRepo,
    RoomRepo,
    TransferRepo,
)

# Services
from src.roomsync.api.dependencies.services import (
    AccountDeletionServiceDep,
    DirectoryServiceDep,
    InviteServiceDep,
    ReconciliationServiceDep,
    RedemptionServiceDep,
    RoomServiceDep,
    SubscriptionServiceDep,
    TransferServiceDep,
)

__all__ = [
    # Database
    "DBSession",
    "DBSessionFactory",
    "get_db_session",
    "get_db_session_factory",
    # Auth
    "AuthenticatedIdentity",
    "CurrentAccount",
    "SuperAdminAccount",
    "get_current_account",
    "get_identity_claims",
    "require_super_admin",
    # Integrations
    "Entitlements",
    "EventBusDep",
    "IdentityProviderDep",
    "Scheduler",
    "get_entitlements",
    "get_event_bus",
    "get_grace_scheduler",
    "get_identity",
    # Repositories
    "AccessRepo",
    "AccountRepo",
    "DemoCodeRepo",
    "InvitationRepo",
    "MappingRepo",
    "MemberRepo",
    "RoomRepo",
    "TransferRepo",
    # Services
    "AccountDeletionServiceDep",
    "DirectoryServiceDep",
    "InviteServiceDep",
    "ReconciliationServiceDep",
    "RedemptionServiceDep",
    "RoomServiceDep",
    "SubscriptionServiceDep",
    "TransferServiceDep",
]
