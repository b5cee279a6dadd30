"""Clients for external collaborators (billing, identity provider)."""

from src.roomsync.core.integrations.billing import (
    EntitlementProvider,
    RevenueCatClient,
    UnconfiguredEntitlementProvider,
    active_entitlements_from_subscriber,
    get_entitlement_provider,
)
from src.roomsync.core.integrations.identity import (
    HttpIdentityProvider,
    IdentityProvider,
    LoggingIdentityProvider,
    get_identity_provider,
)

__all__ = [
    # Billing
    "EntitlementProvider",
    "RevenueCatClient",
    "UnconfiguredEntitlementProvider",
    "active_entitlements_from_subscriber",
    "get_entitlement_provider",
    # Identity
    "HttpIdentityProvider",
    "IdentityProvider",
    "LoggingIdentityProvider",
    "get_identity_provider",
]
