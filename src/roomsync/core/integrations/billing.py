"""Billing provider client (RevenueCat REST API)."""

from datetime import UTC, datetime
from typing import Any, Protocol

import httpx

from src.roomsync.core.config import get_settings
from src.roomsync.core.exceptions import EntitlementLookupError
from src.roomsync.core.logging import get_logger

logger = get_logger(__name__)


class EntitlementProvider(Protocol):
    """Source of truth for which entitlements an account currently holds."""

    async def get_active_entitlements(self, app_user_id: str) -> set[str]: ...


def _parse_timestamp(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def active_entitlements_from_subscriber(
    subscriber: dict[str, Any], now: datetime | None = None
) -> set[str]:
    """Extract active entitlement names from a subscriber payload.

    An entitlement is active when it has no expiry (lifetime) or expires
    in the future.
    """
    now = now or datetime.now(UTC)
    active: set[str] = set()
    for name, entitlement in (subscriber.get("entitlements") or {}).items():
        expires = entitlement.get("expires_date")
        if expires is None or _parse_timestamp(expires) > now:
            active.add(name)
    return active


class RevenueCatClient:
    """Fetches subscriber entitlements over HTTP.

    Lookup failures of any kind are reported as EntitlementLookupError so
    callers never confuse "provider unreachable" with "no entitlements".
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://api.revenuecat.com/v1",
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    async def get_active_entitlements(self, app_user_id: str) -> set[str]:
        url = f"{self.base_url}/subscribers/{app_user_id}"
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self._transport
            ) as client:
                response = await client.get(
                    url,
                    headers={
                        "Authorization": f"Bearer {self.api_key}",
                        "Accept": "application/json",
                    },
                )
        except httpx.HTTPError as e:
            logger.error("Entitlement lookup failed", app_user_id=app_user_id, error=str(e))
            raise EntitlementLookupError(f"Could not reach billing provider: {e}") from e

        if response.status_code == 404:
            return set()
        if response.status_code != 200:
            logger.error(
                "Entitlement lookup rejected",
                app_user_id=app_user_id,
                status_code=response.status_code,
            )
            raise EntitlementLookupError(
                f"Billing provider returned status {response.status_code}"
            )

        try:
            subscriber = response.json()["subscriber"]
            return active_entitlements_from_subscriber(subscriber)
        except (KeyError, TypeError, ValueError) as e:
            raise EntitlementLookupError("Malformed billing provider response") from e


class UnconfiguredEntitlementProvider:
    """Used when no billing API key is set.

    Every lookup fails rather than reporting an empty entitlement set,
    which would otherwise start grace periods for paying accounts.
    """

    async def get_active_entitlements(self, app_user_id: str) -> set[str]:
        logger.warning("BILLING_API_KEY not set - entitlement lookup unavailable")
        raise EntitlementLookupError("Billing provider is not configured")


def get_entitlement_provider() -> EntitlementProvider:
    """Build the entitlement provider from settings."""
    settings = get_settings()
    if not settings.billing_api_key:
        return UnconfiguredEntitlementProvider()
    return RevenueCatClient(
        api_key=settings.billing_api_key,
        base_url=settings.billing_api_url,
        timeout=settings.billing_timeout_seconds,
    )
