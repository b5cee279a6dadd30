"""External identity provider admin client."""

from typing import Protocol

import httpx

from src.roomsync.core.config import get_settings
from src.roomsync.core.exceptions import ExternalIdentityError
from src.roomsync.core.logging import get_logger

logger = get_logger(__name__)


class IdentityProvider(Protocol):
    async def delete_identity(self, subject_id: str) -> None: ...


class HttpIdentityProvider:
    """Deletes sign-in identities through the provider's admin endpoint."""

    def __init__(
        self,
        base_url: str,
        api_key: str | None,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout
        self._transport = transport

    async def delete_identity(self, subject_id: str) -> None:
        headers = {"Authorization": f"Bearer {self.api_key}"} if self.api_key else {}
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self._transport
            ) as client:
                response = await client.delete(
                    f"{self.base_url}/users/{subject_id}", headers=headers
                )
        except httpx.HTTPError as e:
            raise ExternalIdentityError(f"Could not reach identity provider: {e}") from e

        # Already gone counts as deleted
        if response.status_code not in (200, 202, 204, 404):
            raise ExternalIdentityError(
                f"Identity provider refused deletion (status {response.status_code})"
            )
        logger.info("External identity deleted", subject_id=subject_id)


class LoggingIdentityProvider:
    """Dev mode: logs instead of deleting."""

    async def delete_identity(self, subject_id: str) -> None:
        logger.warning(
            "IDENTITY_ADMIN_URL not set - external identity not deleted",
            subject_id=subject_id,
        )


def get_identity_provider() -> IdentityProvider:
    settings = get_settings()
    if not settings.identity_admin_url:
        return LoggingIdentityProvider()
    return HttpIdentityProvider(settings.identity_admin_url, settings.identity_admin_key)
