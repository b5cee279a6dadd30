"""Tests for the identity provider admin client."""

import httpx
import pytest

from src.roomsync.core.exceptions import ExternalIdentityError
from src.roomsync.core.integrations import HttpIdentityProvider, LoggingIdentityProvider

pytestmark = pytest.mark.unit


def _provider(handler) -> HttpIdentityProvider:
    return HttpIdentityProvider(
        "https://identity.test/admin",
        api_key="admin-key",
        transport=httpx.MockTransport(handler),
    )


@pytest.mark.parametrize("status_code", [200, 204, 404])
async def test_delete_succeeds(status_code: int):
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(status_code)

    await _provider(handler).delete_identity("auth|123")

    assert seen[0].method == "DELETE"
    assert seen[0].url.path == "/admin/users/auth|123"
    assert seen[0].headers["Authorization"] == "Bearer admin-key"


async def test_refused_deletion_raises():
    with pytest.raises(ExternalIdentityError) as exc_info:
        await _provider(lambda request: httpx.Response(403)).delete_identity("auth|123")
    assert exc_info.value.kind == "external_identity_failure"


async def test_unreachable_provider_raises():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectTimeout("timed out", request=request)

    with pytest.raises(ExternalIdentityError):
        await _provider(handler).delete_identity("auth|123")


async def test_logging_provider_does_not_raise():
    await LoggingIdentityProvider().delete_identity("auth|123")
