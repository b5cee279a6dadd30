"""Cryptographic utilities - identity tokens and join codes."""

import secrets
import string
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any

from jose import JWTError, jwt

from src.roomsync.core.config import get_settings

CODE_ALPHABET = string.ascii_uppercase + string.digits


@dataclass(frozen=True)
class IdentityClaims:
    """Claims extracted from an identity provider token."""

    subject: str
    name: str | None = None
    email: str | None = None


def generate_code(length: int = 6) -> str:
    """Generate a join code from A-Z and 0-9."""
    return "".join(secrets.choice(CODE_ALPHABET) for _ in range(length))


def create_identity_token(
    subject: str,
    name: str | None = None,
    email: str | None = None,
    expires_delta: timedelta | None = None,
) -> str:
    """Create a signed identity token.

    Production tokens are minted by the identity provider; this is used by
    local tooling and tests that share the verification key.
    """
    settings = get_settings()
    expire = datetime.now(UTC) + (expires_delta or timedelta(minutes=30))

    to_encode: dict[str, Any] = {"sub": subject, "exp": expire}
    if name:
        to_encode["name"] = name
    if email:
        to_encode["email"] = email
    if settings.identity_jwt_audience:
        to_encode["aud"] = settings.identity_jwt_audience
    if settings.identity_jwt_issuer:
        to_encode["iss"] = settings.identity_jwt_issuer

    return jwt.encode(  # type: ignore[no-any-return]
        to_encode,
        settings.identity_jwt_key,
        algorithm=settings.identity_jwt_algorithm,
    )


def decode_identity_token(token: str) -> IdentityClaims | None:
    """Decode and validate an identity token. Returns None on any error."""
    settings = get_settings()
    try:
        payload: dict[str, Any] = jwt.decode(
            token,
            settings.identity_jwt_key,
            algorithms=[settings.identity_jwt_algorithm],
            audience=settings.identity_jwt_audience,
            issuer=settings.identity_jwt_issuer,
            options={"verify_aud": settings.identity_jwt_audience is not None},
        )
    except JWTError:
        return None

    subject = payload.get("sub")
    if not subject or not isinstance(subject, str):
        return None
    return IdentityClaims(
        subject=subject,
        name=payload.get("name"),
        email=payload.get("email"),
    )
