"""Authentication and authorization dependencies.

Callers authenticate with a bearer token issued by the external identity
provider. The token subject is the external identity; the account is
resolved through the directory.
"""

from typing import Annotated

from fastapi import Depends, Header, HTTPException, status

from src.roomsync.api.dependencies.services import DirectoryServiceDep
from src.roomsync.core.logging import bind_account_context
from src.roomsync.core.security import IdentityClaims, decode_identity_token
from src.roomsync.models import Account


async def get_identity_claims(
    authorization: Annotated[str | None, Header()] = None,
) -> IdentityClaims:
    """Validate the bearer token and return its claims."""
    if not authorization or not authorization.startswith("Bearer "):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing or invalid authorization header",
        )

    claims = decode_identity_token(authorization[7:])
    if claims is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
        )
    return claims


AuthenticatedIdentity = Annotated[IdentityClaims, Depends(get_identity_claims)]


async def get_current_account(
    claims: AuthenticatedIdentity,
    directory: DirectoryServiceDep,
) -> Account:
    """Resolve the caller's account. Requires a completed sign-in."""
    account = await directory.resolve_account(claims.subject)
    if account is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Account not found. Sign in first.",
        )

    bind_account_context(account.id)
    return account


CurrentAccount = Annotated[Account, Depends(get_current_account)]


async def require_super_admin(account: CurrentAccount) -> Account:
    """Require the current account to hold super admin access."""
    if not account.is_super_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Super admin privileges required",
        )
    return account


SuperAdminAccount = Annotated[Account, Depends(require_super_admin)]
