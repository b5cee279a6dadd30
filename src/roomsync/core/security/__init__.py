"""Security utilities - identity tokens, join codes and validators.

Re-exports all security-related functions for convenience.
"""

from src.roomsync.core.security.crypto import (
    CODE_ALPHABET,
    IdentityClaims,
    create_identity_token,
    decode_identity_token,
    generate_code,
)
from src.roomsync.core.security.validators import (
    ROOM_CODE_LENGTH,
    is_valid_invitation_phone,
    normalize_demo_code,
    validate_demo_code,
)

__all__ = [
    # Crypto
    "CODE_ALPHABET",
    "IdentityClaims",
    "create_identity_token",
    "decode_identity_token",
    "generate_code",
    # Validators
    "ROOM_CODE_LENGTH",
    "is_valid_invitation_phone",
    "normalize_demo_code",
    "validate_demo_code",
]
