"""Validators for join codes and invitation constraints."""

import re
from typing import Final

ROOM_CODE_LENGTH: Final[int] = 6
ROOM_CODE_REGEX: Final[str] = rf"^[A-Z0-9]{{{ROOM_CODE_LENGTH}}}$"

_ROOM_CODE_PATTERN: Final[re.Pattern[str]] = re.compile(ROOM_CODE_REGEX)


def normalize_demo_code(code: str) -> str:
    """Demo codes are matched case-insensitively via their uppercased form."""
    return code.strip().upper()


def validate_demo_code(code: str) -> str:
    """Normalize and validate a demo code.

    Raises:
        ValueError: If the code is not exactly 6 letters or digits.
    """
    normalized = normalize_demo_code(code)
    if not _ROOM_CODE_PATTERN.match(normalized):
        raise ValueError(f"Code must be exactly {ROOM_CODE_LENGTH} letters or numbers")
    return normalized


def is_valid_invitation_phone(phone_number: str | None) -> bool:
    """Phone-gated invitations are valid when the number is absent, empty or all digits."""
    if phone_number is None or phone_number == "":
        return True
    return phone_number.isascii() and phone_number.isdigit()
