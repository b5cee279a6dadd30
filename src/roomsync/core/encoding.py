"""Key encoding for identifiers derived from external strings.

Identity provider subject ids may contain characters that are reserved in
hierarchical key paths. They are escaped with fixed tokens so the mapping
is reversible.
"""

import re
from typing import Final

KEY_REPLACEMENTS: Final[tuple[tuple[str, str], ...]] = (
    (".", "_DOT_"),
    ("#", "_HASH_"),
    ("$", "_DOLLAR_"),
    ("[", "_LBRACKET_"),
    ("]", "_RBRACKET_"),
)

_CHAR_FOR_TOKEN: Final[dict[str, str]] = {token: char for char, token in KEY_REPLACEMENTS}
_TOKEN_PATTERN: Final[re.Pattern[str]] = re.compile(
    "|".join(re.escape(token) for _, token in KEY_REPLACEMENTS)
)


def encode_key(value: str) -> str:
    """Escape reserved characters in ``value``."""
    for char, token in KEY_REPLACEMENTS:
        value = value.replace(char, token)
    return value


def decode_key(value: str) -> str:
    """Reverse :func:`encode_key` in a single left-to-right pass.

    Replaced text is never scanned again, so a decoded character cannot
    combine with its neighbours into another token.
    """
    return _TOKEN_PATTERN.sub(lambda match: _CHAR_FOR_TOKEN[match.group(0)], value)
