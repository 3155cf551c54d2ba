"""Placeholder name validation.

Single source of truth for the placeholder name grammar used by the template
parser, the entry branch tables and the catalog compiler.

Placeholder Grammar:
    [A-Za-z_][A-Za-z0-9_]*

    - Start: ASCII letter or underscore
    - Continue: ASCII letter, ASCII digit or underscore
    - Length: Maximum 256 characters (DoS prevention)

Names are ASCII-only so that catalogs stay portable across toolchains that
reject Unicode identifiers.

Thread Safety:
    All functions in this module are pure functions with no shared state.

Python 3.13+.
"""

from __future__ import annotations

import re

from msgcatalog.constants import MAX_IDENTIFIER_LENGTH

__all__ = [
    "is_identifier_char",
    "is_valid_identifier",
]

_IDENTIFIER_PATTERN: re.Pattern[str] = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")


def is_identifier_char(ch: str) -> bool:
    """Check if character can continue a placeholder name.

    Example:
        >>> is_identifier_char('5')
        True
        >>> is_identifier_char('-')
        False
        >>> is_identifier_char('é')
        False
    """
    return len(ch) == 1 and ch.isascii() and (ch.isalnum() or ch == "_")


def is_valid_identifier(name: str) -> bool:
    """Validate a complete placeholder name.

    Example:
        >>> is_valid_identifier("user_name")
        True
        >>> is_valid_identifier("user.name")
        False
        >>> is_valid_identifier("")
        False
        >>> is_valid_identifier("a" * 300)
        False
    """
    if not name or len(name) > MAX_IDENTIFIER_LENGTH:
        return False
    return _IDENTIFIER_PATTERN.fullmatch(name) is not None
