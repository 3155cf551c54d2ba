"""Locale utilities: canonical locale codes and cached Babel locales.

Centralizes locale format normalization used throughout the package. Every
locale entering the system (engine calls, policy mappings, catalog loads) is
canonicalized once at the boundary so cache keys and catalog lookups agree.

Canonical form is POSIX-style with underscores:

    en-us      -> en_US
    zh-hant-tw -> zh_Hant_TW
    SR_latn    -> sr_Latn

Python 3.13+.
"""

from __future__ import annotations

import functools
import os
import re
from typing import TYPE_CHECKING

from msgcatalog.constants import DEFAULT_SOURCE_LOCALE, MAX_LOCALE_CACHE_SIZE

if TYPE_CHECKING:
    from babel import Locale

__all__ = [
    "get_babel_locale",
    "get_system_locale",
    "is_valid_locale_code",
    "normalize_locale",
    "parent_locale",
]

# Letters, digits, '-' and '_' only; first subtag alphabetic.
_LOCALE_CODE: re.Pattern[str] = re.compile(r"[A-Za-z]{1,8}(?:[-_][A-Za-z0-9]{1,8})*")


def is_valid_locale_code(locale_code: str) -> bool:
    """Check locale code syntax (BCP-47 or POSIX separators).

    Example:
        >>> is_valid_locale_code("pt-BR")
        True
        >>> is_valid_locale_code("../etc")
        False
        >>> is_valid_locale_code("")
        False
    """
    return _LOCALE_CODE.fullmatch(locale_code) is not None


@functools.lru_cache(maxsize=MAX_LOCALE_CACHE_SIZE)
def normalize_locale(locale_code: str) -> str:
    """Convert a locale code to canonical POSIX form.

    Hyphens become underscores; the language subtag is lower-cased, a
    four-letter script subtag title-cased and two-letter or three-digit
    region subtags upper-cased. Other subtags (variants) are lower-cased.

    Args:
        locale_code: BCP-47 or POSIX locale code

    Returns:
        Canonical locale code

    Raises:
        ValueError: If locale_code is empty or malformed

    Example:
        >>> normalize_locale("en-us")
        'en_US'
        >>> normalize_locale("zh-hant-tw")
        'zh_Hant_TW'
        >>> normalize_locale("es_419")
        'es_419'
    """
    code = locale_code.strip()
    if not is_valid_locale_code(code):
        msg = f"Invalid locale code: {locale_code!r}"
        raise ValueError(msg)

    subtags = code.replace("-", "_").split("_")
    parts = [subtags[0].lower()]
    for subtag in subtags[1:]:
        if len(subtag) == 4 and subtag.isalpha():
            parts.append(subtag.title())
        elif (len(subtag) == 2 and subtag.isalpha()) or (len(subtag) == 3 and subtag.isdigit()):
            parts.append(subtag.upper())
        else:
            parts.append(subtag.lower())
    return "_".join(parts)


def parent_locale(locale_code: str) -> str | None:
    """Strip the last subtag of a canonical locale code.

    Example:
        >>> parent_locale("zh_Hant_TW")
        'zh_Hant'
        >>> parent_locale("zh") is None
        True
    """
    head, sep, _ = locale_code.rpartition("_")
    return head if sep else None


@functools.lru_cache(maxsize=MAX_LOCALE_CACHE_SIZE)
def get_babel_locale(locale_code: str) -> Locale:
    """Get a Babel Locale object with caching.

    Parses the locale code once and caches the result. This avoids repeated
    parsing overhead in hot paths like plural rule selection.

    Thread-safe via lru_cache internal locking.

    Args:
        locale_code: Locale code (BCP-47 or POSIX format accepted)

    Returns:
        Babel Locale object

    Raises:
        babel.core.UnknownLocaleError: If locale is not recognized
        ValueError: If locale format is invalid

    Example:
        >>> locale = get_babel_locale("en-US")
        >>> locale.territory
        'US'
    """
    # Lazy import: Babel loads CLDR data at import time; defer until needed
    from babel import Locale  # noqa: PLC0415

    return Locale.parse(normalize_locale(locale_code))


def get_system_locale(*, raise_on_failure: bool = False) -> str:
    """Detect system locale from OS and environment variables.

    Detection order:
    1. Python locale.getlocale() (OS-level locale)
    2. LC_ALL, LC_MESSAGES, LANG environment variables

    "C" and "POSIX" pseudo-locales and encoding suffixes are ignored.

    Args:
        raise_on_failure: If True, raise RuntimeError when no locale can be
            determined. If False (default), return DEFAULT_SOURCE_LOCALE.

    Returns:
        Detected locale code in canonical form

    Raises:
        RuntimeError: If raise_on_failure is True and no locale is set
    """
    import locale as locale_module  # noqa: PLC0415

    candidates: list[str] = []
    try:
        system_locale, _ = locale_module.getlocale()
    except (ValueError, AttributeError):
        system_locale = None
    if system_locale:
        candidates.append(system_locale)
    candidates.extend(os.environ.get(var, "") for var in ("LC_ALL", "LC_MESSAGES", "LANG"))

    for candidate in candidates:
        code = candidate.split(".")[0].split("@")[0]
        if code in ("", "C", "POSIX") or not is_valid_locale_code(code):
            continue
        return normalize_locale(code)

    if raise_on_failure:
        msg = (
            "Could not determine system locale. "
            "Set LC_ALL, LC_MESSAGES, or LANG environment variable."
        )
        raise RuntimeError(msg)

    return DEFAULT_SOURCE_LOCALE
