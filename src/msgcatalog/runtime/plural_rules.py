"""CLDR plural rules using Babel.

Provides plural category selection for all locales using Babel's CLDR data.

Python 3.13+. Depends on Babel for CLDR data.

Reference: https://www.unicode.org/cldr/charts/47/supplemental/language_plural_rules.html
"""

from __future__ import annotations

import functools
import logging
from collections.abc import Callable
from decimal import Decimal

from babel.core import UnknownLocaleError

from msgcatalog.constants import MAX_LOCALE_CACHE_SIZE, OTHER_BRANCH
from msgcatalog.locale_utils import get_babel_locale

__all__ = ["plural_operand", "select_plural_category"]

logger = logging.getLogger(__name__)

type PluralRule = Callable[[int | Decimal], str]


def plural_operand(value: int | float | Decimal) -> int | Decimal | None:
    """Convert a number to the operand handed to CLDR rules.

    Floats go through their repr so visible fraction digits survive
    (1.0 -> Decimal('1.0'), which has v=1 and is 'other' in English).
    Non-finite values return None.

    Example:
        >>> plural_operand(1.0)
        Decimal('1.0')
        >>> plural_operand(float("nan")) is None
        True
    """
    match value:
        case bool():
            return int(value)
        case int():
            return value
        case float():
            operand = Decimal(repr(value))
        case Decimal():
            operand = value
    return operand if operand.is_finite() else None


@functools.lru_cache(maxsize=MAX_LOCALE_CACHE_SIZE)
def _plural_rule(locale: str) -> PluralRule | None:
    """Resolve the CLDR rule for a locale, trying its language subtag next."""
    for candidate in (locale, locale.replace("-", "_").split("_")[0]):
        try:
            return get_babel_locale(candidate).plural_form
        except (UnknownLocaleError, ValueError):
            continue
    logger.debug("No plural rules for locale %s; using CLDR root", locale)
    return None


def select_plural_category(n: int | float | Decimal, locale: str) -> str:
    """Select CLDR plural category for number using Babel's CLDR data.

    Args:
        n: Number to categorize
        locale: Locale code (e.g., "lv_LV", "en_US", "ar-SA")

    Returns:
        Plural category: "zero", "one", "two", "few", "many", or "other"

    Examples:
        >>> select_plural_category(0, "lv_LV")
        'zero'
        >>> select_plural_category(1, "en_US")
        'one'
        >>> select_plural_category(1.0, "en_US")
        'other'
        >>> select_plural_category(5, "ru_RU")
        'many'
        >>> select_plural_category(2, "ar_SA")
        'two'

    Unknown locales fall back to the language subtag and then to the CLDR
    root rule, which maps every number to "other".
    """
    operand = plural_operand(n)
    if operand is None:
        return OTHER_BRANCH

    rule = _plural_rule(locale)
    if rule is None:
        return OTHER_BRANCH
    return rule(operand)
