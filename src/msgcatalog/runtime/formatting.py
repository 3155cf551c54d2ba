"""Formatting collaborator: locale-aware rendering of argument values.

The renderer never formats numbers or dates itself. It hands each value to a
Formatter, so applications can swap in their own number/date conventions.
BabelFormatter is the default implementation and uses CLDR data through
Babel.

Thread Safety:
    BabelFormatter holds no mutable state; Babel locales are cached by
    locale_utils.get_babel_locale().

Python 3.13+. Uses Babel for i18n.
"""

from __future__ import annotations

import functools
import logging
from datetime import date, datetime, time
from decimal import Decimal, InvalidOperation
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from babel import UnknownLocaleError
from babel import dates as babel_dates
from babel import numbers as babel_numbers

from msgcatalog.constants import MAX_LOCALE_CACHE_SIZE
from msgcatalog.diagnostics import ErrorTemplate, FormattingError
from msgcatalog.enums import FormatType
from msgcatalog.locale_utils import get_babel_locale

if TYPE_CHECKING:
    from babel import Locale

__all__ = ["BabelFormatter", "Formatter", "format_plain"]

logger = logging.getLogger(__name__)

_FALLBACK_LOCALE = "en_US"


def format_plain(value: object) -> str:
    """Locale-independent text for a plain placeholder.

    Example:
        >>> format_plain(True)
        'true'
        >>> format_plain(None)
        ''
        >>> format_plain(2.5)
        '2.5'
    """
    match value:
        case str():
            return value
        # bool before int: bool is a subclass of int
        case bool():
            return "true" if value else "false"
        case None:
            return ""
        case _:
            return str(value)


@runtime_checkable
class Formatter(Protocol):
    """Protocol for value formatters used by the renderer."""

    def format_value(
        self,
        value: object,
        locale: str,
        *,
        format_type: FormatType | None = None,
        style: str | None = None,
    ) -> str:
        """Format an argument value.

        Args:
            value: Argument value
            locale: Canonical locale code
            format_type: Declared type of a typed placeholder, None for plain
            style: Optional style (Babel pattern, date style or currency code)

        Raises:
            FormattingError: If the value cannot be formatted as declared
        """
        ...

    def format_number(self, value: int | float | Decimal, locale: str) -> str:
        """Format the value of a plural selector for '#'."""
        ...


@functools.lru_cache(maxsize=MAX_LOCALE_CACHE_SIZE)
def _formatting_locale(locale: str) -> Locale:
    """Babel locale for formatting, falling back to en_US for unknown codes."""
    try:
        return get_babel_locale(locale)
    except (UnknownLocaleError, ValueError) as e:
        logger.warning("Unknown locale '%s': %s. Formatting with %s", locale, e, _FALLBACK_LOCALE)
        return get_babel_locale(_FALLBACK_LOCALE)


class BabelFormatter:
    """Formatter backed by babel.numbers and babel.dates.

    Plain placeholders: strings as-is, booleans 'true'/'false', None as an
    empty string, everything else via str().

    Typed placeholders:
        number    format_decimal (style is a CLDR pattern or 'integer')
        percent   format_percent (style is a CLDR pattern)
        currency  format_currency (style is the ISO 4217 code)
        date      format_date (style is short/medium/long/full or a pattern)
        time      format_time
        datetime  format_datetime

    Dates accept date/datetime/time objects or ISO 8601 strings.

    Example:
        >>> fmt = BabelFormatter()
        >>> fmt.format_value(1234.5, "en_US", format_type=FormatType.NUMBER)
        '1,234.5'
        >>> fmt.format_value(1234.5, "de_DE", format_type=FormatType.NUMBER)
        '1.234,5'
        >>> fmt.format_value(9.5, "en_US", format_type=FormatType.CURRENCY, style="EUR")
        '€9.50'
    """

    __slots__ = ()

    def format_value(
        self,
        value: object,
        locale: str,
        *,
        format_type: FormatType | None = None,
        style: str | None = None,
    ) -> str:
        if format_type is None:
            return format_plain(value)

        babel_locale = _formatting_locale(locale)
        try:
            match format_type:
                case FormatType.NUMBER:
                    number = self._require_number(value)
                    if style == "integer":
                        return str(babel_numbers.format_decimal(
                            round(number), format="#,##0", locale=babel_locale
                        ))
                    return str(babel_numbers.format_decimal(number, format=style, locale=babel_locale))
                case FormatType.PERCENT:
                    number = self._require_number(value)
                    return str(babel_numbers.format_percent(number, format=style, locale=babel_locale))
                case FormatType.CURRENCY:
                    number = self._require_number(value)
                    currency = (style or "").upper()
                    return str(babel_numbers.format_currency(number, currency, locale=babel_locale))
                case FormatType.DATE:
                    return str(babel_dates.format_date(
                        self._require_temporal(value), format=style or "medium", locale=babel_locale
                    ))
                case FormatType.TIME:
                    return str(babel_dates.format_time(
                        self._require_temporal(value), format=style or "medium", locale=babel_locale
                    ))
                case FormatType.DATETIME:
                    return str(babel_dates.format_datetime(
                        self._require_temporal(value), format=style or "medium", locale=babel_locale
                    ))
        except (
            ValueError,
            TypeError,
            InvalidOperation,
            OverflowError,
            AttributeError,
            KeyError,
        ) as e:
            diagnostic = ErrorTemplate.formatting_failed(
                format_plain(value)[:50], format_type.value, str(e)
            )
            raise FormattingError(diagnostic, fallback_value=format_plain(value)) from e
        # Unreachable: match over FormatType is exhaustive
        return format_plain(value)  # pragma: no cover

    def format_number(self, value: int | float | Decimal, locale: str) -> str:
        """Locale-formatted plural value: 1234 -> '1,234' (en), '1 234' (fr).

        Floats keep their visible fraction digits: 1.0 -> '1.0'.
        """
        babel_locale = _formatting_locale(locale)
        number: int | Decimal
        match value:
            case bool():
                return format_plain(value)
            case float():
                number = Decimal(repr(value))
                if not number.is_finite():
                    return str(value)
            case Decimal() if not value.is_finite():
                return str(value)
            case _:
                number = value
        # Keep every fraction digit the caller supplied
        digits = -int(number.as_tuple().exponent) if isinstance(number, Decimal) else 0
        if digits > 0:
            pattern = "#,##0." + "0" * digits
            return str(babel_numbers.format_decimal(number, format=pattern, locale=babel_locale))
        return str(babel_numbers.format_decimal(number, locale=babel_locale))

    @staticmethod
    def _require_number(value: object) -> int | float | Decimal:
        if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
            msg = f"expected a number, got {type(value).__name__}"
            raise TypeError(msg)
        return value

    @staticmethod
    def _require_temporal(value: object) -> date | datetime | time:
        match value:
            case str():
                return datetime.fromisoformat(value)
            case date() | datetime() | time():
                return value
            case _:
                msg = f"expected a date, time or ISO 8601 string, got {type(value).__name__}"
                raise TypeError(msg)
