"""Enumerations for msgcatalog type-safe constants.

Uses StrEnum (Python 3.11+) for automatic string conversion.
StrEnum members are strings themselves, eliminating boilerplate __str__ methods.

Python 3.13+.
"""

from enum import StrEnum


class SelectorKind(StrEnum):
    """Kind of branching placeholder.

    StrEnum provides automatic string conversion: str(SelectorKind.PLURAL) == "plural"
    """

    PLURAL = "plural"
    """Numeric selector: {count, plural, =0 {...} one {...} other {...}}"""

    SELECT = "select"
    """Categorical selector: {gender, select, male {...} other {...}}"""


class PluralCategory(StrEnum):
    """CLDR plural categories."""

    ZERO = "zero"
    ONE = "one"
    TWO = "two"
    FEW = "few"
    MANY = "many"
    OTHER = "other"


class FormatType(StrEnum):
    """Formatter types accepted in typed placeholders: {amount, number}."""

    NUMBER = "number"
    PERCENT = "percent"
    CURRENCY = "currency"
    DATE = "date"
    TIME = "time"
    DATETIME = "datetime"


class IdStrategy(StrEnum):
    """How message ids are derived from source text and context."""

    HASH = "hash"
    """Short SHA-256 digest of text and context."""

    VERBATIM = "verbatim"
    """Source text itself, prefixed with context (gettext msgctxt style)."""


class LoadStatus(StrEnum):
    """Outcome of loading one locale's catalog."""

    SUCCESS = "success"
    NOT_FOUND = "not_found"
    ERROR = "error"


__all__ = [
    "FormatType",
    "IdStrategy",
    "LoadStatus",
    "PluralCategory",
    "SelectorKind",
]
