"""Template AST (Abstract Syntax Tree) node definitions.

Message templates use an ICU MessageFormat subset:

    Hello, {name}!
    Total: {amount, number}
    {count, plural, =0 {No messages} one {# message} other {# messages}}
    {gender, select, female {She} male {He} other {They}} replied

All nodes are frozen, slotted dataclasses so parsed templates can be shared
between threads and stored inside immutable catalog snapshots.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import TypeIs

from msgcatalog.constants import EXACT_PREFIX
from msgcatalog.enums import FormatType, SelectorKind

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Branch keys
    "ExactKey",
    "NamedKey",
    "BranchKey",
    "decimal_text",
    # Template structure
    "Template",
    "Text",
    "Placeholder",
    "FormattedPlaceholder",
    "SelectPlaceholder",
    "Branch",
    "PoundSign",
    # Type aliases
    "TemplateElement",
]


# ============================================================================
# BRANCH KEYS
# ============================================================================


def decimal_text(value: Decimal) -> str:
    """Canonical text for an exact branch value: 1.50 -> '1.5', 1E+1 -> '10'."""
    normalized = value.normalize()
    if normalized == 0:
        return "0"
    return format(normalized, "f")


@dataclass(frozen=True, slots=True)
class ExactKey:
    """Exact-match branch key: =0, exact:1.5, _2.

    Compared by numeric equality, so ExactKey(Decimal("1.0")) == ExactKey(Decimal("1")).
    """

    value: Decimal

    def __str__(self) -> str:
        return f"{EXACT_PREFIX}{decimal_text(self.value)}"

    @staticmethod
    def guard(key: object) -> TypeIs[ExactKey]:
        """Type guard for ExactKey."""
        return isinstance(key, ExactKey)


@dataclass(frozen=True, slots=True)
class NamedKey:
    """Named branch key: a CLDR plural category or a select key."""

    name: str

    def __str__(self) -> str:
        return self.name

    @staticmethod
    def guard(key: object) -> TypeIs[NamedKey]:
        """Type guard for NamedKey."""
        return isinstance(key, NamedKey)


type BranchKey = ExactKey | NamedKey


# ============================================================================
# TEMPLATE ELEMENTS
# ============================================================================


@dataclass(frozen=True, slots=True)
class Text:
    """Literal text (quotes already resolved)."""

    value: str


@dataclass(frozen=True, slots=True)
class Placeholder:
    """Plain named placeholder: {name}."""

    name: str


@dataclass(frozen=True, slots=True)
class FormattedPlaceholder:
    """Typed placeholder delegated to the formatting collaborator.

    Examples:
        {amount, number}
        {when, date, short}
        {price, currency, EUR}
    """

    name: str
    format_type: FormatType
    style: str | None = None


@dataclass(frozen=True, slots=True)
class PoundSign:
    """'#' inside a plural branch: the formatted plural value."""


@dataclass(frozen=True, slots=True)
class Branch:
    """One branch of a plural/select placeholder."""

    key: BranchKey
    value: Template


@dataclass(frozen=True, slots=True)
class SelectPlaceholder:
    """Plural or select placeholder with its branch table."""

    name: str
    kind: SelectorKind
    branches: tuple[Branch, ...]

    def has_default(self) -> bool:
        """Whether an 'other' branch is defined."""
        return any(b.key == NamedKey("other") for b in self.branches)

    def branch_map(self) -> dict[BranchKey, Template]:
        """Branch table keyed by branch key."""
        return {b.key: b.value for b in self.branches}

    @staticmethod
    def guard(element: object) -> TypeIs[SelectPlaceholder]:
        """Type guard for SelectPlaceholder."""
        return isinstance(element, SelectPlaceholder)


type TemplateElement = Text | Placeholder | FormattedPlaceholder | SelectPlaceholder | PoundSign


@dataclass(frozen=True, slots=True)
class Template:
    """Parsed template: a flat sequence of elements."""

    elements: tuple[TemplateElement, ...]

    @property
    def is_static(self) -> bool:
        """True if the template contains no placeholders."""
        return all(isinstance(e, Text) for e in self.elements)
