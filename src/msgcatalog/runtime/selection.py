"""Plural/select branch selection.

Branch tables are tagged unions (ExactKey | NamedKey). Selection walks them
by explicit precedence:

    plural:  exact numeric match -> CLDR category -> 'other'
    select:  key text match       -> 'other'

Thread Safety:
    Pure functions. Plural rules are cached per locale by plural_rules.

Python 3.13+.
"""

from __future__ import annotations

from collections.abc import Iterable
from decimal import Decimal

from msgcatalog.constants import OTHER_BRANCH
from msgcatalog.diagnostics import ErrorTemplate, MissingDefaultBranchError
from msgcatalog.enums import SelectorKind
from msgcatalog.syntax.ast import BranchKey, ExactKey, NamedKey

from .plural_rules import plural_operand, select_plural_category

__all__ = ["select_branch", "select_key_text", "to_decimal"]

_OTHER = NamedKey(OTHER_BRANCH)


def to_decimal(value: object) -> Decimal | None:
    """Exact numeric value of an argument, or None if it is not a finite number.

    Booleans are not numbers here: True does not match exact:1.

    Example:
        >>> to_decimal(1.0)
        Decimal('1.0')
        >>> to_decimal("1") is None
        True
        >>> to_decimal(True) is None
        True
    """
    match value:
        case bool():
            return None
        case int() | float() | Decimal():
            operand = plural_operand(value)
            if operand is None:
                return None
            return Decimal(operand)
        case _:
            return None


def select_key_text(value: object) -> str:
    """Key text used to match a select argument.

    Example:
        >>> select_key_text(True)
        'true'
        >>> select_key_text("female")
        'female'
    """
    match value:
        case bool():
            return "true" if value else "false"
        case None:
            return "null"
        case _:
            return str(value)


def select_branch(
    locale: str,
    kind: SelectorKind,
    value: object,
    branches: Iterable[BranchKey],
    *,
    selector: str = "",
) -> BranchKey:
    """Choose the branch key for a selector value.

    Args:
        locale: Canonical locale code (plural rules)
        kind: Plural or select
        value: Selector argument value
        branches: Keys of the branch table
        selector: Selector name, used in error reports

    Returns:
        The selected branch key (always one of ``branches``)

    Raises:
        MissingDefaultBranchError: If nothing matches and no 'other' branch exists

    Example:
        >>> keys = [ExactKey(Decimal(0)), NamedKey("one"), NamedKey("other")]
        >>> select_branch("en", SelectorKind.PLURAL, 0, keys)
        ExactKey(value=Decimal('0'))
        >>> select_branch("en", SelectorKind.PLURAL, 1, keys)
        NamedKey(name='one')
        >>> select_branch("en", SelectorKind.PLURAL, 1.0, keys)
        NamedKey(name='other')
    """
    keys = tuple(branches)

    if kind is SelectorKind.PLURAL:
        number = to_decimal(value)
        if number is not None:
            for key in keys:
                if isinstance(key, ExactKey) and key.value == number:
                    return key
            # Narrowed: to_decimal only accepts int, float and Decimal
            category = NamedKey(select_plural_category(value, locale))  # type: ignore[arg-type]
            if category in keys:
                return category
    else:
        wanted = NamedKey(select_key_text(value))
        if wanted in keys:
            return wanted

    if _OTHER in keys:
        return _OTHER

    raise MissingDefaultBranchError(
        ErrorTemplate.missing_default_branch(selector),
        selector=selector,
    )
