"""Read-only queries over parsed templates.

Used by message descriptors (placeholder declarations), catalog entries
(default branch checks) and the catalog compiler (placeholder drift).

Python 3.13+.
"""

from __future__ import annotations

from collections.abc import Iterator

from .ast import (
    FormattedPlaceholder,
    Placeholder,
    SelectPlaceholder,
    Template,
    TemplateElement,
)

__all__ = [
    "extract_placeholders",
    "find_missing_default",
    "iter_elements",
    "max_nesting_depth",
]


def iter_elements(template: Template) -> Iterator[TemplateElement]:
    """Depth-first walk over every element, including branch contents."""
    stack: list[Template] = [template]
    while stack:
        current = stack.pop()
        for element in current.elements:
            yield element
            if isinstance(element, SelectPlaceholder):
                stack.extend(b.value for b in reversed(element.branches))


def extract_placeholders(template: Template) -> tuple[str, ...]:
    """Argument names referenced by a template, in first-seen order.

    Selector names of plural/select placeholders are included.

    Example:
        >>> from msgcatalog.syntax import parse_template
        >>> extract_placeholders(parse_template("{a} {n, plural, other {{b}}} {a}"))
        ('a', 'n', 'b')
    """
    names: dict[str, None] = {}
    _collect(template, names)
    return tuple(names)


def _collect(template: Template, names: dict[str, None]) -> None:
    for element in template.elements:
        match element:
            case Placeholder(name=name) | FormattedPlaceholder(name=name):
                names.setdefault(name, None)
            case SelectPlaceholder(name=name, branches=branches):
                names.setdefault(name, None)
                for branch in branches:
                    _collect(branch.value, names)
            case _:
                pass


def find_missing_default(template: Template) -> str | None:
    """Name of the first plural/select placeholder without an 'other' branch."""
    for element in iter_elements(template):
        if isinstance(element, SelectPlaceholder) and not element.has_default():
            return element.name
    return None


def max_nesting_depth(template: Template) -> int:
    """Deepest plural/select nesting in a template (0 for flat templates)."""
    deepest = 0
    for element in template.elements:
        if isinstance(element, SelectPlaceholder):
            inner = max((max_nesting_depth(b.value) for b in element.branches), default=0)
            deepest = max(deepest, inner + 1)
    return deepest
