"""Template serializer: Template AST back to template source.

serialize_template(parse_template(s)) is a canonical form of s: whitespace
inside placeholders is normalized, exact keys are written as ``=N`` and
literal braces are quoted. Parsing the canonical form yields an equal AST.

Python 3.13+.
"""

from __future__ import annotations

from msgcatalog.enums import SelectorKind

from .ast import (
    ExactKey,
    FormattedPlaceholder,
    NamedKey,
    Placeholder,
    PoundSign,
    SelectPlaceholder,
    Template,
    Text,
    decimal_text,
)

__all__ = ["serialize_template"]


def serialize_template(template: Template, *, in_plural: bool = False) -> str:
    """Serialize a Template to source text.

    Pass in_plural=True for the body of a plural branch, where "#" is live
    and literal "#" text must be quoted.

    Example:
        >>> from msgcatalog.syntax import parse_template
        >>> serialize_template(parse_template("{n, plural, _0 {none} other {# items}}"))
        '{n, plural, =0 {none} other {# items}}'
    """
    out: list[str] = []
    _serialize_elements(template, out, in_plural=in_plural)
    return "".join(out)


def _serialize_elements(template: Template, out: list[str], *, in_plural: bool) -> None:
    for element in template.elements:
        match element:
            case Text(value=value):
                out.append(_escape_text(value, in_plural=in_plural))
            case Placeholder(name=name):
                out.append(f"{{{name}}}")
            case FormattedPlaceholder(name=name, format_type=format_type, style=style):
                if style is None:
                    out.append(f"{{{name}, {format_type.value}}}")
                else:
                    out.append(f"{{{name}, {format_type.value}, {style}}}")
            case PoundSign():
                out.append("#")
            case SelectPlaceholder():
                _serialize_select(element, out, in_plural=in_plural)


def _serialize_select(element: SelectPlaceholder, out: list[str], *, in_plural: bool) -> None:
    out.append(f"{{{element.name}, {element.kind.value},")
    branch_in_plural = in_plural or element.kind is SelectorKind.PLURAL
    for branch in element.branches:
        match branch.key:
            case ExactKey(value=value):
                key = f"={decimal_text(value)}"
            case NamedKey(name=name):
                key = name
        out.append(f" {key} {{")
        _serialize_elements(branch.value, out, in_plural=branch_in_plural)
        out.append("}")
    out.append("}")


def _escape_text(value: str, *, in_plural: bool) -> str:
    """Quote syntax characters so the text reparses to itself."""
    parts: list[str] = []
    for ch in value:
        if ch == "'":
            parts.append("''")
        elif ch in "{}" or (ch == "#" and in_plural):
            parts.append(f"'{ch}'")
        else:
            parts.append(ch)
    return "".join(parts)
