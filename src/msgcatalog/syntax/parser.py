"""Template parser: ICU MessageFormat subset to Template AST.

Grammar (informal):

    template     := (text | quoted | placeholder | '#')*
    placeholder  := '{' ws name ws '}'
                  | '{' ws name ws ',' ws type ws (',' ws style ws)? '}'
                  | '{' ws name ws ',' ws ('plural' | 'select') ws ',' branches '}'
    branches     := (ws key ws '{' template '}')+ ws
    key          := '=' number | 'exact:' number | '_' number
                  | category | select-key
    quoted       := "''" | "'" ('{' | '}' | '#') ... "'"

'#' is only special inside plural branches (and selects nested in them).

Anything else between braces, for example ``{user.name}`` or ``{a + b}``, is
not a simple named placeholder and raises InvalidPlaceholderError. The parser
is the single place that rejects such templates, so errors surface when
descriptors are created and catalogs are compiled, never while rendering.

Thread Safety:
    Each parse_template() call uses its own parser state.

Python 3.13+.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from decimal import Decimal, InvalidOperation
from typing import NoReturn

from msgcatalog.constants import EXACT_PREFIX, MAX_DEPTH
from msgcatalog.core.identifier_validation import is_identifier_char, is_valid_identifier
from msgcatalog.diagnostics import Diagnostic, ErrorTemplate, InvalidPlaceholderError
from msgcatalog.enums import FormatType, PluralCategory, SelectorKind

from .ast import (
    Branch,
    BranchKey,
    ExactKey,
    FormattedPlaceholder,
    NamedKey,
    Placeholder,
    PoundSign,
    SelectPlaceholder,
    Template,
    TemplateElement,
    Text,
)

__all__ = ["parse_branch_key", "parse_template"]

_EXACT_NUMBER: re.Pattern[str] = re.compile(r"-?\d+(?:\.\d+)?")
_SELECT_KEY: re.Pattern[str] = re.compile(r"[A-Za-z0-9_-]+")
_PLURAL_CATEGORIES: frozenset[str] = frozenset(c.value for c in PluralCategory)
_FORMAT_TYPES: dict[str, FormatType] = {t.value: t for t in FormatType}
_WHITESPACE = " \t\r\n"


def parse_branch_key(raw: str, kind: SelectorKind) -> BranchKey | None:
    """Parse a branch key for a plural or select table.

    Plural tables accept CLDR categories and exact values written as
    ``=N``, ``exact:N`` or ``_N``. Select tables accept any key made of
    ASCII letters, digits, ``_`` and ``-``.

    Args:
        raw: Key text as written in a template or persisted catalog
        kind: Selector kind of the table

    Returns:
        Parsed key, or None if the key is not valid for the table kind

    Example:
        >>> parse_branch_key("=0", SelectorKind.PLURAL)
        ExactKey(value=Decimal('0'))
        >>> parse_branch_key("_1", SelectorKind.PLURAL)
        ExactKey(value=Decimal('1'))
        >>> parse_branch_key("few", SelectorKind.PLURAL)
        NamedKey(name='few')
        >>> parse_branch_key("female", SelectorKind.PLURAL) is None
        True
    """
    if kind is SelectorKind.PLURAL:
        for prefix in ("=", EXACT_PREFIX, "_"):
            if raw.startswith(prefix):
                number = raw[len(prefix):]
                if _EXACT_NUMBER.fullmatch(number) is None:
                    return None
                try:
                    return ExactKey(Decimal(number))
                except InvalidOperation:  # pragma: no cover - regex guarantees format
                    return None
        if raw in _PLURAL_CATEGORIES:
            return NamedKey(raw)
        return None

    if _SELECT_KEY.fullmatch(raw) is None:
        return None
    return NamedKey(raw)


def parse_template(
    source: str, *, max_depth: int = MAX_DEPTH, in_plural: bool = False
) -> Template:
    """Parse template source into a Template AST.

    Args:
        source: Template text
        max_depth: Maximum nesting of plural/select placeholders
        in_plural: Parse as the body of a plural branch (enables "#")

    Returns:
        Parsed template

    Raises:
        InvalidPlaceholderError: If the template contains a placeholder that is
            not a simple named placeholder, or is otherwise malformed

    Example:
        >>> parse_template("Hello, {name}!")
        Template(elements=(Text(value='Hello, '), Placeholder(name='name'), Text(value='!')))
    """
    return _TemplateParser(source, max_depth, in_plural).parse()


class _TemplateParser:
    """Recursive descent parser over a template string."""

    __slots__ = ("_in_plural", "_max_depth", "_pos", "_source")

    def __init__(self, source: str, max_depth: int, in_plural: bool) -> None:
        self._source = source
        self._pos = 0
        self._max_depth = max_depth
        self._in_plural = in_plural

    def parse(self) -> Template:
        elements = self._parse_elements(depth=0, in_plural=self._in_plural, nested=False)
        return Template(elements)

    # ------------------------------------------------------------------
    # Elements
    # ------------------------------------------------------------------

    def _parse_elements(
        self, *, depth: int, in_plural: bool, nested: bool
    ) -> tuple[TemplateElement, ...]:
        """Parse elements until EOF, or until '}' when nested (not consumed)."""
        source = self._source
        elements: list[TemplateElement] = []
        text: list[str] = []

        def flush() -> None:
            if text:
                elements.append(Text("".join(text)))
                text.clear()

        while self._pos < len(source):
            ch = source[self._pos]
            match ch:
                case "{":
                    flush()
                    elements.append(self._parse_placeholder(depth=depth, in_plural=in_plural))
                case "}":
                    if nested:
                        break
                    raise InvalidPlaceholderError(
                        ErrorTemplate.unmatched_closing_brace(self._pos),
                        placeholder="}",
                        position=self._pos,
                    )
                case "#" if in_plural:
                    flush()
                    elements.append(PoundSign())
                    self._pos += 1
                case "'":
                    text.append(self._parse_apostrophe(in_plural=in_plural))
                case _:
                    text.append(ch)
                    self._pos += 1

        flush()
        return tuple(elements)

    def _parse_apostrophe(self, *, in_plural: bool) -> str:
        """Resolve ICU apostrophe quoting starting at the current "'"."""
        source = self._source
        nxt = source[self._pos + 1] if self._pos + 1 < len(source) else ""

        if nxt == "'":
            self._pos += 2
            return "'"

        if nxt in ("{", "}") or (nxt == "#" and in_plural):
            # Quoted literal run up to the next lone apostrophe; "''" inside is "'".
            self._pos += 1
            quoted: list[str] = []
            while self._pos < len(source):
                ch = source[self._pos]
                if ch == "'":
                    if self._pos + 1 < len(source) and source[self._pos + 1] == "'":
                        quoted.append("'")
                        self._pos += 2
                        continue
                    self._pos += 1
                    return "".join(quoted)
                quoted.append(ch)
                self._pos += 1
            # Unterminated quote runs to end of template (ICU behavior)
            return "".join(quoted)

        self._pos += 1
        return "'"

    # ------------------------------------------------------------------
    # Placeholders
    # ------------------------------------------------------------------

    def _parse_placeholder(
        self, *, depth: int, in_plural: bool
    ) -> Placeholder | FormattedPlaceholder | SelectPlaceholder:
        start = self._pos
        self._pos += 1  # '{'
        self._skip_ws()

        name = self._read_while(is_identifier_char)
        self._skip_ws()
        nxt = self._peek()

        if nxt == "":
            self._fail(ErrorTemplate.placeholder_unterminated(start), start)

        if not name and nxt == "}":
            self._fail(ErrorTemplate.placeholder_empty(start), start)

        if nxt not in ("}", ",") or not is_valid_identifier(name):
            self._fail(ErrorTemplate.placeholder_invalid(self._body_from(start), start), start)

        if nxt == "}":
            self._pos += 1
            return Placeholder(name)

        self._pos += 1  # ','
        self._skip_ws()
        type_name = self._read_while(lambda c: c.isascii() and c.isalpha())
        self._skip_ws()

        if type_name in ("plural", "select"):
            kind = SelectorKind(type_name)
            return self._parse_select(name, kind, start, depth=depth, in_plural=in_plural)

        format_type = _FORMAT_TYPES.get(type_name)
        if format_type is None:
            if not type_name:
                self._fail(
                    ErrorTemplate.placeholder_invalid(self._body_from(start), start), start
                )
            self._fail(ErrorTemplate.placeholder_unknown_type(name, type_name, start), start)

        style: str | None = None
        if self._peek() == ",":
            self._pos += 1
            style_start = self._pos
            while self._pos < len(self._source) and self._source[self._pos] not in "{}":
                self._pos += 1
            style = self._source[style_start:self._pos].strip() or None
            if style is None:
                self._fail(
                    ErrorTemplate.placeholder_invalid(self._body_from(start), start), start
                )

        if self._peek() != "}":
            if self._peek() == "":
                self._fail(ErrorTemplate.placeholder_unterminated(start), start)
            self._fail(ErrorTemplate.placeholder_invalid(self._body_from(start), start), start)
        self._pos += 1

        if format_type is FormatType.CURRENCY and style is None:
            self._fail(ErrorTemplate.placeholder_invalid(self._body_from(start), start), start)

        return FormattedPlaceholder(name, format_type, style)

    def _parse_select(
        self,
        name: str,
        kind: SelectorKind,
        start: int,
        *,
        depth: int,
        in_plural: bool,
    ) -> SelectPlaceholder:
        if self._peek() != ",":
            self._fail(ErrorTemplate.placeholder_invalid(self._body_from(start), start), start)
        self._pos += 1

        if depth + 1 > self._max_depth:
            self._fail(ErrorTemplate.nesting_depth_exceeded(self._max_depth, start), start)

        branch_in_plural = in_plural or kind is SelectorKind.PLURAL
        branches: list[Branch] = []
        seen: set[BranchKey] = set()

        while True:
            self._skip_ws()
            nxt = self._peek()
            if nxt == "":
                self._fail(ErrorTemplate.placeholder_unterminated(start), start)
            if nxt == "}":
                self._pos += 1
                break

            key_start = self._pos
            while self._pos < len(self._source) and self._source[self._pos] not in "{}" + _WHITESPACE:
                self._pos += 1
            raw_key = self._source[key_start:self._pos]
            key = parse_branch_key(raw_key, kind)
            if key is None:
                self._fail(ErrorTemplate.branch_key_invalid(raw_key, name), key_start)
            if key in seen:
                self._fail(ErrorTemplate.branch_duplicate(str(key), name), key_start)
            seen.add(key)

            self._skip_ws()
            if self._peek() != "{":
                if self._peek() == "":
                    self._fail(ErrorTemplate.placeholder_unterminated(start), start)
                self._fail(
                    ErrorTemplate.placeholder_invalid(self._body_from(start), start), start
                )
            branch_start = self._pos
            self._pos += 1
            elements = self._parse_elements(depth=depth + 1, in_plural=branch_in_plural, nested=True)
            if self._peek() != "}":
                self._fail(ErrorTemplate.placeholder_unterminated(branch_start), branch_start)
            self._pos += 1
            branches.append(Branch(key, Template(elements)))

        if not branches:
            self._fail(ErrorTemplate.branches_empty(name), start)

        return SelectPlaceholder(name, kind, tuple(branches))

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _peek(self) -> str:
        return self._source[self._pos] if self._pos < len(self._source) else ""

    def _skip_ws(self) -> None:
        while self._pos < len(self._source) and self._source[self._pos] in _WHITESPACE:
            self._pos += 1

    def _read_while(self, predicate: Callable[[str], bool]) -> str:
        start = self._pos
        while self._pos < len(self._source) and predicate(self._source[self._pos]):
            self._pos += 1
        return self._source[start:self._pos]

    def _body_from(self, start: int) -> str:
        """Placeholder body from '{' at start up to the next '}' (or EOF)."""
        end = self._source.find("}", start + 1)
        if end == -1:
            end = len(self._source)
        return self._source[start + 1:end]

    def _fail(self, diagnostic: Diagnostic, position: int) -> NoReturn:
        raise InvalidPlaceholderError(
            diagnostic,
            placeholder=self._body_from(position) if self._source[position:position + 1] == "{" else "",
            position=position,
        )
