"""Hypothesis strategies for message templates.

Provides:
- placeholder_names: Valid placeholder names ([A-Za-z_][A-Za-z0-9_]*)
- literal_texts: Text without braces (always parses)
- template_sources: Template source built from literal text, placeholders,
  typed placeholders and nested plural/select tables

Event-Emitting Strategies (HypoFuzz-Optimized):
- template_sources: Emits template_piece=text|plain|typed|plural|select

Python 3.13+.
"""

from __future__ import annotations

import string
from typing import TYPE_CHECKING

from hypothesis import event
from hypothesis import strategies as st

if TYPE_CHECKING:
    from hypothesis.strategies import DrawFn

_NAME_FIRST = string.ascii_letters + "_"
_NAME_REST = string.ascii_letters + string.digits + "_"

# Apostrophes and '#' exercise quoting; braces are produced only by placeholders.
_TEXT_ALPHABET = string.ascii_letters + string.digits + " .,!?-'#"

_TYPED = ["number", "percent", "date", "time", "datetime", "currency, EUR", "date, short"]


@st.composite
def placeholder_names(draw: DrawFn) -> str:
    first = draw(st.sampled_from(_NAME_FIRST))
    rest = draw(st.text(alphabet=_NAME_REST, max_size=12))
    return first + rest


def literal_texts(min_size: int = 0, max_size: int = 20) -> st.SearchStrategy[str]:
    """Text without braces; always a valid template on its own."""
    return st.text(alphabet=_TEXT_ALPHABET, min_size=min_size, max_size=max_size)


@st.composite
def template_sources(draw: DrawFn, depth: int = 2) -> str:
    """Template source; may contain quoting that makes it invalid.

    Callers that need a valid template should filter through parse_template.
    """
    pieces: list[str] = []
    for _ in range(draw(st.integers(min_value=0, max_value=4))):
        kinds = ["text", "plain", "typed"]
        if depth > 0:
            kinds += ["plural", "select"]
        kind = draw(st.sampled_from(kinds))
        event(f"template_piece={kind}")
        match kind:
            case "text":
                pieces.append(draw(literal_texts(min_size=1)))
            case "plain":
                pieces.append(f"{{{draw(placeholder_names())}}}")
            case "typed":
                pieces.append(f"{{{draw(placeholder_names())}, {draw(st.sampled_from(_TYPED))}}}")
            case "plural":
                name = draw(placeholder_names())
                keys = draw(
                    st.lists(
                        st.sampled_from(["=0", "=1", "_2", "exact:3", "one", "few", "many"]),
                        unique=True,
                        max_size=3,
                    )
                )
                branches = " ".join(
                    f"{key} {{{draw(template_sources(depth=depth - 1))}}}"
                    for key in [*keys, "other"]
                )
                pieces.append(f"{{{name}, plural, {branches}}}")
            case "select":
                name = draw(placeholder_names())
                keys = draw(
                    st.lists(st.sampled_from(["male", "female", "true", "x-1"]), unique=True, max_size=3)
                )
                branches = " ".join(
                    f"{key} {{{draw(template_sources(depth=depth - 1))}}}"
                    for key in [*keys, "other"]
                )
                pieces.append(f"{{{name}, select, {branches}}}")
    return "".join(pieces)
