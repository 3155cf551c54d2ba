"""Template syntax: AST, parser, serializer and read-only queries.

Python 3.13+.
"""

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
    decimal_text,
)
from .parser import parse_branch_key, parse_template
from .serializer import serialize_template
from .visitor import extract_placeholders, find_missing_default, iter_elements, max_nesting_depth

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # AST
    "Branch",
    "BranchKey",
    "ExactKey",
    "FormattedPlaceholder",
    "NamedKey",
    "Placeholder",
    "PoundSign",
    "SelectPlaceholder",
    "Template",
    "TemplateElement",
    "Text",
    "decimal_text",
    # Parsing and serialization
    "parse_branch_key",
    "parse_template",
    "serialize_template",
    # Queries
    "extract_placeholders",
    "find_missing_default",
    "iter_elements",
    "max_nesting_depth",
]
