"""Runtime: plural rules, branch selection, formatting, rendering, caching.

Python 3.13+.
"""

from .cache import FormatCache
from .cache_config import CacheConfig
from .formatting import BabelFormatter, Formatter, format_plain
from .plural_rules import select_plural_category
from .renderer import UNICODE_FSI, UNICODE_PDI, RenderableEntry, TemplateRenderer
from .resolution_context import ResolutionContext
from .selection import select_branch, select_key_text, to_decimal

__all__ = [
    "UNICODE_FSI",
    "UNICODE_PDI",
    "BabelFormatter",
    "CacheConfig",
    "FormatCache",
    "Formatter",
    "RenderableEntry",
    "ResolutionContext",
    "TemplateRenderer",
    "format_plain",
    "select_branch",
    "select_key_text",
    "select_plural_category",
    "to_decimal",
]
