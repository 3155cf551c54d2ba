"""Hypothesis strategies for msgcatalog property-based testing.

Strategies are organized by domain:

- templates: Placeholder names, literal text and template sources
- locales: Locale codes and fallback policy mappings

Usage:
    from tests.strategies import template_sources, locale_codes
"""

from .locales import LOCALE_POOL, fallback_mappings, locale_codes, raw_locale_codes
from .templates import literal_texts, placeholder_names, template_sources

__all__ = [
    "LOCALE_POOL",
    "fallback_mappings",
    "literal_texts",
    "locale_codes",
    "placeholder_names",
    "raw_locale_codes",
    "template_sources",
]
