"""Hypothesis strategies for locale codes and fallback policies.

Provides:
- locale_codes: Canonical locale codes from a fixed pool
- raw_locale_codes: Same codes with random case and separators
- fallback_mappings: Arbitrary child -> parent mappings (may be cyclic)

Event-Emitting Strategies (HypoFuzz-Optimized):
- fallback_mappings: Emits policy_size=N
- raw_locale_codes: Emits locale_separator=hyphen|underscore

Python 3.13+.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from hypothesis import event
from hypothesis import strategies as st

if TYPE_CHECKING:
    from hypothesis.strategies import DrawFn

LOCALE_POOL = [
    "en", "en_US", "en_GB",
    "de", "de_DE", "de_AT", "de_CH",
    "fr", "fr_FR", "fr_CA",
    "es", "es_ES", "es_MX", "es_419",
    "pt", "pt_BR", "pt_PT",
    "zh", "zh_Hant", "zh_Hant_TW", "zh_Hans_CN",
    "sr_Latn", "lv", "ru", "ar", "ja",
]


def locale_codes() -> st.SearchStrategy[str]:
    return st.sampled_from(LOCALE_POOL)


@st.composite
def raw_locale_codes(draw: DrawFn) -> str:
    """Pool locale written with random case and separator."""
    code = draw(locale_codes())
    separator = draw(st.sampled_from(["-", "_"]))
    event(f"locale_separator={'hyphen' if separator == '-' else 'underscore'}")
    subtags = code.split("_")
    cased = [
        subtag.upper() if draw(st.booleans()) else subtag.lower() for subtag in subtags
    ]
    return separator.join(cased)


@st.composite
def fallback_mappings(draw: DrawFn, max_size: int = 6) -> dict[str, str]:
    """Child -> parent mapping over the pool; may be cyclic or self-referential."""
    children = draw(st.lists(locale_codes(), unique=True, max_size=max_size))
    mapping = {child: draw(locale_codes()) for child in children}
    event(f"policy_size={len(mapping)}")
    return mapping
