"""Type aliases for the catalog domain.

Semantic aliases used throughout the catalog package and by user code when
annotating engine call sites.

Python 3.13+. Zero external dependencies.
"""

from collections.abc import Mapping

__all__ = [
    "ArgumentMap",
    "LocaleCode",
    "MessageId",
    "RawTranslation",
    "TemplateSource",
]

type MessageId = str
"""Stable message identifier (e.g., 'msg.back' or a derived hash 'q1BZ3kd_Vw9T')."""

type LocaleCode = str
"""Locale code, BCP-47 or POSIX (e.g., 'en', 'pt-BR', 'zh_Hant_TW')."""

type TemplateSource = str
"""Template text in the placeholder syntax (e.g., 'Hello, {name}!')."""

type RawTranslation = TemplateSource | Mapping[str, object]
"""Translator-supplied translation: a template, or a persisted entry mapping."""

type ArgumentMap = Mapping[str, object]
"""Runtime argument values keyed by placeholder name."""
