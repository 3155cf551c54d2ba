"""Catalog domain: descriptors, entries, fallback, storage, loading, compilation.

Python 3.13+.
"""

from .compiler import CompileResult, ReconcileResult, compile_catalog, reconcile, validate_catalog
from .descriptor import MessageDescriptor, normalize_id
from .entry import Catalog, CatalogEntry
from .fallback import FallbackPolicy
from .loading import (
    CatalogLoader,
    CatalogLoadResult,
    DictCatalogLoader,
    FallbackInfo,
    LoadSummary,
    PathCatalogLoader,
)
from .store import CatalogSnapshot, CatalogStore
from .types import ArgumentMap, LocaleCode, MessageId, RawTranslation, TemplateSource

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Source side
    "MessageDescriptor",
    "normalize_id",
    # Catalogs
    "Catalog",
    "CatalogEntry",
    "CatalogSnapshot",
    "CatalogStore",
    # Fallback
    "FallbackPolicy",
    # Loading
    "CatalogLoader",
    "CatalogLoadResult",
    "DictCatalogLoader",
    "FallbackInfo",
    "LoadSummary",
    "PathCatalogLoader",
    # Compilation
    "CompileResult",
    "ReconcileResult",
    "compile_catalog",
    "reconcile",
    "validate_catalog",
    # Type aliases
    "ArgumentMap",
    "LocaleCode",
    "MessageId",
    "RawTranslation",
    "TemplateSource",
]
