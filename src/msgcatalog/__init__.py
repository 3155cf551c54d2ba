"""msgcatalog - message catalog resolution and formatting engine.

Normalizes source messages into stable ids, compiles per-locale catalogs,
and resolves the localized, pluralized and interpolated string for a
locale and argument set at request time.

Public API:
    ResolutionEngine - translate(descriptor, locale, arguments) with fallback
    MessageDescriptor - Source-side message definition (id, default text)
    normalize_id - Stable id derivation from text and context
    Catalog, CatalogEntry - Immutable per-locale translations
    FallbackPolicy - Validated locale fallback chains
    compile_catalog, reconcile, validate_catalog - Build-time catalog tools
    PathCatalogLoader, DictCatalogLoader - Catalog loader implementations

Exceptions:
    CatalogError - Base exception class
    InvalidPlaceholderError - Template syntax errors
    MissingDefaultBranchError - Plural/select without 'other'
    MissingArgumentError - Argument absent at render time
    InvalidFallbackPolicyError - Cyclic or malformed fallback policy
    FormattingError - Value could not be formatted (recoverable)

Submodules:
    msgcatalog.syntax - Template AST, parser and serializer
    msgcatalog.runtime - Plural rules, formatting, rendering, caching
    msgcatalog.catalog - Descriptors, catalogs, fallback, storage, loading
    msgcatalog.diagnostics - Error types, codes and validation results
"""

from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _get_version

from .catalog import (
    Catalog,
    CatalogEntry,
    CatalogLoadResult,
    CompileResult,
    DictCatalogLoader,
    FallbackInfo,
    FallbackPolicy,
    LoadSummary,
    MessageDescriptor,
    PathCatalogLoader,
    ReconcileResult,
    compile_catalog,
    normalize_id,
    reconcile,
    validate_catalog,
)
from .diagnostics import (
    CatalogCompileError,
    CatalogError,
    CatalogLoadError,
    FormattingError,
    InvalidFallbackPolicyError,
    InvalidPlaceholderError,
    MissingArgumentError,
    MissingDefaultBranchError,
)
from .engine import ResolutionEngine
from .enums import IdStrategy, LoadStatus, SelectorKind
from .runtime import BabelFormatter, CacheConfig, Formatter


# Version information - Auto-populated from package metadata
# SINGLE SOURCE OF TRUTH: pyproject.toml [project] version
try:
    __version__ = _get_version("msgcatalog")
except PackageNotFoundError:
    # Development mode: package not installed yet
    __version__ = "0.0.0+dev"

__all__ = [
    "BabelFormatter",
    "CacheConfig",
    "Catalog",
    "CatalogCompileError",
    "CatalogEntry",
    "CatalogError",
    "CatalogLoadError",
    "CatalogLoadResult",
    "CompileResult",
    "DictCatalogLoader",
    "FallbackInfo",
    "FallbackPolicy",
    "Formatter",
    "FormattingError",
    "IdStrategy",
    "InvalidFallbackPolicyError",
    "InvalidPlaceholderError",
    "LoadStatus",
    "LoadSummary",
    "MessageDescriptor",
    "MissingArgumentError",
    "MissingDefaultBranchError",
    "PathCatalogLoader",
    "ReconcileResult",
    "ResolutionEngine",
    "SelectorKind",
    "__version__",
    "compile_catalog",
    "normalize_id",
    "reconcile",
    "validate_catalog",
]
