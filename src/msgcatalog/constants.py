"""Shared constants for msgcatalog.

This module provides centralized configuration constants used across
syntax, catalog and runtime packages. Placing constants here avoids circular
imports and provides a single source of truth.

Constants are grouped by domain:
- Depth limits: Recursion protection for parsing and rendering
- Identifier limits: Placeholder name and message id constraints
- Cache limits: Memory bounds for caching subsystems
- Input limits: DoS prevention via size constraints
- Locale defaults: Terminal fallback locale

Python 3.13+. Zero external dependencies.
"""

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Depth limits
    "MAX_DEPTH",
    # Identifier limits
    "MAX_IDENTIFIER_LENGTH",
    "ID_HASH_LENGTH",
    "CONTEXT_SEPARATOR",
    "HASH_SEPARATOR",
    # Cache limits
    "DEFAULT_CACHE_SIZE",
    "MAX_CHAIN_CACHE_SIZE",
    "MAX_LOCALE_CACHE_SIZE",
    # Input limits
    "MAX_SOURCE_SIZE",
    # Locale defaults
    "DEFAULT_SOURCE_LOCALE",
    "DEFAULT_SELECTOR",
    # Branch keys
    "OTHER_BRANCH",
    "EXACT_PREFIX",
    # Fallback strings
    "FALLBACK_MISSING_ARGUMENT",
]

# ============================================================================
# DEPTH LIMITS
# ============================================================================

# Unified maximum depth for recursion protection.
# Used by: template parser (nested branches) and renderer (recursive branches).
# 100 levels of nested plural/select placeholders is malformed input.
MAX_DEPTH: int = 100

# ============================================================================
# IDENTIFIER LIMITS
# ============================================================================

# Maximum placeholder name length (DoS prevention).
MAX_IDENTIFIER_LENGTH: int = 256

# Number of URL-safe base64 characters kept from the SHA-256 digest of a
# message. 12 characters carry 72 bits.
ID_HASH_LENGTH: int = 12

# gettext msgctxt separator (EOT), used by verbatim ids.
CONTEXT_SEPARATOR: str = "\x04"

# Unit separator between text and context before hashing.
HASH_SEPARATOR: str = "\x1f"

# ============================================================================
# CACHE LIMITS
# ============================================================================

# Default maximum cache entries for rendered results.
DEFAULT_CACHE_SIZE: int = 1000

# Maximum memoized fallback chains per policy.
MAX_CHAIN_CACHE_SIZE: int = 256

# Maximum cached Babel Locale objects.
MAX_LOCALE_CACHE_SIZE: int = 128

# ============================================================================
# INPUT LIMITS
# ============================================================================

# Maximum persisted catalog size in bytes (10 MB) accepted by PathCatalogLoader.
MAX_SOURCE_SIZE: int = 10 * 1024 * 1024

# ============================================================================
# LOCALE DEFAULTS
# ============================================================================

# Source locale used when the engine is constructed without one.
DEFAULT_SOURCE_LOCALE: str = "en"

# Argument name driving entry-level plural branches when none is given.
DEFAULT_SELECTOR: str = "count"

# ============================================================================
# BRANCH KEYS
# ============================================================================

OTHER_BRANCH: str = "other"

# Canonical prefix of exact-match plural branch keys (exact:0, exact:1.5).
EXACT_PREFIX: str = "exact:"

# ============================================================================
# FALLBACK STRINGS
# ============================================================================

# Rendered in place of a missing argument by the non-raising format() path.
FALLBACK_MISSING_ARGUMENT: str = "{{{name}}}"  # e.g., {username}
