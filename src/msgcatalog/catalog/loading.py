"""Catalog loading infrastructure.

Provides the protocol for catalog loaders, a JSON filesystem implementation
with path-traversal security, an in-memory implementation, and
result/summary data structures for tracking load attempts.

Components:
    CatalogLoader - Protocol for loading per-locale catalogs (structural typing)
    PathCatalogLoader - JSON-on-disk loader with path-traversal prevention
    DictCatalogLoader - In-memory loader for embedding and tests
    FallbackInfo - Immutable record of a locale fallback event
    CatalogLoadResult - Immutable result of a single catalog load attempt
    LoadSummary - Immutable aggregate of load results

Python 3.13+.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

from msgcatalog.constants import MAX_SOURCE_SIZE
from msgcatalog.diagnostics import CatalogLoadError, ErrorTemplate
from msgcatalog.enums import LoadStatus
from msgcatalog.locale_utils import is_valid_locale_code, normalize_locale

from .entry import Catalog
from .types import LocaleCode, MessageId

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Protocol
    "CatalogLoader",
    # Concrete loaders
    "PathCatalogLoader",
    "DictCatalogLoader",
    # Fallback observability
    "FallbackInfo",
    # Load result types
    "CatalogLoadResult",
    "LoadSummary",
]

_ENVELOPE_LOCALE = "locale"
_ENVELOPE_MESSAGES = "messages"


class CatalogLoader(Protocol):
    """Protocol for loading one locale's catalog.

    This is a Protocol (structural typing) rather than ABC so applications
    can plug in any storage (database rows, HTTP, bundled resources).

    Example:
        >>> class DbLoader:
        ...     def load(self, locale: str) -> Catalog:
        ...         return Catalog.from_dict(locale, fetch_rows(locale))
        ...     def describe_path(self, locale: str) -> str:
        ...         return f"db://catalogs/{locale}"
    """

    def load(self, locale: LocaleCode) -> Catalog:
        """Load the catalog for locale.

        Raises:
            FileNotFoundError: If no catalog exists for this locale
            CatalogLoadError: If the stored data is malformed
            OSError: If storage cannot be read
            ValueError: If the locale or the data is invalid
        """
        ...

    def describe_path(self, locale: LocaleCode) -> str:
        """Human-readable location of locale's catalog for diagnostics."""
        ...


def _catalog_from_json(locale: LocaleCode, text: str) -> Catalog:
    """Parse persisted JSON: {id: entry} or {"locale": ..., "messages": {id: entry}}."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise CatalogLoadError(
            ErrorTemplate.load_malformed(locale, f"invalid JSON: {e}"), locale=locale
        ) from e

    if not isinstance(data, dict):
        raise CatalogLoadError(
            ErrorTemplate.load_malformed(locale, "top level must be an object"), locale=locale
        )

    if _ENVELOPE_MESSAGES in data and isinstance(data[_ENVELOPE_MESSAGES], dict):
        declared = data.get(_ENVELOPE_LOCALE)
        if declared is not None and (
            not isinstance(declared, str)
            or not is_valid_locale_code(declared)
            or normalize_locale(declared) != normalize_locale(locale)
        ):
            raise CatalogLoadError(
                ErrorTemplate.load_locale_mismatch(locale, str(declared)), locale=locale
            )
        data = data[_ENVELOPE_MESSAGES]

    try:
        return Catalog.from_dict(locale, data)
    except ValueError as e:
        raise CatalogLoadError(ErrorTemplate.load_malformed(locale, str(e)), locale=locale) from e


@dataclass(frozen=True, slots=True)
class PathCatalogLoader:
    """File system catalog loader using a path template.

    Uses {locale} placeholder in path template for locale substitution.

    Security:
        Locale codes must be syntactically valid locale codes, which rules
        out path separators and "..". The resolved path is validated against
        a fixed root directory and files larger than MAX_SOURCE_SIZE are
        rejected before parsing.

    Example:
        >>> loader = PathCatalogLoader("locales/{locale}.json")
        >>> catalog = loader.load("fr")
        # Loads from: locales/fr.json

    Attributes:
        base_path: Path template with {locale} placeholder
        root_dir: Fixed root directory for path traversal validation.
                  Defaults to the static prefix of base_path.
    """

    base_path: str = "locales/{locale}.json"
    root_dir: str | None = None
    _resolved_root: Path = field(init=False, repr=False)

    def __post_init__(self) -> None:
        """Cache resolved root directory and validate template at initialization.

        Raises:
            ValueError: If base_path does not contain {locale} placeholder
        """
        if "{locale}" not in self.base_path:
            msg = (
                f"base_path must contain '{{locale}}' placeholder for locale substitution, "
                f"got: '{self.base_path}'"
            )
            raise ValueError(msg)

        if self.root_dir is not None:
            resolved = Path(self.root_dir).resolve()
        else:
            # "locales/{locale}.json" -> "locales"
            static_prefix = self.base_path.split("{locale}")[0].rstrip("/\\")
            resolved = Path(static_prefix).resolve() if static_prefix else Path.cwd().resolve()
        object.__setattr__(self, "_resolved_root", resolved)

    @staticmethod
    def _validate_locale(locale: LocaleCode) -> None:
        """Reject locale codes that are empty or could escape the root.

        Raises:
            ValueError: If locale contains unsafe path components
        """
        if not locale:
            msg = "Locale code cannot be empty"
            raise ValueError(msg)
        if ".." in locale:
            msg = f"Path traversal sequences not allowed in locale: '{locale}'"
            raise ValueError(msg)
        if "/" in locale or "\\" in locale:
            msg = f"Path separators not allowed in locale: '{locale}'"
            raise ValueError(msg)
        if not is_valid_locale_code(locale):
            msg = f"Invalid locale code: '{locale}'"
            raise ValueError(msg)

    @staticmethod
    def _is_safe_path(base_dir: Path, full_path: Path) -> bool:
        """Check if full_path is within base_dir after resolving both."""
        try:
            full_path.resolve().relative_to(base_dir.resolve())
            return True
        except ValueError:
            return False

    def describe_path(self, locale: LocaleCode) -> str:
        return self.base_path.replace("{locale}", locale)

    def load(self, locale: LocaleCode) -> Catalog:
        """Load and parse locale's JSON catalog.

        Raises:
            ValueError: If locale contains path traversal sequences
            FileNotFoundError: If the file doesn't exist
            CatalogLoadError: If the file is too large or malformed
            OSError: If the file cannot be read
        """
        self._validate_locale(locale)

        # replace() rather than format(): the template may hold other braces
        full_path = Path(self.describe_path(locale)).resolve()
        if not self._is_safe_path(self._resolved_root, full_path):
            msg = (
                "Path traversal detected: resolved path escapes root directory. "
                f"locale='{locale}'"
            )
            raise ValueError(msg)

        size = full_path.stat().st_size
        if size > MAX_SOURCE_SIZE:
            reason = f"file is {size} bytes, limit is {MAX_SOURCE_SIZE}"
            raise CatalogLoadError(ErrorTemplate.load_failed(locale, reason), locale=locale)

        return _catalog_from_json(locale, full_path.read_text(encoding="utf-8"))


class DictCatalogLoader:
    """In-memory loader over persisted catalog mappings.

    Values may be Catalog objects or persisted {id: entry} mappings.

    Example:
        >>> loader = DictCatalogLoader({"fr": {"msg.back": {"template": "Retour", "translated": True}}})
        >>> loader.load("fr").get("msg.back").translated
        True
    """

    __slots__ = ("_data",)

    def __init__(self, data: Mapping[LocaleCode, Catalog | Mapping[MessageId, object]]) -> None:
        self._data = {normalize_locale(k): v for k, v in data.items()}

    def describe_path(self, locale: LocaleCode) -> str:
        return f"memory://{locale}"

    def load(self, locale: LocaleCode) -> Catalog:
        """Return locale's catalog.

        Raises:
            FileNotFoundError: If no catalog is registered for locale
            CatalogLoadError: If the registered mapping is malformed
        """
        data = self._data.get(normalize_locale(locale))
        if data is None:
            msg = f"No catalog registered for locale '{locale}'"
            raise FileNotFoundError(msg)
        if isinstance(data, Catalog):
            return data
        try:
            return Catalog.from_dict(locale, data)
        except ValueError as e:
            raise CatalogLoadError(
                ErrorTemplate.load_malformed(locale, str(e)), locale=locale
            ) from e


@dataclass(frozen=True, slots=True)
class FallbackInfo:
    """Information about a locale fallback event.

    Provided to the on_fallback callback when ResolutionEngine serves a
    message from a locale other than the requested one.

    Attributes:
        requested_locale: The locale passed to translate()
        resolved_locale: The locale whose catalog served the message, or
            None when the descriptor's default text was rendered
        message_id: The message identifier that was resolved

    Example:
        >>> def log_fallback(info: FallbackInfo) -> None:
        ...     print(f"Fallback: {info.message_id} resolved from "
        ...           f"{info.resolved_locale} (requested {info.requested_locale})")
        >>> engine = ResolutionEngine(on_fallback=log_fallback)
    """

    requested_locale: LocaleCode
    resolved_locale: LocaleCode | None
    message_id: MessageId

    @property
    def used_default_text(self) -> bool:
        return self.resolved_locale is None


@dataclass(frozen=True, slots=True)
class CatalogLoadResult:
    """Result of loading one locale's catalog.

    Attributes:
        locale: Locale code for this catalog
        status: Load status (success, not_found, error)
        error: Exception if status is not SUCCESS, None otherwise
        source_path: Human-readable location of the catalog (if available)
        entry_count: Number of entries loaded
        version: Snapshot version published by a successful load
    """

    locale: LocaleCode
    status: LoadStatus
    error: Exception | None = None
    source_path: str | None = None
    entry_count: int = 0
    version: int | None = None

    @property
    def is_success(self) -> bool:
        return self.status == LoadStatus.SUCCESS

    @property
    def is_not_found(self) -> bool:
        """Check if the catalog was not found (expected for optional locales)."""
        return self.status == LoadStatus.NOT_FOUND

    @property
    def is_error(self) -> bool:
        return self.status == LoadStatus.ERROR


@dataclass(frozen=True, slots=True)
class LoadSummary:
    """Immutable aggregate of catalog load results.

    All statistics are computed properties derived from ``results``.

    Example:
        >>> summary = engine.load_locales(["fr", "de"])
        >>> if summary.has_errors:
        ...     for result in summary.get_errors():
        ...         print(f"Failed: {result.locale}: {result.error}")
    """

    results: tuple[CatalogLoadResult, ...]

    def __repr__(self) -> str:
        return (
            f"LoadSummary(total={self.total_attempted}, "
            f"ok={self.successful}, "
            f"not_found={self.not_found}, "
            f"errors={self.errors})"
        )

    @property
    def total_attempted(self) -> int:
        return len(self.results)

    @property
    def successful(self) -> int:
        return sum(1 for r in self.results if r.is_success)

    @property
    def not_found(self) -> int:
        return sum(1 for r in self.results if r.is_not_found)

    @property
    def errors(self) -> int:
        return sum(1 for r in self.results if r.is_error)

    @property
    def entry_count(self) -> int:
        """Total entries across successful loads."""
        return sum(r.entry_count for r in self.results)

    def get_errors(self) -> tuple[CatalogLoadResult, ...]:
        return tuple(r for r in self.results if r.is_error)

    def get_not_found(self) -> tuple[CatalogLoadResult, ...]:
        return tuple(r for r in self.results if r.is_not_found)

    def get_successful(self) -> tuple[CatalogLoadResult, ...]:
        return tuple(r for r in self.results if r.is_success)

    def get_by_locale(self, locale: LocaleCode) -> tuple[CatalogLoadResult, ...]:
        return tuple(r for r in self.results if r.locale == locale)

    @property
    def has_errors(self) -> bool:
        return self.errors > 0

    @property
    def all_successful(self) -> bool:
        """True if every attempted catalog was found and loaded."""
        return self.errors == 0 and self.not_found == 0
