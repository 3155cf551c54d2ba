"""Thread-safe LRU cache for rendered messages.

Architecture:
    - Thread-safe using threading.RLock (reentrant lock)
    - LRU eviction via OrderedDict
    - Immutable cache keys (tuples of hashable types)
    - Keys include the snapshot version, so publishing new catalogs never
      serves stale text even before the cache is cleared

Cache Key Structure:
    (message_id, snapshot_version, locale, args_tuple)
    - args_tuple: tuple[tuple[str, str, HashableValue], ...]
      sorted by name; each value is tagged with its type name so that
      1, 1.0 and True (equal and equally hashed in Python) never collide:
      they render differently ('one' vs 'other', '1' vs 'true').

Thread Safety:
    All operations protected by RLock. Safe for concurrent reads and writes.

Python 3.13+.
"""

from __future__ import annotations

from collections import OrderedDict
from collections.abc import Mapping
from datetime import date, datetime
from decimal import Decimal
from threading import RLock
from typing import cast

from msgcatalog.constants import DEFAULT_CACHE_SIZE

__all__ = ["FormatCache", "HashableValue"]

# Recursive definition: primitives plus tuple/frozenset of self.
type HashableValue = (
    str
    | int
    | float
    | bool
    | Decimal
    | datetime
    | date
    | None
    | tuple["HashableValue", ...]
    | frozenset["HashableValue"]
)

type _CacheKey = tuple[str, int, str, tuple[tuple[str, str, HashableValue], ...]]

# (rendered text, locale whose catalog served it or None for source text)
type _CacheValue = tuple[str, str | None]


class FormatCache:
    """Thread-safe LRU cache for rendered message text.

    Transparent to caller: returns None on cache miss.

    Attributes:
        maxsize: Maximum number of cache entries
        hits: Number of cache hits (for metrics)
        misses: Number of cache misses (for metrics)
    """

    __slots__ = (
        "_cache",
        "_hits",
        "_lock",
        "_max_entry_length",
        "_maxsize",
        "_misses",
        "_oversize_skips",
        "_unhashable_skips",
    )

    def __init__(self, maxsize: int = DEFAULT_CACHE_SIZE, max_entry_length: int = 10_000) -> None:
        """Initialize format cache.

        Args:
            maxsize: Maximum number of entries (default: 1000)
            max_entry_length: Longest rendered text stored (default: 10000)
        """
        if maxsize <= 0:
            msg = "maxsize must be positive"
            raise ValueError(msg)

        self._cache: OrderedDict[_CacheKey, _CacheValue] = OrderedDict()
        self._maxsize = maxsize
        self._max_entry_length = max_entry_length
        self._lock = RLock()
        self._hits = 0
        self._misses = 0
        self._unhashable_skips = 0
        self._oversize_skips = 0

    def get(
        self,
        message_id: str,
        version: int,
        locale: str,
        args: Mapping[str, object] | None,
    ) -> _CacheValue | None:
        """Get cached (text, resolved_locale) if present.

        Args:
            message_id: Message identifier
            version: Version of the snapshot the text was rendered from
            locale: Requested locale
            args: Message arguments (may contain unhashable values like lists)

        Returns:
            Cached (text, resolved_locale) or None
        """
        key = self._make_key(message_id, version, locale, args)

        if key is None:
            with self._lock:
                self._unhashable_skips += 1
                self._misses += 1
            return None

        with self._lock:
            if key in self._cache:
                self._cache.move_to_end(key)
                self._hits += 1
                return self._cache[key]

            self._misses += 1
            return None

    def put(
        self,
        message_id: str,
        version: int,
        locale: str,
        args: Mapping[str, object] | None,
        text: str,
        resolved_locale: str | None = None,
    ) -> None:
        """Store rendered text and the locale that served it.

        Evicts the LRU entry if the cache is full.
        """
        if len(text) > self._max_entry_length:
            with self._lock:
                self._oversize_skips += 1
            return

        key = self._make_key(message_id, version, locale, args)

        if key is None:
            with self._lock:
                self._unhashable_skips += 1
            return

        with self._lock:
            if key in self._cache:
                self._cache.move_to_end(key)
            elif len(self._cache) >= self._maxsize:
                self._cache.popitem(last=False)

            self._cache[key] = (text, resolved_locale)

    def clear(self) -> None:
        """Clear all cached entries and reset metrics."""
        with self._lock:
            self._cache.clear()
            self._hits = 0
            self._misses = 0
            self._unhashable_skips = 0
            self._oversize_skips = 0

    def get_stats(self) -> dict[str, int | float]:
        """Get cache statistics.

        Returns:
            Dict with keys:
            - size (int): Current number of cached entries
            - maxsize (int): Maximum cache capacity
            - hits (int): Number of cache hits
            - misses (int): Number of cache misses
            - hit_rate (float): Hit rate as percentage (0.0-100.0)
            - unhashable_skips (int): Operations skipped due to unhashable args
            - oversize_skips (int): Results too long to store
        """
        with self._lock:
            total = self._hits + self._misses
            hit_rate = (self._hits / total * 100) if total > 0 else 0.0

            return {
                "size": len(self._cache),
                "maxsize": self._maxsize,
                "hits": self._hits,
                "misses": self._misses,
                "hit_rate": round(hit_rate, 2),
                "unhashable_skips": self._unhashable_skips,
                "oversize_skips": self._oversize_skips,
            }

    @staticmethod
    def _make_hashable(value: object) -> HashableValue:
        """Convert list/dict/set (recursively) to tuple/sorted tuple/frozenset."""
        match value:
            case list():
                return tuple(FormatCache._make_hashable(v) for v in value)
            case dict():
                return tuple(
                    sorted(
                        (k, FormatCache._make_hashable(v))
                        for k, v in value.items()
                    )
                )
            case set():
                return frozenset(FormatCache._make_hashable(v) for v in value)
            case _:
                return cast(HashableValue, value)

    @staticmethod
    def _make_key(
        message_id: str,
        version: int,
        locale: str,
        args: Mapping[str, object] | None,
    ) -> _CacheKey | None:
        """Create an immutable cache key, or None if args cannot be hashed.

        Sorting by argument name is required: {"a": 1, "b": 2} and
        {"b": 2, "a": 1} must share a key.
        """
        if not args:
            return (message_id, version, locale, ())
        try:
            items = tuple(
                sorted(
                    (name, type(value).__name__, FormatCache._make_hashable(value))
                    for name, value in args.items()
                )
            )
            hash(items)
        except (TypeError, RecursionError):
            return None
        return (message_id, version, locale, items)

    def __len__(self) -> int:
        with self._lock:
            return len(self._cache)

    @property
    def maxsize(self) -> int:
        """Maximum cache size."""
        return self._maxsize

    @property
    def hits(self) -> int:
        with self._lock:
            return self._hits

    @property
    def misses(self) -> int:
        with self._lock:
            return self._misses

    @property
    def unhashable_skips(self) -> int:
        with self._lock:
            return self._unhashable_skips
