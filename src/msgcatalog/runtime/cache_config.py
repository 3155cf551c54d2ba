"""Cache configuration for ResolutionEngine.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

from dataclasses import dataclass

from msgcatalog.constants import DEFAULT_CACHE_SIZE

__all__ = ["CacheConfig"]


@dataclass(frozen=True, slots=True)
class CacheConfig:
    """Immutable configuration for rendered-result caching.

    Constructing ``CacheConfig()`` with no arguments produces a usable
    configuration. Pass an instance to ``ResolutionEngine(cache=...)`` to
    enable caching; omit it to disable caching entirely.

    Attributes:
        size: Maximum cache entries (default: 1000)
        max_entry_length: Rendered results longer than this are computed
            but not cached (default: 10000 characters)

    Example:
        >>> from msgcatalog import ResolutionEngine
        >>> engine = ResolutionEngine(cache=CacheConfig(size=500))
        >>> engine.cache_enabled
        True
    """

    size: int = DEFAULT_CACHE_SIZE
    max_entry_length: int = 10_000

    def __post_init__(self) -> None:
        """Validate configuration values at construction time.

        Raises:
            ValueError: If size or max_entry_length is not positive
        """
        if self.size <= 0:
            msg = "size must be positive"
            raise ValueError(msg)
        if self.max_entry_length <= 0:
            msg = "max_entry_length must be positive"
            raise ValueError(msg)
