"""Catalog snapshots and the single-writer snapshot store.

The active catalog set is one immutable CatalogSnapshot. Every write builds
a new snapshot and swaps the reference under a writer lock; readers take the
current reference without locking and therefore always see either the old
or the new snapshot in full.

Python 3.13+.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from threading import Lock
from types import MappingProxyType

from msgcatalog.locale_utils import normalize_locale

from .entry import Catalog, CatalogEntry
from .types import LocaleCode, MessageId

__all__ = ["CatalogSnapshot", "CatalogStore"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CatalogSnapshot:
    """Immutable {locale: Catalog} view with a monotonically increasing version.

    Attributes:
        catalogs: Read-only canonical locale -> catalog mapping
        version: Snapshot version (0 for the initial empty snapshot)
    """

    catalogs: Mapping[LocaleCode, Catalog] = field(
        default_factory=lambda: MappingProxyType({})
    )
    version: int = 0

    def lookup(self, locale: LocaleCode, message_id: MessageId) -> CatalogEntry | None:
        """Entry for (canonical locale, id), or None when absent."""
        catalog = self.catalogs.get(locale)
        if catalog is None:
            return None
        return catalog.get(message_id)

    def get(self, locale: LocaleCode) -> Catalog | None:
        return self.catalogs.get(locale)

    @property
    def locales(self) -> tuple[LocaleCode, ...]:
        return tuple(self.catalogs)

    @property
    def entry_count(self) -> int:
        return sum(len(c) for c in self.catalogs.values())


class CatalogStore:
    """Holds the active snapshot; single writer, lock-free readers.

    Example:
        >>> store = CatalogStore()
        >>> store.publish([Catalog("fr", [CatalogEntry.create("msg.back", "Retour")])]).version
        1
        >>> store.lookup("fr", "msg.back").translated
        True
        >>> store.lookup("de", "msg.back") is None
        True
    """

    __slots__ = ("_snapshot", "_write_lock")

    def __init__(self, catalogs: Iterable[Catalog] = ()) -> None:
        self._write_lock = Lock()
        self._snapshot = CatalogSnapshot()
        initial = tuple(catalogs)
        if initial:
            self.publish(initial)

    @property
    def snapshot(self) -> CatalogSnapshot:
        """Current snapshot. Hold on to it for a consistent multi-step read."""
        return self._snapshot

    @property
    def version(self) -> int:
        return self._snapshot.version

    @property
    def locales(self) -> tuple[LocaleCode, ...]:
        return self._snapshot.locales

    def has_locale(self, locale: LocaleCode) -> bool:
        return normalize_locale(locale) in self._snapshot.catalogs

    def get_catalog(self, locale: LocaleCode) -> Catalog | None:
        return self._snapshot.get(normalize_locale(locale))

    def lookup(self, locale: LocaleCode, message_id: MessageId) -> CatalogEntry | None:
        """Entry for (locale, id) in the current snapshot; absence is not an error."""
        return self._snapshot.lookup(normalize_locale(locale), message_id)

    def publish(self, catalogs: Iterable[Catalog] | Mapping[LocaleCode, Catalog]) -> CatalogSnapshot:
        """Replace the whole catalog set.

        Raises:
            ValueError: If two catalogs share a locale
        """
        items = catalogs.values() if isinstance(catalogs, Mapping) else catalogs
        mapping: dict[str, Catalog] = {}
        for catalog in items:
            if catalog.locale in mapping:
                msg = f"Duplicate catalog for locale {catalog.locale!r}"
                raise ValueError(msg)
            mapping[catalog.locale] = catalog
        return self._swap(lambda _current: mapping)

    def replace_catalog(self, catalog: Catalog) -> CatalogSnapshot:
        """Replace (or add) one locale's catalog."""
        return self.replace_catalogs((catalog,))

    def replace_catalogs(self, catalogs: Iterable[Catalog]) -> CatalogSnapshot:
        """Replace (or add) several locales' catalogs in one snapshot.

        Locales not mentioned keep their current catalog. A later catalog for
        the same locale wins.
        """
        replacements = {c.locale: c for c in catalogs}

        def update(current: Mapping[str, Catalog]) -> dict[str, Catalog]:
            mapping = dict(current)
            mapping.update(replacements)
            return mapping

        return self._swap(update)

    def remove_locale(self, locale: LocaleCode) -> CatalogSnapshot:
        """Drop one locale's catalog (no-op publish if absent)."""
        canonical = normalize_locale(locale)
        return self._swap(lambda current: {k: v for k, v in current.items() if k != canonical})

    def _swap(
        self, build: Callable[[Mapping[str, Catalog]], Mapping[str, Catalog]]
    ) -> CatalogSnapshot:
        with self._write_lock:
            mapping = build(self._snapshot.catalogs)
            snapshot = CatalogSnapshot(
                catalogs=MappingProxyType(dict(mapping)),
                version=self._snapshot.version + 1,
            )
            self._snapshot = snapshot
        logger.info(
            "Published catalog snapshot v%d: %d locale(s), %d entries",
            snapshot.version,
            len(snapshot.catalogs),
            snapshot.entry_count,
        )
        return snapshot
