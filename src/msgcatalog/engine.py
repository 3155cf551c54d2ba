"""Resolution engine: descriptor + locale + arguments -> localized string.

Orchestrates the fallback policy, the catalog store and the renderer:

    descriptor.id -> fallback chain -> probe the active snapshot in chain
    order (translated entries only) -> render the first usable entry;
    chain exhausted -> render descriptor.default_text in the source locale

Graceful absence:
    A missing translation is never an error. An entry that cannot be
    rendered (no matching branch and no 'other', nesting too deep, or an
    argument the source text never declares) is skipped with a warning and
    probing continues. A missing argument the source text does declare is
    the caller's bug and propagates as MissingArgumentError.

Thread Safety:
    translate() and format() take one snapshot reference up front and never
    lock. Catalog writes build a new snapshot and swap it in (CatalogStore).
    The optional FormatCache guards itself with an RLock.

Python 3.13+.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping

from msgcatalog.catalog.descriptor import MessageDescriptor
from msgcatalog.catalog.entry import Catalog, CatalogEntry
from msgcatalog.catalog.fallback import FallbackPolicy
from msgcatalog.catalog.loading import (
    CatalogLoader,
    CatalogLoadResult,
    FallbackInfo,
    LoadSummary,
)
from msgcatalog.catalog.store import CatalogSnapshot, CatalogStore
from msgcatalog.catalog.types import ArgumentMap, LocaleCode, MessageId
from msgcatalog.constants import MAX_DEPTH
from msgcatalog.core.depth_guard import DepthLimitExceededError
from msgcatalog.diagnostics import (
    CatalogError,
    CatalogLoadError,
    ErrorTemplate,
    MissingArgumentError,
    MissingDefaultBranchError,
)
from msgcatalog.enums import LoadStatus
from msgcatalog.locale_utils import normalize_locale
from msgcatalog.runtime.cache import FormatCache
from msgcatalog.runtime.cache_config import CacheConfig
from msgcatalog.runtime.formatting import Formatter
from msgcatalog.runtime.renderer import TemplateRenderer

__all__ = ["ResolutionEngine"]

logger = logging.getLogger(__name__)


class ResolutionEngine:
    """Resolves message descriptors to localized strings.

    Example:
        >>> from msgcatalog import Catalog, CatalogEntry, FallbackPolicy, MessageDescriptor
        >>> engine = ResolutionEngine(policy=FallbackPolicy(default="en"))
        >>> back = MessageDescriptor.create("Back", id="msg.back")
        >>> engine.translate(back, "fr")
        'Back'
        >>> _ = engine.add_catalog(Catalog("fr", [CatalogEntry.create("msg.back", "Retour")]))
        >>> engine.translate(back, "fr-CA")
        'Retour'

    Args:
        source_locale: Locale of descriptor default texts. Taken from policy
            when omitted; defaults to "en" when neither is given.
        policy: Fallback policy (default: strip subtags, then source locale)
        catalogs: Catalogs published as the initial snapshot
        loader: Catalog loader used by load_locale()/load_locales()
        formatter: Formatting collaborator (default: BabelFormatter)
        cache: Cache configuration. ``None`` disables caching (default).
        on_fallback: Called with FallbackInfo whenever a message is served
            by a locale other than the requested one
        use_isolating: Wrap interpolated values in FSI/PDI marks
        max_depth: Maximum nesting of plural/select branches at render time

    Raises:
        ValueError: If source_locale disagrees with policy.source_locale
        InvalidFallbackPolicyError: If source_locale is malformed
    """

    __slots__ = (
        "_cache",
        "_cache_config",
        "_loader",
        "_on_fallback",
        "_policy",
        "_renderer",
        "_store",
    )

    def __init__(
        self,
        *,
        source_locale: LocaleCode | None = None,
        policy: FallbackPolicy | None = None,
        catalogs: Iterable[Catalog] = (),
        loader: CatalogLoader | None = None,
        formatter: Formatter | None = None,
        cache: CacheConfig | None = None,
        on_fallback: Callable[[FallbackInfo], None] | None = None,
        use_isolating: bool = False,
        max_depth: int = MAX_DEPTH,
    ) -> None:
        if policy is None:
            policy = (
                FallbackPolicy(source_locale=source_locale)
                if source_locale is not None
                else FallbackPolicy()
            )
        elif source_locale is not None and normalize_locale(source_locale) != policy.source_locale:
            msg = (
                f"source_locale {source_locale!r} disagrees with the policy's "
                f"source locale {policy.source_locale!r}"
            )
            raise ValueError(msg)

        self._policy = policy
        self._loader = loader
        self._on_fallback = on_fallback
        self._renderer = TemplateRenderer(
            formatter, use_isolating=use_isolating, max_depth=max_depth
        )
        self._cache_config = cache
        self._cache: FormatCache | None = (
            FormatCache(maxsize=cache.size, max_entry_length=cache.max_entry_length)
            if cache is not None
            else None
        )
        self._store = CatalogStore(catalogs)

        logger.info(
            "ResolutionEngine ready: source=%s, locales=%s, cache=%s",
            policy.source_locale,
            ", ".join(self._store.locales) or "-",
            "on" if self._cache is not None else "off",
        )

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def source_locale(self) -> LocaleCode:
        return self._policy.source_locale

    @property
    def policy(self) -> FallbackPolicy:
        return self._policy

    @property
    def snapshot(self) -> CatalogSnapshot:
        """Active catalog snapshot."""
        return self._store.snapshot

    @property
    def version(self) -> int:
        return self._store.version

    @property
    def locales(self) -> tuple[LocaleCode, ...]:
        """Locales with a catalog in the active snapshot."""
        return self._store.locales

    @property
    def cache_enabled(self) -> bool:
        """Whether rendered results are cached.

        Example:
            >>> ResolutionEngine(cache=CacheConfig()).cache_enabled
            True
            >>> ResolutionEngine().cache_enabled
            False
        """
        return self._cache is not None

    @property
    def cache_config(self) -> CacheConfig | None:
        return self._cache_config

    def __repr__(self) -> str:
        return (
            f"ResolutionEngine(source_locale={self.source_locale!r}, "
            f"locales={self.locales!r}, version={self.version})"
        )

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    def translate(
        self,
        descriptor: MessageDescriptor,
        locale: LocaleCode,
        arguments: ArgumentMap | None = None,
    ) -> str:
        """Resolve descriptor for locale and render it with arguments.

        Never returns an empty string for a non-empty default text: when no
        catalog in the fallback chain can serve the message, the default
        text is rendered.

        A translation that renders to empty text is treated as unusable and
        skipped like any other broken entry, so a non-empty default text is
        never replaced by an empty string. Formatting failures are recovered
        (the raw value is rendered) and logged; format() reports them.

        Raises:
            MissingArgumentError: If an argument declared by the descriptor's
                source text is absent
            TypeError: If arguments is not a mapping

        Example:
            >>> engine = ResolutionEngine()
            >>> hello = MessageDescriptor.create("Hello, {name}!")
            >>> engine.translate(hello, "de", {"name": "Ana"})
            'Hello, Ana!'
        """
        self._check_arguments(arguments)
        text, _errors = self._resolve(descriptor, locale, arguments, recover=False)
        return text

    def format(
        self,
        descriptor: MessageDescriptor,
        locale: LocaleCode,
        arguments: ArgumentMap | None = None,
    ) -> tuple[str, tuple[CatalogError, ...]]:
        """Non-raising variant of translate().

        Missing arguments render as '{name}' and are reported alongside the
        text, as are formatting failures.

        Returns:
            Tuple of (text, errors)

        Example:
            >>> engine = ResolutionEngine()
            >>> hello = MessageDescriptor.create("Hello, {name}!")
            >>> text, errors = engine.format(hello, "en")
            >>> text, len(errors)
            ('Hello, {name}!', 1)
        """
        try:
            self._check_arguments(arguments)
        except TypeError:
            diagnostic = ErrorTemplate.arguments_invalid(type(arguments).__name__)
            return descriptor.default_text, (CatalogError(diagnostic),)
        return self._resolve(descriptor, locale, arguments, recover=True)

    def has_translation(
        self,
        message: MessageDescriptor | MessageId,
        locale: LocaleCode,
        *,
        fallback: bool = True,
    ) -> bool:
        """Whether a translated entry exists for message.

        Args:
            message: Descriptor or message id
            locale: Requested locale
            fallback: Also consider the rest of the fallback chain
        """
        message_id = message.id if isinstance(message, MessageDescriptor) else message
        snapshot = self._store.snapshot
        chain = self._policy.resolve_chain(locale)
        candidates = chain if fallback else chain[:1]
        for candidate in candidates:
            entry = snapshot.lookup(candidate, message_id)
            if entry is not None and entry.translated:
                return True
        return False

    def resolve_chain(self, locale: LocaleCode) -> tuple[LocaleCode, ...]:
        """Fallback chain probed for locale (requested first, source last)."""
        return self._policy.resolve_chain(locale)

    def _resolve(
        self,
        descriptor: MessageDescriptor,
        locale: LocaleCode,
        arguments: ArgumentMap | None,
        *,
        recover: bool,
    ) -> tuple[str, tuple[CatalogError, ...]]:
        snapshot = self._store.snapshot
        requested = self._canonical_or_none(locale)
        cache_locale = requested if requested is not None else locale

        if self._cache is not None:
            cached = self._cache.get(descriptor.id, snapshot.version, cache_locale, arguments)
            if cached is not None:
                text, resolved = cached
                self._notify_fallback(locale, requested, resolved, descriptor.id)
                return text, ()

        text: str | None = None
        resolved: LocaleCode | None = None
        errors: tuple[CatalogError, ...] = ()
        for candidate in self._policy.resolve_chain(locale):
            entry = snapshot.lookup(candidate, descriptor.id)
            if entry is None or not entry.translated:
                continue
            rendered = self._render_candidate(descriptor, entry, candidate, arguments, recover)
            if rendered is None:
                continue
            text, errors = rendered
            resolved = candidate
            break

        if text is None:
            text, errors = self._render_default(descriptor, arguments, recover)
            if requested == self.source_locale:
                resolved = requested

        self._notify_fallback(locale, requested, resolved, descriptor.id)

        # Results with recovered errors are never cached.
        if self._cache is not None and not errors:
            self._cache.put(
                descriptor.id, snapshot.version, cache_locale, arguments, text, resolved
            )
        return text, errors

    def _render_candidate(
        self,
        descriptor: MessageDescriptor,
        entry: CatalogEntry,
        locale: LocaleCode,
        arguments: ArgumentMap | None,
        recover: bool,
    ) -> tuple[str, tuple[CatalogError, ...]] | None:
        """Render entry, or None when the entry must be skipped."""
        errors: tuple[CatalogError, ...] = ()
        if recover:
            text, errors = self._renderer.format_entry(entry, arguments, locale)
            for error in errors:
                if self._disqualifies(descriptor, error):
                    self._log_skip(descriptor, locale, error)
                    return None
        else:
            try:
                text, errors = self._renderer.render_entry_with_errors(entry, arguments, locale)
            except MissingArgumentError as e:
                if descriptor.declares(e.name):
                    raise
                self._log_skip(descriptor, locale, e)
                return None
            except (MissingDefaultBranchError, DepthLimitExceededError) as e:
                self._log_skip(descriptor, locale, e)
                return None

        if not text and descriptor.default_text:
            logger.warning(
                "Skipping %s/%s: translation rendered empty text", locale, descriptor.id
            )
            return None
        return text, errors

    @staticmethod
    def _disqualifies(descriptor: MessageDescriptor, error: CatalogError) -> bool:
        match error:
            case MissingDefaultBranchError() | DepthLimitExceededError():
                return True
            case MissingArgumentError(name=name):
                return not descriptor.declares(name)
            case _:
                return False

    def _render_default(
        self,
        descriptor: MessageDescriptor,
        arguments: ArgumentMap | None,
        recover: bool,
    ) -> tuple[str, tuple[CatalogError, ...]]:
        if recover:
            return self._renderer.format(descriptor.template, arguments, self.source_locale)
        return self._renderer.render_with_errors(
            descriptor.template, arguments, self.source_locale
        )

    def _notify_fallback(
        self,
        locale: LocaleCode,
        requested: LocaleCode | None,
        resolved: LocaleCode | None,
        message_id: MessageId,
    ) -> None:
        if self._on_fallback is None or (resolved is not None and resolved == requested):
            return
        self._on_fallback(
            FallbackInfo(requested_locale=locale, resolved_locale=resolved, message_id=message_id)
        )

    @staticmethod
    def _log_skip(descriptor: MessageDescriptor, locale: LocaleCode, error: CatalogError) -> None:
        logger.warning("Skipping %s/%s: %s", locale, descriptor.id, error)

    @staticmethod
    def _check_arguments(arguments: ArgumentMap | None) -> None:
        if arguments is not None and not isinstance(arguments, Mapping):
            diagnostic = ErrorTemplate.arguments_invalid(type(arguments).__name__)
            raise TypeError(diagnostic.message)

    @staticmethod
    def _canonical_or_none(locale: LocaleCode) -> LocaleCode | None:
        try:
            return normalize_locale(locale)
        except ValueError:
            return None

    # ------------------------------------------------------------------
    # Catalog management
    # ------------------------------------------------------------------

    def add_catalog(self, catalog: Catalog) -> int:
        """Publish catalog, replacing that locale's current catalog.

        Returns:
            Version of the new snapshot
        """
        return self._store.replace_catalog(catalog).version

    def publish(self, catalogs: Iterable[Catalog] | Mapping[LocaleCode, Catalog]) -> int:
        """Replace the whole catalog set.

        Returns:
            Version of the new snapshot
        """
        return self._store.publish(catalogs).version

    def remove_locale(self, locale: LocaleCode) -> int:
        """Drop locale's catalog. Returns the new snapshot version."""
        return self._store.remove_locale(locale).version

    def load_locale(self, locale: LocaleCode) -> CatalogLoadResult:
        """Load locale's catalog through the loader and publish it.

        Failures never raise: the previous snapshot stays active and the
        failure is reported in the result.

        Raises:
            ValueError: If the engine was built without a loader
        """
        loader = self._require_loader()
        result, catalog = self._fetch(loader, locale)
        if catalog is None:
            return result
        snapshot = self._store.replace_catalog(catalog)
        return CatalogLoadResult(
            locale=result.locale,
            status=result.status,
            source_path=result.source_path,
            entry_count=result.entry_count,
            version=snapshot.version,
        )

    def load_locales(self, locales: Iterable[LocaleCode]) -> LoadSummary:
        """Load several catalogs and publish the successful ones in one snapshot.

        Example:
            >>> summary = engine.load_locales(["fr", "de"])
            >>> summary.successful, summary.not_found
            (1, 1)

        Raises:
            ValueError: If the engine was built without a loader
        """
        loader = self._require_loader()
        fetched = [self._fetch(loader, locale) for locale in dict.fromkeys(locales)]
        loaded = [catalog for _, catalog in fetched if catalog is not None]
        if not loaded:
            return LoadSummary(results=tuple(result for result, _ in fetched))

        version = self._store.replace_catalogs(loaded).version
        results = tuple(
            CatalogLoadResult(
                locale=result.locale,
                status=result.status,
                source_path=result.source_path,
                entry_count=result.entry_count,
                version=version,
            )
            if catalog is not None
            else result
            for result, catalog in fetched
        )
        return LoadSummary(results=results)

    def _require_loader(self) -> CatalogLoader:
        if self._loader is None:
            msg = "Catalog loading requires a loader: ResolutionEngine(loader=...)"
            raise ValueError(msg)
        return self._loader

    @staticmethod
    def _fetch(
        loader: CatalogLoader, locale: LocaleCode
    ) -> tuple[CatalogLoadResult, Catalog | None]:
        """Load one catalog and classify the outcome."""
        source_path = loader.describe_path(locale)
        try:
            catalog = loader.load(locale)
            if catalog.locale != normalize_locale(locale):
                raise CatalogLoadError(
                    ErrorTemplate.load_locale_mismatch(locale, catalog.locale), locale=locale
                )
        except FileNotFoundError:
            # Expected for optional locales
            logger.info("No catalog for %s at %s", locale, source_path)
            return (
                CatalogLoadResult(
                    locale=locale, status=LoadStatus.NOT_FOUND, source_path=source_path
                ),
                None,
            )
        except (CatalogError, OSError, ValueError) as e:
            logger.warning("Failed to load catalog for %s from %s: %s", locale, source_path, e)
            return (
                CatalogLoadResult(
                    locale=locale, status=LoadStatus.ERROR, error=e, source_path=source_path
                ),
                None,
            )

        logger.info("Loaded catalog %s from %s: %d entries", locale, source_path, len(catalog))
        return (
            CatalogLoadResult(
                locale=locale,
                status=LoadStatus.SUCCESS,
                source_path=source_path,
                entry_count=len(catalog),
            ),
            catalog,
        )

    # ------------------------------------------------------------------
    # Cache
    # ------------------------------------------------------------------

    def clear_cache(self) -> None:
        """Drop every cached result (no-op when caching is disabled)."""
        if self._cache is not None:
            self._cache.clear()
            logger.debug("Format cache cleared")

    def cache_stats(self) -> dict[str, int | float] | None:
        """Cache metrics (see FormatCache.get_stats), or None when disabled."""
        if self._cache is None:
            return None
        return self._cache.get_stats()
