"""Locale fallback policy and chain resolution.

A policy maps locales to parent locales and may name a default. The chain
for a requested locale is built by repeatedly applying one step rule:

    1. explicit mapping for the current locale
    2. the current locale with its last subtag stripped (zh_Hant_TW -> zh_Hant)
    3. the policy default (offered once per walk)
    4. the source locale

The walk stops at the source locale, which is always the last element.

Every locale the policy names is walked once at construction, so cycles and
self references fail with InvalidFallbackPolicyError before any lookup is
served and resolve_chain() itself never raises.

Thread Safety:
    Policies are immutable. The chain memo is guarded by a Lock.

Python 3.13+.
"""

from __future__ import annotations

import logging
from collections import OrderedDict
from collections.abc import Mapping
from threading import Lock

from msgcatalog.constants import DEFAULT_SOURCE_LOCALE, MAX_CHAIN_CACHE_SIZE
from msgcatalog.diagnostics import ErrorTemplate, InvalidFallbackPolicyError
from msgcatalog.locale_utils import normalize_locale, parent_locale

from .types import LocaleCode

__all__ = ["FallbackPolicy"]

logger = logging.getLogger(__name__)

_DEFAULT_KEY = "default"


class FallbackPolicy:
    """Validated locale fallback policy.

    Args:
        mapping: Locale -> parent locale
        default: Locale tried after subtag stripping is exhausted
        source_locale: Terminal locale of every chain

    Raises:
        InvalidFallbackPolicyError: If the policy is cyclic, self-referential,
            maps the source locale, or contains malformed locale codes

    Example:
        >>> policy = FallbackPolicy({"pt_BR": "pt_PT"}, default="es", source_locale="en")
        >>> policy.resolve_chain("pt-BR")
        ('pt_BR', 'pt_PT', 'pt', 'es', 'en')
        >>> policy.resolve_chain("zh-Hant-TW")
        ('zh_Hant_TW', 'zh_Hant', 'zh', 'es', 'en')
    """

    __slots__ = ("_chains", "_default", "_lock", "_mapping", "_source_locale")

    def __init__(
        self,
        mapping: Mapping[LocaleCode, LocaleCode] | None = None,
        *,
        default: LocaleCode | None = None,
        source_locale: LocaleCode = DEFAULT_SOURCE_LOCALE,
    ) -> None:
        self._source_locale = self._canonical(source_locale, "source locale")
        self._default = self._canonical(default, "default") if default is not None else None
        self._mapping: dict[str, str] = {}
        for child, parent in (mapping or {}).items():
            key = self._canonical(child, "mapping key")
            if key in self._mapping:
                diagnostic = ErrorTemplate.policy_malformed(f"locale {key!r} is mapped twice")
                raise InvalidFallbackPolicyError(diagnostic)
            self._mapping[key] = self._canonical(parent, f"parent of {child!r}")

        self._chains: OrderedDict[str, tuple[str, ...]] = OrderedDict()
        self._lock = Lock()
        self._validate()

    @classmethod
    def from_dict(
        cls,
        data: Mapping[str, str],
        *,
        source_locale: LocaleCode = DEFAULT_SOURCE_LOCALE,
    ) -> FallbackPolicy:
        """Build a policy from configuration where the key 'default' names the default.

        Example:
            >>> FallbackPolicy.from_dict({"default": "en"}, source_locale="en").default
            'en'
        """
        mapping = {k: v for k, v in data.items() if k != _DEFAULT_KEY}
        return cls(mapping, default=data.get(_DEFAULT_KEY), source_locale=source_locale)

    @property
    def source_locale(self) -> str:
        return self._source_locale

    @property
    def default(self) -> str | None:
        return self._default

    @property
    def mapping(self) -> dict[str, str]:
        """Copy of the canonical locale -> parent mapping."""
        return dict(self._mapping)

    def to_dict(self) -> dict[str, str]:
        """Configuration mapping accepted by from_dict()."""
        data = dict(self._mapping)
        if self._default is not None:
            data[_DEFAULT_KEY] = self._default
        return data

    def resolve_chain(self, requested_locale: LocaleCode) -> tuple[str, ...]:
        """Ordered, duplicate-free locales to probe for requested_locale.

        The requested locale (canonicalized) comes first and the source locale
        last. A malformed requested locale yields just the source locale.
        """
        try:
            start = normalize_locale(requested_locale)
        except ValueError:
            logger.warning(
                "Malformed locale %r requested; using source locale %s",
                requested_locale,
                self._source_locale,
            )
            return (self._source_locale,)

        with self._lock:
            cached = self._chains.get(start)
            if cached is not None:
                self._chains.move_to_end(start)
                return cached

        chain = self._walk(start)

        with self._lock:
            self._chains[start] = chain
            if len(self._chains) > MAX_CHAIN_CACHE_SIZE:
                self._chains.popitem(last=False)
        logger.debug("Fallback chain for %s: %s", start, " -> ".join(chain))
        return chain

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _step(self, locale: str, *, default_used: bool) -> str:
        """Next locale after locale under the step rule."""
        mapped = self._mapping.get(locale)
        if mapped is not None:
            return mapped
        parent = parent_locale(locale)
        if parent is not None:
            return parent
        if self._default is not None and not default_used:
            return self._default
        return self._source_locale

    def _walk(self, start: str, *, strict: bool = False) -> tuple[str, ...]:
        """Apply the step rule from start until the source locale.

        The default is offered once: after the walk has visited it, the next
        step past a bare language goes to the source locale.

        Raises:
            InvalidFallbackPolicyError: If strict and the walk revisits a locale
        """
        chain = [start]
        seen = {start}
        current = start
        default_used = current == self._default
        while current != self._source_locale:
            current = self._step(current, default_used=default_used)
            if current in seen:
                if strict:
                    raise InvalidFallbackPolicyError(
                        ErrorTemplate.policy_cycle([*chain, current])
                    )
                # Revisit through the default (de_AT -> de -> de_CH -> de): finish at source
                break
            chain.append(current)
            seen.add(current)
            default_used = default_used or current == self._default
        if chain[-1] != self._source_locale:
            chain.append(self._source_locale)
        return tuple(chain)

    def _validate(self) -> None:
        """Walk every locale named by the policy and reject cycles."""
        if self._source_locale in self._mapping:
            raise InvalidFallbackPolicyError(
                ErrorTemplate.policy_source_remapped(self._source_locale)
            )

        for child, parent in self._mapping.items():
            if child == parent:
                raise InvalidFallbackPolicyError(ErrorTemplate.policy_self_reference(child))

        named = [*self._mapping, *self._mapping.values()]
        if self._default is not None:
            named.append(self._default)

        for start in named:
            self._walk(start, strict=True)

    @staticmethod
    def _canonical(locale: str | None, role: str) -> str:
        if not isinstance(locale, str) or not locale.strip():
            diagnostic = ErrorTemplate.policy_malformed(f"{role} is empty")
            raise InvalidFallbackPolicyError(diagnostic)
        try:
            return normalize_locale(locale)
        except ValueError:
            diagnostic = ErrorTemplate.policy_malformed(f"{role} {locale!r} is not a locale code")
            raise InvalidFallbackPolicyError(diagnostic) from None

    def __repr__(self) -> str:
        return (
            f"FallbackPolicy({self._mapping!r}, default={self._default!r}, "
            f"source_locale={self._source_locale!r})"
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FallbackPolicy):
            return NotImplemented
        return (self._mapping, self._default, self._source_locale) == (
            other._mapping,
            other._default,
            other._source_locale,
        )

    __hash__ = None  # type: ignore[assignment]
