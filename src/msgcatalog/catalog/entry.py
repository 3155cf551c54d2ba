"""Catalog entries and per-locale catalogs.

Persisted shape of one entry:

    {
        "template": "You have {count} messages",
        "pluralBranches": {"exact:0": "No messages", "one": "# message", "other": "# messages"},
        "translated": true,
        "selector": "count",
        "selectorKind": "plural"
    }

Branch keys are accepted as ``exact:N``, ``=N`` or ``_N`` and written back
as ``exact:N``. Templates are parsed when an entry is built, so a catalog
that loads is a catalog that renders.

Python 3.13+.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from types import MappingProxyType

from msgcatalog.constants import DEFAULT_SELECTOR, OTHER_BRANCH
from msgcatalog.core.identifier_validation import is_valid_identifier
from msgcatalog.diagnostics import (
    ErrorTemplate,
    InvalidPlaceholderError,
    MissingDefaultBranchError,
)
from msgcatalog.enums import SelectorKind
from msgcatalog.locale_utils import normalize_locale
from msgcatalog.syntax import (
    Branch,
    NamedKey,
    Template,
    extract_placeholders,
    find_missing_default,
    parse_branch_key,
    parse_template,
    serialize_template,
)

from .types import LocaleCode, MessageId, TemplateSource

__all__ = ["Catalog", "CatalogEntry"]

logger = logging.getLogger(__name__)

_OTHER = NamedKey(OTHER_BRANCH)


@dataclass(frozen=True, slots=True)
class CatalogEntry:
    """One locale's translation of one message.

    Use CatalogEntry.create() or CatalogEntry.from_dict() to build entries
    from template text; direct construction expects parsed templates.

    Attributes:
        id: Message id (foreign key to MessageDescriptor.id)
        template: Parsed main template
        plural_branches: Entry-level branch table (empty for plain entries)
        translated: False when the entry only carries the source text
        selector: Argument name that drives plural_branches
        selector_kind: Whether plural_branches are plural or select branches
    """

    id: MessageId
    template: Template
    plural_branches: tuple[Branch, ...] = ()
    translated: bool = True
    selector: str = DEFAULT_SELECTOR
    selector_kind: SelectorKind = SelectorKind.PLURAL

    def __post_init__(self) -> None:
        """Validate the branch table and nested selectors.

        Raises:
            InvalidPlaceholderError: If selector is not a valid name or keys repeat
            MissingDefaultBranchError: If branches exist without 'other', or a
                nested plural/select lacks 'other'
        """
        if self.plural_branches:
            if not is_valid_identifier(self.selector):
                raise InvalidPlaceholderError(
                    ErrorTemplate.placeholder_invalid(self.selector, 0),
                    placeholder=self.selector,
                )
            keys = [b.key for b in self.plural_branches]
            for i, key in enumerate(keys):
                if key in keys[:i]:
                    raise InvalidPlaceholderError(
                        ErrorTemplate.branch_duplicate(str(key), self.selector),
                        placeholder=self.selector,
                    )
            if _OTHER not in keys:
                raise MissingDefaultBranchError(
                    ErrorTemplate.missing_default_branch(self.selector, message_id=self.id),
                    selector=self.selector,
                )

        for template in (self.template, *(b.value for b in self.plural_branches)):
            missing = find_missing_default(template)
            if missing is not None:
                raise MissingDefaultBranchError(
                    ErrorTemplate.missing_default_branch(missing, message_id=self.id),
                    selector=missing,
                )

    @classmethod
    def create(
        cls,
        id: MessageId,  # noqa: A002 - mirrors the persisted field name
        template: TemplateSource,
        *,
        plural_branches: Mapping[str, TemplateSource] | None = None,
        translated: bool = True,
        selector: str = DEFAULT_SELECTOR,
        selector_kind: SelectorKind = SelectorKind.PLURAL,
    ) -> CatalogEntry:
        """Build an entry from template text.

        Args:
            id: Message id
            template: Main template text
            plural_branches: Raw branch key -> template text
            translated: Whether the entry is a real translation
            selector: Argument driving plural_branches
            selector_kind: Plural or select branch semantics

        Raises:
            InvalidPlaceholderError: On template syntax errors or invalid keys
            MissingDefaultBranchError: If branches exist without 'other'

        Example:
            >>> entry = CatalogEntry.create(
            ...     "inbox", "",
            ...     plural_branches={"_0": "No messages", "one": "# message", "other": "# messages"},
            ... )
            >>> [str(b.key) for b in entry.plural_branches]
            ['exact:0', 'one', 'other']
        """
        branches: list[Branch] = []
        for raw_key, source in (plural_branches or {}).items():
            key = parse_branch_key(raw_key, selector_kind)
            if key is None:
                raise InvalidPlaceholderError(
                    ErrorTemplate.branch_key_invalid(raw_key, selector),
                    placeholder=raw_key,
                )
            branches.append(Branch(key, _parse_branch_source(source, selector_kind)))

        return cls(
            id=id,
            template=parse_template(template),
            plural_branches=tuple(branches),
            translated=translated,
            selector=selector,
            selector_kind=selector_kind,
        )

    @classmethod
    def from_dict(cls, id: MessageId, data: Mapping[str, object]) -> CatalogEntry:  # noqa: A002
        """Build an entry from its persisted mapping.

        'template' may be omitted when 'pluralBranches' is present; the
        'other' branch text is used as the main template then.

        Raises:
            ValueError: If the mapping has the wrong shape
            InvalidPlaceholderError: On template syntax errors or invalid keys
            MissingDefaultBranchError: If branches exist without 'other'
        """
        raw_branches = data.get("pluralBranches")
        if raw_branches is not None and not _is_str_mapping(raw_branches):
            msg = f"Entry {id!r}: 'pluralBranches' must map strings to strings"
            raise ValueError(msg)
        branches: Mapping[str, str] = raw_branches or {}  # type: ignore[assignment]

        template = data.get("template")
        if template is None:
            template = branches.get(OTHER_BRANCH, "")
        if not isinstance(template, str):
            msg = f"Entry {id!r}: 'template' must be a string"
            raise ValueError(msg)

        translated = data.get("translated", True)
        if not isinstance(translated, bool):
            msg = f"Entry {id!r}: 'translated' must be a boolean"
            raise ValueError(msg)

        selector = data.get("selector", DEFAULT_SELECTOR)
        if not isinstance(selector, str):
            msg = f"Entry {id!r}: 'selector' must be a string"
            raise ValueError(msg)

        raw_kind = data.get("selectorKind", SelectorKind.PLURAL.value)
        try:
            selector_kind = SelectorKind(raw_kind)
        except ValueError:
            msg = f"Entry {id!r}: unknown selectorKind {raw_kind!r}"
            raise ValueError(msg) from None

        return cls.create(
            id,
            template,
            plural_branches=branches,
            translated=translated,
            selector=selector,
            selector_kind=selector_kind,
        )

    def to_dict(self) -> dict[str, object]:
        """Persisted mapping for this entry (canonical template text)."""
        data: dict[str, object] = {"template": serialize_template(self.template)}
        if self.plural_branches:
            data["pluralBranches"] = {
                str(b.key): _serialize_branch_source(b.value, self.selector_kind)
                for b in self.plural_branches
            }
            data["selector"] = self.selector
            data["selectorKind"] = self.selector_kind.value
        data["translated"] = self.translated
        return data

    def branch_map(self) -> dict[str, Template]:
        """Entry-level branches keyed by canonical key text."""
        return {str(b.key): b.value for b in self.plural_branches}

    def placeholders(self) -> tuple[str, ...]:
        """Ordered unique argument names this entry can reference."""
        names: dict[str, None] = dict.fromkeys(extract_placeholders(self.template))
        if self.plural_branches:
            names.setdefault(self.selector, None)
            for branch in self.plural_branches:
                names.update(dict.fromkeys(extract_placeholders(branch.value)))
        return tuple(names)


def _is_str_mapping(value: object) -> bool:
    return isinstance(value, Mapping) and all(
        isinstance(k, str) and isinstance(v, str) for k, v in value.items()
    )


def _parse_branch_source(source: TemplateSource, kind: SelectorKind) -> Template:
    """Parse an entry-level branch; '#' is live inside plural branches."""
    return parse_template(source, in_plural=kind is SelectorKind.PLURAL)


def _serialize_branch_source(template: Template, kind: SelectorKind) -> str:
    return serialize_template(template, in_plural=kind is SelectorKind.PLURAL)


@dataclass(frozen=True, slots=True, init=False)
class Catalog:
    """Immutable per-locale collection of entries keyed by message id.

    Lookup is by id; iteration preserves insertion order for export.

    Attributes:
        locale: Canonical locale code
        entries: Read-only id -> entry mapping

    Example:
        >>> catalog = Catalog("fr", [CatalogEntry.create("msg.back", "Retour")])
        >>> catalog.get("msg.back").template.elements[0].value
        'Retour'
        >>> "msg.next" in catalog
        False
    """

    locale: LocaleCode
    entries: Mapping[MessageId, CatalogEntry]

    def __init__(
        self,
        locale: LocaleCode,
        entries: Iterable[CatalogEntry] | Mapping[MessageId, CatalogEntry] = (),
    ) -> None:
        """Create a catalog.

        Raises:
            ValueError: If locale is malformed, ids repeat, or a mapping key
                disagrees with its entry's id
        """
        mapping: dict[MessageId, CatalogEntry] = {}
        if isinstance(entries, Mapping):
            for key, entry in entries.items():
                if key != entry.id:
                    msg = f"Catalog key {key!r} does not match entry id {entry.id!r}"
                    raise ValueError(msg)
                mapping[key] = entry
        else:
            for entry in entries:
                if entry.id in mapping:
                    msg = f"Duplicate message id in catalog: {entry.id!r}"
                    raise ValueError(msg)
                mapping[entry.id] = entry
        object.__setattr__(self, "locale", normalize_locale(locale))
        object.__setattr__(self, "entries", MappingProxyType(mapping))

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[CatalogEntry]:
        return iter(self.entries.values())

    def __contains__(self, message_id: object) -> bool:
        return message_id in self.entries

    def get(self, message_id: MessageId) -> CatalogEntry | None:
        """Entry for message_id, or None."""
        return self.entries.get(message_id)

    def ids(self) -> tuple[MessageId, ...]:
        return tuple(self.entries)

    @property
    def translated_count(self) -> int:
        return sum(1 for e in self.entries.values() if e.translated)

    def with_entry(self, entry: CatalogEntry) -> Catalog:
        """Copy with entry added or replaced (position kept on replace)."""
        mapping = dict(self.entries)
        mapping[entry.id] = entry
        return Catalog(self.locale, mapping)

    def without(self, message_id: MessageId) -> Catalog:
        """Copy without message_id."""
        return Catalog(self.locale, [e for e in self.entries.values() if e.id != message_id])

    def to_dict(self) -> dict[MessageId, dict[str, object]]:
        """Persisted mapping {id: entry_dict}, in insertion order."""
        return {message_id: entry.to_dict() for message_id, entry in self.entries.items()}

    @classmethod
    def from_dict(cls, locale: LocaleCode, data: Mapping[str, object]) -> Catalog:
        """Build a catalog from its persisted mapping.

        Each value may be an entry mapping or a bare template string
        (a translated entry without branches).

        Raises:
            ValueError: If the mapping has the wrong shape
            InvalidPlaceholderError: On template syntax errors
            MissingDefaultBranchError: If an entry lacks a required 'other' branch
        """
        entries: list[CatalogEntry] = []
        for message_id, raw in data.items():
            match raw:
                case str():
                    entries.append(CatalogEntry.create(message_id, raw))
                case Mapping():
                    entries.append(CatalogEntry.from_dict(message_id, raw))
                case _:
                    msg = f"Entry {message_id!r}: expected a mapping or string, got {type(raw).__name__}"
                    raise ValueError(msg)
        logger.debug("Built catalog %s with %d entries", locale, len(entries))
        return cls(locale, entries)
