"""Catalog compilation, validation and reconciliation.

compile_catalog() turns source descriptors plus translator-supplied raw
translations into an immutable Catalog. It is pure and deterministic: the
catalog follows descriptor order, and warnings follow descriptor order with
orphaned translations last.

Errors (template syntax, missing 'other' branches) raise. Warnings are
returned, logged, and escalated to CatalogCompileError in strict mode:

    orphaned-translation  translation for an id no descriptor defines
    unknown-placeholder   translation references an argument the source
                          text does not declare

validate_catalog() runs the same checks and reports everything as a
ValidationResult instead of raising.

reconcile() merges a freshly extracted descriptor set into an existing
catalog: new ids are added untranslated, orphaned ids are flagged.

Python 3.13+.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass

from msgcatalog.diagnostics import (
    CatalogCompileError,
    CatalogError,
    ErrorTemplate,
    InvalidPlaceholderError,
    MissingDefaultBranchError,
    ValidationError,
    ValidationResult,
    ValidationWarning,
)

from .descriptor import MessageDescriptor
from .entry import Catalog, CatalogEntry
from .types import LocaleCode, MessageId, RawTranslation

__all__ = [
    "CompileResult",
    "ReconcileResult",
    "compile_catalog",
    "reconcile",
    "validate_catalog",
]

logger = logging.getLogger(__name__)

WARNING_ORPHANED = "orphaned-translation"
WARNING_UNKNOWN_PLACEHOLDER = "unknown-placeholder"
WARNING_UNTRANSLATED = "untranslated"
ERROR_INVALID_PLACEHOLDER = "invalid-placeholder"
ERROR_MISSING_DEFAULT_BRANCH = "missing-default-branch"
ERROR_MALFORMED_ENTRY = "malformed-entry"


@dataclass(frozen=True, slots=True)
class CompileResult:
    """Outcome of compile_catalog().

    Attributes:
        catalog: Compiled catalog, one entry per descriptor
        warnings: Non-fatal findings
        untranslated: Ids compiled from the source text
    """

    catalog: Catalog
    warnings: tuple[ValidationWarning, ...]
    untranslated: tuple[MessageId, ...] = ()

    @property
    def has_warnings(self) -> bool:
        return bool(self.warnings)


@dataclass(frozen=True, slots=True)
class ReconcileResult:
    """Outcome of reconcile().

    Attributes:
        catalog: Merged catalog
        added: Ids added as untranslated entries
        orphaned: Ids in the catalog with no descriptor (dropped if requested)
        unchanged: Ids already present and left untouched
    """

    catalog: Catalog
    added: tuple[MessageId, ...]
    orphaned: tuple[MessageId, ...]
    unchanged: tuple[MessageId, ...]


def _unique_descriptors(descriptors: Iterable[MessageDescriptor]) -> list[MessageDescriptor]:
    """Descriptors in first-seen order; the same message extracted twice is kept once.

    Raises:
        ValueError: If two descriptors share an id but not the source text
    """
    seen: dict[MessageId, MessageDescriptor] = {}
    for descriptor in descriptors:
        previous = seen.get(descriptor.id)
        if previous is None:
            seen[descriptor.id] = descriptor
        elif previous.default_text != descriptor.default_text:
            msg = (
                f"Message id {descriptor.id!r} is used for different source texts: "
                f"{previous.default_text!r} and {descriptor.default_text!r}"
            )
            raise ValueError(msg)
    return list(seen.values())


def _build_entry(descriptor: MessageDescriptor, raw: RawTranslation | None) -> CatalogEntry:
    """Entry for descriptor from its raw translation (source text when absent)."""
    match raw:
        case None:
            return CatalogEntry.create(descriptor.id, descriptor.default_text, translated=False)
        case str():
            return CatalogEntry.create(descriptor.id, raw)
        case Mapping():
            return CatalogEntry.from_dict(descriptor.id, raw)
        case _:
            msg = (
                f"Translation for {descriptor.id!r} must be a string or mapping, "
                f"got {type(raw).__name__}"
            )
            raise ValueError(msg)


def _unknown_placeholders(
    descriptor: MessageDescriptor, entry: CatalogEntry
) -> list[ValidationWarning]:
    return [
        ValidationWarning(
            code=WARNING_UNKNOWN_PLACEHOLDER,
            message=f"Translation references '{{{name}}}', which the source text does not declare",
            message_id=descriptor.id,
            context=name,
        )
        for name in entry.placeholders()
        if not descriptor.declares(name)
    ]


def _orphans(
    declared: Mapping[MessageId, MessageDescriptor], raw_translations: Mapping[MessageId, object]
) -> list[ValidationWarning]:
    return [
        ValidationWarning(
            code=WARNING_ORPHANED,
            message="Translation has no source message and was not compiled",
            message_id=message_id,
        )
        for message_id in raw_translations
        if message_id not in declared
    ]


def compile_catalog(
    locale: LocaleCode,
    descriptors: Iterable[MessageDescriptor],
    raw_translations: Mapping[MessageId, RawTranslation],
    *,
    strict: bool = False,
) -> CompileResult:
    """Compile one locale's catalog.

    Args:
        locale: Target locale
        descriptors: Source messages; catalog order follows this order
        raw_translations: id -> template text or persisted entry mapping.
            Descriptors without a translation compile to untranslated
            entries carrying the source text.
        strict: Raise CatalogCompileError if any warning is produced

    Returns:
        CompileResult with the catalog, warnings and untranslated ids

    Raises:
        InvalidPlaceholderError: If a translation has a template syntax error
        MissingDefaultBranchError: If a translation lacks an 'other' branch
        ValueError: If a translation mapping has the wrong shape, or two
            descriptors share an id with different source texts
        CatalogCompileError: If strict and warnings were produced

    Example:
        >>> back = MessageDescriptor.create("Back", id="msg.back")
        >>> result = compile_catalog("fr", [back], {"msg.back": "Retour"})
        >>> result.catalog.get("msg.back").translated
        True
    """
    unique = _unique_descriptors(descriptors)
    declared = {d.id: d for d in unique}

    entries: list[CatalogEntry] = []
    warnings: list[ValidationWarning] = []
    untranslated: list[MessageId] = []
    for descriptor in unique:
        entry = _build_entry(descriptor, raw_translations.get(descriptor.id))
        entries.append(entry)
        if entry.translated:
            warnings.extend(_unknown_placeholders(descriptor, entry))
        else:
            untranslated.append(entry.id)
        logger.debug(
            "Compiled %s/%s (translated=%s)", locale, descriptor.id, entry.translated
        )
    warnings.extend(_orphans(declared, raw_translations))

    catalog = Catalog(locale, entries)
    for warning in warnings:
        logger.warning(
            "Compile warning [%s] %s/%s: %s",
            warning.code,
            catalog.locale,
            warning.message_id,
            warning.message,
        )

    if strict and warnings:
        raise CatalogCompileError(
            ErrorTemplate.compile_strict_failed(catalog.locale, len(warnings)),
            warnings=tuple(warnings),
        )

    logger.info(
        "Compiled catalog %s: %d entries, %d untranslated, %d warning(s)",
        catalog.locale,
        len(catalog),
        len(untranslated),
        len(warnings),
    )
    return CompileResult(
        catalog=catalog, warnings=tuple(warnings), untranslated=tuple(untranslated)
    )


def validate_catalog(
    descriptors: Iterable[MessageDescriptor],
    raw_translations: Mapping[MessageId, RawTranslation],
) -> ValidationResult:
    """Check raw translations against descriptors without raising.

    Every broken translation is reported (compile_catalog stops at the
    first). Missing translations are reported as 'untranslated' warnings.

    Example:
        >>> back = MessageDescriptor.create("Back", id="msg.back")
        >>> validate_catalog([back], {"msg.back": "Retour {"}).errors[0].code
        'invalid-placeholder'
    """
    unique = _unique_descriptors(descriptors)
    declared = {d.id: d for d in unique}

    errors: list[ValidationError] = []
    warnings: list[ValidationWarning] = []
    for descriptor in unique:
        raw = raw_translations.get(descriptor.id)
        if raw is None:
            warnings.append(
                ValidationWarning(
                    code=WARNING_UNTRANSLATED,
                    message="No translation supplied; source text will be used",
                    message_id=descriptor.id,
                )
            )
            continue
        try:
            entry = _build_entry(descriptor, raw)
        except InvalidPlaceholderError as e:
            errors.append(_error(ERROR_INVALID_PLACEHOLDER, e, descriptor.id, raw))
        except MissingDefaultBranchError as e:
            errors.append(_error(ERROR_MISSING_DEFAULT_BRANCH, e, descriptor.id, raw))
        except ValueError as e:
            errors.append(_error(ERROR_MALFORMED_ENTRY, e, descriptor.id, raw))
        else:
            warnings.extend(_unknown_placeholders(descriptor, entry))
    warnings.extend(_orphans(declared, raw_translations))

    return ValidationResult(errors=tuple(errors), warnings=tuple(warnings))


def _error(
    code: str, error: CatalogError | ValueError, message_id: MessageId, raw: object
) -> ValidationError:
    message = (
        error.diagnostic.message
        if isinstance(error, CatalogError) and error.diagnostic is not None
        else str(error)
    )
    content = raw if isinstance(raw, str) else repr(raw)
    return ValidationError(code=code, message=message, message_id=message_id, content=content)


def reconcile(
    descriptors: Iterable[MessageDescriptor],
    catalog: Catalog,
    *,
    drop_orphans: bool = False,
) -> ReconcileResult:
    """Merge extracted descriptors into an existing catalog.

    Descriptor order comes first, then orphaned entries in their catalog
    order (unless drop_orphans). Existing entries are never modified.

    Example:
        >>> back = MessageDescriptor.create("Back", id="msg.back")
        >>> old = Catalog("fr", [CatalogEntry.create("msg.gone", "Parti")])
        >>> result = reconcile([back], old)
        >>> result.added, result.orphaned
        (('msg.back',), ('msg.gone',))
    """
    unique = _unique_descriptors(descriptors)
    declared = {d.id for d in unique}

    entries: list[CatalogEntry] = []
    added: list[MessageId] = []
    unchanged: list[MessageId] = []
    for descriptor in unique:
        existing = catalog.get(descriptor.id)
        if existing is None:
            entries.append(
                CatalogEntry.create(descriptor.id, descriptor.default_text, translated=False)
            )
            added.append(descriptor.id)
        else:
            entries.append(existing)
            unchanged.append(descriptor.id)

    orphaned = tuple(e.id for e in catalog if e.id not in declared)
    if not drop_orphans:
        entries.extend(e for e in catalog if e.id not in declared)

    logger.info(
        "Reconciled catalog %s: %d added, %d orphaned%s, %d unchanged",
        catalog.locale,
        len(added),
        len(orphaned),
        " (dropped)" if drop_orphans and orphaned else "",
        len(unchanged),
    )
    return ReconcileResult(
        catalog=Catalog(catalog.locale, entries),
        added=tuple(added),
        orphaned=orphaned,
        unchanged=tuple(unchanged),
    )
