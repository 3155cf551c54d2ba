"""Message descriptors and message id derivation.

A MessageDescriptor is the source-side definition of one translatable
message. Its id is either supplied explicitly or derived from the source
text and context, so repeated extraction runs and runtime lookups agree.

Python 3.13+.
"""

from __future__ import annotations

import base64
import hashlib
from dataclasses import dataclass

from msgcatalog.constants import CONTEXT_SEPARATOR, HASH_SEPARATOR, ID_HASH_LENGTH
from msgcatalog.diagnostics import ErrorTemplate, MissingDefaultBranchError
from msgcatalog.enums import IdStrategy
from msgcatalog.syntax import (
    Template,
    extract_placeholders,
    find_missing_default,
    parse_template,
)

from .types import MessageId, TemplateSource

__all__ = ["MessageDescriptor", "normalize_id"]


def normalize_id(
    default_text: TemplateSource,
    context: str | None = None,
    *,
    strategy: IdStrategy = IdStrategy.HASH,
) -> MessageId:
    """Derive a stable message id from source text and context.

    The text is parsed first, so templates with non-simple placeholders are
    rejected before an id is ever produced.

    Args:
        default_text: Source-locale template
        context: Optional disambiguation tag
        strategy: HASH (short digest) or VERBATIM (gettext msgctxt style)

    Returns:
        Message id. Identical (text, context) pairs always produce the same id;
        pairs that differ in text or context produce different ids.

    Raises:
        InvalidPlaceholderError: If default_text contains a placeholder that is
            not a simple named placeholder
        ValueError: If default_text or context contains an id separator
            character (U+0004 or U+001F)

    Example:
        >>> normalize_id("Back") == normalize_id("Back")
        True
        >>> normalize_id("Back") == normalize_id("Back", "navigation")
        False
        >>> normalize_id("Open", "menu", strategy=IdStrategy.VERBATIM)
        'menu\\x04Open'
    """
    parse_template(default_text)
    for part in (default_text, context or ""):
        if CONTEXT_SEPARATOR in part or HASH_SEPARATOR in part:
            msg = f"Id separator character in message text or context: {part!r}"
            raise ValueError(msg)

    match strategy:
        case IdStrategy.VERBATIM:
            if context:
                return f"{context}{CONTEXT_SEPARATOR}{default_text}"
            return default_text
        case IdStrategy.HASH:
            payload = f"{default_text}{HASH_SEPARATOR}{context or ''}".encode()
            digest = hashlib.sha256(payload).digest()
            return base64.urlsafe_b64encode(digest).decode("ascii")[:ID_HASH_LENGTH]


@dataclass(frozen=True, slots=True)
class MessageDescriptor:
    """Source-defined unit of translation.

    Use MessageDescriptor.create() to construct instances: it parses and
    validates the source text and derives the id.

    Attributes:
        id: Stable identifier, unique within a catalog
        default_text: Source-locale template text
        template: Parsed default_text
        placeholders: Ordered unique argument names referenced by default_text
        context: Optional disambiguation tag
        comment: Optional translator note (never compiled into catalogs)
    """

    id: MessageId
    default_text: TemplateSource
    template: Template
    placeholders: tuple[str, ...]
    context: str | None = None
    comment: str | None = None

    @classmethod
    def create(
        cls,
        default_text: TemplateSource,
        *,
        id: MessageId | None = None,  # noqa: A002 - mirrors the persisted field name
        context: str | None = None,
        comment: str | None = None,
        strategy: IdStrategy = IdStrategy.HASH,
    ) -> MessageDescriptor:
        """Create a validated descriptor.

        Args:
            default_text: Source-locale template
            id: Explicit id (derived from default_text and context if omitted)
            context: Optional disambiguation tag
            comment: Optional translator note
            strategy: Id derivation strategy when id is omitted

        Raises:
            InvalidPlaceholderError: If default_text has a non-simple placeholder
            MissingDefaultBranchError: If a plural/select lacks an 'other' branch
            ValueError: If an explicit id is empty, or a derived id would
                contain a separator character

        Example:
            >>> d = MessageDescriptor.create("Back", id="msg.back")
            >>> d.id
            'msg.back'
            >>> MessageDescriptor.create("Hi {name}, {name}!").placeholders
            ('name',)
        """
        template = parse_template(default_text)
        missing = find_missing_default(template)
        if missing is not None:
            raise MissingDefaultBranchError(
                ErrorTemplate.missing_default_branch(missing, message_id=id),
                selector=missing,
            )

        if id is None:
            message_id = normalize_id(default_text, context, strategy=strategy)
        else:
            message_id = id.strip()
            if not message_id:
                msg = "Message id cannot be empty"
                raise ValueError(msg)

        return cls(
            id=message_id,
            default_text=default_text,
            template=template,
            placeholders=extract_placeholders(template),
            context=context,
            comment=comment,
        )

    def declares(self, name: str) -> bool:
        """Whether default_text references the argument name."""
        return name in self.placeholders
