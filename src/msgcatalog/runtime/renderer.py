"""Template renderer: substitutes arguments into parsed templates.

Two modes share one implementation:

    render()  raises MissingArgumentError for an absent argument
    format()  substitutes '{name}' and reports the error (never raises for
              missing arguments or missing default branches)

Formatting failures are always recoverable: the formatter's fallback text
is rendered and the error is reported (format) or logged (render).

Thread Safety:
    TemplateRenderer holds only immutable configuration. Per-call state
    lives in ResolutionContext.

Python 3.13+.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from decimal import Decimal
from typing import Protocol

from msgcatalog.constants import FALLBACK_MISSING_ARGUMENT, MAX_DEPTH
from msgcatalog.core.depth_guard import DepthLimitExceededError
from msgcatalog.diagnostics import (
    CatalogError,
    ErrorTemplate,
    FormattingError,
    MissingArgumentError,
    MissingDefaultBranchError,
)
from msgcatalog.enums import FormatType, SelectorKind
from msgcatalog.syntax.ast import (
    Branch,
    FormattedPlaceholder,
    Placeholder,
    PoundSign,
    SelectPlaceholder,
    Template,
    Text,
)

from .formatting import BabelFormatter, Formatter, format_plain
from .resolution_context import ResolutionContext
from .selection import select_branch, to_decimal

__all__ = ["UNICODE_FSI", "UNICODE_PDI", "RenderableEntry", "TemplateRenderer"]

logger = logging.getLogger(__name__)

# Unicode bidirectional isolation characters
UNICODE_FSI: str = "\u2068"  # U+2068 FIRST STRONG ISOLATE
UNICODE_PDI: str = "\u2069"  # U+2069 POP DIRECTIONAL ISOLATE


class RenderableEntry(Protocol):
    """What the renderer needs from a catalog entry."""

    @property
    def id(self) -> str: ...

    @property
    def template(self) -> Template: ...

    @property
    def plural_branches(self) -> tuple[Branch, ...]: ...

    @property
    def selector(self) -> str: ...

    @property
    def selector_kind(self) -> SelectorKind: ...


class TemplateRenderer:
    """Renders templates and catalog entries for a locale.

    Args:
        formatter: Formatting collaborator (default: BabelFormatter)
        use_isolating: Wrap interpolated values in FSI/PDI marks
        max_depth: Maximum nesting of plural/select branches

    Example:
        >>> from msgcatalog.syntax import parse_template
        >>> renderer = TemplateRenderer()
        >>> renderer.render(parse_template("Hello, {name}!"), {"name": "Ana"}, "en")
        'Hello, Ana!'
    """

    __slots__ = ("_formatter", "_max_depth", "_use_isolating")

    def __init__(
        self,
        formatter: Formatter | None = None,
        *,
        use_isolating: bool = False,
        max_depth: int = MAX_DEPTH,
    ) -> None:
        self._formatter: Formatter = formatter if formatter is not None else BabelFormatter()
        self._use_isolating = use_isolating
        self._max_depth = max_depth

    @property
    def formatter(self) -> Formatter:
        return self._formatter

    @property
    def use_isolating(self) -> bool:
        return self._use_isolating

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def render(
        self,
        template: Template,
        arguments: Mapping[str, object] | None,
        locale: str,
    ) -> str:
        """Render a template, raising on missing arguments.

        Raises:
            MissingArgumentError: If a referenced argument is absent
            MissingDefaultBranchError: If no branch matches and no 'other' exists
            DepthLimitExceededError: If branch nesting exceeds max_depth
        """
        result, _errors = self.render_with_errors(template, arguments, locale)
        return result

    def render_entry(
        self,
        entry: RenderableEntry,
        arguments: Mapping[str, object] | None,
        locale: str,
    ) -> str:
        """Render a catalog entry, evaluating entry-level branches first.

        Raises:
            MissingArgumentError: If a referenced argument (or the selector) is absent
            MissingDefaultBranchError: If no branch matches and no 'other' exists
        """
        result, _errors = self.render_entry_with_errors(entry, arguments, locale)
        return result

    def render_with_errors(
        self,
        template: Template,
        arguments: Mapping[str, object] | None,
        locale: str,
    ) -> tuple[str, tuple[CatalogError, ...]]:
        """Like render(), also returning the formatting errors it recovered from.

        Missing arguments still raise; only FormattingError is recovered.
        """
        context = self._new_context(arguments, locale, recover_missing=False)
        result = self._render_template(template, context)
        self._log_recovered(context)
        return result, tuple(context.errors)

    def render_entry_with_errors(
        self,
        entry: RenderableEntry,
        arguments: Mapping[str, object] | None,
        locale: str,
    ) -> tuple[str, tuple[CatalogError, ...]]:
        """Like render_entry(), also returning recovered formatting errors."""
        context = self._new_context(arguments, locale, recover_missing=False)
        result = self._render_entry(entry, context)
        self._log_recovered(context)
        return result, tuple(context.errors)

    def format(
        self,
        template: Template,
        arguments: Mapping[str, object] | None,
        locale: str,
    ) -> tuple[str, tuple[CatalogError, ...]]:
        """Render a template without raising for missing values.

        Returns:
            Tuple of (rendered_text, errors)
        """
        context = self._new_context(arguments, locale, recover_missing=True)
        try:
            result = self._render_template(template, context)
        except DepthLimitExceededError as e:
            context.errors.append(e)
            result = ""
        return result, tuple(context.errors)

    def format_entry(
        self,
        entry: RenderableEntry,
        arguments: Mapping[str, object] | None,
        locale: str,
    ) -> tuple[str, tuple[CatalogError, ...]]:
        """Non-raising counterpart of render_entry()."""
        context = self._new_context(arguments, locale, recover_missing=True)
        try:
            result = self._render_entry(entry, context)
        except DepthLimitExceededError as e:
            context.errors.append(e)
            result = ""
        return result, tuple(context.errors)

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def _new_context(
        self,
        arguments: Mapping[str, object] | None,
        locale: str,
        *,
        recover_missing: bool,
    ) -> ResolutionContext:
        if arguments is None:
            arguments = {}
        elif not isinstance(arguments, Mapping):
            diagnostic = ErrorTemplate.arguments_invalid(type(arguments).__name__)
            raise TypeError(diagnostic.message)
        return ResolutionContext(
            locale=locale,
            arguments=arguments,
            recover_missing=recover_missing,
            max_depth=self._max_depth,
        )

    def _render_entry(self, entry: RenderableEntry, context: ResolutionContext) -> str:
        if not entry.plural_branches:
            return self._render_template(entry.template, context)

        selector = entry.selector
        try:
            value = context.argument(selector)
            key = select_branch(
                context.locale,
                entry.selector_kind,
                value,
                (b.key for b in entry.plural_branches),
                selector=selector,
            )
        except (MissingArgumentError, MissingDefaultBranchError) as e:
            return self._recover(e, selector, context)

        branch = next(b.value for b in entry.plural_branches if b.key == key)
        return self._render_branch(branch, entry.selector_kind, value, context)

    def _render_template(self, template: Template, context: ResolutionContext) -> str:
        parts: list[str] = []
        for element in template.elements:
            match element:
                case Text(value=value):
                    parts.append(value)
                case Placeholder(name=name):
                    parts.append(self._interpolate(name, None, None, context))
                case FormattedPlaceholder(name=name, format_type=format_type, style=style):
                    parts.append(self._interpolate(name, format_type, style, context))
                case PoundSign():
                    parts.append(self._render_pound(context))
                case SelectPlaceholder():
                    parts.append(self._render_select(element, context))
        return "".join(parts)

    def _render_select(self, element: SelectPlaceholder, context: ResolutionContext) -> str:
        try:
            value = context.argument(element.name)
            key = select_branch(
                context.locale,
                element.kind,
                value,
                (b.key for b in element.branches),
                selector=element.name,
            )
        except (MissingArgumentError, MissingDefaultBranchError) as e:
            return self._recover(e, element.name, context)

        branch = next(b.value for b in element.branches if b.key == key)
        return self._render_branch(branch, element.kind, value, context)

    def _render_branch(
        self,
        branch: Template,
        kind: SelectorKind,
        value: object,
        context: ResolutionContext,
    ) -> str:
        with context.guard:
            if kind is not SelectorKind.PLURAL:
                return self._render_template(branch, context)
            context.push_plural_value(value)
            try:
                return self._render_template(branch, context)
            finally:
                context.pop_plural_value()

    def _interpolate(
        self,
        name: str,
        format_type: FormatType | None,
        style: str | None,
        context: ResolutionContext,
    ) -> str:
        try:
            value = context.argument(name)
        except MissingArgumentError as e:
            return self._recover(e, name, context)

        try:
            text = self._formatter.format_value(
                value, context.locale, format_type=format_type, style=style
            )
        except FormattingError as e:
            context.errors.append(e)
            text = e.fallback_value
        return self._isolate(text)

    def _render_pound(self, context: ResolutionContext) -> str:
        if not context.has_plural_value:
            return "#"
        value = context.plural_value
        if to_decimal(value) is None or not isinstance(value, (int, float, Decimal)):
            return self._isolate(format_plain(value))
        return self._isolate(self._formatter.format_number(value, context.locale))

    def _isolate(self, text: str) -> str:
        if self._use_isolating:
            return f"{UNICODE_FSI}{text}{UNICODE_PDI}"
        return text

    @staticmethod
    def _recover(error: CatalogError, name: str, context: ResolutionContext) -> str:
        """Fallback text for a placeholder that could not be rendered."""
        if not context.recover_missing:
            raise error
        context.errors.append(error)
        return FALLBACK_MISSING_ARGUMENT.format(name=name)

    @staticmethod
    def _log_recovered(context: ResolutionContext) -> None:
        for error in context.errors:
            logger.warning("Recovered while rendering for %s: %s", context.locale, error)
