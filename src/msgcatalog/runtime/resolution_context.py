"""Per-render state passed through the template renderer.

Thread Safety:
    A ResolutionContext is created per render call and never shared, so the
    renderer itself stays stateless and reentrant.

Python 3.13+.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field

from msgcatalog.constants import MAX_DEPTH
from msgcatalog.core.depth_guard import DepthGuard
from msgcatalog.diagnostics import CatalogError, ErrorTemplate, MissingArgumentError

__all__ = ["ResolutionContext"]

_NO_PLURAL_VALUE = object()


@dataclass(slots=True)
class ResolutionContext:
    """Explicit context for one render operation.

    Attributes:
        locale: Canonical locale the template is rendered for
        arguments: Caller-supplied argument values
        recover_missing: Substitute a readable fallback for missing
            arguments instead of raising MissingArgumentError
        max_depth: Maximum nesting of plural/select branches
        errors: Recoverable errors collected while rendering
    """

    locale: str
    arguments: Mapping[str, object]
    recover_missing: bool = False
    max_depth: int = MAX_DEPTH
    errors: list[CatalogError] = field(default_factory=list)
    _plural_values: list[object] = field(default_factory=list)
    _guard: DepthGuard = field(init=False)

    def __post_init__(self) -> None:
        """Initialize the branch depth guard with configured max depth."""
        self._guard = DepthGuard(max_depth=self.max_depth)

    @property
    def guard(self) -> DepthGuard:
        """Depth guard for context manager use around branch rendering."""
        return self._guard

    def argument(self, name: str) -> object:
        """Look up an argument value.

        Raises:
            MissingArgumentError: If no value was supplied for name
        """
        try:
            return self.arguments[name]
        except KeyError:
            raise MissingArgumentError(ErrorTemplate.argument_missing(name), name=name) from None

    def push_plural_value(self, value: object) -> None:
        """Make value the target of '#' for nested content."""
        self._plural_values.append(value)

    def pop_plural_value(self) -> None:
        self._plural_values.pop()

    @property
    def has_plural_value(self) -> bool:
        return bool(self._plural_values)

    @property
    def plural_value(self) -> object:
        """Innermost plural selector value (the value '#' renders)."""
        return self._plural_values[-1] if self._plural_values else _NO_PLURAL_VALUE
