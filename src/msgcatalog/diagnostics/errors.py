"""Catalog exception hierarchy with structured diagnostics.

All exceptions optionally store Diagnostic objects for rich error information.

Propagation model:
    - InvalidPlaceholderError, MissingDefaultBranchError and
      InvalidFallbackPolicyError are build/load time errors.
    - MissingArgumentError is the one resolution-time error surfaced to the
      caller of ResolutionEngine.translate().
    - CatalogLoadError is caught by the engine, which keeps serving the
      previous snapshot.

Python 3.13+. Zero external dependencies.
"""

from .codes import Diagnostic

__all__ = [
    "CatalogCompileError",
    "CatalogError",
    "CatalogLoadError",
    "FormattingError",
    "InvalidFallbackPolicyError",
    "InvalidPlaceholderError",
    "MissingArgumentError",
    "MissingDefaultBranchError",
]


class CatalogError(Exception):
    """Base exception for all msgcatalog errors.

    Attributes:
        diagnostic: Structured diagnostic information (optional)
    """

    def __init__(self, message: str | Diagnostic) -> None:
        """Initialize CatalogError.

        Args:
            message: Error message string OR Diagnostic object
        """
        if isinstance(message, Diagnostic):
            self.diagnostic: Diagnostic | None = message
            super().__init__(message.format_error())
        else:
            self.diagnostic = None
            super().__init__(message)


class InvalidPlaceholderError(CatalogError):
    """Template contains a placeholder that is not a simple named placeholder.

    Examples:
        Hello { user.name }   <- attribute access
        Total: { a + b }      <- arithmetic expression
        { }                   <- empty placeholder

    Raised by the template parser, so it surfaces at extraction and compile
    time. The resolution path only sees pre-validated templates.

    Attributes:
        placeholder: Offending placeholder body (may be truncated)
        position: Character offset of the opening brace
    """

    def __init__(
        self,
        message: str | Diagnostic,
        *,
        placeholder: str = "",
        position: int | None = None,
    ) -> None:
        super().__init__(message)
        self.placeholder = placeholder
        self.position = position


class MissingDefaultBranchError(CatalogError):
    """Plural or select table has no 'other' branch.

    Attributes:
        selector: Argument name driving the table
    """

    def __init__(self, message: str | Diagnostic, *, selector: str = "") -> None:
        super().__init__(message)
        self.selector = selector


class MissingArgumentError(CatalogError):
    """Renderer reached a placeholder whose argument was not supplied.

    Recoverable: the caller decides whether to substitute or propagate.

    Attributes:
        name: Placeholder name with no argument
    """

    def __init__(self, message: str | Diagnostic, *, name: str) -> None:
        super().__init__(message)
        self.name = name


class InvalidFallbackPolicyError(CatalogError):
    """Fallback policy is cyclic or malformed.

    Raised when the policy is constructed, before any translate() call.
    """


class CatalogLoadError(CatalogError):
    """Catalog loader failed to supply a catalog.

    Attributes:
        locale: Locale whose catalog failed to load
    """

    def __init__(self, message: str | Diagnostic, *, locale: str = "") -> None:
        super().__init__(message)
        self.locale = locale


class CatalogCompileError(CatalogError):
    """Compilation produced warnings while running in strict mode.

    Attributes:
        warnings: The warnings that were escalated
    """

    def __init__(self, message: str | Diagnostic, *, warnings: tuple[object, ...] = ()) -> None:
        super().__init__(message)
        self.warnings = warnings


class FormattingError(CatalogError):
    """Formatting collaborator could not format a value.

    Recoverable: the renderer substitutes ``fallback_value`` and reports the
    error, so a bad argument type never fails the whole message.

    Attributes:
        fallback_value: Text rendered in place of the value
    """

    def __init__(self, message: str | Diagnostic, *, fallback_value: str = "") -> None:
        super().__init__(message)
        self.fallback_value = fallback_value
