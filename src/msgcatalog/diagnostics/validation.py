"""Unified validation result for catalog validation.

Consolidates feedback from different stages:
- Template-level: Placeholder syntax errors
- Entry-level: Branch table errors
- Catalog-level: Warnings from reconciliation against source descriptors

Python 3.13+.
"""

from dataclasses import dataclass

__all__ = [
    "ValidationError",
    "ValidationResult",
    "ValidationWarning",
]


# Maximum content length before truncation when sanitizing
_SANITIZE_MAX_CONTENT_LENGTH: int = 100


@dataclass(frozen=True, slots=True)
class ValidationError:
    """Structured error from catalog validation.

    Attributes:
        code: Error code (e.g., "invalid-placeholder", "missing-default-branch")
        message: Human-readable error message
        message_id: Catalog entry the error belongs to
        content: The offending template text
    """

    code: str
    message: str
    message_id: str
    content: str = ""

    def format(self, *, sanitize: bool = False) -> str:
        """Format error as human-readable string.

        Args:
            sanitize: If True, truncate content to prevent information leakage.

        Returns:
            Formatted error string.
        """
        content = self.content
        if sanitize and len(content) > _SANITIZE_MAX_CONTENT_LENGTH:
            content = content[:_SANITIZE_MAX_CONTENT_LENGTH] + "..."
        return f"[{self.code}] {self.message_id}: {self.message} (content: {content!r})"


@dataclass(frozen=True, slots=True)
class ValidationWarning:
    """Structured warning from catalog validation.

    Attributes:
        code: Warning code (e.g., "orphaned-translation", "unknown-placeholder")
        message: Human-readable warning message
        message_id: Catalog entry the warning belongs to
        context: Additional context (e.g., the placeholder name)
    """

    code: str
    message: str
    message_id: str
    context: str | None = None


@dataclass(frozen=True, slots=True)
class ValidationResult:
    """Unified validation result.

    Immutable result object for thread-safe validation feedback.

    Attributes:
        errors: Errors that would make compilation fail
        warnings: Informational warnings

    Example:
        >>> result = ValidationResult.valid()
        >>> result.is_valid
        True
    """

    errors: tuple[ValidationError, ...]
    warnings: tuple[ValidationWarning, ...]

    @property
    def is_valid(self) -> bool:
        """Check if validation passed. Warnings do not affect validity."""
        return len(self.errors) == 0

    @property
    def error_count(self) -> int:
        """Number of errors."""
        return len(self.errors)

    @property
    def warning_count(self) -> int:
        """Number of warnings."""
        return len(self.warnings)

    @staticmethod
    def valid() -> "ValidationResult":
        """Create a valid result with no errors or warnings."""
        return ValidationResult(errors=(), warnings=())

    def format(self, *, sanitize: bool = False, include_warnings: bool = True) -> str:
        """Format validation result as human-readable string.

        Args:
            sanitize: If True, truncate error content.
            include_warnings: If True (default), include warnings in output.

        Returns:
            Formatted string with errors and optionally warnings.
        """
        lines: list[str] = []

        if self.errors:
            lines.append(f"Errors ({len(self.errors)}):")
            for error in self.errors:
                lines.append(f"  {error.format(sanitize=sanitize)}")

        if include_warnings and self.warnings:
            lines.append(f"Warnings ({len(self.warnings)}):")
            for warning in self.warnings:
                context = f" ({warning.context})" if warning.context else ""
                lines.append(f"  [{warning.code}] {warning.message_id}: {warning.message}{context}")

        if not lines:
            return "Validation passed: no errors or warnings"

        return "\n".join(lines)
