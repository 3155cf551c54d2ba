"""Diagnostic codes and data structures.

Defines error codes and diagnostic messages.
Python 3.13+. Zero external dependencies.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Literal

__all__ = [
    "Diagnostic",
    "DiagnosticCode",
]


class DiagnosticCode(Enum):
    """Error codes with unique identifiers.

    Organized by category:
        1000-1999: Placeholder errors (template syntax)
        2000-2999: Branch errors (plural/select tables)
        3000-3999: Argument errors (rendering)
        4000-4999: Fallback policy errors
        5000-5999: Catalog load errors
        6000-6999: Compile warnings (catalog reconciliation)
    """

    # Placeholder errors (1000-1999)
    PLACEHOLDER_INVALID = 1001
    PLACEHOLDER_UNTERMINATED = 1002
    PLACEHOLDER_EMPTY = 1003
    PLACEHOLDER_UNKNOWN_TYPE = 1004
    PLACEHOLDER_NESTING_DEPTH_EXCEEDED = 1005
    UNMATCHED_CLOSING_BRACE = 1006

    # Branch errors (2000-2999)
    MISSING_DEFAULT_BRANCH = 2001
    BRANCH_KEY_INVALID = 2002
    BRANCH_DUPLICATE = 2003
    BRANCHES_EMPTY = 2004

    # Argument errors (3000-3999)
    ARGUMENT_MISSING = 3001
    ARGUMENTS_INVALID = 3002
    FORMATTING_FAILED = 3003
    MAX_DEPTH_EXCEEDED = 3004

    # Fallback policy errors (4000-4999)
    POLICY_CYCLE = 4001
    POLICY_SELF_REFERENCE = 4002
    POLICY_MALFORMED = 4003
    POLICY_SOURCE_REMAPPED = 4004

    # Load errors (5000-5999)
    LOAD_NOT_FOUND = 5001
    LOAD_FAILED = 5002
    LOAD_MALFORMED = 5003
    LOAD_LOCALE_MISMATCH = 5004

    # Compile warnings (6000-6999)
    COMPILE_ORPHANED_TRANSLATION = 6001
    COMPILE_UNKNOWN_PLACEHOLDER = 6002
    COMPILE_UNTRANSLATED = 6003
    COMPILE_STRICT_FAILED = 6004


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """Structured diagnostic message.

    Inspired by Rust compiler diagnostics. Provides rich error information
    for both humans and tools.

    Attributes:
        code: Unique error code
        message: Human-readable error description
        hint: Suggestion for fixing the error
        message_id: Catalog message id the error relates to (if any)
        locale: Locale the error relates to (if any)
        position: Character offset in the template (if any)
        severity: Error severity level
    """

    code: DiagnosticCode
    message: str
    hint: str | None = None
    message_id: str | None = None
    locale: str | None = None
    position: int | None = None
    severity: Literal["error", "warning"] = "error"

    def __str__(self) -> str:
        """Return human-readable error description."""
        return self.message

    def format_error(self) -> str:
        """Format diagnostic like Rust compiler.

        Example output:
            error[MISSING_DEFAULT_BRANCH]: Selector 'count' has no 'other' branch
              --> message 'inbox', locale 'fr'
              = help: Add an 'other' branch

        Control characters in user-supplied fields are escaped to keep log
        lines intact.

        Returns:
            Formatted error message
        """
        lines = [f"{self.severity}[{self.code.name}]: {_escape(self.message)}"]

        location: list[str] = []
        if self.message_id is not None:
            location.append(f"message {_escape(self.message_id)!r}")
        if self.locale is not None:
            location.append(f"locale {_escape(self.locale)!r}")
        if self.position is not None:
            location.append(f"offset {self.position}")
        if location:
            lines.append(f"  --> {', '.join(location)}")

        if self.hint:
            lines.append(f"  = help: {_escape(self.hint)}")

        return "\n".join(lines)


def _escape(text: str) -> str:
    """Escape control characters (log injection prevention)."""
    return "".join(
        ch if ch.isprintable() or ch == " " else ch.encode("unicode_escape").decode("ascii")
        for ch in text
    )
