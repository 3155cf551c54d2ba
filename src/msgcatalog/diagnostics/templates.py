"""Error message templates.

Centralized error message templates for testable, consistent error messages.
Python 3.13+. Zero external dependencies.
"""

from .codes import Diagnostic, DiagnosticCode

__all__ = ["ErrorTemplate"]

# Placeholder bodies longer than this are truncated in messages.
_MAX_BODY_DISPLAY: int = 40


def _truncate(body: str) -> str:
    if len(body) > _MAX_BODY_DISPLAY:
        return body[:_MAX_BODY_DISPLAY] + "..."
    return body


class ErrorTemplate:
    """Centralized error message templates.

    All error messages are created here. NO f-strings in exception constructors!
    This provides:
        - Testable error messages
        - Consistent formatting
        - Documentation of all error cases
    """

    # ------------------------------------------------------------------
    # Placeholder errors
    # ------------------------------------------------------------------

    @staticmethod
    def placeholder_invalid(body: str, position: int) -> Diagnostic:
        """Placeholder body is not a simple named placeholder.

        Args:
            body: Text between the braces
            position: Offset of the opening brace

        Returns:
            Diagnostic for PLACEHOLDER_INVALID
        """
        msg = f"Invalid placeholder '{{{_truncate(body)}}}'"
        return Diagnostic(
            code=DiagnosticCode.PLACEHOLDER_INVALID,
            message=msg,
            hint="Placeholders must be plain names such as {name}; "
            "compute values before passing them as arguments",
            position=position,
        )

    @staticmethod
    def placeholder_unterminated(position: int) -> Diagnostic:
        """Opening brace without matching closing brace."""
        return Diagnostic(
            code=DiagnosticCode.PLACEHOLDER_UNTERMINATED,
            message="Unterminated placeholder",
            hint="Close the placeholder with '}' or quote the brace as '{'",
            position=position,
        )

    @staticmethod
    def placeholder_empty(position: int) -> Diagnostic:
        """Placeholder with no name: {}."""
        return Diagnostic(
            code=DiagnosticCode.PLACEHOLDER_EMPTY,
            message="Empty placeholder '{}'",
            hint="Name the placeholder, e.g. {name}",
            position=position,
        )

    @staticmethod
    def placeholder_unknown_type(name: str, type_name: str, position: int) -> Diagnostic:
        """Placeholder declares a formatter type the engine does not know."""
        msg = f"Unknown placeholder type '{_truncate(type_name)}' for '{name}'"
        return Diagnostic(
            code=DiagnosticCode.PLACEHOLDER_UNKNOWN_TYPE,
            message=msg,
            hint="Use one of: plural, select, number, percent, currency, date, time, datetime",
            position=position,
        )

    @staticmethod
    def nesting_depth_exceeded(max_depth: int, position: int) -> Diagnostic:
        """Nested plural/select placeholders exceed the depth limit."""
        msg = f"Maximum placeholder nesting depth ({max_depth}) exceeded"
        return Diagnostic(
            code=DiagnosticCode.PLACEHOLDER_NESTING_DEPTH_EXCEEDED,
            message=msg,
            hint="Flatten nested plural/select placeholders",
            position=position,
        )

    @staticmethod
    def unmatched_closing_brace(position: int) -> Diagnostic:
        """Closing brace without an opening brace."""
        return Diagnostic(
            code=DiagnosticCode.UNMATCHED_CLOSING_BRACE,
            message="Unmatched '}'",
            hint="Quote a literal brace as '}'",
            position=position,
        )

    # ------------------------------------------------------------------
    # Branch errors
    # ------------------------------------------------------------------

    @staticmethod
    def missing_default_branch(
        selector: str,
        *,
        message_id: str | None = None,
        locale: str | None = None,
    ) -> Diagnostic:
        """Plural/select table without 'other' branch.

        Args:
            selector: Argument name driving the table
            message_id: Catalog entry id (optional)
            locale: Catalog locale (optional)

        Returns:
            Diagnostic for MISSING_DEFAULT_BRANCH
        """
        msg = f"Selector '{selector}' has no 'other' branch"
        return Diagnostic(
            code=DiagnosticCode.MISSING_DEFAULT_BRANCH,
            message=msg,
            hint="Every plural or select table must define an 'other' branch",
            message_id=message_id,
            locale=locale,
        )

    @staticmethod
    def branch_key_invalid(key: str, selector: str) -> Diagnostic:
        """Branch key is neither a category, an exact value nor a select key."""
        msg = f"Invalid branch key '{_truncate(key)}' for selector '{selector}'"
        return Diagnostic(
            code=DiagnosticCode.BRANCH_KEY_INVALID,
            message=msg,
            hint="Plural keys are zero, one, two, few, many, other or =N / exact:N / _N",
        )

    @staticmethod
    def branch_duplicate(key: str, selector: str) -> Diagnostic:
        """Two branches normalize to the same key."""
        msg = f"Duplicate branch '{key}' for selector '{selector}'"
        return Diagnostic(
            code=DiagnosticCode.BRANCH_DUPLICATE,
            message=msg,
            hint="Remove one of the branches",
        )

    @staticmethod
    def branches_empty(selector: str) -> Diagnostic:
        """Plural/select placeholder without any branch."""
        msg = f"Selector '{selector}' has no branches"
        return Diagnostic(
            code=DiagnosticCode.BRANCHES_EMPTY,
            message=msg,
            hint="Add at least an 'other' branch",
        )

    # ------------------------------------------------------------------
    # Argument errors
    # ------------------------------------------------------------------

    @staticmethod
    def argument_missing(name: str) -> Diagnostic:
        """Argument required by a placeholder was not supplied.

        Args:
            name: Placeholder name

        Returns:
            Diagnostic for ARGUMENT_MISSING
        """
        msg = f"Argument '{name}' not provided"
        return Diagnostic(
            code=DiagnosticCode.ARGUMENT_MISSING,
            message=msg,
            hint=f"Pass '{name}' in the arguments mapping",
        )

    @staticmethod
    def arguments_invalid(type_name: str) -> Diagnostic:
        """Arguments object is not a mapping."""
        msg = f"Invalid arguments type: expected Mapping or None, got {type_name}"
        return Diagnostic(code=DiagnosticCode.ARGUMENTS_INVALID, message=msg)

    @staticmethod
    def formatting_failed(name: str, format_type: str, reason: str) -> Diagnostic:
        """Formatting collaborator rejected a value."""
        msg = f"Formatting '{name}' as {format_type} failed: {reason}"
        return Diagnostic(
            code=DiagnosticCode.FORMATTING_FAILED,
            message=msg,
            hint="Check the argument type matches the placeholder type",
        )

    @staticmethod
    def max_depth_exceeded(max_depth: int) -> Diagnostic:
        """Rendering recursion exceeded the depth limit."""
        msg = f"Maximum rendering depth ({max_depth}) exceeded"
        return Diagnostic(code=DiagnosticCode.MAX_DEPTH_EXCEEDED, message=msg)

    # ------------------------------------------------------------------
    # Fallback policy errors
    # ------------------------------------------------------------------

    @staticmethod
    def policy_cycle(path: list[str]) -> Diagnostic:
        """Fallback chain revisits a locale.

        Args:
            path: Locales walked, ending with the repeated one

        Returns:
            Diagnostic for POLICY_CYCLE
        """
        msg = f"Cyclic fallback policy: {' -> '.join(path)}"
        return Diagnostic(
            code=DiagnosticCode.POLICY_CYCLE,
            message=msg,
            hint="Fallback chains must terminate at the source locale",
        )

    @staticmethod
    def policy_self_reference(locale: str) -> Diagnostic:
        """Locale maps to itself."""
        msg = f"Locale '{locale}' falls back to itself"
        return Diagnostic(
            code=DiagnosticCode.POLICY_SELF_REFERENCE,
            message=msg,
            hint="Remove the mapping or point it at a parent locale",
        )

    @staticmethod
    def policy_malformed(reason: str) -> Diagnostic:
        """Policy entry is not a pair of non-empty locale codes."""
        msg = f"Malformed fallback policy: {reason}"
        return Diagnostic(code=DiagnosticCode.POLICY_MALFORMED, message=msg)

    @staticmethod
    def policy_source_remapped(source_locale: str) -> Diagnostic:
        """Policy assigns a parent to the source locale."""
        msg = f"Source locale '{source_locale}' cannot fall back to another locale"
        return Diagnostic(
            code=DiagnosticCode.POLICY_SOURCE_REMAPPED,
            message=msg,
            hint="The source locale terminates every fallback chain",
        )

    # ------------------------------------------------------------------
    # Load errors
    # ------------------------------------------------------------------

    @staticmethod
    def load_not_found(locale: str, path: str) -> Diagnostic:
        """No persisted catalog for locale."""
        msg = f"No catalog for locale '{locale}' at {path}"
        return Diagnostic(code=DiagnosticCode.LOAD_NOT_FOUND, message=msg, locale=locale)

    @staticmethod
    def load_failed(locale: str, reason: str) -> Diagnostic:
        """Loader raised while reading the catalog."""
        msg = f"Failed to load catalog for locale '{locale}': {reason}"
        return Diagnostic(code=DiagnosticCode.LOAD_FAILED, message=msg, locale=locale)

    @staticmethod
    def load_malformed(locale: str, reason: str) -> Diagnostic:
        """Persisted catalog does not have the expected shape."""
        msg = f"Malformed catalog for locale '{locale}': {reason}"
        return Diagnostic(code=DiagnosticCode.LOAD_MALFORMED, message=msg, locale=locale)

    @staticmethod
    def load_locale_mismatch(expected: str, actual: str) -> Diagnostic:
        """Loader returned a catalog for a different locale."""
        msg = f"Loader returned catalog for '{actual}' when '{expected}' was requested"
        return Diagnostic(
            code=DiagnosticCode.LOAD_LOCALE_MISMATCH, message=msg, locale=expected
        )

    # ------------------------------------------------------------------
    # Compile
    # ------------------------------------------------------------------

    @staticmethod
    def compile_strict_failed(locale: str, warning_count: int) -> Diagnostic:
        """Strict compilation produced warnings."""
        msg = f"Catalog '{locale}' compiled with {warning_count} warning(s) in strict mode"
        return Diagnostic(
            code=DiagnosticCode.COMPILE_STRICT_FAILED,
            message=msg,
            locale=locale,
            hint="Inspect CompileResult.warnings or compile with strict=False",
        )
