"""Diagnostic system for catalog errors.

Provides structured error diagnostics with codes and hints.
Inspired by Rust compiler diagnostics and Elm error messages.

Python 3.13+. Zero external dependencies.
"""

from .codes import Diagnostic, DiagnosticCode
from .errors import (
    CatalogCompileError,
    CatalogError,
    CatalogLoadError,
    FormattingError,
    InvalidFallbackPolicyError,
    InvalidPlaceholderError,
    MissingArgumentError,
    MissingDefaultBranchError,
)
from .templates import ErrorTemplate
from .validation import ValidationError, ValidationResult, ValidationWarning

__all__ = [
    "CatalogCompileError",
    "CatalogError",
    "CatalogLoadError",
    "Diagnostic",
    "DiagnosticCode",
    "ErrorTemplate",
    "FormattingError",
    "InvalidFallbackPolicyError",
    "InvalidPlaceholderError",
    "MissingArgumentError",
    "MissingDefaultBranchError",
    "ValidationError",
    "ValidationResult",
    "ValidationWarning",
]
