"""Core utilities shared across syntax and runtime layers.

This package provides foundational utilities that both the syntax layer
(template parsing) and runtime layer (rendering) depend on:

    core <- syntax <- runtime <- catalog <- engine

Exports:
    DepthGuard: Context manager for recursion depth limiting
    DepthLimitExceededError: Exception raised when depth limit exceeded
    is_valid_identifier: Placeholder name grammar check

Python 3.13+.
"""

from .depth_guard import DepthGuard, DepthLimitExceededError
from .identifier_validation import is_valid_identifier

__all__ = ["DepthGuard", "DepthLimitExceededError", "is_valid_identifier"]
