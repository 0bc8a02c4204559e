"""Utility helpers."""

from .suppressor import TRANSIENT_ERROR_PATTERNS, ErrorSuppressor, is_transient_error

__all__ = ["ErrorSuppressor", "TRANSIENT_ERROR_PATTERNS", "is_transient_error"]
