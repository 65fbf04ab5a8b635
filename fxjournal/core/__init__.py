"""
Core Module

Error taxonomy shared by the boundary layers.
"""

from .errors import (
    ConfigError,
    DataError,
    ErrorCategory,
    ErrorCode,
    ErrorCodes,
    ErrorSeverity,
    JournalError,
    ValidationError,
    wrap_exception,
)

__all__ = [
    "ErrorCategory",
    "ErrorSeverity",
    "ErrorCode",
    "ErrorCodes",
    "JournalError",
    "DataError",
    "ValidationError",
    "ConfigError",
    "wrap_exception",
]
