"""
fxjournal Error Handling Module

Structured error codes, user-friendly messages and a small exception
hierarchy for the journal's boundary layers (validation, spreadsheet I/O,
configuration). The analytics engine itself never raises; it resolves
degenerate inputs to documented sentinel values instead.
"""

import logging
import traceback
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum, auto
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

# =============================================================================
# Error Code Taxonomy
# =============================================================================


class ErrorCategory(Enum):
    """Top-level error categories."""

    DATA = "DATA"
    VALIDATION = "VALIDATION"
    CONFIG = "CONFIG"
    SYSTEM = "SYSTEM"


class ErrorSeverity(Enum):
    """Error severity levels for logging."""

    DEBUG = auto()
    INFO = auto()
    WARNING = auto()
    ERROR = auto()
    CRITICAL = auto()


@dataclass
class ErrorCode:
    """Structured error code with metadata."""

    code: str
    category: ErrorCategory
    severity: ErrorSeverity
    message: str
    user_message: str
    recovery_hint: str = ""

    def __str__(self) -> str:
        return f"{self.category.value}_{self.code}"


class ErrorCodes:
    """Central registry of fxjournal error codes."""

    # Data Errors (2xxx)
    DATA_FILE_NOT_FOUND = ErrorCode(
        code="2001",
        category=ErrorCategory.DATA,
        severity=ErrorSeverity.ERROR,
        message="Trade file not found",
        user_message="The trade file could not be found.",
        recovery_hint="Check the path to the CSV or XLSX file.",
    )

    DATA_UNSUPPORTED_FORMAT = ErrorCode(
        code="2002",
        category=ErrorCategory.DATA,
        severity=ErrorSeverity.WARNING,
        message="Unsupported spreadsheet format",
        user_message="This file type is not supported.",
        recovery_hint="Use a .csv or .xlsx spreadsheet, or a .json trade file.",
    )

    DATA_PARSE_ERROR = ErrorCode(
        code="2003",
        category=ErrorCategory.DATA,
        severity=ErrorSeverity.ERROR,
        message="Failed to read spreadsheet",
        user_message="The file could not be read.",
        recovery_hint="Make sure the first sheet has a header row.",
    )

    DATA_EXPORT_FAILED = ErrorCode(
        code="2004",
        category=ErrorCategory.DATA,
        severity=ErrorSeverity.ERROR,
        message="Failed to write export file",
        user_message="Export failed.",
        recovery_hint="Check that the output directory exists and is writable.",
    )

    # Validation Errors (4xxx)
    VALIDATION_INVALID_TRADE = ErrorCode(
        code="4001",
        category=ErrorCategory.VALIDATION,
        severity=ErrorSeverity.INFO,
        message="Trade record is invalid",
        user_message="One of the trades is not valid.",
        recovery_hint="Check the trade's date, type, size and prices.",
    )

    VALIDATION_INVALID_ACCOUNT = ErrorCode(
        code="4002",
        category=ErrorCategory.VALIDATION,
        severity=ErrorSeverity.INFO,
        message="Account record is invalid",
        user_message="One of the accounts is not valid.",
        recovery_hint="Accounts need an id, a name and a numeric balance.",
    )

    VALIDATION_INVALID_FILTER = ErrorCode(
        code="4003",
        category=ErrorCategory.VALIDATION,
        severity=ErrorSeverity.INFO,
        message="Filter criteria are invalid",
        user_message="The filter values are not valid.",
        recovery_hint="Dates must be YYYY-MM-DD and P&L bounds numeric.",
    )

    VALIDATION_INVALID_VALUE = ErrorCode(
        code="4004",
        category=ErrorCategory.VALIDATION,
        severity=ErrorSeverity.INFO,
        message="Field value is invalid",
        user_message="One of the values is not valid.",
        recovery_hint="Check the allowed values for this field.",
    )

    # Configuration Errors (5xxx)
    CONFIG_FILE_NOT_FOUND = ErrorCode(
        code="5001",
        category=ErrorCategory.CONFIG,
        severity=ErrorSeverity.ERROR,
        message="Configuration file not found",
        user_message="The configuration file could not be found.",
        recovery_hint="Check the --config path.",
    )

    CONFIG_INVALID = ErrorCode(
        code="5002",
        category=ErrorCategory.CONFIG,
        severity=ErrorSeverity.ERROR,
        message="Configuration is invalid",
        user_message="The configuration contains invalid values.",
        recovery_hint="Compare the file against the documented settings.",
    )

    # System Errors (7xxx)
    SYSTEM_INTERNAL_ERROR = ErrorCode(
        code="7001",
        category=ErrorCategory.SYSTEM,
        severity=ErrorSeverity.CRITICAL,
        message="Internal error",
        user_message="An unexpected error occurred.",
        recovery_hint="Please try again. If the problem persists, report it.",
    )


# =============================================================================
# Exception Classes
# =============================================================================


class JournalError(Exception):
    """
    Base exception for all fxjournal errors.

    Carries a structured error code, an optional detail string and
    context that is useful when logging or rendering the error.
    """

    def __init__(
        self,
        error_code: ErrorCode,
        detail: Optional[str] = None,
        original_error: Optional[Exception] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        self.error_code = error_code
        self.detail = detail
        self.original_error = original_error
        self.context = context or {}
        self.debug_info: Dict[str, Any] = {}
        self.timestamp = datetime.now(timezone.utc)

        if original_error:
            self.debug_info["original_traceback"] = traceback.format_exception(
                type(original_error), original_error, original_error.__traceback__
            )

        super().__init__(self.technical_message)

    @property
    def code(self) -> str:
        """Full error code string."""
        return str(self.error_code)

    @property
    def category(self) -> ErrorCategory:
        return self.error_code.category

    @property
    def severity(self) -> ErrorSeverity:
        return self.error_code.severity

    @property
    def user_message(self) -> str:
        """User-friendly error message."""
        msg = self.error_code.user_message
        if self.detail:
            msg = f"{msg} ({self.detail})"
        return msg

    @property
    def technical_message(self) -> str:
        """Technical error message for logging."""
        msg = f"[{self.code}] {self.error_code.message}"
        if self.detail:
            msg = f"{msg}: {self.detail}"
        return msg

    @property
    def recovery_hint(self) -> str:
        return self.error_code.recovery_hint

    def to_dict(self, include_debug: bool = False) -> Dict[str, Any]:
        """
        Convert error to a dictionary.

        Args:
            include_debug: Include technical message, context and traceback
        """
        result = {
            "code": self.code,
            "category": self.category.value,
            "message": self.user_message,
            "recoveryHint": self.recovery_hint,
            "timestamp": self.timestamp.isoformat(),
        }

        if include_debug:
            result["debug"] = {
                "technicalMessage": self.technical_message,
                "context": self.context,
                "debugInfo": self.debug_info,
            }

        return result

    def log(self) -> None:
        """Log the error with its severity."""
        log_method = getattr(logger, self.severity.name.lower(), logger.error)
        log_method(
            self.technical_message,
            extra={"ctx_error_code": self.code, "ctx_context": self.context},
        )


class DataError(JournalError):
    """Spreadsheet read/write errors."""

    def __init__(
        self,
        error_code: ErrorCode = ErrorCodes.DATA_PARSE_ERROR,
        **kwargs,
    ):
        super().__init__(error_code, **kwargs)


class ValidationError(JournalError):
    """Boundary validation errors for trades, accounts and filters."""

    def __init__(
        self,
        error_code: ErrorCode = ErrorCodes.VALIDATION_INVALID_VALUE,
        field: Optional[str] = None,
        **kwargs,
    ):
        self.field = field
        super().__init__(error_code, **kwargs)

    def to_dict(self, include_debug: bool = False) -> Dict[str, Any]:
        result = super().to_dict(include_debug=include_debug)
        result["field"] = self.field
        return result


class ConfigError(JournalError):
    """Settings loading errors."""

    def __init__(
        self,
        error_code: ErrorCode = ErrorCodes.CONFIG_INVALID,
        **kwargs,
    ):
        super().__init__(error_code, **kwargs)


# =============================================================================
# Utility Functions
# =============================================================================


def wrap_exception(
    exception: Exception,
    default_code: ErrorCode = ErrorCodes.SYSTEM_INTERNAL_ERROR,
) -> JournalError:
    """
    Wrap a generic exception in a JournalError.

    Maps common exception types to appropriate error codes.
    """
    if isinstance(exception, JournalError):
        return exception

    exception_mapping = {
        FileNotFoundError: ErrorCodes.DATA_FILE_NOT_FOUND,
        ValueError: ErrorCodes.VALIDATION_INVALID_VALUE,
        KeyError: ErrorCodes.VALIDATION_INVALID_VALUE,
    }

    for exc_type, error_code in exception_mapping.items():
        if isinstance(exception, exc_type):
            return JournalError(
                error_code,
                detail=str(exception),
                original_error=exception,
            )

    return JournalError(
        default_code,
        detail=str(exception),
        original_error=exception,
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
