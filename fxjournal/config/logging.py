"""
fxjournal Logging Configuration

JSON and console log formats, root logger setup for the CLI, a timing
decorator for the analytics entry points and structured journal events
(imports, exports, reports).
"""

import json
import logging
import sys
import time
from datetime import datetime, timezone
from functools import wraps
from typing import Any, Callable, Dict, Iterable, Optional, TypeVar

CONTEXT_PREFIX = "ctx_"

# Libraries that log chatty internals at INFO/DEBUG
QUIET_LOGGERS = ("openpyxl", "numexpr", "matplotlib")

# =============================================================================
# Log Level Strategy
# =============================================================================
#
# DEBUG   - Engine internals
#           - Trade counts before/after filtering
#           - Bucket counts, skipped trades without timing data
#
# INFO    - Journal events
#           - Trades imported / exported
#           - Report generated
#           - Settings loaded
#
# WARNING - Recoverable input problems
#           - Clamped pagination arguments
#           - Slow analytics runs
#
# ERROR   - Boundary failures
#           - Unreadable files, invalid configuration
# =============================================================================


def context_fields(record: logging.LogRecord) -> Dict[str, Any]:
    """Extra fields attached with the ``ctx_`` prefix, prefix removed."""
    return {
        key[len(CONTEXT_PREFIX):]: value
        for key, value in record.__dict__.items()
        if key.startswith(CONTEXT_PREFIX)
    }


class StructuredFormatter(logging.Formatter):
    """One JSON object per line, context fields merged at the top level."""

    def __init__(self, service_name: str = "fxjournal", environment: str = "development"):
        super().__init__()
        self.service_name = service_name
        self.environment = environment

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "service": self.service_name,
            "environment": self.environment,
            "logger": record.name,
            "function": record.funcName,
            "line": record.lineno,
            "message": record.getMessage(),
        }

        if record.exc_info and record.exc_info[0] is not None:
            log_data["exception"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
                "traceback": self.formatException(record.exc_info),
            }

        log_data.update(context_fields(record))
        return json.dumps(log_data, default=str)


class ConsoleFormatter(logging.Formatter):
    """Readable single-line format for terminals."""

    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"

    def __init__(self, use_color: bool = False):
        super().__init__()
        self.use_color = use_color

    def format(self, record: logging.LogRecord) -> str:
        clock = datetime.fromtimestamp(record.created).strftime("%H:%M:%S")
        level = f"{record.levelname:8}"
        if self.use_color:
            level = f"{self.COLORS.get(record.levelname, '')}{level}{self.RESET}"

        line = f"{clock} {level} {record.name} - {record.getMessage()}"

        fields = context_fields(record)
        if fields:
            line += " | " + ", ".join(f"{k}={v}" for k, v in fields.items())

        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


def configure_logging(
    level: str = "INFO",
    json_format: bool = False,
    service_name: str = "fxjournal",
    environment: str = "development",
    log_file: Optional[str] = None,
    quiet_loggers: Iterable[str] = QUIET_LOGGERS,
) -> None:
    """
    Configure the root logger.

    Console output goes to stderr; stdout is reserved for report output.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_format: Use JSON structured logging on the console
        service_name: Service name for structured logs
        environment: Environment name for structured logs
        log_file: Optional file path; the file always gets JSON lines
        quiet_loggers: Third-party loggers raised to WARNING
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(level.upper())
    root_logger.handlers.clear()

    if json_format:
        formatter: logging.Formatter = StructuredFormatter(service_name, environment)
    else:
        formatter = ConsoleFormatter(use_color=sys.stderr.isatty())

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(StructuredFormatter(service_name, environment))
        root_logger.addHandler(file_handler)

    for name in quiet_loggers:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Logger for a module, normally called with ``__name__``."""
    return logging.getLogger(name)


def log_with_context(logger: logging.Logger, level: int, message: str, **context: Any) -> None:
    """
    Log a message with additional context fields.

    Args:
        logger: Logger instance
        level: Log level (logging.INFO, etc.)
        message: Log message
        **context: Fields rendered by the formatters
    """
    logger.log(level, message, extra={f"{CONTEXT_PREFIX}{k}": v for k, v in context.items()})


# =============================================================================
# Performance Logging Decorator
# =============================================================================

T = TypeVar("T")


def log_performance(threshold_ms: float = 250.0) -> Callable:
    """
    Decorator to log how long a function takes.

    Calls slower than ``threshold_ms`` are logged as warnings, the rest at
    debug level. Exceptions are logged and re-raised.

    Example:
        @log_performance(threshold_ms=100)
        def analyze(self, trades, accounts, criteria):
            ...
    """

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        logger = logging.getLogger(func.__module__)

        @wraps(func)
        def wrapper(*args, **kwargs) -> T:
            started = time.perf_counter()
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                elapsed_ms = (time.perf_counter() - started) * 1000
                logger.error(
                    f"Operation failed: {func.__name__} - {e}",
                    extra={
                        "ctx_function": func.__name__,
                        "ctx_duration_ms": round(elapsed_ms, 2),
                        "ctx_error_type": type(e).__name__,
                    },
                    exc_info=True,
                )
                raise

            elapsed_ms = (time.perf_counter() - started) * 1000
            if elapsed_ms > threshold_ms:
                level, message = logging.WARNING, f"Slow operation: {func.__name__} took {elapsed_ms:.2f}ms"
            else:
                level, message = logging.DEBUG, f"Operation completed: {func.__name__} in {elapsed_ms:.2f}ms"
            log_with_context(
                logger,
                level,
                message,
                function=func.__name__,
                duration_ms=round(elapsed_ms, 2),
            )
            return result

        return wrapper

    return decorator


# =============================================================================
# Journal Event Logging
# =============================================================================


class JournalEventLogger:
    """Structured INFO events for the journal's boundary operations."""

    def __init__(self, logger_name: str = "fxjournal.events"):
        self.logger = logging.getLogger(logger_name)

    def log_import(self, source: str, file_format: str, trades: int) -> None:
        """Trades read from a spreadsheet or JSON file."""
        log_with_context(
            self.logger,
            logging.INFO,
            f"Imported {trades} trades from {source}",
            event="trades_imported",
            source=source,
            format=file_format,
            trades=trades,
        )

    def log_export(self, destination: str, file_format: str, trades: int) -> None:
        """Trades written to a spreadsheet."""
        log_with_context(
            self.logger,
            logging.INFO,
            f"Exported {trades} trades to {destination}",
            event="trades_exported",
            destination=destination,
            format=file_format,
            trades=trades,
        )

    def log_report(self, total: int, filtered: int, active_filters: int) -> None:
        """Analytics report built for a trade snapshot."""
        log_with_context(
            self.logger,
            logging.INFO,
            f"Analyzed {total} trades ({filtered} after filters, {active_filters} active)",
            event="report_generated",
            total=total,
            filtered=filtered,
            active_filters=active_filters,
        )


journal_events = JournalEventLogger()
