"""
Configuration Module

Settings and logging setup for fxjournal.
"""

from .logging import (
    JournalEventLogger,
    configure_logging,
    get_logger,
    journal_events,
    log_performance,
    log_with_context,
)
from .settings import JournalSettings, get_settings, load_settings

__all__ = [
    "JournalSettings",
    "get_settings",
    "load_settings",
    "configure_logging",
    "get_logger",
    "log_performance",
    "log_with_context",
    "JournalEventLogger",
    "journal_events",
]
