"""
fxjournal Validation Module

Pydantic boundary validation for trade, account and filter payloads.
"""

from .models import (
    JournalBaseModel,
    ValidatedAccount,
    ValidatedFilterCriteria,
    ValidatedTrade,
    validate_accounts,
    validate_criteria,
    validate_trade_objects,
    validate_trades,
)

__all__ = [
    "JournalBaseModel",
    "ValidatedTrade",
    "ValidatedAccount",
    "ValidatedFilterCriteria",
    "validate_trades",
    "validate_trade_objects",
    "validate_accounts",
    "validate_criteria",
]
