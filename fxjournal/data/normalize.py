"""
Trade Normalization Module

Maps loosely-typed spreadsheet rows and API/database records onto Trade.
Each target field has a fixed, ordered list of source keys; the first key
holding a non-empty value wins. Spreadsheet columns also pass over zero
cells, so a `PnL` of 0 falls through to a filled `Profit` column. Header
probing is case-sensitive.
"""

import json
import logging
import math
import numbers
import re
from dataclasses import dataclass, replace
from datetime import date as date_type
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from ..journal.models import Trade, TradeType

logger = logging.getLogger(__name__)

UNKNOWN_PAIR = "Unknown"

_MISSING = object()
_NUMBER_PREFIX = re.compile(r"^\s*[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?")


def is_empty(value: Any) -> bool:
    """None, empty strings and NaN cells count as missing."""
    if value is None:
        return True
    if isinstance(value, str):
        return value == ""
    if isinstance(value, float) and math.isnan(value):
        return True
    return False


# =============================================================================
# Value Parsers
# =============================================================================


def parse_float_permissive(value: Any) -> float:
    """
    Parse the leading numeric part of a value.

    ``"12.5 lots"`` gives 12.5; anything without a numeric prefix gives 0.0.
    """
    if is_empty(value) or isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        result = float(value)
    else:
        match = _NUMBER_PREFIX.match(str(value))
        if not match:
            return 0.0
        result = float(match.group(0))
    if math.isnan(result) or math.isinf(result):
        return 0.0
    return result


def parse_int_permissive(value: Any) -> int:
    return int(parse_float_permissive(value))


def parse_text(value: Any) -> str:
    return str(value).strip()


def parse_optional_text(value: Any) -> Optional[str]:
    text = parse_text(value)
    return text or None


def parse_side(value: Any) -> str:
    return parse_text(value).lower()


def parse_date(value: Any) -> str:
    """ISO date from a string, date or spreadsheet timestamp cell."""
    if hasattr(value, "strftime"):
        return value.strftime("%Y-%m-%d")
    return parse_text(value)


def parse_clock_text(value: Any) -> Optional[str]:
    """``HH:MM`` from a string or a spreadsheet time cell."""
    if hasattr(value, "strftime"):
        return value.strftime("%H:%M")
    return parse_optional_text(value)


def parse_id(value: Any) -> Any:
    """Keep integer-like ids as int, everything else as text."""
    if isinstance(value, bool):
        return str(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    text = parse_text(value)
    return int(text) if text.isascii() and text.isdigit() else text


def parse_list(value: Any) -> List[str]:
    """List from a list, a JSON array string or a comma-separated string."""
    if isinstance(value, (list, tuple)):
        return [str(v) for v in value if not is_empty(v)]
    text = parse_text(value)
    if text.startswith("["):
        try:
            decoded = json.loads(text)
        except json.JSONDecodeError:
            logger.debug(f"Could not decode list value {text!r}, splitting on commas")
        else:
            if isinstance(decoded, list):
                return [str(v) for v in decoded if not is_empty(v)]
    return [part.strip() for part in text.split(",") if part.strip()]


# =============================================================================
# Alias Tables
# =============================================================================


@dataclass(frozen=True)
class ColumnAlias:
    """Source keys for one Trade field, in priority order."""

    field: str
    aliases: Tuple[str, ...]
    parser: Callable[[Any], Any]
    default: Any = None
    skip_zero: bool = False

    def _missing(self, value: Any) -> bool:
        if is_empty(value):
            return True
        if self.skip_zero and not isinstance(value, str):
            return isinstance(value, numbers.Number) and value == 0
        return False

    def resolve(self, row: Mapping[str, Any], default: Any = _MISSING) -> Any:
        for key in self.aliases:
            value = row.get(key)
            if not self._missing(value):
                return self.parser(value)
        return self.default if default is _MISSING else default


# Spreadsheet import columns ("date" default is filled in per call)
SPREADSHEET_ALIASES: Tuple[ColumnAlias, ...] = tuple(
    replace(alias, skip_zero=True)
    for alias in (
        ColumnAlias("date", ("Date", "date"), parse_date),
        ColumnAlias("pair", ("Pair", "pair", "Symbol", "symbol"), parse_text, UNKNOWN_PAIR),
        ColumnAlias("type", ("Type", "type", "Side", "side"), parse_side, TradeType.BUY),
        ColumnAlias("size", ("Size", "size", "Lots", "lots"), parse_float_permissive, 0.0),
        ColumnAlias(
            "entry_price",
            ("Entry Price", "entryPrice", "Open", "open"),
            parse_float_permissive,
            0.0,
        ),
        ColumnAlias(
            "exit_price",
            ("Exit Price", "exitPrice", "Close", "close"),
            parse_float_permissive,
            0.0,
        ),
        ColumnAlias("pnl", ("PnL", "pnl", "P&L", "Profit", "profit"), parse_float_permissive, 0.0),
        ColumnAlias("time", ("Time", "time"), parse_clock_text),
    )
)

# API payloads use camelCase, database rows snake_case
RECORD_ALIASES: Tuple[ColumnAlias, ...] = (
    ColumnAlias("id", ("id",), parse_id),
    ColumnAlias("date", ("date",), parse_date, ""),
    ColumnAlias("pair", ("pair", "symbol"), parse_text, UNKNOWN_PAIR),
    ColumnAlias("type", ("type", "side"), parse_side, TradeType.BUY),
    ColumnAlias("size", ("size", "lots"), parse_float_permissive, 0.0),
    ColumnAlias("entry_price", ("entryPrice", "entry_price"), parse_float_permissive, 0.0),
    ColumnAlias("exit_price", ("exitPrice", "exit_price"), parse_float_permissive, 0.0),
    ColumnAlias("pnl", ("pnl", "profit"), parse_float_permissive, 0.0),
    ColumnAlias("account", ("account", "accountId", "account_id"), parse_id),
    ColumnAlias("time", ("time",), parse_clock_text),
    ColumnAlias("entry_time", ("entryTime", "entry_time"), parse_clock_text),
    ColumnAlias("exit_time", ("exitTime", "exit_time"), parse_clock_text),
    ColumnAlias("exit_date", ("exitDate", "exit_date"), parse_date),
    ColumnAlias("notes", ("notes",), parse_text, ""),
    ColumnAlias("tags", ("tags",), parse_list, ()),
    ColumnAlias("rating", ("rating",), parse_int_permissive, 0),
    ColumnAlias("setup_quality", ("setupQuality", "setup_quality"), parse_int_permissive, 0),
    ColumnAlias(
        "execution_quality",
        ("executionQuality", "execution_quality"),
        parse_int_permissive,
        0,
    ),
    ColumnAlias("emotions", ("emotions",), parse_list, ()),
    ColumnAlias("screenshot_url", ("screenshotUrl", "screenshot_url"), parse_text, ""),
    ColumnAlias("lessons_learned", ("lessonsLearned", "lessons_learned"), parse_text, ""),
)


def _resolve_fields(
    row: Mapping[str, Any],
    aliases: Tuple[ColumnAlias, ...],
    defaults: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    defaults = defaults or {}
    fields = {}
    for alias in aliases:
        fields[alias.field] = alias.resolve(row, defaults.get(alias.field, _MISSING))
    for name in ("tags", "emotions"):
        if name in fields:
            fields[name] = list(fields[name])
    return fields


def normalize_row(
    row: Mapping[str, Any],
    account_id: Any = None,
    trade_id: Any = None,
    today: Optional[date_type] = None,
) -> Trade:
    """
    Normalize one imported spreadsheet row to a Trade.

    Args:
        row: Column header to cell value mapping
        account_id: Account the imported trade belongs to
        trade_id: Id assigned to the new trade
        today: Date used when the row has none (defaults to today)

    Returns:
        Trade
    """
    today = today or date_type.today()
    fields = _resolve_fields(row, SPREADSHEET_ALIASES, {"date": today.isoformat()})
    return Trade(id=trade_id, account=account_id, **fields)


def normalize_record(record: Mapping[str, Any]) -> Trade:
    """Normalize an API or database trade record to a Trade."""
    return Trade(**_resolve_fields(record, RECORD_ALIASES))
