"""
Journal Models Module

Data models for trades, accounts and filter criteria. The analytics
engine reads these and never mutates them.
"""

import math
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple, Union

TradeId = Union[int, str]

ALL_ACCOUNTS = "all"

NUMERIC_ID = re.compile(r"[+-]?(\d+(\.\d*)?|\.\d+)")


class TradeType:
    """Trade direction values."""

    BUY = "buy"
    SELL = "sell"

    ALL = (BUY, SELL)


class Outcome:
    """Trade outcome classification by realized P&L sign."""

    WIN = "win"
    LOSS = "loss"
    BREAKEVEN = "breakeven"


def coerce_pnl(value: Any) -> float:
    """Resolve a missing or non-numeric P&L to 0.0."""
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        pnl = float(value)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(pnl) or math.isinf(pnl):
        return 0.0
    return pnl


def parse_clock(value: Optional[str]) -> Optional[Tuple[int, int]]:
    """
    Parse an ``HH:MM`` (or ``HH:MM:SS``) wall-clock string.

    Returns:
        (hour, minute) tuple, or None when the value is missing or malformed
    """
    if not value or not isinstance(value, str):
        return None
    parts = value.strip().split(":")
    try:
        hour = int(parts[0])
        minute = int(parts[1]) if len(parts) > 1 and parts[1] else 0
    except ValueError:
        return None
    return hour, minute


def id_sort_key(trade_id: Optional[TradeId]) -> Tuple[int, float, str]:
    """
    Total ordering key for trade ids.

    Numeric ids (ints, floats or plain decimal strings such as ``"12"`` or
    ``"-3.5"``) order numerically, ties broken by their text, and sort
    before every other id, which orders lexically. NaN, ``"nan"``,
    ``"1_000"`` and padded strings are not numeric.
    """
    if trade_id is None:
        return (2, 0.0, "")
    text = str(trade_id)
    if isinstance(trade_id, bool):
        number = None
    elif isinstance(trade_id, (int, float)):
        number = trade_id
    else:
        number = text if NUMERIC_ID.fullmatch(text) else None

    if number is not None:
        try:
            value = float(number)
        except OverflowError:
            value = math.inf
        if not math.isnan(value):
            return (0, value, text)
    return (1, 0.0, text)


@dataclass
class Trade:
    """A single closed trade in the journal."""

    id: TradeId
    date: str  # ISO YYYY-MM-DD
    pair: str
    type: str
    size: float = 0.0
    entry_price: float = 0.0
    exit_price: float = 0.0
    pnl: float = 0.0
    account: Optional[TradeId] = None
    time: Optional[str] = None  # HH:MM, used for hour/session analysis

    # Holding-period timing (duration buckets only)
    entry_time: Optional[str] = None
    exit_time: Optional[str] = None
    exit_date: Optional[str] = None

    # Journal fields
    notes: str = ""
    tags: List[str] = field(default_factory=list)
    rating: int = 0
    setup_quality: int = 0
    execution_quality: int = 0
    emotions: List[str] = field(default_factory=list)
    screenshot_url: str = ""
    lessons_learned: str = ""

    def __post_init__(self):
        self.pnl = coerce_pnl(self.pnl)

    @property
    def outcome(self) -> str:
        if self.pnl > 0:
            return Outcome.WIN
        if self.pnl < 0:
            return Outcome.LOSS
        return Outcome.BREAKEVEN

    @property
    def month(self) -> str:
        """``YYYY-MM`` bucket key."""
        return self.date[:7]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "date": self.date,
            "time": self.time,
            "pair": self.pair,
            "type": self.type,
            "size": self.size,
            "entryPrice": self.entry_price,
            "exitPrice": self.exit_price,
            "pnl": round(self.pnl, 2),
            "account": self.account,
            "entryTime": self.entry_time,
            "exitTime": self.exit_time,
            "exitDate": self.exit_date,
            "notes": self.notes,
            "tags": list(self.tags),
            "rating": self.rating,
            "setupQuality": self.setup_quality,
            "executionQuality": self.execution_quality,
            "emotions": list(self.emotions),
            "screenshotUrl": self.screenshot_url,
            "lessonsLearned": self.lessons_learned,
        }


@dataclass
class Account:
    """Trading account. Balance is supplied, never derived from trades."""

    id: TradeId
    name: str
    broker: str = ""
    balance: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "broker": self.broker,
            "balance": round(self.balance, 2),
        }


@dataclass
class FilterCriteria:
    """
    Trade filter parameters.

    None or an empty string leaves a filter unset. P&L bounds accept numbers
    or numeric strings.
    """

    account_id: Optional[TradeId] = ALL_ACCOUNTS
    date_from: Optional[str] = None
    date_to: Optional[str] = None
    pair: Optional[str] = None
    type: Optional[str] = None
    min_pnl: Optional[Union[float, str]] = None
    max_pnl: Optional[Union[float, str]] = None
    search_term: Optional[str] = None

    # Journal view only
    has_notes: bool = False
    has_rating: bool = False

    def active_filter_count(self) -> int:
        """Number of filters that are set (the account scope is not counted)."""
        values = [
            self.date_from,
            self.date_to,
            self.pair,
            self.type,
            self.min_pnl,
            self.max_pnl,
            self.search_term,
        ]
        count = sum(1 for v in values if v is not None and v != "")
        return count + int(self.has_notes) + int(self.has_rating)
