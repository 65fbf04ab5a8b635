"""
Instrument Categories

Maps free-form pair symbols onto instrument families and summarizes trades
per family for the journal view.
"""

from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Dict, List, Sequence

from .models import Trade

OTHER_CATEGORY = "Other"

# First matching category wins, so majors are checked before minors.
INSTRUMENT_CATEGORIES: "OrderedDict[str, List[str]]" = OrderedDict(
    [
        (
            "Forex Majors",
            ["EUR/USD", "GBP/USD", "USD/JPY", "USD/CHF", "AUD/USD", "USD/CAD", "NZD/USD"],
        ),
        (
            "Forex Minors",
            [
                "EUR/GBP", "EUR/AUD", "EUR/CAD", "EUR/CHF", "GBP/JPY", "GBP/CHF",
                "GBP/AUD", "AUD/JPY", "AUD/NZD", "CAD/JPY", "CHF/JPY", "NZD/JPY",
            ],
        ),
        (
            "Forex Exotics",
            [
                "USD/TRY", "USD/ZAR", "USD/MXN", "USD/SEK", "USD/NOK", "USD/DKK",
                "USD/SGD", "USD/HKD", "USD/THB", "EUR/TRY", "EUR/ZAR", "GBP/ZAR",
            ],
        ),
        (
            "Commodities",
            ["XAU/USD", "XAG/USD", "WTI", "BRENT", "NATGAS", "CRUDE", "OIL", "GOLD", "SILVER"],
        ),
        (
            "Indices",
            [
                "US30", "NAS100", "SPX500", "UK100", "GER40", "FRA40", "JPN225",
                "AUS200", "HK50", "DJIA", "NASDAQ", "S&P500", "DAX", "FTSE", "NIKKEI",
            ],
        ),
        (
            "Metals",
            ["COPPER", "PLATINUM", "PALLADIUM", "XPT/USD", "XPD/USD"],
        ),
    ]
)


def _compact(symbol: str) -> str:
    return symbol.upper().replace("/", "").replace(" ", "")


_COMPACT_CATEGORIES = [
    (category, [_compact(s) for s in symbols])
    for category, symbols in INSTRUMENT_CATEGORIES.items()
]


def get_category(pair: str) -> str:
    """
    Get the instrument category for a pair symbol.

    Matching ignores case, slashes and spaces, and accepts symbols that
    contain a known instrument (``EURUSD.m`` is a major).
    """
    normalized = _compact(pair or "")
    for category, symbols in _COMPACT_CATEGORIES:
        if any(symbol in normalized for symbol in symbols):
            return category
    return OTHER_CATEGORY


@dataclass
class CategoryStats:
    """Per-category trade statistics."""

    total: int
    wins: int
    losses: int
    total_pnl: float
    win_rate: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total": self.total,
            "wins": self.wins,
            "losses": self.losses,
            "totalPnl": self.total_pnl,
            "winRate": self.win_rate,
        }


def group_by_category(trades: Sequence[Trade]) -> Dict[str, List[Trade]]:
    """Group trades by category, in category order, omitting empty categories."""
    grouped: Dict[str, List[Trade]] = {
        name: [] for name in list(INSTRUMENT_CATEGORIES) + [OTHER_CATEGORY]
    }
    for trade in trades:
        grouped[get_category(trade.pair)].append(trade)
    return {name: group for name, group in grouped.items() if group}


def category_stats(trades: Sequence[Trade]) -> Dict[str, CategoryStats]:
    """Summarize trades per instrument category."""
    stats = {}
    for name, group in group_by_category(trades).items():
        wins = sum(1 for t in group if t.pnl > 0)
        losses = sum(1 for t in group if t.pnl < 0)
        stats[name] = CategoryStats(
            total=len(group),
            wins=wins,
            losses=losses,
            total_pnl=round(sum(t.pnl for t in group), 2),
            win_rate=round(wins / len(group) * 100, 1),
        )
    return stats
