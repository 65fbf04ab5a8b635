"""
Trade Filtering Module

Filter predicates, display/chronological sort orders and pagination over
trade lists. All functions are pure and return new lists.
"""

import logging
import math
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

from .models import ALL_ACCOUNTS, FilterCriteria, Trade, id_sort_key, parse_clock

logger = logging.getLogger(__name__)


@dataclass
class PageResult:
    """One page of a trade list."""

    items: List[Trade]
    page_number: int
    page_size: int
    total_items: int
    total_pages: int

    @property
    def has_next(self) -> bool:
        return self.page_number < self.total_pages

    @property
    def has_previous(self) -> bool:
        return self.page_number > 1

    def to_dict(self) -> Dict[str, Any]:
        return {
            "items": [t.to_dict() for t in self.items],
            "page": self.page_number,
            "pageSize": self.page_size,
            "total": self.total_items,
            "totalPages": self.total_pages,
            "hasNext": self.has_next,
            "hasPrevious": self.has_previous,
        }


def _is_set(value: Any) -> bool:
    return value is not None and value != ""


def _parse_bound(value: Any) -> Optional[float]:
    """Parse a P&L bound; unset or unparseable bounds are ignored."""
    if not _is_set(value):
        return None
    try:
        bound = float(value)
    except (TypeError, ValueError):
        logger.debug(f"Ignoring non-numeric P&L bound {value!r}")
        return None
    if math.isnan(bound):
        return None
    return bound


def apply_filters(trades: Sequence[Trade], criteria: FilterCriteria) -> List[Trade]:
    """
    Filter trades by the given criteria.

    Predicates are ANDed in a fixed order and each one is skipped when its
    criterion is unset. Input order is preserved.

    Args:
        trades: Trades to filter
        criteria: Filter parameters

    Returns:
        New list with the matching trades
    """
    filtered = list(trades)

    if _is_set(criteria.account_id) and str(criteria.account_id) != ALL_ACCOUNTS:
        account = str(criteria.account_id)
        filtered = [t for t in filtered if t.account is not None and str(t.account) == account]

    if _is_set(criteria.date_from):
        filtered = [t for t in filtered if t.date >= criteria.date_from]
    if _is_set(criteria.date_to):
        filtered = [t for t in filtered if t.date <= criteria.date_to]

    if _is_set(criteria.pair):
        pair = criteria.pair.lower()
        filtered = [t for t in filtered if pair in t.pair.lower()]

    if _is_set(criteria.type):
        filtered = [t for t in filtered if t.type == criteria.type]

    min_pnl = _parse_bound(criteria.min_pnl)
    if min_pnl is not None:
        filtered = [t for t in filtered if t.pnl >= min_pnl]
    max_pnl = _parse_bound(criteria.max_pnl)
    if max_pnl is not None:
        filtered = [t for t in filtered if t.pnl <= max_pnl]

    if _is_set(criteria.search_term):
        term = criteria.search_term.lower()
        filtered = [
            t
            for t in filtered
            if term in t.pair.lower() or term in t.date.lower() or term in t.type.lower()
        ]

    if criteria.has_notes:
        filtered = [t for t in filtered if t.notes]
    if criteria.has_rating:
        filtered = [t for t in filtered if t.rating]

    logger.debug(f"Filtered {len(trades)} trades down to {len(filtered)}")
    return filtered


def sort_for_display(trades: Sequence[Trade]) -> List[Trade]:
    """Most recent first: date descending, then id descending."""
    return sorted(trades, key=lambda t: (t.date, id_sort_key(t.id)), reverse=True)


def chronological_key(trade: Trade):
    clock = parse_clock(trade.time) or (0, 0)
    return (trade.date, clock, id_sort_key(trade.id))


def sort_chronological(trades: Sequence[Trade]) -> List[Trade]:
    """Oldest first: date, then time (00:00 when absent), then id ascending."""
    return sorted(trades, key=chronological_key)


def paginate(trades: Sequence[Trade], page_number: int = 1, page_size: int = 50) -> PageResult:
    """
    Slice one page out of an already sorted trade list.

    ``page_size`` below 1 is clamped to 1 and ``page_number`` is clamped to
    ``[1, total_pages]``. An empty list has a single empty page.

    Args:
        trades: Sorted trades
        page_number: 1-based page number
        page_size: Trades per page

    Returns:
        PageResult for the requested page
    """
    if page_size < 1:
        logger.warning(f"Clamping page size {page_size} to 1")
        page_size = 1

    total_items = len(trades)
    total_pages = max(1, math.ceil(total_items / page_size))
    page_number = min(max(page_number, 1), total_pages)

    start = (page_number - 1) * page_size
    return PageResult(
        items=list(trades[start:start + page_size]),
        page_number=page_number,
        page_size=page_size,
        total_items=total_items,
        total_pages=total_pages,
    )
