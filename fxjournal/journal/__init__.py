"""
Journal Module

Trade, account and filter models, plus the filter/sort/paginate stage
that produces the working set for analytics.
"""

from .categories import CategoryStats, category_stats, get_category, group_by_category
from .filters import (
    PageResult,
    apply_filters,
    paginate,
    sort_chronological,
    sort_for_display,
)
from .models import (
    ALL_ACCOUNTS,
    Account,
    FilterCriteria,
    Outcome,
    Trade,
    TradeType,
)

__all__ = [
    # Models
    "Trade",
    "Account",
    "FilterCriteria",
    "TradeType",
    "Outcome",
    "ALL_ACCOUNTS",
    # Filtering
    "apply_filters",
    "sort_for_display",
    "sort_chronological",
    "paginate",
    "PageResult",
    # Categories
    "get_category",
    "group_by_category",
    "category_stats",
    "CategoryStats",
]
