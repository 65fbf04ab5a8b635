"""
fxjournal - Forex trading journal analytics.

Filters, summarizes and risk-scores trade journals held in memory, with
spreadsheet import/export at the boundary.
"""

from .analytics.engine import AnalyticsEngine, JournalReport
from .analytics.risk_metrics import RiskMetrics, compute_risk_metrics
from .analytics.summary import AnalyticsSummary, compute_analytics
from .journal.filters import apply_filters, paginate, sort_chronological, sort_for_display
from .journal.models import Account, FilterCriteria, Trade

__version__ = "0.1.0"

__all__ = [
    "AnalyticsEngine",
    "JournalReport",
    "AnalyticsSummary",
    "RiskMetrics",
    "compute_analytics",
    "compute_risk_metrics",
    "apply_filters",
    "sort_for_display",
    "sort_chronological",
    "paginate",
    "Trade",
    "Account",
    "FilterCriteria",
]
