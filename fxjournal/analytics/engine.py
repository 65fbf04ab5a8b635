"""
Analytics Engine Module

AnalyticsEngine composes the filter, summary and risk stages into one
report for a trade snapshot. It holds only its settings, so every call
recomputes from the trades passed in.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

from ..config.logging import journal_events, log_performance
from ..config.settings import JournalSettings, get_settings, load_settings
from ..journal.filters import PageResult, apply_filters, paginate, sort_for_display
from ..journal.models import ALL_ACCOUNTS, Account, FilterCriteria, Trade
from .risk_metrics import RiskMetrics, compute_risk_metrics
from .summary import AnalyticsSummary, compute_analytics

logger = logging.getLogger(__name__)


@dataclass
class JournalReport:
    """Filtered working set with one display page, summary and risk metrics."""

    criteria: FilterCriteria
    trades: List[Trade]  # filtered, display order
    page: PageResult
    summary: AnalyticsSummary
    risk: RiskMetrics

    def to_dict(self) -> Dict[str, Any]:
        return {
            "filteredCount": len(self.trades),
            "activeFilters": self.criteria.active_filter_count(),
            "page": self.page.to_dict(),
            "analytics": self.summary.to_dict(),
            "riskMetrics": self.risk.to_dict(),
        }


class AnalyticsEngine:
    """
    Trade journal analytics over in-memory trade snapshots.
    """

    def __init__(
        self,
        settings: Optional[JournalSettings] = None,
        config_path: Optional[Union[str, Path]] = None,
    ):
        """
        Initialize the engine with configuration.

        Args:
            settings: Explicit settings; wins over ``config_path``
            config_path: YAML file overlaid on environment settings
        """
        if settings is None:
            settings = load_settings(config_path) if config_path else get_settings()
        self.settings = settings
        logger.debug("AnalyticsEngine initialized")

    def filter(self, trades: Sequence[Trade], criteria: Optional[FilterCriteria] = None) -> List[Trade]:
        """Filtered trades in display order (newest first)."""
        return sort_for_display(apply_filters(trades, criteria or FilterCriteria()))

    def page(
        self,
        trades: Sequence[Trade],
        page_number: int = 1,
        page_size: Optional[int] = None,
    ) -> PageResult:
        if page_size is None:
            page_size = self.settings.page_size
        return paginate(trades, page_number, page_size)

    def summarize(
        self,
        trades: Sequence[Trade],
        accounts: Sequence[Account],
        selected_account: Any = ALL_ACCOUNTS,
    ) -> AnalyticsSummary:
        return compute_analytics(trades, accounts, selected_account, self.settings)

    def risk(self, trades: Sequence[Trade]) -> RiskMetrics:
        return compute_risk_metrics(trades, self.settings)

    @log_performance(threshold_ms=250.0)
    def analyze(
        self,
        trades: Sequence[Trade],
        accounts: Sequence[Account] = (),
        criteria: Optional[FilterCriteria] = None,
        page_number: int = 1,
        page_size: Optional[int] = None,
    ) -> JournalReport:
        """
        Run the full pipeline for one trade snapshot.

        Args:
            trades: All trades
            accounts: All accounts
            criteria: Filter criteria (no filtering when omitted)
            page_number: 1-based page of the display-sorted result
            page_size: Trades per page (settings default when omitted)

        Returns:
            JournalReport
        """
        criteria = criteria or FilterCriteria()
        filtered = self.filter(trades, criteria)

        report = JournalReport(
            criteria=criteria,
            trades=filtered,
            page=self.page(filtered, page_number, page_size),
            summary=self.summarize(filtered, accounts, criteria.account_id),
            risk=self.risk(filtered),
        )

        journal_events.log_report(len(trades), len(filtered), criteria.active_filter_count())
        return report

    def health_check(self) -> Dict[str, Union[bool, str]]:
        """
        Check that the engine can run on an empty snapshot.

        Returns:
            Dictionary with health status
        """
        report = self.analyze([])
        healthy = report.summary.total_trades == 0 and report.risk.current_streak_type == "none"
        return {"engine": healthy, "status": "operational" if healthy else "degraded"}
