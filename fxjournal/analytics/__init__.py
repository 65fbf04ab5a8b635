"""
Analytics Module

Summary analytics, time-based breakdowns and risk metrics over filtered
trade sets, composed by AnalyticsEngine.
"""

from .breakdowns import (
    DURATION_RANGES,
    TRADING_SESSIONS,
    DrawdownPoint,
    DurationBucket,
    HourBucket,
    MonthBucket,
    SessionBucket,
    TradingSession,
    WeekdayBucket,
    drawdown_series,
    duration_analysis,
    monthly_calendar,
    session_analysis,
    time_of_day_analysis,
    weekday_analysis,
)
from .engine import AnalyticsEngine, JournalReport
from .risk_metrics import RiskMetrics, StreakType, compute_risk_metrics
from .summary import (
    NOT_APPLICABLE,
    AnalyticsSummary,
    DailyPnL,
    PairPerformance,
    PieSlice,
    compute_analytics,
)

__all__ = [
    # Engine
    "AnalyticsEngine",
    "JournalReport",
    # Summary
    "compute_analytics",
    "AnalyticsSummary",
    "PairPerformance",
    "PieSlice",
    "DailyPnL",
    "NOT_APPLICABLE",
    # Breakdowns
    "time_of_day_analysis",
    "weekday_analysis",
    "session_analysis",
    "monthly_calendar",
    "drawdown_series",
    "duration_analysis",
    "HourBucket",
    "WeekdayBucket",
    "SessionBucket",
    "MonthBucket",
    "DurationBucket",
    "DrawdownPoint",
    "TradingSession",
    "TRADING_SESSIONS",
    "DURATION_RANGES",
    # Risk
    "compute_risk_metrics",
    "RiskMetrics",
    "StreakType",
]
