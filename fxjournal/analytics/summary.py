"""
Summary Analytics Module

Totals, win rate, profit factor, pair performance, daily/cumulative P&L
and the time-based breakdowns for an already filtered trade set.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence, Union

from ..config.settings import JournalSettings, get_settings
from ..journal.categories import CategoryStats, category_stats
from ..journal.models import ALL_ACCOUNTS, Account, Trade
from .breakdowns import (
    DrawdownPoint,
    DurationBucket,
    HourBucket,
    MonthBucket,
    SessionBucket,
    WeekdayBucket,
    best_bucket,
    bucket_dict,
    drawdown_series,
    duration_analysis,
    monthly_calendar,
    session_analysis,
    time_of_day_analysis,
    weekday_analysis,
    worst_bucket,
)
from .frame import trades_frame, win_rate

logger = logging.getLogger(__name__)

# Returned in place of a ratio whose denominator is zero
NOT_APPLICABLE = "N/A"

PROFIT_COLOR = "#10b981"
LOSS_COLOR = "#ef4444"


@dataclass
class PairPerformance:
    """Aggregated results for one instrument symbol."""

    pair: str
    pnl: float
    count: int
    wins: int
    losses: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "pair": self.pair,
            "pnl": self.pnl,
            "count": self.count,
            "wins": self.wins,
            "losses": self.losses,
        }


@dataclass
class PieSlice:
    name: str
    value: float
    color: str

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "value": self.value, "color": self.color}


@dataclass
class DailyPnL:
    """One day of the P&L chart with the running total up to that day."""

    date: str
    label: str
    pnl: float
    cumulative: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date": self.date,
            "label": self.label,
            "pnl": self.pnl,
            "cumulative": self.cumulative,
        }


@dataclass
class AnalyticsSummary:
    """Summary analytics for a filtered trade set."""

    total_pnl: float = 0.0
    total_trades: int = 0
    winning_trades: int = 0
    losing_trades: int = 0
    breakeven_trades: int = 0
    win_rate: float = 0.0
    total_balance: float = 0.0
    avg_win: float = 0.0
    avg_loss: float = 0.0
    profit_factor: Union[float, str] = NOT_APPLICABLE
    pair_performance: List[PairPerformance] = field(default_factory=list)
    top_pairs: List[PairPerformance] = field(default_factory=list)
    pie_data: List[PieSlice] = field(default_factory=list)
    daily_pnl: List[DailyPnL] = field(default_factory=list)
    time_of_day: List[HourBucket] = field(default_factory=list)
    weekday: List[WeekdayBucket] = field(default_factory=list)
    sessions: List[SessionBucket] = field(default_factory=list)
    monthly: List[MonthBucket] = field(default_factory=list)
    drawdown: List[DrawdownPoint] = field(default_factory=list)
    max_drawdown_point: Optional[DrawdownPoint] = None
    duration: List[DurationBucket] = field(default_factory=list)
    best_hour: Optional[HourBucket] = None
    worst_hour: Optional[HourBucket] = None
    best_day: Optional[WeekdayBucket] = None
    worst_day: Optional[WeekdayBucket] = None
    category_stats: Dict[str, CategoryStats] = field(default_factory=dict)

    @property
    def cumulative_pnl(self) -> float:
        """Last value of the cumulative series, 0.0 when there are no trades."""
        return self.daily_pnl[-1].cumulative if self.daily_pnl else 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalPnL": self.total_pnl,
            "totalTrades": self.total_trades,
            "winningTrades": self.winning_trades,
            "losingTrades": self.losing_trades,
            "breakevenTrades": self.breakeven_trades,
            "winRate": self.win_rate,
            "totalBalance": self.total_balance,
            "avgWin": self.avg_win,
            "avgLoss": self.avg_loss,
            "profitFactor": self.profit_factor,
            "pairPerformance": [p.to_dict() for p in self.pair_performance],
            "topPairs": [p.to_dict() for p in self.top_pairs],
            "pieData": [s.to_dict() for s in self.pie_data],
            "chartData": [d.to_dict() for d in self.daily_pnl],
            "timeOfDayData": [b.to_dict() for b in self.time_of_day],
            "dayOfWeekData": [b.to_dict() for b in self.weekday],
            "sessionData": [b.to_dict() for b in self.sessions],
            "monthlyData": [b.to_dict() for b in self.monthly],
            "drawdownData": [p.to_dict() for p in self.drawdown],
            "maxDrawdownPoint": bucket_dict(self.max_drawdown_point),
            "durationData": [b.to_dict() for b in self.duration],
            "bestHour": bucket_dict(self.best_hour),
            "worstHour": bucket_dict(self.worst_hour),
            "bestDay": bucket_dict(self.best_day),
            "worstDay": bucket_dict(self.worst_day),
            "categoryStats": {k: v.to_dict() for k, v in self.category_stats.items()},
        }


def total_balance(
    trades: Sequence[Trade], accounts: Sequence[Account], selected_account: Any = ALL_ACCOUNTS
) -> float:
    """
    Balance shown beside the filtered set.

    Zero when there are no trades; the sum of every account balance for
    ``"all"``; otherwise the selected account's balance, or zero if unknown.
    """
    if not trades:
        return 0.0
    if selected_account is None or str(selected_account) == ALL_ACCOUNTS:
        return round(sum(a.balance for a in accounts), 2)
    for account in accounts:
        if str(account.id) == str(selected_account):
            return round(account.balance, 2)
    return 0.0


def pair_performance(trades: Sequence[Trade]) -> List[PairPerformance]:
    """Per-pair totals sorted by P&L descending; ties keep first appearance."""
    frame = trades_frame(trades)
    if frame.empty:
        return []

    grouped = frame.groupby("pair", sort=False).agg(
        pnl=("pnl", "sum"),
        count=("pnl", "size"),
        wins=("win", "sum"),
        losses=("loss", "sum"),
    )
    grouped = grouped.sort_values("pnl", ascending=False, kind="stable")

    return [
        PairPerformance(
            pair=str(pair),
            pnl=round(float(row["pnl"]), 2),
            count=int(row["count"]),
            wins=int(row["wins"]),
            losses=int(row["losses"]),
        )
        for pair, row in grouped.iterrows()
    ]


def pie_slices(pairs: Sequence[PairPerformance]) -> List[PieSlice]:
    return [
        PieSlice(
            name=p.pair,
            value=abs(p.pnl),
            color=PROFIT_COLOR if p.pnl >= 0 else LOSS_COLOR,
        )
        for p in pairs
    ]


def _day_label(date: str) -> str:
    try:
        day = datetime.strptime(date, "%Y-%m-%d")
    except ValueError:
        return date
    return f"{day.strftime('%b')} {day.day}"


def daily_pnl(trades: Sequence[Trade]) -> List[DailyPnL]:
    """
    Daily P&L in ascending date order with a running cumulative total.

    The running total accumulates unrounded daily sums, so its last value
    matches the total P&L of the same trades.
    """
    frame = trades_frame(trades)
    if frame.empty:
        return []

    daily = frame.groupby("date", sort=True)["pnl"].sum()
    cumulative = daily.cumsum()

    return [
        DailyPnL(
            date=str(date),
            label=_day_label(str(date)),
            pnl=round(float(pnl), 2),
            cumulative=round(float(cumulative[date]), 2),
        )
        for date, pnl in daily.items()
    ]


def compute_analytics(
    trades: Sequence[Trade],
    accounts: Sequence[Account],
    selected_account: Any = ALL_ACCOUNTS,
    settings: Optional[JournalSettings] = None,
) -> AnalyticsSummary:
    """
    Compute summary analytics for an already filtered trade set.

    Never raises for degenerate input: empty sets and zero denominators
    resolve to 0, ``"N/A"`` or None.

    Args:
        trades: Filtered trades
        accounts: All known accounts
        selected_account: ``"all"`` or the account id in the filter
        settings: Journal settings (defaults from the environment)

    Returns:
        AnalyticsSummary
    """
    settings = settings or get_settings()

    if not trades:
        return AnalyticsSummary(
            time_of_day=time_of_day_analysis([]),
            weekday=weekday_analysis([]),
        )

    winners = [t.pnl for t in trades if t.pnl > 0]
    losers = [t.pnl for t in trades if t.pnl < 0]
    total = len(trades)
    breakeven = total - len(winners) - len(losers)

    avg_win = sum(winners) / len(winners) if winners else 0.0
    avg_loss = abs(sum(losers) / len(losers)) if losers else 0.0
    profit_factor: Union[float, str] = (
        round(avg_win / avg_loss, 2) if avg_loss > 0 else NOT_APPLICABLE
    )

    pairs = pair_performance(trades)
    top_pairs = pairs[: settings.top_pairs_limit]

    hours = time_of_day_analysis(trades)
    days = weekday_analysis(trades)
    drawdown, max_point = drawdown_series(trades)
    min_trades = settings.min_trades_for_significance

    summary = AnalyticsSummary(
        total_pnl=round(sum(t.pnl for t in trades), 2),
        total_trades=total,
        winning_trades=len(winners),
        losing_trades=len(losers),
        breakeven_trades=breakeven,
        win_rate=win_rate(len(winners), total),
        total_balance=total_balance(trades, accounts, selected_account),
        avg_win=round(avg_win, 2),
        avg_loss=round(avg_loss, 2),
        profit_factor=profit_factor,
        pair_performance=pairs,
        top_pairs=top_pairs,
        pie_data=pie_slices(top_pairs),
        daily_pnl=daily_pnl(trades),
        time_of_day=hours,
        weekday=days,
        sessions=session_analysis(trades),
        monthly=monthly_calendar(trades),
        drawdown=drawdown,
        max_drawdown_point=max_point,
        duration=duration_analysis(trades),
        best_hour=best_bucket(hours, min_trades),
        worst_hour=worst_bucket(hours, min_trades),
        best_day=best_bucket(days, min_trades),
        worst_day=worst_bucket(days, min_trades),
        category_stats=category_stats(trades),
    )

    logger.debug(
        f"Analytics over {total} trades: {len(pairs)} pairs, "
        f"{len(summary.daily_pnl)} days, win rate {summary.win_rate}%"
    )
    return summary
