"""
Time-Based Breakdowns

Hour-of-day, weekday, trading-session, monthly and holding-duration
aggregations, the display drawdown curve, and best/worst bucket picks.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional, Sequence, Tuple, TypeVar

import pandas as pd

from ..journal.filters import sort_chronological
from ..journal.models import Trade, parse_clock
from .frame import average, trade_hour, trades_frame, win_rate

logger = logging.getLogger(__name__)

WEEKDAY_NAMES = [
    "Sunday",
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
]


@dataclass(frozen=True)
class TradingSession:
    """A GMT trading session as a half-open hour range."""

    name: str
    start: int
    end: int

    def contains(self, hour: int) -> bool:
        return self.start <= hour < self.end


# Sessions overlap (London/New York share 13:00-16:00); a trade counts in
# every session whose window contains its hour.
TRADING_SESSIONS = (
    TradingSession("Asian", 0, 8),
    TradingSession("London", 8, 16),
    TradingSession("New York", 13, 21),
    TradingSession("Pacific", 21, 24),
)


@dataclass(frozen=True)
class DurationRange:
    """Holding-time bucket in hours; a missing bound is open."""

    label: str
    min_hours: Optional[float] = None
    max_hours: Optional[float] = None

    def contains(self, hours: float) -> bool:
        if self.min_hours is not None and hours < self.min_hours:
            return False
        if self.max_hours is not None and hours >= self.max_hours:
            return False
        return True


DURATION_RANGES = (
    DurationRange("< 1 hour", max_hours=1),
    DurationRange("1-4 hours", min_hours=1, max_hours=4),
    DurationRange("4-24 hours", min_hours=4, max_hours=24),
    DurationRange("1-7 days", min_hours=24, max_hours=168),
    DurationRange("> 7 days", min_hours=168),
)


# =============================================================================
# Bucket Types
# =============================================================================


@dataclass
class HourBucket:
    hour: int
    hour_label: str
    trades: int
    wins: int
    losses: int
    pnl: float
    win_rate: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "hour": self.hour,
            "hourLabel": self.hour_label,
            "trades": self.trades,
            "wins": self.wins,
            "losses": self.losses,
            "pnl": self.pnl,
            "winRate": self.win_rate,
        }


@dataclass
class WeekdayBucket:
    day_index: int  # Sunday=0
    day: str
    trades: int
    wins: int
    losses: int
    pnl: float
    win_rate: float
    avg_pnl: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "dayIndex": self.day_index,
            "day": self.day,
            "trades": self.trades,
            "wins": self.wins,
            "losses": self.losses,
            "pnl": self.pnl,
            "winRate": self.win_rate,
            "avgPnl": self.avg_pnl,
        }


@dataclass
class SessionBucket:
    name: str
    start: int
    end: int
    trades: int
    wins: int
    losses: int
    pnl: float
    win_rate: float
    avg_pnl: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "start": self.start,
            "end": self.end,
            "trades": self.trades,
            "wins": self.wins,
            "losses": self.losses,
            "pnl": self.pnl,
            "winRate": self.win_rate,
            "avgPnl": self.avg_pnl,
        }


@dataclass
class MonthBucket:
    month: str  # YYYY-MM
    month_label: str
    pnl: float
    trades: int
    wins: int
    win_rate: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "month": self.month,
            "monthLabel": self.month_label,
            "pnl": self.pnl,
            "trades": self.trades,
            "wins": self.wins,
            "winRate": self.win_rate,
        }


@dataclass
class DurationBucket:
    label: str
    trades: int
    wins: int
    pnl: float
    win_rate: float
    avg_pnl: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "label": self.label,
            "trades": self.trades,
            "wins": self.wins,
            "pnl": self.pnl,
            "winRate": self.win_rate,
            "avgPnl": self.avg_pnl,
        }


@dataclass
class DrawdownPoint:
    """Equity curve point; ``drawdown`` is equity minus peak, never positive."""

    date: str
    equity: float
    drawdown: float
    drawdown_percent: float
    peak: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date": self.date,
            "equity": self.equity,
            "drawdown": self.drawdown,
            "drawdownPercent": self.drawdown_percent,
            "peak": self.peak,
        }


# =============================================================================
# Aggregations
# =============================================================================


def _aggregate(frame: pd.DataFrame, key: str) -> Dict[Any, Tuple[int, int, int, float]]:
    """Group by ``key`` into {key: (trades, wins, losses, pnl)}."""
    frame = frame.dropna(subset=[key])
    if frame.empty:
        return {}

    frame = frame.assign(**{key: frame[key].astype(int)})
    grouped = frame.groupby(key, sort=False).agg(
        trades=("pnl", "size"),
        wins=("win", "sum"),
        losses=("loss", "sum"),
        pnl=("pnl", "sum"),
    )
    return {
        int(row.Index): (int(row.trades), int(row.wins), int(row.losses), float(row.pnl))
        for row in grouped.itertuples()
    }


def time_of_day_analysis(trades: Sequence[Trade]) -> List[HourBucket]:
    """
    Per-hour statistics for all 24 hours of the day.

    Trades without a usable ``time`` are not counted.
    """
    stats = _aggregate(trades_frame(trades), "hour")

    buckets = []
    for hour in range(24):
        count, wins, losses, pnl = stats.get(hour, (0, 0, 0, 0.0))
        buckets.append(
            HourBucket(
                hour=hour,
                hour_label=f"{hour:02d}:00",
                trades=count,
                wins=wins,
                losses=losses,
                pnl=round(pnl, 2),
                win_rate=win_rate(wins, count),
            )
        )
    return buckets


def weekday_analysis(trades: Sequence[Trade]) -> List[WeekdayBucket]:
    """Per-weekday statistics, Sunday first."""
    stats = _aggregate(trades_frame(trades), "weekday")

    buckets = []
    for index, name in enumerate(WEEKDAY_NAMES):
        count, wins, losses, pnl = stats.get(index, (0, 0, 0, 0.0))
        buckets.append(
            WeekdayBucket(
                day_index=index,
                day=name,
                trades=count,
                wins=wins,
                losses=losses,
                pnl=round(pnl, 2),
                win_rate=win_rate(wins, count),
                avg_pnl=average(pnl, count),
            )
        )
    return buckets


def session_analysis(
    trades: Sequence[Trade],
    sessions: Sequence[TradingSession] = TRADING_SESSIONS,
) -> List[SessionBucket]:
    """
    Per-session statistics, for sessions with at least one trade.

    A trade is counted in every session containing its hour.
    """
    totals = {s.name: [0, 0, 0, 0.0] for s in sessions}

    for trade in trades:
        hour = trade_hour(trade)
        if hour is None:
            continue
        for session in sessions:
            if session.contains(hour):
                bucket = totals[session.name]
                bucket[0] += 1
                bucket[3] += trade.pnl
                if trade.pnl > 0:
                    bucket[1] += 1
                elif trade.pnl < 0:
                    bucket[2] += 1

    result = []
    for session in sessions:
        count, wins, losses, pnl = totals[session.name]
        if count == 0:
            continue
        result.append(
            SessionBucket(
                name=session.name,
                start=session.start,
                end=session.end,
                trades=count,
                wins=wins,
                losses=losses,
                pnl=round(pnl, 2),
                win_rate=win_rate(wins, count),
                avg_pnl=average(pnl, count),
            )
        )
    return result


def _month_label(month: str) -> str:
    try:
        return datetime.strptime(month, "%Y-%m").strftime("%b %Y")
    except ValueError:
        return month


def monthly_calendar(trades: Sequence[Trade]) -> List[MonthBucket]:
    """P&L calendar keyed by the ``YYYY-MM`` prefix of each trade date."""
    frame = trades_frame(trades)
    if frame.empty:
        return []

    grouped = frame.groupby("month", sort=True).agg(
        pnl=("pnl", "sum"),
        trades=("pnl", "size"),
        wins=("win", "sum"),
    )
    return [
        MonthBucket(
            month=str(row.Index),
            month_label=_month_label(str(row.Index)),
            pnl=round(float(row.pnl), 2),
            trades=int(row.trades),
            wins=int(row.wins),
            win_rate=win_rate(int(row.wins), int(row.trades)),
        )
        for row in grouped.itertuples()
    ]


def drawdown_series(trades: Sequence[Trade]) -> Tuple[List[DrawdownPoint], Optional[DrawdownPoint]]:
    """
    Equity curve with drawdown from the running peak.

    The peak starts at zero, so an account that only loses is measured
    against breakeven. ``drawdown_percent`` is 0 while the peak is not
    positive.

    Returns:
        (points, max_drawdown_point); the latter is the first point with the
        most negative drawdown, or None if equity never fell below its peak
    """
    points = []
    equity = 0.0
    peak = 0.0

    for trade in sort_chronological(trades):
        equity += trade.pnl
        if equity > peak:
            peak = equity
        drawdown = equity - peak
        drawdown_percent = drawdown / peak * 100 if peak > 0 else 0.0

        points.append(
            DrawdownPoint(
                date=trade.date,
                equity=round(equity, 2),
                drawdown=round(drawdown, 2),
                drawdown_percent=round(drawdown_percent, 2),
                peak=round(peak, 2),
            )
        )

    max_point = None
    for point in points:
        if point.drawdown < (max_point.drawdown if max_point else 0.0):
            max_point = point

    return points, max_point


def trade_duration_hours(trade: Trade) -> Optional[float]:
    """
    Holding time in hours from ``entry_time`` to ``exit_time``.

    The exit falls on ``exit_date`` when present, otherwise on the trade
    date. Returns None when timing data is missing or malformed.
    """
    entry_clock = parse_clock(trade.entry_time)
    exit_clock = parse_clock(trade.exit_time)
    if entry_clock is None or exit_clock is None:
        return None

    try:
        entry_day = datetime.strptime(trade.date, "%Y-%m-%d")
        exit_day = datetime.strptime(trade.exit_date or trade.date, "%Y-%m-%d")
    except ValueError:
        return None

    entry = entry_day + timedelta(hours=entry_clock[0], minutes=entry_clock[1])
    exit_ = exit_day + timedelta(hours=exit_clock[0], minutes=exit_clock[1])
    return (exit_ - entry).total_seconds() / 3600


def duration_analysis(
    trades: Sequence[Trade],
    ranges: Sequence[DurationRange] = DURATION_RANGES,
) -> List[DurationBucket]:
    """
    Holding-time buckets for trades that carry entry and exit times.

    Trades without timing data are left out, and empty buckets are omitted.
    """
    totals = {r.label: [0, 0, 0.0] for r in ranges}
    skipped = 0

    for trade in trades:
        hours = trade_duration_hours(trade)
        if hours is None:
            skipped += 1
            continue
        for duration_range in ranges:
            if duration_range.contains(hours):
                bucket = totals[duration_range.label]
                bucket[0] += 1
                bucket[2] += trade.pnl
                if trade.pnl > 0:
                    bucket[1] += 1

    if skipped:
        logger.debug(f"Duration analysis skipped {skipped} trades without timing data")

    return [
        DurationBucket(
            label=r.label,
            trades=totals[r.label][0],
            wins=totals[r.label][1],
            pnl=round(totals[r.label][2], 2),
            win_rate=win_rate(totals[r.label][1], totals[r.label][0]),
            avg_pnl=average(totals[r.label][2], totals[r.label][0]),
        )
        for r in ranges
        if totals[r.label][0] > 0
    ]


# =============================================================================
# Best / Worst Picks
# =============================================================================

B = TypeVar("B", HourBucket, WeekdayBucket)


def best_bucket(buckets: Sequence[B], min_trades: int = 3) -> Optional[B]:
    """Highest-P&L bucket with at least ``min_trades`` trades, else None."""
    qualifying = [b for b in buckets if b.trades >= min_trades]
    if not qualifying:
        return None
    return max(qualifying, key=lambda b: b.pnl)


def worst_bucket(buckets: Sequence[B], min_trades: int = 3) -> Optional[B]:
    """Lowest-P&L bucket with at least ``min_trades`` trades, else None."""
    qualifying = [b for b in buckets if b.trades >= min_trades]
    if not qualifying:
        return None
    return min(qualifying, key=lambda b: b.pnl)


def bucket_dict(bucket) -> Optional[Dict[str, Any]]:
    """``to_dict`` that passes None through."""
    return bucket.to_dict() if bucket is not None else None
