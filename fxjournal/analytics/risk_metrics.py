"""
Risk Metrics Module

Equity-curve drawdown, Sharpe/Sortino/Calmar ratios, streaks, expectancy,
historical Value at Risk and monthly profitability for a trade set. Every
metric is computed over the chronologically sorted trades.
"""

import logging
import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence, Tuple

import numpy as np

from ..config.settings import JournalSettings, get_settings
from ..journal.filters import sort_chronological
from ..journal.models import Trade

logger = logging.getLogger(__name__)


class StreakType:
    WIN = "win"
    LOSS = "loss"
    NONE = "none"


@dataclass
class RiskDrawdownPoint:
    """Drawdown chart point; both values are plotted as non-positive."""

    date: str
    drawdown: float
    drawdown_percent: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date": self.date,
            "drawdown": self.drawdown,
            "drawdownPercent": self.drawdown_percent,
        }


@dataclass
class RRPoint:
    """Per-trade realized result for the risk/reward distribution chart."""

    date: str
    rr: float
    type: str  # Win, Loss or Breakeven

    def to_dict(self) -> Dict[str, Any]:
        return {"date": self.date, "rr": self.rr, "type": self.type}


@dataclass
class RiskMetrics:
    """Risk metrics for a trade set."""

    max_drawdown: float = 0.0
    max_drawdown_percent: float = 0.0
    sharpe_ratio: float = 0.0
    sortino_ratio: float = 0.0
    calmar_ratio: float = 0.0
    recovery_factor: float = 0.0
    volatility: float = 0.0
    value_at_risk: float = 0.0
    mae: float = 0.0  # Worst losing trade P&L
    mfe: float = 0.0  # Best winning trade P&L
    avg_risk_reward: float = 0.0
    expectancy: float = 0.0
    longest_win_streak: int = 0
    longest_lose_streak: int = 0
    current_streak: int = 0
    current_streak_type: str = StreakType.NONE
    avg_trade_duration: float = 0.0  # Days between first and last trade per trade
    best_trade: Optional[Trade] = None
    worst_trade: Optional[Trade] = None
    profitable_months: int = 0
    total_months: int = 0
    drawdown_data: List[RiskDrawdownPoint] = field(default_factory=list)
    rr_distribution: List[RRPoint] = field(default_factory=list)

    @classmethod
    def empty(cls) -> "RiskMetrics":
        """Neutral metrics for an empty trade set."""
        return cls()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "maxDrawdown": self.max_drawdown,
            "maxDrawdownPercent": self.max_drawdown_percent,
            "sharpeRatio": self.sharpe_ratio,
            "sortinoRatio": self.sortino_ratio,
            "calmarRatio": self.calmar_ratio,
            "recoveryFactor": self.recovery_factor,
            "volatility": self.volatility,
            "valueAtRisk": self.value_at_risk,
            "mae": self.mae,
            "mfe": self.mfe,
            "avgRiskReward": self.avg_risk_reward,
            "expectancy": self.expectancy,
            "longestWinStreak": self.longest_win_streak,
            "longestLoseStreak": self.longest_lose_streak,
            "currentStreak": self.current_streak,
            "currentStreakType": self.current_streak_type,
            "avgTradeDuration": self.avg_trade_duration,
            "bestTrade": self.best_trade.to_dict() if self.best_trade else None,
            "worstTrade": self.worst_trade.to_dict() if self.worst_trade else None,
            "profitableMonths": self.profitable_months,
            "totalMonths": self.total_months,
            "drawdownData": [p.to_dict() for p in self.drawdown_data],
            "rrDistribution": [p.to_dict() for p in self.rr_distribution],
        }


# =============================================================================
# Ratio Helpers
# =============================================================================


def calculate_equity_curve(pnls: Sequence[float]) -> np.ndarray:
    """Running account equity starting from zero."""
    return np.cumsum(np.asarray(pnls, dtype=float))


def calculate_drawdowns(equity: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """
    Drawdown from the running peak for an equity curve.

    The peak starts at zero. Drawdowns are positive amounts; percentages are
    relative to ``|peak|`` and 0 while the peak is zero.

    Returns:
        (drawdown, drawdown_percent) arrays
    """
    if equity.size == 0:
        return np.array([]), np.array([])

    peaks = np.maximum.accumulate(np.maximum(equity, 0.0))
    drawdown = peaks - equity
    drawdown_percent = np.divide(
        drawdown * 100,
        np.abs(peaks),
        out=np.zeros_like(drawdown),
        where=peaks != 0,
    )
    return drawdown, drawdown_percent


def calculate_returns_from_equity(equity: np.ndarray) -> np.ndarray:
    """Per-step returns; the first return is the first equity value."""
    return np.diff(equity, prepend=0.0)


def calculate_volatility(returns: np.ndarray) -> float:
    """Population standard deviation of returns."""
    if returns.size == 0:
        return 0.0
    return float(np.std(returns))


def calculate_sharpe_ratio(returns: np.ndarray) -> float:
    """Mean return over volatility with a zero risk-free rate."""
    volatility = calculate_volatility(returns)
    if volatility == 0:
        return 0.0
    return float(np.mean(returns)) / volatility


def calculate_sortino_ratio(returns: np.ndarray) -> float:
    """Mean return over the root mean square of the negative returns."""
    negative = returns[returns < 0]
    if negative.size == 0:
        return 0.0
    downside_deviation = math.sqrt(float(np.mean(negative ** 2)))
    if downside_deviation == 0:
        return 0.0
    return float(np.mean(returns)) / downside_deviation


def calculate_calmar_ratio(total_return: float, max_drawdown: float) -> float:
    if max_drawdown == 0:
        return 0.0
    return total_return / max_drawdown


def calculate_var_historical(returns: np.ndarray, confidence: float = 0.95) -> float:
    """
    Historical-simulation VaR: the sorted return at ``floor((1 - c) * N)``.

    Returns the (signed) return itself, 0 when the index is out of range.
    """
    if returns.size == 0:
        return 0.0
    sorted_returns = np.sort(returns)
    # round() keeps 1 - 0.95 from landing just under 0.05
    index = math.floor(round(1 - confidence, 10) * sorted_returns.size)
    if index >= sorted_returns.size:
        return 0.0
    return float(sorted_returns[index])


def calculate_streaks(pnls: Sequence[float]) -> Tuple[int, int, int, str]:
    """
    Longest win/lose streaks and the current streak.

    A breakeven trade ends both running streaks. The current streak counts
    backward from the last trade while results keep its sign.

    Returns:
        (longest_win, longest_lose, current, current_type)
    """
    longest_win = longest_lose = 0
    run_win = run_lose = 0

    for pnl in pnls:
        if pnl > 0:
            run_win += 1
            run_lose = 0
            longest_win = max(longest_win, run_win)
        elif pnl < 0:
            run_lose += 1
            run_win = 0
            longest_lose = max(longest_lose, run_lose)
        else:
            run_win = run_lose = 0

    current = 0
    current_type = StreakType.NONE
    if pnls:
        last = pnls[-1]
        if last != 0:
            current_type = StreakType.WIN if last > 0 else StreakType.LOSS
            for pnl in reversed(pnls):
                if (pnl > 0) != (last > 0) or pnl == 0:
                    break
                current += 1

    return longest_win, longest_lose, current, current_type


def _days_between(first: str, last: str) -> float:
    try:
        start = datetime.strptime(first, "%Y-%m-%d")
        end = datetime.strptime(last, "%Y-%m-%d")
    except ValueError:
        return 0.0
    return (end - start).total_seconds() / 86400


def _outcome_label(pnl: float) -> str:
    if pnl > 0:
        return "Win"
    if pnl < 0:
        return "Loss"
    return "Breakeven"


# =============================================================================
# Risk Metrics
# =============================================================================


def compute_risk_metrics(
    trades: Sequence[Trade],
    settings: Optional[JournalSettings] = None,
) -> RiskMetrics:
    """
    Compute risk metrics for a filtered trade set.

    Input order does not matter; trades are sorted chronologically first.
    An empty set yields ``RiskMetrics.empty()``.

    Args:
        trades: Filtered trades
        settings: Journal settings (defaults from the environment)

    Returns:
        RiskMetrics with floats rounded to 2 decimals
    """
    settings = settings or get_settings()

    if not trades:
        return RiskMetrics.empty()

    ordered = sort_chronological(trades)
    pnls = [t.pnl for t in ordered]
    count = len(ordered)

    equity = calculate_equity_curve(pnls)
    drawdown, drawdown_percent = calculate_drawdowns(equity)
    max_drawdown = float(drawdown.max())
    max_drawdown_percent = float(drawdown_percent.max())

    returns = calculate_returns_from_equity(equity)
    total_return = float(equity[-1])
    calmar = calculate_calmar_ratio(total_return, max_drawdown)

    winners = [p for p in pnls if p > 0]
    losers = [p for p in pnls if p < 0]
    avg_win = sum(winners) / len(winners) if winners else 0.0
    avg_loss = abs(sum(losers) / len(losers)) if losers else 0.0
    avg_risk_reward = avg_win / avg_loss if avg_loss != 0 else 0.0

    # Breakeven trades fall into the loss-rate complement
    win_fraction = len(winners) / count
    expectancy = win_fraction * avg_win - (1 - win_fraction) * avg_loss

    longest_win, longest_lose, current, current_type = calculate_streaks(pnls)

    best_trade = max(ordered, key=lambda t: t.pnl)
    worst_trade = min(ordered, key=lambda t: t.pnl)

    avg_trade_duration = 0.0
    if count > 1:
        avg_trade_duration = _days_between(ordered[0].date, ordered[-1].date) / count

    monthly: Dict[str, float] = {}
    for trade in ordered:
        monthly[trade.month] = monthly.get(trade.month, 0.0) + trade.pnl

    drawdown_data = [
        RiskDrawdownPoint(
            date=trade.date,
            drawdown=round(-abs(float(dd)), 2),
            drawdown_percent=round(-abs(float(pct)), 2),
        )
        for trade, dd, pct in zip(ordered, drawdown, drawdown_percent)
    ]
    rr_distribution = [
        RRPoint(date=t.date, rr=round(t.pnl, 2), type=_outcome_label(t.pnl))
        for t in ordered
    ]

    metrics = RiskMetrics(
        max_drawdown=round(max_drawdown, 2),
        max_drawdown_percent=round(max_drawdown_percent, 2),
        sharpe_ratio=round(calculate_sharpe_ratio(returns), 2),
        sortino_ratio=round(calculate_sortino_ratio(returns), 2),
        calmar_ratio=round(calmar, 2),
        recovery_factor=round(calmar, 2),
        volatility=round(calculate_volatility(returns), 2),
        value_at_risk=round(calculate_var_historical(returns, settings.var_confidence), 2),
        mae=round(min(losers), 2) if losers else 0.0,
        mfe=round(max(winners), 2) if winners else 0.0,
        avg_risk_reward=round(avg_risk_reward, 2),
        expectancy=round(expectancy, 2),
        longest_win_streak=longest_win,
        longest_lose_streak=longest_lose,
        current_streak=current,
        current_streak_type=current_type,
        avg_trade_duration=round(avg_trade_duration, 2),
        best_trade=best_trade,
        worst_trade=worst_trade,
        profitable_months=sum(1 for pnl in monthly.values() if pnl > 0),
        total_months=len(monthly),
        drawdown_data=drawdown_data[-settings.drawdown_chart_points:],
        rr_distribution=rr_distribution[-settings.rr_chart_points:],
    )

    logger.debug(
        f"Risk metrics over {count} trades: max drawdown {metrics.max_drawdown}, "
        f"sharpe {metrics.sharpe_ratio}"
    )
    return metrics
