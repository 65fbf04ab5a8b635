"""
Trade DataFrame helpers shared by the analytics modules.
"""

from typing import Sequence

import numpy as np
import pandas as pd

from ..journal.models import Trade, parse_clock

FRAME_COLUMNS = [
    "id",
    "date",
    "pair",
    "type",
    "pnl",
    "win",
    "loss",
    "hour",
    "month",
    "weekday",
]


def trade_hour(trade: Trade):
    """Hour of day from ``trade.time``, or None when missing or out of range."""
    clock = parse_clock(trade.time)
    if clock is None or not 0 <= clock[0] < 24:
        return None
    return clock[0]


def trades_frame(trades: Sequence[Trade]) -> pd.DataFrame:
    """
    Build a DataFrame with one row per trade, in input order.

    ``weekday`` uses Sunday=0 ... Saturday=6 and is NaN for unparseable
    dates; ``hour`` is NaN for trades without a usable time.
    """
    if not trades:
        return pd.DataFrame(columns=FRAME_COLUMNS)

    frame = pd.DataFrame(
        {
            "id": [t.id for t in trades],
            "date": [t.date for t in trades],
            "pair": [t.pair for t in trades],
            "type": [t.type for t in trades],
            "pnl": [t.pnl for t in trades],
            "hour": [trade_hour(t) for t in trades],
        }
    )
    frame["pnl"] = frame["pnl"].astype(float)
    frame["hour"] = pd.to_numeric(frame["hour"], errors="coerce")
    frame["win"] = frame["pnl"] > 0
    frame["loss"] = frame["pnl"] < 0
    frame["month"] = frame["date"].str.slice(0, 7)

    dates = pd.to_datetime(frame["date"], format="%Y-%m-%d", errors="coerce")
    # pandas dayofweek is Monday=0; shift so Sunday=0
    frame["weekday"] = np.where(dates.notna(), (dates.dt.dayofweek + 1) % 7, np.nan)

    return frame[FRAME_COLUMNS]


def win_rate(wins: int, trades: int) -> float:
    """Win percentage with 1 decimal, 0.0 when there are no trades."""
    if trades <= 0:
        return 0.0
    return round(wins / trades * 100, 1)


def average(total: float, count: int) -> float:
    """Mean with 2 decimals, 0.0 when count is zero."""
    if count <= 0:
        return 0.0
    return round(total / count, 2)
