"""
Shared test fixtures for the fxjournal test suite.
"""

import pytest

from fxjournal.config.settings import JournalSettings
from fxjournal.journal.models import Account, Trade


def make_trade(trade_id, pnl, date="2024-01-02", **kwargs):
    """Build a Trade with sensible defaults for the fields a test ignores."""
    defaults = {
        "pair": "EUR/USD",
        "type": "buy",
        "size": 1.0,
        "entry_price": 1.1,
        "exit_price": 1.1,
    }
    defaults.update(kwargs)
    return Trade(id=trade_id, date=date, pnl=pnl, **defaults)


@pytest.fixture
def trade_factory():
    """Factory fixture for ad hoc trades."""
    return make_trade


@pytest.fixture
def settings():
    """Default settings, independent of the environment."""
    return JournalSettings(
        page_size=50,
        top_pairs_limit=6,
        min_trades_for_significance=3,
        var_confidence=0.95,
        drawdown_chart_points=30,
        rr_chart_points=50,
    )


@pytest.fixture
def sample_accounts():
    """Two accounts with known balances."""
    return [
        Account(id=1, name="Main", broker="OANDA", balance=10000.0),
        Account(id=2, name="Swing", broker="IC Markets", balance=5000.0),
    ]


@pytest.fixture
def sample_trades():
    """
    Eight trades across two months, two accounts and six pairs.

    Chronological P&L: 120, -80, 60, 0, -150, 200, -40, 35.5 (total 145.5).
    Trade 8 has no time and a string account id.
    """
    return [
        make_trade(
            1, 120.0, "2024-01-02", time="09:30", account=1,
            entry_time="09:30", exit_time="11:00",
            notes="Clean breakout", rating=4,
        ),
        make_trade(
            2, -80.0, "2024-01-02", time="14:15", pair="GBP/USD", type="sell",
            account=1, entry_time="14:15", exit_time="14:45",
        ),
        make_trade(3, 60.0, "2024-01-03", time="14:00", account=2),
        make_trade(4, 0.0, "2024-01-05", time="03:00", pair="USD/JPY", type="sell", account=2),
        make_trade(
            5, -150.0, "2024-01-08", time="22:10", pair="XAU/USD", account=1,
            entry_time="22:10", exit_time="10:00", exit_date="2024-01-09",
        ),
        make_trade(6, 200.0, "2024-02-01", time="09:05", type="sell", account=1),
        make_trade(7, -40.0, "2024-02-01", time="10:45", pair="US30", account=2, notes="Chased"),
        make_trade(8, 35.5, "2024-02-15", pair="EUR/GBP", account="1"),
    ]


@pytest.fixture
def scenario_a_trades():
    """Single-day trades with P&L 100, -50, 0, 200."""
    return [
        make_trade(1, 100.0),
        make_trade(2, -50.0),
        make_trade(3, 0.0),
        make_trade(4, 200.0),
    ]
