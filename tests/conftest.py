"""
Pytest fixtures shared by engine and business tests.

Provides synthetic price bars and trade histories.
"""

from datetime import datetime, timedelta

import pytest

from riskcore.engine.models.market import PriceBar, TradeRecord

START = datetime(2025, 1, 1)


def make_bars(closes, spread: float = 1.0) -> list[PriceBar]:
    """Build daily bars around a close series.

    high = close + spread, low = close - spread, open = previous close.
    """
    bars = []
    prev = closes[0]
    for i, close in enumerate(closes):
        bars.append(
            PriceBar(
                timestamp=START + timedelta(days=i),
                open=prev,
                high=max(prev, close) + spread,
                low=min(prev, close) - spread,
                close=close,
            )
        )
        prev = close
    return bars


def make_trades(returns) -> list[TradeRecord]:
    """Build a trade history from signed returns."""
    return [
        TradeRecord.from_pnl(r, START + timedelta(days=i)) for i, r in enumerate(returns)
    ]


@pytest.fixture
def rising_bars() -> list[PriceBar]:
    """30 bars rising 1 per bar from 100."""
    return make_bars([100.0 + i for i in range(30)])


@pytest.fixture
def choppy_bars() -> list[PriceBar]:
    """30 bars alternating around 100."""
    return make_bars([100.0 + (3 if i % 2 else -3) + i * 0.1 for i in range(30)])


@pytest.fixture
def edge_trades() -> list[TradeRecord]:
    """10 trades: 6 wins of +5%, 4 losses of -2.5% (win rate 0.6, ratio 2)."""
    return make_trades([0.05, -0.025, 0.05, 0.05, -0.025, 0.05, -0.025, 0.05, 0.05, -0.025])
