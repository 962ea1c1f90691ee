"""Portfolio-level calculations over trade history."""

from riskcore.engine.portfolio.returns import (
    build_equity_curve,
    calc_max_drawdown,
    calc_trade_statistics,
)

__all__ = [
    "build_equity_curve",
    "calc_max_drawdown",
    "calc_trade_statistics",
]
