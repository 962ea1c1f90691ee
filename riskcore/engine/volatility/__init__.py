"""Volatility calculation module."""

from riskcore.engine.volatility.historical import (
    calc_rolling_volatility,
    calc_simple_returns,
    calc_volatility,
)
from riskcore.engine.volatility.targeting import (
    calc_position_adjustment,
    calc_volatility_leverage,
    calc_volatility_metrics,
)

__all__ = [
    "calc_simple_returns",
    "calc_volatility",
    "calc_rolling_volatility",
    "calc_position_adjustment",
    "calc_volatility_leverage",
    "calc_volatility_metrics",
]
