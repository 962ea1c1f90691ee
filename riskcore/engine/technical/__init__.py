"""Technical indicators for stop placement."""

from riskcore.engine.technical.atr import calc_atr, calc_tr_series, calc_true_range
from riskcore.engine.technical.chandelier import (
    calc_chandelier_exit,
    calc_stop_distance_percent,
    is_stop_triggered,
)

__all__ = [
    # ATR
    "calc_true_range",
    "calc_tr_series",
    "calc_atr",
    # Chandelier
    "calc_chandelier_exit",
    "calc_stop_distance_percent",
    "is_stop_triggered",
]
