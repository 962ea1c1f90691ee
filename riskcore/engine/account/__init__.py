"""Account-level calculations for risk and capital management.

This module provides calculations at the account level:
- Position sizing (Kelly criterion, Optimal f, risk of ruin)
- Margin requirement and liquidation price
- Wallet ledger (reserve / release / settle)
- Capital helpers (percent sizing, notional, risk/reward)
"""

from riskcore.engine.account.capital import (
    calc_position_for_risk,
    calc_position_size_asset,
    calc_position_value,
    calc_risk_reward,
    calc_size_from_percent,
    calc_take_profit_price,
)
from riskcore.engine.account.margin import (
    assess_risk_level,
    calc_liquidation_distance,
    calc_liquidation_price,
    calc_margin,
)
from riskcore.engine.account.position_sizing import (
    calc_fractional_kelly,
    calc_half_kelly,
    calc_kelly,
    calc_kelly_metrics,
    calc_kelly_metrics_from_stats,
    calc_optimal_f,
    calc_risk_of_ruin,
    calc_safe_position_size,
    calc_zero_ruin_size,
    get_recommended_kelly_mode,
    interpret_kelly,
)
from riskcore.engine.account.wallet import (
    WalletLedger,
    open_wallet,
    release,
    reserve,
    settle,
)

__all__ = [
    # Capital
    "calc_size_from_percent",
    "calc_position_value",
    "calc_position_size_asset",
    "calc_risk_reward",
    "calc_take_profit_price",
    "calc_position_for_risk",
    # Margin
    "calc_margin",
    "calc_liquidation_price",
    "calc_liquidation_distance",
    "assess_risk_level",
    # Position sizing
    "calc_kelly",
    "calc_half_kelly",
    "calc_fractional_kelly",
    "interpret_kelly",
    "get_recommended_kelly_mode",
    "calc_kelly_metrics",
    "calc_kelly_metrics_from_stats",
    "calc_risk_of_ruin",
    "calc_optimal_f",
    "calc_zero_ruin_size",
    "calc_safe_position_size",
    # Wallet
    "WalletLedger",
    "open_wallet",
    "reserve",
    "release",
    "settle",
]
