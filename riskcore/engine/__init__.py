"""Calculation Engine Layer.

This module provides the quantitative risk calculations for leveraged
trading. It works on immutable snapshots supplied by callers (trade history,
price bars, account balances) and never performs I/O.

Architecture:
- models/: Enums, input records, result dataclasses, errors, wallet
- account/: Account-level calculations
    - position_sizing: Kelly criterion, Optimal f, risk of ruin
    - margin: Margin requirement, liquidation price, risk level
    - wallet: Wallet ledger (reserve / release / settle)
    - capital: Percent sizing, notional, risk/reward
- volatility/: Realized volatility and volatility targeting
- technical/: ATR and chandelier exit trailing stops
- portfolio/: Trade statistics and drawdown
"""

# Base types (from models)
from riskcore.engine.models import (
    AtrSmoothing,
    ChandelierExit,
    DegenerateRatioError,
    InsufficientBalanceError,
    InsufficientDataError,
    InvalidAmountError,
    InvalidInputError,
    InvalidLeverageError,
    KellyFractionMode,
    KellyMetrics,
    LedgerError,
    MarginResult,
    OverReleaseError,
    PositionSide,
    PriceBar,
    RiskCoreError,
    RiskLevel,
    RiskLimitError,
    RiskReward,
    SafePositionSize,
    TradeOutcome,
    TradeRecord,
    TradeStatistics,
    TradingMode,
    VolatilityMetrics,
    Wallet,
)

# ===== Account Level =====
from riskcore.engine.account import (
    WalletLedger,
    assess_risk_level,
    calc_fractional_kelly,
    calc_half_kelly,
    calc_kelly,
    calc_kelly_metrics,
    calc_kelly_metrics_from_stats,
    calc_liquidation_distance,
    calc_liquidation_price,
    calc_margin,
    calc_optimal_f,
    calc_position_for_risk,
    calc_position_size_asset,
    calc_position_value,
    calc_risk_of_ruin,
    calc_risk_reward,
    calc_safe_position_size,
    calc_size_from_percent,
    calc_take_profit_price,
    calc_zero_ruin_size,
    get_recommended_kelly_mode,
    interpret_kelly,
    open_wallet,
    release,
    reserve,
    settle,
)

# ===== Volatility =====
from riskcore.engine.volatility import (
    calc_position_adjustment,
    calc_rolling_volatility,
    calc_simple_returns,
    calc_volatility,
    calc_volatility_leverage,
    calc_volatility_metrics,
)

# ===== Technical =====
from riskcore.engine.technical import (
    calc_atr,
    calc_chandelier_exit,
    calc_stop_distance_percent,
    calc_tr_series,
    calc_true_range,
    is_stop_triggered,
)

# ===== Portfolio Level =====
from riskcore.engine.portfolio import (
    build_equity_curve,
    calc_max_drawdown,
    calc_trade_statistics,
)

__all__ = [
    # Enums
    "AtrSmoothing",
    "KellyFractionMode",
    "PositionSide",
    "RiskLevel",
    "TradeOutcome",
    "TradingMode",
    # Errors
    "RiskCoreError",
    "InsufficientDataError",
    "DegenerateRatioError",
    "InvalidLeverageError",
    "InvalidInputError",
    "RiskLimitError",
    "LedgerError",
    "InsufficientBalanceError",
    "OverReleaseError",
    "InvalidAmountError",
    # Models
    "TradeRecord",
    "PriceBar",
    "KellyMetrics",
    "VolatilityMetrics",
    "ChandelierExit",
    "MarginResult",
    "RiskReward",
    "SafePositionSize",
    "TradeStatistics",
    "Wallet",
    # Account Level - Position sizing
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
    # Account Level - Margin
    "calc_margin",
    "calc_liquidation_price",
    "calc_liquidation_distance",
    "assess_risk_level",
    # Account Level - Wallet
    "WalletLedger",
    "open_wallet",
    "reserve",
    "release",
    "settle",
    # Account Level - Capital
    "calc_size_from_percent",
    "calc_position_value",
    "calc_position_size_asset",
    "calc_risk_reward",
    "calc_take_profit_price",
    "calc_position_for_risk",
    # Volatility
    "calc_simple_returns",
    "calc_volatility",
    "calc_rolling_volatility",
    "calc_position_adjustment",
    "calc_volatility_leverage",
    "calc_volatility_metrics",
    # Technical
    "calc_true_range",
    "calc_tr_series",
    "calc_atr",
    "calc_chandelier_exit",
    "calc_stop_distance_percent",
    "is_stop_triggered",
    # Portfolio
    "build_equity_curve",
    "calc_max_drawdown",
    "calc_trade_statistics",
]
