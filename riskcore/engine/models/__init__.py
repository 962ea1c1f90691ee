"""Engine layer data models.

Models:
    TradeRecord: Closed trade (outcome, signed return, timestamp)
    PriceBar: OHLC price bar
    KellyMetrics: Kelly criterion sizing result
    VolatilityMetrics: Volatility targeting result
    ChandelierExit: ATR trailing stop levels
    MarginResult: Margin requirement and liquidation price
    RiskReward: Bracket order risk/reward
    SafePositionSize: Zero-ruin position size
    TradeStatistics: Trade history performance statistics
    Wallet: Ledger balance snapshot

Enums:
    PositionSide: Long or Short
    TradeOutcome: Win or Loss
    KellyFractionMode: Full / Half / Quarter Kelly
    AtrSmoothing: Simple or Wilder ATR
    TradingMode: Simulation or Live
    RiskLevel: Low / Moderate / High
"""

from riskcore.engine.models.enums import (
    AtrSmoothing,
    KellyFractionMode,
    PositionSide,
    RiskLevel,
    TradeOutcome,
    TradingMode,
)
from riskcore.engine.models.errors import (
    DegenerateRatioError,
    InsufficientBalanceError,
    InsufficientDataError,
    InvalidAmountError,
    InvalidInputError,
    InvalidLeverageError,
    LedgerError,
    OverReleaseError,
    RiskCoreError,
    RiskLimitError,
)
from riskcore.engine.models.market import PriceBar, TradeRecord
from riskcore.engine.models.result import (
    ChandelierExit,
    KellyMetrics,
    MarginResult,
    RiskReward,
    SafePositionSize,
    TradeStatistics,
    VolatilityMetrics,
)
from riskcore.engine.models.wallet import Wallet

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
    # Inputs
    "TradeRecord",
    "PriceBar",
    # Results
    "KellyMetrics",
    "VolatilityMetrics",
    "ChandelierExit",
    "MarginResult",
    "RiskReward",
    "SafePositionSize",
    "TradeStatistics",
    # Wallet
    "Wallet",
]
