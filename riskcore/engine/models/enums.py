"""Engine layer enumerations.

Centralized location for all enums used in the engine layer.
"""

from enum import Enum


class PositionSide(Enum):
    """Position side enumeration."""

    LONG = "long"  # Buy
    SHORT = "short"  # Sell


class TradeOutcome(Enum):
    """Closed trade outcome."""

    WIN = "win"
    LOSS = "loss"


class KellyFractionMode(Enum):
    """Fraction of full Kelly applied to sizing."""

    FULL = "full"
    HALF = "half"
    QUARTER = "quarter"

    @property
    def multiplier(self) -> float:
        """Multiplier applied to the optimal Kelly fraction."""
        return _KELLY_MULTIPLIERS[self]


_KELLY_MULTIPLIERS = {
    KellyFractionMode.FULL: 1.0,
    KellyFractionMode.HALF: 0.5,
    KellyFractionMode.QUARTER: 0.25,
}


class AtrSmoothing(Enum):
    """ATR smoothing method."""

    SIMPLE = "simple"  # Arithmetic mean of the last N true ranges
    WILDER = "wilder"  # Wilder's smoothing (EMA with alpha = 1/N)


class TradingMode(Enum):
    """Account trading mode."""

    SIMULATION = "simulation"  # Paper wallet
    LIVE = "live"


class RiskLevel(Enum):
    """Position risk level from leverage and liquidation distance."""

    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"
