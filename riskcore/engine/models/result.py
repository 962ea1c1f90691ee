"""Result models for analysis outputs."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any

from riskcore.engine.models.enums import KellyFractionMode, PositionSide


def _serialize(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, tuple):
        return list(value)
    return value


@dataclass(frozen=True)
class KellyMetrics:
    """Kelly criterion sizing result.

    Attributes:
        win_rate: Fraction of winning trades (0-1).
        profit_loss_ratio: Average win / average loss (b).
        avg_win: Average winning return (positive fraction).
        avg_loss: Average losing return (positive fraction).
        optimal_fraction: Full Kelly fraction f*, clamped to [0, 1].
        half_kelly_fraction: f* * 0.5.
        quarter_kelly_fraction: f* * 0.25.
        active_mode: Fraction mode used for sizing (caller's choice).
        active_fraction: f* scaled by the active mode.
        recommended_size: equity * active_fraction.
        recommended_mode: Advisory mode (QUARTER above 20x leverage).
        high_leverage_advisory: True when the advisory mode differs because
            of leverage.
        historical_trades: Number of trades the statistics came from.
    """

    win_rate: float
    profit_loss_ratio: float
    avg_win: float
    avg_loss: float
    optimal_fraction: float
    half_kelly_fraction: float
    quarter_kelly_fraction: float
    active_mode: KellyFractionMode
    active_fraction: float
    recommended_size: float
    recommended_mode: KellyFractionMode
    high_leverage_advisory: bool
    historical_trades: int

    def to_dict(self) -> dict[str, Any]:
        return {k: _serialize(v) for k, v in asdict(self).items()}


@dataclass(frozen=True)
class VolatilityMetrics:
    """Volatility targeting result.

    Attributes:
        current_volatility: Stdev of the trailing return window.
        target_volatility: Target volatility (same units as current).
        rolling_volatility: Volatility at each step of a sliding sub-window.
        position_adjustment: Exposure scaling factor in [0, 1].
        recommended_leverage: Leverage ceiling implied by current volatility.
    """

    current_volatility: float
    target_volatility: float
    rolling_volatility: tuple[float, ...]
    position_adjustment: float
    recommended_leverage: int

    def to_dict(self) -> dict[str, Any]:
        return {k: _serialize(v) for k, v in asdict(self).items()}


@dataclass(frozen=True)
class ChandelierExit:
    """Chandelier exit (ATR trailing stop) levels.

    Attributes:
        atr: Average True Range over the lookback.
        atr_period: Lookback length in bars.
        multiplier: ATR multiple k.
        long_stop: Stop for long positions (highest high - k * ATR).
        short_stop: Stop for short positions (lowest low + k * ATR).
        current_price: Close of the latest bar.
        highest_high: Highest high of the lookback.
        lowest_low: Lowest low of the lookback.
        side: Side of the open position the stops were trailed for, if any.
    """

    atr: float
    atr_period: int
    multiplier: float
    long_stop: float
    short_stop: float
    current_price: float
    highest_high: float
    lowest_low: float
    side: PositionSide | None = None

    def stop_for(self, side: PositionSide) -> float:
        """Stop level relevant to a position side."""
        return self.long_stop if side == PositionSide.LONG else self.short_stop

    def to_dict(self) -> dict[str, Any]:
        return {k: _serialize(v) for k, v in asdict(self).items()}


@dataclass(frozen=True)
class MarginResult:
    """Isolated margin requirement and liquidation level.

    Attributes:
        position_size: Notional value of the position.
        leverage: Applied leverage.
        entry_price: Entry price.
        side: Long or short.
        maintenance_margin_rate: Maintenance margin rate used.
        margin_required: position_size / leverage.
        liquidation_price: Price at which the position is liquidated.
        position_size_asset: Notional expressed in asset units.
    """

    position_size: float
    leverage: float
    entry_price: float
    side: PositionSide
    maintenance_margin_rate: float
    margin_required: float
    liquidation_price: float
    position_size_asset: float

    def to_dict(self) -> dict[str, Any]:
        return {k: _serialize(v) for k, v in asdict(self).items()}


@dataclass(frozen=True)
class RiskReward:
    """Risk/reward of a bracket order.

    Attributes:
        risk_percent: |entry - stop| / entry.
        reward_percent: |take_profit - entry| / entry.
        ratio: reward_percent / risk_percent.
    """

    risk_percent: float
    reward_percent: float
    ratio: float


@dataclass(frozen=True)
class SafePositionSize:
    """Position size under the zero-ruin constraint.

    Attributes:
        optimal_f: Vince's Optimal f of the trade history.
        kelly_fraction: Kelly fraction scaled by the active mode.
        position_percent: Margin as a fraction of balance, within [0.005, 0.25]
            (0 when there is no edge).
        position_size: Margin committed (balance * position_percent).
        leverage_adjusted_size: Notional controlled (position_size * leverage).
        max_loss_amount: Loss if the stop is hit.
        risk_of_ruin: Risk of ruin at max_loss_amount per trade.
        is_zero_ruin_safe: risk_of_ruin is within the limit.
        reduced: Size was cut below the Kelly/Optimal f fraction to meet
            the limit.
    """

    optimal_f: float
    kelly_fraction: float
    position_percent: float
    position_size: float
    leverage_adjusted_size: float
    max_loss_amount: float
    risk_of_ruin: float
    is_zero_ruin_safe: bool
    reduced: bool

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class TradeStatistics:
    """Performance statistics of a trade history.

    Attributes:
        total_trades: Number of trades.
        winning_trades: Number of wins.
        losing_trades: Number of losses.
        win_rate: winning_trades / total_trades.
        avg_win: Average winning return (positive fraction, 0 if none).
        avg_loss: Average losing return (positive fraction, 0 if none).
        profit_factor: Gross win / gross loss, None when there are no losses.
        expectancy: win_rate * avg_win - (1 - win_rate) * avg_loss.
        max_drawdown: Maximum drawdown of the compounded equity curve.
        current_streak: Positive for a winning streak, negative for losing.
        longest_win_streak: Longest run of wins.
        longest_loss_streak: Longest run of losses.
    """

    total_trades: int
    winning_trades: int
    losing_trades: int
    win_rate: float
    avg_win: float
    avg_loss: float
    profit_factor: float | None
    expectancy: float
    max_drawdown: float
    current_streak: int
    longest_win_streak: int
    longest_loss_streak: int

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
