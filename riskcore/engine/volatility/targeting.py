"""Volatility targeting.

Scales exposure so that position volatility stays at or below a target.
"""

import math
from collections.abc import Sequence

from riskcore.engine.models.errors import InsufficientDataError, InvalidInputError
from riskcore.engine.models.market import PriceBar
from riskcore.engine.models.result import VolatilityMetrics
from riskcore.engine.volatility.historical import (
    calc_rolling_volatility,
    calc_simple_returns,
    calc_volatility,
)

# Exchange-side leverage ceiling for perpetual futures
MAX_EXCHANGE_LEVERAGE = 125


def calc_position_adjustment(target_volatility: float, current_volatility: float) -> float:
    """Calculate the exposure scaling factor.

    Formula: min(1, target / current)

    Physical meaning:
    - 1.0 means volatility is at or below target, full size
    - 0.5 means volatility is twice the target, halve the position

    Args:
        target_volatility: Target volatility.
        current_volatility: Current realized volatility.

    Returns:
        Adjustment factor in [0, 1]. 1 when current volatility is zero.

    Example:
        >>> calc_position_adjustment(0.03, 0.045)
        0.6666...
    """
    if target_volatility < 0 or current_volatility < 0:
        raise InvalidInputError("Volatility values must be non-negative")

    if current_volatility == 0:
        return 1.0

    return min(1.0, target_volatility / current_volatility)


def calc_volatility_leverage(
    current_volatility: float,
    safety_factor: float = 0.5,
    max_leverage: int = MAX_EXCHANGE_LEVERAGE,
) -> int:
    """Calculate the leverage ceiling implied by volatility.

    Formula: min(floor(safety_factor / volatility), max_leverage), at least 1

    Example:
        >>> calc_volatility_leverage(0.045)
        11
    """
    if current_volatility < 0:
        raise InvalidInputError("Volatility must be non-negative")

    if current_volatility == 0:
        return max_leverage

    raw = math.floor(safety_factor / current_volatility)
    return max(1, min(raw, max_leverage))


def calc_volatility_metrics(
    bars: Sequence[PriceBar],
    target_volatility: float,
    window: int | None = None,
    rolling_window: int = 10,
    annualization_periods: int | None = None,
) -> VolatilityMetrics:
    """Calculate volatility targeting metrics from a price window.

    Args:
        bars: Price bars (oldest to newest).
        target_volatility: Target volatility in the same units as the result
            (per-period unless annualization_periods is set).
        window: Number of trailing returns for current volatility.
            None uses every return in the window.
        rolling_window: Sub-window size for the rolling series. Clamped to
            the number of available returns.
        annualization_periods: Periods per year, None for per-period.

    Returns:
        VolatilityMetrics.

    Raises:
        InsufficientDataError: If fewer than 2 bars, or too few returns for a
            sample standard deviation.
    """
    if len(bars) < 2:
        raise InsufficientDataError(f"Need at least 2 bars for volatility, got {len(bars)}")

    if target_volatility < 0:
        raise InvalidInputError(f"target_volatility must be non-negative, got {target_volatility}")

    returns = calc_simple_returns([bar.close for bar in bars])
    trailing = returns[-window:] if window else returns

    current = calc_volatility(trailing, annualization_periods=annualization_periods)
    rolling = calc_rolling_volatility(
        returns,
        window=max(2, min(rolling_window, len(returns))),
        annualization_periods=annualization_periods,
    )

    return VolatilityMetrics(
        current_volatility=current,
        target_volatility=target_volatility,
        rolling_volatility=rolling,
        position_adjustment=calc_position_adjustment(target_volatility, current),
        recommended_leverage=calc_volatility_leverage(current),
    )
