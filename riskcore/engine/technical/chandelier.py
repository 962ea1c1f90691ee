"""Chandelier exit (ATR trailing stop) calculations.

Position-level module for trailing stop-loss levels.

Trailing rule: while a position stays open, its stop only tightens toward
price. A long stop never moves down and a short stop never moves up
between recomputations.
"""

from collections.abc import Sequence

from riskcore.engine.models.enums import AtrSmoothing, PositionSide
from riskcore.engine.models.errors import InsufficientDataError, InvalidInputError
from riskcore.engine.models.market import PriceBar
from riskcore.engine.models.result import ChandelierExit
from riskcore.engine.technical.atr import calc_atr


def calc_chandelier_exit(
    bars: Sequence[PriceBar],
    multiplier: float = 3.0,
    side: PositionSide | None = None,
    previous: ChandelierExit | None = None,
    atr_period: int = 22,
    smoothing: AtrSmoothing = AtrSmoothing.SIMPLE,
) -> ChandelierExit:
    """Calculate chandelier exit stop levels.

    Formula:
    - Long stop  = HighestHigh(N) - k * ATR(N)
    - Short stop = LowestLow(N)  + k * ATR(N)

    Args:
        bars: Price bars (oldest to newest), at least atr_period + 1.
        multiplier: ATR multiple k.
        side: Side of the open position, None when flat.
        previous: Stops computed last time for the same open position.
            The stop of ``side`` is never loosened relative to it.
        atr_period: Lookback N.
        smoothing: ATR smoothing method.

    Returns:
        ChandelierExit.

    Raises:
        InsufficientDataError: If fewer than atr_period + 1 bars.

    Example:
        >>> exit_ = calc_chandelier_exit(bars, multiplier=3.0, atr_period=22)
        >>> exit_.long_stop < exit_.current_price < exit_.short_stop
        True
    """
    if multiplier <= 0:
        raise InvalidInputError(f"ATR multiplier must be positive, got {multiplier}")

    if len(bars) < atr_period + 1:
        raise InsufficientDataError(
            f"Chandelier exit needs at least {atr_period + 1} bars, got {len(bars)}"
        )

    atr = calc_atr(bars, period=atr_period, smoothing=smoothing)

    lookback = bars[-atr_period:]
    highest_high = max(bar.high for bar in lookback)
    lowest_low = min(bar.low for bar in lookback)

    long_stop = highest_high - multiplier * atr
    short_stop = lowest_low + multiplier * atr

    if previous is not None and side is not None:
        if side == PositionSide.LONG:
            long_stop = max(long_stop, previous.long_stop)
        else:
            short_stop = min(short_stop, previous.short_stop)

    return ChandelierExit(
        atr=atr,
        atr_period=atr_period,
        multiplier=multiplier,
        long_stop=long_stop,
        short_stop=short_stop,
        current_price=bars[-1].close,
        highest_high=highest_high,
        lowest_low=lowest_low,
        side=side,
    )


def calc_stop_distance_percent(current_price: float, stop_price: float) -> float:
    """Calculate distance from price to a stop, in percent of price.

    Example:
        >>> calc_stop_distance_percent(100, 95)
        5.0
    """
    if current_price <= 0:
        raise InvalidInputError(f"current_price must be positive, got {current_price}")

    return abs(current_price - stop_price) / current_price * 100


def is_stop_triggered(bar: PriceBar, stop_price: float, side: PositionSide) -> bool:
    """Check whether a bar traded through a position's stop."""
    if side == PositionSide.LONG:
        return bar.low <= stop_price
    return bar.high >= stop_price
