"""Average True Range (ATR) calculations.

ATR measures volatility in price units from per-bar true range.
"""

from collections.abc import Sequence

from riskcore.engine.models.enums import AtrSmoothing
from riskcore.engine.models.errors import InsufficientDataError, InvalidInputError
from riskcore.engine.models.market import PriceBar


def calc_true_range(high: float, low: float, prev_close: float) -> float:
    """Calculate True Range (TR).

    TR = max(High - Low, |High - PrevClose|, |Low - PrevClose|)

    Args:
        high: Current period high price.
        low: Current period low price.
        prev_close: Previous period close price.

    Returns:
        True Range value.

    Example:
        >>> calc_true_range(50, 45, 47)
        5
    """
    return max(
        high - low,
        abs(high - prev_close),
        abs(low - prev_close),
    )


def calc_tr_series(bars: Sequence[PriceBar]) -> list[float]:
    """Calculate True Range series.

    Args:
        bars: Price bars (oldest to newest).

    Returns:
        List of True Range values (starts from index 1).
        Empty when fewer than 2 bars.
    """
    return [
        calc_true_range(bars[i].high, bars[i].low, bars[i - 1].close)
        for i in range(1, len(bars))
    ]


def _calc_wilder_average(values: list[float], period: int) -> float:
    """Wilder-smoothed average of the full series.

    - First value: mean of the first N values
    - Subsequent: (Previous * (N - 1) + Current) / N

    This is equivalent to an EMA with alpha = 1/N.
    """
    average = sum(values[:period]) / period
    for value in values[period:]:
        average = (average * (period - 1) + value) / period
    return average


def calc_atr(
    bars: Sequence[PriceBar],
    period: int = 22,
    smoothing: AtrSmoothing = AtrSmoothing.SIMPLE,
) -> float:
    """Calculate Average True Range.

    Args:
        bars: Price bars (oldest to newest), at least period + 1.
        period: ATR lookback.
        smoothing: SIMPLE averages the last ``period`` true ranges;
            WILDER smooths across the whole window.

    Returns:
        ATR in price units.

    Raises:
        InsufficientDataError: If fewer than period + 1 bars.
    """
    if period < 1:
        raise InvalidInputError(f"ATR period must be at least 1, got {period}")

    if len(bars) < period + 1:
        raise InsufficientDataError(
            f"ATR({period}) needs at least {period + 1} bars, got {len(bars)}"
        )

    tr_list = calc_tr_series(bars)

    if smoothing == AtrSmoothing.WILDER:
        return _calc_wilder_average(tr_list, period)

    recent = tr_list[-period:]
    return sum(recent) / period
