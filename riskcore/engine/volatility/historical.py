"""Realized volatility calculation."""

import math
from collections.abc import Sequence

import numpy as np

from riskcore.engine.models.errors import InsufficientDataError, InvalidInputError


def calc_simple_returns(closes: Sequence[float]) -> list[float]:
    """Calculate per-period simple returns.

    r_i = close_i / close_{i-1} - 1

    Args:
        closes: Closing prices (oldest to newest).

    Returns:
        List of len(closes) - 1 returns.

    Raises:
        InsufficientDataError: If fewer than 2 prices.
        InvalidInputError: If a price is not positive.

    Example:
        >>> calc_simple_returns([100, 110, 99])
        [0.1, -0.1]
    """
    if len(closes) < 2:
        raise InsufficientDataError(f"Need at least 2 prices for a return, got {len(closes)}")

    prices = np.asarray(closes, dtype=float)
    if np.any(prices <= 0):
        raise InvalidInputError("Prices must be positive")

    return (prices[1:] / prices[:-1] - 1.0).tolist()


def calc_volatility(
    returns: Sequence[float],
    ddof: int = 1,
    annualization_periods: int | None = None,
) -> float:
    """Calculate volatility as the standard deviation of returns.

    Sample standard deviation (N-1 divisor) by default.

    Args:
        returns: Periodic returns (as decimals, e.g., 0.01 for 1%).
        ddof: Delta degrees of freedom (1 = sample, 0 = population).
        annualization_periods: Periods per year (e.g., 365 for daily crypto
            bars). None keeps per-period volatility.

    Returns:
        Volatility as a decimal.

    Raises:
        InsufficientDataError: If there are not more than ddof returns.
    """
    if len(returns) <= ddof:
        raise InsufficientDataError(
            f"Need more than {ddof} returns for a standard deviation, got {len(returns)}"
        )

    std_dev = float(np.std(np.asarray(returns, dtype=float), ddof=ddof))

    if annualization_periods is not None:
        return std_dev * math.sqrt(annualization_periods)
    return std_dev


def calc_rolling_volatility(
    returns: Sequence[float],
    window: int = 10,
    ddof: int = 1,
    annualization_periods: int | None = None,
) -> tuple[float, ...]:
    """Calculate rolling realized volatility.

    Each value is the volatility of ``window`` consecutive returns, so the
    series has ``len(returns) - window + 1`` values and no warm-up NaNs.

    Args:
        returns: Periodic returns (oldest to newest).
        window: Rolling window size in returns.
        ddof: Delta degrees of freedom.
        annualization_periods: Periods per year, None for per-period.

    Returns:
        Tuple of rolling volatility values, oldest first.
        Empty when there are fewer returns than the window.
    """
    if window <= ddof:
        raise InvalidInputError(f"window must exceed ddof ({ddof}), got {window}")

    if len(returns) < window:
        return ()

    r = np.asarray(returns, dtype=float)
    windows = np.lib.stride_tricks.sliding_window_view(r, window)
    std_devs = np.std(windows, axis=1, ddof=ddof)

    if annualization_periods is not None:
        std_devs = std_devs * math.sqrt(annualization_periods)

    return tuple(float(v) for v in std_devs)
