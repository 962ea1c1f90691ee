"""Position sizing calculations using Kelly criterion.

Account-level module for optimal bet sizing.
"""

import math
from collections.abc import Sequence

import numpy as np

from riskcore.engine.models.enums import KellyFractionMode, TradeOutcome
from riskcore.engine.models.errors import (
    DegenerateRatioError,
    InsufficientDataError,
    InvalidInputError,
    InvalidLeverageError,
)
from riskcore.engine.models.market import TradeRecord
from riskcore.engine.models.result import KellyMetrics, SafePositionSize

# Above this leverage the advisory fraction mode is always QUARTER
HIGH_LEVERAGE_THRESHOLD = 20

# Minimum trades before Optimal f is meaningful
MIN_TRADES_FOR_OPTIMAL_F = 10

# Zero-ruin constraint: maximum acceptable risk of ruin (0.01%)
MAX_RISK_OF_RUIN = 0.0001

# Bounds on margin as a fraction of balance
MIN_POSITION_PERCENT = 0.005
MAX_POSITION_PERCENT = 0.25


def calc_kelly(win_rate: float, win_loss_ratio: float) -> float:
    """Calculate Kelly criterion optimal bet fraction.

    Formula: f* = (W * (R + 1) - 1) / R
    where W = win rate, R = win/loss ratio

    Physical meaning:
    - Optimal fraction of bankroll to risk on each trade
    - Maximizes long-term geometric growth rate
    - Should typically be scaled down (half-Kelly) for safety

    Args:
        win_rate: Probability of winning (0-1).
        win_loss_ratio: Ratio of average win to average loss (e.g., 2.0 means avg win is 2x avg loss).

    Returns:
        Kelly fraction clamped to [0, 1].
        Returns 0 if Kelly is negative or the payoff ratio is zero (don't bet).

    Raises:
        InvalidInputError: If win_rate is outside [0, 1] or the ratio is negative.

    Example:
        >>> calc_kelly(0.6, 1.5)  # 60% win rate, 1.5:1 win/loss ratio
        0.3333...  # Bet 33% of bankroll
    """
    if win_rate < 0 or win_rate > 1:
        raise InvalidInputError(f"win_rate must be within [0, 1], got {win_rate}")

    if win_loss_ratio < 0:
        raise InvalidInputError(f"win_loss_ratio must be non-negative, got {win_loss_ratio}")

    # No payoff on a win means no edge at any size
    if win_loss_ratio == 0:
        return 0.0

    kelly = (win_rate * (win_loss_ratio + 1) - 1) / win_loss_ratio

    return min(1.0, max(0.0, kelly))


def calc_half_kelly(win_rate: float, win_loss_ratio: float) -> float:
    """Calculate half-Kelly for more conservative position sizing.

    Half-Kelly is commonly used to reduce volatility while capturing
    most of the growth benefits.

    Args:
        win_rate: Probability of winning (0-1).
        win_loss_ratio: Ratio of average win to average loss.

    Returns:
        Half of the Kelly fraction.
    """
    return calc_kelly(win_rate, win_loss_ratio) * 0.5


def calc_fractional_kelly(
    win_rate: float,
    win_loss_ratio: float,
    fraction: float = 0.5,
) -> float:
    """Calculate fractional Kelly for custom risk tolerance.

    Args:
        win_rate: Probability of winning (0-1).
        win_loss_ratio: Ratio of average win to average loss.
        fraction: Fraction of Kelly to use (e.g., 0.25 for quarter Kelly).

    Returns:
        Fractional Kelly value.
    """
    if fraction <= 0 or fraction > 1:
        raise InvalidInputError(f"fraction must be within (0, 1], got {fraction}")

    return calc_kelly(win_rate, win_loss_ratio) * fraction


def interpret_kelly(kelly: float) -> str:
    """Interpret Kelly fraction value.

    Args:
        kelly: Kelly fraction (0-1).

    Returns:
        Interpretation string.
    """
    if kelly <= 0:
        return "no_edge"  # No positive edge, don't bet
    elif kelly < 0.05:
        return "marginal"  # Marginal edge
    elif kelly < 0.15:
        return "small"  # Small but tradeable edge
    elif kelly < 0.25:
        return "moderate"  # Moderate edge
    elif kelly < 0.40:
        return "strong"  # Strong edge
    else:
        return "very_strong"  # Very strong edge (be cautious, may be overfitting)


def get_recommended_kelly_mode(
    mode: KellyFractionMode,
    leverage: float | None = None,
) -> KellyFractionMode:
    """Advisory Kelly mode for a leverage level.

    Above 20x leverage the advisory mode is QUARTER regardless of the
    caller's choice. The caller's mode is still the one used for sizing.
    """
    if leverage is not None and leverage > HIGH_LEVERAGE_THRESHOLD:
        return KellyFractionMode.QUARTER
    return mode


def calc_kelly_metrics_from_stats(
    win_rate: float,
    avg_win: float,
    avg_loss: float,
    equity: float,
    mode: KellyFractionMode = KellyFractionMode.HALF,
    historical_trades: int = 0,
    leverage: float | None = None,
) -> KellyMetrics:
    """Calculate Kelly sizing from pre-aggregated statistics.

    Args:
        win_rate: Probability of winning (0-1).
        avg_win: Average winning return (sign ignored).
        avg_loss: Average losing return (sign ignored).
        equity: Account equity the fraction is applied to.
        mode: Fraction mode used for the recommended size.
        historical_trades: Number of trades behind the statistics.
        leverage: Intended leverage, drives the advisory mode.

    Returns:
        KellyMetrics.

    Raises:
        InsufficientDataError: If historical_trades is 0.
        DegenerateRatioError: If avg_loss is 0.
    """
    if historical_trades <= 0:
        raise InsufficientDataError("Kelly sizing needs at least one historical trade")

    if equity < 0:
        raise InvalidInputError(f"equity must be non-negative, got {equity}")

    avg_win = abs(avg_win)
    avg_loss = abs(avg_loss)

    if avg_loss == 0:
        raise DegenerateRatioError("Average loss is zero, win/loss ratio is undefined")

    profit_loss_ratio = avg_win / avg_loss
    optimal = calc_kelly(win_rate, profit_loss_ratio)
    active_fraction = optimal * mode.multiplier
    recommended_mode = get_recommended_kelly_mode(mode, leverage)

    return KellyMetrics(
        win_rate=win_rate,
        profit_loss_ratio=profit_loss_ratio,
        avg_win=avg_win,
        avg_loss=avg_loss,
        optimal_fraction=optimal,
        half_kelly_fraction=optimal * 0.5,
        quarter_kelly_fraction=optimal * 0.25,
        active_mode=mode,
        active_fraction=active_fraction,
        recommended_size=equity * active_fraction,
        recommended_mode=recommended_mode,
        high_leverage_advisory=recommended_mode != mode,
        historical_trades=historical_trades,
    )


def calc_kelly_metrics(
    trades: Sequence[TradeRecord],
    equity: float,
    mode: KellyFractionMode = KellyFractionMode.HALF,
    leverage: float | None = None,
) -> KellyMetrics:
    """Calculate Kelly sizing from a trade history snapshot.

    Derives win rate and win/loss ratio from historical trades,
    then calculates the Kelly fraction.

    Args:
        trades: Closed trades, oldest first.
        equity: Account equity the fraction is applied to.
        mode: Fraction mode used for the recommended size.
        leverage: Intended leverage, drives the advisory mode.

    Returns:
        KellyMetrics.

    Raises:
        InsufficientDataError: If there are no trades.
        DegenerateRatioError: If there are no losing returns to divide by.

    Example:
        >>> metrics = calc_kelly_metrics(trades, equity=10_000)
        >>> metrics.recommended_size == 10_000 * metrics.half_kelly_fraction
        True
    """
    if not trades:
        raise InsufficientDataError("Kelly sizing needs at least one historical trade")

    wins = [abs(t.pnl_percent) for t in trades if t.outcome == TradeOutcome.WIN]
    losses = [abs(t.pnl_percent) for t in trades if t.outcome == TradeOutcome.LOSS]

    win_rate = len(wins) / len(trades)
    avg_win = sum(wins) / len(wins) if wins else 0.0
    avg_loss = sum(losses) / len(losses) if losses else 0.0

    return calc_kelly_metrics_from_stats(
        win_rate=win_rate,
        avg_win=avg_win,
        avg_loss=avg_loss,
        equity=equity,
        mode=mode,
        historical_trades=len(trades),
        leverage=leverage,
    )


def calc_risk_of_ruin(
    win_rate: float,
    avg_win: float,
    avg_loss: float,
    risk_per_trade: float,
    account_balance: float,
) -> float:
    """Calculate probability of losing the entire account.

    Formula: RoR = ((1 - edge) / (1 + edge)) ^ units
    where edge = (W * avg_win - (1 - W) * avg_loss) / avg_loss
          units = account_balance / risk_per_trade

    Args:
        win_rate: Probability of winning (0-1).
        avg_win: Average win (positive).
        avg_loss: Average loss (positive).
        risk_per_trade: Amount risked per trade.
        account_balance: Account balance.

    Returns:
        Risk of ruin in [0, 1]. 1 when the edge is not positive.

    Example:
        >>> calc_risk_of_ruin(0.55, 100, 100, 100, 10_000)
        1.9e-09  # ~0 with 100 units of risk
    """
    if avg_loss == 0:
        raise DegenerateRatioError("Average loss is zero, edge is undefined")

    if risk_per_trade <= 0 or account_balance <= 0:
        raise InvalidInputError("risk_per_trade and account_balance must be positive")

    edge = (win_rate * abs(avg_win) - (1 - win_rate) * abs(avg_loss)) / abs(avg_loss)

    if edge <= 0:
        return 1.0
    if edge >= 1:
        return 0.0

    units = account_balance / risk_per_trade
    ror = ((1 - edge) / (1 + edge)) ** units

    return min(1.0, max(0.0, ror))


def calc_optimal_f(
    returns: Sequence[float],
    min_trades: int = MIN_TRADES_FOR_OPTIMAL_F,
) -> float:
    """Calculate Ralph Vince's Optimal f.

    Searches f in 0.01 steps for the value maximizing the Terminal Wealth
    Relative, TWR(f) = prod(1 + f * (-r_i / largest_loss)).

    The fraction of capital at risk is f * |largest_loss|.

    Args:
        returns: Per-trade returns as fractions.
        min_trades: Minimum number of trades required.

    Returns:
        Optimal f in (0, 1).

    Raises:
        InsufficientDataError: If fewer than min_trades returns.
        DegenerateRatioError: If there is no losing trade.
    """
    if len(returns) < min_trades:
        raise InsufficientDataError(
            f"Optimal f needs at least {min_trades} trades, got {len(returns)}"
        )

    r = np.asarray(returns, dtype=float)
    largest_loss = r.min()
    if largest_loss >= 0:
        raise DegenerateRatioError("No losing trade, Optimal f is unbounded")

    fractions = np.arange(1, 101) / 100.0
    hpr = 1.0 + fractions[:, None] * (-r / largest_loss)[None, :]

    valid = np.all(hpr > 0, axis=1)
    log_twr = np.full(len(fractions), -np.inf)
    log_twr[valid] = np.log(hpr[valid]).sum(axis=1)

    best = int(np.argmax(log_twr))
    if not np.isfinite(log_twr[best]) or log_twr[best] <= 0:
        # No fraction grows the account
        return 0.0

    return float(fractions[best])


def calc_zero_ruin_size(
    win_rate: float,
    avg_win: float,
    avg_loss: float,
    account_balance: float,
    max_risk_of_ruin: float = MAX_RISK_OF_RUIN,
) -> float:
    """Find the largest risk per trade whose risk of ruin stays within a limit.

    Binary search over (0, 50% of balance].

    Args:
        win_rate: Probability of winning (0-1).
        avg_win: Average win.
        avg_loss: Average loss.
        account_balance: Account balance.
        max_risk_of_ruin: Acceptable risk of ruin (default 0.01%).

    Returns:
        Risk amount per trade. 0 when no size satisfies the limit
        (e.g. the edge is not positive).

    Example:
        >>> calc_zero_ruin_size(0.6, 0.05, 0.025, 10_000)
        2385.6...
    """
    if account_balance <= 0:
        raise InvalidInputError(f"account_balance must be positive, got {account_balance}")

    low = 0.0
    high = account_balance * 0.5
    safe_size = 0.0

    for _ in range(50):
        mid = (low + high) / 2
        ror = calc_risk_of_ruin(win_rate, avg_win, avg_loss, mid, account_balance)
        if ror <= max_risk_of_ruin:
            safe_size = mid
            low = mid
        else:
            high = mid

    return safe_size


def calc_safe_position_size(
    trades: Sequence[TradeRecord],
    account_balance: float,
    stop_loss_percent: float,
    leverage: float,
    mode: KellyFractionMode = KellyFractionMode.HALF,
    max_risk_of_ruin: float = MAX_RISK_OF_RUIN,
) -> SafePositionSize:
    """Calculate a position size that satisfies the zero-ruin constraint.

    Steps:
    1. Take the more conservative of Optimal f and mode-scaled Kelly
    2. Risk per trade = balance * fraction * stop_loss_percent * leverage
    3. If its risk of ruin exceeds the limit, shrink to the zero-ruin size
    4. Clamp margin to [0.5%, 25%] of balance

    The final risk of ruin is recomputed after clamping, so a floor of
    0.5% that breaks the limit is reported as not safe.

    Args:
        trades: Closed trades, oldest first (at least 10).
        account_balance: Balance the position is sized from.
        stop_loss_percent: Price move to the stop as a fraction of entry.
        leverage: Applied leverage.
        mode: Kelly fraction mode.
        max_risk_of_ruin: Acceptable risk of ruin.

    Returns:
        SafePositionSize.

    Raises:
        InsufficientDataError: If fewer than 10 trades.
        DegenerateRatioError: If there is no losing trade.
    """
    if leverage <= 0:
        raise InvalidLeverageError(f"Leverage must be positive, got {leverage}")

    if stop_loss_percent <= 0 or stop_loss_percent > 1:
        raise InvalidInputError(f"stop_loss_percent must be within (0, 1], got {stop_loss_percent}")

    if account_balance <= 0:
        raise InvalidInputError(f"account_balance must be positive, got {account_balance}")

    optimal_f = calc_optimal_f([t.pnl_percent for t in trades])
    kelly = calc_kelly_metrics(trades, equity=account_balance, mode=mode)

    fraction = min(optimal_f, kelly.active_fraction)
    loss_per_margin = stop_loss_percent * leverage
    reduced = False

    if fraction <= 0:
        # No edge, nothing to risk
        return SafePositionSize(
            optimal_f=optimal_f,
            kelly_fraction=kelly.active_fraction,
            position_percent=0.0,
            position_size=0.0,
            leverage_adjusted_size=0.0,
            max_loss_amount=0.0,
            risk_of_ruin=0.0,
            is_zero_ruin_safe=True,
            reduced=False,
        )

    def ror_at(percent: float) -> float:
        return calc_risk_of_ruin(
            kelly.win_rate,
            kelly.avg_win,
            kelly.avg_loss,
            account_balance * percent * loss_per_margin,
            account_balance,
        )

    position_percent = fraction
    if ror_at(position_percent) > max_risk_of_ruin:
        safe_risk = calc_zero_ruin_size(
            kelly.win_rate, kelly.avg_win, kelly.avg_loss, account_balance, max_risk_of_ruin
        )
        position_percent = safe_risk / (account_balance * loss_per_margin)
        reduced = True

    position_percent = min(MAX_POSITION_PERCENT, max(MIN_POSITION_PERCENT, position_percent))
    position_size = account_balance * position_percent
    risk_of_ruin = ror_at(position_percent)

    return SafePositionSize(
        optimal_f=optimal_f,
        kelly_fraction=kelly.active_fraction,
        position_percent=position_percent,
        position_size=position_size,
        leverage_adjusted_size=position_size * leverage,
        max_loss_amount=position_size * loss_per_margin,
        risk_of_ruin=risk_of_ruin,
        is_zero_ruin_safe=(
            risk_of_ruin <= max_risk_of_ruin or math.isclose(risk_of_ruin, max_risk_of_ruin)
        ),
        reduced=reduced,
    )
