"""Trade history return calculations.

Portfolio-level module for performance statistics of closed trades.
"""

from collections.abc import Sequence

from riskcore.engine.models.enums import TradeOutcome
from riskcore.engine.models.errors import InsufficientDataError
from riskcore.engine.models.market import TradeRecord
from riskcore.engine.models.result import TradeStatistics


def build_equity_curve(
    trades: Sequence[TradeRecord],
    starting_equity: float = 1.0,
) -> list[float]:
    """Build a compounded equity curve from trade returns.

    Args:
        trades: Closed trades (oldest to newest).
        starting_equity: Equity before the first trade.

    Returns:
        List of len(trades) + 1 equity values, starting with starting_equity.

    Example:
        >>> build_equity_curve([win(0.10), loss(-0.05)], 100)
        [100, 110.0, 104.5]
    """
    curve = [starting_equity]
    for trade in trades:
        curve.append(curve[-1] * (1 + trade.pnl_percent))
    return curve


def calc_max_drawdown(equity_curve: Sequence[float]) -> float | None:
    """Calculate maximum drawdown from an equity curve.

    Max Drawdown = (Peak - Trough) / Peak

    Args:
        equity_curve: List of portfolio values or cumulative returns (oldest to newest).

    Returns:
        Maximum drawdown as a positive decimal (e.g., 0.20 for 20% drawdown).
        Returns 0 if equity is monotonically increasing.
        Returns None if insufficient data.

    Example:
        >>> equity = [100, 110, 105, 120, 100, 130]
        >>> mdd = calc_max_drawdown(equity)
        >>> abs(mdd - 0.1667) < 0.01  # ~16.67% drawdown from 120 to 100
        True
    """
    if len(equity_curve) < 2:
        return None

    max_drawdown = 0.0
    peak = equity_curve[0]

    for value in equity_curve:
        if value > peak:
            peak = value
        elif peak > 0:
            drawdown = (peak - value) / peak
            max_drawdown = max(max_drawdown, drawdown)

    return max_drawdown


def _calc_streaks(trades: Sequence[TradeRecord]) -> tuple[int, int, int]:
    current = 0
    longest_win = 0
    longest_loss = 0

    for trade in trades:
        if trade.outcome == TradeOutcome.WIN:
            current = current + 1 if current > 0 else 1
            longest_win = max(longest_win, current)
        else:
            current = current - 1 if current < 0 else -1
            longest_loss = max(longest_loss, -current)

    return current, longest_win, longest_loss


def calc_trade_statistics(trades: Sequence[TradeRecord]) -> TradeStatistics:
    """Calculate performance statistics from a trade history snapshot.

    Args:
        trades: Closed trades (oldest to newest).

    Returns:
        TradeStatistics.

    Raises:
        InsufficientDataError: If there are no trades.
    """
    if not trades:
        raise InsufficientDataError("Trade statistics need at least one trade")

    wins = [abs(t.pnl_percent) for t in trades if t.outcome == TradeOutcome.WIN]
    losses = [abs(t.pnl_percent) for t in trades if t.outcome == TradeOutcome.LOSS]

    win_rate = len(wins) / len(trades)
    avg_win = sum(wins) / len(wins) if wins else 0.0
    avg_loss = sum(losses) / len(losses) if losses else 0.0

    gross_loss = sum(losses)
    profit_factor = sum(wins) / gross_loss if gross_loss > 0 else None

    expectancy = win_rate * avg_win - (1 - win_rate) * avg_loss

    current_streak, longest_win, longest_loss = _calc_streaks(trades)

    return TradeStatistics(
        total_trades=len(trades),
        winning_trades=len(wins),
        losing_trades=len(losses),
        win_rate=win_rate,
        avg_win=avg_win,
        avg_loss=avg_loss,
        profit_factor=profit_factor,
        expectancy=expectancy,
        max_drawdown=calc_max_drawdown(build_equity_curve(trades)) or 0.0,
        current_streak=current_streak,
        longest_win_streak=longest_win,
        longest_loss_streak=longest_loss,
    )
