"""Capital management calculations.

Account-level module for converting balances into order sizes.
"""

import math

from riskcore.engine.models.errors import InvalidInputError, InvalidLeverageError
from riskcore.engine.models.result import RiskReward


def calc_size_from_percent(available_balance: float, percent: float) -> int:
    """Calculate order size as a whole-unit share of available balance.

    Args:
        available_balance: Available balance.
        percent: Share of the balance in percent (0-100).

    Returns:
        floor(available_balance * percent / 100).

    Example:
        >>> calc_size_from_percent(10000, 25)
        2500
    """
    if percent < 0 or percent > 100:
        raise InvalidInputError(f"percent must be within [0, 100], got {percent}")

    return math.floor(available_balance * percent / 100)


def calc_position_value(margin: float, leverage: float) -> float:
    """Calculate notional controlled by a margin amount.

    Example:
        >>> calc_position_value(1000, 10)
        10000
    """
    if leverage <= 0:
        raise InvalidLeverageError(f"Leverage must be positive, got {leverage}")

    return margin * leverage


def calc_position_size_asset(margin: float, leverage: float, asset_price: float) -> float:
    """Calculate position size in asset units.

    Example:
        >>> round(calc_position_size_asset(1000, 10, 98000), 3)
        0.102
    """
    if asset_price <= 0:
        raise InvalidInputError(f"asset_price must be positive, got {asset_price}")

    return calc_position_value(margin, leverage) / asset_price


def calc_risk_reward(
    entry_price: float,
    stop_loss: float,
    take_profit: float,
) -> RiskReward:
    """Calculate risk/reward of a bracket order.

    Physical meaning:
    - risk_percent is the move to the stop as a fraction of entry
    - reward_percent is the move to the target as a fraction of entry
    - ratio >= 2 is the usual minimum for a trade setup

    Args:
        entry_price: Entry price.
        stop_loss: Stop loss price.
        take_profit: Take profit price.

    Returns:
        RiskReward.

    Example:
        >>> rr = calc_risk_reward(98000, 95000, 104000)
        >>> round(rr.ratio, 2)
        2.0
    """
    if entry_price <= 0:
        raise InvalidInputError(f"entry_price must be positive, got {entry_price}")

    risk_percent = abs(entry_price - stop_loss) / entry_price
    reward_percent = abs(take_profit - entry_price) / entry_price

    if risk_percent == 0:
        raise InvalidInputError("stop_loss equals entry_price, risk is zero")

    return RiskReward(
        risk_percent=risk_percent,
        reward_percent=reward_percent,
        ratio=reward_percent / risk_percent,
    )


def calc_take_profit_price(
    entry_price: float,
    stop_loss: float,
    ratio: float = 2.0,
) -> float:
    """Calculate the take profit for a target risk/reward ratio.

    The target sits on the opposite side of entry from the stop.

    Example:
        >>> calc_take_profit_price(98000, 95000, 2.0)
        104000.0
    """
    distance = entry_price - stop_loss
    return entry_price + distance * ratio


def calc_position_for_risk(
    account_balance: float,
    risk_percent: float,
    entry_price: float,
    stop_loss: float,
    leverage: float,
) -> dict[str, float]:
    """Calculate the position whose stop-out loses a fixed share of balance.

    Formula:
    - risk_amount = balance * risk_percent
    - position_size = risk_amount / (|entry - stop| / entry)
    - margin = position_size / leverage

    Args:
        account_balance: Account balance.
        risk_percent: Fraction of balance at risk (e.g., 0.02).
        entry_price: Entry price.
        stop_loss: Stop loss price.
        leverage: Applied leverage.

    Returns:
        Dict with position_size, margin and risk_amount.
    """
    if leverage <= 0:
        raise InvalidLeverageError(f"Leverage must be positive, got {leverage}")

    if entry_price <= 0:
        raise InvalidInputError(f"entry_price must be positive, got {entry_price}")

    stop_percent = abs(entry_price - stop_loss) / entry_price
    if stop_percent == 0:
        raise InvalidInputError("stop_loss equals entry_price, risk is zero")

    risk_amount = account_balance * risk_percent
    position_size = risk_amount / stop_percent

    return {
        "position_size": position_size,
        "margin": position_size / leverage,
        "risk_amount": risk_amount,
    }
