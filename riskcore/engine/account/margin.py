"""Margin management calculations.

Account-level module for margin-related metrics.

Uses a simplified isolated-margin model: no funding payments, no
cross-margin netting and no tiered maintenance rates.
"""

import math

from riskcore.engine.models.enums import PositionSide, RiskLevel
from riskcore.engine.models.errors import InvalidInputError, InvalidLeverageError
from riskcore.engine.models.result import MarginResult


def _validate_leverage(leverage: float, max_leverage: float | None) -> None:
    if not math.isfinite(leverage) or leverage <= 0:
        raise InvalidLeverageError(f"Leverage must be positive, got {leverage}")

    if max_leverage is not None and leverage > max_leverage:
        raise InvalidLeverageError(f"Leverage {leverage}x exceeds max {max_leverage}x")


def calc_liquidation_price(
    entry_price: float,
    leverage: float,
    side: PositionSide,
    maintenance_margin_rate: float = 0.005,
) -> float:
    """Calculate isolated-margin liquidation price.

    Formula:
    - Long:  entry * (1 - 1/leverage + mmr)
    - Short: entry * (1 + 1/leverage - mmr)

    Args:
        entry_price: Position entry price.
        leverage: Applied leverage (> 0).
        side: Long or short.
        maintenance_margin_rate: Maintenance margin rate (e.g., 0.005 for 0.5%).

    Returns:
        Liquidation price.

    Example:
        >>> calc_liquidation_price(98000, 10, PositionSide.LONG, 0.005)
        88690.0
        >>> calc_liquidation_price(98000, 10, PositionSide.SHORT, 0.005)
        107310.0
    """
    _validate_leverage(leverage, None)

    if entry_price <= 0:
        raise InvalidInputError(f"entry_price must be positive, got {entry_price}")

    if maintenance_margin_rate < 0 or maintenance_margin_rate >= 1:
        raise InvalidInputError(
            f"maintenance_margin_rate must be within [0, 1), got {maintenance_margin_rate}"
        )

    if side == PositionSide.LONG:
        return entry_price * (1 - 1 / leverage + maintenance_margin_rate)
    return entry_price * (1 + 1 / leverage - maintenance_margin_rate)


def calc_margin(
    position_size: float,
    leverage: float,
    entry_price: float,
    side: PositionSide,
    maintenance_margin_rate: float = 0.005,
    max_leverage: float | None = None,
) -> MarginResult:
    """Calculate margin requirement and liquidation price of a position.

    Physical meaning:
    - margin_required is the collateral locked for the position
    - liquidation_price is where the margin no longer covers maintenance

    Args:
        position_size: Notional value of the position.
        leverage: Applied leverage.
        entry_price: Entry price.
        side: Long or short.
        maintenance_margin_rate: Maintenance margin rate.
        max_leverage: Configured leverage ceiling (None = unbounded).

    Returns:
        MarginResult.

    Raises:
        InvalidLeverageError: If leverage <= 0 or exceeds max_leverage.
        InvalidInputError: If position_size or entry_price is invalid.

    Example:
        >>> calc_margin(10_000, 10, 98000, PositionSide.LONG).margin_required
        1000.0
    """
    _validate_leverage(leverage, max_leverage)

    if position_size < 0:
        raise InvalidInputError(f"position_size must be non-negative, got {position_size}")

    liquidation_price = calc_liquidation_price(
        entry_price, leverage, side, maintenance_margin_rate
    )

    return MarginResult(
        position_size=position_size,
        leverage=leverage,
        entry_price=entry_price,
        side=side,
        maintenance_margin_rate=maintenance_margin_rate,
        margin_required=position_size / leverage,
        liquidation_price=liquidation_price,
        position_size_asset=position_size / entry_price,
    )


def calc_liquidation_distance(
    current_price: float,
    liquidation_price: float,
) -> float:
    """Calculate distance from current price to liquidation, in percent.

    Args:
        current_price: Current market price.
        liquidation_price: Liquidation price of the position.

    Returns:
        Distance as a percentage of current price (e.g., 9.5 for 9.5%).

    Example:
        >>> calc_liquidation_distance(98000, 88690)
        9.5
    """
    if current_price <= 0:
        raise InvalidInputError(f"current_price must be positive, got {current_price}")

    return abs(current_price - liquidation_price) / current_price * 100


def assess_risk_level(leverage: float, distance_percent: float) -> RiskLevel:
    """Classify position risk from leverage and liquidation distance.

    | Level    | Leverage | Liquidation distance |
    |----------|----------|----------------------|
    | HIGH     | > 50x    | < 2%                 |
    | MODERATE | > 20x    | < 5%                 |
    | LOW      | otherwise                       |

    Args:
        leverage: Applied leverage.
        distance_percent: Distance to liquidation in percent.

    Returns:
        RiskLevel.
    """
    if leverage > 50 or distance_percent < 2:
        return RiskLevel.HIGH
    if leverage > 20 or distance_percent < 5:
        return RiskLevel.MODERATE
    return RiskLevel.LOW

