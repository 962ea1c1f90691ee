#!/usr/bin/env python3
"""Risk Engine Demo.

Demonstrates the risk calculations available in the engine layer and a
full snapshot through the business layer.
"""

import argparse
import logging
import random
from datetime import datetime, timedelta

from riskcore.business.config import RiskSettings
from riskcore.business.risk import RiskEngine
from riskcore.engine import (
    # Base types
    PositionSide,
    PriceBar,
    TradeRecord,
    # Position sizing
    calc_kelly_metrics,
    calc_optimal_f,
    calc_risk_of_ruin,
    calc_safe_position_size,
    interpret_kelly,
    # Margin
    assess_risk_level,
    calc_liquidation_distance,
    calc_margin,
    # Volatility
    calc_volatility_metrics,
    # Technical
    calc_chandelier_exit,
    # Portfolio
    calc_trade_statistics,
)

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def simulate_bars(days: int = 60) -> list[PriceBar]:
    """Simulated daily BTC bars."""
    random.seed(42)
    start = datetime(2025, 1, 1)
    bars = []
    close = 98_000.0
    for i in range(days):
        prev = close
        close = prev * (1 + random.gauss(0.001, 0.02))
        high = max(prev, close) * (1 + abs(random.gauss(0, 0.005)))
        low = min(prev, close) * (1 - abs(random.gauss(0, 0.005)))
        bars.append(PriceBar(start + timedelta(days=i), prev, high, low, close))
    return bars


def simulate_trades(count: int = 40) -> list[TradeRecord]:
    """Simulated trade history with a modest edge."""
    random.seed(7)
    start = datetime(2025, 1, 1)
    trades = []
    for i in range(count):
        pnl = random.uniform(0.01, 0.05) if random.random() < 0.58 else -random.uniform(0.01, 0.03)
        trades.append(TradeRecord.from_pnl(pnl, start + timedelta(days=i)))
    return trades


def demo_sizing(trades: list[TradeRecord]):
    """Demonstrate Kelly sizing."""
    logger.info("=" * 60)
    logger.info("Position Sizing Demo")
    logger.info("=" * 60)

    kelly = calc_kelly_metrics(trades, equity=10_000, leverage=25)
    logger.info(
        f"Win rate: {kelly.win_rate:.1%}, W/L ratio: {kelly.profit_loss_ratio:.2f}, "
        f"f*: {kelly.optimal_fraction:.3f} ({interpret_kelly(kelly.optimal_fraction)})"
    )
    logger.info(
        f"Half Kelly size: ${kelly.recommended_size:,.2f}, "
        f"advisory mode at 25x: {kelly.recommended_mode.value}"
    )

    optimal_f = calc_optimal_f([t.pnl_percent for t in trades])
    logger.info(f"Optimal f: {optimal_f:.2f}")

    ror = calc_risk_of_ruin(kelly.win_rate, kelly.avg_win, kelly.avg_loss, 200, 10_000)
    logger.info(f"Risk of ruin at $200 per trade: {ror:.2e}")

    safe = calc_safe_position_size(trades, 10_000, stop_loss_percent=0.05, leverage=25)
    logger.info(
        f"Zero-ruin size at 25x: margin ${safe.position_size:,.2f}, "
        f"notional ${safe.leverage_adjusted_size:,.2f}, RoR {safe.risk_of_ruin:.2e}, "
        f"reduced: {safe.reduced}"
    )

    stats = calc_trade_statistics(trades)
    logger.info(
        f"Profit factor: {stats.profit_factor:.2f}, expectancy: {stats.expectancy:.2%}, "
        f"max drawdown: {stats.max_drawdown:.1%}"
    )


def demo_market(bars: list[PriceBar]):
    """Demonstrate volatility targeting and chandelier stops."""
    logger.info("=" * 60)
    logger.info("Volatility & Stops Demo")
    logger.info("=" * 60)

    vol = calc_volatility_metrics(bars, target_volatility=0.03, window=22)
    logger.info(
        f"Volatility: {vol.current_volatility:.2%} (target {vol.target_volatility:.2%}), "
        f"adjustment: {vol.position_adjustment:.2f}, max leverage: {vol.recommended_leverage}x"
    )

    exit_ = calc_chandelier_exit(bars, multiplier=3.0, atr_period=22)
    logger.info(
        f"ATR(22): {exit_.atr:,.2f}, long stop: {exit_.long_stop:,.2f}, "
        f"short stop: {exit_.short_stop:,.2f}"
    )


def demo_margin():
    """Demonstrate margin and liquidation."""
    logger.info("=" * 60)
    logger.info("Margin Demo")
    logger.info("=" * 60)

    for leverage in (5, 10, 25, 75):
        result = calc_margin(10_000, leverage, 98_000, PositionSide.LONG)
        distance = calc_liquidation_distance(98_000, result.liquidation_price)
        logger.info(
            f"{leverage:>3}x: margin ${result.margin_required:,.2f}, "
            f"liquidation {result.liquidation_price:,.2f} ({distance:.1f}%), "
            f"risk {assess_risk_level(leverage, distance).value}"
        )


def demo_engine(trades: list[TradeRecord], bars: list[PriceBar]):
    """Demonstrate a full snapshot with an open position."""
    logger.info("=" * 60)
    logger.info("Risk Engine Demo")
    logger.info("=" * 60)

    engine = RiskEngine(RiskSettings(target_volatility=0.03))
    position = engine.open_position("BTCUSDT", PositionSide.LONG, 5_000, 5, bars[-10].close)

    snapshot = engine.snapshot(trades, bars, leverage=5)
    logger.info(f"Risk score: {snapshot.risk_score}, level: {snapshot.risk_level.value}")
    for p in snapshot.positions:
        logger.info(
            f"{p.symbol} {p.side.value}: pnl {p.unrealized_pnl:,.2f}, "
            f"stop {p.stop_price}, triggered {p.stop_triggered}"
        )
    for warning in snapshot.warnings:
        logger.info(f"Warning: {warning}")

    trade = engine.close_position(position.position_id, bars[-1].close)
    logger.info(f"Closed: {trade.outcome.value} {trade.pnl_percent:.2%} on margin")
    logger.info(f"Wallet: {engine.wallet.to_dict()}")


def main():
    """Run all demos."""
    parser = argparse.ArgumentParser(description="Risk Engine Demo")
    parser.add_argument(
        "--module",
        choices=["sizing", "market", "margin", "engine", "all"],
        default="all",
        help="Which module to demo",
    )
    args = parser.parse_args()

    trades = simulate_trades()
    bars = simulate_bars()

    if args.module in ("sizing", "all"):
        demo_sizing(trades)

    if args.module in ("market", "all"):
        demo_market(bars)

    if args.module in ("margin", "all"):
        demo_margin()

    if args.module in ("engine", "all"):
        demo_engine(trades, bars)

    logger.info("\n" + "=" * 60)
    logger.info("Demo completed!")


if __name__ == "__main__":
    main()
