"""
Kelly Command - Kelly 仓位命令

由汇总统计直接计算 Kelly 仓位。
"""

import json
import sys

import click

from riskcore.engine.account.position_sizing import (
    calc_kelly_metrics_from_stats,
    interpret_kelly,
)
from riskcore.engine.models.enums import KellyFractionMode
from riskcore.engine.models.errors import RiskCoreError


@click.command()
@click.option("--win-rate", type=float, required=True, help="胜率 (0-1)")
@click.option("--avg-win", type=float, required=True, help="平均盈利收益率")
@click.option("--avg-loss", type=float, required=True, help="平均亏损收益率")
@click.option("--equity", type=float, required=True, help="账户权益")
@click.option("--trades", "historical_trades", type=int, required=True, help="历史交易笔数")
@click.option(
    "--mode",
    type=click.Choice([m.value for m in KellyFractionMode]),
    default=KellyFractionMode.HALF.value,
    help="Kelly 仓位模式",
)
@click.option("--leverage", "-L", type=float, help="拟使用杠杆")
@click.option("--json", "as_json", is_flag=True, help="JSON 输出")
def kelly(
    win_rate: float,
    avg_win: float,
    avg_loss: float,
    equity: float,
    historical_trades: int,
    mode: str,
    leverage: float | None,
    as_json: bool,
) -> None:
    """计算 Kelly 仓位

    \b
    示例：
      riskcore kelly --win-rate 0.62 --avg-win 0.0325 --avg-loss 0.0185 \\
          --equity 10000 --trades 156
    """
    try:
        metrics = calc_kelly_metrics_from_stats(
            win_rate=win_rate,
            avg_win=avg_win,
            avg_loss=avg_loss,
            equity=equity,
            mode=KellyFractionMode(mode),
            historical_trades=historical_trades,
            leverage=leverage,
        )
    except RiskCoreError as e:
        click.echo(f"❌ 错误: {e}", err=True)
        sys.exit(1)

    if as_json:
        click.echo(json.dumps(metrics.to_dict(), indent=2))
        return

    click.echo(f"Win/Loss ratio:  {metrics.profit_loss_ratio:.3f}")
    click.echo(f"Full Kelly:      {metrics.optimal_fraction:.4f} ({interpret_kelly(metrics.optimal_fraction)})")
    click.echo(f"Half Kelly:      {metrics.half_kelly_fraction:.4f}")
    click.echo(f"Quarter Kelly:   {metrics.quarter_kelly_fraction:.4f}")
    click.echo(f"Recommended:     {metrics.recommended_size:.2f} ({metrics.active_mode.value})")
    if metrics.high_leverage_advisory:
        click.echo(f"⚠️  高杠杆: 建议使用 {metrics.recommended_mode.value} Kelly")
