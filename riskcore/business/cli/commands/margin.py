"""
Margin Command - 保证金命令

计算逐仓保证金与强平价格。
"""

import json
import sys

import click

from riskcore.engine.account.margin import (
    assess_risk_level,
    calc_liquidation_distance,
    calc_margin,
)
from riskcore.engine.models.enums import PositionSide
from riskcore.engine.models.errors import RiskCoreError


@click.command()
@click.option("--size", type=float, required=True, help="名义仓位价值")
@click.option("--leverage", "-L", type=float, required=True, help="杠杆")
@click.option("--entry", type=float, required=True, help="开仓价格")
@click.option(
    "--side",
    type=click.Choice([s.value for s in PositionSide]),
    default=PositionSide.LONG.value,
    help="方向",
)
@click.option("--mmr", type=float, default=0.005, show_default=True, help="维持保证金率")
@click.option("--max-leverage", type=float, help="最大杠杆限制")
@click.option("--json", "as_json", is_flag=True, help="JSON 输出")
def margin(
    size: float,
    leverage: float,
    entry: float,
    side: str,
    mmr: float,
    max_leverage: float | None,
    as_json: bool,
) -> None:
    """计算保证金与强平价格

    \b
    示例：
      riskcore margin --size 10000 -L 10 --entry 98000 --side short
    """
    try:
        result = calc_margin(
            size,
            leverage,
            entry,
            PositionSide(side),
            maintenance_margin_rate=mmr,
            max_leverage=max_leverage,
        )
    except RiskCoreError as e:
        click.echo(f"❌ 错误: {e}", err=True)
        sys.exit(1)

    distance = calc_liquidation_distance(entry, result.liquidation_price)
    level = assess_risk_level(leverage, distance)

    if as_json:
        data = result.to_dict()
        data["liquidation_distance_percent"] = distance
        data["risk_level"] = level.value
        click.echo(json.dumps(data, indent=2))
        return

    click.echo(f"Margin required:   {result.margin_required:.2f}")
    click.echo(f"Position (asset):  {result.position_size_asset:.6f}")
    click.echo(f"Liquidation price: {result.liquidation_price:.2f} ({distance:.2f}% away)")
    click.echo(f"Risk level:        {level.value}")
