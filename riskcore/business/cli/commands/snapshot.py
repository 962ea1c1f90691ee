"""
Snapshot Command - 风险快照命令

从 JSON 文件读取 K 线与交易历史, 计算一次风险快照。
"""

import json
import logging
import sys
from pathlib import Path
from typing import Any, Optional

import click

from riskcore.business.config.risk_config import RiskSettings
from riskcore.business.risk.engine import RiskEngine
from riskcore.business.risk.models import RiskSnapshot
from riskcore.engine.account.position_sizing import interpret_kelly
from riskcore.engine.models.errors import RiskCoreError
from riskcore.engine.models.market import PriceBar, TradeRecord

logger = logging.getLogger(__name__)


@click.command()
@click.option(
    "--bars",
    "-b",
    type=click.Path(exists=True),
    required=True,
    help="K 线 JSON 文件路径 (timestamp/open/high/low/close 列表)",
)
@click.option(
    "--trades",
    "-t",
    type=click.Path(exists=True),
    help="交易历史 JSON 文件路径 (outcome/pnl_percent/timestamp 列表)",
)
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True),
    help="风险配置 YAML 文件路径",
)
@click.option(
    "--leverage",
    "-L",
    type=float,
    help="拟使用杠杆",
)
@click.option(
    "--output",
    "-o",
    type=click.Choice(["text", "json"]),
    default="text",
    help="输出格式",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="显示详细日志",
)
def snapshot(
    bars: str,
    trades: Optional[str],
    config: Optional[str],
    leverage: Optional[float],
    output: str,
    verbose: bool,
) -> None:
    """计算风险快照

    \b
    示例：
      riskcore snapshot -b bars.json -t trades.json
      riskcore snapshot -b bars.json -L 25 -o json
    """
    # 配置日志
    log_level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        settings = RiskSettings.from_yaml(config) if config else RiskSettings.load()
        bar_list = [PriceBar.from_dict(d) for d in _load_json_list(bars)]
        trade_list = [TradeRecord.from_dict(d) for d in _load_json_list(trades)] if trades else []

        engine = RiskEngine(settings)
        result = engine.snapshot(trade_list, bar_list, leverage=leverage)

        if output == "json":
            click.echo(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))
        else:
            _print_text(result)

    except (RiskCoreError, KeyError, TypeError, ValueError) as e:
        logger.error(f"Snapshot failed: {e}")
        click.echo(f"❌ 错误: {e}", err=True)
        sys.exit(1)


def _load_json_list(path: str) -> list[dict[str, Any]]:
    with open(Path(path), "r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, list):
        raise click.BadParameter(f"{path} must contain a JSON list")
    return data


def _fmt(value: float | None, pattern: str = "{:.4f}") -> str:
    return "N/A" if value is None else pattern.format(value)


def _print_text(result: RiskSnapshot) -> None:
    wallet = result.wallet
    click.echo("📊 风险快照")
    click.echo("-" * 50)
    click.echo(
        f"钱包: total={float(wallet.total_balance):.2f} "
        f"available={float(wallet.available_balance):.2f} "
        f"locked={float(wallet.locked_balance):.2f} ({wallet.utilization_percent}%)"
    )

    score = "N/A" if result.risk_score is None else str(result.risk_score)
    level = result.risk_level.value if result.risk_level else "N/A"
    click.echo(f"风险评分: {score}  风险等级: {level}")
    click.echo()

    k = result.kelly
    if k is not None:
        click.echo(
            f"Kelly: f*={k.optimal_fraction:.4f} ({interpret_kelly(k.optimal_fraction)}) "
            f"{k.active_mode.value}={k.active_fraction:.4f} "
            f"size={k.recommended_size:.2f} trades={k.historical_trades}"
        )
    p = result.position_sizing
    if p is not None:
        safe = "✅" if p.is_zero_ruin_safe else "❌"
        click.echo(
            f"零破产仓位: margin={p.position_size:.2f} ({p.position_percent:.2%}) "
            f"notional={p.leverage_adjusted_size:.2f} max_loss={p.max_loss_amount:.2f} "
            f"RoR={p.risk_of_ruin:.4%} {safe}"
        )
    v = result.volatility
    if v is not None:
        click.echo(
            f"波动率: current={v.current_volatility:.4f} target={v.target_volatility:.4f} "
            f"adjustment={v.position_adjustment:.3f} max_leverage={v.recommended_leverage}x"
        )
    c = result.chandelier
    if c is not None:
        click.echo(
            f"Chandelier: ATR({c.atr_period})={_fmt(c.atr, '{:.2f}')} "
            f"long_stop={c.long_stop:.2f} short_stop={c.short_stop:.2f} price={c.current_price:.2f}"
        )

    for name, reason in result.unavailable.items():
        click.echo(f"⚪ {name}: 暂不可用 ({reason})")

    for warning in result.warnings:
        click.echo(f"⚠️  {warning}")
