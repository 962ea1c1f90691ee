"""
Risk Models - 风险引擎数据模型

OpenPosition 由 RiskEngine 持有; PositionRisk / RiskSnapshot 为只读快照,
供展示层消费。
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from riskcore.business.config.risk_config import RiskSettings
from riskcore.engine.models.enums import PositionSide, RiskLevel
from riskcore.engine.models.result import (
    ChandelierExit,
    KellyMetrics,
    MarginResult,
    SafePositionSize,
    TradeStatistics,
    VolatilityMetrics,
)
from riskcore.engine.models.wallet import Wallet


@dataclass
class OpenPosition:
    """引擎内部持仓

    记录开仓参数及上次计算的追踪止损, 止损只会收紧。
    """

    position_id: str
    symbol: str
    side: PositionSide
    margin: MarginResult
    opened_at: datetime
    chandelier: ChandelierExit | None = None

    @property
    def entry_price(self) -> float:
        return self.margin.entry_price

    @property
    def leverage(self) -> float:
        return self.margin.leverage

    @property
    def margin_required(self) -> float:
        return self.margin.margin_required

    @property
    def notional(self) -> float:
        """名义价值"""
        return self.margin.position_size

    def calc_pnl(self, price: float) -> float:
        """按价格计算盈亏 (逐仓: 亏损不超过保证金)"""
        move = price / self.entry_price - 1
        if self.side == PositionSide.SHORT:
            move = -move
        return max(self.notional * move, -self.margin_required)


@dataclass(frozen=True)
class PositionRisk:
    """持仓风险快照"""

    position_id: str
    symbol: str
    side: PositionSide
    leverage: float
    entry_price: float
    margin_required: float
    liquidation_price: float
    current_price: float
    unrealized_pnl: float
    liquidation_distance_percent: float
    risk_level: RiskLevel
    stop_price: float | None = None
    stop_triggered: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "position_id": self.position_id,
            "symbol": self.symbol,
            "side": self.side.value,
            "leverage": self.leverage,
            "entry_price": self.entry_price,
            "margin_required": self.margin_required,
            "liquidation_price": self.liquidation_price,
            "current_price": self.current_price,
            "unrealized_pnl": self.unrealized_pnl,
            "liquidation_distance_percent": self.liquidation_distance_percent,
            "risk_level": self.risk_level.value,
            "stop_price": self.stop_price,
            "stop_triggered": self.stop_triggered,
        }


@dataclass(frozen=True)
class RiskSnapshot:
    """风险快照

    无法计算的指标为 None, 原因记录在 unavailable 中 (指标名 -> 原因),
    不会用默认数值代替。
    """

    timestamp: datetime
    settings: RiskSettings
    wallet: Wallet
    kelly: KellyMetrics | None
    statistics: TradeStatistics | None
    volatility: VolatilityMetrics | None
    chandelier: ChandelierExit | None
    position_sizing: SafePositionSize | None
    positions: tuple[PositionRisk, ...]
    risk_score: int | None
    risk_level: RiskLevel | None
    unavailable: dict[str, str] = field(default_factory=dict)
    warnings: tuple[str, ...] = ()

    @property
    def utilization_percent(self) -> int:
        return self.wallet.utilization_percent

    @property
    def is_complete(self) -> bool:
        """所有指标均可用"""
        return not self.unavailable

    def to_dict(self) -> dict[str, Any]:
        return {
            "timestamp": self.timestamp.isoformat(),
            "settings": self.settings.to_dict(),
            "wallet": self.wallet.to_dict(),
            "kelly": self.kelly.to_dict() if self.kelly else None,
            "statistics": self.statistics.to_dict() if self.statistics else None,
            "volatility": self.volatility.to_dict() if self.volatility else None,
            "chandelier": self.chandelier.to_dict() if self.chandelier else None,
            "position_sizing": self.position_sizing.to_dict() if self.position_sizing else None,
            "positions": [p.to_dict() for p in self.positions],
            "risk_score": self.risk_score,
            "risk_level": self.risk_level.value if self.risk_level else None,
            "unavailable": dict(self.unavailable),
            "warnings": list(self.warnings),
        }
