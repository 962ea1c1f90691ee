"""
Risk Config - 风险配置管理

加载和管理风险引擎的配置参数

| 参数                   | 默认值     | 说明                                |
|------------------------|------------|-------------------------------------|
| max_leverage           | 10         | 允许的最大杠杆                      |
| target_volatility      | 0.05       | 目标波动率 (与 annualization 同单位) |
| atr_multiplier         | 3.0        | Chandelier exit 的 ATR 倍数         |
| kelly_fraction_mode    | half       | full / half / quarter               |
| atr_period             | 22         | ATR 回看周期                        |
| volatility_window      | 22         | 当前波动率的回看收益数              |
| rolling_window         | 10         | 滚动波动率子窗口                    |
| annualization_periods  | null       | 年化周期数, null = 按周期波动率     |
| maintenance_margin_rate| 0.005      | 维持保证金率                        |
| atr_smoothing          | simple     | simple / wilder                     |
| trading_mode           | simulation | simulation / live                   |
| initial_balance        | 10000      | 模拟钱包初始余额                    |
| stop_loss_percent      | 0.05       | 零破产仓位计算使用的止损幅度        |
"""

import logging
import os
from dataclasses import asdict, dataclass, fields, replace
from enum import Enum
from pathlib import Path
from typing import Any

import yaml

from riskcore.engine.models.enums import AtrSmoothing, KellyFractionMode, TradingMode
from riskcore.engine.models.errors import InvalidInputError

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "RISKCORE_CONFIG"

_ENUM_FIELDS: dict[str, type[Enum]] = {
    "kelly_fraction_mode": KellyFractionMode,
    "atr_smoothing": AtrSmoothing,
    "trading_mode": TradingMode,
}


@dataclass(frozen=True)
class RiskSettings:
    """风险配置

    不可变, 通过 with_updates() 生成新配置。

    Attributes:
        max_leverage: 允许的最大杠杆
        target_volatility: 目标波动率
        atr_multiplier: ATR 倍数 k
        kelly_fraction_mode: Kelly 仓位模式
        atr_period: ATR 周期
        volatility_window: 当前波动率回看收益数
        rolling_window: 滚动波动率子窗口
        annualization_periods: 年化周期数 (None 不年化)
        maintenance_margin_rate: 维持保证金率
        atr_smoothing: ATR 平滑方式
        trading_mode: 交易模式
        initial_balance: 模拟钱包初始余额
        stop_loss_percent: 零破产仓位计算的止损幅度 (占开仓价比例)
    """

    max_leverage: float = 10.0
    target_volatility: float = 0.05
    atr_multiplier: float = 3.0
    kelly_fraction_mode: KellyFractionMode = KellyFractionMode.HALF

    atr_period: int = 22
    volatility_window: int = 22
    rolling_window: int = 10
    annualization_periods: int | None = None
    maintenance_margin_rate: float = 0.005
    atr_smoothing: AtrSmoothing = AtrSmoothing.SIMPLE
    trading_mode: TradingMode = TradingMode.SIMULATION
    initial_balance: float = 10_000.0
    stop_loss_percent: float = 0.05

    def __post_init__(self) -> None:
        if self.max_leverage < 1:
            raise InvalidInputError(f"max_leverage must be >= 1, got {self.max_leverage}")
        if self.target_volatility <= 0:
            raise InvalidInputError(
                f"target_volatility must be positive, got {self.target_volatility}"
            )
        if self.atr_multiplier <= 0:
            raise InvalidInputError(f"atr_multiplier must be positive, got {self.atr_multiplier}")
        if self.atr_period < 1 or self.volatility_window < 2 or self.rolling_window < 2:
            raise InvalidInputError("atr_period must be >= 1 and volatility windows >= 2")
        if not 0 <= self.maintenance_margin_rate < 1:
            raise InvalidInputError(
                f"maintenance_margin_rate must be within [0, 1), got {self.maintenance_margin_rate}"
            )
        if self.initial_balance < 0:
            raise InvalidInputError(f"initial_balance must be >= 0, got {self.initial_balance}")
        if not 0 < self.stop_loss_percent <= 1:
            raise InvalidInputError(
                f"stop_loss_percent must be within (0, 1], got {self.stop_loss_percent}"
            )

    def with_updates(self, **changes: Any) -> "RiskSettings":
        """返回更新后的新配置"""
        return replace(self, **_coerce_enums(changes))

    def to_dict(self) -> dict[str, Any]:
        return {
            k: v.value if isinstance(v, Enum) else v for k, v in asdict(self).items()
        }

    @classmethod
    def from_yaml(cls, path: str | Path) -> "RiskSettings":
        """从 YAML 文件加载配置"""
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        logger.debug(f"Loaded risk settings from {path}")
        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RiskSettings":
        """从字典创建配置

        支持顶层 ``risk`` 键, 未知字段忽略并记录警告。
        """
        if "risk" in data and isinstance(data["risk"], dict):
            data = data["risk"]

        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            logger.warning(f"Ignoring unknown risk settings: {sorted(unknown)}")

        values = {k: v for k, v in data.items() if k in known}
        return cls(**_coerce_enums(values))

    @classmethod
    def load(cls) -> "RiskSettings":
        """加载默认配置

        优先级: 环境变量 RISKCORE_CONFIG > config/risk/settings.yaml > 默认值
        """
        env_path = os.getenv(CONFIG_ENV_VAR)
        if env_path:
            return cls.from_yaml(env_path)

        config_dir = Path(__file__).parent.parent.parent.parent / "config" / "risk"
        config_file = config_dir / "settings.yaml"
        if config_file.exists():
            return cls.from_yaml(config_file)
        return cls()


def _coerce_enums(values: dict[str, Any]) -> dict[str, Any]:
    result = dict(values)
    for name, enum_type in _ENUM_FIELDS.items():
        raw = result.get(name)
        if raw is None or isinstance(raw, enum_type):
            continue
        try:
            result[name] = enum_type(str(raw).lower())
        except ValueError as e:
            choices = [m.value for m in enum_type]
            raise InvalidInputError(f"{name} must be one of {choices}, got {raw!r}") from e
    return result
