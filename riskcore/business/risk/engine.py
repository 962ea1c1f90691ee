"""
Risk Engine - 风险引擎

组合 Kelly 仓位、波动率目标、Chandelier 追踪止损、保证金/强平计算与钱包账本,
按需 (非定时) 生成风险快照。

- 快照计算不修改钱包状态
- 钱包只通过 open_position / close_position 变化, 经由 WalletLedger 与
  保证金计算
- 数据不足时对应指标为 None 并记录原因, 不伪造数值

Usage:
    engine = RiskEngine(RiskSettings.load())

    position = engine.open_position("BTCUSDT", PositionSide.LONG,
                                     position_size=5_000, leverage=5,
                                     entry_price=98_000)

    snapshot = engine.snapshot(trades, bars)

    trade = engine.close_position(position.position_id, exit_price=99_500)
"""

import logging
import uuid
from collections.abc import Callable, Sequence
from datetime import datetime
from threading import Lock
from typing import TypeVar

from riskcore.business.config.risk_config import RiskSettings
from riskcore.business.risk.models import OpenPosition, PositionRisk, RiskSnapshot
from riskcore.engine.account.margin import (
    assess_risk_level,
    calc_liquidation_distance,
    calc_margin,
)
from riskcore.engine.account.position_sizing import (
    calc_kelly_metrics,
    calc_safe_position_size,
)
from riskcore.engine.account.wallet import WalletLedger
from riskcore.engine.models.enums import (
    KellyFractionMode,
    PositionSide,
    RiskLevel,
    TradingMode,
)
from riskcore.engine.models.errors import (
    DegenerateRatioError,
    InsufficientBalanceError,
    InsufficientDataError,
    InvalidInputError,
    InvalidLeverageError,
    RiskLimitError,
)
from riskcore.engine.models.market import PriceBar, TradeRecord
from riskcore.engine.models.result import (
    ChandelierExit,
    KellyMetrics,
    MarginResult,
    SafePositionSize,
    TradeStatistics,
    VolatilityMetrics,
)
from riskcore.engine.models.wallet import Wallet
from riskcore.engine.portfolio.returns import calc_trade_statistics
from riskcore.engine.technical.chandelier import calc_chandelier_exit, is_stop_triggered
from riskcore.engine.volatility.targeting import calc_volatility_metrics

logger = logging.getLogger(__name__)

T = TypeVar("T")

# 风险评分权重: 胜率 / 反向波动率 / 仓位调整系数
SCORE_WEIGHTS = (0.4, 0.3, 0.3)

# 预警阈值
FULL_KELLY_LEVERAGE_WARNING = 10
MIN_PROFIT_FACTOR = 1.2
MAX_DRAWDOWN_WARNING = 0.30

_RISK_ORDER = {RiskLevel.LOW: 0, RiskLevel.MODERATE: 1, RiskLevel.HIGH: 2}


def _clamp(value: float) -> float:
    return min(1.0, max(0.0, value))


def calc_risk_score(
    win_rate: float,
    current_volatility: float,
    position_adjustment: float,
) -> int:
    """计算综合风险评分 (0-100)

    score = 100 * (0.4 * win_rate + 0.3 * (1 - volatility) + 0.3 * adjustment)

    各分量先截断到 [0, 1], 结果越高越安全。

    Example:
        >>> calc_risk_score(0.62, 0.045, 0.667)
        73
    """
    w_win, w_vol, w_adj = SCORE_WEIGHTS
    score = (
        w_win * _clamp(win_rate)
        + w_vol * _clamp(1 - current_volatility)
        + w_adj * _clamp(position_adjustment)
    ) * 100
    return int(min(100, max(0, round(score))))


def _max_level(levels: Sequence[RiskLevel]) -> RiskLevel | None:
    if not levels:
        return None
    return max(levels, key=lambda level: _RISK_ORDER[level])


class RiskEngine:
    """风险引擎

    分析组件均为纯函数; 唯一可变状态是钱包账本与引擎持有的持仓表,
    两者各自加锁, 加锁顺序固定为 引擎 -> 账本。
    """

    def __init__(
        self,
        settings: RiskSettings | None = None,
        ledger: WalletLedger | None = None,
    ) -> None:
        """初始化风险引擎

        Args:
            settings: 风险配置, 默认 RiskSettings()
            ledger: 钱包账本, 默认按 settings.initial_balance 新建
        """
        self._settings = settings or RiskSettings()
        self._ledger = ledger or WalletLedger(self._settings.initial_balance)
        self._positions: dict[str, OpenPosition] = {}
        self._lock = Lock()

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    @property
    def settings(self) -> RiskSettings:
        return self._settings

    def update_settings(self, settings: RiskSettings) -> None:
        """替换配置 (已开仓位不受影响)"""
        logger.info(
            f"Risk settings updated: max_leverage={settings.max_leverage} "
            f"kelly={settings.kelly_fraction_mode.value} mode={settings.trading_mode.value}"
        )
        self._settings = settings

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def wallet(self) -> Wallet:
        """钱包只读快照"""
        return self._ledger.wallet

    @property
    def positions(self) -> tuple[OpenPosition, ...]:
        with self._lock:
            return tuple(self._positions.values())

    def compute_kelly(
        self,
        trades: Sequence[TradeRecord],
        leverage: float | None = None,
        mode: KellyFractionMode | None = None,
    ) -> KellyMetrics:
        """按可用余额计算 Kelly 仓位"""
        equity = float(self.wallet.available_balance)
        return calc_kelly_metrics(
            trades,
            equity=equity,
            mode=mode or self._settings.kelly_fraction_mode,
            leverage=leverage,
        )

    def compute_safe_position_size(
        self,
        trades: Sequence[TradeRecord],
        leverage: float | None = None,
    ) -> SafePositionSize:
        """按可用余额计算零破产仓位 (未指定杠杆时按 1x)

        Raises:
            InsufficientBalanceError: 无可用余额
        """
        s = self._settings
        available = float(self.wallet.available_balance)
        if available <= 0:
            raise InsufficientBalanceError("No available balance to size a position")
        return calc_safe_position_size(
            trades,
            account_balance=available,
            stop_loss_percent=s.stop_loss_percent,
            leverage=leverage or 1.0,
            mode=s.kelly_fraction_mode,
        )

    def compute_volatility(self, bars: Sequence[PriceBar]) -> VolatilityMetrics:
        s = self._settings
        return calc_volatility_metrics(
            bars,
            target_volatility=s.target_volatility,
            window=s.volatility_window,
            rolling_window=s.rolling_window,
            annualization_periods=s.annualization_periods,
        )

    def compute_chandelier_exit(
        self,
        bars: Sequence[PriceBar],
        side: PositionSide | None = None,
        previous: ChandelierExit | None = None,
    ) -> ChandelierExit:
        s = self._settings
        return calc_chandelier_exit(
            bars,
            multiplier=s.atr_multiplier,
            side=side,
            previous=previous,
            atr_period=s.atr_period,
            smoothing=s.atr_smoothing,
        )

    def compute_margin(
        self,
        position_size: float,
        leverage: float,
        entry_price: float,
        side: PositionSide,
    ) -> MarginResult:
        s = self._settings
        return calc_margin(
            position_size,
            leverage,
            entry_price,
            side,
            maintenance_margin_rate=s.maintenance_margin_rate,
            max_leverage=s.max_leverage,
        )

    # ------------------------------------------------------------------
    # Trade execution
    # ------------------------------------------------------------------

    def open_position(
        self,
        symbol: str,
        side: PositionSide,
        position_size: float,
        leverage: float,
        entry_price: float,
    ) -> OpenPosition:
        """开仓: 计算保证金并在账本中锁定

        Raises:
            InvalidLeverageError: 杠杆超出配置范围
            RiskLimitError: 实盘模式下风险等级为 HIGH
            InsufficientBalanceError: 可用余额不足
        """
        if position_size <= 0:
            raise InvalidInputError(f"position_size must be positive, got {position_size}")

        margin = self.compute_margin(position_size, leverage, entry_price, side)
        distance = calc_liquidation_distance(entry_price, margin.liquidation_price)
        level = assess_risk_level(leverage, distance)

        if self._settings.trading_mode == TradingMode.LIVE and level == RiskLevel.HIGH:
            raise RiskLimitError(
                f"HIGH risk orders are blocked in live mode "
                f"(leverage {leverage}x, liquidation distance {distance:.2f}%)"
            )

        position = OpenPosition(
            position_id=uuid.uuid4().hex[:12],
            symbol=symbol,
            side=side,
            margin=margin,
            opened_at=datetime.now(),
        )

        with self._lock:
            self._ledger.reserve(margin.margin_required)
            self._positions[position.position_id] = position

        logger.info(
            f"Opened {side.value} {symbol} {position.position_id}: "
            f"size={position_size:.2f} leverage={leverage}x margin={margin.margin_required:.2f} "
            f"liquidation={margin.liquidation_price:.2f}"
        )
        return position

    def close_position(self, position_id: str, exit_price: float) -> TradeRecord:
        """平仓: 释放保证金并结算盈亏

        Returns:
            平仓生成的 TradeRecord (收益率相对保证金), 由调用方追加到交易历史

        Raises:
            KeyError: 持仓不存在
        """
        if exit_price <= 0:
            raise InvalidInputError(f"exit_price must be positive, got {exit_price}")

        with self._lock:
            position = self._positions.get(position_id)
            if position is None:
                raise KeyError(f"Unknown position: {position_id}")

            pnl = position.calc_pnl(exit_price)
            self._ledger.settle(position.margin_required, pnl)
            del self._positions[position_id]

        logger.info(
            f"Closed {position.side.value} {position.symbol} {position_id} "
            f"at {exit_price:.2f}: pnl={pnl:.2f}"
        )
        return TradeRecord.from_pnl(pnl / position.margin_required, datetime.now())

    # ------------------------------------------------------------------
    # Snapshot
    # ------------------------------------------------------------------

    def snapshot(
        self,
        trades: Sequence[TradeRecord],
        bars: Sequence[PriceBar],
        leverage: float | None = None,
        symbol: str | None = None,
    ) -> RiskSnapshot:
        """按需计算风险快照

        Args:
            trades: 交易历史快照 (旧 -> 新)
            bars: 价格 K 线快照 (旧 -> 新)
            leverage: 拟使用杠杆 (影响 Kelly 建议与风险等级)
            symbol: bars 对应的标的, 只标记该标的的持仓;
                None 仅在所有持仓属于同一标的时允许

        Returns:
            RiskSnapshot

        Raises:
            InvalidLeverageError: 杠杆非正
            InvalidInputError: 未指定 symbol 而持仓涉及多个标的
        """
        if leverage is not None and leverage <= 0:
            raise InvalidLeverageError(f"Leverage must be positive, got {leverage}")

        unavailable: dict[str, str] = {}

        kelly = self._attempt("kelly", unavailable, self.compute_kelly, trades, leverage)
        statistics = self._attempt("statistics", unavailable, calc_trade_statistics, trades)
        sizing = self._attempt(
            "position_sizing", unavailable, self.compute_safe_position_size, trades, leverage
        )
        volatility = self._attempt("volatility", unavailable, self.compute_volatility, bars)
        chandelier = self._attempt("chandelier", unavailable, self.compute_chandelier_exit, bars)

        positions = self._trail_positions(bars, symbol, unavailable)

        risk_score = None
        if kelly is not None and volatility is not None:
            risk_score = calc_risk_score(
                kelly.win_rate,
                volatility.current_volatility,
                volatility.position_adjustment,
            )
        else:
            unavailable.setdefault("risk_score", "requires kelly and volatility")

        levels = [p.risk_level for p in positions]
        if leverage is not None:
            levels.append(self._proposed_risk_level(leverage))

        snapshot = RiskSnapshot(
            timestamp=datetime.now(),
            settings=self._settings,
            wallet=self.wallet,
            kelly=kelly,
            statistics=statistics,
            volatility=volatility,
            chandelier=chandelier,
            position_sizing=sizing,
            positions=tuple(positions),
            risk_score=risk_score,
            risk_level=_max_level(levels),
            unavailable=unavailable,
            warnings=tuple(
                self._collect_warnings(kelly, statistics, sizing, leverage, positions)
            ),
        )

        logger.debug(
            f"Risk snapshot: score={risk_score} level={snapshot.risk_level} "
            f"positions={len(positions)} unavailable={sorted(unavailable)}"
        )
        return snapshot

    def _attempt(
        self,
        name: str,
        unavailable: dict[str, str],
        func: Callable[..., T],
        *args,
    ) -> T | None:
        try:
            return func(*args)
        except (InsufficientDataError, DegenerateRatioError, InsufficientBalanceError) as e:
            logger.debug(f"{name} not available: {e}")
            unavailable[name] = str(e)
            return None

    def _trail_positions(
        self,
        bars: Sequence[PriceBar],
        symbol: str | None,
        unavailable: dict[str, str],
    ) -> list[PositionRisk]:
        if not bars:
            with self._lock:
                if self._positions:
                    unavailable["positions"] = "no price bars to mark positions"
            return []

        latest = bars[-1]
        result = []

        with self._lock:
            if symbol is None:
                symbols = sorted({p.symbol for p in self._positions.values()})
                if len(symbols) > 1:
                    raise InvalidInputError(
                        f"Open positions span several symbols {symbols}, "
                        f"specify which one the bars belong to"
                    )

            for position in self._positions.values():
                if symbol is not None and position.symbol != symbol:
                    continue

                stop_price = None
                triggered = False
                chandelier = self._attempt(
                    f"stop:{position.position_id}",
                    unavailable,
                    self.compute_chandelier_exit,
                    bars,
                    position.side,
                    position.chandelier,
                )
                if chandelier is not None:
                    position.chandelier = chandelier
                    stop_price = chandelier.stop_for(position.side)
                    triggered = is_stop_triggered(latest, stop_price, position.side)

                distance = calc_liquidation_distance(
                    latest.close, position.margin.liquidation_price
                )
                result.append(
                    PositionRisk(
                        position_id=position.position_id,
                        symbol=position.symbol,
                        side=position.side,
                        leverage=position.leverage,
                        entry_price=position.entry_price,
                        margin_required=position.margin_required,
                        liquidation_price=position.margin.liquidation_price,
                        current_price=latest.close,
                        unrealized_pnl=position.calc_pnl(latest.close),
                        liquidation_distance_percent=distance,
                        risk_level=assess_risk_level(position.leverage, distance),
                        stop_price=stop_price,
                        stop_triggered=triggered,
                    )
                )

        return result

    def _proposed_risk_level(self, leverage: float) -> RiskLevel:
        # 以当前价开新仓时, 强平距离 = 1/L - mmr
        distance = max(0.0, (1 / leverage - self._settings.maintenance_margin_rate) * 100)
        return assess_risk_level(leverage, distance)

    def _collect_warnings(
        self,
        kelly: KellyMetrics | None,
        statistics: TradeStatistics | None,
        sizing: SafePositionSize | None,
        leverage: float | None,
        positions: Sequence[PositionRisk],
    ) -> list[str]:
        warnings = []

        if kelly is not None and kelly.high_leverage_advisory:
            warnings.append(
                f"Leverage {leverage}x: {kelly.recommended_mode.value} Kelly recommended "
                f"instead of {kelly.active_mode.value}."
            )

        if (
            leverage is not None
            and leverage > FULL_KELLY_LEVERAGE_WARNING
            and self._settings.kelly_fraction_mode == KellyFractionMode.FULL
        ):
            warnings.append(
                "High leverage with Full Kelly is extremely risky. Consider Half or Quarter Kelly."
            )

        if statistics is not None:
            if statistics.profit_factor is not None and statistics.profit_factor < MIN_PROFIT_FACTOR:
                warnings.append("Low profit factor. System edge may be insufficient.")
            if statistics.max_drawdown > MAX_DRAWDOWN_WARNING:
                warnings.append("Historical max drawdown exceeds 30%. Exercise caution.")

        if sizing is not None:
            if sizing.reduced:
                warnings.append("Position size reduced to satisfy zero-ruin constraint.")
            if not sizing.is_zero_ruin_safe:
                warnings.append(
                    f"Risk of ruin {sizing.risk_of_ruin:.4%} exceeds the zero-ruin limit "
                    f"even at the minimum position size."
                )

        for p in positions:
            if p.stop_triggered:
                warnings.append(f"Trailing stop hit for {p.symbol} {p.side.value} ({p.position_id}).")

        return warnings
