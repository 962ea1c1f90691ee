"""Input records supplied by trade-history and price-feed collaborators."""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from riskcore.engine.models.enums import TradeOutcome
from riskcore.engine.models.errors import InvalidInputError


@dataclass(frozen=True)
class TradeRecord:
    """A closed trade.

    Attributes:
        outcome: Win or loss.
        pnl_percent: Signed return as a fraction (e.g. 0.05 for +5%).
        timestamp: Close time of the trade.
    """

    outcome: TradeOutcome
    pnl_percent: float
    timestamp: datetime

    def __post_init__(self) -> None:
        if not math.isfinite(self.pnl_percent):
            raise InvalidInputError(
                f"TradeRecord.pnl_percent must be a finite number, got {self.pnl_percent}"
            )
        if self.outcome == TradeOutcome.WIN and self.pnl_percent <= 0:
            raise InvalidInputError(f"WIN trade must have a positive return, got {self.pnl_percent}")
        if self.outcome == TradeOutcome.LOSS and self.pnl_percent > 0:
            raise InvalidInputError(f"LOSS trade must not have a positive return, got {self.pnl_percent}")

    @classmethod
    def from_pnl(cls, pnl_percent: float, timestamp: datetime) -> TradeRecord:
        """Build a record whose outcome follows the sign of the return.

        Break-even trades count as losses, matching how the trade history
        collaborator classifies them.
        """
        outcome = TradeOutcome.WIN if pnl_percent > 0 else TradeOutcome.LOSS
        return cls(outcome=outcome, pnl_percent=pnl_percent, timestamp=timestamp)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TradeRecord:
        return cls(
            outcome=TradeOutcome(str(data["outcome"]).lower()),
            pnl_percent=float(data["pnl_percent"]),
            timestamp=_parse_timestamp(data["timestamp"]),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "outcome": self.outcome.value,
            "pnl_percent": self.pnl_percent,
            "timestamp": self.timestamp.isoformat(),
        }


@dataclass(frozen=True)
class PriceBar:
    """OHLC price bar.

    Attributes:
        timestamp: Bar open time.
        open: Open price.
        high: High price.
        low: Low price.
        close: Close price.
    """

    timestamp: datetime
    open: float
    high: float
    low: float
    close: float

    def __post_init__(self) -> None:
        for name in ("open", "high", "low", "close"):
            value = getattr(self, name)
            if not math.isfinite(value) or value <= 0:
                raise InvalidInputError(f"PriceBar.{name} must be a positive number, got {value}")
        if self.high < self.low:
            raise InvalidInputError(f"PriceBar high {self.high} is below low {self.low}")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PriceBar:
        return cls(
            timestamp=_parse_timestamp(data["timestamp"]),
            open=float(data["open"]),
            high=float(data["high"]),
            low=float(data["low"]),
            close=float(data["close"]),
        )


def _parse_timestamp(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value))
