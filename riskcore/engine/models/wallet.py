"""Wallet balance model.

Balances are held as ``Decimal`` so that a reserve followed by a release of
the same amount restores the wallet exactly.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Any


@dataclass(frozen=True)
class Wallet:
    """Immutable wallet balance snapshot.

    ``available_balance`` is derived, so ``total = available + locked`` holds
    for every instance.

    Attributes:
        total_balance: Account equity.
        locked_balance: Funds reserved as margin for open positions.
    """

    total_balance: Decimal
    locked_balance: Decimal = Decimal("0")

    @property
    def available_balance(self) -> Decimal:
        """Funds free for new orders."""
        return self.total_balance - self.locked_balance

    @property
    def utilization_percent(self) -> int:
        """Locked share of total balance, rounded to a whole percent.

        Example:
            >>> Wallet(Decimal("10000"), Decimal("2500")).utilization_percent
            25
        """
        if self.total_balance <= 0:
            return 0
        ratio = self.locked_balance / self.total_balance * 100
        return int(ratio.quantize(Decimal("1"), rounding=ROUND_HALF_UP))

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_balance": float(self.total_balance),
            "locked_balance": float(self.locked_balance),
            "available_balance": float(self.available_balance),
            "utilization_percent": self.utilization_percent,
        }
