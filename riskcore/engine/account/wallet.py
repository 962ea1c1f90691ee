"""Wallet ledger.

Account-level module that owns the wallet balances. All mutations go
through reserve / release / settle; each one either applies fully or
raises and leaves the wallet untouched.

Usage:
    ledger = WalletLedger(initial_balance=10_000)

    # Lock margin for a new position
    ledger.reserve(500)

    # Close the position with +25 P&L
    ledger.settle(500, pnl=25)

    # Read-only snapshot
    wallet = ledger.wallet
"""

import logging
import math
from decimal import Decimal, InvalidOperation
from threading import Lock

from riskcore.engine.models.errors import (
    InsufficientBalanceError,
    InvalidAmountError,
    OverReleaseError,
)
from riskcore.engine.models.wallet import Wallet

logger = logging.getLogger(__name__)

Amount = Decimal | float | int | str


def to_decimal(value: Amount) -> Decimal:
    """Convert an amount to Decimal without binary float artifacts.

    Floats go through ``str`` so that 0.1 becomes Decimal("0.1").
    """
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, float):
        if not math.isfinite(value):
            raise InvalidAmountError(f"Amount must be finite, got {value}")
        result = Decimal(str(value))
    else:
        try:
            result = Decimal(value)
        except (InvalidOperation, TypeError, ValueError) as e:
            raise InvalidAmountError(f"Invalid amount: {value!r}") from e

    if not result.is_finite():
        raise InvalidAmountError(f"Amount must be finite, got {value}")
    return result


def _non_negative(value: Amount, name: str) -> Decimal:
    amount = to_decimal(value)
    if amount < 0:
        raise InvalidAmountError(f"{name} must be non-negative, got {amount}")
    return amount


def open_wallet(initial_balance: Amount) -> Wallet:
    """Create a wallet with everything available."""
    return Wallet(total_balance=_non_negative(initial_balance, "initial_balance"))


def reserve(wallet: Wallet, amount: Amount) -> Wallet:
    """Move funds from available to locked.

    Args:
        wallet: Current wallet.
        amount: Amount to lock.

    Returns:
        New wallet with available -= amount and locked += amount.

    Raises:
        InsufficientBalanceError: If amount > available balance.
        InvalidAmountError: If amount is negative or not finite.
    """
    amount = _non_negative(amount, "amount")

    if amount > wallet.available_balance:
        raise InsufficientBalanceError(
            f"Reserve {amount} exceeds available balance {wallet.available_balance}"
        )

    return Wallet(
        total_balance=wallet.total_balance,
        locked_balance=wallet.locked_balance + amount,
    )


def release(wallet: Wallet, amount: Amount) -> Wallet:
    """Return previously reserved funds to available.

    Raises:
        OverReleaseError: If amount > locked balance.
        InvalidAmountError: If amount is negative or not finite.
    """
    amount = _non_negative(amount, "amount")

    if amount > wallet.locked_balance:
        raise OverReleaseError(
            f"Release {amount} exceeds locked balance {wallet.locked_balance}"
        )

    return Wallet(
        total_balance=wallet.total_balance,
        locked_balance=wallet.locked_balance - amount,
    )


def settle(wallet: Wallet, amount: Amount, pnl: Amount) -> Wallet:
    """Release a position's margin and book its P&L.

    P&L is applied to total and available together, so
    ``total = available + locked`` holds after settlement.

    Args:
        wallet: Current wallet.
        amount: Margin to release.
        pnl: Realized profit (positive) or loss (negative).

    Returns:
        New wallet.

    Raises:
        OverReleaseError: If amount > locked balance.
        InsufficientBalanceError: If the loss would make a balance negative.
    """
    released = release(wallet, amount)
    pnl = to_decimal(pnl)

    total = released.total_balance + pnl
    settled = Wallet(total_balance=total, locked_balance=released.locked_balance)

    if total < 0 or settled.available_balance < 0:
        raise InsufficientBalanceError(
            f"Loss {pnl} exceeds available balance {released.available_balance}"
        )

    return settled


class WalletLedger:
    """Thread-safe owner of the wallet state.

    A single lock serializes reads and writes, so no caller ever observes
    a half-applied transition. Other components only receive immutable
    ``Wallet`` snapshots.
    """

    def __init__(self, initial_balance: Amount = 10_000) -> None:
        self._wallet = open_wallet(initial_balance)
        self._lock = Lock()

    @property
    def wallet(self) -> Wallet:
        """Current wallet snapshot."""
        with self._lock:
            return self._wallet

    def reserve(self, amount: Amount) -> Wallet:
        """Lock funds as margin. See :func:`reserve`."""
        return self._apply("reserve", reserve, amount)

    def release(self, amount: Amount) -> Wallet:
        """Unlock funds without P&L. See :func:`release`."""
        return self._apply("release", release, amount)

    def settle(self, amount: Amount, pnl: Amount) -> Wallet:
        """Unlock margin and book P&L. See :func:`settle`."""
        return self._apply("settle", settle, amount, pnl)

    def reset(self, initial_balance: Amount = 10_000) -> Wallet:
        """Reset the paper wallet to a fresh balance."""
        wallet = open_wallet(initial_balance)
        with self._lock:
            self._wallet = wallet
        logger.info(f"Wallet reset to {wallet.total_balance}")
        return wallet

    def _apply(self, name: str, transition, *args: Amount) -> Wallet:
        with self._lock:
            try:
                updated = transition(self._wallet, *args)
            except (InsufficientBalanceError, OverReleaseError, InvalidAmountError) as e:
                logger.warning(f"Wallet {name} rejected: {e}")
                raise
            self._wallet = updated

        logger.debug(
            f"Wallet {name}{args}: total={updated.total_balance} "
            f"locked={updated.locked_balance} available={updated.available_balance}"
        )
        return updated
