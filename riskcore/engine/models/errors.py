"""Engine error hierarchy.

Analytic functions raise these instead of returning a placeholder number,
so callers can tell "not enough data" apart from a real zero.
"""


class RiskCoreError(Exception):
    """Base class for all risk core errors."""

    pass


class InsufficientDataError(RiskCoreError):
    """Not enough trade or price history to compute a stable statistic."""

    pass


class DegenerateRatioError(RiskCoreError):
    """Zero denominator in a ratio (e.g. average loss of 0)."""

    pass


class InvalidLeverageError(RiskCoreError):
    """Leverage is non-positive or exceeds the configured maximum."""

    pass


class InvalidInputError(RiskCoreError, ValueError):
    """Malformed input value (negative price, rate out of range, ...)."""

    pass


class RiskLimitError(RiskCoreError):
    """Order rejected by a risk rule of the current trading mode."""

    pass


class LedgerError(RiskCoreError):
    """Base class for wallet ledger failures."""

    pass


class InsufficientBalanceError(LedgerError):
    """Operation needs more funds than the wallet has available."""

    pass


class OverReleaseError(LedgerError):
    """Release or settlement exceeds the locked balance."""

    pass


class InvalidAmountError(LedgerError, ValueError):
    """Ledger amount is negative or not a finite number."""

    pass
