"""Tests for trade history statistics."""

import pytest

from conftest import START, make_trades

from riskcore.engine.models.enums import TradeOutcome
from riskcore.engine.models.errors import InsufficientDataError, InvalidInputError
from riskcore.engine.models.market import TradeRecord
from riskcore.engine.portfolio import (
    build_equity_curve,
    calc_max_drawdown,
    calc_trade_statistics,
)


class TestEquityCurve:
    """Tests for equity curve and drawdown."""

    def test_build_equity_curve(self):
        """Test compounded equity curve."""
        curve = build_equity_curve(make_trades([0.10, -0.05]), starting_equity=100)
        assert curve == pytest.approx([100, 110, 104.5])

    def test_calc_max_drawdown(self):
        """Test max drawdown of an equity curve."""
        equity = [100, 110, 105, 120, 100, 130]
        assert calc_max_drawdown(equity) == pytest.approx(20 / 120)

    def test_max_drawdown_monotonic(self):
        """Test rising curve has no drawdown."""
        assert calc_max_drawdown([100, 110, 120]) == 0.0

    def test_max_drawdown_insufficient(self):
        """Test single point curve gives None."""
        assert calc_max_drawdown([100]) is None


class TestTradeStatistics:
    """Tests for trade statistics."""

    def test_statistics(self, edge_trades):
        """Test statistics of a known trade history."""
        stats = calc_trade_statistics(edge_trades)

        assert stats.total_trades == 10
        assert stats.winning_trades == 6
        assert stats.losing_trades == 4
        assert stats.win_rate == pytest.approx(0.6)
        assert stats.avg_win == pytest.approx(0.05)
        assert stats.avg_loss == pytest.approx(0.025)
        # 0.30 gross profit / 0.10 gross loss
        assert stats.profit_factor == pytest.approx(3.0)
        # 0.6 * 0.05 - 0.4 * 0.025
        assert stats.expectancy == pytest.approx(0.02)

    def test_streaks(self, edge_trades):
        """Test current and longest streaks."""
        # W L W W L W L W W L
        stats = calc_trade_statistics(edge_trades)
        assert stats.current_streak == -1
        assert stats.longest_win_streak == 2
        assert stats.longest_loss_streak == 1

    def test_drawdown_from_losing_run(self):
        """Test drawdown from consecutive losses."""
        stats = calc_trade_statistics(make_trades([0.10, -0.10, -0.10]))
        # 1.1 -> 0.891
        assert stats.max_drawdown == pytest.approx(0.19)
        assert stats.longest_loss_streak == 2

    def test_no_losses(self):
        """Test profit factor is None without losses."""
        stats = calc_trade_statistics(make_trades([0.01, 0.02]))
        assert stats.profit_factor is None
        assert stats.max_drawdown == 0.0

    def test_empty(self):
        """Test empty history raises InsufficientDataError."""
        with pytest.raises(InsufficientDataError):
            calc_trade_statistics([])

    def test_break_even_is_loss(self):
        """Test break-even trade counts as a loss."""
        trade = make_trades([0.0])[0]
        assert trade.outcome == TradeOutcome.LOSS

    def test_trade_record_from_dict(self):
        """Test TradeRecord parsing."""
        trade = TradeRecord.from_dict(
            {"outcome": "WIN", "pnl_percent": "0.03", "timestamp": "2025-01-02T00:00:00"}
        )
        assert trade.outcome == TradeOutcome.WIN
        assert trade.pnl_percent == pytest.approx(0.03)
        assert TradeRecord.from_dict(trade.to_dict()) == trade


class TestTradeRecord:
    """Tests for trade record validation."""

    def test_win_with_loss_rejected(self):
        """Test WIN with a negative return is rejected."""
        with pytest.raises(InvalidInputError):
            TradeRecord(TradeOutcome.WIN, -0.02, START)

    def test_win_with_zero_rejected(self):
        """Test WIN with a zero return is rejected."""
        with pytest.raises(InvalidInputError):
            TradeRecord(TradeOutcome.WIN, 0.0, START)

    def test_loss_with_profit_rejected(self):
        """Test LOSS with a positive return is rejected."""
        with pytest.raises(InvalidInputError):
            TradeRecord(TradeOutcome.LOSS, 0.02, START)

    @pytest.mark.parametrize("pnl", [float("nan"), float("inf"), float("-inf")])
    def test_non_finite_return_rejected(self, pnl):
        """Test non-finite return is rejected."""
        with pytest.raises(InvalidInputError):
            TradeRecord(TradeOutcome.LOSS, pnl, START)

    def test_from_dict_rejects_contradiction(self):
        """Test parsed records are validated."""
        with pytest.raises(InvalidInputError):
            TradeRecord.from_dict(
                {"outcome": "win", "pnl_percent": -0.01, "timestamp": "2025-01-02T00:00:00"}
            )

    def test_break_even_loss_allowed(self):
        """Test LOSS with a zero return is allowed."""
        assert TradeRecord(TradeOutcome.LOSS, 0.0, START).pnl_percent == 0.0
