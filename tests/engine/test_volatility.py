"""Tests for volatility calculations."""

import math

import pytest

from conftest import make_bars

from riskcore.engine.models.errors import InsufficientDataError, InvalidInputError
from riskcore.engine.volatility import (
    calc_position_adjustment,
    calc_rolling_volatility,
    calc_simple_returns,
    calc_volatility,
    calc_volatility_leverage,
    calc_volatility_metrics,
)


class TestHistoricalVolatility:
    """Tests for realized volatility."""

    def test_simple_returns(self):
        """Test simple returns."""
        assert calc_simple_returns([100, 110, 99]) == pytest.approx([0.1, -0.1])

    def test_simple_returns_insufficient(self):
        """Test single price has no returns."""
        with pytest.raises(InsufficientDataError):
            calc_simple_returns([100])

    def test_simple_returns_non_positive_price(self):
        """Test zero price is rejected."""
        with pytest.raises(InvalidInputError):
            calc_simple_returns([100, 0, 101])

    def test_sample_standard_deviation(self):
        """Test sample standard deviation."""
        # mean 0, sum of squares 0.0002, N - 1 = 1
        assert calc_volatility([0.01, -0.01]) == pytest.approx(math.sqrt(0.0002))

    def test_single_return_insufficient(self):
        """Test single return is insufficient."""
        with pytest.raises(InsufficientDataError):
            calc_volatility([0.01])

    def test_annualized(self):
        """Test annualization scales by sqrt(periods)."""
        returns = [0.01, -0.02, 0.015, -0.005]
        daily = calc_volatility(returns)
        annual = calc_volatility(returns, annualization_periods=365)
        assert annual == pytest.approx(daily * math.sqrt(365))

    def test_constant_returns_zero_volatility(self):
        """Test constant returns have zero volatility."""
        assert calc_volatility([0.01] * 5) == pytest.approx(0.0)


class TestRollingVolatility:
    """Tests for rolling volatility series."""

    def test_series_length(self):
        """Test rolling series length."""
        returns = [0.01 * ((-1) ** i) for i in range(20)]
        rolling = calc_rolling_volatility(returns, window=10)
        assert len(rolling) == 11

    def test_last_value_matches_trailing_window(self):
        """Test last rolling value equals trailing volatility."""
        returns = [0.01, -0.02, 0.03, -0.01, 0.02, 0.0, -0.03]
        rolling = calc_rolling_volatility(returns, window=4)
        assert rolling[-1] == pytest.approx(calc_volatility(returns[-4:]))

    def test_fewer_returns_than_window(self):
        """Test rolling series is empty for a short history."""
        assert calc_rolling_volatility([0.01, 0.02], window=10) == ()

    def test_window_must_exceed_ddof(self):
        """Test window of one is rejected."""
        with pytest.raises(InvalidInputError):
            calc_rolling_volatility([0.01, 0.02, 0.03], window=1)


class TestVolatilityTargeting:
    """Tests for position adjustment and leverage."""

    def test_position_adjustment_scales_down(self):
        """Test exposure scales down above target."""
        assert calc_position_adjustment(0.03, 0.045) == pytest.approx(2 / 3)

    def test_position_adjustment_capped_at_one(self):
        """Test exposure is capped at 1."""
        assert calc_position_adjustment(0.05, 0.02) == 1.0

    def test_position_adjustment_zero_volatility(self):
        """Test zero volatility gives full exposure."""
        assert calc_position_adjustment(0.05, 0.0) == 1.0

    def test_volatility_leverage(self):
        """Test volatility-implied leverage."""
        assert calc_volatility_leverage(0.045) == 11

    def test_volatility_leverage_bounds(self):
        """Test leverage is bounded to [1, 125]."""
        assert calc_volatility_leverage(0.001) == 125
        assert calc_volatility_leverage(0.9) == 1
        assert calc_volatility_leverage(0.0) == 125

    def test_metrics(self, choppy_bars):
        """Test volatility metrics."""
        metrics = calc_volatility_metrics(choppy_bars, target_volatility=0.02, rolling_window=10)

        assert metrics.current_volatility > 0
        assert 0 <= metrics.position_adjustment <= 1
        assert metrics.position_adjustment == pytest.approx(
            min(1.0, 0.02 / metrics.current_volatility)
        )
        assert isinstance(metrics.recommended_leverage, int)
        # 29 returns, window 10
        assert len(metrics.rolling_volatility) == 20

    def test_metrics_trailing_window(self, choppy_bars):
        """Test current volatility uses the trailing window."""
        closes = [bar.close for bar in choppy_bars]
        metrics = calc_volatility_metrics(choppy_bars, target_volatility=0.02, window=5)
        expected = calc_volatility(calc_simple_returns(closes)[-5:])
        assert metrics.current_volatility == pytest.approx(expected)

    def test_metrics_single_bar(self):
        """Test single bar is insufficient."""
        with pytest.raises(InsufficientDataError):
            calc_volatility_metrics(make_bars([100.0]), target_volatility=0.05)

    def test_metrics_two_bars(self):
        """One return has no sample standard deviation."""
        with pytest.raises(InsufficientDataError):
            calc_volatility_metrics(make_bars([100.0, 101.0]), target_volatility=0.05)

    def test_metrics_short_window_clamps_rolling(self):
        """Test rolling window is clamped to the history."""
        metrics = calc_volatility_metrics(
            make_bars([100.0, 102.0, 99.0, 101.0]), target_volatility=0.05, rolling_window=10
        )
        # 3 returns, rolling window clamped to 3
        assert len(metrics.rolling_volatility) == 1
