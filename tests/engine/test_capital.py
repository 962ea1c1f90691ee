"""Tests for capital helpers."""

import pytest

from riskcore.engine.account.capital import (
    calc_position_for_risk,
    calc_position_size_asset,
    calc_position_value,
    calc_risk_reward,
    calc_size_from_percent,
    calc_take_profit_price,
)
from riskcore.engine.models.errors import InvalidInputError, InvalidLeverageError


class TestPercentSizing:
    """Tests for percent-of-balance order sizing."""

    @pytest.mark.parametrize(
        "percent,expected",
        [(25, 2500), (50, 5000), (75, 7500), (100, 10_000)],
    )
    def test_quick_percent(self, percent, expected):
        """Test quick-select percentages of balance."""
        assert calc_size_from_percent(10_000, percent) == expected

    def test_floors_to_whole_units(self):
        """Test size is floored to whole units."""
        assert calc_size_from_percent(999, 25) == 249

    def test_percent_out_of_range(self):
        """Test percent above 100 is rejected."""
        with pytest.raises(InvalidInputError):
            calc_size_from_percent(10_000, 120)


class TestPositionValue:
    """Tests for notional conversions."""

    def test_position_value(self):
        """Test notional is margin times leverage."""
        assert calc_position_value(1000, 10) == 10_000

    def test_position_size_asset(self):
        """Test notional converted to asset units."""
        assert calc_position_size_asset(1000, 10, 98_000) == pytest.approx(0.102, abs=1e-3)

    def test_zero_leverage(self):
        """Test zero leverage is rejected."""
        with pytest.raises(InvalidLeverageError):
            calc_position_value(1000, 0)


class TestRiskReward:
    """Tests for bracket order risk/reward."""

    def test_two_to_one(self):
        """Test 2:1 risk/reward bracket."""
        rr = calc_risk_reward(98_000, 95_000, 104_000)
        assert rr.ratio == pytest.approx(2.0)
        assert rr.risk_percent == pytest.approx(3000 / 98_000)

    def test_zero_risk(self):
        """Test stop at entry is rejected."""
        with pytest.raises(InvalidInputError):
            calc_risk_reward(98_000, 98_000, 104_000)

    def test_take_profit_long(self):
        """Test take-profit above entry for a long."""
        assert calc_take_profit_price(98_000, 95_000, 2.0) == pytest.approx(104_000)

    def test_take_profit_short(self):
        """Test take-profit below entry for a short."""
        assert calc_take_profit_price(98_000, 101_000, 2.0) == pytest.approx(92_000)

    def test_position_for_risk(self):
        """Test position sized from a fixed risk amount."""
        result = calc_position_for_risk(10_000, 0.02, 100, 95, 5)

        assert result["risk_amount"] == pytest.approx(200)
        assert result["position_size"] == pytest.approx(4000)
        assert result["margin"] == pytest.approx(800)
