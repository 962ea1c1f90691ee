"""Tests for margin and liquidation calculations."""

import pytest

from riskcore.engine.account.margin import (
    assess_risk_level,
    calc_liquidation_distance,
    calc_liquidation_price,
    calc_margin,
)
from riskcore.engine.models.enums import PositionSide, RiskLevel
from riskcore.engine.models.errors import InvalidInputError, InvalidLeverageError


class TestMargin:
    """Tests for margin requirement."""

    def test_calc_margin_long(self):
        """Test margin and liquidation for a 10x long."""
        result = calc_margin(10_000, 10, 98_000, PositionSide.LONG)

        assert result.margin_required == pytest.approx(1000)
        assert result.liquidation_price == pytest.approx(88_690, abs=0.01)
        assert result.position_size_asset == pytest.approx(0.10204, abs=1e-5)

    def test_calc_margin_short(self):
        """Test liquidation for a 10x short."""
        result = calc_margin(10_000, 10, 98_000, PositionSide.SHORT)
        assert result.liquidation_price == pytest.approx(107_310, abs=0.01)

    def test_zero_leverage(self):
        """Test zero leverage is rejected."""
        with pytest.raises(InvalidLeverageError):
            calc_margin(10_000, 0, 98_000, PositionSide.LONG)

    def test_leverage_above_max(self):
        """Test leverage above the maximum is rejected."""
        with pytest.raises(InvalidLeverageError):
            calc_margin(10_000, 20, 98_000, PositionSide.LONG, max_leverage=10)

    def test_leverage_at_max_allowed(self):
        """Test leverage equal to the maximum is allowed."""
        result = calc_margin(10_000, 10, 98_000, PositionSide.LONG, max_leverage=10)
        assert result.leverage == 10

    def test_liquidation_rejects_bad_entry(self):
        """Test zero entry price is rejected."""
        with pytest.raises(InvalidInputError):
            calc_liquidation_price(0, 10, PositionSide.LONG)

    def test_liquidation_rejects_bad_rate(self):
        """Test maintenance rate of 100% is rejected."""
        with pytest.raises(InvalidInputError):
            calc_liquidation_price(98_000, 10, PositionSide.LONG, maintenance_margin_rate=1.0)

    def test_liquidation_sides_bracket_entry(self):
        """Test long and short liquidation prices bracket entry."""
        long_liq = calc_liquidation_price(50_000, 5, PositionSide.LONG)
        short_liq = calc_liquidation_price(50_000, 5, PositionSide.SHORT)
        assert long_liq < 50_000 < short_liq

    def test_to_dict(self):
        """Test side serializes to its string value."""
        data = calc_margin(10_000, 10, 98_000, PositionSide.SHORT).to_dict()
        assert data["side"] == "short"


class TestRiskLevel:
    """Tests for liquidation distance and risk level."""

    def test_liquidation_distance(self):
        """Test distance from price to liquidation."""
        assert calc_liquidation_distance(98_000, 88_690) == pytest.approx(9.5)

    @pytest.mark.parametrize(
        "leverage,distance,expected",
        [
            (10, 9.5, RiskLevel.LOW),
            (25, 9.5, RiskLevel.MODERATE),
            (10, 4.0, RiskLevel.MODERATE),
            (60, 10.0, RiskLevel.HIGH),
            (5, 1.5, RiskLevel.HIGH),
        ],
    )
    def test_assess_risk_level(self, leverage, distance, expected):
        """Test risk level from leverage and distance."""
        assert assess_risk_level(leverage, distance) == expected
