"""Tests for ATR and chandelier exit calculations."""

import pytest

from conftest import make_bars

from riskcore.engine.models.enums import AtrSmoothing, PositionSide
from riskcore.engine.models.errors import InsufficientDataError, InvalidInputError
from riskcore.engine.technical import (
    calc_atr,
    calc_chandelier_exit,
    calc_stop_distance_percent,
    calc_tr_series,
    calc_true_range,
    is_stop_triggered,
)

# 30 bars rising by 1, then 10 bars falling by 2
RISE_THEN_FALL = [100.0 + i for i in range(30)] + [129.0 - 2 * i for i in range(1, 11)]


class TestATR:
    """Tests for Average True Range."""

    def test_calc_true_range(self):
        """Test true range inside the previous close."""
        assert calc_true_range(50, 45, 47) == 5

    def test_true_range_gap(self):
        """Test true range across a gap."""
        # Gap up: |high - prev_close| dominates
        assert calc_true_range(60, 58, 50) == 10

    def test_tr_series_length(self, rising_bars):
        """Test TR series skips the first bar."""
        assert len(calc_tr_series(rising_bars)) == len(rising_bars) - 1

    def test_atr_simple(self, rising_bars):
        """Test simple ATR."""
        # Every bar after the first spans prev_close - 1 .. close + 1 = 3
        assert calc_atr(rising_bars, period=22) == pytest.approx(3.0)

    def test_atr_wilder_constant_range(self, rising_bars):
        """Test Wilder ATR of a constant range."""
        assert calc_atr(rising_bars, period=22, smoothing=AtrSmoothing.WILDER) == pytest.approx(3.0)

    def test_atr_wilder_differs_on_changing_range(self):
        """Test Wilder ATR lags a widening range."""
        bars = make_bars(RISE_THEN_FALL)
        simple = calc_atr(bars, period=10)
        wilder = calc_atr(bars, period=10, smoothing=AtrSmoothing.WILDER)
        assert simple == pytest.approx(4.0)
        assert wilder < simple

    def test_atr_insufficient_data(self, rising_bars):
        """Test ATR needs period + 1 bars."""
        with pytest.raises(InsufficientDataError):
            calc_atr(rising_bars[:22], period=22)

    def test_atr_invalid_period(self, rising_bars):
        """Test zero period is rejected."""
        with pytest.raises(InvalidInputError):
            calc_atr(rising_bars, period=0)


class TestChandelierExit:
    """Tests for chandelier exit stops."""

    def test_stop_levels(self, rising_bars):
        """Test long and short chandelier stops."""
        exit_ = calc_chandelier_exit(rising_bars, multiplier=3.0, atr_period=22)

        # Last 22 bars: closes 108..129, highs up to 130, lows down to 106
        assert exit_.highest_high == pytest.approx(130)
        assert exit_.lowest_low == pytest.approx(106)
        assert exit_.long_stop == pytest.approx(130 - 9)
        assert exit_.short_stop == pytest.approx(106 + 9)
        assert exit_.current_price == pytest.approx(129)

    def test_stop_for_side(self, rising_bars):
        """Test stop lookup by side."""
        exit_ = calc_chandelier_exit(rising_bars, atr_period=22)
        assert exit_.stop_for(PositionSide.LONG) == exit_.long_stop
        assert exit_.stop_for(PositionSide.SHORT) == exit_.short_stop

    def test_insufficient_bars(self, rising_bars):
        """Test too few bars raises InsufficientDataError."""
        with pytest.raises(InsufficientDataError):
            calc_chandelier_exit(rising_bars[:10], atr_period=22)

    def test_invalid_multiplier(self, rising_bars):
        """Test zero multiplier is rejected."""
        with pytest.raises(InvalidInputError):
            calc_chandelier_exit(rising_bars, multiplier=0)

    def test_long_stop_ratchets(self):
        """Test held long stop is kept over a lower raw stop."""
        bars = make_bars(RISE_THEN_FALL)
        first = calc_chandelier_exit(bars[:30], side=PositionSide.LONG, atr_period=22)

        raw = calc_chandelier_exit(bars, atr_period=22)
        trailed = calc_chandelier_exit(
            bars, side=PositionSide.LONG, previous=first, atr_period=22
        )

        assert raw.long_stop < first.long_stop
        assert trailed.long_stop == pytest.approx(first.long_stop)
        # The other side is not held back
        assert trailed.short_stop == pytest.approx(raw.short_stop)

    def test_long_stop_never_decreases(self):
        """Test long stop never moves down."""
        bars = make_bars(RISE_THEN_FALL)
        previous = None
        stops = []
        for end in range(23, len(bars) + 1):
            previous = calc_chandelier_exit(
                bars[:end], side=PositionSide.LONG, previous=previous, atr_period=22
            )
            stops.append(previous.long_stop)

        assert all(b >= a for a, b in zip(stops, stops[1:]))

    def test_short_stop_ratchets(self):
        """Test short stop never moves up."""
        fall_then_rise = [200.0 - i for i in range(30)] + [171.0 + 2 * i for i in range(1, 11)]
        bars = make_bars(fall_then_rise)
        previous = None
        stops = []
        for end in range(23, len(bars) + 1):
            previous = calc_chandelier_exit(
                bars[:end], side=PositionSide.SHORT, previous=previous, atr_period=22
            )
            stops.append(previous.short_stop)

        assert all(b <= a for a, b in zip(stops, stops[1:]))

    def test_stop_distance_percent(self):
        """Test stop distance as a percent of price."""
        assert calc_stop_distance_percent(100, 95) == pytest.approx(5.0)

    def test_is_stop_triggered(self):
        """Test stop trigger against bar range."""
        bar = make_bars([100.0])[0]  # low 99, high 101
        assert is_stop_triggered(bar, 99.5, PositionSide.LONG)
        assert not is_stop_triggered(bar, 98.0, PositionSide.LONG)
        assert is_stop_triggered(bar, 100.5, PositionSide.SHORT)
        assert not is_stop_triggered(bar, 102.0, PositionSide.SHORT)
