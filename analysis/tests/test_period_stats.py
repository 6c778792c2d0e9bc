"""
Tests for period statistics utilities.
Small hand-built tick series so every expected value can be checked by hand.
"""

import pytest
import numpy as np

from analysis.calculations.period_stats import (
    tick_column,
    average_range,
    average_delta,
    basic_stats,
    daily_variation_stats
)


def make_tick(close, high=None, low=None, day=0):
    """Tick with close and optional band (defaults to close +/- 1)."""
    return {
        'date': day,
        'open': close,
        'high': close + 1 if high is None else high,
        'low': close - 1 if low is None else low,
        'close': close,
        'volume': 1000.0,
    }


class TestTickColumn:
    """Tests for tick_column helper."""

    def test_extracts_floats(self):
        series = [make_tick(100), make_tick(110, day=1)]

        closes = tick_column(series, 'close')

        assert isinstance(closes, np.ndarray)
        assert closes.dtype == np.float64
        assert list(closes) == [100.0, 110.0]

    def test_empty_series(self):
        assert len(tick_column([], 'close')) == 0


class TestAverages:
    """Tests for average_range and average_delta."""

    def test_average_range(self):
        highs = np.array([102.0, 106.0])
        lows = np.array([99.0, 100.0])
        assert average_range(highs, lows) == 4.5

    def test_average_range_empty(self):
        assert average_range(np.array([]), np.array([])) == 0.0

    def test_average_delta(self):
        assert average_delta(np.array([100.0, 105.0, 102.0])) == 1.0

    def test_average_delta_single_point(self):
        assert average_delta(np.array([100.0])) == 0.0


class TestBasicStats:
    """Tests for basic_stats function."""

    def test_basic_stats_known_values(self):
        """High/low come from the tick bands, change from the closes."""
        series = [
            make_tick(100, high=102, low=99, day=0),
            make_tick(105, high=106, low=99.5, day=1),
            make_tick(110, high=111, low=106, day=2),
        ]

        result = basic_stats(series)

        assert result['high'] == 111.0
        assert result['low'] == 99.0
        assert result['change'] == 10.0
        assert abs(result['change_percent'] - 10.0) < 1e-9
        assert result['first_close'] == 100.0
        assert result['last_close'] == 110.0

    def test_basic_stats_negative_change(self):
        series = [make_tick(100), make_tick(80, day=1)]

        result = basic_stats(series)

        assert result['change'] == -20.0
        assert abs(result['change_percent'] - (-20.0)) < 1e-9

    def test_basic_stats_single_tick(self):
        """One tick: no change at all."""
        result = basic_stats([make_tick(50, high=52, low=49)])

        assert result['high'] == 52.0
        assert result['low'] == 49.0
        assert result['change'] == 0.0
        assert result['change_percent'] == 0.0

    def test_basic_stats_zero_first_close(self):
        """Zero first close must not divide by zero."""
        series = [make_tick(0, high=0, low=0), make_tick(10, day=1)]

        result = basic_stats(series)

        assert result['change'] == 10.0
        assert result['change_percent'] == 0.0

    def test_basic_stats_empty(self):
        result = basic_stats([])

        assert result['high'] == 0.0
        assert result['low'] == 0.0
        assert result['change_percent'] == 0.0

    def test_basic_stats_tolerates_malformed_band(self):
        """low > high is not rejected, just used as given."""
        series = [make_tick(100, high=95, low=105)]

        result = basic_stats(series)

        assert result['high'] == 95.0
        assert result['low'] == 105.0


class TestDailyVariationStats:
    """Tests for daily_variation_stats function."""

    def test_daily_variation_known_values(self):
        series = [
            make_tick(100, high=101, low=99, day=0),   # range 2
            make_tick(104, high=106, low=103, day=1),  # range 3
            make_tick(101, high=104, low=100, day=2),  # range 4
        ]

        result = daily_variation_stats(series)

        assert abs(result['avg_range'] - 3.0) < 1e-9
        # (4 + -3) / 2
        assert abs(result['avg_close_delta'] - 0.5) < 1e-9

    def test_daily_variation_single_tick(self):
        """Single tick: range of that tick, no close delta."""
        result = daily_variation_stats([make_tick(100, high=103, low=98)])

        assert result['avg_range'] == 5.0
        assert result['avg_close_delta'] == 0.0

    def test_daily_variation_empty(self):
        result = daily_variation_stats([])

        assert result == {'avg_range': 0.0, 'avg_close_delta': 0.0}

    def test_avg_close_delta_telescopes(self):
        """Mean close delta equals (last - first) / (n - 1)."""
        closes = [100, 97, 120, 111, 130]
        series = [make_tick(c, day=i) for i, c in enumerate(closes)]

        result = daily_variation_stats(series)

        assert result['avg_close_delta'] == pytest.approx((130 - 100) / 4)
