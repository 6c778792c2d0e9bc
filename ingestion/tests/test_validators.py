"""
Tests for tick validators - strict checks on canonical rows.
"""

import pytest

from ingestion.transforms.validators import (
    validate_tick_row,
    ohlc_warnings,
    check_tick_date_monotonicity,
    ValidationError
)


def valid_row(**overrides):
    row = {
        'date': 19724,
        'open': 100.0,
        'high': 102.0,
        'low': 99.0,
        'close': 101.0,
        'volume': 1500.0,
    }
    row.update(overrides)
    return row


class TestValidateTickRow:
    """Tests for validate_tick_row function."""

    def test_valid_row(self):
        # Should not raise
        validate_tick_row(valid_row())

    def test_zero_prices_allowed(self):
        validate_tick_row(valid_row(open=0.0, high=0.0, low=0.0, close=0.0, volume=0.0))

    def test_missing_key(self):
        row = valid_row()
        del row['close']

        with pytest.raises(ValidationError, match="Missing required keys"):
            validate_tick_row(row)

    def test_none_value(self):
        with pytest.raises(ValidationError, match="close must be numeric"):
            validate_tick_row(valid_row(close=None))

    def test_string_value(self):
        with pytest.raises(ValidationError, match="high must be numeric"):
            validate_tick_row(valid_row(high='102'))

    def test_bool_rejected(self):
        with pytest.raises(ValidationError, match="volume must be numeric"):
            validate_tick_row(valid_row(volume=True))

    def test_nan_value(self):
        with pytest.raises(ValidationError, match="must be finite"):
            validate_tick_row(valid_row(low=float('nan')))

    def test_negative_value(self):
        with pytest.raises(ValidationError, match="open must be non-negative"):
            validate_tick_row(valid_row(open=-1.0))

    def test_bad_date(self):
        with pytest.raises(ValidationError, match="date must be numeric"):
            validate_tick_row(valid_row(date='2024-01-02'))

    def test_is_value_error(self):
        assert issubclass(ValidationError, ValueError)


class TestOhlcWarnings:
    """Tests for ohlc_warnings function."""

    def test_consistent_row(self):
        assert ohlc_warnings(valid_row()) == []

    def test_close_above_high(self):
        warnings = ohlc_warnings(valid_row(close=105.0))

        assert warnings == ["close (105.0) > high (102.0)"]

    def test_inverted_band(self):
        warnings = ohlc_warnings(valid_row(high=98.0, low=103.0, open=100.0, close=100.0))

        assert "high (98.0) < low (103.0)" in warnings
        assert len(warnings) == 5


class TestDateMonotonicity:
    """Tests for check_tick_date_monotonicity function."""

    def test_increasing(self):
        check_tick_date_monotonicity([valid_row(date=1), valid_row(date=2), valid_row(date=5)])

    def test_duplicate(self):
        with pytest.raises(ValidationError, match="Duplicate"):
            check_tick_date_monotonicity([valid_row(date=1), valid_row(date=1)])

    def test_decreasing(self):
        with pytest.raises(ValidationError, match="not monotonic"):
            check_tick_date_monotonicity([valid_row(date=3), valid_row(date=2)])

    def test_empty_and_single(self):
        check_tick_date_monotonicity([])
        check_tick_date_monotonicity([valid_row()])
