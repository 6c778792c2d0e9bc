"""
Core validators for canonical tick rows.
Pure functions - no IO, network, or side effects.
"""

import math
from typing import Dict, Any, List


class ValidationError(ValueError):
    """Raised when data validation fails."""
    pass


REQUIRED_TICK_KEYS = {'date', 'open', 'high', 'low', 'close', 'volume'}


def validate_tick_row(row: Dict[str, Any]) -> None:
    """
    Validate a canonical tick row.

    OHLC ordering (low <= open/close <= high) is not enforced here;
    see ohlc_warnings().

    Args:
        row: Dictionary containing tick data

    Raises:
        ValidationError: If validation fails
    """
    # Check for missing keys
    missing = REQUIRED_TICK_KEYS - set(row.keys())
    if missing:
        raise ValidationError(f"Missing required keys: {missing}")

    tick_date = row['date']
    if isinstance(tick_date, bool) or not isinstance(tick_date, (int, float)):
        raise ValidationError(f"date must be numeric, got {type(tick_date)}")

    if not math.isfinite(tick_date):
        raise ValidationError(f"date must be finite, got {tick_date}")

    # Numeric validations for prices and volume
    for field in ['open', 'high', 'low', 'close', 'volume']:
        value = row[field]
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValidationError(f"{field} must be numeric, got {type(value)}")

        if not math.isfinite(value):
            raise ValidationError(f"{field} must be finite, got {value}")

        if value < 0:
            raise ValidationError(f"{field} must be non-negative, got {value}")


def ohlc_warnings(row: Dict[str, Any]) -> List[str]:
    """
    Report OHLC ordering problems without rejecting the row.

    Args:
        row: Validated tick row

    Returns:
        List of human-readable warnings (empty when consistent)
    """
    warnings = []
    high = row['high']
    low = row['low']

    if high < low:
        warnings.append(f"high ({high}) < low ({low})")

    for field in ['open', 'close']:
        value = row[field]
        if value > high:
            warnings.append(f"{field} ({value}) > high ({high})")
        if value < low:
            warnings.append(f"{field} ({value}) < low ({low})")

    return warnings


def check_tick_date_monotonicity(ticks: List[Dict[str, Any]]) -> None:
    """
    Check that tick dates are strictly increasing.

    Args:
        ticks: List of tick rows with 'date' field

    Raises:
        ValidationError: If dates are not monotonic or have duplicates
    """
    for i in range(1, len(ticks)):
        previous = ticks[i - 1]['date']
        current = ticks[i]['date']

        if current == previous:
            raise ValidationError(f"Duplicate tick date found: {current}")

        if current < previous:
            raise ValidationError(
                f"Tick dates not monotonic: {previous} >= {current}"
            )
