"""
Period statistics utilities.
Pure functions for high/low, net change and daily variation over a tick series.
"""

import numpy as np
from typing import List, Dict, Any, Sequence


def tick_column(series: Sequence[Dict[str, Any]], field: str) -> np.ndarray:
    """
    Extract one numeric field from a tick series as a float array.

    Args:
        series: List of tick dictionaries in chronological order
        field: Tick field name ('open', 'high', 'low', 'close', 'volume')

    Returns:
        Numpy float64 array with one value per tick (empty for empty series)
    """
    return np.array([float(tick[field]) for tick in series], dtype=np.float64)


def average_range(highs: np.ndarray, lows: np.ndarray) -> float:
    """Mean of high - low over all points, 0 for no points."""
    if len(highs) == 0:
        return 0.0
    return float(np.mean(highs - lows))


def average_delta(values: np.ndarray) -> float:
    """Mean of consecutive differences, 0 for fewer than 2 points."""
    if len(values) < 2:
        return 0.0
    return float(np.mean(np.diff(values)))


def basic_stats(series: List[Dict[str, Any]]) -> Dict[str, float]:
    """
    Calculate period high, low and net change for a tick series.

    Formula:
        high = max(tick.high), low = min(tick.low)
        change = close_last - close_first
        change_percent = change / close_first * 100 (0 when close_first is 0)

    Args:
        series: List of tick dictionaries in chronological order

    Returns:
        Dictionary with high, low, change, change_percent, first_close
        and last_close. All zero for an empty series.
    """
    if not series:
        return {
            'high': 0.0,
            'low': 0.0,
            'change': 0.0,
            'change_percent': 0.0,
            'first_close': 0.0,
            'last_close': 0.0,
        }

    highs = tick_column(series, 'high')
    lows = tick_column(series, 'low')

    first_close = float(series[0]['close'])
    last_close = float(series[-1]['close'])
    change = last_close - first_close

    # Zero first close would divide by zero
    change_percent = (change / first_close) * 100 if first_close != 0 else 0.0

    return {
        'high': float(np.max(highs)),
        'low': float(np.min(lows)),
        'change': change,
        'change_percent': change_percent,
        'first_close': first_close,
        'last_close': last_close,
    }


def daily_variation_stats(series: List[Dict[str, Any]]) -> Dict[str, float]:
    """
    Calculate average intraday range and average close-to-close delta.

    Args:
        series: List of tick dictionaries in chronological order

    Returns:
        Dictionary with avg_range (mean of high - low) and avg_close_delta
        (mean of close[i] - close[i-1]).

    Example:
        closes [100, 104, 101] with ranges [2, 3, 4]:
        - avg_range = 3.0
        - avg_close_delta = ((104 - 100) + (101 - 104)) / 2 = 0.5
    """
    highs = tick_column(series, 'high')
    lows = tick_column(series, 'low')
    closes = tick_column(series, 'close')

    return {
        'avg_range': average_range(highs, lows),
        'avg_close_delta': average_delta(closes),
    }
