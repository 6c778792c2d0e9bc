"""
Leveraged performance utilities.
Pure functions simulating a daily-rebalanced leveraged position on a tick
series and the leverage-adjusted compound baseline it is compared against.
"""

import numpy as np
from typing import List, Dict, Any

from analysis.calculations.period_stats import (
    tick_column,
    average_range,
    average_delta
)
from analysis.calculations.compound_growth import (
    compound_baseline,
    total_return,
    growth_rate_from_total_return
)


DEFAULT_LEVERAGE_RATIO = 2.0


def _relative_moves(targets: np.ndarray, previous: np.ndarray) -> np.ndarray:
    """(target - previous) / previous per step, 0 where previous is 0."""
    moves = np.zeros(len(targets), dtype=np.float64)
    np.divide(targets - previous, previous, out=moves, where=previous != 0)
    return moves


def simulate_leverage(
    series: List[Dict[str, Any]],
    leverage_ratio: float = DEFAULT_LEVERAGE_RATIO
) -> Dict[str, Any]:
    """
    Simulate a position that applies leverage to every daily return.

    Formula:
        r_i = (C_i - C_{i-1}) / C_{i-1}      (0 when C_{i-1} is 0)
        V_0 = C_0
        V_i = V_{i-1} * (1 + r_i * leverage_ratio)

    The simulation is path dependent: two series with the same total return
    but different daily paths end at different values once leverage != 1.

    The leveraged intraday band for i >= 1 scales the move from the previous
    close to the day's high/low the same way:
        H'_i = V_{i-1} * (1 + (H_i - C_{i-1}) / C_{i-1} * leverage_ratio)
        L'_i = V_{i-1} * (1 + (L_i - C_{i-1}) / C_{i-1} * leverage_ratio)
    Index 0 has no previous close, so its band is the tick's own high/low.

    Args:
        series: List of tick dictionaries in chronological order
        leverage_ratio: Multiplier applied to each daily return

    Returns:
        Dictionary with:
        - values: Numpy array of leveraged values, one per tick
        - final_value: Last leveraged value
        - total_return: (final_value - V_0) / V_0 (0 when V_0 is 0)
        - daily_growth_rate: Geometric daily rate for total_return
        - avg_range: Mean of H' - L'
        - avg_close_delta: Mean of V_i - V_{i-1}
        - leverage_ratio: Ratio used
    """
    if not series:
        return {
            'values': np.array([], dtype=np.float64),
            'final_value': 0.0,
            'total_return': 0.0,
            'daily_growth_rate': 0.0,
            'avg_range': 0.0,
            'avg_close_delta': 0.0,
            'leverage_ratio': leverage_ratio,
        }

    closes = tick_column(series, 'close')
    highs = tick_column(series, 'high')
    lows = tick_column(series, 'low')

    previous_closes = closes[:-1]
    daily_returns = _relative_moves(closes[1:], previous_closes)

    # Compound leveraged daily growth factors in order
    growth_factors = 1.0 + daily_returns * leverage_ratio
    values = closes[0] * np.concatenate(([1.0], np.cumprod(growth_factors)))

    previous_values = values[:-1]
    band_highs = np.concatenate((
        highs[:1],
        previous_values * (1.0 + _relative_moves(highs[1:], previous_closes) * leverage_ratio)
    ))
    band_lows = np.concatenate((
        lows[:1],
        previous_values * (1.0 + _relative_moves(lows[1:], previous_closes) * leverage_ratio)
    ))

    initial_value = float(values[0])
    final_value = float(values[-1])
    leveraged_return = total_return(initial_value, final_value)

    return {
        'values': values,
        'final_value': final_value,
        'total_return': leveraged_return,
        'daily_growth_rate': growth_rate_from_total_return(leveraged_return, len(series) - 1),
        'avg_range': average_range(band_highs, band_lows),
        'avg_close_delta': average_delta(values),
        'leverage_ratio': leverage_ratio,
    }


def leveraged_baseline(
    series: List[Dict[str, Any]],
    plain_rate: float,
    leverage_ratio: float = DEFAULT_LEVERAGE_RATIO
) -> np.ndarray:
    """
    Leverage-adjusted compound baseline for comparison with simulate_leverage().

    Formula: B'_i = C_0 + (B_i - C_0) * leverage_ratio
    where B is compound_baseline(series, plain_rate) built from the
    unleveraged inferred rate.

    This linearly scales the deviation of the plain compound curve. It is
    not the curve obtained by compounding the simulated leveraged growth
    rate, and the two give different classification tendencies.

    Args:
        series: List of tick dictionaries in chronological order
        plain_rate: Unleveraged daily growth rate (infer_daily_growth_rate())
        leverage_ratio: Multiplier applied to the compound deviation

    Returns:
        Numpy array with the same length as series
    """
    plain = compound_baseline(series, plain_rate)
    if plain.size == 0:
        return plain

    initial = plain[0]
    return initial + (plain - initial) * leverage_ratio
