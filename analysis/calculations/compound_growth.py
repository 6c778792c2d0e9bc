"""
Compound growth utilities.
Pure functions for geometric daily growth inference, theoretical compound
baselines and above/below/equal classification against a baseline.
"""

import numpy as np
from dataclasses import dataclass
from typing import List, Dict, Any, Sequence

from analysis.calculations.period_stats import tick_column


# Growth rate reported when the series lost all of its value (or more)
TOTAL_LOSS_RATE = -1.0

# Relative tolerance for "equal" classification; 0.0 gives bit-exact comparison
DEFAULT_REL_TOL = 1e-9


@dataclass(frozen=True)
class ClassificationCounts:
    """Days where actual value was above, below or equal to the baseline."""
    above: int
    below: int
    equal: int

    @property
    def total(self) -> int:
        return self.above + self.below + self.equal

    def percentages(self) -> Dict[str, float]:
        """Share of each bucket in percent (all 0 for an empty series)."""
        if self.total == 0:
            return {'above': 0.0, 'below': 0.0, 'equal': 0.0}

        return {
            'above': self.above / self.total * 100,
            'below': self.below / self.total * 100,
            'equal': self.equal / self.total * 100,
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            'above': self.above,
            'below': self.below,
            'equal': self.equal,
            'total': self.total,
            'percentages': self.percentages(),
        }


def total_return(initial: float, final: float) -> float:
    """
    Simple total return as decimal.

    Formula: R = (final - initial) / initial, 0 when initial is 0
    """
    if initial == 0:
        return 0.0
    return (final - initial) / initial


def growth_rate_from_total_return(total_ret: float, periods: int) -> float:
    """
    Convert a total return into a constant per-period compound rate.

    Formula: g = (1 + R)^(1/periods) - 1

    This is the geometric mean growth rate, not the arithmetic mean of
    period returns.

    Args:
        total_ret: Total return as decimal (0.21 = 21%)
        periods: Number of compounding steps (ticks - 1)

    Returns:
        Per-period growth rate as decimal. 0 when periods <= 0 and
        TOTAL_LOSS_RATE (-1) when total_ret <= -1, where the fractional
        power of a non-positive base has no real value.
    """
    if periods <= 0:
        return 0.0

    if total_ret <= -1:
        return TOTAL_LOSS_RATE

    return (1 + total_ret) ** (1 / periods) - 1


def infer_daily_growth_rate(series: List[Dict[str, Any]]) -> float:
    """
    Infer the constant daily compound rate that turns the first close into
    the last close over len(series) - 1 steps.

    Args:
        series: List of tick dictionaries in chronological order

    Returns:
        Daily growth rate as decimal (0.001 = 0.1% per day)

    Example:
        closes [100, 110, 121]:
        - total return = 0.21 over 2 steps
        - rate = 1.21^(1/2) - 1 = 0.10
    """
    if len(series) < 2:
        return 0.0

    initial = float(series[0]['close'])
    final = float(series[-1]['close'])

    return growth_rate_from_total_return(total_return(initial, final), len(series) - 1)


def compound_baseline(series: List[Dict[str, Any]], rate: float) -> np.ndarray:
    """
    Theoretical value at every index when compounding the first close at
    a constant rate.

    Formula: baseline[i] = close_first * (1 + rate)^i

    Args:
        series: List of tick dictionaries in chronological order
        rate: Per-step compound rate as decimal

    Returns:
        Numpy array with the same length as series
    """
    if not series:
        return np.array([], dtype=np.float64)

    initial = float(series[0]['close'])
    steps = np.arange(len(series), dtype=np.float64)

    return initial * np.power(1.0 + rate, steps)


def classify_values(
    values: Sequence[float],
    baseline: Sequence[float],
    rel_tol: float = DEFAULT_REL_TOL
) -> ClassificationCounts:
    """
    Count points strictly above, strictly below or equal to a baseline.

    Args:
        values: Actual values in chronological order
        baseline: Theoretical values, same length as values
        rel_tol: Relative tolerance for equality (0.0 for exact comparison)

    Returns:
        ClassificationCounts whose buckets sum to len(values)

    Raises:
        ValueError: If values and baseline differ in length
    """
    actual = np.asarray(values, dtype=np.float64)
    expected = np.asarray(baseline, dtype=np.float64)

    if actual.shape != expected.shape:
        raise ValueError(
            f"values and baseline must have same length: {len(actual)} != {len(expected)}"
        )

    # With rel_tol == 0 this reduces to exact floating equality
    equal_mask = np.isclose(actual, expected, rtol=rel_tol, atol=0.0)
    above_mask = (actual > expected) & ~equal_mask
    below_mask = (actual < expected) & ~equal_mask

    equal = int(np.count_nonzero(equal_mask))
    above = int(np.count_nonzero(above_mask))
    below = int(np.count_nonzero(below_mask))

    return ClassificationCounts(above=above, below=below, equal=equal)


def classify_against_baseline(
    series: List[Dict[str, Any]],
    baseline: Sequence[float],
    rel_tol: float = DEFAULT_REL_TOL
) -> ClassificationCounts:
    """
    Compare each close of a tick series with the baseline at the same index.

    Args:
        series: List of tick dictionaries in chronological order
        baseline: Theoretical values, typically from compound_baseline()
        rel_tol: Relative tolerance for equality (0.0 for exact comparison)

    Returns:
        ClassificationCounts with above + below + equal == len(series)
    """
    return classify_values(tick_column(series, 'close'), baseline, rel_tol=rel_tol)
