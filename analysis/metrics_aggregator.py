"""
Metrics aggregator - composes all tick calculations into MetricsJSON.
Pure functions that combine period stats, compound growth and leverage simulation.
"""

import logging
import pandas as pd
from dataclasses import dataclass, asdict
from datetime import date, datetime
from typing import Dict, Any, Optional, List

# Import all calculation modules
from analysis.calculations.period_stats import basic_stats, daily_variation_stats
from analysis.calculations.compound_growth import (
    infer_daily_growth_rate,
    compound_baseline,
    classify_against_baseline,
    classify_values,
    total_return,
    DEFAULT_REL_TOL
)
from analysis.calculations.leverage import (
    simulate_leverage,
    leveraged_baseline,
    DEFAULT_LEVERAGE_RATIO
)
from ingestion.transforms.normalizers import to_calendar_date

logger = logging.getLogger(__name__)

CALCULATION_VERSION = '1.0.0'
TICK_COLUMNS = ['date', 'open', 'high', 'low', 'close', 'volume']


class MetricsAggregatorError(Exception):
    """Raised when metrics aggregation fails."""
    pass


@dataclass(frozen=True)
class DerivedMetrics:
    """Scalar metrics derived from one tick series."""
    high: float
    low: float
    change: float
    change_percent: float
    avg_range: float
    avg_close_delta: float
    total_return: float
    daily_growth_rate: float
    leverage_ratio: float
    leveraged_final_value: float
    leveraged_total_return: float
    leveraged_daily_growth_rate: float
    leveraged_avg_range: float
    leveraged_avg_close_delta: float

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


def derive_metrics(
    series: List[Dict[str, Any]],
    leverage_ratio: float = DEFAULT_LEVERAGE_RATIO
) -> DerivedMetrics:
    """
    Compute all scalar metrics for a tick series.

    Args:
        series: List of tick dictionaries in chronological order
        leverage_ratio: Multiplier for the leverage simulation

    Returns:
        DerivedMetrics value (all zero for an empty series)
    """
    stats = basic_stats(series)
    variation = daily_variation_stats(series)
    leveraged = simulate_leverage(series, leverage_ratio)

    return DerivedMetrics(
        high=stats['high'],
        low=stats['low'],
        change=stats['change'],
        change_percent=stats['change_percent'],
        avg_range=variation['avg_range'],
        avg_close_delta=variation['avg_close_delta'],
        total_return=total_return(stats['first_close'], stats['last_close']),
        daily_growth_rate=infer_daily_growth_rate(series),
        leverage_ratio=leverage_ratio,
        leveraged_final_value=leveraged['final_value'],
        leveraged_total_return=leveraged['total_return'],
        leveraged_daily_growth_rate=leveraged['daily_growth_rate'],
        leveraged_avg_range=leveraged['avg_range'],
        leveraged_avg_close_delta=leveraged['avg_close_delta'],
    )


def select_window(
    tick_df: pd.DataFrame,
    start: Optional[date] = None,
    end: Optional[date] = None
) -> pd.DataFrame:
    """
    Keep the contiguous window of ticks between two calendar dates.

    Args:
        tick_df: DataFrame of ticks sorted by date
        start: First calendar date to keep (inclusive, optional)
        end: Last calendar date to keep (inclusive, optional)

    Returns:
        DataFrame slice, re-indexed from 0
    """
    if tick_df.empty or (start is None and end is None):
        return tick_df.reset_index(drop=True)

    calendar_dates = tick_df['date'].map(to_calendar_date)
    mask = pd.Series(True, index=tick_df.index)

    if start is not None:
        mask &= calendar_dates >= start
    if end is not None:
        mask &= calendar_dates <= end

    return tick_df[mask].reset_index(drop=True)


def compose_metrics(
    tick_df: pd.DataFrame,
    symbol: str,
    leverage_ratio: float = DEFAULT_LEVERAGE_RATIO,
    total_data_points: Optional[int] = None,
    rel_tol: float = DEFAULT_REL_TOL
) -> Dict[str, Any]:
    """
    Compose all tick metrics into standardized JSON format.

    Args:
        tick_df: DataFrame with tick columns (date, open, high, low, close, volume)
        symbol: Symbol the ticks belong to
        leverage_ratio: Multiplier for the leverage simulation (> 0)
        total_data_points: Size of the full series when tick_df is a window
        rel_tol: Relative tolerance for "equal" classification

    Returns:
        Complete MetricsJSON dictionary

    Raises:
        MetricsAggregatorError: If inputs are unusable
    """
    if tick_df.empty:
        raise MetricsAggregatorError("Empty tick data provided")

    missing = set(TICK_COLUMNS) - set(tick_df.columns)
    if missing:
        raise MetricsAggregatorError(f"Tick data missing columns: {sorted(missing)}")

    if leverage_ratio <= 0:
        raise MetricsAggregatorError(f"leverage_ratio must be positive, got {leverage_ratio}")

    ordered = tick_df.sort_values('date').reset_index(drop=True)
    series = ordered[TICK_COLUMNS].to_dict('records')

    data_points = len(series)
    if total_data_points is None:
        total_data_points = data_points

    logger.info(f"Composing metrics for {symbol}: {data_points} of {total_data_points} ticks")

    metrics = derive_metrics(series, leverage_ratio)

    return {
        'symbol': symbol,
        'data_period': {
            'start_date': to_calendar_date(series[0]['date']).isoformat(),
            'end_date': to_calendar_date(series[-1]['date']).isoformat(),
            'data_points': data_points,
            'total_data_points': total_data_points,
            'is_filtered': data_points < total_data_points,
        },
        'latest': _latest_tick(series[-1]),
        'period_stats': {
            'high': metrics.high,
            'low': metrics.low,
            'change': metrics.change,
            'change_percent': metrics.change_percent,
            'avg_range': metrics.avg_range,
            'avg_close_delta': metrics.avg_close_delta,
        },
        'compound_growth': _compound_comparison(series, metrics, rel_tol),
        'leverage': _leverage_comparison(series, metrics, rel_tol),
        'metadata': {
            'calculated_at': datetime.now().isoformat(),
            'calculation_version': CALCULATION_VERSION,
            'equality_rel_tol': rel_tol,
        }
    }


def _latest_tick(tick: Dict[str, Any]) -> Dict[str, Any]:
    """Latest close/high/low with its calendar date."""
    return {
        'date': to_calendar_date(tick['date']).isoformat(),
        'close': float(tick['close']),
        'high': float(tick['high']),
        'low': float(tick['low']),
    }


def _compound_comparison(
    series: List[Dict[str, Any]],
    metrics: DerivedMetrics,
    rel_tol: float
) -> Dict[str, Any]:
    """Closing prices against the plain compound growth curve."""
    baseline = compound_baseline(series, metrics.daily_growth_rate)
    counts = classify_against_baseline(series, baseline, rel_tol=rel_tol)

    return {
        'total_return': metrics.total_return,
        'daily_growth_rate': metrics.daily_growth_rate,
        'classification': counts.to_dict(),
    }


def _leverage_comparison(
    series: List[Dict[str, Any]],
    metrics: DerivedMetrics,
    rel_tol: float
) -> Dict[str, Any]:
    """Leveraged simulation against the leverage-adjusted compound curve."""
    simulation = simulate_leverage(series, metrics.leverage_ratio)
    baseline = leveraged_baseline(series, metrics.daily_growth_rate, metrics.leverage_ratio)
    counts = classify_values(simulation['values'], baseline, rel_tol=rel_tol)

    return {
        'leverage_ratio': metrics.leverage_ratio,
        'final_value': metrics.leveraged_final_value,
        'total_return': metrics.leveraged_total_return,
        'daily_growth_rate': metrics.leveraged_daily_growth_rate,
        'avg_range': metrics.leveraged_avg_range,
        'avg_close_delta': metrics.leveraged_avg_close_delta,
        'classification': counts.to_dict(),
    }
