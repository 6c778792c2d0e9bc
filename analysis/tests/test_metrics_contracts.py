"""
Metrics contract tests - ensure output JSON shapes stay stable for consumers.
No hand-computed numbers - just schema and type checks.
"""

import json
import math
import pandas as pd
from pathlib import Path

from analysis.metrics_aggregator import compose_metrics


def load_fixture(filename):
    """Load JSON fixture from fixtures directory."""
    fixture_path = Path(__file__).parent.parent.parent / 'tests/fixtures' / filename
    with open(fixture_path, 'r') as f:
        return json.load(f)


def build_metrics(**kwargs):
    raw = load_fixture('ticks_response.json')['d']['QuoteTab']
    tick_df = pd.DataFrame([
        {'date': t['d'], 'open': t['o'], 'high': t['h'], 'low': t['l'],
         'close': t['c'], 'volume': t['v']}
        for t in raw
    ])
    return compose_metrics(tick_df, symbol='1rTACME', **kwargs)


def test_period_stats_schema():
    """Period stats carry plain finite floats."""
    stats = build_metrics()['period_stats']

    for key in ['high', 'low', 'change', 'change_percent', 'avg_range', 'avg_close_delta']:
        assert isinstance(stats[key], float)
        assert math.isfinite(stats[key])


def test_compound_growth_schema():
    compound = build_metrics()['compound_growth']

    assert isinstance(compound['total_return'], float)
    assert isinstance(compound['daily_growth_rate'], float)
    _assert_classification(compound['classification'])


def test_leverage_schema():
    leverage = build_metrics(leverage_ratio=2.5)['leverage']

    assert leverage['leverage_ratio'] == 2.5
    for key in ['final_value', 'total_return', 'daily_growth_rate', 'avg_range', 'avg_close_delta']:
        assert isinstance(leverage[key], float)
        assert math.isfinite(leverage[key])
    _assert_classification(leverage['classification'])


def test_metadata_schema():
    metadata = build_metrics()['metadata']

    assert 'calculated_at' in metadata
    assert metadata['calculation_version'] == '1.0.0'
    assert isinstance(metadata['equality_rel_tol'], float)


def _assert_classification(counts):
    for key in ['above', 'below', 'equal', 'total']:
        assert isinstance(counts[key], int)
        assert counts[key] >= 0

    shares = counts['percentages']
    assert set(shares.keys()) == {'above', 'below', 'equal'}
    assert abs(sum(shares.values()) - 100.0) < 1e-9
