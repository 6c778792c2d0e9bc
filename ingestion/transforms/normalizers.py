"""
Normalizers for transforming provider ticks to canonical shape.
Pure functions - no IO, network, or side effects.
Minimal normalization - only when necessary.
"""

from datetime import date, datetime, timedelta, timezone
from typing import Dict, Any, List, Union


EPOCH = date(1970, 1, 1)

# Below this a tick date is a day index, below the next an epoch in seconds
MAX_DAY_INDEX = 10 ** 6
MAX_EPOCH_SECONDS = 10 ** 11

# Provider field -> canonical field
TICK_FIELDS = {
    'd': 'date',
    'o': 'open',
    'h': 'high',
    'l': 'low',
    'c': 'close',
    'v': 'volume',
}


def to_calendar_date(value: Union[int, float]) -> date:
    """
    Convert a tick date to a calendar date.

    Args:
        value: Day index since 1970-01-01, epoch seconds or epoch milliseconds

    Returns:
        Calendar date (UTC)

    Example:
        19723 -> 2024-01-01 (day index)
        1704067200 -> 2024-01-01 (seconds)
        1704067200000 -> 2024-01-01 (milliseconds)
    """
    if abs(value) < MAX_DAY_INDEX:
        return EPOCH + timedelta(days=int(value))

    seconds = value if abs(value) < MAX_EPOCH_SECONDS else value / 1000
    return datetime.fromtimestamp(seconds, tz=timezone.utc).date()


def normalize_ticks(raw_rows: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """
    Transform provider-native ticks to canonical shape.

    Minimal normalization:
    - Field name mapping (provider uses single-letter keys)
    - Numeric coercion to float (provider may send ints)
    - Deduplication by date (keep last to handle corrections)
    - Ascending date order

    Rows missing a field keep None for it so validation can reject them.

    Args:
        raw_rows: List of provider tick dictionaries ({d, o, h, l, c, v})

    Returns:
        List of canonical tick dictionaries sorted by date
    """
    if not raw_rows:
        return []

    seen_dates = {}  # For deduplication

    for raw in raw_rows:
        canonical = {}
        for provider_field, field in TICK_FIELDS.items():
            value = raw.get(provider_field)
            if field == 'date' or value is None:
                canonical[field] = value
            else:
                try:
                    canonical[field] = float(value)
                except (TypeError, ValueError):
                    canonical[field] = value

        seen_dates[canonical['date']] = canonical

    dated = [row for key, row in seen_dates.items() if isinstance(key, (int, float))]
    undated = [row for key, row in seen_dates.items() if not isinstance(key, (int, float))]

    return sorted(dated, key=lambda row: row['date']) + undated
