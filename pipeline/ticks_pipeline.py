"""
Ticks pipeline - orchestrates fetching a symbol's end-of-day series.
Composes: Provider → Transform → Validate.
"""

import os
import logging
from datetime import datetime
from typing import Dict, Any, List
from dataclasses import dataclass, field
from dotenv import load_dotenv

# Import all pipeline components
from ingestion.providers.boursorama_adapter import fetch_ticks
from ingestion.transforms.normalizers import normalize_ticks
from ingestion.transforms.validators import (
    validate_tick_row,
    ohlc_warnings,
    check_tick_date_monotonicity,
    ValidationError
)

# Load environment variables
load_dotenv()

# Set up logger
logger = logging.getLogger(__name__)


def _default_length() -> int:
    return int(os.getenv('TICKS_LENGTH', '7300'))


@dataclass
class TicksConfig:
    """Configuration for the ticks pipeline."""
    symbol: str
    length: int = field(default_factory=_default_length)
    period: int = 0

    def __post_init__(self):
        """Validate parameters."""
        if not self.symbol or not isinstance(self.symbol, str):
            raise ValueError("symbol must be non-empty string")

        if self.length <= 0:
            raise ValueError("length must be positive")

        if self.period < 0:
            raise ValueError("period must be non-negative")


def run_ticks(config: TicksConfig) -> Dict[str, Any]:
    """
    Run the complete ticks pipeline.

    Pipeline stages:
    1. Fetch raw ticks from provider
    2. Normalize to canonical format (sorted, deduplicated)
    3. Validate each row, dropping invalid ones
    4. Check date ordering of the kept rows

    A fetch failure does not raise: the result carries status 'failed'
    and the error message so the caller can offer a retry.

    Args:
        config: Pipeline configuration

    Returns:
        Dictionary with run results and the validated ticks
    """
    start_time = datetime.now()

    result = {
        'symbol': config.symbol,
        'status': 'running',
        'rows_fetched': 0,
        'rows_kept': 0,
        'validation_warnings': 0,
        'ohlc_warnings': 0,
        'ticks': [],
        'error_message': None
    }

    try:
        # Stage 1: Fetch raw ticks from provider
        raw_ticks = fetch_ticks(
            symbol=config.symbol,
            length=config.length,
            period=config.period
        )

        result['rows_fetched'] = len(raw_ticks)

        if not raw_ticks:
            # Empty data is not an error - complete successfully
            logger.info(f"No ticks returned for {config.symbol}")
            result['status'] = 'completed'
            result['duration_seconds'] = (datetime.now() - start_time).total_seconds()
            return result

        # Stage 2: Normalize to canonical format
        normalized = normalize_ticks(raw_ticks)

        # Stage 3: Validate each row
        valid_rows = _validate_rows(config.symbol, normalized, result)

        if not valid_rows:
            # All rows failed validation - this is an error
            result['status'] = 'failed'
            result['error_message'] = f"All {len(normalized)} rows failed validation"
            result['duration_seconds'] = (datetime.now() - start_time).total_seconds()
            return result

        # Stage 4: Ordering check on what survived
        check_tick_date_monotonicity(valid_rows)

        result['ticks'] = valid_rows
        result['rows_kept'] = len(valid_rows)
        result['status'] = 'completed'
        result['duration_seconds'] = (datetime.now() - start_time).total_seconds()

        logger.info(
            f"Ticks pipeline for {config.symbol}: {result['rows_kept']} of "
            f"{result['rows_fetched']} rows kept"
        )

        return result

    except Exception as e:
        logger.error(f"Ticks pipeline failed for {config.symbol}: {e}")

        result['status'] = 'failed'
        result['error_message'] = str(e)
        result['duration_seconds'] = (datetime.now() - start_time).total_seconds()

        return result


def _validate_rows(
    symbol: str,
    rows: List[Dict[str, Any]],
    result: Dict[str, Any]
) -> List[Dict[str, Any]]:
    """Keep valid rows, counting rejections and OHLC ordering warnings."""
    valid_rows = []

    for row in rows:
        try:
            validate_tick_row(row)
        except ValidationError as e:
            result['validation_warnings'] += 1
            logger.warning(f"Validation warning for {symbol} {row.get('date', 'unknown')}: {e}")
            continue

        problems = ohlc_warnings(row)
        if problems:
            result['ohlc_warnings'] += 1
            logger.debug(f"OHLC ordering for {symbol} {row['date']}: {'; '.join(problems)}")

        valid_rows.append(row)

    return valid_rows
