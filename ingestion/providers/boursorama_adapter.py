"""
Boursorama adapter - fetch end-of-day ticks from the GetTicksEOD endpoint.
Network IO allowed here, but minimal business logic.
"""

import os
import logging
import requests
from typing import Dict, Any, List
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Set up logger
logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = 'https://www.boursorama.com/bourse/action/graph/ws/GetTicksEOD'
DEFAULT_USER_AGENT = (
    'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36'
)
DEFAULT_LENGTH = 7300


class BoursoramaError(Exception):
    """Raised when Boursorama operations fail."""
    pass


def fetch_ticks(
    symbol: str,
    length: int = DEFAULT_LENGTH,
    period: int = 0
) -> List[Dict[str, Any]]:
    """
    Fetch end-of-day ticks for a symbol.
    Returns raw ticks in provider format ({d, o, h, l, c, v}) - no normalization.

    Args:
        symbol: Boursorama symbol (e.g., '1rTCW8')
        length: Number of days of history to request
        period: Provider period code (0 = daily)

    Returns:
        List of raw tick dictionaries, empty when the response has no ticks

    Raises:
        BoursoramaError: If the request, HTTP status or JSON decoding fails
    """
    _validate_symbol(symbol)

    base_url = os.getenv('BOURSORAMA_BASE_URL', DEFAULT_BASE_URL)
    user_agent = os.getenv('BOURSORAMA_USER_AGENT', DEFAULT_USER_AGENT)
    timeout = int(os.getenv('REQUESTS_TIMEOUT_S', '30'))

    params = {
        'symbol': symbol,
        'length': length,
        'period': period,
        'guid': ''
    }
    headers = {
        'Accept': 'application/json',
        'User-Agent': user_agent
    }

    logger.info(f"Fetching ticks for {symbol}: length={length} period={period}")

    try:
        response = requests.get(base_url, params=params, headers=headers, timeout=timeout)
    except requests.exceptions.Timeout as e:
        logger.error(f"Tick request timed out for {symbol} after {timeout}s")
        raise BoursoramaError(f"Request timed out after {timeout}s for {symbol}") from e
    except requests.exceptions.RequestException as e:
        logger.error(f"Tick request failed for {symbol}: {e}")
        raise BoursoramaError(f"Failed to fetch ticks for {symbol}: {e}") from e

    if response.status_code != 200:
        raise BoursoramaError(f"HTTP {response.status_code} fetching ticks for {symbol}")

    try:
        payload = response.json()
    except ValueError as e:
        raise BoursoramaError(f"Invalid JSON response for {symbol}") from e

    ticks = extract_ticks(payload)
    logger.info(f"Fetched {len(ticks)} ticks for {symbol}")

    return ticks


def extract_ticks(payload: Any) -> List[Dict[str, Any]]:
    """
    Pull the tick list out of a GetTicksEOD response.

    Accepts both known shapes:
    - {"d": {"QuoteTab": [...]}}
    - {"d": {"QuoteTab": {"ticks": [...]}}}

    Args:
        payload: Decoded JSON response

    Returns:
        List of raw ticks, empty for any other shape
    """
    if not isinstance(payload, dict) or not isinstance(payload.get('d'), dict):
        logger.warning("Unknown response structure, no data available")
        return []

    quote_tab = payload['d'].get('QuoteTab')

    if isinstance(quote_tab, list):
        return quote_tab

    if isinstance(quote_tab, dict) and isinstance(quote_tab.get('ticks'), list):
        return quote_tab['ticks']

    logger.warning("Unknown response structure, no data available")
    return []


def _validate_symbol(symbol: str) -> None:
    """
    Basic symbol validation.

    Args:
        symbol: Boursorama symbol

    Raises:
        BoursoramaError: If symbol is invalid
    """
    if not symbol or not isinstance(symbol, str):
        raise BoursoramaError("Symbol must be non-empty string")

    if len(symbol) > 20:
        raise BoursoramaError("Symbol too long (max 20 characters)")

    # Boursorama symbols mix case (e.g. '1rTCW8'), so no upper-casing here
    if not all(ch.isalnum() or ch in '.-_' for ch in symbol):
        raise BoursoramaError(f"Symbol contains invalid characters: {symbol}")
