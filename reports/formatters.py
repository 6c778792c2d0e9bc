"""
Display formatters for tick MetricsJSON.
Deterministic string formatting for percentages, growth rates, currency and dates.
"""

from datetime import datetime, date
from typing import Optional, Union


class FormatterError(Exception):
    """Raised when formatter input validation fails."""
    pass


def _require_numeric(value, label: str) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise FormatterError(f"{label} value must be numeric, got {type(value)}")


def format_percentage(value: Optional[float], decimal_places: int = 2) -> str:
    """
    Format a decimal as percentage.

    Args:
        value: Decimal value (0.0845 = 8.45%)
        decimal_places: Number of decimal places (default: 2)

    Returns:
        Formatted percentage string (e.g., "8.45%")
    """
    if value is None:
        return "Not available"

    _require_numeric(value, "Percentage")

    return f"{value * 100:.{decimal_places}f}%"


def format_percent_points(value: Optional[float], decimal_places: int = 2) -> str:
    """
    Format a value that is already in percent (12.5 -> "12.50%").

    Args:
        value: Percentage value
        decimal_places: Number of decimal places (default: 2)
    """
    if value is None:
        return "Not available"

    _require_numeric(value, "Percentage")

    return f"{value:.{decimal_places}f}%"


def format_growth_rate(value: Optional[float]) -> str:
    """
    Format a daily growth rate, which needs more precision than a return.

    Args:
        value: Daily rate as decimal (0.00041 = 0.041%)

    Returns:
        Formatted rate string (e.g., "0.041%")
    """
    return format_percentage(value, decimal_places=3)


def format_currency(value: Optional[float], symbol: str = "€") -> str:
    """
    Format a price with currency symbol and thousands separator.

    Args:
        value: Amount
        symbol: Currency symbol (default: euro)

    Returns:
        Formatted currency string (e.g., "€1,234.56", "-€3.10")
    """
    if value is None:
        return "Not available"

    _require_numeric(value, "Currency")

    sign = "-" if value < 0 else ""
    return f"{sign}{symbol}{abs(value):,.2f}"


def format_date_display(date_input: Union[str, date, datetime]) -> str:
    """
    Format date as "Month D, YYYY".

    Args:
        date_input: Date as string, date object, or datetime object

    Returns:
        Formatted date string (e.g., "July 15, 2025")
    """
    if date_input is None:
        return "Not available"

    # Convert to date object
    if isinstance(date_input, str):
        try:
            if 'T' in date_input:
                # ISO datetime string
                dt = datetime.fromisoformat(date_input.replace('Z', '+00:00'))
                date_obj = dt.date()
            else:
                # ISO date string
                date_obj = date.fromisoformat(date_input)
        except ValueError:
            raise FormatterError(f"Invalid date string: {date_input}")
    elif isinstance(date_input, datetime):
        date_obj = date_input.date()
    elif isinstance(date_input, date):
        date_obj = date_input
    else:
        raise FormatterError(f"Date must be string, date, or datetime, got {type(date_input)}")

    return date_obj.strftime("%B %d, %Y")
