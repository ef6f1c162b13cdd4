"""
Utility functions for parsing and formatting collections data.

Provides helpers for:
- Date parsing (ISO and m/d/y formats)
- Numeric coercion of free-text filter inputs
- Currency and date formatting for tables and exports
- Case-insensitive text matching used by the demo backend
"""

from datetime import date, datetime
from typing import Any, Iterable


def parse_date(date_str: str | None) -> datetime | None:
    """
    Parse an ISO or m/d/y date string to a datetime object.

    Args:
        date_str: Date string such as "2024-12-25", "2024-12-25T10:00:00Z"
                  or "12/25/2024".

    Returns:
        datetime object if parsing succeeds, None otherwise
    """
    if date_str:
        date_str = date_str.strip()
    if not date_str:
        return None

    try:
        return datetime.fromisoformat(date_str.replace("Z", "+00:00"))
    except ValueError:
        pass

    for fmt in ("%m/%d/%Y", "%m/%d/%y"):
        try:
            return datetime.strptime(date_str, fmt)
        except ValueError:
            pass

    return None


def parse_day(date_str: str | None) -> date | None:
    """Parse a date string and drop the time component."""
    parsed = parse_date(date_str)
    return parsed.date() if parsed else None


def parse_number(value: Any) -> float | None:
    """
    Coerce a filter input to a float.

    Empty strings and unparsable text are treated as "unset".
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    text = str(value).strip().replace(",", "")
    if not text:
        return None
    try:
        return float(text)
    except ValueError:
        return None


def parse_int(value: Any) -> int | None:
    """Coerce a filter input to an int, truncating decimals."""
    number = parse_number(value)
    return int(number) if number is not None else None


def format_currency(value: float | None, currency: str = "USD") -> str:
    """
    Format an amount for display.

    Args:
        value: Numeric amount, or None.
        currency: Currency code; USD renders with a dollar sign.

    Returns:
        Formatted string like '$1,234.56' or 'EUR 1,234.56'.
    """
    if value is None:
        return "N/A"
    if currency == "USD":
        sign = "-" if value < 0 else ""
        return f"{sign}${abs(value):,.2f}"
    return f"{currency} {value:,.2f}"


def format_date(date_str: str | None) -> str:
    """Format a stored date string as 'Jan 05, 2024'."""
    parsed = parse_date(date_str)
    if not parsed:
        return "N/A"
    return parsed.strftime("%b %d, %Y")


def matches_text(query: str, values: Iterable[Any]) -> bool:
    """
    Check whether any value contains the query, case-insensitively.

    An empty query matches everything.
    """
    normalized = " ".join(query.split()).lower()
    if not normalized:
        return True
    return any(normalized in str(value).lower() for value in values if value)
