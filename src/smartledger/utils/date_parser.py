"""Date parsing utilities."""

from datetime import date, timedelta
from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta


def parse_date(date_str: str) -> date:
    """Parse a date string into a date object.

    Supports various formats including relative dates:
    - Absolute dates: "2024-03-15", "15/03/2024", "March 15, 2024"
    - Relative dates: "today", "yesterday", "this month", "last month", "this year"

    Slash dates are read day first, as ledger vouchers are written.

    Args:
        date_str: Date string in various formats

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    date_str = date_str.strip().lower()
    today = date.today()

    relative_dates = {
        "today": today,
        "yesterday": today - timedelta(days=1),
        "tomorrow": today + timedelta(days=1),
        "this month": today.replace(day=1),
        "last month": (today - relativedelta(months=1)).replace(day=1),
        "this year": today.replace(month=1, day=1),
        "last year": today.replace(month=1, day=1) - relativedelta(years=1),
    }

    if date_str in relative_dates:
        return relative_dates[date_str]

    try:
        dayfirst = "/" in date_str
        return date_parser.parse(date_str, dayfirst=dayfirst).date()
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def parse_iso_date(date_str: str) -> str:
    """Parse a date string and return it as an ISO ``YYYY-MM-DD`` string."""
    return parse_date(date_str).isoformat()
