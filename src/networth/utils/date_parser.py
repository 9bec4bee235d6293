"""Date parsing utilities."""

from datetime import date, datetime, timedelta
from typing import Optional

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

# Statement dates a balance is usually recorded as of.
CLOSING_DATES = {
    "month-end": lambda today: today.replace(day=1) - timedelta(days=1),
    "quarter-end": lambda today: date(today.year, 3 * ((today.month - 1) // 3) + 1, 1) - timedelta(days=1),
    "year-end": lambda today: date(today.year - 1, 12, 31),
}


def parse_date(date_str: str) -> date:
    """Parse the as-of date of a reconciliation.

    Accepts absolute dates ("2024-01-15", "June 30, 2024"), "today",
    "yesterday", and the most recent closing dates "month-end",
    "quarter-end" and "year-end". "N days ago" and "N months ago" are
    also understood.

    Raises:
        ValueError: If date string cannot be parsed
    """
    text = date_str.strip().lower()
    today = date.today()

    if text == "today":
        return today
    if text == "yesterday":
        return today - timedelta(days=1)
    if text in CLOSING_DATES:
        return CLOSING_DATES[text](today)

    parts = text.split()
    if len(parts) == 3 and parts[0].isdigit() and parts[2] == "ago":
        count = int(parts[0])
        unit = parts[1].rstrip("s")
        if unit == "day":
            return today - timedelta(days=count)
        if unit == "month":
            return today - relativedelta(months=count)

    try:
        return date_parser.parse(text).date()
    except (ValueError, TypeError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """Parse a stored ISO timestamp, returning None for blank or bad values."""
    if not value:
        return None
    try:
        return date_parser.isoparse(value)
    except (ValueError, TypeError):
        return None


def parse_stored_date(value: Optional[str]) -> Optional[date]:
    """Parse a stored ISO date (or timestamp) into a date."""
    parsed = parse_timestamp(value)
    return parsed.date() if parsed is not None else None


def get_year_range(period: str) -> tuple[date, date]:
    """Get start and end dates for a yearly period.

    Args:
        period: "this-year", "last-year" or a four digit year

    Returns:
        Tuple of (start_date, end_date) for the specified period

    Raises:
        ValueError: If period string is not recognized
    """
    period = period.strip().lower()
    today = date.today()

    if period == "this-year":
        year = today.year
    elif period == "last-year":
        year = today.year - 1
    elif period.isdigit() and len(period) == 4:
        year = int(period)
    else:
        raise ValueError(f"Unknown period: '{period}'. Supported periods: this-year, last-year, YYYY")

    start_date = date(year, 1, 1)
    end_date = date(year, 12, 31)
    return (start_date, end_date)
