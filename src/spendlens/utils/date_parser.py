"""Date parsing utilities."""

from datetime import date, datetime, timedelta
from typing import Optional
from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

_PERIODS = ("this-month", "last-month", "this-year", "last-year")


def parse_date(date_str: str, today: Optional[date] = None) -> date:
    """Parse a date string into a date object.

    Supports ISO dates ("2026-02-15"), other absolute formats understood by
    dateutil, and the relative words "today", "yesterday", "tomorrow",
    "this month", "last month" and "next month" (first day of that month).

    Args:
        date_str: Date string
        today: Reference date for relative words; defaults to the current date

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    text = date_str.strip().lower()
    if today is None:
        today = date.today()

    relative = {
        "today": today,
        "yesterday": today - timedelta(days=1),
        "tomorrow": today + timedelta(days=1),
        "this month": today.replace(day=1),
        "last month": today.replace(day=1) - relativedelta(months=1),
        "next month": today.replace(day=1) + relativedelta(months=1),
    }
    if text in relative:
        return relative[text]

    try:
        return date_parser.parse(text).date()
    except (ValueError, TypeError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def parse_datetime(value: str) -> datetime:
    """Parse an ISO-like timestamp; a bare date means midnight.

    Raises:
        ValueError: If the string cannot be parsed
    """
    try:
        return date_parser.parse(value.strip())
    except (ValueError, TypeError, OverflowError) as e:
        raise ValueError(f"Could not parse timestamp '{value}': {e}")


def parse_month(month_str: str) -> tuple[int, int]:
    """Parse a "YYYY-MM" string into (year, month).

    Raises:
        ValueError: If the string is not a valid year-month
    """
    try:
        parsed = datetime.strptime(month_str.strip(), "%Y-%m")
    except ValueError:
        raise ValueError(f"Invalid month '{month_str}'; expected YYYY-MM")
    return parsed.year, parsed.month


def get_date_range(period: str, today: Optional[date] = None) -> tuple[date, date]:
    """Get start and end dates for a named period.

    Args:
        period: One of this-month, last-month, this-year, last-year
        today: Reference date; defaults to the current date

    Current periods run to the end of the month or year, so entries dated
    later in the period (such as projected recurring bills) are included.

    Returns:
        Tuple of (start_date, end_date), both inclusive

    Raises:
        ValueError: If period string is not recognized
    """
    period = period.strip().lower()
    if today is None:
        today = date.today()

    if period == "this-month":
        return (today.replace(day=1), today + relativedelta(day=31))
    if period == "last-month":
        start = today.replace(day=1) - relativedelta(months=1)
        return (start, today.replace(day=1) - timedelta(days=1))
    if period == "this-year":
        return (today.replace(month=1, day=1), today.replace(month=12, day=31))
    if period == "last-year":
        start = today.replace(month=1, day=1) - relativedelta(years=1)
        return (start, today.replace(month=1, day=1) - timedelta(days=1))

    raise ValueError(f"Unknown period: '{period}'. Supported periods: {', '.join(_PERIODS)}")
