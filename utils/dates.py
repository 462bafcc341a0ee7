import re
from datetime import date, datetime

from dateutil.relativedelta import relativedelta

ISO_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}")

# locale independent, matches en-US short month names
MONTH_ABBREVIATIONS = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)


def parse_iso_date(raw) -> date | None:
    """Parse ``YYYY-MM-DD`` (optionally followed by a ``T...`` time part).

    Returns None for anything that is not a real calendar date.
    """
    if isinstance(raw, datetime):
        return raw.date()
    if isinstance(raw, date):
        return raw
    if not isinstance(raw, str):
        return None

    day_part = raw.strip().split("T")[0]
    if not ISO_DATE_PATTERN.match(day_part):
        return None
    try:
        return date.fromisoformat(day_part[:10])
    except ValueError:
        return None


def month_key(day: date) -> str:
    return f"{day.year:04d}-{day.month:02d}"


def format_month_label(year: int, month: int) -> str:
    """``(2024, 1)`` -> ``"Jan 2024"``"""
    return f"{MONTH_ABBREVIATIONS[month - 1]} {year}"


def add_months(year: int, month: int, n: int):
    """
    Add n months to given (year, month)
    Returns new (year, month)
    """
    new_month = month + n
    new_year = year + (new_month - 1) // 12
    new_month = ((new_month - 1) % 12) + 1
    return new_year, new_month


def months_from(day: date, months: int) -> date:
    """Calendar-month offset; day of month clamps to the target month's length."""
    return day + relativedelta(months=months)
