### Forecast service looks ahead in recurring transactions and lists their upcoming occurrences.
import logging
from datetime import date, timedelta
from math import ceil

from dateutil.relativedelta import relativedelta

from helpers.normalize import normalize_recurring
from models.forecast_models import CompanySettings, RecurringTransaction, UpcomingExpense
from services.errors import ForecastError
from utils.dates import months_from

TIMEFRAME_MONTHS = {
    "3months": 3,
    "6months": 6,
    "12months": 12,
}


def get_horizon_end(timeframe, today):
    if timeframe not in TIMEFRAME_MONTHS:
        raise ValueError(f"Invalid timeframe: {timeframe}")
    return months_from(today, TIMEFRAME_MONTHS[timeframe])


def get_occurrence(event: RecurringTransaction, index: int) -> date:
    """The ``index``-th occurrence, always measured from ``start_date``."""
    start = event.start_date
    if event.frequency == "daily":
        return start + timedelta(days=index)
    if event.frequency == "weekly":
        return start + timedelta(weeks=index)
    if event.frequency == "monthly":
        return start + relativedelta(months=index)
    if event.frequency == "yearly":
        return start + relativedelta(years=index)
    raise ValueError(f"Unsupported frequency: {event.frequency}")


def first_index_on_or_after(event: RecurringTransaction, today: date) -> int:
    """Index of the first occurrence that falls on or after ``today``."""
    start = event.start_date
    if start >= today:
        return 0

    days_since_start = (today - start).days
    if event.frequency == "daily":
        return days_since_start
    if event.frequency == "weekly":
        return ceil(days_since_start / 7)

    if event.frequency == "monthly":
        index = (today.year - start.year) * 12 + (today.month - start.month)
    else:
        index = today.year - start.year

    # month/year deltas can land a few days short of today
    if get_occurrence(event, index) < today:
        index += 1
    return index


def get_occurrences_in_window(event: RecurringTransaction, today: date, window_end: date) -> list[date]:
    occurrences = []
    index = first_index_on_or_after(event, today)
    next_date = get_occurrence(event, index)
    while next_date <= window_end:
        occurrences.append(next_date)
        index += 1
        next_date = get_occurrence(event, index)
    return occurrences


def generate_upcoming_expenses(recurring, timeframe, settings: CompanySettings, today=None) -> list[UpcomingExpense]:
    """
    Expand recurring expense definitions into dated occurrences between
    ``today`` and the timeframe horizon (inclusive), sorted by date.

    ``recurring`` holds raw definition dicts. Raises ForecastError if any
    definition cannot be expanded.
    """
    if today is None:
        today = date.today()

    try:
        window_end = get_horizon_end(timeframe, today)

        upcoming_items = []
        for raw in recurring:
            event = normalize_recurring(raw)
            if event is None:
                continue
            for occ_date in get_occurrences_in_window(event, today, window_end):
                upcoming_items.append(UpcomingExpense(
                    id=f"{event.id}-{occ_date.isoformat()}",
                    description=event.description,
                    amount=event.amount,
                    date=occ_date,
                    category_name=event.category_name,
                    category_color=event.category_color,
                    frequency=event.frequency,
                    currency=settings.default_currency,
                ))
    except Exception as e:
        logging.exception("Error generating upcoming expenses")
        raise ForecastError(f"Failed to generate upcoming expenses: {e}") from e

    logging.info(
        f"Expanded {len(recurring)} recurring transactions into "
        f"{len(upcoming_items)} occurrences through {window_end.isoformat()}"
    )
    return sorted(upcoming_items, key=lambda x: x.date)
