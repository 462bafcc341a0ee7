### Monthly series: month-by-month income/expenses/savings history plus a short trend projection.
import logging
import math

from models.forecast_models import CompanySettings, MonthTotals, MonthlyForecast, Transaction
from services.errors import ForecastError
from utils.dates import add_months, format_month_label, month_key
from utils.money import round_amount, round_whole

TREND_WINDOW_MONTHS = 6
MAX_MONTHLY_CHANGE = 0.30
PROJECTION_MONTHS = 3
# Projected rows are rounded to whole units while historical rows keep cents.
PROJECTION_ROUNDING_PLACES = 0


def aggregate_by_month(transactions: list[Transaction]) -> dict[str, MonthTotals]:
    totals: dict[str, MonthTotals] = {}
    for tx in transactions:
        # every dated row opens its month, even a transfer
        entry = totals.setdefault(month_key(tx.date), MonthTotals())
        if tx.type == "income":
            entry.income += tx.amount
        elif tx.type == "expense":
            entry.expenses += tx.amount
    return totals


def _relative_change(prev: float, curr: float) -> float:
    if prev == 0:
        return 0.0
    return (curr - prev) / prev


def _clamp(value: float, limit: float = MAX_MONTHLY_CHANGE) -> float:
    return max(-limit, min(limit, value))


def compute_average_changes(monthly_totals: dict[str, MonthTotals]) -> tuple[float, float]:
    """
    Average month-over-month relative change of income and expenses over the
    trend window (last six months), each clamped to +/-30%.

    Returns (avg_income_change, avg_expense_change).
    """
    months = sorted(monthly_totals)
    window = months[-min(TREND_WINDOW_MONTHS, len(months)):] if months else []

    changes = []
    for prev_key, curr_key in zip(window, window[1:]):
        prev = monthly_totals[prev_key]
        curr = monthly_totals[curr_key]
        income_change = _relative_change(prev.income, curr.income)
        expense_change = _relative_change(prev.expenses, curr.expenses)
        if math.isnan(income_change) or math.isnan(expense_change):
            continue
        changes.append((income_change, expense_change))

    if not changes:
        return 0.0, 0.0

    avg_income_change = sum(c[0] for c in changes) / len(changes)
    avg_expense_change = sum(c[1] for c in changes) / len(changes)
    return _clamp(avg_income_change), _clamp(avg_expense_change)


def _project(value: float, change: float) -> float:
    projected = value * (1 + change)
    if PROJECTION_ROUNDING_PLACES == 0:
        return round_whole(projected)
    return round_amount(projected, PROJECTION_ROUNDING_PLACES)


def generate_monthly_forecasts(transactions: list[Transaction], settings: CompanySettings) -> list[MonthlyForecast]:
    """Historical monthly rows followed by ``PROJECTION_MONTHS`` projected rows.

    Returns an empty list when no transaction has usable data.
    Raises ForecastError on any unexpected failure.
    """
    try:
        currency = settings.default_currency
        monthly_totals = aggregate_by_month(transactions)

        if not monthly_totals:
            logging.info("No valid transactions for monthly data generation")
            return []

        months = sorted(monthly_totals)
        avg_income_change, avg_expense_change = compute_average_changes(monthly_totals)
        logging.info(
            f"Average monthly changes: income {avg_income_change * 100:.2f}%, "
            f"expenses {avg_expense_change * 100:.2f}%"
        )

        # --- historical rows ---
        rows = []
        for key in months:
            year, month = map(int, key.split("-"))
            totals = monthly_totals[key]
            rows.append(MonthlyForecast(
                month=format_month_label(year, month),
                income=round_amount(totals.income),
                expenses=round_amount(totals.expenses),
                savings=round_amount(totals.income - totals.expenses),
                prediction=False,
                currency=currency,
            ))

        # --- projected rows ---
        last_year, last_month = map(int, months[-1].split("-"))
        last_income = monthly_totals[months[-1]].income
        last_expenses = monthly_totals[months[-1]].expenses

        for i in range(1, PROJECTION_MONTHS + 1):
            year, month = add_months(last_year, last_month, i)
            last_income = _project(last_income, avg_income_change)
            last_expenses = _project(last_expenses, avg_expense_change)
            rows.append(MonthlyForecast(
                month=format_month_label(year, month),
                income=last_income,
                expenses=last_expenses,
                savings=last_income - last_expenses,
                prediction=True,
                currency=currency,
            ))

        logging.info(
            f"Generated monthly data: {len(rows)} months "
            f"({len(months)} historical, {len(rows) - len(months)} forecast)"
        )
        return rows
    except Exception as e:
        logging.exception("Error generating monthly data")
        raise ForecastError(f"Failed to generate monthly forecasts: {e}") from e
