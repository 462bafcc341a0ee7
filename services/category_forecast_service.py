"""
Category forecasts: per expense category spend trend and projection.

Best-effort: a category whose computation fails is logged, counted in
``CategoryForecastBatch.skipped`` and left out of the result.
"""
import logging

from models.forecast_models import (
    CategoryForecast,
    CategoryForecastBatch,
    CompanySettings,
    Transaction,
)
from utils.money import round_amount, round_whole

TREND_THRESHOLD_PCT = 5

# (upper bound on sample count, confidence); the first bound the count is below wins
CONFIDENCE_STEPS = (
    (3, 0.3),
    (6, 0.5),
    (12, 0.7),
    (24, 0.8),
)
MAX_CONFIDENCE = 0.9


def calculate_confidence(sample_size: int) -> float:
    for bound, confidence in CONFIDENCE_STEPS:
        if sample_size < bound:
            return confidence
    return MAX_CONFIDENCE


def classify_trend(trend_pct: float) -> str:
    if trend_pct > TREND_THRESHOLD_PCT:
        return "up"
    if trend_pct < -TREND_THRESHOLD_PCT:
        return "down"
    return "stable"


def calculate_trend_pct(amounts: list[float]) -> float:
    """Percent change from the mean of the first half to the mean of the second.

    ``amounts`` must already be in chronological order. The first half gets
    ``len // 2`` items.
    """
    if len(amounts) < 2:
        return 0.0

    middle = len(amounts) // 2
    first_half = amounts[:middle]
    second_half = amounts[middle:]
    first_avg = sum(first_half) / len(first_half)
    second_avg = sum(second_half) / len(second_half)

    if first_avg == 0:
        return 0.0
    return ((second_avg - first_avg) / first_avg) * 100


def group_by_category(transactions: list[Transaction]) -> dict[str, list[Transaction]]:
    groups: dict[str, list[Transaction]] = {}
    for tx in transactions:
        if tx.type != "expense":
            continue
        groups.setdefault(tx.category.id, []).append(tx)
    return groups


def forecast_category(category_id: str, transactions: list[Transaction], currency: str) -> CategoryForecast:
    # name/color come from the first transaction seen for the category
    first = transactions[0].category
    ordered = sorted(transactions, key=lambda t: t.date)
    amounts = [t.amount for t in ordered]

    average = sum(amounts) / len(amounts)
    trend = calculate_trend_pct(amounts)

    return CategoryForecast(
        category_id=category_id,
        category=first.name,
        color=first.color,
        current=round_amount(average),
        forecast=round_amount(average * (1 + trend / 100)),
        change=round_whole(trend),
        trend=classify_trend(trend),
        confidence=calculate_confidence(len(amounts)),
        currency=currency,
    )


def generate_category_forecasts(transactions: list[Transaction], timeframe: str,
                                settings: CompanySettings) -> CategoryForecastBatch:
    """
    Forecast every expense category with at least one transaction.

    ``timeframe`` is accepted for symmetry with the other generators; the
    projection itself is one step ahead regardless of horizon.
    """
    groups = group_by_category(transactions)
    logging.info(f"Category data collected for {len(groups)} categories (timeframe={timeframe})")

    batch = CategoryForecastBatch()
    for category_id, category_transactions in groups.items():
        try:
            batch.forecasts.append(
                forecast_category(category_id, category_transactions, settings.default_currency)
            )
        except Exception as e:
            batch.skipped += 1
            logging.warning(f"Error processing forecast for category {category_id}: {e}")

    logging.info(f"Generated {len(batch.forecasts)} category forecasts, skipped {batch.skipped}")
    return batch
