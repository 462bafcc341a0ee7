"""
Input normalization for the forecast engine.

Callers hand over loosely-shaped dicts (request JSON or rows from the store).
Everything here maps them onto the engine dataclasses; the engine itself never
inspects raw payloads.
"""
import logging

import config
from models.forecast_models import (
    Category,
    CompanySettings,
    RecurringTransaction,
    Transaction,
    DEFAULT_CATEGORY_COLOR,
    DEFAULT_CATEGORY_TYPE,
    UNCATEGORIZED_ID,
    UNCATEGORIZED_NAME,
)
from utils.dates import parse_iso_date
from utils.money import parse_amount

RECURRING_FREQUENCIES = ("daily", "weekly", "monthly", "yearly")


def _text(value, default):
    if isinstance(value, str) and value.strip():
        return value
    return default


def normalize_category(raw) -> Category:
    """Total mapping from any category payload to a canonical Category.

    - missing / empty           -> Uncategorized
    - bare id string            -> that id, placeholder name "Category <id[:4]>"
    - dict (possibly partial)   -> each missing or malformed field defaulted
    - anything else             -> Uncategorized
    """
    if isinstance(raw, str):
        if not raw.strip():
            return Category()
        return Category(id=raw, name=f"Category {raw[:4]}")

    if isinstance(raw, dict):
        return Category(
            id=_text(raw.get("id"), UNCATEGORIZED_ID),
            name=_text(raw.get("name"), UNCATEGORIZED_NAME),
            type=_text(raw.get("type"), DEFAULT_CATEGORY_TYPE),
            color=_text(raw.get("color"), DEFAULT_CATEGORY_COLOR),
        )

    return Category()


def normalize_transaction(raw) -> Transaction | None:
    """
    Convert a raw transaction dict into a Transaction.
    Returns None when the amount or date is unusable. The type is lowercased
    but not validated.
    """
    if not isinstance(raw, dict):
        return None

    amount = parse_amount(raw.get("amount"))
    if amount is None:
        return None

    day = parse_iso_date(raw.get("date"))
    if day is None:
        return None

    # income/expense feed the sums; other types only mark their month
    tx_type = raw.get("type")
    tx_type = tx_type.strip().lower() if isinstance(tx_type, str) else ""

    tx_id = raw.get("id")
    return Transaction(
        id=str(tx_id) if tx_id is not None else None,
        date=day,
        amount=amount,
        type=tx_type,
        category=normalize_category(raw.get("category")),
    )


def sanitize_transactions(raw_transactions) -> list[Transaction]:
    if not isinstance(raw_transactions, list):
        logging.info("Transactions input is not a list, treating as empty")
        return []

    transactions = []
    for raw in raw_transactions:
        tx = normalize_transaction(raw)
        if tx is not None:
            transactions.append(tx)

    dropped = len(raw_transactions) - len(transactions)
    if dropped:
        logging.info(
            f"Found {len(transactions)} valid transactions out of {len(raw_transactions)} "
            f"({dropped} skipped: bad amount or date)"
        )
    return transactions


def normalize_recurring(raw) -> RecurringTransaction | None:
    """
    Convert a raw recurring definition into a RecurringTransaction.

    Returns None for definitions that are not forecast (non-expense type,
    explicitly inactive). Raises ValueError for malformed definitions.
    """
    if not isinstance(raw, dict):
        raise ValueError(f"Recurring transaction must be an object, got {type(raw).__name__}")

    rec_type = raw.get("type")
    if isinstance(rec_type, str) and rec_type.lower() != "expense":
        return None
    if raw.get("is_active") is False:
        return None

    rec_id = raw.get("id")
    if rec_id is None or str(rec_id) == "":
        raise ValueError("Recurring transaction is missing an id")

    frequency = raw.get("frequency")
    frequency = frequency.lower() if isinstance(frequency, str) else frequency
    if frequency not in RECURRING_FREQUENCIES:
        raise ValueError(f"Recurring transaction {rec_id} has unsupported frequency: {raw.get('frequency')}")

    start_date = parse_iso_date(raw.get("start_date"))
    if start_date is None:
        raise ValueError(f"Recurring transaction {rec_id} has invalid start_date: {raw.get('start_date')}")

    amount = parse_amount(raw.get("amount"))
    if amount is None:
        raise ValueError(f"Recurring transaction {rec_id} has invalid amount: {raw.get('amount')}")

    category = raw.get("category")
    if not isinstance(category, dict):
        category = {}

    return RecurringTransaction(
        id=str(rec_id),
        description=raw.get("description") or "",
        amount=amount,
        frequency=frequency,
        start_date=start_date,
        category_name=_text(category.get("name"), UNCATEGORIZED_NAME),
        category_color=_text(category.get("color"), DEFAULT_CATEGORY_COLOR),
    )


def normalize_fiscal_year_start(value) -> str:
    try:
        month = int(value)
    except (TypeError, ValueError):
        return config.DEFAULT_FISCAL_YEAR_START
    if not 1 <= month <= 12:
        return config.DEFAULT_FISCAL_YEAR_START
    return f"{month:02d}"


def normalize_settings(raw, user_id=None) -> CompanySettings:
    """Company settings with defaults for anything missing."""
    if not isinstance(raw, dict):
        raw = {}
    return CompanySettings(
        default_currency=_text(raw.get("default_currency"), config.DEFAULT_CURRENCY),
        fiscal_year_start=normalize_fiscal_year_start(
            raw.get("fiscal_year_start", config.DEFAULT_FISCAL_YEAR_START)
        ),
        user_id=str(raw["user_id"]) if raw.get("user_id") else user_id,
    )
