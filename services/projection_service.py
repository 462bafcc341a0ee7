import logging
from datetime import date

import duckdb

from db import get_db
from helpers.normalize import normalize_settings, sanitize_transactions
from models.forecast_models import CategoryForecastBatch, ForecastResult
from repositories.settings_repository import get_company_settings
from repositories.transactions_repository import (
    get_recurring_transactions,
    get_transactions_in_range,
)
from services.category_forecast_service import generate_category_forecasts
from services.errors import ForecastError, InvalidRequestError
from services.forecast_service import TIMEFRAME_MONTHS, generate_upcoming_expenses
from services.monthly_forecast_service import generate_monthly_forecasts

NO_DATA_MESSAGE = "No historical data available for forecasting"
SUCCESS_MESSAGE = "Forecasting completed successfully"
DATA_FETCH_ERROR = "DATA_FETCH_ERROR"
MISSING_USER_MESSAGE = "User ID is required and could not be determined from the provided data"


def validate_timeframe(timeframe):
    if not timeframe:
        raise InvalidRequestError("timeframe is required")
    if timeframe not in TIMEFRAME_MONTHS:
        raise InvalidRequestError("Invalid timeframe specified")


def resolve_user_id(user_id=None, settings=None, transactions=None) -> str:
    """Request user id, else the settings owner, else the first transaction owner."""
    if user_id:
        return str(user_id)

    logging.info("No user ID provided directly in request body, attempting to find in provided data")

    if isinstance(settings, dict) and settings.get("user_id"):
        logging.info(f"Using user ID from company settings: {settings['user_id']}")
        return str(settings["user_id"])

    for tx in transactions or []:
        if isinstance(tx, dict) and tx.get("user_id"):
            logging.info(f"Using user ID from transaction: {tx['user_id']}")
            return str(tx["user_id"])

    logging.info("Could not determine user ID from any source")
    raise InvalidRequestError(MISSING_USER_MESSAGE)


def get_history_window(fiscal_year_start, today):
    """From the fiscal year start month of last calendar year through today."""
    start = date(today.year - 1, int(fiscal_year_start), 1)
    return start, today


def load_forecast_inputs(user_id, transactions=None, recurring=None, settings=None, today=None):
    """
    Fill in whichever of transactions / recurring / settings the caller did
    not provide, reading from the store. Missing settings fall back to defaults.

    Returns (transactions, recurring, settings) with settings as a dict.
    """
    if transactions is not None and recurring is not None and settings is not None:
        return transactions, recurring, settings

    if today is None:
        today = date.today()

    try:
        conn = get_db()
    except duckdb.Error as e:
        raise ForecastError(f"Failed to connect to data store: {e}", code=DATA_FETCH_ERROR) from e

    try:
        if settings is None:
            logging.info(f"Checking for company settings with user ID: {user_id}")
            try:
                settings = get_company_settings(conn, user_id)
            except duckdb.Error as e:
                raise ForecastError(f"Failed to fetch company settings: {e}", code=DATA_FETCH_ERROR) from e
            if settings is None:
                logging.info("Company settings not found, using defaults")
                settings = {"user_id": user_id}

        fiscal_year_start = normalize_settings(settings, user_id).fiscal_year_start
        start_date, end_date = get_history_window(fiscal_year_start, today)

        if transactions is None:
            logging.info(
                f"Fetching transactions for user {user_id} from "
                f"{start_date.isoformat()} to {end_date.isoformat()}"
            )
            try:
                transactions = get_transactions_in_range(conn, user_id, start_date, end_date)
            except duckdb.Error as e:
                raise ForecastError(f"Failed to fetch transactions: {e}", code=DATA_FETCH_ERROR) from e
            logging.info(f"Fetched {len(transactions)} transactions for user {user_id}")

        if recurring is None:
            logging.info(f"Fetching recurring transactions for user {user_id}")
            try:
                recurring = get_recurring_transactions(conn, user_id)
            except duckdb.Error as e:
                raise ForecastError(f"Failed to fetch recurring transactions: {e}", code=DATA_FETCH_ERROR) from e
            logging.info(f"Fetched {len(recurring)} recurring transactions for user {user_id}")
    finally:
        conn.close()

    return transactions, recurring, settings


def calculate_forecast(timeframe, transactions=None, recurring=None, settings=None,
                       user_id=None, today=None) -> ForecastResult:
    """Monthly, category and upcoming-expense forecasts for one request.

    Raises InvalidRequestError for bad input and ForecastError when a
    required section (monthly series, upcoming expenses) cannot be built.
    Category forecasts degrade to an empty list instead of failing.
    """
    validate_timeframe(timeframe)
    effective_user_id = resolve_user_id(user_id, settings, transactions)
    logging.info(f"Processing forecasting request for user: {effective_user_id}")

    if today is None:
        today = date.today()

    transactions, recurring, settings = load_forecast_inputs(
        effective_user_id, transactions, recurring, settings, today=today
    )

    if not transactions:
        logging.info(f"No transactions available for user {effective_user_id}")
        return ForecastResult([], [], [], NO_DATA_MESSAGE)

    logging.info(f"Processing {len(transactions)} transactions for forecasting")
    company = normalize_settings(settings, effective_user_id)
    clean_transactions = sanitize_transactions(transactions)

    monthly = generate_monthly_forecasts(clean_transactions, company)

    try:
        categories = generate_category_forecasts(clean_transactions, timeframe, company)
    except Exception:
        logging.exception("Error generating category forecasts")
        categories = CategoryForecastBatch()

    upcoming = generate_upcoming_expenses(recurring or [], timeframe, company, today=today)

    logging.info(
        f"Forecasting completed: userId={effective_user_id} "
        f"transactionsProcessed={len(transactions)} "
        f"monthlyDataPoints={len(monthly)} "
        f"categoryForecasts={len(categories.forecasts)} "
        f"categoriesSkipped={categories.skipped} "
        f"upcomingExpenses={len(upcoming)}"
    )

    return ForecastResult(
        monthly_forecasts=monthly,
        category_forecasts=categories.forecasts,
        upcoming_expenses=upcoming,
        message=SUCCESS_MESSAGE,
    )
