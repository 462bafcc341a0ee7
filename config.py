import os

# -----------------------------
# Storage / logging
# -----------------------------
DB_FILE = os.getenv("FORECAST_DB_FILE", "forecast.duckdb")
LOG_FILE = os.getenv("FORECAST_LOG_FILE") or None
LOG_LEVEL = os.getenv("FORECAST_LOG_LEVEL", "INFO").upper()

# -----------------------------
# Company settings defaults
# -----------------------------
DEFAULT_CURRENCY = os.getenv("DEFAULT_CURRENCY", "USD")
DEFAULT_FISCAL_YEAR_START = os.getenv("DEFAULT_FISCAL_YEAR_START", "01")

# -----------------------------
# HTTP
# -----------------------------
API_NAME = os.getenv("API_NAME", "Business Finance Forecasting API")

CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv("API_CORS_ORIGINS", "http://localhost:3000").split(",")
    if origin.strip()
]
