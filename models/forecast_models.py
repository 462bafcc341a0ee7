from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional

UNCATEGORIZED_ID = "uncategorized"
UNCATEGORIZED_NAME = "Uncategorized"
DEFAULT_CATEGORY_TYPE = "expense"
DEFAULT_CATEGORY_COLOR = "#888888"


@dataclass(frozen=True)
class Category:
    id: str = UNCATEGORIZED_ID
    name: str = UNCATEGORIZED_NAME
    type: str = DEFAULT_CATEGORY_TYPE
    color: str = DEFAULT_CATEGORY_COLOR


@dataclass
class Transaction:
    """A transaction with a usable date and amount."""
    id: Optional[str]
    date: date
    amount: float
    type: str  # lowercased; "income" and "expense" are summed, anything else is ignored
    category: Category = field(default_factory=Category)


@dataclass
class RecurringTransaction:
    id: str
    description: str
    amount: float
    frequency: str  # "daily" | "weekly" | "monthly" | "yearly"
    start_date: date
    category_name: str = UNCATEGORIZED_NAME
    category_color: str = DEFAULT_CATEGORY_COLOR


@dataclass(frozen=True)
class CompanySettings:
    default_currency: str
    fiscal_year_start: str  # "01".."12"
    user_id: Optional[str] = None


@dataclass
class MonthTotals:
    """Accumulator entry for one ``YYYY-MM`` key; a new month starts at zero."""
    income: float = 0.0
    expenses: float = 0.0


@dataclass
class MonthlyForecast:
    month: str  # "Jan 2024"
    income: float
    expenses: float
    savings: float
    prediction: bool
    currency: str


@dataclass
class CategoryForecast:
    category_id: str
    category: str
    color: str
    current: float
    forecast: float
    change: int
    trend: str  # "up" | "down" | "stable"
    confidence: float
    currency: str


@dataclass
class CategoryForecastBatch:
    """Best-effort result: categories that failed are counted, not raised."""
    forecasts: List[CategoryForecast] = field(default_factory=list)
    skipped: int = 0


@dataclass
class UpcomingExpense:
    id: str
    description: str
    amount: float
    date: date
    category_name: str
    category_color: str
    frequency: str
    currency: str


@dataclass
class ForecastResult:
    monthly_forecasts: List[MonthlyForecast]
    category_forecasts: List[CategoryForecast]
    upcoming_expenses: List[UpcomingExpense]
    message: str
