from dataclasses import dataclass
from typing import Any, Dict, List


def monthly_row(row) -> Dict[str, Any]:
    return {
        "month": row.month,
        "income": row.income,
        "expenses": row.expenses,
        "savings": row.savings,
        "prediction": row.prediction,
        "currency": row.currency,
    }


def category_row(row) -> Dict[str, Any]:
    return {
        "categoryId": row.category_id,
        "category": row.category,
        "color": row.color,
        "current": row.current,
        "forecast": row.forecast,
        "change": row.change,
        "trend": row.trend,
        "confidence": row.confidence,
        "currency": row.currency,
    }


def upcoming_row(row) -> Dict[str, Any]:
    return {
        "id": row.id,
        "description": row.description,
        "amount": row.amount,
        "date": row.date.isoformat(),  # ISO format YYYY-MM-DD
        "category": {"name": row.category_name, "color": row.category_color},
        "frequency": row.frequency,
        "currency": row.currency,
    }


@dataclass
class ForecastResponseDTO:
    """Complete forecasting response payload."""
    monthly_forecasts: List[Dict[str, Any]]
    category_forecasts: List[Dict[str, Any]]
    upcoming_expenses: List[Dict[str, Any]]
    message: str

    @classmethod
    def from_result(cls, result):
        """Convert ForecastResult to JSON-serializable DTO."""
        return cls(
            monthly_forecasts=[monthly_row(r) for r in result.monthly_forecasts],
            category_forecasts=[category_row(r) for r in result.category_forecasts],
            upcoming_expenses=[upcoming_row(r) for r in result.upcoming_expenses],
            message=result.message,
        )

    def to_dict(self):
        return {
            "monthlyForecasts": self.monthly_forecasts,
            "categoryForecasts": self.category_forecasts,
            "upcomingExpenses": self.upcoming_expenses,
            "message": self.message,
        }
