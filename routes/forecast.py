import json
import logging
from typing import Any, Dict, List, Optional, Union

from fastapi import APIRouter, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from services.errors import ForecastError, InvalidRequestError
from services.forecast_dto import ForecastResponseDTO
from services.projection_service import calculate_forecast

router = APIRouter()

BODY_PREVIEW_CHARS = 500
UNEXPECTED_ERROR_MESSAGE = "Failed to process forecasting request"


class ForecastRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    timeframe: Optional[str] = None
    transactions: Optional[List[Any]] = None
    recurring: Optional[List[Any]] = None
    settings: Optional[Dict[str, Any]] = None
    user_id: Optional[Union[str, int]] = Field(None, alias="userId")


def error_response(message, status_code):
    return JSONResponse(status_code=status_code, content={"success": False, "error": message})


def _describe_validation_error(exc: ValidationError) -> str:
    first = exc.errors()[0]
    location = ".".join(str(part) for part in first["loc"]) or "body"
    return f"Invalid request body: {location}: {first['msg']}"


@router.post("/api/ai-features/forecasting")
async def forecast(request: Request):
    """
    Monthly income/expense projection, category trend forecasts and upcoming
    recurring expenses for one user.

    Body:
        timeframe: "3months" | "6months" | "12months" (required)
        transactions / recurring / settings (optional): loaded from the
            store for the resolved user when absent.
        userId (optional): falls back to settings.user_id, then the first
            transaction carrying a user_id.
    """
    try:
        body = await request.json()
    except ValueError as e:
        logging.error(f"Failed to parse request body: {e}")
        return error_response("Invalid request body", 400)

    logging.info(f"Forecast request body: {json.dumps(body, default=str)[:BODY_PREVIEW_CHARS]}...")

    if not isinstance(body, dict):
        return error_response("Invalid request body", 400)

    try:
        req = ForecastRequest.model_validate(body)
    except ValidationError as e:
        return error_response(_describe_validation_error(e), 400)

    try:
        # store reads and the engine are blocking
        result = await run_in_threadpool(
            calculate_forecast,
            timeframe=req.timeframe,
            transactions=req.transactions,
            recurring=req.recurring,
            settings=req.settings,
            user_id=req.user_id,
        )
    except InvalidRequestError as e:
        return error_response(str(e), e.status_code)
    except ForecastError as e:
        logging.error(f"Forecasting failed [{e.code}]: {e.message}")
        if e.code == "FORECAST_ERROR":
            return error_response(f"Error processing forecast data: {e.message}", e.status_code)
        return error_response(e.message, e.status_code)
    except Exception:
        logging.exception("Unexpected error in forecasting request")
        return error_response(UNEXPECTED_ERROR_MESSAGE, 500)

    dto = ForecastResponseDTO.from_result(result)
    return {"success": True, "data": dto.to_dict()}


@router.get("/health")
def health():
    return {"status": "ok"}
