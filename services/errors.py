class InvalidRequestError(Exception):
    """Bad or missing request input; maps to HTTP 400."""

    status_code = 400
    code = "INVALID_REQUEST"


class ForecastError(Exception):
    """Failure while computing or loading forecast data."""

    def __init__(self, message, status_code=500, code="FORECAST_ERROR"):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.code = code
