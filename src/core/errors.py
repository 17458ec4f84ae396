"""
Exceptions raised by the trade API and converted to ErrorResponse bodies
by the API error handlers.
"""
from typing import Optional

from src.core.entities.status import ErrorResponse


class TradeApiError(Exception):
    status_code: int = 500

    def __init__(self, description: str, status_code: Optional[int] = None):
        super().__init__(description)
        self.description = description
        if status_code is not None:
            self.status_code = status_code

    def to_response(self) -> ErrorResponse:
        return ErrorResponse(httpStatus=self.status_code, errorDescription=self.description)


class QueryValidationError(TradeApiError):
    """Missing or disallowed query parameters."""
    status_code = 400


class FilterNotSupportedError(TradeApiError):
    """A recognised filter that has no query behind it yet."""
    status_code = 400


class StoreUnavailableError(TradeApiError):
    """
    The trade table could not be read: unreachable, timed out, or returned
    data that could not be decoded. The description is always generic; the
    underlying cause is logged where the error is raised.
    """
    status_code = 500

    def __init__(self, description: str = "failed to read from the trade table"):
        super().__init__(description)
