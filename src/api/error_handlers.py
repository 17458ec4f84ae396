"""
Global exception handlers: every failure leaves the API as a structured JSON body.

- TradeApiError -> ErrorResponse with the error's own status
- Starlette HTTPException (unmatched path / method) -> RouteStatus
- anything else -> generic 500 ErrorResponse, internal text never leaked
"""
import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.core.entities.status import ErrorResponse, RouteStatus
from src.core.errors import TradeApiError

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(TradeApiError)
    async def trade_api_error_handler(request: Request, exc: TradeApiError):
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc.description}")
        else:
            logger.info(f"Rejected {request.method} {request.url.path}: {exc.description}")
        return JSONResponse(status_code=exc.status_code, content=exc.to_response().model_dump())

    @app.exception_handler(StarletteHTTPException)
    async def route_error_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content=RouteStatus(httpStatus=exc.status_code).model_dump(),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=True)
        body = ErrorResponse(
            httpStatus=status.HTTP_500_INTERNAL_SERVER_ERROR,
            errorDescription="internal server error",
        )
        return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=body.model_dump())
