import logging
import os
from contextlib import asynccontextmanager
from typing import List, Optional

import uvicorn
from fastapi import APIRouter, Depends, FastAPI, Request

# --- Imports ---
from src.api.error_handlers import register_error_handlers
from src.api.middleware import RequestLoggerMiddleware
from src.config.settings import Settings, get_settings, load_env_file
from src.core.entities.status import StatusInfo
from src.core.entities.trade import TradeEntry
from src.core.interfaces.datasource import ITradeStore
from src.core.interfaces.log_sink import ILogSink
from src.core.services import TradeService
from src.infrastructure.gateways.dynamodb_gateway import DynamoDBTradeGateway
from src.infrastructure.log_shipping.loggly_sink import LogglySink

logger = logging.getLogger("TradeEntries")

router = APIRouter()

# --- Dependency Injection ---

def get_store(request: Request) -> ITradeStore:
    return request.app.state.store

def get_service(store: ITradeStore = Depends(get_store)) -> TradeService:
    return TradeService(store)

# --- Endpoints ---

@router.get("/status", response_model=StatusInfo)
async def get_status(service: TradeService = Depends(get_service)):
    return await service.get_status()

@router.get("/all", response_model=List[TradeEntry])
async def get_all(service: TradeService = Depends(get_service)):
    return await service.get_all()

@router.get("/search", response_model=List[TradeEntry])
async def search(request: Request, service: TradeService = Depends(get_service)):
    """
    filter=price       [min-val] [max-val]   min-val < price < max-val
    filter=taker-side  type                  taker_side == type
    """
    return await service.search(request.query_params.multi_items())

# --- Bootstrap ---

@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Trade entries API started.")
    yield
    if app.state.log_sink is not None:
        await app.state.log_sink.aclose()


def create_app(store: ITradeStore, log_sink: Optional[ILogSink] = None, route_prefix: str = "") -> FastAPI:
    """
    Builds the API around an explicitly supplied store and log sink.
    Both are shared read-only by every request for the app's lifetime.
    """
    app = FastAPI(
        title="Trade Entries API",
        version="1.0.0",
        description="Status, listing and filtered search over the trade entries table",
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
        redirect_slashes=False,
        lifespan=lifespan,
    )
    app.state.store = store
    app.state.log_sink = log_sink

    register_error_handlers(app)
    app.add_middleware(RequestLoggerMiddleware, log_sink=log_sink)
    app.include_router(router, prefix=route_prefix)
    return app


def build_log_sink(settings: Settings) -> Optional[ILogSink]:
    if not settings.LOGGLY_TOKEN:
        logger.warning("LOGGLY_TOKEN not set. Remote logging disabled.")
        return None
    return LogglySink(settings.LOGGLY_TOKEN, settings.LOGGLY_TAG, base_url=settings.LOGGLY_URL)


def build_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    store = DynamoDBTradeGateway(
        table_name=settings.TRADE_TABLE_NAME,
        region=settings.AWS_REGION,
        scan_timeout=settings.SCAN_TIMEOUT_SECONDS,
        status_timeout=settings.STATUS_TIMEOUT_SECONDS,
    )
    return create_app(store, build_log_sink(settings), settings.ROUTE_PREFIX)


def main():
    load_env_file(os.getenv("ENV_FILE", ".env"))
    settings = get_settings()
    logging.basicConfig(level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))

    # Request lines come from RequestLoggerMiddleware; uvicorn's access log would duplicate them
    uvicorn.run(build_app(settings), host=settings.HOST, port=settings.PORT, access_log=False)


if __name__ == "__main__":
    main()
