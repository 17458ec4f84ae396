"""
Pytest configuration and shared fixtures.
"""
import pytest
from httpx import AsyncClient, ASGITransport

from src.api.main import create_app
from src.infrastructure.gateways.local_mock import LocalMockTradeStore
from tests.helpers import RecordingLogSink, trade_item


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def trades():
    return [
        trade_item("a1", "1500.25", "BUY"),
        trade_item("a2", "1620.5", "SELL"),
        trade_item("a3", "1700", "BUY"),
    ]


@pytest.fixture
def store(trades):
    return LocalMockTradeStore(trades, table_name="pphyo_ETH_tradeEntries")


@pytest.fixture
def log_sink():
    return RecordingLogSink()


@pytest.fixture
def app(store, log_sink):
    return create_app(store, log_sink)


@pytest.fixture
async def client(app):
    """Async HTTP client for testing FastAPI endpoints."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
