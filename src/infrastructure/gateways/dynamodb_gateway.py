import asyncio
import logging
from typing import Any, Callable, Dict, List, Optional

import boto3
from boto3.dynamodb.types import TypeDeserializer
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError
from pydantic import ValidationError

from src.core.interfaces.datasource import ITradeStore
from src.core.entities.trade import TradeEntry
from src.core.entities.status import StatusInfo
from src.core.entities.scan_filter import ScanFilter
from src.core.errors import StoreUnavailableError

logger = logging.getLogger(__name__)

_deserializer = TypeDeserializer()


def map_items_to_trades(items: List[Dict[str, dict]]) -> List[TradeEntry]:
    """
    Maps raw DynamoDB items ({"price": {"N": "2001.5"}, ...}) to TradeEntry.
    Any undecodable item fails the whole batch.
    """
    trades = []
    for item in items:
        try:
            plain = {key: _deserializer.deserialize(value) for key, value in item.items()}
            trades.append(TradeEntry(**plain))
        except (TypeError, ValueError, ArithmeticError, ValidationError) as decode_err:
            logger.error(f"Failed to decode trade item: {decode_err}")
            raise StoreUnavailableError("failed to decode trade entries") from decode_err
    return trades


class DynamoDBTradeGateway(ITradeStore):
    """
    Implementation of ITradeStore over a DynamoDB table.
    Uses the synchronous boto3 client wrapped in asyncio threads, one call
    per request, each bounded by its own timeout.
    """

    def __init__(
        self,
        table_name: str,
        region: str = "us-east-1",
        scan_timeout: float = 2.0,
        status_timeout: float = 5.0,
        client: Optional[Any] = None,
    ):
        """
        :param table_name: Trade table to read from.
        :param region: AWS region the table lives in.
        :param scan_timeout: Seconds allowed for scan / search calls.
        :param status_timeout: Seconds allowed for describe_table calls.
        :param client: Pre-built boto3 DynamoDB client (tests pass a stubbed one).
        """
        self.table_name = table_name
        self.scan_timeout = scan_timeout
        self.status_timeout = status_timeout

        # No retries: one failed attempt fails the request.
        # Socket timeouts free the worker thread once wait_for has given up on it.
        socket_timeout = max(scan_timeout, status_timeout)
        self.client = client or boto3.client(
            "dynamodb",
            config=Config(
                region_name=region,
                retries={"total_max_attempts": 1},
                connect_timeout=socket_timeout,
                read_timeout=socket_timeout,
            ),
        )
        logger.info(f"DynamoDBTradeGateway initialized. Table: {table_name} ({region})")

    async def describe_table(self) -> StatusInfo:
        result = await self._call(
            self.client.describe_table, self.status_timeout, TableName=self.table_name
        )
        table = result.get("Table", {})
        try:
            return StatusInfo(tableName=table["TableName"], recordCount=table["ItemCount"])
        except (KeyError, ValidationError) as e:
            logger.error(f"Malformed table description for {self.table_name}: {e}")
            raise StoreUnavailableError("failed to read trade table status") from e

    async def scan(self, scan_filter: Optional[ScanFilter] = None) -> List[TradeEntry]:
        params: Dict[str, Any] = {"TableName": self.table_name}
        if scan_filter is not None:
            params.update(scan_filter.as_scan_params())

        result = await self._call(self.client.scan, self.scan_timeout, **params)
        return map_items_to_trades(result.get("Items", []))

    async def _call(self, operation: Callable[..., dict], timeout: float, **params) -> dict:
        # The SDK is synchronous, so we run it in a separate thread to stay async
        try:
            return await asyncio.wait_for(asyncio.to_thread(operation, **params), timeout)
        except asyncio.TimeoutError as e:
            logger.error(f"DynamoDB call on {self.table_name} timed out after {timeout}s")
            raise StoreUnavailableError() from e
        except (BotoCoreError, ClientError) as e:
            logger.error(f"DynamoDB call on {self.table_name} failed: {str(e)}")
            raise StoreUnavailableError() from e
