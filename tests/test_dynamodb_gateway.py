"""
Tests for DynamoDBTradeGateway against a stubbed boto3 client.
"""
import time
from datetime import datetime, timezone

import boto3
import pytest
from botocore.stub import Stubber

from src.core.entities.scan_filter import ScanFilter
from src.core.errors import StoreUnavailableError
from src.infrastructure.gateways.dynamodb_gateway import DynamoDBTradeGateway, map_items_to_trades
from tests.helpers import trade_item

pytestmark = pytest.mark.anyio

TABLE = "pphyo_ETH_tradeEntries"


@pytest.fixture
def dynamodb_client():
    return boto3.client(
        "dynamodb",
        region_name="us-east-1",
        aws_access_key_id="testing",
        aws_secret_access_key="testing",
    )


@pytest.fixture
def stubber(dynamodb_client):
    with Stubber(dynamodb_client) as stub:
        yield stub
        stub.assert_no_pending_responses()


@pytest.fixture
def gateway(dynamodb_client):
    return DynamoDBTradeGateway(TABLE, client=dynamodb_client)


async def test_describe_table(gateway, stubber):
    stubber.add_response(
        "describe_table",
        {"Table": {"TableName": TABLE, "ItemCount": 4821}},
        expected_params={"TableName": TABLE},
    )
    status = await gateway.describe_table()
    assert status.tableName == TABLE
    assert status.recordCount == 4821


async def test_describe_table_without_item_count_is_store_error(gateway, stubber):
    stubber.add_response("describe_table", {"Table": {"TableName": TABLE}})
    with pytest.raises(StoreUnavailableError):
        await gateway.describe_table()


async def test_unfiltered_scan(gateway, stubber):
    stubber.add_response(
        "scan",
        {"Items": [trade_item("a1", "1500.25"), trade_item("a2", "1620.5", "SELL")], "Count": 2},
        expected_params={"TableName": TABLE},
    )
    trades = await gateway.scan()
    assert [t.uuid for t in trades] == ["a1", "a2"]
    assert trades[1].price == 1620.5
    assert trades[1].taker_side == "SELL"
    assert trades[0].time_exchange == datetime(2023, 3, 1, 12, 0, 0, 123456, tzinfo=timezone.utc)


async def test_scan_with_filter_sends_expression(gateway, stubber):
    scan_filter = ScanFilter(
        expression="price > :minValue AND price < :maxValue",
        values={":minValue": {"N": "10"}, ":maxValue": {"N": "20"}},
    )
    stubber.add_response(
        "scan",
        {"Items": [], "Count": 0},
        expected_params={
            "TableName": TABLE,
            "FilterExpression": "price > :minValue AND price < :maxValue",
            "ExpressionAttributeValues": {":minValue": {"N": "10"}, ":maxValue": {"N": "20"}},
        },
    )
    assert await gateway.scan(scan_filter) == []


async def test_client_error_becomes_store_error(gateway, stubber):
    stubber.add_client_error(
        "scan",
        service_error_code="ValidationException",
        service_message="Invalid FilterExpression: numeric literal abc",
        http_status_code=400,
    )
    with pytest.raises(StoreUnavailableError) as exc_info:
        await gateway.scan()
    # Internal detail stays out of the client-facing description
    assert "abc" not in exc_info.value.description


async def test_undecodable_item_fails_the_scan(gateway, stubber):
    bad = trade_item("a1", "1500")
    bad["time_exchange"] = {"S": "yesterday"}
    stubber.add_response("scan", {"Items": [bad]})
    with pytest.raises(StoreUnavailableError, match="decode"):
        await gateway.scan()


async def test_timeout_becomes_store_error():
    class SlowClient:
        def scan(self, **params):
            time.sleep(0.5)
            return {"Items": []}

    gateway = DynamoDBTradeGateway(TABLE, scan_timeout=0.05, client=SlowClient())
    with pytest.raises(StoreUnavailableError):
        await gateway.scan()


def test_map_items_ignores_unknown_attributes():
    item = trade_item("a1", "1500")
    item["symbol_id"] = {"S": "COINBASE_SPOT_ETH_USD"}
    [trade] = map_items_to_trades([item])
    assert trade.uuid == "a1"
    assert trade.size == 0.25


async def test_missing_attribute_reads_as_zero_value(gateway, stubber):
    partial = trade_item("a2", "1620.5", "SELL")
    del partial["size"]
    del partial["time_coinapi"]
    stubber.add_response("scan", {"Items": [trade_item("a1", "1500"), partial]})

    trades = await gateway.scan()
    assert [t.uuid for t in trades] == ["a1", "a2"]
    assert trades[1].size == 0.0
    assert trades[1].price == 1620.5
    assert trades[1].time_coinapi == datetime(1, 1, 1, tzinfo=timezone.utc)


def test_socket_timeouts_follow_call_timeouts():
    gateway = DynamoDBTradeGateway(TABLE, region="us-east-1", scan_timeout=2.0, status_timeout=5.0)
    config = gateway.client.meta.config
    assert config.connect_timeout == 5.0
    assert config.read_timeout == 5.0
