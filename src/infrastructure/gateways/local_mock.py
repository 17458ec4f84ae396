import re
from decimal import Decimal
from typing import Dict, List, Optional

from boto3.dynamodb.types import TypeDeserializer

from src.core.interfaces.datasource import ITradeStore
from src.core.entities.trade import TradeEntry
from src.core.entities.status import StatusInfo
from src.core.entities.scan_filter import ScanFilter
from src.core.errors import StoreUnavailableError
from src.infrastructure.gateways.dynamodb_gateway import map_items_to_trades

_COMPARISON = re.compile(r"^(\w+) (>|<|=) (:\w+)$")
_deserializer = TypeDeserializer()


class LocalMockTradeStore(ITradeStore):
    """
    In-memory trade table holding items in DynamoDB attribute encoding.
    Understands filter expressions made of `attr OP :value` terms joined by AND.
    """

    def __init__(self, items: Optional[List[Dict[str, dict]]] = None, table_name: str = "local_tradeEntries"):
        self.items = list(items or [])
        self.table_name = table_name
        self.scans: List[Optional[ScanFilter]] = []

    async def describe_table(self) -> StatusInfo:
        return StatusInfo(tableName=self.table_name, recordCount=len(self.items))

    async def scan(self, scan_filter: Optional[ScanFilter] = None) -> List[TradeEntry]:
        self.scans.append(scan_filter)
        if scan_filter is None:
            return map_items_to_trades(self.items)
        matched = [item for item in self.items if self._matches(item, scan_filter)]
        return map_items_to_trades(matched)

    def _matches(self, item: Dict[str, dict], scan_filter: ScanFilter) -> bool:
        for term in scan_filter.expression.split(" AND "):
            m = _COMPARISON.match(term.strip())
            if not m:
                raise StoreUnavailableError()
            attr, op, placeholder = m.groups()
            if attr not in item:
                return False
            try:
                left = _deserializer.deserialize(item[attr])
                right = _deserializer.deserialize(scan_filter.values[placeholder])
            except (KeyError, TypeError, ArithmeticError) as e:
                # DynamoDB answers a bad literal with ValidationException
                raise StoreUnavailableError() from e
            if isinstance(right, Decimal) and right.is_nan():
                raise StoreUnavailableError()

            if isinstance(left, Decimal) != isinstance(right, Decimal):
                return False
            if op == ">" and not left > right:
                return False
            if op == "<" and not left < right:
                return False
            if op == "=" and not left == right:
                return False
        return True
