from typing import Iterable, List, Tuple
import logging

from src.core.interfaces.datasource import ITradeStore
from src.core.entities.trade import TradeEntry
from src.core.entities.status import StatusInfo
from src.core.use_cases.search_filter import build_scan_filter

logger = logging.getLogger(__name__)

# --- Business Logic Services ---

class TradeService:
    def __init__(self, store: ITradeStore):
        self.db = store

    async def get_status(self) -> StatusInfo:
        return await self.db.describe_table()

    async def get_all(self) -> List[TradeEntry]:
        return await self.db.scan()

    async def search(self, query_items: Iterable[Tuple[str, str]]) -> List[TradeEntry]:
        # Validation happens before any store call
        scan_filter = build_scan_filter(query_items)
        logger.debug(f"Searching trades with filter: {scan_filter.expression}")
        return await self.db.scan(scan_filter)
