from abc import ABC, abstractmethod
from typing import List, Optional
from src.core.entities.trade import TradeEntry
from src.core.entities.status import StatusInfo
from src.core.entities.scan_filter import ScanFilter

class ITradeStore(ABC):
    @abstractmethod
    async def describe_table(self) -> StatusInfo:
        """
        Returns the table name and its (approximate) item count.
        Raises StoreUnavailableError on any store failure.
        """
        pass

    @abstractmethod
    async def scan(self, scan_filter: Optional[ScanFilter] = None) -> List[TradeEntry]:
        """
        Scans the trade table, applying scan_filter server-side when given.
        Raises StoreUnavailableError on any store or decode failure.
        """
        pass
