"""
Builders and fakes shared across the test modules.
"""
from typing import List, Tuple

from src.core.interfaces.log_sink import ILogSink


def trade_item(uuid: str, price: str, taker_side: str = "BUY", size: str = "0.25") -> dict:
    """A trade row in DynamoDB attribute encoding."""
    return {
        "time_exchange": {"S": "2023-03-01T12:00:00.1234567Z"},
        "time_coinapi": {"S": "2023-03-01T12:00:00.2345678Z"},
        "uuid": {"S": uuid},
        "price": {"N": price},
        "size": {"N": size},
        "taker_side": {"S": taker_side},
    }


class RecordingLogSink(ILogSink):
    def __init__(self):
        self.lines: List[Tuple[str, str]] = []

    def ship(self, level: str, message: str) -> None:
        self.lines.append((level, message))
