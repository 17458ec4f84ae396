"""
Response bodies for status checks and failures.
"""
from pydantic import BaseModel


class StatusInfo(BaseModel):
    """
    Snapshot of the trade table's metadata at request time.
    """
    tableName: str
    recordCount: int

    class Config:
        json_schema_extra = {
            "example": {
                "tableName": "pphyo_ETH_tradeEntries",
                "recordCount": 1250
            }
        }


class ErrorResponse(BaseModel):
    httpStatus: int
    errorDescription: str


class RouteStatus(BaseModel):
    # Body of unmatched path / method responses
    httpStatus: int
