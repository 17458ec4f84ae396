import re
from datetime import datetime, timezone
from pydantic import BaseModel, field_validator

# CoinAPI timestamps carry 7 fractional digits; datetime holds 6
_EXCESS_FRACTION = re.compile(r"(\.\d{6})\d+")

# Rows may lack attributes; those read as zero values, like an unset Go struct field
ZERO_TIME = datetime(1, 1, 1, tzinfo=timezone.utc)


class TradeEntry(BaseModel):
    """
    One trade row fetched from the trade table.
    Timestamps and numbers arrive string-encoded from the store and are
    coerced into their semantic types here. A present attribute of the
    wrong type is still a validation error.
    """
    time_exchange: datetime = ZERO_TIME
    time_coinapi: datetime = ZERO_TIME
    uuid: str = ""
    price: float = 0.0
    size: float = 0.0
    taker_side: str = ""

    @field_validator("time_exchange", "time_coinapi", mode="before")
    @classmethod
    def trim_fraction(cls, v):
        if isinstance(v, str):
            return _EXCESS_FRACTION.sub(r"\1", v)
        return v
