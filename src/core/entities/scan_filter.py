from typing import Dict
from pydantic import BaseModel, ConfigDict


class ScanFilter(BaseModel):
    """
    A store-side predicate: the filter expression plus its bound values,
    already in the store's attribute encoding (e.g. {"N": "10"}).
    """
    model_config = ConfigDict(frozen=True)

    expression: str
    values: Dict[str, Dict[str, str]]

    def as_scan_params(self) -> dict:
        return {
            "FilterExpression": self.expression,
            "ExpressionAttributeValues": {k: dict(v) for k, v in self.values.items()},
        }
