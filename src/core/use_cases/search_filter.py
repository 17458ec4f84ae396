from dataclasses import dataclass, field
from typing import Callable, Dict, FrozenSet, Iterable, Mapping, Tuple

from src.core.entities.scan_filter import ScanFilter
from src.core.errors import FilterNotSupportedError, QueryValidationError

PRICE_MIN_DEFAULT = "0"
PRICE_MAX_DEFAULT = "1000000"


def _price_filter(params: Mapping[str, str]) -> ScanFilter:
    # Strict on both sides: rows priced exactly at a bound are excluded.
    # Bounds go out as numeric literals unchecked; the store rejects bad ones.
    return ScanFilter(
        expression="price > :minValue AND price < :maxValue",
        values={
            ":minValue": {"N": params.get("min-val", PRICE_MIN_DEFAULT)},
            ":maxValue": {"N": params.get("max-val", PRICE_MAX_DEFAULT)},
        },
    )


def _taker_side_filter(params: Mapping[str, str]) -> ScanFilter:
    return ScanFilter(
        expression="taker_side = :takerSide",
        values={":takerSide": {"S": params["type"]}},
    )


@dataclass(frozen=True)
class FilterRule:
    allowed_keys: FrozenSet[str]
    disallowed_message: str
    build: Callable[[Mapping[str, str]], ScanFilter]
    # (key, message) pairs checked after the allow-list
    required: Tuple[Tuple[str, str], ...] = field(default=())


SEARCH_FILTERS: Dict[str, FilterRule] = {
    "price": FilterRule(
        allowed_keys=frozenset({"filter", "min-val", "max-val"}),
        disallowed_message="min-val and max-val can only exist for filter price",
        build=_price_filter,
    ),
    "taker-side": FilterRule(
        allowed_keys=frozenset({"filter", "type"}),
        disallowed_message="type can only exist for filter taker-side",
        build=_taker_side_filter,
        required=(("type", "specify BUY or SELL for query type"),),
    ),
}

# Accepted filter names with no query behind them yet
UNSUPPORTED_FILTERS = frozenset({"time-exchange"})


def first_values(query_items: Iterable[Tuple[str, str]]) -> Dict[str, str]:
    """Collapses repeated query keys, keeping the first value of each."""
    params: Dict[str, str] = {}
    for key, value in query_items:
        params.setdefault(key, value)
    return params


def build_scan_filter(query_items: Iterable[Tuple[str, str]]) -> ScanFilter:
    """
    Translates /search query parameters into a store filter expression.

    :param query_items: (key, value) pairs in request order.
    :raises QueryValidationError: missing, unknown or disallowed parameters.
    :raises FilterNotSupportedError: a filter name with no query behind it.
    """
    params = first_values(query_items)

    if "filter" not in params:
        raise QueryValidationError("query parameter 'filter' is not included")

    name = params["filter"]
    if name in UNSUPPORTED_FILTERS:
        raise FilterNotSupportedError(f"filter '{name}' is not yet supported")

    rule = SEARCH_FILTERS.get(name)
    if rule is None:
        raise QueryValidationError(f"query '{name}' is invalid")

    if any(key not in rule.allowed_keys for key in params):
        raise QueryValidationError(rule.disallowed_message)

    for key, message in rule.required:
        if key not in params:
            raise QueryValidationError(message)

    return rule.build(params)
