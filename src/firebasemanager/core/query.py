"""Query builder model for Firestore collections.

Conditions and order clauses are kept as the user typed them and only turned
into a Firestore ``structuredQuery`` when a query is executed.
"""

from dataclasses import dataclass
import math
import re
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

from firebasemanager.core.firestore_encoding import encode_value


OPERATORS = (
    "==",
    "!=",
    "<",
    "<=",
    ">",
    ">=",
    "array-contains",
    "array-contains-any",
    "in",
    "not-in",
)

LIST_OPERATORS = ("array-contains-any", "in", "not-in")

DIRECTIONS = ("asc", "desc")

DEFAULT_LIMIT = 10

_OP_NAMES = {
    "==": "EQUAL",
    "!=": "NOT_EQUAL",
    "<": "LESS_THAN",
    "<=": "LESS_THAN_OR_EQUAL",
    ">": "GREATER_THAN",
    ">=": "GREATER_THAN_OR_EQUAL",
    "array-contains": "ARRAY_CONTAINS",
    "array-contains-any": "ARRAY_CONTAINS_ANY",
    "in": "IN",
    "not-in": "NOT_IN",
}

_DIRECTION_NAMES = {"asc": "ASCENDING", "desc": "DESCENDING"}

_NUMBER_RE = re.compile(r"[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?")

_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1


@dataclass
class QueryCondition:
    field: str = ""
    operator: str = "=="
    value: str = ""

    def __post_init__(self) -> None:
        if self.operator not in OPERATORS:
            raise ValueError(f"Unsupported operator: {self.operator!r}")

    @property
    def is_complete(self) -> bool:
        return bool(self.field and self.value)


@dataclass
class QueryOrder:
    field: str = ""
    direction: str = "asc"

    def __post_init__(self) -> None:
        if self.direction not in DIRECTIONS:
            raise ValueError(f"Unsupported direction: {self.direction!r}")


def coerce_value(text: str) -> Union[str, int, float, bool]:
    stripped = text.strip()
    if stripped and _NUMBER_RE.fullmatch(stripped):
        if re.fullmatch(r"[+-]?\d+", stripped):
            number = int(stripped)
            if _INT64_MIN <= number <= _INT64_MAX:
                return number
        real = float(stripped)
        # integerValue is int64 and JSON has no infinity
        if math.isfinite(real):
            return real
        return text
    if text == "true":
        return True
    if text == "false":
        return False
    return text


def condition_value(condition: QueryCondition) -> Any:
    # in / not-in / array-contains-any take an array operand
    if condition.operator in LIST_OPERATORS:
        return [coerce_value(part.strip()) for part in condition.value.split(",") if part.strip()]
    return coerce_value(condition.value)


def split_collection_path(path: str) -> Tuple[str, str]:
    """Split ``users/u1/orders`` into ``("users/u1", "orders")``.

    A collection path has an odd number of segments: the leading pairs name
    the parent document and the last one is the collection id.
    """
    segments = [s for s in path.strip().split("/") if s]
    if len(segments) % 2 == 0:
        raise ValueError(
            f'"{path.strip()}" is not a collection path; it needs an odd number of segments, like users/u1/orders'
        )
    return "/".join(segments[:-1]), segments[-1]


def parse_limit(text: Union[str, int, None], default: int = DEFAULT_LIMIT) -> int:
    try:
        value = int(str(text).strip())
    except (TypeError, ValueError):
        return default
    return value if value > 0 else default


def _field_filter(condition: QueryCondition) -> Dict[str, Any]:
    return {
        "fieldFilter": {
            "field": {"fieldPath": condition.field},
            "op": _OP_NAMES[condition.operator],
            "value": encode_value(condition_value(condition)),
        }
    }


def build_query(
    collection: str,
    conditions: Iterable[QueryCondition] = (),
    orders: Iterable[QueryOrder] = (),
    limit: Optional[int] = DEFAULT_LIMIT,
) -> Dict[str, Any]:
    """Fold conditions, then order clauses, then the limit into a structuredQuery.

    Conditions without both field and value, and orders without a field, are
    skipped. Order clauses keep insertion order: the first is the primary sort
    key and each later one breaks ties of the previous ones. For a
    subcollection path only the last segment goes into ``from``; the parent
    document is part of the request URL.
    """
    _, collection_id = split_collection_path(collection)
    structured: Dict[str, Any] = {"from": [{"collectionId": collection_id}]}

    filters: List[Dict[str, Any]] = [_field_filter(c) for c in conditions if c.is_complete]
    if len(filters) == 1:
        structured["where"] = filters[0]
    elif filters:
        structured["where"] = {"compositeFilter": {"op": "AND", "filters": filters}}

    order_by = [
        {"field": {"fieldPath": o.field}, "direction": _DIRECTION_NAMES[o.direction]}
        for o in orders
        if o.field
    ]
    if order_by:
        structured["orderBy"] = order_by

    if limit and limit > 0:
        structured["limit"] = limit
    return structured
