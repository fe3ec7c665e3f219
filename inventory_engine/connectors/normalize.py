"""
Collection normalization — the one place that knows response shapes.

List endpoints answer with a bare array or with the array wrapped under an
entity key (`{"products": [...]}`, `{"salesOrders": [...]}`) or under
`data`. `normalize_collection` turns any of those into a tagged result so
callers never branch on shape.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Union


# Wrapper keys tried in order, per collection
COLLECTION_KEYS: dict[str, tuple[str, ...]] = {
    "products": ("products", "data"),
    "sales": ("salesOrders", "sales", "data"),
    "purchases": ("purchases", "data"),
    "warehouses": ("warehouses", "data"),
    "suppliers": ("suppliers", "data"),
    "expected_returns": ("expectedReturns", "returns", "data"),
    "stock_levels": ("stockLevels", "stock", "data"),
}


@dataclass(frozen=True)
class Ok:
    items: list = field(default_factory=list)


@dataclass(frozen=True)
class ParseError:
    reason: str
    payload_type: str = ""


ParseResult = Union[Ok, ParseError]


def normalize_collection(payload: Any, keys: Iterable[str] = ("data",)) -> ParseResult:
    """
    Extract the list of records from a list-endpoint response.

    Args:
        payload: Decoded JSON body.
        keys:    Wrapper keys to try, in order, when the body is an object.

    Returns:
        Ok(items) for a bare list or the first wrapper key holding a list,
        ParseError otherwise. A null body is an empty collection.
    """
    if payload is None:
        return Ok([])
    if isinstance(payload, list):
        return Ok(list(payload))
    if isinstance(payload, dict):
        for key in keys:
            value = payload.get(key)
            if isinstance(value, list):
                return Ok(list(value))
        return ParseError(
            f"No list under any of {list(keys)} (keys: {sorted(payload)})",
            payload_type="object",
        )
    return ParseError(f"Unexpected payload type {type(payload).__name__}", type(payload).__name__)


def keys_for(collection: str) -> tuple[str, ...]:
    """Wrapper keys for a named collection, defaulting to ('data',)."""
    return COLLECTION_KEYS.get(collection, ("data",))
