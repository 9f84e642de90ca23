"""Deterministic cache key construction.

Keys share one namespace prefix (``pls`` by default)::

    pls:properties:42                                   single entity
    pls:properties:page:1:limit:50:v:<epoch>           paginated list
    pls:search:v:<epoch>:city=austin|min_price=100000   filtered search
    pls:favorites:7                                     per-user collection
    pls:properties:epoch                                namespace epoch

List and search results cannot be enumerated at write time, so their keys
embed the epoch of the ``properties`` namespace. A write replaces the epoch,
and every earlier list or search entry becomes unreachable and ages out by TTL.
"""

from __future__ import annotations

import math
import uuid
from enum import Enum
from typing import Any

from listing_api.schemas.property import PropertyFilter

PROPERTIES = "properties"
FAVORITES = "favorites"
RECOMMENDATIONS = "recommendations"

DEFAULT_EPOCH = "0"


def _canonical_value(value: Any) -> str:
    if isinstance(value, Enum):
        value = value.value
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, float):
        if math.isfinite(value) and value.is_integer():
            return str(int(value))
        return repr(value)
    if isinstance(value, str):
        return value.strip().lower()
    return str(value)


def canonical_filter(filters: PropertyFilter) -> str:
    """Serialize set filters as ``field=value`` pairs in declared field order."""

    parts = []
    for name in PropertyFilter.model_fields:
        value = getattr(filters, name)
        if value is None:
            continue
        parts.append(f"{name}={_canonical_value(value)}")
    return "|".join(parts) or "all"


def new_epoch() -> str:
    return uuid.uuid4().hex[:16]


class CacheKeyBuilder:
    def __init__(self, namespace: str = "pls") -> None:
        self.namespace = namespace.rstrip(":")

    def entity(self, kind: str, entity_id: int | str) -> str:
        return f"{self.namespace}:{kind}:{entity_id}"

    def page(self, kind: str, page: int, limit: int, epoch: str = DEFAULT_EPOCH) -> str:
        return f"{self.namespace}:{kind}:page:{page}:limit:{limit}:v:{epoch}"

    def search(self, filters: PropertyFilter, epoch: str = DEFAULT_EPOCH) -> str:
        return f"{self.namespace}:search:v:{epoch}:{canonical_filter(filters)}"

    def collection(self, kind: str, user_id: int | str) -> str:
        return f"{self.namespace}:{kind}:{user_id}"

    def epoch(self, kind: str) -> str:
        return f"{self.namespace}:{kind}:epoch"


__all__ = [
    "CacheKeyBuilder",
    "DEFAULT_EPOCH",
    "FAVORITES",
    "PROPERTIES",
    "RECOMMENDATIONS",
    "canonical_filter",
    "new_epoch",
]
