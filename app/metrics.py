"""Metrics facade.

Service code should ONLY call the semantic helpers here so we can change
backend freely.

Metrics:
- inventory_adjustments_total        Successful inventory writes, by operation
- inventory_insufficient_total       Decreases rejected for insufficient stock
- inventory_cache_hits_total         Read-through cache hits, by entity
- inventory_cache_misses_total       Read-through cache misses, by entity
- inventory_cache_evictions_total    Cache evictions, by kind (key/prefix)
"""

from __future__ import annotations

import logging

from prometheus_client import Counter

logger = logging.getLogger("metrics")

_INVENTORY_ADJUSTMENTS = Counter(
    "inventory_adjustments_total", "Successful inventory quantity writes", ["operation"]
)
_INSUFFICIENT_INVENTORY = Counter(
    "inventory_insufficient_total", "Inventory decreases rejected for insufficient stock"
)
_CACHE_HITS = Counter("inventory_cache_hits_total", "Read-through cache hits", ["entity"])
_CACHE_MISSES = Counter("inventory_cache_misses_total", "Read-through cache misses", ["entity"])
_CACHE_EVICTIONS = Counter("inventory_cache_evictions_total", "Cache evictions", ["kind"])


def inventory_adjusted(operation: str) -> None:
    _INVENTORY_ADJUSTMENTS.labels(operation=operation).inc()


def insufficient_inventory() -> None:
    _INSUFFICIENT_INVENTORY.inc()


def cache_hit(entity: str) -> None:
    _CACHE_HITS.labels(entity=entity).inc()


def cache_miss(entity: str) -> None:
    _CACHE_MISSES.labels(entity=entity).inc()


def cache_evicted(kind: str, count: int = 1) -> None:
    if count:
        _CACHE_EVICTIONS.labels(kind=kind).inc(count)
