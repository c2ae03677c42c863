"""Read-through cache for inventory reads.

Follows the Dependency Inversion Principle: services talk to
``InventoryCache``, which depends on the ``BaseKeyValueStore`` protocol
rather than on Redis directly. Two stores are provided, Redis for deployed
environments and an in-process store for development and tests.

Cache discipline:
- every read shape has one key builder in ``CacheKeys``;
- every write calls one of the ``invalidate_*`` helpers right after commit;
- listing/search keys are parameterised by arbitrary filters, so a write
  evicts the whole listing namespace of the affected entity type, while
  point reads (by id, SKU) are evicted precisely.
- every eviction first bumps a namespace generation counter; a read-through
  only keeps what it loaded when the generation is unchanged after the put,
  so a write that lands while a miss is being filled cannot be overwritten.

Store errors are not swallowed: serving a stale value is worse than failing
the request.
"""

from __future__ import annotations

import logging
import threading
import time
from functools import lru_cache
from typing import Any, Callable, Iterable, Protocol, TypeVar
from urllib.parse import quote

import redis
from pydantic import TypeAdapter

from app import metrics
from app.core.config import settings

logger = logging.getLogger(__name__)

T = TypeVar("T")


class BaseKeyValueStore(Protocol):
    """Protocol defining key-value storage interface."""

    def get(self, key: str) -> str | None:
        """Retrieve value by key."""
        ...

    def set(self, key: str, value: str, ex: int | None = None) -> None:
        """Store value with optional expiration in seconds."""
        ...

    def delete(self, *keys: str) -> int:
        """Remove keys from store, returning how many existed."""
        ...

    def delete_prefix(self, prefix: str) -> int:
        """Remove every key starting with prefix."""
        ...

    def incr(self, key: str) -> int:
        """Atomically increment an integer counter, returning the new value."""
        ...

    def ping(self) -> bool:
        """Check the store is reachable."""
        ...


class RedisKeyValueStore:
    """Redis-backed store."""

    SCAN_BATCH = 500

    def __init__(self, client: redis.Redis):
        self._client = client

    def get(self, key: str) -> str | None:
        return self._client.get(key)

    def set(self, key: str, value: str, ex: int | None = None) -> None:
        self._client.set(key, value, ex=ex)

    def delete(self, *keys: str) -> int:
        if not keys:
            return 0
        return int(self._client.delete(*keys))

    def delete_prefix(self, prefix: str) -> int:
        removed = 0
        batch: list[str] = []
        for key in self._client.scan_iter(match=f"{prefix}*", count=self.SCAN_BATCH):
            batch.append(key)
            if len(batch) >= self.SCAN_BATCH:
                removed += self.delete(*batch)
                batch = []
        removed += self.delete(*batch)
        return removed

    def incr(self, key: str) -> int:
        return int(self._client.incr(key))

    def ping(self) -> bool:
        return bool(self._client.ping())


class InMemoryStore:
    """In-process store used for development and tests."""

    def __init__(self) -> None:
        self._data: dict[str, tuple[str, float | None]] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> str | None:
        with self._lock:
            entry = self._data.get(key)
            if not entry:
                return None
            value, expires_at = entry
            if expires_at is not None and expires_at < time.time():
                del self._data[key]
                return None
            return value

    def set(self, key: str, value: str, ex: int | None = None) -> None:
        expires_at = time.time() + ex if ex else None
        with self._lock:
            self._data[key] = (value, expires_at)

    def delete(self, *keys: str) -> int:
        with self._lock:
            return sum(1 for key in keys if self._data.pop(key, None) is not None)

    def delete_prefix(self, prefix: str) -> int:
        with self._lock:
            doomed = [key for key in self._data if key.startswith(prefix)]
            for key in doomed:
                del self._data[key]
            return len(doomed)

    def incr(self, key: str) -> int:
        with self._lock:
            entry = self._data.get(key)
            value = int(entry[0]) + 1 if entry else 1
            self._data[key] = (str(value), None)
            return value

    def ping(self) -> bool:
        return True

    def keys(self) -> list[str]:
        with self._lock:
            return list(self._data)


def _part(value: Any) -> str:
    if value is None:
        return "-"
    return quote(str(value), safe="")


class CacheKeys:
    """Cache key builders, one per read shape."""

    def __init__(self, namespace: str | None = None):
        self.ns = namespace or settings.CACHE_KEY_PREFIX

    @property
    def generation(self) -> str:
        return f"{self.ns}:generation"

    # Prefixes used for bulk eviction
    @property
    def product_points(self) -> str:
        return f"{self.ns}:product:"

    @property
    def product_listings(self) -> str:
        return f"{self.ns}:products:"

    @property
    def category_points(self) -> str:
        return f"{self.ns}:category:"

    @property
    def category_listings(self) -> str:
        return f"{self.ns}:categories:"

    @property
    def supplier_points(self) -> str:
        return f"{self.ns}:supplier:"

    @property
    def supplier_listings(self) -> str:
        return f"{self.ns}:suppliers:"

    @staticmethod
    def _page(page) -> str:
        return f"page={page.page}:size={page.size}:sort={_part(page.sort_by)}:dir={page.direction}"

    # Products
    def product(self, product_id: int) -> str:
        return f"{self.product_points}id:{product_id}"

    def product_sku(self, sku: str) -> str:
        return f"{self.product_points}sku:{_part(sku)}"

    def product_quantity(self, product_id: int) -> str:
        return f"{self.product_points}qty:{product_id}"

    def product_list(self, page) -> str:
        return f"{self.product_listings}list:{self._page(page)}"

    def product_search(self, criteria, page) -> str:
        return (
            f"{self.product_listings}search:name={_part(criteria.name)}:cat={_part(criteria.category_id)}"
            f":min={_part(criteria.min_price)}:max={_part(criteria.max_price)}"
            f":stock={_part(criteria.in_stock)}:{self._page(page)}"
        )

    def low_stock(self) -> str:
        return f"{self.product_listings}low_stock"

    def products_by_category_pages(self, category_id: int) -> str:
        return f"{self.product_listings}by_category:{category_id}:"

    def products_by_category(self, category_id: int, page) -> str:
        return f"{self.products_by_category_pages(category_id)}{self._page(page)}"

    def products_by_supplier_pages(self, supplier_id: int) -> str:
        return f"{self.product_listings}by_supplier:{supplier_id}:"

    def products_by_supplier(self, supplier_id: int, page) -> str:
        return f"{self.products_by_supplier_pages(supplier_id)}{self._page(page)}"

    # Categories
    def category(self, category_id: int) -> str:
        return f"{self.category_points}id:{category_id}"

    def category_list(self) -> str:
        return f"{self.category_listings}all"

    # Suppliers
    def supplier(self, supplier_id: int) -> str:
        return f"{self.supplier_points}id:{supplier_id}"

    @property
    def supplier_with_products_views(self) -> str:
        return f"{self.supplier_points}with_products:"

    def supplier_with_products(self, supplier_id: int) -> str:
        return f"{self.supplier_with_products_views}{supplier_id}"

    def supplier_list(self, page) -> str:
        return f"{self.supplier_listings}list:{self._page(page)}"

    def supplier_active(self, page) -> str:
        return f"{self.supplier_listings}active:{self._page(page)}"

    def supplier_search(self, criteria, page) -> str:
        return (
            f"{self.supplier_listings}search:name={_part(criteria.name)}"
            f":contact={_part(criteria.contact_person)}:city={_part(criteria.city)}"
            f":country={_part(criteria.country)}:active={_part(criteria.active)}:{self._page(page)}"
        )

    def supplier_dropdown(self) -> str:
        return f"{self.supplier_listings}dropdown"


@lru_cache(maxsize=64)
def _adapter(tp: Any) -> TypeAdapter:
    return TypeAdapter(tp)


class InventoryCache:
    """Repository wrapping a key-value store with typed read-through access."""

    def __init__(self, store: BaseKeyValueStore, ttl: int | None = None, namespace: str | None = None):
        self.store = store
        self.ttl = settings.CACHE_TTL_SECONDS if ttl is None else ttl
        self.keys = CacheKeys(namespace)

    def get(self, key: str, tp: Any, entity: str = "inventory") -> Any | None:
        """Return the cached value for key, or None on a miss."""
        raw = self.store.get(key)
        if raw is None:
            metrics.cache_miss(entity)
            logger.debug("Cache MISS key=%s", key)
            return None
        metrics.cache_hit(entity)
        logger.debug("Cache HIT key=%s", key)
        return _adapter(tp).validate_json(raw)

    def put(self, key: str, value: Any, tp: Any) -> None:
        self.store.set(key, _adapter(tp).dump_json(value).decode(), ex=self.ttl or None)

    def current_generation(self) -> str | None:
        return self.store.get(self.keys.generation)

    def read_through(self, key: str, tp: Any, loader: Callable[[], T], entity: str = "inventory") -> T:
        """Serve key from cache, loading and memoizing it on a miss.

        The loaded value is only kept when no eviction happened between the
        load and the put; otherwise it is dropped and the next read reloads.
        """
        cached = self.get(key, tp, entity)
        if cached is not None:
            return cached
        generation = self.current_generation()
        value = loader()
        if self.current_generation() != generation:
            logger.debug("Cache fill skipped key=%s (invalidated during load)", key)
            return value
        self.put(key, value, tp)
        if self.current_generation() != generation:
            # A write invalidated while the value was being stored
            self.store.delete(key)
            logger.debug("Cache fill discarded key=%s (invalidated during put)", key)
        return value

    def _bump_generation(self) -> None:
        self.store.incr(self.keys.generation)

    def evict(self, *keys: str) -> None:
        self._bump_generation()
        removed = self.store.delete(*keys)
        metrics.cache_evicted("key", removed)
        logger.debug("Evicted %s cache keys", removed)

    def evict_all(self, prefix: str) -> None:
        self._bump_generation()
        removed = self.store.delete_prefix(prefix)
        metrics.cache_evicted("prefix", removed)
        logger.debug("Evicted %s cache keys under %s", removed, prefix)

    # ------------------------------------------------------------------
    # Invalidation helpers, called right after each committed write
    # ------------------------------------------------------------------

    def invalidate_product(
        self,
        product_id: int,
        skus: Iterable[str | None] = (),
        supplier_ids: Iterable[int | None] = (),
    ) -> None:
        """Drop a product's point entries and every product listing.

        ``supplier_ids`` names the suppliers whose "with products" view
        embeds this product.
        """
        keys = [self.keys.product(product_id), self.keys.product_quantity(product_id)]
        keys.extend(self.keys.product_sku(sku) for sku in skus if sku)
        keys.extend(self.keys.supplier_with_products(sid) for sid in supplier_ids if sid is not None)
        self.evict(*keys)
        self.evict_all(self.keys.product_listings)

    def invalidate_all_products(self) -> None:
        """Drop every entry embedding product data, used when a category/supplier name changes."""
        self.evict_all(self.keys.product_points)
        self.evict_all(self.keys.product_listings)
        self.evict_all(self.keys.supplier_with_products_views)

    def invalidate_category(self, *category_ids: int | None) -> None:
        """Drop the given categories' point entries and every category listing."""
        keys = [self.keys.category(cid) for cid in category_ids if cid is not None]
        if keys:
            self.evict(*keys)
        self.evict_all(self.keys.category_listings)

    def invalidate_supplier(self, *supplier_ids: int | None) -> None:
        """Drop the given suppliers' point entries and every supplier listing."""
        keys: list[str] = []
        for sid in supplier_ids:
            if sid is None:
                continue
            keys.extend([self.keys.supplier(sid), self.keys.supplier_with_products(sid)])
        if keys:
            self.evict(*keys)
        self.evict_all(self.keys.supplier_listings)


_SHARED_STORE: BaseKeyValueStore | None = None
_store_lock = threading.Lock()


def get_cache_store() -> BaseKeyValueStore:
    """Return the process-wide store selected by CACHE_BACKEND."""
    global _SHARED_STORE
    if _SHARED_STORE is not None:
        return _SHARED_STORE
    with _store_lock:
        if _SHARED_STORE is None:
            if settings.CACHE_BACKEND == "redis":
                from app.db.redis_client import get_redis_client

                _SHARED_STORE = RedisKeyValueStore(get_redis_client())
                logger.info("Inventory cache backed by Redis")
            else:
                _SHARED_STORE = InMemoryStore()
                logger.info("Inventory cache backed by in-process store")
    return _SHARED_STORE


def build_inventory_cache(store: BaseKeyValueStore | None = None) -> InventoryCache:
    return InventoryCache(store or get_cache_store())
