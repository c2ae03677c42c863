"""Tests for the read-through cache and its invalidation on writes."""
from decimal import Decimal
from unittest.mock import MagicMock

import pytest
import redis
from sqlalchemy import text

from app.core.exceptions import NotFoundError
from app.db.session import SessionLocal
from app.models import inventory_schemas as schemas
from app.services.cache_service import CacheKeys, InMemoryStore, InventoryCache, RedisKeyValueStore
from app.services.inventory import InventoryService, PageRequest, ProductSearchCriteria


def test_in_memory_store_basics():
    store = InMemoryStore()
    store.set("a:1", "x")
    store.set("a:2", "y")
    store.set("b:1", "z")
    assert store.get("a:1") == "x"
    assert store.delete("a:1", "missing") == 1
    assert store.delete_prefix("a:") == 1
    assert store.keys() == ["b:1"]


def test_in_memory_store_expiry(monkeypatch):
    store = InMemoryStore()
    now = [1000.0]
    monkeypatch.setattr("app.services.cache_service.time.time", lambda: now[0])
    store.set("k", "v", ex=10)
    assert store.get("k") == "v"
    now[0] += 11
    assert store.get("k") is None


def test_redis_store_deletes_prefix_in_batches():
    client = MagicMock()
    client.scan_iter.return_value = iter(["inv:products:1", "inv:products:2", "inv:products:3"])
    client.delete.side_effect = lambda *keys: len(keys)
    store = RedisKeyValueStore(client)
    store.SCAN_BATCH = 2

    assert store.delete_prefix("inv:products:") == 3
    client.scan_iter.assert_called_once_with(match="inv:products:*", count=2)
    assert client.delete.call_count == 2


def test_store_errors_propagate():
    client = MagicMock()
    client.get.side_effect = redis.ConnectionError("down")
    cache = InventoryCache(RedisKeyValueStore(client))
    with pytest.raises(redis.ConnectionError):
        cache.get("inventory:product:id:1", schemas.ProductOut)


def test_keys_are_distinct_per_shape():
    keys = CacheKeys("inv")
    page = PageRequest(page=0, size=20)
    assert keys.product(1) != keys.product_quantity(1)
    assert keys.product_sku("A B").endswith("sku:A%20B")
    assert keys.product_search(ProductSearchCriteria(name="a:b"), page) != keys.product_search(
        ProductSearchCriteria(name="a", category_id=None), page
    )
    assert keys.products_by_category(1, page).startswith(keys.product_listings)
    assert keys.supplier_with_products(3).startswith(keys.supplier_points)


def test_read_through_populates_then_hits(service, make_product, cache_store):
    product = make_product()
    key = service._cache.keys.product(product.id)
    assert cache_store.get(key) is None

    first = service.get_product(product.id)
    assert cache_store.get(key) is not None
    second = service.get_product(product.id)
    assert first == second
    assert second.price == Decimal("899.99")


def test_cached_value_served_without_store_read(service, make_product, cache_store, db_session):
    product = make_product()
    service.get_product(product.id)

    # Change the row behind the service's back: the cached copy is served
    db_session.execute(text("UPDATE product SET name = 'Changed' WHERE id = :id"), {"id": product.id})
    db_session.commit()
    assert service.get_product(product.id).name == "Smartphone Pro"


def test_category_listing_not_stale_after_product_write(service, make_category, make_product):
    category = make_category()
    product = make_product(category_id=category.id)
    page = PageRequest()
    assert service.list_products_by_category(category.id, page).items[0].inventory_quantity == 50

    service.decrease_inventory(product.id, 5)
    assert service.list_products_by_category(category.id, page).items[0].inventory_quantity == 45

    service.update_product(
        product.id,
        schemas.ProductUpdate(name="Renamed", price=Decimal("1.00"), sku="PHONE-001", category_id=category.id),
    )
    assert service.list_products_by_category(category.id, page).items[0].name == "Renamed"

    service.delete_product(product.id)
    assert service.list_products_by_category(category.id, page).total_elements == 0


def test_point_reads_refresh_after_writes(service, make_product):
    product = make_product()
    assert service.get_product_by_sku("PHONE-001").inventory_quantity == 50
    assert service.get_inventory(product.id) == 50

    service.increase_inventory(product.id, 5)
    assert service.get_product(product.id).inventory_quantity == 55
    assert service.get_product_by_sku("PHONE-001").inventory_quantity == 55
    assert service.get_inventory(product.id) == 55


def test_old_sku_key_evicted_on_sku_change(service, make_product):
    product = make_product()
    service.get_product_by_sku("PHONE-001")
    service.update_product(
        product.id, schemas.ProductUpdate(name="Smartphone Pro", price=Decimal("899.99"), sku="PHONE-XL")
    )
    with pytest.raises(NotFoundError):
        service.get_product_by_sku("PHONE-001")
    assert service.get_product_by_sku("PHONE-XL").id == product.id


def test_parent_counts_refresh_after_reassignment(service, make_category, make_product):
    first = make_category("First")
    second = make_category("Second")
    product = make_product(category_id=first.id)
    assert service.get_category(first.id).product_count == 1
    assert [c.product_count for c in service.list_categories()] == [1, 0]

    service.assign_category(product.id, second.id)
    assert service.get_category(first.id).product_count == 0
    assert service.get_category(second.id).product_count == 1
    assert [c.product_count for c in service.list_categories()] == [0, 1]


def test_category_rename_refreshes_product_views(service, make_category, make_product):
    category = make_category("Phones")
    product = make_product(category_id=category.id)
    assert service.get_product(product.id).category_name == "Phones"

    service.update_category(category.id, schemas.CategoryUpdate(name="Mobiles"))
    assert service.get_product(product.id).category_name == "Mobiles"


def test_supplier_views_refresh(service, make_supplier, make_product):
    supplier = make_supplier("Acme")
    product = make_product(supplier_id=supplier.id)
    assert service.get_supplier_with_products(supplier.id).products[0].inventory_quantity == 50
    assert [s.name for s in service.supplier_dropdown()] == ["Acme"]

    service.decrease_inventory(product.id, 10)
    assert service.get_supplier_with_products(supplier.id).products[0].inventory_quantity == 40

    service.deactivate_supplier(supplier.id)
    assert service.supplier_dropdown() == []
    assert service.get_supplier(supplier.id).active is False

    service.update_supplier(supplier.id, schemas.SupplierUpdate(name="Acme Ltd", contact_person="Jane Doe"))
    assert service.get_product(product.id).supplier_name == "Acme Ltd"


def test_search_results_refresh_after_create(service, make_product):
    criteria = ProductSearchCriteria(name="phone")
    assert service.search_products(criteria, PageRequest()).total_elements == 0
    make_product()
    assert service.search_products(criteria, PageRequest()).total_elements == 1


def test_explicit_zero_ttl_means_no_expiry(cache_store):
    cache = InventoryCache(cache_store, ttl=0)
    assert cache.ttl == 0
    cache.put("inventory:product:qty:1", 7, int)
    assert cache.get("inventory:product:qty:1", int) == 7

    assert InventoryCache(cache_store).ttl > 0


def test_fill_skipped_when_invalidated_during_load(cache_store):
    cache = InventoryCache(cache_store)
    key = cache.keys.product_quantity(1)

    def loader():
        cache.invalidate_product(1)
        return 50

    assert cache.read_through(key, int, loader) == 50
    assert cache_store.get(key) is None


class _InterleavingStore(InMemoryStore):
    """Runs a callback once, right before the first listing fill is stored."""

    def __init__(self, prefix):
        super().__init__()
        self.prefix = prefix
        self.before_fill = None

    def set(self, key, value, ex=None):
        if self.before_fill and key.startswith(self.prefix):
            callback, self.before_fill = self.before_fill, None
            callback()
        super().set(key, value, ex=ex)


def test_write_between_load_and_fill_is_not_overwritten(make_product):
    store = _InterleavingStore(CacheKeys().product_listings)
    product = make_product(inventory_quantity=50)

    reader_db, writer_db, fresh_db = SessionLocal(), SessionLocal(), SessionLocal()
    try:
        reader = InventoryService(reader_db, InventoryCache(store))
        writer = InventoryService(writer_db, InventoryCache(store))
        store.before_fill = lambda: writer.decrease_inventory(product.id, 45)

        reader.list_products(PageRequest())
        assert store.before_fill is None

        fresh = InventoryService(fresh_db, InventoryCache(store))
        assert fresh.get_inventory(product.id) == 5
        assert fresh.list_products(PageRequest()).items[0].inventory_quantity == 5
    finally:
        for session in (reader_db, writer_db, fresh_db):
            session.close()
