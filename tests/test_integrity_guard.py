"""Tests for references between products, categories and suppliers."""
from decimal import Decimal

import pytest

from app.core.exceptions import ConflictError, NotFoundError
from app.models import inventory_schemas as schemas
from app.models.inventory_models import Category, Supplier


# ============================================================================
# Assignment
# ============================================================================

def test_assign_category_and_supplier(service, make_category, make_supplier, make_product):
    category = make_category("Audio")
    supplier = make_supplier("Acme")
    product = make_product()

    product = service.assign_category(product.id, category.id)
    assert product.category_id == category.id
    assert product.category_name == "Audio"

    product = service.assign_supplier(product.id, supplier.id)
    assert product.supplier_id == supplier.id
    assert product.supplier_name == "Acme"

    assert service.get_category(category.id).product_count == 1
    assert service.get_supplier(supplier.id).product_count == 1


def test_category_holds_many_products(service, make_category, make_product):
    category = make_category()
    for i in range(3):
        product = make_product(name=f"Item {i}", sku=f"SKU-{i}")
        service.assign_category(product.id, category.id)
    assert service.get_category(category.id).product_count == 3


def test_assign_unknown_references(service, make_category, make_product):
    category = make_category()
    product = make_product()
    with pytest.raises(NotFoundError):
        service.assign_category(product.id, 999)
    with pytest.raises(NotFoundError):
        service.assign_supplier(product.id, 999)
    with pytest.raises(NotFoundError):
        service.assign_category(999, category.id)


def test_create_product_with_unknown_category(service, make_product):
    with pytest.raises(NotFoundError) as exc_info:
        make_product(category_id=404)
    assert exc_info.value.message == "Category not found with id: 404"


def test_duplicate_sku_rejected(make_product):
    make_product(sku="DUP-1")
    with pytest.raises(ConflictError):
        make_product(name="Other", sku="DUP-1")


def test_update_product_clears_missing_references(service, make_category, make_supplier, make_product):
    category = make_category()
    supplier = make_supplier()
    product = make_product(category_id=category.id, supplier_id=supplier.id, inventory_quantity=8)

    updated = service.update_product(
        product.id,
        schemas.ProductUpdate(name="Smartphone Pro 2", price=Decimal("949.00"), sku="PHONE-002", low_stock_threshold=8),
    )
    assert updated.category_id is None
    assert updated.supplier_id is None
    assert updated.sku == "PHONE-002"
    # Quantity is untouched, the flag follows the new threshold
    assert updated.inventory_quantity == 8
    assert updated.low_stock is True
    assert service.get_category(category.id).product_count == 0


def test_update_product_keeps_own_sku(service, make_product):
    product = make_product()
    updated = service.update_product(
        product.id,
        schemas.ProductUpdate(name="Renamed", price=Decimal("10"), sku=product.sku),
    )
    assert updated.name == "Renamed"


def test_delete_product(service, make_product):
    product = make_product()
    service.delete_product(product.id)
    with pytest.raises(NotFoundError):
        service.get_product(product.id)
    with pytest.raises(NotFoundError):
        service.delete_product(product.id)


# ============================================================================
# Delete guards
# ============================================================================

def test_category_with_products_cannot_be_deleted(service, make_category, make_product, db_session):
    category = make_category()
    make_product(category_id=category.id)

    with pytest.raises(ConflictError) as exc_info:
        service.delete_category(category.id)
    assert exc_info.value.details["product_count"] == 1
    assert db_session.get(Category, category.id) is not None


def test_empty_category_can_be_deleted(service, make_category, db_session):
    category = make_category()
    service.delete_category(category.id)
    assert db_session.get(Category, category.id) is None
    with pytest.raises(NotFoundError):
        service.delete_category(category.id)


def test_supplier_with_products_cannot_be_deleted(service, make_supplier, make_product, db_session):
    supplier = make_supplier()
    product = make_product(supplier_id=supplier.id)

    with pytest.raises(ConflictError):
        service.delete_supplier(supplier.id)
    assert db_session.get(Supplier, supplier.id) is not None

    service.delete_product(product.id)
    service.delete_supplier(supplier.id)
    assert db_session.get(Supplier, supplier.id) is None


# ============================================================================
# Names
# ============================================================================

def test_supplier_name_unique_ignoring_case(service, make_supplier):
    make_supplier("Acme")
    with pytest.raises(ConflictError):
        make_supplier("ACME")
    assert service.supplier_exists("acme") is True
    assert service.supplier_exists("Globex") is False


def test_supplier_rename_to_same_name_any_case(service, make_supplier):
    supplier = make_supplier("Acme", city="Lagos")
    for name in ("Acme", "ACME", "acme"):
        updated = service.update_supplier(
            supplier.id,
            schemas.SupplierUpdate(name=name, contact_person="Jane Doe", city="Lagos"),
        )
        assert updated.name == name


def test_supplier_rename_onto_other_supplier(service, make_supplier):
    make_supplier("Acme")
    globex = make_supplier("Globex")
    with pytest.raises(ConflictError):
        service.update_supplier(
            globex.id, schemas.SupplierUpdate(name="acme", contact_person="Jane Doe")
        )


def test_supplier_update_keeps_active_when_omitted(service, make_supplier):
    supplier = make_supplier()
    service.deactivate_supplier(supplier.id)
    updated = service.update_supplier(
        supplier.id, schemas.SupplierUpdate(name="Acme", contact_person="John Roe")
    )
    assert updated.active is False
    assert updated.contact_person == "John Roe"


def test_category_name_unique(service, make_category):
    make_category("Electronics")
    with pytest.raises(ConflictError):
        make_category("Electronics")
    other = make_category("Books")
    with pytest.raises(ConflictError):
        service.update_category(other.id, schemas.CategoryUpdate(name="Electronics"))


def test_activate_and_deactivate(service, make_supplier):
    supplier = make_supplier()
    assert supplier.active is True
    assert service.deactivate_supplier(supplier.id).active is False
    assert service.activate_supplier(supplier.id).active is True
    with pytest.raises(NotFoundError):
        service.activate_supplier(999)


def test_supplier_with_products(service, make_supplier, make_product):
    supplier = make_supplier()
    make_product(name="Widget", sku="W-1", supplier_id=supplier.id)
    make_product(name="Gadget", sku="G-1", supplier_id=supplier.id)
    make_product(name="Orphan", sku="O-1")

    view = service.get_supplier_with_products(supplier.id)
    assert view.product_count == 2
    assert [p.name for p in view.products] == ["Gadget", "Widget"]
