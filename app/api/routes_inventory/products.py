"""Product and inventory level endpoints."""
import logging
from decimal import Decimal

from fastapi import APIRouter, Query, Response

from app.models import inventory_schemas as schemas
from app.services.inventory import ProductSearchCriteria
from app.utils import validators

from .dependencies import InventoryServiceDep, ProductPageDep

router = APIRouter(prefix="/products", tags=["products"])
logger = logging.getLogger(__name__)


@router.post("", response_model=schemas.ProductOut, status_code=201)
def create_product(data: schemas.ProductCreate, service: InventoryServiceDep):
    """Create a new product."""
    validators.ensure_valid(validators.validate_product_create(data))
    return service.create_product(data)


@router.get("", response_model=schemas.PageOut[schemas.ProductOut])
def list_products(service: InventoryServiceDep, page: ProductPageDep):
    """List products with pagination."""
    return service.list_products(page)


@router.get("/search", response_model=schemas.PageOut[schemas.ProductOut])
def search_products(
    service: InventoryServiceDep,
    page: ProductPageDep,
    name: str | None = Query(None, description="Product name pattern"),
    category_id: int | None = Query(None, description="Category ID"),
    min_price: Decimal | None = Query(None, description="Minimum price"),
    max_price: Decimal | None = Query(None, description="Maximum price"),
    in_stock: bool | None = Query(None, description="Only in-stock products"),
):
    """
    Search products.

    Only one criterion is applied, in this order of precedence: name,
    category, price range (both bounds required), in-stock.
    """
    criteria = ProductSearchCriteria(
        name=name,
        category_id=category_id,
        min_price=min_price,
        max_price=max_price,
        in_stock=in_stock,
    )
    return service.search_products(criteria, page)


@router.get("/low-stock", response_model=list[schemas.ProductOut])
def list_low_stock(service: InventoryServiceDep):
    """Products at or below their low-stock threshold."""
    return service.list_low_stock()


@router.get("/sku/{sku}", response_model=schemas.ProductOut)
def get_product_by_sku(sku: str, service: InventoryServiceDep):
    """Get a product by SKU."""
    return service.get_product_by_sku(sku)


@router.get("/{product_id}", response_model=schemas.ProductOut)
def get_product(product_id: int, service: InventoryServiceDep):
    """Get a product by ID."""
    return service.get_product(product_id)


@router.put("/{product_id}", response_model=schemas.ProductOut)
def update_product(product_id: int, data: schemas.ProductUpdate, service: InventoryServiceDep):
    """Replace a product's fields (inventory quantity excluded)."""
    validators.ensure_valid(validators.validate_product_update(data))
    return service.update_product(product_id, data)


@router.delete("/{product_id}", status_code=204)
def delete_product(product_id: int, service: InventoryServiceDep):
    """Delete a product."""
    service.delete_product(product_id)
    return Response(status_code=204)


# ============================================================================
# Inventory levels
# ============================================================================

@router.get("/{product_id}/inventory", response_model=int)
def get_inventory(product_id: int, service: InventoryServiceDep):
    """Current inventory level of a product."""
    return service.get_inventory(product_id)


@router.put("/{product_id}/inventory", response_model=schemas.ProductOut)
def set_inventory(product_id: int, data: schemas.InventoryUpdate, service: InventoryServiceDep):
    """Replace the inventory level."""
    validators.ensure_valid(validators.validate_inventory_update(data))
    return service.set_inventory(product_id, data.quantity)


@router.post("/{product_id}/inventory/increase", response_model=schemas.ProductOut)
def increase_inventory(product_id: int, data: schemas.InventoryUpdate, service: InventoryServiceDep):
    """Add units to the inventory level."""
    validators.ensure_valid(validators.validate_inventory_update(data))
    return service.increase_inventory(product_id, data.quantity)


@router.post("/{product_id}/inventory/decrease", response_model=schemas.ProductOut)
def decrease_inventory(product_id: int, data: schemas.InventoryUpdate, service: InventoryServiceDep):
    """Remove units from the inventory level; never goes below zero."""
    validators.ensure_valid(validators.validate_inventory_update(data))
    return service.decrease_inventory(product_id, data.quantity)


# ============================================================================
# Assignment
# ============================================================================

@router.put("/{product_id}/category", response_model=schemas.ProductOut)
def assign_category(
    product_id: int,
    service: InventoryServiceDep,
    category_id: int = Query(..., description="Category ID"),
):
    """Assign a product to a category."""
    return service.assign_category(product_id, category_id)


@router.put("/{product_id}/supplier", response_model=schemas.ProductOut)
def assign_supplier(
    product_id: int,
    service: InventoryServiceDep,
    supplier_id: int = Query(..., description="Supplier ID"),
):
    """Assign a product to a supplier."""
    return service.assign_supplier(product_id, supplier_id)
