"""Supplier endpoints."""
import logging

from fastapi import APIRouter, Query, Response

from app.models import inventory_schemas as schemas
from app.services.inventory import SupplierSearchCriteria
from app.utils import validators

from .dependencies import InventoryServiceDep, ProductPageDep, SupplierPageDep

router = APIRouter(prefix="/suppliers", tags=["suppliers"])
logger = logging.getLogger(__name__)


@router.post("", response_model=schemas.SupplierOut, status_code=201)
def create_supplier(data: schemas.SupplierCreate, service: InventoryServiceDep):
    """Create a new supplier."""
    validators.ensure_valid(validators.validate_supplier(data))
    return service.create_supplier(data)


@router.get("", response_model=schemas.PageOut[schemas.SupplierOut])
def list_suppliers(service: InventoryServiceDep, page: SupplierPageDep):
    """List suppliers with pagination."""
    return service.list_suppliers(page)


@router.get("/search", response_model=schemas.PageOut[schemas.SupplierOut])
def search_suppliers(
    service: InventoryServiceDep,
    page: SupplierPageDep,
    name: str | None = Query(None, description="Supplier name (partial match)"),
    contact_person: str | None = Query(None, description="Contact person (partial match)"),
    city: str | None = Query(None, description="City"),
    country: str | None = Query(None, description="Country"),
    active: bool | None = Query(None, description="Active status"),
):
    """Search suppliers; every supplied criterion must match."""
    criteria = SupplierSearchCriteria(
        name=name,
        contact_person=contact_person,
        city=city,
        country=country,
        active=active,
    )
    return service.search_suppliers(criteria, page)


@router.get("/active", response_model=schemas.PageOut[schemas.SupplierOut])
def list_active_suppliers(service: InventoryServiceDep, page: SupplierPageDep):
    """Active suppliers with pagination."""
    return service.list_active_suppliers(page)


@router.get("/dropdown", response_model=list[schemas.SupplierOut])
def supplier_dropdown(service: InventoryServiceDep):
    """Active suppliers ordered by name, for selection lists."""
    return service.supplier_dropdown()


@router.get("/exists", response_model=bool)
def supplier_exists(service: InventoryServiceDep, name: str = Query(..., description="Supplier name")):
    """Whether a supplier name is taken (case-insensitive)."""
    return service.supplier_exists(name)


@router.get("/{supplier_id}", response_model=schemas.SupplierOut)
def get_supplier(supplier_id: int, service: InventoryServiceDep):
    """Get a supplier by ID."""
    return service.get_supplier(supplier_id)


@router.put("/{supplier_id}", response_model=schemas.SupplierOut)
def update_supplier(supplier_id: int, data: schemas.SupplierUpdate, service: InventoryServiceDep):
    """Update a supplier."""
    validators.ensure_valid(validators.validate_supplier(data))
    return service.update_supplier(supplier_id, data)


@router.delete("/{supplier_id}", status_code=204)
def delete_supplier(supplier_id: int, service: InventoryServiceDep):
    """Delete a supplier; refused while products still reference it."""
    service.delete_supplier(supplier_id)
    return Response(status_code=204)


@router.put("/{supplier_id}/activate", response_model=schemas.SupplierOut)
def activate_supplier(supplier_id: int, service: InventoryServiceDep):
    """Mark a supplier active."""
    return service.activate_supplier(supplier_id)


@router.put("/{supplier_id}/deactivate", response_model=schemas.SupplierOut)
def deactivate_supplier(supplier_id: int, service: InventoryServiceDep):
    """Mark a supplier inactive."""
    return service.deactivate_supplier(supplier_id)


@router.get("/{supplier_id}/with-products", response_model=schemas.SupplierWithProductsOut)
def get_supplier_with_products(supplier_id: int, service: InventoryServiceDep):
    """Supplier together with the products it supplies."""
    return service.get_supplier_with_products(supplier_id)


@router.get("/{supplier_id}/products", response_model=schemas.PageOut[schemas.ProductOut])
def list_supplier_products(supplier_id: int, service: InventoryServiceDep, page: ProductPageDep):
    """Products of a supplier."""
    return service.list_products_by_supplier(supplier_id, page)
