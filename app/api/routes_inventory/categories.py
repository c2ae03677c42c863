"""Product category endpoints."""
import logging

from fastapi import APIRouter, Response

from app.models import inventory_schemas as schemas
from app.utils import validators

from .dependencies import InventoryServiceDep, ProductPageDep

router = APIRouter(prefix="/categories", tags=["categories"])
logger = logging.getLogger(__name__)


@router.post("", response_model=schemas.CategoryOut, status_code=201)
def create_category(data: schemas.CategoryCreate, service: InventoryServiceDep):
    """Create a new product category."""
    validators.ensure_valid(validators.validate_category(data))
    return service.create_category(data)


@router.get("", response_model=list[schemas.CategoryOut])
def list_categories(service: InventoryServiceDep):
    """List all product categories."""
    return service.list_categories()


@router.get("/{category_id}", response_model=schemas.CategoryOut)
def get_category(category_id: int, service: InventoryServiceDep):
    """Get a category by ID."""
    return service.get_category(category_id)


@router.put("/{category_id}", response_model=schemas.CategoryOut)
def update_category(category_id: int, data: schemas.CategoryUpdate, service: InventoryServiceDep):
    """Update a category."""
    validators.ensure_valid(validators.validate_category(data))
    return service.update_category(category_id, data)


@router.delete("/{category_id}", status_code=204)
def delete_category(category_id: int, service: InventoryServiceDep):
    """Delete a category; refused while products still reference it."""
    service.delete_category(category_id)
    return Response(status_code=204)


@router.get("/{category_id}/products", response_model=schemas.PageOut[schemas.ProductOut])
def list_category_products(category_id: int, service: InventoryServiceDep, page: ProductPageDep):
    """Products in a category."""
    return service.list_products_by_category(category_id, page)
