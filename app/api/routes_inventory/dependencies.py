"""Common dependencies for inventory routes."""
from typing import Annotated, TypeAlias

from fastapi import Depends
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.services.cache_service import BaseKeyValueStore, InventoryCache, get_cache_store
from app.services.inventory import InventoryService, PageRequest

from .helpers import page_params

DbDep: TypeAlias = Annotated[Session, Depends(get_db)]
CacheStoreDep: TypeAlias = Annotated[BaseKeyValueStore, Depends(get_cache_store)]


def get_inventory_service(db: DbDep, store: CacheStoreDep) -> InventoryService:
    """InventoryService bound to the request's session and the shared cache store."""
    return InventoryService(db, InventoryCache(store))


InventoryServiceDep: TypeAlias = Annotated[InventoryService, Depends(get_inventory_service)]

# Listing pagination, defaulting to id order for products and name order for suppliers
ProductPageDep = Annotated[PageRequest, Depends(page_params("id"))]
SupplierPageDep = Annotated[PageRequest, Depends(page_params("name"))]
