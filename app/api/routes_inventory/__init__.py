"""
Inventory API Routes.

RESTful endpoints for inventory management:
- Products (CRUD, SKU lookup, search, low stock, inventory levels, assignment)
- Categories (CRUD, products per category)
- Suppliers (CRUD, search, activation, dropdown, products per supplier)
"""
from fastapi import APIRouter

from .categories import router as categories_router
from .products import router as products_router
from .suppliers import router as suppliers_router

# Create main router and include sub-routers
router = APIRouter()
router.include_router(categories_router)
router.include_router(products_router)
router.include_router(suppliers_router)

__all__ = ["router"]
