"""
Inventory Service Module.

This module provides a modular, SRP-compliant inventory management system.
The InventoryService class acts as a facade that composes all specialized
services for a unified API.

Usage:
    from app.services.inventory import InventoryService, build_inventory_service

    # Using factory function (cache store picked from settings)
    service = build_inventory_service(db)

    # Direct instantiation
    service = InventoryService(db, cache)

    # Category operations
    category = service.create_category(data)
    categories = service.list_categories()

    # Product operations
    product = service.create_product(data)
    page = service.list_products(PageRequest(page=0, size=20))

    # Inventory operations
    product = service.decrease_inventory(product_id, 5)
    low = service.list_low_stock()
"""
from __future__ import annotations

from sqlalchemy.orm import Session

from app.models.inventory_schemas import (
    CategoryCreate,
    CategoryOut,
    CategoryUpdate,
    PageOut,
    ProductCreate,
    ProductOut,
    ProductUpdate,
    SupplierCreate,
    SupplierOut,
    SupplierUpdate,
    SupplierWithProductsOut,
)
from app.services.cache_service import InventoryCache, build_inventory_cache

from .category_service import CategoryService
from .pagination import PageRequest
from .product_service import ProductService
from .search_service import ProductSearchCriteria, SearchService, SupplierSearchCriteria
from .stock_service import StockService
from .supplier_service import SupplierService


class InventoryService:
    """
    Facade for inventory management operations.

    Composes specialized services to provide a unified API while
    maintaining separation of concerns internally.
    """

    def __init__(self, db: Session, cache: InventoryCache):
        """Initialize all sub-services."""
        self._db = db
        self._cache = cache

        # Initialize specialized services
        self._categories = CategoryService(db, cache)
        self._products = ProductService(db, cache)
        self._stock = StockService(db, cache)
        self._suppliers = SupplierService(db, cache)
        self._search = SearchService(db, cache)

    # ========================================================================
    # Category Operations (delegated to CategoryService)
    # ========================================================================

    def create_category(self, data: CategoryCreate) -> CategoryOut:
        """Create a new product category."""
        return self._categories.create_category(data)

    def get_category(self, category_id: int) -> CategoryOut:
        """Get a category by ID."""
        return self._categories.get_category(category_id)

    def list_categories(self) -> list[CategoryOut]:
        """List all categories."""
        return self._categories.list_categories()

    def update_category(self, category_id: int, data: CategoryUpdate) -> CategoryOut:
        """Update a category."""
        return self._categories.update_category(category_id, data)

    def delete_category(self, category_id: int) -> None:
        """Delete a category without products."""
        self._categories.delete_category(category_id)

    def list_products_by_category(self, category_id: int, page: PageRequest) -> PageOut[ProductOut]:
        """Products in a category."""
        return self._categories.list_products(category_id, page)

    # ========================================================================
    # Product Operations (delegated to ProductService)
    # ========================================================================

    def create_product(self, data: ProductCreate) -> ProductOut:
        """Create a new product."""
        return self._products.create_product(data)

    def get_product(self, product_id: int) -> ProductOut:
        """Get a product by ID."""
        return self._products.get_product(product_id)

    def get_product_by_sku(self, sku: str) -> ProductOut:
        """Get a product by SKU."""
        return self._products.get_product_by_sku(sku)

    def list_products(self, page: PageRequest) -> PageOut[ProductOut]:
        """List products with pagination."""
        return self._products.list_products(page)

    def update_product(self, product_id: int, data: ProductUpdate) -> ProductOut:
        """Update a product."""
        return self._products.update_product(product_id, data)

    def delete_product(self, product_id: int) -> None:
        """Delete a product."""
        self._products.delete_product(product_id)

    def assign_category(self, product_id: int, category_id: int) -> ProductOut:
        return self._products.assign_category(product_id, category_id)

    def assign_supplier(self, product_id: int, supplier_id: int) -> ProductOut:
        return self._products.assign_supplier(product_id, supplier_id)

    # ========================================================================
    # Inventory Operations (delegated to StockService)
    # ========================================================================

    def get_inventory(self, product_id: int) -> int:
        """Current inventory level."""
        return self._stock.get_quantity(product_id)

    def set_inventory(self, product_id: int, quantity: int) -> ProductOut:
        return self._stock.set_quantity(product_id, quantity)

    def increase_inventory(self, product_id: int, quantity: int) -> ProductOut:
        return self._stock.increase(product_id, quantity)

    def decrease_inventory(self, product_id: int, quantity: int) -> ProductOut:
        return self._stock.decrease(product_id, quantity)

    def list_low_stock(self) -> list[ProductOut]:
        """Products flagged as low on stock."""
        return self._stock.list_low_stock()

    # ========================================================================
    # Supplier Operations (delegated to SupplierService)
    # ========================================================================

    def create_supplier(self, data: SupplierCreate) -> SupplierOut:
        return self._suppliers.create(data)

    def get_supplier(self, supplier_id: int) -> SupplierOut:
        return self._suppliers.get(supplier_id)

    def list_suppliers(self, page: PageRequest) -> PageOut[SupplierOut]:
        return self._suppliers.list(page)

    def list_active_suppliers(self, page: PageRequest) -> PageOut[SupplierOut]:
        return self._suppliers.list_active(page)

    def supplier_dropdown(self) -> list[SupplierOut]:
        return self._suppliers.dropdown()

    def update_supplier(self, supplier_id: int, data: SupplierUpdate) -> SupplierOut:
        return self._suppliers.update(supplier_id, data)

    def delete_supplier(self, supplier_id: int) -> None:
        self._suppliers.delete(supplier_id)

    def activate_supplier(self, supplier_id: int) -> SupplierOut:
        return self._suppliers.set_active(supplier_id, True)

    def deactivate_supplier(self, supplier_id: int) -> SupplierOut:
        return self._suppliers.set_active(supplier_id, False)

    def supplier_exists(self, name: str) -> bool:
        """Case-insensitive supplier name lookup."""
        return self._suppliers.exists_by_name(name)

    def get_supplier_with_products(self, supplier_id: int) -> SupplierWithProductsOut:
        return self._suppliers.with_products(supplier_id)

    def list_products_by_supplier(self, supplier_id: int, page: PageRequest) -> PageOut[ProductOut]:
        return self._suppliers.list_products(supplier_id, page)

    # ========================================================================
    # Search (delegated to SearchService)
    # ========================================================================

    def search_products(self, criteria: ProductSearchCriteria, page: PageRequest) -> PageOut[ProductOut]:
        """Product search with the single-predicate precedence rule."""
        return self._search.search_products(criteria, page)

    def search_suppliers(self, criteria: SupplierSearchCriteria, page: PageRequest) -> PageOut[SupplierOut]:
        """Conjunctive supplier search."""
        return self._search.search_suppliers(criteria, page)


def build_inventory_service(db: Session, cache: InventoryCache | None = None) -> InventoryService:
    """Factory function to create an InventoryService instance."""
    return InventoryService(db, cache or build_inventory_cache())


__all__ = [
    "InventoryService",
    "build_inventory_service",
    "CategoryService",
    "ProductService",
    "StockService",
    "SupplierService",
    "SearchService",
    "PageRequest",
    "ProductSearchCriteria",
    "SupplierSearchCriteria",
]
