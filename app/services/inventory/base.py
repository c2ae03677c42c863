"""
Base inventory service with shared functionality.

Provides the foundation for all inventory-related operations.
Follows OOP principles:
- Single Responsibility: Only handles session/cache wiring and shared lookups
- Dependency Injection: Database session and cache injected via constructor
- Encapsulation: Protected attributes with underscore prefix
"""
from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.exceptions import ConflictError, NotFoundError
from app.models.inventory_models import (
    Category,
    Product,
    Supplier,
    count_products_by_category,
    count_products_by_supplier,
)
from app.models.inventory_schemas import CategoryOut, ProductOut, SupplierOut
from app.services.cache_service import InventoryCache

logger = logging.getLogger(__name__)


def product_to_out(product: Product) -> ProductOut:
    """Convert a Product row to its response schema, flattening references."""
    return ProductOut(
        id=product.id,
        name=product.name,
        description=product.description,
        price=product.price,
        inventory_quantity=product.inventory_quantity,
        sku=product.sku,
        category_id=product.category_id,
        category_name=product.category.name if product.category else None,
        supplier_id=product.supplier_id,
        supplier_name=product.supplier.name if product.supplier else None,
        low_stock=product.low_stock,
        low_stock_threshold=product.low_stock_threshold,
        created_at=product.created_at,
        updated_at=product.updated_at,
    )


class BaseInventoryService:
    """
    Base service class with shared inventory functionality.

    All inventory-related services inherit from this class
    to share the database session and the read-through cache.
    """

    def __init__(self, db: Session, cache: InventoryCache):
        """
        Initialize the base inventory service.

        Args:
            db: SQLAlchemy database session
            cache: Read-through cache shared by every inventory service
        """
        self._db = db
        self._cache = cache

    @property
    def db(self) -> Session:
        """Database session accessor."""
        return self._db

    @property
    def cache(self) -> InventoryCache:
        """Cache accessor."""
        return self._cache

    # ========================================================================
    # Lookups
    # ========================================================================

    def _get_product_or_raise(self, product_id: int) -> Product:
        product = self._db.get(Product, product_id)
        if not product:
            raise NotFoundError("Product", product_id)
        return product

    def _get_category_or_raise(self, category_id: int) -> Category:
        category = self._db.get(Category, category_id)
        if not category:
            raise NotFoundError("Category", category_id)
        return category

    def _get_supplier_or_raise(self, supplier_id: int) -> Supplier:
        supplier = self._db.get(Supplier, supplier_id)
        if not supplier:
            raise NotFoundError("Supplier", supplier_id)
        return supplier

    # ========================================================================
    # Mapping
    # ========================================================================

    def _category_out(self, category: Category) -> CategoryOut:
        out = CategoryOut.model_validate(category)
        out.product_count = count_products_by_category(self._db, category.id)
        return out

    def _supplier_out(self, supplier: Supplier) -> SupplierOut:
        out = SupplierOut.model_validate(supplier)
        out.product_count = count_products_by_supplier(self._db, supplier.id)
        return out

    # ========================================================================
    # Persistence
    # ========================================================================

    def _commit(self, what: str) -> None:
        """Commit the unit of work; a constraint race surfaces as a conflict."""
        try:
            self._db.commit()
        except IntegrityError as exc:
            self._db.rollback()
            logger.warning("Integrity violation while saving %s: %s", what, exc.orig)
            raise ConflictError(f"{what} conflicts with existing data") from exc
