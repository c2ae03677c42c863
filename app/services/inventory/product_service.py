"""
Product Service - CRUD operations for products.

Follows SRP: Only handles product-related operations, including the checks
that every category/supplier a product points to exists and that SKUs stay
unique.
"""
from __future__ import annotations

import logging

from app.core.exceptions import ConflictError, NotFoundError
from app.models.inventory_models import Product
from app.models.inventory_schemas import PageOut, ProductCreate, ProductOut, ProductUpdate
from app.services.inventory.base import BaseInventoryService, product_to_out
from app.services.inventory.pagination import PRODUCT_SORT_FIELDS, PageRequest, build_page, paginate

logger = logging.getLogger(__name__)


class ProductService(BaseInventoryService):
    """
    Service for product operations.

    Handles CRUD operations for products in the catalog and the assignment
    of products to categories and suppliers.
    """

    def create_product(self, data: ProductCreate) -> ProductOut:
        """Create a new product; the low-stock flag is derived on insert."""
        self._ensure_sku_available(data.sku)
        if data.category_id is not None:
            self._get_category_or_raise(data.category_id)
        if data.supplier_id is not None:
            self._get_supplier_or_raise(data.supplier_id)

        product = Product(
            name=data.name,
            description=data.description,
            price=data.price,
            sku=data.sku,
            category_id=data.category_id,
            supplier_id=data.supplier_id,
            low_stock_threshold=data.low_stock_threshold,
            low_stock=False,
        )
        product.set_inventory(data.inventory_quantity or 0)
        self._db.add(product)
        self._commit("Product")
        self._db.refresh(product)

        self._invalidate(product, categories=[product.category_id], suppliers=[product.supplier_id])
        logger.info(f"Created product: {product.name} (id={product.id}, sku={product.sku})")
        return product_to_out(product)

    def get_product(self, product_id: int) -> ProductOut:
        """Get a product by ID."""
        return self._cache.read_through(
            self._cache.keys.product(product_id),
            ProductOut,
            lambda: product_to_out(self._get_product_or_raise(product_id)),
            entity="product",
        )

    def get_product_by_sku(self, sku: str) -> ProductOut:
        """Get a product by SKU."""

        def load() -> ProductOut:
            product = self._db.query(Product).filter(Product.sku == sku).first()
            if not product:
                raise NotFoundError("Product", sku, field="SKU")
            return product_to_out(product)

        return self._cache.read_through(self._cache.keys.product_sku(sku), ProductOut, load, entity="product")

    def list_products(self, page: PageRequest) -> PageOut[ProductOut]:
        """Page through every product."""

        def load() -> PageOut[ProductOut]:
            rows, total = paginate(self._db.query(Product), page, PRODUCT_SORT_FIELDS, Product.id)
            return build_page(PageOut[ProductOut], rows, total, page, product_to_out)

        return self._cache.read_through(
            self._cache.keys.product_list(page), PageOut[ProductOut], load, entity="product"
        )

    def update_product(self, product_id: int, data: ProductUpdate) -> ProductOut:
        """
        Replace a product's descriptive fields and references.

        A missing category/supplier id clears the reference. Inventory
        quantity is left alone; the low-stock flag is recomputed against the
        new threshold.
        """
        product = self._get_product_or_raise(product_id)
        if data.sku != product.sku:
            self._ensure_sku_available(data.sku)
        if data.category_id is not None:
            self._get_category_or_raise(data.category_id)
        if data.supplier_id is not None:
            self._get_supplier_or_raise(data.supplier_id)

        old_sku = product.sku
        old_category_id, old_supplier_id = product.category_id, product.supplier_id

        product.name = data.name
        product.description = data.description
        product.price = data.price
        product.sku = data.sku
        product.category_id = data.category_id
        product.supplier_id = data.supplier_id
        product.low_stock_threshold = data.low_stock_threshold
        product.recompute_low_stock()

        self._commit("Product")
        self._db.refresh(product)

        self._invalidate(
            product,
            skus=[old_sku],
            categories=[old_category_id, product.category_id],
            suppliers=[old_supplier_id, product.supplier_id],
        )
        logger.info(f"Updated product: {product.name} (id={product.id})")
        return product_to_out(product)

    def delete_product(self, product_id: int) -> None:
        """Delete a product; nothing depends on products."""
        product = self._get_product_or_raise(product_id)
        self._db.delete(product)
        self._commit("Product")

        self._invalidate(product, categories=[product.category_id], suppliers=[product.supplier_id])
        logger.info(f"Deleted product: {product.name} (id={product_id})")

    # ========================================================================
    # Assignment
    # ========================================================================

    def assign_category(self, product_id: int, category_id: int) -> ProductOut:
        """Point a product at an existing category."""
        product = self._get_product_or_raise(product_id)
        category = self._get_category_or_raise(category_id)
        old_category_id = product.category_id

        product.category = category
        self._commit("Product")
        self._db.refresh(product)

        self._invalidate(product, categories=[old_category_id, category.id], suppliers=[product.supplier_id])
        logger.info(f"Assigned product {product.id} to category {category.id}")
        return product_to_out(product)

    def assign_supplier(self, product_id: int, supplier_id: int) -> ProductOut:
        """Point a product at an existing supplier."""
        product = self._get_product_or_raise(product_id)
        supplier = self._get_supplier_or_raise(supplier_id)
        old_supplier_id = product.supplier_id

        product.supplier = supplier
        self._commit("Product")
        self._db.refresh(product)

        self._invalidate(product, categories=[product.category_id], suppliers=[old_supplier_id, supplier.id])
        logger.info(f"Assigned product {product.id} to supplier {supplier.id}")
        return product_to_out(product)

    # ========================================================================
    # Helpers
    # ========================================================================

    def _ensure_sku_available(self, sku: str) -> None:
        exists = self._db.query(Product.id).filter(Product.sku == sku).first()
        if exists:
            raise ConflictError(f"Product with SKU '{sku}' already exists", sku=sku)

    def _invalidate(
        self,
        product: Product,
        skus: list[str | None] | None = None,
        categories: list[int | None] | None = None,
        suppliers: list[int | None] | None = None,
    ) -> None:
        """Evict everything that may have observed the product before this write.

        Category and supplier responses carry product counts, so the parents
        on both sides of a reassignment are evicted too.
        """
        suppliers = suppliers or []
        self._cache.invalidate_product(product.id, skus=[product.sku, *(skus or [])], supplier_ids=suppliers)
        self._cache.invalidate_category(*(categories or []))
        self._cache.invalidate_supplier(*suppliers)
