"""
Stock Service.

Owns the inventory quantity rules of a single product: set, increase and
decrease with the non-negative invariant, plus the derived low-stock flag.
Follows SRP by focusing solely on quantity mutation and stock reads.
"""
from __future__ import annotations

import logging

from app import metrics
from app.core.exceptions import InsufficientInventoryError, InvalidArgumentError, NotFoundError
from app.models.inventory_models import Product
from app.models.inventory_schemas import ProductOut

from .base import BaseInventoryService, product_to_out

logger = logging.getLogger(__name__)


class StockService(BaseInventoryService):
    """Service for inventory quantity operations."""

    # ========================================================================
    # Reads
    # ========================================================================

    def get_quantity(self, product_id: int) -> int:
        """Current inventory level of a product."""

        def load() -> int:
            return self._get_product_or_raise(product_id).inventory_quantity

        return self._cache.read_through(
            self._cache.keys.product_quantity(product_id), int, load, entity="product"
        )

    def list_low_stock(self) -> list[ProductOut]:
        """Products whose stored low-stock flag is set."""

        def load() -> list[ProductOut]:
            products = (
                self._db.query(Product)
                .filter(Product.low_stock.is_(True))
                .order_by(Product.inventory_quantity.asc(), Product.id.asc())
                .all()
            )
            return [product_to_out(p) for p in products]

        return self._cache.read_through(
            self._cache.keys.low_stock(), list[ProductOut], load, entity="product"
        )

    # ========================================================================
    # Writes
    # ========================================================================

    def set_quantity(self, product_id: int, quantity: int) -> ProductOut:
        """Replace the inventory level."""
        self._require_non_negative("quantity", quantity, "Inventory quantity cannot be negative")
        product = self._lock_product(product_id)
        before = product.inventory_quantity
        product.set_inventory(quantity)
        return self._save(product, "set", before)

    def increase(self, product_id: int, delta: int) -> ProductOut:
        """Add delta units; there is no upper bound."""
        self._require_non_negative("quantity", delta, "Quantity to increase cannot be negative")
        product = self._lock_product(product_id)
        before = product.inventory_quantity
        product.set_inventory(before + delta)
        return self._save(product, "increase", before)

    def decrease(self, product_id: int, delta: int) -> ProductOut:
        """
        Remove delta units.

        Raises InsufficientInventoryError, without touching the stored
        quantity, when fewer than delta units are on hand.
        """
        self._require_non_negative("quantity", delta, "Quantity to decrease cannot be negative")
        product = self._lock_product(product_id)
        before = product.inventory_quantity
        if before - delta < 0:
            self._db.rollback()  # release the row lock
            metrics.insufficient_inventory()
            logger.info(
                f"Rejected decrease for product {product_id}: on hand {before}, requested {delta}"
            )
            raise InsufficientInventoryError(product_id, before, delta)
        product.set_inventory(before - delta)
        return self._save(product, "decrease", before)

    # ========================================================================
    # Helpers
    # ========================================================================

    @staticmethod
    def _require_non_negative(field: str, value: int, message: str) -> None:
        if value is None or value < 0:
            raise InvalidArgumentError(message, **{field: value})

    def _lock_product(self, product_id: int) -> Product:
        """Load the product holding a row lock until the transaction ends."""
        product = (
            self._db.query(Product)
            .filter(Product.id == product_id)
            .with_for_update(of=Product)
            .populate_existing()
            .one_or_none()
        )
        if not product:
            raise NotFoundError("Product", product_id)
        return product

    def _save(self, product: Product, operation: str, before: int) -> ProductOut:
        self._commit("Product")
        self._db.refresh(product)
        self._cache.invalidate_product(product.id, skus=[product.sku], supplier_ids=[product.supplier_id])
        metrics.inventory_adjusted(operation)
        logger.info(
            f"Inventory {operation} for {product.name} (id={product.id}): "
            f"{before} -> {product.inventory_quantity}, low_stock={product.low_stock}"
        )
        return product_to_out(product)
