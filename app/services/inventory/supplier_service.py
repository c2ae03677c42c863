"""
Supplier Service.

Handles all supplier CRUD operations, case-insensitive name uniqueness, the
active flag and the delete guard. Follows SRP by focusing solely on supplier
management; multi-criteria supplier search lives in ``SearchService``.
"""
from __future__ import annotations

import logging

from sqlalchemy import func

from app.core.exceptions import ConflictError
from app.models.inventory_models import Product, Supplier, count_products_by_supplier
from app.models.inventory_schemas import (
    PageOut,
    ProductOut,
    SupplierCreate,
    SupplierOut,
    SupplierUpdate,
    SupplierWithProductsOut,
)

from .base import BaseInventoryService, product_to_out
from .pagination import PRODUCT_SORT_FIELDS, SUPPLIER_SORT_FIELDS, PageRequest, build_page, paginate

logger = logging.getLogger(__name__)

_EDITABLE_FIELDS = (
    "name",
    "contact_person",
    "email",
    "phone",
    "address",
    "city",
    "country",
    "postal_code",
    "notes",
)


class SupplierService(BaseInventoryService):
    """Service for supplier operations."""

    def create(self, data: SupplierCreate) -> SupplierOut:
        """Create a new supplier."""
        logger.info("Creating new supplier: %s", data.name)
        if self.exists_by_name(data.name):
            raise ConflictError(f"Supplier with name '{data.name}' already exists", name=data.name)

        supplier = Supplier(**data.model_dump(include=set(_EDITABLE_FIELDS)))
        supplier.active = True if data.active is None else data.active
        self._db.add(supplier)
        self._commit("Supplier")
        self._db.refresh(supplier)

        self._cache.invalidate_supplier()
        logger.info("Created supplier: %s (id=%s)", supplier.name, supplier.id)
        return self._supplier_out(supplier)

    def get(self, supplier_id: int) -> SupplierOut:
        """Get a supplier by ID."""
        return self._cache.read_through(
            self._cache.keys.supplier(supplier_id),
            SupplierOut,
            lambda: self._supplier_out(self._get_supplier_or_raise(supplier_id)),
            entity="supplier",
        )

    def list(self, page: PageRequest) -> PageOut[SupplierOut]:
        """Page through all suppliers."""

        def load() -> PageOut[SupplierOut]:
            rows, total = paginate(self._db.query(Supplier), page, SUPPLIER_SORT_FIELDS, Supplier.id)
            return build_page(PageOut[SupplierOut], rows, total, page, self._supplier_out)

        return self._cache.read_through(
            self._cache.keys.supplier_list(page), PageOut[SupplierOut], load, entity="supplier"
        )

    def list_active(self, page: PageRequest) -> PageOut[SupplierOut]:
        """Page through active suppliers only."""

        def load() -> PageOut[SupplierOut]:
            query = self._db.query(Supplier).filter(Supplier.active.is_(True))
            rows, total = paginate(query, page, SUPPLIER_SORT_FIELDS, Supplier.id)
            return build_page(PageOut[SupplierOut], rows, total, page, self._supplier_out)

        return self._cache.read_through(
            self._cache.keys.supplier_active(page), PageOut[SupplierOut], load, entity="supplier"
        )

    def dropdown(self) -> list[SupplierOut]:
        """Active suppliers ordered by name, unpaged, for selection lists."""

        def load() -> list[SupplierOut]:
            suppliers = (
                self._db.query(Supplier)
                .filter(Supplier.active.is_(True))
                .order_by(Supplier.name, Supplier.id)
                .all()
            )
            return [self._supplier_out(s) for s in suppliers]

        return self._cache.read_through(
            self._cache.keys.supplier_dropdown(), list[SupplierOut], load, entity="supplier"
        )

    def update(self, supplier_id: int, data: SupplierUpdate) -> SupplierOut:
        """Replace a supplier's fields; ``active`` is kept when omitted."""
        supplier = self._get_supplier_or_raise(supplier_id)

        # Only re-check uniqueness when the name really changes
        if supplier.name.lower() != data.name.lower() and self.exists_by_name(data.name):
            raise ConflictError(f"Supplier with name '{data.name}' already exists", name=data.name)

        renamed = supplier.name != data.name
        for field in _EDITABLE_FIELDS:
            setattr(supplier, field, getattr(data, field))
        if data.active is not None:
            supplier.active = data.active

        self._commit("Supplier")
        self._db.refresh(supplier)

        self._cache.invalidate_supplier(supplier.id)
        if renamed:
            # Product responses embed the supplier name
            self._cache.invalidate_all_products()
        logger.info("Updated supplier: %s (id=%s)", supplier.name, supplier.id)
        return self._supplier_out(supplier)

    def delete(self, supplier_id: int) -> None:
        """Delete a supplier that no product references any more."""
        supplier = self._get_supplier_or_raise(supplier_id)
        product_count = count_products_by_supplier(self._db, supplier_id)
        if product_count > 0:
            raise ConflictError(
                "Cannot delete supplier with associated products. "
                "Please reassign or remove products first.",
                supplier_id=supplier_id,
                product_count=product_count,
            )
        self._db.delete(supplier)
        self._commit("Supplier")

        self._cache.invalidate_supplier(supplier_id)
        self._cache.evict_all(self._cache.keys.products_by_supplier_pages(supplier_id))
        logger.info("Deleted supplier: %s (id=%s)", supplier.name, supplier_id)

    def set_active(self, supplier_id: int, active: bool) -> SupplierOut:
        """Activate or deactivate a supplier."""
        supplier = self._get_supplier_or_raise(supplier_id)
        supplier.active = active
        self._commit("Supplier")
        self._db.refresh(supplier)

        self._cache.invalidate_supplier(supplier.id)
        logger.info("%s supplier id=%s", "Activated" if active else "Deactivated", supplier_id)
        return self._supplier_out(supplier)

    def exists_by_name(self, name: str | None) -> bool:
        """Whether a supplier with this name exists, ignoring case."""
        if not name:
            return False
        match = (
            self._db.query(Supplier.id)
            .filter(func.lower(Supplier.name) == name.lower())
            .first()
        )
        return match is not None

    def with_products(self, supplier_id: int) -> SupplierWithProductsOut:
        """Supplier together with every product it supplies."""

        def load() -> SupplierWithProductsOut:
            supplier = self._get_supplier_or_raise(supplier_id)
            products = (
                self._db.query(Product)
                .filter(Product.supplier_id == supplier_id)
                .order_by(Product.name, Product.id)
                .all()
            )
            out = SupplierWithProductsOut.model_validate(supplier)
            out.products = [product_to_out(p) for p in products]
            out.product_count = len(products)
            return out

        return self._cache.read_through(
            self._cache.keys.supplier_with_products(supplier_id),
            SupplierWithProductsOut,
            load,
            entity="supplier",
        )

    def list_products(self, supplier_id: int, page: PageRequest) -> PageOut[ProductOut]:
        """Page through the products of one supplier."""

        def load() -> PageOut[ProductOut]:
            self._get_supplier_or_raise(supplier_id)
            query = self._db.query(Product).filter(Product.supplier_id == supplier_id)
            rows, total = paginate(query, page, PRODUCT_SORT_FIELDS, Product.id)
            return build_page(PageOut[ProductOut], rows, total, page, product_to_out)

        return self._cache.read_through(
            self._cache.keys.products_by_supplier(supplier_id, page),
            PageOut[ProductOut],
            load,
            entity="product",
        )
