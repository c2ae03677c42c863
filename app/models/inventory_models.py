"""
Inventory models: categories, suppliers and products.

Products reference their category and supplier through plain foreign keys.
Neither Category nor Supplier keeps a collection of its products; the number
of dependents is always obtained with a counting query (see
``count_products_by_category`` / ``count_products_by_supplier``), so there is
no cyclic ownership between the three tables.
"""
from __future__ import annotations

import datetime as dt
from decimal import Decimal

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    func,
    select,
)
from sqlalchemy.orm import Mapped, Session, mapped_column, relationship

from app.db.base_class import Base


def utcnow() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


class Category(Base):
    """
    Product category.

    A category may hold any number of products; it can only be deleted once
    no product references it any more.
    """
    __tablename__ = "category"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        return f"<Category(id={self.id}, name='{self.name}')>"


class Supplier(Base):
    """
    Supplier/Vendor of products.

    Names are unique ignoring case; the functional index below backs the
    service-level check at the database level.
    """
    __tablename__ = "supplier"

    id: Mapped[int] = mapped_column(primary_key=True)

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    contact_person: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str | None] = mapped_column(String(100), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(20), nullable=True)
    address: Mapped[str | None] = mapped_column(String(255), nullable=True)
    city: Mapped[str | None] = mapped_column(String(100), nullable=True)
    country: Mapped[str | None] = mapped_column(String(100), nullable=True)
    postal_code: Mapped[str | None] = mapped_column(String(20), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    active: Mapped[bool] = mapped_column(Boolean, default=True, server_default="1", nullable=False)

    created_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
        nullable=False,
    )
    updated_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        onupdate=utcnow,
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<Supplier(id={self.id}, name='{self.name}')>"


Index("uq_supplier_name_lower", func.lower(Supplier.name), unique=True)


class Product(Base):
    """
    Product/Item in inventory.

    ``low_stock`` is a stored, derived flag: it is recomputed from
    ``inventory_quantity`` and ``low_stock_threshold`` on every write that
    goes through ``recompute_low_stock``. When no threshold is configured the
    previously stored flag is left as is.
    """
    __tablename__ = "product"
    __table_args__ = (
        CheckConstraint("price > 0", name="ck_product_price_positive"),
        CheckConstraint("inventory_quantity >= 0", name="ck_product_quantity_non_negative"),
        CheckConstraint(
            "low_stock_threshold IS NULL OR low_stock_threshold >= 1",
            name="ck_product_threshold_min",
        ),
        Index("ix_product_low_stock", "low_stock"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    category_id: Mapped[int | None] = mapped_column(ForeignKey("category.id"), nullable=True, index=True)
    supplier_id: Mapped[int | None] = mapped_column(ForeignKey("supplier.id"), nullable=True, index=True)

    # Product identification
    sku: Mapped[str] = mapped_column(String(50), nullable=False, unique=True)  # Stock Keeping Unit
    name: Mapped[str] = mapped_column(String(200), nullable=False, index=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    price: Mapped[Decimal] = mapped_column(Numeric(15, 2), nullable=False)

    # Stock management
    inventory_quantity: Mapped[int] = mapped_column(Integer, default=0, server_default="0", nullable=False)
    low_stock_threshold: Mapped[int | None] = mapped_column(Integer, nullable=True)
    low_stock: Mapped[bool] = mapped_column(Boolean, default=False, server_default="0", nullable=False)

    created_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
    )
    updated_at: Mapped[dt.datetime | None] = mapped_column(
        DateTime(timezone=True),
        onupdate=utcnow,
        nullable=True,
    )

    # Many-to-one lookups only; no back-populated collections
    category: Mapped[Category | None] = relationship("Category", lazy="joined")
    supplier: Mapped[Supplier | None] = relationship("Supplier", lazy="joined")

    def __repr__(self) -> str:
        return f"<Product(id={self.id}, sku='{self.sku}', name='{self.name}')>"

    def recompute_low_stock(self) -> None:
        """Refresh the stored low-stock flag; keep it when no threshold is set."""
        if self.inventory_quantity is not None and self.low_stock_threshold is not None:
            self.low_stock = self.inventory_quantity <= self.low_stock_threshold

    def set_inventory(self, quantity: int) -> None:
        """Replace the quantity and keep the derived flag in sync."""
        self.inventory_quantity = quantity
        self.recompute_low_stock()


def count_products_by_category(db: Session, category_id: int) -> int:
    """Number of products referencing a category."""
    return db.scalar(select(func.count(Product.id)).where(Product.category_id == category_id)) or 0


def count_products_by_supplier(db: Session, supplier_id: int) -> int:
    """Number of products referencing a supplier."""
    return db.scalar(select(func.count(Product.id)).where(Product.supplier_id == supplier_id)) or 0
