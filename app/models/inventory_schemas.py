"""
Pydantic schemas for the Inventory API.

Input schemas only describe the payload shape and types. Presence, length
and range rules live in ``app.utils.validators`` and are run explicitly by
the route layer before a payload reaches the services.
"""
from __future__ import annotations

import datetime as dt
from decimal import Decimal
from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict

T = TypeVar("T")


# ============================================================================
# Category Schemas
# ============================================================================

class CategoryCreate(BaseModel):
    """Payload for creating a category."""
    name: str | None = None
    description: str | None = None


class CategoryUpdate(CategoryCreate):
    """Payload for replacing a category's fields."""


class CategoryOut(BaseModel):
    """Category API response."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: str | None = None
    product_count: int = 0


# ============================================================================
# Product Schemas
# ============================================================================

class ProductCreate(BaseModel):
    """Payload for creating a product."""
    name: str | None = None
    description: str | None = None
    price: Decimal | None = None
    inventory_quantity: int | None = None
    sku: str | None = None
    category_id: int | None = None
    supplier_id: int | None = None
    low_stock_threshold: int | None = None


class ProductUpdate(BaseModel):
    """Payload for replacing a product's fields.

    Inventory quantity is not part of an update; it only changes through the
    inventory operations.
    """
    name: str | None = None
    description: str | None = None
    price: Decimal | None = None
    sku: str | None = None
    category_id: int | None = None
    supplier_id: int | None = None
    low_stock_threshold: int | None = None


class ProductOut(BaseModel):
    """Product API response."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: str | None = None
    price: Decimal
    inventory_quantity: int = 0
    sku: str

    category_id: int | None = None
    category_name: str | None = None
    supplier_id: int | None = None
    supplier_name: str | None = None

    low_stock: bool = False
    low_stock_threshold: int | None = None

    created_at: dt.datetime | None = None
    updated_at: dt.datetime | None = None


class InventoryUpdate(BaseModel):
    """Payload for set/increase/decrease inventory operations."""
    quantity: int | None = None


# ============================================================================
# Supplier Schemas
# ============================================================================

class SupplierCreate(BaseModel):
    """Payload for creating a supplier."""
    name: str | None = None
    contact_person: str | None = None
    email: str | None = None
    phone: str | None = None
    address: str | None = None
    city: str | None = None
    country: str | None = None
    postal_code: str | None = None
    notes: str | None = None
    active: bool | None = None


class SupplierUpdate(SupplierCreate):
    """Payload for replacing a supplier's fields (``active`` kept when omitted)."""


class SupplierOut(BaseModel):
    """Supplier API response."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    contact_person: str
    email: str | None = None
    phone: str | None = None
    address: str | None = None
    city: str | None = None
    country: str | None = None
    postal_code: str | None = None
    notes: str | None = None
    active: bool = True
    product_count: int = 0
    created_at: dt.datetime | None = None
    updated_at: dt.datetime | None = None


class SupplierWithProductsOut(SupplierOut):
    """Supplier together with the products it supplies."""
    products: list[ProductOut] = []


# ============================================================================
# Pagination
# ============================================================================

class PageOut(BaseModel, Generic[T]):
    """One page of a listing."""
    items: list[T]
    total_elements: int
    total_pages: int
    page: int
    size: int


class ErrorResponse(BaseModel):
    """Error body returned for every failed request."""
    timestamp: dt.datetime
    status: int
    error: str
    message: str
    details: dict | None = None
    path: str
