"""Explicit payload validation.

Each function checks one input shape and returns the list of problems it
found as ``FieldError(field, message)`` pairs; an empty list means the
payload is acceptable. Routes call ``ensure_valid`` with the result so a
rejected payload never reaches the services.
"""
from __future__ import annotations

import re
from decimal import Decimal
from typing import NamedTuple

from app.core.exceptions import ValidationFailedError
from app.models import inventory_schemas as schemas

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


class FieldError(NamedTuple):
    field: str
    message: str


def _blank(value: str | None) -> bool:
    return value is None or not value.strip()


def _max_length(errors: list[FieldError], field: str, value: str | None, limit: int, label: str) -> None:
    if value is not None and len(value) > limit:
        errors.append(FieldError(field, f"{label} must not exceed {limit} characters"))


def validate_phone(phone: str) -> bool:
    digits = "".join(ch for ch in phone if ch.isdigit())
    return 6 <= len(digits) <= 16


def validate_email(email: str) -> bool:
    return bool(_EMAIL_RE.match(email))


def validate_category(data: schemas.CategoryCreate) -> list[FieldError]:
    errors: list[FieldError] = []
    if _blank(data.name):
        errors.append(FieldError("name", "Category name is required"))
    _max_length(errors, "name", data.name, 100, "Category name")
    return errors


def _validate_product_fields(data: schemas.ProductCreate | schemas.ProductUpdate) -> list[FieldError]:
    errors: list[FieldError] = []
    if _blank(data.name):
        errors.append(FieldError("name", "Product name is required"))
    _max_length(errors, "name", data.name, 200, "Product name")
    if data.price is None:
        errors.append(FieldError("price", "Price is required"))
    elif data.price <= Decimal("0"):
        errors.append(FieldError("price", "Price must be greater than zero"))
    if _blank(data.sku):
        errors.append(FieldError("sku", "SKU is required"))
    _max_length(errors, "sku", data.sku, 50, "SKU")
    if data.low_stock_threshold is not None and data.low_stock_threshold < 1:
        errors.append(FieldError("low_stock_threshold", "Low stock threshold must be at least 1"))
    return errors


def validate_product_create(data: schemas.ProductCreate) -> list[FieldError]:
    errors = _validate_product_fields(data)
    if data.inventory_quantity is not None and data.inventory_quantity < 0:
        errors.append(FieldError("inventory_quantity", "Inventory quantity cannot be negative"))
    return errors


def validate_product_update(data: schemas.ProductUpdate) -> list[FieldError]:
    return _validate_product_fields(data)


def validate_inventory_update(data: schemas.InventoryUpdate) -> list[FieldError]:
    # Sign is checked by the stock service, which owns that rule
    if data.quantity is None:
        return [FieldError("quantity", "Quantity is required")]
    return []


def validate_supplier(data: schemas.SupplierCreate) -> list[FieldError]:
    errors: list[FieldError] = []
    if _blank(data.name):
        errors.append(FieldError("name", "Supplier name is required"))
    _max_length(errors, "name", data.name, 100, "Supplier name")
    if _blank(data.contact_person):
        errors.append(FieldError("contact_person", "Contact person is required"))
    _max_length(errors, "contact_person", data.contact_person, 100, "Contact person")
    if data.email:
        if not validate_email(data.email):
            errors.append(FieldError("email", "Email should be valid"))
        _max_length(errors, "email", data.email, 100, "Email")
    if data.phone:
        if not validate_phone(data.phone):
            errors.append(FieldError("phone", "Phone should be a valid phone number"))
        _max_length(errors, "phone", data.phone, 20, "Phone")
    _max_length(errors, "address", data.address, 255, "Address")
    _max_length(errors, "city", data.city, 100, "City")
    _max_length(errors, "country", data.country, 100, "Country")
    _max_length(errors, "postal_code", data.postal_code, 20, "Postal code")
    return errors


def ensure_valid(errors: list[FieldError]) -> None:
    """Raise ValidationFailedError carrying every field problem found."""
    if errors:
        details: dict[str, str] = {}
        for error in errors:
            # Keep the first message per field
            details.setdefault(error.field, error.message)
        raise ValidationFailedError(details)
