"""Page requests and page building shared by every listing."""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Callable, Mapping, TypeVar

from sqlalchemy.orm import Query

from app.core.config import settings
from app.core.exceptions import InvalidArgumentError
from app.models.inventory_models import Product, Supplier
from app.models.inventory_schemas import PageOut

T = TypeVar("T")

# Fields a listing may be ordered by
PRODUCT_SORT_FIELDS: Mapping[str, Any] = {
    "id": Product.id,
    "name": Product.name,
    "sku": Product.sku,
    "price": Product.price,
    "inventory_quantity": Product.inventory_quantity,
    "low_stock_threshold": Product.low_stock_threshold,
    "created_at": Product.created_at,
    "updated_at": Product.updated_at,
}

SUPPLIER_SORT_FIELDS: Mapping[str, Any] = {
    "id": Supplier.id,
    "name": Supplier.name,
    "contact_person": Supplier.contact_person,
    "city": Supplier.city,
    "country": Supplier.country,
    "active": Supplier.active,
    "created_at": Supplier.created_at,
    "updated_at": Supplier.updated_at,
}


@dataclass(frozen=True)
class PageRequest:
    """0-based page index, page size and ordering of a listing."""

    page: int = 0
    size: int = 20
    sort_by: str = "id"
    sort_dir: str = "asc"

    def __post_init__(self) -> None:
        if self.page < 0:
            raise InvalidArgumentError("Page index must not be negative", page=self.page)
        if self.size < 1:
            raise InvalidArgumentError("Page size must be at least 1", size=self.size)
        if self.size > settings.MAX_PAGE_SIZE:
            raise InvalidArgumentError(
                f"Page size must not exceed {settings.MAX_PAGE_SIZE}", size=self.size
            )

    @property
    def descending(self) -> bool:
        return (self.sort_dir or "").lower() == "desc"

    @property
    def direction(self) -> str:
        return "desc" if self.descending else "asc"

    @property
    def offset(self) -> int:
        return self.page * self.size


def paginate(query: Query, page: PageRequest, sort_fields: Mapping[str, Any], id_column: Any) -> tuple[list, int]:
    """Apply ordering and the page window to query; return (rows, total)."""
    column = sort_fields.get(page.sort_by)
    if column is None:
        raise InvalidArgumentError(
            f"Unknown sort field: {page.sort_by}",
            sort_by=page.sort_by,
            allowed=sorted(sort_fields),
        )
    total = query.order_by(None).count()
    order = column.desc() if page.descending else column.asc()
    # id keeps the order stable across pages when the sort column has ties
    rows = query.order_by(order, id_column.asc()).offset(page.offset).limit(page.size).all()
    return rows, total


def build_page(
    model: type[PageOut[T]], rows: list, total: int, page: PageRequest, convert: Callable[[Any], T]
) -> PageOut[T]:
    """Wrap converted rows in the concrete page model, e.g. ``PageOut[ProductOut]``."""
    return model(
        items=[convert(row) for row in rows],
        total_elements=total,
        total_pages=math.ceil(total / page.size) if total else 0,
        page=page.page,
        size=page.size,
    )
