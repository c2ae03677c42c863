"""
Search Service.

Multi-criteria product and supplier search over paged results.

Product search applies ONE predicate, picked by a fixed precedence, rather
than AND-ing everything supplied:

    1. name (case-insensitive substring), when non-empty
    2. category id
    3. price range, only when both bounds are present
    4. in-stock, only when explicitly true
    5. otherwise every product

so ``name="phone", category_id=1`` filters on the name alone. Supplier
search, in contrast, AND-s every supplied predicate.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal

from sqlalchemy import func

from app.models.inventory_models import Product, Supplier
from app.models.inventory_schemas import PageOut, ProductOut, SupplierOut

from .base import BaseInventoryService, product_to_out
from .pagination import PRODUCT_SORT_FIELDS, SUPPLIER_SORT_FIELDS, PageRequest, build_page, paginate

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProductSearchCriteria:
    name: str | None = None
    category_id: int | None = None
    min_price: Decimal | None = None
    max_price: Decimal | None = None
    in_stock: bool | None = None


@dataclass(frozen=True)
class SupplierSearchCriteria:
    name: str | None = None
    contact_person: str | None = None
    city: str | None = None
    country: str | None = None
    active: bool | None = None


def _contains(column, value: str):
    return func.lower(column).contains(value.lower(), autoescape=True)


class SearchService(BaseInventoryService):
    """Service for product and supplier search."""

    def search_products(self, criteria: ProductSearchCriteria, page: PageRequest) -> PageOut[ProductOut]:
        def load() -> PageOut[ProductOut]:
            query = self._db.query(Product)
            if criteria.name:
                query = query.filter(_contains(Product.name, criteria.name))
            elif criteria.category_id is not None:
                query = query.filter(Product.category_id == criteria.category_id)
            elif criteria.min_price is not None and criteria.max_price is not None:
                query = query.filter(Product.price.between(criteria.min_price, criteria.max_price))
            elif criteria.in_stock:
                query = query.filter(Product.inventory_quantity > 0)
            rows, total = paginate(query, page, PRODUCT_SORT_FIELDS, Product.id)
            logger.debug("Product search %s matched %s rows", criteria, total)
            return build_page(PageOut[ProductOut], rows, total, page, product_to_out)

        return self._cache.read_through(
            self._cache.keys.product_search(criteria, page), PageOut[ProductOut], load, entity="product"
        )

    def search_suppliers(self, criteria: SupplierSearchCriteria, page: PageRequest) -> PageOut[SupplierOut]:
        def load() -> PageOut[SupplierOut]:
            query = self._db.query(Supplier)
            if criteria.name:
                query = query.filter(_contains(Supplier.name, criteria.name))
            if criteria.contact_person:
                query = query.filter(_contains(Supplier.contact_person, criteria.contact_person))
            if criteria.city:
                query = query.filter(func.lower(Supplier.city) == criteria.city.lower())
            if criteria.country:
                query = query.filter(func.lower(Supplier.country) == criteria.country.lower())
            if criteria.active is not None:
                query = query.filter(Supplier.active.is_(criteria.active))
            rows, total = paginate(query, page, SUPPLIER_SORT_FIELDS, Supplier.id)
            logger.debug("Supplier search %s matched %s rows", criteria, total)
            return build_page(PageOut[SupplierOut], rows, total, page, self._supplier_out)

        return self._cache.read_through(
            self._cache.keys.supplier_search(criteria, page), PageOut[SupplierOut], load, entity="supplier"
        )
